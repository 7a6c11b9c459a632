import pytest

from stopwait.framing import flip_bit, parity_byte, stuff_payload
from stopwait.kernel import EventLog, Scheduler
from stopwait.message import Frame, MessageType
from stopwait.receiver import REPLY_DELAY, Receiver


class Collector:
    def __init__(self, scheduler):
        self.scheduler = scheduler
        self.frames = []

    def handle(self, frame):
        self.frames.append((self.scheduler.now, frame))


def make_frame(text, frame_id=0):
    stuffed = stuff_payload(text)
    return Frame(payload=stuffed, trailer=parity_byte(stuffed), id=frame_id)


@pytest.fixture
def setup(tmp_path):
    sched = Scheduler()
    log = EventLog(tmp_path / "out.txt")
    receiver = Receiver(sched, log)
    peer = Collector(sched)
    receiver.connect(peer)
    return sched, log, receiver, peer


def test_good_frame_is_acked(setup):
    sched, log, receiver, peer = setup
    receiver.handle(make_frame("hi"))
    sched.run()
    assert len(peer.frames) == 1
    when, reply = peer.frames[0]
    assert when == REPLY_DELAY
    assert reply.msg_type == MessageType.ACK
    assert reply.id == 0
    assert receiver.received == ["hi"]
    assert receiver.expected_id == 1


def test_log_lines_for_ack(setup):
    sched, log, receiver, peer = setup
    receiver.handle(make_frame("hi"))
    assert log.lines == [
        "At time=0 Receiver Received message [hi], ID=0, modified=0",
        "At time=0 Receiver Sent ACK [hi], ID=0, modified=0",
    ]
    assert log.path.read_text(encoding="utf-8").splitlines() == log.lines


def test_stuffed_payload_is_unstuffed(setup):
    sched, log, receiver, peer = setup
    receiver.handle(make_frame("a$b/c"))
    assert receiver.received == ["a$b/c"]


def test_bit_error_is_nacked(setup):
    sched, log, receiver, peer = setup
    frame = make_frame("hello")
    frame.payload = flip_bit(frame.payload, 2, 3)
    receiver.handle(frame)
    sched.run()
    reply = peer.frames[0][1]
    assert reply.msg_type == MessageType.NACK
    assert reply.id == 0
    assert receiver.received == []
    assert receiver.expected_id == 0


def test_wrong_sequence_is_nacked(setup):
    sched, log, receiver, peer = setup
    receiver.handle(make_frame("x", frame_id=1))
    sched.run()
    reply = peer.frames[0][1]
    assert reply.msg_type == MessageType.NACK
    assert reply.id == 0
    assert "ID=1, modified=1" in log.lines[0]


def test_empty_trailer_is_an_error(setup):
    sched, log, receiver, peer = setup
    frame = make_frame("x")
    frame.trailer = ""
    receiver.handle(frame)
    sched.run()
    assert peer.frames[0][1].msg_type == MessageType.NACK


def test_alternating_sequence(setup):
    sched, log, receiver, peer = setup
    receiver.handle(make_frame("one", 0))
    receiver.handle(make_frame("two", 1))
    receiver.handle(make_frame("two", 1))
    sched.run()
    kinds = [(f.msg_type, f.id) for _, f in peer.frames]
    assert kinds == [
        (MessageType.ACK, 0),
        (MessageType.ACK, 1),
        (MessageType.NACK, 0),
    ]
    assert receiver.received == ["one", "two"]


def test_rejects_non_frame(setup):
    sched, log, receiver, peer = setup
    with pytest.raises(TypeError):
        receiver.handle("not a frame")


def test_unconnected_receiver_raises(tmp_path):
    receiver = Receiver(Scheduler(), EventLog())
    with pytest.raises(RuntimeError):
        receiver.handle(make_frame("x"))


def test_stale_log_removed(tmp_path):
    stale = tmp_path / "receiver_log.txt"
    stale.write_text("old", encoding="utf-8")
    Receiver(Scheduler(), EventLog(), stale_log=stale)
    assert not stale.exists()
    Receiver(Scheduler(), EventLog(), stale_log=stale)
    assert not stale.exists()