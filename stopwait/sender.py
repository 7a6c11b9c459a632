"""The sending end: frames messages, injects faults and waits for acknowledgements."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Iterable

from stopwait.framing import ErrorCode, flip_bit, parity_byte, stuff_payload
from stopwait.kernel import Event, EventLog, Scheduler, _format_time
from stopwait.message import Frame, MessageType

logger = logging.getLogger("stopwait")

DUPLICATE_OFFSET = 0.1


@dataclass(frozen=True)
class SenderConfig:
    """Timing parameters of a session, in simulated seconds.

    ``start_time`` is when the session starts, ``timeout`` how long the
    sender waits for an acknowledgement, ``error_delay`` the channel delay
    of a delayed frame, ``transmission_delay`` the normal channel delay and
    ``processing_time`` the time needed to prepare a frame.
    """

    start_time: float
    timeout: float
    error_delay: float
    transmission_delay: float
    processing_time: float


@dataclass
class SessionStats:
    """Counters gathered over one session."""

    total_transmissions: int = 0
    correct_messages: int = 0
    start_time: float = 0.0
    finish_time: float = 0.0

    @property
    def duration(self) -> float:
        return self.finish_time - self.start_time

    @property
    def throughput(self) -> float:
        """Correctly delivered messages per simulated second."""
        if self.duration == 0:
            return math.nan if self.correct_messages == 0 else math.inf
        return self.correct_messages / self.duration


def load_messages(lines: Iterable[str]) -> list[tuple[ErrorCode, Frame]]:
    """Parse input lines of the form ``CODE payload``; lines under five characters are skipped."""
    messages: list[tuple[ErrorCode, Frame]] = []
    for raw in lines:
        line = raw.rstrip("\n")
        if len(line) < 5:
            continue
        code_text, payload = line[:4], line[5:]
        code = ErrorCode.parse(code_text)
        messages.append((code, Frame(payload=payload, id=len(messages))))
        logger.info("Read Message: %s Error code: %s", payload, code_text)
    logger.info("Finished loading messages. Total messages: %d", len(messages))
    return messages


def _flag(value: bool) -> str:
    return "1" if value else "0"


class Sender:
    """Sends one frame at a time and waits for its ACK, resending on NACK or timeout."""

    def __init__(
        self,
        scheduler: Scheduler,
        log: EventLog,
        messages: Iterable[tuple[ErrorCode, Frame]],
        config: SenderConfig,
        rng: random.Random | None = None,
    ) -> None:
        self.scheduler = scheduler
        self.log = log
        self.messages = list(messages)
        self.config = config
        self.rng = rng if rng is not None else random.Random()
        self.stats = SessionStats()
        self.current_seq = 0
        self.current: Frame | None = None
        self.last_acked = -1
        self.finished = False
        self._index = 0
        self._unmodified = ""
        self._timeout: Event | None = None
        self._peer = None

    def connect(self, peer) -> None:
        """Set the node whose ``handle`` receives data frames."""
        self._peer = peer

    def start(self) -> None:
        """Schedule the start of the session."""
        self.scheduler.schedule_at(self.config.start_time, self._on_start)

    def _now(self, offset: float = 0.0) -> str:
        return _format_time(self.scheduler.now + offset)

    def _send(self, frame: Frame, delay: float) -> None:
        if self._peer is None:
            raise RuntimeError("sender is not connected to a peer")
        self.scheduler.schedule_at(self.scheduler.now + delay, self._peer.handle, frame)
        self.stats.total_transmissions += 1

    def _arm_timeout(self) -> None:
        self.scheduler.cancel(self._timeout)
        deadline = self.scheduler.now + self.config.timeout + self.config.processing_time
        self._timeout = self.scheduler.schedule_at(deadline, self._on_timeout)

    def _cancel_timeout(self) -> None:
        self.scheduler.cancel(self._timeout)
        self._timeout = None

    def _on_start(self, _item=None) -> None:
        self.stats.start_time = self.scheduler.now
        self.log.write(
            f"At time={self._now()} The Session Started at time: {self._now()}s"
        )
        self._send_next()

    def _send_next(self) -> None:
        if self._index >= len(self.messages):
            self.stats.finish_time = self.scheduler.now
            self._finish()
            return
        code, frame = self.messages[self._index]
        self._index += 1
        frame.id = self.current_seq
        self.current = frame
        self.log.write(
            f"At time = {self._now()} Sender Preparing message {frame.payload}, id = {frame.id}"
        )
        self._transmit(frame, code)

    def _transmit(self, frame: Frame, code: ErrorCode) -> None:
        cfg = self.config
        stuffed = stuff_payload(frame.payload)
        frame.payload = stuffed
        frame.trailer = parity_byte(stuffed)

        delay_time = cfg.error_delay if code.delay else cfg.transmission_delay

        modified_bit = 0
        self._unmodified = stuffed
        if code.modification:
            byte_index = self.rng.randint(0, len(stuffed) - 1)
            bit_position = self.rng.randint(0, 7)
            modified_bit = byte_index * 8 + bit_position
            frame.payload = flip_bit(stuffed, byte_index, bit_position)

        if not code.loss:
            self._send(frame.dup(), cfg.processing_time + delay_time)

        self.current = frame
        flags = (
            f", delayed={_flag(code.delay)} , lost={_flag(code.loss)}"
        )
        self.log.write(
            f"At time ={self._now(cfg.processing_time)} Sender Sends message [{frame.payload}] "
            f"ID= {frame.id},modified= {modified_bit}, duplicated={_flag(code.duplication)}{flags}"
        )
        frame.sending_time = delay_time

        if code.duplication and not code.loss:
            self._send(frame.dup(), cfg.processing_time + delay_time + DUPLICATE_OFFSET)
            self.log.write(
                f"At time ={self._now(cfg.processing_time + DUPLICATE_OFFSET)} Sender Sends message "
                f"[{frame.payload}] ID= {frame.id},modified= {modified_bit}, duplicated=2{flags}"
            )

        self._arm_timeout()

    def _log_resend(self, frame: Frame) -> None:
        tail = f"] ID= {frame.id}, modified= 0, duplicated= 0, delayed= 0, lost= 0"
        self.log.write(f"At time ={self._now()} Sender Prepares message [{frame.payload}{tail}")
        self.log.write(
            f"At time ={self._now(self.config.processing_time)} Sender Sends message "
            f"[{frame.payload}{tail}"
        )

    def _retransmit(self) -> None:
        retransmit = self.current.dup()
        retransmit.payload = self._unmodified
        return retransmit

    def _on_timeout(self, _item=None) -> None:
        self._timeout = None
        frame = self.current
        self.log.write(f"At time= {self._now()}Sender Timed out, Message ID = {frame.id}")
        retransmit = self._retransmit()
        self._log_resend(frame)
        self._send(retransmit, self.config.transmission_delay + self.config.processing_time)
        self._arm_timeout()

    def handle(self, frame: Frame) -> None:
        """Process an ACK or NACK frame from the receiver."""
        if not isinstance(frame, Frame):
            raise TypeError(f"expected a Frame, got {type(frame).__name__}")
        if frame.msg_type not in (MessageType.ACK, MessageType.NACK):
            return
        if self.current is None:
            raise RuntimeError("received a reply while no frame is outstanding")
        if frame.msg_type == MessageType.ACK:
            self._on_ack(frame)
        else:
            self._on_nack(frame)

    def _on_ack(self, ack: Frame) -> None:
        if ack.id != self.current.id:
            self.log.write(f"Received duplicate or unexpected ACK with ID = {ack.id}, ignoring.")
            return
        self.stats.total_transmissions += 1
        self.log.write(f"At time = {self._now()} Sender received ACK for message ID = {ack.id}")
        self.last_acked = ack.id
        self.current_seq = 1 - self.current_seq
        self._cancel_timeout()
        self.stats.correct_messages += 1
        self._send_next()

    def _on_nack(self, nack: Frame) -> None:
        frame = self.current
        self.log.write(
            f"At time= {self._now()}Sender Received NACK for current ID = {nack.id}, "
            f"Resending correct Message ID = {frame.id}"
        )
        frame.payload = self._unmodified
        retransmit = self._retransmit()
        self._cancel_timeout()
        self._log_resend(frame)
        self._send(retransmit, self.config.transmission_delay + self.config.processing_time)
        self.stats.total_transmissions += 1
        self._arm_timeout()

    def _finish(self) -> None:
        stats = self.stats
        self.log.write(f"total transmission time = {_format_time(stats.duration)}")
        self.log.write(f"total number of transmission = {stats.total_transmissions}")
        self.log.write(f"the network throughput = {stats.throughput:g}")
        self._cancel_timeout()
        self.finished = True
        self.scheduler.stop()