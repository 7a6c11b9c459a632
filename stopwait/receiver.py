"""The receiving end: checks frames, acknowledges or rejects them."""

from __future__ import annotations

import logging
import os

from stopwait.framing import has_single_bit_error, unstuff_payload
from stopwait.kernel import EventLog, Scheduler, _format_time
from stopwait.message import Frame, MessageType

logger = logging.getLogger("stopwait")

REPLY_DELAY = 5.0


class Receiver:
    """Accepts frames with the expected sequence number and a good parity."""

    def __init__(
        self,
        scheduler: Scheduler,
        log: EventLog,
        stale_log: str | os.PathLike | None = None,
    ) -> None:
        self.scheduler = scheduler
        self.log = log
        self.expected_id = 0
        self.received: list[str] = []
        self._peer = None
        if stale_log is not None:
            try:
                os.remove(stale_log)
                logger.info("%s deleted successfully at simulation start.", stale_log)
            except OSError:
                logger.info("%s does not exist or couldn't be deleted.", stale_log)

    def connect(self, peer) -> None:
        """Set the node whose ``handle`` receives ACK and NACK frames."""
        self._peer = peer

    def _send(self, frame: Frame) -> None:
        if self._peer is None:
            raise RuntimeError("receiver is not connected to a peer")
        self.scheduler.schedule_at(self.scheduler.now + REPLY_DELAY, self._peer.handle, frame)

    def _log_action(self, direction: str, kind: str, content: str, seq_id: int, modified: int) -> None:
        self.log.write(
            f"At time={_format_time(self.scheduler.now)} Receiver {direction} {kind} "
            f"[{content}], ID={seq_id}, modified={modified}"
        )

    def handle(self, frame: Frame) -> None:
        """Process an incoming data frame and reply after the fixed delay."""
        if not isinstance(frame, Frame):
            raise TypeError(f"expected a Frame, got {type(frame).__name__}")
        stuffed = frame.payload
        if not frame.trailer:
            logger.info("Parity Byte is Empty")
        elif len(frame.trailer) != 1:
            logger.info("Parity bit Length is longer than 1")
        bit_error = has_single_bit_error(stuffed, frame.trailer)
        if bit_error:
            logger.info("Detected a single bit error")
        unstuffed = unstuff_payload(stuffed)
        if bit_error or frame.id != self.expected_id:
            self._log_action("Received", "message", unstuffed, frame.id, 1)
            self._send(Frame(msg_type=MessageType.NACK, id=self.expected_id))
            self._log_action("Sent", "NACK", unstuffed, self.expected_id, 0)
        else:
            self._log_action("Received", "message", unstuffed, self.expected_id, 0)
            self._send(Frame(msg_type=MessageType.ACK, id=self.expected_id))
            self.received.append(unstuffed)
            self._log_action("Sent", "ACK", unstuffed, self.expected_id, 0)
            self.expected_id = 1 - self.expected_id