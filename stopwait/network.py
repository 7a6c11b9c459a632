"""Wires a sender and a receiver together and runs a whole session."""

from __future__ import annotations

import argparse
import logging
import os
import random

from stopwait.kernel import EventLog, Scheduler
from stopwait.receiver import Receiver
from stopwait.sender import Sender, SenderConfig, SessionStats, load_messages

logger = logging.getLogger("stopwait")


def run_session(
    input_path: str | os.PathLike,
    output_path: str | os.PathLike | None,
    config: SenderConfig,
    seed: int | None = None,
) -> SessionStats:
    """Send every message of the input file to a receiver and return the statistics."""
    try:
        with open(input_path, encoding="utf-8") as source:
            lines = source.readlines()
        logger.info("File opened successfully!")
    except OSError as exc:
        logger.warning("Could not open %s: %s", input_path, exc)
        lines = []

    scheduler = Scheduler()
    log = EventLog(output_path)
    receiver = Receiver(scheduler, log)
    sender = Sender(scheduler, log, load_messages(lines), config, random.Random(seed))
    sender.connect(receiver)
    receiver.connect(sender)
    sender.start()
    scheduler.run()
    return sender.stats


def main(argv: list[str] | None = None) -> int:
    """Run a session from the command line."""
    parser = argparse.ArgumentParser(
        prog="stopwait", description="Simulate a stop-and-wait link with injected faults."
    )
    parser.add_argument("--input", default="../src/input0.txt", help="file of 'CODE payload' lines")
    parser.add_argument("--output", default="../src/output3.txt", help="file the session log is appended to")
    parser.add_argument("--start", type=float, default=0.0, help="session start time")
    parser.add_argument("--timeout", type=float, required=True, help="acknowledgement timeout")
    parser.add_argument("--error-delay", type=float, required=True, help="delay of a delayed frame")
    parser.add_argument("--transmission-delay", type=float, required=True, help="normal channel delay")
    parser.add_argument("--processing-time", type=float, required=True, help="frame preparation time")
    parser.add_argument("--seed", type=int, default=None, help="seed for bit modification")
    parser.add_argument("-v", "--verbose", action="store_true", help="echo the log to stderr")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(message)s")

    config = SenderConfig(
        start_time=args.start,
        timeout=args.timeout,
        error_delay=args.error_delay,
        transmission_delay=args.transmission_delay,
        processing_time=args.processing_time,
    )
    stats = run_session(args.input, args.output, config, args.seed)
    print(f"total transmission time = {stats.duration:g}")
    print(f"total number of transmission = {stats.total_transmissions}")
    print(f"the network throughput = {stats.throughput:g}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())