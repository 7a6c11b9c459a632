# stopwait

A small discrete-event simulation of a stop-and-wait data-link protocol.
A sender reads messages from a text file, frames each one with byte
stuffing (`$` flags, `/` escapes) and a parity trailer character, and
pushes it over a simulated channel that can modify, duplicate, delay or
lose frames. A receiver checks parity and the alternating sequence number
(0/1) and answers with ACK or NACK after a fixed 5-second delay; the
sender resends the unmodified frame on NACK or timeout. Every action is
written to a log, and the session ends with the total transmission time,
the number of transmissions and the throughput (correct messages per
simulated second).

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Input format

One message per line. The first four characters are an error code, a
space follows, and the rest of the line is the payload:

```
0000 Hello
1000 A frame with one flipped bit
0100 A duplicated frame
0010 A delayed frame
0001 A lost frame
```

The four code characters are, in order: modification, duplication, delay
and loss; `1` turns a fault on. Lines shorter than five characters are
skipped.

## Running a session

```
stopwait --input input.txt --output output.txt \
    --timeout 10 --error-delay 4 --transmission-delay 1 --processing-time 0.5
```

Options:

- `--input` – file of `CODE payload` lines (default `../src/input0.txt`)
- `--output` – file the session log is appended to (default `../src/output3.txt`)
- `--start` – session start time (default `0`)
- `--timeout` – acknowledgement timeout (required)
- `--error-delay` – channel delay of a frame whose code asks for delay (required)
- `--transmission-delay` – normal channel delay (required)
- `--processing-time` – time to prepare a frame (required)
- `--seed` – seed for choosing the bit flipped on modified frames
- `-v`, `--verbose` – also echo the log to stderr

When the session ends, the command prints the total transmission time, the
number of transmissions and the throughput. If the input file cannot be
opened, the session runs with no messages.

## Using it from Python

```python
from stopwait.network import run_session
from stopwait.sender import SenderConfig

config = SenderConfig(
    start_time=0.0,
    timeout=10.0,
    error_delay=4.0,
    transmission_delay=1.0,
    processing_time=0.5,
)
stats = run_session("input.txt", "output.txt", config, seed=1)
print(stats.total_transmissions, stats.correct_messages, stats.throughput)
```

Passing `None` as the output path keeps the log in memory only.

The building blocks can be used on their own:

```python
from stopwait.framing import stuff_payload, unstuff_payload, parity_byte, has_single_bit_error

stuffed = stuff_payload("a$b/c")          # "$a/$b//c$"
assert unstuff_payload(stuffed) == "a$b/c"
trailer = parity_byte(stuffed)
assert not has_single_bit_error(stuffed, trailer)
```

- `stopwait.message` – `Frame`, the frame exchanged between the two ends,
  with `dup()`, `pack()` and `Frame.unpack()`, and `MessageType`
  (`DATA`, `ACK`, `NACK`).
- `stopwait.framing` – byte stuffing, parity, `flip_bit`,
  `binary_to_ascii` and `ErrorCode.parse`.
- `stopwait.descriptor` – `FrameDescriptor`, which reads and writes frame
  fields by name (`M_Header`, `M_Payload`, `M_Trailer`, `M_Type`,
  `sending_time`, `id`) as text or typed values.
- `stopwait.kernel` – `Scheduler`, the event loop, and `EventLog`, which
  records log lines and appends them to a file.
- `stopwait.sender` and `stopwait.receiver` – the `Sender` and `Receiver`
  nodes, connected to each other with `connect()`.

## What it does not do

There is no graphical view of the simulation and no configuration file for
the timing parameters: they are given on the command line or in a
`SenderConfig`. The receiver's reply delay is fixed at 5 seconds.