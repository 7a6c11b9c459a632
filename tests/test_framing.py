import pytest

from stopwait.framing import (
    ErrorCode,
    binary_to_ascii,
    flip_bit,
    has_single_bit_error,
    parity_byte,
    stuff_payload,
    unstuff_payload,
)

SAMPLES = ["", "hello", "a$b", "a/b", "$$//", "/$/$", "plain text 123", "caf\u00e9"]


def test_error_code_parse_reads_each_flag():
    code = ErrorCode.parse("1010")
    assert code.modification is True
    assert code.duplication is False
    assert code.delay is True
    assert code.loss is False


def test_error_code_parse_ignores_extra_characters():
    assert ErrorCode.parse("0001 rest") == ErrorCode(loss=True)


def test_error_code_too_short():
    with pytest.raises(ValueError):
        ErrorCode.parse("10")


def test_stuff_wraps_in_flags():
    stuffed = stuff_payload("hello")
    assert stuffed == "$hello$"


def test_stuff_escapes_special_characters():
    assert stuff_payload("a$b/") == "$a/$b//$"


@pytest.mark.parametrize("payload", SAMPLES)
def test_stuff_unstuff_round_trip(payload):
    assert unstuff_payload(stuff_payload(payload)) == payload


@pytest.mark.parametrize("payload", SAMPLES)
def test_stuffed_body_has_no_bare_flag(payload):
    body = stuff_payload(payload)[1:-1]
    stripped = body.replace("//", "").replace("/$", "")
    assert "$" not in stripped


def test_unstuff_trailing_escape_takes_closing_flag():
    assert unstuff_payload("$a/$") == "a$"


def test_unstuff_empty_rejected():
    with pytest.raises(ValueError):
        unstuff_payload("")


@pytest.mark.parametrize("payload", SAMPLES)
def test_parity_is_consistent(payload):
    stuffed = stuff_payload(payload)
    parity = parity_byte(stuffed)
    assert parity in ("0", "1")
    assert has_single_bit_error(stuffed, parity) is False


def test_parity_of_two_flags_is_even():
    assert parity_byte("$$") == "0"


@pytest.mark.parametrize("payload", ["hello", "a$b", "x"])
@pytest.mark.parametrize("bit", [0, 3, 7])
def test_single_flip_detected(payload, bit):
    stuffed = stuff_payload(payload)
    parity = parity_byte(stuffed)
    damaged = flip_bit(stuffed, 1, bit)
    assert damaged != stuffed
    assert has_single_bit_error(damaged, parity) is True


def test_empty_parity_counts_as_error():
    assert has_single_bit_error("$abc$", "") is True


def test_flip_bit_twice_restores():
    stuffed = stuff_payload("data")
    assert flip_bit(flip_bit(stuffed, 2, 5), 2, 5) == stuffed


def test_flip_bit_changes_only_one_character():
    stuffed = stuff_payload("data")
    damaged = flip_bit(stuffed, 3, 1)
    differing = [i for i, (a, b) in enumerate(zip(stuffed, damaged)) if a != b]
    assert differing == [3]
    assert len(damaged) == len(stuffed)


def test_flip_bit_bad_index():
    with pytest.raises(IndexError):
        flip_bit("abc", 3, 0)


def test_flip_bit_bad_position():
    with pytest.raises(ValueError):
        flip_bit("abc", 0, 8)


def test_binary_to_ascii_decodes_bytes():
    assert binary_to_ascii("0100000101000010") == "AB"


def test_binary_to_ascii_empty():
    assert binary_to_ascii("") == ""


@pytest.mark.parametrize("text", ["hi", "Stop and wait", "$/"])
def test_binary_to_ascii_round_trip(text):
    bits = "".join(format(ord(ch), "08b") for ch in text)
    assert binary_to_ascii(bits) == text