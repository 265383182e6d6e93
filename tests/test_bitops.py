import pytest

from bitops import BitStream
from errors import StreamOverflowError, StreamUnderflowError


def test_write_bits_msb_first_and_to_bytes():
    bs = BitStream(16)
    bs.write_bits(0b1010, 4)
    bs.write_bits(0b11110000, 8)
    assert len(bs) == 12
    out = bs.to_bytes()
    assert out == bytes([0b10101111, 0b00000000])


def test_read_after_reset_returns_written_bits():
    bs = BitStream(8)
    bs.write_bits(0b101, 3)
    bs.reset()
    assert bs.remaining == 3
    assert bs.read_bit() == 1
    assert bs.read_bits(2) == 0b01
    assert bs.remaining == 0


def test_read_past_logical_end_raises_underflow():
    bs = BitStream(64)
    bs.write_bits(0b11, 2)
    bs.reset()
    bs.read_bits(2)
    with pytest.raises(StreamUnderflowError):
        bs.read_bit()


def test_underflow_is_an_eoferror():
    bs = BitStream(8)
    with pytest.raises(EOFError):
        bs.read_bit()


def test_write_past_capacity_raises_overflow():
    bs = BitStream(3)
    bs.write_bits(0b111, 3)
    with pytest.raises(StreamOverflowError):
        bs.write_bit(1)
    assert bs.cursor == 3


def test_write_bits_is_all_or_nothing():
    bs = BitStream(4)
    bs.write_bit(1)
    with pytest.raises(StreamOverflowError):
        bs.write_bits(0xFF, 8)
    assert len(bs) == 1 and bs.cursor == 1


def test_rewrite_clears_stale_bits():
    bs = BitStream(8)
    bs.write_bits(0xFF, 8)
    bs.reset()
    bs.write_bits(0x00, 8)
    assert bs.to_bytes() == b"\x00"


def test_set_and_get_bit_random_access():
    bs = BitStream(16)
    bs.set_bit(9, 1)
    assert len(bs) == 10
    assert bs.get_bit(9) == 1
    assert bs.get_bit(8) == 0
    assert bs.buffer[1] == 0b01000000
    with pytest.raises(StreamOverflowError):
        bs.set_bit(16, 1)
    with pytest.raises(StreamUnderflowError):
        bs.get_bit(10)


def test_from_bytes_keeps_logical_length():
    bs = BitStream.from_bytes(b"\xA0", bit_length=3)
    assert list(bs) == [1, 0, 1]
    assert bs.read_bits(3) == 0b101
    with pytest.raises(StreamUnderflowError):
        bs.read_bit()


def test_from_bytes_rejects_length_beyond_data():
    with pytest.raises(StreamOverflowError):
        BitStream.from_bytes(b"\x00", bit_length=9)


def test_to_bytes_masks_padding():
    bs = BitStream.from_bytes(b"\xFF", bit_length=5)
    assert bs.to_bytes() == bytes([0b11111000])


def test_clear_drops_contents():
    bs = BitStream(8)
    bs.write_bits(0xAA, 8)
    bs.clear()
    assert len(bs) == 0 and bs.cursor == 0
    assert bs.buffer == bytearray(1)


def test_sequential_write_truncates_logical_end():
    bs = BitStream(16)
    bs.write_bits(0xFFFF, 16)
    bs.reset()
    bs.write_bits(0b10, 2)
    assert len(bs) == 2
    bs.reset()
    assert bs.read_bits(2) == 0b10
    with pytest.raises(StreamUnderflowError):
        bs.read_bit()


def test_set_bit_only_extends_logical_end():
    bs = BitStream(16)
    bs.set_bit(10, 1)
    bs.set_bit(2, 0)
    assert len(bs) == 11


def test_from_bytes_default_length_counts_padding():
    assert len(BitStream.from_bytes(b"\xA0")) == 8
