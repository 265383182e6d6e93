from typing import Iterator, Optional

from errors import StreamOverflowError, StreamUnderflowError


class BitStream:
    """Fixed-capacity bit buffer with a single read/write cursor.

    Bits are packed MSB-first within each byte. The same cursor serves
    sequential writes and sequential reads; callers :meth:`reset` it between
    an encode pass and a decode pass. The logical length bounds every read:
    a sequential write ends the stream at the cursor, while a random-access
    :meth:`set_bit` only ever extends it.

    :ivar capacity: Maximum number of bits the stream can hold.
    :type capacity: int
    :ivar buffer: Backing byte buffer of ``ceil(capacity / 8)`` bytes.
    :type buffer: bytearray
    :ivar cursor: Current bit position for sequential read/write.
    :type cursor: int
    :ivar length: Number of valid bits (logical end of the stream).
    :type length: int
    """

    def __init__(self, capacity: int):
        """Create an empty stream able to hold ``capacity`` bits.

        :param capacity: Capacity in bits.
        :type capacity: int
        :returns: None
        :rtype: None
        :raises ValueError: If ``capacity`` is negative.
        """
        if capacity < 0:
            raise ValueError(f"Negative stream capacity: {capacity}")
        self.capacity = capacity
        self.buffer = bytearray((capacity + 7) // 8)
        self.cursor = 0
        self.length = 0

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        bit_length: Optional[int] = None,
        capacity: Optional[int] = None,
    ) -> "BitStream":
        """Wrap packed bytes produced by :meth:`to_bytes`.

        :param data: Packed bytes, MSB-first.
        :type data: bytes
        :param bit_length: Logical length in bits; defaults to every bit of
            ``data``. The zero padding of the last byte then counts as data
            and decodes into trailing tokens, so pass the original
            :attr:`length` when wrapping encoded output.
        :type bit_length: Optional[int]
        :param capacity: Stream capacity in bits; defaults to ``len(data) * 8``.
        :type capacity: Optional[int]
        :returns: A stream positioned at bit 0.
        :rtype: BitStream
        :raises StreamOverflowError: If ``data`` or ``bit_length`` exceed
            ``capacity``.
        """
        if capacity is None:
            capacity = len(data) * 8
        if bit_length is None:
            bit_length = len(data) * 8
        if bit_length > len(data) * 8 or bit_length > capacity:
            raise StreamOverflowError(
                f"{bit_length} bits do not fit the given data or capacity"
            )
        stream = cls(capacity)
        if len(data) > len(stream.buffer):
            raise StreamOverflowError(
                f"{len(data)} bytes exceed a capacity of {capacity} bits"
            )
        stream.buffer[:len(data)] = data
        stream.length = bit_length
        return stream

    def reset(self):
        """Move the cursor back to the first bit, keeping the contents.

        :returns: None
        :rtype: None
        """
        self.cursor = 0

    def clear(self):
        """Drop all contents and rewind the cursor.

        :returns: None
        :rtype: None
        """
        self.buffer[:] = bytes(len(self.buffer))
        self.cursor = 0
        self.length = 0

    @property
    def remaining(self) -> int:
        """Bits left to read between the cursor and the logical end."""
        return max(0, self.length - self.cursor)

    @property
    def free(self) -> int:
        """Bits left to write between the cursor and the capacity."""
        return self.capacity - self.cursor

    def ensure_capacity(self, nbits: int):
        """Check that ``nbits`` more bits can be written at the cursor.

        :param nbits: Number of bits about to be written.
        :type nbits: int
        :returns: None
        :rtype: None
        :raises StreamOverflowError: If the bits do not fit.
        """
        if nbits > self.free:
            raise StreamOverflowError(
                f"Need {nbits} bits at offset {self.cursor}, "
                f"only {self.free} of {self.capacity} free"
            )

    def set_bit(self, offset: int, value: int):
        """Store one bit at an absolute bit ``offset``.

        :param offset: Bit position, ``0 <= offset < capacity``.
        :type offset: int
        :param value: Bit value; any nonzero value stores a 1.
        :type value: int
        :returns: None
        :rtype: None
        :raises StreamOverflowError: If ``offset`` is outside the capacity.
        """
        if not 0 <= offset < self.capacity:
            raise StreamOverflowError(
                f"Bit offset {offset} outside capacity {self.capacity}"
            )
        mask = 0x80 >> (offset & 7)
        if value:
            self.buffer[offset >> 3] |= mask
        else:
            self.buffer[offset >> 3] &= ~mask & 0xFF
        if offset >= self.length:
            self.length = offset + 1

    def get_bit(self, offset: int) -> int:
        """Return the bit at an absolute bit ``offset``.

        :param offset: Bit position, ``0 <= offset < length``.
        :type offset: int
        :returns: 0 or 1.
        :rtype: int
        :raises StreamUnderflowError: If ``offset`` is past the logical end.
        """
        if not 0 <= offset < self.length:
            raise StreamUnderflowError(
                f"Bit offset {offset} outside logical length {self.length}"
            )
        return (self.buffer[offset >> 3] >> (7 - (offset & 7))) & 1

    def write_bit(self, value: int):
        """Write one bit at the cursor and advance it.

        The logical end of the stream moves to the new cursor, dropping any
        bits previously written beyond it.

        :param value: Bit value; any nonzero value writes a 1.
        :type value: int
        :returns: None
        :rtype: None
        :raises StreamOverflowError: If the stream is full.
        """
        if self.cursor >= self.capacity:
            raise StreamOverflowError(
                f"Stream full: capacity is {self.capacity} bits"
            )
        self.set_bit(self.cursor, value)
        self.cursor += 1
        self.length = self.cursor

    def write_bits(self, value: int, nbits: int):
        """Write the lowest ``nbits`` of ``value``, MSB first.

        Nothing is written when the bits do not all fit.

        :param value: Integer whose bits will be written.
        :type value: int
        :param nbits: Number of bits from ``value`` to write.
        :type nbits: int
        :returns: None
        :rtype: None
        :raises StreamOverflowError: If the bits do not fit.
        """
        self.ensure_capacity(nbits)
        for i in range(nbits - 1, -1, -1):
            self.write_bit((value >> i) & 1)

    def read_bit(self) -> int:
        """Read the bit at the cursor and advance it.

        :returns: 0 or 1.
        :rtype: int
        :raises StreamUnderflowError: If the cursor is at the logical end.
        """
        if self.cursor >= self.length:
            raise StreamUnderflowError("Unexpected end of bitstream")
        bit = self.get_bit(self.cursor)
        self.cursor += 1
        return bit

    def read_bits(self, nbits: int) -> int:
        """Read ``nbits`` bits and return them as an integer, MSB first.

        :param nbits: Number of bits to read.
        :type nbits: int
        :returns: The integer value composed of the next ``nbits`` bits.
        :rtype: int
        :raises StreamUnderflowError: If fewer than ``nbits`` bits remain.
        """
        result = 0
        for _ in range(nbits):
            result = (result << 1) | self.read_bit()
        return result

    def to_bytes(self) -> bytes:
        """Return the packed bytes covering the logical length.

        The last byte is zero-padded; keep :attr:`length` alongside the bytes
        to restore the exact stream with :meth:`from_bytes`.

        :returns: ``ceil(length / 8)`` bytes.
        :rtype: bytes
        """
        used = (self.length + 7) // 8
        out = bytearray(self.buffer[:used])
        tail = self.length & 7
        if tail:
            out[-1] &= (0xFF << (8 - tail)) & 0xFF
        return bytes(out)

    def __len__(self):
        return self.length

    def __iter__(self) -> Iterator[int]:
        for offset in range(self.length):
            yield self.get_bit(offset)

    def __repr__(self):
        return (
            f"BitStream(length={self.length}, cursor={self.cursor}, "
            f"capacity={self.capacity})"
        )
