from typing import Iterable, List, Optional

from bitops import BitStream
from codetable import CodeTable
from config import HuffmanConfig
from errors import EmptyAlphabetError, InvalidCodeError
from huffman import FrequencyTable, HuffmanTree, Internal


class Codec:
    """Huffman pipeline: frequencies, tree, code table, encode and decode.

    The tree is not part of the encoded output; decoding needs the same
    tree (or an identical one built from the same frequencies).

    :ivar config: Sizing parameters shared by all stages.
    :type config: HuffmanConfig
    :ivar frequencies: Accumulated token counts.
    :type frequencies: FrequencyTable
    :ivar tree: Tree of the last :meth:`build`, if any.
    :type tree: Optional[HuffmanTree]
    :ivar table: Code table of the last :meth:`build`, if any.
    :type table: Optional[CodeTable]
    """

    def __init__(self, config: Optional[HuffmanConfig] = None):
        """Create a codec with empty statistics.

        :param config: Sizing parameters; defaults to a byte vocabulary.
        :type config: Optional[HuffmanConfig]
        :returns: None
        :rtype: None
        """
        self.config = config or HuffmanConfig()
        self.frequencies = FrequencyTable(self.config.vocab_size)
        self.tree: Optional[HuffmanTree] = None
        self.table: Optional[CodeTable] = None

    def accumulate(self, data: Iterable[int]):
        """Add the tokens of ``data`` to the statistics.

        :param data: Tokens to count.
        :type data: Iterable[int]
        :returns: None
        :rtype: None
        """
        self.frequencies.accumulate(data)

    def build(self, allow_single_symbol: bool = True) -> HuffmanTree:
        """Build the tree and its code table from the current statistics.

        :param allow_single_symbol: Accept statistics with a single token.
        :type allow_single_symbol: bool
        :returns: The new tree (also kept as :attr:`tree`).
        :rtype: HuffmanTree
        :raises EmptyAlphabetError: If nothing has been accumulated.
        """
        tree = HuffmanTree(self.config)
        tree.build(self.frequencies, allow_single_symbol=allow_single_symbol)
        self.tree = tree
        self.table = CodeTable.derive(tree)
        return tree

    def encode(
        self,
        data: Iterable[int],
        table: Optional[CodeTable] = None,
        stream: Optional[BitStream] = None,
    ) -> BitStream:
        """Append the code of every token of ``data`` to a stream.

        The whole encoded size is checked against the stream before the first
        bit is written, so a failing call leaves ``stream`` untouched.

        :param data: Tokens to encode.
        :type data: Iterable[int]
        :param table: Code table; defaults to the one of the last build.
        :type table: Optional[CodeTable]
        :param stream: Output stream; a new one of the configured capacity
            is created when omitted.
        :type stream: Optional[BitStream]
        :returns: The stream, cursor placed after the last written bit.
        :rtype: BitStream
        :raises EmptyAlphabetError: If no table is given nor built.
        :raises UnknownTokenError: If a token has no code.
        :raises StreamOverflowError: If the encoded bits do not fit.
        """
        table = table or self.table
        if table is None:
            raise EmptyAlphabetError("No code table: call build() first")
        if stream is None:
            stream = BitStream(self.config.stream_capacity)

        spans = [table.encode_symbol(token) for token in data]
        stream.ensure_capacity(sum(length for _, length in spans))

        bits = table.bits
        for offset, length in spans:
            for position in range(offset, offset + length):
                stream.write_bit(bits.get_bit(position))
        return stream

    def decode(
        self,
        stream: BitStream,
        tree: Optional[HuffmanTree] = None,
        count: Optional[int] = None,
        stop_token: Optional[int] = None,
    ) -> List[int]:
        """Decode tokens from the stream's cursor onwards.

        Each token is found by walking from the root, one bit per step
        (0 = left, 1 = right), until a leaf. Decoding ends at the logical end
        of the stream, after ``count`` tokens, or right after ``stop_token``
        has been emitted, whichever comes first. The cursor is not rewound.

        :param stream: Encoded bits; call :meth:`BitStream.reset` after
            encoding into it.
        :type stream: BitStream
        :param tree: Tree used for encoding; defaults to the last build.
        :type tree: Optional[HuffmanTree]
        :param count: Maximum number of tokens to decode.
        :type count: Optional[int]
        :param stop_token: Token acting as an in-band terminator. It is
            included in the result.
        :type stop_token: Optional[int]
        :returns: Decoded tokens.
        :rtype: List[int]
        :raises EmptyAlphabetError: If no tree is given nor built.
        :raises StreamUnderflowError: If the stream ends inside a code.
        :raises InvalidCodeError: If a single-leaf tree reads a 1 bit.
        """
        tree = tree or self.tree
        if tree is None or tree.top is None:
            raise EmptyAlphabetError("No Huffman tree: call build() first")

        tokens: List[int] = []
        top = tree.top
        single_leaf = tree.is_leaf(top)
        while stream.remaining and (count is None or len(tokens) < count):
            current = top
            if single_leaf:
                if stream.read_bit():
                    raise InvalidCodeError(
                        f"Invalid Huffman code at bit {stream.cursor - 1}"
                    )
            else:
                node = tree.node(current)
                while isinstance(node, Internal):
                    current = node.right if stream.read_bit() else node.left
                    node = tree.node(current)
            token = tree.node(current).token
            tokens.append(token)
            if token == stop_token:
                break
        return tokens

    def compress(self, data: bytes) -> BitStream:
        """Encode ``data`` with statistics gathered from ``data`` alone.

        :param data: Input bytes.
        :type data: bytes
        :returns: The encoded stream; :attr:`tree` is needed to decode it.
        :rtype: BitStream
        :raises EmptyAlphabetError: If ``data`` is empty.
        """
        self.frequencies.reset()
        self.accumulate(data)
        self.build()
        return self.encode(data)

    def decompress(self, stream: BitStream) -> bytes:
        """Decode a whole stream produced by :meth:`compress`.

        Every bit up to the stream's logical length is decoded. A stream
        rebuilt with :meth:`BitStream.from_bytes` must be given the encoded
        ``bit_length``, or the padding of the last byte decodes as extra
        tokens.

        :param stream: Encoded stream; read from its first bit.
        :type stream: BitStream
        :returns: Original bytes.
        :rtype: bytes
        """
        stream.reset()
        return bytes(self.decode(stream))
