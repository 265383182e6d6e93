from typing import Iterator, List, Optional, Tuple

from bitops import BitStream
from config import HuffmanConfig
from errors import EmptyAlphabetError, UnknownTokenError
from huffman import HuffmanTree, Leaf

Path = Tuple[int, ...]


class CodeTable:
    """Flat encoding table derived from a :class:`HuffmanTree`.

    Every coded token owns the range ``[offset, offset + length)`` of a
    single packed bit array; reading that range in address order yields the
    token's code from root to leaf (0 = left, 1 = right).

    A tree made of a single leaf gives its token the one-bit code ``0``.

    :ivar config: Sizing parameters.
    :type config: HuffmanConfig
    :ivar offsets: Bit offset of each token's code in :attr:`bits`.
    :type offsets: List[int]
    :ivar lengths: Code length of each token; 0 for tokens without a code.
    :type lengths: List[int]
    :ivar current_offset: Next free bit of :attr:`bits` while populating.
    :type current_offset: int
    :ivar bits: Packed storage for all codes.
    :type bits: BitStream
    :ivar total_bits: Sum of all code lengths, as counted by the first pass.
    :type total_bits: int
    :ivar weighted_bits: Sum of code length times leaf weight, i.e. the
        encoded size of the data the tree was built from.
    :type weighted_bits: int
    """

    def __init__(self, config: Optional[HuffmanConfig] = None):
        """Create an empty table sized for ``config``.

        :param config: Sizing parameters; defaults to a byte vocabulary.
        :type config: Optional[HuffmanConfig]
        :returns: None
        :rtype: None
        """
        self.config = config or HuffmanConfig()
        self._reset()

    def _reset(self):
        vocab_size = self.config.vocab_size
        self.offsets: List[int] = [0] * vocab_size
        self.lengths: List[int] = [0] * vocab_size
        self.current_offset = 0
        self.bits = BitStream(self.config.table_capacity)
        self.total_bits = 0
        self.weighted_bits = 0

    @classmethod
    def derive(cls, tree: HuffmanTree) -> "CodeTable":
        """Build the table for ``tree``.

        :param tree: A built Huffman tree.
        :type tree: HuffmanTree
        :returns: The populated table.
        :rtype: CodeTable
        :raises EmptyAlphabetError: If ``tree`` has not been built.
        """
        table = cls(tree.config)
        table.populate(tree)
        return table

    def populate(self, tree: HuffmanTree) -> int:
        """Fill the table from ``tree``, replacing any previous contents.

        The first traversal fixes every code length; the second one hands out
        offsets in the same leaf order and writes the code bits.

        :param tree: A built Huffman tree.
        :type tree: HuffmanTree
        :returns: Total number of code bits (see :attr:`total_bits`).
        :rtype: int
        :raises EmptyAlphabetError: If ``tree`` has not been built.
        """
        if tree.top is None:
            raise EmptyAlphabetError("Huffman tree has not been built")
        self._reset()
        self.total_bits = self._traverse(tree, only_count=True)
        self._traverse(tree, only_count=False)
        return self.total_bits

    def _traverse(self, tree: HuffmanTree, only_count: bool) -> int:
        """Depth-first walk from the root, left before right.

        :returns: Sum of the code lengths of all visited leaves.
        :rtype: int
        """
        total = 0
        stack: List[Tuple[int, Path]] = [(tree.top, ())]
        while stack:
            index, path = stack.pop()
            node = tree.node(index)
            if not isinstance(node, Leaf):
                stack.append((node.right, path + (1,)))
                stack.append((node.left, path + (0,)))
                continue

            # a lone root leaf still needs a decodable code
            path = path or (0,)
            token = node.token
            length = len(path)
            total += length
            if only_count:
                self.lengths[token] = length
                self.weighted_bits += length * tree.weight(index)
                continue

            self.offsets[token] = self.current_offset
            self.current_offset += self.lengths[token]
            # unwind leaf -> root, filling the range from its end backwards
            write_offset = self.current_offset
            for bit in reversed(path):
                write_offset -= 1
                self.bits.set_bit(write_offset, bit)
        return total

    def __contains__(self, token: int) -> bool:
        return 0 <= token < self.config.vocab_size and self.lengths[token] > 0

    def encode_symbol(self, token: int) -> Tuple[int, int]:
        """Return where the code of ``token`` lives in the packed array.

        :param token: Token to look up.
        :type token: int
        :returns: Tuple ``(offset, length)`` in bits.
        :rtype: Tuple[int, int]
        :raises UnknownTokenError: If ``token`` has no code.
        """
        if token not in self:
            raise UnknownTokenError(f"No code assigned to token {token}")
        return self.offsets[token], self.lengths[token]

    def iter_bits(self, token: int) -> Iterator[int]:
        """Yield the code bits of ``token`` from root to leaf."""
        offset, length = self.encode_symbol(token)
        for position in range(offset, offset + length):
            yield self.bits.get_bit(position)

    def code(self, token: int) -> Tuple[int, ...]:
        return tuple(self.iter_bits(token))

    def code_string(self, token: int) -> str:
        return "".join(str(bit) for bit in self.iter_bits(token))

    def tokens(self) -> List[int]:
        """Return the coded tokens in token order."""
        return [t for t, n in enumerate(self.lengths) if n]

    @property
    def max_length(self) -> int:
        return max(self.lengths, default=0)

    def dump(self) -> List[str]:
        """Describe every assigned code, one line per token.

        :returns: Lines of the form ``Token: <token> -> <bits>``.
        :rtype: List[str]
        """
        return [
            f"Token: {token} -> {self.code_string(token)}"
            for token in self.tokens()
        ]
