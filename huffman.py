import heapq
from typing import Dict, Iterable, List, Optional, Union

from config import HuffmanConfig
from errors import (
    CapacityError,
    EmptyAlphabetError,
    SingleSymbolAlphabetError,
    UnknownTokenError,
)


class FrequencyTable:
    """Per-token occurrence counts over a fixed vocabulary.

    The table is strictly additive: counts only grow until :meth:`reset`.
    Several inputs may be accumulated before a single tree build.

    :ivar vocab_size: Number of tokens ``V``.
    :type vocab_size: int
    :ivar counts: Occurrence count per token, indexed by token.
    :type counts: List[int]
    """

    def __init__(self, vocab_size: int = HuffmanConfig.DEFAULT_VOCAB_SIZE):
        """Create a zeroed table.

        :param vocab_size: Number of tokens ``V``.
        :type vocab_size: int
        :returns: None
        :rtype: None
        """
        self.vocab_size = vocab_size
        self.counts: List[int] = [0] * vocab_size

    def reset(self):
        """Zero every count.

        :returns: None
        :rtype: None
        """
        self.counts = [0] * self.vocab_size

    def _check_token(self, token: int):
        """Reject tokens outside ``0..V-1``.

        :param token: Token to check.
        :type token: int
        :returns: None
        :rtype: None
        :raises UnknownTokenError: If ``token`` is out of range.
        """
        if not 0 <= token < self.vocab_size:
            raise UnknownTokenError(
                f"Token {token} outside vocabulary of {self.vocab_size}"
            )

    def accumulate(self, data: Iterable[int]):
        """Count every token of ``data``.

        :param data: Tokens to count (a ``bytes`` object yields byte values).
        :type data: Iterable[int]
        :returns: None
        :rtype: None
        :raises UnknownTokenError: If a token is outside the vocabulary.
        """
        counts = self.counts
        for token in data:
            self._check_token(token)
            counts[token] += 1

    def add(self, token: int, count: int = 1):
        """Seed ``count`` occurrences of ``token`` without any input data.

        :param token: Token to credit.
        :type token: int
        :param count: Number of occurrences to add (positive).
        :type count: int
        :returns: None
        :rtype: None
        :raises UnknownTokenError: If ``token`` is outside the vocabulary.
        :raises ValueError: If ``count`` is not positive.
        """
        self._check_token(token)
        if count <= 0:
            raise ValueError(f"Count must be positive: {count}")
        self.counts[token] += count

    def update(self, frequencies: Dict[int, int]):
        """Seed counts from a ``token -> count`` mapping.

        :param frequencies: Mapping of tokens to positive counts.
        :type frequencies: Dict[int, int]
        :returns: None
        :rtype: None
        """
        for token, count in frequencies.items():
            self.add(token, count)

    def used_tokens(self) -> List[int]:
        """Return the tokens with a nonzero count, in token order."""
        return [t for t, c in enumerate(self.counts) if c]

    @property
    def total(self) -> int:
        """Sum of all counts."""
        return sum(self.counts)

    def dump(self) -> List[str]:
        """Describe every nonzero count, one line per token.

        :returns: Lines of the form ``Frequency for <token> is <count>``.
        :rtype: List[str]
        """
        return [
            f"Frequency for {token} is {count}"
            for token, count in enumerate(self.counts)
            if count
        ]

    def __getitem__(self, token: int) -> int:
        self._check_token(token)
        return self.counts[token]

    def __len__(self):
        return self.vocab_size


class Leaf:
    """Tree node holding a single token."""

    __slots__ = ("token",)

    def __init__(self, token: int):
        """Create a leaf for ``token``.

        :param token: Token stored at this leaf.
        :type token: int
        :returns: None
        :rtype: None
        """
        self.token = token

    def __eq__(self, other):
        return isinstance(other, Leaf) and other.token == self.token

    def __repr__(self):
        return f"Leaf({self.token})"


class Internal:
    """Tree node created by merging two nodes; both children are always set."""

    __slots__ = ("left", "right")

    def __init__(self, left: int, right: int):
        """Create a node joining two existing nodes.

        :param left: Index of the child reached by a 0 bit.
        :type left: int
        :param right: Index of the child reached by a 1 bit.
        :type right: int
        :returns: None
        :rtype: None
        """
        self.left = left
        self.right = right

    def __eq__(self, other):
        return (
            isinstance(other, Internal)
            and other.left == self.left
            and other.right == self.right
        )

    def __repr__(self):
        return f"Internal({self.left}, {self.right})"


Node = Union[Leaf, Internal]


class HuffmanTree:
    """Array-backed binary Huffman tree.

    Node indices ``0..V-1`` are the leaves, one per token whether it occurs
    or not. Internal nodes are appended from index ``V`` on as they are
    created, so every child index is lower than its parent's.

    :ivar config: Sizing parameters of the tree.
    :type config: HuffmanConfig
    :ivar nodes: Node per index.
    :type nodes: List[Node]
    :ivar weights: Merged frequency per node index.
    :type weights: List[int]
    :ivar top: Index of the root, ``None`` until :meth:`build` succeeds.
    :type top: Optional[int]
    """

    def __init__(self, config: Optional[HuffmanConfig] = None):
        """Create an unbuilt tree with one leaf slot per token.

        :param config: Sizing parameters; defaults to a byte vocabulary.
        :type config: Optional[HuffmanConfig]
        :returns: None
        :rtype: None
        """
        self.config = config or HuffmanConfig()
        self.nodes: List[Node] = []
        self.weights: List[int] = []
        self.top: Optional[int] = None
        self._reset()

    @property
    def vocab_size(self) -> int:
        """Number of tokens, i.e. of leaf slots.

        :returns: ``V`` from :attr:`config`.
        :rtype: int
        """
        return self.config.vocab_size

    def _reset(self):
        self.nodes = [Leaf(token) for token in range(self.vocab_size)]
        self.weights = [0] * self.vocab_size
        self.top = None

    def build(
        self,
        frequencies: FrequencyTable,
        allow_single_symbol: bool = True,
    ) -> int:
        """Build the tree greedily from ``frequencies``.

        Repeatedly merges the two live nodes of smallest weight into a new
        internal node (first picked goes left). Among equal weights the
        lowest node index wins, so a given table always yields the same
        tree. Nodes of weight 0 never take part.

        :param frequencies: Token counts; not modified.
        :type frequencies: FrequencyTable
        :param allow_single_symbol: Accept a table with exactly one used
            token, whose leaf then becomes the root.
        :type allow_single_symbol: bool
        :returns: Index of the root node.
        :rtype: int
        :raises CapacityError: If the vocabularies differ or the node
            capacity is exhausted.
        :raises EmptyAlphabetError: If no token has a nonzero count.
        :raises SingleSymbolAlphabetError: If only one token is used and
            ``allow_single_symbol`` is false.
        """
        if frequencies.vocab_size != self.vocab_size:
            raise CapacityError(
                f"Frequency table covers {frequencies.vocab_size} tokens, "
                f"tree expects {self.vocab_size}"
            )
        self._reset()
        self.weights = list(frequencies.counts)

        # (weight, index) orders exactly like a lowest-index-first linear scan
        live = [(w, i) for i, w in enumerate(self.weights) if w > 0]
        heapq.heapify(live)

        if not live:
            raise EmptyAlphabetError("No token has a nonzero frequency")
        if len(live) == 1 and not allow_single_symbol:
            raise SingleSymbolAlphabetError(
                f"Only token {live[0][1]} occurs"
            )

        while len(live) > 1:
            weight_a, a = heapq.heappop(live)
            weight_b, b = heapq.heappop(live)
            index = len(self.nodes)
            if index >= self.config.max_nodes:
                raise CapacityError(
                    f"Tree node capacity {self.config.max_nodes} exhausted"
                )
            self.nodes.append(Internal(a, b))
            self.weights.append(weight_a + weight_b)
            heapq.heappush(live, (weight_a + weight_b, index))

        self.top = live[0][1]
        return self.top

    @property
    def built(self) -> bool:
        """Whether :meth:`build` has produced a root.

        :returns: ``True`` once :attr:`top` is set.
        :rtype: bool
        """
        return self.top is not None

    @property
    def node_count(self) -> int:
        """Number of node slots in use (leaves plus internal nodes)."""
        return len(self.nodes)

    def node(self, index: int) -> Node:
        """Return the node stored at ``index``.

        :param index: Node index.
        :type index: int
        :returns: The :class:`Leaf` or :class:`Internal` node.
        :rtype: Node
        """
        return self.nodes[index]

    def is_leaf(self, index: int) -> bool:
        """Tell whether ``index`` holds a leaf.

        :param index: Node index.
        :type index: int
        :returns: ``True`` for a :class:`Leaf`.
        :rtype: bool
        """
        return isinstance(self.nodes[index], Leaf)

    def left(self, index: int) -> Optional[int]:
        """Left child of ``index``, or ``None`` for a leaf."""
        node = self.nodes[index]
        return node.left if isinstance(node, Internal) else None

    def right(self, index: int) -> Optional[int]:
        """Right child of ``index``, or ``None`` for a leaf."""
        node = self.nodes[index]
        return node.right if isinstance(node, Internal) else None

    def weight(self, index: int) -> int:
        """Return the merged frequency of node ``index``.

        :param index: Node index.
        :type index: int
        :returns: Frequency of a leaf, or the sum over an internal subtree.
        :rtype: int
        """
        return self.weights[index]

    def leaves(self) -> List[int]:
        """Tokens reachable from the root, in left-to-right order.

        :returns: Tokens of the tree's leaves; empty for an unbuilt tree.
        :rtype: List[int]
        """
        return list(self.depths())

    def depths(self) -> Dict[int, int]:
        """Map each reachable token to the depth of its leaf.

        The root is at depth 0, so a single-leaf tree maps its token to 0.
        Depth equals code length everywhere else; for the lone root leaf
        :class:`codetable.CodeTable` assigns a one-bit code instead.
        Iteration order of the result is left-to-right.

        :returns: ``token -> depth`` mapping.
        :rtype: Dict[int, int]
        """
        result: Dict[int, int] = {}
        if self.top is None:
            return result
        stack = [(self.top, 0)]
        while stack:
            index, depth = stack.pop()
            node = self.nodes[index]
            if isinstance(node, Leaf):
                result[node.token] = depth
            else:
                stack.append((node.right, depth + 1))
                stack.append((node.left, depth + 1))
        return result
