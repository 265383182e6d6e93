from typing import Optional

from errors import CapacityError


class HuffmanConfig:
    """Sizing parameters shared by every stage of the pipeline.

    The vocabulary size, the node capacity of the tree and the capacity of
    the output stream must scale together; they are validated once, here.

    :ivar DEFAULT_VOCAB_SIZE: Vocabulary size for byte streams.
    :type DEFAULT_VOCAB_SIZE: int
    :ivar DEFAULT_STREAM_CAPACITY: Default output stream capacity (in bits).
    :type DEFAULT_STREAM_CAPACITY: int
    :ivar vocab_size: Number of tokens ``V``; tokens are ``0..V-1``.
    :type vocab_size: int
    :ivar max_nodes: Node slots available to the tree (at least ``2V-1``).
    :type max_nodes: int
    :ivar stream_capacity: Capacity of a default output stream (in bits).
    :type stream_capacity: int
    """

    DEFAULT_VOCAB_SIZE = 256
    DEFAULT_STREAM_CAPACITY = 8192 * 8

    def __init__(
        self,
        vocab_size: int = DEFAULT_VOCAB_SIZE,
        max_nodes: Optional[int] = None,
        stream_capacity: Optional[int] = None,
    ):
        """Validate and store the sizing parameters.

        :param vocab_size: Number of distinct tokens (at least 1).
        :type vocab_size: int
        :param max_nodes: Tree node capacity; defaults to ``2V-1``.
        :type max_nodes: Optional[int]
        :param stream_capacity: Output stream capacity in bits; defaults to
            :attr:`DEFAULT_STREAM_CAPACITY`.
        :type stream_capacity: Optional[int]
        :returns: None
        :rtype: None
        :raises CapacityError: If any parameter is out of range or the
            parameters do not fit each other.
        """
        if vocab_size < 1:
            raise CapacityError(f"Vocabulary size must be positive: {vocab_size}")
        min_nodes = 2 * vocab_size - 1
        if max_nodes is None:
            max_nodes = min_nodes
        if max_nodes < min_nodes:
            raise CapacityError(
                f"Node capacity {max_nodes} is below 2V-1 = {min_nodes}"
            )
        if stream_capacity is None:
            stream_capacity = self.DEFAULT_STREAM_CAPACITY
        # the longest possible code must fit at least once
        min_stream = max(1, vocab_size - 1)
        if stream_capacity < min_stream:
            raise CapacityError(
                f"Stream capacity {stream_capacity} bits is below {min_stream}"
            )
        self.vocab_size = vocab_size
        self.max_nodes = max_nodes
        self.stream_capacity = stream_capacity

    @property
    def table_capacity(self) -> int:
        """Size in bits of the packed code table.

        Bounds the sum of all code lengths, which is largest for a
        degenerate chain-shaped tree.

        :returns: ``V*(V+1) - 1``.
        :rtype: int
        """
        return (self.vocab_size + 1) * self.vocab_size - 1

    def __repr__(self):
        return (
            f"HuffmanConfig(vocab_size={self.vocab_size}, "
            f"max_nodes={self.max_nodes}, "
            f"stream_capacity={self.stream_capacity})"
        )
