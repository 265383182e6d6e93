class HuffmanError(Exception):
    """Base class for every error raised by the Huffman pipeline."""


class CapacityError(HuffmanError, ValueError):
    """Configuration or buffer sizes are inconsistent or exhausted."""


class EmptyAlphabetError(HuffmanError, ValueError):
    """The frequency table has no nonzero entry, so there is no tree root."""


class SingleSymbolAlphabetError(HuffmanError, ValueError):
    """Exactly one token occurs and the caller asked to reject that case."""


class StreamOverflowError(HuffmanError, ValueError):
    """Writing would go past the capacity of a bit stream."""


class StreamUnderflowError(HuffmanError, EOFError):
    """Reading would go past the logical end of a bit stream."""


class UnknownTokenError(HuffmanError, ValueError):
    """A token is outside the vocabulary or has no code assigned."""


class InvalidCodeError(HuffmanError, ValueError):
    """A bit sequence does not lead to any token of the tree."""
