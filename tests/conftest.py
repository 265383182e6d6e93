import sys
from itertools import combinations
from pathlib import Path
import importlib
import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from config import HuffmanConfig  # noqa: E402
from huffman import FrequencyTable  # noqa: E402


@pytest.fixture()
def m():
    """Lazily import the main module for tests to avoid module-level import."""
    return importlib.import_module("main")


@pytest.fixture()
def textbook_freqs():
    """Classic six-symbol example: a..f with counts 5, 9, 12, 13, 16, 45."""
    table = FrequencyTable()
    table.update({
        ord("a"): 5,
        ord("b"): 9,
        ord("c"): 12,
        ord("d"): 13,
        ord("e"): 16,
        ord("f"): 45,
    })
    return table


@pytest.fixture()
def small_config():
    """Four-token vocabulary for hand-checkable trees."""
    return HuffmanConfig(vocab_size=4)


def is_prefix_free(codes):
    """Return True if no code in ``codes`` is a prefix of another."""
    for a, b in combinations(codes, 2):
        shorter, longer = sorted((a, b), key=len)
        if longer[:len(shorter)] == shorter:
            return False
    return True


@pytest.fixture()
def is_prefix_free_fn():
    """
    Fixture that provides the is_prefix_free helper without importing conftest.
    """
    return is_prefix_free
