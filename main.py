import argparse
import sys

from typing import List, Optional
from codec import Codec
from config import HuffmanConfig
from errors import HuffmanError


def get_parser():
    """Create and configure the CLI argument parser.

    :returns: Configured argument parser.
    :rtype: argparse.ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Huffman coding of a byte stream, step by step"
    )
    subparsers = parser.add_subparsers(
        title="subcommands", dest="cmd", required=True
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("input", nargs="?", help="File to read the data from")
    common.add_argument("-t", "--text", help="Use this text (UTF-8) as data")
    common.add_argument(
        "-V",
        "--vocab-size",
        type=int,
        default=HuffmanConfig.DEFAULT_VOCAB_SIZE,
        help="Number of distinct tokens (default: %(default)s)",
    )
    common.add_argument(
        "--capacity",
        type=int,
        default=HuffmanConfig.DEFAULT_STREAM_CAPACITY,
        help="Encoded stream capacity in bits (default: %(default)s)",
    )

    subparsers.add_parser(
        "freq", aliases=["f"], parents=[common],
        help="List the frequency of every used token",
    )
    subparsers.add_parser(
        "codes", aliases=["c"], parents=[common],
        help="List the Huffman code of every used token",
    )
    subparsers.add_parser(
        "roundtrip", aliases=["r"], parents=[common],
        help="Encode the data, decode it again and compare",
    )

    return parser


def _read_input(args) -> bytes:
    """Load the data selected on the command line.

    :param args: Parsed arguments with ``input`` and ``text``.
    :type args: argparse.Namespace
    :returns: Data to process.
    :rtype: bytes
    :raises OSError: If the input file is missing or cannot be read.
    """
    if args.text is not None:
        return args.text.encode("utf-8")
    with open(args.input, "rb") as f:
        return f.read()


def _fmt_bits(nbits: int) -> str:
    """Format a bit count as ``"<bits> bits, <bytes> bytes"``.

    :param nbits: Number of bits.
    :type nbits: int
    :returns: Human-readable size.
    :rtype: str
    """
    return f"{nbits} bits, {(nbits + 7) // 8} bytes"


def _fmt_tokens(tokens: List[int]) -> str:
    """Render decoded tokens as text, escaping what is not printable ASCII.

    :param tokens: Decoded token values.
    :type tokens: List[int]
    :returns: Printable rendering.
    :rtype: str
    """
    out = []
    for token in tokens:
        if 32 <= token < 127:
            out.append(chr(token))
        else:
            out.append(f"\\x{token:02x}")
    return "".join(out)


def show_frequencies(codec: Codec, data: bytes) -> None:
    """Print the frequency dump of ``data``.

    :param codec: Codec whose statistics receive ``data``.
    :type codec: Codec
    :param data: Data to count.
    :type data: bytes
    :returns: None
    :rtype: None
    """
    codec.accumulate(data)
    for line in codec.frequencies.dump():
        print(line)


def show_codes(codec: Codec, data: bytes) -> None:
    """Build codes for ``data`` and print the code table dump.

    :param codec: Codec to build with.
    :type codec: Codec
    :param data: Data to count.
    :type data: bytes
    :returns: None
    :rtype: None
    :raises EmptyAlphabetError: If ``data`` is empty.
    """
    codec.accumulate(data)
    codec.build()
    print(f"Total bitcount of all codes: {codec.table.total_bits} bits")
    for line in codec.table.dump():
        print(line)


def roundtrip(codec: Codec, data: bytes) -> bool:
    """Compress ``data``, decode it back and report on the way.

    :param codec: Codec to run.
    :type codec: Codec
    :param data: Data to process.
    :type data: bytes
    :returns: ``True`` if the decoded data equals ``data``.
    :rtype: bool
    """
    stream = codec.compress(data)
    print(f"Original stream size: {len(data)} bytes")
    print(f"Encoded stream size: {_fmt_bits(len(stream))}")
    stream.reset()
    tokens = codec.decode(stream)
    print("Decoded:", _fmt_tokens(tokens))
    ok = bytes(tokens) == data
    print("Round trip OK" if ok else "[!] Decoded data differs from input")
    return ok


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI tool.

    :param argv: Arguments to parse instead of ``sys.argv[1:]``.
    :type argv: Optional[List[str]]
    :returns: Process exit status.
    :rtype: int
    """
    parser = get_parser()
    args = parser.parse_args(argv)
    if (args.input is None) == (args.text is None):
        parser.error("give either an input file or --text")

    try:
        data = _read_input(args)
    except FileNotFoundError:
        print(f"[!] Input file not found: {args.input}")
        return 1
    except OSError as e:
        print(f"[!] Cannot read input file {args.input}: {e.strerror}")
        return 1

    try:
        codec = Codec(
            HuffmanConfig(args.vocab_size, stream_capacity=args.capacity)
        )
        if args.cmd in ["freq", "f"]:
            show_frequencies(codec, data)
        elif args.cmd in ["codes", "c"]:
            show_codes(codec, data)
        elif args.cmd in ["roundtrip", "r"]:
            if not roundtrip(codec, data):
                return 1
    except HuffmanError as e:
        print(f"[!] {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
