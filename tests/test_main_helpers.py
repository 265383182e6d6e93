import pytest


def test_fmt_bits(m):
    assert m._fmt_bits(0) == "0 bits, 0 bytes"
    assert m._fmt_bits(9) == "9 bits, 2 bytes"
    assert m._fmt_bits(16) == "16 bits, 2 bytes"


def test_fmt_tokens_escapes_unprintable(m):
    assert m._fmt_tokens([72, 105]) == "Hi"
    assert m._fmt_tokens([0, 65, 255]) == "\\x00A\\xff"


def test_read_input_prefers_text(tmp_path, m):
    parser = m.get_parser()
    ns = parser.parse_args(["freq", "-t", "héllo"])
    assert m._read_input(ns) == "héllo".encode("utf-8")

    src = tmp_path / "data.bin"
    src.write_bytes(b"\x00\x01")
    ns = parser.parse_args(["freq", str(src)])
    assert m._read_input(ns) == b"\x00\x01"


def test_cli_parser_accepts_subcommands(m):
    parser = m.get_parser()
    ns = parser.parse_args(["freq", "file1"])
    assert ns.cmd in ("freq", "f") and ns.input == "file1"
    ns2 = parser.parse_args(["c", "-t", "abc", "-V", "128"])
    assert ns2.cmd in ("codes", "c") and ns2.vocab_size == 128
    ns3 = parser.parse_args(["roundtrip", "-t", "x", "--capacity", "64"])
    assert ns3.cmd in ("roundtrip", "r") and ns3.capacity == 64


def test_main_requires_exactly_one_source(tmp_path, m):
    with pytest.raises(SystemExit):
        m.main(["freq"])
    with pytest.raises(SystemExit):
        m.main(["freq", str(tmp_path / "x"), "-t", "abc"])
