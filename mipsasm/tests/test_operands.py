# mipsasm/tests/test_operands.py
import pytest
from mipsasm.mips_consts import REGISTER_MAP
from mipsasm.mips_operands import register, integer, is_integer, escape
from mipsasm.mips_errors import InvalidRegister, InvalidLiteral, InvalidStringEscape


@pytest.mark.parametrize("token, expected", [
    ("$zero", 0), ("$0", 0), ("$at", 1), ("$v0", 2), ("$v1", 3),
    ("$a0", 4), ("$a3", 7), ("$t0", 8), ("$t7", 15), ("$s0", 16),
    ("$s7", 23), ("$t8", 24), ("$t9", 25), ("$k0", 26), ("$k1", 27),
    ("$gp", 28), ("$sp", 29), ("$fp", 30), ("$ra", 31), ("$31", 31),
    ("$T0", 8), (" $sp ", 29),
])
def test_register_names(token, expected):
    assert register(token) == expected


def test_every_canonical_register():
    for n in range(32):
        assert register(f"${n}") == n
    assert sorted(set(REGISTER_MAP.values())) == list(range(32))


@pytest.mark.parametrize("token", ["$t10", "t0", "$32", "$", "", "$s8", "zero"])
def test_invalid_register(token):
    with pytest.raises(InvalidRegister) as excinfo:
        register(token)
    assert excinfo.value.token == token


@pytest.mark.parametrize("token, expected", [
    ("10", 10), ("-10", -10), ("0x1F", 31), ("0X10", 16), ("-0x10", -16),
    ("007", 7), ("4294967295", 4294967295),
])
def test_integer(token, expected):
    assert is_integer(token)
    assert integer(token) == expected


@pytest.mark.parametrize("token", ["1.5", "abc", "0x", "--1", "", "0xg", "+1", "1 2"])
def test_invalid_integer(token):
    assert not is_integer(token)
    with pytest.raises(InvalidLiteral):
        integer(token)


@pytest.mark.parametrize("body, expected", [
    ("plain", b"plain"),
    ("a\\nb", b"a\nb"),
    ("\\t\\r\\0", b"\t\r\0"),
    ("\\x41\\x7e", b"A~"),
    ("\\\\", b"\\"),
    ('say \\"hi\\"', b'say "hi"'),
    ("café", "café".encode("utf-8")),
])
def test_escape(body, expected):
    assert escape(body) == expected


@pytest.mark.parametrize("body", ["\\q", "abc\\", "\\x4"])
def test_invalid_escape(body):
    with pytest.raises(InvalidStringEscape):
        escape(body)
