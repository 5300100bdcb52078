# mipsasm/tests/test_expander.py
import pytest
from mipsasm.mips_expander import expand_line, expand_pseudo, split_instruction
from mipsasm.mips_errors import InvalidDataLiteral, ImageTooLarge


def texts(units):
    return [u["text"] for u in units]


def test_split_instruction():
    assert split_instruction("ADDI $t0, $t1, 5") == ("addi", ["$t0", "$t1", "5"])
    assert split_instruction("syscall") == ("syscall", [])


def test_li_expands_to_lui_ori():
    assert texts(expand_line("li $t0, 0x12345678")) == ["lui $at, 4660", "ori $t0, $at, 22136"]


def test_la_expands_to_two_tagged_parts():
    units = expand_line("la $t0, L")
    assert units == [
        {"type": "instruction", "text": "la $t0, L", "part": 0},
        {"type": "instruction", "text": "la $t0, L", "part": 1},
    ]


@pytest.mark.parametrize("line, expected", [
    ("blt $t0, $t1, L", ["slt $1, $t0, $t1", "bne $1, $0, L"]),
    ("bgeu $t0, $t1, L", ["sltu $1, $t0, $t1", "beq $1, $0, L"]),
    ("b L", ["beq $0, $0, L"]),
    ("bnez $t0, L", ["bne $t0, $0, L"]),
    ("move $t0, $t1", ["add $t0, $0, $t1"]),
    ("seq $t0, $t1, $t2", ["xor $t0, $t1, $t2", "sltiu $t0, $t0, 1"]),
    ("nop", ["sll $0, $0, 0"]),
])
def test_pseudo_templates(line, expected):
    assert texts(expand_line(line)) == expected


@pytest.mark.parametrize("line", ["add $t0, $t1, $t2", "foo $t0", "move $t0", "li $t0"])
def test_everything_else_passes_through(line):
    assert expand_pseudo(line) == [{"type": "instruction", "text": line}]


def test_space_reserves_power_of_two_bytes():
    assert expand_line(".space 3") == [{"type": "data", "data": bytes(8)}]


def test_align_boundary_is_power_of_two():
    assert expand_line(".align 2") == [{"type": "align", "boundary": 4}]


def test_integer_directives_are_big_endian():
    assert expand_line(".half 1, 2") == [{"type": "data", "data": b"\x00\x01\x00\x02"}]
    assert expand_line(".word 0x01020304") == [{"type": "data", "data": b"\x01\x02\x03\x04"}]


def test_truncation_warns():
    warnings = []
    assert expand_line(".byte 256, 1", warn=warnings.append) == [{"type": "data", "data": b"\x00\x01"}]
    assert warnings == ["256 truncated to 8 bits"]


def test_asciiz_appends_zero():
    assert expand_line('.asciiz "ok"') == [{"type": "data", "data": b"ok\0"}]
    assert expand_line('.ascii "ok"') == [{"type": "data", "data": b"ok"}]


def test_directive_without_body_is_an_instruction():
    assert expand_line(".word") == [{"type": "instruction", "text": ".word"}]


@pytest.mark.parametrize("line", [".space -1", ".space 32", ".align x", ".byte 1, x", '.ascii "open'])
def test_invalid_data(line):
    with pytest.raises(InvalidDataLiteral):
        expand_line(line)


def test_space_and_align_respect_max_size():
    assert expand_line(".space 6", max_size=64) == [{"type": "data", "data": bytes(64)}]
    with pytest.raises(ImageTooLarge):
        expand_line(".space 7", max_size=64)
    with pytest.raises(ImageTooLarge):
        expand_line(".align 31", max_size=1 << 20)
