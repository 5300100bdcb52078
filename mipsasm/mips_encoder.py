# mipsasm/mips_encoder.py
import re
import logging

from mipsasm.mips_consts import (
    INSTRUCTION_FORMATS, FAMILY_FORMATS, LOAD_ADDRESS, SCRATCH_REGISTER
)
from mipsasm.mips_errors import (
    UnknownInstruction, UnknownLabel, InvalidOffset, InvalidMemoryOperand
)
from mipsasm.mips_expander import split_instruction
from mipsasm.mips_operands import register, integer, is_integer

logger = logging.getLogger(__name__)

LABEL_PATTERN = re.compile(r'^[A-Za-z_][\w.]*$')
MEMORY_OPERAND = re.compile(r'^(-?(?:0x[0-9a-f]+|\d+))?\((\$\w+)\)$', re.IGNORECASE)

SHAMT_BITS = 5


def _log_warning(message):
    logger.warning(message)


def _fit(value, bits, token, warn):
    """Truncates value to a bits-wide field, warning if it does not fit signed or unsigned."""
    if not -(1 << (bits - 1)) <= value < (1 << bits):
        warn(f"{token} truncated to {bits} bits")
    return value & ((1 << bits) - 1)


def resolve_target(token, symbol_table):
    """Resolves a branch/jump/la target: literal first, then label lookup."""
    if is_integer(token):
        return integer(token)
    if token in symbol_table:
        return symbol_table[token]
    if LABEL_PATTERN.match(token):
        raise UnknownLabel(token)
    raise InvalidOffset(token)


def resolve_memory_operand(token, symbol_table):
    """Returns (base register, offset) for 'imm($reg)', '($reg)' or a bare label."""
    match = MEMORY_OPERAND.match(token)
    if match:
        offset_str, base = match.groups()
        return register(base), integer(offset_str) if offset_str else 0
    if token in symbol_table:
        # lw $r, label is resolved as lw $r, label($0)
        return 0, symbol_table[token]
    raise InvalidMemoryOperand(token)


def _select_layout(fmt, operands):
    layouts = fmt.get("layouts") or FAMILY_FORMATS[fmt["family"]]["layouts"]
    for layout in layouts:
        if len(layout) == len(operands) and all(operands):
            return layout
    return None


def _load_address_fields(fields, part):
    # part 0: lui $at, upper ; part 1: ori $rd, $at, lower
    address = fields["imm"] & 0xFFFFFFFF
    if part == 0:
        return {"opcode": INSTRUCTION_FORMATS["lui"]["opcode"], "rs": 0, "rt": SCRATCH_REGISTER,
                "rd": 0, "shamt": 0, "funct": 0, "imm": address >> 16}
    return {"opcode": INSTRUCTION_FORMATS["ori"]["opcode"], "rs": SCRATCH_REGISTER, "rt": fields["rd"],
            "rd": 0, "shamt": 0, "funct": 0, "imm": address & 0xFFFF}


def pack(fields, imm_bits):
    """Packs instruction fields into a 32-bit word, MSB first.

    Unused fields are zero, so the immediate (16, 21 or 26 bits wide) can be
    OR-ed over the register fields it shares bits with.
    """
    word = (fields["opcode"] << 26) | (fields["rs"] << 21) | (fields["rt"] << 16)
    word |= (fields["rd"] << 11) | (fields["shamt"] << 6) | fields["funct"]
    if imm_bits:
        word |= fields["imm"] & ((1 << imm_bits) - 1)
    return word & 0xFFFFFFFF


def encode_instruction(text, symbol_table, part=None, warn=_log_warning):
    """Encodes one real instruction into its 32-bit machine word.

    ``part`` selects the half of a split ``la`` (0 = upper, 1 = lower).
    Raises an AssemblerError subclass on any malformed operand.
    """
    mnemonic, operands = split_instruction(text)
    fmt = INSTRUCTION_FORMATS.get(mnemonic)
    if fmt is None or (fmt["family"] == LOAD_ADDRESS and part not in (0, 1)):
        raise UnknownInstruction(mnemonic, operands)
    layout = _select_layout(fmt, operands)
    if layout is None:
        raise UnknownInstruction(mnemonic, operands)

    family = FAMILY_FORMATS[fmt["family"]]
    imm_bits = fmt.get("imm_bits", family["imm_bits"])
    fields = {
        "opcode": fmt.get("opcode", 0), "rs": fmt.get("rs", 0), "rt": fmt.get("rt", 0),
        "rd": 0, "shamt": 0, "funct": fmt.get("funct", 0), "imm": 0,
    }

    for kind, token in zip(layout, operands):
        if kind in ("rs", "rt", "rd"):
            fields[kind] = register(token)
        elif kind == "shamt":
            fields["shamt"] = _fit(integer(token), SHAMT_BITS, token, warn)
        elif kind == "imm":
            fields["imm"] = _fit(integer(token), imm_bits, token, warn)
        elif kind == "target":
            target = resolve_target(token, symbol_table)
            # la needs the whole 32-bit address, it is split below
            fields["imm"] = target if fmt["family"] == LOAD_ADDRESS else _fit(target, imm_bits, token, warn)
        elif kind == "mem":
            fields["rs"], offset = resolve_memory_operand(token, symbol_table)
            fields["imm"] = _fit(offset, imm_bits, token, warn)

    if fmt["family"] == LOAD_ADDRESS:
        fields = _load_address_fields(fields, part)

    word = pack(fields, imm_bits)
    logger.debug(f"Encoded '{text}' -> 0x{word:08x}")
    return word
