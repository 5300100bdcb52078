# mipsasm/mips_expander.py
import re
import logging

from mipsasm.mips_consts import PSEUDO_TEMPLATES, DATA_DIRECTIVES, DATA_FIELD_BITS
from mipsasm.mips_errors import InvalidDataLiteral, ImageTooLarge
from mipsasm.mips_operands import integer, is_integer, escape

logger = logging.getLogger(__name__)

DATA_DIRECTIVE_PATTERN = re.compile(r'^(\.[a-z]+) (.+)$')
QUOTED_STRING = re.compile(r'^"((?:[^"\\]|\\.)*)"$', re.DOTALL)

# .space/.align exponents beyond this would describe more than the 32-bit address space
MAX_EXPONENT = 31


def _log_warning(message):
    logger.warning(message)


def split_instruction(text):
    """Splits 'mnemonic a, b, c' into the lower-cased mnemonic and its operands."""
    parts = text.strip().split(" ", 1)
    mnemonic = parts[0].lower()
    operands = []
    if len(parts) > 1:
        operands = [op.strip() for op in parts[1].split(",")]
    return mnemonic, operands


def instruction_unit(text, part=None):
    unit = {"type": "instruction", "text": text}
    if part is not None:
        unit["part"] = part
    return unit


# --- Data directives ---

def _expand_string(directive, body):
    match = QUOTED_STRING.match(body)
    if match is None:
        raise InvalidDataLiteral(f"'{body}' is not a valid string. Reason: Quote syntax incorrect.")
    data = escape(match.group(1))
    if directive == ".asciiz":
        data += b"\0"
    return data


def _expand_integers(directive, body, warn):
    bits = DATA_FIELD_BITS[directive]
    limit = 1 << bits
    data = bytearray()
    for token in body.split(","):
        token = token.strip()
        if not is_integer(token):
            raise InvalidDataLiteral(f"Invalid {directive[1:]} literal: {token}")
        value = integer(token)
        if not 0 <= value < limit:
            warn(f"{token} truncated to {bits} bits")
            value &= limit - 1
        data.extend(value.to_bytes(bits // 8, byteorder="big"))
    return bytes(data)


def _power_of_two(body, max_size=None):
    if not is_integer(body) or not 0 <= integer(body) <= MAX_EXPONENT:
        raise InvalidDataLiteral(f"Invalid integer literal: {body}")
    size = 1 << integer(body)
    if max_size is not None and size > max_size:
        raise ImageTooLarge(max_size)
    return size


def expand_data(directive, body, warn=_log_warning, max_size=None):
    """Resolves one data directive into a data or align unit.

    ``max_size`` bounds a single .space/.align before anything is allocated.
    """
    if directive in (".ascii", ".asciiz"):
        return {"type": "data", "data": _expand_string(directive, body)}
    if directive in DATA_FIELD_BITS:
        return {"type": "data", "data": _expand_integers(directive, body, warn)}
    if directive == ".space":
        return {"type": "data", "data": bytes(_power_of_two(body, max_size))}
    return {"type": "align", "boundary": _power_of_two(body, max_size)}


# --- Pseudo instructions ---

def _expand_li(operands):
    # li $dst, imm -> lui $at, upper; ori $dst, $at, lower
    dst, imm_str = operands
    value = integer(imm_str) & 0xFFFFFFFF
    upper = value >> 16
    lower = value & 0xFFFF
    return [instruction_unit(f"lui $at, {upper}"), instruction_unit(f"ori {dst}, $at, {lower}")]


def _expand_la(operands):
    # la $dst, label -> both halves depend on the label address, known after pass 1
    dst, label = operands
    text = f"la {dst}, {label}"
    return [instruction_unit(text, part=0), instruction_unit(text, part=1)]


COMPUTED_PSEUDOS = {"li": (2, _expand_li), "la": (2, _expand_la)}


def expand_pseudo(text):
    """Expands a pseudo-instruction into real instruction units.

    Anything that is not a known pseudo-instruction with the right operand
    count is passed through as a single unit and left for the encoder to
    accept or reject.
    """
    mnemonic, operands = split_instruction(text)
    if mnemonic in COMPUTED_PSEUDOS:
        count, handler = COMPUTED_PSEUDOS[mnemonic]
        if len(operands) == count:
            return handler(operands)
    elif mnemonic in PSEUDO_TEMPLATES:
        count, templates = PSEUDO_TEMPLATES[mnemonic]
        if len(operands) == count and all(operands):
            return [instruction_unit(t.format(*operands)) for t in templates]
    return [instruction_unit(text)]


def expand_line(text, warn=_log_warning, max_size=None):
    """Resolves a line whose memory footprint may differ from one word.

    Returns a list of early units: a single data/align unit for data
    directives, otherwise one or more instruction units.
    """
    match = DATA_DIRECTIVE_PATTERN.match(text)
    if match and match.group(1) in DATA_DIRECTIVES:
        return [expand_data(match.group(1), match.group(2), warn, max_size)]
    return expand_pseudo(text)
