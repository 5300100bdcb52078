# mipsasm/mips_operands.py
import re

from mipsasm.mips_consts import REGISTER_MAP
from mipsasm.mips_errors import InvalidRegister, InvalidLiteral, InvalidStringEscape

INTEGER_PATTERN = re.compile(r'^(-?)(0x[0-9a-f]+|\d+)$', re.IGNORECASE)
ESCAPE_PATTERN = re.compile(r'\\(x[0-9a-fA-F]{2}|.)', re.DOTALL)

ESCAPES = {
    "n": b"\n", "t": b"\t", "r": b"\r", "0": b"\0",
    "\\": b"\\", "\"": b"\"", "'": b"'",
    "a": b"\a", "b": b"\b", "f": b"\f", "v": b"\v",
}


def register(token):
    """Converts register name ($t0, $3, etc.) to its number."""
    reg = token.strip().lower() if token else ""
    if reg not in REGISTER_MAP:
        raise InvalidRegister(token)
    return REGISTER_MAP[reg]


def is_integer(token):
    return bool(token) and INTEGER_PATTERN.match(token.strip()) is not None


def integer(token):
    """Parses a decimal or 0x-prefixed hex literal, with optional leading '-'."""
    match = INTEGER_PATTERN.match(token.strip()) if token else None
    if match is None:
        raise InvalidLiteral(token)
    sign, digits = match.groups()
    value = int(digits, 16) if digits[:2].lower() == "0x" else int(digits, 10)
    return -value if sign else value


def escape(body):
    """Expands backslash escapes in the body of a quoted string into raw bytes."""
    out = bytearray()
    pos = 0
    for match in ESCAPE_PATTERN.finditer(body):
        out.extend(body[pos:match.start()].encode("utf-8"))
        seq = match.group(1)
        if len(seq) == 3:  # \xHH
            out.append(int(seq[1:], 16))
        elif seq in ESCAPES:
            out.extend(ESCAPES[seq])
        else:
            raise InvalidStringEscape(body, f"unrecognised escape sequence '\\{seq}'")
        pos = match.end()
    tail = body[pos:]
    if "\\" in tail:
        raise InvalidStringEscape(body, "dangling backslash")
    out.extend(tail.encode("utf-8"))
    return bytes(out)
