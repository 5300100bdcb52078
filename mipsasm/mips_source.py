# mipsasm/mips_source.py
import re

STRING_LITERAL = re.compile(r'("(?:[^"\\]|\\.)*")')
LABEL_HEADER = re.compile(r'^([A-Za-z_][\w.]*)\s*:\s*')


def _strip_comment(line):
    """Drops everything from the first '#' that is not inside a string."""
    in_string = False
    escaped = False
    for i, ch in enumerate(line):
        if escaped:
            escaped = False
        elif ch == "\\" and in_string:
            escaped = True
        elif ch == '"':
            in_string = not in_string
        elif ch == "#" and not in_string:
            return line[:i]
    return line


def _canonicalise(line):
    # Quoted strings are left untouched, everything else gets single spaces
    # and ", " between operands.
    parts = STRING_LITERAL.split(line.strip())
    for i in range(0, len(parts), 2):
        part = re.sub(r'\s+', " ", parts[i])
        parts[i] = re.sub(r' ?, ?', ", ", part)
    line = "".join(parts).strip()

    # Canonical label headers: 'name: rest'
    headers = []
    match = LABEL_HEADER.match(line)
    while match:
        headers.append(f"{match.group(1)}:")
        line = line[match.end():]
        match = LABEL_HEADER.match(line)
    return " ".join(headers + [line]) if line else " ".join(headers)


def format_source(source):
    """Normalises raw assembly into a list of (text, line_num) pairs.

    Comments are stripped, whitespace is collapsed and label headers are
    written as 'label: rest'. Blank lines are dropped, line numbers are
    1-based and refer to the original text.
    """
    lines = []
    for line_num, raw in enumerate(source.splitlines(), 1):
        line = _canonicalise(_strip_comment(raw))
        if line:
            lines.append((line, line_num))
    return lines
