# mipsasm/mips_errors.py


class AssemblerError(Exception):
    """Base class for every error that stops a file from assembling.

    Low-level helpers raise without any location; the assembler fills in the
    line number and file name as the error passes through it (see ``at``).
    """

    def __init__(self, message, line_num=None, file_name=None):
        super().__init__(message)
        self.message = message
        self.line_num = line_num
        self.file_name = file_name

    def at(self, line_num=None, file_name=None):
        """Attaches location info that is not already set, returns self."""
        if self.line_num is None:
            self.line_num = line_num
        if self.file_name is None:
            self.file_name = file_name
        return self

    def to_dict(self):
        return {"file": self.file_name, "line": self.line_num, "message": self.message}

    def __str__(self):
        location = ""
        if self.file_name is not None:
            location = f"{self.file_name}:"
        if self.line_num is not None:
            location += f"{self.line_num}:"
        return f"{location} {self.message}" if location else self.message


class DuplicateLabel(AssemblerError):
    def __init__(self, label, line_nums, **kwargs):
        lines = ", ".join(str(n) for n in line_nums)
        super().__init__(f"Label '{label}' declared multiple times on lines: {lines}", **kwargs)
        self.label = label
        self.line_nums = list(line_nums)


class UnknownLabel(AssemblerError):
    def __init__(self, label, **kwargs):
        super().__init__(f"Label '{label}' was not found.", **kwargs)
        self.label = label


class InvalidRegister(AssemblerError):
    def __init__(self, token, **kwargs):
        super().__init__(f"Invalid register name: '{token}'", **kwargs)
        self.token = token


class InvalidLiteral(AssemblerError):
    def __init__(self, token, **kwargs):
        super().__init__(f"Invalid integer literal: '{token}'", **kwargs)
        self.token = token


class InvalidOffset(AssemblerError):
    def __init__(self, token, **kwargs):
        super().__init__(f"Invalid offset '{token}'. Offsets should be a valid label or integer.", **kwargs)
        self.token = token


class InvalidMemoryOperand(AssemblerError):
    def __init__(self, token, **kwargs):
        super().__init__(
            f"Invalid memory operand '{token}'. Expected 'offset($reg)', '($reg)' or a defined label.", **kwargs
        )
        self.token = token


class UnknownInstruction(AssemblerError):
    def __init__(self, mnemonic, operands, **kwargs):
        text = f"{mnemonic} {', '.join(operands)}".strip()
        super().__init__(f"Invalid instruction: '{text}'", **kwargs)
        self.mnemonic = mnemonic
        self.operands = list(operands)


class InvalidDataLiteral(AssemblerError):
    """Malformed body of a data directive (.byte, .ascii, .space, ...)."""


class InvalidStringEscape(AssemblerError):
    def __init__(self, body, reason, **kwargs):
        super().__init__(f"\"{body}\" is not a valid string. Reason: {reason}.", **kwargs)
        self.body = body
        self.reason = reason


class ImageTooLarge(AssemblerError):
    def __init__(self, limit, **kwargs):
        super().__init__(f"Image exceeds the maximum size of {limit} bytes.", **kwargs)
        self.limit = limit
