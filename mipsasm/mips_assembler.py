# mipsasm/mips_assembler.py
import re
import logging
from functools import partial

from mipsasm.mips_consts import TEXT_DIRECTIVE, DATA_DIRECTIVE, IGNORED_DIRECTIVE_PREFIXES
from mipsasm.mips_errors import AssemblerError, DuplicateLabel, ImageTooLarge
from mipsasm.mips_expander import expand_line
from mipsasm.mips_encoder import encode_instruction
from mipsasm.mips_source import format_source

logger = logging.getLogger(__name__)

LABEL_HEADER = re.compile(r'^([A-Za-z_][\w.]*):(?: |$)')


def align_up(offset, boundary):
    """Rounds offset up to the next multiple of boundary (no-op if aligned)."""
    return boundary * -(-offset // boundary)


def unit_end(address, unit):
    """Address just past an early unit placed at address."""
    if unit["type"] == "instruction":
        return address + 4
    if unit["type"] == "data":
        return address + len(unit["data"])
    return align_up(address, unit["boundary"])


class MipsAssembler:
    def __init__(self, max_image_size=None):
        self.max_image_size = max_image_size # Bytes; None means unbounded
        self.file_name = None
        self.symbol_table = {}
        self.units = [] # Early units from expansion, in image order
        self.warnings = []

    def _add_warning(self, line_num, message):
        """Records a non-fatal diagnostic (e.g. a truncated literal)."""
        logger.warning(f"{self.file_name}:{line_num}: {message}")
        self.warnings.append({"file": self.file_name, "line": line_num, "message": message})

    def split_segments(self, lines):
        """ Partitions (text, line_num) pairs into text and data segment lines. """
        text, data = [], []
        in_data_segment = False
        for line in lines:
            content = line[0]
            if content.startswith(IGNORED_DIRECTIVE_PREFIXES):
                continue
            if content == DATA_DIRECTIVE:
                in_data_segment = True
            elif content == TEXT_DIRECTIVE:
                in_data_segment = False
            elif in_data_segment:
                data.append(line)
            else:
                text.append(line)
        logger.debug(f"Split into {len(text)} text lines and {len(data)} data lines")
        return text, data

    @staticmethod
    def _split_labels(text):
        labels = []
        match = LABEL_HEADER.match(text)
        while match:
            labels.append(match.group(1))
            text = text[match.end():]
            match = LABEL_HEADER.match(text)
        return labels, text

    def expand_early(self, lines):
        """ Expands pseudo-instructions and data directives into early units.

        Labels on a line go to the first unit it expands to. A line holding
        only labels becomes an empty data unit so the labels bind to the
        address of whatever follows. With ``max_image_size`` set, expansion
        stops with ImageTooLarge as soon as the image would outgrow it.
        """
        units = []
        address = 0
        for text, line_num in lines:
            labels, body = self._split_labels(text)
            if not body:
                expanded = [{"type": "data", "data": b""}]
            else:
                try:
                    expanded = expand_line(body, warn=partial(self._add_warning, line_num),
                                           max_size=self.max_image_size)
                except AssemblerError as e:
                    raise e.at(line_num)
            for i, unit in enumerate(expanded):
                unit["line_num"] = line_num
                unit["labels"] = labels if i == 0 else []
                units.append(unit)
                address = unit_end(address, unit)
            if self.max_image_size is not None and address > self.max_image_size:
                raise ImageTooLarge(self.max_image_size, line_num=line_num)
        return units

    def first_pass(self, units):
        """ Pass 1: Assign addresses and build the symbol table. """
        logger.debug("--- Starting First Pass ---")
        symbol_table = {}
        address = 0
        for unit in units:
            for label in unit["labels"]:
                if label in symbol_table:
                    # Source order; the data segment may come first in the file
                    declared = sorted(u["line_num"] for u in units for name in u["labels"] if name == label)
                    raise DuplicateLabel(label, declared, line_num=declared[1])
                symbol_table[label] = address
                logger.debug(f"Pass 1: Label '{label}' defined at address 0x{address:08x}")

            address = unit_end(address, unit)
        logger.debug(f"--- First Pass Complete ({address} bytes) ---")
        return symbol_table

    def second_pass(self, units, symbol_table):
        """ Pass 2: Encode every unit, in the same order as pass 1, into the image. """
        logger.debug("--- Starting Second Pass ---")
        image = bytearray()
        for unit in units:
            if unit["type"] == "align":
                padding = align_up(len(image), unit["boundary"]) - len(image)
                image.extend(bytes(padding))
            elif unit["type"] == "data":
                image.extend(unit["data"])
            else:
                line_num = unit["line_num"]
                try:
                    word = encode_instruction(unit["text"], symbol_table, part=unit.get("part"),
                                              warn=partial(self._add_warning, line_num))
                except AssemblerError as e:
                    raise e.at(line_num)
                image.extend(word.to_bytes(4, byteorder="big"))
        logger.debug(f"--- Second Pass Complete ({len(image)} bytes) ---")
        return bytes(image)

    def assemble_lines(self, lines, file_name="<input>"):
        """ Assembles normalised (text, line_num) pairs of one file.

        Returns (binary, file_name). Raises AssemblerError with the file name
        and line number attached; nothing is produced for a failing file.
        """
        self.file_name = file_name
        self.symbol_table = {}
        self.units = []
        self.warnings = []
        try:
            text, data = self.split_segments(lines)
            self.units = self.expand_early(text + data)
            self.symbol_table = self.first_pass(self.units)
            binary = self.second_pass(self.units, self.symbol_table)
        except AssemblerError as e:
            raise e.at(file_name=file_name)
        return binary, file_name

    def assemble(self, assembly_code, file_name="<input>"):
        """ Main method to assemble MIPS code. """
        logger.info(f"Starting assembly of {file_name}...")
        binary = b""
        errors = []
        try:
            binary, _ = self.assemble_lines(format_source(assembly_code), file_name)
        except AssemblerError as e:
            logger.warning(f"Assembly failed: {e}")
            errors.append(e.to_dict())
        else:
            logger.info(f"Assembly successful. Image size: {len(binary)} bytes")

        return {
            "binary": binary,
            "hex": binary.hex(),
            "symbol_table": dict(self.symbol_table) if not errors else {},
            "errors": errors,
            "warnings": list(self.warnings),
        }
