# mipsasm/mips_consts.py

# MIPS Register Map (Name to Number)
REGISTER_MAP = {
    "$zero": 0, "$0": 0,
    "$at": 1, "$1": 1,
    "$v0": 2, "$2": 2,
    "$v1": 3, "$3": 3,
    "$a0": 4, "$4": 4,
    "$a1": 5, "$5": 5,
    "$a2": 6, "$6": 6,
    "$a3": 7, "$7": 7,
    "$t0": 8, "$8": 8,
    "$t1": 9, "$9": 9,
    "$t2": 10, "$10": 10,
    "$t3": 11, "$11": 11,
    "$t4": 12, "$12": 12,
    "$t5": 13, "$13": 13,
    "$t6": 14, "$14": 14,
    "$t7": 15, "$15": 15,
    "$s0": 16, "$16": 16,
    "$s1": 17, "$17": 17,
    "$s2": 18, "$18": 18,
    "$s3": 19, "$19": 19,
    "$s4": 20, "$20": 20,
    "$s5": 21, "$21": 21,
    "$s6": 22, "$22": 22,
    "$s7": 23, "$23": 23,
    "$t8": 24, "$24": 24,
    "$t9": 25, "$25": 25,
    "$k0": 26, "$26": 26,
    "$k1": 27, "$27": 27,
    "$gp": 28, "$28": 28,
    "$sp": 29, "$29": 29,
    "$fp": 30, "$30": 30,
    "$ra": 31, "$31": 31,
}

# --- Instruction Families ---
R_SHIFT = "r_shift"
R_SHIFT_VAR = "r_shift_var"
R_ARITH = "r_arith"
R_JUMP_REG = "r_jump_reg"
R_MOVE_FROM = "r_move_from"
R_MOVE_TO = "r_move_to"
R_MULDIV = "r_muldiv"
R_SYSTEM = "r_system"
I_BRANCH_ZERO = "i_branch_zero"
I_BRANCH = "i_branch"
JUMP = "jump"
I_ARITH = "i_arith"
I_LUI = "i_lui"
COPROC = "coproc"
I_MEM = "i_mem"
LOAD_ADDRESS = "load_address"

# Operand layouts per family, in source order. A family may accept more than
# one layout; the encoder picks the one matching the operand count.
# imm_bits is the width of the low immediate/offset/address field (0 = none).
FAMILY_FORMATS = {
    R_SHIFT:       {"layouts": (("rd", "rt", "shamt"),), "imm_bits": 0},
    R_SHIFT_VAR:   {"layouts": (("rd", "rt", "rs"),), "imm_bits": 0},
    R_ARITH:       {"layouts": (("rd", "rs", "rt"),), "imm_bits": 0},
    R_JUMP_REG:    {"layouts": (("rs",),), "imm_bits": 0},
    R_MOVE_FROM:   {"layouts": (("rd",),), "imm_bits": 0},
    R_MOVE_TO:     {"layouts": (("rs",),), "imm_bits": 0},
    R_MULDIV:      {"layouts": (("rs", "rt"),), "imm_bits": 0},
    R_SYSTEM:      {"layouts": ((),), "imm_bits": 0},
    I_BRANCH_ZERO: {"layouts": (("rs", "target"),), "imm_bits": 16},
    I_BRANCH:      {"layouts": (("rs", "rt", "target"),), "imm_bits": 16},
    JUMP:          {"layouts": (("target",),), "imm_bits": 26},
    I_ARITH:       {"layouts": (("rt", "rs", "imm"),), "imm_bits": 16},
    I_LUI:         {"layouts": (("rt", "imm"),), "imm_bits": 16},
    COPROC:        {"layouts": (("rt", "rd"),), "imm_bits": 0},
    I_MEM:         {"layouts": (("rt", "mem"),), "imm_bits": 16},
    LOAD_ADDRESS:  {"layouts": (("rd", "target"),), "imm_bits": 16},
}

# --- Instruction Format Table ---
# mnemonic -> family plus the fixed fields it contributes (opcode, funct, and
# the rs/rt selector fields of REGIMM and coprocessor moves).
INSTRUCTION_FORMATS = {
    # opcode 0, rd, rt, shamt
    "sll": {"family": R_SHIFT, "funct": 0x00},
    "srl": {"family": R_SHIFT, "funct": 0x02},
    "sra": {"family": R_SHIFT, "funct": 0x03},
    # opcode 0, rd, rt, rs
    "sllv": {"family": R_SHIFT_VAR, "funct": 0x04},
    "srlv": {"family": R_SHIFT_VAR, "funct": 0x06},
    "srav": {"family": R_SHIFT_VAR, "funct": 0x07},
    # opcode 0, rs (jalr optionally rd, rs)
    "jr": {"family": R_JUMP_REG, "funct": 0x08},
    "jalr": {"family": R_JUMP_REG, "funct": 0x09, "layouts": (("rs",), ("rd", "rs"))},
    "syscall": {"family": R_SYSTEM, "funct": 0x0c},
    "break": {"family": R_SYSTEM, "funct": 0x0d},
    "mfhi": {"family": R_MOVE_FROM, "funct": 0x10},
    "mthi": {"family": R_MOVE_TO, "funct": 0x11},
    "mflo": {"family": R_MOVE_FROM, "funct": 0x12},
    "mtlo": {"family": R_MOVE_TO, "funct": 0x13},
    "mult": {"family": R_MULDIV, "funct": 0x18},
    "multu": {"family": R_MULDIV, "funct": 0x19},
    "div": {"family": R_MULDIV, "funct": 0x1a},
    "divu": {"family": R_MULDIV, "funct": 0x1b},
    # opcode 0, rd, rs, rt
    "add": {"family": R_ARITH, "funct": 0x20},
    "addu": {"family": R_ARITH, "funct": 0x21},
    "sub": {"family": R_ARITH, "funct": 0x22},
    "subu": {"family": R_ARITH, "funct": 0x23},
    "and": {"family": R_ARITH, "funct": 0x24},
    "or": {"family": R_ARITH, "funct": 0x25},
    "xor": {"family": R_ARITH, "funct": 0x26},
    "nor": {"family": R_ARITH, "funct": 0x27},
    "slt": {"family": R_ARITH, "funct": 0x2a},
    "sltu": {"family": R_ARITH, "funct": 0x2b},
    # REGIMM (opcode 0x1) uses the rt field to select the variant
    "bltz": {"family": I_BRANCH_ZERO, "opcode": 0x1, "imm_bits": 21},
    "bgez": {"family": I_BRANCH_ZERO, "opcode": 0x1, "rt": 0x01},
    "bltzal": {"family": I_BRANCH_ZERO, "opcode": 0x1, "rt": 0x10},
    "bgezal": {"family": I_BRANCH_ZERO, "opcode": 0x1, "rt": 0x11},
    "blez": {"family": I_BRANCH_ZERO, "opcode": 0x6, "imm_bits": 21},
    "bgtz": {"family": I_BRANCH_ZERO, "opcode": 0x7, "imm_bits": 21},
    "beq": {"family": I_BRANCH, "opcode": 0x4},
    "bne": {"family": I_BRANCH, "opcode": 0x5},
    "j": {"family": JUMP, "opcode": 0x2},
    "jal": {"family": JUMP, "opcode": 0x3},
    # rt, rs, imm
    "addi": {"family": I_ARITH, "opcode": 0x8},
    "addiu": {"family": I_ARITH, "opcode": 0x9},
    "slti": {"family": I_ARITH, "opcode": 0xa},
    "sltiu": {"family": I_ARITH, "opcode": 0xb},
    "andi": {"family": I_ARITH, "opcode": 0xc},
    "ori": {"family": I_ARITH, "opcode": 0xd},
    "xori": {"family": I_ARITH, "opcode": 0xe},
    "lui": {"family": I_LUI, "opcode": 0xf},
    # opcode 0x10, rs selects the move direction
    "mfc0": {"family": COPROC, "opcode": 0x10, "rs": 0x0},
    "mtc0": {"family": COPROC, "opcode": 0x10, "rs": 0x4},
    # rt, imm(rs) or rt, label
    "lb": {"family": I_MEM, "opcode": 0x20},
    "lh": {"family": I_MEM, "opcode": 0x21},
    "lw": {"family": I_MEM, "opcode": 0x23},
    "lbu": {"family": I_MEM, "opcode": 0x24},
    "lhu": {"family": I_MEM, "opcode": 0x25},
    "sb": {"family": I_MEM, "opcode": 0x28},
    "sh": {"family": I_MEM, "opcode": 0x29},
    "sw": {"family": I_MEM, "opcode": 0x2b},
    # la is split into two parts during expansion and resolved here
    "la": {"family": LOAD_ADDRESS},
}

# Scratch register used by pseudo-instruction expansions ($at)
SCRATCH_REGISTER = 1

# --- Pseudo Instructions ---
# mnemonic -> (operand count, expansion templates). Operands are substituted
# positionally; li and la are computed by the expander instead.
PSEUDO_TEMPLATES = {
    "move": (2, ["add {0}, $0, {1}"]),
    "clear": (1, ["lui {0}, 0"]),
    "nop": (0, ["sll $0, $0, 0"]),
    "neg": (2, ["sub {0}, $0, {1}"]),
    "not": (2, ["nor {0}, {1}, $0"]),
    "abs": (2, ["addu {0}, {1}, $0", "bgez {1}, 8", "sub {0}, $0, {1}"]),
    "b": (1, ["beq $0, $0, {0}"]),
    "beqz": (2, ["beq {0}, $0, {1}"]),
    "bnez": (2, ["bne {0}, $0, {1}"]),
    "blt": (3, ["slt $1, {0}, {1}", "bne $1, $0, {2}"]),
    "bgt": (3, ["slt $1, {1}, {0}", "bne $1, $0, {2}"]),
    "bge": (3, ["slt $1, {0}, {1}", "beq $1, $0, {2}"]),
    "ble": (3, ["slt $1, {1}, {0}", "beq $1, $0, {2}"]),
    "bltu": (3, ["sltu $1, {0}, {1}", "bne $1, $0, {2}"]),
    "bgtu": (3, ["sltu $1, {1}, {0}", "bne $1, $0, {2}"]),
    "bgeu": (3, ["sltu $1, {0}, {1}", "beq $1, $0, {2}"]),
    "bleu": (3, ["sltu $1, {1}, {0}", "beq $1, $0, {2}"]),
    "sgt": (3, ["slt {0}, {2}, {1}"]),
    "sge": (3, ["slt {0}, {1}, {2}", "xori {0}, {0}, 1"]),
    "sle": (3, ["slt {0}, {2}, {1}", "xori {0}, {0}, 1"]),
    "sgtu": (3, ["sltu {0}, {2}, {1}"]),
    "sgeu": (3, ["sltu {0}, {1}, {2}", "xori {0}, {0}, 1"]),
    "sleu": (3, ["sltu {0}, {2}, {1}", "xori {0}, {0}, 1"]),
    "seq": (3, ["xor {0}, {1}, {2}", "sltiu {0}, {0}, 1"]),
    "sne": (3, ["xor {0}, {1}, {2}", "sltu {0}, $0, {0}"]),
}

# --- Directives ---
DATA_DIRECTIVES = {".ascii", ".asciiz", ".byte", ".half", ".word", ".space", ".align"}
TEXT_DIRECTIVE = ".text"
DATA_DIRECTIVE = ".data"
IGNORED_DIRECTIVE_PREFIXES = (".globl ", ".global ")

# Width in bits of each integer data directive
DATA_FIELD_BITS = {".byte": 8, ".half": 16, ".word": 32}

# --- Batch Defaults ---
DEFAULT_INPUT_DIR = "0-assembly"
DEFAULT_OUTPUT_DIR = "1-hex"
SOURCE_EXTENSIONS = (".asm", ".s")
OUTPUT_EXTENSION = ".hex"
