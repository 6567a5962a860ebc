"""
CHIP-8 Instruction Decoding
===========================

Turns a 16-bit instruction word into an Instruction: the operation as a
member of the closed Op enumeration plus the five operand fields.

Operand fields are extracted the same way for every instruction form:

    word   = 0xDXYN
    nnn    = word & 0x0FFF   12-bit address
    nn     = word & 0x00FF   8-bit immediate
    n      = word & 0x000F   4-bit immediate
    x      = (word >> 8) & 0xF   first register index
    y      = (word >> 4) & 0xF   second register index

Decoding matches on the top nibble first. Four families are decoded
further: 0x0 and 0xE/0xF on the low byte, 0x8 on the low nibble.
Words that match nothing decode to Op.UNKNOWN; the CPU reports them as
diagnostics and moves on.
"""

from dataclasses import dataclass, field
from enum import Enum, auto


class Op(Enum):
    """
    Every operation of the base CHIP-8 instruction set.
    """
    SYS = auto()        # 0NNN  machine code call (ignored)
    CLS = auto()        # 00E0
    RET = auto()        # 00EE
    JP = auto()         # 1NNN
    CALL = auto()       # 2NNN
    SE_VX_NN = auto()   # 3XNN
    SNE_VX_NN = auto()  # 4XNN
    SE_VX_VY = auto()   # 5XY0
    LD_VX_NN = auto()   # 6XNN
    ADD_VX_NN = auto()  # 7XNN
    LD_VX_VY = auto()   # 8XY0
    OR = auto()         # 8XY1
    AND = auto()        # 8XY2
    XOR = auto()        # 8XY3
    ADD_VX_VY = auto()  # 8XY4
    SUB = auto()        # 8XY5
    SHR = auto()        # 8XY6
    SUBN = auto()       # 8XY7
    SHL = auto()        # 8XYE
    SNE_VX_VY = auto()  # 9XY0
    LD_I = auto()       # ANNN
    JP_V0 = auto()      # BNNN
    RND = auto()        # CXNN
    DRW = auto()        # DXYN
    SKP = auto()        # EX9E
    SKNP = auto()       # EXA1
    LD_VX_DT = auto()   # FX07
    LD_VX_K = auto()    # FX0A
    LD_DT_VX = auto()   # FX15
    LD_ST_VX = auto()   # FX18
    ADD_I_VX = auto()   # FX1E
    LD_F_VX = auto()    # FX29
    LD_B_VX = auto()    # FX33
    LD_I_VX = auto()    # FX55
    LD_VX_I = auto()    # FX65
    UNKNOWN = auto()


# Mnemonic and operand layout of each operation, used to render trace lines
_FORMATS: dict[Op, tuple[str, str]] = {
    Op.SYS: ("SYS", "${nnn:03X}"),
    Op.CLS: ("CLS", ""),
    Op.RET: ("RET", ""),
    Op.JP: ("JP", "${nnn:03X}"),
    Op.CALL: ("CALL", "${nnn:03X}"),
    Op.SE_VX_NN: ("SE", "V{x:X}, #${nn:02X}"),
    Op.SNE_VX_NN: ("SNE", "V{x:X}, #${nn:02X}"),
    Op.SE_VX_VY: ("SE", "V{x:X}, V{y:X}"),
    Op.LD_VX_NN: ("LD", "V{x:X}, #${nn:02X}"),
    Op.ADD_VX_NN: ("ADD", "V{x:X}, #${nn:02X}"),
    Op.LD_VX_VY: ("LD", "V{x:X}, V{y:X}"),
    Op.OR: ("OR", "V{x:X}, V{y:X}"),
    Op.AND: ("AND", "V{x:X}, V{y:X}"),
    Op.XOR: ("XOR", "V{x:X}, V{y:X}"),
    Op.ADD_VX_VY: ("ADD", "V{x:X}, V{y:X}"),
    Op.SUB: ("SUB", "V{x:X}, V{y:X}"),
    Op.SHR: ("SHR", "V{x:X}"),
    Op.SUBN: ("SUBN", "V{x:X}, V{y:X}"),
    Op.SHL: ("SHL", "V{x:X}"),
    Op.SNE_VX_VY: ("SNE", "V{x:X}, V{y:X}"),
    Op.LD_I: ("LD", "I, ${nnn:03X}"),
    Op.JP_V0: ("JP", "V0, ${nnn:03X}"),
    Op.RND: ("RND", "V{x:X}, #${nn:02X}"),
    Op.DRW: ("DRW", "V{x:X}, V{y:X}, {n}"),
    Op.SKP: ("SKP", "V{x:X}"),
    Op.SKNP: ("SKNP", "V{x:X}"),
    Op.LD_VX_DT: ("LD", "V{x:X}, DT"),
    Op.LD_VX_K: ("LD", "V{x:X}, K"),
    Op.LD_DT_VX: ("LD", "DT, V{x:X}"),
    Op.LD_ST_VX: ("LD", "ST, V{x:X}"),
    Op.ADD_I_VX: ("ADD", "I, V{x:X}"),
    Op.LD_F_VX: ("LD", "F, V{x:X}"),
    Op.LD_B_VX: ("LD", "B, V{x:X}"),
    Op.LD_I_VX: ("LD", "[I], V{x:X}"),
    Op.LD_VX_I: ("LD", "V{x:X}, [I]"),
    Op.UNKNOWN: ("???", "${word:04X}"),
}


@dataclass(frozen=True)
class Instruction:
    """
    A decoded instruction word.

    Attributes:
        word: The raw 16-bit instruction word
        op: The decoded operation
        nnn: 12-bit address operand
        nn: 8-bit immediate operand
        n: 4-bit immediate operand
        x: First register index
        y: Second register index
    """
    word: int
    op: Op
    nnn: int = field(init=False)
    nn: int = field(init=False)
    n: int = field(init=False)
    x: int = field(init=False)
    y: int = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "nnn", self.word & 0x0FFF)
        object.__setattr__(self, "nn", self.word & 0x00FF)
        object.__setattr__(self, "n", self.word & 0x000F)
        object.__setattr__(self, "x", (self.word >> 8) & 0xF)
        object.__setattr__(self, "y", (self.word >> 4) & 0xF)

    def __str__(self) -> str:
        """Format as '$WORD  MNEMONIC operands' for trace output."""
        mnemonic, layout = _FORMATS[self.op]
        operands = layout.format(
            word=self.word, nnn=self.nnn, nn=self.nn, n=self.n, x=self.x, y=self.y
        )
        text = f"${self.word:04X}  {mnemonic}"
        return f"{text} {operands}" if operands else text


def decode(word: int) -> Instruction:
    """
    Decode one instruction word.

    Args:
        word: 16-bit instruction word (big-endian pair from memory)

    Returns:
        Decoded Instruction; op is Op.UNKNOWN for unrecognized words
    """
    word &= 0xFFFF
    nn = word & 0x00FF
    n = word & 0x000F

    match word >> 12:
        case 0x0:
            match nn:
                case 0xE0:
                    op = Op.CLS
                case 0xEE:
                    op = Op.RET
                case _:
                    op = Op.SYS
        case 0x1:
            op = Op.JP
        case 0x2:
            op = Op.CALL
        case 0x3:
            op = Op.SE_VX_NN
        case 0x4:
            op = Op.SNE_VX_NN
        case 0x5:
            op = Op.SE_VX_VY if n == 0 else Op.UNKNOWN
        case 0x6:
            op = Op.LD_VX_NN
        case 0x7:
            op = Op.ADD_VX_NN
        case 0x8:
            match n:
                case 0x0:
                    op = Op.LD_VX_VY
                case 0x1:
                    op = Op.OR
                case 0x2:
                    op = Op.AND
                case 0x3:
                    op = Op.XOR
                case 0x4:
                    op = Op.ADD_VX_VY
                case 0x5:
                    op = Op.SUB
                case 0x6:
                    op = Op.SHR
                case 0x7:
                    op = Op.SUBN
                case 0xE:
                    op = Op.SHL
                case _:
                    op = Op.UNKNOWN
        case 0x9:
            op = Op.SNE_VX_VY if n == 0 else Op.UNKNOWN
        case 0xA:
            op = Op.LD_I
        case 0xB:
            op = Op.JP_V0
        case 0xC:
            op = Op.RND
        case 0xD:
            op = Op.DRW
        case 0xE:
            match nn:
                case 0x9E:
                    op = Op.SKP
                case 0xA1:
                    op = Op.SKNP
                case _:
                    op = Op.UNKNOWN
        case 0xF:
            match nn:
                case 0x07:
                    op = Op.LD_VX_DT
                case 0x0A:
                    op = Op.LD_VX_K
                case 0x15:
                    op = Op.LD_DT_VX
                case 0x18:
                    op = Op.LD_ST_VX
                case 0x1E:
                    op = Op.ADD_I_VX
                case 0x29:
                    op = Op.LD_F_VX
                case 0x33:
                    op = Op.LD_B_VX
                case 0x55:
                    op = Op.LD_I_VX
                case 0x65:
                    op = Op.LD_VX_I
                case _:
                    op = Op.UNKNOWN
        case _:
            op = Op.UNKNOWN

    return Instruction(word, op)
