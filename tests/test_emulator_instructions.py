"""
Instruction Decoding Unit Tests
===============================

Tests for decoding instruction words into Op members and operand
fields, and for the trace text of decoded instructions.
"""

import pytest

from chip8_emu.emulator import Instruction, Op, decode


# =============================================================================
# Operand Field Tests
# =============================================================================

class TestOperandFields:
    """Test operand extraction."""

    def test_fields(self):
        """All operand fields are extracted from the word."""
        instruction = decode(0xD123)
        assert instruction.word == 0xD123
        assert instruction.nnn == 0x123
        assert instruction.nn == 0x23
        assert instruction.n == 0x3
        assert instruction.x == 0x1
        assert instruction.y == 0x2

    def test_frozen(self):
        """Decoded instructions are immutable."""
        instruction = decode(0x6000)
        with pytest.raises(AttributeError):
            instruction.x = 5

    def test_equality(self):
        """Decoding the same word twice gives equal instructions."""
        assert decode(0x7A01) == decode(0x7A01)


# =============================================================================
# Decode Tests
# =============================================================================

class TestDecode:
    """Test the opcode table."""

    @pytest.mark.parametrize("word, op", [
        (0x0123, Op.SYS),
        (0x00E0, Op.CLS),
        (0x00EE, Op.RET),
        (0x1234, Op.JP),
        (0x2345, Op.CALL),
        (0x3A12, Op.SE_VX_NN),
        (0x4A12, Op.SNE_VX_NN),
        (0x5AB0, Op.SE_VX_VY),
        (0x6A12, Op.LD_VX_NN),
        (0x7A12, Op.ADD_VX_NN),
        (0x8AB0, Op.LD_VX_VY),
        (0x8AB1, Op.OR),
        (0x8AB2, Op.AND),
        (0x8AB3, Op.XOR),
        (0x8AB4, Op.ADD_VX_VY),
        (0x8AB5, Op.SUB),
        (0x8AB6, Op.SHR),
        (0x8AB7, Op.SUBN),
        (0x8ABE, Op.SHL),
        (0x9AB0, Op.SNE_VX_VY),
        (0xA123, Op.LD_I),
        (0xB123, Op.JP_V0),
        (0xCA12, Op.RND),
        (0xDAB5, Op.DRW),
        (0xEA9E, Op.SKP),
        (0xEAA1, Op.SKNP),
        (0xFA07, Op.LD_VX_DT),
        (0xFA0A, Op.LD_VX_K),
        (0xFA15, Op.LD_DT_VX),
        (0xFA18, Op.LD_ST_VX),
        (0xFA1E, Op.ADD_I_VX),
        (0xFA29, Op.LD_F_VX),
        (0xFA33, Op.LD_B_VX),
        (0xFA55, Op.LD_I_VX),
        (0xFA65, Op.LD_VX_I),
    ])
    def test_known(self, word, op):
        """Each instruction form decodes to its operation."""
        assert decode(word).op == op

    @pytest.mark.parametrize("word", [
        0x5AB1, 0x9ABF,                  # 5XY0/9XY0 with N != 0
        0x8AB8, 0x8ABD, 0x8ABF,          # unused ALU sub-opcodes
        0xEA00, 0xEA9F,                  # unused key sub-opcodes
        0xFA00, 0xFA08, 0xFA30, 0xFAFF,  # unused F sub-opcodes
    ])
    def test_unknown(self, word):
        """Unused words decode to UNKNOWN."""
        assert decode(word).op == Op.UNKNOWN

    def test_masks_to_16_bits(self):
        """Words wider than 16 bits are masked."""
        assert decode(0x100E0).op == Op.CLS

    def test_every_word_decodes(self):
        """Decoding is total over all 16-bit words."""
        for word in range(0x10000):
            assert isinstance(decode(word), Instruction)


# =============================================================================
# Trace Text Tests
# =============================================================================

class TestTraceText:
    """Test str() of decoded instructions."""

    @pytest.mark.parametrize("word, text", [
        (0x00E0, "$00E0  CLS"),
        (0x1234, "$1234  JP $234"),
        (0x6A2B, "$6A2B  LD VA, #$2B"),
        (0xD125, "$D125  DRW V1, V2, 5"),
        (0xF355, "$F355  LD [I], V3"),
        (0x5121, "$5121  ??? $5121"),
    ])
    def test_format(self, word, text):
        """Trace lines show the word, mnemonic and operands."""
        assert str(decode(word)) == text
