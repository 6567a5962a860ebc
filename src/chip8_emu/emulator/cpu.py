"""
CHIP-8 CPU Emulator
===================

Fetch-decode-execute engine for the base CHIP-8 instruction set.

Registers:
- V0-VF: 8-bit general purpose (VF doubles as carry/borrow/collision flag)
- I: 16-bit index register
- PC: 16-bit program counter, starts at $200

The CPU owns every other piece of machine state (memory, call stack,
framebuffer, keypad, timers, entropy source, diagnostic log) as one
aggregate. A session builds exactly one Chip8CPU and drives it with
step() and tick().

Execution model:
1. If the keypad latch is awaiting a key (FX0A), step() does nothing
2. Fetch the big-endian word at PC; PC += 2 before anything else
3. Decode into an Instruction (see instructions.py)
4. Execute; jumps, calls, returns and skips overwrite PC again

Stack overflow/underflow and fetching past the end of memory raise
MachineFault subclasses. Unknown opcodes, invalid key indices and
out-of-bounds block transfers are recorded in the diagnostic log and
execution continues.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from ..errors import FetchOutOfBoundsError
from .constants import (
    FLAG_REGISTER,
    FONT_GLYPH_SIZE,
    MAX_KEY,
    MEMORY_SIZE,
    NUM_REGISTERS,
    PROGRAM_START,
)
from .diagnostics import DiagnosticEvent, DiagnosticKind, DiagnosticLog
from .display import Framebuffer
from .entropy import EntropySource
from .instructions import Instruction, Op, decode
from .keyboard import Keypad
from .memory import LoadResult, Memory
from .stack import CallStack
from .timers import Timers

logger = logging.getLogger(__name__)


@dataclass
class CPUState:
    """
    Architecturally visible register state.

    - v: 16 registers, 8-bit unsigned (0-255)
    - i: 16-bit index register
    - pc: 16-bit program counter
    """
    v: bytearray = field(default_factory=lambda: bytearray(NUM_REGISTERS))
    i: int = 0
    pc: int = PROGRAM_START


class Chip8CPU:
    """
    CHIP-8 interpreter with instrumentation support.

    Every subsystem may be injected, which lets tests substitute a seeded
    entropy source or inspect a shared diagnostic log; anything omitted
    is created fresh.

    The optional on_instruction hook is called with (pc, instruction)
    after decoding and before execution, where pc is the address the
    instruction was fetched from.

    Example:
        >>> cpu = Chip8CPU()
        >>> cpu.load_program(bytes([0x60, 0x2A, 0x70, 0x01]))  # V0=$2A; V0+=1
        LoadResult(success=True, size=4, message='loaded 4 bytes at $200')
        >>> _ = cpu.step(); _ = cpu.step()
        >>> hex(cpu.v[0])
        '0x2b'
    """

    def __init__(
        self,
        memory: Optional[Memory] = None,
        display: Optional[Framebuffer] = None,
        keypad: Optional[Keypad] = None,
        timers: Optional[Timers] = None,
        entropy: Optional[EntropySource] = None,
        diagnostics: Optional[DiagnosticLog] = None,
    ):
        self.memory = memory if memory is not None else Memory()
        self.display = display if display is not None else Framebuffer()
        self.keypad = keypad if keypad is not None else Keypad()
        self.timers = timers if timers is not None else Timers()
        self.entropy = entropy if entropy is not None else EntropySource()
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()
        self.stack = CallStack()
        self.state = CPUState()

        # Instrumentation hook: on_instruction(pc, instruction)
        self.on_instruction: Optional[Callable[[int, Instruction], None]] = None

        self._instruction_count = 0

    # ========================================
    # Register Properties
    # ========================================

    @property
    def v(self) -> bytearray:
        """General purpose registers V0-VF."""
        return self.state.v

    @property
    def i(self) -> int:
        """Index register (16-bit)."""
        return self.state.i

    @i.setter
    def i(self, value: int) -> None:
        self.state.i = value & 0xFFFF

    @property
    def pc(self) -> int:
        """Program counter (16-bit)."""
        return self.state.pc

    @pc.setter
    def pc(self, value: int) -> None:
        self.state.pc = value & 0xFFFF

    @property
    def instruction_count(self) -> int:
        """Number of instructions executed since construction or reset."""
        return self._instruction_count

    @property
    def waiting_for_key(self) -> bool:
        """True while FX0A has suspended execution."""
        return self.keypad.waiting

    @property
    def sound_active(self) -> bool:
        """True while the sound timer is non-zero."""
        return self.timers.sound_active

    # ========================================
    # Lifecycle
    # ========================================

    def reset(self) -> None:
        """
        Reset to the power-on state.

        Memory is zeroed with the glyph table reinstalled, so the program
        has to be loaded again. The diagnostic log is cleared too.
        """
        self.memory.reset()
        self.display.clear()
        self.display.mark_rendered()
        self.keypad.reset()
        self.timers.reset()
        self.stack.clear()
        self.diagnostics.clear()
        self.state = CPUState()
        self._instruction_count = 0

    def load_program(self, data: bytes) -> LoadResult:
        """Copy a program image to $200 (see Memory.load_program)."""
        return self.memory.load_program(data)

    # ========================================
    # External Ports
    # ========================================

    def tick(self) -> None:
        """Advance the delay and sound timers by one tick."""
        self.timers.tick()

    def press_key(self, index: int) -> None:
        """
        Deliver a key press.

        Updates the key line, then offers the press to the FX0A latch;
        if a wait was pending, the key index lands in its target register.
        """
        self.keypad.key_down(index)
        register = self.keypad.notify_key_press(index)
        if register is not None:
            self.v[register] = index
            logger.debug(f"Key ${index:X} resumed execution into V{register:X}")

    def release_key(self, index: int) -> None:
        """Deliver a key release."""
        self.keypad.key_up(index)

    # ========================================
    # Fetch / Step
    # ========================================

    def fetch(self) -> int:
        """
        Fetch the instruction word at PC and advance PC by 2.

        Raises:
            FetchOutOfBoundsError: If fewer than 2 bytes remain at PC
        """
        pc = self.pc
        if pc > MEMORY_SIZE - 2:
            raise FetchOutOfBoundsError(pc)
        word = self.memory.read_word(pc)
        self.pc = pc + 2
        return word

    def step(self) -> Optional[Instruction]:
        """
        Execute exactly one instruction.

        Returns:
            The executed instruction, or None if execution is suspended
            awaiting a key press

        Raises:
            MachineFault: On stack overflow/underflow or fetch past memory
        """
        if self.keypad.waiting:
            return None

        pc = self.pc
        instruction = decode(self.fetch())
        logger.debug(f"${pc:04X}: {instruction}")

        if self.on_instruction:
            self.on_instruction(pc, instruction)

        self.execute(instruction, pc)
        self._instruction_count += 1
        return instruction

    # ========================================
    # Helpers
    # ========================================

    def _report(self, kind: DiagnosticKind, pc: int, instruction: Instruction, message: str) -> None:
        self.diagnostics.record(DiagnosticEvent(kind, pc, instruction.word, message))

    def _skip_if(self, condition: bool) -> None:
        if condition:
            self.pc = self.pc + 2

    def _draw(self, instruction: Instruction) -> None:
        """DXYN: draw N rows from [I] at (VX, VY); VF = collision."""
        x = self.v[instruction.x]
        y = self.v[instruction.y]
        rows = []
        for row in range(instruction.n):
            address = self.i + row
            if address >= MEMORY_SIZE:
                # Sprite runs off the end of memory; draw what was read
                break
            rows.append(self.memory.read(address))

        collision = self.display.draw_sprite(x, y, rows)
        self.v[FLAG_REGISTER] = 1 if collision else 0

    # ========================================
    # Execute
    # ========================================

    def execute(self, instruction: Instruction, pc: Optional[int] = None) -> None:
        """
        Execute a decoded instruction.

        PC must already point past the instruction.

        Args:
            instruction: The decoded instruction
            pc: Address the instruction was fetched from, for diagnostics
                and error context (defaults to PC - 2)
        """
        if pc is None:
            pc = (self.pc - 2) & 0xFFFF

        v = self.v
        x = instruction.x
        y = instruction.y

        match instruction.op:
            # ============================================
            # Flow Control
            # ============================================
            case Op.SYS:
                # Machine code routines do not exist on an interpreter
                pass
            case Op.CLS:
                self.display.clear()
            case Op.RET:
                self.pc = self.stack.pop(pc=pc, opcode=instruction.word)
            case Op.JP:
                self.pc = instruction.nnn
            case Op.CALL:
                self.stack.push(self.pc, pc=pc, opcode=instruction.word)
                self.pc = instruction.nnn
            case Op.JP_V0:
                self.pc = v[0] + instruction.nnn

            # ============================================
            # Conditional Skips
            # ============================================
            case Op.SE_VX_NN:
                self._skip_if(v[x] == instruction.nn)
            case Op.SNE_VX_NN:
                self._skip_if(v[x] != instruction.nn)
            case Op.SE_VX_VY:
                self._skip_if(v[x] == v[y])
            case Op.SNE_VX_VY:
                self._skip_if(v[x] != v[y])

            # ============================================
            # Register Loads and Immediate Arithmetic
            # ============================================
            case Op.LD_VX_NN:
                v[x] = instruction.nn
            case Op.ADD_VX_NN:
                v[x] = (v[x] + instruction.nn) & 0xFF
            case Op.LD_VX_VY:
                v[x] = v[y]

            # ============================================
            # ALU (8XYN); VF is written before the result
            # ============================================
            case Op.OR:
                v[x] = v[x] | v[y]
            case Op.AND:
                v[x] = v[x] & v[y]
            case Op.XOR:
                v[x] = v[x] ^ v[y]
            case Op.ADD_VX_VY:
                total = v[x] + v[y]
                v[FLAG_REGISTER] = 1 if total > 0xFF else 0
                v[x] = total & 0xFF
            case Op.SUB:
                vx, vy = v[x], v[y]
                v[FLAG_REGISTER] = 1 if vx >= vy else 0
                v[x] = (vx - vy) & 0xFF
            case Op.SHR:
                vx = v[x]
                v[FLAG_REGISTER] = vx & 0x01
                v[x] = vx >> 1
            case Op.SUBN:
                vx, vy = v[x], v[y]
                v[FLAG_REGISTER] = 1 if vy >= vx else 0
                v[x] = (vy - vx) & 0xFF
            case Op.SHL:
                vx = v[x]
                v[FLAG_REGISTER] = (vx & 0x80) >> 7
                v[x] = (vx << 1) & 0xFF

            # ============================================
            # Index Register, Random, Graphics
            # ============================================
            case Op.LD_I:
                self.i = instruction.nnn
            case Op.ADD_I_VX:
                self.i = self.i + v[x]
            case Op.LD_F_VX:
                self.i = self.memory.font_start + (v[x] & 0x0F) * FONT_GLYPH_SIZE
            case Op.RND:
                v[x] = self.entropy.next_byte() & instruction.nn
            case Op.DRW:
                self._draw(instruction)

            # ============================================
            # Keypad
            # ============================================
            case Op.SKP | Op.SKNP:
                key = v[x]
                if key > MAX_KEY:
                    self._report(
                        DiagnosticKind.INVALID_KEY, pc, instruction,
                        f"key test with invalid key index ${key:02X} in V{x:X}"
                    )
                elif instruction.op == Op.SKP:
                    self._skip_if(self.keypad.is_pressed(key))
                else:
                    self._skip_if(not self.keypad.is_pressed(key))
            case Op.LD_VX_K:
                self.keypad.await_key(x)

            # ============================================
            # Timers
            # ============================================
            case Op.LD_VX_DT:
                v[x] = self.timers.delay
            case Op.LD_DT_VX:
                self.timers.delay = v[x]
            case Op.LD_ST_VX:
                self.timers.sound = v[x]

            # ============================================
            # Memory Transfers
            # ============================================
            case Op.LD_B_VX:
                if self.i + 2 >= MEMORY_SIZE:
                    self._report(
                        DiagnosticKind.MEMORY_BOUNDS, pc, instruction,
                        f"BCD store at I=${self.i:04X} runs past end of memory"
                    )
                else:
                    value = v[x]
                    self.memory.write(self.i, value // 100)
                    self.memory.write(self.i + 1, (value // 10) % 10)
                    self.memory.write(self.i + 2, value % 10)
            case Op.LD_I_VX:
                if self.i + x >= MEMORY_SIZE:
                    self._report(
                        DiagnosticKind.MEMORY_BOUNDS, pc, instruction,
                        f"register store V0-V{x:X} at I=${self.i:04X} runs past end of memory"
                    )
                else:
                    self.memory.write_bytes(self.i, bytes(v[:x + 1]))
            case Op.LD_VX_I:
                if self.i + x >= MEMORY_SIZE:
                    self._report(
                        DiagnosticKind.MEMORY_BOUNDS, pc, instruction,
                        f"register load V0-V{x:X} from I=${self.i:04X} runs past end of memory"
                    )
                else:
                    v[:x + 1] = self.memory.read_bytes(self.i, x + 1)

            case Op.UNKNOWN:
                self._report(
                    DiagnosticKind.UNKNOWN_OPCODE, pc, instruction,
                    f"unknown opcode ${instruction.word:04X}"
                )
