"""
Emulator Integration Tests
==========================

Tests for the complete emulator session, verifying that all components
work together correctly.

These tests ensure:
- Configuration validation
- ROM file and raw program loading
- Paced execution with run() and run_frame()
- Key delivery through the keymap
- Framebuffer presentation
- Fault handling and the halted session
"""

import pytest

from chip8_emu.emulator import DiagnosticKind, Emulator, EmulatorConfig
from chip8_emu.errors import (
    ConfigurationError,
    SessionHaltedError,
    StackOverflowError,
    StackUnderflowError,
)


# =============================================================================
# Helpers
# =============================================================================

def program(*words):
    """Assemble instruction words into a program image."""
    data = bytearray()
    for word in words:
        data += bytes([word >> 8, word & 0xFF])
    return bytes(data)


@pytest.fixture
def emu():
    """Create a seeded emulator."""
    return Emulator(EmulatorConfig(seed=42))


# =============================================================================
# Configuration Tests
# =============================================================================

class TestConfiguration:
    """Test emulator configuration."""

    def test_defaults(self):
        """Default rates are 700 Hz CPU and 60 Hz timers."""
        config = EmulatorConfig()
        assert config.cpu_hz == 700.0
        assert config.timer_hz == 60.0
        assert config.seed is None
        assert config.keymap["Q"] == 0x4

    def test_config_frozen(self):
        """Configuration is immutable."""
        config = EmulatorConfig()
        with pytest.raises(AttributeError):
            config.cpu_hz = 1.0

    def test_keymap_read_only(self):
        """The keymap is a read-only copy of the table passed in."""
        table = {"Q": 0x4}
        config = EmulatorConfig(keymap=table)
        table["P"] = 0x10
        assert "P" not in config.keymap
        with pytest.raises(TypeError):
            config.keymap["P"] = 0x10

    def test_config_hashable(self):
        """Configurations can be hashed and compared."""
        assert hash(EmulatorConfig(seed=3)) == hash(EmulatorConfig(seed=3))
        assert EmulatorConfig(keymap={"Q": 0x4}) == EmulatorConfig(keymap={"Q": 0x4})

    @pytest.mark.parametrize("kwargs", [
        {"cpu_hz": 0},
        {"cpu_hz": -700.0},
        {"timer_hz": 0},
        {"keymap": {"Q": 0x10}},
    ])
    def test_invalid_config(self, kwargs):
        """Invalid configurations are rejected at construction."""
        with pytest.raises(ConfigurationError):
            Emulator(EmulatorConfig(**kwargs))

    def test_same_seed_same_run(self):
        """Two sessions with the same seed produce the same random values."""
        rom = program(*([0xC0FF, 0x8104] * 10))  # V0 = random; V1 += V0
        results = []
        for _ in range(2):
            emu = Emulator(EmulatorConfig(seed=7))
            emu.load_bytes(rom)
            emu.run(20)
            results.append(emu.registers["v1"])
        assert results[0] == results[1]


# =============================================================================
# Loading Tests
# =============================================================================

class TestLoading:
    """Test ROM file and byte loading."""

    def test_load_rom(self, emu, tmp_path):
        """A ROM file is loaded at $200."""
        rom = tmp_path / "test.ch8"
        rom.write_bytes(program(0x6A2B))
        result = emu.load_rom(rom)
        assert result.success
        assert result.size == 2
        assert emu.memory.read_word(0x200) == 0x6A2B

    def test_load_rom_str_path(self, emu, tmp_path):
        """String paths are accepted."""
        rom = tmp_path / "test.ch8"
        rom.write_bytes(program(0x00E0))
        assert emu.load_rom(str(rom))

    def test_missing_rom(self, emu, tmp_path):
        """A missing file gives a failed result, not an exception."""
        result = emu.load_rom(tmp_path / "missing.ch8")
        assert not result.success
        assert result.size == 0
        assert "missing.ch8" in result.message

    def test_directory_rom(self, emu, tmp_path):
        """A directory gives a failed result."""
        assert not emu.load_rom(tmp_path)

    def test_oversized_rom(self, emu, tmp_path):
        """A ROM larger than 3584 bytes is rejected without touching memory."""
        rom = tmp_path / "big.ch8"
        rom.write_bytes(bytes([0xFF]) * 3585)
        result = emu.load_rom(rom)
        assert not result.success
        assert result.size == 3585
        assert emu.memory.read(0x200) == 0

    def test_load_bytes(self, emu):
        """Raw bytes load at $200."""
        assert emu.load_bytes(bytearray([0x12, 0x00]))
        assert emu.memory.read_word(0x200) == 0x1200


# =============================================================================
# Execution Tests
# =============================================================================

class TestExecution:
    """Test stepping and paced execution."""

    def test_step(self, emu):
        """step() executes one instruction without ticking timers."""
        emu.load_bytes(program(0x6005, 0xF015, 0x6001))
        emu.step()
        emu.step()
        emu.step()
        assert emu.timers.delay == 5
        assert emu.registers["v0"] == 1

    def test_tick(self, emu):
        """tick() advances the timers."""
        emu.timers.delay = 3
        emu.tick()
        assert emu.timers.delay == 2

    def test_run_counts_instructions(self, emu):
        """run() returns the number of instructions executed."""
        emu.load_bytes(program(0x1200))  # JP $200
        assert emu.run(50) == 50
        assert emu.instruction_count == 50

    def test_run_paces_timers(self, emu):
        """run() ticks the timers at timer_hz / cpu_hz per instruction."""
        emu.load_bytes(program(0x6078, 0xF015, 0x1204))  # DT = 120; loop
        emu.run(702)
        assert emu.timers.delay == 60

    def test_run_frame(self):
        """run_frame() spends elapsed time on ticks and instructions."""
        emu = Emulator(EmulatorConfig(cpu_hz=512.0, timer_hz=64.0))
        emu.load_bytes(program(0x1200))
        emu.timers.delay = 100
        assert emu.run_frame(0.25) == 128
        assert emu.timers.delay == 84

    def test_run_frame_carries_time(self):
        """Leftover time carries into the next frame."""
        emu = Emulator(EmulatorConfig(cpu_hz=512.0, timer_hz=64.0))
        emu.load_bytes(program(0x1200))
        assert emu.run_frame(1 / 1024) == 0
        assert emu.run_frame(1 / 1024) == 1

    def test_run_frame_negative(self, emu):
        """Negative elapsed time is rejected."""
        with pytest.raises(ValueError):
            emu.run_frame(-0.1)

    def test_run_until(self, emu):
        """run_until() stops as soon as the predicate holds."""
        emu.load_bytes(program(0x6001, 0x6002, 0xF00A, 0x6003))
        assert emu.run_until(lambda e: e.waiting_for_key, max_steps=100)
        assert emu.instruction_count == 3

    def test_run_until_gives_up(self, emu):
        """run_until() returns False when max_steps runs out."""
        emu.load_bytes(program(0x1200))
        assert not emu.run_until(lambda e: e.registers["v0"] == 1, max_steps=50)
        assert emu.instruction_count == 50

    def test_wait_consumes_run_budget(self, emu):
        """Steps spent waiting for a key execute nothing."""
        emu.load_bytes(program(0xF00A))
        assert emu.run(10) == 1
        assert emu.waiting_for_key


# =============================================================================
# Keyboard Tests
# =============================================================================

class TestKeyboard:
    """Test key delivery through the keymap."""

    def test_press_by_name(self, emu):
        """Host key names are translated through the keymap."""
        assert emu.press_key("z")
        assert emu.keypad.is_pressed(0xA)
        assert emu.release_key("Z")
        assert not emu.keypad.is_pressed(0xA)

    def test_press_by_index(self, emu):
        """Key indices are delivered directly."""
        assert emu.press_key(0x3)
        assert emu.keypad.is_pressed(0x3)

    def test_unmapped_key(self, emu):
        """Unmapped keys are ignored."""
        assert emu.press_key("P") is False
        assert emu.press_key(True) is False
        assert emu.release_key(0x10) is False
        assert emu.keypad.pressed_keys() == []

    def test_key_resumes_wait(self, emu):
        """Pressing key 0xA during FX0A stores it and resumes."""
        emu.load_bytes(program(0xF50A, 0x6001))
        emu.run(5)
        assert emu.waiting_for_key
        pc = emu.registers["pc"]
        emu.run(5)
        assert emu.registers["pc"] == pc

        emu.press_key("Z")
        assert emu.registers["v5"] == 0xA
        emu.step()
        assert emu.registers["v0"] == 1

    def test_custom_keymap(self):
        """A custom keymap replaces the default layout."""
        emu = Emulator(EmulatorConfig(keymap={"SPACE": 0x5}))
        assert emu.press_key("space")
        assert emu.keypad.is_pressed(0x5)
        assert emu.press_key("W") is False


# =============================================================================
# Display and Sound Tests
# =============================================================================

class TestPresentation:
    """Test framebuffer and sound ports."""

    def test_display_text(self, emu):
        """Drawn glyphs show up in the text rendering."""
        emu.load_bytes(program(0xA050, 0xD005))  # I = glyph "0"; DRW V0, V0, 5
        emu.run(2)
        lines = emu.display_text.split("\n")
        assert lines[0].startswith("####.")
        assert lines[1].startswith("#..#.")

    def test_framebuffer(self, emu):
        """The framebuffer is 64x32 bytes, row-major."""
        emu.load_bytes(program(0xA050, 0xD005))
        emu.run(2)
        fb = emu.framebuffer
        assert len(fb) == 64 * 32
        assert fb[0] == 1
        assert fb[64] == 1
        assert fb[65] == 0

    def test_refresh_handshake(self, emu):
        """needs_refresh is raised by drawing and cleared by mark_rendered()."""
        emu.load_bytes(program(0xA050, 0xD005, 0x1204))
        emu.run(2)
        assert emu.needs_refresh
        emu.mark_rendered()
        emu.run(10)
        assert not emu.needs_refresh

    def test_render_display(self, emu):
        """render_display() returns PNG bytes."""
        pytest.importorskip("PIL")
        data = emu.render_display(scale=2)
        assert data[:4] == b"\x89PNG"

    def test_sound(self, emu):
        """sound_active follows the sound timer."""
        emu.load_bytes(program(0x6001, 0xF018))
        emu.run(2)
        assert emu.sound_active
        emu.tick()
        assert not emu.sound_active

    def test_registers(self, emu):
        """registers exposes the machine state as a dictionary."""
        emu.load_bytes(program(0x6A2B, 0xA123, 0x2300))
        emu.run(3)
        regs = emu.registers
        assert regs["va"] == 0x2B
        assert regs["i"] == 0x123
        assert regs["pc"] == 0x300
        assert regs["sp"] == 1
        assert set(regs) == {f"v{n:x}" for n in range(16)} | {"i", "pc", "sp", "dt", "st"}

    def test_diagnostics(self, emu):
        """Non-fatal conditions reach the diagnostic log."""
        emu.load_bytes(program(0x5AB1, 0x6001))
        emu.run(2)
        assert emu.diagnostics.count(DiagnosticKind.UNKNOWN_OPCODE) == 1
        assert emu.registers["v0"] == 1
        assert not emu.halted


# =============================================================================
# Fault Tests
# =============================================================================

class TestFaults:
    """Test fatal faults and the halted session."""

    def test_fault_halts_session(self, emu):
        """A fault is remembered and later steps are refused."""
        emu.load_bytes(program(0x00EE))
        with pytest.raises(StackUnderflowError) as exc_info:
            emu.step()
        assert emu.halted
        assert emu.fault is exc_info.value

        with pytest.raises(SessionHaltedError) as halted_info:
            emu.step()
        assert halted_info.value.cause is exc_info.value

    def test_halted_run_and_frame(self, emu):
        """run(), run_frame() and run_until() are refused after a fault."""
        emu.load_bytes(program(0x00EE))
        with pytest.raises(StackUnderflowError):
            emu.run(10)
        with pytest.raises(SessionHaltedError):
            emu.run(10)
        with pytest.raises(SessionHaltedError):
            emu.run_frame(0.1)
        with pytest.raises(SessionHaltedError):
            emu.run_until(lambda e: False)

    def test_fault_mid_run(self, emu):
        """A fault part-way through run() propagates and halts."""
        emu.load_bytes(program(0x2200))  # CALL $200 forever
        with pytest.raises(StackOverflowError):
            emu.run(100)
        assert emu.instruction_count == 16
        assert emu.halted

    def test_reset_clears_fault(self, emu):
        """reset() starts a fresh session."""
        emu.load_bytes(program(0x00EE))
        with pytest.raises(StackUnderflowError):
            emu.step()
        emu.reset()
        assert not emu.halted
        assert emu.fault is None
        emu.load_bytes(program(0x6001))
        emu.step()
        assert emu.registers["v0"] == 1

    def test_repr(self, emu):
        """repr() shows PC and state."""
        assert repr(emu) == "Emulator(pc=$0200, instructions=0, halted=False)"
