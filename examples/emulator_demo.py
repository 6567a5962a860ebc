#!/usr/bin/env python3
"""
CHIP-8 Emulator Demo
====================

This script demonstrates how to use the chip8-emu emulator to:
1. Create an emulator session
2. Load a program
3. Drive it with frame pacing
4. Answer a key wait
5. Inspect the screen, registers and diagnostics
6. Take a screenshot

Usage:
    python examples/emulator_demo.py [ROM]

Without a ROM argument a small built-in program is used: it prints the
decimal digits of 205, waits for a key and then prints that key's glyph.
"""

import sys
from pathlib import Path

from chip8_emu.emulator import Emulator, EmulatorConfig

DEMO_PROGRAM = bytes([
    0x60, 0xCD,  # LD V0, #$CD      V0 = 205
    0xA3, 0x00,  # LD I, $300
    0xF0, 0x33,  # LD B, V0         memory[$300..$302] = 2, 0, 5
    0xF2, 0x65,  # LD V2, [I]       V0..V2 = digits
    0x6A, 0x00,  # LD VA, #$00      x = 0
    0x6B, 0x00,  # LD VB, #$00      y = 0
    0xF0, 0x29,  # LD F, V0
    0xDA, 0xB5,  # DRW VA, VB, 5
    0x7A, 0x05,  # ADD VA, #$05
    0xF1, 0x29,  # LD F, V1
    0xDA, 0xB5,  # DRW VA, VB, 5
    0x7A, 0x05,  # ADD VA, #$05
    0xF2, 0x29,  # LD F, V2
    0xDA, 0xB5,  # DRW VA, VB, 5
    0xF3, 0x0A,  # LD V3, K         wait for a key
    0x7A, 0x05,  # ADD VA, #$05
    0xF3, 0x29,  # LD F, V3
    0xDA, 0xB5,  # DRW VA, VB, 5
    0x12, 0x24,  # JP $224          spin
])


def main():
    # ==========================================================================
    # 1. Create an emulator instance
    # ==========================================================================
    # cpu_hz and timer_hz set the pacing; seed pins the CXNN generator

    print("Creating CHIP-8 emulator...")
    emu = Emulator(EmulatorConfig(cpu_hz=700.0, timer_hz=60.0, seed=1))

    # ==========================================================================
    # 2. Load a program
    # ==========================================================================

    if len(sys.argv) > 1:
        result = emu.load_rom(Path(sys.argv[1]))
    else:
        result = emu.load_bytes(DEMO_PROGRAM)

    print(f"  {result.message}")
    if not result:
        return 1

    # ==========================================================================
    # 3. Run for one second of emulated time, one 60 Hz frame at a time
    # ==========================================================================

    frames = 0
    for _ in range(60):
        emu.run_frame(1 / 60)
        if emu.needs_refresh:
            frames += 1
            emu.mark_rendered()

    print(f"\nExecuted {emu.instruction_count} instructions, {frames} frames redrawn")

    # ==========================================================================
    # 4. Answer the key wait
    # ==========================================================================
    # Host keys follow the 1234/QWER/ASDF/ZXCV layout: "v" is key 0xF

    if emu.waiting_for_key:
        print("Program is waiting for a key; pressing 'v'")
        emu.press_key("v")
        emu.run(10)
        emu.release_key("v")

    # ==========================================================================
    # 5. Inspect the machine
    # ==========================================================================

    print("\nScreen (top 8 rows):")
    for line in emu.display_text.split("\n")[:8]:
        print(f"  {line}")

    regs = emu.registers
    print(f"\nPC=${regs['pc']:04X}  I=${regs['i']:04X}  SP={regs['sp']}")
    print("  " + " ".join(f"V{n:X}={regs[f'v{n:x}']:02X}" for n in range(16)))

    print(f"\nDiagnostics: {emu.diagnostics.total}")
    for event in emu.diagnostics:
        print(f"  {event}")

    # ==========================================================================
    # 6. Take a screenshot (needs Pillow)
    # ==========================================================================

    png = emu.render_display(scale=8)
    if png is None:
        print("\nInstall Pillow for PNG screenshots: pip install chip8-emu[render]")
    else:
        output = Path("chip8_screen.png")
        output.write_bytes(png)
        print(f"\nScreenshot saved to {output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
