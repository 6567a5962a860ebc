"""
chip8run - Headless CHIP-8 Runner Command-Line Interface
========================================================

This module implements a command-line runner for CHIP-8 programs. It
loads a ROM, runs it for a fixed number of instructions with the timers
paced alongside, and prints the final screen as text or writes it as a
PNG image. No window, sound or real-time clock is involved, which makes
it suitable for smoke-testing ROMs and for scripting.

Usage Examples
--------------
Run a ROM and print the screen:
    $ chip8run ibm_logo.ch8

Run longer, with a fixed random seed:
    $ chip8run maze.ch8 --steps 5000 --seed 42

Hold keys down during the run:
    $ chip8run pong.ch8 --press 1 --press q

Render to PNG (needs Pillow):
    $ chip8run maze.ch8 --format png -o maze.png --scale 8

Exit Codes
----------
    0  Program ran for the requested number of steps
    1  Machine fault (stack overflow/underflow, fetch outside memory)
    2  Invalid arguments or the ROM could not be loaded
    3  Unexpected internal error
"""

import logging
from pathlib import Path
from typing import Optional, Tuple

import click

from chip8_emu import __version__
from chip8_emu.cli.errors import fail, handle_cli_exception
from chip8_emu.emulator import Emulator, EmulatorConfig

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "rom",
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option(
    "-n", "--steps",
    type=click.IntRange(min=0),
    default=1000,
    show_default=True,
    help="Number of instructions to run",
)
@click.option(
    "--cpu-hz",
    type=float,
    default=700.0,
    show_default=True,
    help="Instruction rate used to pace the timers",
)
@click.option(
    "--timer-hz",
    type=float,
    default=60.0,
    show_default=True,
    help="Timer tick rate",
)
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Seed for the random number instruction (CXNN)",
)
@click.option(
    "-k", "--press",
    "keys",
    multiple=True,
    help="Host key (e.g. 'q') or key index (e.g. '0xA') to hold down; repeatable",
)
@click.option(
    "-f", "--format",
    "output_format",
    type=click.Choice(["text", "png"]),
    default="text",
    show_default=True,
    help="Screen output format",
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: stdout, text format only)",
)
@click.option(
    "--scale",
    type=click.IntRange(min=1),
    default=10,
    show_default=True,
    help="Pixel scale for PNG output",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (instruction trace and run summary on stderr)",
)
@click.version_option(version=__version__, prog_name="chip8run")
def main(
    rom: Path,
    steps: int,
    cpu_hz: float,
    timer_hz: float,
    seed: Optional[int],
    keys: Tuple[str, ...],
    output_format: str,
    output: Optional[Path],
    scale: int,
    verbose: bool,
) -> None:
    """
    Run a CHIP-8 program headlessly and show the final screen.

    ROM is the program image to load at $200.

    Keys given with --press are held down for the whole run. If the
    program stops to wait for a key (FX0A) while keys are held, the first
    held key is pressed again to let it continue.

    Examples:

        # Run for 1000 instructions and print the screen
        chip8run ibm_logo.ch8

        # Render to PNG
        chip8run maze.ch8 --steps 5000 --format png -o maze.png
    """
    setup_logging(verbose)

    try:
        if output_format == "png" and output is None:
            raise click.BadParameter("PNG output requires --output", param_hint="--format")

        emu = Emulator(EmulatorConfig(cpu_hz=cpu_hz, timer_hz=timer_hz, seed=seed))

        result = emu.load_rom(rom)
        if not result:
            fail(result.message)

        if verbose:
            click.echo(f"ROM: {rom} ({result.size} bytes)", err=True)

        held = [_parse_key(key) for key in keys]
        for key in held:
            if not emu.press_key(key):
                raise click.BadParameter(f"unknown key {key!r}", param_hint="--press")

        executed = 0
        for _ in range(steps):
            if held and emu.waiting_for_key:
                emu.press_key(held[0])
            executed += emu.run(1)

        if output_format == "png":
            image = emu.render_display(scale=scale)
            if image is None:
                fail("PNG output needs Pillow (pip install chip8-emu[render])")
            output.write_bytes(image)
        elif output:
            output.write_text(emu.display_text + "\n", encoding="utf-8")
        else:
            click.echo(emu.display_text)

        if verbose:
            if output:
                click.echo(f"Output written to: {output}", err=True)
            click.echo(f"Instructions executed: {executed}", err=True)
            click.echo(f"Diagnostics: {emu.diagnostics.total}", err=True)
            for event in emu.diagnostics:
                click.echo(f"  {event}", err=True)
            click.echo(f"Sound active: {'yes' if emu.sound_active else 'no'}", err=True)
            if emu.waiting_for_key:
                click.echo("Waiting for key", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Configuration")


def _parse_key(key: str) -> str | int:
    """Turn '0xA'-style arguments into key indices; leave key names alone."""
    if key.lower().startswith("0x"):
        try:
            return int(key, 16)
        except ValueError:
            return key
    return key


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
