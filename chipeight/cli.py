"""Command line entry point that wires the emulator to a window and keyboard."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import pygame

from chipeight.display import Display
from chipeight.emulator import Emulator, KeyEvent, System
from chipeight.keyboard import Keyboard
from chipeight.options import Chip8Options, load_options

VERSION = "0.1.0"


class Peripherals(System):
    """Screen and keyboard the emulator talks to."""

    def __init__(self, display: Display, keyboard: Keyboard) -> None:
        self.display = display
        self.keyboard = keyboard
        self.sound_on = False

    def update_screen(self, pixels: Sequence[bool]) -> None:
        """Draw the display buffer on the screen."""
        self.display.draw_screen(pixels)

    def get_key_event(self) -> KeyEvent | None:
        """Return the next keyboard event, if any."""
        return self.keyboard.get_key_event()

    def set_sound_state(self, sound_on: bool) -> None:
        """Remember whether the beep is on; no audio is produced."""
        self.sound_on = sound_on


@dataclass
class Config:
    """What the emulator needs to start: a ROM file and its options."""

    rom_file: Path
    options: Chip8Options

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> Config:
        """Build a configuration from parsed arguments and ``options.toml``."""
        return cls(rom_file=Path(args.rom_file), options=load_options())

    def run(self) -> None:
        """Load the ROM and run the emulator until the window is closed."""
        rom = self.rom_file.read_bytes()
        emulator = Emulator(rom, self.options)
        pygame.init()
        try:
            peripherals = Peripherals(Display(self.options.display), Keyboard())
            emulator.run(peripherals)
        finally:
            pygame.quit()


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the command."""
    parser = argparse.ArgumentParser(prog="chipeight", description="CHIP-8 emulator program")
    parser.add_argument("rom_file", metavar="FILE", help="ROM file name")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the emulator on the ROM named on the command line."""
    args = build_parser().parse_args(argv)
    config = Config.from_args(args)
    try:
        config.run()
    except (OSError, ValueError, pygame.error) as error:
        print(f"Application error: {error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())