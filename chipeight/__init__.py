"""A CHIP-8 emulator core with a pygame window, keyboard and command line."""

__version__ = "0.1.0"

__all__ = ["cli", "display", "emulator", "keyboard", "opcode", "options"]