"""Optional settings for the emulator, read from ``options.toml``."""

from __future__ import annotations

import sys
import tomllib
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

OPTIONS_FILENAME = "options.toml"

_Parser = Callable[[str, Any], Any]


def _uint(bits: int) -> _Parser:
    limit = 1 << bits

    def parse(name: str, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < limit:
            raise ValueError(f"{name} must be an integer in 0..{limit - 1}, got {value!r}")
        return value

    return parse


_U8 = _uint(8)
_U16 = _uint(16)
_U32 = _uint(32)


def _boolean(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{name} must be a boolean, got {value!r}")
    return value


def _rgb(name: str, value: Any) -> tuple[int, int, int]:
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)) or len(value) != 3:
        raise ValueError(f"{name} must be a sequence of three colour components, got {value!r}")
    red, green, blue = (_U8(f"{name}[{i}]", part) for i, part in enumerate(value))
    return (red, green, blue)


def _spec(default: Any, parser: _Parser) -> Any:
    return field(default=default, metadata={"parse": parser})


def _section_from_mapping(cls: type, section: str, data: Any) -> Any:
    if not isinstance(data, Mapping):
        raise ValueError(f"section {section!r} must be a table")
    values = {}
    for spec in fields(cls):
        if spec.name not in data:
            raise ValueError(f"missing field {section}.{spec.name}")
        values[spec.name] = spec.metadata["parse"](f"{section}.{spec.name}", data[spec.name])
    return cls(**values)


@dataclass
class DisplayOptions:
    """Size, scaling and colours of the emulated screen."""

    display_width: int = _spec(64, _U32)
    display_height: int = _spec(32, _U32)
    scaling: int = _spec(20, _U32)
    color_off_rgb: tuple[int, int, int] = _spec((0, 0, 0), _rgb)
    color_on_rgb: tuple[int, int, int] = _spec((255, 255, 255), _rgb)


@dataclass
class TimingOptions:
    """Frame rate and number of CPU cycles executed per frame."""

    display_frequency: int = _spec(60, _U32)
    cpu_cycles_per_display_tick: int = _spec(10, _U32)


@dataclass
class OpcodeOptions:
    """Switches between the differing behaviours of ambiguous instructions."""

    shift_ignore_vy: bool = _spec(True, _boolean)
    jump_w_offset_use_vx: bool = _spec(False, _boolean)
    store_load_mem_use_i: bool = _spec(False, _boolean)


@dataclass
class MemoryOptions:
    """Memory size and where the font and the ROM are loaded."""

    mem_size: int = _spec(4096, _U16)
    rom_start: int = _spec(0x200, _U16)
    font_start: int = _spec(0x50, _U16)


_SECTIONS: dict[str, type] = {
    "display": DisplayOptions,
    "timing": TimingOptions,
    "opcode": OpcodeOptions,
    "memory": MemoryOptions,
}


@dataclass
class Chip8Options:
    """All emulator settings."""

    display: DisplayOptions = field(default_factory=DisplayOptions)
    timing: TimingOptions = field(default_factory=TimingOptions)
    opcode: OpcodeOptions = field(default_factory=OpcodeOptions)
    memory: MemoryOptions = field(default_factory=MemoryOptions)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Chip8Options:
        """Build options from a parsed document; every field must be present.

        Raises ValueError when a section or field is missing or has a bad value.
        Unknown keys are ignored.
        """
        if not isinstance(data, Mapping):
            raise ValueError("options must be a table")
        sections = {}
        for name, section_cls in _SECTIONS.items():
            if name not in data:
                raise ValueError(f"missing section {name!r}")
            sections[name] = _section_from_mapping(section_cls, name, data[name])
        return cls(**sections)


def load_options(directory: str | Path | None = None) -> Chip8Options:
    """Read ``options.toml`` from *directory* (the working directory by default).

    Falls back to the default options, with a warning on stderr, when the file
    cannot be read or parsed.
    """
    try:
        base = Path.cwd() if directory is None else Path(directory)
    except OSError:
        print("Failed to get current directory, using default options", file=sys.stderr)
        return Chip8Options()

    try:
        text = (base / OPTIONS_FILENAME).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        print("Failed to read config file, using default options", file=sys.stderr)
        return Chip8Options()

    try:
        return Chip8Options.from_dict(tomllib.loads(text))
    except (tomllib.TOMLDecodeError, ValueError):
        print("Failed to deserialize config file, using default options", file=sys.stderr)
        return Chip8Options()