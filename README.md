# chipeight

A CHIP-8 emulator. It runs CHIP-8 ROM images in a window drawn with pygame,
with the keypad mapped onto an ordinary keyboard.

## Installing

```
pip install .
```

For running the tests as well:

```
pip install ".[test]"
pytest
```

## Running a ROM

```
chipeight path/to/game.ch8
```

`chipeight --version` prints the version. The ROM is loaded at address `0x200`
(configurable) and runs until the window is closed or Escape is pressed. If
the ROM cannot be read, does not fit in memory, or the window cannot be
opened, the command prints `Application error: ...` and exits with status 1.

### Keys

The sixteen-key COSMAC VIP keypad is laid out on the left of the keyboard:

```
CHIP-8 keypad      Keyboard
1 2 3 C            1 2 3 4
4 5 6 D     =>     q w e r
7 8 9 E            a s d f
A 0 B F            z x c v
```

Two more keys control the emulator itself:

- **Esc** quits.
- **F5** restarts the ROM from a clean state.

## Options

On start-up the emulator reads `options.toml` from the current working
directory. If the file is missing, is not valid TOML, or lacks any section or
field, it prints a warning and uses the defaults shown below. Every section
and every field must therefore be present; unknown keys are ignored.

```toml
[display]
display_width = 64
display_height = 32
scaling = 20
color_off_rgb = [0, 0, 0]
color_on_rgb = [255, 255, 255]

[timing]
display_frequency = 60
cpu_cycles_per_display_tick = 10

[opcode]
shift_ignore_vy = true
jump_w_offset_use_vx = false
store_load_mem_use_i = false

[memory]
mem_size = 4096
rom_start = 0x200
font_start = 0x50
```

The `[opcode]` switches choose between the behaviours of different CHIP-8
interpreters:

- `shift_ignore_vy`: `8XY6` and `8XYE` shift VX in place. When false, VY is
  copied into VX first, as on the original COSMAC VIP.
- `jump_w_offset_use_vx`: `BNNN` adds VX instead of V0 to the jump target.
- `store_load_mem_use_i`: `FX55` and `FX65` move I past the registers they
  stored or loaded.

From Python, `chipeight.options.load_options(directory)` reads the file from
another directory, and `Chip8Options.from_dict(data)` builds options from an
already parsed mapping, raising `ValueError` on a missing or bad value.

## Using it as a library

The emulator core (`chipeight.emulator`, `chipeight.opcode`,
`chipeight.options`) does not depend on pygame. Anything that implements
`chipeight.emulator.System` (`update_screen` and `get_key_event`; the default
`set_sound_state` just records the flag in `sound_on`) can drive it:

```python
from chipeight.emulator import Emulator, System
from chipeight.options import Chip8Options


class Headless(System):
    def __init__(self):
        self.frames = []

    def update_screen(self, pixels):
        self.frames.append(list(pixels))

    def get_key_event(self):
        return None


with open("game.ch8", "rb") as rom_file:
    rom = rom_file.read()
emulator = Emulator(rom, Chip8Options())
system = Headless()
emulator.step_frame(system)
```

`step_frame` runs one display tick and returns `False` once a quit event has
been received; `run` keeps calling it at the configured frequency. Input is
fed through `KeyEvent(KeyEventKind.KEY_DOWN, key)` and friends. `Emulator`
raises `ValueError` when the ROM or the font does not fit in memory.

`chipeight.opcode.decode` turns two bytes into an `Instruction`, and raises
`ValueError` when fewer than two bytes are given or they are not a known
instruction. `Emulator.execute` carries out one decoded instruction.

## Limitations

There is no audio. The sound timer is emulated and the front end is told when
the beep should start and stop, but it only records that state; nothing is
played.