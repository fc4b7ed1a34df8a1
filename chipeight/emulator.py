"""The CHIP-8 virtual machine: memory, registers, timers and the main loop."""

from __future__ import annotations

import copy
import random
import sys
import time
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum, auto

from chipeight.opcode import Instruction, Op, decode
from chipeight.options import Chip8Options

FONTS = bytes(
    [
        0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
        0x20, 0x60, 0x20, 0x20, 0x70,  # 1
        0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
        0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
        0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
        0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
        0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
        0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
        0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
        0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
        0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
        0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
        0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
        0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
        0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
        0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
    ]
)

REGISTER_COUNT = 16
KEY_COUNT = 16


class KeyEventKind(Enum):
    """What happened on the keypad or to the program."""

    KEY_DOWN = auto()
    KEY_UP = auto()
    QUIT = auto()
    RESTART = auto()


@dataclass(frozen=True, slots=True)
class KeyEvent:
    """An input event; *key* (0x0-0xF) matters only for key presses and releases."""

    kind: KeyEventKind
    key: int = 0


class System(ABC):
    """The surroundings the emulator runs in: a screen, a keypad and a beeper."""

    sound_on: bool = False

    @abstractmethod
    def update_screen(self, pixels: Sequence[bool]) -> None:
        """Show the current display contents, row by row."""

    @abstractmethod
    def get_key_event(self) -> KeyEvent | None:
        """Return the next queued input event, or None when there is none."""

    def set_sound_state(self, sound_on: bool) -> None:
        """Record whether the beep should currently sound."""
        self.sound_on = sound_on


class Emulator:
    """A CHIP-8 machine loaded with one ROM."""

    def __init__(
        self,
        rom: bytes | bytearray | Sequence[int],
        options: Chip8Options | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.options = copy.deepcopy(options) if options is not None else Chip8Options()
        self.rom = bytes(rom)
        mem = self.options.memory
        if mem.font_start + len(FONTS) > mem.mem_size:
            raise ValueError("font does not fit in memory")
        if mem.rom_start + len(self.rom) > mem.mem_size:
            raise ValueError(
                f"ROM of {len(self.rom)} bytes does not fit in memory at {mem.rom_start:#x}"
            )
        self.width = self.options.display.display_width
        self.height = self.options.display.display_height
        self.memory = bytearray(mem.mem_size)
        self.pixels = [False] * (self.width * self.height)
        self.registers = bytearray(REGISTER_COUNT)
        self.keypad = [False] * KEY_COUNT
        self.stack: list[int] = []
        self.pc = mem.rom_start
        self.index = 0
        self.delay_timer = 0
        self.sound_timer = 0
        self.display_updated = False
        self.sound_playing = False
        self._rng = rng if rng is not None else random.Random()
        self._load()

    def _load(self) -> None:
        mem = self.options.memory
        self.memory[:] = bytes(len(self.memory))
        self.memory[mem.font_start : mem.font_start + len(FONTS)] = FONTS
        self.memory[mem.rom_start : mem.rom_start + len(self.rom)] = self.rom

    def reset(self) -> None:
        """Reload the ROM and clear registers, timers, stack and display."""
        self._load()
        self.pc = self.options.memory.rom_start
        self.index = 0
        self.stack.clear()
        self.delay_timer = 0
        self.sound_timer = 0
        self.sound_playing = False
        self.registers[:] = bytes(REGISTER_COUNT)
        self.pixels[:] = [False] * len(self.pixels)

    def _drain_events(self, system: System) -> bool:
        """Handle queued input; return False when the program should stop."""
        while (event := system.get_key_event()) is not None:
            match event.kind:
                case KeyEventKind.QUIT:
                    return False
                case KeyEventKind.RESTART:
                    if self.sound_playing:
                        system.set_sound_state(False)
                    self.reset()
                    # Leave the remaining events for the next cycle.
                    break
                case KeyEventKind.KEY_DOWN:
                    self.keypad[event.key] = True
                case KeyEventKind.KEY_UP:
                    self.keypad[event.key] = False
        return True

    def _tick_timers(self, system: System) -> None:
        if self.delay_timer > 0:
            self.delay_timer -= 1
        if self.sound_timer > 0:
            self.sound_timer -= 1
        # A timer that has just run down from 1 never starts the sound.
        if self.sound_timer > 0:
            if not self.sound_playing:
                system.set_sound_state(True)
                self.sound_playing = True
        elif self.sound_playing:
            system.set_sound_state(False)
            self.sound_playing = False

    def step_frame(self, system: System) -> bool:
        """Run one display tick of CPU cycles.

        Returns False when a quit event was received, True otherwise.
        """
        self._tick_timers(system)

        wait_for_display_interrupt = False
        for cycle in range(self.options.timing.cpu_cycles_per_display_tick):
            if not self._drain_events(system):
                return False

            try:
                instruction = decode(self.memory[self.pc : self.pc + 2])
            except ValueError:
                instruction = None
            self.pc += 2
            if instruction is None:
                print("Warning: Failed to decode op code", file=sys.stderr)
                continue

            if instruction.op is Op.DISPLAY:
                if cycle > 0 and wait_for_display_interrupt:
                    self.pc -= 2
                    break
            else:
                wait_for_display_interrupt = True
            self.execute(instruction)

        if self.display_updated:
            system.update_screen(self.pixels)
            self.display_updated = False
        return True

    def run(self, system: System) -> None:
        """Run frames at the configured frequency until a quit event arrives."""
        frame_time = 1 / self.options.timing.display_frequency
        while self.step_frame(system):
            time.sleep(frame_time)

    def execute(self, instruction: Instruction) -> None:
        """Carry out one decoded instruction."""
        regs = self.registers
        vx, vy, val = instruction.vx, instruction.vy, instruction.val
        opcode_opts = self.options.opcode

        match instruction.op:
            case Op.CLEAR_SCREEN:
                self.pixels[:] = [False] * len(self.pixels)
                self.display_updated = True
            case Op.JUMP:
                self.pc = val
            case Op.CALL:
                self.stack.append(self.pc)
                self.pc = val
            case Op.RETURN:
                if self.stack:
                    self.pc = self.stack.pop()
                else:
                    print("Warning: Return called with empty stack.", file=sys.stderr)
            case Op.SET:
                regs[vx] = val
            case Op.ADD:
                regs[vx] = (regs[vx] + val) & 0xFF
            case Op.SKIP_IF_VX_EQ:
                if regs[vx] == val:
                    self.pc += 2
            case Op.SKIP_IF_VX_NEQ:
                if regs[vx] != val:
                    self.pc += 2
            case Op.SKIP_IF_VX_EQ_VY:
                if regs[vx] == regs[vy]:
                    self.pc += 2
            case Op.SKIP_IF_VX_NEQ_VY:
                if regs[vx] != regs[vy]:
                    self.pc += 2
            case Op.SET_VX_TO_VY:
                regs[vx] = regs[vy]
                regs[0xF] = 0
            case Op.BINARY_OR:
                regs[vx] |= regs[vy]
                regs[0xF] = 0
            case Op.BINARY_AND:
                regs[vx] &= regs[vy]
                regs[0xF] = 0
            case Op.LOGICAL_XOR:
                regs[vx] ^= regs[vy]
                regs[0xF] = 0
            case Op.ADD_VY_TO_VX:
                old = regs[vx]
                regs[vx] = (old + regs[vy]) & 0xFF
                regs[0xF] = 1 if regs[vx] < old else 0
            case Op.SUB_VX_VY_TO_VX:
                old = regs[vx]
                regs[vx] = (old - regs[vy]) & 0xFF
                regs[0xF] = 1 if old >= regs[vy] else 0
            case Op.SUB_VY_VX_TO_VX:
                old = regs[vx]
                regs[vx] = (regs[vy] - old) & 0xFF
                regs[0xF] = 1 if regs[vy] >= old else 0
            case Op.SHIFT:
                if not opcode_opts.shift_ignore_vy:
                    regs[vx] = regs[vy]
                old = regs[vx]
                if instruction.left_shift:
                    regs[vx] = (old & 0x7F) << 1
                    regs[0xF] = old >> 7
                else:
                    regs[vx] = old >> 1
                    regs[0xF] = old & 0x1
            case Op.SET_INDEX:
                self.index = val
            case Op.JUMP_WITH_OFFSET:
                offset = regs[vx] if opcode_opts.jump_w_offset_use_vx else regs[0]
                self.pc = val + offset
            case Op.RANDOM:
                regs[vx] = self._rng.randrange(256) & val
            case Op.DISPLAY:
                self._draw_sprite(vx, vy, val)
            case Op.SKIP_IF_KEY_PRESSED:
                if self.keypad[regs[vx & 0xF]]:
                    self.pc += 2
            case Op.SKIP_IF_KEY_NOT_PRESSED:
                if not self.keypad[regs[vx & 0xF]]:
                    self.pc += 2
            case Op.SET_VX_TO_DELAY_TIMER:
                regs[vx] = self.delay_timer
            case Op.SET_DELAY_TIMER_TO_VX:
                self.delay_timer = regs[vx]
            case Op.SET_SOUND_TIMER_TO_VX:
                self.sound_timer = regs[vx]
            case Op.ADD_TO_INDEX:
                self.index += regs[vx]
                mem_size = self.options.memory.mem_size
                if self.index >= mem_size:
                    self.index %= mem_size
                    regs[0xF] = 1
            case Op.GET_KEY:
                # Any key held down is accepted; the lowest one wins.
                pressed = next((key for key, down in enumerate(self.keypad) if down), None)
                if pressed is None:
                    self.pc -= 2
                else:
                    regs[vx] = pressed
            case Op.FONT_CHARACTER:
                self.index = self.options.memory.font_start + 5 * (regs[vx] & 0xF)
            case Op.BINARY_CODED_DECIMAL:
                value = regs[vx]
                self.memory[self.index] = value // 100
                self.memory[self.index + 1] = (value % 100) // 10
                self.memory[self.index + 2] = value % 10
            case Op.STORE_MEMORY:
                self.memory[self.index : self.index + vx + 1] = regs[: vx + 1]
                if opcode_opts.store_load_mem_use_i:
                    self.index += vx + 1
            case Op.LOAD_MEMORY:
                regs[: vx + 1] = self.memory[self.index : self.index + vx + 1]
                if opcode_opts.store_load_mem_use_i:
                    self.index += vx + 1

    def _draw_sprite(self, vx: int, vy: int, rows: int) -> None:
        regs = self.registers
        x_start = regs[vx] % self.width
        y_start = regs[vy] % self.height
        x_stop = min(x_start + 8, self.width)
        y_stop = min(y_start + rows, self.height)
        regs[0xF] = 0
        for row, y in enumerate(range(y_start, y_stop)):
            sprite = self.memory[self.index + row]
            for bit, x in enumerate(range(x_start, x_stop)):
                idx = y * self.width + x
                old_pixel = self.pixels[idx]
                new_pixel = bool(sprite & (0x80 >> bit))
                self.pixels[idx] = old_pixel != new_pixel
                if old_pixel and new_pixel:
                    regs[0xF] = 1
        self.display_updated = True