"""Keyboard input mapped onto the CHIP-8 hexadecimal keypad.

Keys follow the original COSMAC VIP keypad layout::

    1 2 3 C        1 2 3 4
    4 5 6 D   =>   q w e r
    7 8 9 E        a s d f
    A 0 B F        z x c v

Escape quits and F5 restarts the program.
"""

from __future__ import annotations

from collections.abc import Callable

import pygame

from chipeight.emulator import KeyEvent, KeyEventKind

_KEYMAP = {
    pygame.K_1: 0x1,
    pygame.K_2: 0x2,
    pygame.K_3: 0x3,
    pygame.K_4: 0xC,
    pygame.K_q: 0x4,
    pygame.K_w: 0x5,
    pygame.K_e: 0x6,
    pygame.K_r: 0xD,
    pygame.K_a: 0x7,
    pygame.K_s: 0x8,
    pygame.K_d: 0x9,
    pygame.K_f: 0xE,
    pygame.K_z: 0xA,
    pygame.K_x: 0x0,
    pygame.K_c: 0xB,
    pygame.K_v: 0xF,
}


def map_key(key: int) -> int | None:
    """Return the keypad number (0x0-0xF) for a key code, or None if unmapped."""
    return _KEYMAP.get(key)


def translate_event(event: pygame.event.Event) -> KeyEvent | None:
    """Turn a window event into an emulator input event, or None to ignore it."""
    key = getattr(event, "key", None)
    if event.type == pygame.QUIT:
        return KeyEvent(KeyEventKind.QUIT)
    if event.type == pygame.KEYDOWN:
        if key == pygame.K_ESCAPE:
            return KeyEvent(KeyEventKind.QUIT)
        if key == pygame.K_F5:
            return KeyEvent(KeyEventKind.RESTART)
        pad = map_key(key)
        return KeyEvent(KeyEventKind.KEY_DOWN, pad) if pad is not None else None
    if event.type == pygame.KEYUP:
        pad = map_key(key)
        return KeyEvent(KeyEventKind.KEY_UP, pad) if pad is not None else None
    return None


class Keyboard:
    """Reads queued window events and yields CHIP-8 key events."""

    def __init__(self, poll: Callable[[], pygame.event.Event] | None = None) -> None:
        self._poll = poll if poll is not None else pygame.event.poll

    def get_key_event(self) -> KeyEvent | None:
        """Return the next mapped event, skipping unmapped ones; None when empty."""
        while (event := self._poll()).type != pygame.NOEVENT:
            translated = translate_event(event)
            if translated is not None:
                return translated
        return None