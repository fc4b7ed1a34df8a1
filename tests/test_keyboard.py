import pygame
import pytest

from chipeight.emulator import KeyEvent, KeyEventKind
from chipeight.keyboard import Keyboard, map_key, translate_event


@pytest.mark.parametrize(
    ("key", "pad"),
    [
        (pygame.K_1, 0x1),
        (pygame.K_2, 0x2),
        (pygame.K_3, 0x3),
        (pygame.K_4, 0xC),
        (pygame.K_q, 0x4),
        (pygame.K_w, 0x5),
        (pygame.K_e, 0x6),
        (pygame.K_r, 0xD),
        (pygame.K_a, 0x7),
        (pygame.K_s, 0x8),
        (pygame.K_d, 0x9),
        (pygame.K_f, 0xE),
        (pygame.K_z, 0xA),
        (pygame.K_x, 0x0),
        (pygame.K_c, 0xB),
        (pygame.K_v, 0xF),
    ],
)
def test_map_key(key, pad):
    assert map_key(key) == pad


def test_map_key_covers_whole_keypad():
    keys = [pygame.K_1, pygame.K_2, pygame.K_3, pygame.K_4, pygame.K_q, pygame.K_w,
            pygame.K_e, pygame.K_r, pygame.K_a, pygame.K_s, pygame.K_d, pygame.K_f,
            pygame.K_z, pygame.K_x, pygame.K_c, pygame.K_v]
    assert sorted(map_key(k) for k in keys) == list(range(16))


def test_map_key_unmapped():
    assert map_key(pygame.K_p) is None


def test_quit_event():
    assert translate_event(pygame.event.Event(pygame.QUIT)) == KeyEvent(KeyEventKind.QUIT)


def test_escape_quits():
    event = pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE)
    assert translate_event(event) == KeyEvent(KeyEventKind.QUIT)


def test_f5_restarts():
    event = pygame.event.Event(pygame.KEYDOWN, key=pygame.K_F5)
    assert translate_event(event) == KeyEvent(KeyEventKind.RESTART)


def test_key_down_and_up():
    down = translate_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_q))
    up = translate_event(pygame.event.Event(pygame.KEYUP, key=pygame.K_v))
    assert down == KeyEvent(KeyEventKind.KEY_DOWN, 0x4)
    assert up == KeyEvent(KeyEventKind.KEY_UP, 0xF)


def test_unmapped_events_ignored():
    assert translate_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_p)) is None
    assert translate_event(pygame.event.Event(pygame.KEYUP, key=pygame.K_ESCAPE)) is None
    assert translate_event(pygame.event.Event(pygame.MOUSEMOTION)) is None


def _fake_poll(events):
    queue = list(events)

    def poll():
        return queue.pop(0) if queue else pygame.event.Event(pygame.NOEVENT)

    return poll, queue


def test_keyboard_skips_unmapped_and_keeps_rest_queued():
    poll, queue = _fake_poll(
        [
            pygame.event.Event(pygame.KEYDOWN, key=pygame.K_p),
            pygame.event.Event(pygame.KEYDOWN, key=pygame.K_w),
            pygame.event.Event(pygame.KEYUP, key=pygame.K_w),
        ]
    )
    keyboard = Keyboard(poll)
    assert keyboard.get_key_event() == KeyEvent(KeyEventKind.KEY_DOWN, 0x5)
    assert len(queue) == 1
    assert keyboard.get_key_event() == KeyEvent(KeyEventKind.KEY_UP, 0x5)
    assert keyboard.get_key_event() is None


def test_keyboard_empty_queue():
    poll, _ = _fake_poll([])
    assert Keyboard(poll).get_key_event() is None