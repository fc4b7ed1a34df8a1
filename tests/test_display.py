import pygame
import pytest

from chipeight.display import Display, pixel_rects
from chipeight.options import DisplayOptions


def test_pixel_rects_worked_example():
    rects = list(pixel_rects([True, False, False, True], 2, 2, 10))
    assert rects == [(0, 0, 10, 10), (10, 10, 10, 10)]


def test_pixel_rects_count_matches_lit_pixels():
    pixels = [i % 3 == 0 for i in range(64 * 32)]
    rects = list(pixel_rects(pixels, 64, 32, 20))
    assert len(rects) == sum(pixels)


def test_pixel_rects_stay_inside_window():
    pixels = [True] * (8 * 4)
    for x, y, w, h in pixel_rects(pixels, 8, 4, 5):
        assert 0 <= x and x + w <= 8 * 5
        assert 0 <= y and y + h <= 4 * 5
        assert w == h == 5


def test_pixel_rects_ignores_overlong_input():
    exact = list(pixel_rects([True] * 16, 4, 4, 3))
    overlong = list(pixel_rects([True] * 40, 4, 4, 3))
    assert overlong == exact


def test_pixel_rects_short_input_leaves_rest_unlit():
    assert list(pixel_rects([False, False], 4, 4, 3)) == []


def test_pixel_rects_empty():
    assert list(pixel_rects([], 64, 32, 20)) == []


@pytest.fixture
def small_options():
    return DisplayOptions(
        display_width=4,
        display_height=2,
        scaling=3,
        color_off_rgb=(10, 20, 30),
        color_on_rgb=(200, 150, 100),
    )


def test_draw_screen_colours(small_options):
    surface = pygame.Surface((4 * 3, 2 * 3))
    display = Display(small_options, surface=surface)
    pixels = [True, False, False, False, False, False, False, True]
    display.draw_screen(pixels)
    on = pygame.Color(*small_options.color_on_rgb)
    off = pygame.Color(*small_options.color_off_rgb)
    assert surface.get_at((1, 1)) == on
    assert surface.get_at((4, 1)) == off
    assert surface.get_at((3 * 3 + 2, 3 + 2)) == on
    assert surface.get_at((0, 3 + 1)) == off


def test_draw_screen_clears_previous_frame(small_options):
    surface = pygame.Surface((4 * 3, 2 * 3))
    display = Display(small_options, surface=surface)
    display.draw_screen([True] * 8)
    display.draw_screen([False] * 8)
    off = pygame.Color(*small_options.color_off_rgb)
    assert all(
        surface.get_at((x, y)) == off for x in range(4 * 3) for y in range(2 * 3)
    )