"""Tests for the moon compositor: icons, alpha mask and photographic render."""

from __future__ import annotations

import numpy as np
import pytest
from PIL import Image

from moonphase.catalog import TextureCatalog
from moonphase.render.draw import (
    build_alpha_mask,
    draw,
    draw_from_image,
    fill_moon_icon,
    stroke_moon_icon,
)
from moonphase.render.mask import phase_mask_path
from moonphase.render.raster import Painter

WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)


def disc_coverage(size: int) -> np.ndarray:
    return Painter(Image.new("L", (size, size))).coverage(phase_mask_path(size, size, 1.0))


def count_color(img: Image.Image, color) -> int:
    return int(np.all(np.array(img) == color, axis=-1).sum())


def new_canvas(size: int = 128) -> Image.Image:
    return Image.new("RGBA", (size, size), (0, 0, 0, 0))


# ===================================================================
# ICONS
# ===================================================================


def test_fill_icon_returns_the_same_canvas():
    canvas = new_canvas()
    assert fill_moon_icon(canvas, WHITE, BLACK, -0.3) is canvas


def test_fill_icon_is_deterministic():
    a = fill_moon_icon(new_canvas(), WHITE, BLACK, 0.42)
    b = fill_moon_icon(new_canvas(), WHITE, BLACK, 0.42)
    assert np.array_equal(np.array(a), np.array(b))


def test_new_moon_icon_is_all_shadow():
    icon = fill_moon_icon(new_canvas(), WHITE, BLACK, 0.0)
    assert count_color(icon, WHITE) == 0
    assert count_color(icon, BLACK) == disc_coverage(128).sum()
    assert icon.getpixel((64, 64)) == BLACK
    assert icon.getpixel((0, 0)) == (0, 0, 0, 0)


@pytest.mark.parametrize("phase", [1.0, -1.0])
def test_full_moon_icon_is_all_light(phase):
    icon = fill_moon_icon(new_canvas(), WHITE, BLACK, phase)
    assert count_color(icon, BLACK) == 0
    assert count_color(icon, WHITE) == disc_coverage(128).sum()


def test_full_moon_icons_agree_for_both_signs():
    a = fill_moon_icon(new_canvas(), WHITE, BLACK, 1.0)
    b = fill_moon_icon(new_canvas(), WHITE, BLACK, -1.0)
    assert np.array_equal(np.array(a), np.array(b))


def test_waxing_crescent_icon_is_lit_on_the_right():
    icon = fill_moon_icon(new_canvas(), "white", "black", -0.25)
    assert icon.getpixel((120, 64)) == WHITE
    assert icon.getpixel((64, 64)) == BLACK
    assert icon.getpixel((8, 64)) == BLACK


def test_waning_gibbous_icon_is_lit_on_the_left():
    icon = fill_moon_icon(new_canvas(), "white", "black", 0.75)
    assert icon.getpixel((8, 64)) == WHITE
    assert icon.getpixel((64, 64)) == WHITE
    assert icon.getpixel((120, 64)) == BLACK


def test_fill_icon_on_greyscale_canvas_with_tuple_colours():
    icon = fill_moon_icon(Image.new("L", (64, 64), 0), (255, 255, 255, 255), (0, 0, 0, 255), 0.5)
    assert icon.getpixel((8, 32)) == 255
    assert icon.getpixel((56, 32)) == 0
    assert icon.getpixel((0, 0)) == 0


def test_lit_pixels_grow_with_phase():
    counts = [count_color(fill_moon_icon(new_canvas(64), WHITE, BLACK, p), WHITE) for p in (0.0, 0.25, 0.5, 0.75, 1.0)]
    assert counts == sorted(counts)
    assert counts[0] == 0 and counts[-1] > counts[-2]


def test_stroke_icon_draws_outlines_only():
    canvas = new_canvas()
    assert stroke_moon_icon(canvas, WHITE, BLACK, -0.5) is None
    arr = np.array(canvas)
    assert canvas.getpixel((64, 64)) == WHITE  # terminator on the centreline
    assert canvas.getpixel((32, 64)) == (0, 0, 0, 0)
    assert canvas.getpixel((96, 64)) == (0, 0, 0, 0)
    assert (arr[..., 3] > 0).sum() < 0.1 * disc_coverage(128).sum()


def test_stroke_icon_with_transparent_shadow_only_draws_light():
    canvas = new_canvas()
    stroke_moon_icon(canvas, BLACK, (0, 0, 0, 0), 1.0)
    arr = np.array(canvas)
    drawn = arr[..., 3] > 0
    assert drawn.any()
    assert np.all(arr[drawn][:, :3] == 0)


# ===================================================================
# ALPHA MASK
# ===================================================================


def test_alpha_mask_levels():
    mask = build_alpha_mask((64, 64), -0.25, 0.33)
    assert mask.mode == "L"
    assert set(np.unique(np.array(mask))) <= {0, 84, 255}
    assert mask.getpixel((0, 0)) == 0
    assert mask.getpixel((58, 32)) == 255
    assert mask.getpixel((10, 32)) == 84


def test_alpha_mask_covers_the_disc():
    mask = np.array(build_alpha_mask((64, 64), 0.6, 0.5))
    assert np.array_equal(mask > 0, disc_coverage(64))


@pytest.mark.parametrize("sign", [-1.0, 1.0])
def test_opaque_mask_grows_with_phase(sign):
    counts = [
        int((np.array(build_alpha_mask((64, 64), sign * p, 0.4)) == 255).sum())
        for p in (0.0, 0.2, 0.4, 0.6, 0.8, 1.0)
    ]
    assert counts[0] == 0
    assert all(a < b for a, b in zip(counts, counts[1:]))


def test_new_moon_mask_is_all_shadow():
    mask = np.array(build_alpha_mask((64, 64), 0.0, 0.5))
    assert not (mask == 255).any()
    assert (mask == 127).sum() == disc_coverage(64).sum()


def test_alpha_mask_rejects_bad_input():
    with pytest.raises(ValueError):
        build_alpha_mask((0, 64), 0.5, 0.5)
    with pytest.raises(ValueError):
        build_alpha_mask((64, 64), 2.0, 0.5)
    with pytest.raises(ValueError):
        build_alpha_mask((64, 64), 0.5, -0.5)


# ===================================================================
# PHOTOGRAPHIC RENDER
# ===================================================================


@pytest.mark.parametrize("shadow", [0.0, 0.33, 1.0])
def test_full_moon_shows_whole_texture_over_black(texture64, shadow):
    result = np.array(draw_from_image(texture64, 1.0, shadow))
    tex = np.array(texture64)
    disc = disc_coverage(64)
    assert np.array_equal(result[disc], tex[disc])
    assert np.all(result[~disc] == 0)


def test_waxing_crescent_scenario(texture64):
    result = draw_from_image(texture64, -0.25, 0.33)
    assert result.size == (64, 64)
    assert result.mode == "RGBA"

    arr = np.array(result).astype(int)
    tex = np.array(texture64).astype(int)

    yy, xx = np.mgrid[0:64, 0:64] + 0.5
    outside = np.hypot(xx - 32, yy - 32) > 33
    assert np.all(arr[outside][:, 3] == 0)

    # Lit crescent on the right keeps the texture unchanged.
    for x, y in ((58, 32), (60, 28), (56, 40)):
        assert tuple(arr[y, x]) == tuple(tex[y, x])

    # Dark side shows the texture at about a third over black.
    for x, y in ((10, 32), (32, 32), (20, 20)):
        assert arr[y, x, 3] == 255
        expected = tex[y, x, :3] * 84 / 255
        assert np.all(np.abs(arr[y, x, :3] - expected) <= 2)


def test_zero_shadow_dark_side_is_black(texture64):
    result = draw_from_image(texture64, 0.5, 0.0)
    assert result.getpixel((50, 32)) == BLACK
    assert result.getpixel((10, 32)) == texture64.getpixel((10, 32))


def test_render_does_not_modify_texture(texture64):
    before = np.array(texture64)
    result = draw_from_image(texture64, 0.3, 0.5)
    assert result is not texture64
    assert np.array_equal(np.array(texture64), before)


def test_render_accepts_rgb_texture(texture64):
    rgb = texture64.convert("RGB")
    result = draw_from_image(rgb, -1.0, 0.2)
    assert result.mode == "RGBA"
    assert result.getpixel((32, 32)) == texture64.getpixel((32, 32))
    assert result.getpixel((0, 0)) == (0, 0, 0, 0)


def test_render_rejects_out_of_range_values(texture64):
    with pytest.raises(ValueError):
        draw_from_image(texture64, -1.5, 0.3)
    with pytest.raises(ValueError):
        draw_from_image(texture64, 0.5, 1.3)


def test_draw_uses_catalog(small_catalog):
    img = draw(40, -0.6, 0.3, small_catalog)
    assert img.size == (40, 40)
    assert img.getpixel((0, 0)) == (0, 0, 0, 0)
    assert img.getpixel((20, 20))[3] == 255


def test_draw_without_textures_returns_none():
    assert draw(64, 0.5, 0.3, TextureCatalog()) is None


def test_draw_rejects_non_positive_size(small_catalog):
    with pytest.raises(ValueError):
        draw(0, 0.5, 0.3, small_catalog)
