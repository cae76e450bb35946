import numpy as np
import pytest

from trianglepso.fitness import evaluate, prepare_target
from trianglepso.raster import render
from trianglepso.triangle import Triangle

# covers every pixel of a 10x10 canvas
FULL = [-10, -10, 40, -10, -10, 40]


def white(w, h, channels=3):
    return np.full((h, w, channels), 255, np.uint8)


# ---------------------------------------------------------------------------
# Rasterizer
# ---------------------------------------------------------------------------

def test_empty_list_renders_white():
    out = render([], 7, 5)
    assert out.shape == (5, 7, 3)
    assert out.dtype == np.uint8
    assert (out == 255).all()


def test_opaque_triangle_covers_canvas():
    out = render([Triangle(FULL + [0, 0, 0, 1.0])], 10, 10)
    assert (out == 0).all()


def test_later_triangles_are_drawn_on_top():
    red = Triangle(FULL + [255, 0, 0, 1.0])
    blue = Triangle(FULL + [0, 0, 255, 1.0])
    out = render([red, blue], 10, 10)
    assert (out[..., 0] == 0).all()
    assert (out[..., 2] == 255).all()


def test_half_alpha_blends_over_white():
    out = render([Triangle(FULL + [0, 0, 0, 0.5])], 10, 10)
    assert np.allclose(out.astype(int), 128, atol=1)


def test_off_canvas_triangle_leaves_canvas_untouched():
    out = render([Triangle([-40, -40, -20, -45, -30, -10, 0, 0, 0, 1.0])], 10, 10)
    assert (out == 255).all()


def test_accepts_flat_gene_vectors():
    tris = [Triangle([1, 1, 8, 2, 4, 9, 10, 200, 30, 0.7]),
            Triangle([0, 9, 9, 9, 5, 0, 250, 10, 90, 0.4])]
    flat = np.concatenate([t.genes for t in tris])
    assert np.array_equal(render(tris, 10, 10), render(flat, 10, 10))


# ---------------------------------------------------------------------------
# Fitness
# ---------------------------------------------------------------------------

def test_perfect_match_is_zero():
    assert evaluate(white(4, 3), white(4, 3), 4, 3) == 0


def test_white_translucent_triangle_on_white_target_is_zero():
    tri = Triangle([0, 0, 2, 0, 0, 2, 255, 255, 255, 0.1])
    assert evaluate(render([tri], 2, 2), white(2, 2), 2, 2) == 0


def test_normalisation_modes():
    black = np.zeros((2, 2, 3), np.uint8)
    assert evaluate(black, white(2, 2), 2, 2) == 3 * 255 ** 2
    assert evaluate(black, white(2, 2), 2, 2, norm="channels") == 255 ** 2


def test_alpha_channel_is_ignored(noise_target):
    cand = render([Triangle([0, 0, 12, 0, 0, 10, 10, 20, 30, 0.8])], 12, 10)
    rgba = np.dstack([noise_target, np.zeros((10, 12), np.uint8)])
    other = rgba.copy()
    other[..., 3] = 200
    assert evaluate(cand, rgba, 12, 10) == evaluate(cand, other, 12, 10)
    assert evaluate(cand, rgba, 12, 10) == evaluate(cand, noise_target, 12, 10)


def test_evaluation_is_deterministic(noise_target, rng):
    tris = [Triangle.random(12, 10, 0.8, rng) for _ in range(5)]
    a = evaluate(render(tris, 12, 10), noise_target, 12, 10)
    b = evaluate(render(tris, 12, 10), noise_target, 12, 10)
    assert a == b


def test_large_canvas_does_not_overflow():
    w, h = 400, 400
    black = np.zeros((h, w, 3), np.uint8)
    assert evaluate(black, white(w, h), w, h) == 3 * 255 ** 2


def test_shape_mismatch_raises():
    with pytest.raises(ValueError):
        evaluate(white(3, 3), white(4, 3), 4, 3)


def test_prepare_target_drops_alpha_and_checks_shape():
    t = prepare_target(white(5, 4, channels=4), 5, 4)
    assert t.shape == (4, 5, 3)
    with pytest.raises(ValueError):
        prepare_target(white(5, 4), 4, 5)
    with pytest.raises(ValueError):
        prepare_target(np.zeros((4, 5), np.uint8), 5, 4)


def test_prepare_target_scales_unit_float_buffers():
    t = prepare_target(np.full((4, 5, 3), 1.0), 5, 4)
    assert t.dtype == np.int64
    assert (t == 255).all()
    half = prepare_target(np.full((4, 5, 4), 0.5, np.float32), 5, 4)
    assert (half == 128).all()


@pytest.mark.parametrize("pixels", [
    np.full((4, 5, 3), 255.0),
    np.full((4, 5, 3), -0.1),
    np.full((4, 5, 3), np.nan),
    np.full((4, 5, 3), 300, np.int32),
    np.full((4, 5, 3), "a"),
])
def test_prepare_target_rejects_out_of_range_buffers(pixels):
    with pytest.raises(ValueError):
        prepare_target(pixels, 5, 4)
