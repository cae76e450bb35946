import numpy as np
import pytest

from trianglepso.triangle import (
    GENES, Triangle, clamp_bounds, init_bounds, random_genes, to_triangles,
)


def test_round_trip_is_exact(rng):
    for _ in range(20):
        t = Triangle.random(123, 77, 0.8, rng)
        back = Triangle.from_vector(t.to_vector())
        assert back == t
        assert np.array_equal(back.genes, t.genes)


def test_random_genes_stay_in_sampling_box(rng):
    g = random_genes(rng, 2000, 40, 30, 0.6)
    assert g.shape == (2000, GENES)
    xs, ys = g[:, 0:6:2], g[:, 1:6:2]
    assert xs.min() >= 0 and xs.max() < 40
    assert ys.min() >= 0 and ys.max() < 30
    assert g[:, 6:9].min() >= 0 and g[:, 6:9].max() <= 255
    assert g[:, 9].min() >= 0.1 and g[:, 9].max() <= 0.6


def test_clone_shares_no_state(rng):
    t = Triangle.random(10, 10, 0.8, rng)
    c = t.clone()
    c.genes[0] += 5
    assert c != t
    v = t.to_vector()
    v[1] = -99
    assert t.genes[1] != -99


def test_from_vector_rejects_wrong_length():
    with pytest.raises(ValueError):
        Triangle.from_vector([1, 2, 3])


def test_accessors():
    t = Triangle([1, 2, 3, 4, 5, 6, 10, 20, 30, 0.5])
    assert t.vertices == [(1, 2), (3, 4), (5, 6)]
    assert t.color == (10, 20, 30)
    assert t.alpha == 0.5


def test_split_flat_genes_into_triangles(rng):
    tris = [Triangle.random(20, 20, 0.8, rng) for _ in range(4)]
    flat = np.concatenate([t.to_vector() for t in tris])
    assert flat.shape == (40,)
    assert to_triangles(flat) == tris


def test_clamp_bounds_add_margin_to_vertices_only():
    lo, hi = clamp_bounds(100, 50, 0.7, 10)
    ilo, ihi = init_bounds(100, 50, 0.7)
    assert list(lo[:6]) == [-10] * 6
    assert list(hi[:6]) == [110, 60, 110, 60, 110, 60]
    assert np.array_equal(lo[6:], ilo[6:])
    assert np.array_equal(hi[6:], ihi[6:])
