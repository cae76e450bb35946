# ============================================================
# TRIANGLE: 10-gene value type + gene bounds
# genes: [x1,y1, x2,y2, x3,y3, r,g,b, alpha]
#   vertices in px, colors in [0,255], alpha in [MIN_ALPHA, max_alpha]
# ============================================================

import numpy as np

from .config import MIN_ALPHA

GENES = 10
VERTEX = slice(0, 6)
COLOR  = slice(6, 9)
ALPHA  = 9
GENE_NAMES = ("x1", "y1", "x2", "y2", "x3", "y3", "r", "g", "b", "a")


# ---------------------- Gene Bounds ----------------------
def init_bounds(width, height, max_alpha):
    """Sampling box for fresh triangles: vertices on-canvas, any color, alpha in [0.1, max_alpha]."""
    lo = np.array([0, 0, 0, 0, 0, 0, 0.0, 0.0, 0.0, MIN_ALPHA], np.float64)
    hi = np.array([width, height, width, height, width, height,
                   255.0, 255.0, 255.0, max_alpha], np.float64)
    return lo, hi


def clamp_bounds(width, height, max_alpha, margin):
    """Valid domain after a move: vertices may leave the canvas by `margin` px."""
    lo, hi = init_bounds(width, height, max_alpha)
    lo[VERTEX] -= margin
    hi[VERTEX] += margin
    return lo, hi


def random_genes(rng, n, width, height, max_alpha):
    """(n, 10) block of freshly randomised triangles."""
    lo, hi = init_bounds(width, height, max_alpha)
    # uniform() is half-open, so vertices land in [0,w) / [0,h)
    return rng.uniform(lo, hi, size=(n, GENES))


# ------------------------ Triangle ------------------------
class Triangle:
    """A single translucent triangle. Always copied, never aliased."""

    __slots__ = ("genes",)

    def __init__(self, genes=None):
        if genes is None:
            self.genes = np.zeros(GENES, np.float64)
            self.genes[ALPHA] = MIN_ALPHA
        else:
            g = np.array(genes, dtype=np.float64).reshape(-1)
            if g.size != GENES:
                raise ValueError(f"triangle needs {GENES} genes, got {g.size}")
            self.genes = g

    @classmethod
    def random(cls, width, height, max_alpha, rng):
        return cls(random_genes(rng, 1, width, height, max_alpha)[0])

    @classmethod
    def from_vector(cls, v):
        return cls(v)

    def to_vector(self):
        return self.genes.copy()

    def clone(self):
        return Triangle(self.genes)

    @property
    def vertices(self):
        g = self.genes
        return [(g[0], g[1]), (g[2], g[3]), (g[4], g[5])]

    @property
    def color(self):
        return tuple(self.genes[COLOR])

    @property
    def alpha(self):
        return float(self.genes[ALPHA])

    def __eq__(self, other):
        if not isinstance(other, Triangle):
            return NotImplemented
        return np.array_equal(self.genes, other.genes)

    __hash__ = None

    def __repr__(self):
        vals = ", ".join(f"{n}={v:.2f}" for n, v in zip(GENE_NAMES, self.genes))
        return f"Triangle({vals})"


def to_triangles(genes):
    """Flat or (n,10) gene array -> list of independent Triangles."""
    block = np.asarray(genes, dtype=np.float64).reshape(-1, GENES)
    return [Triangle(row) for row in block]
