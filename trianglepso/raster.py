# ============================================================
# RASTER: composite triangles over white, back-to-front
# Same function feeds both fitness and preview, so the two never
# disagree on what a candidate looks like.
# ============================================================

import math

import numpy as np
from PIL import Image, ImageDraw

from .triangle import GENES, Triangle

# ---------------------- Utility / IO ----------------------
def clamp01(a): return np.minimum(1.0, np.maximum(0.0, a))
def to_uint8(a): return (clamp01(a) * 255.0 + 0.5).astype(np.uint8)


def load_target(path, max_size=None):
    """
    Load an image as an RGB uint8 buffer (H, W, 3).
    max_size: scale down (keeping aspect) so neither side exceeds it.
    """
    im = Image.open(path).convert("RGB")
    w, h = im.size
    if max_size and (w > max_size or h > max_size):
        scale = min(max_size / w, max_size / h)
        w, h = max(1, int(w * scale)), max(1, int(h * scale))
        im = im.resize((w, h), Image.LANCZOS)
    return np.asarray(im, dtype=np.uint8).copy()


# --------------------- Alpha Compositing -------------------
def alpha_blend_rgb(base_rgb, over_rgb, alpha):  # float32 in [0..1]
    return over_rgb * alpha + base_rgb * (1.0 - alpha)


def _gene_block(triangles):
    if triangles is None:
        return np.zeros((0, GENES), np.float64)
    if len(triangles) and isinstance(triangles[0], Triangle):
        return np.stack([t.genes for t in triangles])
    return np.asarray(triangles, dtype=np.float64).reshape(-1, GENES)


def _draw_triangle(canvas_rgb, p):
    """Blend one triangle into canvas_rgb in place, touching only its bounding box."""
    h, w, _ = canvas_rgb.shape
    xs, ys = p[0:6:2], p[1:6:2]
    x0, y0 = max(0, math.floor(xs.min())), max(0, math.floor(ys.min()))
    x1, y1 = min(w, math.ceil(xs.max()) + 1), min(h, math.ceil(ys.max()) + 1)
    if x0 >= x1 or y0 >= y1:
        return  # fully off-canvas

    # coverage * alpha lands in one 8-bit mask
    mask = Image.new("L", (x1 - x0, y1 - y0), 0)
    draw = ImageDraw.Draw(mask)
    pts = [(float(xs[k] - x0), float(ys[k] - y0)) for k in range(3)]
    draw.polygon(pts, fill=int(p[9] * 255))

    al  = np.asarray(mask).astype(np.float32)[..., None] / 255.0
    col = (np.floor(p[6:9]) / 255.0).astype(np.float32)
    region = canvas_rgb[y0:y1, x0:x1]
    canvas_rgb[y0:y1, x0:x1] = alpha_blend_rgb(region, col, al)


def render(triangles, width, height):
    """
    Rasterize triangles in list order over an opaque white background.
    triangles: list of Triangle, flat gene vector or (n,10) array.
    Returns an RGB uint8 buffer of shape (height, width, 3).
    No anti-aliasing: Pillow's polygon fill is used as-is everywhere.
    """
    canvas = np.ones((height, width, 3), np.float32)  # white canvas
    for p in _gene_block(triangles):
        _draw_triangle(canvas, p)
    return to_uint8(canvas)


def save_image(pixels, path, dpi=None):
    im = Image.fromarray(np.asarray(pixels, dtype=np.uint8)[..., :3])
    if dpi:
        im.save(path, dpi=dpi)
    else:
        im.save(path)
