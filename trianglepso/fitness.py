# ============================================================
# FITNESS: squared RGB error against the target, per pixel
# ============================================================

import numpy as np

from .config import FITNESS_NORM


def prepare_target(pixels, width, height):
    """
    RGB(A) buffer -> contiguous int64 (H, W, 3); alpha is dropped here.
    Integer buffers must hold 0..255; float buffers must hold 0..1 and
    are scaled to 0..255.
    """
    arr = np.asarray(pixels)
    if arr.ndim != 3 or arr.shape[0] != height or arr.shape[1] != width or arr.shape[2] < 3:
        raise ValueError(f"expected a ({height}, {width}, 3|4) pixel buffer, got {arr.shape}")
    rgb = arr[..., :3]
    if np.issubdtype(rgb.dtype, np.integer):
        if rgb.size and (rgb.min() < 0 or rgb.max() > 255):
            raise ValueError("integer pixel values must lie in [0, 255]")
        return np.ascontiguousarray(rgb, dtype=np.int64)
    if np.issubdtype(rgb.dtype, np.floating):
        if not np.isfinite(rgb).all() or (rgb.size and (rgb.min() < 0 or rgb.max() > 1)):
            raise ValueError("float pixel values must be finite and lie in [0, 1]")
        return np.ascontiguousarray(np.rint(rgb * 255.0), dtype=np.int64)
    raise ValueError(f"unsupported pixel dtype {arr.dtype}")


def evaluate(candidate, target, width, height, norm=FITNESS_NORM):
    """
    Sum of squared R,G,B differences over all pixels, divided by
    width*height ("pixels") or width*height*3 ("channels").
    0 is a perfect match; lower is better. Alpha is never read.
    """
    c, t = np.asarray(candidate), np.asarray(target)
    if c.shape[:2] != (height, width) or t.shape[:2] != (height, width):
        raise ValueError(f"buffer shapes {c.shape} / {t.shape} do not match {width}x{height}")
    d = c[..., :3].astype(np.int64) - t[..., :3].astype(np.int64, copy=False)
    sse = int(np.einsum("ijk,ijk->", d, d))
    n = width * height * (3 if norm == "channels" else 1)
    return sse / n
