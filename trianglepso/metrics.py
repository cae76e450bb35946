# ============================================================
# METRICS: reconstruction quality report (MSE / PSNR / SSIM)
# ============================================================

import numpy as np
from skimage.metrics import structural_similarity as ssim
from skimage.metrics import peak_signal_noise_ratio as psnr

SSIM_MIN_SIDE = 7  # default skimage window


def compute_metrics(canvas, target, errors=None):
    """
    canvas, target: RGB(A) uint8 buffers of equal size.
    errors: optional fitness history, used for the convergence rate.
    """
    a = np.asarray(canvas)[..., :3].astype(np.float32) / 255.0
    b = np.asarray(target)[..., :3].astype(np.float32) / 255.0
    final_mse = float(np.mean((a - b) ** 2))
    psnr_val = float("inf") if final_mse == 0 else float(psnr(b, a, data_range=1.0))
    if min(a.shape[:2]) >= SSIM_MIN_SIDE:
        ssim_val = float(ssim(b, a, channel_axis=2, data_range=1.0))
    else:
        ssim_val = float("nan")

    errors = [e for e in (errors or []) if np.isfinite(e)]
    conv_rate = (errors[0] - errors[-1]) / max(1, len(errors)) if errors else 0.0
    return dict(
        final_mse=final_mse,
        psnr=psnr_val,
        ssim=ssim_val,
        conv_rate=conv_rate,
    )
