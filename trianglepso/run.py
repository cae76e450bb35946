# ============================================================
# TRIANGLE-PSO: reference driver
# - Loads a target image, steps the swarm, logs progress
# - Ctrl+C stops after the current step and still saves
# - Saves final canvas, a progress strip and an .npz archive
# ============================================================

import sys, time, signal, warnings
warnings.filterwarnings("ignore")

import numpy as np

from .metrics import compute_metrics
from .optimizer import Optimizer
from .raster import load_target, save_image

# --------------------------- CONFIG ---------------------------
TARGET_PATH      = "target.jpg"
MAX_CANVAS_SIZE  = 400              # longest side of the working canvas
N_ITERS          = 2000             # swarm steps
LOG_EVERY        = 25
SNAPSHOT_EVERY   = 250              # panels in progress strip
OUTPUT_CANVAS    = "pso_triangles_final.png"
OUTPUT_STRIP     = "pso_triangles_strip.png"
MODEL_SAVE_PATH  = "pso_triangles_model.npz"
DPI_META         = (300, 300)

OPTIONS = dict(
    num_triangles=50,
    swarm_size=20,
    inertia=0.7,
    cognitive=1.5,
    social=1.5,
    max_alpha=0.8,
    incremental_triangles=False,
)

stop_requested = False
def handle_interrupt(signum=None, frame=None):
    global stop_requested
    stop_requested = True
    print("\nStop signal received, finishing current step...")


# --------------------- Progress strip builder -------------------
def make_strip(panels, save_path, gap=16, bg=255):
    if not panels: return
    h, w, _ = panels[0].shape
    out = np.full((h, w*len(panels) + gap*(len(panels)-1), 3), bg, np.uint8)
    for i, p in enumerate(panels):
        x0 = i*(w+gap)
        out[:, x0:x0+w, :] = p
    save_image(out, save_path, dpi=DPI_META)


def run(target, n_iters=N_ITERS, options=None, rng=None, verbose=True, log_every=LOG_EVERY,
        snapshot_every=SNAPSHOT_EVERY):
    """Step a fresh swarm over `target`; returns (optimizer, fitness history, panels)."""
    h, w = target.shape[:2]
    opt = Optimizer(w, h, config=options, target=target, rng=rng, verbose=verbose)
    errors, panels = [], []
    for i in range(1, n_iters + 1):
        if stop_requested: break
        opt.step()
        errors.append(opt.get_best_fitness())

        if verbose and i % log_every == 0:
            print(f"[{i:05d}/{n_iters}] best={opt.get_best_fitness():.2f} "
                  f"| triangles={opt.num_triangles}")
        if snapshot_every and (i % snapshot_every == 0 or i == n_iters):
            panels.append(opt.render_best())
    return opt, errors, panels


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    path = argv[0] if argv else TARGET_PATH
    signal.signal(signal.SIGINT, handle_interrupt)
    signal.signal(signal.SIGTERM, handle_interrupt)

    t0 = time.time()
    print("== TRIANGLE-PSO start ==")
    target = load_target(path, MAX_CANVAS_SIZE)
    print(f"Target: {path} ({target.shape[1]}x{target.shape[0]})")

    opt, errors, panels = run(target, N_ITERS, OPTIONS, log_every=LOG_EVERY,
                              snapshot_every=SNAPSHOT_EVERY)
    canvas = opt.render_best()
    metrics = compute_metrics(canvas, target, errors)

    print("\nFinal Metrics:")
    for k, v in metrics.items():
        print(f"   {k:15s}: {v:.6f}")

    save_image(canvas, OUTPUT_CANVAS, dpi=DPI_META)
    make_strip(panels, OUTPUT_STRIP, gap=20)
    best = opt.global_best if opt.global_best is not None else np.zeros(0)
    np.savez_compressed(MODEL_SAVE_PATH,
        triangles=best.reshape(-1, 10).astype(np.float32),
        errors=np.array(errors, dtype=np.float64),
        iterations=opt.get_iteration(),
        metrics=metrics,
        canvas_final=canvas)

    print(f"Saved: {OUTPUT_CANVAS}, {OUTPUT_STRIP}, {MODEL_SAVE_PATH}")
    print(f"Done in {time.time()-t0:.1f}s ({opt.get_iteration()} iterations, "
          f"{opt.num_triangles} triangles)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
