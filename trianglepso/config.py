# ============================================================
# CONFIG: option defaults and validation for the PSO engine
# ============================================================

import math

# --------------------------- DEFAULTS ---------------------------
NUM_TRIANGLES        = 50       # initial triangles per particle
SWARM_SIZE           = 20       # particles (fixed for a run)
INERTIA              = 0.7
COGNITIVE            = 1.5
SOCIAL               = 1.5
MAX_ALPHA            = 0.8
MIN_ALPHA            = 0.1
INCREMENTAL          = False    # grow triangle count on stagnation
GROW_THRESHOLD       = 25       # iterations per growth window
GROW_PERCENT         = 2.0      # required improvement per window (%)
GROW_INCREMENT       = 1        # triangles added per growth event
MAX_TRIANGLES_CAP    = 1000
STAGNATION_WINDOW    = 150      # non-improving steps before a kick
RESEED_FRACTION      = 0.2
VELOCITY_RESET       = True
OFFSCREEN_MARGIN     = 50.0     # px vertices may sit outside the canvas
VELOCITY_CLAMP       = None     # per-dimension |v| limit, None = unbounded
FITNESS_NORM         = "pixels"  # "pixels" (w*h) or "channels" (w*h*3)

DEFAULTS = dict(
    num_triangles=NUM_TRIANGLES,
    swarm_size=SWARM_SIZE,
    inertia=INERTIA,
    cognitive=COGNITIVE,
    social=SOCIAL,
    max_alpha=MAX_ALPHA,
    incremental_triangles=INCREMENTAL,
    triangle_stagnation_threshold=GROW_THRESHOLD,
    triangle_stagnation_percent=GROW_PERCENT,
    triangle_increment=GROW_INCREMENT,
    max_triangles_cap=MAX_TRIANGLES_CAP,
    stagnation_window=STAGNATION_WINDOW,
    reseed_fraction=RESEED_FRACTION,
    velocity_reset_on_kick=VELOCITY_RESET,
    offscreen_margin=OFFSCREEN_MARGIN,
    velocity_clamp=VELOCITY_CLAMP,
    fitness_norm=FITNESS_NORM,
)

# options that only take effect on a freshly built swarm
STRUCTURAL = ("num_triangles", "swarm_size", "offscreen_margin", "fitness_norm")
LIVE = tuple(k for k in DEFAULTS if k not in STRUCTURAL)

FITNESS_NORMS = ("pixels", "channels")

# name -> (kind, lo, hi); None means unbounded on that side
_RULES = {
    "num_triangles":                 ("int",   1,         None),
    "swarm_size":                    ("int",   1,         None),
    "inertia":                       ("float", 0.0,       None),
    "cognitive":                     ("float", 0.0,       None),
    "social":                        ("float", 0.0,       None),
    "max_alpha":                     ("float", MIN_ALPHA, 1.0),
    "incremental_triangles":         ("bool",  None,      None),
    "triangle_stagnation_threshold": ("int",   1,         None),
    "triangle_stagnation_percent":   ("float", 0.0,       None),
    "triangle_increment":            ("int",   1,         None),
    "max_triangles_cap":             ("int",   1,         None),
    "stagnation_window":             ("int",   1,         None),
    "reseed_fraction":               ("float", 0.0,       1.0),
    "velocity_reset_on_kick":        ("bool",  None,      None),
    "offscreen_margin":              ("float", 0.0,       None),
}


def _number(name, value):
    if isinstance(value, bool):
        raise ValueError(f"{name}: expected a number, got {value!r}")
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name}: expected a number, got {value!r}") from None
    if not math.isfinite(v):
        raise ValueError(f"{name}: must be finite, got {value!r}")
    return v


def _clamp(v, lo, hi):
    if lo is not None: v = max(lo, v)
    if hi is not None: v = min(hi, v)
    return v


def coerce_option(name, value):
    """Validate one option: reject what can't be a number, clamp what is out of range."""
    if name == "velocity_clamp":
        if value is None:
            return None
        v = _number(name, value)
        if v <= 0:
            raise ValueError(f"velocity_clamp: must be positive or None, got {value!r}")
        return v
    if name == "fitness_norm":
        if value not in FITNESS_NORMS:
            raise ValueError(f"fitness_norm: expected one of {FITNESS_NORMS}, got {value!r}")
        return value
    if name not in _RULES:
        raise ValueError(f"unknown option: {name!r}")

    kind, lo, hi = _RULES[name]
    if kind == "bool":
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)) and value in (0, 1):
            return bool(value)
        raise ValueError(f"{name}: expected a boolean, got {value!r}")

    v = _clamp(_number(name, value), lo, hi)
    if kind == "int":
        return int(round(v))
    return v


def make_config(overrides=None, **kwargs):
    """
    Build a complete, validated option dict.
    overrides / kwargs: any subset of DEFAULTS keys.
    """
    cfg = dict(DEFAULTS)
    given = dict(overrides or {})
    given.update(kwargs)
    for k, v in given.items():
        cfg[k] = coerce_option(k, v)
    return cfg
