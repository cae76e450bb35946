# ============================================================
# OPTIMIZER: the swarm, its global best and the PSO step
# ============================================================

import os

import numpy as np

from .config import LIVE, STRUCTURAL, coerce_option, make_config
from .fitness import evaluate, prepare_target
from .growth import GrowthController
from .kick import StagnationKicker
from .particle import Particle, random_velocity
from .raster import render
from .triangle import GENES, random_genes, to_triangles


def make_rng(rng=None):
    """Generator passthrough; an int seeds one; None draws a seed from os.urandom."""
    if isinstance(rng, np.random.Generator):
        return rng
    if rng is None:
        return np.random.default_rng(int.from_bytes(os.urandom(8), "little"))
    return np.random.default_rng(rng)


class Optimizer:
    """
    Particle swarm over triangle lists. Drive it by calling step()
    repeatedly once a target is set; poll get_best_triangles(),
    get_best_fitness() and get_iteration() for progress.
    Steps must not overlap; each one runs to completion.
    """

    def __init__(self, width, height, config=None, target=None, rng=None, verbose=False, **options):
        if int(width) < 1 or int(height) < 1:
            raise ValueError(f"canvas must be at least 1x1, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.config = make_config(config, **options)
        self.rng = make_rng(rng)
        self.verbose = verbose

        self.target = None
        self.growth = GrowthController(self.config)
        self.kicker = StagnationKicker(self.config)
        self.reset()
        if target is not None:
            self.set_target(target)

    # --------------------------- state ---------------------------
    def reset(self):
        """Fresh random swarm at the current triangle count; forget every best."""
        n = getattr(self, "num_triangles", self.config["num_triangles"])
        self.num_triangles = n
        self.iteration = 0
        self.global_best = None
        self.global_best_fitness = float("inf")
        self.particles = [
            Particle(n, self.width, self.height, self.rng,
                     max_alpha=self.config["max_alpha"],
                     margin=self.config["offscreen_margin"])
            for _ in range(self.config["swarm_size"])
        ]
        self.growth.reset()
        self.kicker.reset()

    def set_target(self, pixels):
        self.target = prepare_target(pixels, self.width, self.height)

    def log(self, msg):
        if self.verbose:
            print(msg)

    # ------------------------- fitness -------------------------
    def render(self, genes):
        return render(genes, self.width, self.height)

    def fitness(self, genes):
        return evaluate(self.render(genes), self.target, self.width, self.height,
                        norm=self.config["fitness_norm"])

    # --------------------------- step ---------------------------
    def step(self):
        """One PSO iteration. Returns True if the global best improved."""
        if self.target is None:
            raise RuntimeError("no target set; call set_target() before step()")

        improved = False
        for p in self.particles:
            p.fitness = self.fitness(p.position)
            p.update_personal_best()
            if p.fitness < self.global_best_fitness:
                self.global_best_fitness = p.fitness
                self.global_best = p.position.copy()
                improved = True

        # one gbest snapshot for the whole move phase
        gbest = self.global_best
        w, c1, c2 = self.config["inertia"], self.config["cognitive"], self.config["social"]
        vclamp = self.config["velocity_clamp"]
        for p in self.particles:
            p.update(gbest, w, c1, c2, vclamp)

        self.iteration += 1

        grown = 0
        try:
            grown = self.growth.observe(self)
        except (ValueError, IndexError) as e:
            self.log(f"[warn] growth skipped: {e}")
        try:
            # fitness is all +inf right after growth: restart the stall count instead of ranking
            self.kicker.observe(self, improved or grown > 0)
        except (ValueError, IndexError) as e:
            self.log(f"[warn] kick skipped: {e}")
        return improved

    # ------------------------- growth -------------------------
    def add_triangles(self, count):
        """
        Append `count` random triangles to every particle and to the global
        best, then mark all fitness values stale (+inf). Everything is built
        first and committed together. Returns the number added.
        """
        if count <= 0:
            return 0
        w, h, a = self.width, self.height, self.config["max_alpha"]
        blocks = [random_genes(self.rng, count, w, h, a) for _ in self.particles]
        vels = [random_velocity(self.rng, count * GENES) for _ in self.particles]
        gbest = None
        if self.global_best is not None:
            gbest = np.concatenate([self.global_best,
                                    random_genes(self.rng, count, w, h, a).reshape(-1)])
        for p in self.particles:
            if p.num_triangles != self.num_triangles:
                raise ValueError(f"particle holds {p.num_triangles} triangles, "
                                 f"swarm holds {self.num_triangles}")

        for p, g, v in zip(self.particles, blocks, vels):
            p.grow(g, v)
        self.global_best = gbest
        self.global_best_fitness = float("inf")
        self.num_triangles += count
        return count

    # ------------------------- config -------------------------
    def update_config(self, partial=None, **kwargs):
        """Apply live options; structural ones need a new Optimizer."""
        given = dict(partial or {})
        given.update(kwargs)
        fixed = [k for k in given if k in STRUCTURAL]
        if fixed:
            raise ValueError(f"{', '.join(fixed)} cannot change on a live swarm; "
                             f"build a new Optimizer")
        clean = {}
        for k, v in given.items():
            if k not in LIVE:
                raise ValueError(f"unknown option: {k!r}")
            clean[k] = coerce_option(k, v)

        self.config.update(clean)
        if "max_alpha" in clean:
            for p in self.particles:
                p.set_max_alpha(self.config["max_alpha"])
        self.growth.configure(self.config)
        self.kicker.configure(self.config)

    def set_parameters(self, inertia, cognitive, social):
        self.update_config(inertia=inertia, cognitive=cognitive, social=social)

    # ------------------------ accessors ------------------------
    def get_best_triangles(self):
        if self.global_best is None:
            return None
        return to_triangles(self.global_best)

    def get_best_fitness(self):
        return self.global_best_fitness

    def get_iteration(self):
        return self.iteration

    def render_best(self):
        """Best candidate as an RGB buffer; blank white before the first step."""
        return self.render(self.global_best)
