# ============================================================
# PARTICLE: triangles + velocity + personal best of one candidate
# position and velocity are flat float64 vectors of len n*10
# ============================================================

import numpy as np

from .triangle import GENES, ALPHA, clamp_bounds, random_genes, to_triangles

VEL_INIT = 10.0  # fresh velocity components ~ U(-5, 5)


def random_velocity(rng, size):
    return (rng.random(size) - 0.5) * VEL_INIT


class Particle:
    def __init__(self, num_triangles, width, height, rng,
                 max_alpha=0.8, margin=50.0):
        self.width = width
        self.height = height
        self.rng = rng
        self.max_alpha = max_alpha
        self.margin = margin
        self.lo, self.hi = clamp_bounds(width, height, max_alpha, margin)

        self.position = random_genes(rng, num_triangles, width, height, max_alpha).reshape(-1)
        self.velocity = random_velocity(rng, self.position.size)

        self.best_position = self.position.copy()
        self.best_fitness = float("inf")
        self.fitness = float("inf")

    @property
    def num_triangles(self):
        return self.position.size // GENES

    @property
    def triangles(self):
        return to_triangles(self.position)

    # ------------------------ PSO move ------------------------
    def update(self, global_best, w, c1, c2, velocity_clamp=None):
        """v = w*v + c1*r1*(pbest-x) + c2*r2*(gbest-x); x += v; then clamp once."""
        D = self.position.size
        r1 = self.rng.random(D)
        r2 = self.rng.random(D)
        self.velocity = (w * self.velocity
                         + c1 * r1 * (self.best_position - self.position)
                         + c2 * r2 * (global_best - self.position))
        if velocity_clamp is not None:
            np.clip(self.velocity, -velocity_clamp, velocity_clamp, out=self.velocity)
        self.position += self.velocity
        self.clamp()

    def clamp(self):
        block = self.position.reshape(-1, GENES)
        np.clip(block, self.lo, self.hi, out=block)

    def update_personal_best(self):
        # ties keep the old snapshot
        if self.fitness < self.best_fitness:
            self.best_fitness = self.fitness
            self.best_position = self.position.copy()
            return True
        return False

    # -------------------- reshaping / reseed --------------------
    def set_max_alpha(self, max_alpha):
        self.max_alpha = max_alpha
        self.lo, self.hi = clamp_bounds(self.width, self.height, max_alpha, self.margin)
        a = self.position[ALPHA::GENES]
        np.clip(a, self.lo[ALPHA], self.hi[ALPHA], out=a)

    def grow(self, new_genes, new_velocity):
        """Append triangles; position, velocity and personal best move together."""
        new_genes = np.asarray(new_genes, dtype=np.float64).reshape(-1)
        new_velocity = np.asarray(new_velocity, dtype=np.float64).reshape(-1)
        if new_genes.size % GENES or new_velocity.size != new_genes.size:
            raise ValueError(f"growth block mismatch: {new_genes.size} genes, "
                             f"{new_velocity.size} velocity components")
        position = np.concatenate([self.position, new_genes])
        velocity = np.concatenate([self.velocity, new_velocity])
        best = np.concatenate([self.best_position, new_genes])
        self.position, self.velocity, self.best_position = position, velocity, best
        self.fitness = float("inf")
        self.best_fitness = float("inf")

    def reseed(self):
        """Fresh random triangles at the current size; forgets the personal best."""
        n = self.num_triangles
        self.position = random_genes(self.rng, n, self.width, self.height, self.max_alpha).reshape(-1)
        self.velocity = random_velocity(self.rng, self.position.size)
        self.best_position = self.position.copy()
        self.fitness = float("inf")
        self.best_fitness = float("inf")

    def reset_velocity(self):
        self.velocity = random_velocity(self.rng, self.position.size)
