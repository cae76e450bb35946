# ============================================================
# KICK: reseed the worst particles after a long stall
# ============================================================

import math

import numpy as np


class StagnationKicker:
    def __init__(self, config):
        self.configure(config)
        self.reset()

    def configure(self, config):
        self.window = config["stagnation_window"]
        self.fraction = config["reseed_fraction"]
        self.velocity_reset = config["velocity_reset_on_kick"]

    def reset(self):
        self.no_improve_iterations = 0
        self.kicks = 0
        self.last_reseeded = []

    def reseed_count(self, swarm_size):
        return min(swarm_size, max(1, math.ceil(swarm_size * self.fraction)))

    def observe(self, optimizer, improved):
        """Run after each step. Returns the indices of reseeded particles."""
        if improved:
            self.no_improve_iterations = 0
            return []
        self.no_improve_iterations += 1
        if self.no_improve_iterations < self.window:
            return []

        reseeded = self.kick(optimizer)
        self.no_improve_iterations = 0
        return reseeded

    def kick(self, optimizer):
        particles = optimizer.particles
        k = self.reseed_count(len(particles))
        fit = np.array([p.fitness for p in particles], dtype=np.float64)
        # worst (highest fitness) first; stable so ties keep swarm order
        worst = [int(i) for i in np.argsort(-fit, kind="stable")[:k]]

        for i in worst:
            particles[i].reseed()
        if self.velocity_reset:
            for i, p in enumerate(particles):
                if i not in worst:
                    p.reset_velocity()
        # global best stays as the anchor
        self.kicks += 1
        self.last_reseeded = worst
        optimizer.log(f"[kick] iter {optimizer.iteration}: {self.window} steps without "
                      f"improvement, reseeded {k}/{len(particles)} particles")
        return worst
