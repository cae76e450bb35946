# ============================================================
# GROWTH: add triangles when the global best plateaus
# ============================================================

import math


class GrowthController:
    """
    Sliding-window watch on the global best. Every `threshold` iterations
    the window closes; if it improved the best by less than `percent` %
    (relative) and the swarm is under the cap, the swarm grows by
    min(increment, cap - n) triangles. The window then restarts.
    """

    def __init__(self, config):
        self.configure(config)
        self.reset()

    def configure(self, config):
        was_enabled = getattr(self, "enabled", True)
        self.enabled = config["incremental_triangles"]
        if self.enabled and not was_enabled:
            # window from before the pause is stale
            self.window_start_fitness = None
            self.window_start_iteration = 0
        self.threshold = config["triangle_stagnation_threshold"]
        self.min_fraction = config["triangle_stagnation_percent"] / 100.0
        self.increment = config["triangle_increment"]
        self.cap = config["max_triangles_cap"]

    def reset(self):
        self.window_start_fitness = None
        self.window_start_iteration = 0
        self.growth_events = 0

    def observe(self, optimizer):
        """Run after each step. Returns the number of triangles added (0 if none)."""
        if not self.enabled:
            return 0
        best = optimizer.global_best_fitness
        it = optimizer.iteration
        if self.window_start_fitness is None:
            if math.isfinite(best):
                self.window_start_fitness = best
                self.window_start_iteration = it
            return 0
        if it - self.window_start_iteration < self.threshold:
            return 0

        added = 0
        start = self.window_start_fitness
        n = optimizer.num_triangles
        if start > 0 and math.isfinite(best):
            rel = (start - best) / start
            if rel < self.min_fraction and n < self.cap:
                added = optimizer.add_triangles(min(self.increment, self.cap - n))
                if added:
                    self.growth_events += 1
                    optimizer.log(f"[grow] iter {it}: rel. improvement {rel*100:.2f}% "
                                  f"< {self.min_fraction*100:.2f}% -> {n} -> {n + added} triangles")

        if added:
            # best is +inf now; reopen the window on the next finite best
            self.window_start_fitness = None
        else:
            self.window_start_fitness = best
        self.window_start_iteration = it
        return added
