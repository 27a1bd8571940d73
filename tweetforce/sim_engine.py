from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Sequence

import numpy as np

from .clusters import ClusterAssignment
from .collision import collide, resolve_overlaps
from .config import LayoutConfig
from .records import Record

logger = logging.getLogger(__name__)

INITIAL_RADIUS = 10.0
INITIAL_ANGLE = math.pi * (3.0 - math.sqrt(5.0))


@dataclass(frozen=True)
class SimulationPoint:
    """Snapshot of one point's layout state."""

    record: Record
    x: float
    y: float
    vx: float
    vy: float


class ForceSimulation:
    def __init__(self, records: Sequence[Record], clusters: ClusterAssignment,
                 config: LayoutConfig | None = None):
        self.config = (config or clusters.config).validate()
        self.records: tuple[Record, ...] = tuple(records)
        self.num_nodes = len(self.records)
        self.clusters = clusters

        # anchors are resolved once; they never change for this run
        self.targets = clusters.targets(r.month for r in self.records)
        self.positions_ = self._initial_positions()
        self.velocities = np.zeros((self.num_nodes, 2), dtype=np.float64)

        self.alpha = 1.0
        self.alpha_target = 0.0
        self.tick_count = 0
        self.running = self.num_nodes > 0
        self._rng = np.random.default_rng(self.config.seed)
        self._tick_callbacks: list[Callable[["ForceSimulation"], None]] = []

    # ------------------------------------------------------------------
    def _initial_positions(self) -> np.ndarray:
        """Phyllotaxis spiral around each point's anchor, ranked within its cluster."""
        pos = np.empty((self.num_nodes, 2), dtype=np.float64)
        rank: dict[tuple[float, float], int] = {}
        for i, (tx, ty) in enumerate(self.targets):
            k = rank.get((tx, ty), 0)
            rank[(tx, ty)] = k + 1
            r = INITIAL_RADIUS * math.sqrt(0.5 + k)
            a = k * INITIAL_ANGLE
            pos[i] = (tx + r * math.cos(a), ty + r * math.sin(a))
        return pos

    # ------------------------------------------------------------------
    def on_tick(self, callback: Callable[["ForceSimulation"], None]) -> None:
        self._tick_callbacks.append(callback)

    @property
    def positions(self) -> np.ndarray:
        return self.positions_.copy()

    def points(self) -> list[SimulationPoint]:
        return [
            SimulationPoint(rec, float(p[0]), float(p[1]), float(v[0]), float(v[1]))
            for rec, p, v in zip(self.records, self.positions_, self.velocities)
        ]

    # ------------------------------------------------------------------
    def _apply_repulsion(self, alpha: float) -> None:
        n = self.num_nodes
        if n < 2:
            return
        strength = self.config.charge_strength * alpha

        if n <= self.config.exact_repulsion_limit:
            delta = self.positions_[None, :, :] - self.positions_[:, None, :]
            dist2 = (delta ** 2).sum(-1, keepdims=True)
            np.maximum(dist2, 1.0, out=dist2)
            w = strength / dist2
            # a point does not repel itself
            idx = np.arange(n)
            w[idx, idx] = 0.0
            self.velocities += (delta * w).sum(axis=1)
            return

        # sampled approximation: each point sees a random subset, rescaled to n-1 partners
        num_samples = min(self.config.repulsion_samples, n - 1)
        samples = self._rng.integers(0, n, size=(n, num_samples))
        delta = self.positions_[samples] - self.positions_[:, None, :]
        dist2 = (delta ** 2).sum(-1, keepdims=True)
        np.maximum(dist2, 1.0, out=dist2)
        w = strength / dist2
        w[samples == np.arange(n)[:, None]] = 0.0
        self.velocities += (delta * w).sum(axis=1) * ((n - 1) / num_samples)

    def _apply_anchor_pull(self, alpha: float) -> None:
        k = self.config.anchor_strength * alpha
        self.velocities += (self.targets - self.positions_) * k

    def _apply_collision(self) -> None:
        collide(self.positions_, self.velocities, self.config.point_radius)

    # ------------------------------------------------------------------
    def step(self) -> bool:
        """Advance one tick. Returns ``True`` while the simulation is still running."""
        if not self.running:
            return False

        self.alpha += (self.alpha_target - self.alpha) * self.config.alpha_decay
        self._apply_repulsion(self.alpha)
        self._apply_anchor_pull(self.alpha)
        self._apply_collision()

        self.velocities *= 1.0 - self.config.velocity_decay
        self.positions_ += self.velocities
        self.tick_count += 1

        capped = self.config.max_ticks is not None and self.tick_count >= self.config.max_ticks
        if self.alpha < self.config.alpha_min or capped:
            self._settle()

        for cb in self._tick_callbacks:
            cb(self)
        return self.running

    def _settle(self) -> None:
        self.running = False
        self.velocities[:] = 0.0
        resolve_overlaps(self.positions_, self.config.point_radius,
                         self.config.settle_iterations)
        logger.info("Simulation settled after %d ticks (%d points)",
                    self.tick_count, self.num_nodes)

    def run(self, max_ticks: int | None = None) -> int:
        """Step until settled (or ``max_ticks`` more ticks). Returns ticks taken."""
        start = self.tick_count
        while self.running:
            if max_ticks is not None and self.tick_count - start >= max_ticks:
                break
            self.step()
        return self.tick_count - start
