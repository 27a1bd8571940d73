import numpy as np
import numba as nb


@nb.njit(fastmath=True, cache=True)
def _collide_numba(pos, vel, radius, strength):
    """One collision pass on predicted positions; corrects velocities in place."""
    n = pos.shape[0]
    min_d = 2.0 * radius
    min_d2 = min_d * min_d
    for i in range(n - 1):
        xi = pos[i, 0] + vel[i, 0]
        yi = pos[i, 1] + vel[i, 1]
        for j in range(i + 1, n):
            dx = xi - pos[j, 0] - vel[j, 0]
            dy = yi - pos[j, 1] - vel[j, 1]
            dist_sq = dx*dx + dy*dy
            if dist_sq < min_d2:
                if dist_sq == 0.0:
                    # coincident: nudge apart along a fixed, index-dependent direction
                    dx = 1e-6 * (j - i)
                    dy = 1e-6 * ((i + j) % 3 - 1)
                    dist_sq = dx*dx + dy*dy
                dist = np.sqrt(dist_sq)
                k = (min_d - dist) / dist * strength * 0.5
                vel[i, 0] += dx * k
                vel[i, 1] += dy * k
                vel[j, 0] -= dx * k
                vel[j, 1] -= dy * k
    return vel


@nb.njit(fastmath=True, cache=True)
def _resolve_overlaps_numba(pos, radius, iterations, strength):
    n = pos.shape[0]
    min_d = 2.0 * radius
    for itr in range(iterations):
        moved = False
        for i in range(n - 1):
            for j in range(i + 1, n):
                dx = pos[i, 0] - pos[j, 0]
                dy = pos[i, 1] - pos[j, 1]
                dist_sq = dx*dx + dy*dy
                if dist_sq < min_d*min_d:
                    if dist_sq <= 1e-18:
                        dx = 1e-6 * (j - i)
                        dy = 1e-6 * ((i + j) % 3 - 1)
                        dist_sq = dx*dx + dy*dy
                    dist = np.sqrt(dist_sq)
                    overlap = (min_d - dist) * strength * 0.5
                    push_x = dx / dist * overlap
                    push_y = dy / dist * overlap
                    pos[i, 0] += push_x
                    pos[i, 1] += push_y
                    pos[j, 0] -= push_x
                    pos[j, 1] -= push_y
                    moved = True
        if not moved:
            break
    return pos


def collide(positions: np.ndarray, velocities: np.ndarray, radius: float,
            strength: float = 1.0) -> np.ndarray:
    """Push overlapping discs apart by adjusting ``velocities`` in place."""
    if len(positions) < 2:
        return velocities
    return _collide_numba(positions, velocities, float(radius), float(strength))


def resolve_overlaps(positions: np.ndarray, radius: float,
                     iterations: int = 500, strength: float = 1.0) -> np.ndarray:
    """Relax ``positions`` in place until no two discs of ``radius`` overlap."""
    if len(positions) < 2:
        return positions
    # slightly over-push so rounding leaves no residual overlap
    return _resolve_overlaps_numba(positions, float(radius) * 1.0005,
                                   int(iterations), float(strength))


def max_overlap(positions: np.ndarray, radius: float) -> float:
    """Largest pairwise disc overlap (0.0 when none overlap)."""
    n = len(positions)
    if n < 2:
        return 0.0
    delta = positions[:, None, :] - positions[None, :, :]
    dist = np.sqrt((delta ** 2).sum(-1))
    iu = np.triu_indices(n, k=1)
    return float(max(0.0, (2.0 * radius - dist[iu]).max()))
