from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from .chacha import ChaCha8Rng
from .sampling import RAND_08, InclusiveRange, sample


COORDINATE_RANGE = (-180.0, 180.0)


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Cluster:
    """Bounding rectangle given by two unsorted corners."""

    p1: Point
    p2: Point

    def x_range(self, *, method: str = RAND_08) -> InclusiveRange:
        return InclusiveRange.from_bounds(self.p1.x, self.p2.x, method=method)

    def y_range(self, *, method: str = RAND_08) -> InclusiveRange:
        return InclusiveRange.from_bounds(self.p1.y, self.p2.y, method=method)

    def contains(self, point: Point) -> bool:
        return (
            min(self.p1.x, self.p2.x) <= point.x <= max(self.p1.x, self.p2.x)
            and min(self.p1.y, self.p2.y) <= point.y <= max(self.p1.y, self.p2.y)
        )


def generate_cluster(rng: ChaCha8Rng, *, method: str = RAND_08) -> Cluster:
    """Draw a cluster over the global range; draw order is x1, y1, x2, y2."""

    lo, hi = COORDINATE_RANGE
    p1 = Point(x=sample(rng, lo, hi, method=method), y=sample(rng, lo, hi, method=method))
    p2 = Point(x=sample(rng, lo, hi, method=method), y=sample(rng, lo, hi, method=method))
    return Cluster(p1=p1, p2=p2)


def generate_point_in_cluster(rng: ChaCha8Rng, cluster: Cluster, *, method: str = RAND_08) -> Point:
    x = sample(rng, cluster.p1.x, cluster.p2.x, method=method)
    y = sample(rng, cluster.p1.y, cluster.p2.y, method=method)
    return Point(x=x, y=y)


def generate_pairs_in_cluster(
    rng: ChaCha8Rng,
    cluster: Cluster,
    count: int,
    *,
    method: str = RAND_08,
) -> NDArray[np.float64]:
    """Draw ``count`` point pairs inside ``cluster``.

    Returns a float64 array of shape (count, 4) with columns x0, y0, x1, y1.
    Values equal those of calling :func:`generate_point_in_cluster` twice per
    pair, since each pair consumes four draws in that column order.
    """

    count = int(count)
    if count < 0:
        raise ValueError("count must be >= 0")

    raw = rng.next_u64_array(4 * count).reshape(count, 4)
    x_range = cluster.x_range(method=method)
    y_range = cluster.y_range(method=method)

    out = np.empty((count, 4), dtype=np.float64)
    out[:, 0] = x_range.map_u64(raw[:, 0])
    out[:, 1] = y_range.map_u64(raw[:, 1])
    out[:, 2] = x_range.map_u64(raw[:, 2])
    out[:, 3] = y_range.map_u64(raw[:, 3])
    return out
