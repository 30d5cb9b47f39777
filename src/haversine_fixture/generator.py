from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import numpy as np
from numpy.typing import NDArray

from .chacha import ChaCha8Rng
from .clusters import Cluster, generate_cluster, generate_pairs_in_cluster
from .haversine import EARTH_RADIUS, reference_haversine
from .sampling import RAND_08


logger = logging.getLogger(__name__)

SEED = 2
PAIR_COUNT = 10_000_000
OUTPUT_FILENAME = "resultado.json"
N_CLUSTERS = 4
DEFAULT_CHUNK_SIZE = 250_000

FloatArray = NDArray[np.float64]


@dataclass(frozen=True)
class GenerationResult:
    count: int
    expected_sum: float
    pairs: FloatArray
    clusters: tuple[Cluster, ...]


@dataclass(frozen=True)
class GenerationSummary:
    count: int
    expected_sum: float
    output_path: Path


def pairs_per_cluster(n: int) -> int:
    n = int(n)
    if n < 0:
        raise ValueError("n must be >= 0")
    return n // N_CLUSTERS


def iter_pair_batches(
    rng: ChaCha8Rng,
    n: int,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    method: str = RAND_08,
) -> Iterator[tuple[Cluster, FloatArray]]:
    """Yield (cluster, coords) chunks in generation order.

    Each of the four clusters is drawn before its pairs; a cluster's pairs may
    span several chunks and every cluster yields at least one (possibly
    empty) chunk. The remainder ``n % 4`` is dropped.
    """

    per_cluster = pairs_per_cluster(n)
    chunk_size = max(1, int(chunk_size))

    for i in range(N_CLUSTERS):
        cluster = generate_cluster(rng, method=method)
        logger.debug("cluster %d: %s", i, cluster)

        remaining = per_cluster
        while True:
            take = min(chunk_size, remaining)
            yield cluster, generate_pairs_in_cluster(rng, cluster, take, method=method)
            remaining -= take
            if remaining <= 0:
                break


def accumulate_distances(coords: FloatArray, total: float = 0.0, *, earth_radius: float = EARTH_RADIUS) -> float:
    """Add the reference distance of every row to ``total``, in row order."""

    for x0, y0, x1, y1 in coords.tolist():
        total += reference_haversine(x0, y0, x1, y1, earth_radius)
    return total


def generate_entries(
    rng: ChaCha8Rng,
    n: int,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    method: str = RAND_08,
) -> GenerationResult:
    """Generate ``4 * (n // 4)`` pairs in four clusters and their reference sum.

    ``method`` selects the float sampling rule, see :mod:`haversine_fixture.sampling`.
    """

    total = 0.0
    chunks: list[FloatArray] = []
    clusters: list[Cluster] = []

    for cluster, coords in iter_pair_batches(rng, n, chunk_size=chunk_size, method=method):
        if not clusters or clusters[-1] is not cluster:
            clusters.append(cluster)
        total = accumulate_distances(coords, total)
        chunks.append(coords)

    pairs = np.concatenate(chunks)
    return GenerationResult(
        count=int(pairs.shape[0]),
        expected_sum=total,
        pairs=pairs,
        clusters=tuple(clusters),
    )


def run_generation(
    output_path: Path = Path(OUTPUT_FILENAME),
    *,
    seed: int = SEED,
    n: int = PAIR_COUNT,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    method: str = RAND_08,
) -> GenerationSummary:
    """Stream a fixture to ``output_path`` and return its count and sum.

    The document is written to a temporary file beside ``output_path`` and
    moved into place only once complete; on failure no partial file is left.
    Output and sum match :func:`generate_entries` for the same seed, ``n``
    and ``method``.
    """

    from .output import PairsJsonWriter

    output_path = Path(output_path)
    rng = ChaCha8Rng.seed_from_u64(seed)
    total = 0.0

    logger.info("generating %d pairs (seed=%d) into %s", N_CLUSTERS * pairs_per_cluster(n), seed, output_path)
    with PairsJsonWriter(output_path) as writer:
        for _cluster, coords in iter_pair_batches(rng, n, chunk_size=chunk_size, method=method):
            total = accumulate_distances(coords, total)
            writer.write_pairs(coords)
            logger.debug("wrote %d pairs", writer.count)
        count = writer.count

    return GenerationSummary(count=count, expected_sum=total, output_path=output_path)
