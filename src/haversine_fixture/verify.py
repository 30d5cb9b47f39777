"""Fixture verification and provenance report.

Reloads a pairs file, recomputes the reference sum and records the
environment the check ran in.
"""
from __future__ import annotations

import hashlib
import math
import platform
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import numpy as np

from .generator import accumulate_distances
from .haversine import EARTH_RADIUS, haversine_array
from .output import load_pairs_json


DEFAULT_REL_TOL = 1e-9


def _now_iso() -> str:
    """Return current UTC timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _package_version() -> str:
    try:
        from importlib.metadata import version
        return version("haversine-fixture")
    except Exception:
        return "unknown"


def _environment_info() -> dict[str, str]:
    return {
        "python_version": sys.version.replace("\n", " "),
        "python_executable": sys.executable,
        "platform": platform.platform(),
        "numpy_version": np.__version__,
    }


def _sha256_file(path: Path, *, block_size: int = 1024 * 1024) -> str:
    h = hashlib.sha256()
    with path.open("rb") as f:
        while True:
            b = f.read(block_size)
            if not b:
                break
            h.update(b)
    return h.hexdigest()


def verify_fixture(
    path: Path,
    *,
    expected_sum: float | None = None,
    rel_tol: float = DEFAULT_REL_TOL,
    earth_radius: float = EARTH_RADIUS,
) -> dict[str, Any]:
    """Recompute the reference sum of a pairs file.

    ``status`` is "OK" when no expected sum is given or when it matches the
    recomputed sum within ``rel_tol``, otherwise "MISMATCH".
    """

    path = Path(path)
    coords = load_pairs_json(path)

    reference_sum = accumulate_distances(coords, 0.0, earth_radius=earth_radius)
    vectorized_sum = float(np.sum(haversine_array(coords, earth_radius)))

    status = "OK"
    if expected_sum is not None and not math.isclose(reference_sum, float(expected_sum), rel_tol=rel_tol, abs_tol=0.0):
        status = "MISMATCH"

    return {
        "created_utc": _now_iso(),
        "package_version": _package_version(),
        "environment": _environment_info(),
        "status": status,
        "input": str(path),
        "input_sha256": _sha256_file(path),
        "params": {
            "earth_radius": float(earth_radius),
            "rel_tol": float(rel_tol),
            "expected_sum": None if expected_sum is None else float(expected_sum),
        },
        "results": {
            "count": int(coords.shape[0]),
            "reference_sum": reference_sum,
            "vectorized_sum": vectorized_sum,
        },
    }
