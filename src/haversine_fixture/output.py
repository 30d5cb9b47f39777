"""JSON serialization of pair datasets.

Layout: ``{"pairs":[{"x0":..,"y0":..,"x1":..,"y1":..},...]}`` with compact
separators and shortest round-trip float text.

Floats are spelled by ``float.__repr__`` (same digits as Rust's serde_json,
which uses ryu). The exponent form differs: Python writes ``1e-05`` and
``1e+16`` where ryu writes no zero padding and no plus sign (``1e16``), and
the two switch to exponent form at different magnitudes. Only values below
1e-4 in magnitude are affected in a fixture, and every value parses back to
the same double either way.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import numpy as np
from numpy.typing import NDArray


PAIR_KEYS = ("x0", "y0", "x1", "y1")

_HEADER = '{"pairs":['
_FOOTER = "]}"
_ROW = '{"x0":%s,"y0":%s,"x1":%s,"y1":%s}'


def _format_row(row: list[float]) -> str:
    return _ROW % tuple(float.__repr__(v) for v in row)


class PairsJsonWriter:
    """Incremental writer; rows are appended in the order they are given.

    Rows go to ``.<name>.partial`` next to ``path``. A clean exit replaces
    ``path`` with the finished document. An exception removes the partial
    file and leaves any previous ``path`` untouched.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.partial_path = self.path.with_name(f".{self.path.name}.partial")
        self.count = 0
        self._fh = None

    def __enter__(self) -> "PairsJsonWriter":
        self._fh = self.partial_path.open("w", encoding="utf-8", newline="")
        self._fh.write(_HEADER)
        return self

    def write_pairs(self, coords: NDArray[np.float64]) -> None:
        if self._fh is None:
            raise RuntimeError("writer is not open")
        rows = np.asarray(coords, dtype=np.float64).reshape(-1, 4).tolist()
        if not rows:
            return
        text = ",".join(_format_row(r) for r in rows)
        if self.count:
            self._fh.write(",")
        self._fh.write(text)
        self.count += len(rows)

    def __exit__(self, exc_type, exc, tb) -> None:
        fh, self._fh = self._fh, None
        try:
            try:
                if exc_type is None:
                    fh.write(_FOOTER)
            finally:
                fh.close()
            if exc_type is None:
                os.replace(self.partial_path, self.path)
        except BaseException:
            self.partial_path.unlink(missing_ok=True)
            raise

        if exc_type is not None:
            self.partial_path.unlink(missing_ok=True)


def write_pairs_json(path: Path, coords: NDArray[np.float64]) -> int:
    """Write a whole dataset; returns the number of pairs written."""

    with PairsJsonWriter(path) as writer:
        writer.write_pairs(coords)
        return writer.count


def pairs_to_document(coords: NDArray[np.float64]) -> dict[str, Any]:
    rows = np.asarray(coords, dtype=np.float64).reshape(-1, 4).tolist()
    return {"pairs": [dict(zip(PAIR_KEYS, r)) for r in rows]}


def load_pairs_json(path: Path) -> NDArray[np.float64]:
    """Read a pairs document back into an (n, 4) float64 array."""

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing pairs file: {path}")

    data = json.loads(path.read_text(encoding="utf-8"))
    pairs = data.get("pairs") if isinstance(data, dict) else None
    if not isinstance(pairs, list):
        raise ValueError(f"{path}: missing 'pairs' list")

    out = np.empty((len(pairs), 4), dtype=np.float64)
    for i, entry in enumerate(pairs):
        try:
            out[i] = [float(entry[k]) for k in PAIR_KEYS]
        except (KeyError, TypeError) as e:
            raise ValueError(f"{path}: malformed pair at index {i}") from e
    return out
