"""Uniform float draws over closed intervals.

Two scale rules are provided, matching the ``rand`` crate releases whose
``gen_range(low..=high)`` a fixture may have to reproduce:

- ``"rand-0.8"`` (default): ``UniformFloat::new_inclusive``. The scale is
  ``(high - low) / max_rand`` and is shrunk one ulp at a time until
  ``scale * max_rand + low <= high``.
- ``"rand-0.9"``: ``UniformFloat::sample_single_inclusive``. The scale is
  plainly ``high - low``.

Both read one 64-bit word per value and map it to ``[0, 1)`` the same way.
The results differ only in the last bits.
"""
from __future__ import annotations

import math
import struct
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from .chacha import ChaCha8Rng


FloatArray = NDArray[np.float64]

RAND_08 = "rand-0.8"
RAND_09 = "rand-0.9"
SAMPLING_METHODS = (RAND_08, RAND_09)

_FRACTION_BITS_TO_DISCARD = 12
_EXPONENT_ZERO = 0x3FF0000000000000
# Largest value (u64::MAX >> 12) can map to, shifted down into [0, 1).
_MAX_RAND = 1.0 - 2.0**-52


def _unit_from_u64(u: int) -> float:
    bits = (u >> _FRACTION_BITS_TO_DISCARD) | _EXPONENT_ZERO
    return struct.unpack("<d", struct.pack("<Q", bits))[0] - 1.0


@dataclass(frozen=True)
class InclusiveRange:
    """Closed float interval prepared for uniform sampling.

    With the default method, ``scale`` is shrunk until
    ``scale * max_rand + low`` can no longer exceed ``high``. That keeps
    every draw inside ``[low, high]``.
    """

    low: float
    scale: float

    @classmethod
    def from_bounds(cls, a: float, b: float, *, method: str = RAND_08) -> "InclusiveRange":
        a = float(a)
        b = float(b)
        if not (math.isfinite(a) and math.isfinite(b)):
            raise ValueError(f"sample bounds must be finite; got ({a!r}, {b!r})")

        low = min(a, b)
        high = max(a, b)

        if method == RAND_08:
            scale = (high - low) / _MAX_RAND
            if not math.isfinite(scale):
                raise ValueError(f"sample range overflow for ({a!r}, {b!r})")
            while scale * _MAX_RAND + low > high:
                scale = math.nextafter(scale, 0.0)

        elif method == RAND_09:
            scale = high - low
            if not math.isfinite(scale):
                raise ValueError(f"sample range overflow for ({a!r}, {b!r})")

        else:
            raise ValueError(f"method must be one of: {', '.join(SAMPLING_METHODS)}")

        return cls(low=low, scale=scale)

    def draw(self, rng: ChaCha8Rng) -> float:
        return _unit_from_u64(rng.next_u64()) * self.scale + self.low

    def draw_many(self, rng: ChaCha8Rng, size: int) -> FloatArray:
        return self.map_u64(rng.next_u64_array(size))

    def map_u64(self, u: NDArray[np.uint64]) -> FloatArray:
        bits = (u >> np.uint64(_FRACTION_BITS_TO_DISCARD)) | np.uint64(_EXPONENT_ZERO)
        unit = bits.view(np.float64) - 1.0
        return unit * self.scale + self.low


def sample(rng: ChaCha8Rng, low: float, high: float, *, method: str = RAND_08) -> float:
    """Draw one value uniformly from the closed interval spanned by ``low`` and ``high``.

    The bounds may be given in either order. Exactly one 64-bit draw is
    consumed. A zero-width interval returns its endpoint.
    """

    return InclusiveRange.from_bounds(low, high, method=method).draw(rng)


def sample_many(rng: ChaCha8Rng, low: float, high: float, size: int, *, method: str = RAND_08) -> FloatArray:
    """Vectorized :func:`sample`: same values as ``size`` consecutive calls."""

    return InclusiveRange.from_bounds(low, high, method=method).draw_many(rng, size)
