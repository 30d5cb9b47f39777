"""ChaCha8 random bit generator compatible with Rust's ``rand_chacha``.

The generator reproduces ``ChaCha8Rng::seed_from_u64`` bit for bit:

- the 64-bit seed is expanded into a 256-bit key with the PCG32 step used by
  ``rand_core``;
- each 64-byte block is the ChaCha keystream for (key, 64-bit block counter,
  64-bit stream id = 0) with 8 rounds;
- 64-bit draws combine two consecutive 32-bit words, low word first.

Blocks are computed with numpy, many counters at a time.
"""
from __future__ import annotations

import numpy as np
from numpy.typing import NDArray


U32Array = NDArray[np.uint32]
U64Array = NDArray[np.uint64]

_MASK64 = (1 << 64) - 1
_MASK32 = (1 << 32) - 1

_PCG_MUL = 6364136223846793005
_PCG_INC = 11634580027462260723

# "expand 32-byte k"
_SIGMA = (0x61707865, 0x3320646E, 0x79622D32, 0x6B206574)

_WORDS_PER_BLOCK = 16
_DEFAULT_REFILL_BLOCKS = 4096


def seed_words_from_u64(seed: int) -> tuple[int, ...]:
    """Expand a 64-bit seed into eight little-endian key words (PCG32)."""

    state = int(seed) & _MASK64
    words = []
    for _ in range(8):
        state = (state * _PCG_MUL + _PCG_INC) & _MASK64
        xorshifted = (((state >> 18) ^ state) >> 27) & _MASK32
        rot = state >> 59
        words.append(((xorshifted >> rot) | (xorshifted << ((32 - rot) & 31))) & _MASK32)
    return tuple(words)


def _rotl(v: U32Array, n: int) -> U32Array:
    return (v << np.uint32(n)) | (v >> np.uint32(32 - n))


def _quarter_round(x: list[U32Array], a: int, b: int, c: int, d: int) -> None:
    x[a] = x[a] + x[b]
    x[d] = _rotl(x[d] ^ x[a], 16)
    x[c] = x[c] + x[d]
    x[b] = _rotl(x[b] ^ x[c], 12)
    x[a] = x[a] + x[b]
    x[d] = _rotl(x[d] ^ x[a], 8)
    x[c] = x[c] + x[d]
    x[b] = _rotl(x[b] ^ x[c], 7)


def chacha_block(state: U32Array, *, rounds: int = 8) -> U32Array:
    """Apply the ChaCha block function to input states.

    Parameters
    ----------
    state:
        uint32 array of shape (16, n_blocks), one input state per column.
    rounds:
        Number of rounds (8, 12 or 20). Must be even.

    Returns
    -------
    uint32 array of shape (n_blocks, 16): the output words of each block in
    keystream order.
    """

    state = np.asarray(state, dtype=np.uint32)
    if state.ndim != 2 or state.shape[0] != _WORDS_PER_BLOCK:
        raise ValueError(f"state must have shape (16, n_blocks); got {state.shape}")
    if rounds <= 0 or rounds % 2:
        raise ValueError("rounds must be a positive even number")

    x = [state[i].copy() for i in range(_WORDS_PER_BLOCK)]
    for _ in range(rounds // 2):
        _quarter_round(x, 0, 4, 8, 12)
        _quarter_round(x, 1, 5, 9, 13)
        _quarter_round(x, 2, 6, 10, 14)
        _quarter_round(x, 3, 7, 11, 15)
        _quarter_round(x, 0, 5, 10, 15)
        _quarter_round(x, 1, 6, 11, 12)
        _quarter_round(x, 2, 7, 8, 13)
        _quarter_round(x, 3, 4, 9, 14)

    out = np.stack(x) + state
    return np.ascontiguousarray(out.T)


class ChaCha8Rng:
    """Seeded ChaCha8 generator.

    A single instance is owned by one caller and passed explicitly to every
    sampling function; the draw order defines the output.
    """

    rounds = 8

    def __init__(self, key_words: tuple[int, ...], *, stream: int = 0, refill_blocks: int = _DEFAULT_REFILL_BLOCKS) -> None:
        if len(key_words) != 8:
            raise ValueError("key_words must contain 8 words")
        self._key = np.asarray(key_words, dtype=np.uint32)
        self._stream = int(stream) & _MASK64
        self._refill_blocks = max(1, int(refill_blocks))
        self._counter = 0
        self._buffer = np.empty(0, dtype=np.uint32)
        self._index = 0

    @classmethod
    def seed_from_u64(cls, seed: int, **kwargs) -> "ChaCha8Rng":
        return cls(seed_words_from_u64(seed), **kwargs)

    @property
    def word_pos(self) -> int:
        """Number of 32-bit words consumed so far."""
        return self._counter * _WORDS_PER_BLOCK - (self._buffer.size - self._index)

    def _blocks(self, n_blocks: int) -> U32Array:
        counters = np.arange(self._counter, self._counter + n_blocks, dtype=np.uint64)
        state = np.empty((_WORDS_PER_BLOCK, n_blocks), dtype=np.uint32)
        state[0:4] = np.asarray(_SIGMA, dtype=np.uint32)[:, None]
        state[4:12] = self._key[:, None]
        state[12] = (counters & np.uint64(_MASK32)).astype(np.uint32)
        state[13] = (counters >> np.uint64(32)).astype(np.uint32)
        state[14] = np.uint32(self._stream & _MASK32)
        state[15] = np.uint32(self._stream >> 32)
        self._counter = (self._counter + n_blocks) & _MASK64
        return chacha_block(state, rounds=self.rounds).reshape(-1)

    def _take_words(self, n_words: int) -> U32Array:
        available = self._buffer.size - self._index
        if n_words <= available:
            out = self._buffer[self._index : self._index + n_words]
            self._index += n_words
            return out

        head = self._buffer[self._index :]
        missing = n_words - available
        n_blocks = -(-missing // _WORDS_PER_BLOCK)
        self._buffer = self._blocks(max(n_blocks, self._refill_blocks))
        self._index = missing
        return np.concatenate([head, self._buffer[:missing]])

    def next_u32(self) -> int:
        return int(self._take_words(1)[0])

    def next_u64(self) -> int:
        lo, hi = self._take_words(2).tolist()
        return lo | (hi << 32)

    def next_u64_array(self, size: int) -> U64Array:
        """Draw ``size`` consecutive 64-bit values."""

        size = int(size)
        if size < 0:
            raise ValueError("size must be >= 0")
        words = self._take_words(2 * size).astype(np.uint64)
        return words[0::2] | (words[1::2] << np.uint64(32))
