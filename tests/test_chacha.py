import unittest

import numpy as np

from haversine_fixture.chacha import ChaCha8Rng, chacha_block, seed_words_from_u64


def _state(key, counter, nonce):
    words = [0x61707865, 0x3320646E, 0x79622D32, 0x6B206574, *key, *counter, *nonce]
    return np.asarray(words, dtype=np.uint32).reshape(16, 1)


class ChaChaBlockTests(unittest.TestCase):
    def test_rfc7539_block_function(self):
        # RFC 7539 section 2.3.2 (ChaCha20, 32-bit counter layout).
        key = [0x03020100, 0x07060504, 0x0B0A0908, 0x0F0E0D0C, 0x13121110, 0x17161514, 0x1B1A1918, 0x1F1E1D1C]
        state = _state(key, [0x00000001], [0x09000000, 0x4A000000, 0x00000000])
        out = chacha_block(state, rounds=20)
        expected = [
            0xE4E7F110, 0x15593BD1, 0x1FDD0F50, 0xC47120A3,
            0xC7F4D1C7, 0x0368C033, 0x9AAA2204, 0x4E6CD4C3,
            0x466482D2, 0x09AA9F07, 0x05D7C214, 0xA2028BD9,
            0xD19C12B5, 0xB94E16DE, 0xE883D0CB, 0x4E3C50A2,
        ]
        self.assertEqual(out.shape, (1, 16))
        self.assertEqual(out[0].tolist(), expected)

    def test_zero_key_keystream(self):
        state = _state([0] * 8, [0, 0], [0, 0])
        out = chacha_block(state, rounds=20)
        self.assertEqual(out[0, :4].tolist(), [0xADE0B876, 0x903DF1A0, 0xE56A5D40, 0x28BD8653])

    def test_blocks_are_independent_columns(self):
        a = _state([1, 2, 3, 4, 5, 6, 7, 8], [0, 0], [0, 0])
        b = _state([1, 2, 3, 4, 5, 6, 7, 8], [1, 0], [0, 0])
        both = chacha_block(np.concatenate([a, b], axis=1), rounds=8)
        self.assertEqual(both[0].tolist(), chacha_block(a, rounds=8)[0].tolist())
        self.assertEqual(both[1].tolist(), chacha_block(b, rounds=8)[0].tolist())

    def test_rejects_bad_shape_and_rounds(self):
        with self.assertRaises(ValueError):
            chacha_block(np.zeros((8, 1), dtype=np.uint32))
        with self.assertRaises(ValueError):
            chacha_block(np.zeros((16, 1), dtype=np.uint32), rounds=7)


class ChaCha8RngTests(unittest.TestCase):
    # rand_core seed_from_u64(2): PCG32 output words forming the 256-bit key.
    SEED2_KEY = (
        3423654221, 506952881, 2386882541, 131562990,
        693434914, 2554571479, 95186291, 2029234835,
    )
    # First 64-bit outputs of ChaCha8Rng::seed_from_u64(2).
    SEED2_U64 = [
        16257866876066601925,
        10116765682372994352,
        14559107640795024409,
        15815151160706888386,
        4096770980025346881,
        12466095120749357110,
    ]

    def test_seed_expansion_vector(self):
        self.assertEqual(seed_words_from_u64(2), self.SEED2_KEY)

    def test_u64_stream_vector(self):
        rng = ChaCha8Rng.seed_from_u64(2)
        self.assertEqual([rng.next_u64() for _ in range(len(self.SEED2_U64))], self.SEED2_U64)

        rng = ChaCha8Rng.seed_from_u64(2, refill_blocks=1)
        self.assertEqual(rng.next_u64_array(len(self.SEED2_U64)).tolist(), self.SEED2_U64)

    def test_u32_stream_vector(self):
        rng = ChaCha8Rng.seed_from_u64(2)
        self.assertEqual([rng.next_u32(), rng.next_u32()], [831134661, 3785329609])

    def test_seed_expansion_is_deterministic(self):
        w = seed_words_from_u64(2)
        self.assertEqual(len(w), 8)
        self.assertEqual(w, seed_words_from_u64(2))
        self.assertNotEqual(w, seed_words_from_u64(3))
        self.assertTrue(all(0 <= x < 2**32 for x in w))

    def test_same_seed_same_sequence(self):
        a = ChaCha8Rng.seed_from_u64(2)
        b = ChaCha8Rng.seed_from_u64(2)
        self.assertEqual([a.next_u64() for _ in range(50)], [b.next_u64() for _ in range(50)])

    def test_scalar_and_array_draws_agree(self):
        a = ChaCha8Rng.seed_from_u64(7, refill_blocks=1)
        b = ChaCha8Rng.seed_from_u64(7)
        scalar = [a.next_u64() for _ in range(100)]
        self.assertEqual(b.next_u64_array(100).tolist(), scalar)

    def test_u64_is_two_words_low_first(self):
        a = ChaCha8Rng.seed_from_u64(11)
        b = ChaCha8Rng.seed_from_u64(11)
        lo = a.next_u32()
        hi = a.next_u32()
        self.assertEqual(b.next_u64(), lo | (hi << 32))

    def test_first_block_matches_block_function(self):
        rng = ChaCha8Rng.seed_from_u64(2)
        key = list(seed_words_from_u64(2))
        expected = chacha_block(_state(key, [0, 0], [0, 0]), rounds=8)[0].tolist()
        self.assertEqual([rng.next_u32() for _ in range(16)], expected)

    def test_word_pos_counts_consumed_words(self):
        rng = ChaCha8Rng.seed_from_u64(2)
        self.assertEqual(rng.word_pos, 0)
        rng.next_u64()
        rng.next_u64_array(20)
        self.assertEqual(rng.word_pos, 42)


if __name__ == "__main__":
    unittest.main()
