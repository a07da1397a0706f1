"""
Tests for seeded hashing and SeededRandom.

Tests cover:
- hash_string stability and range
- Seed resolution from text and integers
- Determinism of every SeededRandom method
- Inclusive integer bounds and exact chance() edges
- Weighted and uniform picks
- Error handling
"""

import unittest

from R302_Libs.ProceduralLib.seeded_random import (
    SeededRandom,
    hash_string,
    resolve_seed,
)


class TestHashString(unittest.TestCase):
    """Test the rolling text hash."""

    def test_empty_string_is_zero(self):
        self.assertEqual(hash_string(""), 0)

    def test_single_character(self):
        self.assertEqual(hash_string("a"), 97)

    def test_two_characters(self):
        # (97 * 31) + 98
        self.assertEqual(hash_string("ab"), 3105)

    def test_same_text_same_hash(self):
        text = "Ship it messy, patch it live, glow up forever."
        self.assertEqual(hash_string(text), hash_string(text))

    def test_different_text_different_hash(self):
        self.assertNotEqual(hash_string("comet"), hash_string("comets"))

    def test_long_text_stays_in_31_bits(self):
        value = hash_string("x" * 10000 + "ünïcødé ✨")
        self.assertGreaterEqual(value, 0)
        self.assertLessEqual(value, 0x7FFFFFFF)


class TestResolveSeed(unittest.TestCase):
    """Test seed normalization."""

    def test_string_is_hashed(self):
        self.assertEqual(resolve_seed("ab"), 3105)

    def test_int_passes_through(self):
        self.assertEqual(resolve_seed(42), 42)

    def test_negative_int_is_masked(self):
        self.assertGreaterEqual(resolve_seed(-5), 0)

    def test_invalid_type_raises(self):
        with self.assertRaises(TypeError):
            resolve_seed(3.5)
        with self.assertRaises(TypeError):
            resolve_seed(True)


class TestSeededRandom(unittest.TestCase):
    """Test SeededRandom determinism and ranges."""

    def test_same_seed_same_sequence(self):
        first = SeededRandom(1234)
        second = SeededRandom(1234)
        self.assertEqual(
            [first.random() for _ in range(20)],
            [second.random() for _ in range(20)],
        )

    def test_text_seed_matches_hashed_int_seed(self):
        first = SeededRandom("comet")
        second = SeededRandom(hash_string("comet"))
        self.assertEqual(first.integer(0, 1000), second.integer(0, 1000))

    def test_different_seeds_differ(self):
        first = [SeededRandom(1).random() for _ in range(5)]
        second = [SeededRandom(2).random() for _ in range(5)]
        self.assertNotEqual(first, second)

    def test_random_range(self):
        rng = SeededRandom(7)
        for value in (rng.random() for _ in range(500)):
            self.assertGreaterEqual(value, 0.0)
            self.assertLess(value, 1.0)

    def test_stream_is_deterministic(self):
        first = SeededRandom(9).stream()
        second = SeededRandom(9).stream()
        self.assertEqual([next(first) for _ in range(5)], [next(second) for _ in range(5)])

    def test_floating_range(self):
        rng = SeededRandom(3)
        for _ in range(200):
            value = rng.floating(-2.5, 4.0)
            self.assertGreaterEqual(value, -2.5)
            self.assertLessEqual(value, 4.0)

    def test_floating_equal_bounds(self):
        self.assertEqual(SeededRandom(3).floating(5.0, 5.0), 5.0)

    def test_floating_inverted_bounds_raise(self):
        with self.assertRaises(ValueError):
            SeededRandom(3).floating(2.0, 1.0)

    def test_integer_bounds_inclusive(self):
        rng = SeededRandom(11)
        seen = {rng.integer(1, 3) for _ in range(300)}
        self.assertEqual(seen, {1, 2, 3})

    def test_integer_float_bounds(self):
        rng = SeededRandom(11)
        for _ in range(100):
            value = rng.integer(0, 2.9)
            self.assertIn(value, (0, 1, 2))

    def test_integer_empty_range_raises(self):
        with self.assertRaises(ValueError):
            SeededRandom(11).integer(5, 4)

    def test_chance_edges_are_exact(self):
        rng = SeededRandom(5)
        self.assertFalse(any(rng.chance(0) for _ in range(200)))
        self.assertTrue(all(rng.chance(100) for _ in range(200)))

    def test_chance_edges_consume_nothing(self):
        plain = SeededRandom(5)
        edged = SeededRandom(5)
        edged.chance(0)
        edged.chance(100)
        self.assertEqual(plain.random(), edged.random())

    def test_chance_is_roughly_calibrated(self):
        rng = SeededRandom(5)
        hits = sum(rng.chance(25) for _ in range(4000))
        self.assertGreater(hits, 800)
        self.assertLess(hits, 1200)

    def test_weighted_respects_zero_weight(self):
        rng = SeededRandom(8)
        picks = {rng.weighted(["a", "b", "c"], [1, 0, 1]) for _ in range(300)}
        self.assertNotIn("b", picks)

    def test_weighted_single_option(self):
        self.assertEqual(SeededRandom(8).weighted(["only"], [5]), "only")

    def test_weighted_length_mismatch_raises(self):
        with self.assertRaises(ValueError):
            SeededRandom(8).weighted(["a", "b"], [1])

    def test_weighted_all_zero_raises(self):
        with self.assertRaises(ValueError):
            SeededRandom(8).weighted(["a", "b"], [0, 0])

    def test_pick_one_covers_options(self):
        rng = SeededRandom(2)
        picks = {rng.pick_one(("x", "y", "z")) for _ in range(200)}
        self.assertEqual(picks, {"x", "y", "z"})

    def test_pick_one_empty_raises(self):
        with self.assertRaises(ValueError):
            SeededRandom(2).pick_one([])

    def test_fork_is_deterministic_and_independent(self):
        parent = SeededRandom(77)
        child_a = parent.fork("accents")
        child_b = SeededRandom(77).fork("accents")
        other = SeededRandom(77).fork("layout")
        self.assertEqual(child_a.random(), child_b.random())
        self.assertNotEqual(SeededRandom(77).fork("accents").seed, other.seed)


if __name__ == "__main__":
    unittest.main()
