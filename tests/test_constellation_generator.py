"""
Tests for constellation layout generation.

Tests cover:
- Exact golden spiral layout for a known quote
- Pinned seeded output for the default call, scatter and cluster
- Determinism and seed overrides
- Stars stay on the canvas for every strategy
- Connection rules (distance threshold, anchors)
- Key word selection, crypto and word stars
- Degenerate canvases
- ConstellationConfig validation and dictionary round trip
"""

import math
import unittest

from R302_Libs.constants import STRATEGY_WEIGHTS
from R302_Libs.ConstellationLib.constellation_generator import (
    LAYOUT_STRATEGIES,
    crypto_star,
    generate_constellation,
    golden_anchor_points,
    select_key_word,
    word_stars,
)
from R302_Libs.ConstellationLib.constellation_models import (
    CONNECTION_ANCHOR,
    CONNECTION_STAR,
    CanvasBounds,
    ConstellationConfig,
    TextAnchor,
)
from R302_Libs.ProceduralLib.seeded_random import hash_string

MOMENTUM = "Ship it messy, patch it live, glow up forever."
COMET = "Every bug is a tiny comet."


class FakeTagger:
    """Tagger returning fixed word lists."""

    def __init__(self, nouns=(), adjectives=()):
        self._nouns = list(nouns)
        self._adjectives = list(adjectives)

    def nouns(self, text):
        return list(self._nouns)

    def adjectives(self, text):
        return list(self._adjectives)


def spiral_config(**overrides):
    options = {"strategy": "golden_spiral", "anchor_snap_likelihood": 0}
    options.update(overrides)
    return ConstellationConfig(**options)


class TestGoldenSpiralLayout(unittest.TestCase):
    """Pin the golden spiral geometry for a known quote on the tall canvas."""

    def setUp(self):
        self.constellation = generate_constellation(
            MOMENTUM, CanvasBounds.tall(), config=spiral_config()
        )

    def test_star_count(self):
        # floor(9 words * phi) + 3
        self.assertEqual(len(self.constellation.stars), 17)

    def test_first_star_at_center(self):
        first = self.constellation.stars[0]
        self.assertAlmostEqual(first.x, 54.0)
        self.assertAlmostEqual(first.y, 96.0)

    def test_spiral_positions(self):
        expected = {
            1: (42.939467, 85.867646),
            2: (55.854581, 117.131979),
            3: (69.807704, 75.381646),
            5: (82.300415, 114.002402),
            16: (99.878923, 57.333161),
        }
        for index, (x, y) in expected.items():
            star = self.constellation.stars[index]
            self.assertAlmostEqual(star.x, x, places=4)
            self.assertAlmostEqual(star.y, y, places=4)

    def test_consecutive_connections_under_threshold(self):
        connections = self.constellation.connections
        self.assertEqual(len(connections), 7)
        stars = self.constellation.stars
        for index, conn in enumerate(connections):
            self.assertEqual((conn.x1, conn.y1), (stars[index].x, stars[index].y))
            self.assertEqual((conn.x2, conn.y2), (stars[index + 1].x, stars[index + 1].y))
            self.assertEqual(conn.kind, CONNECTION_STAR)

    def test_connection_opacity_cycles(self):
        opacities = [conn.opacity for conn in self.constellation.connections]
        expected = [0.1, 0.15, 0.2, 0.25, 0.3, 0.1, 0.15]
        for actual, wanted in zip(opacities, expected):
            self.assertAlmostEqual(actual, wanted)

    def test_render_hints(self):
        hints = self.constellation.hints
        self.assertAlmostEqual(hints.opacity, 76 / 255)
        self.assertEqual(hints.stroke_width, 0.2)
        self.assertEqual(hints.strategy, "golden_spiral")
        self.assertAlmostEqual(hints.connection_threshold, 46 * 1.618034)

    def test_seed_is_text_hash(self):
        self.assertEqual(self.constellation.seed, hash_string(MOMENTUM))

    def test_crypto_star_takes_first_index(self):
        tagger = FakeTagger(nouns=["forever"])
        constellation = generate_constellation(
            MOMENTUM, CanvasBounds.tall(), config=spiral_config(), tagger=tagger
        )
        self.assertEqual(len(constellation.stars), 17)
        self.assertTrue(constellation.stars[0].is_crypto)
        self.assertAlmostEqual(constellation.stars[1].x, 42.939467, places=4)
        self.assertAlmostEqual(constellation.stars[1].y, 85.867646, places=4)

    def test_snapping_lands_on_half_grid(self):
        constellation = generate_constellation(
            MOMENTUM, CanvasBounds.tall(), config=spiral_config(anchor_snap_likelihood=100)
        )
        for star in constellation.stars:
            self.assertEqual((star.x * 2) % 1, 0)
            self.assertEqual((star.y * 2) % 1, 0)


class TestDeterminism(unittest.TestCase):
    """Same input, same constellation."""

    def test_same_text_same_result(self):
        for bounds in (CanvasBounds.tall(), CanvasBounds.square()):
            self.assertEqual(
                generate_constellation(COMET, bounds),
                generate_constellation(COMET, bounds),
            )

    def test_seed_override(self):
        bounds = CanvasBounds.tall()
        first = generate_constellation(COMET, bounds, seed="social-01" + COMET)
        second = generate_constellation(COMET, bounds, seed="social-01" + COMET)
        self.assertEqual(first, second)
        self.assertNotEqual(first.seed, generate_constellation(COMET, bounds).seed)

    def test_different_text_differs(self):
        bounds = CanvasBounds.tall()
        self.assertNotEqual(
            generate_constellation(COMET, bounds).stars,
            generate_constellation(MOMENTUM, bounds).stars,
        )


class TestStrategies(unittest.TestCase):
    """Every strategy keeps its stars on the canvas."""

    TEXTS = (MOMENTUM, COMET, "Breathe. Render. Repeat!", "a", "")

    def test_stars_inside_bounds(self):
        for strategy in LAYOUT_STRATEGIES:
            config = ConstellationConfig(strategy=strategy)
            for bounds in (CanvasBounds.tall(), CanvasBounds.square()):
                for text in self.TEXTS:
                    constellation = generate_constellation(text, bounds, config=config)
                    self.assertEqual(constellation.hints.strategy, strategy)
                    for star in constellation.stars:
                        self.assertTrue(
                            bounds.contains(star.x, star.y),
                            f"{strategy} star {star} outside {bounds}",
                        )

    def test_contains_excludes_edges(self):
        bounds = CanvasBounds.square()
        self.assertTrue(bounds.contains(54.0, 54.0))
        for x, y in ((0.0, 54.0), (108.0, 54.0), (54.0, 0.0), (54.0, 108.0), (-1.0, 54.0)):
            self.assertFalse(bounds.contains(x, y))

    def test_scatter_connections_under_threshold(self):
        config = ConstellationConfig(strategy="scatter")
        for seed in range(25):
            constellation = generate_constellation(MOMENTUM, CanvasBounds.tall(), seed=seed, config=config)
            threshold = constellation.hints.connection_threshold
            # (46 % 25) + 15
            self.assertEqual(threshold, 36.0)
            for conn in constellation.connections:
                self.assertLess(math.hypot(conn.x2 - conn.x1, conn.y2 - conn.y1), threshold)

    def test_scatter_star_count(self):
        constellation = generate_constellation(
            MOMENTUM, CanvasBounds.tall(), config=ConstellationConfig(strategy="scatter")
        )
        # floor(9 * 1.2) + 3
        self.assertEqual(len(constellation.stars), 13)

    def test_minimal_lines_has_short_chain(self):
        config = ConstellationConfig(strategy="minimal_lines")
        for seed in range(25):
            constellation = generate_constellation(COMET, CanvasBounds.tall(), seed=seed, config=config)
            self.assertGreaterEqual(len(constellation.stars), 3)
            self.assertLessEqual(len(constellation.stars), 8)
            self.assertLessEqual(len(constellation.connections), 2)

    def test_simple_dots_has_no_lines(self):
        config = ConstellationConfig(strategy="simple_dots")
        for seed in range(10):
            constellation = generate_constellation(COMET, CanvasBounds.tall(), seed=seed, config=config)
            self.assertEqual(constellation.connections, ())
            self.assertIsNone(constellation.hints.connection_threshold)

    def test_cluster_caps_links_per_cluster(self):
        config = ConstellationConfig(strategy="cluster")
        for seed in range(25):
            constellation = generate_constellation(COMET, CanvasBounds.tall(), seed=seed, config=config)
            self.assertLessEqual(len(constellation.connections), 8)

    def test_weights_restrict_choice(self):
        config = ConstellationConfig(strategy_weights={"arc": 10})
        for seed in range(20):
            constellation = generate_constellation(COMET, CanvasBounds.tall(), seed=seed, config=config)
            self.assertEqual(constellation.hints.strategy, "arc")

    def test_all_strategies_reachable(self):
        seen = {
            generate_constellation(COMET, CanvasBounds.tall(), seed=seed).hints.strategy
            for seed in range(300)
        }
        self.assertEqual(seen, set(STRATEGY_WEIGHTS))


class TestPinnedOutput(unittest.TestCase):
    """Pin exact seeded output so generator changes show up as diffs."""

    def assert_star(self, star, x, y, radius=None):
        self.assertAlmostEqual(star.x, x, places=9)
        self.assertAlmostEqual(star.y, y, places=9)
        if radius is not None:
            self.assertAlmostEqual(star.radius, radius, places=9)

    def test_default_call_tall(self):
        constellation = generate_constellation(MOMENTUM, CanvasBounds.tall())

        self.assertEqual(constellation.seed, 871852050)
        self.assertEqual(constellation.hints.strategy, "simple_dots")
        self.assertIsNone(constellation.hints.connection_threshold)
        self.assertAlmostEqual(constellation.hints.opacity, 76 / 255)
        self.assertEqual(len(constellation.stars), 19)
        self.assertEqual(constellation.connections, ())

        stars = constellation.stars
        self.assert_star(stars[0], 32.9166535027381, 124.50233245774113, 0.25)
        self.assert_star(stars[1], 12.872072042947192, 47.83258767499481, 0.25)
        self.assert_star(stars[2], 63.3997935671501, 40.2793625247996, 0.25)
        self.assert_star(stars[3], 21.862177086154055, 119.06564330392823, 0.25)
        self.assert_star(stars[18], 81.19150594976344, 178.24534728495277, 0.25)

    def test_default_call_square(self):
        constellation = generate_constellation(MOMENTUM, CanvasBounds.square())

        self.assertEqual(constellation.hints.strategy, "simple_dots")
        self.assertEqual(len(constellation.stars), 19)

        stars = constellation.stars
        self.assert_star(stars[0], 32.9166535027381, 69.34740978493754)
        self.assert_star(stars[1], 12.872072042947192, 28.063701055766437)
        self.assert_star(stars[2], 63.3997935671501, 23.996579821045938)
        self.assert_star(stars[3], 21.862177086154055, 66.41996177903829)

        ends = [(54.0, 66.0), (54.0, 30.0), (54.0, 30.0), (54.0, 66.0)]
        self.assertEqual(len(constellation.connections), 4)
        for index, conn in enumerate(constellation.connections):
            self.assertEqual(conn.kind, CONNECTION_ANCHOR)
            self.assertEqual((conn.x1, conn.y1), (stars[index].x, stars[index].y))
            self.assertEqual((conn.x2, conn.y2), ends[index])

    def test_scatter(self):
        constellation = generate_constellation(
            MOMENTUM, CanvasBounds.tall(), config=ConstellationConfig(strategy="scatter")
        )

        self.assertEqual(constellation.hints.connection_threshold, 36)
        stars = constellation.stars
        self.assertEqual(len(stars), 13)
        self.assert_star(stars[0], 11.938103711291816, 95.87503689454319, 0.5040733345891946)
        self.assert_star(stars[1], 57.28641850060054, 69.09585975213048, 0.34186404417557675)
        self.assert_star(stars[2], 99.03885625916939, 116.20749868539204, 0.39531197003144924)
        self.assert_star(stars[12], 12.439881680943033, 35.971781611032014, 0.3706781619115601)

        index = {(star.x, star.y): i for i, star in enumerate(stars)}
        pairs = [
            (index[(conn.x1, conn.y1)], index[(conn.x2, conn.y2)])
            for conn in constellation.connections
        ]
        self.assertEqual(pairs, [
            (0, 3), (1, 3), (1, 6), (1, 10), (1, 11), (2, 5), (2, 8),
            (3, 12), (4, 9), (6, 8), (7, 10), (7, 11), (10, 11), (11, 12),
        ])

    def test_cluster(self):
        constellation = generate_constellation(
            MOMENTUM, CanvasBounds.tall(), config=ConstellationConfig(strategy="cluster")
        )

        stars = constellation.stars
        self.assertEqual(len(stars), 9)
        self.assert_star(stars[0], 53.6926621930193, 24.93879901782602, 0.5)
        self.assert_star(stars[1], 73.74077877749443, 35.92866808776423, 0.5)
        self.assert_star(stars[2], 56.40795196059641, 21.94834636010356, 0.5)
        self.assert_star(stars[3], 66.39004194664307, 33.77604000607359, 0.5)

        index = {(star.x, star.y): i for i, star in enumerate(stars)}
        pairs = [
            (index[(conn.x1, conn.y1)], index[(conn.x2, conn.y2)])
            for conn in constellation.connections
        ]
        self.assertEqual(pairs, [(0, 1), (1, 2), (5, 6), (6, 7)])


class TestAnchorConnections(unittest.TestCase):
    """Square canvases can tie stars to text anchors."""

    def test_anchor_connections_end_on_anchors(self):
        config = ConstellationConfig(strategy="scatter", anchor_connection_likelihood=100)
        bounds = CanvasBounds.square()
        anchors = {(anchor.x, anchor.y) for anchor in bounds.anchors()}
        for seed in range(10):
            constellation = generate_constellation(COMET, bounds, seed=seed, config=config)
            self.assertEqual(len(constellation.connections), min(4, len(constellation.stars)))
            for conn in constellation.connections:
                self.assertEqual(conn.kind, CONNECTION_ANCHOR)
                self.assertIn((conn.x2, conn.y2), anchors)

    def test_custom_anchors(self):
        bounds = CanvasBounds(108, 108, True, (TextAnchor("quote", 20.0, 20.0),))
        config = ConstellationConfig(
            strategy="simple_dots", anchor_connection_likelihood=100, max_anchor_connections=2
        )
        constellation = generate_constellation(COMET, bounds, config=config)
        self.assertEqual(len(constellation.connections), 2)
        for conn in constellation.connections:
            self.assertEqual((conn.x2, conn.y2), (20.0, 20.0))

    def test_tall_canvas_never_uses_anchors(self):
        config = ConstellationConfig(strategy="scatter", anchor_connection_likelihood=100)
        constellation = generate_constellation(MOMENTUM, CanvasBounds.tall(), config=config)
        for conn in constellation.connections:
            self.assertEqual(conn.kind, CONNECTION_STAR)

    def test_zero_likelihood_keeps_star_connections(self):
        config = ConstellationConfig(strategy="minimal_lines", anchor_connection_likelihood=0)
        constellation = generate_constellation(COMET, CanvasBounds.square(), config=config)
        for conn in constellation.connections:
            self.assertEqual(conn.kind, CONNECTION_STAR)


class TestKeyWord(unittest.TestCase):
    """Test key word selection and the stars derived from it."""

    def test_longest_candidate_wins(self):
        tagger = FakeTagger(nouns=["comet", "bug"], adjectives=["brighter"])
        self.assertEqual(select_key_word(COMET, tagger), "brighter")

    def test_tie_keeps_noun_order(self):
        tagger = FakeTagger(nouns=["river", "stone"], adjectives=["quiet"])
        self.assertEqual(select_key_word("", tagger), "river")

    def test_short_words_dropped(self):
        tagger = FakeTagger(nouns=["bug", "sky"], adjectives=["tiny"])
        self.assertIsNone(select_key_word(COMET, tagger))

    def test_crypto_star_encodes_first_letter(self):
        star = crypto_star("comet", CanvasBounds.tall())
        self.assertTrue(star.is_crypto)
        self.assertEqual(star.x, 99 % 108)
        self.assertAlmostEqual(star.y, (99 * 1.618034) % 192)

    def test_crypto_star_in_constellation(self):
        tagger = FakeTagger(nouns=["bug", "comet"], adjectives=["tiny"])
        constellation = generate_constellation(COMET, CanvasBounds.tall(), tagger=tagger)
        crypto = [star for star in constellation.stars if star.is_crypto]
        self.assertEqual(len(crypto), 1)
        self.assertEqual(crypto[0].x, 99)

    def test_crypto_star_disabled(self):
        tagger = FakeTagger(nouns=["comet"])
        config = ConstellationConfig(enable_crypto_star=False)
        constellation = generate_constellation(COMET, CanvasBounds.tall(), config=config, tagger=tagger)
        self.assertFalse(any(star.is_crypto for star in constellation.stars))

    def test_no_tagger_no_feature_stars(self):
        config = ConstellationConfig(enable_word_stars=True)
        constellation = generate_constellation(COMET, CanvasBounds.tall(), config=config)
        self.assertFalse(any(star.is_feature for star in constellation.stars))

    def test_word_stars_positions(self):
        stars = word_stars("comet", CanvasBounds.tall())
        self.assertEqual([star.x for star in stars], [18.0, 36.0, 54.0, 72.0, 90.0])
        self.assertAlmostEqual(stars[0].y, 192 * (0.35 + 0.30 * 2 / 25))
        self.assertTrue(all(star.is_word_star for star in stars))

    def test_word_stars_skip_non_letters(self):
        self.assertEqual(len(word_stars("co-op!", CanvasBounds.tall())), 4)

    def test_word_stars_appended(self):
        tagger = FakeTagger(nouns=["comet"])
        config = ConstellationConfig(enable_word_stars=True, enable_crypto_star=False)
        constellation = generate_constellation(COMET, CanvasBounds.tall(), config=config, tagger=tagger)
        tail = constellation.stars[-5:]
        self.assertTrue(all(star.is_word_star for star in tail))


class TestDegenerateCanvas(unittest.TestCase):
    """Canvases too small for a layout give an empty constellation."""

    def test_zero_width(self):
        constellation = generate_constellation(COMET, CanvasBounds(0, 192))
        self.assertTrue(constellation.is_empty)
        self.assertEqual(constellation.connections, ())

    def test_negative_height(self):
        self.assertTrue(generate_constellation(COMET, CanvasBounds(108, -1)).is_empty)

    def test_canvas_smaller_than_margins(self):
        config = ConstellationConfig(strategy="minimal_lines")
        constellation = generate_constellation(COMET, CanvasBounds(4, 4), config=config)
        self.assertTrue(constellation.is_empty)
        self.assertEqual(constellation.hints.strategy, "minimal_lines")


class TestGoldenAnchors(unittest.TestCase):
    def test_four_points(self):
        points = golden_anchor_points(CanvasBounds.square())
        self.assertEqual(len(points), 4)
        xs = sorted({x for x, _ in points})
        self.assertAlmostEqual(xs[0], 108 - 108 / 1.618034, places=3)
        self.assertAlmostEqual(xs[1], 108 / 1.618034, places=3)


class TestConstellationConfig(unittest.TestCase):
    """Test config validation and serialization."""

    def test_defaults(self):
        config = ConstellationConfig()
        self.assertIsNone(config.strategy)
        self.assertTrue(config.enable_crypto_star)
        self.assertFalse(config.enable_word_stars)
        self.assertEqual(config.max_anchor_connections, 4)

    def test_unknown_strategy(self):
        with self.assertRaises(ValueError):
            ConstellationConfig(strategy="vortex")

    def test_unknown_weight_key(self):
        with self.assertRaises(ValueError):
            ConstellationConfig(strategy_weights={"vortex": 5})

    def test_all_zero_weights(self):
        with self.assertRaises(ValueError):
            ConstellationConfig(strategy_weights={"arc": 0})

    def test_zero_weights_allowed_with_forced_strategy(self):
        config = ConstellationConfig(strategy="arc", strategy_weights={"arc": 0})
        self.assertEqual(config.strategy, "arc")

    def test_likelihood_range(self):
        with self.assertRaises(ValueError):
            ConstellationConfig(anchor_snap_likelihood=150)
        with self.assertRaises(ValueError):
            ConstellationConfig(anchor_connection_likelihood=-1)

    def test_negative_anchor_connections(self):
        with self.assertRaises(ValueError):
            ConstellationConfig(max_anchor_connections=-1)

    def test_dict_round_trip(self):
        config = ConstellationConfig(strategy="cluster", enable_word_stars=True, star_color="#ffeeaa")
        self.assertEqual(ConstellationConfig.from_dict(config.to_dict()), config)

    def test_from_dict_ignores_unknown_keys(self):
        config = ConstellationConfig.from_dict({"strategy": "arc", "sparkle": True})
        self.assertEqual(config.strategy, "arc")


if __name__ == "__main__":
    unittest.main()
