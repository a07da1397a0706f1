"""
Constellation layout generator.

A constellation is derived entirely from its text: the text hash seeds a
SeededRandom, which picks one of six layout strategies and drives every
coordinate. Word and character counts set star density and connection reach.

Strategies:
    simple_dots: Loose unconnected dots
    golden_spiral: Golden-angle spiral from the canvas center
    scatter: Uniform scatter, every close pair connected
    minimal_lines: A few stars joined by a short chain
    cluster: Small groups around 2-4 centers
    arc: Stars along 1-3 circular arcs

Example:
    >>> bounds = CanvasBounds.tall()
    >>> constellation = generate_constellation("Ship it messy", bounds)
    >>> constellation.hints.strategy
    >>> len(constellation.stars)
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from R302_Libs.constants import (
    ARC_EDGE,
    ARC_MARGIN,
    CLUSTER_EDGE,
    CLUSTER_MARGIN,
    CLUSTER_MAX_CONNECTIONS,
    CONNECTION_OPACITY_BASE,
    CONNECTION_OPACITY_STEP,
    CRYPTO_MIN_WORD_LENGTH,
    DOTS_MARGIN,
    HINT_OPACITY_BASE,
    HINT_OPACITY_MODULO,
    HINT_STROKE_WIDTH,
    MINIMAL_MARGIN,
    MINIMAL_MAX_CONNECTIONS,
    PHI,
    SCATTER_MARGIN,
    SCATTER_STAR_BASE,
    SCATTER_STAR_FACTOR,
    SCATTER_THRESHOLD_BASE,
    SCATTER_THRESHOLD_MODULO,
    SPIRAL_GRID_STEP,
    SPIRAL_RADIUS_STEP,
    SPIRAL_SNAP_DISTANCE,
    SPIRAL_STAR_BASE,
    STAR_RADIUS_CLUSTER,
    STAR_RADIUS_DOT,
    STRATEGY_ARC,
    STRATEGY_CLUSTER,
    STRATEGY_GOLDEN_SPIRAL,
    STRATEGY_MINIMAL_LINES,
    STRATEGY_SCATTER,
    STRATEGY_SIMPLE_DOTS,
    STRATEGY_WEIGHTS,
    TAU,
    WORD_STAR_BAND,
)
from R302_Libs.ConstellationLib.constellation_models import (
    CONNECTION_ANCHOR,
    CONNECTION_STAR,
    CanvasBounds,
    Connection,
    Constellation,
    ConstellationConfig,
    RenderHints,
    Star,
    TextAnchor,
)
from R302_Libs.ConstellationLib.keyword_tagger import KeywordTagger
from R302_Libs.ProceduralLib.seeded_random import (
    SeedLike,
    SeededRandom,
    hash_string,
    resolve_seed,
)

logger = logging.getLogger(__name__)

# (x1, y1, x2, y2) before styling
Segment = Tuple[float, float, float, float]


@dataclass
class LayoutContext:
    """Everything a layout strategy needs for one call."""
    rng: SeededRandom
    bounds: CanvasBounds
    word_count: int
    char_count: int
    config: ConstellationConfig
    leading_stars: Tuple[Star, ...] = ()


@dataclass
class Layout:
    stars: List[Star]
    segments: List[Segment]
    connection_threshold: Optional[float] = None


def _distance(a: Star, b: Star) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


def _segment(a: Star, b: Star) -> Segment:
    return (a.x, a.y, b.x, b.y)


def _inside_edge(x: float, y: float, bounds: CanvasBounds, edge: float) -> bool:
    return edge < x < bounds.width - edge and edge < y < bounds.height - edge


def _arc_threshold(char_count: int) -> float:
    return float((char_count % SCATTER_THRESHOLD_MODULO) + SCATTER_THRESHOLD_BASE)


# ============================================================================
# Layout strategies
# ============================================================================

def layout_scatter(ctx: LayoutContext) -> Layout:
    """Uniform scatter; every pair closer than the threshold is connected."""
    rng, bounds = ctx.rng, ctx.bounds
    count = math.floor(ctx.word_count * SCATTER_STAR_FACTOR) + SCATTER_STAR_BASE
    threshold = _arc_threshold(ctx.char_count)

    stars = list(ctx.leading_stars)
    for _ in range(count):
        x = rng.floating(SCATTER_MARGIN, bounds.width - SCATTER_MARGIN)
        y = rng.floating(SCATTER_MARGIN, bounds.height - SCATTER_MARGIN)
        stars.append(Star(x, y, rng.floating(0.3, 0.7)))

    segments = [
        _segment(stars[i], stars[j])
        for i in range(len(stars))
        for j in range(i + 1, len(stars))
        if _distance(stars[i], stars[j]) < threshold
    ]
    return Layout(stars, segments, threshold)


def layout_simple_dots(ctx: LayoutContext) -> Layout:
    rng, bounds = ctx.rng, ctx.bounds
    count = math.floor(rng.floating(0.3, 0.8) * 15) + rng.integer(3, 12)
    stars = list(ctx.leading_stars)
    for _ in range(count):
        x = rng.floating(DOTS_MARGIN, bounds.width - DOTS_MARGIN)
        y = rng.floating(DOTS_MARGIN, bounds.height - DOTS_MARGIN)
        stars.append(Star(x, y, STAR_RADIUS_DOT))
    return Layout(stars, [])


def golden_anchor_points(bounds: CanvasBounds) -> List[Tuple[float, float]]:
    """The four golden-section intersections of the canvas."""
    xs = (bounds.width / PHI, bounds.width - bounds.width / PHI)
    ys = (bounds.height / PHI, bounds.height - bounds.height / PHI)
    return [(x, y) for y in ys for x in xs]


def _snap(x: float, y: float, anchors: Sequence[Tuple[float, float]]) -> Tuple[float, float]:
    nearest = min(anchors, key=lambda point: math.hypot(point[0] - x, point[1] - y))
    if math.hypot(nearest[0] - x, nearest[1] - y) < SPIRAL_SNAP_DISTANCE:
        x, y = nearest
    return (
        round(x / SPIRAL_GRID_STEP) * SPIRAL_GRID_STEP,
        round(y / SPIRAL_GRID_STEP) * SPIRAL_GRID_STEP,
    )


def layout_golden_spiral(ctx: LayoutContext) -> Layout:
    """
    Golden-angle spiral from the canvas center.

    Star i sits at angle i * tau / phi and radius sqrt(i) * 15. Leading
    (crypto) stars take the first indices, so the spiral starts after them.
    Consecutive stars closer than char_count * phi are connected.
    """
    rng, bounds = ctx.rng, ctx.bounds
    count = math.floor(ctx.word_count * PHI) + SPIRAL_STAR_BASE
    threshold = ctx.char_count * PHI
    center_x = bounds.width / 2
    center_y = bounds.height / 2
    snapping = rng.chance(ctx.config.anchor_snap_likelihood)
    anchors = golden_anchor_points(bounds)

    stars = list(ctx.leading_stars)
    for i in range(len(stars), count):
        angle = i * TAU / PHI
        radius = math.sqrt(i) * SPIRAL_RADIUS_STEP
        x = center_x + math.cos(angle) * radius
        y = center_y + math.sin(angle) * radius
        if snapping:
            x, y = _snap(x, y, anchors)
        if bounds.contains(x, y):
            stars.append(Star(x, y, STAR_RADIUS_DOT))

    segments = [
        _segment(stars[i], stars[i + 1])
        for i in range(len(stars) - 1)
        if _distance(stars[i], stars[i + 1]) < threshold
    ]
    return Layout(stars, segments, threshold)


def layout_cluster(ctx: LayoutContext) -> Layout:
    """2-4 clusters; at most two chain links per cluster, whatever the distance."""
    rng, bounds = ctx.rng, ctx.bounds
    stars = list(ctx.leading_stars)
    segments: List[Segment] = []

    for _ in range(rng.integer(2, 4)):
        center_x = rng.floating(CLUSTER_MARGIN, bounds.width - CLUSTER_MARGIN)
        center_y = rng.floating(CLUSTER_MARGIN, bounds.height - CLUSTER_MARGIN)
        members: List[Star] = []
        for _ in range(rng.integer(3, 7)):
            angle = rng.floating(0, TAU)
            distance = rng.floating(5, 15)
            x = center_x + math.cos(angle) * distance
            y = center_y + math.sin(angle) * distance
            if _inside_edge(x, y, bounds, CLUSTER_EDGE):
                members.append(Star(x, y, STAR_RADIUS_CLUSTER))
        links = min(CLUSTER_MAX_CONNECTIONS, len(members) - 1)
        segments.extend(_segment(members[k], members[k + 1]) for k in range(max(0, links)))
        stars.extend(members)

    return Layout(stars, segments)


def layout_arc(ctx: LayoutContext) -> Layout:
    rng, bounds = ctx.rng, ctx.bounds
    threshold = _arc_threshold(ctx.char_count)
    stars = list(ctx.leading_stars)
    segments: List[Segment] = []

    for _ in range(rng.integer(1, 3)):
        center_x = rng.floating(ARC_MARGIN, bounds.width - ARC_MARGIN)
        center_y = rng.floating(ARC_MARGIN, bounds.height - ARC_MARGIN)
        radius = rng.floating(15, 40)
        start = rng.floating(0, TAU)
        sweep = rng.floating(math.pi * 0.3, math.pi * 1.2)
        count = rng.integer(5, 12)

        members: List[Star] = []
        for i in range(count):
            angle = start + sweep * i / (count - 1)
            x = center_x + math.cos(angle) * radius
            y = center_y + math.sin(angle) * radius
            if _inside_edge(x, y, bounds, ARC_EDGE):
                members.append(Star(x, y, STAR_RADIUS_CLUSTER))
        segments.extend(
            _segment(a, b)
            for a, b in zip(members, members[1:])
            if _distance(a, b) < threshold
        )
        stars.extend(members)

    return Layout(stars, segments, threshold)


def layout_minimal_lines(ctx: LayoutContext) -> Layout:
    rng, bounds = ctx.rng, ctx.bounds
    count = rng.integer(3, 8)
    members = [
        Star(
            rng.floating(MINIMAL_MARGIN, bounds.width - MINIMAL_MARGIN),
            rng.floating(MINIMAL_MARGIN, bounds.height - MINIMAL_MARGIN),
            STAR_RADIUS_DOT,
        )
        for _ in range(count)
    ]
    links = min(MINIMAL_MAX_CONNECTIONS, count - 1)
    segments = [_segment(members[k], members[k + 1]) for k in range(links)]
    return Layout(list(ctx.leading_stars) + members, segments)


LAYOUT_STRATEGIES: Dict[str, Callable[[LayoutContext], Layout]] = {
    STRATEGY_SIMPLE_DOTS: layout_simple_dots,
    STRATEGY_GOLDEN_SPIRAL: layout_golden_spiral,
    STRATEGY_SCATTER: layout_scatter,
    STRATEGY_MINIMAL_LINES: layout_minimal_lines,
    STRATEGY_CLUSTER: layout_cluster,
    STRATEGY_ARC: layout_arc,
}


# ============================================================================
# Key word stars
# ============================================================================

def select_key_word(text: str, tagger: KeywordTagger) -> Optional[str]:
    """
    Pick the most important word of text.

    Candidates are nouns followed by adjectives, each in text order. Words
    shorter than CRYPTO_MIN_WORD_LENGTH are dropped, the rest ranked by
    descending length. Ties keep candidate order (sorted() is stable).
    """
    candidates = [*tagger.nouns(text), *tagger.adjectives(text)]
    candidates = [word for word in candidates if len(word) >= CRYPTO_MIN_WORD_LENGTH]
    if not candidates:
        return None
    return sorted(candidates, key=len, reverse=True)[0]


def crypto_star(word: str, bounds: CanvasBounds) -> Star:
    """Encode the first letter of word into star coordinates."""
    code = ord(word[0])
    return Star(
        x=code % bounds.width,
        y=(code * PHI) % bounds.height,
        radius=STAR_RADIUS_DOT,
        is_crypto=True,
    )


def word_stars(word: str, bounds: CanvasBounds) -> List[Star]:
    """
    Spell word as a left-to-right row of stars.

    Each letter's alphabet position (a=0 ... z=25) sets its height within
    the middle band of the canvas. Non-letters are skipped.
    """
    letters = [ch for ch in word.lower() if "a" <= ch <= "z"]
    band_top, band_bottom = WORD_STAR_BAND
    stars = []
    for position, letter in enumerate(letters, start=1):
        offset = (ord(letter) - ord("a")) / 25
        stars.append(Star(
            x=bounds.width * position / (len(letters) + 1),
            y=bounds.height * (band_top + (band_bottom - band_top) * offset),
            radius=STAR_RADIUS_DOT,
            is_word_star=True,
        ))
    return stars


# ============================================================================
# Connections and hints
# ============================================================================

def _nearest_anchor(star: Star, anchors: Sequence[TextAnchor]) -> TextAnchor:
    return min(anchors, key=lambda anchor: math.hypot(anchor.x - star.x, anchor.y - star.y))


def anchor_segments(stars: Sequence[Star], bounds: CanvasBounds, limit: int) -> List[Segment]:
    anchors = bounds.anchors()
    segments = []
    for star in stars[:limit]:
        anchor = _nearest_anchor(star, anchors)
        segments.append((star.x, star.y, anchor.x, anchor.y))
    return segments


def style_connections(segments: Sequence[Segment], kind: str) -> Tuple[Connection, ...]:
    return tuple(
        Connection(
            *segment,
            kind=kind,
            opacity=CONNECTION_OPACITY_BASE + (index % 5) * CONNECTION_OPACITY_STEP,
        )
        for index, segment in enumerate(segments)
    )


def render_hints(char_count: int, strategy: str, threshold: Optional[float]) -> RenderHints:
    return RenderHints(
        opacity=((char_count % HINT_OPACITY_MODULO) + HINT_OPACITY_BASE) / 255,
        stroke_width=HINT_STROKE_WIDTH,
        strategy=strategy,
        connection_threshold=threshold,
    )


def choose_strategy(rng: SeededRandom, config: ConstellationConfig) -> str:
    if config.strategy is not None:
        return config.strategy
    names = list(STRATEGY_WEIGHTS)
    weights = [config.strategy_weights.get(name, 0) for name in names]
    return rng.weighted(names, weights)


def generate_constellation(
    text: str,
    bounds: CanvasBounds,
    seed: Optional[SeedLike] = None,
    config: Optional[ConstellationConfig] = None,
    tagger: Optional[KeywordTagger] = None,
) -> Constellation:
    """
    Lay out a constellation for a piece of text.

    Args:
        text: Source text. Its hash is the default seed; its word and
            character counts drive star count and connection distance.
        bounds: Canvas size and format
        seed: Override seed (int or text), defaults to hash_string(text)
        config: Toggles and likelihoods, defaults to ConstellationConfig()
        tagger: Part-of-speech source for the crypto and word stars. Without
            one, no key word stars are placed.

    Returns:
        Constellation. When nothing fits on the canvas (no stars survive or
        the canvas is smaller than the strategy margins) stars and
        connections are empty tuples.
    """
    config = config or ConstellationConfig()
    resolved = hash_string(text) if seed is None else resolve_seed(seed)
    rng = SeededRandom(resolved)
    word_count = len(text.split(" "))
    char_count = len(text)

    strategy = choose_strategy(rng, config)
    empty = Constellation((), (), render_hints(char_count, strategy, None), resolved)
    if bounds.width <= 0 or bounds.height <= 0:
        logger.debug(f"Degenerate canvas {bounds.width}x{bounds.height}, no constellation")
        return empty

    key_word = None
    if tagger is not None and (config.enable_crypto_star or config.enable_word_stars):
        key_word = select_key_word(text, tagger)

    leading: Tuple[Star, ...] = ()
    if key_word and config.enable_crypto_star:
        leading = (crypto_star(key_word, bounds),)

    ctx = LayoutContext(rng, bounds, word_count, char_count, config, leading)
    try:
        layout = LAYOUT_STRATEGIES[strategy](ctx)
    except ValueError as exc:
        # Canvas narrower than the strategy margins: empty sampling range
        logger.debug(f"{strategy} layout does not fit {bounds.width}x{bounds.height}: {exc}")
        return empty

    stars = layout.stars
    if key_word and config.enable_word_stars:
        stars = stars + word_stars(key_word, bounds)

    if not stars:
        return empty

    connections = style_connections(layout.segments, CONNECTION_STAR)
    if bounds.is_square and rng.chance(config.anchor_connection_likelihood):
        limit = config.max_anchor_connections
        connections = style_connections(anchor_segments(stars, bounds, limit), CONNECTION_ANCHOR)

    logger.debug(
        f"Constellation seed={resolved} strategy={strategy} "
        f"stars={len(stars)} connections={len(connections)}"
    )
    return Constellation(
        stars=tuple(stars),
        connections=connections,
        hints=render_hints(char_count, strategy, layout.connection_threshold),
        seed=resolved,
    )
