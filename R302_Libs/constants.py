"""
Constants and tuning values for Room 302 generative art.

This module centralizes the magic numbers used throughout the procedural
pipeline. Most of the ranges below are aesthetic tuning parameters: they were
picked by eye and are preserved exactly so renders stay reproducible.
"""

import math

# Math
PHI = 1.618034
TAU = math.pi * 2

# Hashing
HASH_MASK = 0x7FFFFFFF

# Design palette
COLOR_ACCENT_ORANGE = "#e17055"
COLOR_ACCENT_GREEN = "#55e170"
COLOR_CONSTELLATION = "#ffffff"
CONSTELLATION_STAR_ALPHA = 0.6

# Template viewBox units
TEMPLATE_WIDTH = 108
TEMPLATE_SQUARE_HEIGHT = 108
TEMPLATE_TALL_HEIGHT = 192

# Raster output sizes
RASTER_WIDTH = 1080
RASTER_SQUARE_HEIGHT = 1080
RASTER_TALL_HEIGHT = 1920

# ============================================================================
# Constellation layout
# ============================================================================

STRATEGY_SIMPLE_DOTS = "simple_dots"
STRATEGY_GOLDEN_SPIRAL = "golden_spiral"
STRATEGY_SCATTER = "scatter"
STRATEGY_MINIMAL_LINES = "minimal_lines"
STRATEGY_CLUSTER = "cluster"
STRATEGY_ARC = "arc"

STRATEGY_WEIGHTS = {
    STRATEGY_SIMPLE_DOTS: 25,
    STRATEGY_GOLDEN_SPIRAL: 20,
    STRATEGY_SCATTER: 20,
    STRATEGY_MINIMAL_LINES: 15,
    STRATEGY_CLUSTER: 10,
    STRATEGY_ARC: 10,
}

SCATTER_STAR_FACTOR = 1.2
SCATTER_STAR_BASE = 3
SCATTER_MARGIN = 8.0
SCATTER_THRESHOLD_MODULO = 25
SCATTER_THRESHOLD_BASE = 15

SPIRAL_STAR_BASE = 3
SPIRAL_RADIUS_STEP = 15.0
SPIRAL_SNAP_DISTANCE = 6.0
SPIRAL_GRID_STEP = 0.5

DOTS_MARGIN = 5.0
CLUSTER_MARGIN = 20.0
CLUSTER_EDGE = 5.0
CLUSTER_MAX_CONNECTIONS = 2
ARC_MARGIN = 30.0
ARC_EDGE = 5.0
MINIMAL_MARGIN = 15.0
MINIMAL_MAX_CONNECTIONS = 2

STAR_RADIUS_DOT = 0.25
STAR_RADIUS_CLUSTER = 0.5

CRYPTO_MIN_WORD_LENGTH = 5
WORD_STAR_BAND = (0.35, 0.65)

HINT_OPACITY_MODULO = 50
HINT_OPACITY_BASE = 30
HINT_STROKE_WIDTH = 0.2
CONNECTION_OPACITY_BASE = 0.1
CONNECTION_OPACITY_STEP = 0.05

# ============================================================================
# Glitch engine
# ============================================================================

FILTER_CHANNEL_SHIFT = "channel_shift"
FILTER_PIXEL_SORT_H = "pixel_sort_horizontal"
FILTER_PIXEL_SORT_V = "pixel_sort_vertical"
FILTER_DATA_MOSH = "data_mosh"
FILTER_SCANLINES = "scanlines"
FILTER_INTERLACE = "interlace"
FILTER_NOISE = "noise"
FILTER_COLOR_SHIFT = "color_shift"
FILTER_MIRROR = "mirror"

# Filters always run in this order, whatever subset is active
CANONICAL_FILTER_ORDER = (
    FILTER_CHANNEL_SHIFT,
    FILTER_PIXEL_SORT_H,
    FILTER_PIXEL_SORT_V,
    FILTER_DATA_MOSH,
    FILTER_SCANLINES,
    FILTER_INTERLACE,
    FILTER_NOISE,
    FILTER_COLOR_SHIFT,
    FILTER_MIRROR,
)

FILTER_WEIGHTS = {
    FILTER_CHANNEL_SHIFT: 80,
    FILTER_PIXEL_SORT_H: 60,
    FILTER_PIXEL_SORT_V: 50,
    FILTER_DATA_MOSH: 45,
    FILTER_COLOR_SHIFT: 40,
    FILTER_SCANLINES: 30,
    FILTER_NOISE: 25,
    FILTER_INTERLACE: 20,
    FILTER_MIRROR: 15,
}

FALLBACK_FILTER = FILTER_COLOR_SHIFT

MOSH_VARIANT_NAIVE = "naive"
MOSH_VARIANT_QUALITY = "quality"

# Noise scale regimes: smaller scale values give BIGGER patterns
NOISE_SCALE_REGIMES = {
    "macro": {"weight": 50, "scale": (0.0001, 0.0005), "octaves": (1, 2)},
    "large": {"weight": 40, "scale": (0.0005, 0.002), "octaves": (1, 2)},
    "medium": {"weight": 10, "scale": (0.002, 0.008), "octaves": (1, 2)},
}

DEFAULT_NOISE_SCALE = 0.05
DEFAULT_NOISE_OCTAVES = 3

PNG_COMPRESSION_LEVEL = 6

# ============================================================================
# Color engine
# ============================================================================

HARMONY_TRIADIC = "triadic"
HARMONY_TETRADIC = "tetradic"
HARMONY_SPLIT_COMPLEMENT = "split_complement"
HARMONY_ANALOGOUS = "analogous"
HARMONY_MONOCHROMATIC = "monochromatic"

HARMONY_RULES = (
    HARMONY_TRIADIC,
    HARMONY_TETRADIC,
    HARMONY_SPLIT_COMPLEMENT,
    HARMONY_ANALOGOUS,
    HARMONY_MONOCHROMATIC,
)

DEFAULT_PERTURB_LIKELIHOOD = 25
REGULAR_STAR_LIKELIHOOD = 8
FEATURE_STAR_LIKELIHOOD = 25
ACCENT_COLOR_LIKELIHOOD = 30
ENHANCE_KEEP_LIKELIHOOD = 85

# ============================================================================
# Batch output
# ============================================================================

DEFAULT_OUTPUT_DIR = "stories"
DEFAULT_OUTPUT_FORMAT = "PNG"
SLUG_MAX_LENGTH = 30
PLACEHOLDER_TEXT = "Lorem ipsum"
SQUARE_VIEWBOX = 'viewBox="0 0 108 108"'
