"""
Pixel glitch filters.

Every filter has the signature ``fn(frame, rng, noise_mask)`` and mutates
``frame`` in place:

    frame: uint8 array of shape (height, width, channels), channels 3 or 4
    rng: SeededRandom shared by all filters of one glitch call
    noise_mask: float array of shape (height, width) with values in [0, 1]

Only color_shift reads the mask; the others accept it so all filters can be
called the same way. When no selected filter reads the mask the engine
passes None. Unless stated otherwise filters touch RGB only and leave alpha
alone.

Displacement filters (channel_shift, interlace, mirror) read from a snapshot
of the rows they rewrite, so a pixel is never displaced twice in one pass.
"""

import math
from typing import Callable, Dict

import numpy as np

from R302_Libs.ColorLib.color_spaces import hsl_to_rgb_array, rgb_to_hsl_array
from R302_Libs.ProceduralLib.seeded_random import SeededRandom

GlitchFilter = Callable[[np.ndarray, SeededRandom, np.ndarray], None]

MOSH_MAX_ATTEMPTS = 8
MOSH_SAMPLE_SIZE = 8
MOSH_BRIGHTNESS_DELTA = 20
MOSH_MIN_VARIATIONS = 3


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# ============================================================================
# Chromatic aberration
# ============================================================================

def channel_shift(frame: np.ndarray, rng: SeededRandom, noise_mask: np.ndarray) -> None:
    """
    Shift the red and blue channels sideways in 1-3 horizontal bands.

    Shifts are U(0.8, 4.2) px for red and U(0.5, 3.8) px for blue, rarely
    (0.5 %) multiplied by 8. Edge pixels are clamped.
    """
    height, width = frame.shape[:2]
    red_shift = rng.floating(0.8, 4.2)
    blue_shift = rng.floating(0.5, 3.8)
    if rng.chance(0.5):
        red_shift *= 8
    if rng.chance(0.5):
        blue_shift *= 8
    red_shift = _round_half_up(red_shift) * (1 if rng.chance(50) else -1)
    blue_shift = _round_half_up(blue_shift) * (1 if rng.chance(50) else -1)

    columns = np.arange(width)
    red_source = np.clip(columns + red_shift, 0, width - 1)
    blue_source = np.clip(columns + blue_shift, 0, width - 1)

    for _ in range(rng.integer(1, 3)):
        start = rng.integer(0, height * 0.7)
        end = min(height, start + rng.integer(50, 200))
        band = frame[start:end]
        snapshot = band.copy()
        band[:, :, 0] = snapshot[:, red_source, 0]
        band[:, :, 2] = snapshot[:, blue_source, 2]


# ============================================================================
# Pixel sorting
# ============================================================================

def _sort_segment(segment: np.ndarray, ascending: bool) -> None:
    """Reorder the RGB of a (n, channels) segment by R+G+B. Stable."""
    rgb = segment[:, :3].copy()
    brightness = rgb.astype(np.int32).sum(axis=1)
    keys = brightness if ascending else -brightness
    order = np.argsort(keys, kind="stable")
    segment[:, :3] = rgb[order]


def pixel_sort_horizontal(frame: np.ndarray, rng: SeededRandom, noise_mask: np.ndarray) -> None:
    """Sort 3-8 row segments by brightness."""
    height, width = frame.shape[:2]
    for _ in range(rng.integer(3, 8)):
        y = rng.integer(0, height - 1)
        start = rng.integer(0, math.floor(width * 0.3))
        end = rng.integer(math.floor(width * 0.7), width)
        ascending = rng.chance(50)
        _sort_segment(frame[y, start:end], ascending)


def pixel_sort_vertical(frame: np.ndarray, rng: SeededRandom, noise_mask: np.ndarray) -> None:
    """Sort 2-5 column segments by brightness."""
    height, width = frame.shape[:2]
    for _ in range(rng.integer(2, 5)):
        x = rng.integer(0, width - 1)
        start = rng.integer(0, math.floor(height * 0.3))
        end = rng.integer(math.floor(height * 0.7), height)
        ascending = rng.chance(50)
        _sort_segment(frame[start:end, x], ascending)


# ============================================================================
# Data mosh
# ============================================================================

def data_mosh_naive(frame: np.ndarray, rng: SeededRandom, noise_mask: np.ndarray) -> None:
    """
    Copy 20-100 runs of 1-20 raw samples between random flat offsets.

    Works on interleaved samples, so runs may straddle pixels and touch alpha.
    Samples are copied one at a time so overlapping runs smear.
    """
    flat = frame.reshape(-1)
    channels = frame.shape[2]
    last = max(0, flat.size - channels)
    for _ in range(rng.integer(20, 100)):
        source = rng.integer(0, last)
        dest = rng.integer(0, last)
        run = rng.integer(1, 20)
        for offset in range(run):
            if source + offset >= flat.size or dest + offset >= flat.size:
                break
            flat[dest + offset] = flat[source + offset]


def _has_variation(frame: np.ndarray, top: int, left: int, block: int) -> bool:
    """Sample a diagonal grid in the block and count brightness jumps."""
    height, width = frame.shape[:2]
    sample = min(block, MOSH_SAMPLE_SIZE)
    variations = 0
    for sy in range(0, sample, 2):
        for sx in range(0, sample, 2):
            y1, x1 = top + sy, left + sx
            y2, x2 = y1 + 1, x1 + 1
            if y2 >= height or x2 >= width:
                continue
            first = frame[y1, x1, :3].astype(np.float64).mean()
            second = frame[y2, x2, :3].astype(np.float64).mean()
            if abs(first - second) > MOSH_BRIGHTNESS_DELTA:
                variations += 1
    return variations >= MOSH_MIN_VARIATIONS


def data_mosh_quality(frame: np.ndarray, rng: SeededRandom, noise_mask: np.ndarray) -> None:
    """
    Blend 1-2 textured source blocks onto random destinations.

    A source block is accepted only if its sampled grid shows at least three
    brightness jumps over 20; after 8 rejected candidates the block is
    skipped. Flat images are therefore left untouched. Rare chaos mode
    (0.2 %) moves 6x more blocks at 3x the size.
    """
    height, width = frame.shape[:2]
    count = rng.integer(1, 2)
    size_low = rng.floating(8, 15)
    size_high = rng.floating(20, 35)
    if rng.chance(0.2):
        count *= 6
        size_low *= 3
        size_high *= 3

    for _ in range(count):
        block = _round_half_up(rng.floating(size_low, size_high))
        if block > width or block > height:
            continue

        found = False
        for _ in range(MOSH_MAX_ATTEMPTS):
            src_x = rng.integer(0, width - block)
            src_y = rng.integer(0, height - block)
            dst_x = rng.integer(0, width - block)
            dst_y = rng.integer(0, height - block)
            if _has_variation(frame, src_y, src_x, block):
                found = True
                break
        if not found:
            continue

        strength = rng.floating(0.4, 0.8)
        source = frame[src_y:src_y + block, src_x:src_x + block].astype(np.float64)
        dest = frame[dst_y:dst_y + block, dst_x:dst_x + block]
        blended = dest.astype(np.float64) * (1 - strength) + source * strength
        dest[...] = np.floor(blended).astype(np.uint8)


MOSH_VARIANTS: Dict[str, GlitchFilter] = {
    "naive": data_mosh_naive,
    "quality": data_mosh_quality,
}


# ============================================================================
# Scanline effects
# ============================================================================

def scanlines(frame: np.ndarray, rng: SeededRandom, noise_mask: np.ndarray) -> None:
    """Darken every 2nd-6th row."""
    spacing = rng.integer(2, 6)
    intensity = rng.floating(0.3, 0.8)
    start = rng.integer(0, 3)
    rows = frame[start::spacing, :, :3]
    rows[...] = np.floor(rows.astype(np.float64) * intensity).astype(np.uint8)


def interlace(frame: np.ndarray, rng: SeededRandom, noise_mask: np.ndarray) -> None:
    """Shift each even row by -3..3 px, clamping at the edges."""
    height, width = frame.shape[:2]
    columns = np.arange(width)
    for y in range(0, height, 2):
        offset = rng.integer(-3, 3)
        source = np.clip(columns + offset, 0, width - 1)
        frame[y, :, :3] = frame[y, source, :3].copy()


def noise(frame: np.ndarray, rng: SeededRandom, noise_mask: np.ndarray) -> None:
    """Set 100-500 random pixels' R, G or B to a random value."""
    height, width = frame.shape[:2]
    last = height * width - 1
    for _ in range(rng.integer(100, 500)):
        index = rng.integer(0, last)
        value = rng.integer(0, 255)
        channel = rng.integer(0, 2)
        frame[index // width, index % width, channel] = value


# ============================================================================
# Perlin-masked color shift
# ============================================================================

def _masked_strength(noise_mask: np.ndarray, threshold: float):
    selected = noise_mask > threshold
    strength = (noise_mask[selected] - threshold) / (1 - threshold)
    return selected, strength


def apply_hue_rotate(frame: np.ndarray, rng: SeededRandom, noise_mask: np.ndarray) -> None:
    """Rotate hue by up to 1.2 * I(60, 180) degrees where the mask is high."""
    max_shift = rng.integer(60, 180)
    threshold = rng.floating(0.2, 0.8)
    selected, strength = _masked_strength(noise_mask, threshold)
    if not selected.any():
        return
    hue, saturation, lightness = rgb_to_hsl_array(frame[selected, :3])
    hue = (hue + strength * max_shift * 1.2) % 360
    frame[selected, :3] = hsl_to_rgb_array(hue, saturation, lightness)


def apply_luminance(frame: np.ndarray, rng: SeededRandom, noise_mask: np.ndarray) -> None:
    """Invert lightness, fully where the mask is 1 and not at all at threshold."""
    threshold = rng.floating(0.4, 0.8)
    selected, strength = _masked_strength(noise_mask, threshold)
    if not selected.any():
        return
    hue, saturation, lightness = rgb_to_hsl_array(frame[selected, :3])
    lightness = np.clip(lightness + (1.0 - 2 * lightness) * strength, 0.0, 1.0)
    frame[selected, :3] = hsl_to_rgb_array(hue, saturation, lightness)


def apply_saturation(frame: np.ndarray, rng: SeededRandom, noise_mask: np.ndarray) -> None:
    """Scale saturation by 0.7-1.3 following the mask."""
    threshold = rng.floating(0.2, 0.6)
    selected, strength = _masked_strength(noise_mask, threshold)
    if not selected.any():
        return
    hue, saturation, lightness = rgb_to_hsl_array(frame[selected, :3])
    saturation = np.clip(saturation * (0.7 + 0.6 * strength), 0.0, 1.0)
    frame[selected, :3] = hsl_to_rgb_array(hue, saturation, lightness)


COLOR_SHIFT_STRATEGIES: Dict[str, GlitchFilter] = {
    "hue_rotate": apply_hue_rotate,
    "luminance": apply_luminance,
    "saturation": apply_saturation,
}


def color_shift(frame: np.ndarray, rng: SeededRandom, noise_mask: np.ndarray) -> None:
    """Apply one seeded HSL effect gated by the noise mask."""
    strategy = rng.pick_one(list(COLOR_SHIFT_STRATEGIES))
    COLOR_SHIFT_STRATEGIES[strategy](frame, rng, noise_mask)


def mirror(frame: np.ndarray, rng: SeededRandom, noise_mask: np.ndarray) -> None:
    """
    Fold the image around a row between 30 % and 70 % of its height.

    Rows above the fold are replaced by their reflection from below the fold,
    or by the rows between the top and the fold read upward.
    """
    height = frame.shape[0]
    fold = rng.integer(math.floor(height * 0.3), math.floor(height * 0.7))
    from_below = rng.chance(50)
    snapshot = frame[:, :, :3].copy()
    for y in range(fold):
        source = fold + (fold - y) if from_below else fold - y
        if 0 <= source < height:
            frame[y, :, :3] = snapshot[source]
