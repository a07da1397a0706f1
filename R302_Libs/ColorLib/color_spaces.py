"""
Color space conversions used by the color theory engine and pixel filters.

Scalar conversions work on RGB triples of floats in 0-255 and are used for
single colors (stars, palettes). The *_array variants are vectorized with
numpy and used on whole pixel frames.

Reference white is D65 throughout.
"""

import colorsys
import math
import re
from typing import Sequence, Tuple

import numpy as np

Rgb = Tuple[float, float, float]
Triplet = Tuple[float, float, float]

_HEX_PATTERN = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")

# D65 reference white
_XN, _YN, _ZN = 0.95047, 1.0, 1.08883
_LAB_EPSILON = 216 / 24389
_LAB_KAPPA = 24389 / 27


# ============================================================================
# Hex / RGB
# ============================================================================

def parse_hex(color: str) -> Tuple[int, int, int]:
    """
    Parse '#rgb', '#rrggbb' or '#rrggbbaa' (alpha ignored) into an RGB tuple.

    Raises:
        ValueError: If the string is not a hex color
    """
    if not isinstance(color, str):
        raise ValueError(f"Expected hex color string, got {type(color)}")
    match = _HEX_PATTERN.match(color.strip())
    if not match:
        raise ValueError(f"Invalid hex color: {color!r}")
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def clamp_byte(value: float) -> int:
    if math.isnan(value):
        return 0
    return int(max(0, min(255, math.floor(value + 0.5))))


def clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, value))


def to_hex(rgb: Sequence[float]) -> str:
    """Clamp an RGB triple to 0-255 and format it as '#rrggbb'."""
    r, g, b = (clamp_byte(channel) for channel in rgb[:3])
    return f"#{r:02x}{g:02x}{b:02x}"


# ============================================================================
# HSL (scalar, via colorsys)
# ============================================================================

def rgb_to_hsl(rgb: Rgb) -> Triplet:
    """RGB 0-255 -> (hue degrees, saturation 0-1, lightness 0-1)."""
    r, g, b = rgb
    h, l, s = colorsys.rgb_to_hls(r / 255.0, g / 255.0, b / 255.0)
    return h * 360.0, s, l


def hsl_to_rgb(h: float, s: float, l: float) -> Rgb:
    """(hue degrees, saturation, lightness) -> RGB 0-255 floats."""
    r, g, b = colorsys.hls_to_rgb((h % 360.0) / 360.0, clamp_unit(l), clamp_unit(s))
    return r * 255.0, g * 255.0, b * 255.0


# ============================================================================
# XYZ / Lab / LCH
# ============================================================================

def _to_linear(channel: float) -> float:
    c = channel / 255.0
    return c / 12.92 if c <= 0.04045 else ((c + 0.055) / 1.055) ** 2.4


def _from_linear(channel: float) -> float:
    if channel <= 0.0031308:
        return 255.0 * 12.92 * channel
    return 255.0 * (1.055 * channel ** (1 / 2.4) - 0.055)


def rgb_to_xyz(rgb: Rgb) -> Triplet:
    r, g, b = (_to_linear(c) for c in rgb)
    x = r * 0.4124564 + g * 0.3575761 + b * 0.1804375
    y = r * 0.2126729 + g * 0.7151522 + b * 0.0721750
    z = r * 0.0193339 + g * 0.1191920 + b * 0.9503041
    return x, y, z


def xyz_to_rgb(xyz: Triplet) -> Rgb:
    x, y, z = xyz
    r = x * 3.2404542 - y * 1.5371385 - z * 0.4985314
    g = -x * 0.9692660 + y * 1.8760108 + z * 0.0415560
    b = x * 0.0556434 - y * 0.2040259 + z * 1.0572252
    return tuple(_from_linear(max(0.0, c)) for c in (r, g, b))


def _lab_f(t: float) -> float:
    return t ** (1 / 3) if t > _LAB_EPSILON else (_LAB_KAPPA * t + 16) / 116


def _lab_f_inv(t: float) -> float:
    cube = t ** 3
    return cube if cube > _LAB_EPSILON else (116 * t - 16) / _LAB_KAPPA


def rgb_to_lab(rgb: Rgb) -> Triplet:
    x, y, z = rgb_to_xyz(rgb)
    fx = _lab_f(x / _XN)
    fy = _lab_f(y / _YN)
    fz = _lab_f(z / _ZN)
    return 116 * fy - 16, 500 * (fx - fy), 200 * (fy - fz)


def lab_to_rgb(lab: Triplet) -> Rgb:
    l, a, b = lab
    fy = (l + 16) / 116
    fx = a / 500 + fy
    fz = fy - b / 200
    return xyz_to_rgb((_lab_f_inv(fx) * _XN, _lab_f_inv(fy) * _YN, _lab_f_inv(fz) * _ZN))


def lab_to_lch(lab: Triplet) -> Triplet:
    l, a, b = lab
    return l, math.hypot(a, b), math.degrees(math.atan2(b, a)) % 360.0


def lch_to_lab(lch: Triplet) -> Triplet:
    l, c, h = lch
    rad = math.radians(h)
    return l, c * math.cos(rad), c * math.sin(rad)


def rgb_to_lch(rgb: Rgb) -> Triplet:
    return lab_to_lch(rgb_to_lab(rgb))


def lch_to_rgb(lch: Triplet) -> Rgb:
    return lab_to_rgb(lch_to_lab(lch))


# ============================================================================
# OKLab
# ============================================================================

def rgb_to_oklab(rgb: Rgb) -> Triplet:
    r, g, b = (_to_linear(c) for c in rgb)
    l = 0.4122214708 * r + 0.5363325363 * g + 0.0514459929 * b
    m = 0.2119034982 * r + 0.6806995451 * g + 0.1073969566 * b
    s = 0.0883024619 * r + 0.2817188376 * g + 0.6299787005 * b
    l_, m_, s_ = (math.copysign(abs(v) ** (1 / 3), v) for v in (l, m, s))
    return (
        0.2104542553 * l_ + 0.7936177850 * m_ - 0.0040720468 * s_,
        1.9779984951 * l_ - 2.4285922050 * m_ + 0.4505937099 * s_,
        0.0259040371 * l_ + 0.7827717662 * m_ - 0.8086757660 * s_,
    )


def oklab_to_rgb(oklab: Triplet) -> Rgb:
    L, a, b = oklab
    l_ = L + 0.3963377774 * a + 0.2158037573 * b
    m_ = L - 0.1055613458 * a - 0.0638541728 * b
    s_ = L - 0.0894841775 * a - 1.2914855480 * b
    l, m, s = l_ ** 3, m_ ** 3, s_ ** 3
    r = 4.0767416621 * l - 3.3077115913 * m + 0.2309699292 * s
    g = -1.2684380046 * l + 2.6097574011 * m - 0.3413193965 * s
    bb = -0.0041960863 * l - 0.7034186147 * m + 1.7076147010 * s
    return tuple(_from_linear(max(0.0, c)) for c in (r, g, bb))


# ============================================================================
# CMYK
# ============================================================================

def rgb_to_cmyk(rgb: Rgb) -> Tuple[float, float, float, float]:
    r, g, b = (clamp_unit(c / 255.0) for c in rgb)
    k = 1.0 - max(r, g, b)
    if k >= 1.0:
        return 0.0, 0.0, 0.0, 1.0
    return (
        (1.0 - r - k) / (1.0 - k),
        (1.0 - g - k) / (1.0 - k),
        (1.0 - b - k) / (1.0 - k),
        k,
    )


def cmyk_to_rgb(c: float, m: float, y: float, k: float) -> Rgb:
    return (
        255.0 * (1.0 - c) * (1.0 - k),
        255.0 * (1.0 - m) * (1.0 - k),
        255.0 * (1.0 - y) * (1.0 - k),
    )


# ============================================================================
# Physical approximations
# ============================================================================

def temperature_to_rgb(kelvin: float) -> Rgb:
    """Approximate the color of a blackbody radiator (1000-40000 K)."""
    temp = kelvin / 100.0
    if temp < 66:
        r = 255.0
        g = 0.0 if temp < 6 else (
            -155.25485562709179
            - 0.44596950469579133 * (temp - 2)
            + 104.49216199393888 * math.log(temp - 2)
        )
        b = 0.0 if temp < 20 else (
            -254.76935184120902
            + 0.8274096064007395 * (temp - 10)
            + 115.67994401066147 * math.log(temp - 10)
        )
    else:
        r = (
            351.97690566805693
            + 0.114206453784165 * (temp - 55)
            - 40.25366309332127 * math.log(temp - 55)
        )
        g = (
            325.4494125711974
            + 0.07943456536662342 * (temp - 50)
            - 28.0852963507957 * math.log(temp - 50)
        )
        b = 255.0
    return clamp_byte(r), clamp_byte(g), clamp_byte(b)


def rgb_to_temperature(rgb: Rgb) -> float:
    """
    Rough warm/cool estimate in kelvin.

    Not a physical inverse of temperature_to_rgb: reds map into 2000-6000 K,
    blues into 4000-8000 K.
    """
    r, _, b = rgb
    if r > b:
        return 2000 + (r / 255.0) * 4000
    return 4000 + (b / 255.0) * 4000


def wavelength_to_rgb(wavelength: float, attenuate: bool = False) -> Rgb:
    """
    Map a visible wavelength in nm (380-780) to an approximate RGB color.

    With attenuate=True the intensity falls off toward both spectrum edges.
    """
    w = wavelength
    if w < 440:
        r, g, b = (440 - w) / (440 - 380), 0.0, 1.0
    elif w < 490:
        r, g, b = 0.0, (w - 440) / (490 - 440), 1.0
    elif w < 510:
        r, g, b = 0.0, 1.0, (510 - w) / (510 - 490)
    elif w < 580:
        r, g, b = (w - 510) / (580 - 510), 1.0, 0.0
    elif w < 645:
        r, g, b = 1.0, (645 - w) / (645 - 580), 0.0
    else:
        r, g, b = 1.0, 0.0, 0.0

    intensity = 1.0
    if attenuate:
        if 380 <= w < 420:
            intensity = 0.3 + 0.7 * (w - 380) / (420 - 380)
        elif 700 <= w <= 780:
            intensity = 0.3 + 0.7 * (780 - w) / (780 - 700)

    return (
        clamp_unit(r) * intensity * 255.0,
        clamp_unit(g) * intensity * 255.0,
        clamp_unit(b) * intensity * 255.0,
    )


def cubehelix(
    fraction: float,
    start: float = 0.5,
    rotations: float = -1.5,
    hue: float = 1.0,
    gamma: float = 1.0,
) -> Rgb:
    """Sample Green's cubehelix color scheme at lightness fraction 0-1."""
    angle = 2 * math.pi * (start / 3.0 + 1.0 + rotations * fraction)
    lightness = clamp_unit(fraction) ** gamma
    amplitude = hue * lightness * (1 - lightness) / 2.0
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    r = lightness + amplitude * (-0.14861 * cos_a + 1.78277 * sin_a)
    g = lightness + amplitude * (-0.29227 * cos_a - 0.90649 * sin_a)
    b = lightness + amplitude * (1.97294 * cos_a)
    return r * 255.0, g * 255.0, b * 255.0


def relative_luminance(rgb: Rgb) -> float:
    """WCAG relative luminance of an RGB color, 0-1."""
    r, g, b = (_to_linear(clamp_byte(c)) for c in rgb)
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast_ratio(first: Rgb, second: Rgb) -> float:
    lum_a = relative_luminance(first)
    lum_b = relative_luminance(second)
    lighter, darker = max(lum_a, lum_b), min(lum_a, lum_b)
    return (lighter + 0.05) / (darker + 0.05)


# ============================================================================
# Interpolation
# ============================================================================

def mix_lab(first: Rgb, second: Rgb, amount: float) -> Rgb:
    """Linear mix in Lab. amount=0 gives first, 1 gives second."""
    a = rgb_to_lab(first)
    b = rgb_to_lab(second)
    return lab_to_rgb(tuple(x + (y - x) * amount for x, y in zip(a, b)))


def mix_lch(first: Rgb, second: Rgb, amount: float) -> Rgb:
    """Mix in LCH, taking the short way round the hue circle."""
    l1, c1, h1 = rgb_to_lch(first)
    l2, c2, h2 = rgb_to_lch(second)
    delta = ((h2 - h1 + 180.0) % 360.0) - 180.0
    return lch_to_rgb((
        l1 + (l2 - l1) * amount,
        c1 + (c2 - c1) * amount,
        (h1 + delta * amount) % 360.0,
    ))


def bezier_lab(colors: Sequence[Rgb], t: float) -> Rgb:
    """Evaluate a Bezier curve through Lab control points at t in [0, 1]."""
    points = [rgb_to_lab(color) for color in colors]
    if not points:
        raise ValueError("bezier_lab requires at least one color")
    # de Casteljau
    while len(points) > 1:
        points = [
            tuple(p + (q - p) * t for p, q in zip(points[i], points[i + 1]))
            for i in range(len(points) - 1)
        ]
    return lab_to_rgb(points[0])


# ============================================================================
# Vectorized HSL for pixel frames
# ============================================================================

def rgb_to_hsl_array(rgb: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Convert an (..., 3) array of 0-255 RGB values to HSL.

    Returns:
        (hue degrees 0-360, saturation 0-1, lightness 0-1) arrays
    """
    values = rgb.astype(np.float64) / 255.0
    r, g, b = values[..., 0], values[..., 1], values[..., 2]
    max_c = values.max(axis=-1)
    min_c = values.min(axis=-1)
    lightness = (max_c + min_c) / 2.0
    delta = max_c - min_c
    flat = delta == 0
    safe_delta = np.where(flat, 1.0, delta)

    denom = np.where(lightness > 0.5, 2.0 - max_c - min_c, max_c + min_c)
    denom = np.where(flat, 1.0, denom)
    saturation = np.where(flat, 0.0, delta / denom)

    hue_r = (g - b) / safe_delta + np.where(g < b, 6.0, 0.0)
    hue_g = (b - r) / safe_delta + 2.0
    hue_b = (r - g) / safe_delta + 4.0
    hue = np.where(max_c == r, hue_r, np.where(max_c == g, hue_g, hue_b))
    hue = np.where(flat, 0.0, hue) * 60.0
    return hue, saturation, lightness


def _hue_to_channel(p: np.ndarray, q: np.ndarray, t: np.ndarray) -> np.ndarray:
    t = np.where(t < 0, t + 1.0, t)
    t = np.where(t > 1, t - 1.0, t)
    return np.where(
        t < 1 / 6,
        p + (q - p) * 6.0 * t,
        np.where(t < 1 / 2, q, np.where(t < 2 / 3, p + (q - p) * (2 / 3 - t) * 6.0, p)),
    )


def hsl_to_rgb_array(hue: np.ndarray, saturation: np.ndarray, lightness: np.ndarray) -> np.ndarray:
    """
    Convert HSL arrays back to an (..., 3) uint8 RGB array.

    Channels are rounded half-up and clamped to 0-255.
    """
    h = (np.asarray(hue, dtype=np.float64) % 360.0) / 360.0
    s = np.clip(np.asarray(saturation, dtype=np.float64), 0.0, 1.0)
    l = np.clip(np.asarray(lightness, dtype=np.float64), 0.0, 1.0)

    q = np.where(l < 0.5, l * (1 + s), l + s - l * s)
    p = 2 * l - q
    r = _hue_to_channel(p, q, h + 1 / 3)
    g = _hue_to_channel(p, q, h)
    b = _hue_to_channel(p, q, h - 1 / 3)

    gray = s == 0
    r = np.where(gray, l, r)
    g = np.where(gray, l, g)
    b = np.where(gray, l, b)

    out = np.stack([r, g, b], axis=-1)
    return np.clip(np.floor(out * 255.0 + 0.5), 0, 255).astype(np.uint8)
