"""
Color perturbation, harmony palettes and the star color orchestrator.

All three entry points are deterministic given their arguments and never
raise on bad color input: a malformed hex string comes back unchanged.

Example:
    >>> perturb_color("#ffffff", seed=1234, likelihood=100)
    >>> build_harmony("#e17055", seed=7)
    >>> ColorOrchestrator(seed=42).enhance_color("#ffffff", seed=1042, likelihood=8)
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from R302_Libs.constants import (
    DEFAULT_PERTURB_LIKELIHOOD,
    ENHANCE_KEEP_LIKELIHOOD,
    HARMONY_ANALOGOUS,
    HARMONY_MONOCHROMATIC,
    HARMONY_RULES,
    HARMONY_SPLIT_COMPLEMENT,
    HARMONY_TETRADIC,
    HARMONY_TRIADIC,
)
from R302_Libs.ColorLib.color_spaces import (
    Rgb,
    bezier_lab,
    clamp_unit,
    cmyk_to_rgb,
    contrast_ratio,
    cubehelix,
    hsl_to_rgb,
    lab_to_rgb,
    lch_to_rgb,
    mix_lab,
    mix_lch,
    oklab_to_rgb,
    parse_hex,
    rgb_to_cmyk,
    rgb_to_hsl,
    rgb_to_lab,
    rgb_to_lch,
    rgb_to_oklab,
    rgb_to_temperature,
    rgb_to_xyz,
    temperature_to_rgb,
    to_hex,
    wavelength_to_rgb,
    xyz_to_rgb,
)
from R302_Libs.ProceduralLib.seeded_random import SeedLike, SeededRandom

logger = logging.getLogger(__name__)

ColorHarmonySet = Tuple[str, ...]

ILLUMINANT_TEMPERATURES = (2856, 5003, 6504, 9300)
TEMPERATURE_EVOLUTION_FACTORS = (0.7, 1.3, 0.4)

_WHITE = (255, 255, 255)
_BISECTION_STEPS = 24


# ============================================================================
# Perturbations
# ============================================================================

def _lab_shift(rgb: Rgb, rng: SeededRandom) -> Rgb:
    l, a, b = rgb_to_lab(rgb)
    return lab_to_rgb((
        l + rng.floating(-30, 30),
        a + rng.floating(-40, 40),
        b + rng.floating(-40, 40),
    ))


def _lch_chroma(rgb: Rgb, rng: SeededRandom) -> Rgb:
    l, c, h = rgb_to_lch(rgb)
    return lch_to_rgb((
        l,
        min(130.0, c * rng.floating(2, 5)),
        h + rng.floating(-20, 20),
    ))


def _oklab_shift(rgb: Rgb, rng: SeededRandom) -> Rgb:
    l, a, b = rgb_to_oklab(rgb)
    return oklab_to_rgb((
        clamp_unit(l + rng.floating(-0.3, 0.3)),
        a + rng.floating(-0.2, 0.2),
        b + rng.floating(-0.2, 0.2),
    ))


def _cubehelix_sample(rgb: Rgb, rng: SeededRandom) -> Rgb:
    start = rng.floating(0, 2)
    rotations = rng.floating(-2, 2)
    gamma = rng.floating(0.5, 2)
    return cubehelix(0.5, start=start, rotations=rotations, gamma=gamma)


def _blackbody(rgb: Rgb, rng: SeededRandom) -> Rgb:
    return temperature_to_rgb(rng.integer(2000, 10000))


def _random_rgb(rng: SeededRandom) -> Rgb:
    return (rng.integer(0, 255), rng.integer(0, 255), rng.integer(0, 255))


def _bezier_chaos(rgb: Rgb, rng: SeededRandom) -> Rgb:
    first = _random_rgb(rng)
    second = _random_rgb(rng)
    return bezier_lab([rgb, first, second], rng.floating(0, 1))


def _delta_e_neighbour(rgb: Rgb, rng: SeededRandom) -> Rgb:
    l, a, b = rgb_to_lab(rgb)
    return lab_to_rgb((
        l + rng.floating(-5, 5),
        a + rng.floating(-10, 10),
        b + rng.floating(-10, 10),
    ))


def _illuminant_adaptation(rgb: Rgb, rng: SeededRandom) -> Rgb:
    x, y, z = rgb_to_xyz(rgb)
    return xyz_to_rgb((
        x * rng.floating(0.8, 1.2),
        y * rng.floating(0.9, 1.1),
        z * rng.floating(0.7, 1.3),
    ))


def _solve_lightness(hue: float, saturation: float, ratio: float) -> float:
    """Bisect HSL lightness until the contrast against white drops to ratio."""
    low, high = 0.0, 1.0
    for _ in range(_BISECTION_STEPS):
        mid = (low + high) / 2
        if contrast_ratio(hsl_to_rgb(hue, saturation, mid), _WHITE) > ratio:
            low = mid
        else:
            high = mid
    return (low + high) / 2


def _contrast_solve(rgb: Rgb, rng: SeededRandom) -> Rgb:
    ratio = rng.floating(0.1, 21)
    hue, saturation, _ = rgb_to_hsl(rgb)
    return hsl_to_rgb(hue, saturation, _solve_lightness(hue, saturation, ratio))


def _spectral(rgb: Rgb, rng: SeededRandom) -> Rgb:
    return wavelength_to_rgb(rng.integer(380, 750))


def _cmyk_jitter(rgb: Rgb, rng: SeededRandom) -> Rgb:
    c, m, y, k = rgb_to_cmyk(rgb)
    return cmyk_to_rgb(
        clamp_unit(c + rng.floating(-0.3, 0.3)),
        clamp_unit(m + rng.floating(-0.3, 0.3)),
        clamp_unit(y + rng.floating(-0.3, 0.3)),
        clamp_unit(k + rng.floating(-0.2, 0.2)),
    )


def _cone_response(rgb: Rgb, rng: SeededRandom) -> Rgb:
    r, g, b = rgb
    long_cone = r * 0.4124 + g * 0.3576 + b * 0.1805
    medium_cone = r * 0.2126 + g * 0.7152 + b * 0.0722
    short_cone = r * 0.0193 + g * 0.1192 + b * 0.9505
    return (
        long_cone * rng.floating(0.7, 1.3),
        medium_cone * rng.floating(0.8, 1.2),
        short_cone * rng.floating(0.6, 1.4),
    )


# Indexed 1..12 by rng.integer(1, 12)
PERTURBATIONS: List[Callable[[Rgb, SeededRandom], Rgb]] = [
    _lab_shift,
    _lch_chroma,
    _oklab_shift,
    _cubehelix_sample,
    _blackbody,
    _bezier_chaos,
    _delta_e_neighbour,
    _illuminant_adaptation,
    _contrast_solve,
    _spectral,
    _cmyk_jitter,
    _cone_response,
]


def perturb_color(
    base_hex: str,
    seed: SeedLike,
    likelihood: float = DEFAULT_PERTURB_LIKELIHOOD,
) -> str:
    """
    Occasionally push a color through one of twelve color-science transforms.

    Args:
        base_hex: Color to perturb ('#rrggbb')
        seed: Seed for the decision and the transform parameters
        likelihood: Percent chance (0-100) that the color changes at all

    Returns:
        The perturbed color as '#rrggbb', or base_hex untouched when the
        coin flip fails or the color cannot be parsed
    """
    try:
        rng = SeededRandom(seed)
        if not rng.chance(likelihood):
            return base_hex
        rgb = parse_hex(base_hex)
        transform = PERTURBATIONS[rng.integer(1, len(PERTURBATIONS)) - 1]
        return to_hex(transform(rgb, rng))
    except Exception as exc:
        logger.debug(f"perturb_color fell back to {base_hex!r}: {exc}")
        return base_hex


# ============================================================================
# Harmonies
# ============================================================================

# (hue offset, saturation scale, lightness scale); None marks the base color
_HARMONY_TABLE: Dict[str, Tuple[Optional[Tuple[float, float, float]], ...]] = {
    HARMONY_TRIADIC: (None, (120, 0.9, 1.1), (240, 0.8, 0.9)),
    HARMONY_TETRADIC: (None, (90, 1.0, 1.0), (180, 0.7, 1.2), (270, 0.9, 0.8)),
    HARMONY_SPLIT_COMPLEMENT: (None, (150, 0.8, 1.1), (210, 0.9, 0.9)),
    HARMONY_ANALOGOUS: ((-30, 0.9, 1.1), None, (30, 0.8, 0.9), (60, 0.7, 1.05)),
    HARMONY_MONOCHROMATIC: ((0, 0.3, 1.4), (0, 0.6, 1.2), None, (0, 1.2, 0.8), (0, 1.5, 0.6)),
}


def harmony_from_rule(base_rgb: Rgb, rule: str) -> ColorHarmonySet:
    """
    Build the palette for one harmony rule around an RGB base.

    Raises:
        ValueError: If the rule is unknown
    """
    if rule not in _HARMONY_TABLE:
        raise ValueError(f"Unknown harmony rule: {rule}")
    hue, saturation, lightness = rgb_to_hsl(base_rgb)
    palette = []
    for entry in _HARMONY_TABLE[rule]:
        if entry is None:
            palette.append(to_hex(base_rgb))
            continue
        offset, s_scale, l_scale = entry
        palette.append(to_hex(hsl_to_rgb(
            hue + offset,
            clamp_unit(saturation * s_scale),
            clamp_unit(lightness * l_scale),
        )))
    return tuple(palette)


def build_harmony(base_hex: str, seed: SeedLike) -> ColorHarmonySet:
    """
    Build a 3-5 color palette around base_hex using a seeded harmony rule.

    A malformed base returns a one-element set holding the base unchanged.
    """
    try:
        rule = SeededRandom(seed).pick_one(HARMONY_RULES)
        return harmony_from_rule(parse_hex(base_hex), rule)
    except (TypeError, ValueError) as exc:
        logger.debug(f"build_harmony fell back to {base_hex!r}: {exc}")
        return (base_hex,)


# ============================================================================
# Orchestrator
# ============================================================================

def chromatic_adaptation(rgb: Rgb, target_temperature: float) -> Rgb:
    """Crude white-balance shift of rgb toward a target illuminant temperature."""
    ratio = target_temperature / rgb_to_temperature(rgb)
    r, g, b = rgb
    red_gain = ratio ** 0.5 if ratio > 1 else ratio
    blue_gain = (1 / ratio) ** 0.5 if ratio < 1 else 1 / ratio
    return min(255.0, r * red_gain), min(255.0, g), min(255.0, b * blue_gain)


class ColorOrchestrator:
    """
    Seeded master palette plus subtle, palette-aware color refinements.

    The palette is a harmony built around a blackbody color between 3000 K
    and 8000 K. enhance_color mostly leaves colors alone; when it does act,
    it uses one of six gentle techniques.
    """

    TECHNIQUES = (
        "perceptual_shift",
        "spectral_purity",
        "chromatic_adaptation",
        "oklab_precision",
        "temperature_evolution",
        "bezier_interpolation",
    )

    def __init__(self, seed: SeedLike) -> None:
        self.rng = SeededRandom(seed)
        self.palette: ColorHarmonySet = self._generate_master_palette()

    def _generate_master_palette(self) -> ColorHarmonySet:
        base = temperature_to_rgb(self.rng.integer(3000, 8000))
        rule = self.rng.pick_one(HARMONY_RULES)
        return harmony_from_rule(base, rule)

    def enhance_color(self, color: str, seed: SeedLike, likelihood: float) -> str:
        """
        Maybe refine a color.

        Two gates apply: the color is considered with probability likelihood,
        and even then it stays unchanged most of the time
        (ENHANCE_KEEP_LIKELIHOOD). Same arguments, same result.

        Args:
            color: Base color '#rrggbb'
            seed: Per-call seed, e.g. constellation seed plus star index
            likelihood: Percent chance (0-100) of considering the color

        Returns:
            The refined color, or color unchanged
        """
        try:
            rng = SeededRandom(seed)
            if not rng.chance(likelihood) or rng.chance(ENHANCE_KEEP_LIKELIHOOD):
                return color
        except (TypeError, ValueError) as exc:
            logger.debug(f"enhance_color kept {color!r}: {exc}")
            return color
        technique = rng.pick_one(self.TECHNIQUES)
        return self.apply_technique(color, technique, rng)

    def apply_technique(self, color: str, technique: str, rng: SeededRandom) -> str:
        try:
            rgb = parse_hex(color)
            if technique == "perceptual_shift":
                l, a, b = rgb_to_lab(rgb)
                result = lab_to_rgb((
                    l + rng.floating(-8, 8),
                    a + rng.floating(-12, 12),
                    b + rng.floating(-12, 12),
                ))
            elif technique == "spectral_purity":
                spectral = wavelength_to_rgb(rng.integer(420, 680), attenuate=True)
                result = mix_lab(rgb, spectral, 0.3)
            elif technique == "chromatic_adaptation":
                adapted = chromatic_adaptation(rgb, rng.pick_one(ILLUMINANT_TEMPERATURES))
                result = mix_lch(rgb, adapted, 0.4)
            elif technique == "oklab_precision":
                l, a, b = rgb_to_oklab(rgb)
                result = oklab_to_rgb((
                    max(0.1, min(0.9, l + rng.floating(-0.1, 0.1))),
                    a + rng.floating(-0.05, 0.05),
                    b + rng.floating(-0.05, 0.05),
                ))
            elif technique == "temperature_evolution":
                current = rgb_to_temperature(rgb)
                evolved = current * rng.pick_one(TEMPERATURE_EVOLUTION_FACTORS)
                target = temperature_to_rgb(max(2000.0, min(10000.0, evolved)))
                result = mix_lch(rgb, target, 0.35)
            elif technique == "bezier_interpolation":
                if len(self.palette) < 2:
                    return color
                last = len(self.palette) - 1
                first_anchor = parse_hex(self.palette[rng.integer(0, last)])
                second_anchor = parse_hex(self.palette[rng.integer(0, last)])
                result = bezier_lab([rgb, first_anchor, second_anchor], rng.floating(0.2, 0.8))
            else:
                raise ValueError(f"Unknown technique: {technique}")
            return to_hex(result)
        except Exception as exc:
            logger.debug(f"{technique} fell back to {color!r}: {exc}")
            return color