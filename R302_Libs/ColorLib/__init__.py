"""
ColorLib - Color science for Room 302.

Modules:
    color_spaces: Hex, HSL, Lab, LCH, OKLab, CMYK and physical approximations
    color_theory: Color perturbations, harmony palettes and ColorOrchestrator
"""

from R302_Libs.ColorLib.color_spaces import (
    hsl_to_rgb_array,
    parse_hex,
    rgb_to_hsl_array,
    to_hex,
)
from R302_Libs.ColorLib.color_theory import (
    ColorHarmonySet,
    ColorOrchestrator,
    build_harmony,
    harmony_from_rule,
    perturb_color,
)

__all__ = [
    "parse_hex",
    "to_hex",
    "rgb_to_hsl_array",
    "hsl_to_rgb_array",
    "ColorHarmonySet",
    "ColorOrchestrator",
    "build_harmony",
    "harmony_from_rule",
    "perturb_color",
]
