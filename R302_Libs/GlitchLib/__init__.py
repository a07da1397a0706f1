"""
GlitchLib - Pixel glitch engine for Room 302.

Modules:
    glitch_filters: The nine built-in filters and the data mosh variants
    glitch_registry: Name -> filter registry with metadata
    pixel_glitch: GlitchConfig, glitch mix selection and apply_glitch
    raster_codec: PNG decode/encode and glitch_png
"""

from R302_Libs.GlitchLib.glitch_filters import (
    MOSH_VARIANTS,
    data_mosh_naive,
    data_mosh_quality,
)
from R302_Libs.GlitchLib.glitch_registry import (
    GlitchFilterRegistry,
    get_default_registry,
    register_default_filters,
)
from R302_Libs.GlitchLib.pixel_glitch import (
    GlitchConfig,
    GlitchReport,
    apply_glitch,
    choose_noise_scale,
    get_glitch_mix,
)
from R302_Libs.GlitchLib.raster_codec import decode_png, encode_png, glitch_png

__all__ = [
    "MOSH_VARIANTS",
    "data_mosh_naive",
    "data_mosh_quality",
    "GlitchFilterRegistry",
    "get_default_registry",
    "register_default_filters",
    "GlitchConfig",
    "GlitchReport",
    "apply_glitch",
    "choose_noise_scale",
    "get_glitch_mix",
    "decode_png",
    "encode_png",
    "glitch_png",
]
