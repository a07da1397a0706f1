"""
ConstellationLib - Procedural star layouts for Room 302.

Modules:
    constellation_models: Stars, connections, bounds and ConstellationConfig
    constellation_generator: Layout strategies and generate_constellation
    constellation_svg: SVG overlay markup
    keyword_tagger: KeywordTagger protocol
"""

from R302_Libs.ConstellationLib.constellation_models import (
    CanvasBounds,
    Connection,
    Constellation,
    ConstellationConfig,
    RenderHints,
    Star,
    TextAnchor,
)
from R302_Libs.ConstellationLib.constellation_generator import (
    LAYOUT_STRATEGIES,
    generate_constellation,
    select_key_word,
)
from R302_Libs.ConstellationLib.constellation_svg import render_constellation_svg
from R302_Libs.ConstellationLib.keyword_tagger import KeywordTagger

__all__ = [
    "CanvasBounds",
    "Connection",
    "Constellation",
    "ConstellationConfig",
    "RenderHints",
    "Star",
    "TextAnchor",
    "LAYOUT_STRATEGIES",
    "generate_constellation",
    "select_key_word",
    "render_constellation_svg",
    "KeywordTagger",
]
