"""
SVG overlay markup for constellations.

Produces a <g> fragment ready to be inserted before the closing </svg> tag of
a populated template. Star colors go through the ColorOrchestrator: regular
stars rarely change, crypto and word stars draw from the master palette.
"""

import logging
from typing import List, Optional

from R302_Libs.constants import (
    ACCENT_COLOR_LIKELIHOOD,
    COLOR_ACCENT_GREEN,
    COLOR_ACCENT_ORANGE,
    CONSTELLATION_STAR_ALPHA,
    FEATURE_STAR_LIKELIHOOD,
    REGULAR_STAR_LIKELIHOOD,
)
from R302_Libs.ColorLib.color_theory import ColorOrchestrator
from R302_Libs.ConstellationLib.constellation_models import (
    Constellation,
    ConstellationConfig,
    Star,
)
from R302_Libs.ProceduralLib.seeded_random import SeededRandom

logger = logging.getLogger(__name__)

INKSCAPE_NAMESPACE = "http://www.inkscape.org/namespaces/inkscape"


def _open_group(constellation: Constellation, config: ConstellationConfig) -> str:
    if config.export_for_editor:
        return (
            f'<g id="constellation" xmlns:inkscape="{INKSCAPE_NAMESPACE}" '
            f'inkscape:groupmode="layer" inkscape:label="Constellation" '
            f'opacity="{constellation.hints.opacity:.3f}">'
        )
    return f'<g class="constellation" opacity="{constellation.hints.opacity:.3f}">'


def star_color(
    star: Star,
    index: int,
    constellation: Constellation,
    orchestrator: ColorOrchestrator,
    accents: SeededRandom,
    config: ConstellationConfig,
) -> str:
    """
    Pick the fill color for one star.

    Feature stars start from a palette color (sometimes a design accent) and
    are enhanced with FEATURE_STAR_LIKELIHOOD. Regular stars start from the
    configured star color and are enhanced with REGULAR_STAR_LIKELIHOOD.
    """
    seed = constellation.seed
    if star.is_feature:
        palette = orchestrator.palette
        base = palette[index % len(palette)]
        if accents.chance(ACCENT_COLOR_LIKELIHOOD):
            base = COLOR_ACCENT_ORANGE if accents.chance(50) else COLOR_ACCENT_GREEN
        return orchestrator.enhance_color(base, seed + index, FEATURE_STAR_LIKELIHOOD)
    return orchestrator.enhance_color(config.star_color, seed + index + 1000, REGULAR_STAR_LIKELIHOOD)


def render_constellation_svg(
    constellation: Constellation,
    config: Optional[ConstellationConfig] = None,
) -> str:
    """
    Serialize a constellation as an SVG group.

    Lines are drawn first so stars sit on top of them.

    Args:
        constellation: Output of generate_constellation
        config: Rendering toggles (export_for_editor, star_color)

    Returns:
        SVG fragment, or "" for an empty constellation
    """
    if constellation.is_empty:
        return ""
    config = config or ConstellationConfig()
    orchestrator = ColorOrchestrator(constellation.seed)
    accents = SeededRandom(constellation.seed).fork("accents")
    stroke_width = constellation.hints.stroke_width

    parts: List[str] = [_open_group(constellation, config)]
    for conn in constellation.connections:
        parts.append(
            f'  <line x1="{conn.x1:.1f}" y1="{conn.y1:.1f}" '
            f'x2="{conn.x2:.1f}" y2="{conn.y2:.1f}" '
            f'stroke="{config.star_color}" stroke-opacity="{conn.opacity:.2f}" '
            f'stroke-width="{stroke_width}" data-kind="{conn.kind}"/>'
        )
    for index, star in enumerate(constellation.stars):
        fill = star_color(star, index, constellation, orchestrator, accents, config)
        alpha = "" if star.is_feature else f' fill-opacity="{CONSTELLATION_STAR_ALPHA}"'
        parts.append(
            f'  <circle cx="{star.x:.1f}" cy="{star.y:.1f}" '
            f'r="{star.radius:.2f}" fill="{fill}"{alpha}/>'
        )
    parts.append("</g>")

    logger.debug(f"Rendered constellation overlay with {len(constellation.stars)} stars")
    return "\n".join(parts)
