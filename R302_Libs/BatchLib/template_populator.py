"""
SVG template population.

Templates are 108-unit wide SVG cards whose text blocks hold "Lorem ipsum"
placeholder <tspan>s. populate_template swaps in a quote; insert_overlay
appends generated markup (the constellation) just before </svg>.
"""

import logging
import math
import xml.etree.ElementTree as ET
from typing import List, Tuple

from R302_Libs.constants import (
    PLACEHOLDER_TEXT,
    RASTER_SQUARE_HEIGHT,
    RASTER_TALL_HEIGHT,
    RASTER_WIDTH,
    SQUARE_VIEWBOX,
)
from R302_Libs.BatchLib.quote_corpus import Quote
from R302_Libs.ConstellationLib.constellation_models import CanvasBounds

logger = logging.getLogger(__name__)

SVG_NAMESPACE = "http://www.w3.org/2000/svg"
MAX_BODY_LINES = 4

# Keep the usual prefixes on serialization instead of ns0, ns1...
for _prefix, _uri in (
    ("", SVG_NAMESPACE),
    ("xlink", "http://www.w3.org/1999/xlink"),
    ("inkscape", "http://www.inkscape.org/namespaces/inkscape"),
    ("sodipodi", "http://sodipodi.sourceforge.net/DTD/sodipodi-0.dtd"),
):
    ET.register_namespace(_prefix, _uri)


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _tspans(element: ET.Element) -> List[ET.Element]:
    return [child for child in element.iter() if _local_name(child.tag) == "tspan"]


def distribute_words(text: str, line_count: int) -> List[str]:
    """
    Split text over line_count lines, filling at most MAX_BODY_LINES.

    Every used line gets ceil(words / min(line_count, 4)) words, the last
    one possibly fewer. Unused lines are empty strings.
    """
    words = text.split(" ")
    per_line = math.ceil(len(words) / min(line_count, MAX_BODY_LINES))
    return [" ".join(words[i * per_line:(i + 1) * per_line]) for i in range(line_count)]


def populate_template(svg_text: str, quote: Quote) -> str:
    """
    Replace placeholder text blocks with the quote.

    A <text> containing the placeholder with more than three <tspan>s is the
    body: the quote text is spread across its tspans. One with one or two
    tspans is the title and gets quote.title. Other text is left alone.

    Raises:
        xml.etree.ElementTree.ParseError: If svg_text is not well-formed XML
    """
    root = ET.fromstring(svg_text.encode("utf-8"))
    for element in root.iter():
        if _local_name(element.tag) != "text":
            continue
        if PLACEHOLDER_TEXT not in "".join(element.itertext()):
            continue

        tspans = _tspans(element)
        if len(tspans) > 3:
            for tspan, line in zip(tspans, distribute_words(quote.text, len(tspans))):
                tspan.text = line
        elif 1 <= len(tspans) <= 2:
            tspans[0].text = quote.title

    return ET.tostring(root, encoding="unicode")


def detect_bounds(svg_text: str) -> CanvasBounds:
    """The 0 0 108 108 viewBox is the square format; anything else is tall."""
    if SQUARE_VIEWBOX in svg_text:
        return CanvasBounds.square()
    return CanvasBounds.tall()


def raster_size(bounds: CanvasBounds) -> Tuple[int, int]:
    """Output pixel size for a template format."""
    if bounds.is_square:
        return RASTER_WIDTH, RASTER_SQUARE_HEIGHT
    return RASTER_WIDTH, RASTER_TALL_HEIGHT


def insert_overlay(svg_text: str, fragment: str) -> str:
    """
    Insert fragment right before the last closing </svg> tag.

    An empty fragment returns svg_text unchanged.

    Raises:
        ValueError: If svg_text has no closing </svg> tag
    """
    if not fragment:
        return svg_text
    index = svg_text.rfind("</svg>")
    if index < 0:
        raise ValueError("SVG has no closing </svg> tag")
    return f"{svg_text[:index]}\n{fragment}\n{svg_text[index:]}"
