"""
Unit tests for template_populator module.

Tests placeholder replacement, word distribution, format detection and
overlay insertion.
"""

import xml.etree.ElementTree as ET

import pytest

from R302_Libs.BatchLib.quote_corpus import Quote
from R302_Libs.BatchLib.template_populator import (
    detect_bounds,
    distribute_words,
    insert_overlay,
    populate_template,
    raster_size,
)
from R302_Libs.ConstellationLib.constellation_models import CanvasBounds

from conftest import SQUARE_TEMPLATE, TALL_TEMPLATE

SVG = "{http://www.w3.org/2000/svg}"
MOMENTUM = Quote(title="Momentum", text="Ship it messy, patch it live, glow up forever.")


def _texts(svg_text):
    root = ET.fromstring(svg_text)
    return [
        [tspan.text or "" for tspan in text.iter(f"{SVG}tspan")] or [text.text]
        for text in root.iter(f"{SVG}text")
    ]


class TestDistributeWords:
    """Tests for distribute_words function."""

    def test_fills_at_most_four_lines(self):
        """Should spread nine words three per line over five tspans."""
        lines = distribute_words(MOMENTUM.text, 5)

        assert lines == ["Ship it messy,", "patch it live,", "glow up forever.", "", ""]

    def test_fewer_lines_than_cap(self):
        """Should use ceil(words / lines) words per line."""
        assert distribute_words("a b c d e", 2) == ["a b c", "d e"]

    def test_short_text(self):
        """Should leave trailing lines empty."""
        assert distribute_words("hello", 4) == ["hello", "", "", ""]


class TestPopulateTemplate:
    """Tests for populate_template function."""

    def test_body_and_title_replaced(self):
        """Should put the title and spread the text over the body tspans."""
        texts = _texts(populate_template(TALL_TEMPLATE, MOMENTUM))

        assert texts[0] == ["Momentum"]
        assert texts[1] == ["Ship it messy,", "patch it live,", "glow up forever.", "", ""]

    def test_other_text_untouched(self):
        """Should leave text without the placeholder alone."""
        texts = _texts(populate_template(TALL_TEMPLATE, MOMENTUM))

        assert texts[2] == ["room 302"]

    def test_keeps_default_namespace(self):
        """Should serialize with a plain svg root, not ns0 prefixes."""
        output = populate_template(TALL_TEMPLATE, MOMENTUM)

        assert output.startswith("<svg")
        assert "ns0:" not in output
        assert 'viewBox="0 0 108 192"' in output

    def test_two_tspan_title(self):
        """Should only replace the first tspan of a two-line title."""
        svg = (
            '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 108 108">'
            "<text><tspan>Lorem ipsum</tspan><tspan>second</tspan></text></svg>"
        )

        texts = _texts(populate_template(svg, MOMENTUM))

        assert texts[0] == ["Momentum", "second"]

    def test_three_tspans_untouched(self):
        """Should ignore placeholder blocks with exactly three tspans."""
        svg = (
            '<svg xmlns="http://www.w3.org/2000/svg">'
            "<text><tspan>Lorem ipsum</tspan><tspan>b</tspan><tspan>c</tspan></text></svg>"
        )

        texts = _texts(populate_template(svg, MOMENTUM))

        assert texts[0] == ["Lorem ipsum", "b", "c"]

    def test_malformed_svg_raises(self):
        """Should raise ParseError for broken markup."""
        with pytest.raises(ET.ParseError):
            populate_template("<svg><text>", MOMENTUM)


class TestBounds:
    """Tests for detect_bounds and raster_size."""

    def test_square_template(self):
        """Should recognise the 108x108 viewBox as square."""
        bounds = detect_bounds(SQUARE_TEMPLATE)

        assert bounds == CanvasBounds.square()
        assert raster_size(bounds) == (1080, 1080)

    def test_tall_template(self):
        """Should treat any other viewBox as the tall story format."""
        bounds = detect_bounds(TALL_TEMPLATE)

        assert bounds == CanvasBounds.tall()
        assert raster_size(bounds) == (1080, 1920)

    def test_detection_survives_population(self):
        """Should still detect the square format after populating."""
        populated = populate_template(SQUARE_TEMPLATE, MOMENTUM)

        assert detect_bounds(populated).is_square


class TestInsertOverlay:
    """Tests for insert_overlay function."""

    def test_inserts_before_closing_tag(self):
        """Should place the fragment right before </svg>."""
        result = insert_overlay("<svg><rect/></svg>", '<g class="constellation"/>')

        assert result == '<svg><rect/>\n<g class="constellation"/>\n</svg>'

    def test_uses_last_closing_tag(self):
        """Should insert before the last </svg> when several exist."""
        result = insert_overlay("<svg><svg></svg></svg>", "<g/>")

        assert result.endswith("<g/>\n</svg>")
        assert result.startswith("<svg><svg></svg>")

    def test_empty_fragment(self):
        """Should return the markup unchanged for an empty fragment."""
        assert insert_overlay("<svg></svg>", "") == "<svg></svg>"

    def test_missing_closing_tag(self):
        """Should raise ValueError without a closing </svg>."""
        with pytest.raises(ValueError):
            insert_overlay("<svg>", "<g/>")
