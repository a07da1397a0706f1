"""SVG to PNG rasterization."""

import logging

logger = logging.getLogger(__name__)


def rasterize_svg(svg_text: str, width: int, height: int) -> bytes:
    """
    Render SVG markup to PNG bytes at an exact pixel size.

    cairosvg is imported on first use so the rest of the toolkit works
    without the Cairo system library.

    Raises:
        ValueError: If width or height is not positive
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"raster size must be positive, got {width}x{height}")

    import cairosvg

    logger.debug(f"Rasterizing SVG at {width}x{height}")
    return cairosvg.svg2png(
        bytestring=svg_text.encode("utf-8"),
        output_width=width,
        output_height=height,
    )
