"""
PNG decode/encode around the glitch engine.

glitch_png is the entry point the batch runner uses: PNG bytes in, PNG bytes
out. Images without alpha are processed as RGB, everything else as RGBA.
"""

import io
import logging
from typing import Optional, Tuple

import numpy as np
from PIL import Image

from R302_Libs.constants import DEFAULT_OUTPUT_FORMAT, PNG_COMPRESSION_LEVEL
from R302_Libs.GlitchLib.pixel_glitch import GlitchConfig, GlitchReport, apply_glitch
from R302_Libs.ProceduralLib.seeded_random import SeedLike

logger = logging.getLogger(__name__)

_MODES = {3: "RGB", 4: "RGBA"}


def decode_png(png_bytes: bytes) -> Tuple[np.ndarray, int, int, int]:
    """
    Decode image bytes into a flat uint8 buffer.

    Returns:
        (pixels, width, height, channels)

    Raises:
        OSError: If Pillow cannot read the data
    """
    with Image.open(io.BytesIO(png_bytes)) as image:
        has_alpha = "A" in image.getbands() or "transparency" in image.info
        mode = "RGBA" if has_alpha else "RGB"
        converted = image.convert(mode)
        width, height = converted.size
        pixels = np.asarray(converted, dtype=np.uint8).reshape(-1).copy()
    return pixels, width, height, len(mode)


def encode_png(pixels: np.ndarray, width: int, height: int, channels: int) -> bytes:
    """
    Encode a flat uint8 buffer as PNG.

    Raises:
        ValueError: If channels is not 3 or 4, or the buffer size is wrong
    """
    if channels not in _MODES:
        raise ValueError(f"channels must be 3 or 4, got {channels}")
    frame = np.asarray(pixels, dtype=np.uint8).reshape(height, width, channels)
    # (h, w, 3) uint8 maps to RGB and (h, w, 4) to RGBA
    image = Image.fromarray(frame)
    output = io.BytesIO()
    image.save(output, format=DEFAULT_OUTPUT_FORMAT, compress_level=PNG_COMPRESSION_LEVEL)
    return output.getvalue()


def glitch_png(
    png_bytes: bytes,
    seed: SeedLike,
    config: Optional[GlitchConfig] = None,
    *,
    report: bool = False,
):
    """
    Decode, glitch and re-encode a PNG.

    Args:
        png_bytes: Encoded image
        seed: Text or integer seed
        config: Glitch configuration
        report: Also return the GlitchReport

    Returns:
        PNG bytes, or (bytes, GlitchReport or None) when report=True.
        Any decode or encode failure returns png_bytes unchanged.
    """
    glitch_report: Optional[GlitchReport] = None
    try:
        pixels, width, height, channels = decode_png(png_bytes)
        glitched, glitch_report = apply_glitch(
            pixels, width, height, channels, seed, config, report=True
        )
        result = encode_png(glitched, width, height, channels)
    except Exception as exc:
        logger.warning(f"PNG glitch failed, keeping original image: {exc}")
        return (png_bytes, None) if report else png_bytes

    return (result, glitch_report) if report else result
