"""
Pixel glitch engine.

apply_glitch takes a flat interleaved pixel buffer, flips a weighted coin per
filter and runs the selected filters in a fixed canonical order. The seeded
Perlin mask is only built when a selected filter is registered with
uses_mask; otherwise filters receive None. The engine never raises on bad
input: an invalid buffer, or any unexpected failure, hands back the original
buffer unchanged and logs a warning.

Example:
    >>> pixels = bytes(64 * 64 * 3)
    >>> out = apply_glitch(pixels, 64, 64, 3, seed="Ship it messy")
    >>> out, report = apply_glitch(pixels, 64, 64, 3, seed=42, report=True)
    >>> report.active_filters
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

import numpy as np

from R302_Libs.constants import (
    CANONICAL_FILTER_ORDER,
    FALLBACK_FILTER,
    FILTER_DATA_MOSH,
    MOSH_VARIANT_QUALITY,
    NOISE_SCALE_REGIMES,
)
from R302_Libs.GlitchLib.glitch_filters import MOSH_VARIANTS
from R302_Libs.GlitchLib.glitch_registry import (
    FilterFunction,
    GlitchFilterRegistry,
    get_default_registry,
)
from R302_Libs.ProceduralLib.perlin_noise import PerlinNoise
from R302_Libs.ProceduralLib.seeded_random import SeedLike, SeededRandom, resolve_seed

logger = logging.getLogger(__name__)

PixelBuffer = Union[bytes, bytearray, np.ndarray]
VALID_CHANNELS = (3, 4)


@dataclass
class GlitchConfig:
    """
    Configuration for a glitch call.

    Attributes:
        enabled_filters: Filters allowed to join the mix, or None for all
        weights: Per-filter weight overrides (percent chance, 0-100)
        mosh_variant: Which data_mosh implementation the mix uses
            ('quality' or 'naive')
    """
    enabled_filters: Optional[Tuple[str, ...]] = None
    weights: Dict[str, float] = field(default_factory=dict)
    mosh_variant: str = MOSH_VARIANT_QUALITY

    def __post_init__(self) -> None:
        if self.mosh_variant not in MOSH_VARIANTS:
            raise ValueError(
                f"mosh_variant must be one of {sorted(MOSH_VARIANTS)}, got '{self.mosh_variant}'"
            )
        if self.enabled_filters is not None:
            self.enabled_filters = tuple(self.enabled_filters)
            if not self.enabled_filters:
                raise ValueError("enabled_filters cannot be empty; use None for all filters")
        for name, weight in self.weights.items():
            if not 0 <= weight <= 100:
                raise ValueError(f"weight for '{name}' must be between 0 and 100, got {weight}")

    def is_enabled(self, name: str) -> bool:
        return self.enabled_filters is None or name in self.enabled_filters

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "enabled_filters": list(self.enabled_filters) if self.enabled_filters else None,
            "weights": dict(self.weights),
            "mosh_variant": self.mosh_variant,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GlitchConfig":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items()
                    if k in cls.__dataclass_fields__}
        return cls(**filtered)


@dataclass
class GlitchReport:
    """What one apply_glitch call did."""
    seed: int
    scale_type: str
    scale: float
    octaves: int
    active_filters: Tuple[str, ...] = ()
    failed_filters: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seed": self.seed,
            "scale_type": self.scale_type,
            "scale": self.scale,
            "octaves": self.octaves,
            "active_filters": list(self.active_filters),
            "failed_filters": list(self.failed_filters),
        }


def choose_noise_scale(rng: SeededRandom) -> Tuple[str, float, int]:
    """
    Pick a noise regime, then a scale and octave count inside it.

    Returns:
        (regime name, scale, octaves)
    """
    names = list(NOISE_SCALE_REGIMES)
    weights = [NOISE_SCALE_REGIMES[name]["weight"] for name in names]
    regime = rng.weighted(names, weights)
    low, high = NOISE_SCALE_REGIMES[regime]["scale"]
    min_octaves, max_octaves = NOISE_SCALE_REGIMES[regime]["octaves"]
    return regime, rng.floating(low, high), rng.integer(min_octaves, max_octaves)


def _mix_order(registry: GlitchFilterRegistry) -> List[str]:
    """Built-in filters in canonical order, then extras in registration order."""
    extras = [name for name in registry.registration_order()
              if name not in CANONICAL_FILTER_ORDER]
    return [name for name in CANONICAL_FILTER_ORDER if registry.has_filter(name)] + extras


def get_glitch_mix(
    seed: SeedLike,
    config: Optional[GlitchConfig] = None,
    registry: Optional[GlitchFilterRegistry] = None,
) -> Tuple[str, ...]:
    """
    Select which filters run, by independent weighted coin flips.

    Coins are flipped for every registered filter, in descending order of
    default weight and then registration order, so disabling a filter does
    not reshuffle the others. Disabled filters are dropped afterwards. If
    nothing survives, the fallback filter (color_shift, or the first enabled
    filter) is used alone.

    Returns:
        Active filter names in application order
    """
    config = config or GlitchConfig()
    registry = registry or get_default_registry()
    order = _mix_order(registry)

    rng = SeededRandom(seed)
    flip_order = sorted(
        order,
        key=lambda name: -registry.get_metadata(name)["default_weight"],
    )
    selected = set()
    for name in flip_order:
        weight = config.weights.get(name, registry.get_metadata(name)["default_weight"])
        if rng.chance(weight):
            selected.add(name)

    mix = tuple(name for name in order if name in selected and config.is_enabled(name))
    if mix:
        return mix

    if config.is_enabled(FALLBACK_FILTER) and registry.has_filter(FALLBACK_FILTER):
        return (FALLBACK_FILTER,)
    for name in order:
        if config.is_enabled(name):
            return (name,)
    raise ValueError("No enabled filter is registered")


def _validate_buffer(pixels: Any, width: Any, height: Any, channels: Any) -> Optional[str]:
    if not isinstance(pixels, (bytes, bytearray, np.ndarray)):
        return f"unsupported buffer type {type(pixels)}"
    if isinstance(pixels, np.ndarray) and (pixels.ndim != 1 or pixels.dtype != np.uint8):
        return f"numpy buffer must be 1-D uint8, got {pixels.ndim}-D {pixels.dtype}"
    for label, value in (("width", width), ("height", height), ("channels", channels)):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            return f"{label} must be an int, got {type(value)}"
    if width <= 0 or height <= 0:
        return f"image size must be positive, got {width}x{height}"
    if channels not in VALID_CHANNELS:
        return f"channels must be 3 or 4, got {channels}"
    expected = width * height * channels
    if len(pixels) != expected:
        return f"buffer length {len(pixels)} does not match {width}x{height}x{channels}={expected}"
    return None


def _to_frame(pixels: PixelBuffer, width: int, height: int, channels: int) -> np.ndarray:
    if isinstance(pixels, np.ndarray):
        flat = pixels.copy()
    else:
        flat = np.frombuffer(bytes(pixels), dtype=np.uint8).copy()
    return flat.reshape(height, width, channels)


def _from_frame(frame: np.ndarray, like: PixelBuffer) -> PixelBuffer:
    if isinstance(like, np.ndarray):
        return frame.reshape(-1).copy()
    if isinstance(like, bytearray):
        return bytearray(frame.tobytes())
    return frame.tobytes()


def _resolve_filter(
    name: str,
    registry: GlitchFilterRegistry,
    config: GlitchConfig,
) -> FilterFunction:
    if name == FILTER_DATA_MOSH:
        return MOSH_VARIANTS[config.mosh_variant]
    return registry.get_filter(name)


def apply_glitch(
    pixels: PixelBuffer,
    width: int,
    height: int,
    channels: int,
    seed: SeedLike,
    config: Optional[GlitchConfig] = None,
    *,
    report: bool = False,
    registry: Optional[GlitchFilterRegistry] = None,
):
    """
    Glitch a flat interleaved pixel buffer.

    Args:
        pixels: bytes, bytearray or 1-D uint8 numpy array of length
            width * height * channels. Never mutated.
        width: Image width in pixels
        height: Image height in pixels
        channels: 3 (RGB) or 4 (RGBA)
        seed: Text or integer seed
        config: Filter toggles, defaults to GlitchConfig()
        report: Also return a GlitchReport
        registry: Filter registry, defaults to the global registry

    Returns:
        A new buffer of the same type family and length as pixels, or
        (buffer, GlitchReport) when report=True. On invalid input the
        original object is returned (with a None report).
    """
    problem = _validate_buffer(pixels, width, height, channels)
    if problem:
        logger.warning(f"Glitch skipped, invalid pixel buffer: {problem}")
        return (pixels, None) if report else pixels

    try:
        config = config or GlitchConfig()
        registry = registry or get_default_registry()
        resolved = resolve_seed(seed)
        rng = SeededRandom(resolved)

        scale_type, scale, octaves = choose_noise_scale(rng)
        mix = get_glitch_mix(resolved, config, registry)
        noise_mask = None
        if any(registry.get_metadata(name)["uses_mask"] for name in mix):
            noise_mask = PerlinNoise(resolved).generate_mask(width, height, scale, octaves)

        frame = _to_frame(pixels, width, height, channels)
        failed: List[str] = []
        for name in mix:
            working = frame.copy()
            try:
                _resolve_filter(name, registry, config)(working, rng, noise_mask)
            except Exception as exc:
                logger.warning(f"Glitch filter '{name}' failed and was skipped: {exc}")
                failed.append(name)
                continue
            frame = working

        glitch_report = GlitchReport(
            seed=resolved,
            scale_type=scale_type,
            scale=scale,
            octaves=octaves,
            active_filters=tuple(name for name in mix if name not in failed),
            failed_filters=tuple(failed),
        )
        logger.info(f"Glitch settings applied: {glitch_report.to_dict()}")

        result = _from_frame(frame, pixels)
    except Exception as exc:
        logger.warning(f"Glitch failed, returning original buffer: {exc}")
        return (pixels, None) if report else pixels

    return (result, glitch_report) if report else result
