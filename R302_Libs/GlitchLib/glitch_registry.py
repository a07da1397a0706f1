"""
Glitch Filter Registry.

This module provides a centralized registry for pixel glitch filters. It maps
filter names to callables plus metadata, so the glitch engine can look filters
up by name and callers can plug in their own.

Classes:
    GlitchFilterRegistry: Registry for glitch filters

Functions:
    get_default_registry: Get the global default registry (singleton)
    register_default_filters: Register the nine built-in filters
"""

from typing import Any, Callable, Dict, List, Optional
import logging

import numpy as np

from R302_Libs.ProceduralLib.seeded_random import SeededRandom

logger = logging.getLogger(__name__)

# Type alias for filter function
FilterFunction = Callable[[np.ndarray, SeededRandom, np.ndarray], None]


class GlitchFilterRegistry:
    """
    Registry for glitch filters.

    Registration order is remembered: the engine applies any non-built-in
    filters after the built-in ones, in the order they were registered.

    Example:
        >>> registry = GlitchFilterRegistry()
        >>> registry.register("scanlines", scanlines, default_weight=30)
        >>> fn = registry.get_filter("scanlines")
        >>> fn(frame, rng, noise_mask)
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._filters: Dict[str, FilterFunction] = {}
        self._filter_metadata: Dict[str, Dict[str, Any]] = {}

    def register(
        self,
        name: str,
        fn: FilterFunction,
        description: str = "",
        default_weight: float = 0,
        tags: Optional[List[str]] = None,
        uses_mask: bool = False,
    ) -> None:
        """
        Register a glitch filter.

        Args:
            name: Unique filter name (e.g., "scanlines")
            fn: Callable mutating a frame in place. Must accept
                (frame, rng, noise_mask)
            description: Human-readable description of the filter
            default_weight: Percent chance (0-100) of joining a glitch mix
            tags: Optional list of tags for categorization (e.g., ["sort"])
            uses_mask: Whether the filter reads the noise mask

        Raises:
            ValueError: If name is empty, fn is not callable or the weight
                is outside 0-100
            RuntimeError: If name is already registered
        """
        name = str(name).strip()

        if not name:
            raise ValueError("name cannot be empty")

        if not callable(fn):
            raise ValueError(f"fn must be callable, got {type(fn)}")

        if not 0 <= default_weight <= 100:
            raise ValueError(f"default_weight must be between 0 and 100, got {default_weight}")

        if name in self._filters:
            raise RuntimeError(f"Filter '{name}' is already registered")

        self._filters[name] = fn
        self._filter_metadata[name] = {
            "description": str(description),
            "default_weight": float(default_weight),
            "tags": list(tags) if tags else [],
            "uses_mask": bool(uses_mask),
        }

        logger.debug(f"Registered glitch filter: {name}")

    def get_filter(self, name: str) -> FilterFunction:
        """
        Get a filter by name.

        Raises:
            KeyError: If name is not registered
        """
        name = str(name).strip()

        if name not in self._filters:
            available = ", ".join(self.list_filters())
            raise KeyError(
                f"No glitch filter registered as '{name}'. "
                f"Available filters: {available}"
            )

        return self._filters[name]

    def has_filter(self, name: str) -> bool:
        return str(name).strip() in self._filters

    def list_filters(self) -> List[str]:
        """
        Get list of all registered filter names.

        Returns:
            Sorted list of filter names
        """
        return sorted(self._filters.keys())

    def registration_order(self) -> List[str]:
        """Filter names in the order they were registered."""
        return list(self._filters.keys())

    def get_metadata(self, name: str) -> Dict[str, Any]:
        """
        Get metadata for a filter.

        Returns:
            Dictionary with description, default_weight, tags, uses_mask

        Raises:
            KeyError: If name is not registered
        """
        name = str(name).strip()

        if name not in self._filter_metadata:
            raise KeyError(f"No metadata for glitch filter: {name}")

        return dict(self._filter_metadata[name])


# Global singleton registry
_default_registry: Optional[GlitchFilterRegistry] = None


def get_default_registry() -> GlitchFilterRegistry:
    """
    Get the global default registry (singleton).

    Creates the registry on first call and registers the built-in filters.
    """
    global _default_registry

    if _default_registry is None:
        _default_registry = GlitchFilterRegistry()
        register_default_filters(_default_registry)

    return _default_registry


def register_default_filters(registry: GlitchFilterRegistry) -> None:
    """
    Register the nine built-in filters with their default mix weights.

    "data_mosh" is registered as the quality variant; the engine swaps in
    the naive variant when GlitchConfig.mosh_variant asks for it.
    """
    from R302_Libs.constants import (
        FILTER_CHANNEL_SHIFT,
        FILTER_COLOR_SHIFT,
        FILTER_DATA_MOSH,
        FILTER_INTERLACE,
        FILTER_MIRROR,
        FILTER_NOISE,
        FILTER_PIXEL_SORT_H,
        FILTER_PIXEL_SORT_V,
        FILTER_SCANLINES,
        FILTER_WEIGHTS,
    )
    from R302_Libs.GlitchLib import glitch_filters

    builtins = [
        (FILTER_CHANNEL_SHIFT, glitch_filters.channel_shift,
         "Shift red and blue channels sideways in horizontal bands",
         ["displacement", "color"], False),
        (FILTER_PIXEL_SORT_H, glitch_filters.pixel_sort_horizontal,
         "Sort row segments by brightness", ["sort"], False),
        (FILTER_PIXEL_SORT_V, glitch_filters.pixel_sort_vertical,
         "Sort column segments by brightness", ["sort"], False),
        (FILTER_DATA_MOSH, glitch_filters.data_mosh_quality,
         "Blend textured blocks onto other regions", ["corruption"], False),
        (FILTER_SCANLINES, glitch_filters.scanlines,
         "Darken evenly spaced rows", ["crt"], False),
        (FILTER_INTERLACE, glitch_filters.interlace,
         "Jitter even rows sideways", ["crt", "displacement"], False),
        (FILTER_NOISE, glitch_filters.noise,
         "Inject random channel values", ["corruption"], False),
        (FILTER_COLOR_SHIFT, glitch_filters.color_shift,
         "Perlin-masked hue, luminance or saturation shift", ["color"], True),
        (FILTER_MIRROR, glitch_filters.mirror,
         "Fold the image around a horizontal axis", ["displacement"], False),
    ]

    for name, fn, description, tags, uses_mask in builtins:
        registry.register(
            name=name,
            fn=fn,
            description=description,
            default_weight=FILTER_WEIGHTS[name],
            tags=tags,
            uses_mask=uses_mask,
        )

    logger.info("Registered default glitch filters")

