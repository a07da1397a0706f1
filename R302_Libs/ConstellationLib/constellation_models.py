"""
Data models for constellation layouts.

Stars and connections are immutable value objects created and consumed inside
a single generate_constellation call. ConstellationConfig holds the feature
toggles and likelihoods, and round-trips through plain dictionaries like the
other config objects in the toolkit.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from R302_Libs.constants import (
    COLOR_CONSTELLATION,
    STRATEGY_WEIGHTS,
    TEMPLATE_SQUARE_HEIGHT,
    TEMPLATE_TALL_HEIGHT,
    TEMPLATE_WIDTH,
)

CONNECTION_STAR = "star"
CONNECTION_ANCHOR = "anchor"


@dataclass(frozen=True)
class TextAnchor:
    """A point inside a text block that anchor connections can attach to."""
    label: str
    x: float
    y: float


# Title block and body block of the square template
DEFAULT_SQUARE_ANCHORS: Tuple[TextAnchor, ...] = (
    TextAnchor("title", TEMPLATE_WIDTH / 2, 30.0),
    TextAnchor("body", TEMPLATE_WIDTH / 2, 66.0),
)


@dataclass(frozen=True)
class CanvasBounds:
    """
    Canvas size in template units.

    Attributes:
        width: Canvas width (> 0 for a usable layout)
        height: Canvas height
        is_square: True for the square post format, False for the tall story
        text_anchors: Anchor points for square-format anchor connections.
            When empty, DEFAULT_SQUARE_ANCHORS are used.
    """
    width: float
    height: float
    is_square: bool = False
    text_anchors: Tuple[TextAnchor, ...] = ()

    @classmethod
    def square(cls) -> "CanvasBounds":
        return cls(TEMPLATE_WIDTH, TEMPLATE_SQUARE_HEIGHT, True)

    @classmethod
    def tall(cls) -> "CanvasBounds":
        return cls(TEMPLATE_WIDTH, TEMPLATE_TALL_HEIGHT, False)

    def anchors(self) -> Tuple[TextAnchor, ...]:
        return self.text_anchors or DEFAULT_SQUARE_ANCHORS

    def contains(self, x: float, y: float) -> bool:
        """True for points strictly inside the canvas."""
        return 0 < x < self.width and 0 < y < self.height


@dataclass(frozen=True)
class Star:
    x: float
    y: float
    radius: float
    is_crypto: bool = False
    is_word_star: bool = False

    @property
    def is_feature(self) -> bool:
        """Crypto and word stars are drawn with palette colors."""
        return self.is_crypto or self.is_word_star


@dataclass(frozen=True)
class Connection:
    x1: float
    y1: float
    x2: float
    y2: float
    kind: str = CONNECTION_STAR
    opacity: float = 0.1


@dataclass(frozen=True)
class RenderHints:
    """
    Styling derived from the text.

    Attributes:
        opacity: Group opacity for the whole overlay
        stroke_width: Line stroke width
        strategy: Name of the layout strategy that produced the stars
        connection_threshold: Distance limit used for star-to-star
            connections, or None when the strategy caps count instead
    """
    opacity: float
    stroke_width: float
    strategy: str
    connection_threshold: Optional[float] = None


@dataclass(frozen=True)
class Constellation:
    stars: Tuple[Star, ...]
    connections: Tuple[Connection, ...]
    hints: RenderHints
    seed: int

    @property
    def is_empty(self) -> bool:
        return not self.stars


@dataclass
class ConstellationConfig:
    """
    Feature toggles for constellation generation and rendering.

    Attributes:
        strategy: Force one layout strategy, or None for a seeded weighted pick
        enable_crypto_star: Encode the key word of the text into one star
        enable_word_stars: Spell the key word as a row of stars
        anchor_snap_likelihood: Percent chance that golden-spiral stars snap
            to golden-section anchor points
        anchor_connection_likelihood: Percent chance that square canvases use
            text-anchor connections instead of star-to-star connections
        max_anchor_connections: How many stars get an anchor connection
        export_for_editor: Emit the overlay as a named Inkscape layer
        star_color: Base color for regular stars
    """
    strategy: Optional[str] = None
    enable_crypto_star: bool = True
    enable_word_stars: bool = False
    anchor_snap_likelihood: float = 35
    anchor_connection_likelihood: float = 50
    max_anchor_connections: int = 4
    export_for_editor: bool = False
    star_color: str = COLOR_CONSTELLATION
    strategy_weights: Dict[str, float] = field(default_factory=lambda: dict(STRATEGY_WEIGHTS))

    def __post_init__(self) -> None:
        if self.strategy is not None and self.strategy not in STRATEGY_WEIGHTS:
            available = ", ".join(STRATEGY_WEIGHTS)
            raise ValueError(f"Unknown strategy '{self.strategy}'. Available: {available}")
        unknown = set(self.strategy_weights) - set(STRATEGY_WEIGHTS)
        if unknown:
            raise ValueError(f"Unknown strategies in weights: {sorted(unknown)}")
        if self.strategy is None and not any(w > 0 for w in self.strategy_weights.values()):
            raise ValueError("strategy_weights needs at least one positive weight")
        for name in ("anchor_snap_likelihood", "anchor_connection_likelihood"):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ValueError(f"{name} must be between 0 and 100, got {value}")
        if self.max_anchor_connections < 0:
            raise ValueError(
                f"max_anchor_connections must be >= 0, got {self.max_anchor_connections}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "strategy": self.strategy,
            "enable_crypto_star": self.enable_crypto_star,
            "enable_word_stars": self.enable_word_stars,
            "anchor_snap_likelihood": self.anchor_snap_likelihood,
            "anchor_connection_likelihood": self.anchor_connection_likelihood,
            "max_anchor_connections": self.max_anchor_connections,
            "export_for_editor": self.export_for_editor,
            "star_color": self.star_color,
            "strategy_weights": dict(self.strategy_weights),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConstellationConfig":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items()
                    if k in cls.__dataclass_fields__}
        return cls(**filtered)
