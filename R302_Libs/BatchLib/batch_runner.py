"""
Batch story generation.

StoryBatchRunner renders every quote onto every template:

    populate template -> constellation overlay -> rasterize -> glitch -> write

Each quote x template pair is isolated: a failure is logged, counted in the
summary and the batch moves on.

Example:
    >>> config = BatchConfig(quote_paths=["quotes.yaml"],
    ...                      template_paths=["social-01.svg"])
    >>> summary = StoryBatchRunner(config).run()
    >>> summary.generated, summary.failed
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from R302_Libs.constants import DEFAULT_OUTPUT_DIR
from R302_Libs.BatchLib.quote_corpus import Quote, load_quotes
from R302_Libs.BatchLib.rasterizer import rasterize_svg
from R302_Libs.BatchLib.stopword_tagger import StopwordTagger
from R302_Libs.BatchLib.template_populator import (
    detect_bounds,
    insert_overlay,
    populate_template,
    raster_size,
)
from R302_Libs.ConstellationLib.constellation_generator import generate_constellation
from R302_Libs.ConstellationLib.constellation_models import ConstellationConfig
from R302_Libs.ConstellationLib.constellation_svg import render_constellation_svg
from R302_Libs.ConstellationLib.keyword_tagger import KeywordTagger
from R302_Libs.GlitchLib.pixel_glitch import GlitchConfig
from R302_Libs.GlitchLib.raster_codec import glitch_png

logger = logging.getLogger(__name__)

Rasterizer = Callable[[str, int, int], bytes]


@dataclass
class Template:
    name: str
    content: str


@dataclass
class BatchConfig:
    """
    Configuration for a batch run.

    Attributes:
        quote_paths: YAML corpus files
        template_paths: SVG template files
        output_dir: Directory for the PNG files (created if missing)
        enable_constellations: Overlay a constellation on every card
        enable_glitch: Post-process every PNG with the glitch engine
        seed_with_template: Append the template name to the seed text so each
            template gets its own constellation and glitch pattern
        constellation: Constellation generation/rendering options
        glitch: Glitch engine options
    """
    quote_paths: List[str] = field(default_factory=list)
    template_paths: List[str] = field(default_factory=list)
    output_dir: str = DEFAULT_OUTPUT_DIR
    enable_constellations: bool = True
    enable_glitch: bool = True
    seed_with_template: bool = False
    constellation: ConstellationConfig = field(default_factory=ConstellationConfig)
    glitch: GlitchConfig = field(default_factory=GlitchConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "quote_paths": list(self.quote_paths),
            "template_paths": list(self.template_paths),
            "output_dir": self.output_dir,
            "enable_constellations": self.enable_constellations,
            "enable_glitch": self.enable_glitch,
            "seed_with_template": self.seed_with_template,
            "constellation": self.constellation.to_dict(),
            "glitch": self.glitch.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BatchConfig":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items()
                    if k in cls.__dataclass_fields__}
        if isinstance(filtered.get("constellation"), dict):
            filtered["constellation"] = ConstellationConfig.from_dict(filtered["constellation"])
        if isinstance(filtered.get("glitch"), dict):
            filtered["glitch"] = GlitchConfig.from_dict(filtered["glitch"])
        return cls(**filtered)


@dataclass
class BatchSummary:
    generated: int = 0
    failed: int = 0
    outputs: List[Path] = field(default_factory=list)


def load_templates(paths: List[str]) -> List[Template]:
    """Read SVG templates; missing files are skipped with a warning."""
    templates = []
    for path in map(Path, paths):
        if not path.exists():
            logger.warning(f"Template not found, skipping: {path}")
            continue
        templates.append(Template(name=path.stem, content=path.read_text(encoding="utf-8")))
    return templates


class StoryBatchRunner:
    """
    Renders quote cards for every quote x template pair.

    Args:
        config: Batch configuration
        rasterizer: SVG -> PNG callable, defaults to the cairosvg renderer
        tagger: Keyword source for crypto/word stars, defaults to
            StopwordTagger
    """

    def __init__(
        self,
        config: BatchConfig,
        rasterizer: Optional[Rasterizer] = None,
        tagger: Optional[KeywordTagger] = None,
    ) -> None:
        self.config = config
        self.rasterizer = rasterizer or rasterize_svg
        self.tagger = tagger if tagger is not None else StopwordTagger()

    def seed_text(self, quote: Quote, template: Template) -> str:
        if self.config.seed_with_template:
            return f"{quote.text}{template.name}"
        return quote.text

    def output_path(self, quote: Quote, template: Template) -> Path:
        return Path(self.config.output_dir) / f"{template.name}_{quote.slug}.png"

    def render(self, quote: Quote, template: Template) -> Tuple[bytes, str]:
        """
        Render one card.

        Returns:
            (PNG bytes, final SVG markup)
        """
        seed_text = self.seed_text(quote, template)
        svg = populate_template(template.content, quote)
        bounds = detect_bounds(svg)

        if self.config.enable_constellations:
            constellation = generate_constellation(
                seed_text, bounds, config=self.config.constellation, tagger=self.tagger
            )
            svg = insert_overlay(svg, render_constellation_svg(constellation, self.config.constellation))

        width, height = raster_size(bounds)
        png = self.rasterizer(svg, width, height)

        if self.config.enable_glitch:
            png = glitch_png(png, seed_text, self.config.glitch)
        return png, svg

    def run(self) -> BatchSummary:
        """
        Generate every card and write it to the output directory.

        Returns:
            BatchSummary with generated and failed counts
        """
        summary = BatchSummary()
        quotes = load_quotes(self.config.quote_paths)
        templates = load_templates(self.config.template_paths)
        logger.info(f"{len(quotes)} quotes, {len(templates)} templates")

        output_dir = Path(self.config.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        for quote in quotes:
            for template in templates:
                target = self.output_path(quote, template)
                try:
                    png, _ = self.render(quote, template)
                    target.write_bytes(png)
                except Exception as exc:
                    logger.error(f"Failed to generate {target.name}: {exc}")
                    summary.failed += 1
                    continue
                summary.generated += 1
                summary.outputs.append(target)
                logger.debug(f"Wrote {target}")

        logger.info(f"Generated {summary.generated} stories, {summary.failed} failed")
        return summary
