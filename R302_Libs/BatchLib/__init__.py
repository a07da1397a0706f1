"""
BatchLib - Batch story generation for Room 302.

Modules:
    quote_corpus: YAML quote corpora and slugs
    template_populator: SVG placeholder replacement and overlay insertion
    rasterizer: SVG to PNG via cairosvg
    stopword_tagger: Heuristic keyword tagger
    batch_runner: BatchConfig, StoryBatchRunner and BatchSummary
"""

from R302_Libs.BatchLib.quote_corpus import Quote, load_quotes, parse_quotes, slugify
from R302_Libs.BatchLib.template_populator import (
    detect_bounds,
    insert_overlay,
    populate_template,
    raster_size,
)
from R302_Libs.BatchLib.rasterizer import rasterize_svg
from R302_Libs.BatchLib.stopword_tagger import StopwordTagger
from R302_Libs.BatchLib.batch_runner import (
    BatchConfig,
    BatchSummary,
    StoryBatchRunner,
    Template,
    load_templates,
)

__all__ = [
    "Quote",
    "load_quotes",
    "parse_quotes",
    "slugify",
    "detect_bounds",
    "insert_overlay",
    "populate_template",
    "raster_size",
    "rasterize_svg",
    "StopwordTagger",
    "BatchConfig",
    "BatchSummary",
    "StoryBatchRunner",
    "Template",
    "load_templates",
]
