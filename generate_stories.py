"""
Room 302 story generator.

Renders every quote from the corpus files onto every SVG template, overlays a
constellation, glitches the raster and writes PNGs to the output directory.

Usage:
    python generate_stories.py --quotes quotes.yaml --templates social-01.svg
    python generate_stories.py --quotes a.yaml --quotes b.yaml \\
        --templates social-01.svg --templates social-05.svg --no-glitch
"""

import argparse
import logging
import sys
from typing import List, Optional

from R302_Libs.constants import DEFAULT_OUTPUT_DIR, MOSH_VARIANT_NAIVE, MOSH_VARIANT_QUALITY
from R302_Libs.BatchLib.batch_runner import BatchConfig, StoryBatchRunner
from R302_Libs.GlitchLib.pixel_glitch import GlitchConfig

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate glitched constellation story cards from quotes and SVG templates."
    )
    parser.add_argument(
        "--quotes",
        action="append",
        required=True,
        help="YAML quote corpus. Repeat to load several files.",
    )
    parser.add_argument(
        "--templates",
        action="append",
        required=True,
        help="SVG template. Repeat to render onto several templates.",
    )
    parser.add_argument(
        "--output-dir",
        default=DEFAULT_OUTPUT_DIR,
        help="Directory where PNG files are written.",
    )
    parser.add_argument(
        "--no-constellations",
        action="store_true",
        help="Skip the constellation overlay.",
    )
    parser.add_argument(
        "--no-glitch",
        action="store_true",
        help="Skip pixel glitch post-processing.",
    )
    parser.add_argument(
        "--mosh-variant",
        choices=[MOSH_VARIANT_QUALITY, MOSH_VARIANT_NAIVE],
        default=MOSH_VARIANT_QUALITY,
        help="Data mosh implementation used when the mosh filter is selected.",
    )
    parser.add_argument(
        "--seed-with-template",
        action="store_true",
        help="Give every template its own constellation and glitch pattern.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> BatchConfig:
    return BatchConfig(
        quote_paths=args.quotes,
        template_paths=args.templates,
        output_dir=args.output_dir,
        enable_constellations=not args.no_constellations,
        enable_glitch=not args.no_glitch,
        seed_with_template=args.seed_with_template,
        glitch=GlitchConfig(mosh_variant=args.mosh_variant),
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    summary = StoryBatchRunner(build_config(args)).run()
    logger.info(f"Done: {summary.generated} generated, {summary.failed} failed")
    return 1 if summary.failed and not summary.generated else 0


if __name__ == "__main__":
    sys.exit(main())
