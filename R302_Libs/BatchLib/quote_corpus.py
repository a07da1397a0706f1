"""
Quote corpus loading.

Corpus files are YAML documents shaped like::

    quotes:
      - category: craft
        items:
          - title: Momentum
            text: Ship it messy, patch it live, glow up forever.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

import yaml

from R302_Libs.constants import SLUG_MAX_LENGTH

logger = logging.getLogger(__name__)

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


def slugify(text: str, max_length: int = SLUG_MAX_LENGTH) -> str:
    """Lowercase, collapse every non-alphanumeric run to '-', then truncate."""
    return _SLUG_PATTERN.sub("-", text.lower())[:max_length]


@dataclass(frozen=True)
class Quote:
    title: str
    text: str
    category: str = ""
    source: str = ""

    @property
    def slug(self) -> str:
        return slugify(self.text)


def parse_quotes(data: Dict[str, Any], source: str = "") -> List[Quote]:
    """
    Turn a parsed corpus document into Quote objects.

    Raises:
        ValueError: If the document does not have the expected shape
    """
    if not isinstance(data, dict) or not isinstance(data.get("quotes"), list):
        raise ValueError(f"Corpus {source or '<memory>'} needs a top-level 'quotes' list")

    quotes = []
    for position, section in enumerate(data["quotes"]):
        if not isinstance(section, dict):
            raise ValueError(f"quotes[{position}] must be a mapping, got {type(section).__name__}")
        category = str(section.get("category", ""))
        items = section.get("items") or []
        if not isinstance(items, list):
            raise ValueError(f"quotes[{position}].items must be a list, got {type(items).__name__}")
        for index, item in enumerate(items):
            if not isinstance(item, dict):
                raise ValueError(
                    f"quotes[{position}].items[{index}] must be a mapping, got {type(item).__name__}"
                )
            if "text" not in item:
                raise ValueError(f"Quote in category '{category}' has no text")
            quotes.append(Quote(
                title=str(item.get("title", "")),
                text=str(item["text"]),
                category=category,
                source=source,
            ))
    return quotes


def load_quotes(paths: Iterable[Union[str, Path]]) -> List[Quote]:
    """
    Load and concatenate every corpus file in paths.

    Missing files are skipped with a warning.

    Raises:
        ValueError: If an existing file is not a valid corpus
    """
    quotes: List[Quote] = []
    for path in paths:
        path = Path(path)
        if not path.exists():
            logger.warning(f"Quote file not found, skipping: {path}")
            continue
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        loaded = parse_quotes(data, source=str(path))
        logger.info(f"Loaded {len(loaded)} quotes from {path}")
        quotes.extend(loaded)
    return quotes
