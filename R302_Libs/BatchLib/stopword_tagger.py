"""
Heuristic keyword tagger.

A small stand-in for a real part-of-speech tagger: every word that is not a
stopword counts as a noun unless its suffix marks it as an adjective. Good
enough to pick a long, meaningful word out of a one-line quote.
"""

import re
from typing import FrozenSet, List

_WORD_PATTERN = re.compile(r"[A-Za-z][A-Za-z'-]*")

STOPWORDS: FrozenSet[str] = frozenset("""
    a about above after again against all am an and any are as at be because
    been before being below between both but by can could did do does doing
    down during each every few for from further had has have having he her
    here hers him his how i if in into is it its itself just let me more most
    my no nor not now of off on once only or other our ours out over own same
    she should so some such than that the their them then there these they
    this those through to too under until up very was we were what when where
    which while who whom why will with would you your yours
""".split())

ADJECTIVE_SUFFIXES = (
    "able", "ible", "al", "ful", "ic", "ive", "less", "ous", "ish", "est", "y",
)


def _words(text: str) -> List[str]:
    return [match.group(0).strip("'-") for match in _WORD_PATTERN.finditer(text)]


def _is_adjective(word: str) -> bool:
    return word.lower().endswith(ADJECTIVE_SUFFIXES)


class StopwordTagger:
    """
    KeywordTagger built from a stopword list and adjective suffixes.

    Words keep their original casing and text order.
    """

    def __init__(self, stopwords: FrozenSet[str] = STOPWORDS) -> None:
        self.stopwords = stopwords

    def _content_words(self, text: str) -> List[str]:
        return [word for word in _words(text) if word and word.lower() not in self.stopwords]

    def nouns(self, text: str) -> List[str]:
        return [word for word in self._content_words(text) if not _is_adjective(word)]

    def adjectives(self, text: str) -> List[str]:
        return [word for word in self._content_words(text) if _is_adjective(word)]
