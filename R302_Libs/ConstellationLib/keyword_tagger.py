"""
Part-of-speech source used to find the key word of a text.

The constellation generator holds no linguistic logic of its own; callers
inject any object with nouns() and adjectives() methods.
"""

from typing import Protocol, Sequence


class KeywordTagger(Protocol):
    def nouns(self, text: str) -> Sequence[str]:
        """Nouns of text, in text order."""
        ...

    def adjectives(self, text: str) -> Sequence[str]:
        """Adjectives of text, in text order."""
        ...
