"""Tokenizer used for both intent examples and user input."""

from __future__ import annotations

import re

from intentbus.nl.stopwords import STOP_WORDS_EN

# Below this many raw tokens the input is too short to lose any of them.
STOP_WORD_FLOOR = 3

_PUNCT_MAP = str.maketrans({
    "‘": "'", "’": "'", "‚": "'", "‛": "'", "′": "'",
    "“": '"', "”": '"', "„": '"', "″": '"',
    "–": " ", "—": " ", "…": " ",
})

# Letters, digits, and the symbols that carry meaning in commands: # + @ '
_SPLIT_RE = re.compile(r"[^\w#+@']+|_+")


class Tokenizer:
    def __init__(self, stop_words: frozenset[str] = STOP_WORDS_EN) -> None:
        self._stop_words = stop_words

    @staticmethod
    def normalize(text: str) -> str:
        return text.translate(_PUNCT_MAP).lower()

    def tokenize(self, text: str | None, filter_stop_words: bool = False) -> list[str]:
        """Split *text* into lowercase tokens, in input order.

        With *filter_stop_words*, stop words are removed from inputs longer
        than :data:`STOP_WORD_FLOOR` tokens. If that would leave nothing, the
        unfiltered tokens are returned instead.
        """
        if not text or text.isspace():
            return []

        tokens = []
        for raw in _SPLIT_RE.split(self.normalize(text)):
            token = raw.strip("'")
            if token:
                tokens.append(token)

        if not filter_stop_words or len(tokens) <= STOP_WORD_FLOOR:
            return tokens
        filtered = [t for t in tokens if t not in self._stop_words]
        return filtered or tokens


_default = Tokenizer()


def tokenize(text: str | None, filter_stop_words: bool = False) -> list[str]:
    """Module-level shortcut using the default English stop words."""
    return _default.tokenize(text, filter_stop_words)
