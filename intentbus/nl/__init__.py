"""Deterministic text-to-intent matching."""

from intentbus.nl.aliases import AliasResolver
from intentbus.nl.engine import (
    PLAIN_PROFILE,
    STOPWORD_PROFILE,
    UNKNOWN_INTENT,
    MatchProfile,
    RecognizerEngine,
)
from intentbus.nl.recognizer import Recognition, TextRecognizer
from intentbus.nl.tokenizer import Tokenizer, tokenize

__all__ = [
    "AliasResolver",
    "MatchProfile",
    "PLAIN_PROFILE",
    "Recognition",
    "RecognizerEngine",
    "STOPWORD_PROFILE",
    "TextRecognizer",
    "Tokenizer",
    "UNKNOWN_INTENT",
    "tokenize",
]
