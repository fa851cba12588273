"""Canned response texts for reply handlers."""

from intentbus.responses.keys import REPLY_INTENTS, candidates_for
from intentbus.responses.store import ResponseStore

__all__ = ["REPLY_INTENTS", "ResponseStore", "candidates_for"]
