"""Intent handlers and the registry that resolves them."""

from intentbus.handlers.base import IntentHandler
from intentbus.handlers.registry import HandlerRegistry

__all__ = ["HandlerRegistry", "IntentHandler"]
