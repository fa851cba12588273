"""Exception types raised at the ingress and registration seams."""


class IntentBusError(Exception):
    """Base class for intentbus errors."""


class BadRequestError(IntentBusError, ValueError):
    """Request is missing a required field or has the wrong shape."""


class UnknownIntentError(IntentBusError, LookupError):
    """No handler is registered for the requested intent."""

    def __init__(self, intent: str) -> None:
        super().__init__(f"unknown intent '{intent}'")
        self.intent = intent


class DuplicateHandlerError(IntentBusError):
    """A second handler was registered for an intent name already taken."""

    def __init__(self, intent: str) -> None:
        super().__init__(f"handler already registered for intent '{intent}'")
        self.intent = intent
