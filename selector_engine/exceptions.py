"""
Selector Engine Errors

Only precondition failures reach callers. Selector-level failures are
recovered inside the engine and recorded in failure memory.
"""


class SelectorEngineError(Exception):
    """Base class for errors raised by the selector engine"""


class EngineNotBoundError(SelectorEngineError):
    """Raised when an operation runs before a DOM capability is bound"""

    def __init__(self, operation: str = ""):
        message = "No DOM capability bound to the selector engine"
        if operation:
            message = f"{message} (called {operation})"
        super().__init__(message)
        self.operation = operation


class UnknownIntentError(SelectorEngineError, ValueError):
    """Raised when a caller passes an intent outside the known vocabulary"""

    def __init__(self, value):
        super().__init__(f"Unknown intent: {value!r}")
        self.value = value
