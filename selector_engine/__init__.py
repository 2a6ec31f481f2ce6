"""
Resilient Selector Engine

Locates the DOM element behind a caller intent on third-party pages
whose markup changes without notice:
- Discovers candidates with four independent strategies
- Scores each candidate with a deterministic, syntactic confidence
- Verifies the best candidates against the live page, best first
- Remembers what worked and blocklists what failed
"""

from .config import EngineConfig
from .exceptions import SelectorEngineError, EngineNotBoundError, UnknownIntentError
from .models import (
    Strategy,
    SelectorCandidate,
    SelectorFailure,
    StrategyResult,
    FoundElement,
    PageContext,
    InputDescriptor
)
from .knowledge import Intent, FailureMemory, SelectorMemory
from .core import DomCapability, PlaywrightDomCapability, ConfidenceScorer, ResilientSelectorEngine

__all__ = [
    # Engine
    "ResilientSelectorEngine",
    "EngineConfig",
    "ConfidenceScorer",
    # DOM
    "DomCapability",
    "PlaywrightDomCapability",
    # Models
    "Intent",
    "Strategy",
    "SelectorCandidate",
    "SelectorFailure",
    "StrategyResult",
    "FoundElement",
    "PageContext",
    "InputDescriptor",
    # Memory
    "FailureMemory",
    "SelectorMemory",
    # Errors
    "SelectorEngineError",
    "EngineNotBoundError",
    "UnknownIntentError"
]

__version__ = "1.0.0"
