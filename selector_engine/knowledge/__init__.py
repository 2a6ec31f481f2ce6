"""
Knowledge Base System

Pre-seeded per-intent discovery knowledge plus the engine's two
in-memory stores: the best selector per intent and the blocklist of
selectors that are known not to work.
"""

from .intents import (
    Intent,
    IntentProfile,
    FormField,
    HeuristicPattern,
    PositionalRule,
    INTENT_PROFILES,
    get_profile,
)
from .failure_memory import FailureMemory
from .selector_memory import SelectorMemory, MANUAL_CONFIDENCE, LEARNED_CONFIDENCE

__all__ = [
    "Intent",
    "IntentProfile",
    "FormField",
    "HeuristicPattern",
    "PositionalRule",
    "INTENT_PROFILES",
    "get_profile",
    "FailureMemory",
    "SelectorMemory",
    "MANUAL_CONFIDENCE",
    "LEARNED_CONFIDENCE",
]
