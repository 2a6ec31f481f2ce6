"""
Core Engine Module

Candidate generation, confidence scoring and the self-healing fallback
executor, all working through an injected DOM capability.
"""

from .dom import DomCapability, PlaywrightDomCapability
from .scorer import ConfidenceScorer
from .generators import (
    CandidateGenerator,
    SemanticGenerator,
    FormInputGenerator,
    PositionalGenerator,
    HeuristicGenerator,
    default_generators
)
from .engine import ResilientSelectorEngine

__all__ = [
    "DomCapability",
    "PlaywrightDomCapability",
    "ConfidenceScorer",
    "CandidateGenerator",
    "SemanticGenerator",
    "FormInputGenerator",
    "PositionalGenerator",
    "HeuristicGenerator",
    "default_generators",
    "ResilientSelectorEngine"
]
