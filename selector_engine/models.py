"""
Data models shared by the selector engine.

Candidates and results are plain dataclasses: they are created per
discovery call and thrown away unless promoted into selector memory.
The page-context snapshot comes back from the browser as untyped JSON,
so it is validated with pydantic.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


MAX_BUTTON_LABELS = 20

class Strategy(str, Enum):
    """Which strategy produced a candidate"""
    SEMANTIC = "semantic"
    FORM_INPUT = "form-input"
    POSITIONAL = "positional"
    HEURISTIC = "heuristic"
    MANUAL = "manual"
    LEARNED = "learned"


def clamp_confidence(value: float) -> float:
    """Clamp a confidence score into [0, 1]"""
    return max(0.0, min(1.0, float(value)))


@dataclass
class SelectorCandidate:
    """A single selector guess"""
    selector: str
    confidence: float
    strategy: Strategy
    element_count: int = 0

    def __post_init__(self):
        self.confidence = clamp_confidence(self.confidence)
        self.element_count = max(0, int(self.element_count))
        self.strategy = Strategy(self.strategy)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "selector": self.selector,
            "confidence": self.confidence,
            "strategy": self.strategy.value,
            "elementCount": self.element_count,
        }


@dataclass
class SelectorFailure:
    """A selector that errored or matched nothing, and why"""
    selector: str
    reason: str


@dataclass
class StrategyResult:
    """
    Outcome of one generator run.

    `candidates` and `failures` are per-selector; `error` is set when the
    generator as a whole could not run (e.g. its enumeration query threw).
    """
    strategy: Strategy
    candidates: List[SelectorCandidate] = field(default_factory=list)
    failures: List[SelectorFailure] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class FoundElement:
    """A live element located by the fallback executor"""
    element: Any
    selector: str
    candidate: SelectorCandidate


class InputDescriptor(BaseModel):
    """Summary of one input/textarea on the page"""
    type: str = "text"
    placeholder: str = ""
    location: str = "other"  # header, main, nav, other


class PageContext(BaseModel):
    """Read-only snapshot of the page used for diagnostics"""
    title: str = ""
    url: str = ""
    structure: str = ""
    inputs: List[InputDescriptor] = Field(default_factory=list)
    buttons: List[str] = Field(default_factory=list)

    @field_validator("buttons")
    @classmethod
    def _cap_buttons(cls, value: List[str]) -> List[str]:
        return [label for label in value if label][:MAX_BUTTON_LABELS]
