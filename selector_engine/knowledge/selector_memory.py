"""
Selector Memory - Current Best Selector per Intent

Holds at most one winning candidate per intent. Any verified fallback
hit, manual validation or explicit learning call overwrites the entry
(last write wins). Manual and learned writes carry fixed, higher
confidences than heuristic ones.
"""

import logging
from typing import Dict, Optional, Union

from ..models import SelectorCandidate, Strategy
from .intents import Intent

logger = logging.getLogger(__name__)


MANUAL_CONFIDENCE = 0.9
LEARNED_CONFIDENCE = 0.95


class SelectorMemory:
    """In-memory Intent -> SelectorCandidate cache"""

    def __init__(self):
        self._cache: Dict[Intent, SelectorCandidate] = {}
        self.stats = {
            "lookups": 0,
            "hits": 0,
            "writes": 0,
        }

    def get(self, intent: Union[Intent, str]) -> Optional[SelectorCandidate]:
        """Look up the cached selector for an intent"""
        self.stats["lookups"] += 1
        candidate = self._cache.get(Intent.parse(intent))
        if candidate is not None:
            self.stats["hits"] += 1
        return candidate

    def remember(self, intent: Union[Intent, str], candidate: SelectorCandidate) -> SelectorCandidate:
        """Store a candidate for an intent, replacing any previous entry"""
        intent = Intent.parse(intent)
        previous = self._cache.get(intent)
        self._cache[intent] = candidate
        self.stats["writes"] += 1

        if previous is not None and previous.selector != candidate.selector:
            logger.debug(
                f"Selector for '{intent.value}' replaced: {previous.selector} "
                f"({previous.strategy.value}) -> {candidate.selector} ({candidate.strategy.value})"
            )
        return candidate

    def remember_manual(self, intent: Union[Intent, str], selector: str, element_count: int) -> SelectorCandidate:
        """Store a caller-validated selector"""
        return self.remember(intent, SelectorCandidate(
            selector=selector,
            confidence=MANUAL_CONFIDENCE,
            strategy=Strategy.MANUAL,
            element_count=element_count,
        ))

    def remember_learned(self, intent: Union[Intent, str], selector: str) -> SelectorCandidate:
        """Pin a selector the caller confirmed worked in practice"""
        return self.remember(intent, SelectorCandidate(
            selector=selector,
            confidence=LEARNED_CONFIDENCE,
            strategy=Strategy.LEARNED,
            element_count=1,
        ))

    def snapshot(self) -> Dict[str, Dict]:
        """Serializable view of every cached selector"""
        return {intent.value: candidate.to_dict() for intent, candidate in self._cache.items()}

    def get_stats(self) -> Dict[str, int]:
        return {**self.stats, "size": len(self._cache)}

    def __contains__(self, intent) -> bool:
        return Intent.parse(intent) in self._cache

    def __len__(self) -> int:
        return len(self._cache)
