"""
Failure Memory - Blocklist of Dead Selectors

Remembers every selector that threw or matched nothing so that no
strategy wastes a DOM round-trip on it again. Entries are never removed
for the lifetime of the engine that owns the memory.
"""

import logging
from collections import OrderedDict
from typing import Dict, Iterator, List

from ..models import SelectorFailure

logger = logging.getLogger(__name__)


class FailureMemory:
    """Grow-only set of failing selectors, with the first recorded reason"""

    def __init__(self):
        self._entries: "OrderedDict[str, str]" = OrderedDict()
        self.stats = {
            "recorded": 0,
            "skips": 0,
        }

    def record(self, selector: str, reason: str = "unknown") -> bool:
        """
        Record a failing selector.

        Returns True if the selector was new to the memory.
        """
        if selector in self._entries:
            return False
        self._entries[selector] = reason
        self.stats["recorded"] += 1
        logger.debug(f"Selector marked as failing: {selector} ({reason})")
        return True

    def should_skip(self, selector: str) -> bool:
        """Check a selector before querying it, counting the saved round-trip"""
        if selector in self._entries:
            self.stats["skips"] += 1
            return True
        return False

    def reason(self, selector: str) -> str:
        return self._entries.get(selector, "")

    def failures(self) -> List[SelectorFailure]:
        """All recorded failures in the order they were seen"""
        return [SelectorFailure(selector, reason) for selector, reason in self._entries.items()]

    def get_stats(self) -> Dict[str, int]:
        return {**self.stats, "size": len(self._entries)}

    def __contains__(self, selector: str) -> bool:
        return selector in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
