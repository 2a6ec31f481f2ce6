"""
Confidence Scorer

Scores a selector by its shape and by how many elements it matched.
This is string pattern matching on the selector, nothing more: it
never looks at what the matched elements actually are.
"""

from typing import Union

from ..knowledge.intents import Intent
from ..models import clamp_confidence


class ConfidenceScorer:
    """Syntactic confidence for semantic candidates"""

    BASE_CONFIDENCE = 0.5

    DATA_ATTRIBUTE_BONUS = 0.2
    ROLE_BONUS = 0.15
    ARIA_LABEL_BONUS = 0.1
    GENERIC_TAG_PENALTY = 0.3
    UNIQUE_SEARCH_BONUS = 0.1

    # Bare tags that match far too much to be trusted
    GENERIC_TAGS = frozenset({"input", "button"})

    def score(self, intent: Union[Intent, str], selector: str, element_count: int) -> float:
        """
        Score a selector for an intent.

        Adjustments stack independently on top of the base:
        - data-* / data-testid attributes: +0.2
        - ARIA role: +0.15
        - aria-label: +0.1
        - a bare generic tag: -0.3
        - exactly one match for a search box: +0.1
        """
        intent = Intent.parse(intent)
        confidence = self.BASE_CONFIDENCE

        if "data-testid" in selector or "data-" in selector:
            confidence += self.DATA_ATTRIBUTE_BONUS

        if "role=" in selector:
            confidence += self.ROLE_BONUS

        if "aria-label" in selector:
            confidence += self.ARIA_LABEL_BONUS

        if selector.strip() in self.GENERIC_TAGS:
            confidence -= self.GENERIC_TAG_PENALTY

        if element_count == 1 and intent is Intent.SEARCH:
            confidence += self.UNIQUE_SEARCH_BONUS

        return clamp_confidence(confidence)

    @staticmethod
    def density(weight: float, element_count: int, saturation: int = 5) -> float:
        """Weight scaled by how many elements matched, saturating at `saturation`"""
        return clamp_confidence(weight * min(element_count / saturation, 1.0))
