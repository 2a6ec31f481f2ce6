"""
Candidate Generators

Four independent strategies that turn an intent into selector
candidates by probing the page:

1. Semantic     - ARIA roles, labels and semantic attributes
2. Form input   - input characteristics confirmed by attribute keywords
3. Positional   - where the element sits on screen
4. Heuristic    - weighted substring patterns in attributes or text

Each generator returns a StrategyResult and never raises for a
selector-level problem: a query that throws is recorded in failure
memory and the generator moves on.
"""

import logging
from typing import Any, List, Optional, Tuple, Union

from ..knowledge.failure_memory import FailureMemory
from ..knowledge.intents import TEXT_TARGET, HeuristicPattern, Intent, get_profile
from ..models import SelectorCandidate, SelectorFailure, Strategy, StrategyResult
from .dom import ATTRIBUTES_SCRIPT, DomCapability
from .scorer import ConfidenceScorer

logger = logging.getLogger(__name__)


class CandidateGenerator:
    """Base class for discovery strategies"""

    strategy: Strategy

    def __init__(self, remember_empty_selectors: bool = False):
        self.remember_empty_selectors = remember_empty_selectors

    async def generate(
        self,
        intent: Union[Intent, str],
        dom: DomCapability,
        failures: FailureMemory
    ) -> StrategyResult:
        raise NotImplementedError

    async def _probe(
        self,
        selector: str,
        dom: DomCapability,
        failures: FailureMemory,
        result: StrategyResult
    ) -> Optional[List[Any]]:
        """
        Query a selector unless it is already known to fail.

        Returns the matched elements, or None when the selector was
        skipped or threw.
        """
        if failures.should_skip(selector):
            return None

        try:
            elements = await dom.query_all(selector)
        except Exception as e:
            reason = f"query failed: {e}"
            failures.record(selector, reason)
            result.failures.append(SelectorFailure(selector, reason))
            logger.debug(f"[{self.strategy.value}] {selector} -> {reason}")
            return None

        elements = list(elements or [])
        if not elements and self.remember_empty_selectors:
            failures.record(selector, "no match")
            result.failures.append(SelectorFailure(selector, "no match"))
        return elements


class SemanticGenerator(CandidateGenerator):
    """Role, ARIA and attribute templates scored by the confidence scorer"""

    strategy = Strategy.SEMANTIC

    def __init__(self, scorer: Optional[ConfidenceScorer] = None, remember_empty_selectors: bool = False):
        super().__init__(remember_empty_selectors)
        self.scorer = scorer or ConfidenceScorer()

    async def generate(self, intent, dom, failures) -> StrategyResult:
        intent = Intent.parse(intent)
        result = StrategyResult(self.strategy)

        for selector in get_profile(intent).semantic_selectors:
            elements = await self._probe(selector, dom, failures, result)
            if not elements:
                continue

            result.candidates.append(SelectorCandidate(
                selector=selector,
                confidence=self.scorer.score(intent, selector, len(elements)),
                strategy=self.strategy,
                element_count=len(elements),
            ))

        return result


class FormInputGenerator(CandidateGenerator):
    """
    Input/textarea selectors confirmed by keywords in the element's attributes.

    A selector like `input[maxlength="6"]` matches plenty of unrelated
    fields, so only matches whose attribute values mention one of the
    intent's keywords count.
    """

    strategy = Strategy.FORM_INPUT
    CONFIDENCE = 0.7

    def __init__(self, match_limit: int = 5, remember_empty_selectors: bool = False):
        super().__init__(remember_empty_selectors)
        self.match_limit = match_limit

    async def generate(self, intent, dom, failures) -> StrategyResult:
        intent = Intent.parse(intent)
        profile = get_profile(intent)
        result = StrategyResult(self.strategy)

        for form_field in profile.form_fields:
            elements = await self._probe(form_field.selector, dom, failures, result)
            if not elements:
                continue

            relevant = 0
            for element in elements[:self.match_limit]:
                if await self._is_relevant(element, profile.relevance_keywords, dom):
                    relevant += 1

            if relevant:
                result.candidates.append(SelectorCandidate(
                    selector=form_field.selector,
                    confidence=self.CONFIDENCE,
                    strategy=self.strategy,
                    element_count=relevant,
                ))

        return result

    @staticmethod
    async def _is_relevant(element: Any, keywords: Tuple[str, ...], dom: DomCapability) -> bool:
        """Check whether any keyword appears in the element's attribute values"""
        if not keywords:
            return False
        try:
            attributes = await dom.evaluate(ATTRIBUTES_SCRIPT, element)
        except Exception as e:
            logger.debug(f"Attribute read failed: {e}")
            return False

        values = " ".join(str(value).lower() for value in (attributes or {}).values())
        return any(keyword in values for keyword in keywords)


class PositionalGenerator(CandidateGenerator):
    """Wide fields near the top of the viewport, i.e. a header search box"""

    strategy = Strategy.POSITIONAL
    CONFIDENCE = 0.6
    SCAN_SELECTOR = "input, textarea, button"

    def __init__(self, scan_limit: int = 20, remember_empty_selectors: bool = False):
        super().__init__(remember_empty_selectors)
        self.scan_limit = scan_limit

    async def generate(self, intent, dom, failures) -> StrategyResult:
        intent = Intent.parse(intent)
        rule = get_profile(intent).positional_rule
        result = StrategyResult(self.strategy)
        if rule is None:
            return result

        if self.SCAN_SELECTOR in failures:
            return result

        elements = await self._probe(self.SCAN_SELECTOR, dom, failures, result)
        if elements is None:
            result.error = "positional scan query failed"
            logger.warning(f"Positional scan failed for '{intent.value}'")
            return result
        if not elements:
            return result

        try:
            viewport = await dom.viewport_size()
        except Exception as e:
            result.error = f"viewport unavailable: {e}"
            logger.warning(f"Could not read viewport for '{intent.value}': {e}")
            return result

        if not viewport:
            return result

        header_limit = viewport["height"] * rule.max_top_fraction

        for index, element in enumerate(elements[:self.scan_limit]):
            try:
                box = await dom.bounding_box(element)
            except Exception:
                box = None
            if not box:
                continue

            if box["y"] < header_limit and box["width"] > rule.min_width:
                selector = f"{self.SCAN_SELECTOR} >> nth={index}"
                if failures.should_skip(selector):
                    continue
                result.candidates.append(SelectorCandidate(
                    selector=selector,
                    confidence=self.CONFIDENCE,
                    strategy=self.strategy,
                    element_count=1,
                ))

        return result


class HeuristicGenerator(CandidateGenerator):
    """Weighted substring patterns in attributes, or literal text"""

    strategy = Strategy.HEURISTIC

    async def generate(self, intent, dom, failures) -> StrategyResult:
        intent = Intent.parse(intent)
        result = StrategyResult(self.strategy)

        for pattern in get_profile(intent).heuristic_patterns:
            for target in pattern.targets:
                selector = self.build_selector(pattern, target)
                elements = await self._probe(selector, dom, failures, result)
                if not elements:
                    continue

                result.candidates.append(SelectorCandidate(
                    selector=selector,
                    confidence=ConfidenceScorer.density(pattern.weight, len(elements)),
                    strategy=self.strategy,
                    element_count=len(elements),
                ))

        return result

    @staticmethod
    def build_selector(pattern: HeuristicPattern, target: str) -> str:
        if target == TEXT_TARGET:
            return f':has-text("{pattern.pattern}")'
        return f'[{target}*="{pattern.pattern}" i]'


def default_generators(
    scorer: Optional[ConfidenceScorer] = None,
    form_match_limit: int = 5,
    positional_scan_limit: int = 20,
    remember_empty_selectors: bool = False
) -> List[CandidateGenerator]:
    """The four strategies in discovery order"""
    return [
        SemanticGenerator(scorer, remember_empty_selectors=remember_empty_selectors),
        FormInputGenerator(form_match_limit, remember_empty_selectors=remember_empty_selectors),
        PositionalGenerator(positional_scan_limit, remember_empty_selectors=remember_empty_selectors),
        HeuristicGenerator(remember_empty_selectors=remember_empty_selectors),
    ]
