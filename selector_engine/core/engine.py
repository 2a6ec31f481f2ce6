"""
Resilient Selector Engine

Finds the element behind an intent ("the search box", "a product
card") on pages whose markup changes without notice.

Pipeline:
1. Generate   - run every strategy independently and merge the results
2. Score      - each candidate carries a confidence in [0, 1]
3. Rank       - drop weak candidates, stable-sort by confidence
4. Verify     - re-query the top candidates against the live page
5. Remember   - the first one that works is cached for the intent

Selector-level problems never escape: a selector that throws is
recorded in failure memory and the engine moves on. The only error a
caller sees is calling the engine before a page is bound.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from ..config import EngineConfig
from ..exceptions import EngineNotBoundError
from ..knowledge.failure_memory import FailureMemory
from ..knowledge.intents import Intent
from ..knowledge.selector_memory import SelectorMemory
from ..models import FoundElement, PageContext, SelectorCandidate, Strategy, StrategyResult
from .dom import PAGE_CONTEXT_SCRIPT, DomCapability, PlaywrightDomCapability
from .generators import CandidateGenerator, default_generators
from .scorer import ConfidenceScorer

logger = logging.getLogger(__name__)

IntentLike = Union[Intent, str]


class ResilientSelectorEngine:
    """
    Multi-strategy selector discovery with self-healing fallback.

    The engine is bound to one page at a time and keeps two in-memory
    stores for its whole lifetime:
    - selector_memory: the current best selector per intent
    - failure_memory: selectors known to throw, never retried

    Callers must not run two operations concurrently against the same
    engine; nothing here is locked.
    """

    def __init__(
        self,
        dom: Optional[DomCapability] = None,
        config: Optional[EngineConfig] = None,
        generators: Optional[List[CandidateGenerator]] = None
    ):
        """
        Initialize the engine.

        Args:
            dom: DOM capability to bind now (can be bound later)
            config: EngineConfig, defaults if omitted
            generators: Override the discovery strategies (order matters for ties)
        """
        self.config = config or EngineConfig()
        self.scorer = ConfidenceScorer()
        self.generators = generators if generators is not None else default_generators(
            scorer=self.scorer,
            form_match_limit=self.config.form_match_limit,
            positional_scan_limit=self.config.positional_scan_limit,
            remember_empty_selectors=self.config.remember_empty_selectors,
        )

        self.selector_memory = SelectorMemory()
        self.failure_memory = FailureMemory()

        self._dom: Optional[DomCapability] = dom

        if self.config.verbose_logging:
            logging.getLogger("selector_engine").setLevel(logging.DEBUG)

        self.stats = {
            "discoveries": 0,
            "candidates_by_strategy": {strategy.value: 0 for strategy in Strategy},
            "fallback_hits": 0,
            "fallback_misses": 0,
            "validations": 0,
            "learned": 0,
        }

    # ==================== Binding ====================

    def bind(self, dom: DomCapability):
        """Bind the DOM capability the engine queries"""
        self._dom = dom

    def set_page(self, page):
        """Bind a Playwright page"""
        self._dom = PlaywrightDomCapability(page)

    @property
    def dom(self) -> Optional[DomCapability]:
        return self._dom

    @property
    def is_bound(self) -> bool:
        return self._dom is not None

    def _require_dom(self, operation: str) -> DomCapability:
        if self._dom is None:
            raise EngineNotBoundError(operation)
        return self._dom

    # ==================== Discovery ====================

    async def run_strategies(self, intent: IntentLike) -> List[StrategyResult]:
        """Run every generator for an intent and return their raw results"""
        dom = self._require_dom("run_strategies")
        intent = Intent.parse(intent)

        results = []
        for generator in self.generators:
            result = await generator.generate(intent, dom, self.failure_memory)
            if not result.ok:
                logger.warning(f"[{result.strategy.value}] generator error for '{intent.value}': {result.error}")
            results.append(result)
        return results

    async def discover(self, intent: IntentLike) -> List[SelectorCandidate]:
        """
        Full ranked candidate list for an intent.

        Candidates from all strategies are merged (a selector produced by
        more than one strategy keeps its best score), filtered to those
        scoring above min_confidence, and sorted best first. Ties keep
        discovery order.
        """
        self._require_dom("discover")
        intent = Intent.parse(intent)
        self.stats["discoveries"] += 1

        results = await self.run_strategies(intent)

        merged: Dict[str, SelectorCandidate] = {}
        for result in results:
            for candidate in result.candidates:
                self.stats["candidates_by_strategy"][candidate.strategy.value] += 1
                existing = merged.get(candidate.selector)
                if existing is None or candidate.confidence > existing.confidence:
                    merged[candidate.selector] = candidate

        ranked = sorted(
            (c for c in merged.values() if c.confidence > self.config.min_confidence),
            key=lambda c: c.confidence,
            reverse=True,
        )

        logger.debug(
            f"Discovered {len(ranked)} candidates for '{intent.value}' "
            f"({len(merged)} before filtering)"
        )
        return ranked

    # ==================== Fallback Execution ====================

    async def find_element_with_fallback(
        self,
        intent: IntentLike,
        max_attempts: Optional[int] = None
    ) -> Optional[FoundElement]:
        """
        Self-healing lookup: try the best candidates until one matches.

        Only the top `max_attempts` ranked candidates are tried. The first
        that matches at least one element is cached for the intent and
        returned with its first element. Returns None when nothing works.
        """
        dom = self._require_dom("find_element_with_fallback")
        intent = Intent.parse(intent)
        if max_attempts is None:
            max_attempts = self.config.max_attempts

        candidates = await self.discover(intent)

        for candidate in candidates[:max_attempts]:
            elements = await self._query_live(dom, candidate.selector)
            if elements:
                self.selector_memory.remember(intent, candidate)
                self.stats["fallback_hits"] += 1
                logger.info(
                    f"Found '{intent.value}' via {candidate.strategy.value}: "
                    f"{candidate.selector} (confidence {candidate.confidence:.2f})"
                )
                return FoundElement(element=elements[0], selector=candidate.selector, candidate=candidate)

        self.stats["fallback_misses"] += 1
        logger.info(f"No working selector for '{intent.value}' after {min(len(candidates), max_attempts)} attempts")
        return None

    async def _query_live(self, dom: DomCapability, selector: str) -> List[Any]:
        """Re-query a selector against the live page, recording failures"""
        if self.failure_memory.should_skip(selector):
            return []

        try:
            elements = list(await dom.query_all(selector) or [])
        except Exception as e:
            self.failure_memory.record(selector, f"query failed: {e}")
            logger.debug(f"Live query failed for {selector}: {e}")
            return []

        if not elements and self.config.remember_empty_selectors:
            self.failure_memory.record(selector, "no match")
        return elements

    async def resolve(self, intent: IntentLike, max_attempts: Optional[int] = None) -> Optional[FoundElement]:
        """
        Cached selector first, discovery second.

        Tier 1 re-checks whatever selector memory holds for the intent;
        if it no longer matches, fall through to find_element_with_fallback.
        """
        dom = self._require_dom("resolve")
        intent = Intent.parse(intent)

        cached = self.selector_memory.get(intent)
        if cached is not None:
            elements = await self._query_live(dom, cached.selector)
            if elements:
                logger.debug(f"Resolved '{intent.value}' from memory: {cached.selector}")
                return FoundElement(element=elements[0], selector=cached.selector, candidate=cached)
            logger.info(f"Cached selector for '{intent.value}' stopped matching: {cached.selector}")

        return await self.find_element_with_fallback(intent, max_attempts)

    async def discover_critical_selectors(
        self,
        intents: Optional[Iterable[IntentLike]] = None
    ) -> Dict[str, Optional[str]]:
        """
        Prime selector memory for the elements a page flow depends on.

        Returns intent -> selector (None when not found).
        """
        self._require_dom("discover_critical_selectors")
        intents = [Intent.parse(i) for i in (intents or self.config.critical_intents)]

        found: Dict[str, Optional[str]] = {}
        for intent in intents:
            result = await self.find_element_with_fallback(intent)
            if result:
                logger.info(f"Auto-discovered {intent.value}: {result.selector}")
                found[intent.value] = result.selector
            else:
                logger.info(f"Could not auto-discover {intent.value} selector")
                found[intent.value] = None
        return found

    # ==================== Manual Override & Learning ====================

    async def validate_selector(self, intent: IntentLike, selector: str) -> bool:
        """
        Check a caller-supplied selector and cache it if it matches.

        Bypasses discovery. A selector that matches nothing or throws is
        recorded as failing.
        """
        dom = self._require_dom("validate_selector")
        intent = Intent.parse(intent)
        self.stats["validations"] += 1

        try:
            elements = list(await dom.query_all(selector) or [])
        except Exception as e:
            self.failure_memory.record(selector, f"query failed: {e}")
            logger.debug(f"Validation of {selector} for '{intent.value}' failed: {e}")
            return False

        if not elements:
            self.failure_memory.record(selector, "no match")
            return False

        self.selector_memory.remember_manual(intent, selector, len(elements))
        logger.info(f"Validated selector for '{intent.value}': {selector} ({len(elements)} matches)")
        return True

    def learn_selector(self, intent: IntentLike, selector: str):
        """Pin a selector the caller has seen work, without checking the page"""
        self._require_dom("learn_selector")
        intent = Intent.parse(intent)
        self.selector_memory.remember_learned(intent, selector)
        self.stats["learned"] += 1
        logger.info(f"Learned selector for '{intent.value}': {selector}")

    def get_cached_selector(self, intent: IntentLike) -> Optional[SelectorCandidate]:
        """Current best selector for an intent, if any"""
        self._require_dom("get_cached_selector")
        return self.selector_memory.get(intent)

    # ==================== Diagnostics ====================

    async def get_page_context(self) -> PageContext:
        """Read-only snapshot of the page (title, url, classes, inputs, buttons)"""
        dom = self._require_dom("get_page_context")
        raw = await dom.evaluate(PAGE_CONTEXT_SCRIPT)
        return PageContext.model_validate(raw or {})

    def get_stats(self) -> Dict[str, Any]:
        """Get engine statistics"""
        attempts = self.stats["fallback_hits"] + self.stats["fallback_misses"]
        hit_rate = self.stats["fallback_hits"] / attempts * 100 if attempts else 0

        return {
            **self.stats,
            "candidates_by_strategy": dict(self.stats["candidates_by_strategy"]),
            "fallback_hit_rate": f"{hit_rate:.1f}%",
            "selector_memory": self.selector_memory.get_stats(),
            "failure_memory": self.failure_memory.get_stats(),
        }
