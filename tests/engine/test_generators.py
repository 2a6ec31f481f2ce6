"""
Unit tests for the four candidate generators.
"""

import pytest

from selector_engine.core.generators import (
    FormInputGenerator,
    HeuristicGenerator,
    PositionalGenerator,
    SemanticGenerator,
    default_generators,
)
from selector_engine.knowledge.failure_memory import FailureMemory
from selector_engine.knowledge.intents import HeuristicPattern, Intent
from selector_engine.models import Strategy

SCAN = PositionalGenerator.SCAN_SELECTOR


def header_box(y=20, width=400):
    return {"x": 0, "y": y, "width": width, "height": 40}


class TestSemanticGenerator:
    """Test role/ARIA template discovery."""

    @pytest.mark.asyncio
    async def test_emits_scored_candidate(self, fake_dom, make_element):
        """Test a matching template becomes a scored candidate."""
        fake_dom.add('[role="searchbox"]', make_element(), make_element())

        result = await SemanticGenerator().generate(Intent.SEARCH, fake_dom, FailureMemory())

        assert result.ok
        assert len(result.candidates) == 1
        candidate = result.candidates[0]
        assert candidate.selector == '[role="searchbox"]'
        assert candidate.strategy == Strategy.SEMANTIC
        assert candidate.confidence == pytest.approx(0.65)
        assert candidate.element_count == 2

    @pytest.mark.asyncio
    async def test_queries_templates_in_order(self, fake_dom):
        """Test every template is probed in profile order."""
        await SemanticGenerator().generate(Intent.SEARCH, fake_dom, FailureMemory())

        assert fake_dom.queries == [
            '[role="search"] input',
            '[role="searchbox"]',
            'input[type="search"]',
            '[aria-label*="search" i]',
            'form[role="search"] input',
        ]

    @pytest.mark.asyncio
    async def test_throwing_template_recorded(self, fake_dom):
        """Test a template that throws goes into failure memory."""
        fake_dom.break_selector('[aria-label*="search" i]')
        failures = FailureMemory()

        result = await SemanticGenerator().generate(Intent.SEARCH, fake_dom, failures)

        assert '[aria-label*="search" i]' in failures
        assert [f.selector for f in result.failures] == ['[aria-label*="search" i]']
        assert result.ok

    @pytest.mark.asyncio
    async def test_skips_known_failures(self, fake_dom, make_element):
        """Test templates in failure memory are never queried."""
        fake_dom.add('[role="searchbox"]', make_element())
        failures = FailureMemory()
        failures.record('[role="searchbox"]', "query failed")

        result = await SemanticGenerator().generate(Intent.SEARCH, fake_dom, failures)

        assert '[role="searchbox"]' not in fake_dom.queries
        assert result.candidates == []

    @pytest.mark.asyncio
    async def test_empty_matches_not_recorded_by_default(self, fake_dom):
        """Test zero-match templates stay untried-but-not-failing."""
        failures = FailureMemory()

        await SemanticGenerator().generate(Intent.CART, fake_dom, failures)

        assert len(failures) == 0

    @pytest.mark.asyncio
    async def test_empty_matches_recorded_when_configured(self, fake_dom):
        """Test zero-match templates are blocklisted when enabled."""
        failures = FailureMemory()

        await SemanticGenerator(remember_empty_selectors=True).generate(Intent.CART, fake_dom, failures)

        assert '[aria-label*="cart" i]' in failures
        assert failures.reason('[aria-label*="cart" i]') == "no match"


class TestFormInputGenerator:
    """Test input-characteristic discovery."""

    @pytest.mark.asyncio
    async def test_relevant_match_becomes_candidate(self, fake_dom, make_element):
        """Test an OTP field confirmed by its attributes."""
        fake_dom.add(
            'input[maxlength="6"]',
            make_element(name="otp-code", maxlength="6"),
            make_element(name="zip", maxlength="6"),
        )

        result = await FormInputGenerator().generate(Intent.OTP, fake_dom, FailureMemory())

        assert len(result.candidates) == 1
        candidate = result.candidates[0]
        assert candidate.selector == 'input[maxlength="6"]'
        assert candidate.confidence == pytest.approx(0.7)
        assert candidate.strategy == Strategy.FORM_INPUT
        assert candidate.element_count == 1

    @pytest.mark.asyncio
    async def test_irrelevant_matches_ignored(self, fake_dom, make_element):
        """Test matches without any keyword are dropped."""
        fake_dom.add('input[maxlength="6"]', make_element(name="zip", maxlength="6"))

        result = await FormInputGenerator().generate(Intent.OTP, fake_dom, FailureMemory())

        assert result.candidates == []

    @pytest.mark.asyncio
    async def test_relevance_is_case_insensitive(self, fake_dom, make_element):
        """Test attribute values are compared lower-cased."""
        fake_dom.add('input[type="text"]', make_element(placeholder="Search for Products"))

        result = await FormInputGenerator().generate(Intent.SEARCH, fake_dom, FailureMemory())

        assert [c.selector for c in result.candidates] == ['input[type="text"]']

    @pytest.mark.asyncio
    async def test_only_first_matches_checked(self, fake_dom, make_element):
        """Test that at most five matches are examined per selector."""
        fake_dom.add('input[type="tel"]', *[make_element(type="tel") for _ in range(8)])

        result = await FormInputGenerator().generate(Intent.PHONE, fake_dom, FailureMemory())

        assert result.candidates[0].element_count == 5
        assert fake_dom.evaluations == 5

    @pytest.mark.asyncio
    async def test_attribute_read_failure_is_irrelevant(self, fake_dom, make_element):
        """Test an element whose attributes cannot be read is skipped."""
        fake_dom.add('input[type="tel"]', make_element(fail_evaluate=True, type="tel"))

        result = await FormInputGenerator().generate(Intent.PHONE, fake_dom, FailureMemory())

        assert result.candidates == []
        assert result.ok

    @pytest.mark.asyncio
    async def test_throwing_selector_recorded(self, fake_dom):
        """Test a form selector that throws goes into failure memory."""
        fake_dom.break_selector('input[pattern*="[0-9]"]')
        failures = FailureMemory()

        await FormInputGenerator().generate(Intent.PHONE, fake_dom, failures)

        assert 'input[pattern*="[0-9]"]' in failures

    @pytest.mark.asyncio
    async def test_intent_without_form_fields(self, fake_dom):
        """Test intents with no form fields query nothing."""
        result = await FormInputGenerator().generate(Intent.PRODUCT, fake_dom, FailureMemory())

        assert result.candidates == []
        assert fake_dom.queries == []


class TestPositionalGenerator:
    """Test header search box detection."""

    @pytest.mark.asyncio
    async def test_wide_header_fields(self, fake_dom, make_element):
        """Test only wide elements in the top quarter qualify."""
        fake_dom.add(
            SCAN,
            make_element(box=header_box()),                   # 0: header, wide
            make_element(box=None),                           # 1: not rendered
            make_element(box=header_box(width=120)),          # 2: too narrow
            make_element(box=header_box(y=500)),              # 3: below header
            make_element(box=header_box(y=10, width=300)),    # 4: header, wide
        )

        result = await PositionalGenerator().generate(Intent.SEARCH, fake_dom, FailureMemory())

        assert [c.selector for c in result.candidates] == [f"{SCAN} >> nth=0", f"{SCAN} >> nth=4"]
        assert all(c.confidence == pytest.approx(0.6) for c in result.candidates)
        assert all(c.strategy == Strategy.POSITIONAL for c in result.candidates)
        assert all(c.element_count == 1 for c in result.candidates)

    @pytest.mark.asyncio
    async def test_header_boundary_uses_viewport(self, make_dom, make_element):
        """Test the header limit is a quarter of the viewport height."""
        dom = make_dom(viewport={"width": 390, "height": 844})
        dom.add(SCAN, make_element(box=header_box(y=210)), make_element(box=header_box(y=211.5)))

        result = await PositionalGenerator().generate(Intent.SEARCH, dom, FailureMemory())

        assert [c.selector for c in result.candidates] == [f"{SCAN} >> nth=0"]

    @pytest.mark.asyncio
    async def test_scan_limit(self, fake_dom, make_element):
        """Test that only the first twenty elements are examined."""
        fake_dom.add(SCAN, *[make_element(box=header_box()) for _ in range(25)])

        result = await PositionalGenerator().generate(Intent.SEARCH, fake_dom, FailureMemory())

        assert len(result.candidates) == 20

    @pytest.mark.asyncio
    async def test_non_search_intent_skipped(self, fake_dom, make_element):
        """Test intents without a positional rule never scan."""
        fake_dom.add(SCAN, make_element(box=header_box()))

        result = await PositionalGenerator().generate(Intent.CART, fake_dom, FailureMemory())

        assert result.candidates == []
        assert fake_dom.queries == []

    @pytest.mark.asyncio
    async def test_no_viewport(self, make_dom, make_element):
        """Test that an unknown viewport yields nothing."""
        dom = make_dom(viewport={})
        dom.add(SCAN, make_element(box=header_box()))

        result = await PositionalGenerator().generate(Intent.SEARCH, dom, FailureMemory())

        assert result.candidates == []

    @pytest.mark.asyncio
    async def test_scan_failure_is_result_error(self, fake_dom):
        """Test a failing enumeration is reported, not raised."""
        fake_dom.break_selector(SCAN)
        failures = FailureMemory()

        result = await PositionalGenerator().generate(Intent.SEARCH, fake_dom, failures)

        assert not result.ok
        assert result.error
        assert SCAN in failures

    @pytest.mark.asyncio
    async def test_failing_index_selector_skipped(self, fake_dom, make_element):
        """Test index selectors in failure memory are not emitted."""
        fake_dom.add(SCAN, make_element(box=header_box()), make_element(box=header_box()))
        failures = FailureMemory()
        failures.record(f"{SCAN} >> nth=0")

        result = await PositionalGenerator().generate(Intent.SEARCH, fake_dom, failures)

        assert [c.selector for c in result.candidates] == [f"{SCAN} >> nth=1"]


class TestHeuristicGenerator:
    """Test weighted pattern discovery."""

    @pytest.mark.asyncio
    async def test_confidence_scales_with_matches(self, fake_dom, make_element):
        """Test weight x min(count / 5, 1)."""
        fake_dom.add('[class*="price" i]', *[make_element() for _ in range(10)])
        fake_dom.add('[class*="cost" i]', make_element())
        fake_dom.add('[class*="amount" i]', make_element(), make_element())

        result = await HeuristicGenerator().generate(Intent.PRICE, fake_dom, FailureMemory())

        by_selector = {c.selector: c for c in result.candidates}
        assert by_selector['[class*="price" i]'].confidence == pytest.approx(1.0)
        assert by_selector['[class*="cost" i]'].confidence == pytest.approx(0.16)
        assert by_selector['[class*="amount" i]'].confidence == pytest.approx(0.28)
        assert by_selector['[class*="price" i]'].element_count == 10
        assert all(c.strategy == Strategy.HEURISTIC for c in result.candidates)

    @pytest.mark.asyncio
    async def test_text_target(self, fake_dom, make_element):
        """Test the currency glyph uses a text selector."""
        fake_dom.add(':has-text("₹")', *[make_element() for _ in range(5)])

        result = await HeuristicGenerator().generate(Intent.PRICE, fake_dom, FailureMemory())

        assert [c.selector for c in result.candidates] == [':has-text("₹")']
        assert result.candidates[0].confidence == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_builds_selector_per_target(self, fake_dom):
        """Test each attribute target is queried."""
        await HeuristicGenerator().generate(Intent.SEARCH, fake_dom, FailureMemory())

        assert fake_dom.queries[:4] == [
            '[placeholder*="search" i]',
            '[class*="search" i]',
            '[id*="search" i]',
            '[name*="search" i]',
        ]

    @pytest.mark.asyncio
    async def test_throwing_selector_recorded(self, fake_dom):
        """Test a heuristic selector that throws goes into failure memory."""
        fake_dom.break_selector('[id*="price" i]')
        failures = FailureMemory()

        result = await HeuristicGenerator().generate(Intent.PRICE, fake_dom, failures)

        assert '[id*="price" i]' in failures
        assert result.failures[0].selector == '[id*="price" i]'

    def test_build_selector(self):
        """Test selector construction."""
        pattern = HeuristicPattern("cart", ("class",), 1.0)
        assert HeuristicGenerator.build_selector(pattern, "class") == '[class*="cart" i]'
        assert HeuristicGenerator.build_selector(pattern, "text") == ':has-text("cart")'


class TestDefaultGenerators:
    """Test the default strategy set."""

    def test_discovery_order(self):
        """Test strategies run semantic, form, positional, heuristic."""
        strategies = [g.strategy for g in default_generators()]
        assert strategies == [
            Strategy.SEMANTIC,
            Strategy.FORM_INPUT,
            Strategy.POSITIONAL,
            Strategy.HEURISTIC,
        ]

    def test_limits_passed_through(self):
        """Test configured limits reach the generators."""
        generators = default_generators(form_match_limit=3, positional_scan_limit=7)
        assert generators[1].match_limit == 3
        assert generators[2].scan_limit == 7
