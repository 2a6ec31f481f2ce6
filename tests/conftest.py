"""
Pytest configuration and shared fixtures for selector engine tests.
"""

import pytest
import sys
from pathlib import Path
from unittest.mock import AsyncMock
from typing import Any, Dict, List, Optional

# Make the package importable without installing it
sys.path.insert(0, str(Path(__file__).parent.parent))

from selector_engine import ResilientSelectorEngine, EngineConfig


# ==================== Fake DOM Capability ====================

class FakeElement:
    """Stand-in for an element handle"""

    def __init__(self, box: Optional[Dict[str, float]] = None, fail_evaluate: bool = False, **attrs):
        self.attrs = {name.replace("_", "-"): value for name, value in attrs.items()}
        self.box = box
        self.fail_evaluate = fail_evaluate

    def __repr__(self):
        return f"FakeElement({self.attrs})"


class FakeDom:
    """
    In-memory DOM capability.

    Selectors map to fixed element lists. Every query is logged so tests
    can assert which selectors were (or were not) tried.
    """

    def __init__(self, viewport: Optional[Dict[str, int]] = None, match_everything: int = 0):
        self.viewport = viewport if viewport is not None else {"width": 1280, "height": 800}
        self.match_everything = match_everything
        self.matches: Dict[str, List[FakeElement]] = {}
        self.uses: Dict[str, int] = {}
        self.broken: Dict[str, int] = {}
        self.queries: List[str] = []
        self.evaluations = 0
        self.page_context: Dict[str, Any] = {
            "title": "Fake Store",
            "url": "https://shop.example.com/",
            "structure": "header-bar, product-grid",
            "inputs": [{"type": "search", "placeholder": "Search", "location": "header"}],
            "buttons": ["Login", "Cart"],
        }

    def add(self, selector: str, *elements: FakeElement, uses: Optional[int] = None) -> List[FakeElement]:
        """Register matches for a selector; `uses` limits how many queries see them"""
        self.matches[selector] = list(elements)
        if uses is not None:
            self.uses[selector] = uses
        return self.matches[selector]

    def break_selector(self, selector: str, after: int = 0):
        """Make a selector throw once it has been queried `after` times"""
        self.broken[selector] = after

    def query_count(self, selector: str) -> int:
        return self.queries.count(selector)

    async def query_all(self, selector: str) -> List[FakeElement]:
        previous = self.query_count(selector)
        self.queries.append(selector)

        if selector in self.broken and previous >= self.broken[selector]:
            raise ValueError(f"Unexpected token in selector: {selector}")

        if selector in self.uses and previous >= self.uses[selector]:
            return []

        if selector in self.matches:
            return list(self.matches[selector])

        if self.match_everything:
            return [
                FakeElement(
                    box={"x": 0, "y": 10, "width": 400, "height": 40},
                    name="search otp code phone login qty",
                )
                for _ in range(self.match_everything)
            ]
        return []

    async def evaluate(self, script: str, target: Any = None) -> Any:
        self.evaluations += 1
        if target is None:
            return self.page_context
        if target.fail_evaluate:
            raise RuntimeError("Element is detached from document")
        return {name: str(value).lower() for name, value in target.attrs.items()}

    async def bounding_box(self, element: FakeElement) -> Optional[Dict[str, float]]:
        return element.box

    async def viewport_size(self) -> Optional[Dict[str, int]]:
        return self.viewport


@pytest.fixture
def fake_dom():
    """Empty fake DOM with a 1280x800 viewport."""
    return FakeDom()


@pytest.fixture
def make_element():
    """Factory for fake elements."""
    return FakeElement


@pytest.fixture
def make_dom():
    """Factory for fake DOMs with custom settings."""
    return FakeDom


@pytest.fixture
def engine(fake_dom):
    """Engine bound to the fake DOM."""
    return ResilientSelectorEngine(dom=fake_dom, config=EngineConfig())


# ==================== Mock Page Fixture ====================

@pytest.fixture
def mock_page():
    """Create a mock Playwright page object."""
    page = AsyncMock()

    page.url = "https://example.com/test"
    page.viewport_size = {"width": 1280, "height": 800}

    page.goto = AsyncMock(return_value=None)
    page.title = AsyncMock(return_value="Test Page")

    # Evaluation
    page.evaluate = AsyncMock(return_value={})

    # Element handles
    mock_handle = AsyncMock()
    mock_handle.evaluate = AsyncMock(return_value={"placeholder": "search"})
    mock_handle.bounding_box = AsyncMock(return_value={"x": 0, "y": 20, "width": 320, "height": 40})

    page.query_selector_all = AsyncMock(return_value=[mock_handle])
    page.mock_handle = mock_handle

    return page
