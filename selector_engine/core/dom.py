"""
DOM Capability

The only way the engine observes the page. Anything that can run a
selector query, evaluate a read-only script, and report geometry can
back the engine; PlaywrightDomCapability wraps a Playwright page.
"""

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from playwright.async_api import ElementHandle, Page


# Reads every attribute of an element, lower-casing the values
ATTRIBUTES_SCRIPT = """(el) => {
    const attrs = {};
    for (const attr of el.attributes) {
        attrs[attr.name] = (attr.value || '').toLowerCase();
    }
    return attrs;
}"""

# Snapshot of the page for diagnostics
PAGE_CONTEXT_SCRIPT = """() => {
    const inputs = Array.from(document.querySelectorAll('input, textarea')).map(el => ({
        type: el.type || 'text',
        placeholder: el.getAttribute('placeholder') || '',
        location: el.closest('header') ? 'header' :
            el.closest('main') ? 'main' :
            el.closest('nav') ? 'nav' : 'other',
    }));

    const buttons = Array.from(document.querySelectorAll('button'))
        .map(b => (b.textContent || '').trim())
        .filter(Boolean);

    const structure = Array.from(new Set(
        Array.from(document.querySelectorAll('[class]')).map(el => {
            const name = typeof el.className === 'string' ? el.className : '';
            return name.split(' ').filter(c => c.length > 3).slice(0, 3).join(' ');
        }).filter(Boolean)
    )).slice(0, 30).join(', ');

    return {
        title: document.title,
        url: window.location.href,
        structure,
        inputs,
        buttons: buttons.slice(0, 20),
    };
}"""


@runtime_checkable
class DomCapability(Protocol):
    """Read-only access to a live page"""

    async def query_all(self, selector: str) -> List[Any]:
        """Return every element matching the selector. May raise on bad syntax."""
        ...

    async def evaluate(self, script: str, target: Any = None) -> Any:
        """Run a read-only script against an element, or the document when target is None"""
        ...

    async def bounding_box(self, element: Any) -> Optional[Dict[str, float]]:
        ...

    async def viewport_size(self) -> Optional[Dict[str, int]]:
        ...


class PlaywrightDomCapability:
    """DomCapability backed by a Playwright async page"""

    def __init__(self, page: Page):
        self.page = page

    async def query_all(self, selector: str) -> List[ElementHandle]:
        return await self.page.query_selector_all(selector)

    async def evaluate(self, script: str, target: Optional[ElementHandle] = None) -> Any:
        if target is None:
            return await self.page.evaluate(script)
        return await target.evaluate(script)

    async def bounding_box(self, element: ElementHandle) -> Optional[Dict[str, float]]:
        return await element.bounding_box()

    async def viewport_size(self) -> Optional[Dict[str, int]]:
        return self.page.viewport_size
