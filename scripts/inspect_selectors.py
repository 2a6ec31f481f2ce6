#!/usr/bin/env python3
"""
Selector Inspection Script

Opens a page in Chromium and prints what the selector engine discovers
for each intent, plus the page context snapshot. Useful when a site
redesign breaks a flow and you want to see what the engine now sees.

Usage:
    python inspect_selectors.py URL [--intents search,cart] [--headed]

Examples:
    python inspect_selectors.py https://www.example.com
    python inspect_selectors.py https://www.example.com --intents search,login --width 390 --height 844
"""

import sys
import asyncio
import argparse
import logging
from pathlib import Path

from playwright.async_api import async_playwright

sys.path.insert(0, str(Path(__file__).parent.parent))

from selector_engine import EngineConfig, Intent, ResilientSelectorEngine


async def inspect(url: str, intents, headless: bool, width: int, height: int, wait_ms: int):
    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=headless)
        context = await browser.new_context(viewport={"width": width, "height": height})
        page = await context.new_page()

        try:
            await page.goto(url, wait_until="domcontentloaded")
            await page.wait_for_timeout(wait_ms)

            engine = ResilientSelectorEngine(config=EngineConfig.from_env())
            engine.set_page(page)

            page_context = await engine.get_page_context()
            print(f"\nTitle: {page_context.title}")
            print(f"URL:   {page_context.url}")
            print(f"Inputs: {len(page_context.inputs)}  Buttons: {', '.join(page_context.buttons[:10])}")

            for intent in intents:
                candidates = await engine.discover(intent)
                print(f"\n[{intent.value}] {len(candidates)} candidates")
                for candidate in candidates[:10]:
                    print(
                        f"  {candidate.confidence:.2f}  {candidate.strategy.value:<11} "
                        f"x{candidate.element_count:<3} {candidate.selector}"
                    )

                found = await engine.find_element_with_fallback(intent)
                print(f"  -> {found.selector if found else 'not found'}")

            failing = engine.failure_memory.failures()
            if failing:
                print(f"\nFailing selectors ({len(failing)}):")
                for failure in failing:
                    print(f"  {failure.selector}: {failure.reason}")
        finally:
            await browser.close()


def main():
    parser = argparse.ArgumentParser(description="Inspect selector discovery on a live page")
    parser.add_argument("url", help="Page to open")
    parser.add_argument(
        "--intents",
        default=",".join(intent.value for intent in Intent),
        help="Comma-separated intents to discover"
    )
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    parser.add_argument("--width", type=int, default=1280)
    parser.add_argument("--height", type=int, default=800)
    parser.add_argument("--wait", type=int, default=3000, help="Milliseconds to wait after load")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    intents = [Intent.parse(name) for name in args.intents.split(",") if name.strip()]
    asyncio.run(inspect(args.url, intents, not args.headed, args.width, args.height, args.wait))


if __name__ == "__main__":
    main()
