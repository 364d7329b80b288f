"""Headless browser smoke check of a single page.

Run as ``python -m site_audit.smoke_check <url> <run_dir>``. Loads the page in
headless Chromium, saves a full-page screenshot to ``<run_dir>/homepage.png``
and lists console errors, HTTP error responses and uncaught page errors seen
during the load. Exits 1 when anything was found.
"""

import argparse
import asyncio
import sys
from collections.abc import AsyncGenerator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path

from playwright.async_api import (
    ConsoleMessage,
    Page,
    Response,
    async_playwright,
)
from playwright.async_api import Error as PlaywrightError

from site_audit.layout import RunLayout

NO_ISSUES_MESSAGE = "No console/page/HTTP>=400 issues detected on initial load."
ISSUES_HEADER = "Issues found:"


@dataclass(kw_only=True)
class IssueCollector:
    """Accumulates page events that indicate a broken load."""

    issues: list[str] = field(default_factory=list)

    def on_console(self, message: ConsoleMessage) -> None:
        if message.type == "error":
            self.issues.append(f"console.error: {message.text}")

    def on_response(self, response: Response) -> None:
        if response.status >= 400:
            self.issues.append(f"HTTP {response.status}: {response.url}")

    def on_page_error(self, error: PlaywrightError) -> None:
        self.issues.append(f"pageerror: {error.message}")

    def attach(self, page: Page) -> None:
        page.on("console", self.on_console)
        page.on("response", self.on_response)
        page.on("pageerror", self.on_page_error)


@asynccontextmanager
async def open_page(*, headless: bool = True) -> AsyncGenerator[Page, None]:
    """Launch Chromium and yield a fresh page, closing the browser on exit."""
    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(headless=headless)
        try:
            yield await browser.new_page()
        finally:
            await browser.close()


async def inspect_page(page: Page, url: str, screenshot: Path) -> Sequence[str]:
    """Load the URL, take a screenshot and return the collected issues."""
    collector = IssueCollector()
    collector.attach(page)

    try:
        await page.goto(url, wait_until="networkidle")
    except PlaywrightError as exc:
        collector.issues.append(f"navigation: {exc.message}")

    await page.screenshot(path=str(screenshot), full_page=True)
    return list(collector.issues)


def format_report(issues: Sequence[str]) -> tuple[Sequence[str], int]:
    """Render the issues as output lines and pick the exit code."""
    if not issues:
        return [NO_ISSUES_MESSAGE], 0
    return [ISSUES_HEADER, *(f"- {issue}" for issue in issues)], 1


async def run(url: str, run_dir: Path) -> int:
    """Run the smoke check and print its report."""
    layout = RunLayout(run_dir)
    async with open_page() as page:
        issues = await inspect_page(page, url, layout.screenshot)

    lines, exit_code = format_report(issues)
    for line in lines:
        print(line)
    return exit_code


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="site-audit-smoke",
        description="Load a page in headless Chromium and report errors",
    )
    parser.add_argument("url", help="Page to load")
    parser.add_argument("run_dir", type=Path, help="Directory for homepage.png")
    args = parser.parse_args(argv)

    sys.exit(asyncio.run(run(args.url, args.run_dir)))


if __name__ == "__main__":  # pragma: no cover
    main()
