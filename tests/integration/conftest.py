"""Fixtures for integration tests."""

from collections.abc import AsyncGenerator

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

CLEAN_PAGE = (
    "<html><head><link rel='icon' href='data:,'></head>"
    "<body><h1>Hello</h1></body></html>"
)
BROKEN_PAGE = (
    "<html><head><link rel='icon' href='data:,'></head>"
    "<body><h1>Broken</h1>"
    "<script>undefinedFunction();</script>"
    "</body></html>"
)


@pytest.fixture
async def chromium() -> None:
    """Skip when Playwright's Chromium cannot be launched."""
    async with async_playwright() as playwright:
        try:
            browser = await playwright.chromium.launch(headless=True)
        except PlaywrightError as exc:
            pytest.skip(f"Chromium not available: {exc.message}")
        await browser.close()


@pytest.fixture
async def site() -> AsyncGenerator[TestServer, None]:
    """Serve a clean page at / and a page with a script error at /broken."""

    async def clean(request: web.Request) -> web.Response:
        return web.Response(text=CLEAN_PAGE, content_type="text/html")

    async def broken(request: web.Request) -> web.Response:
        return web.Response(text=BROKEN_PAGE, content_type="text/html")

    app = web.Application()
    app.router.add_get("/", clean)
    app.router.add_get("/broken", broken)

    async with TestServer(app, host="127.0.0.1") as server:
        yield server
