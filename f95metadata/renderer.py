import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol
from urllib.parse import urlparse

from playwright.async_api import async_playwright

from f95metadata.cancellation import run_cancellable
from f95metadata.config import BYPASS_HEADLESS, COOKIE_LIFETIME_SECONDS, RENDER_TIMEOUT, USER_AGENT
from f95metadata.logging_config import logger


@dataclass
class RendererSettings:
    user_agent: str = USER_AGENT
    javascript_enabled: bool = True
    window_width: int = 900
    window_height: int = 700
    headless: bool = BYPASS_HEADLESS
    timeout: float = RENDER_TIMEOUT


class Renderer(Protocol):
    """Browser surface used to get past the bot check. All calls are awaitable."""

    async def open(self, settings: RendererSettings) -> None: ...

    async def set_cookies(self, url: str, domain: str, name: str, value: str, path: str, expiry: datetime) -> None: ...

    async def navigate_and_wait(self, url: str) -> None: ...

    async def get_page_source(self) -> str: ...

    async def close(self) -> None: ...

    async def dispose(self) -> None: ...


class PlaywrightRenderer:
    """Renderer backed by a Playwright Chromium instance."""

    def __init__(self):
        self._playwright = None
        self._browser = None
        self._context = None
        self._page = None
        self._timeout_ms = RENDER_TIMEOUT * 1000

    async def open(self, settings):
        self._timeout_ms = settings.timeout * 1000
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=settings.headless)
        self._context = await self._browser.new_context(
            user_agent=settings.user_agent,
            java_script_enabled=settings.javascript_enabled,
            viewport={"width": settings.window_width, "height": settings.window_height},
        )
        self._page = await self._context.new_page()

    async def set_cookies(self, url, domain, name, value, path, expiry):
        await self._context.add_cookies([{
            "name": name,
            "value": value,
            "domain": domain,
            "path": path,
            "expires": expiry.timestamp(),
        }])

    async def navigate_and_wait(self, url):
        await self._page.goto(url, wait_until="load", timeout=self._timeout_ms)

    async def get_page_source(self):
        return await self._page.content()

    async def close(self):
        if self._context is not None:
            await self._context.close()
            self._context = None
            self._page = None
        if self._browser is not None:
            await self._browser.close()
            self._browser = None

    async def dispose(self):
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None


# --- Cookie Replication ---

def _domain_matches(host, cookie_domain):
    cookie_domain = cookie_domain.lstrip('.').lower()
    host = host.lower()
    return host == cookie_domain or host.endswith('.' + cookie_domain)


def cookies_for_url(cookies, url):
    """Cookies from the jar that the browser would send to `url`."""
    host = urlparse(url).hostname or ""
    return [cookie for cookie in cookies if not cookie.domain or _domain_matches(host, cookie.domain)]


def cookie_expiry(cookie, now=None):
    """Expiry as an aware datetime; session (missing) or epoch expiries are pushed 7 days ahead."""
    if not cookie.expires:
        now = now if now is not None else time.time()
        return datetime.fromtimestamp(now, tz=timezone.utc) + timedelta(seconds=COOKIE_LIFETIME_SECONDS)
    return datetime.fromtimestamp(cookie.expires, tz=timezone.utc)


# --- Scoped Acquisition ---

async def render_page(renderer_factory, settings, url, cookies=None, cancel_event=None):
    """
    Opens a renderer, copies the cookies for `url`, loads the page and returns its HTML.
    The renderer is closed and disposed before returning, on every exit path.
    """
    renderer: Optional[Renderer] = None
    try:
        renderer = renderer_factory()
        await run_cancellable(renderer.open(settings), cancel_event)

        host = urlparse(url).hostname or ""
        for cookie in cookies_for_url(cookies or [], url):
            await renderer.set_cookies(
                url,
                cookie.domain or host,
                cookie.name,
                cookie.value,
                cookie.path or "/",
                cookie_expiry(cookie),
            )

        logger.info(f"RENDER: Navigating to {url}")
        await run_cancellable(renderer.navigate_and_wait(url), cancel_event)
        page_source = await run_cancellable(renderer.get_page_source(), cancel_event)
        return page_source or ""
    finally:
        if renderer is not None:
            try:
                await renderer.close()
            finally:
                await renderer.dispose()
            logger.debug("RENDER: Renderer closed and disposed.")
