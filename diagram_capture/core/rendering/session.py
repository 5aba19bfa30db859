"""
Rendering Session
=================

One Playwright browser and one page, reused for every diagram in a batch.
The session is an async context manager so the browser is released on
every exit path, including errors that abort a batch early.
"""

from typing import Any, Optional

from playwright.async_api import (
    async_playwright,
    Browser,
    Page,
    Playwright,
    TimeoutError as PlaywrightTimeoutError,
)

from diagram_capture.config.logging import get_logger
from diagram_capture.config.settings import CaptureSettings, get_settings

logger = get_logger(__name__)


class RenderingError(Exception):
    """Base exception for rendering session failures."""

    pass


class BrowserLaunchError(RenderingError):
    """Raised when the browser engine cannot be started."""

    pass


class NavigationError(RenderingError):
    """Raised when a page cannot be loaded."""

    pass


class RenderTimeoutError(RenderingError):
    """Raised when the rendered diagram does not appear in time."""

    pass


class RenderingSession:
    """Shared browser and page used to load and screenshot each source file."""

    def __init__(self, settings: Optional[CaptureSettings] = None):
        self.settings = settings or get_settings()
        self.logger: Any = logger.bind(component="rendering_session")
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._page: Optional[Page] = None

    @property
    def is_open(self) -> bool:
        return self._page is not None

    async def start(self) -> None:
        """Launch the browser and open the shared page."""
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.settings.playwright_headless,
                args=list(self.settings.browser_args),
            )
            self._page = await self._browser.new_page(
                device_scale_factor=self.settings.device_scale_factor,
            )
            self._page.set_default_timeout(self.settings.navigation_timeout_ms)
            self.logger.info("Rendering session started", headless=self.settings.playwright_headless)
        except Exception as e:
            self.logger.error("Failed to start rendering session", error=str(e))
            await self.close()
            raise BrowserLaunchError(f"Browser launch failed: {e}") from e

    async def close(self) -> None:
        """Close the page, the browser and Playwright. Safe to call twice."""
        page, browser, playwright = self._page, self._browser, self._playwright
        self._page = self._browser = self._playwright = None

        try:
            if page is not None:
                await page.close()
        except Exception as e:
            self.logger.warning("Failed to close page", error=str(e))

        try:
            if browser is not None:
                await browser.close()
        except Exception as e:
            self.logger.warning("Failed to close browser", error=str(e))
        finally:
            try:
                if playwright is not None:
                    await playwright.stop()
            except Exception as e:
                self.logger.warning("Failed to stop Playwright", error=str(e))

        if browser is not None:
            self.logger.info("Rendering session closed")

    async def __aenter__(self) -> "RenderingSession":
        await self.start()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def capture(self, url: str, width: int, height: int) -> bytes:
        """
        Load a page and screenshot its top-left ``width x height`` rectangle.

        Args:
            url: Page URL, normally a ``file://`` URL
            width: Viewport and clip width in CSS pixels
            height: Viewport and clip height in CSS pixels

        Returns:
            PNG bytes

        Raises:
            NavigationError: If the page cannot be loaded
            RenderTimeoutError: If the ready selector does not appear in time
        """
        if self._page is None:
            raise RenderingError("Rendering session not started")

        page = self._page
        await page.set_viewport_size({"width": width, "height": height})

        try:
            await page.goto(url, timeout=self.settings.navigation_timeout_ms)
            await page.wait_for_load_state(
                "networkidle", timeout=self.settings.navigation_timeout_ms
            )
        except Exception as e:
            raise NavigationError(f"Failed to load {url}: {e}") from e

        selector = self.settings.ready_selector
        try:
            await page.wait_for_selector(selector, timeout=self.settings.render_timeout_ms)
        except PlaywrightTimeoutError as e:
            raise RenderTimeoutError(
                f"'{selector}' did not appear within {self.settings.render_timeout_ms}ms"
            ) from e

        if self.settings.settle_delay_ms:
            await page.wait_for_timeout(self.settings.settle_delay_ms)

        screenshot = await page.screenshot(
            type="png",
            full_page=False,
            clip={"x": 0, "y": 0, "width": width, "height": height},
        )
        self.logger.debug("Captured page", url=url, width=width, height=height, size=len(screenshot))
        return screenshot
