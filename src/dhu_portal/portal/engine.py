from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from playwright.async_api import Browser, Playwright, async_playwright

from ..models import LaunchOptions


logger = logging.getLogger(__name__)

# Tried in order when Playwright's bundled Chromium hasn't been downloaded.
FALLBACK_CHANNELS: tuple[str, ...] = ("chrome", "msedge")


class BrowserEngine(Protocol):
    async def launch(self, options: LaunchOptions) -> Any: ...

    async def stop(self) -> None: ...


def _is_missing_executable(exc: BaseException) -> bool:
    return "Executable doesn't exist" in str(exc)


class PlaywrightEngine:
    """
    Launches Chromium through `playwright.async_api`.

    The Playwright driver is started lazily by `launch()` and torn down by `stop()`; one engine instance
    is meant to serve one `with_browser` call.
    """

    def __init__(self) -> None:
        self._playwright: Optional[Playwright] = None

    async def launch(self, options: LaunchOptions) -> Browser:
        if self._playwright is None:
            self._playwright = await async_playwright().start()
        chromium = self._playwright.chromium
        kwargs = options.to_playwright_kwargs()

        try:
            return await chromium.launch(**kwargs)
        except Exception as e:
            # An explicit executable/channel is the user's choice; don't second-guess it.
            if not _is_missing_executable(e) or options.executable_path or options.channel:
                raise
            logger.warning(
                "Playwright Chromium executable missing; falling back to system browser channel. (%s)",
                str(e).splitlines()[0] if str(e) else e,
            )

        for channel in FALLBACK_CHANNELS[:-1]:
            try:
                return await chromium.launch(**kwargs, channel=channel)
            except Exception:
                logger.debug("Failed to launch channel=%s", channel, exc_info=True)
        # The last channel's error is the one reported.
        return await chromium.launch(**kwargs, channel=FALLBACK_CHANNELS[-1])

    async def stop(self) -> None:
        if self._playwright is None:
            return
        try:
            await self._playwright.stop()
        finally:
            self._playwright = None
