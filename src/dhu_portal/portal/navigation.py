from __future__ import annotations

import logging
from typing import Any, Literal, Optional


logger = logging.getLogger(__name__)

LoadState = Literal["domcontentloaded", "load", "networkidle"]


class Navigator:
    """
    The two ways a page transition happens during login: going to a URL, or clicking something
    that submits/links to another page. Both return only after the new page has loaded.
    """

    def __init__(self, page: Any, *, wait_until: LoadState = "load", timeout_ms: Optional[float] = None) -> None:
        self.page = page
        self.wait_until = wait_until
        self.timeout_ms = timeout_ms

    def _timeout(self) -> dict[str, Any]:
        return {"timeout": self.timeout_ms} if self.timeout_ms is not None else {}

    async def by_goto(self, url: str) -> None:
        logger.debug("goto %s", url)
        await self.page.goto(url, wait_until=self.wait_until, **self._timeout())

    async def by_click(self, selector: str) -> None:
        logger.debug("click+navigate %s", selector)
        # click() already waits for a navigation it starts to commit; then wait for the new document.
        await self.page.click(selector, **self._timeout())
        await self.page.wait_for_load_state(self.wait_until, **self._timeout())


def navigate(page: Any, *, wait_until: LoadState = "load", timeout_ms: Optional[float] = None) -> Navigator:
    return Navigator(page, wait_until=wait_until, timeout_ms=timeout_ms)
