from __future__ import annotations

import logging
import re
import time
from pathlib import Path
from typing import Any


logger = logging.getLogger(__name__)


def safe_name(name: str) -> str:
    return re.sub(r"[^a-zA-Z0-9_-]+", "_", name).strip("_")[:60] or "page"


async def save_page_artifacts(page: Any, *, debug_dir: str, name_prefix: str) -> list[Path]:
    """
    Save a full-page screenshot and the rendered HTML of `page` under `debug_dir`.

    Best-effort: a page that is already broken must not turn into a second error. Returns the files written.
    """
    written: list[Path] = []
    out_dir = Path(debug_dir)
    prefix = f"{safe_name(name_prefix)}_{time.strftime('%Y%m%d_%H%M%S')}"
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
    except Exception:
        logger.debug("Failed to create debug dir %s", out_dir, exc_info=True)
        return written

    png = out_dir / f"{prefix}.png"
    try:
        await page.screenshot(path=str(png), full_page=True)
        written.append(png)
    except Exception:
        logger.debug("Failed to save debug screenshot.", exc_info=True)

    html = out_dir / f"{prefix}.html"
    try:
        html.write_text(await page.content(), encoding="utf-8")
        written.append(html)
    except Exception:
        logger.debug("Failed to save debug HTML.", exc_info=True)

    if written:
        logger.info("Saved debug artifacts: %s", ", ".join(p.name for p in written))
    return written
