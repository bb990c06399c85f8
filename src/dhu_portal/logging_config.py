import logging
import os
from pathlib import Path
from typing import Optional


def configure_logging(level: str = "INFO", file_path: Optional[str] = None) -> None:
    """
    Route `dhu_portal.*` records to stderr, and to `file_path` as well when one is configured.

    Login runs are easiest to diagnose after the fact from the log file, so its directory is created here.
    Credentials never reach the log; only `Credentials.masked_identity()` is logged.
    """
    numeric_level = getattr(logging, (level or "INFO").upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if file_path:
        path = Path(file_path).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        handlers=handlers,
        # `dhu` configures stderr first, then reconfigures once config.yaml names a level/file.
        force=True,
    )

    # At DEBUG the driver dumps every page/frame event of a login run; keep those out unless asked for.
    for noisy in ("playwright", "asyncio"):
        logging.getLogger(noisy).setLevel(os.getenv("DHU_DRIVER_LOG_LEVEL", "WARNING"))
