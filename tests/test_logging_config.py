from __future__ import annotations

import logging
from pathlib import Path

import pytest

from dhu_portal.logging_config import configure_logging


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    saved = (root.level, list(root.handlers))
    yield
    for h in root.handlers:
        if h not in saved[1]:
            h.close()
    root.handlers[:] = saved[1]
    root.setLevel(saved[0])


def test_log_file_directory_is_created_and_written(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "dhu.log"
    configure_logging(level="debug", file_path=str(log_file))

    logging.getLogger("dhu_portal.portal.login").info("Logged in (url=%s)", "https://portal.example/top")
    for h in logging.getLogger().handlers:
        h.flush()

    assert logging.getLogger().level == logging.DEBUG
    assert "INFO dhu_portal.portal.login - Logged in (url=https://portal.example/top)" in log_file.read_text(
        encoding="utf-8"
    )


def test_driver_loggers_are_quieted(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DHU_DRIVER_LOG_LEVEL", raising=False)
    configure_logging(level="DEBUG")
    assert logging.getLogger("playwright").level == logging.WARNING
    assert logging.getLogger("asyncio").level == logging.WARNING

    monkeypatch.setenv("DHU_DRIVER_LOG_LEVEL", "ERROR")
    configure_logging(level="DEBUG")
    assert logging.getLogger("playwright").level == logging.ERROR


def test_unknown_level_falls_back_to_info() -> None:
    configure_logging(level="chatty")
    assert logging.getLogger().level == logging.INFO
