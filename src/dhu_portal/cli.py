from __future__ import annotations

import argparse
import asyncio
import getpass
import logging
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .config import AppConfig, load_config
from .credentials import CredentialStore, FileCredentialStore
from .logging_config import configure_logging
from .models import Credentials, LoginTarget, Result, Session
from .portal.login import with_session


logger = logging.getLogger("dhu_portal")


def _add_browser_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--headful", action="store_true", help="Run browser headful (debug)")
    p.add_argument("--mobile", action="store_true", help="Use the mobile login page instead of the desktop one")
    p.add_argument("--slowmo-ms", type=int, default=None, help="Playwright slow motion in milliseconds (debug).")
    p.add_argument(
        "--debug-dir",
        default="",
        help="Save a screenshot + HTML of the page here when login fails.",
    )


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="dhu")
    p.add_argument(
        "--env-file",
        default=".env",
        help="Path to a dotenv file (default: .env). If missing, env vars must already be set.",
    )
    p.add_argument("--config", default="config.yaml", help="Path to YAML config (default: config.yaml, optional)")

    sub = p.add_subparsers(dest="cmd", required=True)

    login = sub.add_parser("login", help="Save your portal ID/password for later runs")
    login.add_argument("--id", default="", help="Portal user ID (prompted if omitted)")
    login.add_argument(
        "--check",
        action="store_true",
        help="Log in once to verify the credentials; they are removed again if the portal rejects them.",
    )
    _add_browser_args(login)

    sub.add_parser("logout", help="Remove saved login info")

    check = sub.add_parser("check", help="Log in with the saved credentials and report where the portal lands")
    _add_browser_args(check)

    return p


def _apply_browser_args(cfg: AppConfig, args: argparse.Namespace) -> AppConfig:
    browser = cfg.browser
    login = cfg.login
    if args.headful:
        browser = browser.model_copy(update={"headless": False})
    if args.slowmo_ms is not None:
        browser = browser.model_copy(update={"slow_mo_ms": max(0, int(args.slowmo_ms))})
    if args.mobile:
        login = login.model_copy(update={"target": LoginTarget.MOBILE})
    if args.debug_dir:
        login = login.model_copy(update={"debug_dir": args.debug_dir})
    return cfg.model_copy(update={"browser": browser, "login": login})


async def _landing_url(session: Session) -> str:
    return str(session.page.url)


def _check_login(cfg: AppConfig, store: CredentialStore, *, remove_on_error: bool) -> Result[str]:
    login_options = cfg.login_options()
    if remove_on_error:
        login_options = login_options.model_copy(update={"remove_credentials_on_error": True})
    return asyncio.run(
        with_session(
            _landing_url,
            cfg.launch_options(),
            login_options,
            credential_store=store,
        )
    )


def _report(result: Result[str]) -> int:
    if result.ok:
        print(f"Logged in: {result.data}")
        return 0
    kind = result.kind.value if result.kind else "error"
    logger.error("Login check failed (%s): %s", kind, result.error)
    print(result.error)
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    env_path = Path(args.env_file)
    if env_path.exists():
        load_dotenv(env_path)

    # Default logging: can be overridden once config is loaded.
    configure_logging(level=os.getenv("LOG_LEVEL", "INFO"))

    cfg = load_config(args.config)
    configure_logging(level=cfg.logging.level, file_path=cfg.logging.file_path)

    if args.cmd == "logout":
        FileCredentialStore(cfg.credentials.file_path).remove()
        print("Removed saved login info.")
        return 0

    if args.cmd == "login":
        cfg = _apply_browser_args(cfg, args)
        identity = (args.id or "").strip() or input("ID: ").strip()
        secret = getpass.getpass("Password: ")
        if not identity or not secret:
            raise SystemExit("Both ID and password are required.")

        store = FileCredentialStore(cfg.credentials.file_path)
        store.save(Credentials(identity=identity, secret=secret))
        print(f"Saved login info to {store.path}")
        if not args.check:
            return 0
        return _report(_check_login(cfg, store, remove_on_error=True))

    if args.cmd == "check":
        cfg = _apply_browser_args(cfg, args)
        return _report(_check_login(cfg, cfg.credential_store(), remove_on_error=cfg.login.remove_credentials_on_error))

    raise SystemExit(f"Unknown command: {args.cmd}")
