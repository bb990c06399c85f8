from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

from ..credentials import CredentialStore, default_credential_store
from ..errors import (
    NO_CREDENTIALS_MESSAGE,
    LoginRejectedError,
    MaintenanceModeError,
    SessionInitError,
    describe_error,
    error_kind,
    exception_for,
)
from ..models import Credentials, ErrorKind, LaunchOptions, LoginOptions, Result, Session
from ..util.debug import save_page_artifacts
from .engine import BrowserEngine, PlaywrightEngine
from .navigation import navigate
from .probe import probe_text
from .selectors import LOGIN_ERROR, MAINTENANCE_NOTICE, selectors_for


logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _close_quietly(handle: Any, *, what: str) -> None:
    try:
        await handle.close()
    except Exception:
        logger.debug("Failed to close %s.", what, exc_info=True)


def _remove_credentials(store: Optional[CredentialStore]) -> None:
    try:
        (store if store is not None else default_credential_store()).remove()
    except Exception:
        # The rejection is the error worth reporting; a failed cleanup only gets logged.
        logger.warning("Failed to remove stored credentials.", exc_info=True)


async def authenticate(
    browser: Any,
    credentials: Credentials,
    login_options: Optional[LoginOptions] = None,
    *,
    credential_store: Optional[CredentialStore] = None,
) -> Result[Session]:
    """
    Log into the portal in a fresh browsing context.

    Order is fixed: open login page -> maintenance check -> fill ID/password -> submit -> error check.
    On success the caller owns the returned context/page. On failure the context is already closed and
    the error is returned, never raised.
    """
    options = login_options or LoginOptions()
    selectors = selectors_for(options.target)
    logger.info("Logging in as %s (target=%s)", credentials.masked_identity(), options.target.value)

    try:
        ctx = await browser.new_context(accept_downloads=True)
    except Exception as e:
        logger.warning("Failed to create browser context: %s", describe_error(e))
        return Result.failure(describe_error(e), kind=ErrorKind.NAVIGATION)

    page = None
    try:
        page = await ctx.new_page()
        nav = navigate(page)

        await nav.by_goto(selectors.url)
        maintenance = await probe_text(page, MAINTENANCE_NOTICE)
        if maintenance:
            raise MaintenanceModeError(maintenance)

        await page.fill(selectors.identity, credentials.identity)
        await page.fill(selectors.password, credentials.secret)
        await nav.by_click(selectors.submit)

        login_error = await probe_text(page, LOGIN_ERROR)
        if login_error:
            if options.remove_credentials_on_error:
                _remove_credentials(credential_store)
            raise LoginRejectedError(login_error)
    except Exception as e:
        kind = error_kind(e, default=ErrorKind.NAVIGATION)
        message = describe_error(e)
        logger.warning("Login failed (%s): %s", kind.value, message)
        if options.debug_dir and page is not None:
            await save_page_artifacts(page, debug_dir=options.debug_dir, name_prefix=f"login_failed_{kind.value}")
        await _close_quietly(ctx, what="browser context")
        return Result.failure(message, kind=kind)

    logger.info("Logged in (url=%s)", getattr(page, "url", ""))
    return Result.success(Session(context=ctx, page=page))


async def with_browser(
    work: Callable[[Any], Awaitable[T]],
    launch_options: Optional[LaunchOptions] = None,
    *,
    engine: Optional[BrowserEngine] = None,
) -> Result[T]:
    """
    Launch a browser, run `work(browser)`, and close the browser whatever happens.

    Returns `Result.success(<work's value>)`, or `Result.failure(...)` if launching or `work` raised.
    """
    options = launch_options or LaunchOptions()
    engine = engine if engine is not None else PlaywrightEngine()

    try:
        try:
            browser = await engine.launch(options)
        except Exception as e:
            logger.error("Failed to launch browser: %s", describe_error(e))
            return Result.failure(describe_error(e), kind=ErrorKind.LAUNCH)

        try:
            data = await work(browser)
        except Exception as e:
            kind = error_kind(e)
            if kind is ErrorKind.WORK:
                logger.warning("Browser work failed.", exc_info=True)
            result: Result[T] = Result.failure(describe_error(e), kind=kind)
        else:
            result = Result.success(data)
        finally:
            await _close_quietly(browser, what="browser")
        return result
    finally:
        try:
            await engine.stop()
        except Exception:
            logger.debug("Failed to stop browser engine.", exc_info=True)


async def with_session(
    work: Callable[[Session], Awaitable[T]],
    launch_options: Optional[LaunchOptions] = None,
    login_options: Optional[LoginOptions] = None,
    *,
    credential_store: Optional[CredentialStore] = None,
    engine: Optional[BrowserEngine] = None,
) -> Result[T]:
    """
    Run `work(session)` against a logged-in portal page using stored credentials.

    With no stored credentials this fails fast without launching a browser.
    """
    store = credential_store if credential_store is not None else default_credential_store()
    try:
        credentials = store.load()
    except Exception as e:
        logger.warning("Failed to load stored credentials: %s", describe_error(e))
        return Result.failure(
            f"{NO_CREDENTIALS_MESSAGE} (could not read stored login info: {describe_error(e)})",
            kind=ErrorKind.NO_CREDENTIALS,
        )
    if credentials is None:
        logger.warning("No stored login info.")
        return Result.failure(NO_CREDENTIALS_MESSAGE, kind=ErrorKind.NO_CREDENTIALS)

    async def _run(browser: Any) -> T:
        login = await authenticate(browser, credentials, login_options, credential_store=store)
        if not login.ok:
            raise exception_for(login.kind, login.error or "login failed")
        session = login.data
        if session is None:
            raise SessionInitError()
        try:
            return await work(session)
        finally:
            await _close_quietly(session.context, what="browser context")

    return await with_browser(_run, launch_options, engine=engine)


async def with_page(
    work: Callable[[Any], Awaitable[T]],
    launch_options: Optional[LaunchOptions] = None,
    *,
    engine: Optional[BrowserEngine] = None,
) -> Result[T]:
    """Run `work(page)` on a fresh, not-logged-in page (public pages such as the open syllabus)."""

    async def _run(browser: Any) -> T:
        ctx = await browser.new_context(accept_downloads=True)
        try:
            page = await ctx.new_page()
            return await work(page)
        finally:
            await _close_quietly(ctx, what="browser context")

    return await with_browser(_run, launch_options, engine=engine)
