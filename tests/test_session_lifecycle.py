from __future__ import annotations

import asyncio

from dhu_portal.errors import NO_CREDENTIALS_MESSAGE, SessionInitError
from dhu_portal.models import Credentials, ErrorKind, LaunchOptions, LoginOptions, Session
from dhu_portal.portal.login import with_browser, with_page, with_session

from fakes import FakeCredentialStore, FakeEngine, FakeEngineError, PageScript


CREDS = Credentials(identity="u1", secret="p1")


def test_with_browser_returns_work_value_and_closes_after_it_settles() -> None:
    engine = FakeEngine()

    async def work(browser):
        engine.events.append(("work.done",))
        return {"gpa": 3.5}

    result = asyncio.run(with_browser(work, engine=engine))

    assert result.ok
    assert result.data == {"gpa": 3.5}
    browser = engine.browsers[0]
    assert browser.close_calls == 1
    ops = engine.ops()
    assert ops.index("work.done") < ops.index("browser.close") < ops.index("engine.stop")
    assert engine.stop_calls == 1


def test_with_browser_none_is_a_valid_success_value() -> None:
    async def work(browser):
        return None

    result = asyncio.run(with_browser(work, engine=FakeEngine()))
    assert result.ok
    assert result.data is None


def test_with_browser_work_raising_still_closes_browser() -> None:
    engine = FakeEngine()

    async def work(browser):
        raise ValueError("table not found")

    result = asyncio.run(with_browser(work, engine=engine))

    assert not result.ok
    assert result.error == "table not found"
    assert result.kind is ErrorKind.WORK
    assert engine.browsers[0].close_calls == 1
    assert engine.stop_calls == 1


def test_with_browser_passes_launch_options_to_engine() -> None:
    engine = FakeEngine()
    opts = LaunchOptions(headless=False, executable_path="/usr/bin/chromium")

    async def work(browser):
        return 1

    asyncio.run(with_browser(work, opts, engine=engine))
    assert engine.launch_calls == [opts]


def test_with_browser_launch_failure_is_a_result() -> None:
    engine = FakeEngine(launch_error=FakeEngineError("Executable doesn't exist at /nope"))
    called = []

    async def work(browser):
        called.append(browser)
        return 1

    result = asyncio.run(with_browser(work, engine=engine))

    assert not result.ok
    assert result.kind is ErrorKind.LAUNCH
    assert "Executable doesn't exist" in (result.error or "")
    assert called == []
    assert engine.stop_calls == 1


def test_with_session_without_credentials_never_launches() -> None:
    engine = FakeEngine()
    store = FakeCredentialStore(None)

    async def work(session):
        raise AssertionError("should not run")

    result = asyncio.run(with_session(work, credential_store=store, engine=engine))

    assert not result.ok
    assert result.error == NO_CREDENTIALS_MESSAGE
    assert result.kind is ErrorKind.NO_CREDENTIALS
    assert engine.launch_calls == []
    assert engine.events == []


def test_with_session_end_to_end_success() -> None:
    engine = FakeEngine(PageScript(maintenance=None, login_error_after_submit=None))
    store = FakeCredentialStore(CREDS)
    seen: list[Session] = []

    async def work(session: Session):
        seen.append(session)
        return ["attendance", "rows"]

    result = asyncio.run(
        with_session(work, login_options=LoginOptions(), credential_store=store, engine=engine)
    )

    assert result.ok
    assert result.data == ["attendance", "rows"]
    browser = engine.browsers[0]
    assert len(browser.contexts) == 1
    assert browser.contexts[0].close_calls == 1
    assert browser.close_calls == 1
    assert seen[0].page is browser.contexts[0].pages[0]
    assert store.remove_calls == 0


def test_with_session_end_to_end_wrong_password_removes_credentials() -> None:
    engine = FakeEngine(PageScript(login_error_after_submit="wrong password"))
    store = FakeCredentialStore(CREDS)
    ran = []

    async def work(session):
        ran.append(session)
        return 1

    result = asyncio.run(
        with_session(
            work,
            login_options=LoginOptions(remove_credentials_on_error=True),
            credential_store=store,
            engine=engine,
        )
    )

    assert not result.ok
    assert result.error == "wrong password"
    assert result.kind is ErrorKind.LOGIN_REJECTED
    assert store.remove_calls == 1
    assert engine.browsers[0].close_calls == 1
    assert engine.browsers[0].contexts[0].close_calls == 1
    assert ran == []


def test_with_session_keeps_maintenance_classification() -> None:
    engine = FakeEngine(PageScript(maintenance="Under maintenance"))

    async def work(session):
        return 1

    result = asyncio.run(with_session(work, credential_store=FakeCredentialStore(CREDS), engine=engine))

    assert result.error == "Under maintenance"
    assert result.kind is ErrorKind.MAINTENANCE
    assert engine.browsers[0].close_calls == 1


def test_with_session_work_error_closes_everything() -> None:
    engine = FakeEngine()

    async def work(session):
        raise KeyError("grade")

    result = asyncio.run(with_session(work, credential_store=FakeCredentialStore(CREDS), engine=engine))

    assert not result.ok
    assert result.kind is ErrorKind.WORK
    browser = engine.browsers[0]
    assert browser.contexts[0].close_calls == 1
    assert browser.close_calls == 1


def test_with_session_store_load_error_is_treated_as_missing_credentials() -> None:
    class BrokenStore(FakeCredentialStore):
        def load(self):
            raise OSError("permission denied")

    engine = FakeEngine()

    async def work(session):
        return 1

    result = asyncio.run(with_session(work, credential_store=BrokenStore(), engine=engine))
    assert result.kind is ErrorKind.NO_CREDENTIALS
    assert result.error.startswith(NO_CREDENTIALS_MESSAGE)
    assert "permission denied" in result.error
    assert engine.launch_calls == []


def test_session_init_error_message() -> None:
    assert str(SessionInitError()) == "failed to init session"
    assert SessionInitError.kind is ErrorKind.SESSION_INIT


def test_with_page_opens_and_closes_an_unauthenticated_context() -> None:
    engine = FakeEngine()

    async def work(page):
        await page.goto("https://portal.example/syllabus")
        return page.url

    result = asyncio.run(with_page(work, engine=engine))

    assert result.data == "https://portal.example/syllabus"
    browser = engine.browsers[0]
    assert browser.contexts[0].close_calls == 1
    assert browser.close_calls == 1
    ops = engine.ops()
    assert "fill" not in ops
    assert ops.index("context.close") < ops.index("browser.close")


def test_with_session_success_without_session_is_an_internal_failure(monkeypatch) -> None:
    from dhu_portal.models import Result
    from dhu_portal.portal import login as login_mod

    async def fake_authenticate(browser, credentials, login_options=None, *, credential_store=None):
        return Result.success(None)

    monkeypatch.setattr(login_mod, "authenticate", fake_authenticate)
    engine = FakeEngine()

    async def work(session):
        return 1

    result = asyncio.run(with_session(work, credential_store=FakeCredentialStore(CREDS), engine=engine))

    assert result.error == "failed to init session"
    assert result.kind is ErrorKind.SESSION_INIT
    assert engine.browsers[0].close_calls == 1
