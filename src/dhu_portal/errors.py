from __future__ import annotations

from typing import Optional

from .models import ErrorKind


NO_CREDENTIALS_MESSAGE = "please provide login info, try `dhu login`"


class PortalError(RuntimeError):
    """
    Base error for the login/session layer.

    These are raised internally and turned into `Result.failure(...)` at the public entry points;
    callers of `with_session` / `with_browser` / `authenticate` never see them raised.
    """

    kind: ErrorKind = ErrorKind.NAVIGATION


class NoCredentialsError(PortalError):
    kind = ErrorKind.NO_CREDENTIALS

    def __init__(self, message: str = NO_CREDENTIALS_MESSAGE) -> None:
        super().__init__(message)


class MaintenanceModeError(PortalError):
    """The login page shows a maintenance notice; login is not attempted."""

    kind = ErrorKind.MAINTENANCE


class LoginRejectedError(PortalError):
    """The portal rendered its own error message after submitting the login form."""

    kind = ErrorKind.LOGIN_REJECTED


class NavigationError(PortalError):
    kind = ErrorKind.NAVIGATION


class SessionInitError(PortalError):
    kind = ErrorKind.SESSION_INIT

    def __init__(self, message: str = "failed to init session") -> None:
        super().__init__(message)


_BY_KIND: dict[ErrorKind, type[PortalError]] = {
    cls.kind: cls
    for cls in (
        NoCredentialsError,
        MaintenanceModeError,
        LoginRejectedError,
        NavigationError,
        SessionInitError,
    )
}


def exception_for(kind: Optional[ErrorKind], message: str) -> PortalError:
    """Rebuild the classified exception for a failed `Result`, so it can be raised across a scope boundary."""
    cls = _BY_KIND.get(kind, PortalError) if kind is not None else PortalError
    return cls(message)


def describe_error(exc: BaseException) -> str:
    # Some Playwright errors carry an empty message; never hand back an empty error string.
    msg = str(exc).strip()
    return msg or type(exc).__name__


def error_kind(exc: BaseException, default: ErrorKind = ErrorKind.WORK) -> ErrorKind:
    if isinstance(exc, PortalError):
        return exc.kind
    return default
