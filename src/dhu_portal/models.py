from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field


T = TypeVar("T")


class LoginTarget(str, Enum):
    DESKTOP = "pc"
    MOBILE = "mobile"


class ErrorKind(str, Enum):
    NO_CREDENTIALS = "no_credentials"
    MAINTENANCE = "maintenance"
    LOGIN_REJECTED = "login_rejected"
    NAVIGATION = "navigation"
    SESSION_INIT = "session_init"
    LAUNCH = "launch"
    WORK = "work"


@dataclass(frozen=True)
class SelectorSet:
    url: str
    identity: str
    password: str
    submit: str


@dataclass(frozen=True)
class Credentials:
    identity: str
    secret: str = field(repr=False)

    def masked_identity(self) -> str:
        # Safe for logs: keep just enough to tell accounts apart.
        s = self.identity or ""
        if len(s) <= 2:
            return "*" * len(s)
        return s[:2] + "*" * (len(s) - 2)


class LoginOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    target: LoginTarget = LoginTarget.DESKTOP
    # Delete stored credentials when the portal rejects them, so the next run doesn't retry them.
    remove_credentials_on_error: bool = False
    # If set, a screenshot + HTML of a failed login page are written here.
    debug_dir: Optional[str] = None


class LaunchOptions(BaseModel):
    """
    How the browser process is spawned. Maps onto `chromium.launch(...)` keyword arguments.
    """

    model_config = ConfigDict(frozen=True)

    headless: bool = True
    executable_path: Optional[str] = None
    channel: Optional[str] = None
    slow_mo_ms: int = Field(default=0, ge=0)
    timeout_ms: Optional[int] = Field(default=None, ge=0)

    def to_playwright_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"headless": self.headless}
        if self.executable_path:
            kwargs["executable_path"] = self.executable_path
        if self.channel:
            kwargs["channel"] = self.channel
        if self.slow_mo_ms:
            kwargs["slow_mo"] = self.slow_mo_ms
        if self.timeout_ms is not None:
            kwargs["timeout"] = self.timeout_ms
        return kwargs


@dataclass(frozen=True)
class Session:
    """An authenticated browsing context and its active page. Owned by the caller once returned."""

    context: Any
    page: Any


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of a login/session call: either `data` (ok) or a non-empty `error` string, never both.

    `ok` is the discriminator since `None` is a perfectly valid success payload.
    """

    ok: bool
    data: Optional[T] = None
    error: Optional[str] = None
    kind: Optional[ErrorKind] = None

    def __post_init__(self) -> None:
        if self.ok:
            if self.error is not None or self.kind is not None:
                raise ValueError("a successful Result cannot carry an error")
        else:
            if not self.error:
                raise ValueError("a failed Result needs a non-empty error")
            if self.data is not None:
                raise ValueError("a failed Result cannot carry data")

    @classmethod
    def success(cls, data: T) -> "Result[T]":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, error: str, *, kind: ErrorKind = ErrorKind.WORK) -> "Result[Any]":
        return cls(ok=False, error=error, kind=kind)
