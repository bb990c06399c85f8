from .config import AppConfig, load_config
from .credentials import (
    CredentialStore,
    EnvCredentialStore,
    FileCredentialStore,
    default_credential_store,
    resolve_credential_store,
)
from .errors import NO_CREDENTIALS_MESSAGE, PortalError
from .logging_config import configure_logging
from .models import (
    Credentials,
    ErrorKind,
    LaunchOptions,
    LoginOptions,
    LoginTarget,
    Result,
    SelectorSet,
    Session,
)
from .portal import (
    LOGIN_SELECTORS,
    BrowserEngine,
    PlaywrightEngine,
    authenticate,
    navigate,
    with_browser,
    with_page,
    with_session,
)

__all__ = [
    "authenticate",
    "with_browser",
    "with_page",
    "with_session",
    "navigate",
    "LOGIN_SELECTORS",
    "BrowserEngine",
    "PlaywrightEngine",
    "Credentials",
    "ErrorKind",
    "LaunchOptions",
    "LoginOptions",
    "LoginTarget",
    "Result",
    "SelectorSet",
    "Session",
    "CredentialStore",
    "EnvCredentialStore",
    "FileCredentialStore",
    "default_credential_store",
    "resolve_credential_store",
    "NO_CREDENTIALS_MESSAGE",
    "PortalError",
    "AppConfig",
    "load_config",
    "configure_logging",
]
