from .engine import BrowserEngine, PlaywrightEngine
from .login import authenticate, with_browser, with_page, with_session
from .navigation import Navigator, navigate
from .probe import DomProbe, probe_text
from .selectors import LOGIN_SELECTORS, selectors_for

__all__ = [
    "authenticate",
    "with_browser",
    "with_page",
    "with_session",
    "navigate",
    "Navigator",
    "DomProbe",
    "probe_text",
    "LOGIN_SELECTORS",
    "selectors_for",
    "BrowserEngine",
    "PlaywrightEngine",
]
