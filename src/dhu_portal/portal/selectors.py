from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from ..models import LoginTarget, SelectorSet
from .probe import DomProbe


# The portal is a PrimeFaces (UNIVERSAL PASSPORT) app; ids contain ':' which must be escaped in CSS.
URL_TOP = "https://portal.dhw.ac.jp/uprx/up/pk/pky001/Pky00101.xhtml"
LOGIN_ID = "#loginForm\\:userId"
LOGIN_PASSWORD = "#loginForm\\:password"
LOGIN_SUBMIT_BUTTON = "#loginForm\\:loginButton"

MOBILE_URL_TOP = "https://portal.dhw.ac.jp/uprx/up/pk/pky501/Pky50101.xhtml"
MOBILE_LOGIN_ID = "#loginForm\\:userId_input"
MOBILE_LOGIN_PASSWORD = "#loginForm\\:password_input"
MOBILE_LOGIN_SUBMIT_BUTTON = "#loginForm\\:loginButton_mobile"

# Shown on the login page instead of the form while the portal is down for maintenance.
MAINTENANCE_NOTICE = DomProbe("#funcContent > div > p")
# PrimeFaces message rendered after a rejected login ("wrong password", locked account, ...).
LOGIN_ERROR = DomProbe(".ui-messages-error-detail")


LOGIN_SELECTORS: Mapping[LoginTarget, SelectorSet] = MappingProxyType(
    {
        LoginTarget.DESKTOP: SelectorSet(
            url=URL_TOP,
            identity=LOGIN_ID,
            password=LOGIN_PASSWORD,
            submit=LOGIN_SUBMIT_BUTTON,
        ),
        LoginTarget.MOBILE: SelectorSet(
            url=MOBILE_URL_TOP,
            identity=MOBILE_LOGIN_ID,
            password=MOBILE_LOGIN_PASSWORD,
            submit=MOBILE_LOGIN_SUBMIT_BUTTON,
        ),
    }
)


def selectors_for(target: LoginTarget) -> SelectorSet:
    return LOGIN_SELECTORS[LoginTarget(target)]
