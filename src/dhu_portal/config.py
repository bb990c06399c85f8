from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator

from .credentials import DEFAULT_CREDENTIALS_FILE, CredentialStore, resolve_credential_store
from .models import LaunchOptions, LoginOptions, LoginTarget


_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z0-9_]+)\}")


def _expand_env_vars(value: object) -> object:
    if isinstance(value, str):
        def repl(match: re.Match[str]) -> str:
            var = match.group(1)
            return os.getenv(var, "")

        return _ENV_VAR_PATTERN.sub(repl, value)
    if isinstance(value, list):
        return [_expand_env_vars(v) for v in value]
    if isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    return value


def _env_bool(name: str, default: bool = False) -> bool:
    raw = (os.getenv(name, "") or "").strip().lower()
    if not raw:
        return bool(default)
    return raw in {"1", "true", "t", "yes", "y", "on"}


def _env_int(name: str, default: int = 0) -> int:
    raw = (os.getenv(name, "") or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer (got {raw!r})") from None


def _deep_merge(base: object, override: object) -> object:
    if isinstance(base, dict) and isinstance(override, dict):
        out = dict(base)
        for k, v in override.items():
            if k in out:
                out[k] = _deep_merge(out[k], v)
            else:
                out[k] = v
        return out
    return override


def _default_config_from_env() -> dict:
    """
    Env-only defaults so most users only need a `.env`; a YAML file can override any of it.
    """
    return {
        "browser": {
            "headless": _env_bool("DHU_HEADLESS", default=True),
            "executable_path": os.getenv("DHU_BROWSER_EXECUTABLE") or None,
            "channel": os.getenv("DHU_BROWSER_CHANNEL") or None,
            "slow_mo_ms": _env_int("DHU_SLOW_MO_MS", 0),
        },
        "login": {
            "target": os.getenv("DHU_LOGIN_TARGET", LoginTarget.DESKTOP.value) or LoginTarget.DESKTOP.value,
            "remove_credentials_on_error": _env_bool("DHU_REMOVE_CREDENTIALS_ON_ERROR", default=False),
            "debug_dir": os.getenv("DHU_DEBUG_DIR") or None,
        },
        "credentials": {
            "file_path": os.getenv("DHU_CREDENTIALS_FILE", DEFAULT_CREDENTIALS_FILE) or DEFAULT_CREDENTIALS_FILE,
        },
        "logging": {
            "level": os.getenv("LOG_LEVEL", "INFO"),
            "file_path": os.getenv("LOG_FILE") or None,
        },
    }


class BrowserConfig(BaseModel):
    headless: bool = True
    executable_path: Optional[str] = None
    channel: Optional[str] = None
    slow_mo_ms: int = Field(default=0, ge=0)
    timeout_ms: Optional[int] = Field(default=None, ge=0)


class LoginConfig(BaseModel):
    target: LoginTarget = LoginTarget.DESKTOP
    remove_credentials_on_error: bool = False
    debug_dir: Optional[str] = None

    @field_validator("target", mode="before")
    @classmethod
    def _normalize_target(cls, v: object) -> object:
        if isinstance(v, str):
            s = v.strip().lower()
            # "desktop" reads more naturally in a config file than the portal's own "pc".
            return LoginTarget.DESKTOP.value if s in {"desktop", ""} else s
        return v


class CredentialsConfig(BaseModel):
    file_path: str = DEFAULT_CREDENTIALS_FILE


class LoggingConfig(BaseModel):
    level: str = "INFO"
    file_path: Optional[str] = None


class AppConfig(BaseModel):
    browser: BrowserConfig = BrowserConfig()
    login: LoginConfig = LoginConfig()
    credentials: CredentialsConfig = CredentialsConfig()
    logging: LoggingConfig = LoggingConfig()

    def launch_options(self) -> LaunchOptions:
        return LaunchOptions(**self.browser.model_dump())

    def login_options(self) -> LoginOptions:
        return LoginOptions(**self.login.model_dump())

    def credential_store(self) -> CredentialStore:
        return resolve_credential_store(self.credentials.file_path)


def load_config(path: Union[str, Path, None] = None) -> AppConfig:
    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
            raw = _expand_env_vars(raw)  # supports ${ENV_VAR} in YAML

    merged = _deep_merge(_default_config_from_env(), raw)
    return AppConfig.model_validate(merged)
