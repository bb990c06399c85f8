from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Protocol, Union

from pydantic import BaseModel, Field, ValidationError

from .models import Credentials


logger = logging.getLogger(__name__)

DEFAULT_CREDENTIALS_FILE = "~/.dhu-portal/credentials.json"


class CredentialStore(Protocol):
    def load(self) -> Optional[Credentials]: ...

    def remove(self) -> None: ...


class _StoredUser(BaseModel):
    id: str = Field(min_length=1)
    password: str = Field(min_length=1, repr=False)


class _StoredFile(BaseModel):
    user: Optional[_StoredUser] = None


class FileCredentialStore:
    """
    Login info kept in a small JSON file (`{"user": {"id": ..., "password": ...}}`), readable only by the owner.

    A file that can't be parsed is moved aside (`*.corrupt-<stamp>`) and treated as "no credentials".
    """

    def __init__(self, path: Union[str, Path] = DEFAULT_CREDENTIALS_FILE) -> None:
        self.path = Path(path).expanduser()

    def load(self) -> Optional[Credentials]:
        if not self.path.exists():
            return None
        try:
            stored = _StoredFile.model_validate(json.loads(self.path.read_text(encoding="utf-8")))
        except (ValueError, ValidationError) as e:
            # json.JSONDecodeError is a ValueError.
            logger.warning("Credential file is unreadable; ignoring it. (%s)", type(e).__name__)
            self._quarantine()
            return None
        if stored.user is None:
            return None
        return Credentials(identity=stored.user.id, secret=stored.user.password)

    def save(self, credentials: Credentials) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"user": {"id": credentials.identity, "password": credentials.secret}}
        tmp = self.path.with_name(self.path.name + ".tmp")
        fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        tmp.replace(self.path)
        logger.info("Saved login info for %s to %s", credentials.masked_identity(), self.path)

    def remove(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return
        logger.info("Removed stored login info: %s", self.path)

    def _quarantine(self) -> None:
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
        try:
            self.path.replace(self.path.with_name(self.path.name + f".corrupt-{stamp}"))
        except Exception:
            logger.debug("Failed to quarantine path=%s", self.path, exc_info=True)


class EnvCredentialStore:
    """
    Read-only store backed by environment variables (handy for CI / `.env` files).

    `remove()` can't delete anything from the environment of the parent process; it only stops this
    store from handing the rejected credentials out again.
    """

    def __init__(self, id_var: str = "DHU_USER_ID", password_var: str = "DHU_PASSWORD") -> None:
        self.id_var = id_var
        self.password_var = password_var
        self._removed = False

    def load(self) -> Optional[Credentials]:
        if self._removed:
            return None
        identity = (os.getenv(self.id_var) or "").strip()
        secret = os.getenv(self.password_var) or ""
        if not identity or not secret:
            return None
        return Credentials(identity=identity, secret=secret)

    def remove(self) -> None:
        logger.warning("Credentials come from %s/%s; unset them to stop retrying.", self.id_var, self.password_var)
        self._removed = True


def resolve_credential_store(file_path: Union[str, Path, None] = None) -> CredentialStore:
    """
    `DHU_USER_ID` + `DHU_PASSWORD` in the environment win; otherwise the JSON file at `file_path`,
    falling back to `DHU_CREDENTIALS_FILE` and then `~/.dhu-portal/credentials.json`.
    """
    env_store = EnvCredentialStore()
    if env_store.load() is not None:
        return env_store
    return FileCredentialStore(file_path or os.getenv("DHU_CREDENTIALS_FILE") or DEFAULT_CREDENTIALS_FILE)


def default_credential_store() -> CredentialStore:
    return resolve_credential_store()
