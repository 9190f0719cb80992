"""Access-token storage.

:class:`TokenStore` is the small interface the session depends on:
``get``, ``set`` and ``delete`` for a single token. Failures are reported
through return values plus :attr:`TokenStore.last_result_code`, which the
session copies into :class:`~instakit.exceptions.StorageError`.

Two implementations ship:

- :class:`FileTokenStore` -- one JSON file under the data directory
  (``~/.local/share/instakit/credentials/instakit_AccessToken.json`` on
  XDG platforms), written atomically with ``0o600`` permissions so the
  token is never world-readable, even momentarily.
- :class:`MemoryTokenStore` -- process-local, for tests and throwaway
  sessions.

The store holds at most one token; ``set`` replaces any previous value.
"""

from __future__ import annotations

import errno
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from instakit.config import atomic_write, get_data_dir
from instakit.models import TokenEntry

ACCESS_TOKEN_KEY = "AccessToken"
KEY_PREFIX = "instakit_"


class TokenStore(ABC):
    """Key-value persistence for the access token.

    Attributes:
        last_result_code: ``0`` after a successful ``set``/``delete``,
            otherwise an implementation-specific failure code.
    """

    last_result_code: int = 0

    @abstractmethod
    def get(self) -> Optional[str]:
        """Return the stored token, or ``None`` when nothing is stored."""
        ...

    @abstractmethod
    def set(self, token: str) -> bool:
        """Store *token*, replacing any previous one. Returns success."""
        ...

    @abstractmethod
    def delete(self) -> bool:
        """Remove the stored token. Returns ``False`` if nothing was removed."""
        ...


class MemoryTokenStore(TokenStore):
    """Keeps the token in memory for the lifetime of the object."""

    def __init__(self, token: Optional[str] = None) -> None:
        self._token = token
        self.last_result_code = 0

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> bool:
        self._token = token
        self.last_result_code = 0
        return True

    def delete(self) -> bool:
        if self._token is None:
            self.last_result_code = errno.ENOENT
            return False
        self._token = None
        self.last_result_code = 0
        return True


def _credentials_dir() -> Path:
    path = get_data_dir() / "credentials"
    path.mkdir(parents=True, exist_ok=True)
    return path


class FileTokenStore(TokenStore):
    """Persist the token as a ``0o600`` JSON file.

    Args:
        key: Name of the stored item. The file name is
            ``<prefix><key>.json``.
        prefix: Namespace prepended to *key*.
        directory: Override for the storage directory. Defaults to
            ``<data_dir>/credentials``.

    Example::

        store = FileTokenStore()
        store.set("1234.abcd")
        assert store.get() == "1234.abcd"
        store.delete()
    """

    def __init__(
        self,
        key: str = ACCESS_TOKEN_KEY,
        prefix: str = KEY_PREFIX,
        directory: Optional[Path] = None,
    ) -> None:
        base = directory if directory is not None else _credentials_dir()
        self._path = base / f"{prefix}{key}.json"
        self.last_result_code = 0

    @property
    def path(self) -> Path:
        return self._path

    def get(self) -> Optional[str]:
        """Load the token, treating an unreadable or corrupt file as empty."""
        if not self._path.is_file():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            entry = TokenEntry.model_validate(data)
        except (json.JSONDecodeError, ValueError, OSError):
            return None
        return entry.access_token

    def set(self, token: str) -> bool:
        entry = TokenEntry(access_token=token)
        text = json.dumps(entry.model_dump(mode="json"), indent=2) + "\n"
        try:
            atomic_write(self._path, text, mode=0o600)
        except OSError as exc:
            self.last_result_code = exc.errno or errno.EIO
            return False
        self.last_result_code = 0
        return True

    def delete(self) -> bool:
        try:
            self._path.unlink()
        except OSError as exc:
            self.last_result_code = exc.errno or errno.EIO
            return False
        self.last_result_code = 0
        return True
