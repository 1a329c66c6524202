"""
Persistence backends for the client session.

The credential store keeps two entries:

- ``auth_token``: the client-readable access token
- ``auth_storage``: the serialized user identity

Backends only need to round-trip JSON-compatible values.
"""

import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from shared.logging import get_logger


class SessionStorage(ABC):
    """Key/value persistence for session state."""

    @abstractmethod
    def load(self, key: str) -> Optional[Any]:
        """Return the stored value or None."""

    @abstractmethod
    def save(self, key: str, value: Any) -> None:
        """Persist a value under key."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key; missing keys are ignored."""


class MemoryStorage(SessionStorage):
    """Process-local storage, lost on restart."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(initial or {})

    def load(self, key: str) -> Optional[Any]:
        return self._data.get(key)

    def save(self, key: str, value: Any) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStorage(SessionStorage):
    """Storage backed by a single JSON document on disk."""

    def __init__(self, path: str):
        self.path = Path(path)
        self.logger = get_logger("storefront.session.storage")

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            self.logger.warning("Unreadable session file, starting empty", path=str(self.path), error=str(e))
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=".session-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def load(self, key: str) -> Optional[Any]:
        return self._read().get(key)

    def save(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)
