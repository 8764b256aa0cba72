"""Device key-value storage backed by a JSON file."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

_logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Interface for small persisted values on the operator's device."""

    def get(self, key: str) -> object | None:
        """Return the stored value, if present."""

    def set(self, key: str, value: object) -> None:
        """Store a JSON-serializable value."""

    def remove(self, key: str) -> None:
        """Forget a value."""


@dataclass
class JsonFileStore(KeyValueStore):
    """Key-value store kept in one JSON document on disk."""

    path: Path

    @classmethod
    def create(cls, location: str) -> "JsonFileStore":
        """Create a store at a user-relative location."""
        return cls(path=Path(location).expanduser())

    def get(self, key: str) -> object | None:
        """Return a value from the document."""
        return self._read().get(key)

    def set(self, key: str, value: object) -> None:
        """Write a value, replacing the document atomically."""
        data = self._read_for_update()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        """Drop a value if present."""
        data = self._read_for_update()
        if data.pop(key, None) is not None:
            self._write(data)

    def _read(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        return data if isinstance(data, dict) else {}

    def _read_for_update(self) -> dict[str, object]:
        # A corrupt document is replaced by the next write.
        try:
            return self._read()
        except ValueError as exc:
            _logger.warning("Discarding unreadable %s: %s", self.path, exc)
            return {}

    def _write(self, data: dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        staging = self.path.with_suffix(self.path.suffix + ".tmp")
        staging.write_text(json.dumps(data), encoding="utf-8")
        staging.replace(self.path)
