from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """String-keyed storage holding JSON text values."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryStore:
    """In-process store; contents vanish with the instance."""

    def __init__(self, initial: Dict[str, str] | None = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """Keeps every key in a single JSON object file.

    A missing, unreadable or undecodable file reads as empty. Writes rewrite the whole file.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def _read_all(self) -> Dict[str, Any]:
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            # ValueError covers both bad JSON and bytes that are not UTF-8.
            logger.warning("Could not read %s (%s); treating it as empty", self.path, exc)
            return {}
        if not isinstance(payload, dict):
            return {}
        return payload

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            return json.dumps(value)
        return value

    def set(self, key: str, value: str) -> None:
        payload = self._read_all()
        payload[key] = value
        self._write_all(payload)

    def delete(self, key: str) -> None:
        payload = self._read_all()
        if key in payload:
            del payload[key]
            self._write_all(payload)

    def _write_all(self, payload: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2)
