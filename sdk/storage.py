# sdk/storage.py
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

CART_KEY = "supergains_cart"


class LocalStorage:
    """Tiny string key/value store, the terminal stand-in for window.localStorage.

    With a path, every write is flushed to a JSON file so state survives
    between runs. Without one, values live in memory only.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path).expanduser() if path else None
        self._data: Dict[str, str] = {}
        if self.path and self.path.exists():
            try:
                self._data = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                logger.warning("ignoring unreadable storage file %s: %s", self.path, e)
                self._data = {}
            if not isinstance(self._data, dict):
                logger.warning("ignoring storage file %s: not a JSON object", self.path)
                self._data = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value
        self._flush()

    def remove_item(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._flush()

    def get_json(self, key: str, default: Any = None) -> Any:
        raw = self.get_item(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("corrupt JSON under storage key %r", key)
            return default

    def set_json(self, key: str, value: Any) -> None:
        self.set_item(key, json.dumps(value))

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def _flush(self) -> None:
        if not self.path:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data), encoding="utf-8")
