"""
Key-value persistence for storefront state.

Every store exposes the same two calls:

    load(key, default) -> value saved under key, or default
    save(key, value)   -> overwrite key with the JSON-encoded value

Values are plain JSON data (dicts, lists, strings, numbers, None). Callers
turn them into models and must cope with default-shaped data.
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

SETTINGS_KEY = "texpress_settings"
PRODUCTS_KEY = "texpress_products"
CART_KEY = "texpress_cart"
USER_KEY = "texpress_user"


class MemoryStore:
    """Holds encoded values in a dict. Used by tests."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.save(key, value)

    def load(self, key: str, default: Any = None) -> Any:
        raw = self._data.get(key)
        if raw is None:
            return default
        return json.loads(raw)

    def save(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    def keys(self):
        return list(self._data)


class JsonFileStore:
    """One `<key>.json` file per key under `root`."""

    def __init__(self, root):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def load(self, key: str, default: Any = None) -> Any:
        path = self._path(key)
        if not path.exists():
            return default
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (ValueError, OSError) as e:
            logger.warning("Ignoring unreadable value for %s: %s", key, e)
            return default

    def save(self, key: str, value: Any) -> None:
        path = self._path(key)
        # unique temp file per write so overlapping saves of one key never share it
        with tempfile.NamedTemporaryFile("w", encoding="utf-8", dir=self.root, prefix=f"{key}.",
                                         suffix=".tmp", delete=False) as tmp:
            json.dump(value, tmp, ensure_ascii=False)
        try:
            os.replace(tmp.name, path)
        except OSError:
            os.unlink(tmp.name)
            raise

    def keys(self):
        return sorted(p.stem for p in self.root.glob("*.json"))


class MongoStore:
    """One document per key: {"_id": key, "value": <value>}."""

    def __init__(self, database, collection: str = "state"):
        self.collection = database[collection]
        self.name = getattr(database, "name", None)

    def load(self, key: str, default: Any = None) -> Any:
        doc = self.collection.find_one({"_id": key})
        if not doc or "value" not in doc:
            return default
        return doc["value"]

    def save(self, key: str, value: Any) -> None:
        # Round-trip through JSON so Mongo holds exactly what the file store would
        value = json.loads(json.dumps(value))
        self.collection.replace_one({"_id": key}, {"_id": key, "value": value}, upsert=True)

    def keys(self):
        return [d["_id"] for d in self.collection.find({}, {"_id": 1})]


def open_store(db=None, storage_dir: Optional[str] = None):
    if db is not None:
        logger.info("Persisting state to MongoDB")
        return MongoStore(db)
    if storage_dir is None:
        from config import STORAGE_DIR
        storage_dir = STORAGE_DIR
    logger.info("Persisting state to %s", storage_dir)
    return JsonFileStore(storage_dir)
