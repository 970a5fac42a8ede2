"""Thumbs up/down feedback on generated plans, kept in a small key-value store"""
import json
import time
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Protocol, Union

from ..models.schemas import DesignPlan

Rating = Literal["up", "down"]


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, value: Any) -> None:
        ...


class MemoryStore:
    def __init__(self):
        self._data: Dict[str, Any] = {}

    def get(self, key: str) -> Optional[Any]:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value


class JsonFileStore:
    """All keys in one JSON object on disk, rewritten on every set()."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)

    def get(self, key: str) -> Optional[Any]:
        return self._load().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)


class FeedbackLog:
    KEY = "designFeedback"

    def __init__(self, store: KeyValueStore):
        self.store = store

    def entries(self) -> List[Dict[str, Any]]:
        return list(self.store.get(self.KEY) or [])

    def record(self, rating: Rating, comment: str, plan: DesignPlan) -> Dict[str, Any]:
        if rating not in ("up", "down"):
            raise ValueError(f"rating must be 'up' or 'down', got {rating!r}")
        entry = {
            "rating": rating,
            "comment": comment,
            "designPlan": plan.to_wire(),
            "timestamp": int(time.time() * 1000),
        }
        entries = self.entries()
        entries.append(entry)
        self.store.set(self.KEY, entries)
        return entry
