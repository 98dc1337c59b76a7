import logging
import threading
import uuid
from typing import Any, Iterable, Optional

from pollu_tracker.core.errors import NotFoundError
from pollu_tracker.core.timestamps import utc_now_iso
from pollu_tracker.models.pollution_model import Pollution

logger = logging.getLogger(__name__)

_IMMUTABLE_FIELDS = {"id"}


class PollutionStore:
    """
    Ordered in-memory collection of pollutions, newest first.

    Every read hands out copies and every mutation runs under one lock,
    so callers never see a half-applied change.
    """

    def __init__(self, pollutions: Optional[Iterable[Pollution]] = None):
        self._lock = threading.Lock()
        self._items: list[Pollution] = [p.copy() for p in pollutions or []]

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def all(self) -> list[Pollution]:
        with self._lock:
            return [p.copy() for p in self._items]

    def insert(self, data: dict[str, Any]) -> Pollution:
        fields = {k: v for k, v in data.items() if k not in _IMMUTABLE_FIELDS}
        if fields.get("recorded_at") is None:
            fields["recorded_at"] = utc_now_iso()
        with self._lock:
            pollution = Pollution(id=self._new_id(), **fields)
            self._items.insert(0, pollution)
            logger.info("Inserted pollution %s", pollution.id)
            return pollution.copy()

    def find_by_id(self, pollution_id: str) -> Optional[Pollution]:
        with self._lock:
            index = self._index_of(pollution_id)
            return None if index is None else self._items[index].copy()

    def get(self, pollution_id: str) -> Pollution:
        pollution = self.find_by_id(pollution_id)
        if pollution is None:
            raise NotFoundError(pollution_id)
        return pollution

    def update(self, pollution_id: str, changes: dict[str, Any]) -> Pollution:
        fields = {k: v for k, v in changes.items() if k not in _IMMUTABLE_FIELDS}
        # recorded_at is only replaced when explicitly given
        if fields.get("recorded_at") is None:
            fields.pop("recorded_at", None)
        with self._lock:
            index = self._index_of(pollution_id)
            if index is None:
                raise NotFoundError(pollution_id)
            updated = self._items[index].copy(**fields)
            self._items[index] = updated
            logger.info("Updated pollution %s (%s)", pollution_id, ", ".join(sorted(fields)) or "no fields")
            return updated.copy()

    def delete(self, pollution_id: str) -> None:
        with self._lock:
            index = self._index_of(pollution_id)
            if index is None:
                raise NotFoundError(pollution_id)
            del self._items[index]
            logger.info("Deleted pollution %s", pollution_id)

    def _index_of(self, pollution_id: str) -> Optional[int]:
        for index, pollution in enumerate(self._items):
            if pollution.id == pollution_id:
                return index
        return None

    def _new_id(self) -> str:
        while True:
            candidate = str(uuid.uuid4())
            if self._index_of(candidate) is None:
                return candidate
