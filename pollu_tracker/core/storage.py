"""
Key-value blob storage for the pollution collection.

The collection is written as one JSON array under a single key, the way a
browser keeps it in localStorage. ``MemoryStorage`` is the default;
``FileStorage`` keeps every key in one JSON document on disk.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional, Protocol

from pydantic import ValidationError as PydanticValidationError

from pollu_tracker.core.errors import TransportError
from pollu_tracker.core.timestamps import utc_now_iso
from pollu_tracker.models.pollution_model import Pollution
from pollu_tracker.models.seed import seed_pollutions
from pollu_tracker.schemas.pollution_schema import PollutionResponse

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "polluTracker.pollutions"


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...


class MemoryStorage:
    def __init__(self):
        self._data: dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value


class FileStorage:
    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not hold a JSON object")
        return data

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except (OSError, ValueError):
            data = {}
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
        os.replace(tmp_path, self.path)


def pollution_from_dict(item: dict) -> Pollution:
    data = dict(item)
    if data.get("recordedAt") is None and data.get("recorded_at") is None:
        data["recordedAt"] = utc_now_iso()
    record = PollutionResponse.model_validate(data)
    return Pollution(
        id=record.id,
        name=record.name,
        type=record.type,
        city=record.city,
        level=record.level,
        recorded_at=record.recorded_at,
        status=record.status,
        description=record.description,
    )


def dump_pollutions(pollutions: list[Pollution]) -> str:
    return json.dumps([p.to_dict() for p in pollutions], ensure_ascii=False)


def save_pollutions(storage: KeyValueStorage, pollutions: list[Pollution], key: str = DEFAULT_STORAGE_KEY) -> None:
    try:
        storage.set_item(key, dump_pollutions(pollutions))
    except (OSError, TypeError, ValueError) as exc:
        raise TransportError(f"Could not persist pollutions: {exc}") from exc


def _seed(storage: KeyValueStorage, key: str, seed: bool) -> list[Pollution]:
    pollutions = seed_pollutions() if seed else []
    try:
        save_pollutions(storage, pollutions, key)
    except TransportError as exc:
        logger.warning("%s", exc)
    return pollutions


def load_pollutions(storage: KeyValueStorage, key: str = DEFAULT_STORAGE_KEY, seed: bool = True) -> list[Pollution]:
    """
    Read the stored collection. Missing, empty or unreadable data is
    replaced by the default dataset, which is written back.
    """
    try:
        raw = storage.get_item(key)
    except (OSError, ValueError) as exc:
        logger.error("Could not read stored pollutions, using default data: %s", exc)
        return _seed(storage, key, seed)

    if not raw:
        logger.info("No stored pollutions under %s, seeding default data", key)
        return _seed(storage, key, seed)

    try:
        parsed = json.loads(raw)
        if not isinstance(parsed, list) or not parsed:
            raise ValueError("stored pollutions are not a non-empty list")
        return [pollution_from_dict(item) for item in parsed]
    except (ValueError, TypeError, PydanticValidationError) as exc:
        logger.error("Stored pollutions are corrupt, using default data: %s", exc)
        return _seed(storage, key, seed)
