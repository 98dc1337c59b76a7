"""
CRUD service for pollutions.

``PollutionService`` runs against the in-process ``PollutionStore``;
``pollu_tracker.clients.pollution_client.RemotePollutionService`` offers the
same contract over the HTTP API. Both remember the last filters passed to
``load`` and recompute ``visible`` after every mutation.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from pollu_tracker.core.errors import TransportError, ValidationError
from pollu_tracker.core.filters import apply_filters, coerce_filters
from pollu_tracker.core.storage import (
    DEFAULT_STORAGE_KEY,
    KeyValueStorage,
    load_pollutions,
    save_pollutions,
)
from pollu_tracker.models.pollution_model import Pollution
from pollu_tracker.repositories.pollution_repo import PollutionStore
from pollu_tracker.schemas.pollution_schema import (
    CREATE_REQUIRED_FIELDS,
    PollutionCreate,
    PollutionFilters,
    PollutionUpdate,
    to_wire_keys,
)

logger = logging.getLogger(__name__)

Payload = Mapping[str, Any] | BaseModel
Filters = PollutionFilters | Mapping[str, Any] | None


def normalize_payload(payload: Payload) -> dict[str, Any]:
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(by_alias=True, exclude_unset=True)
    return to_wire_keys(dict(payload))


def require_fields(payload: Mapping[str, Any], fields: list[str]) -> None:
    """Raise ValidationError for the first field that is missing, None or ''."""
    for field in fields:
        value = payload.get(field)
        if value is None or value == "":
            raise ValidationError.missing(field)


def _reject_blank_supplied(payload: Mapping[str, Any], fields: list[str]) -> None:
    for field in fields:
        if field in payload and (payload[field] is None or payload[field] == ""):
            raise ValidationError.missing(field)


def fields_for_update(fields: list[str], current: Pollution) -> list[str]:
    """Records stored without a level may keep an empty one on update."""
    if current.level is None:
        return [field for field in fields if field != "level"]
    return list(fields)


def parse_model(model_cls: type[BaseModel], payload: Mapping[str, Any]) -> BaseModel:
    try:
        return model_cls.model_validate(dict(payload))
    except PydanticValidationError as exc:
        error = exc.errors()[0]
        loc = error.get("loc") or ("body",)
        raise ValidationError(str(loc[0])) from exc


def parse_filters(filters: Filters) -> PollutionFilters:
    try:
        return coerce_filters(filters)
    except PydanticValidationError as exc:
        loc = exc.errors()[0].get("loc") or ("filters",)
        raise ValidationError(str(loc[0])) from exc


class BasePollutionService(ABC):
    """Shared state: last filters and the derived visible collection."""

    def __init__(self):
        self._state_lock = threading.RLock()
        self._last_filters = PollutionFilters()
        self._visible: list[Pollution] = []

    @property
    def last_filters(self) -> PollutionFilters:
        return self._last_filters

    @property
    def visible(self) -> list[Pollution]:
        with self._state_lock:
            return [p.copy() for p in self._visible]

    @abstractmethod
    def load(self, filters: Filters = None) -> list[Pollution]: ...

    @abstractmethod
    def get_by_id(self, pollution_id: str) -> Pollution: ...

    @abstractmethod
    def create(self, payload: Payload) -> Pollution: ...

    @abstractmethod
    def update(self, pollution_id: str, payload: Payload) -> Pollution: ...

    @abstractmethod
    def delete(self, pollution_id: str) -> None: ...


class PollutionService(BasePollutionService):
    def __init__(
        self,
        store: Optional[PollutionStore] = None,
        storage: Optional[KeyValueStorage] = None,
        storage_key: str = DEFAULT_STORAGE_KEY,
    ):
        super().__init__()
        self.store = store if store is not None else PollutionStore()
        self.storage = storage
        self.storage_key = storage_key
        self._visible = self.store.all()

    @classmethod
    def from_storage(
        cls,
        storage: KeyValueStorage,
        storage_key: str = DEFAULT_STORAGE_KEY,
        seed: bool = True,
    ) -> "PollutionService":
        pollutions = load_pollutions(storage, storage_key, seed=seed)
        logger.info("Loaded %d pollutions from storage key %s", len(pollutions), storage_key)
        return cls(PollutionStore(pollutions), storage=storage, storage_key=storage_key)

    def count(self) -> int:
        return len(self.store)

    def query(self, filters: Filters = None) -> list[Pollution]:
        """Filter the current collection without touching ``last_filters``."""
        criteria = parse_filters(filters)
        logger.debug("Querying pollutions with %s", criteria.model_dump(exclude_none=True))
        return apply_filters(self.store.all(), criteria)

    def load(self, filters: Filters = None) -> list[Pollution]:
        criteria = parse_filters(filters)
        with self._state_lock:
            self._last_filters = criteria
            self._refresh()
            return self.visible

    def get_by_id(self, pollution_id: str) -> Pollution:
        return self.store.get(pollution_id)

    def create(self, payload: Payload) -> Pollution:
        data = normalize_payload(payload)
        require_fields(data, CREATE_REQUIRED_FIELDS)
        model = parse_model(PollutionCreate, data)
        with self._state_lock:
            pollution = self.store.insert(model.model_dump())
            self._after_mutation()
        return pollution

    def update(self, pollution_id: str, payload: Payload) -> Pollution:
        data = normalize_payload(payload)
        # Fail on unknown ids before looking at the payload.
        current = self.store.get(pollution_id)
        if current.level is None and data.get("level") == "":
            data["level"] = None
        _reject_blank_supplied(data, fields_for_update(CREATE_REQUIRED_FIELDS, current))
        model = parse_model(PollutionUpdate, data)
        with self._state_lock:
            pollution = self.store.update(pollution_id, model.model_dump(exclude_unset=True))
            self._after_mutation()
        return pollution

    def delete(self, pollution_id: str) -> None:
        with self._state_lock:
            self.store.delete(pollution_id)
            self._after_mutation()

    def _after_mutation(self) -> None:
        self._persist()
        self._refresh()

    def _refresh(self) -> None:
        self._visible = apply_filters(self.store.all(), self._last_filters)

    def _persist(self) -> None:
        if self.storage is None:
            return
        try:
            save_pollutions(self.storage, self.store.all(), self.storage_key)
        except TransportError as exc:
            logger.warning("Pollution change kept in memory only: %s", exc)
