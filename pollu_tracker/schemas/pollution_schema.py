from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_serializer, field_validator
from pydantic.alias_generators import to_camel
from typing import Any, Optional

from pollu_tracker.core.timestamps import normalize_timestamp
from pollu_tracker.models.enums import PollutionStatus, PollutionType
from pollu_tracker.models.pollution_model import wire_level


# Fields the HTTP API requires on POST and PUT bodies.
API_REQUIRED_FIELDS = [
    "name",
    "type",
    "city",
    "level",
    "recordedAt",
    "status",
    "description",
]

# Fields the service requires on create; recordedAt defaults to now.
CREATE_REQUIRED_FIELDS = [
    "name",
    "type",
    "city",
    "level",
    "status",
    "description",
]

_PYTHON_TO_WIRE = {
    "recorded_at": "recordedAt",
    "min_level": "minLevel",
    "max_level": "maxLevel",
}


def to_wire_keys(payload: dict[str, Any]) -> dict[str, Any]:
    """Rename snake_case keys to the camelCase names used on the wire."""
    return {_PYTHON_TO_WIRE.get(key, key): value for key, value in payload.items()}


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class PollutionCreate(_CamelModel):
    name: str = Field(..., min_length=1)
    type: PollutionType
    city: str = Field(..., min_length=1)
    level: Optional[float] = Field(None, ge=0)
    recorded_at: Optional[str] = None
    status: PollutionStatus
    description: str = Field(..., min_length=1)

    @field_validator("recorded_at", mode="before")
    @classmethod
    def _normalize_recorded_at(cls, value):
        if value is None or value == "":
            return None
        return normalize_timestamp(value)


class PollutionUpdate(_CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    type: Optional[PollutionType] = None
    city: Optional[str] = Field(None, min_length=1)
    level: Optional[float] = Field(None, ge=0)
    recorded_at: Optional[str] = None
    status: Optional[PollutionStatus] = None
    description: Optional[str] = Field(None, min_length=1)

    @field_validator("recorded_at", mode="before")
    @classmethod
    def _normalize_recorded_at(cls, value):
        if value is None or value == "":
            return None
        return normalize_timestamp(value)


class PollutionResponse(_CamelModel):
    id: str
    name: str
    type: PollutionType
    city: str
    level: Optional[float] = None
    recorded_at: str
    status: PollutionStatus
    description: str

    @field_validator("recorded_at", mode="before")
    @classmethod
    def _normalize_recorded_at(cls, value):
        return normalize_timestamp(value)

    @field_serializer("level")
    def _serialize_level(self, value: Optional[float]):
        return wire_level(value)


class PollutionFilters(_CamelModel):
    """
    Query criteria. Blank strings, None and non-numeric level bounds all
    mean "not specified".

    ``type`` and ``status`` stay plain strings: an unknown value simply
    matches nothing.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    search: Optional[str] = None
    type: Optional[str] = None
    city: Optional[str] = None
    status: Optional[str] = None
    min_level: Optional[float] = None
    max_level: Optional[float] = None

    @field_validator("*", mode="before")
    @classmethod
    def _blank_is_unset(cls, value, info: ValidationInfo):
        if isinstance(value, str) and value == "":
            return None
        # Unparseable level bounds filter nothing out.
        if info.field_name in ("min_level", "max_level") and isinstance(value, str):
            try:
                return float(value)
            except ValueError:
                return None
        if isinstance(value, PollutionType | PollutionStatus):
            return value.value
        return value

    def is_empty(self) -> bool:
        return all(value is None for value in self.model_dump().values())

    def to_query_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        for key, value in self.model_dump(by_alias=True).items():
            if value is None:
                continue
            if isinstance(value, float) and value.is_integer():
                value = int(value)
            params[key] = str(value)
        return params
