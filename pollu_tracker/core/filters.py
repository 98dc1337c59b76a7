from typing import Any, Iterable, Mapping

from pollu_tracker.models.pollution_model import Pollution
from pollu_tracker.schemas.pollution_schema import PollutionFilters


def coerce_filters(filters: PollutionFilters | Mapping[str, Any] | None) -> PollutionFilters:
    if filters is None:
        return PollutionFilters()
    if isinstance(filters, PollutionFilters):
        return filters
    return PollutionFilters.model_validate(dict(filters))


def search_haystack(pollution: Pollution) -> str:
    return " ".join(
        [
            pollution.name,
            pollution.description,
            pollution.city,
            pollution.type.value,
            pollution.status.value,
        ]
    ).lower()


def matches(pollution: Pollution, criteria: PollutionFilters) -> bool:
    if criteria.search is not None and criteria.search.lower() not in search_haystack(pollution):
        return False
    if criteria.type is not None and pollution.type.value != criteria.type:
        return False
    if criteria.city is not None and criteria.city.lower() not in pollution.city.lower():
        return False
    if criteria.status is not None and pollution.status.value != criteria.status:
        return False
    if pollution.level is not None:
        if criteria.min_level is not None and pollution.level < criteria.min_level:
            return False
        if criteria.max_level is not None and pollution.level > criteria.max_level:
            return False
    return True


def apply_filters(
    pollutions: Iterable[Pollution],
    filters: PollutionFilters | Mapping[str, Any] | None = None,
) -> list[Pollution]:
    """Return the pollutions matching every supplied criterion, in input order."""
    criteria = coerce_filters(filters)
    if criteria.is_empty():
        return list(pollutions)
    return [pollution for pollution in pollutions if matches(pollution, criteria)]
