from fastapi import APIRouter, Body, Depends, Query, Response, status
from typing import Any, Optional

from pollu_tracker.controllers.pollution_controller import (
    PollutionService,
    fields_for_update,
    require_fields,
)
from pollu_tracker.core.dependencies import get_pollution_service
from pollu_tracker.models.pollution_model import Pollution
from pollu_tracker.schemas.pollution_schema import API_REQUIRED_FIELDS, PollutionResponse


router = APIRouter(prefix="/api/pollutions", tags=["pollutions"])


def _to_response(pollution: Pollution) -> PollutionResponse:
    return PollutionResponse.model_validate(pollution.to_dict())


@router.get("", response_model=list[PollutionResponse])
def list_pollutions(
    search: Optional[str] = Query(default=None),
    type: Optional[str] = Query(default=None),
    city: Optional[str] = Query(default=None),
    status_: Optional[str] = Query(default=None, alias="status"),
    min_level: Optional[str] = Query(default=None, alias="minLevel"),
    max_level: Optional[str] = Query(default=None, alias="maxLevel"),
    service: PollutionService = Depends(get_pollution_service),
):
    """List pollutions matching the query filters"""
    filters = {
        "search": search,
        "type": type,
        "city": city,
        "status": status_,
        "minLevel": min_level,
        "maxLevel": max_level,
    }
    return [_to_response(p) for p in service.query(filters)]


@router.get("/{pollution_id}", response_model=PollutionResponse)
def get_pollution(pollution_id: str, service: PollutionService = Depends(get_pollution_service)):
    """Get pollution by ID"""
    return _to_response(service.get_by_id(pollution_id))


@router.post("", response_model=PollutionResponse, status_code=status.HTTP_201_CREATED)
def create_pollution(
    payload: Optional[dict[str, Any]] = Body(default=None),
    service: PollutionService = Depends(get_pollution_service),
):
    """Create a pollution"""
    body = payload or {}
    require_fields(body, API_REQUIRED_FIELDS)
    return _to_response(service.create(body))


@router.put("/{pollution_id}", response_model=PollutionResponse)
def update_pollution(
    pollution_id: str,
    payload: Optional[dict[str, Any]] = Body(default=None),
    service: PollutionService = Depends(get_pollution_service),
):
    """Update a pollution"""
    current = service.get_by_id(pollution_id)
    body = payload or {}
    require_fields(body, fields_for_update(API_REQUIRED_FIELDS, current))
    return _to_response(service.update(pollution_id, body))


@router.delete("/{pollution_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_pollution(pollution_id: str, service: PollutionService = Depends(get_pollution_service)):
    """Delete a pollution"""
    service.delete(pollution_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
