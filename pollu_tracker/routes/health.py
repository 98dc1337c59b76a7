from fastapi import APIRouter, Depends

from pollu_tracker.controllers.pollution_controller import PollutionService
from pollu_tracker.core.dependencies import get_pollution_service

router = APIRouter()


@router.get("/health")
def health(service: PollutionService = Depends(get_pollution_service)):
    """Liveness check with the current record count"""
    return {"status": "ok", "records": service.count()}
