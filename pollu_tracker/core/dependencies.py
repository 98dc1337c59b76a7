import logging
from typing import Optional

from pollu_tracker.controllers.pollution_controller import PollutionService
from pollu_tracker.core.config import Settings, get_settings
from pollu_tracker.core.storage import FileStorage
from pollu_tracker.models.seed import seed_pollutions
from pollu_tracker.repositories.pollution_repo import PollutionStore

logger = logging.getLogger(__name__)

_service: Optional[PollutionService] = None


def build_pollution_service(settings: Optional[Settings] = None) -> PollutionService:
    settings = settings or get_settings()
    if settings.storage_path:
        logger.info("Persisting pollutions to %s", settings.storage_path)
        return PollutionService.from_storage(
            FileStorage(settings.storage_path),
            storage_key=settings.storage_key,
            seed=settings.seed_on_empty,
        )
    # Without a storage path the collection lives in memory only.
    pollutions = seed_pollutions() if settings.seed_on_empty else []
    return PollutionService(PollutionStore(pollutions))


def get_pollution_service() -> PollutionService:
    global _service
    if _service is None:
        _service = build_pollution_service()
    return _service
