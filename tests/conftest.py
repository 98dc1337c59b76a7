import os

os.environ.setdefault("POLLUTIONS_SEED", "true")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from pollu_tracker.controllers.pollution_controller import PollutionService
from pollu_tracker.core.dependencies import get_pollution_service
from pollu_tracker.main import app
from pollu_tracker.models.enums import PollutionStatus, PollutionType
from pollu_tracker.models.pollution_model import Pollution
from pollu_tracker.repositories.pollution_repo import PollutionStore


def make_pollution(**overrides) -> Pollution:
    base = {
        "id": "a",
        "name": "Usine chimique de la zone Nord",
        "type": PollutionType.AIR,
        "city": "Lyon",
        "level": 87,
        "recorded_at": "2024-02-15T09:20:00.000Z",
        "status": PollutionStatus.INVESTIGATING,
        "description": "Des pics répétés de dioxyde de soufre autour de l'usine.",
    }
    base.update(overrides)
    return Pollution(**base)


def valid_payload(**overrides) -> dict:
    base = {
        "name": "Fumées d'incinérateur",
        "type": "air",
        "city": "Grenoble",
        "level": 54,
        "recordedAt": "2024-04-01T10:00:00Z",
        "status": "open",
        "description": "Panache de fumée noire observé au-dessus de l'incinérateur.",
    }
    base.update(overrides)
    return base


@pytest.fixture()
def pollutions():
    return [
        make_pollution(),
        make_pollution(
            id="b",
            name="Déversement dans la rivière Clarin",
            type=PollutionType.WATER,
            city="Nantes",
            level=65,
            recorded_at="2024-03-04T11:00:00.000Z",
            status=PollutionStatus.OPEN,
            description="Un film huileux recouvre la surface de la rivière.",
        ),
    ]


@pytest.fixture()
def store(pollutions):
    return PollutionStore(pollutions)


@pytest.fixture()
def service(store):
    return PollutionService(store)


@pytest.fixture()
def client(service):
    def override_get_service():
        return service

    app.dependency_overrides[get_pollution_service] = override_get_service
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def make_payload():
    return valid_payload


@pytest.fixture()
def unleveled_pollution():
    return make_pollution(
        id="c",
        name="Déchets plastiques sur la plage de Malo",
        type=PollutionType.PLASTIC,
        city="Dunkerque",
        level=None,
        recorded_at="2024-03-08T08:10:00.000Z",
        status=PollutionStatus.OPEN,
        description="Filets, bouteilles et microplastiques sur le littoral.",
    )


@pytest.fixture()
def mixed_service(pollutions, unleveled_pollution):
    return PollutionService(PollutionStore(pollutions + [unleveled_pollution]))
