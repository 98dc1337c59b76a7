from __future__ import annotations

import uuid

from pollu_tracker.models.enums import PollutionStatus, PollutionType
from pollu_tracker.models.pollution_model import Pollution


SEED_POLLUTIONS = [
    {
        "name": "Usine chimique de la zone Nord",
        "type": PollutionType.AIR,
        "city": "Lyon",
        "level": 87,
        "recorded_at": "2024-02-15T09:20:00.000Z",
        "status": PollutionStatus.INVESTIGATING,
        "description": (
            "Des pics répétés de dioxyde de soufre ont été détectés autour de "
            "l'usine chimique depuis début février."
        ),
    },
    {
        "name": "Déchets plastiques sur la plage de Malo",
        "type": PollutionType.PLASTIC,
        "city": "Dunkerque",
        "level": None,
        "recorded_at": "2024-03-08T08:10:00.000Z",
        "status": PollutionStatus.OPEN,
        "description": (
            "Accumulation de filets, de bouteilles et de microplastiques sur "
            "500 mètres de littoral après une tempête."
        ),
    },
    {
        "name": "Déversement dans la rivière Clarin",
        "type": PollutionType.WATER,
        "city": "Nantes",
        "level": 65,
        "recorded_at": "2024-03-04T11:00:00.000Z",
        "status": PollutionStatus.OPEN,
        "description": (
            "Un film huileux recouvre la surface de la rivière, avec mortalité "
            "de poissons observée sur 300 mètres."
        ),
    },
    {
        "name": "Décharge sauvage forêt de Verrières",
        "type": PollutionType.WILD_DUMPING,
        "city": "Versailles",
        "level": 45,
        "recorded_at": "2024-01-28T14:30:00.000Z",
        "status": PollutionStatus.OPEN,
        "description": (
            "Accumulation de déchets industriels près d’un site Natura 2000 "
            "avec risques de lixiviation."
        ),
    },
    {
        "name": "Bruit nocturne zone logistique",
        "type": PollutionType.NOISE,
        "city": "Lille",
        "level": 72,
        "recorded_at": "2024-02-22T22:15:00.000Z",
        "status": PollutionStatus.INVESTIGATING,
        "description": (
            "Des convois nocturnes dépassent les niveaux réglementaires de "
            "bruit entre 22h et 2h."
        ),
    },
    {
        "name": "Pesticides dans les cultures",
        "type": PollutionType.OTHER,
        "city": "Bordeaux",
        "level": 38,
        "recorded_at": "2024-03-10T07:45:00.000Z",
        "status": PollutionStatus.RESOLVED,
        "description": (
            "Dépassement ponctuel de résidus de pesticides dans les cultures "
            "viticoles, mesures correctives appliquées."
        ),
    },
]


def seed_pollutions() -> list[Pollution]:
    """Fresh copies of the default dataset, each with a new id."""
    return [Pollution(id=str(uuid.uuid4()), **item) for item in SEED_POLLUTIONS]
