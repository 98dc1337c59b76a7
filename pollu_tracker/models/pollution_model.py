from dataclasses import asdict, dataclass, replace
from typing import Any, Optional

from pollu_tracker.models.enums import PollutionStatus, PollutionType


def wire_level(level: Optional[float]) -> Optional[int | float]:
    """Whole levels go out as integers (87, not 87.0)."""
    if level is not None and float(level).is_integer():
        return int(level)
    return level


@dataclass
class Pollution:
    id: str
    name: str
    type: PollutionType
    city: str
    recorded_at: str
    status: PollutionStatus
    description: str
    level: Optional[float] = None

    def copy(self, **changes: Any) -> "Pollution":
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Wire representation (camelCase keys, enum values as strings)."""
        data = asdict(self)
        return {
            "id": data["id"],
            "name": data["name"],
            "type": self.type.value,
            "city": data["city"],
            "level": wire_level(data["level"]),
            "recordedAt": data["recorded_at"],
            "status": self.status.value,
            "description": data["description"],
        }
