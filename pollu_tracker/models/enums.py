from enum import Enum as PyEnum


class PollutionType(str, PyEnum):
    AIR = "air"
    WATER = "water"
    SOIL = "soil"
    CHEMICAL = "chemical"
    PLASTIC = "plastic"
    WILD_DUMPING = "wild_dumping"
    NOISE = "noise"
    OTHER = "other"


class PollutionStatus(str, PyEnum):
    OPEN = "open"
    INVESTIGATING = "investigating"
    RESOLVED = "resolved"
