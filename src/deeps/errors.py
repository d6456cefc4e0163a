class DeepsError(Exception):
    """Base error for The Deeps world-generation domain."""


class FloorLevelOutOfRangeError(DeepsError, ValueError):
    """Raised when a floor level outside [1, total_floors] is requested."""

    def __init__(self, level: int, total_floors: int) -> None:
        self.level = level
        self.total_floors = total_floors
        super().__init__(f"floor level out of range: {level} (dungeon has {total_floors} floors)")


class OutOfBoundsError(DeepsError, IndexError):
    """Raised when a tile read or gameplay mutation targets a coordinate off the floor."""


class EntityNotFoundError(DeepsError, KeyError):
    """Raised when a mob, item or character id is not present on a floor or in a dungeon."""


class TileOccupiedError(DeepsError):
    """Raised when placing an occupant on a tile that cannot take it."""


class NotWalkableError(DeepsError):
    """Raised when placing an occupant on a non-walkable tile."""


class DungeonNotFoundError(DeepsError, KeyError):
    """Raised when a dungeon id is unknown to the repository."""


class ConfigError(DeepsError):
    """Raised when a configuration document fails to parse or validate."""


class PayloadValidationError(DeepsError):
    """Raised when a serialized floor does not match the wire schema."""

    def __init__(self, problems) -> None:
        self.problems = list(problems)
        lines = ["Serialized floor failed schema validation:"] + [f" - {p}" for p in self.problems]
        super().__init__("\n".join(lines))
