"""Error taxonomy shared by services and routers.

Services raise these; routers translate them into HTTP responses.
Validation and not-found errors subclass ValueError so callers that only
care about "bad input" can keep catching ValueError.
"""


class HabitualError(Exception):
    """Base class for service errors."""


class GoalValidationError(HabitualError, ValueError):
    """A required field is missing or malformed. Nothing was written."""


class NotFoundError(HabitualError, ValueError):
    """A referenced goal id or day number does not exist."""


class GenerationFailure(HabitualError):
    """The plan generator returned nothing usable. Nothing was written."""


class StoreFailure(HabitualError):
    """The underlying persistence operation failed."""
