"""
Error kinds raised by the pollution store and services.

The service layer raises these instead of HTTP exceptions so the same
contract holds in-process and over HTTP. ``pollu_tracker.main`` maps them
to ``{"message": ...}`` responses.
"""


class PollutionError(Exception):
    """Base class for pollution tracker errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(PollutionError):
    status_code = 404

    def __init__(self, pollution_id: str, message: str = "Pollution not found"):
        super().__init__(message)
        self.pollution_id = pollution_id


class ValidationError(PollutionError):
    status_code = 400

    def __init__(self, field: str, message: str | None = None):
        super().__init__(message or f"Invalid field: {field}")
        self.field = field

    @classmethod
    def missing(cls, field: str) -> "ValidationError":
        return cls(field, f"Missing field: {field}")


class TransportError(PollutionError):
    """Network or storage I/O failure."""

    status_code = 502
