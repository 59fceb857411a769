"""
Error taxonomy for the ixforge API.

Every failure the service reports is an :class:`APIError`.  Each one
renders to the same envelope, ``{"success": false, "error": <message>}``,
independently of the HTTP library that carries it.
"""

from __future__ import annotations

MALFORMED_REQUEST_MESSAGE = "Invalid JSON format or structure"
INTERNAL_FAULT_MESSAGE = "Request processing error"


class APIError(Exception):
    """Base class for errors surfaced to API callers."""

    status = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"success": False, "error": self.message}


class MalformedRequest(APIError):
    """The body is not JSON or does not decode into the expected fields.

    ``detail`` is kept for logs only; callers always see the fixed message.
    """

    def __init__(self, detail: str = ""):
        super().__init__(MALFORMED_REQUEST_MESSAGE)
        self.detail = detail


class InvalidAddress(APIError):
    """An address field failed codec validation."""

    def __init__(self, field: str, label: str | None = None):
        super().__init__(f"Invalid {label or field}")
        self.field = field


class InstructionBuildFailed(APIError):
    """A builder rejected inputs that had already been validated."""

    def __init__(self, action: str, reason: str):
        super().__init__(f"Failed to create {action} instruction: {reason}")
        self.reason = reason


class InternalFault(APIError):
    """Unanticipated failure; the cause is logged, never returned."""

    status = 500

    def __init__(self):
        super().__init__(INTERNAL_FAULT_MESSAGE)


def success_envelope(data: dict) -> dict:
    return {"success": True, "data": data}
