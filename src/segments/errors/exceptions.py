"""Custom exception classes for the segments service."""


class SegmentsError(Exception):
    """Base exception for the segments service."""

    def __init__(self, code: str, message: str, details=None, status_code: int = 500):
        self.code = code
        self.message = message
        self.details = details
        self.status_code = status_code
        super().__init__(message)


class ValidationError(SegmentsError):
    """Missing or invalid input field."""

    def __init__(self, message: str, details=None):
        super().__init__("VALIDATION_ERROR", message, details, status_code=400)


class ParentNotFoundError(SegmentsError):
    """A referenced parent segment does not exist."""

    def __init__(self, message: str, details=None):
        super().__init__("REFERENCE_ERROR", message, details, status_code=400)


class NotFoundError(SegmentsError):
    """Resource not found."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            "NOT_FOUND",
            f"{resource} '{resource_id}' not found",
            details={"resource": resource, "id": resource_id},
            status_code=404,
        )
        self.resource_id = resource_id


class ConflictError(SegmentsError):
    """Resource state conflict."""

    def __init__(self, message: str, details=None):
        super().__init__("CONFLICT", message, details, status_code=409)
