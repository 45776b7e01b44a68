"""OpenStreetMap API specific exceptions."""


class OSMApiError(Exception):
    """Base exception for OpenStreetMap API operations."""

    pass


class OSMApiConnectionError(OSMApiError):
    """Raised when the API cannot be reached."""

    pass


class OSMApiValidationError(OSMApiError):
    """Raised when request parameters are invalid."""

    pass


class OSMApiResponseError(OSMApiError):
    """Raised when the API answers with a non-success status."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code
