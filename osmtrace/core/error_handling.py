"""Centralized error handling framework for OsmTrace."""

import functools
import logging
import traceback
from contextlib import contextmanager
from typing import Any, Callable, Dict, Optional, Type, TypeVar, Union

logger = logging.getLogger(__name__)

# Type variable for decorated functions
F = TypeVar("F", bound=Callable[..., Any])


class OsmTraceError(Exception):
    """Base exception for all OsmTrace errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(OsmTraceError):
    """Raised when configuration is invalid."""

    pass


class FileProcessingError(OsmTraceError):
    """Raised when an input file cannot be read."""

    pass


class DocumentParseError(OsmTraceError):
    """Raised when an OSM document cannot be turned into a Document."""

    pass


class MalformedDocumentError(DocumentParseError):
    """Raised when the input is not well-formed XML."""

    pass


class InvalidPointError(DocumentParseError):
    """Raised when a node lacks an id/lat/lon or has a non-numeric coordinate."""

    def __init__(
        self,
        message: str,
        identifier: Optional[str] = None,
        attribute: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.identifier = identifier
        self.attribute = attribute
        self.details.setdefault("identifier", identifier)
        self.details.setdefault("attribute", attribute)


class InvalidPathError(DocumentParseError):
    """Raised when a way lacks its id."""

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.position = position
        self.details.setdefault("position", position)


class ResolutionError(OsmTraceError):
    """Raised when path resolution fails."""

    pass


class DanglingReferenceError(ResolutionError):
    """Raised when a way references a node id absent from the document."""

    def __init__(self, reference: str, path_id: Optional[str] = None):
        where = f" in way '{path_id}'" if path_id is not None else ""
        super().__init__(
            f"Didn't find a node with id '{reference}'{where}",
            {"reference": reference, "path_id": path_id},
        )
        self.reference = reference
        self.path_id = path_id


def handle_errors(
    error_types: Optional[Dict[Type[Exception], Type[OsmTraceError]]] = None,
    default_error: Type[OsmTraceError] = OsmTraceError,
    log_errors: bool = True,
) -> Callable[[F], F]:
    """
    Decorator for standardized error handling.

    OsmTrace errors raised inside the wrapped function pass through untouched;
    anything else is re-raised as the mapped OsmTrace error type.

    Args:
        error_types: Mapping of exception types to OsmTrace error types
        default_error: Default error type for unmapped exceptions
        log_errors: Whether to log errors
    """
    if error_types is None:
        error_types = {}

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except OsmTraceError:
                raise
            except Exception as e:
                if log_errors:
                    logger.error(f"Error in {func.__name__}: {e}", exc_info=True)

                # Map to appropriate OsmTrace error
                error_type = default_error
                for source_type, target_type in error_types.items():
                    if isinstance(e, source_type):
                        error_type = target_type
                        break

                # Preserve original error details
                details = {
                    "original_error": str(e),
                    "original_type": type(e).__name__,
                    "function": func.__name__,
                    "traceback": traceback.format_exc(),
                }

                raise error_type(
                    f"Error in {func.__name__}: {e}", details=details
                ) from e

        return wrapper  # type: ignore[return-value]

    return decorator


@contextmanager
def error_context(operation: str, **context_kwargs):
    """
    Context manager that adds operation context to OsmTrace errors.

    The operation name and keyword context are stored in ``details`` of any
    OsmTrace error leaving the block, without overwriting keys already set.
    Other exceptions pass through untouched.

    Args:
        operation: Description of the operation being performed
        **context_kwargs: Additional context information
    """
    try:
        yield
    except OsmTraceError as e:
        logger.debug(f"Error during {operation}: {e}")
        for key, value in {"operation": operation, **context_kwargs}.items():
            e.details.setdefault(key, value)
        raise


class ErrorCollector:
    """Collects multiple errors for batch processing."""

    def __init__(self, error_type: Type[OsmTraceError] = OsmTraceError):
        self.error_type = error_type
        self.errors: list[OsmTraceError] = []

    def add_error(self, error: Union[str, OsmTraceError], **details):
        """Add an error to the collection."""
        if isinstance(error, str):
            error = self.error_type(error, details)
        elif details:
            error.details.update(details)

        self.errors.append(error)

    def has_errors(self) -> bool:
        """Check if there are any errors."""
        return len(self.errors) > 0

    def raise_if_errors(self):
        """Raise a combined error if there are any errors."""
        if self.has_errors():
            messages = [str(error) for error in self.errors]
            combined_message = "Multiple errors occurred:\n" + "\n".join(
                f"- {msg}" for msg in messages
            )

            combined_details = {
                "error_count": len(self.errors),
                "errors": [error.details for error in self.errors],
            }

            raise self.error_type(combined_message, combined_details)


# Common error type mappings
COMMON_ERROR_MAPPINGS = {
    FileNotFoundError: FileProcessingError,
    PermissionError: FileProcessingError,
    IsADirectoryError: FileProcessingError,
    UnicodeDecodeError: MalformedDocumentError,
    KeyError: ConfigurationError,
}
