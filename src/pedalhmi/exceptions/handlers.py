"""
Centralized error handling utilities.

The bridge recovers from almost everything locally: malformed frames become
a `response -1`, a dead peer is dropped, a broken bundle degrades to a
fallback description, a corrupt cache document is treated as a cold cache.
These helpers keep that recovery consistent.

## Handling Patterns

| Pattern | Code |
|---------|------|
| Log and return a fallback | `@handle_errors(operation_name="load pedals", re_raise=False, fallback_value=[])` |
| Log and re-raise | `@handle_errors(operation_name="start server", re_raise=True)` |
| Try many bundles, collect failures | `collector = collect_errors("scan bundles"); with collector.try_operation(name): ...` |
| Critical section with auto-logging | `with ErrorContext("persist plugin cache", re_raise=False): ...` |

## Layers

```
CLI            formats error.user_message / recovery_hint
  ^ PedalHmiError
Services       hmi dispatcher, plugin cache, pedalboard loader
  ^ OSError, rdflib parser errors, pydantic ValidationError
Low level      sockets, filesystem, Turtle parser
```
"""

import logging
from functools import wraps
from typing import Callable, Optional, TypeVar

from .base import PedalHmiError
from .config import ConfigFileInvalidError, ConfigValidationError

logger = logging.getLogger(__name__)

T = TypeVar('T')


def handle_errors(
    *,
    operation_name: str,
    user_notification: Optional[Callable[[str], None]] = None,
    fallback_value: Optional[T] = None,
    re_raise: bool = True,
    log_level: int = logging.ERROR
) -> Callable:
    """
    Decorator for consistent error handling.

    Args:
        operation_name: Name of the operation for logging (e.g., "load pedals")
        user_notification: Optional callback to notify user
        fallback_value: Value to return if error occurs and re_raise=False
        re_raise: Whether to re-raise the exception after handling
        log_level: Logging level for the error (default: ERROR)

    Returns:
        Decorated function
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)

            except PedalHmiError as e:
                logger.log(log_level, f"Failed to {operation_name}: {e.technical_message}")

                if user_notification:
                    user_notification(e.get_full_message())

                if re_raise:
                    raise
                return fallback_value

            except Exception as e:
                logger.log(
                    log_level,
                    f"Unexpected error during {operation_name}: {e}",
                    exc_info=True
                )

                if user_notification:
                    user_notification(f"Error: {e}")

                if re_raise:
                    raise
                return fallback_value

        return wrapper
    return decorator


class ErrorContext:
    """
    Context manager for error handling with automatic logging.

    Example:
        ```python
        with ErrorContext("persist plugin cache", re_raise=False) as ctx:
            store.save(document)

        if ctx.error:
            ...
        ```
    """

    def __init__(
        self,
        operation: str,
        logger_instance: Optional[logging.Logger] = None,
        re_raise: bool = True,
        log_level: int = logging.ERROR
    ):
        """
        Initialize error context.

        Args:
            operation: Description of the operation
            logger_instance: Logger to use (defaults to module logger)
            re_raise: Whether to re-raise exceptions
            log_level: Logging level used when an error is caught
        """
        self.operation = operation
        self.logger = logger_instance or logger
        self.re_raise = re_raise
        self.log_level = log_level
        self.error: Optional[BaseException] = None

    def __enter__(self):
        """Enter the context."""
        self.logger.debug(f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """
        Exit the context and handle any exceptions.

        Returns:
            True if exception should be suppressed, False otherwise
        """
        if exc_type is None:
            self.logger.debug(f"Completed: {self.operation}")
            return False

        if not issubclass(exc_type, Exception):
            # KeyboardInterrupt, SystemExit and friends always propagate
            return False

        self.error = exc_val

        if isinstance(exc_val, PedalHmiError):
            self.logger.log(
                self.log_level,
                f"Failed to {self.operation}: {exc_val.technical_message}"
            )
        else:
            self.logger.log(
                self.log_level,
                f"Failed to {self.operation}: {exc_val}",
                exc_info=True
            )

        return not self.re_raise


def wrap_pydantic_error(error: Exception, file_path: str) -> PedalHmiError:
    """
    Convert Pydantic validation errors to pedalhmi exceptions.

    Args:
        error: The Pydantic ValidationError
        file_path: Path to the JSON document that failed validation

    Returns:
        A ConfigurationError with appropriate type and message
    """
    from pydantic import ValidationError

    error_msg = str(error)

    if "Invalid JSON" in error_msg or "json_invalid" in error_msg:
        # Format: "Invalid JSON: <actual error> [type=json_invalid, ..."
        if "Invalid JSON:" in error_msg:
            parse_error = error_msg.split("Invalid JSON:")[1].split("[type=")[0].strip()
        else:
            parse_error = error_msg

        return ConfigFileInvalidError(file_path, parse_error)

    if isinstance(error, ValidationError):
        errors = error.errors()
        if len(errors) == 1:
            first_error = errors[0]
            field = ".".join(str(loc) for loc in first_error.get('loc', ('unknown',)))
            return ConfigValidationError(
                field=field,
                value=first_error.get('input', None),
                error_msg=first_error.get('msg', 'validation failed'),
                file_path=file_path
            )
        if errors:
            error_lines = []
            for err in errors:
                field = ".".join(str(loc) for loc in err.get('loc', ('unknown',)))
                error_lines.append(f"  - {field}: {err.get('msg', 'validation failed')}")

            return ConfigValidationError(
                field="multiple fields",
                value=None,
                error_msg=f"{len(errors)} validation errors:\n" + "\n".join(error_lines),
                file_path=file_path
            )

    return ConfigValidationError(
        field="unknown",
        value=None,
        error_msg=error_msg,
        file_path=file_path
    )


def format_error_for_display(error: Exception) -> tuple[str, Optional[str]]:
    """
    Format an exception for user display.

    Returns:
        Tuple of (user_message, recovery_hint or None)
    """
    if isinstance(error, PedalHmiError):
        return error.user_message, error.recovery_hint

    error_type = type(error).__name__
    return f"{error_type}: {error}", None


def collect_errors(operation: str) -> "ErrorCollector":
    """
    Create an error collector for batch operations.

    Example:
        ```python
        collector = collect_errors("scan bundles")

        for bundle in bundles:
            with collector.try_operation(bundle.name):
                read_manifest(bundle)

        if collector.has_errors:
            logger.warning(collector.get_summary())
        ```
    """
    return ErrorCollector(operation)


class ErrorCollector:
    """
    Collects multiple errors during batch operations.

    Allows operations to continue even if some fail, then
    report all failures at once.
    """

    def __init__(self, operation: str):
        """
        Initialize error collector.

        Args:
            operation: Description of the overall operation
        """
        self.operation = operation
        self.errors: list[tuple[str, Exception]] = []
        self.success_count = 0

    @property
    def has_errors(self) -> bool:
        """Check if any errors were collected."""
        return len(self.errors) > 0

    @property
    def error_count(self) -> int:
        """Get the number of errors collected."""
        return len(self.errors)

    def try_operation(self, sub_operation: str):
        """
        Context manager for a single operation within the batch.

        Args:
            sub_operation: Description of this specific operation

        Returns:
            Context manager that catches and stores errors
        """
        return self._OperationContext(self, sub_operation)

    def get_summary(self) -> str:
        """Get a multi-line summary of collected errors."""
        if not self.has_errors:
            return f"{self.operation}: all {self.success_count} operations succeeded"

        total = self.error_count + self.success_count
        summary = f"{self.operation}: failed {self.error_count} of {total} operations:\n"
        for sub_op, error in self.errors:
            if isinstance(error, PedalHmiError):
                summary += f"  - {sub_op}: {error.technical_message}\n"
            else:
                summary += f"  - {sub_op}: {error}\n"

        return summary.rstrip()

    class _OperationContext:
        """Internal context manager for individual operations."""

        def __init__(self, collector: "ErrorCollector", sub_operation: str):
            self.collector = collector
            self.sub_operation = sub_operation

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            if exc_type is None:
                self.collector.success_count += 1
                return False

            if not issubclass(exc_type, Exception):
                return False

            self.collector.errors.append((self.sub_operation, exc_val))
            return True
