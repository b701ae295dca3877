"""
Application exception hierarchy.

Every error that can end an ingestion request derives from AppError and
carries the HTTP status the API layer answers with.
"""


class AppError(Exception):
    """Base exception for the application."""

    status_code: int = 500

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


# =============================================================================
# Track file errors
# =============================================================================

class ParseError(AppError):
    """Track file is not well-formed GPX."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message, code="PARSE_ERROR")


class FileTooLargeError(AppError):
    """Track file exceeds the configured size bound."""

    status_code = 413

    def __init__(self, size: int, max_bytes: int) -> None:
        super().__init__(
            f"File too large ({size} bytes, max {max_bytes})",
            code="FILE_TOO_LARGE",
        )
        self.size = size
        self.max_bytes = max_bytes


class EmptyTrackError(AppError):
    """Track file parsed but contains no trackpoints."""

    status_code = 400

    def __init__(self, message: str = "No trackpoints found in GPX file") -> None:
        super().__init__(message, code="EMPTY_TRACK")


class InsufficientPointsError(AppError):
    """Route analysis needs at least two points."""

    status_code = 422

    def __init__(self, count: int) -> None:
        super().__init__(
            f"Route must have at least 2 points (got {count})",
            code="INSUFFICIENT_POINTS",
        )
        self.count = count


# =============================================================================
# Access errors
# =============================================================================

class AuthenticationError(AppError):
    """Missing or unknown credential."""

    status_code = 401

    def __init__(self, message: str = "Invalid or missing credentials") -> None:
        super().__init__(message, code="UNAUTHENTICATED")


class UnauthorizedError(AppError):
    """Caller does not own the target entity."""

    status_code = 403

    def __init__(self, tour_id: str) -> None:
        super().__init__(
            f"Unauthorized to modify tour {tour_id}",
            code="UNAUTHORIZED",
        )
        self.tour_id = tour_id


class NotFoundError(AppError):
    """Requested record does not exist."""

    status_code = 404

    def __init__(self, message: str) -> None:
        super().__init__(message, code="NOT_FOUND")


class RateLimitExceededError(AppError):
    """Too many uploads inside the sliding window."""

    status_code = 429

    def __init__(self, limit: int, window_minutes: int, retry_after_seconds: int) -> None:
        super().__init__(
            f"Upload limit reached ({limit} per {window_minutes} min), "
            f"retry in {retry_after_seconds}s",
            code="RATE_LIMITED",
        )
        self.limit = limit
        self.window_minutes = window_minutes
        self.retry_after_seconds = retry_after_seconds


# =============================================================================
# Infrastructure errors
# =============================================================================

class StorageFailure(AppError):
    """Persisting the uploaded file failed."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message, code="STORAGE_FAILURE")
