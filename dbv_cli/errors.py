"""Error types for dbv."""

from typing import Optional, Dict, Any


class DbvError(Exception):
    """Base exception for dbv errors."""

    def __init__(self, message: str, code: str = "DBV_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for structured output."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class InvalidConnectionString(DbvError):
    """The database URL could not be parsed."""

    def __init__(self, url: str, reason: str):
        super().__init__(
            f"Invalid connection string: {reason}",
            code="INVALID_CONNECTION_STRING",
            details={"reason": reason},
        )
        # The raw URL may carry credentials, keep it off the message
        self.url = url
        self.reason = reason


class UnsupportedBackend(DbvError):
    """The URL scheme does not map to a supported backend family."""

    def __init__(self, scheme: str):
        super().__init__(
            f"Unsupported database scheme: {scheme}",
            code="UNSUPPORTED_BACKEND",
            details={"scheme": scheme},
        )
        self.scheme = scheme


class ExtractionFailed(DbvError):
    """An introspection step failed or returned unexpected data.

    Carries the step name (``tables``, ``columns``, ``primary_keys``,
    ``views``, ``foreign_keys``), the table or view being processed when
    there is one, and the underlying cause.
    """

    def __init__(self, step: str, cause: Exception, name: Optional[str] = None):
        target = f" for '{name}'" if name else ""
        super().__init__(
            f"Schema extraction failed at step '{step}'{target}: {cause}",
            code="EXTRACTION_FAILED",
            details={"step": step, "name": name, "cause": repr(cause)},
        )
        self.step = step
        self.name = name
        self.cause = cause


class UnsupportedFormat(DbvError):
    """Requested output format has no renderer."""

    def __init__(self, fmt: str, valid_formats):
        valid = ", ".join(valid_formats)
        super().__init__(
            f"Invalid format '{fmt}'. Valid formats: {valid}",
            code="UNSUPPORTED_FORMAT",
            details={"format": fmt, "valid_formats": list(valid_formats)},
        )
        self.format = fmt
