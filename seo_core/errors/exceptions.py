# =============================================================================
# seo_core/errors/exceptions.py
# Custom Exception Hierarchy for SEO Manager
# =============================================================================

from typing import Optional, Dict, Any, Iterable


class SeoManagerError(Exception):
    """
    Base exception for all SEO Manager errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (e.g., "STORE_001")
        details: Additional context as a dictionary
        recoverable: Whether the error can be recovered from
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = True,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "SEO_000"
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        base = f"[{self.code}] {self.message}"
        if self.details:
            base += f" | Details: {self.details}"
        return base

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization"""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


# =============================================================================
# RECORD STORE EXCEPTIONS
# =============================================================================

class RecordStoreError(SeoManagerError):
    """Raised when a remote store call (select, count, insert, ...) fails"""

    def __init__(
        self,
        message: str,
        table: Optional[str] = None,
        operation: Optional[str] = None,
        db_code: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if table:
            details["table"] = table
        if operation:
            details["operation"] = operation
        if db_code:
            details["db_code"] = db_code
        self.db_code = db_code

        super().__init__(
            message=message,
            code=kwargs.pop("code", "STORE_001"),
            details=details,
            **kwargs,
        )


class DuplicateRecordError(RecordStoreError):
    """Raised when an insert violates a unique constraint (Postgres 23505)"""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("db_code", "23505")
        super().__init__(message, code="STORE_002", **kwargs)


class RecordNotFoundError(RecordStoreError):
    """Raised when a single-record lookup or update matches nothing"""

    def __init__(self, message: str, record_id: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if record_id:
            details["record_id"] = record_id
        super().__init__(message, code="STORE_003", details=details, **kwargs)


# =============================================================================
# CACHE EXCEPTIONS
# =============================================================================

class CacheStorageError(SeoManagerError):
    """Raised by a storage backend when a read or write cannot complete"""

    def __init__(self, message: str, key: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if key:
            details["key"] = key

        super().__init__(
            message=message,
            code="CACHE_001",
            details=details,
            **kwargs,
        )


# =============================================================================
# AUTHORIZATION / VALIDATION EXCEPTIONS
# =============================================================================

class AuthorizationError(SeoManagerError):
    """Raised when the current user's role does not permit an operation"""

    def __init__(
        self,
        message: str,
        role: Optional[str] = None,
        required: Optional[Iterable[str]] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if role:
            details["role"] = role
        if required:
            details["required"] = sorted(required)

        super().__init__(
            message=message,
            code="AUTH_001",
            details=details,
            **kwargs,
        )


class DataValidationError(SeoManagerError):
    """Raised when user input fails validation checks"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field

        super().__init__(
            message=message,
            code="DATA_001",
            details=details,
            **kwargs,
        )


# =============================================================================
# SERVICE EXCEPTIONS
# =============================================================================

class ResearchError(SeoManagerError):
    """Raised when the generative research API cannot produce a result"""

    def __init__(self, message: str, attempts: Optional[int] = None, **kwargs):
        details = kwargs.pop("details", {})
        if attempts is not None:
            details["attempts"] = attempts

        super().__init__(
            message=message,
            code="AI_001",
            details=details,
            **kwargs,
        )


class SubscriptionLimitError(SeoManagerError):
    """Raised when a broadcaster topic already has its maximum subscribers"""

    def __init__(self, message: str, topic: Optional[str] = None, limit: Optional[int] = None, **kwargs):
        details = kwargs.pop("details", {})
        if topic:
            details["topic"] = topic
        if limit is not None:
            details["limit"] = limit

        super().__init__(
            message=message,
            code="BUS_001",
            details=details,
            **kwargs,
        )


# =============================================================================
# CONFIGURATION EXCEPTIONS
# =============================================================================

class ConfigurationError(SeoManagerError):
    """Raised when configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        expected_type: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key
        if expected_type:
            details["expected_type"] = expected_type

        super().__init__(
            message=message,
            code="CONFIG_001",
            details=details,
            recoverable=False,
            **kwargs,
        )
