# =============================================================================
# seo_core/errors/__init__.py
# Centralized Error Handling for SEO Manager
# =============================================================================

from .exceptions import (
    SeoManagerError,
    RecordStoreError,
    DuplicateRecordError,
    RecordNotFoundError,
    CacheStorageError,
    AuthorizationError,
    DataValidationError,
    ResearchError,
    SubscriptionLimitError,
    ConfigurationError,
)

from .handlers import (
    handle_error,
    safe_execute,
    ErrorContext,
    error_boundary,
)

__all__ = [
    # Exceptions
    "SeoManagerError",
    "RecordStoreError",
    "DuplicateRecordError",
    "RecordNotFoundError",
    "CacheStorageError",
    "AuthorizationError",
    "DataValidationError",
    "ResearchError",
    "SubscriptionLimitError",
    "ConfigurationError",
    # Handlers
    "handle_error",
    "safe_execute",
    "ErrorContext",
    "error_boundary",
]
