# =============================================================================
# seo_core/services/base_service.py
# Base Service Class with Common Functionality
# =============================================================================

from __future__ import annotations
from abc import ABC
from typing import Optional, Dict, Any, Callable, Iterable
from dataclasses import dataclass

from seo_core.data.stores import Stores
from seo_core.logging import get_logger, LogContext
from seo_core.errors import handle_error, AuthorizationError, SeoManagerError

ROLES = ("admin", "editor", "viewer")
DEFAULT_ROLE = "viewer"
WRITERS = ("admin", "editor")
ADMINS = ("admin",)


def resolve_role(stores: Stores, user_id: Optional[str]) -> str:
    """Role of user_id from user_roles, 'viewer' when missing."""
    if not user_id:
        return DEFAULT_ROLE
    row = stores.user_roles.select_one("role", {"user_id": user_id})
    role = (row or {}).get("role")
    return role if role in ROLES else DEFAULT_ROLE


@dataclass
class ServiceResult:
    """
    Standard result container for service operations.

    Provides consistent structure for all service method returns.
    """
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def ok(cls, data: Any = None, metadata: Dict[str, Any] = None) -> ServiceResult:
        """Create a successful result"""
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def fail(
        cls,
        error: str,
        error_code: str = "UNKNOWN",
        metadata: Dict[str, Any] = None
    ) -> ServiceResult:
        """Create a failed result"""
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            metadata=metadata,
        )

    @classmethod
    def from_exception(cls, e: Exception) -> ServiceResult:
        """Create a failed result from an exception"""
        if isinstance(e, SeoManagerError):
            return cls(
                success=False,
                error=e.message,
                error_code=e.code,
                metadata=e.details,
            )
        return cls(
            success=False,
            error=str(e),
            error_code="EXCEPTION",
        )


class BaseService(ABC):
    """
    Abstract base class for all services.

    Provides common functionality:
    - Logging
    - Role checks against the user_roles table
    - Error handling
    - Result standardization

    Write operations raise (AuthorizationError, RecordStoreError, ...);
    pages wrap them with safe_execute() to get a ServiceResult, and the
    background queue turns them into notifications.

    Usage:
        class MyService(BaseService):
            def do_something(self, user_id):
                self.require_role(user_id, WRITERS, "do something")
                with self.log_operation("Doing something"):
                    ...
    """

    def __init__(self, stores: Stores, dev_mode: bool = False):
        self.stores = stores
        self.dev_mode = dev_mode
        self.logger = get_logger(self.__class__.__name__)

    def log_operation(self, operation: str) -> LogContext:
        """
        Create a logging context for an operation.

        Usage:
            with self.log_operation("Importing videos"):
                ...
        """
        return LogContext(self.logger, operation)

    # -------------------------------------------------------------------------
    # Roles
    # -------------------------------------------------------------------------

    def get_role(self, user_id: Optional[str]) -> str:
        return resolve_role(self.stores, user_id)

    def require_role(
        self,
        user_id: Optional[str],
        allowed: Iterable[str],
        action: str,
        relax_in_dev: bool = False,
    ) -> str:
        """
        Check the user's role before a write.

        Args:
            relax_in_dev: Let any role through when dev_mode is on

        Raises:
            AuthorizationError: If the role is not in `allowed`
        """
        if not user_id:
            raise AuthorizationError("Unauthorized: Please sign in")
        allowed = tuple(allowed)
        role = self.get_role(user_id)
        if role in allowed or (relax_in_dev and self.dev_mode):
            return role

        who = "admins" if allowed == ADMINS else " and ".join(f"{r}s" for r in allowed)
        self.logger.warning(f"User {user_id} ({role}) denied: {action}")
        raise AuthorizationError(
            f"Forbidden: Only {who} can {action}",
            role=role,
            required=allowed,
        )

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def safe_execute(
        self,
        operation: str,
        func: Callable[..., Any],
        *args,
        **kwargs
    ) -> ServiceResult:
        """
        Execute a function with error handling and logging.

        Args:
            operation: Description of the operation
            func: Function to execute
            *args, **kwargs: Arguments to pass to func

        Returns:
            ServiceResult with success/failure status
        """
        with self.log_operation(operation):
            try:
                result = func(*args, **kwargs)
                return ServiceResult.ok(result)
            except SeoManagerError as e:
                handle_error(e, show_user_message=False)
                return ServiceResult.from_exception(e)
            except Exception as e:
                self.logger.error(f"{operation} failed: {e}", exc_info=True)
                return ServiceResult.fail(str(e))
