# =============================================================================
# seo_core/errors/handlers.py
# Turning SEO Manager errors into log lines and on-page feedback
# =============================================================================
"""
Expected refusals (role checks, invalid input, duplicates, missing rows) are
shown as warnings and logged without a traceback. Store and AI failures are
shown as errors. Anything else is logged with its traceback and shown with
the caller's fallback message.

Streamlit's own control flow (st.rerun, st.stop, st.switch_page) raises
BaseException subclasses; none of the helpers here catch those.
"""

from __future__ import annotations
import functools
import traceback
from typing import Optional, Callable, TypeVar, Any, Tuple
import streamlit as st

from seo_core.logging import get_logger
from .exceptions import (
    SeoManagerError,
    AuthorizationError,
    DataValidationError,
    DuplicateRecordError,
    RecordNotFoundError,
)

logger = get_logger(__name__)

T = TypeVar("T")

# Raised for a user's own action; not a fault in the app
EXPECTED_ERRORS = (AuthorizationError, DataValidationError, DuplicateRecordError, RecordNotFoundError)


def describe_error(error: Exception, user_message: Optional[str] = None) -> Tuple[str, str]:
    """
    Pick how an error is shown.

    Returns:
        (level, text) where level is "warning", "error" or "critical"
    """
    if isinstance(error, EXPECTED_ERRORS):
        return "warning", user_message or error.message
    if isinstance(error, SeoManagerError):
        level = "error" if error.recoverable else "critical"
        return level, user_message or error.message
    return "error", user_message or str(error) or error.__class__.__name__


def _dev_mode() -> bool:
    from seo_core.config import get_settings
    return get_settings().dev_mode


def handle_error(
    error: Exception,
    show_user_message: bool = True,
    log_error: bool = True,
    user_message: Optional[str] = None,
) -> None:
    """
    Log an error and report it on the page.

    Args:
        error: The exception to handle
        show_user_message: Whether to report it on the page
        log_error: Whether to log it
        user_message: Text to show instead of the error's own message
    """
    level, message = describe_error(error, user_message)

    if isinstance(error, SeoManagerError):
        code, details = error.code, error.details
    else:
        code, details = "UNKNOWN", {"traceback": traceback.format_exc()}

    if log_error:
        if level == "warning":
            logger.warning(f"[{code}] {error}")
        else:
            logger.error(f"[{code}] {message}", extra={"details": details}, exc_info=error)

    if not show_user_message:
        return

    if level == "warning":
        st.warning(message)
    elif level == "critical":
        st.error(f"Critical Error: {message}. Please contact an administrator.")
    else:
        st.error(f"Error: {message}")

    if details and level != "warning" and _dev_mode():
        with st.expander("Error Details", expanded=False):
            st.json(details)


def safe_execute(
    func: Callable[..., T],
    *args,
    default: Optional[T] = None,
    error_message: Optional[str] = None,
    reraise: bool = False,
    **kwargs,
) -> Optional[T]:
    """
    Call `func`, reporting any failure and returning `default` instead.

    Expected refusals keep their own message; `error_message` replaces the
    text only for store, AI and unexpected failures.

    Usage:
        channels = safe_execute(
            channel_service.list_channels,
            default=[],
            error_message="Failed to load channels"
        )
    """
    try:
        return func(*args, **kwargs)
    except Exception as e:
        handle_error(e, user_message=None if isinstance(e, EXPECTED_ERRORS) else error_message)
        if reraise:
            raise
        return default


class ErrorContext:
    """
    Context manager for one user-triggered operation.

    Usage:
        with ErrorContext("Renaming channel", show_success=True):
            channel_service.update_channel_name(channel_id, name, user_id)
    """

    def __init__(
        self,
        operation: str,
        recoverable: bool = True,
        show_success: bool = False,
        success_message: Optional[str] = None,
    ):
        self.operation = operation
        self.recoverable = recoverable
        self.show_success = show_success
        self.success_message = success_message
        self.error: Optional[Exception] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def __enter__(self) -> ErrorContext:
        logger.info(f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is not None:
            if not isinstance(exc_val, Exception):
                return False
            self.error = exc_val
            if isinstance(exc_val, SeoManagerError):
                handle_error(exc_val)
            else:
                handle_error(exc_val, user_message=f"Error during: {self.operation}")
            return self.recoverable

        logger.info(f"Completed: {self.operation}")
        if self.show_success:
            st.success(self.success_message or f"{self.operation} completed")
        return False


def error_boundary(
    default_return: Any = None,
    error_message: Optional[str] = None,
    log: bool = True,
):
    """
    Decorator: report failures of a page helper and return `default_return`.

    Usage:
        @error_boundary(default_return=[], error_message="Could not load comments")
        def load_comments(video_id: str) -> list:
            ...
    """
    def decorator(func: Callable[..., T]) -> Callable[..., Optional[T]]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Optional[T]:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                handle_error(
                    e,
                    show_user_message=bool(error_message),
                    log_error=log,
                    user_message=error_message,
                )
                return default_return

        return wrapper

    return decorator
