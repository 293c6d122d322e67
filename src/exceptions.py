"""
Standardized exception hierarchy for the progression engine
Provides rich context, consistent logging, and user-friendly error messages
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import json
import logging

logger = logging.getLogger(__name__)


class ProgressionError(Exception):
    """
    Base exception for all progression engine errors

    Provides:
    - Automatic timestamping
    - Request ID for tracing
    - User-friendly messages
    - Structured context
    - Automatic logging

    Example:
        raise ProgressionError(
            message="Failed to refresh challenges",
            user_id="u1",
            operation="get_challenges",
            context={"challenge_id": "3"}
        )
    """

    def __init__(
        self,
        message: str,
        user_id: Optional[str] = None,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.user_id = user_id
        self.request_id = request_id or str(uuid4())
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or "An error occurred. Please try again."
        self.timestamp = datetime.now(timezone.utc)

        # Auto-log on creation
        self._log_error()

    def _log_error(self) -> None:
        """Log error with full context"""
        log_data = {
            "error_type": self.__class__.__name__,
            "error_message": self.message,  # Avoid conflict with logging's 'message' field
            "request_id": self.request_id,
            "user_id": self.user_id,
            "operation": self.operation,
            "error_context": self.context,
            "timestamp": self.timestamp.isoformat()
        }

        if self.cause:
            log_data["cause"] = str(self.cause)
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data, exc_info=self.cause)
        else:
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data)

    def to_dict(self) -> Dict[str, Any]:
        """Error report written by the command line on failure"""
        report: Dict[str, Any] = {
            "error": self.__class__.__name__,
            "message": self.message,
            "user_message": self.user_message,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.operation:
            report["operation"] = self.operation
        if self.context:
            report["context"] = self.context
        return report


# ==========================================
# Validation Errors (Runtime Input)
# ==========================================

class ValidationError(ProgressionError):
    """
    Raised when runtime input fails validation

    Examples:
    - Negative challenge progress amount
    - Accepting a challenge that is not in the catalog

    Example:
        raise ValidationError(
            message="Progress amount must not be negative",
            field="amount",
            value=-2
        )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        super().__init__(
            message=message,
            user_message=f"Invalid {field}: {message}" if field else message,
            context={"field": field, "value": value},
            **kwargs
        )


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(ProgressionError):
    """
    Catalog or system configuration is invalid

    Raised at load time for malformed milestone, requirement or challenge
    definitions so that they never produce misleading progress.
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message="The progression catalog is not properly configured. Please contact support.",
            context={"config_key": config_key},
            **kwargs
        )


# ==========================================
# Collaborator Errors
# ==========================================

class StorageError(ProgressionError):
    """Persisting progression records failed"""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        **kwargs
    ):
        self.key = key
        super().__init__(
            message=message,
            user_message="We couldn't save your progress. Please try again.",
            context={"key": key},
            **kwargs
        )


class ExternalSourceError(ProgressionError):
    """A remote data source (leaderboard, challenge feed) failed"""

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        **kwargs
    ):
        self.source = source
        super().__init__(
            message=message,
            user_message=f"We're having trouble reaching {source or 'an external service'}. Please try again later.",
            context={"source": source},
            **kwargs
        )


# ==========================================
# Helper Functions
# ==========================================

def wrap_external_exception(
    error: Exception,
    operation: str,
    user_id: Optional[str] = None,
    key: Optional[str] = None
) -> ProgressionError:
    """
    Wrap collaborator exceptions (filesystem, JSON encoding) into our hierarchy

    Args:
        error: Original exception
        operation: What operation was being performed
        user_id: User ID if applicable
        key: Storage key involved, if any

    Returns:
        Appropriate ProgressionError subclass

    Example:
        try:
            path.write_text(payload)
        except OSError as e:
            raise wrap_external_exception(e, operation="save_challenges", key="challenges")
    """
    if isinstance(error, (OSError, json.JSONDecodeError, TypeError, ValueError)):
        return StorageError(
            message=f"{operation} failed: {str(error)}",
            key=key,
            user_id=user_id,
            operation=operation,
            cause=error
        )

    return ProgressionError(
        message=f"{operation} failed: {str(error)}",
        user_id=user_id,
        operation=operation,
        context={"key": key},
        cause=error
    )
