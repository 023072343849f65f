"""
Standardized exception hierarchy for lifetrack
Provides rich context, consistent logging, and user-friendly error messages
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import logging

logger = logging.getLogger(__name__)


class LifeTrackError(Exception):
    """
    Base exception for all lifetrack errors

    Provides:
    - Automatic timestamping
    - Request ID for tracing
    - User-friendly messages
    - Structured context
    - Automatic logging

    Example:
        raise LifeTrackError(
            message="Failed to save categories",
            user_id="00000000-0000-0000-0000-000000000000",
            operation="save_categories",
            context={"key": "categories.json"}
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
            "error_context": self.context,  # Avoid conflict with logging's 'context'
            "timestamp": self.timestamp.isoformat()
        }

        if self.cause:
            log_data["cause"] = str(self.cause)
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data, exc_info=self.cause)
        else:
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for API responses"""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "user_message": self.user_message,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat()
        }


# ==========================================
# Validation Errors (User Input)
# ==========================================

class ValidationError(LifeTrackError):
    """
    Raised when user input fails validation

    Example:
        raise ValidationError(
            message="Description must not be empty",
            field="description",
            value=""
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
        context = {"field": field, "value": value}
        context.update(kwargs.pop("context", None) or {})
        super().__init__(
            message=message,
            user_message=f"Invalid {field}: {message}" if field else message,
            context=context,
            **kwargs
        )


# ==========================================
# Storage Errors
# ==========================================

class StorageError(LifeTrackError):
    """Blob storage operation failed"""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        **kwargs
    ):
        self.key = key
        context = {"key": key}
        context.update(kwargs.pop("context", None) or {})
        kwargs.setdefault(
            "user_message",
            "We couldn't reach cloud storage. Your progress is kept on this device for now."
        )
        super().__init__(message=message, context=context, **kwargs)


class StorageConnectionError(StorageError):
    """Blob storage endpoint could not be reached"""

    def __init__(self, message: str = "Blob storage connection failed", **kwargs):
        super().__init__(message=message, **kwargs)


class RecordNotFoundError(LifeTrackError):
    """Requested category or goal does not exist"""

    def __init__(
        self,
        message: str,
        record_type: Optional[str] = None,
        record_id: Optional[str] = None,
        **kwargs
    ):
        self.record_type = record_type
        self.record_id = record_id
        super().__init__(
            message=message,
            user_message=f"{record_type or 'Record'} not found.",
            context={"record_type": record_type, "record_id": record_id},
            **kwargs
        )


# ==========================================
# Authentication
# ==========================================

class AuthenticationError(LifeTrackError):
    """Client principal could not be read"""

    def __init__(
        self,
        message: str = "Authentication failed",
        **kwargs
    ):
        super().__init__(
            message=message,
            user_message="We couldn't verify who you are. Please sign in again.",
            **kwargs
        )


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(LifeTrackError):
    """System configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message="The system is not properly configured. Please contact support.",
            context={"config_key": config_key},
            **kwargs
        )


# ==========================================
# Helper Functions
# ==========================================

def wrap_storage_exception(
    error: Exception,
    key: Optional[str] = None,
    operation: str = "storage_operation",
    user_id: Optional[str] = None
) -> StorageError:
    """
    Convert an Azure SDK exception into a StorageError

    Example:
        try:
            await blob.download_blob()
        except AzureError as e:
            raise wrap_storage_exception(e, key="user.json", operation="load")
    """
    from azure.core.exceptions import ServiceRequestError

    if isinstance(error, StorageError):
        return error

    if isinstance(error, (ServiceRequestError, OSError)):
        return StorageConnectionError(
            message=f"Blob storage unreachable during {operation}: {error}",
            key=key,
            operation=operation,
            user_id=user_id,
            cause=error
        )

    return StorageError(
        message=f"{operation} failed: {error}",
        key=key,
        operation=operation,
        user_id=user_id,
        cause=error
    )
