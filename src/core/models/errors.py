"""Custom exception classes for the AMI housekeeper."""

from typing import Any

from core.utils.constants import (
    ERROR_CODE_CONFIGURATION_INVALID,
    ERROR_CODE_IMAGE_DEREGISTER_FAILED,
    ERROR_CODE_IMAGE_LIST_FAILED,
    ERROR_CODE_REFERENCE_COLLECTION_FAILED,
    ERROR_CODE_SNAPSHOT_DELETE_FAILED,
)


class HousekeeperError(Exception):
    """
    Base exception for all housekeeper errors.

    All custom errors must inherit from this class.
    Callers must explicitly provide a message and error code.
    Optional contextual information can be supplied via `details`.
    """

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        super().__init__(self.message)


class ConfigurationError(HousekeeperError):
    """Raised when the cleanup configuration is malformed."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_CONFIGURATION_INVALID,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class ReferenceCollectionError(HousekeeperError):
    """Raised when an in-use reference source cannot be listed."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_REFERENCE_COLLECTION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class ImageInventoryError(HousekeeperError):
    """Raised when the owned image inventory cannot be listed."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_IMAGE_LIST_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class DeregistrationError(HousekeeperError):
    """Raised when a single image cannot be deregistered."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_IMAGE_DEREGISTER_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class SnapshotDeletionError(HousekeeperError):
    """Raised when a single snapshot cannot be deleted."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_SNAPSHOT_DELETE_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )
