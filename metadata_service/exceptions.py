"""Custom exception classes for the metadata service."""

from typing import Optional


class MetadataServiceError(Exception):
    """
    Base exception class for all metadata service errors.
    """
    pass


class NotFoundError(MetadataServiceError):
    """
    Raised when a referenced user or file record does not exist.
    """
    pass


class UserNotFoundError(NotFoundError):
    """
    Raised when a user identifier cannot be resolved.
    """
    pass


class FileRecordNotFoundError(NotFoundError):
    """
    Raised when a requested file record does not exist.
    """
    pass


class AccessDeniedError(MetadataServiceError):
    """
    Raised when a caller is neither the owner nor privileged, or declares
    an owner other than itself.
    """
    pass


class InvalidArgumentError(MetadataServiceError):
    """
    Raised when input is malformed (empty or oversized fields, bad size,
    unknown status name).
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class InvalidTransitionError(MetadataServiceError):
    """
    Raised when a status change is not permitted from the current status.
    """

    def __init__(self, current, target):
        super().__init__(
            f"Cannot transition file status from {current.value} to {target.value}"
        )
        self.current = current
        self.target = target


class ConflictError(MetadataServiceError):
    """
    Base class for write conflicts the caller may resolve by retrying.
    """
    pass


class StorageKeyConflictError(ConflictError):
    """
    Raised when a storage key is already held by another record.
    """
    pass


class StaleRecordError(ConflictError):
    """
    Raised when a record changed since it was loaded (version mismatch).
    """
    pass
