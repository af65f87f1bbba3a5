"""File processing status and its transition rules."""

from enum import Enum
from typing import Dict, FrozenSet

from metadata_service.exceptions import InvalidArgumentError, InvalidTransitionError


class FileStatus(str, Enum):
    UPLOADED = "UPLOADED"
    PROCESSING = "PROCESSING"
    READY = "READY"
    FAILED = "FAILED"


INITIAL_STATUS = FileStatus.UPLOADED

ALLOWED_TRANSITIONS: Dict[FileStatus, FrozenSet[FileStatus]] = {
    FileStatus.UPLOADED: frozenset({FileStatus.PROCESSING}),
    FileStatus.PROCESSING: frozenset({FileStatus.READY, FileStatus.FAILED}),
    FileStatus.READY: frozenset(),
    FileStatus.FAILED: frozenset(),
}


def allowed_targets(current: FileStatus) -> FrozenSet[FileStatus]:
    return ALLOWED_TRANSITIONS[current]


def is_terminal(status: FileStatus) -> bool:
    return not ALLOWED_TRANSITIONS[status]


def is_legal(current: FileStatus, target: FileStatus) -> bool:
    """
    Check whether moving from current to target is a permitted transition.
    """
    return target in ALLOWED_TRANSITIONS[current]


def validate_transition(current: FileStatus, target: FileStatus) -> None:
    """
    Raise InvalidTransitionError unless current -> target is permitted.
    """
    if not is_legal(current, target):
        raise InvalidTransitionError(current, target)


def parse_status(name: str) -> FileStatus:
    """
    Parse a status name case-insensitively.

    Args:
        name: Status name such as "processing" or "READY"

    Returns:
        Matching FileStatus

    Raises:
        InvalidArgumentError: If the name matches no status
    """
    if isinstance(name, FileStatus):
        return name

    if name is not None and not isinstance(name, str):
        raise InvalidArgumentError(f"Invalid status value: {name!r}", field="status")

    normalized = (name or "").strip().upper()
    try:
        return FileStatus(normalized)
    except ValueError:
        raise InvalidArgumentError(f"Invalid status value: {name!r}", field="status") from None
