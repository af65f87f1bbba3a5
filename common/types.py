"""Shared data type definitions."""

from dataclasses import dataclass, asdict
from typing import Dict


@dataclass(frozen=True)
class FileStatistics:
    """
    Record counts per lifecycle status plus the overall total.
    """
    total: int
    uploaded: int
    processing: int
    ready: int
    failed: int

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)
