"""
Lookup data models for the repos service.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ResolutionOutcome(str, Enum):
    """Outcome of a repository-count lookup."""
    FOUND = "found"
    NOT_FOUND = "not_found"
    UPSTREAM_ERROR = "upstream_error"


class LookupSource(str, Enum):
    """Where a found count came from."""
    CACHE = "cache"
    UPSTREAM = "upstream"


@dataclass(frozen=True)
class ResolutionResult:
    """Result of resolving one username against the upstream directory.

    Only FOUND results carry a count; it is always a non-negative integer.
    """
    outcome: ResolutionOutcome
    count: Optional[int] = None

    @classmethod
    def found(cls, count: int) -> "ResolutionResult":
        if count < 0:
            raise ValueError(f"Repository count must be non-negative, got {count}")
        return cls(ResolutionOutcome.FOUND, count)

    @classmethod
    def not_found(cls) -> "ResolutionResult":
        return cls(ResolutionOutcome.NOT_FOUND)

    @classmethod
    def upstream_error(cls) -> "ResolutionResult":
        return cls(ResolutionOutcome.UPSTREAM_ERROR)

    @property
    def is_found(self) -> bool:
        return self.outcome is ResolutionOutcome.FOUND


@dataclass(frozen=True)
class LookupResult:
    """Per-request lookup result handed to the HTTP layer."""
    username: str
    resolution: ResolutionResult
    source: Optional[LookupSource] = None

    @property
    def outcome(self) -> ResolutionOutcome:
        return self.resolution.outcome

    @property
    def count(self) -> Optional[int]:
        return self.resolution.count
