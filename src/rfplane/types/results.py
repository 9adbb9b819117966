"""Result type for front-end operations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ResultStatus(str, Enum):
    EXECUTED = "executed"  # the remote service performed the operation
    UNSUPPORTED = "unsupported"  # stubbed, value is a fallback


@dataclass(frozen=True)
class FrontendResult:
    """Value returned by a front-end operation, tagged with how it was obtained.

    Stubbed hardware paths (antenna switching, bandwidth control, non-default
    sample rates) return ``UNSUPPORTED`` results carrying the current or
    fallback value, so callers can tell them apart from operations the
    hardware really executed.
    """

    value: Any
    status: ResultStatus = ResultStatus.EXECUTED

    @classmethod
    def executed(cls, value: Any) -> FrontendResult:
        return cls(value, ResultStatus.EXECUTED)

    @classmethod
    def unsupported(cls, value: Any = None) -> FrontendResult:
        return cls(value, ResultStatus.UNSUPPORTED)

    @property
    def is_executed(self) -> bool:
        return self.status == ResultStatus.EXECUTED

    @property
    def is_unsupported(self) -> bool:
        return self.status == ResultStatus.UNSUPPORTED


@dataclass(frozen=True)
class MetaRange:
    """Advisory (start, stop, step) range published next to a tunable value."""

    start: float
    stop: float
    step: float = 0.0

    def __contains__(self, value: float) -> bool:
        return self.start <= value <= self.stop
