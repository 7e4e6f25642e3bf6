"""Result type for functional error handling.

``Result[T]`` carries the outcome of a build step: a value, optional
warnings, or the exception that stopped the step. Steps, tasks and jobs
exchange results instead of raising, and the registry unwraps the final
result at the public boundary.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class ResultStatus(Enum):
    """Enumerates possible statuses for a ``Result``."""

    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Immutable result value with structured errors and warnings."""

    status: ResultStatus
    data: T | None = None
    error: Exception | None = None
    warnings: list[str] | None = None
    metadata: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        """Reject inconsistent combinations of status, data and error."""
        if self.status == ResultStatus.SUCCESS and self.error is not None:
            raise ValueError("Success results cannot have errors")
        if self.status == ResultStatus.ERROR and self.data is not None:
            raise ValueError("Error results cannot have data")
        if self.warnings is None:
            object.__setattr__(self, "warnings", [])
        if self.metadata is None:
            object.__setattr__(self, "metadata", {})

    @classmethod
    def success(cls, data: T, metadata: dict[str, Any] | None = None) -> "Result[T]":
        """Create a successful result."""
        return cls(status=ResultStatus.SUCCESS, data=data, error=None, metadata=metadata or {})

    @classmethod
    def failure(cls, error: Exception, metadata: dict[str, Any] | None = None) -> "Result[T]":
        """Create an error result.

        Args:
            error: Exception instance describing the failure.
            metadata: Optional metadata mapping.

        Returns:
            ``Result`` with ``status==ERROR``.
        """
        return cls(status=ResultStatus.ERROR, error=error, metadata=metadata or {})

    @classmethod
    def warning(cls, data: T, warnings: list[str], metadata: dict[str, Any] | None = None) -> "Result[T]":
        """Create a result that succeeded with warnings."""
        return cls(status=ResultStatus.WARNING, data=data, warnings=warnings, metadata=metadata or {})

    @classmethod
    def skipped(cls, reason: str, metadata: dict[str, Any] | None = None) -> "Result[T]":
        """Create a skipped result; ``reason`` is kept in the metadata."""
        return cls(status=ResultStatus.SKIPPED, metadata={**(metadata or {}), "reason": reason})

    def is_success(self) -> bool:
        return self.status == ResultStatus.SUCCESS

    def is_error(self) -> bool:
        return self.status == ResultStatus.ERROR

    def is_warning(self) -> bool:
        return self.status == ResultStatus.WARNING

    def is_skipped(self) -> bool:
        return self.status == ResultStatus.SKIPPED

    def map(self, func: Callable[[T], R]) -> "Result[R]":
        """Apply ``func`` to the carried data, keeping errors and warnings.

        Exceptions raised by ``func`` become an error result.
        """
        if self.is_error():
            return Result[R](
                status=ResultStatus.ERROR, error=self.error, warnings=self.warnings, metadata=self.metadata
            )

        if self.is_skipped():
            return Result[R](status=ResultStatus.SKIPPED, metadata=self.metadata)

        try:
            new_data = func(self.data)  # type: ignore[arg-type]
            status = ResultStatus.WARNING if self.warnings else ResultStatus.SUCCESS
            return Result[R](status=status, data=new_data, error=None, warnings=self.warnings, metadata=self.metadata)
        except Exception as e:
            return Result.failure(e, self.metadata)

    def unwrap(self) -> T:
        """Return data if successful or raise an exception.

        Returns:
            The carried data value.

        Raises:
            Exception: The carried error when the result is an error, or
                ``RuntimeError`` when the result was skipped.
        """
        if self.is_error():
            raise self.error or RuntimeError("Result contains error")
        if self.is_skipped():
            raise RuntimeError("Result was skipped")
        if self.data is None:
            raise RuntimeError("Result contains no data")
        return self.data

    def unwrap_or(self, default_value: T) -> T:
        """Return data if present, otherwise ``default_value``."""
        if not self.is_error() and self.data is not None:
            return self.data
        return default_value

    def __str__(self) -> str:
        if self.is_error():
            return f"Result(error, error={self.error})"
        if self.is_warning():
            return f"Result(warning, data={self.data}, warnings={self.warnings})"
        if self.is_skipped():
            return f"Result(skipped, metadata={self.metadata})"
        return f"Result(success, data={self.data})"
