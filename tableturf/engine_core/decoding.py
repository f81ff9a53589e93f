"""
Decode results for text input (grids, actions, protocol lines).

Parsers return a DecodeResult instead of raising, so callers can report
bad agent output without try/except around every line. The raising
form is available through DecodeResult.unwrap().
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any

from .errors import TableturfError


class DecodeError(TableturfError, ValueError):
    """Raised when a failed DecodeResult is unwrapped."""

    def __init__(self, message: str, row: int | None = None, column: int | None = None):
        self.row = row
        self.column = column
        if row is not None and column is not None:
            message = f"{message} (row {row}, column {column})"
        elif row is not None:
            message = f"{message} (row {row})"
        super().__init__(message)


@dataclass(frozen=True)
class DecodeResult:
    """
    Result of decoding some text.

    On success `value` holds the decoded object; on failure `error`
    describes the problem and `row`/`column` locate it when known.
    """
    success: bool
    value: Any = None
    error: str | None = None
    row: int | None = None
    column: int | None = None

    @classmethod
    def ok(cls, value: Any) -> DecodeResult:
        return cls(success=True, value=value)

    @classmethod
    def failure(
        cls,
        error: str,
        row: int | None = None,
        column: int | None = None,
    ) -> DecodeResult:
        return cls(success=False, error=error, row=row, column=column)

    def unwrap(self) -> Any:
        """Return the value or raise DecodeError."""
        if not self.success:
            raise DecodeError(self.error or "decode failed", row=self.row, column=self.column)
        return self.value
