"""
Error taxonomy shared by the safety, compliance and batch pipelines.

Only ValidationError ever reaches a caller. OracleFailure is absorbed at the
contextual boundary and ItemFailure is the record a batch keeps for an item
whose evaluation raised.
"""
from dataclasses import dataclass
from typing import Optional


class EvaluationError(Exception):
    """Base class for evaluation errors."""


class ValidationError(EvaluationError):
    """Malformed or oversized input, rejected before any work starts."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def __str__(self) -> str:
        if self.field:
            return f"{self.field}: {self.message}"
        return self.message


class OracleFailure(EvaluationError):
    """The contextual oracle timed out, raised or answered with garbage."""


@dataclass
class ItemFailure:
    """One batch item whose evaluation raised; siblings are unaffected."""
    id: str
    error: str
    content: str
    status: str = "error"
    kind: str = "error"
