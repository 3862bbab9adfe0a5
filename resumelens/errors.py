from __future__ import annotations
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    PRECONDITION = "precondition"
    EXTRACTION = "extraction"
    CONFIGURATION = "configuration"
    INFERENCE = "inference"
    VALIDATION = "validation"


class AnalysisError(RuntimeError):
    """Base class for every failure the analysis pipeline reports."""

    kind: ErrorKind = ErrorKind.PRECONDITION

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class PreconditionError(AnalysisError):
    kind = ErrorKind.PRECONDITION


class ConcurrentSubmissionError(PreconditionError):
    """Raised when a submission arrives while another run is still in flight."""


class ExtractionError(AnalysisError):
    kind = ErrorKind.EXTRACTION


class ConfigurationError(AnalysisError):
    kind = ErrorKind.CONFIGURATION


class InferenceError(AnalysisError):
    kind = ErrorKind.INFERENCE


class ValidationError(AnalysisError):
    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message if field is None else f"{message} (field: {field})")
        self.field = field
