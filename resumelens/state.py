from __future__ import annotations
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from .agents.response_validator import AnalysisResult
from .errors import AnalysisError, ErrorKind


class Phase(str, Enum):
    IDLE = "idle"
    EXTRACTING = "extracting"
    AWAITING_INFERENCE = "awaiting_inference"
    VALIDATING = "validating"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (Phase.SUCCEEDED, Phase.FAILED)


class Document(BaseModel):
    """Uploaded file bytes plus the media type the uploader declared.

    ``content`` is None for a handle whose payload cannot be read in the current
    context; extraction of such a document yields empty text.
    """

    model_config = ConfigDict(frozen=True)

    content: Optional[bytes] = Field(default=None, repr=False)
    media_type: str
    name: Optional[str] = None


class ExtractedText(BaseModel):
    model_config = ConfigDict(frozen=True)

    fragments: List[str] = Field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n".join(self.fragments)

    @property
    def low_confidence(self) -> bool:
        return not self.text.strip()


def build_role_context(role_title: str, role_description: str) -> str:
    title = (role_title or "").strip()
    description = (role_description or "").strip()
    if title and description:
        return f"{title}\n\nDescription: {description}"
    if description:
        return f"Description: {description}"
    return title


class AnalysisRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    resume_text: str
    role_context: str

    @classmethod
    def from_role(cls, resume_text: str, role_title: str, role_description: str = "") -> "AnalysisRequest":
        return cls(resume_text=resume_text, role_context=build_role_context(role_title, role_description))


class PromptPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    prompt_text: str
    output_schema: Dict[str, Any]


class PipelineState(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    # Input
    run_id: str
    document: Optional[Document] = None
    role_title: str = ""
    role_description: str = ""

    # Intermediate
    extracted: Optional[ExtractedText] = None
    payload: Optional[PromptPayload] = None
    raw_response: Optional[str] = None

    # Output
    result: Optional[AnalysisResult] = None
    error: Optional[AnalysisError] = None


class AnalysisOutcome(BaseModel):
    """Terminal report of one run, handed to the presentation layer."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    run_id: str
    phase: Phase
    result: Optional[AnalysisResult] = None
    error: Optional[AnalysisError] = None
    low_confidence: bool = False
    warnings: List[str] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.phase is Phase.SUCCEEDED

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error is not None else None
