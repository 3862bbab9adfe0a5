from __future__ import annotations
import json
import logging
import re
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr
from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError

logger = logging.getLogger(__name__)


class WeakBulletPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    original: StrictStr = Field(min_length=1)
    suggestion: StrictStr = Field(min_length=1)


class AnalysisResult(BaseModel):
    """Compatibility assessment of one resume against one role.

    Field names follow the JSON keys the model is asked to produce. Keyword and
    skill lists keep the backend's order and casing.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    score: StrictInt = Field(ge=0, le=100)
    missingKeywords: List[StrictStr]
    weakBulletPoints: List[WeakBulletPoint]
    atsFriendliness: StrictStr
    skillsFound: List[StrictStr]


def _strip_code_fence(text: str) -> str:
    """Remove a Markdown code fence wrapped around the payload, if any."""
    t = text.strip()
    m = re.match(r"^```[a-zA-Z]*\s*\n([\s\S]*?)\n?```$", t)
    if m:
        return m.group(1).strip()
    return t


def _field_path(loc: tuple) -> str:
    if not loc:
        return "<root>"
    return ".".join(str(part) for part in loc)


class ResponseValidator:
    """Turns raw model output into an AnalysisResult or raises ValidationError."""

    def parse(self, raw: str) -> Any:
        if not isinstance(raw, str) or not raw.strip():
            raise ValidationError("malformed payload")
        try:
            return json.loads(_strip_code_fence(raw))
        except (json.JSONDecodeError, RecursionError) as e:
            raise ValidationError("malformed payload") from e

    def validate(self, raw: str) -> AnalysisResult:
        data = self.parse(raw)
        if not isinstance(data, dict):
            raise ValidationError("expected a JSON object", field="<root>")
        try:
            return AnalysisResult.model_validate(data)
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = _field_path(tuple(first.get("loc", ())))
            logger.warning("Model output rejected at %s: %s", field, first.get("msg"))
            raise ValidationError(first.get("msg", "invalid value"), field=field) from e


def validate_response(raw: str) -> AnalysisResult:
    return ResponseValidator().validate(raw)
