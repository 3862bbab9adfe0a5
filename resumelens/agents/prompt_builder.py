from __future__ import annotations
import copy
from typing import Any, Dict, List
from langchain_core.messages import HumanMessage

from ..state import AnalysisRequest, PromptPayload


# Plain JSON schema (no $ref) so it can be handed to Gemini's response_schema as is.
ANALYSIS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "score": {
            "type": "integer",
            "description": "Overall compatibility score from 0 to 100.",
        },
        "missingKeywords": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Role keywords that do not appear in the resume.",
        },
        "weakBulletPoints": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "original": {"type": "string"},
                    "suggestion": {"type": "string"},
                },
                "required": ["original", "suggestion"],
            },
            "description": "Resume bullet points quoted verbatim, each with a stronger rewrite.",
        },
        "atsFriendliness": {
            "type": "string",
            "description": "Short verdict on how well the resume passes applicant tracking systems.",
        },
        "skillsFound": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Skills detected in the resume.",
        },
    },
    "required": ["score", "missingKeywords", "weakBulletPoints", "atsFriendliness", "skillsFound"],
}

SCHEMA_SHAPE = (
    "{\n"
    '  "score": number,\n'
    '  "missingKeywords": string[],\n'
    '  "weakBulletPoints": [{ "original": string, "suggestion": string }],\n'
    '  "atsFriendliness": string,\n'
    '  "skillsFound": string[]\n'
    "}"
)


class PromptBuilder:
    """Renders the analysis prompt and its output schema.

    The resume and role text are concatenated into the prompt verbatim; no
    template engine ever sees them, so braces in user text stay literal.
    """

    def build(self, request: AnalysisRequest) -> PromptPayload:
        parts: List[str] = [
            "Analyze this resume for a " + request.role_context + " position.",
            "Provide a detailed evaluation in JSON format.",
            "Resume Content: " + request.resume_text,
            "",
            "Return exactly this JSON structure:",
            SCHEMA_SHAPE,
            "",
            "REQUIREMENTS:",
            "- score is an integer between 0 and 100.",
            "- weakBulletPoints.original must quote the resume; suggestion must be a non-empty rewrite.",
            "- Output ONLY valid JSON. No markdown, no code fences.",
        ]
        return PromptPayload(prompt_text="\n".join(parts), output_schema=copy.deepcopy(ANALYSIS_SCHEMA))


def to_messages(payload: PromptPayload) -> List[Any]:
    return [HumanMessage(content=payload.prompt_text)]
