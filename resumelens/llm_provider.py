from __future__ import annotations
from typing import Any, Dict, Optional
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_mistralai import ChatMistralAI

from .config import PROVIDERS, Credentials, Settings


def normalize_provider(p: str | None) -> str:
    if not p:
        return "gemini"
    p = p.strip().lower()
    if p in PROVIDERS:
        return p
    return "gemini"


def build_gemini(api_key: str, settings: Settings, schema: Optional[Dict[str, Any]] = None) -> ChatGoogleGenerativeAI:
    kwargs: Dict[str, Any] = {}
    if schema is not None:
        kwargs["response_schema"] = schema
    return ChatGoogleGenerativeAI(
        model=settings.gemini_model,
        temperature=settings.temperature,
        google_api_key=api_key,
        response_mime_type="application/json",
        timeout=settings.timeout_s,
        max_retries=1,  # one attempt
        **kwargs,
    )


def build_mistral(api_key: str, settings: Settings, schema: Optional[Dict[str, Any]] = None) -> Any:
    # Mistral has no schema-constrained mode; JSON mode plus the schema in the prompt is the closest.
    model = ChatMistralAI(
        model=settings.mistral_model,
        temperature=settings.temperature,
        api_key=api_key,
        timeout=int(settings.timeout_s),
        max_retries=1,
    )
    return model.bind(response_format={"type": "json_object"})


def get_llm(credentials: Credentials, schema: Optional[Dict[str, Any]], settings: Settings) -> Any:
    """Build a chat model in JSON output mode for the credential's provider."""
    if credentials.provider == "mistral":
        return build_mistral(credentials.api_key, settings, schema)
    return build_gemini(credentials.api_key, settings, schema)
