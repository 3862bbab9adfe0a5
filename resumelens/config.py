from __future__ import annotations
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from .errors import ConfigurationError


PROVIDERS = ("gemini", "mistral")


@dataclass(frozen=True)
class Credentials:
    provider: str
    api_key: str

    def __repr__(self) -> str:
        return f"Credentials(provider={self.provider!r}, api_key='***')"


def _read_secrets() -> dict[str, str]:
    try:
        import streamlit as st  # type: ignore
        if hasattr(st, "secrets"):
            return dict(st.secrets)
    except Exception:
        # No secrets.toml, or not running under streamlit at all
        pass
    return {}


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


def _clean_key(value: Optional[str]) -> Optional[str]:
    if not value or not value.strip() or _looks_like_placeholder(value):
        return None
    return value.strip()


@dataclass(frozen=True)
class Settings:
    provider: str = "gemini"
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash"
    mistral_api_key: Optional[str] = None
    mistral_model: str = "mistral-large-latest"
    temperature: float = 0.2
    timeout_s: float = 60.0

    @property
    def model(self) -> str:
        return self.mistral_model if self.provider == "mistral" else self.gemini_model

    def credentials(self, provider: Optional[str] = None) -> Credentials:
        """Return the API credential for ``provider``, or fail before anything touches the network."""
        prov = provider or self.provider
        if prov not in PROVIDERS:
            raise ConfigurationError(f"Unsupported LLM provider '{prov}'")
        key = _clean_key(self.mistral_api_key if prov == "mistral" else self.gemini_api_key)
        if not key:
            name = "MISTRAL_API_KEY" if prov == "mistral" else "GEMINI_API_KEY (or GOOGLE_API_KEY)"
            raise ConfigurationError(f"{name} is missing. Set it in .env or Streamlit secrets.")
        return Credentials(provider=prov, api_key=key)


def _parse_float(name: str, raw: Optional[str], default: float) -> float:
    if raw is None or not str(raw).strip():
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


def load_settings() -> Settings:
    secrets = _read_secrets()

    def get(name: str) -> Optional[str]:
        value = secrets.get(name) or os.getenv(name)
        return str(value) if value is not None else None

    from .llm_provider import normalize_provider

    return Settings(
        provider=normalize_provider(get("LLM_PROVIDER")),
        # Prefer GEMINI_API_KEY, fallback to GOOGLE_API_KEY
        gemini_api_key=_clean_key(get("GEMINI_API_KEY")) or _clean_key(get("GOOGLE_API_KEY")),
        gemini_model=get("GEMINI_MODEL") or "gemini-2.5-flash",
        mistral_api_key=_clean_key(get("MISTRAL_API_KEY")),
        mistral_model=get("MISTRAL_MODEL") or "mistral-large-latest",
        temperature=_parse_float("LLM_TEMPERATURE", get("LLM_TEMPERATURE"), 0.2),
        timeout_s=_parse_float("LLM_TIMEOUT_S", get("LLM_TIMEOUT_S"), 60.0),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read once on first use."""
    return load_settings()
