from __future__ import annotations
import logging
from typing import Any, Callable, Dict, Optional

from ..config import Credentials, Settings, get_settings
from ..errors import AnalysisError, ConfigurationError, InferenceError
from ..llm_provider import get_llm
from ..state import PromptPayload
from .prompt_builder import to_messages

logger = logging.getLogger(__name__)

LLMFactory = Callable[[Credentials, Optional[Dict[str, Any]], Settings], Any]


def _content_text(resp: Any) -> str:
    content = getattr(resp, "content", "")
    if isinstance(content, list):
        # Some chat models return a list of content parts
        content = "".join(
            part.get("text", "") if isinstance(part, dict) else str(part) for part in content
        )
    return (content or "").strip()


class InferenceClient:
    """Single-shot call to the configured model in JSON output mode.

    No retries and no failover: a failed call is reported and the caller decides
    whether to submit again.
    """

    def __init__(self, settings: Optional[Settings] = None, llm_factory: LLMFactory = get_llm):
        self._settings = settings
        self._llm_factory = llm_factory

    @property
    def settings(self) -> Settings:
        return self._settings if self._settings is not None else get_settings()

    def _prepare(self, prompt_text: str, output_schema: Dict[str, Any], credentials: Optional[Credentials]):
        settings = self.settings
        # Missing credentials fail here, before any client is built
        if credentials is None:
            creds = settings.credentials()
        elif not credentials.api_key.strip():
            raise ConfigurationError(f"Empty API key supplied for provider '{credentials.provider}'")
        else:
            creds = credentials
        logger.debug("Invoking %s model %s", creds.provider, settings.model)
        try:
            llm = self._llm_factory(creds, output_schema, settings)
        except AnalysisError:
            raise
        except Exception as e:
            logger.error("Could not build %s model: %s", creds.provider, e)
            raise InferenceError(f"AI analysis failed: {e}") from e
        messages = to_messages(PromptPayload(prompt_text=prompt_text, output_schema=output_schema))
        return llm, messages

    def _check(self, resp: Any) -> str:
        text = _content_text(resp)
        if not text:
            raise InferenceError("empty response")
        return text

    def infer(self, prompt_text: str, output_schema: Dict[str, Any], credentials: Optional[Credentials] = None) -> str:
        llm, messages = self._prepare(prompt_text, output_schema, credentials)
        try:
            resp = llm.invoke(messages)
        except Exception as e:
            logger.error("Model call failed: %s", e)
            raise InferenceError(f"AI analysis failed: {e}") from e
        return self._check(resp)

    async def ainfer(self, prompt_text: str, output_schema: Dict[str, Any], credentials: Optional[Credentials] = None) -> str:
        llm, messages = self._prepare(prompt_text, output_schema, credentials)
        try:
            resp = await llm.ainvoke(messages)
        except Exception as e:
            logger.error("Model call failed: %s", e)
            raise InferenceError(f"AI analysis failed: {e}") from e
        return self._check(resp)
