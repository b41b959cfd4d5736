"""OpenAI-backed generative model used for pathway planning."""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Optional

import openai

from michi.core.config import get_settings
from michi.core.errors import ConfigurationError, MichiError, UpstreamUnavailableError
from michi.observability.metrics import log_metric
from michi.observability.tracing import trace

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```json\s*([\s\S]*?)\s*```")
_FENCED_ANY = re.compile(r"```\s*([\s\S]*?)\s*```")


class PathwayModel:
    """Thin wrapper over chat completions that returns raw response text."""

    def __init__(self, client: Any, model: str) -> None:
        self._client = client
        self.model = model

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        trace_name: str,
        metadata: Optional[Dict[str, Any]] = None,
        request_id: Optional[str] = None,
    ) -> str:
        trace_metadata = {"model": self.model, "prompt_chars": len(user_prompt), **(metadata or {})}
        try:
            with trace(trace_name, metadata=trace_metadata, request_id=request_id):
                completion = self._client.chat.completions.create(
                    model=self.model,
                    response_format={"type": "json_object"},
                    messages=[
                        {"role": "system", "content": system_prompt},
                        {"role": "user", "content": user_prompt},
                    ],
                )
        except (openai.RateLimitError, openai.AuthenticationError, openai.PermissionDeniedError) as exc:
            logger.warning("Model call %s rejected upstream: %s", trace_name, type(exc).__name__)
            log_metric("llm.upstream_unavailable", 1, {"call": trace_name, "error": type(exc).__name__})
            raise UpstreamUnavailableError() from exc

        content = completion.choices[0].message.content or ""
        logger.info("Model call %s returned %d characters", trace_name, len(content))
        return content


def extract_json(text: str) -> Any:
    """Parse JSON from a ```json fence, a bare fence, or the raw text."""
    match = _FENCED_JSON.search(text) or _FENCED_ANY.search(text)
    candidate = match.group(1) if match else text
    try:
        return json.loads(candidate.strip())
    except json.JSONDecodeError as exc:
        logger.warning("Model response was not valid JSON (%d chars)", len(text))
        raise MichiError("Invalid JSON response from AI", details=str(exc)) from exc


def get_pathway_model() -> PathwayModel:
    """FastAPI dependency; tests override it with a scripted fake."""
    settings = get_settings()
    if not settings.openai_api_key:
        raise ConfigurationError("OPENAI_API_KEY is not configured")
    return PathwayModel(openai.OpenAI(api_key=settings.openai_api_key), settings.openai_model)
