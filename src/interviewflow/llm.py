"""Language service used for generation (NLG) and classification verdicts.

The engine only depends on the ``LanguageService`` protocol; the Anthropic
implementation below is the production one. Failures raised here are caught
by ``ClassificationAdapter`` and never reach the interview flow.
"""
from __future__ import annotations

import json
import re
from typing import Any, Protocol

from anthropic import Anthropic

from .errors import ClassificationFailure, ConfigurationError
from .prompts import SYSTEM_PROMPT
from .settings import EngineSettings

_FENCE_OPEN_RE = re.compile(r"^```(?:json)?\n?")
_FENCE_CLOSE_RE = re.compile(r"\n?```$")


class LanguageService(Protocol):
    def generate(self, purpose: str, prompt: str) -> str: ...

    def classify(self, purpose: str, prompt: str) -> dict[str, Any]: ...


def parse_json_verdict(raw: str) -> dict[str, Any]:
    """Parse a JSON object reply, tolerating markdown code fences."""
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_OPEN_RE.sub("", cleaned)
        cleaned = _FENCE_CLOSE_RE.sub("", cleaned)
    cleaned = cleaned.strip()

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ClassificationFailure(f"reply is not JSON: {raw[:80]!r}") from exc
    if not isinstance(data, dict):
        raise ClassificationFailure(f"reply is not a JSON object: {raw[:80]!r}")
    return data


class AnthropicLanguageService:
    """Wrapper around Anthropic Claude for the interview's NLG and NLU calls."""

    generation_temperature = 0.7
    classification_temperature = 0.0

    def __init__(self, settings: EngineSettings):
        if not settings.has_api_key:
            raise ConfigurationError(
                "ANTHROPIC_API_KEY not set. Please set it in .env or as an environment variable."
            )
        self.client = Anthropic(api_key=settings.api_key, timeout=settings.request_timeout)
        self.model = settings.model
        self.max_tokens = settings.max_tokens

    def _complete(self, prompt: str, temperature: float) -> str:
        response = self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=temperature,
            system=SYSTEM_PROMPT,
            messages=[{"role": "user", "content": prompt}],
        )
        parts = [block.text for block in response.content if getattr(block, "type", "") == "text"]
        return "".join(parts).strip()

    def generate(self, purpose: str, prompt: str) -> str:
        return self._complete(prompt, self.generation_temperature)

    def classify(self, purpose: str, prompt: str) -> dict[str, Any]:
        raw = self._complete(prompt, self.classification_temperature)
        return parse_json_verdict(raw)
