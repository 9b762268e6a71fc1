from __future__ import annotations

import logging

from .adapter import ClassificationAdapter
from .engine import InterviewEngine
from .graph import InterviewGraph
from .llm import AnthropicLanguageService, LanguageService
from .settings import EngineSettings
from .steps import InterviewSteps

logger = logging.getLogger(__name__)


def build_language_service(settings: EngineSettings) -> LanguageService | None:
    if settings.offline_mode:
        return None
    if not settings.has_api_key:
        logger.warning("ANTHROPIC_API_KEY is not set; interviews will run with canned messages only")
        return None
    return AnthropicLanguageService(settings)


def build_engine(
    settings: EngineSettings | None = None,
    service: LanguageService | None = None,
) -> InterviewEngine:
    """Wire settings, language service, adapter, steps and graph into an engine."""
    settings = settings if settings is not None else EngineSettings.from_env()
    if service is None:
        service = build_language_service(settings)
    adapter = ClassificationAdapter(service)
    steps = InterviewSteps(adapter, force_offline=settings.offline_mode)
    return InterviewEngine(InterviewGraph(steps))
