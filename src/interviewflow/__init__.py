"""Turn-based orchestration engine for structured screener and exit interviews."""

from .adapter import ClassificationAdapter, CompletenessVerdict, ConcernVerdict, TranslationResult
from .contracts import CONTRACT_VERSIONS, ContractValidationResult, validate_contract_freeze
from .engine import InterviewEngine, InterviewRun, TurnOutput, TurnRecord
from .errors import ClassificationFailure, ConfigurationError, InterviewError, StateInvariantError
from .graph import InterviewGraph
from .llm import AnthropicLanguageService, LanguageService, parse_json_verdict
from .router import Step
from .runtime import build_engine, build_language_service
from .settings import EngineSettings
from .state_schema import (
    ChatMessage,
    Classification,
    ConcernKind,
    FinalTranscript,
    FollowupExchange,
    InterviewConfig,
    InterviewKind,
    Question,
    QuestionKind,
    StoredResponse,
    TurnState,
    ValidationResult,
)
from .steps import InterviewSteps
from .validators import validate_answer, validate_interview_config

__all__ = [
    "InterviewKind",
    "QuestionKind",
    "ConcernKind",
    "Question",
    "InterviewConfig",
    "ChatMessage",
    "Classification",
    "ValidationResult",
    "FollowupExchange",
    "StoredResponse",
    "FinalTranscript",
    "TurnState",
    "InterviewError",
    "ConfigurationError",
    "StateInvariantError",
    "ClassificationFailure",
    "validate_answer",
    "validate_interview_config",
    "EngineSettings",
    "LanguageService",
    "AnthropicLanguageService",
    "parse_json_verdict",
    "ClassificationAdapter",
    "TranslationResult",
    "ConcernVerdict",
    "CompletenessVerdict",
    "Step",
    "InterviewSteps",
    "InterviewGraph",
    "InterviewEngine",
    "InterviewRun",
    "TurnOutput",
    "TurnRecord",
    "build_engine",
    "build_language_service",
    "CONTRACT_VERSIONS",
    "ContractValidationResult",
    "validate_contract_freeze",
]
