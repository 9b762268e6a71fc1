from __future__ import annotations

import operator
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Literal


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class InterviewKind(str, Enum):
    SCREENER = "screener"
    EXIT = "exit"


class QuestionKind(str, Enum):
    NUMBER_SCALE = "number_scale"
    LONG_ANSWER = "long_answer"
    SHORT_ANSWER = "short_answer"
    YES_NO = "yes_no"
    SINGLE_SELECT = "single_select"
    PHONE_NUMBER = "phone_number"


class ConcernKind(str, Enum):
    EEOC = "eeoc"
    OUTSIDE_SCOPE = "outside_scope"
    INCIDENT = "incident"


@dataclass(frozen=True, slots=True)
class Question:
    kind: QuestionKind
    text: str
    max_followups: int = 0
    group: str | None = None
    options: tuple[str, ...] = ()

    @property
    def is_basic(self) -> bool:
        """Basic questions are format-validated and acknowledged, never classified."""
        return self.max_followups == 0


@dataclass(frozen=True, slots=True)
class InterviewConfig:
    interview_kind: InterviewKind
    questions: tuple[Question, ...]
    offline_mode: bool = False


@dataclass(frozen=True, slots=True)
class ChatMessage:
    role: Literal["assistant", "user"]
    content: str
    timestamp: str = field(default_factory=utc_now)

    @classmethod
    def assistant(cls, content: str) -> "ChatMessage":
        return cls(role="assistant", content=content)

    @classmethod
    def user(cls, content: str) -> "ChatMessage":
        return cls(role="user", content=content)

    @property
    def is_user(self) -> bool:
        return self.role == "user"

    def as_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content, "timestamp": self.timestamp}


@dataclass(frozen=True, slots=True)
class Classification:
    has_concern: bool = False
    concern_kind: ConcernKind | None = None
    concern_detail: str | None = None
    is_complete_answer: bool = True
    needs_more_context: bool = False

    @classmethod
    def safe_default(cls) -> "Classification":
        return cls()


@dataclass(frozen=True, slots=True)
class ValidationResult:
    valid: bool
    normalized_value: str | None = None
    error_message: str | None = None


@dataclass(frozen=True, slots=True)
class FollowupExchange:
    question: str
    answer: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {"question": self.question, "answer": self.answer}


@dataclass(frozen=True, slots=True)
class StoredResponse:
    question_index: int
    question_text: str
    question_kind: QuestionKind
    group: str | None
    raw_answer: str
    normalized_answer: str | None = None
    translated_answer: str | None = None
    was_translated: bool = False
    was_skipped: bool = False
    had_concern: bool = False
    concern_kind: ConcernKind | None = None
    followup_exchanges: tuple[FollowupExchange, ...] = ()

    def as_dict(self) -> dict[str, Any]:
        return {
            "question_index": self.question_index,
            "question_text": self.question_text,
            "question_kind": self.question_kind.value,
            "group": self.group,
            "raw_answer": self.raw_answer,
            "normalized_answer": self.normalized_answer,
            "translated_answer": self.translated_answer,
            "was_translated": self.was_translated,
            "was_skipped": self.was_skipped,
            "had_concern": self.had_concern,
            "concern_kind": self.concern_kind.value if self.concern_kind else None,
            "followup_exchanges": [ex.as_dict() for ex in self.followup_exchanges],
        }


@dataclass(frozen=True, slots=True)
class FinalTranscript:
    interview_kind: InterviewKind
    started_at: str
    completed_at: str
    question_count: int
    questions_answered: int
    concerns_detected: int
    responses: tuple[StoredResponse, ...]
    full_log: tuple[ChatMessage, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "interview_kind": self.interview_kind.value,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
            "question_count": self.question_count,
            "questions_answered": self.questions_answered,
            "concerns_detected": self.concerns_detected,
            "responses": [r.as_dict() for r in self.responses],
            "full_log": [m.as_dict() for m in self.full_log],
        }


@dataclass(slots=True)
class TurnState:
    """Progress record persisted by the host between turns.

    ``message_log`` and ``responses`` only ever grow; the graph merges step
    updates into them with ``operator.add``. Every other field is replaced
    wholesale by whichever step writes it.
    """

    interview: InterviewConfig | None = None
    current_question_index: int = 0
    current_followup_count: int = 0

    # per-turn scratch
    raw_answer: str | None = None
    translated_answer: str | None = None
    was_translated: bool = False
    classification: Classification | None = None
    needs_reprompt: bool = False
    reprompt_reason: str | None = None

    # first answer to the current question, kept while follow-ups run
    primary_raw_answer: str | None = None
    primary_translated_answer: str | None = None
    primary_was_translated: bool = False
    pending_followups: list[FollowupExchange] = field(default_factory=list)

    responses: Annotated[list[StoredResponse], operator.add] = field(default_factory=list)
    message_log: Annotated[list[ChatMessage], operator.add] = field(default_factory=list)

    started_at: str | None = None
    is_finished: bool = False
    final_transcript: FinalTranscript | None = None
    last_step: str | None = None

    @property
    def questions(self) -> tuple[Question, ...]:
        return self.interview.questions if self.interview else ()

    def current_question(self) -> Question | None:
        if self.current_question_index >= len(self.questions):
            return None
        return self.questions[self.current_question_index]

    def has_more_questions(self) -> bool:
        return self.current_question_index < len(self.questions)

    def can_ask_followup(self) -> bool:
        question = self.current_question()
        if question is None:
            return False
        return self.current_followup_count < question.max_followups

    def last_message(self) -> ChatMessage | None:
        return self.message_log[-1] if self.message_log else None

    def as_values(self) -> dict[str, Any]:
        """Shallow field map, used as graph input without copying nested records."""
        return {name: getattr(self, name) for name in self.__dataclass_fields__}

    @classmethod
    def from_values(cls, values: "TurnState | dict[str, Any]") -> "TurnState":
        if isinstance(values, cls):
            return values
        known = cls.__dataclass_fields__
        return cls(**{k: v for k, v in values.items() if k in known})
