"""Failure boundary between the interview flow and the language service.

Every call here returns something usable: classification calls degrade to a
safe default verdict and generation calls degrade to canned text. In offline
mode (or without a service) nothing is sent at all.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, TypeVar

from . import canned_messages, prompts
from .errors import ClassificationFailure
from .llm import LanguageService
from .pii_guard import redact_text
from .state_schema import Classification, ConcernKind, InterviewKind, Question

logger = logging.getLogger(__name__)

T = TypeVar("T")

_CONCERN_DETAILS = {
    ConcernKind.EEOC: "Response contains potential EEOC-related content",
    ConcernKind.INCIDENT: "Response mentions a reportable incident",
    ConcernKind.OUTSIDE_SCOPE: "Response is outside the scope of the interview",
}


@dataclass(frozen=True, slots=True)
class TranslationResult:
    text: str
    was_translated: bool


@dataclass(frozen=True, slots=True)
class ConcernVerdict:
    has_concern: bool = False
    concern_kind: ConcernKind | None = None
    concern_detail: str | None = None


@dataclass(frozen=True, slots=True)
class CompletenessVerdict:
    is_complete_answer: bool = True
    needs_more_context: bool = False


class ClassificationAdapter:
    def __init__(self, service: LanguageService | None = None):
        self.service = service

    def is_offline(self, offline: bool) -> bool:
        return offline or self.service is None

    def _guarded(self, purpose: str, call: Callable[[], T], default: T) -> T:
        try:
            return call()
        except Exception as exc:
            logger.warning("Language service call %r failed, using fallback: %s", purpose, exc)
            return default

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def translate(self, text: str, *, offline: bool = False) -> TranslationResult:
        unchanged = TranslationResult(text=text, was_translated=False)
        if self.is_offline(offline):
            return unchanged

        def call() -> TranslationResult:
            translated = self.service.generate("translate", prompts.translate_prompt(text)).strip()
            if not translated:
                raise ClassificationFailure("empty translation")
            # any case-insensitive difference counts as a translation
            return TranslationResult(text=translated, was_translated=translated.lower() != text.lower())

        return self._guarded("translate", call, unchanged)

    def detect_concern(self, question_text: str, answer: str, *, offline: bool = False) -> ConcernVerdict:
        if self.is_offline(offline):
            return ConcernVerdict()

        def call() -> ConcernVerdict:
            data = self.service.classify("detect_concern", prompts.concern_prompt(question_text, answer))
            if data.get("hasConcerns") is not True:
                return ConcernVerdict()
            try:
                kind = ConcernKind(str(data.get("concernType") or "").strip().lower())
            except ValueError:
                kind = None
            detail = data.get("concernDetails") or _CONCERN_DETAILS.get(kind)
            return ConcernVerdict(has_concern=True, concern_kind=kind, concern_detail=detail)

        return self._guarded("detect_concern", call, ConcernVerdict())

    def check_completeness(self, question_text: str, answer: str, *, offline: bool = False) -> CompletenessVerdict:
        if self.is_offline(offline):
            return CompletenessVerdict()

        def call() -> CompletenessVerdict:
            data = self.service.classify("check_completeness", prompts.completeness_prompt(question_text, answer))
            if "isProperResponse" not in data:
                raise ClassificationFailure("verdict is missing isProperResponse")
            is_complete = data["isProperResponse"] is True
            needs_more = data.get("needsMoreContext", not is_complete) is True
            return CompletenessVerdict(is_complete_answer=is_complete, needs_more_context=needs_more)

        return self._guarded("check_completeness", call, CompletenessVerdict())

    def analyze(self, question_text: str, answer: str, *, offline: bool = False) -> Classification:
        """Run the concern and completeness checks concurrently and join on both."""
        if self.is_offline(offline):
            return Classification.safe_default()

        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="analyze") as pool:
            concern_future = pool.submit(self.detect_concern, question_text, answer)
            completeness_future = pool.submit(self.check_completeness, question_text, answer)
            concern = concern_future.result()
            completeness = completeness_future.result()

        if concern.has_concern:
            logger.warning(
                "Concern detected: kind=%s detail=%s",
                concern.concern_kind.value if concern.concern_kind else None,
                redact_text(concern.concern_detail or ""),
            )

        return Classification(
            has_concern=concern.has_concern,
            concern_kind=concern.concern_kind,
            concern_detail=concern.concern_detail,
            is_complete_answer=completeness.is_complete_answer,
            needs_more_context=completeness.needs_more_context,
        )

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def _generate(self, purpose: str, prompt: Callable[[], str], fallback: str, offline: bool) -> str:
        if self.is_offline(offline):
            return fallback

        def call() -> str:
            text = self.service.generate(purpose, prompt()).strip()
            if not text:
                raise ClassificationFailure("empty generation")
            return text

        return self._guarded(purpose, call, fallback)

    def welcome(self, kind: InterviewKind, *, offline: bool = False) -> str:
        return self._generate(
            "welcome",
            lambda: prompts.welcome_prompt(kind),
            canned_messages.WELCOME_MESSAGES[kind],
            offline,
        )

    def phrase_question(self, question: Question, *, offline: bool = False) -> str:
        return self._generate(
            "ask_question",
            lambda: prompts.ask_question_prompt(question),
            canned_messages.format_question_verbatim(question),
            offline,
        )

    def reprompt(self, question: Question, reason: str, *, offline: bool = False) -> str:
        return self._generate(
            "reprompt",
            lambda: prompts.reprompt_prompt(question, reason),
            canned_messages.reprompt_message(question),
            offline,
        )

    def acknowledge(self, kind: InterviewKind, question: Question, answer: str, *, offline: bool = False) -> str:
        return self._generate(
            "acknowledge",
            lambda: prompts.acknowledgement_prompt(kind, question.text, answer),
            canned_messages.SIMPLE_EMPATHY,
            offline,
        )

    def followup(self, kind: InterviewKind, question: Question, answer: str, *, offline: bool = False) -> str:
        return self._generate(
            "generate_followup",
            lambda: prompts.followup_prompt(kind, question.text, answer, question.group),
            canned_messages.FALLBACK_FOLLOWUP,
            offline,
        )

    def closing(self, kind: InterviewKind, *, offline: bool = False) -> str:
        return self._generate(
            "closing",
            lambda: prompts.closing_prompt(kind),
            canned_messages.CLOSING_MESSAGES[kind],
            offline,
        )
