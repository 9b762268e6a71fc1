"""Step handlers for the interview graph.

Each handler reads the current ``TurnState`` and returns a partial update.
``message_log`` and ``responses`` entries in an update are appended by the
graph reducers; every other key replaces the stored value.
"""
from __future__ import annotations

import logging
from typing import Any

from langchain_core.runnables import RunnableConfig

from . import canned_messages
from .adapter import ClassificationAdapter
from .errors import ConfigurationError, StateInvariantError
from .pii_guard import redact_text
from .state_schema import (
    ChatMessage,
    FollowupExchange,
    InterviewConfig,
    Question,
    StoredResponse,
    TurnState,
    utc_now,
)
from .transcript import build_final_transcript
from .validators import validate_answer, validate_interview_config

logger = logging.getLogger(__name__)


def _cleared_scratch() -> dict[str, Any]:
    return {
        "raw_answer": None,
        "translated_answer": None,
        "was_translated": False,
        "classification": None,
        "needs_reprompt": False,
        "reprompt_reason": None,
        "primary_raw_answer": None,
        "primary_translated_answer": None,
        "primary_was_translated": False,
        "pending_followups": [],
    }


class InterviewSteps:
    def __init__(self, adapter: ClassificationAdapter, *, force_offline: bool = False):
        self.adapter = adapter
        self.force_offline = force_offline

    def _offline(self, state: TurnState) -> bool:
        return self.force_offline or bool(state.interview and state.interview.offline_mode)

    def _require_question(self, state: TurnState, step: str) -> Question:
        question = state.current_question()
        if question is None:
            raise StateInvariantError(
                f"{step}: no current question at index {state.current_question_index} "
                f"(catalog has {len(state.questions)})."
            )
        return question

    def _require_answer(self, state: TurnState, step: str) -> str:
        if state.translated_answer is None:
            raise StateInvariantError(f"{step}: no answer is being processed.")
        return state.translated_answer

    # ------------------------------------------------------------------
    # Start of interview
    # ------------------------------------------------------------------

    def initialize(self, state: TurnState, config: RunnableConfig | None = None) -> dict:
        if state.started_at and state.interview is not None:
            logger.debug("Interview already started at %s, initialize is a no-op", state.started_at)
            return {}

        configurable = (config or {}).get("configurable", {})
        raw = configurable.get("interview_config")
        if raw is None:
            raise ConfigurationError("No interview config supplied; pass configurable.interview_config.")
        if isinstance(raw, InterviewConfig):
            if not raw.questions:
                raise ConfigurationError("questions array cannot be empty.")
            interview = raw
        else:
            interview = validate_interview_config(raw)

        offline = self.force_offline or interview.offline_mode
        welcome = self.adapter.welcome(interview.interview_kind, offline=offline)
        logger.info(
            "Interview started: kind=%s questions=%d offline=%s",
            interview.interview_kind.value,
            len(interview.questions),
            offline,
        )
        return {
            "interview": interview,
            "started_at": utc_now(),
            "current_question_index": 0,
            "current_followup_count": 0,
            "is_finished": False,
            "final_transcript": None,
            "message_log": [ChatMessage.assistant(welcome)],
            **_cleared_scratch(),
        }

    def ask_question(self, state: TurnState) -> dict:
        question = self._require_question(state, "ask_question")
        text = self.adapter.phrase_question(question, offline=self._offline(state))
        logger.info(
            "Asking question %d/%d (%s)",
            state.current_question_index + 1,
            len(state.questions),
            question.kind.value,
        )
        return {"message_log": [ChatMessage.assistant(text)], **_cleared_scratch()}

    # ------------------------------------------------------------------
    # Answer intake
    # ------------------------------------------------------------------

    def translate(self, state: TurnState) -> dict:
        last = state.last_message()
        if last is None or not last.is_user:
            raise StateInvariantError("translate: the last logged message is not a user message.")

        result = self.adapter.translate(last.content, offline=self._offline(state))
        if result.was_translated:
            logger.debug("Answer translated: %s", redact_text(result.text))
        return {
            "raw_answer": last.content,
            "translated_answer": result.text,
            "was_translated": result.was_translated,
            "classification": None,
            "needs_reprompt": False,
            "reprompt_reason": None,
        }

    def validate_format(self, state: TurnState) -> dict:
        question = self._require_question(state, "validate_format")
        response = state.translated_answer
        if not response or not response.strip():
            return {"needs_reprompt": True, "reprompt_reason": "No response provided."}

        result = validate_answer(response, question)
        if not result.valid:
            return {
                "needs_reprompt": True,
                "reprompt_reason": result.error_message or "Invalid response format.",
            }

        normalized = result.normalized_value or response
        update: dict[str, Any] = {
            "needs_reprompt": False,
            "reprompt_reason": None,
            "translated_answer": normalized,
        }
        pending = state.pending_followups
        if pending and pending[-1].answer is None:
            update["pending_followups"] = [
                *pending[:-1],
                FollowupExchange(question=pending[-1].question, answer=normalized),
            ]
        return update

    def reprompt(self, state: TurnState) -> dict:
        question = self._require_question(state, "reprompt")
        reason = state.reprompt_reason or "Invalid response format."
        logger.debug("Reprompting question %d: %s", state.current_question_index + 1, reason)
        text = self.adapter.reprompt(question, reason, offline=self._offline(state))
        return {"message_log": [ChatMessage.assistant(text)]}

    def classify_by_kind(self, state: TurnState) -> dict:
        return {}

    # ------------------------------------------------------------------
    # Basic questions
    # ------------------------------------------------------------------

    def store_basic(self, state: TurnState) -> dict:
        question = self._require_question(state, "store_basic")
        answer = self._require_answer(state, "store_basic")
        record = StoredResponse(
            question_index=state.current_question_index,
            question_text=question.text,
            question_kind=question.kind,
            group=question.group,
            raw_answer=state.raw_answer or "",
            normalized_answer=answer,
            translated_answer=answer if state.was_translated else None,
            was_translated=state.was_translated,
        )
        logger.info("Stored answer to question %d (basic)", state.current_question_index + 1)
        ack = canned_messages.basic_acknowledgement(question.kind, state.current_question_index)
        return {
            "responses": [record],
            "message_log": [ChatMessage.assistant(ack)],
            "current_question_index": state.current_question_index + 1,
            "current_followup_count": 0,
            **_cleared_scratch(),
        }

    # ------------------------------------------------------------------
    # Assessment questions
    # ------------------------------------------------------------------

    def analyze(self, state: TurnState) -> dict:
        question = self._require_question(state, "analyze")
        answer = self._require_answer(state, "analyze")
        classification = self.adapter.analyze(question.text, answer, offline=self._offline(state))
        return {"classification": classification}

    def respond_to_concern(self, state: TurnState) -> dict:
        kind = state.classification.concern_kind if state.classification else None
        logger.info(
            "Responding to concern on question %d (kind=%s)",
            state.current_question_index + 1,
            kind.value if kind else None,
        )
        return {"message_log": [ChatMessage.assistant(canned_messages.concern_response(kind))]}

    def _acknowledge(self, state: TurnState, step: str) -> dict:
        question = self._require_question(state, step)
        answer = self._require_answer(state, step)
        kind = state.interview.interview_kind
        text = self.adapter.acknowledge(kind, question, answer, offline=self._offline(state))
        return {"message_log": [ChatMessage.assistant(text)]}

    def acknowledge_for_followup(self, state: TurnState) -> dict:
        return self._acknowledge(state, "acknowledge_for_followup")

    def acknowledge_for_store(self, state: TurnState) -> dict:
        return self._acknowledge(state, "acknowledge_for_store")

    def generate_followup(self, state: TurnState) -> dict:
        question = self._require_question(state, "generate_followup")
        answer = self._require_answer(state, "generate_followup")
        if not state.can_ask_followup():
            raise StateInvariantError(
                f"generate_followup: question {state.current_question_index + 1} already had "
                f"{state.current_followup_count} of {question.max_followups} follow-ups."
            )

        kind = state.interview.interview_kind
        text = self.adapter.followup(kind, question, answer, offline=self._offline(state))
        update: dict[str, Any] = {
            "current_followup_count": state.current_followup_count + 1,
            "pending_followups": [*state.pending_followups, FollowupExchange(question=text)],
            "message_log": [ChatMessage.assistant(text)],
        }
        if state.current_followup_count == 0:
            update["primary_raw_answer"] = state.raw_answer
            update["primary_translated_answer"] = state.translated_answer
            update["primary_was_translated"] = state.was_translated
        logger.debug(
            "Follow-up %d/%d issued for question %d",
            state.current_followup_count + 1,
            question.max_followups,
            state.current_question_index + 1,
        )
        return update

    def store_assessment(self, state: TurnState) -> dict:
        question = self._require_question(state, "store_assessment")
        if state.primary_raw_answer is not None:
            raw = state.primary_raw_answer
            normalized = state.primary_translated_answer
            was_translated = state.primary_was_translated
        else:
            raw = state.raw_answer or ""
            normalized = state.translated_answer
            was_translated = state.was_translated

        classification = state.classification
        record = StoredResponse(
            question_index=state.current_question_index,
            question_text=question.text,
            question_kind=question.kind,
            group=question.group,
            raw_answer=raw,
            normalized_answer=normalized,
            translated_answer=normalized if was_translated else None,
            was_translated=was_translated,
            had_concern=bool(classification and classification.has_concern),
            concern_kind=classification.concern_kind if classification else None,
            followup_exchanges=tuple(state.pending_followups),
        )
        logger.info(
            "Stored answer to question %d (follow-ups=%d, concern=%s)",
            state.current_question_index + 1,
            len(record.followup_exchanges),
            record.had_concern,
        )
        return {
            "responses": [record],
            "current_question_index": state.current_question_index + 1,
            "current_followup_count": 0,
            **_cleared_scratch(),
        }

    # ------------------------------------------------------------------
    # End of interview
    # ------------------------------------------------------------------

    def finish(self, state: TurnState) -> dict:
        if state.interview is None:
            raise StateInvariantError("finish: interview was never initialized.")
        text = self.adapter.closing(state.interview.interview_kind, offline=self._offline(state))
        closing = ChatMessage.assistant(text)
        transcript = build_final_transcript(state, closing)
        logger.info(
            "Interview finished: answered=%d/%d concerns=%d",
            transcript.questions_answered,
            transcript.question_count,
            transcript.concerns_detected,
        )
        return {
            "is_finished": True,
            "final_transcript": transcript,
            "message_log": [closing],
        }
