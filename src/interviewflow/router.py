"""Routing functions for the interview state machine.

Every function here is pure: it reads a ``TurnState`` (or the equivalent value
mapping LangGraph hands to conditional edges) and returns the next ``Step``.
Guard precedence inside each function is fixed.
"""
from __future__ import annotations

from enum import Enum
from typing import Any

from .errors import StateInvariantError
from .state_schema import TurnState


class Step(str, Enum):
    INITIALIZE = "initialize"
    ASK_QUESTION = "ask_question"
    TRANSLATE = "translate"
    VALIDATE_FORMAT = "validate_format"
    REPROMPT = "reprompt"
    CLASSIFY_BY_KIND = "classify_by_kind"
    STORE_BASIC = "store_basic"
    ANALYZE = "analyze"
    RESPOND_TO_CONCERN = "respond_to_concern"
    ACKNOWLEDGE_FOR_FOLLOWUP = "acknowledge_for_followup"
    ACKNOWLEDGE_FOR_STORE = "acknowledge_for_store"
    GENERATE_FOLLOWUP = "generate_followup"
    STORE_ASSESSMENT = "store_assessment"
    FINISH = "finish"
    WAIT_FOR_USER = "wait_for_user"
    COMPLETED = "completed"


def route_entry(state: TurnState | dict[str, Any]) -> Step:
    state = TurnState.from_values(state)
    if not state.started_at:
        return Step.INITIALIZE
    last = state.last_message()
    if last is not None and last.is_user:
        return Step.TRANSLATE
    return Step.INITIALIZE


def route_after_validate(state: TurnState | dict[str, Any]) -> Step:
    state = TurnState.from_values(state)
    if state.needs_reprompt:
        return Step.REPROMPT
    return Step.CLASSIFY_BY_KIND


def route_by_kind(state: TurnState | dict[str, Any]) -> Step:
    state = TurnState.from_values(state)
    question = state.current_question()
    if question is None:
        raise StateInvariantError(
            f"No current question at index {state.current_question_index} to route by kind."
        )
    if question.is_basic:
        return Step.STORE_BASIC
    return Step.ANALYZE


def route_after_analysis(state: TurnState | dict[str, Any]) -> Step:
    state = TurnState.from_values(state)
    question = state.current_question()
    if question is None:
        raise StateInvariantError("No current question after analysis.")
    if state.classification is None:
        raise StateInvariantError("Analysis finished without a classification.")

    if state.classification.has_concern:
        return Step.RESPOND_TO_CONCERN
    if state.classification.is_complete_answer or state.current_followup_count >= question.max_followups:
        return Step.ACKNOWLEDGE_FOR_STORE
    return Step.ACKNOWLEDGE_FOR_FOLLOWUP


def route_after_store(state: TurnState | dict[str, Any]) -> Step:
    state = TurnState.from_values(state)
    if state.has_more_questions():
        return Step.ASK_QUESTION
    return Step.FINISH


# Fixed transitions, keyed by the step that just ran.
FIXED_EDGES: dict[Step, Step] = {
    Step.INITIALIZE: Step.ASK_QUESTION,
    Step.ASK_QUESTION: Step.WAIT_FOR_USER,
    Step.TRANSLATE: Step.VALIDATE_FORMAT,
    Step.REPROMPT: Step.WAIT_FOR_USER,
    Step.RESPOND_TO_CONCERN: Step.STORE_ASSESSMENT,
    Step.ACKNOWLEDGE_FOR_FOLLOWUP: Step.GENERATE_FOLLOWUP,
    Step.ACKNOWLEDGE_FOR_STORE: Step.STORE_ASSESSMENT,
    Step.GENERATE_FOLLOWUP: Step.WAIT_FOR_USER,
    Step.FINISH: Step.COMPLETED,
}

CONDITIONAL_EDGES = {
    Step.VALIDATE_FORMAT: route_after_validate,
    Step.CLASSIFY_BY_KIND: route_by_kind,
    Step.STORE_BASIC: route_after_store,
    Step.ANALYZE: route_after_analysis,
    Step.STORE_ASSESSMENT: route_after_store,
}


def next_step(after: Step, state: TurnState | dict[str, Any]) -> Step:
    """Return the step that follows ``after`` for the given state."""
    if after in FIXED_EDGES:
        return FIXED_EDGES[after]
    return CONDITIONAL_EDGES[after](state)
