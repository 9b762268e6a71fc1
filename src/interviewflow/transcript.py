from __future__ import annotations

from .errors import StateInvariantError
from .state_schema import ChatMessage, FinalTranscript, TurnState, utc_now


def build_final_transcript(state: TurnState, closing: ChatMessage) -> FinalTranscript:
    """Assemble the interview record from state artifacts; ``closing`` is appended last."""
    if state.interview is None:
        raise StateInvariantError("Cannot build a transcript before the interview is initialized.")

    return FinalTranscript(
        interview_kind=state.interview.interview_kind,
        started_at=state.started_at or utc_now(),
        completed_at=utc_now(),
        question_count=len(state.questions),
        questions_answered=len(state.responses),
        concerns_detected=sum(1 for r in state.responses if r.had_concern),
        responses=tuple(state.responses),
        full_log=(*state.message_log, closing),
    )
