from __future__ import annotations

import logging
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any, Iterable, Mapping

from .errors import StateInvariantError
from .graph import InterviewGraph
from .state_schema import ChatMessage, FinalTranscript, InterviewConfig, TurnState
from .validators import validate_interview_config

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TurnOutput:
    state: TurnState
    outbound_messages: list[str]
    is_finished: bool
    transcript: FinalTranscript | None = None


@dataclass(slots=True)
class TurnRecord:
    turn_index: int
    user_message: str | None
    question_index: int
    followup_count: int
    outbound_messages: list[str]
    is_finished: bool
    latency_ms: float


@dataclass(slots=True)
class InterviewRun:
    records: list[TurnRecord] = field(default_factory=list)
    final_state: TurnState | None = None

    @property
    def transcript(self) -> FinalTranscript | None:
        return self.final_state.final_transcript if self.final_state else None

    @property
    def average_latency_ms(self) -> float:
        if not self.records:
            return 0.0
        return sum(r.latency_ms for r in self.records) / len(self.records)

    def traversal_snapshot(self) -> list[dict]:
        return [
            {
                "turn_index": r.turn_index,
                "question_index": r.question_index,
                "followup_count": r.followup_count,
                "outbound_count": len(r.outbound_messages),
                "is_finished": r.is_finished,
            }
            for r in self.records
        ]


class InterviewEngine:
    """Turn-level driver: one call per inbound user message (or one to start)."""

    def __init__(self, graph: InterviewGraph):
        self.graph = graph

    def _run_turn(
        self,
        state: TurnState,
        interview_config: InterviewConfig | None = None,
    ) -> TurnOutput:
        seen = len(state.message_log)
        result = self.graph.invoke(state, interview_config)
        outbound = [m.content for m in result.message_log[seen:] if not m.is_user]
        return TurnOutput(
            state=result,
            outbound_messages=outbound,
            is_finished=result.is_finished,
            transcript=result.final_transcript,
        )

    def start(self, config: InterviewConfig | Mapping[str, Any]) -> TurnOutput:
        interview = config if isinstance(config, InterviewConfig) else validate_interview_config(config)
        return self._run_turn(TurnState(), interview)

    def process_message(self, state: TurnState | dict[str, Any], text: str) -> TurnOutput:
        state = TurnState.from_values(state)
        if not state.started_at or state.interview is None:
            raise StateInvariantError("Interview has not been started; call start() first.")
        if state.is_finished:
            raise StateInvariantError("Interview is already finished; no further messages are accepted.")

        values = state.as_values()
        values["message_log"] = [*state.message_log, ChatMessage.user(text)]
        return self._run_turn(TurnState.from_values(values))

    def run_script(
        self,
        config: InterviewConfig | Mapping[str, Any],
        answers: Iterable[str],
    ) -> InterviewRun:
        """Drive a scripted interview, one record per turn, stopping at finish."""
        run = InterviewRun()

        start = perf_counter()
        out = self.start(config)
        run.records.append(self._record(0, None, out, start))

        for idx, answer in enumerate(answers, start=1):
            if out.is_finished:
                break
            start = perf_counter()
            out = self.process_message(out.state, answer)
            run.records.append(self._record(idx, answer, out, start))

        if not out.is_finished:
            logger.debug("Scripted run ended before finish at question %d", out.state.current_question_index + 1)
        run.final_state = out.state
        return run

    @staticmethod
    def _record(turn_index: int, answer: str | None, out: TurnOutput, start: float) -> TurnRecord:
        return TurnRecord(
            turn_index=turn_index,
            user_message=answer,
            question_index=out.state.current_question_index,
            followup_count=out.state.current_followup_count,
            outbound_messages=out.outbound_messages,
            is_finished=out.is_finished,
            latency_ms=round((perf_counter() - start) * 1000, 3),
        )
