"""LangGraph wiring of the interview state machine.

One graph run covers one turn. The run starts at the entry router, then
alternates step and route until a step that waits for the user (ask,
reprompt, follow-up) or the terminal finish step; those route to ``END``.

  start:   initialize -> ask_question -> END
  answer:  translate -> validate_format -> (reprompt -> END)
           -> classify_by_kind -> store_basic | analyze -> ...
           -> ask_question | finish -> END
"""
from __future__ import annotations

import json
import logging
from typing import Any, Callable

from langchain_core.runnables import RunnableConfig
from langgraph.graph import END, START, StateGraph

from .pii_guard import redact_payload, redact_text
from .router import CONDITIONAL_EDGES, FIXED_EDGES, Step, route_entry
from .state_schema import InterviewConfig, TurnState
from .steps import InterviewSteps

logger = logging.getLogger(__name__)

# Each turn visits at most ~10 steps; the limit only guards against a wiring bug.
RECURSION_LIMIT = 50

_ROUTE_TARGETS: dict[Step | None, tuple[Step, ...]] = {
    None: (Step.INITIALIZE, Step.TRANSLATE),
    Step.VALIDATE_FORMAT: (Step.REPROMPT, Step.CLASSIFY_BY_KIND),
    Step.CLASSIFY_BY_KIND: (Step.STORE_BASIC, Step.ANALYZE),
    Step.ANALYZE: (Step.RESPOND_TO_CONCERN, Step.ACKNOWLEDGE_FOR_STORE, Step.ACKNOWLEDGE_FOR_FOLLOWUP),
    Step.STORE_BASIC: (Step.ASK_QUESTION, Step.FINISH),
    Step.STORE_ASSESSMENT: (Step.ASK_QUESTION, Step.FINISH),
}


def _target(step: Step) -> str:
    return END if step in (Step.WAIT_FOR_USER, Step.COMPLETED) else step.value


class InterviewGraph:
    """Builds and runs the compiled interview graph over ``TurnState``."""

    def __init__(self, steps: InterviewSteps):
        self.steps = steps
        self.graph = self._build_graph()

    def _handlers(self) -> dict[Step, Callable[..., dict]]:
        s = self.steps
        return {
            Step.INITIALIZE: s.initialize,
            Step.ASK_QUESTION: s.ask_question,
            Step.TRANSLATE: s.translate,
            Step.VALIDATE_FORMAT: s.validate_format,
            Step.REPROMPT: s.reprompt,
            Step.CLASSIFY_BY_KIND: s.classify_by_kind,
            Step.STORE_BASIC: s.store_basic,
            Step.ANALYZE: s.analyze,
            Step.RESPOND_TO_CONCERN: s.respond_to_concern,
            Step.ACKNOWLEDGE_FOR_FOLLOWUP: s.acknowledge_for_followup,
            Step.ACKNOWLEDGE_FOR_STORE: s.acknowledge_for_store,
            Step.GENERATE_FOLLOWUP: s.generate_followup,
            Step.STORE_ASSESSMENT: s.store_assessment,
            Step.FINISH: s.finish,
        }

    def _build_graph(self) -> Any:
        builder = StateGraph(TurnState)

        for step, handler in self._handlers().items():
            builder.add_node(step.value, self._node(step, handler))

        builder.add_conditional_edges(
            START,
            self._route(None, route_entry),
            {t.value: t.value for t in _ROUTE_TARGETS[None]},
        )
        for source, target in FIXED_EDGES.items():
            builder.add_edge(source.value, _target(target))
        for source, router in CONDITIONAL_EDGES.items():
            builder.add_conditional_edges(
                source.value,
                self._route(source, router),
                {t.value: _target(t) for t in _ROUTE_TARGETS[source]},
            )

        return builder.compile()

    @staticmethod
    def _node(step: Step, handler: Callable[..., dict]) -> Callable[..., dict]:
        if step == Step.INITIALIZE:
            def run(state: Any, config: RunnableConfig) -> dict:
                update = handler(TurnState.from_values(state), config)
                return {**update, "last_step": step.value}
        else:
            def run(state: Any) -> dict:
                update = handler(TurnState.from_values(state))
                return {**update, "last_step": step.value}

        run.__name__ = step.value
        return run

    @staticmethod
    def _route(source: Step | None, router: Callable[[Any], Step]) -> Callable[[Any], str]:
        def route(state: Any) -> str:
            decision = router(state)
            logger.debug("route %s -> %s", source.value if source else "entry", decision.value)
            return decision.value

        return route

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def invoke(self, state: TurnState, interview_config: InterviewConfig | dict | None = None) -> TurnState:
        """Run one turn from ``state`` and return the state the turn ended in."""
        config: RunnableConfig = {"recursion_limit": RECURSION_LIMIT, "configurable": {}}
        if interview_config is not None:
            config["configurable"]["interview_config"] = interview_config
        result = self.graph.invoke(state.as_values(), config)
        return TurnState.from_values(result)

    def get_trace_json(self, state: TurnState | dict) -> str:
        """Progress fields and the message log as formatted JSON, with contact details redacted."""
        state = TurnState.from_values(state)
        classification = state.classification
        trace = {
            "interview_kind": state.interview.interview_kind.value if state.interview else None,
            "started_at": state.started_at,
            "is_finished": state.is_finished,
            "last_step": state.last_step,
            "question_count": len(state.questions),
            "current_question_index": state.current_question_index,
            "current_followup_count": state.current_followup_count,
            "needs_reprompt": state.needs_reprompt,
            "reprompt_reason": state.reprompt_reason,
            "classification": {
                "has_concern": classification.has_concern,
                "concern_kind": classification.concern_kind.value if classification.concern_kind else None,
                "is_complete_answer": classification.is_complete_answer,
                "needs_more_context": classification.needs_more_context,
            }
            if classification
            else None,
            "responses": [redact_payload(r.as_dict()) for r in state.responses],
            "message_log": [
                {"role": m.role, "content": redact_text(m.content), "timestamp": m.timestamp}
                for m in state.message_log
            ],
        }
        return json.dumps(trace, indent=2, default=str)
