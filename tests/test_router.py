import unittest

from src.interviewflow.errors import StateInvariantError
from src.interviewflow.router import (
    FIXED_EDGES,
    Step,
    next_step,
    route_after_analysis,
    route_after_store,
    route_after_validate,
    route_by_kind,
    route_entry,
)
from src.interviewflow.state_schema import (
    ChatMessage,
    Classification,
    ConcernKind,
    InterviewConfig,
    InterviewKind,
    Question,
    QuestionKind,
    TurnState,
)


INTERVIEW = InterviewConfig(
    interview_kind=InterviewKind.EXIT,
    questions=(
        Question(kind=QuestionKind.YES_NO, text="Would you return?"),
        Question(kind=QuestionKind.LONG_ANSWER, text="What could we improve?", max_followups=2),
    ),
)


def _state(**kwargs) -> TurnState:
    kwargs.setdefault("interview", INTERVIEW)
    kwargs.setdefault("started_at", "2026-01-01T00:00:00+00:00")
    return TurnState(**kwargs)


class TestEntryRouting(unittest.TestCase):
    def test_unstarted_state_initializes(self):
        self.assertEqual(route_entry(TurnState()), Step.INITIALIZE)

    def test_pending_user_message_is_translated(self):
        state = _state(message_log=[ChatMessage.assistant("Q1"), ChatMessage.user("yes")])
        self.assertEqual(route_entry(state), Step.TRANSLATE)

    def test_started_without_user_message_falls_back_to_initialize(self):
        state = _state(message_log=[ChatMessage.assistant("Q1")])
        self.assertEqual(route_entry(state), Step.INITIALIZE)

    def test_accepts_value_mappings(self):
        values = _state(message_log=[ChatMessage.user("hi")]).as_values()
        self.assertEqual(route_entry(values), Step.TRANSLATE)


class TestAnswerRouting(unittest.TestCase):
    def test_reprompt_dominates(self):
        self.assertEqual(route_after_validate(_state(needs_reprompt=True)), Step.REPROMPT)
        self.assertEqual(route_after_validate(_state()), Step.CLASSIFY_BY_KIND)

    def test_basic_question_is_stored_directly(self):
        self.assertEqual(route_by_kind(_state(current_question_index=0)), Step.STORE_BASIC)

    def test_assessment_question_is_analyzed(self):
        self.assertEqual(route_by_kind(_state(current_question_index=1)), Step.ANALYZE)

    def test_missing_question_is_an_invariant_violation(self):
        with self.assertRaises(StateInvariantError):
            route_by_kind(_state(current_question_index=2))


class TestAnalysisRouting(unittest.TestCase):
    def _route(self, classification, followups=0):
        state = _state(
            current_question_index=1,
            current_followup_count=followups,
            classification=classification,
        )
        return route_after_analysis(state)

    def test_concern_dominates_completeness(self):
        verdict = Classification(has_concern=True, concern_kind=ConcernKind.EEOC, is_complete_answer=False)
        self.assertEqual(self._route(verdict), Step.RESPOND_TO_CONCERN)
        self.assertEqual(self._route(verdict, followups=2), Step.RESPOND_TO_CONCERN)

    def test_complete_answer_is_stored(self):
        self.assertEqual(self._route(Classification()), Step.ACKNOWLEDGE_FOR_STORE)

    def test_incomplete_answer_gets_followup_below_limit(self):
        verdict = Classification(is_complete_answer=False, needs_more_context=True)
        self.assertEqual(self._route(verdict, followups=0), Step.ACKNOWLEDGE_FOR_FOLLOWUP)
        self.assertEqual(self._route(verdict, followups=1), Step.ACKNOWLEDGE_FOR_FOLLOWUP)

    def test_exhausted_followups_force_storage(self):
        verdict = Classification(is_complete_answer=False, needs_more_context=True)
        self.assertEqual(self._route(verdict, followups=2), Step.ACKNOWLEDGE_FOR_STORE)

    def test_missing_classification_is_an_invariant_violation(self):
        with self.assertRaises(StateInvariantError):
            self._route(None)


class TestStoreRouting(unittest.TestCase):
    def test_more_questions_ask_next(self):
        self.assertEqual(route_after_store(_state(current_question_index=1)), Step.ASK_QUESTION)

    def test_exhausted_catalog_finishes(self):
        self.assertEqual(route_after_store(_state(current_question_index=2)), Step.FINISH)


class TestRouterPurity(unittest.TestCase):
    def test_identical_state_gives_identical_decision(self):
        state = _state(
            current_question_index=1,
            current_followup_count=1,
            classification=Classification(is_complete_answer=False),
            message_log=[ChatMessage.user("meh")],
        )
        snapshot = state.as_values()
        for router in (route_entry, route_after_validate, route_by_kind, route_after_analysis, route_after_store):
            first = router(state)
            self.assertEqual([router(state) for _ in range(5)], [first] * 5)
        self.assertEqual(state.as_values(), snapshot)

    def test_fixed_edges(self):
        state = _state()
        self.assertEqual(next_step(Step.INITIALIZE, state), Step.ASK_QUESTION)
        self.assertEqual(next_step(Step.ASK_QUESTION, state), Step.WAIT_FOR_USER)
        self.assertEqual(next_step(Step.RESPOND_TO_CONCERN, state), Step.STORE_ASSESSMENT)
        self.assertEqual(next_step(Step.ACKNOWLEDGE_FOR_FOLLOWUP, state), Step.GENERATE_FOLLOWUP)
        self.assertEqual(next_step(Step.GENERATE_FOLLOWUP, state), Step.WAIT_FOR_USER)

    def test_finish_is_terminal_not_waiting(self):
        self.assertEqual(next_step(Step.FINISH, _state()), Step.COMPLETED)
        self.assertNotIn(Step.COMPLETED, FIXED_EDGES)
        self.assertNotIn(Step.WAIT_FOR_USER, FIXED_EDGES)


if __name__ == "__main__":
    unittest.main()
