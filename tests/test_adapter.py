"""Tests for the classification adapter failure boundary (mocked language service)."""
import threading
import unittest
from unittest.mock import MagicMock

from src.interviewflow.adapter import ClassificationAdapter
from src.interviewflow.canned_messages import (
    CLOSING_MESSAGES,
    FALLBACK_FOLLOWUP,
    SIMPLE_EMPATHY,
    WELCOME_MESSAGES,
)
from src.interviewflow.errors import ClassificationFailure
from src.interviewflow.state_schema import ConcernKind, InterviewKind, Question, QuestionKind


def _service(verdicts=None, generated="Generated text."):
    verdicts = verdicts or {}
    service = MagicMock()
    service.generate.return_value = generated

    def classify(purpose, prompt):
        verdict = verdicts.get(purpose, {})
        if isinstance(verdict, Exception):
            raise verdict
        return verdict

    service.classify.side_effect = classify
    return service


class TestTranslation(unittest.TestCase):
    def test_translated_text_is_flagged(self):
        adapter = ClassificationAdapter(_service(generated="I liked my team"))
        result = adapter.translate("Me gustaba mi equipo")
        self.assertEqual(result.text, "I liked my team")
        self.assertTrue(result.was_translated)

    def test_case_only_difference_counts_as_unchanged(self):
        adapter = ClassificationAdapter(_service(generated="YES"))
        self.assertFalse(adapter.translate("yes").was_translated)

    def test_failure_returns_input_unchanged(self):
        service = _service()
        service.generate.side_effect = TimeoutError("slow")
        result = ClassificationAdapter(service).translate("hola")
        self.assertEqual(result.text, "hola")
        self.assertFalse(result.was_translated)

    def test_empty_translation_is_a_failure(self):
        adapter = ClassificationAdapter(_service(generated="   "))
        self.assertEqual(adapter.translate("bonjour").text, "bonjour")

    def test_offline_issues_no_call(self):
        service = _service()
        result = ClassificationAdapter(service).translate("hola", offline=True)
        self.assertEqual(result.text, "hola")
        service.generate.assert_not_called()


class TestConcernDetection(unittest.TestCase):
    def test_concern_verdict_is_parsed(self):
        adapter = ClassificationAdapter(
            _service({"detect_concern": {"hasConcerns": True, "concernType": "incident", "concernDetails": "theft"}})
        )
        verdict = adapter.detect_concern("Q", "A")
        self.assertTrue(verdict.has_concern)
        self.assertEqual(verdict.concern_kind, ConcernKind.INCIDENT)
        self.assertEqual(verdict.concern_detail, "theft")

    def test_has_concerns_must_be_literally_true(self):
        adapter = ClassificationAdapter(_service({"detect_concern": {"hasConcerns": "yes", "concernType": "eeoc"}}))
        self.assertFalse(adapter.detect_concern("Q", "A").has_concern)

    def test_unknown_concern_type_becomes_none(self):
        adapter = ClassificationAdapter(_service({"detect_concern": {"hasConcerns": True, "concernType": "weird"}}))
        verdict = adapter.detect_concern("Q", "A")
        self.assertTrue(verdict.has_concern)
        self.assertIsNone(verdict.concern_kind)

    def test_failure_means_no_concern(self):
        adapter = ClassificationAdapter(_service({"detect_concern": ClassificationFailure("bad json")}))
        with self.assertLogs(level="WARNING") as logs:
            verdict = adapter.detect_concern("Q", "A")
        self.assertFalse(verdict.has_concern)
        self.assertIn("detect_concern", logs.output[0])


class TestCompleteness(unittest.TestCase):
    def test_needs_more_context_defaults_to_not_proper(self):
        adapter = ClassificationAdapter(_service({"check_completeness": {"isProperResponse": False}}))
        verdict = adapter.check_completeness("Q", "A")
        self.assertFalse(verdict.is_complete_answer)
        self.assertTrue(verdict.needs_more_context)

    def test_missing_field_degrades_to_complete(self):
        adapter = ClassificationAdapter(_service({"check_completeness": {"reason": "?"}}))
        self.assertTrue(adapter.check_completeness("Q", "A").is_complete_answer)


class TestAnalyze(unittest.TestCase):
    def test_joins_both_verdicts(self):
        adapter = ClassificationAdapter(
            _service(
                {
                    "detect_concern": {"hasConcerns": False},
                    "check_completeness": {"isProperResponse": False, "needsMoreContext": True},
                }
            )
        )
        result = adapter.analyze("Q", "A")
        self.assertFalse(result.has_concern)
        self.assertFalse(result.is_complete_answer)
        self.assertTrue(result.needs_more_context)

    def test_one_failure_does_not_abort_the_other(self):
        adapter = ClassificationAdapter(
            _service(
                {
                    "detect_concern": RuntimeError("boom"),
                    "check_completeness": {"isProperResponse": False},
                }
            )
        )
        result = adapter.analyze("Q", "A")
        self.assertFalse(result.has_concern)
        self.assertFalse(result.is_complete_answer)

    def test_both_checks_are_in_flight_together(self):
        # each call blocks until the other arrives; sequential calls would time out
        barrier = threading.Barrier(2, timeout=5)
        verdicts = {
            "detect_concern": {"hasConcerns": True, "concernType": "incident"},
            "check_completeness": {"isProperResponse": False},
        }

        def classify(purpose, prompt):
            barrier.wait()
            return verdicts[purpose]

        service = MagicMock()
        service.classify.side_effect = classify
        with self.assertLogs(level="WARNING"):
            result = ClassificationAdapter(service).analyze("Q", "A")

        self.assertFalse(barrier.broken)
        self.assertEqual(service.classify.call_count, 2)
        self.assertTrue(result.has_concern)
        self.assertEqual(result.concern_kind, ConcernKind.INCIDENT)
        self.assertFalse(result.is_complete_answer)

    def test_offline_or_missing_service_returns_safe_default(self):
        service = _service()
        for adapter, offline in ((ClassificationAdapter(service), True), (ClassificationAdapter(None), False)):
            result = adapter.analyze("Q", "A", offline=offline)
            self.assertFalse(result.has_concern)
            self.assertTrue(result.is_complete_answer)
        service.classify.assert_not_called()


class TestGenerationFallbacks(unittest.TestCase):
    QUESTION = Question(kind=QuestionKind.NUMBER_SCALE, text="How satisfied were you?", max_followups=1)

    def test_offline_uses_canned_text(self):
        adapter = ClassificationAdapter(None)
        self.assertEqual(adapter.welcome(InterviewKind.EXIT), WELCOME_MESSAGES[InterviewKind.EXIT])
        self.assertEqual(adapter.closing(InterviewKind.SCREENER), CLOSING_MESSAGES[InterviewKind.SCREENER])
        self.assertEqual(
            adapter.phrase_question(self.QUESTION),
            "How satisfied were you? (Please answer on a scale of 1 to 10)",
        )
        self.assertEqual(adapter.acknowledge(InterviewKind.EXIT, self.QUESTION, "7"), SIMPLE_EMPATHY)

    def test_failed_followup_still_asks_a_question(self):
        service = _service()
        service.generate.side_effect = ConnectionError("down")
        adapter = ClassificationAdapter(service)
        self.assertEqual(adapter.followup(InterviewKind.EXIT, self.QUESTION, "7"), FALLBACK_FOLLOWUP)

    def test_generated_text_is_used_when_available(self):
        service = _service(generated="  Welcome aboard!  ")
        adapter = ClassificationAdapter(service)
        self.assertEqual(adapter.welcome(InterviewKind.SCREENER), "Welcome aboard!")
        self.assertEqual(service.generate.call_args[0][0], "welcome")


if __name__ == "__main__":
    unittest.main()
