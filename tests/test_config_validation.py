import unittest

from src.interviewflow.errors import ConfigurationError
from src.interviewflow.state_schema import InterviewKind, QuestionKind
from src.interviewflow.validators import validate_interview_config


def _config(**overrides):
    config = {
        "interview_kind": "screener",
        "questions": [
            {"kind": "short_answer", "text": "What is your name?", "max_followups": 0},
            {
                "kind": "single_select",
                "text": "Preferred shift?",
                "max_followups": 0,
                "options": ["Morning", "Evening"],
            },
            {"kind": "long_answer", "text": "Why this role?", "max_followups": 2, "group": "motivation"},
        ],
    }
    config.update(overrides)
    return config


class TestInterviewConfigValidation(unittest.TestCase):
    def test_valid_config_is_parsed(self):
        interview = validate_interview_config(_config(offline_mode=True))
        self.assertEqual(interview.interview_kind, InterviewKind.SCREENER)
        self.assertTrue(interview.offline_mode)
        self.assertEqual(len(interview.questions), 3)
        self.assertEqual(interview.questions[1].options, ("Morning", "Evening"))
        self.assertEqual(interview.questions[2].kind, QuestionKind.LONG_ANSWER)
        self.assertEqual(interview.questions[2].group, "motivation")
        self.assertFalse(interview.questions[2].is_basic)

    def test_offline_mode_defaults_to_false(self):
        self.assertFalse(validate_interview_config(_config()).offline_mode)

    def test_rejects_unknown_interview_kind(self):
        with self.assertRaises(ConfigurationError) as ctx:
            validate_interview_config(_config(interview_kind="onboarding"))
        self.assertIn('Invalid interview_kind: "onboarding"', str(ctx.exception))

    def test_rejects_missing_or_empty_questions(self):
        config = _config()
        del config["questions"]
        with self.assertRaisesRegex(ConfigurationError, "questions array is required"):
            validate_interview_config(config)
        with self.assertRaisesRegex(ConfigurationError, "cannot be empty"):
            validate_interview_config(_config(questions=[]))

    def test_rejects_unknown_question_kind_with_position(self):
        questions = _config()["questions"]
        questions[1] = {"kind": "essay", "text": "Tell me a story", "max_followups": 0}
        with self.assertRaises(ConfigurationError) as ctx:
            validate_interview_config(_config(questions=questions))
        self.assertEqual(str(ctx.exception), 'Question 2: invalid kind "essay".')

    def test_rejects_blank_text(self):
        questions = [{"kind": "short_answer", "text": "   ", "max_followups": 0}]
        with self.assertRaisesRegex(ConfigurationError, "Question 1: text is required"):
            validate_interview_config(_config(questions=questions))

    def test_rejects_bad_max_followups(self):
        for bad in [-1, 1.5, "2", None, True]:
            questions = [{"kind": "long_answer", "text": "Why?", "max_followups": bad}]
            with self.assertRaises(ConfigurationError, msg=repr(bad)):
                validate_interview_config(_config(questions=questions))

    def test_single_select_requires_options(self):
        questions = [{"kind": "single_select", "text": "Pick one", "max_followups": 0, "options": []}]
        with self.assertRaisesRegex(ConfigurationError, "single_select requires options"):
            validate_interview_config(_config(questions=questions))

    def test_reports_first_violation_only(self):
        questions = [
            {"kind": "essay", "text": "", "max_followups": -1},
            {"kind": "single_select", "text": "Pick", "max_followups": 0},
        ]
        with self.assertRaises(ConfigurationError) as ctx:
            validate_interview_config(_config(questions=questions))
        self.assertEqual(str(ctx.exception), 'Question 1: invalid kind "essay".')

    def test_configuration_error_is_a_value_error(self):
        with self.assertRaises(ValueError):
            validate_interview_config("not a config")


if __name__ == "__main__":
    unittest.main()
