"""Answer format validators and the interview config contract check.

Validators are pure and synchronous: each takes the user's (translated)
answer and returns a ``ValidationResult`` carrying either the normalized
value or a user-facing error message.
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Callable

from .errors import ConfigurationError
from .state_schema import InterviewConfig, InterviewKind, Question, QuestionKind, ValidationResult

_LEADING_INT_RE = re.compile(r"^[+-]?\d+")
_NON_DIGIT_RE = re.compile(r"\D")

YES_VARIANTS = frozenset(
    {
        "yes",
        "y",
        "yeah",
        "yep",
        "yup",
        "sure",
        "absolutely",
        "definitely",
        "correct",
        "affirmative",
        "true",
    }
)
NO_VARIANTS = frozenset({"no", "n", "nope", "nah", "negative", "not really", "false"})

SCALE_MIN = 1
SCALE_MAX = 10


def _parse_leading_int(text: str) -> int | None:
    match = _LEADING_INT_RE.match(text.strip())
    if not match:
        return None
    return int(match.group(0))


def validate_number_scale(response: str) -> ValidationResult:
    num = _parse_leading_int(response)
    if num is None:
        return ValidationResult(valid=False, error_message="Please provide a number between 1 and 10.")
    if num < SCALE_MIN or num > SCALE_MAX:
        return ValidationResult(
            valid=False,
            error_message=f"{num} is out of range. Please provide a number between 1 and 10.",
        )
    return ValidationResult(valid=True, normalized_value=str(num))


def validate_yes_no(response: str) -> ValidationResult:
    token = response.strip().lower()
    if token in YES_VARIANTS:
        return ValidationResult(valid=True, normalized_value="yes")
    if token in NO_VARIANTS:
        return ValidationResult(valid=True, normalized_value="no")
    return ValidationResult(valid=False, error_message="Please answer with yes or no.")


def _option_index(token: str, option_count: int) -> int | None:
    """Resolve "1", "2", ... or "a", "b", ... to a 0-based option index."""
    num = _parse_leading_int(token)
    if num is not None and 1 <= num <= option_count:
        return num - 1
    if len(token) == 1 and "a" <= token <= "z":
        idx = ord(token) - ord("a")
        if idx < option_count:
            return idx
    return None


def validate_single_select(response: str, options: tuple[str, ...] | list[str]) -> ValidationResult:
    token = response.strip().lower()
    invalid = ValidationResult(
        valid=False,
        error_message=f"Please choose one of the options: {', '.join(options)}",
    )
    if not token:
        return invalid

    for opt in options:
        if opt.lower() == token:
            return ValidationResult(valid=True, normalized_value=opt)

    for opt in options:
        lowered = opt.lower()
        if lowered.startswith(token) or token.startswith(lowered):
            return ValidationResult(valid=True, normalized_value=opt)

    # e.g. "High school, although I also took some courses"
    for opt in options:
        if opt.lower() in token:
            return ValidationResult(valid=True, normalized_value=opt)

    idx = _option_index(token, len(options))
    if idx is not None:
        return ValidationResult(valid=True, normalized_value=options[idx])

    return invalid


def validate_phone_number(response: str) -> ValidationResult:
    digits = _NON_DIGIT_RE.sub("", response.strip())

    if len(digits) == 10:
        return ValidationResult(valid=True, normalized_value=digits)
    if len(digits) == 11 and digits.startswith("1"):
        return ValidationResult(valid=True, normalized_value=digits[1:])
    if 7 <= len(digits) <= 15:
        return ValidationResult(valid=True, normalized_value=digits)

    return ValidationResult(
        valid=False,
        error_message="Please provide a valid phone number (e.g., 555-123-4567).",
    )


def validate_short_answer(response: str) -> ValidationResult:
    trimmed = response.strip()
    if not trimmed:
        return ValidationResult(valid=False, error_message="Please provide an answer.")
    return ValidationResult(valid=True, normalized_value=trimmed)


def validate_long_answer(response: str) -> ValidationResult:
    trimmed = response.strip()
    if not trimmed:
        return ValidationResult(valid=False, error_message="Please share your thoughts on this question.")
    return ValidationResult(valid=True, normalized_value=trimmed)


_VALIDATORS: dict[QuestionKind, Callable[[str], ValidationResult]] = {
    QuestionKind.NUMBER_SCALE: validate_number_scale,
    QuestionKind.YES_NO: validate_yes_no,
    QuestionKind.PHONE_NUMBER: validate_phone_number,
    QuestionKind.SHORT_ANSWER: validate_short_answer,
    QuestionKind.LONG_ANSWER: validate_long_answer,
}


def validate_answer(response: str, question: Question) -> ValidationResult:
    if question.kind == QuestionKind.SINGLE_SELECT:
        if not question.options:
            return ValidationResult(valid=False, error_message="No options available for this question.")
        return validate_single_select(response, question.options)

    # unknown kinds accept any non-empty answer
    validator = _VALIDATORS.get(question.kind, validate_short_answer)
    return validator(response)


# ---------------------------------------------------------------------------
# Interview config contract
# ---------------------------------------------------------------------------

_KIND_VALUES = {k.value for k in QuestionKind}
_INTERVIEW_KIND_VALUES = {k.value for k in InterviewKind}


def _parse_question(position: int, raw: Any) -> Question:
    label = f"Question {position}"
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"{label}: must be an object.")

    kind = raw.get("kind")
    if not kind:
        raise ConfigurationError(f"{label}: kind is required.")
    if kind not in _KIND_VALUES:
        raise ConfigurationError(f'{label}: invalid kind "{kind}".')

    text = raw.get("text")
    if not isinstance(text, str) or not text.strip():
        raise ConfigurationError(f"{label}: text is required.")

    max_followups = raw.get("max_followups")
    if isinstance(max_followups, bool) or not isinstance(max_followups, int) or max_followups < 0:
        raise ConfigurationError(f"{label}: max_followups must be a non-negative integer.")

    group = raw.get("group")
    if group is not None and not isinstance(group, str):
        raise ConfigurationError(f"{label}: group must be a string.")

    options = raw.get("options") or ()
    if kind == QuestionKind.SINGLE_SELECT.value:
        if not isinstance(options, (list, tuple)) or not options:
            raise ConfigurationError(f"{label}: single_select requires options array.")
    if not isinstance(options, (list, tuple)) or not all(isinstance(o, str) and o.strip() for o in options):
        raise ConfigurationError(f"{label}: options must be non-empty strings.")

    return Question(
        kind=QuestionKind(kind),
        text=text.strip(),
        max_followups=max_followups,
        group=group,
        options=tuple(o.strip() for o in options),
    )


def validate_interview_config(payload: Any) -> InterviewConfig:
    """Fail-fast check of a raw interview config; raises on the first violation."""
    if not isinstance(payload, Mapping):
        raise ConfigurationError("Interview config must be an object.")

    interview_kind = payload.get("interview_kind")
    if not interview_kind:
        raise ConfigurationError("interview_kind is required.")
    if interview_kind not in _INTERVIEW_KIND_VALUES:
        raise ConfigurationError(
            f'Invalid interview_kind: "{interview_kind}". Must be "screener" or "exit".'
        )

    questions = payload.get("questions")
    if questions is None:
        raise ConfigurationError("questions array is required.")
    if not isinstance(questions, (list, tuple)):
        raise ConfigurationError("questions must be an array.")
    if not questions:
        raise ConfigurationError("questions array cannot be empty.")

    offline_mode = payload.get("offline_mode", False)
    if not isinstance(offline_mode, bool):
        raise ConfigurationError("offline_mode must be a boolean.")

    parsed = tuple(_parse_question(i, q) for i, q in enumerate(questions, start=1))
    return InterviewConfig(
        interview_kind=InterviewKind(interview_kind),
        questions=parsed,
        offline_mode=offline_mode,
    )
