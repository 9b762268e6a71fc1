from __future__ import annotations

from dataclasses import dataclass

from .router import Step
from .state_schema import ConcernKind, InterviewKind, QuestionKind, TurnState


CONTRACT_VERSIONS = {
    "turn_state": "v1",
    "interview_config": "v1",
    "transcript": "v1",
}


REQUIRED_STATE_FIELDS = {
    "interview",
    "current_question_index",
    "current_followup_count",
    "raw_answer",
    "translated_answer",
    "was_translated",
    "classification",
    "needs_reprompt",
    "reprompt_reason",
    "primary_raw_answer",
    "primary_translated_answer",
    "primary_was_translated",
    "pending_followups",
    "responses",
    "message_log",
    "started_at",
    "is_finished",
    "final_transcript",
    "last_step",
}


EXPECTED_QUESTION_KINDS = {
    "number_scale",
    "long_answer",
    "short_answer",
    "yes_no",
    "single_select",
    "phone_number",
}

EXPECTED_CONCERN_KINDS = {"eeoc", "outside_scope", "incident"}

EXPECTED_INTERVIEW_KINDS = {"screener", "exit"}

EXPECTED_STEPS = {
    "initialize",
    "ask_question",
    "translate",
    "validate_format",
    "reprompt",
    "classify_by_kind",
    "store_basic",
    "analyze",
    "respond_to_concern",
    "acknowledge_for_followup",
    "acknowledge_for_store",
    "generate_followup",
    "store_assessment",
    "finish",
    "wait_for_user",
    "completed",
}


@dataclass(frozen=True, slots=True)
class ContractValidationResult:
    is_valid: bool
    errors: list[str]


def validate_contract_freeze() -> ContractValidationResult:
    errors: list[str] = []

    if set(CONTRACT_VERSIONS.keys()) != {"turn_state", "interview_config", "transcript"}:
        errors.append("contract_versions_missing_required_keys")

    current_state_fields = set(TurnState.__dataclass_fields__.keys())
    missing_state = REQUIRED_STATE_FIELDS.difference(current_state_fields)
    if missing_state:
        errors.append(f"missing_state_fields:{sorted(missing_state)}")

    unexpected_state = current_state_fields.difference(REQUIRED_STATE_FIELDS)
    if unexpected_state:
        errors.append(f"unexpected_state_fields:{sorted(unexpected_state)}")

    if EXPECTED_QUESTION_KINDS != {k.value for k in QuestionKind}:
        errors.append("question_kinds_changed")

    if EXPECTED_CONCERN_KINDS != {k.value for k in ConcernKind}:
        errors.append("concern_kinds_changed")

    if EXPECTED_INTERVIEW_KINDS != {k.value for k in InterviewKind}:
        errors.append("interview_kinds_changed")

    if EXPECTED_STEPS != {s.value for s in Step}:
        errors.append("steps_changed")

    return ContractValidationResult(is_valid=not errors, errors=errors)
