from __future__ import annotations

from .state_schema import ConcernKind, InterviewKind, Question, QuestionKind


BASIC_ACKNOWLEDGEMENTS: dict[QuestionKind, tuple[str, ...]] = {
    QuestionKind.PHONE_NUMBER: ("Thanks for that!", "Got it, thank you!", "Perfect, thanks!"),
    QuestionKind.YES_NO: ("Got it.", "Understood.", "Noted, thanks."),
    QuestionKind.SINGLE_SELECT: ("Thanks for that.", "Noted, thank you.", "Got it."),
    QuestionKind.SHORT_ANSWER: ("Thanks!", "Got it, thanks!", "Thank you."),
    QuestionKind.LONG_ANSWER: (
        "Thank you for sharing that.",
        "I appreciate you sharing that.",
        "Thanks for the detail.",
    ),
    QuestionKind.NUMBER_SCALE: ("Got it, thanks.", "Noted.", "Thank you."),
}

CONCERN_RESPONSES: dict[ConcernKind, str] = {
    ConcernKind.EEOC: (
        "Thank you for sharing that with me. What you've described sounds important, and I want "
        "you to know that concerns like this are taken seriously. If you'd like to formally report "
        "this, you can contact HR directly or use the company's anonymous reporting system. For now, "
        "I'll make a note of this, and we can continue when you're ready."
    ),
    ConcernKind.OUTSIDE_SCOPE: (
        "I appreciate you sharing that. Let me bring us back to the interview questions so we can "
        "make sure to cover everything. We can continue with the next question."
    ),
    ConcernKind.INCIDENT: (
        "I'm sorry to hear that. What you've described sounds serious and should be properly "
        "documented. If you'd like to report this, please contact HR or use the company's safety "
        "and incident reporting system. Your wellbeing is important, and these matters are handled "
        "confidentially. Let's continue when you're ready."
    ),
}

REPROMPT_MESSAGES: dict[QuestionKind, str] = {
    QuestionKind.NUMBER_SCALE: "I need a number between 1 and 10. What would you say?",
    QuestionKind.YES_NO: "Could you answer with yes or no?",
    QuestionKind.SINGLE_SELECT: "Please choose one of the options I mentioned.",
    QuestionKind.PHONE_NUMBER: "I need a valid phone number. Could you provide that?",
    QuestionKind.SHORT_ANSWER: "Could you provide an answer to that question?",
    QuestionKind.LONG_ANSWER: "Could you share a bit more on that?",
}

WELCOME_MESSAGES: dict[InterviewKind, str] = {
    InterviewKind.SCREENER: (
        "Hi! Thanks for taking the time to speak with me today. I'll be asking you some questions "
        "to learn more about your background and qualifications. Let's get started!"
    ),
    InterviewKind.EXIT: (
        "Thank you for meeting with me today. I'd like to ask you some questions about your "
        "experience here. Your feedback is valuable and will help us improve. Let's begin."
    ),
}

CLOSING_MESSAGES: dict[InterviewKind, str] = {
    InterviewKind.SCREENER: (
        "Thank you for completing this interview! We appreciate your time and will be in touch "
        "about next steps."
    ),
    InterviewKind.EXIT: (
        "Thank you for your time and for sharing your feedback. Your insights are valuable and will "
        "help us improve. We wish you all the best in your future endeavors!"
    ),
}

SIMPLE_EMPATHY = "Thank you for sharing that."
FALLBACK_FOLLOWUP = "Could you tell me a little more about that?"


def basic_acknowledgement(kind: QuestionKind, question_index: int) -> str:
    acks = BASIC_ACKNOWLEDGEMENTS.get(kind, BASIC_ACKNOWLEDGEMENTS[QuestionKind.SHORT_ANSWER])
    return acks[question_index % len(acks)]


def concern_response(kind: ConcernKind | None) -> str:
    return CONCERN_RESPONSES.get(kind, CONCERN_RESPONSES[ConcernKind.OUTSIDE_SCOPE])


def reprompt_message(question: Question) -> str:
    if question.kind == QuestionKind.SINGLE_SELECT and question.options:
        return f"Please choose one of these options: {', '.join(question.options)}"
    return REPROMPT_MESSAGES.get(question.kind, REPROMPT_MESSAGES[QuestionKind.SHORT_ANSWER])


def format_question_verbatim(question: Question) -> str:
    if question.kind == QuestionKind.NUMBER_SCALE:
        return f"{question.text} (Please answer on a scale of 1 to 10)"
    if question.kind == QuestionKind.SINGLE_SELECT and question.options:
        numbered = "\n".join(f"{i}. {opt}" for i, opt in enumerate(question.options, start=1))
        return f"{question.text}\n\nOptions:\n{numbered}"
    if question.kind == QuestionKind.YES_NO:
        return f"{question.text} (Yes or No)"
    return question.text
