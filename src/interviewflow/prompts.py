"""Prompt builders for the language service, one per purpose tag."""
from __future__ import annotations

from .state_schema import InterviewKind, Question, QuestionKind

SYSTEM_PROMPT = """You are the interviewer for a structured HR interview (candidate screening or employee exit).
Be professional, warm and brief. Never collect information the current question does not ask for.
Never diagnose, judge, or promise outcomes."""


def _interview_context(kind: InterviewKind) -> str:
    if kind == InterviewKind.EXIT:
        return "This is an exit interview gathering feedback from a departing employee."
    return "This is a screening interview assessing a candidate."


def welcome_prompt(kind: InterviewKind) -> str:
    if kind == InterviewKind.SCREENER:
        return """You are conducting a screening interview to assess a candidate's qualifications.

Generate a brief, warm welcome message that:
1. Thanks them for their time
2. Explains this is a screening interview
3. Sets expectations (you'll ask some questions)
4. Is 2-3 sentences maximum

Generate only the welcome message, nothing else."""

    return """You are conducting an exit interview to gather feedback from a departing employee.

Generate a brief, warm welcome message that:
1. Thanks them for meeting
2. Explains the purpose is to gather feedback to improve
3. Assures their feedback is valuable
4. Is 2-3 sentences maximum

Generate only the welcome message, nothing else."""


def ask_question_prompt(question: Question) -> str:
    if question.kind == QuestionKind.NUMBER_SCALE:
        guidance = "This is a scale question. Mention they should answer on a scale of 1 to 10."
    elif question.kind == QuestionKind.SINGLE_SELECT:
        guidance = f"This is a multiple choice question. Present these options naturally: {', '.join(question.options)}"
    elif question.kind == QuestionKind.YES_NO:
        guidance = "This is a yes/no question. Phrase it to expect a yes or no answer."
    elif question.kind == QuestionKind.PHONE_NUMBER:
        guidance = "This asks for their phone number."
    else:
        guidance = "This is an open-ended question."

    return f"""Ask the following interview question in a natural, conversational way:

Question: "{question.text}"
{guidance}

Guidelines:
- Keep it conversational and warm
- Don't add extra questions or follow-ups
- Don't collect any information not asked in the question

Generate only the question, nothing else."""


def translate_prompt(response: str) -> str:
    return f"""Analyze this text and translate it to English if needed.

Text: "{response}"

Instructions:
1. If the text is already in English, return it exactly as-is
2. If the text is in another language, translate it to English
3. Preserve the meaning and tone of the original

Return ONLY the English text, nothing else. No explanations or notes."""


def concern_prompt(question_text: str, response: str) -> str:
    return f"""You are analyzing an interview response for concerning content that may need special handling.

Question asked: "{question_text}"
Response given: "{response}"

IMPORTANT: Normal workplace feedback, criticism, or complaints are NOT concerns. Only flag serious issues.

Check for these specific categories:

1. EEOC ISSUES - ONLY flag explicit mentions of discrimination or harassment based on race, color,
   religion, sex, gender, pregnancy, national origin, age (40+), disability, genetic information or
   sexual orientation, a hostile work environment due to protected characteristics, or retaliation
   for reporting discrimination. DO NOT flag general complaints about management.

2. OUTSIDE SCOPE - Response that does not address the question at all, is completely off-topic,
   asks questions instead of answering, or is about unrelated personal matters.
   DO NOT flag responses that answer the question even if tangentially.

3. REPORTABLE INCIDENTS - ONLY flag explicit mentions of safety violations causing injury, physical
   threats or violence, specific illegal activity (theft, fraud, embezzlement), witnessed substance
   abuse at work, or sexual misconduct or assault.

When in doubt, respond with hasConcerns: false. Most interview responses are normal feedback.

Respond in this exact JSON format only:
{{
  "hasConcerns": true or false,
  "concernType": "eeoc" or "outside_scope" or "incident" or null,
  "concernDetails": "brief description of the concern" or null
}}"""


def completeness_prompt(question_text: str, response: str) -> str:
    return f"""You are analyzing if an interview response properly addresses the question.

Question: "{question_text}"
Response: "{response}"

Analyze if the response:
- Actually answers what was asked
- Provides sufficient detail for the question type
- Is not too vague or generic
- Makes sense as a response to this specific question

Consider:
- A number scale question just needs a number (follow-up can probe for details)
- A yes/no question just needs yes or no
- Open-ended questions need some substance but don't need to be lengthy

Respond in this exact JSON format only:
{{
  "isProperResponse": true or false,
  "needsMoreContext": true or false,
  "reason": "brief explanation"
}}"""


def acknowledgement_prompt(kind: InterviewKind, question_text: str, response: str) -> str:
    return f"""You are conducting an interview. {_interview_context(kind)}

The question was: "{question_text}"
The respondent answered: "{response}"

Generate a brief, empathetic acknowledgement that:
1. Shows you heard and understood their response
2. Validates their perspective or experience
3. Is conversational and warm
4. Is 1-2 sentences maximum
5. Does NOT ask any follow-up questions

Generate only the acknowledgement, nothing else. Do not include quotation marks."""


def followup_prompt(kind: InterviewKind, question_text: str, response: str, group: str | None) -> str:
    group_context = f"\nQuestion category: {group}" if group else ""
    return f"""You are conducting an interview. {_interview_context(kind)}

The previous question was: "{question_text}"
The respondent answered: "{response}"{group_context}

Their response needs more context or detail. Generate ONE thoughtful follow-up question that:
1. Asks for more detail or clarification
2. Is specific to what they said
3. Digs deeper into their experience or perspective
4. Is conversational and empathetic in tone
5. Stays on the topic of the original question

Generate only the follow-up question, nothing else. Do not include quotation marks."""


def reprompt_prompt(question: Question, error_message: str) -> str:
    if question.kind == QuestionKind.NUMBER_SCALE:
        hint = "They need to provide a number between 1 and 10."
    elif question.kind == QuestionKind.YES_NO:
        hint = "They need to answer yes or no."
    elif question.kind == QuestionKind.SINGLE_SELECT:
        hint = f"They need to choose one of: {', '.join(question.options)}"
    elif question.kind == QuestionKind.PHONE_NUMBER:
        hint = "They need to provide a valid phone number."
    else:
        hint = "They need to provide a response."

    return f"""The user gave an invalid response to an interview question.

Question: "{question.text}"
Issue: {error_message}
{hint}

Generate a friendly, brief message asking them to try again.
Be specific about what format you need.
Keep it warm and not robotic.

Generate only the re-prompt message, nothing else."""


def closing_prompt(kind: InterviewKind) -> str:
    if kind == InterviewKind.EXIT:
        return """You have just completed an exit interview.

Generate a brief, warm closing message that:
1. Thanks them for their time and candid feedback
2. Acknowledges their feedback is valuable
3. Wishes them well in their future endeavors
4. Is 2-3 sentences maximum

Generate only the closing message, nothing else."""

    return """You have just completed a screening interview.

Generate a brief, warm closing message that:
1. Thanks them for their time
2. Lets them know next steps will be communicated
3. Is positive and encouraging
4. Is 2-3 sentences maximum

Generate only the closing message, nothing else."""
