"""Answer values, decoded against the type of the question they answer.

Stored shape::

    [{"questionId": "<id>", "value": 5}, {"questionId": "<id>", "value": "Great"}]
"""
from dataclasses import dataclass

from ..utils.errors import ValidationError

UNANSWERED_MESSAGE = "Please answer all questions before submitting."


@dataclass(frozen=True)
class RatingAnswer:
    question_id: str
    value: int


@dataclass(frozen=True)
class TextAnswer:
    question_id: str
    value: str


@dataclass(frozen=True)
class ChoiceAnswer:
    question_id: str
    value: str


def is_unanswered(value) -> bool:
    return value is None or value == "" or value == 0


def _decode_one(question, value):
    if question.type == "rating":
        if isinstance(value, bool):
            raise ValidationError(f"Rating for '{question.text}' must be a number from 1 to 5.")
        try:
            rating = int(value)
        except (TypeError, ValueError):
            raise ValidationError(f"Rating for '{question.text}' must be a number from 1 to 5.")
        if rating != value and str(rating) != str(value).strip():
            raise ValidationError(f"Rating for '{question.text}' must be a whole number.")
        if not 1 <= rating <= 5:
            raise ValidationError(f"Rating for '{question.text}' must be a number from 1 to 5.")
        return RatingAnswer(question.id, rating)

    if not isinstance(value, str):
        raise ValidationError(f"Answer for '{question.text}' must be text.")

    if question.type == "multiple":
        if value not in question.options:
            raise ValidationError(f"'{value}' is not an option for '{question.text}'.")
        return ChoiceAnswer(question.id, value)

    return TextAnswer(question.id, value)


def decode_answers(questions, raw) -> list:
    """Validate a submission: every question answered, in form order."""
    if not isinstance(raw, list):
        raise ValidationError("answers must be a list.")

    by_id = {}
    for item in raw:
        if not isinstance(item, dict) or "questionId" not in item:
            raise ValidationError("Each answer needs a questionId.")
        by_id[str(item["questionId"])] = item.get("value")

    known = {q.id for q in questions}
    stray = [qid for qid in by_id if qid not in known]
    if stray:
        raise ValidationError(f"Unknown question id: {stray[0]}")

    answers = []
    for question in questions:
        value = by_id.get(question.id)
        if is_unanswered(value):
            raise ValidationError(UNANSWERED_MESSAGE)
        answers.append(_decode_one(question, value))
    return answers


def encode_answers(answers) -> list[dict]:
    return [{"questionId": a.question_id, "value": a.value} for a in answers]


def answer_text(raw_answers, question_id) -> str:
    """Value of one stored answer as display text, "" when unanswered."""
    for item in raw_answers or []:
        if str(item.get("questionId")) == question_id:
            value = item.get("value")
            return "" if value is None else str(value)
    return ""
