import uuid
from dataclasses import dataclass, field

from ..utils.errors import ValidationError

QUESTION_TYPES = ("rating", "text", "multiple")


def new_question_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Question:
    id: str
    type: str
    text: str
    options: tuple[str, ...] = field(default=())

    def to_dict(self) -> dict:
        data = {"id": self.id, "type": self.type, "text": self.text}
        if self.type == "multiple":
            data["options"] = list(self.options)
        return data


def build_question(question_type, text, options=None, question_id=None, min_options=1) -> Question:
    """Validate raw input and build a Question.

    Blank options are dropped. ``min_options`` is raised to 2 by the form
    builder before a save.
    """
    if question_type not in QUESTION_TYPES:
        raise ValidationError(f"Unknown question type: {question_type!r}")

    text = (text or "").strip()
    if not text:
        raise ValidationError("Question text is required.")

    cleaned = ()
    if question_type == "multiple":
        cleaned = tuple(o.strip() for o in (options or []) if isinstance(o, str) and o.strip())
        if len(cleaned) < min_options:
            raise ValidationError(
                f"Multiple choice questions need at least {min_options} "
                f"option{'s' if min_options > 1 else ''}."
            )

    return Question(id=question_id or new_question_id(), type=question_type, text=text, options=cleaned)


def parse_questions(raw, min_options=1) -> list[Question]:
    """Decode the stored/submitted question list. Ids must be unique within the form."""
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValidationError("questions must be a list.")

    questions = []
    seen = set()
    for item in raw:
        if not isinstance(item, dict):
            raise ValidationError("Each question must be an object.")
        question = build_question(
            item.get("type"),
            item.get("text"),
            item.get("options"),
            question_id=str(item["id"]) if item.get("id") else None,
            min_options=min_options,
        )
        if question.id in seen:
            raise ValidationError(f"Duplicate question id: {question.id}")
        seen.add(question.id)
        questions.append(question)
    return questions


def dump_questions(questions) -> list[dict]:
    return [q.to_dict() for q in questions]
