import csv
import datetime
import io

from ..schemas.answers import answer_text
from .dates import format_submitted_at


def _field(row, name):
    return row.get(name) if isinstance(row, dict) else getattr(row, name)


def _submitted_at(row) -> datetime.datetime:
    value = _field(row, "submitted_at")
    if isinstance(value, str):
        value = datetime.datetime.fromisoformat(value)
    return value


def generate_csv(questions, responses, tz_name: str = "UTC") -> str:
    """
    One header row ("Submitted At" + question texts), one row per response.
    Every field is quoted; rows are joined with a bare newline.

    ``responses`` may be FeedbackResponse rows or serialized dicts.
    """
    if not responses:
        return ""

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")

    writer.writerow(["Submitted At"] + [q["text"] for q in questions])
    for response in responses:
        answers = _field(response, "answers")
        writer.writerow(
            [format_submitted_at(_submitted_at(response), tz_name)]
            + [answer_text(answers, str(q["id"])) for q in questions]
        )

    return buffer.getvalue().rstrip("\n")


def export_filename(title: str) -> str:
    safe = "".join(c for c in (title or "form") if c.isalnum() or c in " -_").strip() or "form"
    return f"{safe}-responses.csv"
