import pytest

from qrfeedback.schemas.answers import (
    ChoiceAnswer,
    RatingAnswer,
    TextAnswer,
    UNANSWERED_MESSAGE,
    answer_text,
    decode_answers,
    encode_answers,
)
from qrfeedback.schemas.questions import build_question, parse_questions
from qrfeedback.utils.errors import ValidationError


@pytest.fixture
def questions():
    return parse_questions([
        {"id": "r", "type": "rating", "text": "How was it?"},
        {"id": "t", "type": "text", "text": "Anything else?"},
        {"id": "m", "type": "multiple", "text": "Pick one", "options": ["Yes", "No", " "]},
    ])


def test_blank_options_are_dropped(questions):
    assert questions[2].options == ("Yes", "No")


def test_new_questions_get_unique_ids():
    a = build_question("text", "One")
    b = build_question("text", "One")
    assert a.id != b.id


def test_multiple_choice_needs_two_options_in_builder():
    with pytest.raises(ValidationError):
        build_question("multiple", "Pick", ["Only"], min_options=2)
    assert build_question("multiple", "Pick", ["Only"]).options == ("Only",)


@pytest.mark.parametrize("raw", [
    [{"id": "a", "type": "essay", "text": "?"}],
    [{"id": "a", "type": "text", "text": "   "}],
    [{"id": "a", "type": "text", "text": "x"}, {"id": "a", "type": "text", "text": "y"}],
    "not a list",
])
def test_invalid_question_lists(raw):
    with pytest.raises(ValidationError):
        parse_questions(raw)


def test_decode_typed_answers(questions):
    answers = decode_answers(questions, [
        {"questionId": "m", "value": "Yes"},
        {"questionId": "r", "value": 4},
        {"questionId": "t", "value": "Lovely"},
    ])
    assert answers == [RatingAnswer("r", 4), TextAnswer("t", "Lovely"), ChoiceAnswer("m", "Yes")]
    assert encode_answers(answers)[0] == {"questionId": "r", "value": 4}


@pytest.mark.parametrize("value", [None, "", 0])
def test_unanswered_is_rejected(questions, value):
    raw = [
        {"questionId": "r", "value": value},
        {"questionId": "t", "value": "x"},
        {"questionId": "m", "value": "No"},
    ]
    with pytest.raises(ValidationError, match=UNANSWERED_MESSAGE):
        decode_answers(questions, raw)


@pytest.mark.parametrize("raw", [
    [{"questionId": "r", "value": 6}, {"questionId": "t", "value": "x"}, {"questionId": "m", "value": "No"}],
    [{"questionId": "r", "value": 2.5}, {"questionId": "t", "value": "x"}, {"questionId": "m", "value": "No"}],
    [{"questionId": "r", "value": 3}, {"questionId": "t", "value": "x"}, {"questionId": "m", "value": "Maybe"}],
    [{"questionId": "r", "value": 3}, {"questionId": "t", "value": "x"}, {"questionId": "m", "value": "No"},
     {"questionId": "zzz", "value": "?"}],
])
def test_bad_values_are_rejected(questions, raw):
    with pytest.raises(ValidationError):
        decode_answers(questions, raw)


def test_answer_text():
    raw = [{"questionId": "r", "value": 5}]
    assert answer_text(raw, "r") == "5"
    assert answer_text(raw, "t") == ""
    assert answer_text(None, "r") == ""
