import json

import pytest
from pydantic import ValidationError

from cardforge.modules.cards.errors import CardValidationError, ParseError
from cardforge.modules.cards.models import Card, ScoreResult, grade_for
from cardforge.modules.cards.scoring import (
    SCORING_SYSTEM_PROMPT,
    build_scoring_messages,
    build_scoring_user_prompt,
    clamp_score,
    parse_scores,
)


def scores(*entries):
    return json.dumps({"scores": list(entries)})


@pytest.mark.parametrize(
    "value, expected",
    [(15, 10), (-2, 1), (0, 1), (6.5, 7), (6.49, 6), (9.5, 10), ("high", 5), (None, 5), (True, 5), (float("nan"), 5)],
)
def test_clamp_score(value, expected):
    assert clamp_score(value) == expected


@pytest.mark.parametrize("score, grade", [(10, "Excellent"), (9, "Excellent"), (8, "Good"), (7, "Good"), (6, "Needs Work"), (5, "Needs Work"), (4, "Poor"), (1, "Poor")])
def test_grade_bands(score, grade):
    assert grade_for(score) == grade


def test_improved_card_only_below_seven():
    rewrite = {"front": "Better Q", "back": "Better A", "tags": ["t", 3], "noteType": "BASIC"}
    raw = scores(
        {"score": 4, "feedback": ["vague"], "improvedCard": rewrite},
        {"score": 8, "feedback": ["clear"], "improvedCard": rewrite},
        {"score": 6.5, "feedback": ["ok"], "improvedCard": rewrite},
    )

    weak, good, rounded_up = parse_scores(raw)

    assert weak.score == 4
    assert weak.grade == "Poor"
    assert weak.improved_card == Card(front="Better Q", back="Better A", tags=["t"], note_type="BASIC")
    assert good.improved_card is None
    assert rounded_up.score == 7
    assert rounded_up.improved_card is None


def test_weak_score_without_rewrite_object():
    (result,) = parse_scores(scores({"score": 3, "feedback": ["x"], "improvedCard": "rewrite it"}))

    assert result.improved_card is None


def test_out_of_range_and_garbage_scores():
    results = parse_scores(scores({"score": 15}, {"score": -2}, {"score": "great"}, "not an object"))

    assert [r.score for r in results] == [10, 1, 5, 5]
    assert [r.grade for r in results] == ["Excellent", "Poor", "Needs Work", "Needs Work"]


def test_feedback_is_filtered_and_capped():
    raw = scores(
        {"score": 8, "feedback": ["a", "", 7, "b", "c", "d", "e"]},
        {"score": 8, "feedback": "single string"},
    )

    first, second = parse_scores(raw)

    assert first.feedback == ["a", "b", "c", "d"]
    assert second.feedback == ["Card 2: no feedback provided"]


def test_fenced_scoring_response():
    raw = "```json\n" + scores({"score": 9, "feedback": ["atomic"]}) + "\n```"

    assert parse_scores(raw)[0].grade == "Excellent"


def test_missing_scores_array_is_a_validation_error():
    with pytest.raises(CardValidationError):
        parse_scores('{"results": []}')


def test_unparseable_scoring_response():
    with pytest.raises(ParseError):
        parse_scores("Looks good to me!")


def test_scoring_prompt_describes_each_card():
    cards = [
        Card(front="What is a heap?", back="A tree-based priority structure", tags=["dsa"]),
        Card(text="{{c1::BFS}} uses a queue", note_type="CLOZE"),
    ]

    prompt = build_scoring_user_prompt(cards, "BASIC")

    assert prompt.startswith("Score the following 2 flashcard(s):")
    assert "### Card 1 (BASIC)\nFront: What is a heap?" in prompt
    assert "Extra: (none)\nTags: dsa" in prompt
    assert "### Card 2 (CLOZE)\nText: {{c1::BFS}} uses a queue" in prompt


def test_scoring_messages():
    system, user = build_scoring_messages([Card(front="Q")])

    assert system.role == "system"
    assert system.content == SCORING_SYSTEM_PROMPT
    assert "Atomicity" in system.content
    assert "Standalone Context" in system.content
    assert "Back: (empty)" in user.content


def test_score_result_drops_rewrite_for_good_scores():
    result = ScoreResult(score=7, grade="Good", improvedCard={"front": "x"})

    assert result.improved_card is None


def test_score_result_bounds():
    with pytest.raises(ValidationError):
        ScoreResult(score=11, grade="Excellent")


def test_integer_scores_beyond_float_range_are_clamped():
    huge = 10**400
    raw = '{"scores": [{"score": %d, "feedback": ["a"]}, {"score": -%d}]}' % (huge, huge)

    high, low = parse_scores(raw)

    assert clamp_score(huge) == 10
    assert (high.score, high.grade) == (10, "Excellent")
    assert (low.score, low.grade) == (1, "Poor")
