"""Tests for mapping rubric results onto coaching feedback."""

from __future__ import annotations

from speechcoach.analysis.feedback import to_feedback
from speechcoach.analysis.models import AnalysisResult
from speechcoach.providers.mock import mock_result
from helpers import make_result_payload


def test_high_scores_become_strengths() -> None:
    fb = to_feedback(mock_result("r1"))
    assert fb.strengths == [
        "Clear articulation and pronunciation",
        "Confident delivery and presence",
        "Engaging and charismatic presentation",
    ]
    assert fb.opportunities == ["Continue practicing for improvement"]
    assert fb.prioritized_tips == []
    assert fb.filler_words == "um (4 times), uh (2 times)"
    assert fb.overall_score == 6.5


def test_low_scores_become_opportunities_and_tips() -> None:
    result = AnalysisResult.model_validate(make_result_payload(fill=3))
    fb = to_feedback(result)
    assert fb.strengths == ["Good overall communication skills"]
    assert len(fb.opportunities) == 5
    assert fb.prioritized_tips == fb.opportunities
    assert fb.clarity == "Overall clarity score: 3/10"
    assert fb.confidence == "Confidence level: 3/10"


def test_no_filler_words() -> None:
    payload = make_result_payload()
    payload["disfluencies"]["filler_words"] = []
    fb = to_feedback(AnalysisResult.model_validate(payload))
    assert fb.filler_words == "No significant filler words detected"
