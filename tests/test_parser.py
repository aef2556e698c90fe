"""Tests for generateContent envelope extraction and result parsing."""

from __future__ import annotations

import json

import pytest

from speechcoach.analysis.parser import extract_response_text, parse_analysis_text, strip_code_fences
from speechcoach.core.exceptions import AnalysisParseError
from helpers import make_result_payload


def _envelope(*parts: dict) -> dict:
    return {"candidates": [{"content": {"role": "model", "parts": list(parts)}}]}


def test_extract_joins_text_parts_and_skips_thoughts() -> None:
    env = _envelope({"text": "thinking...", "thought": True}, {"text": '{"a":'}, {"text": " 1}"})
    assert extract_response_text(env) == '{"a": 1}'


def test_extract_uses_first_candidate_with_text() -> None:
    env = {"candidates": [{"content": {"parts": []}}, {"content": {"parts": [{"text": "second"}]}}]}
    assert extract_response_text(env) == "second"


def test_extract_without_candidates_raises() -> None:
    with pytest.raises(AnalysisParseError):
        extract_response_text({"promptFeedback": {"blockReason": "SAFETY"}})


def test_strip_code_fences() -> None:
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences('{"a": 1}') == '{"a": 1}'


def test_parse_valid_text() -> None:
    result = parse_analysis_text(json.dumps(make_result_payload(fill=6)))
    assert result.overall_score == 6.0
    assert result.disfluencies.filler_words[0].token == "um"


def test_parse_non_json_keeps_raw_text() -> None:
    with pytest.raises(AnalysisParseError) as exc_info:
        parse_analysis_text("Sorry, I cannot analyze this video.")
    assert exc_info.value.raw_text == "Sorry, I cannot analyze this video."


def test_parse_schema_violation_names_field() -> None:
    payload = make_result_payload()
    payload["scores"]["word_choice"]["formality"] = 12
    text = json.dumps(payload)
    with pytest.raises(AnalysisParseError) as exc_info:
        parse_analysis_text(text)
    assert "formality" in str(exc_info.value)
    assert exc_info.value.raw_text == text


@pytest.mark.parametrize("bad", [True, "7"])
def test_parse_rejects_coercible_scores(bad) -> None:
    payload = make_result_payload()
    payload["scores"]["voice_sound"]["volume"] = bad
    with pytest.raises(AnalysisParseError) as exc_info:
        parse_analysis_text(json.dumps(payload))
    assert "volume" in str(exc_info.value)
