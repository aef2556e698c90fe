"""Deterministic local analyzer, the last link of the fallback chain."""

from __future__ import annotations

from pathlib import Path

from speechcoach.analysis.models import AnalysisReport, AnalysisResult
from speechcoach.providers.base import SpeechAnalyzer

MOCK_SCORES: dict[str, dict[str, int]] = {
    "voice_sound": {
        "pitch_tone": 7,
        "volume": 7,
        "tempo_pace": 6,
        "clarity_articulation": 8,
        "pausing_hesitation": 5,
        "prosody": 6,
    },
    "word_choice": {
        "formality": 7,
        "complexity": 6,
        "repetition": 6,
        "directness": 7,
        "emotional_tone": 7,
    },
    "sentence_structure": {
        "sentence_length": 6,
        "narrative_style": 7,
        "use_of_questions": 5,
        "metaphors_analogies": 5,
    },
    "conversational_style": {
        "turn_taking": 6,
        "responsiveness": 7,
        "politeness": 8,
        "assertiveness": 7,
        "humor_playfulness": 5,
    },
    "nonverbal": {
        "laughter": 5,
        "gestures": 6,
        "facial_expressions": 7,
    },
    "overall_impression": {
        "warmth": 7,
        "authority": 8,
        "charisma": 7,
    },
}

MOCK_SUMMARY = (
    "Overall, this is a strong practice session with clear communication and good energy. "
    "You come across as confident and keep steady eye contact with the camera. "
    "The biggest gains are available in pacing and pausing: slow down slightly and replace "
    "'um' and 'uh' with short, deliberate pauses. Adding a specific example or two would "
    "make your key points land harder."
)


def mock_result(recording_id: str) -> AnalysisResult:
    """Same recording id in, same result out."""
    return AnalysisResult.model_validate(
        {
            "video_id": recording_id,
            "scores": MOCK_SCORES,
            "disfluencies": {
                "filler_words": [{"token": "um", "count": 4}, {"token": "uh", "count": 2}],
                "repeated_phrases": [{"phrase": "you know", "count": 2}],
            },
            "summary": MOCK_SUMMARY,
        }
    )


class MockAnalyzer(SpeechAnalyzer):
    name = "mock"

    async def analyze(self, video_path: Path, recording_id: str, mode: str) -> AnalysisReport:
        return AnalysisReport(
            mode=mode,
            source="mock",
            processing_time_sec=0.0,
            result=mock_result(recording_id),
        )
