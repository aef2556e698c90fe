"""Payload builders shared by the tests."""

from __future__ import annotations

import copy

from speechcoach.providers.mock import MOCK_SCORES


def make_result_payload(video_id: str = "model-chosen-id", fill: int | None = 8, overall: float | None = None) -> dict:
    """Rubric JSON as the model would return it; every sub-score = ``fill`` unless None."""
    scores = copy.deepcopy(MOCK_SCORES)
    if fill is not None:
        scores = {cat: {name: fill for name in fields} for cat, fields in scores.items()}
    if overall is not None:
        scores["overall_impression"]["overall_score"] = overall
    return {
        "video_id": video_id,
        "scores": scores,
        "disfluencies": {
            "filler_words": [{"token": "um", "count": 3}],
            "repeated_phrases": [],
        },
        "summary": "Solid delivery with room to slow down.",
    }
