"""Extract and validate the structured analysis from a generateContent envelope."""

from __future__ import annotations

import json
import re

from pydantic import ValidationError

from speechcoach.analysis.models import AnalysisResult
from speechcoach.core.exceptions import AnalysisParseError

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def extract_response_text(envelope: dict) -> str:
    """Return the text of the first candidate that has any.

    Text parts of that candidate are joined in order; parts flagged as model
    thoughts are skipped.
    """
    if not isinstance(envelope, dict):
        raise AnalysisParseError("Generation response is not a JSON object", raw_text=str(envelope))

    for candidate in envelope.get("candidates") or []:
        content = (candidate or {}).get("content") or {}
        texts = [
            part["text"]
            for part in content.get("parts") or []
            if isinstance(part, dict) and isinstance(part.get("text"), str) and not part.get("thought")
        ]
        text = "".join(texts).strip()
        if text:
            return text

    raise AnalysisParseError(
        "No analysis text found in generation response",
        raw_text=json.dumps(envelope)[:2000],
    )


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text.strip()).strip()


def parse_analysis_text(text: str) -> AnalysisResult:
    """Parse model text into an AnalysisResult, or raise AnalysisParseError with the raw text."""
    try:
        data = json.loads(strip_code_fences(text))
    except json.JSONDecodeError as e:
        raise AnalysisParseError(f"Analysis response is not valid JSON: {e}", raw_text=text) from e

    if not isinstance(data, dict):
        raise AnalysisParseError("Analysis response is not a JSON object", raw_text=text)

    try:
        return AnalysisResult.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()[:5]
        )
        raise AnalysisParseError(f"Analysis response does not match schema: {problems}", raw_text=text) from e
