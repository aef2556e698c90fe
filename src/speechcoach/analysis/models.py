"""Pydantic models for analysis results and the normalized feedback view."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated, Literal

from pydantic import BaseModel, Field, StrictInt, model_validator

from speechcoach.analysis.rubric import RUBRIC_CATEGORIES

# Strict: booleans and numeric strings from the model are rejected, not coerced.
Score = Annotated[StrictInt, Field(ge=1, le=10)]
OverallScore = Annotated[float, Field(strict=True, ge=1, le=10)]
AnalysisMode = Literal["general", "interview", "sales", "pitch"]
AnalysisSource = Literal["gemini", "backend", "mock"]


def round_score(value: float) -> float:
    """Round half-up to one decimal place."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


class VoiceSound(BaseModel):
    pitch_tone: Score
    volume: Score
    tempo_pace: Score
    clarity_articulation: Score
    pausing_hesitation: Score
    prosody: Score


class WordChoice(BaseModel):
    formality: Score
    complexity: Score
    repetition: Score
    directness: Score
    emotional_tone: Score


class SentenceStructure(BaseModel):
    sentence_length: Score
    narrative_style: Score
    use_of_questions: Score
    metaphors_analogies: Score


class ConversationalStyle(BaseModel):
    turn_taking: Score
    responsiveness: Score
    politeness: Score
    assertiveness: Score
    humor_playfulness: Score


class Nonverbal(BaseModel):
    laughter: Score
    gestures: Score
    facial_expressions: Score


class OverallImpression(BaseModel):
    warmth: Score
    authority: Score
    charisma: Score
    # Absent in some responses; AnalysisResult backfills it.
    overall_score: OverallScore | None = None


class Scores(BaseModel):
    voice_sound: VoiceSound
    word_choice: WordChoice
    sentence_structure: SentenceStructure
    conversational_style: ConversationalStyle
    nonverbal: Nonverbal
    overall_impression: OverallImpression

    def sub_scores(self) -> dict[str, int]:
        """Flatten every rubric sub-score (overall_score excluded) as 'category.name'."""
        flat: dict[str, int] = {}
        for category, fields in RUBRIC_CATEGORIES.items():
            group = getattr(self, category)
            for name in fields:
                flat[f"{category}.{name}"] = getattr(group, name)
        return flat

    def mean_score(self) -> float:
        values = list(self.sub_scores().values())
        return round_score(sum(values) / len(values))


class FillerWord(BaseModel):
    token: str
    count: int = Field(ge=0)


class RepeatedPhrase(BaseModel):
    phrase: str
    count: int = Field(ge=0)


class Disfluencies(BaseModel):
    filler_words: list[FillerWord]
    repeated_phrases: list[RepeatedPhrase]


class AnalysisResult(BaseModel):
    """Structured rubric evaluation of one recording.

    When the model leaves out ``overall_impression.overall_score`` it is filled
    with the mean of every other sub-score, rounded to one decimal, and
    ``overall_score_computed`` is set. Missing sub-scores are never filled.
    """

    video_id: str
    scores: Scores
    disfluencies: Disfluencies
    summary: str
    overall_score_computed: bool = False

    @model_validator(mode="after")
    def _backfill_overall_score(self) -> AnalysisResult:
        if self.scores.overall_impression.overall_score is None:
            self.scores.overall_impression.overall_score = self.scores.mean_score()
            self.overall_score_computed = True
        return self

    @property
    def overall_score(self) -> float:
        return float(self.scores.overall_impression.overall_score)


class CoachingFeedback(BaseModel):
    """Normalized, display-oriented view of an analysis."""

    summary: str
    strengths: list[str] = Field(default_factory=list)
    opportunities: list[str] = Field(default_factory=list)
    accent_observations: str = ""
    pacing_observations: str = ""
    filler_words: str = ""
    clarity: str = ""
    confidence: str = ""
    content_structure: str = ""
    technical_depth: str = ""
    prioritized_tips: list[str] = Field(default_factory=list)
    overall_score: float | None = None


class AnalysisReport(BaseModel):
    """What a completed Recording carries: the analysis plus where it came from."""

    mode: AnalysisMode = "general"
    source: AnalysisSource
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    processing_time_sec: float | None = None
    result: AnalysisResult | None = None
    backend_feedback: CoachingFeedback | None = None

    @model_validator(mode="after")
    def _exactly_one_payload(self) -> AnalysisReport:
        if (self.result is None) == (self.backend_feedback is None):
            raise ValueError("AnalysisReport needs exactly one of result or backend_feedback")
        return self

    def feedback(self) -> CoachingFeedback:
        if self.result is not None:
            from speechcoach.analysis.feedback import to_feedback

            return to_feedback(self.result)
        return self.backend_feedback

    @property
    def overall_score(self) -> float | None:
        if self.result is not None:
            return self.result.overall_score
        return self.backend_feedback.overall_score
