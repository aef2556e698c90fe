"""Map a raw rubric result onto the normalized coaching feedback shape."""

from __future__ import annotations

from speechcoach.analysis.models import AnalysisResult, CoachingFeedback, round_score

STRENGTH_THRESHOLD = 7
OPPORTUNITY_THRESHOLD = 4
MAX_TIPS = 5

# (category, sub-criterion, strength text, opportunity text)
_SIGNALS: tuple[tuple[str, str, str, str], ...] = (
    ("voice_sound", "clarity_articulation",
     "Clear articulation and pronunciation", "Improve clarity and articulation"),
    ("voice_sound", "pausing_hesitation",
     "Good use of pauses and minimal filler words", "Reduce filler words and improve pause usage"),
    ("voice_sound", "tempo_pace",
     "Well-paced speech delivery", "Work on speech pacing and tempo"),
    ("overall_impression", "authority",
     "Confident delivery and presence", "Build confidence in delivery"),
    ("overall_impression", "charisma",
     "Engaging and charismatic presentation", "Work on engagement and charisma"),
)


def _filler_summary(result: AnalysisResult) -> str:
    fillers = result.disfluencies.filler_words
    if not fillers:
        return "No significant filler words detected"
    return ", ".join(f"{fw.token} ({fw.count} times)" for fw in fillers)


def to_feedback(result: AnalysisResult) -> CoachingFeedback:
    """Deterministically derive the display view from a rubric result."""
    s = result.scores
    strengths: list[str] = []
    opportunities: list[str] = []

    for category, name, strength, opportunity in _SIGNALS:
        value = getattr(getattr(s, category), name)
        if value >= STRENGTH_THRESHOLD:
            strengths.append(strength)
        elif value <= OPPORTUNITY_THRESHOLD:
            opportunities.append(opportunity)

    vs = s.voice_sound
    return CoachingFeedback(
        summary=result.summary,
        strengths=strengths or ["Good overall communication skills"],
        opportunities=opportunities or ["Continue practicing for improvement"],
        accent_observations=(
            f"Voice quality analysis: Pitch/Tone ({vs.pitch_tone}/10), "
            f"Volume ({vs.volume}/10), Tempo ({vs.tempo_pace}/10)"
        ),
        pacing_observations=(
            f"Speaking pace analysis: Clarity ({vs.clarity_articulation}/10), "
            f"Pausing ({vs.pausing_hesitation}/10), Prosody ({vs.prosody}/10)"
        ),
        filler_words=_filler_summary(result),
        clarity=f"Overall clarity score: {vs.clarity_articulation}/10",
        confidence=f"Confidence level: {s.overall_impression.authority}/10",
        content_structure=(
            f"Narrative structure: {s.sentence_structure.narrative_style}/10, "
            f"Sentence quality: {s.sentence_structure.sentence_length}/10"
        ),
        technical_depth=(
            f"Word choice complexity: {s.word_choice.complexity}/10, "
            f"Directness: {s.word_choice.directness}/10"
        ),
        prioritized_tips=opportunities[:MAX_TIPS],
        overall_score=round_score(result.overall_score),
    )
