"""Static evaluation rubric and the structured-output schema sent to the model."""

from __future__ import annotations

from speechcoach.core.constants import DEFAULT_ANALYSIS_MODE, MODE_PRESETS

# Category -> scored sub-criteria, in the order they appear in the rubric.
# overall_impression additionally carries overall_score (see OVERALL_SCORE_FIELD).
RUBRIC_CATEGORIES: dict[str, tuple[str, ...]] = {
    "voice_sound": (
        "pitch_tone",
        "volume",
        "tempo_pace",
        "clarity_articulation",
        "pausing_hesitation",
        "prosody",
    ),
    "word_choice": (
        "formality",
        "complexity",
        "repetition",
        "directness",
        "emotional_tone",
    ),
    "sentence_structure": (
        "sentence_length",
        "narrative_style",
        "use_of_questions",
        "metaphors_analogies",
    ),
    "conversational_style": (
        "turn_taking",
        "responsiveness",
        "politeness",
        "assertiveness",
        "humor_playfulness",
    ),
    "nonverbal": (
        "laughter",
        "gestures",
        "facial_expressions",
    ),
    "overall_impression": (
        "warmth",
        "authority",
        "charisma",
    ),
}

OVERALL_SCORE_FIELD = "overall_score"

RUBRIC_SYSTEM_PROMPT = """\
You are an expert communication coach. You will be given a video of a person speaking. \
Evaluate their speaking style against the rubric below and return a single JSON object \
that follows the response schema exactly. Every sub-criterion receives an integer score \
from 1 to 10. Do not output anything besides the JSON object.

Global 1-10 scale (applies to every sub-criterion):
1: severely impairs understanding; frequent errors; distracting throughout
3: below average; issues common and noticeable
5: acceptable and typical; issues present but manageable
7: strong; infrequent, minor issues; mostly intentional control
9: exemplary; precise, intentional and adapted to context
Use 2, 4, 6 and 8 by interpolation. Reserve 10 for truly outstanding samples.

1. Voice and sound qualities (voice_sound)
- pitch_tone: 1 rigid monotone with no emphasis; 5 some variation at clause ends; \
9 dynamic, deliberate pitch shaping that matches the content.
- volume: 1 very soft or clipped, often inaudible; 5 a steady indoor voice with occasional \
dips; 9 precise level management with deliberate emphasis peaks.
- tempo_pace: 1 rushed or dragging to the point of confusion; 5 generally comfortable with \
minor drift in long turns; 9 expert modulation, slowing for emphasis and complexity.
- clarity_articulation: 1 frequent mumbling or slurring, words lost; 5 generally crisp with \
a few mashed syllables; 9 broadcast-quality articulation.
- pausing_hesitation: 1 constant "uh"/"um" and stalls mid-phrase; 5 some fillers, functional \
pauses; 9 strategic pausing drives emphasis with near-zero fillers.
- prosody: 1 flat affect or emotion mismatched to content; 5 some appropriate emotional \
coloring; 9 nuanced intonation that heightens impact.

2. Word choice and vocabulary (word_choice)
- formality: 1 inappropriate slang for the context; 5 context-appropriate neutral register; \
9 deft code-switching across contexts.
- complexity: 1 vague placeholders ("stuff", "things"); 5 balanced simple and technical \
words, terms defined; 9 sophisticated yet accessible phrasing.
- repetition: 1 catchphrases every minute; 5 some reuse for cohesion, not distracting; \
9 varied phrasing, repetition only for rhetorical impact.
- directness: 1 evasive with heavy hedging; 5 mostly clear claims and requests; \
9 concise, high signal-to-noise statements.
- emotional_tone: 1 abrasive or inappropriate for the setting; 5 mostly neutral and \
appropriate; 9 finely tuned tone that guides reception.

3. Sentence structure and narrative style (sentence_structure)
- sentence_length: 1 rambling chains with no breath points; 5 a readable mix of short and \
medium sentences; 9 deliberate sentence design for effect.
- narrative_style: 1 aimless with no throughline; 5 clear beginning, middle and end; \
9 compelling narrative framing.
- use_of_questions: 1 none, or irrelevant questions; 5 some clarifying or engaging \
questions; 9 questioning that drives discovery.
- metaphors_analogies: 1 none, or confusing comparisons; 5 occasional clear analogies; \
9 memorable analogies that elevate the message.

4. Conversational style (conversational_style)
For a monologue, score how the speaker would engage an audience.
- turn_taking: 1 constant interruptions; 5 mostly balanced handoffs; 9 seamless turns that \
model active listening.
- responsiveness: 1 ignores the prompt; 5 answers with mild drift; 9 laser-aligned answers \
that anticipate needs.
- politeness: 1 rude or disrespectful; 5 routine etiquette; 9 gracious and culturally \
sensitive.
- assertiveness: 1 apologetic, will not take a stance; 5 balanced confidence and openness; \
9 authoritative without domineering.
- humor_playfulness: 1 inappropriate attempts; 5 light, safe levity; 9 humor that deepens \
rapport.

5. Non-verbal cues (nonverbal)
Judge from the video. When a cue is not observable, score 5 and say so in the summary.
- laughter: 1 nervous or ill-timed laughter that undermines points; 5 appropriate mild \
chuckles; 9 laughter that calibrates the room's energy.
- gestures: 1 fidgeting that distracts; 5 simple supportive hand motions; 9 expressive \
gestures anchoring key points.
- facial_expressions: 1 affect mismatched to content; 5 generally aligned; 9 nuanced cues \
that guide attention.

6. Overall impression (overall_impression)
- warmth: 1 aloof and uninviting; 5 approachable enough; 9 highly empathetic connection.
- authority: 1 uncertain, factual slips; 5 competent baseline; 9 trusted expert presence.
- charisma: 1 dull, loses attention quickly; 5 holds attention adequately; 9 magnetic and \
memorable.
- overall_score: your holistic 1-10 rating of the speaker's communication effectiveness.

7. Disfluencies (disfluencies)
- filler_words: every filler token used ("um", "uh", "like", "you know", ...) with how many \
times it occurred.
- repeated_phrases: phrases the speaker tends to repeat, with counts.
Use empty arrays when there are none.

8. Summary (summary)
One constructive paragraph: praise the strongest habits, then name the most important \
improvements in an encouraging tone. State plainly when something could not be judged \
from the recording.

Set video_id to an empty string; the caller fills it in.
"""


def _score_property() -> dict:
    return {"type": "integer", "minimum": 1, "maximum": 10}


def build_response_schema() -> dict:
    """JSON Schema (OpenAPI subset accepted by generateContent) for AnalysisResult."""
    score_properties: dict = {}
    for category, fields in RUBRIC_CATEGORIES.items():
        props = {name: _score_property() for name in fields}
        required = list(fields)
        if category == "overall_impression":
            props[OVERALL_SCORE_FIELD] = _score_property()
        score_properties[category] = {
            "type": "object",
            "properties": props,
            "required": required,
        }

    return {
        "type": "object",
        "required": ["video_id", "scores", "disfluencies", "summary"],
        "properties": {
            "video_id": {"type": "string"},
            "scores": {
                "type": "object",
                "required": list(RUBRIC_CATEGORIES),
                "properties": score_properties,
            },
            "disfluencies": {
                "type": "object",
                "required": ["filler_words", "repeated_phrases"],
                "properties": {
                    "filler_words": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "required": ["token", "count"],
                            "properties": {
                                "token": {"type": "string"},
                                "count": {"type": "integer"},
                            },
                        },
                    },
                    "repeated_phrases": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "required": ["phrase", "count"],
                            "properties": {
                                "phrase": {"type": "string"},
                                "count": {"type": "integer"},
                            },
                        },
                    },
                },
            },
            "summary": {"type": "string"},
        },
    }


def build_instruction(mode: str = DEFAULT_ANALYSIS_MODE) -> str:
    """Short user-turn instruction sent next to the video reference."""
    preset = MODE_PRESETS.get(mode, MODE_PRESETS[DEFAULT_ANALYSIS_MODE])
    return (
        "Evaluate the speaker according to your role. "
        f"In the summary, pay particular attention to {preset['focus']}."
    )
