"""Default endpoints, models and constants."""

from pathlib import Path

# Gemini (Files API + generateContent)
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_GEMINI_UPLOAD_URL = "https://generativelanguage.googleapis.com/upload/v1beta/files"
GEMINI_KEY_PLACEHOLDER = "your_gemini_api_key_here"

# Secondary analysis backend
DEFAULT_BACKEND_URL = "http://localhost:3000"
BACKEND_HEALTH_TIMEOUT_SEC = 5.0

# Paths
DEFAULT_CONFIG_DIR = Path.home() / ".config" / "speechcoach"
DEFAULT_DB_PATH = DEFAULT_CONFIG_DIR / "speechcoach.db"
CONFIG_FILE_PATH = DEFAULT_CONFIG_DIR / "config.json"

# Timeouts and polling
DEFAULT_REQUEST_TIMEOUT_SEC = 60.0
DEFAULT_POLL_INITIAL_DELAY_SEC = 2.0
DEFAULT_POLL_MAX_DELAY_SEC = 10.0
DEFAULT_POLL_MAX_WAIT_SEC = 180.0
DEFAULT_STATUS_POLL_INTERVAL_SEC = 2.0

# Remote file states
FILE_STATE_ACTIVE = "ACTIVE"
FILE_STATE_FAILED = "FAILED"

# Analysis lifecycle
STATUS_NOT_REQUESTED = "not_requested"
STATUS_PENDING = "pending"
STATUS_COMPLETED = "completed"
STATUS_FAILED = "failed"
TERMINAL_STATUSES = frozenset({STATUS_COMPLETED, STATUS_FAILED})

ANALYSIS_MODES = ("general", "interview", "sales", "pitch")
DEFAULT_ANALYSIS_MODE = "general"

# Coaching mode presets: what the instruction asks the model to lean on,
# and the sampling temperature for that mode.
MODE_PRESETS: dict[str, dict] = {
    "general": {
        "label": "General Communication",
        "focus": (
            "accent and intelligibility, pacing, filler words, clarity, prosody, "
            "confidence and structure"
        ),
        "temperature": 0.4,
    },
    "interview": {
        "label": "Interview Practice",
        "focus": (
            "STAR structure, question understanding, relevance, technical depth and "
            "behavioral signals such as ownership, collaboration, impact and metrics"
        ),
        "temperature": 0.3,
    },
    "sales": {
        "label": "Sales Presentation",
        "focus": (
            "rapport-building, needs discovery, objection handling, value articulation, "
            "storytelling, call control and closing technique"
        ),
        "temperature": 0.6,
    },
    "pitch": {
        "label": "Startup Pitch",
        "focus": (
            "narrative flow, problem framing, differentiation, traction, the ask, "
            "jargon density and confidence"
        ),
        "temperature": 0.35,
    },
}

# Video extensions
VIDEO_EXTENSIONS = {
    ".mp4", ".mov", ".m4v", ".webm", ".mkv", ".avi", ".3gp",
}
VIDEO_MIME_TYPES = {
    ".mp4": "video/mp4",
    ".m4v": "video/mp4",
    ".mov": "video/quicktime",
    ".webm": "video/webm",
    ".mkv": "video/x-matroska",
    ".avi": "video/x-msvideo",
    ".3gp": "video/3gpp",
}
