"""Exception hierarchy for speechcoach."""


class SpeechCoachError(Exception):
    """Base exception for all speechcoach errors."""


class ConfigError(SpeechCoachError):
    """Required configuration is missing or invalid."""


class FFmpegError(SpeechCoachError):
    """ffprobe command failed."""

    def __init__(self, message: str, cmd: str | None = None, returncode: int | None = None):
        self.cmd = cmd
        self.returncode = returncode
        super().__init__(message)


class APIError(SpeechCoachError):
    """Remote API call failed."""

    def __init__(self, message: str, provider: str | None = None, status_code: int | None = None):
        self.provider = provider
        self.status_code = status_code
        super().__init__(message)


class UploadError(APIError):
    """Video ingestion was rejected or returned an unusable body."""

    def __init__(self, message: str, response_text: str | None = None, status_code: int | None = None):
        self.response_text = response_text
        super().__init__(message, provider="gemini", status_code=status_code)


class RemoteProcessingError(APIError):
    """The remote service reported that processing of the uploaded file failed."""


class AnalysisParseError(APIError):
    """Generation response was not extractable, not JSON, or not schema-conforming."""

    def __init__(self, message: str, raw_text: str | None = None):
        self.raw_text = raw_text
        super().__init__(message, provider="gemini")


class RateLimitError(APIError):
    """Analysis backend answered 429."""


class ServerError(APIError):
    """Analysis backend answered 5xx."""


class NetworkError(SpeechCoachError):
    """Transport-level failure (connection refused, DNS, reset)."""


class RequestTimeoutError(NetworkError, TimeoutError):
    """A single request exceeded the transport timeout."""


class ProcessingTimeoutError(SpeechCoachError, TimeoutError):
    """Uploaded file did not become ready within the allowed wait."""

    def __init__(self, message: str, waited_sec: float = 0.0):
        self.waited_sec = waited_sec
        super().__init__(message)


class DatabaseError(SpeechCoachError):
    """Database operation failed."""


class RecordingNotFoundError(SpeechCoachError):
    """Recording ID not found in database."""


class AnalysisFailedError(SpeechCoachError):
    """Every analysis path failed; carries a message fit for the user."""

    def __init__(self, message: str, user_message: str):
        self.user_message = user_message
        super().__init__(message)
