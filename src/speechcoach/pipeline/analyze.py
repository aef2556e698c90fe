"""Analysis orchestrator: Gemini, then the backend, then the local mock."""

from __future__ import annotations

import sys
import time
from pathlib import Path

from speechcoach.analysis.models import AnalysisReport
from speechcoach.core.config import SpeechCoachConfig
from speechcoach.core.constants import (
    ANALYSIS_MODES,
    DEFAULT_ANALYSIS_MODE,
    STATUS_COMPLETED,
    STATUS_FAILED,
    STATUS_NOT_REQUESTED,
    STATUS_PENDING,
)
from speechcoach.core.exceptions import AnalysisFailedError, NetworkError, SpeechCoachError
from speechcoach.db.repository import Repository
from speechcoach.providers.backend import BackendAnalyzer
from speechcoach.providers.base import SpeechAnalyzer
from speechcoach.providers.gemini import GeminiAnalyzer
from speechcoach.providers.mock import MockAnalyzer

TIMEOUT_MESSAGE = "Analysis timed out. Please try again with a shorter video."
NETWORK_MESSAGE = "Unable to connect to AI service. Please check your internet connection and try again."
GENERIC_MESSAGE = "AI analysis failed. Please try again later."
CANCELLED_ERROR = "Analysis was cancelled"


def build_analyzer_chain(config: SpeechCoachConfig) -> list[SpeechAnalyzer]:
    """Analyzers in the order they are tried."""
    if config.mock_analysis:
        return [MockAnalyzer()]

    chain: list[SpeechAnalyzer] = []
    if config.has_gemini_key:
        chain.append(GeminiAnalyzer(config))
    if config.backend_url:
        chain.append(BackendAnalyzer(config))
    if config.mock_fallback:
        chain.append(MockAnalyzer())
    return chain


def user_message_for(exc: BaseException | None) -> str:
    # RequestTimeoutError is also a NetworkError; timeouts win.
    if isinstance(exc, TimeoutError):
        return TIMEOUT_MESSAGE
    if isinstance(exc, NetworkError):
        return NETWORK_MESSAGE
    return GENERIC_MESSAGE


async def _run_chain(
    chain: list[SpeechAnalyzer],
    video_path: Path,
    recording_id: str,
    mode: str,
) -> tuple[AnalysisReport | None, list[str], Exception | None]:
    """First successful report, the warnings collected on the way, and the last error."""
    warnings: list[str] = []
    last_error: Exception | None = None
    for analyzer in chain:
        print(f"  Analyzing with {analyzer.name}...", file=sys.stderr)
        try:
            return await analyzer.analyze(video_path, recording_id, mode), warnings, last_error
        except Exception as e:
            last_error = e
            warnings.append(f"{analyzer.name} failed: {e}")
            print(f"  Warning: {analyzer.name} analysis failed: {e}", file=sys.stderr)
    return None, warnings, last_error


async def request_analysis(
    recording_id: str,
    repo: Repository,
    config: SpeechCoachConfig,
    *,
    mode: str = DEFAULT_ANALYSIS_MODE,
    analyzers: list[SpeechAnalyzer] | None = None,
) -> dict:
    """Analyze one recording and persist the outcome. Returns JSON-serializable result dict.

    Calling it again on a failed recording is a retry.
    """
    if mode not in ANALYSIS_MODES:
        raise ValueError(f"Unknown analysis mode: {mode} (choose from {', '.join(ANALYSIS_MODES)})")

    recording = repo.get_recording(recording_id)
    video_path = Path(recording.file_path)
    if not video_path.is_file():
        raise SpeechCoachError(f"Video file is missing: {video_path}")

    chain = build_analyzer_chain(config) if analyzers is None else analyzers
    start_time = time.time()
    repo.set_status(recording_id, STATUS_PENDING, mode=mode)

    try:
        report, warnings, last_error = await _run_chain(chain, video_path, recording_id, mode)
    except BaseException:
        # Cancelled or interrupted mid-chain; never leave the recording pending.
        repo.set_status(recording_id, STATUS_FAILED, error=CANCELLED_ERROR)
        raise

    if report is not None:
        repo.save_result(recording_id, report)
        result = {
            "status": STATUS_COMPLETED,
            "recording_id": recording_id,
            "source": report.source,
            "mode": report.mode,
            "elapsed_sec": round(time.time() - start_time, 2),
            "overall_score": report.overall_score,
        }
        if warnings:
            result["warnings"] = warnings
        return result

    detail = str(last_error) if last_error else "No analysis provider is available"
    repo.set_status(recording_id, STATUS_FAILED, error=detail)
    raise AnalysisFailedError(
        f"All analysis providers failed for {recording_id}: {detail}",
        user_message=user_message_for(last_error),
    )


def skip_analysis(recording_id: str, repo: Repository) -> str:
    """Decline analysis for now. Failed and completed recordings keep their status."""
    status = repo.get_status(recording_id)
    if status in (STATUS_FAILED, STATUS_COMPLETED):
        return status
    repo.set_status(recording_id, STATUS_NOT_REQUESTED)
    return STATUS_NOT_REQUESTED
