"""Client for the secondary analysis backend (POST /api/analyze)."""

from __future__ import annotations

import sys
import time
from pathlib import Path

import httpx
from pydantic import ValidationError

from speechcoach.analysis.models import AnalysisReport, CoachingFeedback
from speechcoach.core.config import SpeechCoachConfig
from speechcoach.core.constants import ANALYSIS_MODES, BACKEND_HEALTH_TIMEOUT_SEC
from speechcoach.core.exceptions import (
    APIError,
    ConfigError,
    NetworkError,
    RateLimitError,
    ServerError,
)
from speechcoach.providers.base import SpeechAnalyzer, make_client, send, video_mime_type


def _error_detail(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.reason_phrase or f"API request failed with status {resp.status_code}"
    if isinstance(data, dict):
        return str(data.get("detail") or data.get("message") or f"API request failed with status {resp.status_code}")
    return f"API request failed with status {resp.status_code}"


class BackendClient:
    def __init__(self, config: SpeechCoachConfig, client: httpx.AsyncClient | None = None):
        if not config.backend_url:
            raise ConfigError("Analysis backend URL is not configured")
        self.config = config
        self.base_url = config.backend_url.rstrip("/")
        self._owns_client = client is None
        self.client = client or make_client(config)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> BackendClient:
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def analyze(self, video_path: Path, mode: str = "general") -> tuple[str, CoachingFeedback, float | None]:
        """Upload the video; returns (mode, feedback, processing seconds reported by the backend).

        The backend reports processingTime in milliseconds.
        """
        if mode not in ANALYSIS_MODES:
            raise ValueError(f"Unknown analysis mode: {mode}")

        body = video_path.read_bytes()
        print(f"  Sending {video_path.name} to analysis backend ({mode})...", file=sys.stderr)
        resp = await send(
            self.client,
            "POST",
            f"{self.base_url}/api/analyze",
            provider="backend",
            data={"mode": mode},
            files={"video": (f"recording_{int(time.time() * 1000)}.mp4", body, video_mime_type(video_path))},
        )

        if resp.status_code == 429:
            raise RateLimitError(
                "Analysis service is temporarily overloaded. Please try again in a few minutes.",
                provider="backend",
                status_code=429,
            )
        if resp.status_code >= 500:
            raise ServerError(
                "Analysis service is temporarily unavailable. Please try again later.",
                provider="backend",
                status_code=resp.status_code,
            )
        if not resp.is_success:
            raise APIError(_error_detail(resp), provider="backend", status_code=resp.status_code)

        try:
            data = resp.json()
        except ValueError as e:
            raise APIError("Invalid response from analysis service", provider="backend", status_code=502) from e
        if not isinstance(data, dict) or not data.get("analysis"):
            raise APIError("Invalid response from analysis service", provider="backend", status_code=502)

        try:
            feedback = CoachingFeedback.model_validate(data["analysis"])
        except ValidationError as e:
            raise APIError(f"Invalid analysis from analysis service: {e}", provider="backend", status_code=502) from e

        processing_time = data.get("processingTime")
        return (
            data.get("mode") or mode,
            feedback,
            float(processing_time) / 1000 if isinstance(processing_time, (int, float)) else None,
        )

    async def health(self) -> bool:
        """True when GET /health answers 2xx within a few seconds."""
        try:
            resp = await send(
                self.client,
                "GET",
                f"{self.base_url}/health",
                provider="backend",
                timeout=BACKEND_HEALTH_TIMEOUT_SEC,
            )
        except NetworkError as e:
            print(f"  Warning: backend health check failed: {e}", file=sys.stderr)
            return False
        return resp.is_success

    async def service_limits(self) -> dict | None:
        """Limits advertised by GET /api/config (max size, duration, formats, modes)."""
        try:
            resp = await send(self.client, "GET", f"{self.base_url}/api/config", provider="backend")
        except NetworkError as e:
            print(f"  Warning: could not fetch backend config: {e}", file=sys.stderr)
            return None
        if not resp.is_success:
            return None
        try:
            data = resp.json()
        except ValueError:
            return None
        return data if isinstance(data, dict) else None


class BackendAnalyzer(SpeechAnalyzer):
    name = "backend"

    def __init__(self, config: SpeechCoachConfig, client: httpx.AsyncClient | None = None):
        self.config = config
        self._client = client

    async def analyze(self, video_path: Path, recording_id: str, mode: str) -> AnalysisReport:
        start = time.monotonic()
        async with BackendClient(self.config, client=self._client) as backend:
            returned_mode, feedback, processing_time = await backend.analyze(video_path, mode)
        return AnalysisReport(
            mode=returned_mode if returned_mode in ANALYSIS_MODES else mode,
            source="backend",
            processing_time_sec=processing_time if processing_time is not None else round(time.monotonic() - start, 2),
            backend_feedback=feedback,
        )
