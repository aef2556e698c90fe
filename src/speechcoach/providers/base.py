"""Abstract analyzer interface and shared HTTP plumbing."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

import httpx

from speechcoach.analysis.models import AnalysisReport
from speechcoach.core.config import SpeechCoachConfig
from speechcoach.core.constants import VIDEO_MIME_TYPES
from speechcoach.core.exceptions import NetworkError, RequestTimeoutError


class SpeechAnalyzer(ABC):
    """One way of turning a recorded video into an AnalysisReport."""

    name: str = ""

    @abstractmethod
    async def analyze(self, video_path: Path, recording_id: str, mode: str) -> AnalysisReport:
        ...


def make_client(config: SpeechCoachConfig, timeout: float | None = None) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=httpx.Timeout(timeout or config.request_timeout_sec))


def video_mime_type(path: Path) -> str:
    return VIDEO_MIME_TYPES.get(path.suffix.lower(), "video/mp4")


async def send(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    provider: str,
    **kwargs,
) -> httpx.Response:
    """Issue a request, mapping transport failures onto NetworkError / RequestTimeoutError."""
    try:
        return await client.request(method, url, **kwargs)
    except httpx.TimeoutException as e:
        raise RequestTimeoutError(f"{provider} request timed out: {url.split('?')[0]}") from e
    except httpx.TransportError as e:
        raise NetworkError(f"Unable to reach {provider}: {e}") from e
