"""Gemini Files API + generateContent: upload, wait for readiness, analyze."""

from __future__ import annotations

import asyncio
import sys
import time
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Annotated, Union

import httpx
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from speechcoach.analysis.models import AnalysisReport, AnalysisResult
from speechcoach.analysis.parser import extract_response_text, parse_analysis_text
from speechcoach.analysis.rubric import RUBRIC_SYSTEM_PROMPT, build_instruction, build_response_schema
from speechcoach.core.config import SpeechCoachConfig
from speechcoach.core.constants import (
    DEFAULT_ANALYSIS_MODE,
    FILE_STATE_ACTIVE,
    FILE_STATE_FAILED,
    MODE_PRESETS,
)
from speechcoach.core.exceptions import (
    AnalysisParseError,
    APIError,
    ConfigError,
    ProcessingTimeoutError,
    RemoteProcessingError,
    UploadError,
)
from speechcoach.providers.base import SpeechAnalyzer, make_client, send, video_mime_type

Sleep = Callable[[float], Awaitable[None]]


class RemoteFile(BaseModel):
    """Handle for a video ingested by the Files API. Lives for one analysis run."""

    name: str
    state: str | None = None
    uri: str | None = None


class _WrappedRemoteFile(BaseModel):
    file: RemoteFile


# The service answers either {"file": {...}} or the bare file object.
RemoteFilePayload = Annotated[Union[_WrappedRemoteFile, RemoteFile], Field(union_mode="left_to_right")]
_remote_file_adapter: TypeAdapter = TypeAdapter(RemoteFilePayload)


def parse_remote_file(payload: object) -> RemoteFile:
    parsed = _remote_file_adapter.validate_python(payload)
    return parsed.file if isinstance(parsed, _WrappedRemoteFile) else parsed


def backoff_delays(initial: float, cap: float):
    """2, 4, 8, 10, 10, ... for initial=2, cap=10."""
    delay = initial
    while True:
        yield min(delay, cap)
        delay = min(delay * 2, cap)


class GeminiClient:
    def __init__(
        self,
        config: SpeechCoachConfig,
        client: httpx.AsyncClient | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        if not config.has_gemini_key:
            raise ConfigError("Missing or invalid Gemini API key")
        self.config = config
        self._owns_client = client is None
        self.client = client or make_client(config)
        self._sleep = sleep
        self._headers = {"x-goog-api-key": config.gemini_api_key.strip()}

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> GeminiClient:
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    # --- Uploader ---

    async def upload(self, video_path: Path) -> RemoteFile:
        try:
            body = video_path.read_bytes()
        except OSError as e:
            raise UploadError(f"Cannot read video {video_path}: {e}") from e

        print(f"  Uploading {video_path.name} ({len(body) / 1024 / 1024:.1f} MB)...", file=sys.stderr)
        resp = await send(
            self.client,
            "POST",
            self.config.gemini_upload_url,
            provider="gemini",
            headers=self._headers,
            files={"file": (video_path.name, body, video_mime_type(video_path))},
        )
        if not resp.is_success:
            raise UploadError(
                f"Upload failed with status {resp.status_code}",
                response_text=resp.text,
                status_code=resp.status_code,
            )
        try:
            remote = parse_remote_file(resp.json())
        except (ValueError, ValidationError) as e:
            raise UploadError(f"Upload response has no usable file handle: {e}", response_text=resp.text) from e

        print(f"  Uploaded as {remote.name} (state={remote.state or 'UNKNOWN'}).", file=sys.stderr)
        return remote

    # --- Readiness poller ---

    async def get_file(self, name: str) -> RemoteFile:
        resp = await send(
            self.client,
            "GET",
            f"{self.config.gemini_api_base.rstrip('/')}/{name}",
            provider="gemini",
            headers=self._headers,
        )
        if not resp.is_success:
            raise APIError(
                f"Error checking file state ({resp.status_code}): {resp.text[:500]}",
                provider="gemini",
                status_code=resp.status_code,
            )
        try:
            return parse_remote_file(resp.json())
        except (ValueError, ValidationError) as e:
            raise APIError(f"Unexpected file state response: {resp.text[:500]}", provider="gemini") from e

    async def poll_until_active(self, name: str, max_wait_sec: float | None = None) -> str:
        """Wait until the remote file is ACTIVE and return its URI.

        Unknown states count as still processing. The last sleep is shortened
        so the total wait never exceeds ``max_wait_sec``; one final check runs
        once the budget is spent.
        """
        max_wait = self.config.poll_max_wait_sec if max_wait_sec is None else max_wait_sec
        delays = backoff_delays(self.config.poll_initial_delay_sec, self.config.poll_max_delay_sec)
        waited = 0.0

        while True:
            remote = await self.get_file(name)
            if remote.state == FILE_STATE_ACTIVE:
                if not remote.uri:
                    raise APIError(f"File {name} is ACTIVE but has no uri", provider="gemini")
                print(f"  File {name} is ACTIVE.", file=sys.stderr)
                return remote.uri
            if remote.state == FILE_STATE_FAILED:
                raise RemoteProcessingError(f"Remote processing failed for {name}", provider="gemini")
            if waited >= max_wait:
                raise ProcessingTimeoutError(
                    f"Timed out after {waited:.0f}s waiting for {name} to become ACTIVE",
                    waited_sec=waited,
                )

            delay = min(next(delays), max_wait - waited)
            print(f"  File state: {remote.state or 'UNKNOWN'}; rechecking in {delay:g}s...", file=sys.stderr)
            await self._sleep(delay)
            waited += delay

    # --- Analyzer ---

    def build_payload(self, file_uri: str, mode: str, mime_type: str = "video/mp4") -> dict:
        preset = MODE_PRESETS.get(mode, MODE_PRESETS[DEFAULT_ANALYSIS_MODE])
        return {
            "systemInstruction": {"parts": [{"text": RUBRIC_SYSTEM_PROMPT}]},
            "contents": [
                {
                    "role": "user",
                    "parts": [
                        {"fileData": {"fileUri": file_uri, "mimeType": mime_type}},
                        {"text": build_instruction(mode)},
                    ],
                }
            ],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": build_response_schema(),
                "temperature": preset["temperature"],
            },
        }

    async def generate(self, file_uri: str, mode: str = DEFAULT_ANALYSIS_MODE, mime_type: str = "video/mp4") -> AnalysisResult:
        url = f"{self.config.gemini_api_base.rstrip('/')}/models/{self.config.gemini_model}:generateContent"
        print(f"  Requesting analysis from {self.config.gemini_model}...", file=sys.stderr)
        resp = await send(
            self.client,
            "POST",
            url,
            provider="gemini",
            headers=self._headers,
            json=self.build_payload(file_uri, mode, mime_type),
        )
        if not resp.is_success:
            raise APIError(
                f"Gemini request failed ({resp.status_code}): {resp.text[:500]}",
                provider="gemini",
                status_code=resp.status_code,
            )
        try:
            envelope = resp.json()
        except ValueError as e:
            raise AnalysisParseError("Generation response is not JSON", raw_text=resp.text) from e

        return parse_analysis_text(extract_response_text(envelope))

    async def analyze_video(self, video_path: Path, recording_id: str, mode: str = DEFAULT_ANALYSIS_MODE) -> AnalysisResult:
        remote = await self.upload(video_path)
        file_uri = await self.poll_until_active(remote.name)
        result = await self.generate(file_uri, mode, video_mime_type(video_path))
        result.video_id = recording_id
        return result


class GeminiAnalyzer(SpeechAnalyzer):
    name = "gemini"

    def __init__(
        self,
        config: SpeechCoachConfig,
        client: httpx.AsyncClient | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.config = config
        self._client = client
        self._sleep = sleep

    async def analyze(self, video_path: Path, recording_id: str, mode: str) -> AnalysisReport:
        start = time.monotonic()
        async with GeminiClient(self.config, client=self._client, sleep=self._sleep) as gemini:
            result = await gemini.analyze_video(video_path, recording_id, mode)
        return AnalysisReport(
            mode=mode,
            source="gemini",
            processing_time_sec=round(time.monotonic() - start, 2),
            result=result,
        )
