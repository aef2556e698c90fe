"""Pydantic models for stored recordings and list/stat views."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from speechcoach.analysis.models import AnalysisMode, AnalysisReport

AnalysisStatus = Literal["not_requested", "pending", "completed", "failed"]
Facing = Literal["front", "back"]


class Recording(BaseModel):
    id: str
    file_path: str
    file_name: str
    library_uri: str | None = None
    thumbnail_path: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    prompt_text: str = ""
    facing: Facing = "front"
    duration_sec: float | None = None
    file_size_bytes: int | None = None
    observations: str | None = None
    analysis_status: AnalysisStatus = "not_requested"
    analysis_mode: AnalysisMode | None = None
    analysis: AnalysisReport | None = None
    analysis_error: str | None = None
    updated_at: datetime | None = None

    @model_validator(mode="after")
    def _completed_iff_analysis(self) -> Recording:
        if (self.analysis_status == "completed") != (self.analysis is not None):
            raise ValueError(
                f"analysis_status={self.analysis_status!r} is inconsistent with "
                f"analysis {'present' if self.analysis else 'absent'}"
            )
        return self

    @property
    def recorded_date(self) -> str:
        return self.created_at.date().isoformat()


class RecordingListItem(BaseModel):
    recording_id: str
    file_name: str
    created_at: str
    duration_formatted: str
    status: AnalysisStatus
    mode: str | None = None
    overall_score: float | None = None


class RecordingStats(BaseModel):
    total_recordings: int
    total_size_bytes: int
    average_size_bytes: float
    total_duration_sec: float
    average_duration_sec: float
    recordings_by_date: dict[str, int]
    status_counts: dict[str, int]
    average_overall_score: float | None = None
    most_recent_id: str | None = None


class AnalysisSummary(BaseModel):
    source: str
    mode: str
    created_at: str
    processing_time_sec: float | None = None
    overall_score: float | None = None
    overall_score_computed: bool = False
    summary: str
    strengths: list[str]
    opportunities: list[str]
    prioritized_tips: list[str]


class RecordingDetail(BaseModel):
    """Everything `info` shows: stored metadata plus the coaching headline."""

    recording_id: str
    file_name: str
    file_path: str
    file_exists: bool
    created_at: str
    recorded_date: str
    duration_formatted: str
    file_size_bytes: int | None = None
    prompt_text: str
    facing: Facing
    observations: str | None = None
    status: AnalysisStatus
    mode: str | None = None
    error: str | None = None
    analysis: AnalysisSummary | None = None
