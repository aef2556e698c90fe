"""Recording storage: CRUD, analysis status tracking and result persistence."""

from __future__ import annotations

import sqlite3
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path

from speechcoach.analysis.models import AnalysisReport, round_score
from speechcoach.core.constants import (
    STATUS_COMPLETED,
    STATUS_FAILED,
    STATUS_NOT_REQUESTED,
    STATUS_PENDING,
)
from speechcoach.core.exceptions import DatabaseError, RecordingNotFoundError
from speechcoach.db.connection import get_connection
from speechcoach.db.models import (
    AnalysisSummary,
    Recording,
    RecordingDetail,
    RecordingListItem,
    RecordingStats,
)
from speechcoach.db.schema import migrate

StatusListener = Callable[[str, str], None]

_SETTABLE_STATUSES = {STATUS_NOT_REQUESTED, STATUS_PENDING, STATUS_FAILED}


def _fmt_duration(secs: float | None) -> str:
    """Format seconds as 45s / 2m / 2m 5s."""
    if secs is None:
        return "-"
    total = int(round(secs))
    if total < 60:
        return f"{total}s"
    m, s = divmod(total, 60)
    return f"{m}m {s}s" if s else f"{m}m"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _row_to_recording(row: sqlite3.Row) -> Recording:
    data = dict(row)
    data.pop("recorded_date", None)
    analysis_json = data.pop("analysis_json", None)
    data["analysis"] = AnalysisReport.model_validate_json(analysis_json) if analysis_json else None
    return Recording(**data)


class Repository:
    """Single-writer store for recordings.

    Every write runs under one lock inside its own IMMEDIATE transaction, so
    concurrent status updates and result saves for different recordings
    never overwrite each other. Reads take the same lock, so they never see
    another thread's uncommitted transaction on the shared connection.
    """

    def __init__(self, db_path: Path | None = None):
        self.conn = get_connection(db_path)
        migrate(self.conn)
        self._lock = threading.RLock()
        self._listeners: list[StatusListener] = []

    def close(self) -> None:
        self.conn.close()

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            self.conn.execute("BEGIN IMMEDIATE")
            try:
                yield self.conn
            except BaseException:
                self.conn.execute("ROLLBACK")
                raise
            self.conn.execute("COMMIT")

    # --- Listeners ---

    def add_status_listener(self, listener: StatusListener) -> None:
        self._listeners.append(listener)

    def remove_status_listener(self, listener: StatusListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, recording_id: str, status: str) -> None:
        for listener in list(self._listeners):
            listener(recording_id, status)

    # --- Recordings ---

    def insert_recording(self, recording: Recording) -> None:
        analysis_json = recording.analysis.model_dump_json() if recording.analysis else None
        try:
            with self._transaction() as conn:
                conn.execute(
                    """INSERT INTO recordings (id, file_path, file_name, library_uri, thumbnail_path,
                       created_at, recorded_date, prompt_text, facing, duration_sec, file_size_bytes,
                       observations, analysis_status, analysis_mode, analysis_json, analysis_error, updated_at)
                       VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                    (
                        recording.id, recording.file_path, recording.file_name,
                        recording.library_uri, recording.thumbnail_path,
                        recording.created_at.isoformat(), recording.recorded_date,
                        recording.prompt_text, recording.facing, recording.duration_sec,
                        recording.file_size_bytes, recording.observations,
                        recording.analysis_status, recording.analysis_mode,
                        analysis_json, recording.analysis_error, _now(),
                    ),
                )
        except sqlite3.IntegrityError as e:
            raise DatabaseError(f"Recording already exists: {e}") from e

    def find_recording(self, recording_id: str) -> Recording | None:
        with self._lock:
            row = self.conn.execute(
                "SELECT * FROM recordings WHERE id = ?", (recording_id,)
            ).fetchone()
        return _row_to_recording(row) if row else None

    def get_recording(self, recording_id: str) -> Recording:
        recording = self.find_recording(recording_id)
        if recording is None:
            raise RecordingNotFoundError(f"Recording not found: {recording_id}")
        return recording

    def list_recordings(self) -> list[Recording]:
        with self._lock:
            rows = self.conn.execute(
                "SELECT * FROM recordings ORDER BY created_at DESC"
            ).fetchall()
        return [_row_to_recording(r) for r in rows]

    def list_items(self, status: str | None = None) -> list[RecordingListItem]:
        return [
            RecordingListItem(
                recording_id=r.id,
                file_name=r.file_name,
                created_at=r.created_at.isoformat(),
                duration_formatted=_fmt_duration(r.duration_sec),
                status=r.analysis_status,
                mode=r.analysis_mode,
                overall_score=r.analysis.overall_score if r.analysis else None,
            )
            for r in self.list_recordings()
            if status is None or r.analysis_status == status
        ]

    def get_recording_detail(self, recording_id: str) -> RecordingDetail:
        r = self.get_recording(recording_id)
        summary = None
        if r.analysis is not None:
            feedback = r.analysis.feedback()
            summary = AnalysisSummary(
                source=r.analysis.source,
                mode=r.analysis.mode,
                created_at=r.analysis.created_at.isoformat(),
                processing_time_sec=r.analysis.processing_time_sec,
                overall_score=r.analysis.overall_score,
                overall_score_computed=bool(r.analysis.result and r.analysis.result.overall_score_computed),
                summary=feedback.summary,
                strengths=feedback.strengths,
                opportunities=feedback.opportunities,
                prioritized_tips=feedback.prioritized_tips,
            )
        return RecordingDetail(
            recording_id=r.id,
            file_name=r.file_name,
            file_path=r.file_path,
            file_exists=Path(r.file_path).is_file(),
            created_at=r.created_at.isoformat(),
            recorded_date=r.recorded_date,
            duration_formatted=_fmt_duration(r.duration_sec),
            file_size_bytes=r.file_size_bytes,
            prompt_text=r.prompt_text,
            facing=r.facing,
            observations=r.observations,
            status=r.analysis_status,
            mode=r.analysis_mode,
            error=r.analysis_error,
            analysis=summary,
        )

    def delete_recording(self, recording_id: str) -> None:
        with self._transaction() as conn:
            cur = conn.execute("DELETE FROM recordings WHERE id = ?", (recording_id,))
        if cur.rowcount == 0:
            raise RecordingNotFoundError(f"Recording not found: {recording_id}")

    def clear_recordings(self) -> int:
        with self._transaction() as conn:
            cur = conn.execute("DELETE FROM recordings")
        return cur.rowcount

    def update_observations(self, recording_id: str, observations: str) -> None:
        with self._transaction() as conn:
            cur = conn.execute(
                "UPDATE recordings SET observations = ?, updated_at = ? WHERE id = ?",
                (observations, _now(), recording_id),
            )
        if cur.rowcount == 0:
            raise RecordingNotFoundError(f"Recording not found: {recording_id}")

    # --- Analysis status / results ---

    def get_status(self, recording_id: str) -> str:
        with self._lock:
            row = self.conn.execute(
                "SELECT analysis_status FROM recordings WHERE id = ?", (recording_id,)
            ).fetchone()
        if not row:
            raise RecordingNotFoundError(f"Recording not found: {recording_id}")
        return row["analysis_status"]

    def set_status(
        self,
        recording_id: str,
        status: str,
        mode: str | None = None,
        error: str | None = None,
    ) -> None:
        """Move a recording to not_requested / pending / failed.

        Any previously attached analysis is detached; only save_result can
        complete a recording. ``mode`` is kept when not given.
        """
        if status not in _SETTABLE_STATUSES:
            raise ValueError(f"set_status cannot set {status!r}; use save_result to complete")
        with self._transaction() as conn:
            cur = conn.execute(
                """UPDATE recordings
                   SET analysis_status = ?, analysis_mode = COALESCE(?, analysis_mode),
                       analysis_json = NULL, analysis_error = ?, updated_at = ?
                   WHERE id = ?""",
                (status, mode, error if status == STATUS_FAILED else None, _now(), recording_id),
            )
        if cur.rowcount == 0:
            raise RecordingNotFoundError(f"Recording not found: {recording_id}")
        self._notify(recording_id, status)

    def save_result(self, recording_id: str, report: AnalysisReport) -> None:
        """Attach the analysis and mark the recording completed in one transaction."""
        with self._transaction() as conn:
            cur = conn.execute(
                """UPDATE recordings
                   SET analysis_status = ?, analysis_mode = ?, analysis_json = ?,
                       analysis_error = NULL, updated_at = ?
                   WHERE id = ?""",
                (STATUS_COMPLETED, report.mode, report.model_dump_json(), _now(), recording_id),
            )
        if cur.rowcount == 0:
            raise RecordingNotFoundError(f"Recording not found: {recording_id}")
        self._notify(recording_id, STATUS_COMPLETED)

    def get_result(self, recording_id: str) -> AnalysisReport | None:
        with self._lock:
            row = self.conn.execute(
                "SELECT analysis_json FROM recordings WHERE id = ?", (recording_id,)
            ).fetchone()
        if not row or not row["analysis_json"]:
            return None
        return AnalysisReport.model_validate_json(row["analysis_json"])

    # --- Stats ---

    def statistics(self) -> RecordingStats:
        recordings = self.list_recordings()
        total = len(recordings)
        total_size = sum(r.file_size_bytes or 0 for r in recordings)
        total_duration = sum(r.duration_sec or 0.0 for r in recordings)

        by_date: dict[str, int] = {}
        status_counts: dict[str, int] = {}
        scores: list[float] = []
        for r in recordings:
            by_date[r.recorded_date] = by_date.get(r.recorded_date, 0) + 1
            status_counts[r.analysis_status] = status_counts.get(r.analysis_status, 0) + 1
            if r.analysis and r.analysis.overall_score is not None:
                scores.append(r.analysis.overall_score)

        return RecordingStats(
            total_recordings=total,
            total_size_bytes=total_size,
            average_size_bytes=total_size / total if total else 0.0,
            total_duration_sec=total_duration,
            average_duration_sec=total_duration / total if total else 0.0,
            recordings_by_date=by_date,
            status_counts=status_counts,
            average_overall_score=round_score(sum(scores) / len(scores)) if scores else None,
            most_recent_id=recordings[0].id if recordings else None,
        )
