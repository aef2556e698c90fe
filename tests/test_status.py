"""Tests for status polling and push subscriptions."""

from __future__ import annotations

import asyncio

import pytest

from speechcoach.analysis.models import AnalysisReport
from speechcoach.db.models import Recording
from speechcoach.db.repository import Repository
from speechcoach.pipeline.status import StatusTracker, poll_status
from speechcoach.providers.mock import mock_result


def test_poll_status_yields_changes_until_terminal(repo: Repository, recording: Recording) -> None:
    steps = iter([
        lambda: repo.set_status(recording.id, "pending"),
        lambda: None,
        lambda: repo.save_result(recording.id, AnalysisReport(source="mock", result=mock_result(recording.id))),
    ])
    intervals: list[float] = []

    async def fake_sleep(interval: float) -> None:
        intervals.append(interval)
        next(steps)()

    async def collect() -> list[str]:
        return [s async for s in poll_status(repo, recording.id, sleep=fake_sleep)]

    assert asyncio.run(collect()) == ["not_requested", "pending", "completed"]
    assert intervals == [2.0, 2.0, 2.0]


def test_poll_status_stops_on_failed(repo: Repository, recording: Recording) -> None:
    repo.set_status(recording.id, "failed", error="x")

    async def collect() -> list[str]:
        return [s async for s in poll_status(repo, recording.id, sleep=asyncio.sleep)]

    assert asyncio.run(collect()) == ["failed"]


def test_subscribe_receives_pushed_updates(repo: Repository, recording: Recording) -> None:
    tracker = StatusTracker(repo)

    async def scenario() -> list[str]:
        seen: list[str] = []

        async def consume() -> None:
            async for status in tracker.subscribe(recording.id):
                seen.append(status)

        task = asyncio.create_task(consume())
        await asyncio.sleep(0)
        repo.set_status(recording.id, "pending")
        await asyncio.sleep(0)
        repo.save_result(recording.id, AnalysisReport(source="mock", result=mock_result(recording.id)))
        await asyncio.wait_for(task, 1)
        return seen

    assert asyncio.run(scenario()) == ["not_requested", "pending", "completed"]
    assert repo._listeners == []


def test_subscribe_does_not_repeat_status_seen_by_initial_read(
    repo: Repository, recording: Recording, monkeypatch: pytest.MonkeyPatch
) -> None:
    real_get_status = repo.get_status

    def get_status_after_change(recording_id: str) -> str:
        # The change lands after the listener is registered but before the first read.
        monkeypatch.setattr(repo, "get_status", real_get_status)
        repo.set_status(recording_id, "pending")
        return real_get_status(recording_id)

    monkeypatch.setattr(repo, "get_status", get_status_after_change)
    tracker = StatusTracker(repo)

    async def scenario() -> list[str]:
        seen: list[str] = []

        async def consume() -> None:
            async for status in tracker.subscribe(recording.id):
                seen.append(status)

        task = asyncio.create_task(consume())
        await asyncio.sleep(0)
        repo.save_result(recording.id, AnalysisReport(source="mock", result=mock_result(recording.id)))
        await asyncio.wait_for(task, 1)
        return seen

    assert asyncio.run(scenario()) == ["pending", "completed"]


def test_wait_for_terminal(repo: Repository, recording: Recording) -> None:
    tracker = StatusTracker(repo)

    async def scenario() -> str:
        waiter = asyncio.create_task(tracker.wait_for_terminal(recording.id, timeout=1))
        await asyncio.sleep(0)
        repo.set_status(recording.id, "failed", error="down")
        return await waiter

    assert asyncio.run(scenario()) == "failed"


def test_wait_for_terminal_times_out(repo: Repository, recording: Recording) -> None:
    tracker = StatusTracker(repo)
    with pytest.raises(asyncio.TimeoutError):
        asyncio.run(tracker.wait_for_terminal(recording.id, timeout=0.05))
