"""Tests for the JSON file store."""

import json
from datetime import date, datetime

import pytest

from autoday.adapters.file_store import FileStore
from autoday.core.allocator import Block, FixedEvent, Unplaced
from autoday.core.schedule import ScheduleStore
from autoday.core.settings import BreakWindow, Settings
from autoday.core.tasks import Priority, RankStrategy, Task


@pytest.fixture
def store(tmp_path):
    return FileStore(tmp_path / "data")


class TestTasks:
    def test_empty_when_missing(self, store):
        assert store.load_tasks() == []

    def test_roundtrip(self, store):
        tasks = [
            Task(
                id="t1",
                title="Write report",
                duration=90,
                priority=Priority.HIGH,
                splittable=False,
                deadline_date=date(2025, 1, 15),
                created_at=datetime(2025, 1, 14, 8, 0),
            ),
            Task(
                id="G_abc",
                title="Buy milk",
                duration=15,
                created_at=datetime(2025, 1, 14, 9, 0),
                source="google",
                list_title="Errands",
            ),
        ]
        store.save_tasks(tasks)

        assert store.load_tasks() == tasks

    def test_corrupt_file_starts_empty(self, store):
        (store.data_dir / "tasks.json").write_text("{not json")

        assert store.load_tasks() == []

    def test_malformed_entries_start_empty(self, store):
        (store.data_dir / "tasks.json").write_text(json.dumps([{"title": "no id"}]))

        assert store.load_tasks() == []

    def test_unicode_kept_readable(self, store):
        store.save_tasks([Task(id="t1", title="資料作成", duration=30)])

        assert "資料作成" in (store.data_dir / "tasks.json").read_text()


class TestSettings:
    def test_defaults_when_missing(self, store):
        assert store.load_settings() == Settings()

    def test_roundtrip(self, store):
        settings = Settings(
            date=date(2025, 1, 15),
            day_start=480,
            day_end=1080,
            buffer=10,
            strategy=RankStrategy.DEADLINE_FIRST,
            break_window=BreakWindow(720, 780, "Lunch"),
            import_default_duration=20,
        )
        store.save_settings(settings)

        assert store.load_settings() == settings

    def test_corrupt_file_falls_back(self, store):
        (store.data_dir / "settings.json").write_text('{"start": "nine"}')

        assert store.load_settings() == Settings()


class TestSchedule:
    def test_none_when_missing(self, store):
        assert store.load_schedule() is None

    def test_roundtrip(self, store):
        schedule = ScheduleStore(
            settings=Settings(date=date(2025, 1, 15), day_start=540, day_end=720),
            blocks=[Block(id="t1#1", title="Write report", start=540, end=630, task_id="t1", done=True)],
            unplaced=[Unplaced(task_id="t2", title="Email", remaining=30)],
            generated_at=datetime(2025, 1, 15, 7, 0),
        )
        store.save_schedule(schedule)

        assert store.load_schedule() == schedule

    def test_corrupt_file(self, store):
        (store.data_dir / "schedule.json").write_text("[]")

        assert store.load_schedule() is None


class TestEventCache:
    def test_empty_when_never_synced(self, store):
        assert store.load_events(date(2025, 1, 15)) == []

    def test_cached_per_date(self, store):
        day1 = [FixedEvent(id="e1", title="Standup", start_minutes=570, end_minutes=585)]
        day2 = [FixedEvent(id="e2", title="Review", start_minutes=900, end_minutes=960)]
        store.save_events(date(2025, 1, 15), day1)
        store.save_events(date(2025, 1, 16), day2)

        assert store.load_events(date(2025, 1, 15)) == day1
        assert store.load_events(date(2025, 1, 16)) == day2

    def test_resync_replaces_date(self, store):
        store.save_events(date(2025, 1, 15), [FixedEvent(id="e1", title="Old", start_minutes=570, end_minutes=585)])
        store.save_events(date(2025, 1, 15), [])

        assert store.load_events(date(2025, 1, 15)) == []
