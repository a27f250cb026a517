"""Tests for the stored schedule state."""

from dataclasses import replace
from datetime import date, datetime

import pytest

from autoday.core.allocator import Block, BlockKind, FixedEvent, Unplaced
from autoday.core.schedule import ScheduleStore, format_block_line, format_schedule
from autoday.core.settings import BreakWindow, ConfigurationError, Settings
from autoday.core.tasks import Task


NOW = datetime(2025, 1, 15, 7, 30)
STANDUP = [FixedEvent(id="1", title="Standup", start_minutes=540, end_minutes=555)]


@pytest.fixture
def settings():
    return Settings(
        date=date(2025, 1, 15),
        day_start=540,
        day_end=720,
        buffer=0,
        break_window=BreakWindow(660, 690, "Lunch"),
    )


@pytest.fixture
def tasks():
    return [
        Task(id="a", title="Write report", duration=60, splittable=False, created_at=datetime(2025, 1, 14, 8, 0)),
        Task(id="b", title="Email", duration=30, splittable=False, created_at=datetime(2025, 1, 14, 8, 1)),
    ]


@pytest.fixture
def store(settings, tasks):
    s = ScheduleStore(settings=settings)
    s.regenerate(tasks, STANDUP, now=NOW)
    return s


def fixed_blocks(store: ScheduleStore) -> list[Block]:
    return [b for b in store.blocks if b.fixed]

class TestRegenerate:
    def test_builds_fixed_and_task_blocks(self, store):
        assert [(b.id, b.start, b.end) for b in store.blocks] == [
            ("E_1", 540, 555),
            ("a#1", 555, 615),
            ("b#1", 615, 645),
            ("break", 660, 690),
        ]
        assert store.unplaced == []
        assert store.generated_at == NOW

    def test_changed_break_window_takes_effect(self, store, tasks):
        store.settings.break_window = BreakWindow(600, 630, "Coffee")

        store.regenerate(tasks, STANDUP)

        assert [(b.id, b.title, b.start, b.end) for b in fixed_blocks(store)] == [
            ("E_1", "Standup", 540, 555),
            ("break", "Coffee", 600, 630),
        ]
        assert [(b.id, b.start, b.end) for b in store.blocks if not b.fixed] == [("b#1", 555, 585), ("a#1", 630, 690)]

    def test_removed_break_window_is_dropped(self, store, tasks):
        store.settings.break_window = None

        store.regenerate(tasks, STANDUP)

        assert [b.id for b in fixed_blocks(store)] == ["E_1"]

    def test_new_events_replace_fixed_blocks(self, store, tasks):
        store.regenerate(tasks, [])

        assert [b.id for b in fixed_blocks(store)] == ["break"]
        assert store.find("a#1").start == 540

    def test_discards_manual_moves(self, store, tasks):
        moved = store.find("b#1")
        store.replace_block(replace(moved, start=690, end=720))

        store.regenerate(tasks, STANDUP)

        assert (store.find("b#1").start, store.find("b#1").end) == (615, 645)

    def test_reports_unplaced(self, settings):
        s = ScheduleStore(settings=settings)
        big = Task(id="big", title="Big", duration=150, splittable=False)

        result = s.regenerate([big], [])

        assert result.unplaced == [Unplaced(task_id="big", title="Big", remaining=150)]
        assert s.unplaced == result.unplaced

    def test_bad_settings_leave_store_untouched(self, store, tasks):
        before = list(store.blocks)
        store.settings.day_end = 560

        with pytest.raises(ConfigurationError):
            store.regenerate(tasks, STANDUP)
        assert store.blocks == before


class TestMutations:
    def test_remove_block(self, store):
        assert store.remove_block("a#1") is True
        assert store.find("a#1") is None
        assert store.remove_block("a#1") is False

    def test_toggle_done(self, store):
        block = store.toggle_done("b#1")
        assert block.done is True
        assert store.toggle_done("b#1").done is False
        assert store.toggle_done("missing") is None

    def test_remove_task_cascades(self, store):
        store.unplaced.append(Unplaced(task_id="a", title="Write report", remaining=15))

        assert store.remove_task("a") == 1
        assert all(b.task_id != "a" for b in store.blocks)
        assert store.unplaced == []

    def test_replace_block_keeps_order(self, store):
        a = store.find("a#1")
        store.replace_block(Block(id=a.id, title=a.title, start=690, end=720, task_id="a"))

        starts = [b.start for b in store.blocks]
        assert starts == sorted(starts)
        assert store.blocks[-1].id == "a#1"


class TestStoredForm:
    def test_roundtrip(self, store):
        store.toggle_done("a#1")
        restored = ScheduleStore.from_dict(store.to_dict())

        assert restored == store

    def test_dict_shape(self, store):
        data = store.to_dict()

        assert data["date"] == "2025-01-15"
        assert data["generated_at"] == "2025-01-15T07:30:00"
        assert data["blocks"][0] == {
            "id": "E_1",
            "title": "Standup",
            "start": 540,
            "end": 555,
            "kind": "event",
            "task_id": None,
            "fixed": True,
            "done": False,
            "continued": False,
        }


class TestFormat:
    def test_block_line(self):
        block = Block(id="a#1", title="Write report", start=555, end=615, task_id="a", done=True)
        assert format_block_line(block) == "[x] 09:15-10:15 Write report (task) #a#1"

    def test_fixed_block_line(self):
        block = Block(id="break", title="Lunch", start=660, end=690, kind=BlockKind.BREAK, fixed=True)
        assert format_block_line(block) == "[ ] 11:00-11:30 Lunch (break, fixed) #break"

    def test_schedule(self, settings):
        s = ScheduleStore(
            settings=settings,
            blocks=[Block(id="a#1", title="Write report", start=540, end=600, task_id="a")],
            unplaced=[Unplaced(task_id="b", title="Email", remaining=30)],
        )

        assert format_schedule(s) == "\n".join(
            [
                "Schedule for Wednesday, Jan 15 (09:00-12:00, buffer 0 min)",
                "",
                "[ ] 09:00-10:00 Write report (task) #a#1",
                "",
                "Unplaced:",
                "- Email (30 min left)",
            ]
        )

    def test_empty_schedule(self, settings):
        assert format_schedule(ScheduleStore(settings=settings)).endswith("No blocks scheduled.")
