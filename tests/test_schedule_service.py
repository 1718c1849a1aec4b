"""Tests for ScheduleService."""

import json
import logging
from datetime import date, datetime, time

import pytest

from fitschedule.domain.entities import EventStatus, EventType, Snapshot
from fitschedule.domain.errors import NotFoundError, ValidationError
from fitschedule.domain.recurrence import RecurrenceRule
from fitschedule.domain.schedule import SWEEP_INTERVAL_SECONDS, ScheduleService
from fitschedule.storage import codec
from fitschedule.storage.base import StoreReadError
from fitschedule.storage.models import AppData
from fitschedule.storage.sqlalchemy_store import STORAGE_KEY

from builders import MemoryStore, batch, member, person_event


def booked_store():
    return MemoryStore(
        Snapshot(
            members=(member("alice"),),
            events=(person_event("e1", "alice"),),
            sessions=(batch("s1", "alice", 5),),
        )
    )


class TestPersistence:
    """Tests for how the service writes to its store."""

    def test_snapshot_loaded_lazily(self):
        store = booked_store()
        service = ScheduleService(store)
        assert service.snapshot is store.snapshot

    def test_mutation_is_saved(self, service, memory_store):
        created = service.add_member("Dana", "+97250")

        assert memory_store.saves == 1
        assert memory_store.snapshot.get_member(created.id) == created

    def test_failed_operation_writes_nothing(self, service, memory_store):
        with pytest.raises(ValidationError):
            service.add_member("  ")
        assert memory_store.saves == 0
        assert service.snapshot == Snapshot()

    def test_unreadable_store_is_not_overwritten(self, temp_store):
        stored = codec.snapshot_to_dict(booked_store().snapshot)
        stored["members"].append(codec.member_to_dict(member("bob")))
        stored["events"][0]["status"] = "cancelled"
        original = json.dumps(stored)
        session = temp_store._get_session()
        session.add(AppData(key=STORAGE_KEY, value=original))
        session.commit()

        service = ScheduleService(temp_store)
        with pytest.raises(StoreReadError):
            service.add_member("Carol")

        session.expire_all()
        assert session.get(AppData, STORAGE_KEY).value == original

    def test_cleared_store_can_be_used_again(self, temp_store):
        session = temp_store._get_session()
        session.add(AppData(key=STORAGE_KEY, value="{not json"))
        session.commit()
        service = ScheduleService(temp_store)
        with pytest.raises(StoreReadError):
            service.snapshot

        temp_store.clear()
        service.add_member("Carol")

        assert [m.name for m in temp_store.load().members] == ["Carol"]

    def test_noop_sweep_skips_write(self):
        store = booked_store()
        service = ScheduleService(store)

        result = service.sweep(datetime(2024, 1, 1, 9, 0))

        assert not result.changed
        assert store.saves == 0

    def test_sweep_writes_once(self):
        store = booked_store()
        service = ScheduleService(store)

        result = service.sweep(datetime(2024, 1, 1, 10, 0))

        assert result.changed
        assert store.saves == 1
        assert store.snapshot.get_session("s1").remaining == 4

    def test_sweep_uses_clock(self):
        store = booked_store()
        service = ScheduleService(store, clock=lambda: datetime(2024, 1, 2, 0, 0))

        assert service.sweep().completed_event_ids == ("e1",)

    def test_failed_save_keeps_memory_state(self, caplog):
        store = MemoryStore(fail_saves=True)
        service = ScheduleService(store)

        created = service.add_member("Dana")

        assert service.snapshot.get_member(created.id) == created
        assert store.snapshot == Snapshot()
        assert "not persisted" in caplog.text

    def test_already_completed_event_skips_write(self):
        store = booked_store()
        service = ScheduleService(store)
        service.mark_completed("e1")
        service.mark_completed("e1")

        assert store.saves == 1
        assert store.snapshot.get_session("s1").remaining == 4


class TestWatch:
    """Tests for the periodic sweep loop."""

    def test_sweeps_at_interval(self):
        store = booked_store()
        times = iter([datetime(2024, 1, 1, 9, 0), datetime(2024, 1, 1, 9, 30), datetime(2024, 1, 1, 10, 0)])
        service = ScheduleService(store, clock=lambda: next(times))
        sleeps = []
        results = []

        service.watch(iterations=3, sleep=sleeps.append, on_result=results.append)

        assert sleeps == [SWEEP_INTERVAL_SECONDS, SWEEP_INTERVAL_SECONDS]
        assert [r.changed for r in results] == [False, False, True]
        assert store.saves == 1

    def test_custom_interval(self):
        service = ScheduleService(MemoryStore(), clock=lambda: datetime(2024, 1, 1))
        sleeps = []
        service.watch(interval=5, iterations=2, sleep=sleeps.append)
        assert sleeps == [5]

    def test_failed_sweep_does_not_stop_loop(self, caplog):
        store = booked_store()
        ticks = iter([RuntimeError("clock unavailable"), datetime(2024, 1, 1, 10, 0)])

        def clock():
            tick = next(ticks)
            if isinstance(tick, Exception):
                raise tick
            return tick

        service = ScheduleService(store, clock=clock)
        sleeps = []
        results = []

        with caplog.at_level(logging.ERROR):
            service.watch(iterations=2, sleep=sleeps.append, on_result=results.append)

        assert "Sweep failed" in caplog.text
        assert sleeps == [SWEEP_INTERVAL_SECONDS]
        assert [r.changed for r in results] == [True]
        assert store.snapshot.get_session("s1").remaining == 4


class TestOperations:
    """Tests for the service wrappers around domain operations."""

    def test_schedule_and_complete(self, service):
        alice = service.add_member("Alice")
        service.add_session(alice.id, 10)
        event = service.add_event(EventType.PERSON, date(2024, 1, 1), time(9, 0), 60, member_id=alice.id)

        result = service.mark_completed(event.id)

        assert result.debits[0].member_id == alice.id
        assert service.snapshot.sessions[0].remaining == 9

    def test_skip(self, service):
        alice = service.add_member("Alice")
        event = service.add_event("person", date(2024, 1, 1), time(9, 0), 60, member_id=alice.id)
        service.mark_skipped(event.id)
        assert service.snapshot.get_event(event.id).status == EventStatus.SKIPPED

    def test_series_and_member_delete(self, service):
        alice = service.add_member("Alice")
        rule = RecurrenceRule(
            type=EventType.PERSON,
            weekdays=[1, 3],
            start_date=date(2024, 1, 1),
            time=time(9, 0),
            duration=60,
            sessions_total=3,
            member_id=alice.id,
        )
        created, events = service.create_series(rule)
        assert len(service.snapshot.events) == 3

        service.delete_member(alice.id)
        assert service.snapshot.events == ()
        assert service.snapshot.series == ()

    def test_group_series(self, service):
        alice = service.add_member("Alice")
        bob = service.add_member("Bob")
        new_group, created, events = service.create_group_series(
            "Pilates", [alice.id, bob.id], [2], date(2024, 1, 1), time(18, 0), 50, 2
        )
        assert len(events) == 2

        service.delete_group(new_group.id)
        assert service.snapshot.groups == ()
        assert service.snapshot.events == ()

    def test_update_wrappers(self, service):
        alice = service.add_member("Alice")
        service.update_member(alice.id, name="Alicia")
        new_group = service.add_group("Duo", [alice.id])
        service.update_group(new_group.id, color="#000")
        service.update_profile(name="Coach")
        service.update_settings(calendar_view="3day")

        snapshot = service.snapshot
        assert snapshot.get_member(alice.id).name == "Alicia"
        assert snapshot.get_group(new_group.id).color == "#000"
        assert snapshot.profile.name == "Coach"
        assert snapshot.settings.calendar_view.value == "3day"

    def test_unknown_ids_raise(self, service):
        with pytest.raises(NotFoundError):
            service.delete_member("nope")
        with pytest.raises(NotFoundError):
            service.mark_completed("nope")
