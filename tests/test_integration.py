"""End-to-end tests running the service against the SQLite store."""

from datetime import date, datetime, time

from fitschedule.domain.entities import EventStatus, EventType
from fitschedule.domain.recurrence import RecurrenceRule
from fitschedule.domain.schedule import ScheduleService
from fitschedule.storage.factories import create_sqlite_store


def reopen(temp_store) -> ScheduleService:
    return ScheduleService(create_sqlite_store(database_path=temp_store.database_path))


def test_training_month(temp_store):
    service = ScheduleService(temp_store)
    dana = service.add_member("Dana", "+97250")
    avi = service.add_member("Avi")
    old_batch = service.add_session(dana.id, 10, 1)
    new_batch = service.add_session(dana.id, 10)
    service.add_session(avi.id, 5)

    series, events = service.create_series(
        RecurrenceRule(
            type=EventType.PERSON,
            weekdays=[1, 3],
            start_date=date(2024, 1, 1),
            time=time(9, 0),
            duration=60,
            sessions_total=4,
            member_id=dana.id,
        )
    )
    assert [e.date for e in events] == [
        date(2024, 1, 1),
        date(2024, 1, 3),
        date(2024, 1, 8),
        date(2024, 1, 10),
    ]

    crew, class_event = service.create_group_event(
        "Crew", [dana.id, avi.id], date(2024, 1, 3), time(18, 0), 45
    )

    # Everything up to Wednesday evening has ended
    result = service.sweep(datetime(2024, 1, 3, 19, 0))
    assert len(result.completed_event_ids) == 3
    assert all(d.applied for d in result.debits)

    service.mark_skipped(events[2].id)

    reloaded = reopen(temp_store)
    snapshot = reloaded.snapshot
    assert snapshot.get_session(old_batch.id).remaining == 0
    assert snapshot.get_session(new_batch.id).remaining == 8
    assert sum(s.remaining for s in snapshot.sessions_for(avi.id)) == 4
    assert snapshot.get_event(events[2].id).status == EventStatus.SKIPPED
    assert snapshot.get_series(series.id).weekdays == (1, 3)

    # A repeat sweep at the same time changes nothing
    assert not reloaded.sweep(datetime(2024, 1, 3, 19, 0)).changed

    reloaded.delete_member(avi.id)
    snapshot = reloaded.snapshot
    assert snapshot.get_group(crew.id).member_ids == (dana.id,)
    assert snapshot.sessions_for(avi.id) == []
    assert snapshot.get_event(class_event.id) is not None

    reloaded.delete_member(dana.id)
    snapshot = reopen(temp_store).snapshot
    assert snapshot.members == ()
    assert snapshot.groups == ()
    assert snapshot.events == ()
    assert snapshot.series == ()
    assert snapshot.sessions == ()
