"""Domain layer for fitschedule application."""

from fitschedule.domain.calendar import create_series, delete_series
from fitschedule.domain.integrity import delete_group, delete_member
from fitschedule.domain.ledger import apply_debits
from fitschedule.domain.recurrence import RecurrenceRule, expand_series
from fitschedule.domain.schedule import ScheduleService
from fitschedule.domain.sweeper import apply_completion_sweep, mark_completed, mark_skipped

__all__ = [
    "RecurrenceRule",
    "ScheduleService",
    "apply_completion_sweep",
    "apply_debits",
    "create_series",
    "delete_group",
    "delete_member",
    "delete_series",
    "expand_series",
    "mark_completed",
    "mark_skipped",
]
