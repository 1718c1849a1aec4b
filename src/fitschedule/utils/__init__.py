"""Utility functions for fitschedule."""

from fitschedule.utils.date_parser import parse_date, parse_time, parse_weekdays
from fitschedule.utils.resolver import resolve_group, resolve_member

__all__ = ["parse_date", "parse_time", "parse_weekdays", "resolve_group", "resolve_member"]
