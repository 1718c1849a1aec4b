"""Click parameter types for dates, times and weekday lists."""

import click

from fitschedule.utils.date_parser import parse_date, parse_datetime, parse_time, parse_weekdays


class _ParsedType(click.ParamType):
    parser = None

    def convert(self, value, param, ctx):
        if not isinstance(value, str):
            return value
        try:
            return type(self).parser(value)
        except ValueError as e:
            self.fail(str(e), param, ctx)


class DateType(_ParsedType):
    name = "date"
    parser = staticmethod(parse_date)


class TimeType(_ParsedType):
    name = "time"
    parser = staticmethod(parse_time)


class DateTimeType(_ParsedType):
    name = "datetime"
    parser = staticmethod(parse_datetime)


class WeekdaysType(_ParsedType):
    name = "weekdays"
    parser = staticmethod(parse_weekdays)


DATE = DateType()
TIME = TimeType()
DATETIME = DateTimeType()
WEEKDAYS = WeekdaysType()
