from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence, Tuple, Union

from jewelry_backend.errors import InvalidPeriodAnchor
from .schemas import PeriodWindow, ReportKind, ReportPeriod, parse_timestamp

DAY_FORMATS = ("%Y-%m-%d",)
MONTH_FORMATS = ("%Y-%m", "%Y-%m-%d")
YEAR_FORMATS = ("%Y", "%Y-%m", "%Y-%m-%d")


def utc_now() -> datetime:
    """Current time as a naive UTC datetime, comparable with stored timestamps"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _parse_anchor(anchor: str, formats: Sequence[str]) -> datetime:
    text = anchor.strip()
    for fmt in formats:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise InvalidPeriodAnchor(f"'{anchor}' is not a valid anchor, expected one of {', '.join(formats)}")


def _shift_months(moment: datetime, months: int) -> datetime:
    """First day of the month `months` away from `moment`'s month."""
    month_index = moment.month - 1 + months
    return moment.replace(year=moment.year + month_index // 12, month=month_index % 12 + 1, day=1)


def _daily(start: datetime) -> Tuple[datetime, datetime, datetime, datetime]:
    end = start + timedelta(days=1)
    return start, end, start - timedelta(days=1), start


def _monthly(anchor: datetime) -> Tuple[datetime, datetime, datetime, datetime]:
    start = anchor.replace(day=1)
    return start, _shift_months(start, 1), _shift_months(start, -1), start


def _yearly(anchor: datetime) -> Tuple[datetime, datetime, datetime, datetime]:
    start = anchor.replace(month=1, day=1)
    return start, start.replace(year=start.year + 1), start.replace(year=start.year - 1), start


def _custom(start: datetime, end_anchor: Optional[str]) -> Tuple[datetime, datetime, datetime, datetime]:
    # End dates are inclusive, so the window closes at the following midnight
    if end_anchor:
        end = _parse_anchor(end_anchor, DAY_FORMATS) + timedelta(days=1)
    else:
        end = start + timedelta(days=1)
    if end <= start:
        raise InvalidPeriodAnchor(f"Custom range ends ({end_anchor}) before it starts ({start.date()})")
    length = end - start
    return start, end, start - length, start


def resolve_period(
    report_kind: Union[ReportKind, str],
    anchor: Optional[str] = None,
    end_anchor: Optional[str] = None,
    now: Optional[datetime] = None
) -> ReportPeriod:
    """
    Resolve the current report window and the window it is compared against.

    Windows are half-open [start, end). Daily, monthly and yearly reports
    compare against the preceding calendar day, month or year; custom ranges
    compare against the equal-length window right before their start.

    When no anchor is given for a daily, monthly or yearly report, the day,
    month or year of `now` is used, read as UTC like stored timestamps.
    Custom ranges always need an anchor.
    """
    try:
        kind = ReportKind(report_kind)
    except ValueError:
        raise InvalidPeriodAnchor(f"Unknown report type: {report_kind}")

    if not anchor or not anchor.strip():
        if kind == ReportKind.CUSTOM:
            raise InvalidPeriodAnchor("Custom range requires a start date")
        if now is None:
            raise InvalidPeriodAnchor(f"A {kind.value} report needs an anchor or a reference time")
        anchor = parse_timestamp(now).strftime("%Y-%m-%d")

    try:
        if kind == ReportKind.DAILY:
            start, end, prev_start, prev_end = _daily(_parse_anchor(anchor, DAY_FORMATS))
            label = start.strftime("%Y-%m-%d")
        elif kind == ReportKind.MONTHLY:
            start, end, prev_start, prev_end = _monthly(_parse_anchor(anchor, MONTH_FORMATS))
            label = start.strftime("%Y-%m")
        elif kind == ReportKind.YEARLY:
            start, end, prev_start, prev_end = _yearly(_parse_anchor(anchor, YEAR_FORMATS))
            label = str(start.year)
        else:
            start, end, prev_start, prev_end = _custom(_parse_anchor(anchor, DAY_FORMATS), end_anchor)
            label = start.strftime("%Y-%m-%d")
    except (ValueError, OverflowError) as e:
        # Shifting past the supported calendar range
        raise InvalidPeriodAnchor(f"'{anchor}' is outside the supported date range: {e}")

    return ReportPeriod(
        kind=kind,
        anchor=label,
        current=PeriodWindow(start=start, end=end, kind=kind),
        previous=PeriodWindow(start=prev_start, end=prev_end, kind=kind)
    )
