"""
Sample invoice skeleton for a past month.

One line item per Monday-Friday span of the month, billed at a full working
day per weekday.
"""

import calendar
from datetime import date

import yaml

from core.config import DATE_KEY, SAMPLE_HEADERS, SAMPLE_HOURS_PER_DAY, TABLE_KEY


def get_month_for_offset(month_offset: int, today: date | None = None) -> tuple[int, int]:
    """
    Year and month that lie `month_offset` months before today's month.

    Returns:
        Tuple of (year, month)
    """
    today = today or date.today()
    months = today.year * 12 + (today.month - 1) - month_offset
    return months // 12, months % 12 + 1


def get_work_weeks(year: int, month: int) -> list[tuple[int, int]]:
    """
    Find the Monday-Friday spans of a month.

    Walks one day past the month end so the final open span is closed on the
    last weekday seen.

    Returns:
        List of (first_day, last_day) tuples
    """
    _, total_days = calendar.monthrange(year, month)
    weeks = []
    start = None
    end = None

    for day in range(1, total_days + 2):
        is_workday = day <= total_days and date(year, month, day).weekday() < 5
        if is_workday:
            if start is None:
                start = day
            end = day
        elif start is not None:
            weeks.append((start, end))
            start = None

    return weeks


def build_sample_invoice(month_offset: int, today: date | None = None) -> dict:
    """Build the sample invoice mapping for the target month."""
    today = today or date.today()
    year, month = get_month_for_offset(month_offset, today)
    month_name = calendar.month_name[month]

    rows = [list(SAMPLE_HEADERS)]
    for start, end in get_work_weeks(year, month):
        rows.append([f"{month_name} {start}-{end}", (end - start + 1) * SAMPLE_HOURS_PER_DAY])

    return {DATE_KEY: today.isoformat(), TABLE_KEY: rows}


def generate_sample_invoice(month_offset: int, today: date | None = None) -> str:
    """Render the sample invoice as YAML text."""
    invoice = build_sample_invoice(month_offset, today)
    return yaml.safe_dump(invoice, default_flow_style=None, sort_keys=False, allow_unicode=True)
