from __future__ import annotations

import calendar
from collections.abc import Iterator
from datetime import date, timedelta

WEEKDAY_LABELS = list(calendar.day_name)  # Monday=0 .. Sunday=6


def iter_days(start: date, end: date) -> Iterator[date]:
    """Dias de start até end, ambos inclusivos."""
    cur = start
    while cur <= end:
        yield cur
        cur += timedelta(days=1)


def weekday_occurrences(start: date, end: date) -> list[int]:
    """Quantas vezes cada dia da semana (seg → dom) aparece em [start, end]."""
    total = (end - start).days + 1
    if total <= 0:
        return [0] * 7
    full_weeks, rest = divmod(total, 7)
    counts = [full_weeks] * 7
    for i in range(rest):
        counts[(start.weekday() + i) % 7] += 1
    return counts


def iter_months(start: date, end: date) -> Iterator[str]:
    """Rótulos "YYYY-MM" de cada mês tocado por [start, end]."""
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        yield f"{year:04d}-{month:02d}"
        month += 1
        if month > 12:
            year, month = year + 1, 1
