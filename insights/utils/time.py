from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from insights.core.settings import settings


def org_tz(name: str | None = None) -> ZoneInfo:
    try:
        return ZoneInfo(name or settings.ORG_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo("UTC")


def today_local(tz: ZoneInfo | None = None) -> date:
    """Data de hoje na TZ da organização."""
    return datetime.now(tz or org_tz()).date()


def parse_day(value: str | None) -> date | None:
    """
    "YYYY-MM-DD" (ou um ISO datetime, de onde só a parte da data é usada)
    -> date. Retorna None para valores vazios ou inválidos.
    """
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def parse_minutes(value: str | None) -> int | None:
    """Converte "HH:MM" em minutos desde 00:00; None se inválido."""
    if not value:
        return None
    try:
        h, m = map(int, value.strip().split(":")[:2])
    except ValueError:
        return None
    if not (0 <= h <= 24 and 0 <= m < 60) or (h == 24 and m):
        return None
    return h * 60 + m


def parse_hour(value: str | None) -> int | None:
    minutes = parse_minutes(value)
    if minutes is None or minutes >= 24 * 60:
        return None
    return minutes // 60


def hour_label(hour: int) -> str:
    """14 -> "2 PM", 0 -> "12 AM"."""
    suffix = "AM" if hour < 12 else "PM"
    h12 = hour % 12 or 12
    return f"{h12} {suffix}"
