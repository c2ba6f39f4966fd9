from __future__ import annotations

from collections.abc import Callable

from pydantic import Field, constr

from insights.schemas.base import FrozenCamelModel

TimeStr = constr(pattern=r"^\d{2}:\d{2}$")  # "HH:MM"


class WorkingHours(FrozenCamelModel):
    staff_id: str
    day_of_week: int = Field(..., ge=0, le=6, description="0=segunda ... 6=domingo")
    is_working: bool = True
    start_time: TimeStr = "09:00"  # type: ignore
    end_time: TimeStr = "17:00"  # type: ignore


# (staff_id, day_of_week) -> regra do dia, ou None quando não há regra
AvailabilityLookup = Callable[[str, int], WorkingHours | None]
