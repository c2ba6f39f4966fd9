from __future__ import annotations

import datetime as dt

from pydantic import Field

from insights.schemas.analytics import DateRange
from insights.schemas.appointments import Appointment
from insights.schemas.availability import WorkingHours
from insights.schemas.base import CamelModel
from insights.schemas.catalog import Service, Staff


class SnapshotRequest(CamelModel):
    appointments: list[Appointment] = Field(default_factory=list)
    services: list[Service] = Field(default_factory=list)
    staff: list[Staff] = Field(default_factory=list)
    availability: list[WorkingHours] = Field(
        default_factory=list, description="Regras semanais por profissional"
    )
    current_range: DateRange
    previous_range: DateRange
    today: dt.date | None = Field(
        default=None, description="Data de referência; padrão: hoje na TZ da organização"
    )


class ClientsRequest(CamelModel):
    appointments: list[Appointment] = Field(default_factory=list)
    services: list[Service] = Field(default_factory=list)
    today: dt.date | None = None
