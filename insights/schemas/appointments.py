from __future__ import annotations

import datetime as dt

from pydantic import field_validator

from insights.models.appointment import AppointmentStatus
from insights.schemas.base import FrozenCamelModel


class Appointment(FrozenCamelModel):
    # obrigatório: a chave de walk-in depende dele e precisa ser estável entre chamadas
    id: str
    # mantido como texto: data inválida degrada o cálculo em vez de rejeitar o lote
    date: str  # YYYY-MM-DD (TZ da organização)
    time_slot: str = ""  # HH:mm
    staff_id: str = ""
    service_id: str = ""
    client_name: str = ""
    client_email: str | None = None
    client_phone: str | None = None
    status: AppointmentStatus
    notes: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _date_to_str(cls, v):
        if isinstance(v, dt.datetime):
            return v.date().isoformat()
        if isinstance(v, dt.date):
            return v.isoformat()
        return v

    @field_validator("time_slot", mode="before")
    @classmethod
    def _time_to_str(cls, v):
        if v is None:
            return ""
        if isinstance(v, dt.time):
            return f"{v.hour:02d}:{v.minute:02d}"
        return v
