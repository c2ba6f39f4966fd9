from __future__ import annotations

import enum

from insights.models.appointment import AppointmentStatus
from insights.schemas.base import CamelModel


class ClientStatus(str, enum.Enum):
    NEW = "NEW"
    STEADY = "STEADY"
    INACTIVE = "INACTIVE"


class ClientVisit(CamelModel):
    appointment_id: str
    date: str
    time_slot: str
    staff_id: str
    service_id: str
    service_name: str | None = None  # None quando o serviço não está no catálogo
    price: float = 0.0
    status: AppointmentStatus
    notes: str | None = None


class ClientProfile(CamelModel):
    id: str  # chave de identidade (telefone normalizado, email ou walk-in:<id>)
    name: str
    email: str | None = None
    phone: str | None = None
    last_visit: str | None = None  # None = nunca
    visits: int = 0
    total_spend: float = 0.0
    history: list[ClientVisit] = []
    status: ClientStatus = ClientStatus.NEW
    is_duplicate: bool = False
