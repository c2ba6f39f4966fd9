from __future__ import annotations

import re

from insights.core.settings import settings
from insights.models.appointment import AppointmentStatus
from insights.schemas.appointments import Appointment

_NON_DIGITS = re.compile(r"\D")

WALK_IN_PREFIX = "walk-in:"
UNKNOWN_CLIENT = "Unknown client"


def normalize_phone(phone: str | None) -> str:
    """Mantém apenas dígitos: "(555) 123-4567" -> "5551234567"."""
    if not phone:
        return ""
    return _NON_DIGITS.sub("", phone)


def normalize_email(email: str | None) -> str:
    if not email:
        return ""
    return email.strip().lower()


def is_internal(ap: Appointment) -> bool:
    """
    Bloqueios de agenda e walk-ins anônimos gravados pelo painel não são
    clientes: status BLOCKED, nome sentinela ("Blocked", "Blocked Time",
    "Blocked - <nota>") ou email no domínio interno.
    """
    if ap.status == AppointmentStatus.BLOCKED:
        return True
    name = (ap.client_name or "").strip().lower()
    if name in settings.blocked_client_names or name.startswith("blocked - "):
        return True
    marker = settings.INTERNAL_EMAIL_MARKER.lower()
    return bool(marker) and marker in normalize_email(ap.client_email)


def identity_key(ap: Appointment) -> str:
    """
    Chave de resolução do cliente, nesta prioridade:
    telefone normalizado > email > chave sintética por agendamento.
    A chave sintética garante que walk-ins sem contato nunca se fundam.
    """
    phone = normalize_phone(ap.client_phone)
    if phone:
        return phone
    email = normalize_email(ap.client_email)
    if email:
        return email
    return f"{WALK_IN_PREFIX}{ap.id}"
