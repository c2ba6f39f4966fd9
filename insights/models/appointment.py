from __future__ import annotations

import enum


class AppointmentStatus(str, enum.Enum):
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"
    ARCHIVED = "ARCHIVED"
    BLOCKED = "BLOCKED"  # bloqueio de agenda, não é atendimento


# entram em faturamento/reservas/ocupação
COUNTABLE_STATUSES = frozenset({AppointmentStatus.CONFIRMED, AppointmentStatus.COMPLETED})

# receita perdida
MISSED_STATUSES = frozenset({AppointmentStatus.CANCELLED, AppointmentStatus.NO_SHOW})
