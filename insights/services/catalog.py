from __future__ import annotations

import math
from collections.abc import Iterable

from insights.core.errors import ContractViolation
from insights.schemas.catalog import Service, Staff


def index_services(services: Iterable[Service]) -> dict[str, Service]:
    """Indexa o catálogo por id, rejeitando preço/duração inválidos."""
    by_id: dict[str, Service] = {}
    for s in services:
        if not math.isfinite(s.price) or s.price < 0:
            raise ContractViolation("service price must be >= 0", service_id=s.id, price=s.price)
        if s.duration_minutes is not None and s.duration_minutes <= 0:
            raise ContractViolation(
                "service duration must be > 0",
                service_id=s.id,
                duration_minutes=s.duration_minutes,
            )
        by_id[s.id] = s
    return by_id


def index_staff(staff: Iterable[Staff]) -> dict[str, Staff]:
    return {m.id: m for m in staff}


def price_of(services: dict[str, Service], service_id: str) -> float:
    s = services.get(service_id)
    return s.price if s else 0.0


def duration_of(services: dict[str, Service], service_id: str) -> int:
    s = services.get(service_id)
    return (s.duration_minutes or 0) if s else 0
