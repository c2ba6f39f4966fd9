from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from datetime import date

from insights.core.logging import get_logger
from insights.core.settings import settings
from insights.models.appointment import MISSED_STATUSES
from insights.schemas.appointments import Appointment
from insights.schemas.catalog import Service
from insights.schemas.clients import ClientProfile, ClientStatus, ClientVisit
from insights.services.catalog import index_services
from insights.services.identity import (
    UNKNOWN_CLIENT,
    identity_key,
    is_internal,
    normalize_phone,
)
from insights.utils.time import parse_day, today_local


def is_eligible(ap: Appointment) -> bool:
    """Entra no cadastro de clientes: não cancelado, não no-show, não interno."""
    return ap.status not in MISSED_STATUSES and not is_internal(ap)


def classify(visits: int, last_visit: str | None, today: date) -> ClientStatus:
    if visits == 1:
        return ClientStatus.NEW
    last = parse_day(last_visit)
    if last is not None and (today - last).days > settings.INACTIVE_AFTER_DAYS:
        return ClientStatus.INACTIVE
    return ClientStatus.STEADY


def flag_duplicates(profiles: Iterable[ClientProfile]) -> list[ClientProfile]:
    """
    Marca is_duplicate em todo perfil cujo telefone (só dígitos, com tamanho
    mínimo) aparece em mais de um perfil. Só telefone: nomes iguais entre
    clientes diferentes são comuns demais para servir de sinal.
    Devolve cópias; os perfis recebidos não são alterados.
    """
    profiles = list(profiles)
    phones = [normalize_phone(p.phone) for p in profiles]
    counts = Counter(
        ph for ph in phones if len(ph) >= settings.DUPLICATE_PHONE_MIN_DIGITS
    )
    return [
        p.model_copy(update={"is_duplicate": counts.get(ph, 0) > 1})
        for p, ph in zip(profiles, phones)
    ]


def _visit_sort_key(v: ClientVisit) -> tuple[bool, str, str]:
    day = parse_day(v.date)
    return (day is not None, day.isoformat() if day else "", v.time_slot)


def resolve_clients(
    appointments: Iterable[Appointment],
    services: Iterable[Service],
    *,
    today: date | None = None,
) -> list[ClientProfile]:
    """
    Reconstrói o cadastro de clientes a partir de todo o histórico de
    agendamentos: um perfil por chave de identidade, com status do ciclo de
    vida e marcação de possíveis duplicados. Ordenado por última visita
    (mais recente primeiro, "nunca" no fim).
    """
    catalog = index_services(services)
    today = today or today_local()
    log = get_logger("resolve_clients", today=today.isoformat())

    groups: dict[str, ClientProfile] = {}
    seen = 0
    for ap in appointments:
        seen += 1
        if not is_eligible(ap):
            continue

        key = identity_key(ap)
        profile = groups.get(key)
        if profile is None:
            profile = ClientProfile(id=key, name=ap.client_name or UNKNOWN_CLIENT)
            groups[key] = profile
        elif profile.name == UNKNOWN_CLIENT and ap.client_name:
            profile.name = ap.client_name

        service = catalog.get(ap.service_id)
        price = service.price if service else 0.0
        profile.visits += 1
        profile.total_spend += price
        profile.history.append(
            ClientVisit(
                appointment_id=ap.id,
                date=ap.date,
                time_slot=ap.time_slot,
                staff_id=ap.staff_id,
                service_id=ap.service_id,
                service_name=service.name if service else None,
                price=price,
                status=ap.status,
                notes=ap.notes,
            )
        )

        # backfill: cliente identificado pelo telefone pode trazer email depois
        if not profile.email and ap.client_email:
            profile.email = ap.client_email
        if not profile.phone and ap.client_phone:
            profile.phone = ap.client_phone

        day = parse_day(ap.date)
        if day is None:
            log.warning("clients.malformed_date", appointment_id=ap.id, date=ap.date)
            continue
        iso = day.isoformat()
        if profile.last_visit is None or iso > profile.last_visit:
            profile.last_visit = iso

    for profile in groups.values():
        profile.history.sort(key=_visit_sort_key, reverse=True)
        profile.status = classify(profile.visits, profile.last_visit, today)

    profiles = flag_duplicates(groups.values())
    profiles.sort(key=lambda p: p.last_visit or "", reverse=True)

    log.info(
        "clients.resolve",
        appointments=seen,
        profiles=len(profiles),
        duplicates=sum(1 for p in profiles if p.is_duplicate),
    )
    return profiles


def search_clients(
    profiles: Iterable[ClientProfile],
    query: str | None = None,
    status: ClientStatus | None = None,
) -> list[ClientProfile]:
    """Filtro do cadastro (nome/email por substring, status). Não altera perfis."""
    needle = (query or "").strip().lower()
    result = []
    for p in profiles:
        if status is not None and p.status != status:
            continue
        if needle and needle not in p.name.lower() and needle not in (p.email or "").lower():
            continue
        result.append(p)
    return result
