from __future__ import annotations

from fastapi import APIRouter, Query

from insights.schemas.clients import ClientProfile, ClientStatus
from insights.schemas.requests import ClientsRequest
from insights.services.clients import resolve_clients, search_clients

router = APIRouter(prefix="/clients", tags=["clients"])


@router.post("/resolve", response_model=list[ClientProfile])
def clients_resolve(
    payload: ClientsRequest,
    q: str | None = Query(default=None, description="Busca por nome ou email"),
    status: ClientStatus | None = Query(default=None, description="Filtrar por status"),
):
    profiles = resolve_clients(payload.appointments, payload.services, today=payload.today)
    if q or status:
        profiles = search_clients(profiles, query=q, status=status)
    return profiles
