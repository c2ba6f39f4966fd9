from __future__ import annotations

from fastapi import APIRouter, Query

from insights.schemas.analytics import AnalyticsSnapshot
from insights.schemas.requests import SnapshotRequest
from insights.services.availability import availability_from_rules
from insights.services.metrics import aggregate, rank_staff

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.post("/snapshot", response_model=AnalyticsSnapshot)
def analytics_snapshot(
    payload: SnapshotRequest,
    staff_sort: str = Query(
        default="revenue",
        description="Campo para ordenar o ranking de profissionais (ex.: utilization, avgTicket)",
    ),
):
    snapshot = aggregate(
        payload.appointments,
        payload.services,
        payload.staff,
        payload.current_range,
        payload.previous_range,
        availability_from_rules(payload.availability),
        today=payload.today,
    )
    # reordenação é só apresentação: nenhuma métrica é recalculada
    if staff_sort != "revenue":
        snapshot.top_staff = rank_staff(snapshot.top_staff, staff_sort)
    return snapshot
