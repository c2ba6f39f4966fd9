from __future__ import annotations

import datetime as dt
import enum

from insights.schemas.base import CamelModel, FrozenCamelModel


class Trend(str, enum.Enum):
    UP = "up"
    DOWN = "down"
    NEUTRAL = "neutral"


class DateRange(FrozenCamelModel):
    start: dt.date
    end: dt.date  # inclusivo

    def contains(self, d: dt.date) -> bool:
        return self.start <= d <= self.end

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1


class Metric(CamelModel):
    value: int | float
    growth: float = 0.0
    trend: Trend = Trend.NEUTRAL


class RevenueBlock(CamelModel):
    total: Metric
    average: float  # ticket médio
    lost: float  # CANCELLED + NO_SHOW


class BusiestBlock(CamelModel):
    day: str | None = None  # "Tuesday"
    hour: str | None = None  # "2 PM"


class HeatmapEntry(CamelModel):
    hour: str
    count: int


class ServiceRanking(CamelModel):
    service_id: str
    name: str
    revenue: float
    count: int
    share: float  # % do faturamento da janela


class StaffRanking(CamelModel):
    staff_id: str
    name: str
    revenue: float
    hours: float
    utilization: float
    bookings: int
    clients: int
    avg_ticket: float
    rebooking_rate: float
    no_show_rate: float


class ClientRanking(CamelModel):
    id: str  # chave de identidade na janela
    name: str
    email: str | None = None
    spent: float
    visits: int


class ClientBase(CamelModel):
    total_active: int
    return_rate: float
    new_clients: int = 0  # sem histórico antes do início da janela
    returning_clients: int = 0


class SeriesPoint(CamelModel):
    label: str  # "2024-01-03" (diário) ou "2024-01" (mensal)
    revenue: float
    bookings: int


class BookingHealth(CamelModel):
    upcoming: int
    completed: int
    missed: int


class HourCount(CamelModel):
    hour: str
    count: int


class Forecast(CamelModel):
    days: int
    revenue: float
    count: int


class AnalyticsSnapshot(CamelModel):
    range: DateRange
    previous_range: DateRange

    revenue: RevenueBlock
    bookings: Metric
    utilization: Metric
    busiest: BusiestBlock
    heatmap: list[HeatmapEntry]

    top_services: list[ServiceRanking]
    top_staff: list[StaffRanking]
    top_clients: list[ClientRanking]
    clients: ClientBase

    cancellation_rate: float
    no_show_rate: float

    series: list[SeriesPoint]
    booking_health: BookingHealth
    quiet_hours: list[HourCount]
    forecast: Forecast
