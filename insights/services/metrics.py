from __future__ import annotations

import math
from collections import Counter, defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta
from operator import attrgetter

from pydantic.alias_generators import to_snake

from insights.core.errors import ContractViolation
from insights.core.logging import get_logger
from insights.core.settings import settings
from insights.models.appointment import (
    COUNTABLE_STATUSES,
    MISSED_STATUSES,
    AppointmentStatus,
)
from insights.schemas.analytics import (
    AnalyticsSnapshot,
    BookingHealth,
    BusiestBlock,
    ClientBase,
    ClientRanking,
    DateRange,
    Forecast,
    HeatmapEntry,
    HourCount,
    Metric,
    RevenueBlock,
    SeriesPoint,
    ServiceRanking,
    StaffRanking,
    Trend,
)
from insights.schemas.appointments import Appointment
from insights.schemas.availability import AvailabilityLookup
from insights.schemas.catalog import Service, Staff
from insights.services.availability import available_minutes
from insights.services.catalog import duration_of, index_services, index_staff, price_of
from insights.services.identity import UNKNOWN_CLIENT, identity_key, is_internal
from insights.utils.time import hour_label, parse_day, parse_hour, today_local
from insights.utils.week import WEEKDAY_LABELS, iter_days, iter_months, weekday_occurrences

STAFF_SORT_FIELDS = frozenset(
    {
        "revenue",
        "hours",
        "utilization",
        "bookings",
        "clients",
        "avg_ticket",
        "rebooking_rate",
        "no_show_rate",
    }
)


# ---------- helpers numéricos ----------


def pct(part: float, whole: float) -> float:
    """part/whole em %, 0 quando o denominador é 0."""
    if not whole:
        return 0.0
    return part / whole * 100


def _clamp_pct(value: float) -> float:
    return max(0.0, min(100.0, value))


def trend_of(growth_pct: float) -> Trend:
    if growth_pct > 0:
        return Trend.UP
    if growth_pct < 0:
        return Trend.DOWN
    return Trend.NEUTRAL


def growth(current: float, previous: float) -> tuple[float, Trend]:
    """
    Variação % de current sobre previous. Sem base de comparação
    (previous == 0): 0/neutral se current também é 0, senão
    GROWTH_FROM_ZERO com trend "up". Nunca devolve NaN/Infinity.
    """
    if previous == 0:
        if current == 0:
            return 0.0, Trend.NEUTRAL
        return settings.GROWTH_FROM_ZERO, Trend.UP
    value = (current - previous) / previous * 100
    if not math.isfinite(value):
        return 0.0, Trend.NEUTRAL
    return value, trend_of(value)


def _metric(current: float, previous: float) -> Metric:
    g, t = growth(current, previous)
    return Metric(value=current, growth=g, trend=t)


def ensure_range(r: DateRange, name: str = "range") -> DateRange:
    if r.start > r.end:
        raise ContractViolation(
            f"{name}.start must be <= {name}.end", start=r.start, end=r.end
        )
    return r


def rank_staff(rows: Iterable[StaffRanking], by: str = "revenue") -> list[StaffRanking]:
    """
    Reordena o ranking de profissionais por qualquer campo numérico, do maior
    para o menor. Ordenação estável: empates mantêm a ordem anterior.
    Aceita o nome do campo em snake_case ou camelCase.
    """
    key = to_snake(by)
    if key not in STAFF_SORT_FIELDS:
        raise ContractViolation("unknown staff sort field", field=by)
    return sorted(rows, key=attrgetter(key), reverse=True)


# ---------- agregação por janela ----------


@dataclass
class _Window:
    range: DateRange
    total: int = 0  # tudo na janela, exceto bloqueios
    cancelled: int = 0
    no_shows: int = 0
    lost: float = 0.0
    countable: list[tuple[Appointment, date]] = field(default_factory=list)
    no_shows_by_staff: Counter = field(default_factory=Counter)

    def add(self, ap: Appointment, day: date, catalog: dict[str, Service]) -> None:
        if ap.status == AppointmentStatus.BLOCKED:
            return
        self.total += 1
        if ap.status in COUNTABLE_STATUSES:
            self.countable.append((ap, day))
        elif ap.status in MISSED_STATUSES:
            self.lost += price_of(catalog, ap.service_id)
            if ap.status == AppointmentStatus.CANCELLED:
                self.cancelled += 1
            else:
                self.no_shows += 1
                self.no_shows_by_staff[ap.staff_id] += 1

    def revenue(self, catalog: dict[str, Service]) -> float:
        return sum(price_of(catalog, ap.service_id) for ap, _ in self.countable)

    def occupancy(
        self,
        staff: dict[str, Staff],
        catalog: dict[str, Service],
        lookup: AvailabilityLookup | None,
    ) -> tuple[float, dict[str, int]]:
        """(ocupação da organização %, minutos disponíveis por profissional)."""
        booked = sum(
            duration_of(catalog, ap.service_id)
            for ap, _ in self.countable
            if ap.staff_id in staff
        )
        weekdays = weekday_occurrences(self.range.start, self.range.end)
        available = {sid: available_minutes(sid, weekdays, lookup) for sid in staff}
        total_available = sum(available.values())
        value = _clamp_pct(pct(booked, total_available))
        return value, available


def _busiest_and_heatmap(
    countable: list[tuple[Appointment, date]],
) -> tuple[BusiestBlock, list[HeatmapEntry], Counter]:
    day_counts = [0] * 7
    hour_counts: Counter = Counter()
    for ap, day in countable:
        day_counts[day.weekday()] += 1
        hour = parse_hour(ap.time_slot)
        if hour is not None:
            hour_counts[hour] += 1

    busiest = BusiestBlock()
    if any(day_counts):
        # empate -> dia mais cedo da semana
        busiest.day = WEEKDAY_LABELS[max(range(7), key=lambda d: (day_counts[d], -d))]
    if hour_counts:
        busiest.hour = hour_label(min(hour_counts, key=lambda h: (-hour_counts[h], h)))

    heatmap = [
        HeatmapEntry(hour=hour_label(h), count=c)
        for h, c in sorted(hour_counts.items(), key=lambda kv: (-kv[1], kv[0]))
    ]
    return busiest, heatmap, hour_counts


def _top_services(
    countable: list[tuple[Appointment, date]],
    catalog: dict[str, Service],
    total_revenue: float,
) -> list[ServiceRanking]:
    revenue: dict[str, float] = defaultdict(float)
    count: Counter = Counter()
    for ap, _ in countable:
        service = catalog.get(ap.service_id)
        if service is None:
            continue
        revenue[service.id] += service.price
        count[service.id] += 1

    rows = [
        ServiceRanking(
            service_id=sid,
            name=catalog[sid].name or sid,
            revenue=rev,
            count=count[sid],
            share=pct(rev, total_revenue),
        )
        for sid, rev in revenue.items()
    ]
    rows.sort(key=lambda r: (-r.revenue, r.name))
    return rows


def _top_staff(
    window: _Window,
    staff: dict[str, Staff],
    catalog: dict[str, Service],
    available: dict[str, int],
) -> list[StaffRanking]:
    # bloqueios internos não são atendimentos do profissional: ficam fora da linha toda
    by_staff: dict[str, list[Appointment]] = defaultdict(list)
    for ap, _ in window.countable:
        if is_internal(ap):
            continue
        by_staff[ap.staff_id].append(ap)

    rows: list[StaffRanking] = []
    for member in staff.values():
        apts = by_staff.get(member.id)
        if not apts:
            continue
        revenue = sum(price_of(catalog, ap.service_id) for ap in apts)
        bookings = len(apts)
        visits_per_client = Counter(identity_key(ap) for ap in apts)
        rebooked = sum(1 for n in visits_per_client.values() if n > 1)
        no_shows = window.no_shows_by_staff.get(member.id, 0)
        minutes = sum(duration_of(catalog, ap.service_id) for ap in apts)
        rows.append(
            StaffRanking(
                staff_id=member.id,
                name=member.name or member.id,
                revenue=revenue,
                hours=minutes / 60,
                utilization=_clamp_pct(pct(minutes, available.get(member.id, 0))),
                bookings=bookings,
                clients=len(visits_per_client),
                avg_ticket=revenue / bookings,
                rebooking_rate=pct(rebooked, len(visits_per_client)),
                no_show_rate=pct(no_shows, bookings + no_shows),
            )
        )
    return rank_staff(rows, "revenue")


def _top_clients(
    countable: list[tuple[Appointment, date]],
    catalog: dict[str, Service],
) -> list[ClientRanking]:
    groups: dict[str, ClientRanking] = {}
    for ap, _ in countable:
        if is_internal(ap):
            continue
        key = identity_key(ap)
        row = groups.get(key)
        if row is None:
            row = ClientRanking(
                id=key, name=ap.client_name or UNKNOWN_CLIENT, spent=0.0, visits=0
            )
            groups[key] = row
        row.spent += price_of(catalog, ap.service_id)
        row.visits += 1
        if not row.email and ap.client_email:
            row.email = ap.client_email

    rows = list(groups.values())
    rows.sort(key=lambda r: (-r.spent, -r.visits, r.name))
    return rows


def _series(window: _Window, catalog: dict[str, Service]) -> list[SeriesPoint]:
    r = window.range
    daily = r.days <= settings.DAILY_SERIES_MAX_DAYS
    if daily:
        labels = [d.isoformat() for d in iter_days(r.start, r.end)]
    else:
        labels = list(iter_months(r.start, r.end))
    revenue: dict[str, float] = dict.fromkeys(labels, 0.0)
    bookings: Counter = Counter()
    for ap, day in window.countable:
        label = day.isoformat() if daily else day.isoformat()[:7]
        revenue[label] += price_of(catalog, ap.service_id)
        bookings[label] += 1
    return [
        SeriesPoint(label=label, revenue=revenue[label], bookings=bookings[label])
        for label in labels
    ]


def _booking_health(window: _Window, today: date) -> BookingHealth:
    upcoming = completed = 0
    for ap, day in window.countable:
        if ap.status == AppointmentStatus.CONFIRMED and day > today:
            upcoming += 1
        else:
            completed += 1
    return BookingHealth(
        upcoming=upcoming,
        completed=completed,
        missed=window.cancelled + window.no_shows,
    )


def _quiet_hours(hour_counts: Counter) -> list[HourCount]:
    hours = range(settings.BUSINESS_HOURS_START, settings.BUSINESS_HOURS_END + 1)
    ranked = sorted(hours, key=lambda h: (hour_counts.get(h, 0), h))
    return [
        HourCount(hour=hour_label(h), count=hour_counts.get(h, 0))
        for h in ranked[: settings.QUIET_HOURS_LIMIT]
    ]


# ---------- ponto de entrada ----------


def aggregate(
    appointments: Iterable[Appointment],
    services: Iterable[Service],
    staff: Iterable[Staff],
    current_range: DateRange,
    previous_range: DateRange,
    availability: AvailabilityLookup | None = None,
    *,
    today: date | None = None,
) -> AnalyticsSnapshot:
    """
    Calcula o snapshot de desempenho da janela atual e o crescimento em
    relação à janela anterior.

    - Faturamento/reservas/ocupação consideram só CONFIRMED e COMPLETED.
    - Referências ausentes (serviço/profissional) valem 0 ou são omitidas.
    - Datas inválidas tiram o agendamento das métricas por janela (log).
    - `availability(staff_id, weekday)` fornece a jornada; sem lookup, a
      ocupação é 0.
    """
    ensure_range(current_range, "current_range")
    ensure_range(previous_range, "previous_range")
    catalog = index_services(services)
    staff_index = index_staff(staff)
    today = today or today_local()

    log = get_logger(
        "aggregate",
        range=f"{current_range.start}..{current_range.end}",
        previous_range=f"{previous_range.start}..{previous_range.end}",
    )

    current = _Window(range=current_range)
    previous = _Window(range=previous_range)
    historic_clients: set[str] = set()
    forecast_end = today + timedelta(days=settings.FORECAST_DAYS)
    forecast = Forecast(days=settings.FORECAST_DAYS, revenue=0.0, count=0)
    malformed = 0

    # passada única: bucketiza por janela, histórico e previsão
    for ap in appointments:
        day = parse_day(ap.date)
        if day is None:
            malformed += 1
            log.warning("metrics.malformed_date", appointment_id=ap.id, date=ap.date)
            continue
        if current_range.contains(day):
            current.add(ap, day, catalog)
        if previous_range.contains(day):
            previous.add(ap, day, catalog)
        if (
            day < current_range.start
            and ap.status not in MISSED_STATUSES
            and not is_internal(ap)
        ):
            historic_clients.add(identity_key(ap))
        if ap.status == AppointmentStatus.CONFIRMED and today < day <= forecast_end:
            forecast.revenue += price_of(catalog, ap.service_id)
            forecast.count += 1

    revenue_now = current.revenue(catalog)
    revenue_before = previous.revenue(catalog)
    bookings_now = len(current.countable)
    occupancy_now, available = current.occupancy(staff_index, catalog, availability)
    occupancy_before, _ = previous.occupancy(staff_index, catalog, availability)

    busiest, heatmap, hour_counts = _busiest_and_heatmap(current.countable)
    top_clients = _top_clients(current.countable, catalog)
    returning = sum(1 for c in top_clients if c.id in historic_clients)

    snapshot = AnalyticsSnapshot(
        range=current_range,
        previous_range=previous_range,
        revenue=RevenueBlock(
            total=_metric(revenue_now, revenue_before),
            average=revenue_now / bookings_now if bookings_now else 0.0,
            lost=current.lost,
        ),
        bookings=_metric(bookings_now, len(previous.countable)),
        utilization=_metric(occupancy_now, occupancy_before),
        busiest=busiest,
        heatmap=heatmap,
        top_services=_top_services(current.countable, catalog, revenue_now),
        top_staff=_top_staff(current, staff_index, catalog, available),
        top_clients=top_clients,
        clients=ClientBase(
            total_active=len(top_clients),
            return_rate=pct(sum(1 for c in top_clients if c.visits >= 2), len(top_clients)),
            new_clients=len(top_clients) - returning,
            returning_clients=returning,
        ),
        cancellation_rate=pct(current.cancelled, current.total),
        no_show_rate=pct(current.no_shows, current.total),
        series=_series(current, catalog),
        booking_health=_booking_health(current, today),
        quiet_hours=_quiet_hours(hour_counts),
        forecast=forecast,
    )

    log.info(
        "metrics.aggregate",
        countable=bookings_now,
        previous_countable=len(previous.countable),
        malformed_dates=malformed,
        revenue=revenue_now,
    )
    return snapshot
