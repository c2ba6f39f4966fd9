from __future__ import annotations

from collections.abc import Iterable

from insights.core.logging import get_logger
from insights.schemas.availability import AvailabilityLookup, WorkingHours
from insights.utils.time import parse_minutes


def availability_from_rules(rules: Iterable[WorkingHours]) -> AvailabilityLookup:
    """
    Monta um lookup (staff_id, weekday) -> regra a partir de uma lista de
    regras semanais. Em caso de regra repetida para o mesmo dia, vale a última.
    """
    table: dict[tuple[str, int], WorkingHours] = {
        (r.staff_id, r.day_of_week): r for r in rules
    }

    def lookup(staff_id: str, day_of_week: int) -> WorkingHours | None:
        return table.get((staff_id, day_of_week))

    return lookup


def working_minutes(rule: WorkingHours | None) -> int:
    """Minutos disponíveis num dia; 0 sem regra, folga ou janela inválida."""
    if rule is None or not rule.is_working:
        return 0
    start = parse_minutes(rule.start_time)
    end = parse_minutes(rule.end_time)
    if start is None or end is None or end <= start:
        get_logger().warning(
            "availability.malformed_rule",
            staff_id=rule.staff_id,
            day_of_week=rule.day_of_week,
            start_time=rule.start_time,
            end_time=rule.end_time,
        )
        return 0
    return end - start


def available_minutes(
    staff_id: str,
    weekday_counts: list[int],
    lookup: AvailabilityLookup | None,
) -> int:
    """
    Soma a jornada do profissional em cada dia da janela, usando a contagem
    de ocorrências de cada weekday (seg → dom) na janela.
    """
    if lookup is None:
        return 0
    total = 0
    for weekday, occurrences in enumerate(weekday_counts):
        if occurrences:
            total += occurrences * working_minutes(lookup(staff_id, weekday))
    return total
