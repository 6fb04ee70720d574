"""Schedule synthesis engine.

Partitions a total project duration into five sequential phases with
calendar dates. Independent of line items.

Allocation: Design 10 %, Procurement 30 %, Installation 40 %, Commissioning
10 %, each floored and then raised to its minimum (2, 3, 5, 2 days). Handover
takes the residual, at least one day.

Short projects (below 13 days) cannot fit all minimums. ResidualPolicy.RESCALE
shrinks the four leading phases proportionally (largest remainder) so the plan
always sums to the requested duration; ResidualPolicy.CLAMP keeps the legacy
behaviour where the plan overruns the request.
"""

import math
from datetime import date, timedelta
from typing import Dict, List, Sequence, Tuple

import structlog

from models.schedule import (
    PHASE_DESCRIPTIONS,
    PHASE_TITLES,
    PhaseName,
    ProjectSchedule,
    ResidualPolicy,
    SchedulePhase,
)

logger = structlog.get_logger()

# (phase, share of total duration, minimum days)
PHASE_ALLOCATION: Tuple[Tuple[PhaseName, float, int], ...] = (
    (PhaseName.DESIGN, 0.1, 2),
    (PhaseName.PROCUREMENT, 0.3, 3),
    (PhaseName.INSTALLATION, 0.4, 5),
    (PhaseName.COMMISSIONING, 0.1, 2),
)

HANDOVER_MIN_DAYS = 1


def _nominal_days(total_days: int) -> List[int]:
    """Floored share of each leading phase, raised to its minimum."""
    return [
        max(minimum, math.floor(total_days * share))
        for _, share, minimum in PHASE_ALLOCATION
    ]


def _rescale(days: Sequence[int], budget: int) -> List[int]:
    """Shrink `days` proportionally so they sum to `budget`.

    Largest-remainder apportionment; ties go to the earlier phase.
    """
    total = sum(days)
    if budget <= 0 or total == 0:
        return [0] * len(days)

    quotas = [d * budget / total for d in days]
    result = [math.floor(q) for q in quotas]
    leftover = budget - sum(result)
    order = sorted(range(len(days)), key=lambda i: (-(quotas[i] - result[i]), i))
    for i in order[:leftover]:
        result[i] += 1
    return result


def allocate_days(
    total_days: int,
    policy: ResidualPolicy = ResidualPolicy.RESCALE
) -> Dict[PhaseName, int]:
    """Compute the day count of each phase.

    Args:
        total_days: Requested duration, >= 1.
        policy: Overrun reconciliation policy.

    Returns:
        Ordered mapping phase -> days.
    """
    if total_days < 1:
        raise ValueError(f"total_days must be >= 1, got {total_days}")

    leading = _nominal_days(total_days)
    residual = total_days - sum(leading)

    if residual < HANDOVER_MIN_DAYS and policy is ResidualPolicy.RESCALE:
        leading = _rescale(leading, total_days - HANDOVER_MIN_DAYS)
        residual = total_days - sum(leading)
        logger.info(
            "schedule_rescaled",
            total_days=total_days,
            leading_days=leading
        )

    handover = max(HANDOVER_MIN_DAYS, residual)

    allocation = {
        phase: days for (phase, _, _), days in zip(PHASE_ALLOCATION, leading)
    }
    allocation[PhaseName.HANDOVER] = handover
    return allocation


def build_schedule(
    start_date: date,
    total_days: int,
    policy: ResidualPolicy = ResidualPolicy.RESCALE
) -> ProjectSchedule:
    """Synthesize the five-phase plan.

    Each phase starts where the previous one ends; the first starts at
    `start_date`. Plain calendar-day arithmetic, no business days.

    Args:
        start_date: First day of the project.
        total_days: Requested total duration in days (>= 1).
        policy: Overrun reconciliation policy.

    Returns:
        ProjectSchedule with exactly five phases.
    """
    allocation = allocate_days(total_days, policy)

    phases: List[SchedulePhase] = []
    cursor = start_date
    for phase, days in allocation.items():
        end = cursor + timedelta(days=days)
        phases.append(
            SchedulePhase(
                phase=phase,
                title=PHASE_TITLES[phase],
                description=PHASE_DESCRIPTIONS[phase],
                days=days,
                start_date=cursor,
                end_date=end,
            )
        )
        cursor = end

    schedule = ProjectSchedule(
        start_date=start_date,
        requested_days=total_days,
        policy=policy,
        phases=phases,
    )

    if schedule.total_days != total_days:
        logger.warning(
            "schedule_overrun",
            requested_days=total_days,
            planned_days=schedule.total_days,
            policy=policy.value
        )

    return schedule


__all__ = ["PHASE_ALLOCATION", "allocate_days", "build_schedule"]
