"""
Unit Tests for the Schedule Synthesis Engine.

Tests build_schedule() and allocate_days():
- Reference 45-day plan and its calendar dates
- Phases are contiguous and in fixed order
- Day counts sum to the requested duration under the rescale policy
- Legacy clamp policy reproduces the overrun for short projects
"""

from datetime import date, timedelta

import pytest

from models.project import ScheduleSettings
from models.schedule import PhaseName, ResidualPolicy
from services.schedule_engine import allocate_days, build_schedule


PHASE_ORDER = [
    PhaseName.DESIGN,
    PhaseName.PROCUREMENT,
    PhaseName.INSTALLATION,
    PhaseName.COMMISSIONING,
    PhaseName.HANDOVER,
]


# =============================================================================
# Test: reference plan
# =============================================================================


def test_reference_45_day_plan(sample_start_date):
    """45 days -> 4 / 13 / 18 / 4 / 6."""
    schedule = build_schedule(sample_start_date, 45)

    assert [p.days for p in schedule.phases] == [4, 13, 18, 4, 6]
    assert schedule.total_days == 45
    assert schedule.end_date == date(2024, 2, 15)


def test_reference_plan_dates(sample_start_date):
    schedule = build_schedule(sample_start_date, 45)

    starts = [p.start_date for p in schedule.phases]
    assert starts == [
        date(2024, 1, 1),
        date(2024, 1, 5),
        date(2024, 1, 18),
        date(2024, 2, 5),
        date(2024, 2, 9),
    ]


def test_phase_order_and_titles(sample_start_date):
    schedule = build_schedule(sample_start_date, 45)

    assert [p.phase for p in schedule.phases] == PHASE_ORDER
    assert [p.title for p in schedule.phases] == [
        "Design", "Procurement", "Installation", "Commissioning", "Handover"
    ]


def test_phases_are_contiguous(sample_start_date):
    schedule = build_schedule(sample_start_date, 90)

    assert schedule.phases[0].start_date == sample_start_date
    for previous, current in zip(schedule.phases, schedule.phases[1:]):
        assert current.start_date == previous.end_date
    for phase in schedule.phases:
        assert phase.end_date == phase.start_date + timedelta(days=phase.days)


def test_calendar_days_cross_leap_day():
    schedule = build_schedule(date(2024, 2, 20), 20)

    assert schedule.end_date == date(2024, 3, 11)


# =============================================================================
# Test: residual policies
# =============================================================================


@pytest.mark.parametrize("total", [1, 2, 5, 9, 10, 11, 12, 13, 14, 20, 45, 100, 365])
def test_rescale_sums_to_requested(sample_start_date, total):
    """Sum of phases equals the requested duration for any positive total."""
    schedule = build_schedule(sample_start_date, total, ResidualPolicy.RESCALE)

    assert len(schedule.phases) == 5
    assert schedule.total_days == total
    assert schedule.end_date == sample_start_date + timedelta(days=total)
    assert schedule.phases[-1].days >= 1


def test_rescale_ten_days():
    """Minimums 2+3+5+2 overrun 10 days and get shrunk proportionally."""
    allocation = allocate_days(10, ResidualPolicy.RESCALE)

    assert list(allocation.values()) == [2, 2, 4, 1, 1]


def test_rescale_one_day():
    allocation = allocate_days(1, ResidualPolicy.RESCALE)

    assert list(allocation.values()) == [0, 0, 0, 0, 1]


def test_clamp_reproduces_overrun(sample_start_date):
    """Legacy behaviour: 10 requested days become a 13-day plan."""
    schedule = build_schedule(sample_start_date, 10, ResidualPolicy.CLAMP)

    assert [p.days for p in schedule.phases] == [2, 3, 5, 2, 1]
    assert schedule.total_days == 13
    assert schedule.requested_days == 10
    assert schedule.end_date == sample_start_date + timedelta(days=13)


@pytest.mark.parametrize("total", [13, 20, 45, 60, 120])
def test_policies_agree_when_minimums_fit(total):
    assert allocate_days(total, ResidualPolicy.RESCALE) == allocate_days(total, ResidualPolicy.CLAMP)


def test_minimums_apply_below_threshold():
    allocation = allocate_days(15)

    assert allocation[PhaseName.DESIGN] == 2
    assert allocation[PhaseName.PROCUREMENT] == 4
    assert allocation[PhaseName.INSTALLATION] == 6
    assert allocation[PhaseName.COMMISSIONING] == 2
    assert allocation[PhaseName.HANDOVER] == 1


def test_handover_is_residual():
    """Handover takes the rounding remainder, not a share."""
    allocation = allocate_days(49)

    assert allocation[PhaseName.HANDOVER] == 49 - (4 + 14 + 19 + 4)


def test_invalid_total_rejected():
    with pytest.raises(ValueError):
        allocate_days(0)


def test_schedule_to_dict(sample_start_date):
    data = build_schedule(sample_start_date, 45).to_dict()

    assert data["total_days"] == 45
    assert data["end_date"] == "2024-02-15"
    assert data["policy"] == "rescale"
    assert data["phases"][0]["start_date"] == "2024-01-01"


# =============================================================================
# Test: oversized durations
# =============================================================================


@pytest.mark.parametrize("duration", ["1e7", "1e20", 10**12])
def test_oversized_duration_falls_back(duration):
    """Durations past the calendar range never reach the engine."""
    schedule_settings = ScheduleSettings(start_date="2024-01-01", duration_days=duration)

    assert schedule_settings.duration_days == 30

    schedule = build_schedule(schedule_settings.start_date, schedule_settings.duration_days)

    assert schedule.total_days == 30
    assert schedule.end_date == date(2024, 1, 31)


def test_longest_accepted_duration_builds():
    schedule = build_schedule(date(2024, 1, 1), ScheduleSettings(duration_days=36500).duration_days)

    assert schedule.total_days == 36500
