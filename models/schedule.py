"""Schedule Pydantic models.

This module defines the five fixed work phases of an installation project
and the synthesized phase plan.
"""

from datetime import date
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class PhaseName(str, Enum):
    """Installation project phases, in execution order."""

    DESIGN = "design"
    PROCUREMENT = "procurement"
    INSTALLATION = "installation"
    COMMISSIONING = "commissioning"
    HANDOVER = "handover"


class ResidualPolicy(str, Enum):
    """How to reconcile phase minimums that overrun the requested duration."""

    RESCALE = "rescale"  # Shrink the four leading phases so the sum matches exactly
    CLAMP = "clamp"      # Handover = max(1, remainder); total may exceed the request


PHASE_TITLES: Dict[PhaseName, str] = {
    PhaseName.DESIGN: "Design",
    PhaseName.PROCUREMENT: "Procurement",
    PhaseName.INSTALLATION: "Installation",
    PhaseName.COMMISSIONING: "Commissioning",
    PhaseName.HANDOVER: "Handover",
}

PHASE_DESCRIPTIONS: Dict[PhaseName, str] = {
    PhaseName.DESIGN: "Survey and design analysis",
    PhaseName.PROCUREMENT: "Equipment supply and kitting",
    PhaseName.INSTALLATION: "Installation works",
    PhaseName.COMMISSIONING: "Start-up and adjustment",
    PhaseName.HANDOVER: "As-built documentation and acceptance",
}


# =============================================================================
# PHASE MODEL
# =============================================================================


class SchedulePhase(BaseModel):
    """One contiguous phase; end_date = start_date + days."""

    phase: PhaseName
    title: str
    description: str = ""
    days: int = Field(..., ge=0)
    start_date: date
    end_date: date


class ProjectSchedule(BaseModel):
    """Five sequential, non-overlapping phases."""

    start_date: date
    requested_days: int = Field(..., ge=1)
    policy: ResidualPolicy
    phases: List[SchedulePhase]

    @property
    def total_days(self) -> int:
        return sum(p.days for p in self.phases)

    @property
    def end_date(self) -> date:
        return self.phases[-1].end_date

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump(mode="json")
        data["total_days"] = self.total_days
        data["end_date"] = self.end_date.isoformat()
        return data


__all__ = [
    "PHASE_DESCRIPTIONS",
    "PHASE_TITLES",
    "PhaseName",
    "ProjectSchedule",
    "ResidualPolicy",
    "SchedulePhase",
]
