"""Project-level settings models.

Coefficients drive the financial cascade; schedule settings drive the
phase plan. Both coerce malformed numeric input to safe defaults.
"""

from datetime import date, datetime
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator

from config.defaults import (
    DEFAULT_CONTRACTOR_REQUISITES,
    DEFAULT_CUSTOMER_REQUISITES,
    DEFAULT_PROJECT_NUMBER,
    FALLBACK_WORK_DURATION,
    MAX_WORK_DURATION,
)
from config.settings import settings
from utils.coercion import coerce_float, coerce_positive_int

logger = structlog.get_logger(__name__)


# =============================================================================
# COEFFICIENTS
# =============================================================================


class ProjectCoefficients(BaseModel):
    """Percentage coefficients (unbounded, may be zero).

    - coef_pnr: commissioning surcharge on the labor subtotal
    - coef_unexpected: contingency on materials + labor + commissioning
    - coef_vat: VAT applied last, after contingency
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    coef_pnr: float = Field(default_factory=lambda: settings.default_coef_pnr, alias="coefPnr")
    coef_unexpected: float = Field(
        default_factory=lambda: settings.default_coef_unexpected, alias="coefUnexpected"
    )
    coef_vat: float = Field(default_factory=lambda: settings.default_coef_vat, alias="coefVat")

    @field_validator("coef_pnr", "coef_unexpected", "coef_vat", mode="before")
    @classmethod
    def coerce_percent(cls, v: Any) -> float:
        return coerce_float(v, default=0.0)


# =============================================================================
# SCHEDULE SETTINGS
# =============================================================================


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            pass
    logger.warning("schedule_start_date_invalid", value=value)
    return date.today()


class ScheduleSettings(BaseModel):
    """Start date and total duration in whole calendar days."""

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    start_date: date = Field(default_factory=date.today, alias="workStartDate")
    duration_days: int = Field(
        default_factory=lambda: settings.default_work_duration,
        alias="workDuration",
        ge=1,
    )

    @field_validator("start_date", mode="before")
    @classmethod
    def coerce_start_date(cls, v: Any) -> date:
        return _parse_date(v)

    @field_validator("duration_days", mode="before")
    @classmethod
    def coerce_duration(cls, v: Any) -> int:
        """Unparseable, non-positive or oversized durations fall back to 30 days."""
        return coerce_positive_int(v, default=FALLBACK_WORK_DURATION, maximum=MAX_WORK_DURATION)


# =============================================================================
# PROJECT SETTINGS
# =============================================================================


class ProjectSettings(BaseModel):
    """Proposal header data plus coefficients and schedule settings."""

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    customer_requisites: str = Field(default=DEFAULT_CUSTOMER_REQUISITES, alias="customerRequisites")
    contractor_requisites: str = Field(default=DEFAULT_CONTRACTOR_REQUISITES, alias="contractorRequisites")
    project_number: str = Field(default=DEFAULT_PROJECT_NUMBER, alias="projectNumber")
    project_date: date = Field(default_factory=date.today, alias="projectDate")
    coefficients: ProjectCoefficients = Field(default_factory=ProjectCoefficients)
    schedule: ScheduleSettings = Field(default_factory=ScheduleSettings)

    @field_validator("project_date", mode="before")
    @classmethod
    def coerce_project_date(cls, v: Any) -> date:
        return _parse_date(v)


__all__ = ["ProjectCoefficients", "ScheduleSettings", "ProjectSettings"]
