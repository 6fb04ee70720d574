"""Cost breakdown Pydantic models.

This module defines the financial cascade produced from line items and
project coefficients, and the two commercial scenarios built on top of it.
Values are kept unrounded; rounding is a presentation concern.
"""

from enum import Enum
from typing import Dict

from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class ScenarioTier(str, Enum):
    """Commercial scenario tier."""

    BASE = "base"
    PREMIUM = "premium"  # Extended warranty / support tier


# =============================================================================
# BREAKDOWN MODEL
# =============================================================================


class CostBreakdown(BaseModel):
    """Cascading cost breakdown shared by all scenarios."""

    equipment_total: float = Field(..., description="Σ qty × equipment unit price")
    labor_total: float = Field(..., description="Σ qty × work unit price")
    commissioning: float = Field(..., description="labor_total × coef_pnr %")
    subtotal: float = Field(..., description="equipment + labor + commissioning")
    contingency: float = Field(..., description="subtotal × coef_unexpected %")
    vat: float = Field(..., description="(subtotal + contingency) × coef_vat %")
    grand_total: float = Field(..., description="subtotal + contingency + vat")

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary for JSON serialization."""
        return self.model_dump()


# =============================================================================
# SCENARIOS
# =============================================================================


class Scenario(BaseModel):
    """A named commercial total."""

    tier: ScenarioTier
    uplift: float = Field(..., description="Multiplier applied to the grand total")
    total: float


class FinancialSummary(BaseModel):
    """Breakdown plus base and premium scenarios.

    Only the final total differs between scenarios.
    """

    breakdown: CostBreakdown
    base: Scenario
    premium: Scenario

    def to_dict(self) -> Dict[str, object]:
        return {
            "breakdown": self.breakdown.to_dict(),
            "scenarios": {
                self.base.tier.value: self.base.model_dump(mode="json"),
                self.premium.tier.value: self.premium.model_dump(mode="json"),
            },
        }


__all__ = ["CostBreakdown", "FinancialSummary", "Scenario", "ScenarioTier"]
