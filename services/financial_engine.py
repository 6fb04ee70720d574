"""Financial computation engine.

Pure functions turning line items and project coefficients into a cascading
cost breakdown and the base/premium commercial scenarios. Nothing is cached:
callers recompute on every edit of an item or a coefficient.
"""

from typing import Iterable

from models.cost_breakdown import CostBreakdown, FinancialSummary, Scenario, ScenarioTier
from models.line_item import LineItem
from models.project import ProjectCoefficients

# Extended warranty / support tier
PREMIUM_UPLIFT = 1.12


def compute_breakdown(
    items: Iterable[LineItem],
    coefficients: ProjectCoefficients
) -> CostBreakdown:
    """Compute the cost cascade.

    equipment and labor totals -> commissioning on labor -> subtotal ->
    contingency on subtotal -> VAT on subtotal + contingency -> grand total.
    No rounding is applied.
    """
    equipment_total = 0.0
    labor_total = 0.0
    for item in items:
        equipment_total += item.equip_price * item.qty
        labor_total += item.work_price * item.qty

    commissioning = labor_total * (coefficients.coef_pnr / 100)
    subtotal = equipment_total + labor_total + commissioning
    contingency = subtotal * (coefficients.coef_unexpected / 100)
    vat = (subtotal + contingency) * (coefficients.coef_vat / 100)
    grand_total = subtotal + contingency + vat

    return CostBreakdown(
        equipment_total=equipment_total,
        labor_total=labor_total,
        commissioning=commissioning,
        subtotal=subtotal,
        contingency=contingency,
        vat=vat,
        grand_total=grand_total,
    )


def compute_financials(
    items: Iterable[LineItem],
    coefficients: ProjectCoefficients
) -> FinancialSummary:
    """Compute the breakdown and both commercial scenarios.

    Args:
        items: Current line items.
        coefficients: Commissioning, contingency and VAT percentages.

    Returns:
        FinancialSummary whose premium total is the base total × 1.12.
    """
    breakdown = compute_breakdown(items, coefficients)
    return FinancialSummary(
        breakdown=breakdown,
        base=Scenario(tier=ScenarioTier.BASE, uplift=1.0, total=breakdown.grand_total),
        premium=Scenario(
            tier=ScenarioTier.PREMIUM,
            uplift=PREMIUM_UPLIFT,
            total=breakdown.grand_total * PREMIUM_UPLIFT,
        ),
    )


def format_currency(value: float, currency: str = "RUB") -> str:
    """Whole-unit display string with space grouping, e.g. '3 011 RUB'."""
    whole = int(round(value))
    grouped = f"{abs(whole):,}".replace(",", " ")
    sign = "-" if whole < 0 else ""
    return f"{sign}{grouped} {currency}"


__all__ = ["PREMIUM_UPLIFT", "compute_breakdown", "compute_financials", "format_currency"]
