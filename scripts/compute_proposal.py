"""
Compute the financial breakdown and schedule of a proposal from a JSON file.

The input file holds the line items plus optional coefficients and schedule
settings, in the same shape the session snapshot uses:

  {
    "items": [{"name": "...", "qty": 2, "equipPrice": 1000, "workPrice": 200, ...}],
    "coefficients": {"coefPnr": 15, "coefUnexpected": 2, "coefVat": 20},
    "schedule": {"workStartDate": "2024-01-01", "workDuration": 45}
  }

Usage:
  python scripts/compute_proposal.py --input proposal.json --out result.json --policy clamp
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

# Allow running from a checkout without installing the package
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from models.line_item import LineItem  # noqa: E402
from models.project import ProjectCoefficients, ScheduleSettings  # noqa: E402
from models.schedule import ResidualPolicy  # noqa: E402
from services.financial_engine import compute_financials, format_currency  # noqa: E402
from services.schedule_engine import build_schedule  # noqa: E402
from utils.logging_config import configure_logging  # noqa: E402


def compute(data: Dict[str, Any], policy: ResidualPolicy) -> Dict[str, Any]:
    """Compute financials and schedule for a decoded input document."""
    raw_items = data.get("items", [])
    if not isinstance(raw_items, list):
        raise ValueError("\"items\" must be a list")
    items = [LineItem.model_validate(raw) for raw in raw_items]
    coefficients = ProjectCoefficients.model_validate(data.get("coefficients", {}))
    schedule_settings = ScheduleSettings.model_validate(data.get("schedule", {}))

    financials = compute_financials(items, coefficients)
    schedule = build_schedule(
        schedule_settings.start_date,
        schedule_settings.duration_days,
        policy
    )
    return {
        "items": [item.to_payload() for item in items],
        "coefficients": coefficients.model_dump(by_alias=True),
        "financials": financials.to_dict(),
        "schedule": schedule.to_dict(),
    }


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Compute proposal totals and schedule from JSON")
    parser.add_argument("--input", required=True, help="Input JSON file with items/coefficients/schedule")
    parser.add_argument("--out", required=False, help="Output JSON file (prints a summary to stdout if omitted)")
    parser.add_argument(
        "--policy",
        choices=[p.value for p in ResidualPolicy],
        default=ResidualPolicy.RESCALE.value,
        help="How to reconcile phase minimums that exceed the requested duration",
    )
    parser.add_argument("--log-level", default=None, help="Log level (default from LOG_LEVEL)")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    try:
        with open(args.input, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Cannot read {args.input}: {e}", file=sys.stderr)
        return 2

    if not isinstance(data, dict):
        print(f"Invalid input {args.input}: top level must be a JSON object", file=sys.stderr)
        return 2

    try:
        result = compute(data, ResidualPolicy(args.policy))
    except (ValueError, ValidationError) as e:
        print(f"Invalid input {args.input}: {e}", file=sys.stderr)
        return 2

    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            json.dump(result, f, indent=2, ensure_ascii=False)
        print(f"Wrote {args.out}")
        return 0

    breakdown = result["financials"]["breakdown"]
    scenarios = result["financials"]["scenarios"]
    print(f"Equipment     : {format_currency(breakdown['equipment_total'])}")
    print(f"Labor         : {format_currency(breakdown['labor_total'])}")
    print(f"Commissioning : {format_currency(breakdown['commissioning'])}")
    print(f"Contingency   : {format_currency(breakdown['contingency'])}")
    print(f"VAT           : {format_currency(breakdown['vat'])}")
    print(f"Base total    : {format_currency(scenarios['base']['total'])}")
    print(f"Premium total : {format_currency(scenarios['premium']['total'])}")
    for phase in result["schedule"]["phases"]:
        print(f"{phase['title']:<14}: {phase['start_date']} -> {phase['end_date']} ({phase['days']} d)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
