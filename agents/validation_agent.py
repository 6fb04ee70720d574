"""Validation Agent for the estimator.

Asks the reasoning capability for a technical review of the current line
items and returns structured findings.
"""

import json
from typing import Any, List, Optional, Sequence

import structlog

from agents.base_agent import BaseAgent
from config.errors import MalformedResponseError
from models.capability import CapabilityRequest
from models.line_item import LineItem
from models.validation import FindingType, ValidationFinding
from services.llm_service import ReasoningCapability

logger = structlog.get_logger()


VALIDATION_SYSTEM_PROMPT = """You are a strict technical supervisor for fire alarm and security installations.
Check the estimate for technical consistency: compatible equipment, power supply and
control panel capacity, missing cable or mounting materials, implausible quantities or prices."""


def build_validation_prompt(items: Sequence[LineItem]) -> str:
    """Embed the items losslessly (all fields, wire aliases) into the prompt."""
    payload = json.dumps([item.to_payload() for item in items], ensure_ascii=False)
    return f"""Review this estimate.
ESTIMATE DATA (JSON): {payload}

Return a JSON array: [{{ "type": "error"|"warning"|"success", "message": "...", "suggestion": "..." }}]"""


class ValidationAgent(BaseAgent):
    """Validation Agent - technical review of line items.

    An empty item list is passed through as-is; the reviewer is expected to
    report that there is nothing to validate.
    """

    def __init__(self, capability: Optional[ReasoningCapability] = None):
        """Initialize ValidationAgent."""
        super().__init__(name="validation", capability=capability)

    async def validate(self, items: Sequence[LineItem]) -> List[ValidationFinding]:
        """Run the technical review.

        Args:
            items: Current line items.

        Returns:
            Findings in response order.

        Raises:
            EmptyResponseError: The capability returned nothing.
            MalformedResponseError: No parseable JSON array in the reply.
            ExternalCapabilityError: Transport/invocation failure.
        """
        request = CapabilityRequest(
            system_prompt=VALIDATION_SYSTEM_PROMPT,
            prompt=build_validation_prompt(items),
            response_format="json",
        )

        logger.info("validation_started", item_count=len(items))

        records = await self.request_array(request)
        findings = [self._to_finding(record, index) for index, record in enumerate(records)]

        logger.info(
            "validation_completed",
            finding_count=len(findings),
            errors=sum(1 for f in findings if f.type is FindingType.ERROR),
            duration_ms=self.duration_ms
        )
        return findings

    @staticmethod
    def _to_finding(record: Any, index: int) -> ValidationFinding:
        if not isinstance(record, dict):
            raise MalformedResponseError(
                f"Validation finding #{index} is not an object",
                details={"record_type": type(record).__name__}
            )
        return ValidationFinding.model_validate(record)


__all__ = ["ValidationAgent", "build_validation_prompt"]
