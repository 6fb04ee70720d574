"""Extraction Agent for the estimator.

Turns a free-form equipment specification (text and/or an attached PDF, scan
or image) plus a pricing corpus into priced line items.
"""

from typing import Any, List, Optional

import structlog

from agents.base_agent import BaseAgent
from config.defaults import DEFAULT_CURRENCY, DEFAULT_PRICING_BASE
from config.errors import EmptyInputError, MalformedResponseError
from models.capability import Attachment, CapabilityRequest
from models.line_item import ItemCategory, LineItem, new_item_id
from services.llm_service import ReasoningCapability

logger = structlog.get_logger()


EXTRACTION_SYSTEM_PROMPT = """You are a cost engineer for fire alarm and security systems.
Your job is to turn specification data into structured line items for a commercial proposal."""

PRICING_FILE_INSTRUCTION = "ALSO USE THE PRICES FROM THE ATTACHED PRICING DOCUMENT AS AN ADDITIONAL PRICE SOURCE."

SPEC_FILE_INSTRUCTION = (
    "THE ATTACHED SPECIFICATION DOCUMENT (PDF/IMAGE) IS THE PRIMARY DATA SOURCE. "
    "EXTRACT EVERY ROW FROM ITS TABLES."
)

CATEGORIES = ", ".join(f"'{c.value}'" for c in ItemCategory)

EXTRACTION_INSTRUCTIONS = f"""INSTRUCTIONS:
1. Find every equipment and material position.
2. Determine the model designator (model).
3. Determine the quantity (qty) and its unit (unit).
4. Estimate the market unit price of the equipment (equipPrice) in {DEFAULT_CURRENCY} at current-year prices.
5. Match an installation work (workName) from the PRICING BASE.
6. State the unit price of that work (workPrice).
7. Category (category): one of {CATEGORIES}.

Return ONLY a JSON array of objects with the fields:
name, model, qty, unit, equipPrice, workName, workPrice, category."""


def build_extraction_prompt(
    spec_text: str,
    pricing_text: str,
    has_spec_file: bool,
    has_pricing_file: bool
) -> str:
    """Assemble the extraction prompt.

    Specification and pricing text are embedded verbatim.
    """
    spec_context = f"INPUT DATA (SPECIFICATION TEXT): {spec_text}"
    if has_spec_file:
        spec_context += f"\n{SPEC_FILE_INSTRUCTION}"

    pricing_context = f"PRICING BASE (TEXT): {pricing_text}"
    if has_pricing_file:
        pricing_context += f"\n{PRICING_FILE_INSTRUCTION}"

    return f"{spec_context}\n\n{pricing_context}\n\n{EXTRACTION_INSTRUCTIONS}"


class ExtractionAgent(BaseAgent):
    """Extraction Agent - builds line items from a specification.

    Every extracted record gets a freshly generated id; the caller decides
    whether to replace its current items (always wholesale, never merged).
    """

    def __init__(self, capability: Optional[ReasoningCapability] = None):
        """Initialize ExtractionAgent."""
        super().__init__(name="extraction", capability=capability)

    async def extract(
        self,
        spec_text: str = "",
        spec_file: Optional[Attachment] = None,
        pricing_text: Optional[str] = None,
        pricing_file: Optional[Attachment] = None
    ) -> List[LineItem]:
        """Extract priced line items.

        Args:
            spec_text: Free-text specification.
            spec_file: Attached specification document (primary source).
            pricing_text: Free-text price list (built-in corpus if None).
            pricing_file: Attached pricing document (additional source).

        Returns:
            Line items in response order.

        Raises:
            EmptyInputError: Neither spec_text nor spec_file given.
            EmptyResponseError: The capability returned nothing.
            MalformedResponseError: No parseable JSON array in the reply.
            ExternalCapabilityError: Transport/invocation failure.
        """
        spec_text = spec_text or ""
        if not spec_text.strip() and spec_file is None:
            raise EmptyInputError()

        if pricing_text is None:
            pricing_text = DEFAULT_PRICING_BASE

        # Pricing document first, specification second
        attachments = [f for f in (pricing_file, spec_file) if f is not None]

        request = CapabilityRequest(
            system_prompt=EXTRACTION_SYSTEM_PROMPT,
            prompt=build_extraction_prompt(
                spec_text,
                pricing_text,
                has_spec_file=spec_file is not None,
                has_pricing_file=pricing_file is not None
            ),
            attachments=attachments,
            response_format="json",
        )

        logger.info(
            "extraction_started",
            spec_length=len(spec_text),
            has_spec_file=spec_file is not None,
            has_pricing_file=pricing_file is not None
        )

        records = await self.request_array(request)
        items = [self._to_line_item(record, index) for index, record in enumerate(records)]

        logger.info(
            "extraction_completed",
            item_count=len(items),
            duration_ms=self.duration_ms
        )
        return items

    @staticmethod
    def _to_line_item(record: Any, index: int) -> LineItem:
        if not isinstance(record, dict):
            raise MalformedResponseError(
                f"Extracted record #{index} is not an object",
                details={"record_type": type(record).__name__}
            )
        fields = {k: v for k, v in record.items() if k != "id"}
        return LineItem.model_validate({**fields, "id": new_item_id()})


__all__ = ["ExtractionAgent", "build_extraction_prompt"]
