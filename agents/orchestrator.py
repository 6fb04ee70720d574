"""Estimate session orchestrator.

Owns the mutable state of one proposal (settings, pricing corpus, line items,
validation findings) and coordinates the extraction and validation agents
around it. Engines are recomputed from this state on every call.

At most one agent call may be in flight per session; a second call while one
is outstanding is rejected with SessionBusyError rather than queued.
"""

from contextlib import contextmanager
from datetime import date
from typing import Any, Dict, Iterator, List, Optional, Type

import structlog
from pydantic import BaseModel

from agents.extraction_agent import ExtractionAgent
from agents.validation_agent import ValidationAgent
from config.defaults import DEFAULT_PRICING_BASE
from config.errors import EstimatorError, ItemNotFoundError, SessionBusyError
from models.capability import Attachment
from models.cost_breakdown import FinancialSummary
from models.line_item import LineItem
from models.project import ProjectCoefficients, ProjectSettings, ScheduleSettings
from models.schedule import ProjectSchedule, ResidualPolicy
from models.validation import ValidationFinding
from services.financial_engine import compute_financials
from services.llm_service import ReasoningCapability
from services.schedule_engine import build_schedule

logger = structlog.get_logger()


def _field_names(model_cls: Type[BaseModel], values: Dict[str, Any]) -> Dict[str, Any]:
    """Map wire aliases to field names; unknown keys raise ValueError."""
    aliases = {
        (info.alias or name): name for name, info in model_cls.model_fields.items()
    }
    normalized: Dict[str, Any] = {}
    for key, value in values.items():
        name = aliases.get(key, key)
        if name not in model_cls.model_fields:
            raise ValueError(f"Unknown {model_cls.__name__} field: {key}")
        normalized[name] = value
    return normalized


class EstimateSession:
    """Workflow context for one commercial proposal.

    Flow:
    1. run_extraction() replaces the line items wholesale on success
    2. The user edits items (update_item / remove_item)
    3. financials() recomputes totals from the current items and coefficients
    4. run_validation() replaces the findings wholesale on success
    5. schedule() is derived from the schedule settings only
    """

    def __init__(
        self,
        capability: Optional[ReasoningCapability] = None,
        settings: Optional[ProjectSettings] = None,
        pricing_text: str = DEFAULT_PRICING_BASE,
        schedule_policy: ResidualPolicy = ResidualPolicy.RESCALE,
        extraction_agent: Optional[ExtractionAgent] = None,
        validation_agent: Optional[ValidationAgent] = None
    ):
        """Initialize EstimateSession.

        Args:
            capability: Reasoning capability shared by both agents.
            settings: Project settings (defaults if None).
            pricing_text: Pricing corpus used for extraction.
            schedule_policy: How schedule overruns are reconciled.
            extraction_agent: Optional pre-built extraction agent.
            validation_agent: Optional pre-built validation agent.
        """
        self.settings = settings or ProjectSettings()
        self.pricing_text = pricing_text
        self.schedule_policy = schedule_policy
        self.extraction = extraction_agent or ExtractionAgent(capability)
        self.validation = validation_agent or ValidationAgent(capability)

        self._items: List[LineItem] = []
        self._findings: List[ValidationFinding] = []
        self._running: Optional[str] = None

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------

    @property
    def items(self) -> List[LineItem]:
        """Current line items, in display order."""
        return list(self._items)

    @property
    def findings(self) -> List[ValidationFinding]:
        """Findings of the last successful validation run."""
        return list(self._findings)

    @property
    def is_busy(self) -> bool:
        return self._running is not None

    @property
    def running_operation(self) -> Optional[str]:
        return self._running

    @contextmanager
    def _busy(self, operation: str) -> Iterator[None]:
        if self._running is not None:
            logger.warning(
                "session_busy_rejected",
                operation=operation,
                running=self._running
            )
            raise SessionBusyError(operation, self._running)
        self._running = operation
        try:
            yield
        finally:
            self._running = None

    # ------------------------------------------------------------------
    # Agent calls
    # ------------------------------------------------------------------

    async def run_extraction(
        self,
        spec_text: str = "",
        spec_file: Optional[Attachment] = None,
        pricing_file: Optional[Attachment] = None
    ) -> List[LineItem]:
        """Extract line items and replace the current ones.

        On failure the current items are left untouched and the error
        propagates to the caller.
        """
        with self._busy("extraction"):
            try:
                items = await self.extraction.extract(
                    spec_text=spec_text,
                    spec_file=spec_file,
                    pricing_text=self.pricing_text,
                    pricing_file=pricing_file
                )
            except EstimatorError as e:
                logger.error("session_extraction_failed", error_code=e.code, error=e.message)
                raise

        self._items = list(items)
        logger.info("session_items_replaced", item_count=len(self._items))
        return self.items

    async def run_validation(self) -> List[ValidationFinding]:
        """Review the current items and replace the findings.

        On failure both the items and the previous findings are kept.
        """
        with self._busy("validation"):
            try:
                findings = await self.validation.validate(self.items)
            except EstimatorError as e:
                logger.error("session_validation_failed", error_code=e.code, error=e.message)
                raise

        self._findings = list(findings)
        return self.findings

    # ------------------------------------------------------------------
    # Item edits
    # ------------------------------------------------------------------

    def _index_of(self, item_id: str) -> int:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        raise ItemNotFoundError(item_id)

    def get_item(self, item_id: str) -> LineItem:
        return self._items[self._index_of(item_id)]

    def update_item(self, item_id: str, **changes: Any) -> LineItem:
        """Edit fields of one item in place.

        Field names may be snake_case or wire aliases (equipPrice, ...).
        Numeric values that do not parse become 0. The id is immutable.

        Raises:
            ItemNotFoundError: Unknown item id.
            ValueError: Unknown field name.
        """
        item = self.get_item(item_id)
        normalized = _field_names(LineItem, changes)
        if "id" in normalized:
            raise ValueError("Cannot edit field: id")
        for name, value in normalized.items():
            setattr(item, name, value)
        return item

    def add_item(self, item: Optional[LineItem] = None, **fields: Any) -> LineItem:
        """Append a manually entered item (always with a fresh id)."""
        data = item.model_dump(exclude={"id"}) if item is not None else {}
        data.update(_field_names(LineItem, fields))
        data.pop("id", None)
        new_item = LineItem(**data)
        self._items.append(new_item)
        return new_item

    def remove_item(self, item_id: str) -> LineItem:
        """Remove one item from the sequence."""
        return self._items.pop(self._index_of(item_id))

    def replace_items(self, items: List[LineItem]) -> None:
        """Replace all items wholesale (e.g. when restoring a saved proposal)."""
        self._items = list(items)

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def set_coefficients(self, **values: Any) -> ProjectCoefficients:
        """Update coefficients by name or alias (coefPnr, coefUnexpected, coefVat)."""
        data = self.settings.coefficients.model_dump()
        data.update(_field_names(ProjectCoefficients, values))
        self.settings.coefficients = ProjectCoefficients(**data)
        return self.settings.coefficients

    def set_schedule(
        self,
        start_date: Optional[Any] = None,
        duration_days: Optional[Any] = None
    ) -> ScheduleSettings:
        """Update the schedule settings; malformed durations fall back to the default."""
        current = self.settings.schedule
        self.settings.schedule = ScheduleSettings(
            start_date=current.start_date if start_date is None else start_date,
            duration_days=current.duration_days if duration_days is None else duration_days,
        )
        return self.settings.schedule

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def financials(self) -> FinancialSummary:
        return compute_financials(self._items, self.settings.coefficients)

    def schedule(self) -> ProjectSchedule:
        schedule_settings = self.settings.schedule
        return build_schedule(
            schedule_settings.start_date,
            schedule_settings.duration_days,
            self.schedule_policy
        )

    def snapshot(self) -> Dict[str, Any]:
        """JSON-ready view of the whole proposal."""
        return {
            "generated_at": date.today().isoformat(),
            "settings": self.settings.model_dump(mode="json", by_alias=True),
            "items": [item.to_payload() for item in self._items],
            "findings": [f.model_dump(mode="json") for f in self._findings],
            "financials": self.financials().to_dict(),
            "schedule": self.schedule().to_dict(),
        }


__all__ = ["EstimateSession"]
