"""Line item Pydantic models for the estimator.

A line item is one priced row of equipment, material or cable together
with the installation work linked to it.
"""

from enum import Enum
from typing import Any, Dict
from uuid import uuid4

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator

from utils.coercion import coerce_float

logger = structlog.get_logger(__name__)


# =============================================================================
# ENUMS
# =============================================================================


class ItemCategory(str, Enum):
    """Line item category."""

    EQUIPMENT = "equipment"
    MATERIAL = "material"
    CABLE = "cable"


def new_item_id() -> str:
    """Generate a fresh opaque line item id."""
    return uuid4().hex


# =============================================================================
# LINE ITEM MODEL
# =============================================================================


class LineItem(BaseModel):
    """Priced unit of equipment/material plus its installation work.

    Serialized with camelCase aliases (equipPrice, workName, workPrice) to match
    the payloads exchanged with the reasoning capability; snake_case names are
    accepted on input as well.
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    id: str = Field(default_factory=new_item_id, description="Opaque unique id")
    name: str = Field(default="", description="Display name")
    model: str = Field(default="", description="Model designator (may be empty)")
    qty: float = Field(default=0.0, description="Quantity, fractional allowed")
    unit: str = Field(default="pcs", description="Unit label, e.g. pcs, m")
    equip_price: float = Field(default=0.0, alias="equipPrice", description="Equipment unit price")
    work_name: str = Field(default="", alias="workName", description="Linked installation work")
    work_price: float = Field(default=0.0, alias="workPrice", description="Work unit price")
    category: ItemCategory = Field(default=ItemCategory.EQUIPMENT, description="Item category")

    @field_validator("name", "model", "unit", "work_name", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        """Render missing or non-string text fields as strings."""
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)

    @field_validator("qty", "equip_price", "work_price", mode="before")
    @classmethod
    def coerce_number(cls, v: Any) -> float:
        """Unparseable numbers become 0."""
        return coerce_float(v, default=0.0)

    @field_validator("category", mode="before")
    @classmethod
    def coerce_category(cls, v: Any) -> ItemCategory:
        """Unknown categories fall back to equipment."""
        if isinstance(v, ItemCategory):
            return v
        if isinstance(v, str):
            try:
                return ItemCategory(v.strip().lower())
            except ValueError:
                pass
        logger.warning("line_item_unknown_category", category=v)
        return ItemCategory.EQUIPMENT

    @property
    def display_model(self) -> str:
        """Model designator, falling back to the name."""
        return self.model or self.name

    @property
    def equipment_amount(self) -> float:
        """qty × equipment unit price."""
        return self.qty * self.equip_price

    @property
    def labor_amount(self) -> float:
        """qty × work unit price."""
        return self.qty * self.work_price

    @property
    def amount(self) -> float:
        return self.qty * (self.equip_price + self.work_price)

    def to_payload(self) -> Dict[str, Any]:
        """Lossless JSON-ready dict using the wire aliases."""
        return self.model_dump(mode="json", by_alias=True)


__all__ = ["ItemCategory", "LineItem", "new_item_id"]
