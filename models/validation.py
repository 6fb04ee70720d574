"""Validation finding models."""

from enum import Enum
from typing import Any, Optional

import structlog
from pydantic import BaseModel, Field, field_validator

logger = structlog.get_logger(__name__)


class FindingType(str, Enum):
    """Severity of a technical review finding."""

    ERROR = "error"
    WARNING = "warning"
    SUCCESS = "success"


class ValidationFinding(BaseModel):
    """One finding of a technical consistency review.

    Findings are ephemeral: each validation run replaces the previous set.
    """

    type: FindingType = Field(default=FindingType.WARNING, description="error | warning | success")
    message: str = Field(default="", description="Human-readable finding")
    suggestion: Optional[str] = Field(default=None, description="Suggested fix")

    @field_validator("type", mode="before")
    @classmethod
    def coerce_type(cls, v: Any) -> FindingType:
        """Unknown severities are reported as warnings."""
        if isinstance(v, FindingType):
            return v
        if isinstance(v, str):
            try:
                return FindingType(v.strip().lower())
            except ValueError:
                pass
        logger.warning("validation_unknown_type", type=v)
        return FindingType.WARNING

    @field_validator("message", mode="before")
    @classmethod
    def coerce_message(cls, v: Any) -> str:
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)

    @field_validator("suggestion", mode="before")
    @classmethod
    def coerce_suggestion(cls, v: Any) -> Optional[str]:
        if v is None or v == "":
            return None
        return v if isinstance(v, str) else str(v)


__all__ = ["FindingType", "ValidationFinding"]
