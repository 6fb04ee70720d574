"""Estimator agents.

This package contains:
- Base class for capability-backed agents
- Extraction agent (specification -> priced line items)
- Validation agent (line items -> technical findings)
- Session orchestrator (state ownership, busy gate, wholesale replacement)
"""

from agents.base_agent import BaseAgent
from agents.extraction_agent import ExtractionAgent
from agents.validation_agent import ValidationAgent
from agents.orchestrator import EstimateSession

__all__ = ["BaseAgent", "ExtractionAgent", "ValidationAgent", "EstimateSession"]
