"""Base agent for the estimator.

Shared plumbing for the agents that call the reasoning capability:
invocation, failure mapping, empty-response detection and the response
parsing guard.
"""

from abc import ABC
from typing import Any, List, Optional
import time
import structlog

from config.errors import EmptyResponseError, EstimatorError, ExternalCapabilityError
from models.capability import CapabilityRequest
from services.llm_service import LLMService, ReasoningCapability
from utils.response_parser import extract_json_array

logger = structlog.get_logger()


class BaseAgent(ABC):
    """Base class for capability-backed agents.

    Provides:
    - Lazy default capability (LLMService) when none is injected
    - Uniform error taxonomy (empty / malformed / external failure)
    - Duration tracking
    """

    def __init__(
        self,
        name: str,
        capability: Optional[ReasoningCapability] = None
    ):
        """Initialize BaseAgent.

        Args:
            name: Agent name (e.g., "extraction", "validation").
            capability: Reasoning capability; defaults to LLMService.
        """
        self.name = name
        self.capability = capability or LLMService()
        self._start_time: Optional[float] = None

    @property
    def duration_ms(self) -> int:
        """Get duration of the current run in milliseconds."""
        if self._start_time is None:
            return 0
        return int((time.time() - self._start_time) * 1000)

    async def _invoke(self, request: CapabilityRequest) -> str:
        """Invoke the capability, normalizing failures to ExternalCapabilityError."""
        self._start_time = time.time()
        try:
            text = await self.capability.invoke(request)
        except EstimatorError:
            raise
        except Exception as e:
            logger.error("capability_failed", agent=self.name, error=str(e))
            raise ExternalCapabilityError(
                f"{self.name} call failed: {e}",
                original_error=str(e)
            ) from e

        if text is None or not str(text).strip():
            logger.warning("capability_empty_response", agent=self.name)
            raise EmptyResponseError()

        logger.info(
            "capability_responded",
            agent=self.name,
            duration_ms=self.duration_ms,
            response_length=len(text)
        )
        return text

    async def request_array(self, request: CapabilityRequest) -> List[Any]:
        """Invoke the capability and parse the JSON array out of its reply."""
        text = await self._invoke(request)
        return extract_json_array(text)
