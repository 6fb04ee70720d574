"""Pytest configuration and shared fixtures for estimator tests."""

import os
import sys
import pytest
from datetime import date
from unittest.mock import AsyncMock, MagicMock, patch
from typing import Union


# ============================================================================
# Ensure local imports work (agents/, models/, services/, config/)
# ============================================================================
#
# The codebase uses absolute imports like `from models...` / `from agents...`.
# This guarantees the repository root is importable as the top-level module root.
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


from services.llm_service import ReasoningCapability  # noqa: E402


# ============================================================================
# Capability Stub
# ============================================================================


class StubCapability(ReasoningCapability):
    """Reasoning capability returning canned text and recording requests."""

    def __init__(self, response: Union[str, Exception, None] = ""):
        self.response = response
        self.requests = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    async def invoke(self, request):
        self.requests.append(request)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


@pytest.fixture
def stub_capability():
    """Capability stub with an empty-array response; tests set `.response`."""
    return StubCapability("[]")


@pytest.fixture
def make_capability():
    """Factory for capability stubs with a given response."""
    def _make(response: Union[str, Exception, None]) -> StubCapability:
        return StubCapability(response)
    return _make


# ============================================================================
# LLM Mocks
# ============================================================================


@pytest.fixture
def mock_chat_openai():
    """Mock ChatOpenAI client."""
    mock = AsyncMock()
    mock.ainvoke.return_value = MagicMock(
        content="Mock response content",
        response_metadata={"token_usage": {"total_tokens": 100}}
    )
    return mock


@pytest.fixture
def mock_llm_service(mock_chat_openai):
    """Mock LLMService."""
    from services.llm_service import LLMService

    with patch('services.llm_service.ChatOpenAI', return_value=mock_chat_openai):
        service = LLMService(api_key="test-api-key")
        service._client = mock_chat_openai
        return service


# ============================================================================
# Domain Data
# ============================================================================


@pytest.fixture
def sample_items():
    """Two detectors and some cable."""
    from models.line_item import LineItem

    return [
        LineItem(name="Smoke detector", model="IP 212-141", qty=2, unit="pcs",
                 equip_price=1000, work_name="Detector installation", work_price=200,
                 category="equipment"),
        LineItem(name="Cable", qty=100, unit="m", equip_price=40,
                 work_name="Cable laying", work_price=65, category="cable"),
    ]


@pytest.fixture
def reference_item():
    """Single item with the reference breakdown numbers."""
    from models.line_item import LineItem

    return LineItem(name="Panel", qty=2, equip_price=1000, work_price=200)


@pytest.fixture
def reference_coefficients():
    from models.project import ProjectCoefficients

    return ProjectCoefficients(coef_pnr=15, coef_unexpected=2, coef_vat=20)


@pytest.fixture
def sample_start_date():
    return date(2024, 1, 1)


# ============================================================================
# Settings
# ============================================================================


@pytest.fixture(autouse=True)
def mock_settings():
    """Mock settings seen by the LLM service for all tests."""
    with patch('services.llm_service.settings') as mock:
        mock.openai_api_key = "test-api-key"
        mock.llm_model = "gpt-4o"
        mock.llm_temperature = 0.1
        mock.llm_max_tokens = 8192
        mock.log_level = "INFO"
        yield mock
