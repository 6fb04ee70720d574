"""LLM service for the estimator.

Defines the reasoning capability interface consumed by the agents and its
LangChain/OpenAI implementation.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import structlog
from langchain_openai import ChatOpenAI
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from config.settings import settings
from config.errors import ErrorCode, ExternalCapabilityError
from models.capability import Attachment, CapabilityRequest

logger = structlog.get_logger()

JSON_ONLY_INSTRUCTION = (
    "IMPORTANT: You MUST respond with valid JSON only. "
    "No markdown, no explanation, just JSON."
)


class ReasoningCapability(ABC):
    """External multimodal reasoning capability.

    Implementations return the raw response text and raise
    ExternalCapabilityError on any transport or invocation failure.
    """

    @abstractmethod
    async def invoke(self, request: CapabilityRequest) -> str:
        """Run one request and return the raw text response."""


def _attachment_block(attachment: Attachment) -> Dict[str, Any]:
    """Inline content block for one attachment."""
    if attachment.is_image:
        return {
            "type": "image_url",
            "image_url": {"url": attachment.data_url()},
        }
    return {
        "type": "file",
        "file": {
            "filename": attachment.name,
            "file_data": attachment.data_url(),
        },
    }


def build_messages(request: CapabilityRequest) -> List[BaseMessage]:
    """Translate a CapabilityRequest into LangChain messages.

    Attachments precede the instruction text in the human message.
    """
    messages: List[BaseMessage] = []

    system_prompt = request.system_prompt
    if request.response_format == "json":
        system_prompt = (
            f"{system_prompt}\n\n{JSON_ONLY_INSTRUCTION}" if system_prompt else JSON_ONLY_INSTRUCTION
        )
    if system_prompt:
        messages.append(SystemMessage(content=system_prompt))

    if request.attachments:
        content: List[Any] = [_attachment_block(a) for a in request.attachments]
        content.append({"type": "text", "text": request.prompt})
        messages.append(HumanMessage(content=content))
    else:
        messages.append(HumanMessage(content=request.prompt))

    return messages


class LLMService(ReasoningCapability):
    """Reasoning capability backed by ChatOpenAI.

    Provides a wrapper around ChatOpenAI with token tracking
    and error handling.
    """

    def __init__(
        self,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        api_key: Optional[str] = None,
        max_tokens: Optional[int] = None
    ):
        """Initialize LLMService.

        Args:
            model: Model name (default from settings).
            temperature: Temperature (default from settings).
            api_key: OpenAI API key (default from settings).
            max_tokens: Max response tokens (default from settings).
        """
        self.model = model or settings.llm_model
        self.temperature = temperature if temperature is not None else settings.llm_temperature
        self.api_key = api_key or settings.openai_api_key
        self.max_tokens = max_tokens or settings.llm_max_tokens

        self._client: Optional[ChatOpenAI] = None
        self._total_tokens_used = 0

    @property
    def client(self) -> ChatOpenAI:
        """Get LangChain ChatOpenAI client (lazy initialization)."""
        if self._client is None:
            self._client = ChatOpenAI(
                model=self.model,
                temperature=self.temperature,
                api_key=self.api_key
            )
        return self._client

    @property
    def total_tokens_used(self) -> int:
        """Get total tokens used across all calls."""
        return self._total_tokens_used

    async def generate(
        self,
        messages: List[BaseMessage],
        max_tokens: Optional[int] = None
    ) -> Dict[str, Any]:
        """Generate a response from the LLM.

        Args:
            messages: List of LangChain messages.
            max_tokens: Optional max tokens for response.

        Returns:
            Dict with content and token usage.

        Raises:
            ExternalCapabilityError: If the LLM call fails.
        """
        try:
            kwargs = {}
            if max_tokens:
                kwargs["max_tokens"] = max_tokens

            response = await self.client.ainvoke(messages, **kwargs)
        except Exception as e:
            error_msg = str(e)
            logger.error("llm_failed", model=self.model, error=error_msg)

            # Detect specific error types
            if "rate_limit" in error_msg.lower():
                raise ExternalCapabilityError(
                    "OpenAI rate limit exceeded",
                    code=ErrorCode.LLM_RATE_LIMIT,
                    original_error=error_msg
                ) from e
            elif "context_length" in error_msg.lower() or "maximum context" in error_msg.lower():
                raise ExternalCapabilityError(
                    "Input too long for model context",
                    code=ErrorCode.LLM_CONTEXT_TOO_LONG,
                    original_error=error_msg
                ) from e
            raise ExternalCapabilityError(
                f"LLM generation failed: {error_msg}",
                original_error=error_msg
            ) from e

        # Track token usage if available
        tokens_used = 0
        metadata = getattr(response, "response_metadata", None)
        if isinstance(metadata, dict):
            usage = metadata.get("token_usage") or {}
            tokens_used = usage.get("total_tokens", 0)
            self._total_tokens_used += tokens_used

        content = response.content
        if isinstance(content, list):
            # Multimodal replies come back as content blocks
            content = "".join(
                block.get("text", "") if isinstance(block, dict) else str(block)
                for block in content
            )

        logger.info(
            "llm_generated",
            model=self.model,
            tokens_used=tokens_used,
            content_length=len(content or "")
        )

        return {
            "content": content,
            "tokens_used": tokens_used
        }

    async def invoke(self, request: CapabilityRequest) -> str:
        """Run a capability request and return the raw text.

        Args:
            request: Prompt, attachments and output format constraint.

        Returns:
            Raw response text (possibly empty).
        """
        logger.info(
            "llm_invoke",
            model=self.model,
            attachments=len(request.attachments),
            prompt_length=len(request.prompt),
            response_format=request.response_format
        )
        result = await self.generate(build_messages(request), self.max_tokens)
        return result["content"] or ""
