"""Estimator configuration settings.

Loads configuration from environment variables with sensible defaults.
Secrets are resolved lazily through config.secrets.
"""

import os
from typing import Optional
from dataclasses import dataclass, field
from dotenv import load_dotenv

# Load .env file for non-secret configuration (model name, defaults, log level)
load_dotenv()


@dataclass
class Settings:
    """Application settings loaded from environment variables.

    Note: Secrets (OPENAI_API_KEY) are accessed via the config.secrets module;
    the openai_api_key property delegates to it.
    """

    # LLM Configuration (non-secrets)
    llm_model: str = field(default_factory=lambda: os.getenv("LLM_MODEL", "gpt-4o"))
    llm_temperature: float = field(default_factory=lambda: float(os.getenv("LLM_TEMPERATURE", "0.1")))
    llm_max_tokens: int = field(default_factory=lambda: int(os.getenv("LLM_MAX_TOKENS", "8192")))

    # Proposal defaults (percent / days)
    default_coef_pnr: float = field(default_factory=lambda: float(os.getenv("DEFAULT_COEF_PNR", "15")))
    default_coef_unexpected: float = field(default_factory=lambda: float(os.getenv("DEFAULT_COEF_UNEXPECTED", "2")))
    default_coef_vat: float = field(default_factory=lambda: float(os.getenv("DEFAULT_COEF_VAT", "20")))
    default_work_duration: int = field(default_factory=lambda: int(os.getenv("DEFAULT_WORK_DURATION", "45")))

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_format: str = field(default_factory=lambda: os.getenv("LOG_FORMAT", "console"))

    # Internal: cached secret value (use openai_api_key property instead)
    _openai_api_key: Optional[str] = field(default=None, repr=False)

    @property
    def openai_api_key(self) -> Optional[str]:
        """Get OpenAI API key from the secrets module."""
        if self._openai_api_key is None:
            from config.secrets import get_openai_api_key
            self._openai_api_key = get_openai_api_key()
        return self._openai_api_key

    def validate(self) -> None:
        """Validate required settings are present.

        Raises:
            ValueError: If required settings are missing.
        """
        if not self.openai_api_key:
            raise ValueError("OPENAI_API_KEY is required")


# Singleton settings instance
settings = Settings()
