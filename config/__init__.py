"""Estimator configuration.

This package contains:
- settings: Environment variables and configuration
- secrets: Secret access (environment / .env)
- errors: Custom exceptions and error codes
- defaults: Built-in pricing corpus and project defaults
"""

from config.settings import settings
from config.errors import EstimatorError
from config.secrets import get_secret, get_openai_api_key

__all__ = [
    "settings",
    "EstimatorError",
    "get_secret",
    "get_openai_api_key",
]
