"""Defensive extraction of JSON arrays from free-form model output.

Models frequently wrap structured output in prose or markdown fences even when
asked not to. Every agent routes raw capability text through this module; it is
the only place that makes assumptions about the response format.
"""

import json
import re
from typing import Any, List

import structlog

from config.errors import MalformedResponseError

logger = structlog.get_logger()

# Greedy: first "[" through the last "]" in the text
_ARRAY_PATTERN = re.compile(r"\[[\s\S]*\]")


def find_json_array(text: str) -> str:
    """Return the bracket-delimited region of `text`.

    Raises:
        MalformedResponseError: If no bracket-delimited region exists.
    """
    match = _ARRAY_PATTERN.search(text)
    if match is None:
        raise MalformedResponseError(
            "Could not locate a JSON array in the model response",
            raw_content=text,
        )
    return match.group(0)


def extract_json_array(text: str) -> List[Any]:
    """Locate and parse the JSON array embedded in `text`.

    Args:
        text: Raw capability response.

    Returns:
        The parsed list.

    Raises:
        MalformedResponseError: If no array is found or it does not parse.
    """
    region = find_json_array(text)
    try:
        parsed = json.loads(region)
    except json.JSONDecodeError as e:
        logger.warning(
            "response_json_invalid",
            error=str(e),
            region_length=len(region)
        )
        raise MalformedResponseError(
            f"Model response is not valid JSON: {e}",
            raw_content=region,
            details={"parse_error": str(e)}
        ) from e

    if not isinstance(parsed, list):
        raise MalformedResponseError(
            "Model response JSON is not an array",
            raw_content=region,
        )
    return parsed
