"""Utility modules for the estimator."""

from utils.coercion import coerce_float, coerce_positive_int
from utils.response_parser import extract_json_array, find_json_array

__all__ = [
    "coerce_float",
    "coerce_positive_int",
    "extract_json_array",
    "find_json_array",
]
