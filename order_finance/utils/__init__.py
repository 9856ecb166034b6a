"""Utility functions and helpers."""

from .numbers import to_number_or_default, is_positive_number, round_currency
from .dates import parse_date, to_iso, utc_now
from .uuid import generate_uuid

__all__ = [
    'to_number_or_default',
    'is_positive_number',
    'round_currency',
    'parse_date',
    'to_iso',
    'utc_now',
    'generate_uuid'
]
