"""
Core utilities module.

Contains common utility functions used across the application.
"""

from src.core.utils.cancellation import CancellationToken, ensure_token
from src.core.utils.date_utils import (
    aired_before,
    parse_air_date,
    parse_production_year,
    to_utc,
)

__all__ = [
    'CancellationToken',
    'ensure_token',
    'to_utc',
    'parse_air_date',
    'parse_production_year',
    'aired_before',
]
