"""Utility helpers for the WeatherQuest backend."""

from .dynamodb_utils import (
    decimal_to_python,
    parse_from_dynamodb,
    parse_items_from_dynamodb,
    prepare_for_dynamodb,
    python_to_decimal,
)
from .geo_utils import bounding_box, haversine_distance, is_within_radius

__all__ = [
    "decimal_to_python",
    "python_to_decimal",
    "prepare_for_dynamodb",
    "parse_from_dynamodb",
    "parse_items_from_dynamodb",
    "haversine_distance",
    "is_within_radius",
    "bounding_box",
]
