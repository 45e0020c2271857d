"""DynamoDB number conversion helpers.

DynamoDB hands numbers back as Decimal and refuses Python floats on write,
so store records pass through these helpers on the way in and out.
"""

from decimal import Decimal
from typing import Any


def decimal_to_python(obj: Any) -> Any:
    """Recursively convert Decimal values to int (whole numbers) or float."""
    if isinstance(obj, Decimal):
        if obj % 1 == 0:
            return int(obj)
        return float(obj)
    if isinstance(obj, dict):
        return {key: decimal_to_python(value) for key, value in obj.items()}
    if isinstance(obj, list):
        return [decimal_to_python(item) for item in obj]
    return obj


def python_to_decimal(obj: Any) -> Any:
    """Recursively convert float/int values to Decimal. Booleans are left alone."""
    if isinstance(obj, float):
        # Go through str to avoid binary float artifacts
        return Decimal(str(round(obj, 6)))
    if isinstance(obj, int) and not isinstance(obj, bool):
        return Decimal(obj)
    if isinstance(obj, dict):
        return {key: python_to_decimal(value) for key, value in obj.items()}
    if isinstance(obj, list):
        return [python_to_decimal(item) for item in obj]
    return obj


def prepare_for_dynamodb(item: dict[str, Any]) -> dict[str, Any]:
    """Convert a model dump for put_item. None values are dropped."""
    return python_to_decimal({k: v for k, v in item.items() if v is not None})


def parse_from_dynamodb(item: dict[str, Any]) -> dict[str, Any]:
    """Convert a DynamoDB item back to plain Python types."""
    return decimal_to_python(item)


def parse_items_from_dynamodb(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [parse_from_dynamodb(item) for item in items]
