"""
Parsing helpers for SensorPush API payloads.
Reads loosely-typed response fields defensively: bad values become None.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any, Optional, List, Dict, Type, TypeVar

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

T = TypeVar('T')


def parse_datetime(raw: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp from the API.

    Args:
        raw: Timestamp string (or None)

    Returns:
        Timezone-aware datetime, or None if missing or malformed.
        Naive timestamps are assumed to be UTC.

    Example:
        parse_datetime("2024-01-15T12:30:00Z")  # 2024-01-15 12:30:00+00:00
        parse_datetime("not a date")            # None
    """
    if not isinstance(raw, str) or not raw.strip():
        return None

    try:
        parsed = date_parser.isoparse(raw.strip())
    except (ValueError, OverflowError):
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    return parsed


def read_str(attributes: Dict[str, Any], key: str) -> Optional[str]:
    """Read a string field; numeric identifiers are converted to strings."""
    value = attributes.get(key)
    if isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return None


def read_float(attributes: Dict[str, Any], key: str) -> Optional[float]:
    """
    Read a numeric field, accepting numbers and numeric strings.

    NaN and infinite values are treated as missing.
    """
    value = attributes.get(key)
    if value is None or isinstance(value, bool):
        return None
    if not isinstance(value, (int, float, str)):
        return None

    try:
        number = float(value)
    except (ValueError, OverflowError):
        return None

    return number if math.isfinite(number) else None


def read_bool(attributes: Dict[str, Any], key: str) -> Optional[bool]:
    """Read a boolean field. Anything other than a real bool is None."""
    value = attributes.get(key)
    return value if isinstance(value, bool) else None


def parse_device_response(response: Dict[str, Any], model: Type[T]) -> List[T]:
    """
    Convert a devices response into model instances.

    The devices endpoints return a map of device key to attribute map,
    plus a 'status' entry that is not a device.

    Args:
        response: Parsed JSON response body
        model: Model class exposing from_api(attributes)

    Returns:
        List of model instances in response order
    """
    devices = []

    for key, attributes in response.items():
        if key == 'status':
            continue

        if not isinstance(attributes, dict):
            logger.debug("Skipping non-device entry %r in devices response", key)
            continue

        if 'id' not in attributes:
            attributes = {**attributes, 'id': key}

        devices.append(model.from_api(attributes))

    return devices
