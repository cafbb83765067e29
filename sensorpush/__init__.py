"""
SensorPush client for environmental sensor data.

This module provides access to the SensorPush cloud API: account
authentication, gateway and sensor listing, and temperature/humidity
sample retrieval. Responses are normalized into immutable models.

Architecture:
- Client: HTTP communication, OAuth token flow, error classification
- Models: Frozen pydantic models with derived battery fields
- Parsing: Defensive field readers and timestamp parsing
- Config: YAML-based configuration management

Example Usage:
    import sensorpush

    client = sensorpush.new(username='user@example.com', password='secret')
    client.authenticate()

    for sensor in client.sensors():
        if sensor.battery_low:
            print(f"{sensor.name}: {sensor.battery_percentage:.0f}% battery")

    samples = client.samples(sensor.id, limit=100)
"""

from .models import (
    Sensor,
    Gateway,
    Sample
)

from .client import (
    SensorPushClient,
    SensorPushError,
    AuthenticationError,
    ParseError,
    APIError,
    BASE_URL,
    BASE_HEADERS
)

from .parsing import (
    parse_datetime,
    parse_device_response
)

from .config import (
    SensorPushConfig,
    APISettings,
    LoggingSettings,
    DEFAULT_TIMEOUT,
    configure_logging,
    load_config
)

__version__ = '1.0.0'
MAJOR, MINOR, PATCH = __version__.split('.')


def new(**options) -> SensorPushClient:
    """
    Create a new client.

    Args:
        **options: Keyword arguments for SensorPushClient

    Returns:
        SensorPushClient instance
    """
    return SensorPushClient(**options)


__all__ = [
    # Main client
    'SensorPushClient',
    'new',

    # Models
    'Sensor',
    'Gateway',
    'Sample',

    # Parsing utilities
    'parse_datetime',
    'parse_device_response',

    # Configuration
    'SensorPushConfig',
    'APISettings',
    'LoggingSettings',
    'configure_logging',
    'load_config',

    # Constants
    'BASE_URL',
    'BASE_HEADERS',
    'DEFAULT_TIMEOUT',

    # Errors
    'SensorPushError',
    'AuthenticationError',
    'ParseError',
    'APIError',
]
