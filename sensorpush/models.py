"""
Pydantic models for SensorPush devices and samples.

All models are frozen snapshots of what the API returned. Build them from
raw response maps with from_api(), which never raises on bad input.
"""

from pydantic import BaseModel, ConfigDict, Field, computed_field
from datetime import datetime
from typing import Any, ClassVar, Optional, List, Dict

from .parsing import parse_datetime, read_str, read_float, read_bool


class _Snapshot(BaseModel):
    """Shared behaviour for immutable API records."""
    model_config = ConfigDict(frozen=True)

    def deconstruct(self, keys: Optional[List[str]] = None) -> Dict[str, Any]:
        """
        Return the record as a dict, optionally restricted to some keys.

        Args:
            keys: Field names to include, or None for every field

        Returns:
            Dict of field name to value (derived fields included)
        """
        values = self.model_dump()
        if keys is None:
            return values
        return {key: values[key] for key in keys if key in values}


class Sensor(_Snapshot):
    """
    A SensorPush temperature/humidity sensor.

    Sensors report to nearby gateways over Bluetooth. Battery state is
    derived from the reported voltage.
    """
    BATTERY_LOW_THRESHOLD: ClassVar[float] = 2.2
    BATTERY_MAX_VOLTAGE: ClassVar[float] = 3.0
    BATTERY_MIN_VOLTAGE: ClassVar[float] = 2.0

    id: Optional[str] = Field(default=None, description="Unique identifier in the SensorPush API")
    name: Optional[str] = Field(default=None, description="User-defined name of the sensor")
    active: Optional[bool] = Field(default=None, description="Whether the sensor is active")
    address: Optional[str] = Field(default=None, repr=False, description="Bluetooth MAC address")
    battery_voltage: Optional[float] = Field(default=None, description="Battery voltage in volts")
    device_id: Optional[str] = Field(default=None, repr=False, description="Hardware identifier")

    @classmethod
    def from_api(cls, attributes: Dict[str, Any]) -> 'Sensor':
        """Build a Sensor from a devices/sensors attribute map."""
        if not isinstance(attributes, dict):
            attributes = {}

        return cls(
            id=read_str(attributes, 'id'),
            name=read_str(attributes, 'name'),
            active=read_bool(attributes, 'active'),
            address=read_str(attributes, 'address'),
            battery_voltage=read_float(attributes, 'battery_voltage'),
            device_id=read_str(attributes, 'deviceId')
        )

    @computed_field(repr=False)
    @property
    def battery_low(self) -> Optional[bool]:
        """True when voltage is below BATTERY_LOW_THRESHOLD, None if unknown."""
        if self.battery_voltage is None:
            return None
        return self.battery_voltage < self.BATTERY_LOW_THRESHOLD

    @computed_field(repr=False)
    @property
    def battery_percentage(self) -> Optional[float]:
        """
        Battery level on a linear 2.0V (0%) to 3.0V (100%) scale.

        Values outside the range are clamped to 0-100. None if the
        voltage is unknown.
        """
        if self.battery_voltage is None:
            return None

        voltage_range = self.BATTERY_MAX_VOLTAGE - self.BATTERY_MIN_VOLTAGE
        percentage = ((self.battery_voltage - self.BATTERY_MIN_VOLTAGE) / voltage_range) * 100
        return float(min(max(percentage, 0.0), 100.0))


class Gateway(_Snapshot):
    """
    A SensorPush gateway.

    Gateways relay sensor readings to the cloud.
    """
    id: Optional[str] = Field(default=None, description="Unique identifier of the gateway")
    name: Optional[str] = Field(default=None, description="User-defined name of the gateway")
    version: Optional[str] = Field(default=None, description="Firmware version")
    message: Optional[str] = Field(default=None, repr=False, description="Latest status message")
    last_seen: Optional[datetime] = Field(default=None, description="When the gateway was last online")
    last_alert: Optional[datetime] = Field(default=None, repr=False, description="When the gateway last alerted")

    @classmethod
    def from_api(cls, attributes: Dict[str, Any]) -> 'Gateway':
        """Build a Gateway from a devices/gateways attribute map."""
        if not isinstance(attributes, dict):
            attributes = {}

        return cls(
            id=read_str(attributes, 'id'),
            name=read_str(attributes, 'name'),
            version=read_str(attributes, 'version'),
            message=read_str(attributes, 'message'),
            last_seen=parse_datetime(attributes.get('last_seen')),
            last_alert=parse_datetime(attributes.get('last_alert'))
        )


class Sample(_Snapshot):
    """Single temperature/humidity reading from a sensor."""
    humidity: Optional[float] = Field(default=None, description="Relative humidity (%)")
    temperature: Optional[float] = Field(
        default=None,
        description="Temperature in the account's configured unit"
    )
    observed: Optional[datetime] = Field(default=None, description="When the sample was taken")

    @classmethod
    def from_api(cls, attributes: Dict[str, Any]) -> 'Sample':
        """Build a Sample from one entry of a samples response."""
        if not isinstance(attributes, dict):
            attributes = {}

        return cls(
            humidity=read_float(attributes, 'humidity'),
            temperature=read_float(attributes, 'temperature'),
            observed=parse_datetime(attributes.get('observed'))
        )
