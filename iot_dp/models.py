"""Data models shared by the capability registry and state normalizer."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class CanonicalType(str, Enum):
    """Value types every vendor type tag collapses into."""

    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ENUM = "enum"
    OBJECT = "object"


class NormalizedPropertyType(str, Enum):
    """Canonical property names exposed to the control layer."""

    POWER = "power"
    MODE = "mode"
    TEMPERATURE = "temperature"
    CURRENT_TEMP = "current_temp"
    HUMIDITY = "humidity"
    FAN_SPEED = "fan_speed"
    SWING = "swing"
    BRIGHTNESS = "brightness"
    COLOR_TEMP = "color_temp"
    COLOR = "color"
    POSITION = "position"
    BATTERY = "battery"
    MOTION = "motion"
    DOOR = "door"
    SMOKE = "smoke"
    WATER_LEAK = "water_leak"
    ENERGY = "energy"
    POWER_CONSUMPTION = "power_consumption"
    VOLTAGE = "voltage"
    CURRENT = "current"
    LOCK = "lock"
    CUSTOM = "custom"


class CapabilitySource(str, Enum):
    """Where a device's capability record came from."""

    PREDEFINED = "predefined"
    CLOUD_API = "cloud_api"
    DEVICE_ANNOUNCEMENT = "device_announcement"
    MANUAL = "manual"


DPIdentifier = int | str


class _WireModel(BaseModel):
    """Immutable model that reads and writes the vendors' camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def as_payload(self) -> dict[str, Any]:
        """Return a JSON-ready dict using camelCase keys."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class DPRange(_WireModel):
    """Numeric bounds of a data point."""

    min: int | float | None = None
    max: int | float | None = None
    step: int | float | None = None
    unit: str | None = None


class DPDefinition(_WireModel):
    """A single vendor data point mapped onto a canonical property."""

    dp_id: DPIdentifier
    name: str
    property: NormalizedPropertyType
    type: CanonicalType
    range: DPRange | None = None
    enum_values: tuple[str, ...] | None = None
    read_only: bool = False
    description: str | None = None


def _duplicate_ids(dps: tuple[DPDefinition, ...]) -> list[DPIdentifier]:
    seen: set[DPIdentifier] = set()
    duplicates: list[DPIdentifier] = []
    for dp in dps:
        if dp.dp_id in seen:
            duplicates.append(dp.dp_id)
        seen.add(dp.dp_id)
    return duplicates


def unique_dps(
    dps: list[DPDefinition] | tuple[DPDefinition, ...],
) -> tuple[DPDefinition, ...]:
    """Drop DPs whose identifier already appeared, keeping the first."""

    seen: set[DPIdentifier] = set()
    result: list[DPDefinition] = []
    for dp in dps:
        if dp.dp_id in seen:
            continue
        seen.add(dp.dp_id)
        result.append(dp)
    return tuple(result)


class DeviceCategoryDPs(_WireModel):
    """Catalog entry describing the data points of one device class."""

    category: str
    name: str
    dps: tuple[DPDefinition, ...] = ()

    @model_validator(mode="after")
    def _check_unique_ids(self) -> DeviceCategoryDPs:
        duplicates = _duplicate_ids(self.dps)
        if duplicates:
            raise ValueError(
                f"Category {self.category!r} repeats DP ids {duplicates!r}"
            )
        return self


class DeviceCapabilities(_WireModel):
    """Capabilities registered for a single device."""

    device_id: str
    vendor: str
    category: str
    category_name: str
    dps: tuple[DPDefinition, ...] = ()
    discovered_at: datetime
    source: CapabilitySource

    def writable_dp(self, prop: str) -> DPDefinition | None:
        """Return the first commandable DP mapped to ``prop``."""

        return next(
            (dp for dp in self.dps if dp.property == prop and not dp.read_only),
            None,
        )


class NormalizedDeviceState(_WireModel):
    """Latest normalized snapshot of a device."""

    device_id: str
    vendor: str
    online: bool = True
    last_update: datetime
    properties: dict[Any, Any] = Field(default_factory=dict)
    raw_state: dict[Any, Any] = Field(default_factory=dict)

    def as_payload(self) -> dict[str, Any]:
        """Return a JSON-ready dict, keeping property keys untouched."""

        payload = super().as_payload()
        # Vendor payload values may legitimately be None.
        payload["properties"] = dict(self.properties)
        payload["rawState"] = dict(self.raw_state)
        return payload
