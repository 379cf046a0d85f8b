"""Vendor data point normalization and command translation for IoT devices."""

from __future__ import annotations

from .catalog import CatalogError, RangeRemap, VendorCatalog, load_catalog
from .classifier import classify, humanize_code
from .config import EngineConfig, InvalidConfig, load_config
from .dp_types import normalize_type
from .engine import DPEngine, create_engine
from .models import (
    CanonicalType,
    CapabilitySource,
    DPDefinition,
    DPRange,
    DeviceCapabilities,
    DeviceCategoryDPs,
    NormalizedDeviceState,
    NormalizedPropertyType,
)
from .values import ConversionError, ValueConverter

__all__ = [
    "CanonicalType",
    "CapabilitySource",
    "CatalogError",
    "ConversionError",
    "DPDefinition",
    "DPEngine",
    "DPRange",
    "DeviceCapabilities",
    "DeviceCategoryDPs",
    "EngineConfig",
    "InvalidConfig",
    "NormalizedDeviceState",
    "NormalizedPropertyType",
    "RangeRemap",
    "ValueConverter",
    "VendorCatalog",
    "classify",
    "create_engine",
    "humanize_code",
    "load_catalog",
    "load_config",
    "normalize_type",
]
