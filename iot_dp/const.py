"""Constants for the IoT DP engine."""

from pathlib import Path

DATA_DIR = Path(__file__).parent / "data"
DEFAULT_CATALOG_PATH = DATA_DIR / "vendor_dps.json"

DEFAULT_CATEGORY = "generic"
UNKNOWN_DEVICE_NAME = "Unknown Device"

# Vendors whose commands are wrapped in a ``{"dps": {...}}`` envelope.
DEFAULT_ENVELOPE_VENDORS = ("tuya",)
DPS_ENVELOPE_KEY = "dps"

ANY_VENDOR = "*"
CANONICAL_SCALE_MAX = 100

# Announced ranges fill missing bounds with these.
ANNOUNCED_RANGE_MIN = 0
ANNOUNCED_RANGE_MAX = 100
