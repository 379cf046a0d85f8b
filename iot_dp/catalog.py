"""Predefined per-vendor data point catalog."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from .const import ANY_VENDOR, CANONICAL_SCALE_MAX, DEFAULT_CATALOG_PATH
from .models import DeviceCategoryDPs, NormalizedPropertyType

_LOGGER = logging.getLogger(__name__)


class CatalogError(RuntimeError):
    """Raised when the catalog file is missing or malformed."""


class RangeRemap(BaseModel):
    """Declarative conversion between a vendor scale and the canonical scale."""

    vendor: str = ANY_VENDOR
    property: NormalizedPropertyType
    device_max: int | float = Field(gt=0)
    canonical_max: int | float = Field(default=CANONICAL_SCALE_MAX, gt=0)

    def matches(self, vendor: str | None, prop: str, device_max: Any) -> bool:
        """Return True when this remap applies to the given DP."""

        if self.property != prop or device_max != self.device_max:
            return False
        if self.vendor == ANY_VENDOR:
            return True
        return vendor is not None and vendor.lower() == self.vendor.lower()


class VendorCatalog(BaseModel):
    """Vendor → category → data point table."""

    vendors_table: dict[str, dict[str, DeviceCategoryDPs]] = Field(
        alias="vendors", default_factory=dict
    )
    remaps: list[RangeRemap] = Field(default_factory=list)

    def vendors(self) -> list[str]:
        """Return the vendor keys in catalog order."""

        return list(self.vendors_table)

    def categories(self, vendor: str) -> list[str]:
        """Return the category keys known for ``vendor``."""

        return list(self.vendors_table.get(vendor.lower(), {}))

    def get(self, vendor: str, category: str) -> DeviceCategoryDPs | None:
        """Look up a category entry; vendor matching is case-insensitive."""

        vendor_dps = self.vendors_table.get(vendor.lower())
        if vendor_dps is None:
            return None
        return vendor_dps.get(category)


def load_catalog(path: Path | None = None) -> VendorCatalog:
    """Load and validate the vendor catalog from JSON."""

    data_path = path or DEFAULT_CATALOG_PATH
    try:
        with data_path.open("r", encoding="utf-8") as fp:
            payload = json.load(fp)
    except (OSError, json.JSONDecodeError) as exc:
        raise CatalogError(f"Unable to read catalog {data_path}: {exc}") from exc
    try:
        catalog = VendorCatalog.model_validate(payload)
    except ValidationError as exc:
        raise CatalogError(f"Invalid catalog {data_path}: {exc}") from exc
    _LOGGER.debug(
        "Loaded catalog %s with %d vendors and %d remaps",
        data_path,
        len(catalog.vendors_table),
        len(catalog.remaps),
    )
    return catalog
