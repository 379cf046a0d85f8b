"""Capability discovery from the catalog, announcements and cloud APIs."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from .catalog import VendorCatalog
from .classifier import classify
from .cloud_api import parse_cloud_api_dp
from .const import (
    ANNOUNCED_RANGE_MAX,
    ANNOUNCED_RANGE_MIN,
    DEFAULT_CATEGORY,
    UNKNOWN_DEVICE_NAME,
)
from .dp_types import normalize_type
from .models import (
    CapabilitySource,
    DPDefinition,
    DPRange,
    DeviceCapabilities,
    DeviceCategoryDPs,
    unique_dps,
)
from .schemas import (
    ANNOUNCED_DP_SCHEMA,
    ANNOUNCEMENT_SCHEMA,
    CLOUD_API_RESPONSE_SCHEMA,
    CLOUD_DP_SCHEMA,
    validate_entries,
    validate_payload,
)
from .store import DeviceStore

_LOGGER = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _announced_range(data: Mapping[str, Any] | None) -> DPRange | None:
    if not data:
        return None
    minimum = data.get("min")
    maximum = data.get("max")
    return DPRange(
        min=ANNOUNCED_RANGE_MIN if not minimum else minimum,
        max=ANNOUNCED_RANGE_MAX if not maximum else maximum,
        step=data.get("step"),
        unit=data.get("unit"),
    )


def announced_dp(entry: Mapping[str, Any]) -> DPDefinition:
    """Build a DP definition from one validated announcement entry."""

    dp_id = entry["dpId"]
    name = entry.get("name")
    raw_type = entry.get("type")
    values = entry.get("values")
    return DPDefinition(
        dp_id=dp_id,
        name=name or f"DP {dp_id}",
        property=classify(name, raw_type),
        type=normalize_type(raw_type),
        range=_announced_range(entry.get("range")),
        enum_values=tuple(values) if values else None,
        read_only=bool(entry.get("readOnly")),
    )


class CapabilityRegistry:
    """Build capability records and keep them in a :class:`DeviceStore`."""

    def __init__(self, store: DeviceStore, catalog: VendorCatalog) -> None:
        """Bind the registry to its store and predefined catalog."""

        self._store = store
        self._catalog = catalog

    @property
    def catalog(self) -> VendorCatalog:
        """Return the predefined catalog."""

        return self._catalog

    def get_predefined_dps(
        self, vendor: str, category: str | None
    ) -> DeviceCategoryDPs | None:
        """Return the catalog entry for ``vendor``/``category`` if present."""

        if not category:
            return None
        return self._catalog.get(vendor, category)

    def _store_capabilities(
        self,
        *,
        device_id: str,
        vendor: str,
        category: str,
        category_name: str,
        dps: Iterable[DPDefinition],
        source: CapabilitySource,
    ) -> DeviceCapabilities:
        capabilities = DeviceCapabilities(
            device_id=device_id,
            vendor=vendor,
            category=category,
            category_name=category_name,
            dps=unique_dps(list(dps)),
            discovered_at=_utcnow(),
            source=source,
        )
        self._store.set_capabilities(capabilities)
        _LOGGER.info(
            "Registered %d DPs for %s (%s/%s) from %s",
            len(capabilities.dps),
            device_id,
            vendor,
            category,
            source.value,
        )
        return capabilities

    def register_from_predefined(
        self, device_id: str, vendor: str, category: str
    ) -> DeviceCapabilities | None:
        """Register the catalog DPs of ``vendor``/``category``."""

        predefined = self.get_predefined_dps(vendor, category)
        if predefined is None:
            _LOGGER.debug("No predefined DPs for %s/%s", vendor, category)
            return None
        return self._store_capabilities(
            device_id=device_id,
            vendor=vendor,
            category=predefined.category,
            category_name=predefined.name,
            dps=predefined.dps,
            source=CapabilitySource.PREDEFINED,
        )

    def register_from_announcement(
        self, device_id: str, vendor: str, announcement: Mapping[str, Any]
    ) -> DeviceCapabilities:
        """Register DPs a device declared about itself.

        Explicit ``dps`` win; otherwise the catalog entry for the announced
        category is used; otherwise the device gets an empty DP list.
        """

        payload = validate_payload(
            ANNOUNCEMENT_SCHEMA, announcement, what="announcement"
        )
        category = payload.get("category")
        predefined = self.get_predefined_dps(vendor, category)

        dps: list[DPDefinition] = []
        for entry in validate_entries(
            ANNOUNCED_DP_SCHEMA, payload.get("dps"), what="announced DP"
        ):
            try:
                dps.append(announced_dp(entry))
            except ValidationError as err:
                _LOGGER.warning(
                    "Dropping announced DP %s: %s", entry.get("dpId"), err
                )
        if not dps and predefined is not None:
            dps = list(predefined.dps)

        return self._store_capabilities(
            device_id=device_id,
            vendor=vendor,
            category=category or DEFAULT_CATEGORY,
            category_name=_category_name(predefined, payload.get("model")),
            dps=dps,
            source=CapabilitySource.DEVICE_ANNOUNCEMENT,
        )

    def register_from_cloud_api(
        self, device_id: str, vendor: str, api_response: Mapping[str, Any]
    ) -> DeviceCapabilities:
        """Register DPs described by a vendor cloud introspection response."""

        payload = validate_payload(
            CLOUD_API_RESPONSE_SCHEMA, api_response, what="cloud API"
        )
        category = payload.get("category")
        predefined = self.get_predefined_dps(vendor, category)

        dps: list[DPDefinition] = []
        for entry in validate_entries(
            CLOUD_DP_SCHEMA, payload.get("functions"), what="cloud function"
        ):
            dp = parse_cloud_api_dp(entry, read_only=False)
            if dp is not None:
                dps.append(dp)
        function_codes = {dp.dp_id for dp in dps}
        for entry in validate_entries(
            CLOUD_DP_SCHEMA, payload.get("status"), what="cloud status"
        ):
            # Commandable functions take precedence over read-only status.
            if entry["code"] in function_codes:
                continue
            dp = parse_cloud_api_dp(entry, read_only=True)
            if dp is not None:
                dps.append(dp)
        if not dps and predefined is not None:
            dps = list(predefined.dps)

        return self._store_capabilities(
            device_id=device_id,
            vendor=vendor,
            category=category or DEFAULT_CATEGORY,
            category_name=_category_name(predefined, payload.get("model")),
            dps=dps,
            source=CapabilitySource.CLOUD_API,
        )

    def register_manual(
        self,
        device_id: str,
        vendor: str,
        dps: Iterable[DPDefinition | Mapping[str, Any]],
        *,
        category: str | None = None,
        name: str | None = None,
    ) -> DeviceCapabilities:
        """Register DP definitions supplied directly by an operator."""

        definitions = [
            dp if isinstance(dp, DPDefinition) else DPDefinition.model_validate(dp)
            for dp in dps
        ]
        return self._store_capabilities(
            device_id=device_id,
            vendor=vendor,
            category=category or DEFAULT_CATEGORY,
            category_name=name or UNKNOWN_DEVICE_NAME,
            dps=definitions,
            source=CapabilitySource.MANUAL,
        )

    def get_capabilities(self, device_id: str) -> DeviceCapabilities | None:
        """Return the capabilities registered for ``device_id``."""

        return self._store.get_capabilities(device_id)

    def get_all_capabilities(self) -> list[DeviceCapabilities]:
        """Return every registered capability record."""

        return self._store.all_capabilities()


def _category_name(predefined: DeviceCategoryDPs | None, model: str | None) -> str:
    if predefined is not None:
        return predefined.name
    return model or UNKNOWN_DEVICE_NAME
