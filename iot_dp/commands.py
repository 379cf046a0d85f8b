"""Translate canonical property writes into vendor command payloads."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from .const import DEFAULT_ENVELOPE_VENDORS, DPS_ENVELOPE_KEY
from .store import DeviceStore
from .values import ConversionError, ValueConverter

_LOGGER = logging.getLogger(__name__)

VendorPayload = dict[Any, Any]


class CommandBuilder:
    """Inverse of the state normalizer: canonical value → vendor payload."""

    def __init__(
        self,
        store: DeviceStore,
        converter: ValueConverter,
        envelope_vendors: Iterable[str] = DEFAULT_ENVELOPE_VENDORS,
    ) -> None:
        """Bind the builder to a store, converter and envelope vendor set."""

        self._store = store
        self._converter = converter
        self._envelope_vendors = frozenset(v.lower() for v in envelope_vendors)

    def wrap(self, vendor: str, dp_id: int | str, value: Any) -> VendorPayload:
        """Shape a single DP write the way ``vendor`` expects it."""

        if vendor.lower() in self._envelope_vendors:
            return {DPS_ENVELOPE_KEY: {dp_id: value}}
        return {dp_id: value}

    def create_command(
        self, device_id: str, prop: str, value: Any
    ) -> VendorPayload | None:
        """Build the payload setting ``prop`` to ``value``, or None."""

        capabilities = self._store.get_capabilities(device_id)
        if capabilities is None:
            _LOGGER.debug("Cannot command %s: no capabilities registered", device_id)
            return None
        dp = capabilities.writable_dp(prop)
        if dp is None:
            _LOGGER.debug("Cannot command %s: no writable DP for %s", device_id, prop)
            return None
        try:
            converted = self._converter.deconvert(value, dp, capabilities.vendor)
        except ConversionError as err:
            _LOGGER.debug("Cannot command %s.%s: %s", device_id, prop, err)
            return None
        return self.wrap(capabilities.vendor, dp.dp_id, converted)
