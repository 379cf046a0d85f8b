"""Map raw vendor payloads onto canonical device state."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from .models import DeviceCapabilities, NormalizedDeviceState
from .store import DeviceStore
from .values import ValueConverter

_LOGGER = logging.getLogger(__name__)

_MISSING = object()


def _lookup(raw_state: Mapping[Any, Any], dp_id: int | str) -> Any:
    """Find a DP value by its string key first, then by its native id."""

    value = raw_state.get(str(dp_id), _MISSING)
    if value is _MISSING:
        value = raw_state.get(dp_id, _MISSING)
    return value


def map_properties(
    capabilities: DeviceCapabilities,
    raw_state: Mapping[Any, Any],
    converter: ValueConverter,
) -> dict[str, Any]:
    """Convert each DP present in ``raw_state`` into its canonical property."""

    properties: dict[str, Any] = {}
    for dp in capabilities.dps:
        value = _lookup(raw_state, dp.dp_id)
        if value is _MISSING:
            continue
        properties[dp.property.value] = converter.convert(
            value, dp, capabilities.vendor
        )
    return properties


class StateNormalizer:
    """Produce and store :class:`NormalizedDeviceState` snapshots."""

    def __init__(self, store: DeviceStore, converter: ValueConverter) -> None:
        """Bind the normalizer to a store and value converter."""

        self._store = store
        self._converter = converter

    def normalize_state(
        self, device_id: str, vendor: str, raw_state: Mapping[Any, Any]
    ) -> NormalizedDeviceState:
        """Normalize ``raw_state`` and record it as the device's latest state."""

        raw = dict(raw_state or {})
        with self._store.device_lock(device_id):
            capabilities = self._store.get_capabilities(device_id)
            if capabilities is None:
                _LOGGER.debug(
                    "No capabilities for %s; passing state through", device_id
                )
                properties = dict(raw)
            else:
                properties = map_properties(capabilities, raw, self._converter)
            state = NormalizedDeviceState(
                device_id=device_id,
                vendor=vendor,
                online=True,
                last_update=datetime.now(timezone.utc),
                properties=properties,
                raw_state=raw,
            )
            self._store.set_state(state)
            return state.model_copy(deep=True)

    def get_state(self, device_id: str) -> NormalizedDeviceState | None:
        """Return the latest normalized state of ``device_id``."""

        return self._store.get_state(device_id)
