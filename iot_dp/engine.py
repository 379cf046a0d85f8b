"""Public facade tying discovery, normalization and commands together."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from os import PathLike
from typing import Any

from .catalog import VendorCatalog, load_catalog
from .commands import CommandBuilder, VendorPayload
from .config import EngineConfig, load_config
from .const import DEFAULT_ENVELOPE_VENDORS
from .models import (
    DPDefinition,
    DeviceCapabilities,
    DeviceCategoryDPs,
    NormalizedDeviceState,
)
from .normalizer import StateNormalizer
from .registry import CapabilityRegistry
from .store import DeviceStore
from .values import ValueConverter

_LOGGER = logging.getLogger(__name__)


class DPEngine:
    """Single entry point for the capability registry and state translation.

    The engine owns no global state: the store, catalog and converter are
    injected so several engines can coexist in one process.
    """

    def __init__(
        self,
        catalog: VendorCatalog,
        *,
        store: DeviceStore | None = None,
        converter: ValueConverter | None = None,
        envelope_vendors: Iterable[str] = DEFAULT_ENVELOPE_VENDORS,
    ) -> None:
        """Wire the engine components around a shared store."""

        self._store = store if store is not None else DeviceStore()
        self._converter = (
            converter if converter is not None else ValueConverter(catalog.remaps)
        )
        self._registry = CapabilityRegistry(self._store, catalog)
        self._normalizer = StateNormalizer(self._store, self._converter)
        self._commands = CommandBuilder(
            self._store, self._converter, envelope_vendors
        )

    @property
    def store(self) -> DeviceStore:
        """Return the backing device store."""

        return self._store

    @property
    def catalog(self) -> VendorCatalog:
        """Return the predefined catalog."""

        return self._registry.catalog

    @property
    def converter(self) -> ValueConverter:
        """Return the value converter."""

        return self._converter

    def register_from_predefined(
        self, device_id: str, vendor: str, category: str
    ) -> DeviceCapabilities | None:
        """Register a device from the predefined catalog."""

        return self._registry.register_from_predefined(device_id, vendor, category)

    def register_from_announcement(
        self, device_id: str, vendor: str, announcement: Mapping[str, Any]
    ) -> DeviceCapabilities:
        """Register a device from its self-announcement."""

        return self._registry.register_from_announcement(
            device_id, vendor, announcement
        )

    def register_from_cloud_api(
        self, device_id: str, vendor: str, api_response: Mapping[str, Any]
    ) -> DeviceCapabilities:
        """Register a device from a vendor cloud introspection response."""

        return self._registry.register_from_cloud_api(
            device_id, vendor, api_response
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
        """Register a device from operator-supplied DP definitions."""

        return self._registry.register_manual(
            device_id, vendor, dps, category=category, name=name
        )

    def get_capabilities(self, device_id: str) -> DeviceCapabilities | None:
        """Return the capabilities registered for ``device_id``."""

        return self._registry.get_capabilities(device_id)

    def get_all_capabilities(self) -> list[DeviceCapabilities]:
        """Return every registered capability record."""

        return self._registry.get_all_capabilities()

    def get_predefined_dps(
        self, vendor: str, category: str
    ) -> DeviceCategoryDPs | None:
        """Return the catalog entry for ``vendor``/``category`` if present."""

        return self._registry.get_predefined_dps(vendor, category)

    def normalize_state(
        self, device_id: str, vendor: str, raw_state: Mapping[Any, Any]
    ) -> NormalizedDeviceState:
        """Translate and store a raw vendor state payload."""

        return self._normalizer.normalize_state(device_id, vendor, raw_state)

    def get_state(self, device_id: str) -> NormalizedDeviceState | None:
        """Return a copy of the latest normalized state of ``device_id``."""

        return self._normalizer.get_state(device_id)

    def create_command(
        self, device_id: str, prop: str, value: Any
    ) -> VendorPayload | None:
        """Build the vendor payload that sets ``prop`` to ``value``."""

        return self._commands.create_command(device_id, prop, value)

    def clear(self) -> None:
        """Forget every registered device and state."""

        _LOGGER.debug("Clearing %d registered devices", len(self._store))
        self._store.clear()


def create_engine(
    config: EngineConfig | Mapping[str, Any] | str | PathLike[str] | None = None,
) -> DPEngine:
    """Build an engine from ``config``, loading the catalog it names.

    ``config`` may be an :class:`EngineConfig`, a raw mapping or the path of a
    YAML file. Remaps from the configuration are consulted before the
    catalog's own.
    """

    if config is None:
        config = EngineConfig()
    elif isinstance(config, Mapping):
        config = EngineConfig.from_dict(config)
    elif not isinstance(config, EngineConfig):
        config = load_config(config)
    catalog = load_catalog(config.catalog_path)
    converter = ValueConverter([*config.remaps, *catalog.remaps])
    return DPEngine(
        catalog,
        converter=converter,
        envelope_vendors=config.envelope_vendors,
    )
