"""Engine configuration loaded from YAML or plain mappings."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import voluptuous as vol
import yaml
from pydantic import ValidationError

from .catalog import RangeRemap
from .const import ANY_VENDOR, CANONICAL_SCALE_MAX, DEFAULT_ENVELOPE_VENDORS
from .models import NormalizedPropertyType

_LOGGER = logging.getLogger(__name__)

CONF_CATALOG_PATH = "catalog_path"
CONF_ENVELOPE_VENDORS = "envelope_vendors"
CONF_REMAPS = "remaps"


class InvalidConfig(RuntimeError):
    """Raised when engine configuration cannot be loaded or validated."""


_POSITIVE = vol.All(vol.Any(int, float), vol.Range(min=0, min_included=False))

REMAP_SCHEMA = vol.Schema(
    {
        vol.Optional("vendor", default=ANY_VENDOR): vol.All(str, vol.Lower),
        vol.Required("property"): vol.In([p.value for p in NormalizedPropertyType]),
        vol.Required("device_max"): _POSITIVE,
        vol.Optional("canonical_max", default=CANONICAL_SCALE_MAX): _POSITIVE,
    }
)

CONFIG_SCHEMA = vol.Schema(
    {
        vol.Optional(CONF_CATALOG_PATH): vol.Any(None, vol.All(str, vol.Length(min=1))),
        vol.Optional(
            CONF_ENVELOPE_VENDORS, default=list(DEFAULT_ENVELOPE_VENDORS)
        ): [vol.All(str, vol.Lower)],
        vol.Optional(CONF_REMAPS, default=list): [REMAP_SCHEMA],
    },
    extra=vol.PREVENT_EXTRA,
)


@dataclass(frozen=True)
class EngineConfig:
    """Validated engine settings."""

    catalog_path: Path | None = None
    envelope_vendors: tuple[str, ...] = DEFAULT_ENVELOPE_VENDORS
    remaps: tuple[RangeRemap, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> EngineConfig:
        """Validate ``data`` against :data:`CONFIG_SCHEMA`."""

        try:
            validated = CONFIG_SCHEMA(dict(data or {}))
        except vol.Invalid as err:
            raise InvalidConfig(f"Invalid engine configuration: {err}") from err
        try:
            remaps = tuple(
                RangeRemap.model_validate(entry) for entry in validated[CONF_REMAPS]
            )
        except ValidationError as err:
            raise InvalidConfig(f"Invalid remap entry: {err}") from err
        catalog_path = validated.get(CONF_CATALOG_PATH)
        return cls(
            catalog_path=Path(catalog_path) if catalog_path else None,
            envelope_vendors=tuple(validated[CONF_ENVELOPE_VENDORS]),
            remaps=remaps,
        )


def load_config(path: Path | str) -> EngineConfig:
    """Read an :class:`EngineConfig` from a YAML file.

    Relative catalog paths are resolved against the config file's directory.
    An empty file yields the defaults.
    """

    config_path = Path(path)
    try:
        with config_path.open("r", encoding="utf-8") as fp:
            data = yaml.safe_load(fp)
    except (OSError, yaml.YAMLError) as err:
        raise InvalidConfig(f"Unable to read config {config_path}: {err}") from err
    if data is not None and not isinstance(data, Mapping):
        raise InvalidConfig(f"Config {config_path} must contain a mapping")
    config = EngineConfig.from_dict(data)
    if config.catalog_path is not None and not config.catalog_path.is_absolute():
        config = EngineConfig(
            catalog_path=config_path.parent / config.catalog_path,
            envelope_vendors=config.envelope_vendors,
            remaps=config.remaps,
        )
    _LOGGER.debug("Loaded engine config from %s", config_path)
    return config
