"""Voluptuous schemas for vendor discovery payloads.

Schemas are lenient: unknown keys are kept, and the registry drops a single
malformed entry rather than rejecting a whole payload.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

import voluptuous as vol

_LOGGER = logging.getLogger(__name__)

_NUMBER = vol.Any(int, float)
_DP_ID = vol.Any(vol.All(int, vol.Range(min=0)), vol.All(str, vol.Length(min=1)))

ANNOUNCED_RANGE_SCHEMA = vol.Schema(
    {
        vol.Optional("min"): vol.Any(None, _NUMBER),
        vol.Optional("max"): vol.Any(None, _NUMBER),
        vol.Optional("step"): vol.Any(None, _NUMBER),
        vol.Optional("unit"): vol.Any(None, str),
    },
    extra=vol.ALLOW_EXTRA,
)

ANNOUNCED_DP_SCHEMA = vol.Schema(
    {
        vol.Required("dpId"): _DP_ID,
        vol.Optional("name"): vol.Any(None, str),
        vol.Optional("type"): vol.Any(None, str),
        vol.Optional("range"): vol.Any(None, ANNOUNCED_RANGE_SCHEMA),
        vol.Optional("values"): vol.Any(None, [vol.Coerce(str)]),
        vol.Optional("readOnly", default=False): vol.Any(None, bool),
    },
    extra=vol.ALLOW_EXTRA,
)

ANNOUNCEMENT_SCHEMA = vol.Schema(
    {
        vol.Optional("category"): vol.Any(None, str),
        vol.Optional("model"): vol.Any(None, str),
        vol.Optional("dps"): vol.Any(None, list),
    },
    extra=vol.ALLOW_EXTRA,
)

CLOUD_DP_SCHEMA = vol.Schema(
    {
        vol.Required("code"): vol.All(str, vol.Length(min=1)),
        vol.Optional("name"): vol.Any(None, str),
        vol.Optional("type", default="string"): vol.Any(None, str),
        vol.Optional("values"): object,
    },
    extra=vol.ALLOW_EXTRA,
)

CLOUD_API_RESPONSE_SCHEMA = vol.Schema(
    {
        vol.Optional("category"): vol.Any(None, str),
        vol.Optional("model"): vol.Any(None, str),
        vol.Optional("product_id"): vol.Any(None, str),
        vol.Optional("functions"): vol.Any(None, list),
        vol.Optional("status"): vol.Any(None, list),
    },
    extra=vol.ALLOW_EXTRA,
)


def validate_payload(
    schema: vol.Schema, payload: Any, *, what: str
) -> dict[str, Any]:
    """Validate a top-level payload, returning an empty mapping on failure."""

    if not isinstance(payload, Mapping):
        _LOGGER.warning("Ignoring %s payload of type %s", what, type(payload).__name__)
        return {}
    try:
        return schema(dict(payload))
    except vol.Invalid as err:
        _LOGGER.warning("Ignoring malformed %s payload: %s", what, err)
        return {}


def validate_entries(
    schema: vol.Schema, entries: Iterable[Any] | None, *, what: str
) -> list[dict[str, Any]]:
    """Validate each entry, dropping the ones the schema rejects."""

    valid: list[dict[str, Any]] = []
    for index, entry in enumerate(entries or ()):
        if not isinstance(entry, Mapping):
            _LOGGER.warning("Dropping %s entry %d: not an object", what, index)
            continue
        try:
            valid.append(schema(dict(entry)))
        except vol.Invalid as err:
            _LOGGER.warning("Dropping %s entry %d: %s", what, index, err)
    return valid
