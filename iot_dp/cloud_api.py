"""Parser for Tuya-style cloud function/status descriptions."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from .classifier import classify, humanize_code
from .dp_types import normalize_type
from .models import CanonicalType, DPDefinition, DPRange

_LOGGER = logging.getLogger(__name__)


def _first_present(*candidates: Any) -> Any:
    return next((value for value in candidates if value is not None), None)


def _range_from_values(data: Mapping[str, Any]) -> DPRange | None:
    """Build a range from ``{"range": [lo, hi]}`` or ``{"min": .., "max": ..}``."""

    bounds = data.get("range")
    if isinstance(bounds, list):
        low = bounds[0] if len(bounds) > 0 else None
        high = bounds[1] if len(bounds) > 1 else None
        minimum = _first_present(low, data.get("min"))
        maximum = _first_present(high, data.get("max"))
    elif "min" in data or "max" in data:
        minimum = data.get("min")
        maximum = data.get("max")
    else:
        return None
    try:
        return DPRange(
            min=minimum, max=maximum, step=data.get("step"), unit=data.get("unit")
        )
    except ValidationError as err:
        _LOGGER.debug("Discarding unusable range %s: %s", data, err)
        return None


def _comma_enum(values: str) -> tuple[str, ...] | None:
    """Split ``"low, high"`` style lists; prose with commas is not an enum."""

    if "," not in values:
        return None
    parts = tuple(part.strip() for part in values.split(","))
    if all(part and not any(ch.isspace() for ch in part) for part in parts):
        return parts
    return None


def parse_values(
    values: Any, dp_type: CanonicalType
) -> tuple[DPRange | None, tuple[str, ...] | None]:
    """Extract range and enum values from a cloud ``values`` description."""

    if values is None or values == "":
        return None, None
    parsed: Any = values
    if isinstance(values, str):
        try:
            parsed = json.loads(values)
        except ValueError:
            _LOGGER.debug("Values %r are not JSON; trying comma list", values)
            return None, _comma_enum(values)
    if isinstance(parsed, list):
        return None, tuple(str(item) for item in parsed)
    if isinstance(parsed, Mapping):
        bounds = parsed.get("range")
        if dp_type is CanonicalType.ENUM and isinstance(bounds, list):
            return None, tuple(str(item) for item in bounds)
        return _range_from_values(parsed), None
    return None, None


def parse_cloud_api_dp(
    dp: Mapping[str, Any], read_only: bool
) -> DPDefinition | None:
    """Convert one ``{code, name?, type, values?}`` entry into a DP definition."""

    code = dp.get("code")
    if not isinstance(code, str) or not code:
        _LOGGER.debug("Skipping cloud DP without a code: %s", dp)
        return None
    raw_type = dp.get("type")
    dp_type = normalize_type(raw_type)
    dp_range, enum_values = parse_values(dp.get("values"), dp_type)
    try:
        return DPDefinition(
            dp_id=code,
            name=dp.get("name") or humanize_code(code),
            property=classify(code, raw_type),
            type=dp_type,
            range=dp_range,
            enum_values=enum_values,
            read_only=read_only,
        )
    except ValidationError as err:
        _LOGGER.error("Failed to parse cloud API DP %s: %s", code, err)
        return None
