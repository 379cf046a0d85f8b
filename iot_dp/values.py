"""Bidirectional coercion between vendor values and canonical values."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from .catalog import RangeRemap
from .const import ANY_VENDOR
from .models import CanonicalType, DPDefinition

_LOGGER = logging.getLogger(__name__)

_TRUTHY_STRINGS = frozenset({"true", "1", "on"})


class ConversionError(ValueError):
    """Raised when a canonical value cannot be expressed for a DP."""


@dataclass(frozen=True, slots=True)
class BoolValue:
    """Boolean DP value."""

    value: bool


@dataclass(frozen=True, slots=True)
class NumberValue:
    """Numeric DP value."""

    value: int | float


@dataclass(frozen=True, slots=True)
class StringValue:
    """Free-form string DP value."""

    value: str


@dataclass(frozen=True, slots=True)
class EnumValue:
    """Enumerated DP value."""

    value: str


@dataclass(frozen=True, slots=True)
class ObjectValue:
    """Structured or otherwise untyped DP value, kept as received."""

    value: Any


DPValue = BoolValue | NumberValue | StringValue | EnumValue | ObjectValue


def round_half_up(value: float) -> int:
    """Round halves towards positive infinity."""

    return math.floor(value + 0.5)


def _finite(number: int | float) -> int | float | None:
    """Return ``number`` unless it is NaN, infinite or too large for a float."""

    try:
        return number if math.isfinite(number) else None
    except OverflowError:
        return None


def to_number(raw: Any) -> int | float | None:
    """Cast ``raw`` to a finite number, returning None when it is not numeric."""

    if isinstance(raw, bool):
        return int(raw)
    if isinstance(raw, int | float):
        return _finite(raw)
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return 0
        try:
            return _finite(int(text))
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
        return _finite(number)
    return None


def to_bool(raw: Any) -> bool | None:
    """Coerce scalars to a boolean; containers and None are rejected."""

    if isinstance(raw, bool):
        return raw
    if isinstance(raw, int | float):
        return raw != 0
    if isinstance(raw, str):
        return raw.lower() in _TRUTHY_STRINGS
    return None


class ValueConverter:
    """Convert DP values using the remap table supplied by the catalog."""

    def __init__(self, remaps: Iterable[RangeRemap] = ()) -> None:
        """Store remaps, vendor-specific entries ahead of wildcard entries."""

        ordered = list(remaps)
        self._remaps: tuple[RangeRemap, ...] = tuple(
            sorted(ordered, key=lambda remap: remap.vendor == ANY_VENDOR)
        )

    @property
    def remaps(self) -> tuple[RangeRemap, ...]:
        """Return the active remap table."""

        return self._remaps

    def find_remap(self, dp: DPDefinition, vendor: str | None) -> RangeRemap | None:
        """Return the remap applying to ``dp`` for ``vendor``, if any."""

        if dp.type is not CanonicalType.NUMBER or dp.range is None:
            return None
        return next(
            (
                remap
                for remap in self._remaps
                if remap.matches(vendor, dp.property, dp.range.max)
            ),
            None,
        )

    def to_canonical(
        self, raw: Any, dp: DPDefinition, vendor: str | None = None
    ) -> DPValue:
        """Tag ``raw`` with the canonical value type of ``dp``."""

        if dp.type is CanonicalType.BOOLEAN:
            coerced = to_bool(raw)
            return BoolValue(bool(raw) if coerced is None else coerced)
        if dp.type is CanonicalType.NUMBER:
            number = to_number(raw)
            if number is None:
                _LOGGER.debug("Non-numeric value %r for DP %s", raw, dp.dp_id)
                return ObjectValue(raw)
            remap = self.find_remap(dp, vendor)
            if remap is not None:
                number = round_half_up(
                    number / remap.device_max * remap.canonical_max
                )
            return NumberValue(number)
        if dp.type is CanonicalType.ENUM:
            return EnumValue(_stringify(raw))
        if dp.type is CanonicalType.STRING and isinstance(raw, str):
            return StringValue(raw)
        return ObjectValue(raw)

    def convert(self, raw: Any, dp: DPDefinition, vendor: str | None = None) -> Any:
        """Convert a raw vendor value into its canonical form."""

        return self.to_canonical(raw, dp, vendor).value

    def to_vendor(
        self, value: Any, dp: DPDefinition, vendor: str | None = None
    ) -> DPValue:
        """Tag a canonical ``value`` for transmission to ``dp``."""

        if value is None:
            raise ConversionError(f"No value supplied for DP {dp.dp_id}")
        if dp.type is CanonicalType.BOOLEAN:
            coerced = to_bool(value)
            if coerced is None:
                raise ConversionError(f"{value!r} is not a boolean")
            return BoolValue(coerced)
        if dp.type is CanonicalType.NUMBER:
            number = to_number(value)
            if number is None:
                raise ConversionError(f"{value!r} is not numeric")
            remap = self.find_remap(dp, vendor)
            if remap is not None:
                number = round_half_up(
                    number / remap.canonical_max * remap.device_max
                )
            return NumberValue(number)
        if dp.type is CanonicalType.ENUM:
            return EnumValue(_stringify(value))
        if dp.type is CanonicalType.STRING and isinstance(value, str):
            return StringValue(value)
        return ObjectValue(value)

    def deconvert(self, value: Any, dp: DPDefinition, vendor: str | None = None) -> Any:
        """Convert a canonical value into the vendor's representation."""

        return self.to_vendor(value, dp, vendor).value


def _stringify(raw: Any) -> str:
    if isinstance(raw, bool):
        return "true" if raw else "false"
    if isinstance(raw, list | tuple):
        return ",".join(str(item) for item in raw)
    return str(raw)

