"""Vendor type tag normalisation."""

from __future__ import annotations

from .models import CanonicalType

_TYPE_ALIASES: tuple[tuple[frozenset[str], CanonicalType], ...] = (
    (frozenset({"bool", "boolean"}), CanonicalType.BOOLEAN),
    (frozenset({"value", "integer", "float", "number"}), CanonicalType.NUMBER),
    (frozenset({"enum"}), CanonicalType.ENUM),
    (frozenset({"raw", "json", "object"}), CanonicalType.OBJECT),
)


def normalize_type(raw_type: str | CanonicalType | None) -> CanonicalType:
    """Map a vendor type tag onto a canonical type, defaulting to string."""

    if isinstance(raw_type, CanonicalType):
        return raw_type
    tag = (raw_type or "").strip().lower()
    for aliases, canonical in _TYPE_ALIASES:
        if tag in aliases:
            return canonical
    return CanonicalType.STRING
