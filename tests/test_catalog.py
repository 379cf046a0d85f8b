"""Tests for the bundled vendor catalog and its loader."""

from __future__ import annotations

import json

import pytest

from iot_dp.catalog import CatalogError, RangeRemap, load_catalog
from iot_dp.models import CanonicalType, NormalizedPropertyType


def test_catalog_lists_every_bundled_vendor(catalog):
    """All supported vendors ship with the package."""

    assert set(catalog.vendors()) == {
        "tuya",
        "midea",
        "philips",
        "panasonic",
        "esp",
        "shelly",
        "aqara",
        "knx",
    }
    assert set(catalog.categories("tuya")) == {
        "kt",
        "cz",
        "dj",
        "cl",
        "wsdcg",
        "pir",
        "mcs",
        "ms",
    }


def test_catalog_lookup_is_vendor_case_insensitive(catalog):
    entry = catalog.get("TUYA", "kt")

    assert entry is not None
    assert entry.name == "Air Conditioner"
    assert entry.dps[0].dp_id == 1
    assert entry.dps[0].property is NormalizedPropertyType.POWER
    assert entry.dps[0].type is CanonicalType.BOOLEAN


def test_catalog_lookup_misses_return_none(catalog):
    assert catalog.get("unknownvendor", "kt") is None
    assert catalog.get("tuya", "unknowncat") is None
    assert catalog.categories("unknownvendor") == []


def test_catalog_preserves_string_dp_ids(catalog):
    """Hue-style vendors address DPs by name."""

    entry = catalog.get("philips", "light")

    assert [dp.dp_id for dp in entry.dps][:2] == ["on", "bri"]
    assert entry.dps[1].range.max == 254


def test_catalog_entries_have_unique_dp_ids(catalog):
    for vendor in catalog.vendors():
        for category in catalog.categories(vendor):
            ids = [dp.dp_id for dp in catalog.get(vendor, category).dps]
            assert len(ids) == len(set(ids)), (vendor, category)


def test_catalog_ships_brightness_remaps(catalog):
    """Vendor brightness scales are declared as data, not code."""

    assert {(r.property, r.device_max) for r in catalog.remaps} == {
        (NormalizedPropertyType.BRIGHTNESS, 254),
        (NormalizedPropertyType.BRIGHTNESS, 1000),
    }


def test_range_remap_matching():
    wildcard = RangeRemap(property="brightness", device_max=254)
    scoped = RangeRemap(vendor="Acme", property="brightness", device_max=255)

    assert wildcard.matches("anyone", NormalizedPropertyType.BRIGHTNESS, 254)
    assert not wildcard.matches("anyone", NormalizedPropertyType.BRIGHTNESS, 100)
    assert not wildcard.matches("anyone", NormalizedPropertyType.POSITION, 254)
    assert scoped.matches("acme", NormalizedPropertyType.BRIGHTNESS, 255)
    assert not scoped.matches("other", NormalizedPropertyType.BRIGHTNESS, 255)
    assert not scoped.matches(None, NormalizedPropertyType.BRIGHTNESS, 255)


def test_load_catalog_rejects_missing_file(tmp_path):
    with pytest.raises(CatalogError):
        load_catalog(tmp_path / "missing.json")


def test_load_catalog_rejects_invalid_json(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(CatalogError):
        load_catalog(path)


def test_load_catalog_rejects_duplicate_dp_ids(tmp_path):
    """A category repeating a DP id is a catalog authoring error."""

    path = tmp_path / "catalog.json"
    dp = {"dpId": 1, "name": "Power", "property": "power", "type": "boolean"}
    path.write_text(
        json.dumps(
            {
                "vendors": {
                    "acme": {"x": {"category": "x", "name": "X", "dps": [dp, dp]}}
                }
            }
        ),
        encoding="utf-8",
    )

    with pytest.raises(CatalogError, match="repeats DP ids"):
        load_catalog(path)


def test_load_catalog_accepts_custom_file(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(
        json.dumps(
            {
                "remaps": [
                    {"vendor": "acme", "property": "brightness", "device_max": 255}
                ],
                "vendors": {"acme": {"bulb": {"category": "bulb", "name": "Bulb"}}},
            }
        ),
        encoding="utf-8",
    )

    loaded = load_catalog(path)

    assert loaded.vendors() == ["acme"]
    assert loaded.get("acme", "bulb").dps == ()
    assert loaded.remaps[0].canonical_max == 100
