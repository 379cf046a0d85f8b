"""Tests for raw state normalization."""

from __future__ import annotations

import pytest

from iot_dp.normalizer import StateNormalizer
from iot_dp.registry import CapabilityRegistry


@pytest.fixture
def registry(store, catalog) -> CapabilityRegistry:
    return CapabilityRegistry(store, catalog)


@pytest.fixture
def normalizer(store, converter) -> StateNormalizer:
    return StateNormalizer(store, converter)


def test_registered_device_maps_dps_to_properties(registry, normalizer):
    registry.register_from_predefined("ac", "tuya", "kt")

    state = normalizer.normalize_state(
        "ac", "tuya", {"1": True, "2": "24", "4": "cold", "99": "ignored"}
    )

    assert state.properties == {"power": True, "temperature": 24, "mode": "cold"}
    assert state.raw_state["99"] == "ignored"
    assert state.online is True
    assert state.last_update.tzinfo is not None


def test_native_ids_are_found_when_string_keys_are_absent(registry, normalizer):
    registry.register_from_predefined("ac", "tuya", "kt")

    state = normalizer.normalize_state("ac", "tuya", {1: False, 104: 1})

    assert state.properties == {"power": False, "swing": True}


def test_string_keys_win_over_native_ids(registry, normalizer):
    registry.register_from_predefined("ac", "tuya", "kt")

    state = normalizer.normalize_state("ac", "tuya", {"1": True, 1: False})

    assert state.properties == {"power": True}


def test_present_none_values_are_still_converted(registry, normalizer):
    registry.register_from_predefined("ac", "tuya", "kt")

    state = normalizer.normalize_state("ac", "tuya", {"1": None})

    assert state.properties == {"power": False}


def test_brightness_is_rescaled_for_vendor_scales(registry, normalizer):
    registry.register_from_predefined("bulb", "philips", "light")

    state = normalizer.normalize_state("bulb", "philips", {"on": True, "bri": 127})

    assert state.properties == {"power": True, "brightness": 50}


def test_later_dps_overwrite_shared_properties(registry, normalizer):
    """The last DP mapped to a property determines its value."""

    registry.register_from_predefined("plug", "tuya", "cz")

    state = normalizer.normalize_state("plug", "tuya", {"1": True, "2": False})

    assert state.properties == {"power": False}


def test_unregistered_device_passes_state_through(normalizer):
    raw = {"1": True, "nested": {"a": [1, 2]}}

    state = normalizer.normalize_state("ghost", "tuya", raw)

    assert state.properties == raw
    assert state.raw_state == raw


def test_state_is_stored_and_replaced(normalizer):
    normalizer.normalize_state("ghost", "tuya", {"a": 1})
    normalizer.normalize_state("ghost", "tuya", {"b": 2})

    assert normalizer.get_state("ghost").properties == {"b": 2}
    assert normalizer.get_state("other") is None


def test_returned_state_is_detached_from_the_store(normalizer):
    """Mutating a returned snapshot leaves the stored one untouched."""

    state = normalizer.normalize_state("ghost", "tuya", {"a": 1})
    state.properties["a"] = 999
    state.raw_state["a"] = 999

    stored = normalizer.get_state("ghost")
    assert stored.properties == {"a": 1}
    assert stored.raw_state == {"a": 1}


def test_clear_after_many_devices_releases_locks(store, normalizer):
    for index in range(100):
        normalizer.normalize_state(f"dev{index}", "tuya", {"1": index})

    store.clear()

    assert store._locks == {}
    assert normalizer.get_state("dev0") is None


def test_state_payload_uses_camel_case(normalizer):
    state = normalizer.normalize_state("ghost", "tuya", {"1": None})

    payload = state.as_payload()

    assert payload["deviceId"] == "ghost"
    assert payload["rawState"] == {"1": None}
    assert payload["properties"] == {"1": None}
    assert isinstance(payload["lastUpdate"], str)
