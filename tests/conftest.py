"""Shared fixtures for the IoT DP engine tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from iot_dp.catalog import VendorCatalog, load_catalog
from iot_dp.engine import DPEngine
from iot_dp.models import CanonicalType, DPDefinition, DPRange, NormalizedPropertyType
from iot_dp.store import DeviceStore
from iot_dp.values import ValueConverter


@pytest.fixture(scope="session")
def catalog() -> VendorCatalog:
    """Return the bundled vendor catalog."""

    return load_catalog()


@pytest.fixture
def store() -> DeviceStore:
    return DeviceStore()


@pytest.fixture
def converter(catalog: VendorCatalog) -> ValueConverter:
    """Return a converter using the catalog's remap table."""

    return ValueConverter(catalog.remaps)


@pytest.fixture
def engine(catalog: VendorCatalog, store: DeviceStore) -> DPEngine:
    """Return an engine backed by a fresh store."""

    return DPEngine(catalog, store=store)


@pytest.fixture
def make_dp() -> Callable[..., DPDefinition]:
    """Build DP definitions with sensible defaults."""

    def _make(
        dp_id: int | str = 1,
        prop: str = "custom",
        dp_type: str = "string",
        *,
        max_value: Any = None,
        **kwargs: Any,
    ) -> DPDefinition:
        dp_range = kwargs.pop("range", None)
        if max_value is not None:
            dp_range = DPRange(min=0, max=max_value)
        return DPDefinition(
            dp_id=dp_id,
            name=kwargs.pop("name", f"DP {dp_id}"),
            property=NormalizedPropertyType(prop),
            type=CanonicalType(dp_type),
            range=dp_range,
            **kwargs,
        )

    return _make
