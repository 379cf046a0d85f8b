"""Tests for engine configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from iot_dp.config import EngineConfig, InvalidConfig, load_config
from iot_dp.models import NormalizedPropertyType

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def test_defaults_when_empty():
    config = EngineConfig.from_dict(None)

    assert config.catalog_path is None
    assert config.envelope_vendors == ("tuya",)
    assert config.remaps == ()


def test_from_dict_normalises_vendors_and_remaps():
    config = EngineConfig.from_dict(
        {
            "envelope_vendors": ["Tuya", "ACME"],
            "remaps": [{"vendor": "ACME", "property": "brightness", "device_max": 255}],
        }
    )

    assert config.envelope_vendors == ("tuya", "acme")
    remap = config.remaps[0]
    assert remap.vendor == "acme"
    assert remap.property is NormalizedPropertyType.BRIGHTNESS
    assert remap.canonical_max == 100


@pytest.mark.parametrize(
    "data",
    [
        {"unknown": True},
        {"envelope_vendors": "tuya"},
        {"remaps": [{"property": "brightness"}]},
        {"remaps": [{"property": "glow", "device_max": 10}]},
        {"remaps": [{"property": "brightness", "device_max": 0}]},
    ],
)
def test_invalid_config_is_rejected(data):
    with pytest.raises(InvalidConfig):
        EngineConfig.from_dict(data)


def test_load_config_resolves_relative_catalog_path(tmp_path):
    path = tmp_path / "engine.yaml"
    path.write_text(
        "catalog_path: data/catalog.json\nenvelope_vendors: [tuya, shelly]\n",
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.catalog_path == tmp_path / "data" / "catalog.json"
    assert config.envelope_vendors == ("tuya", "shelly")


def test_load_config_empty_file_uses_defaults(tmp_path):
    path = tmp_path / "engine.yaml"
    path.write_text("", encoding="utf-8")

    assert load_config(path) == EngineConfig()


def test_load_config_rejects_non_mapping(tmp_path):
    path = tmp_path / "engine.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(InvalidConfig, match="must contain a mapping"):
        load_config(path)


def test_load_config_rejects_bad_yaml_and_missing_files(tmp_path):
    path = tmp_path / "engine.yaml"
    path.write_text("remaps: [unclosed\n", encoding="utf-8")

    with pytest.raises(InvalidConfig):
        load_config(path)
    with pytest.raises(InvalidConfig):
        load_config(tmp_path / "missing.yaml")


def test_example_config_is_valid():
    """The shipped example configuration loads against the bundled catalog."""

    config = load_config(PROJECT_ROOT / "config.example.yaml")

    assert config.catalog_path.is_file()
    assert config.remaps[0].device_max == 255
