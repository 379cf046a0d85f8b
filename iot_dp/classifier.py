"""Heuristic classification of vendor data points into canonical properties.

Rules are evaluated in order and the first match wins. Precedence is data:
``CLASSIFICATION_RULES`` can be inspected, and ``shadowed_rules`` reports
entries that an earlier rule always pre-empts (the numeric ``power``
rule is one of them).
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from .dp_types import normalize_type
from .models import CanonicalType, NormalizedPropertyType as P

Predicate = Callable[[str, CanonicalType | None], bool]


@dataclass(frozen=True)
class ClassificationRule:
    """One ``(predicate, result)`` entry of the classifier table."""

    name: str
    predicate: Predicate
    result: P | Callable[[str], P]
    # Names the predicate is guaranteed to accept; used for shadow analysis.
    probes: tuple[tuple[str, CanonicalType | None], ...] = ()

    def resolve(self, name: str) -> P:
        """Return the property produced for ``name``."""

        if isinstance(self.result, P):
            return self.result
        return self.result(name)


def _contains(*needles: str) -> Predicate:
    return lambda name, _type: any(needle in name for needle in needles)


def _equals(*values: str) -> Predicate:
    return lambda name, _type: name in values


def _any_of(*predicates: Predicate) -> Predicate:
    return lambda name, dp_type: any(p(name, dp_type) for p in predicates)


def _without(predicate: Predicate, *excluded: str) -> Predicate:
    return lambda name, dp_type: predicate(name, dp_type) and not any(
        needle in name for needle in excluded
    )


def _temperature_kind(name: str) -> P:
    if any(word in name for word in ("current", "indoor", "inside")):
        return P.CURRENT_TEMP
    return P.TEMPERATURE


CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(
        "power",
        _any_of(_contains("power", "switch"), _equals("on", "state")),
        P.POWER,
        probes=(("power", None), ("switch_1", None), ("on", None)),
    ),
    ClassificationRule(
        "temperature",
        _without(_contains("temp"), "color"),
        _temperature_kind,
        probes=(("temp_set", None), ("temp_current", None)),
    ),
    ClassificationRule(
        "humidity", _contains("humid"), P.HUMIDITY, probes=(("humidity", None),)
    ),
    ClassificationRule(
        "mode", _without(_contains("mode"), "swing"), P.MODE, probes=(("mode", None),)
    ),
    ClassificationRule(
        "fan_speed",
        _contains("fan", "speed"),
        P.FAN_SPEED,
        probes=(("fan_speed", None),),
    ),
    ClassificationRule(
        "swing", _contains("swing"), P.SWING, probes=(("swing", None),)
    ),
    ClassificationRule(
        "brightness",
        _any_of(_contains("bright"), _equals("bri")),
        P.BRIGHTNESS,
        probes=(("bright_value", None), ("bri", None)),
    ),
    ClassificationRule(
        "color_temp",
        _any_of(
            lambda name, _type: "color" in name and "temp" in name, _equals("ct")
        ),
        P.COLOR_TEMP,
        probes=(("colortemp", None), ("ct", None)),
    ),
    ClassificationRule(
        "color",
        _any_of(_contains("color", "hue", "sat"), _equals("xy")),
        P.COLOR,
        probes=(("colour_data_hue", None), ("xy", None)),
    ),
    ClassificationRule(
        "position",
        _contains("position", "percent"),
        P.POSITION,
        probes=(("percent_control", None),),
    ),
    ClassificationRule(
        "battery", _contains("battery"), P.BATTERY, probes=(("battery", None),)
    ),
    ClassificationRule(
        "motion",
        _contains("motion", "occupancy", "presence"),
        P.MOTION,
        probes=(("occupancy", None),),
    ),
    ClassificationRule(
        "door",
        _contains("door", "window", "contact"),
        P.DOOR,
        probes=(("contact", None),),
    ),
    ClassificationRule(
        "energy", _contains("energy"), P.ENERGY, probes=(("energy", None),)
    ),
    ClassificationRule(
        "power_consumption",
        lambda name, dp_type: name == "power" and dp_type is CanonicalType.NUMBER,
        P.POWER_CONSUMPTION,
        probes=(("power", CanonicalType.NUMBER),),
    ),
    ClassificationRule(
        "voltage", _contains("voltage"), P.VOLTAGE, probes=(("voltage", None),)
    ),
    ClassificationRule(
        "current",
        _without(_contains("current"), "temp"),
        P.CURRENT,
        probes=(("cur_current", None),),
    ),
    ClassificationRule(
        "lock", _contains("lock"), P.LOCK, probes=(("child_lock", None),)
    ),
)


def classify(
    name_or_code: str | None, dp_type: str | CanonicalType | None = None
) -> P:
    """Infer the canonical property for a DP name or code."""

    name = (name_or_code or "").lower()
    canonical_type = normalize_type(dp_type) if dp_type is not None else None
    for rule in CLASSIFICATION_RULES:
        if rule.predicate(name, canonical_type):
            return rule.resolve(name)
    return P.CUSTOM


def shadowed_rules() -> list[str]:
    """Return rules whose every probe is already claimed by an earlier rule."""

    shadowed: list[str] = []
    for index, rule in enumerate(CLASSIFICATION_RULES):
        earlier = CLASSIFICATION_RULES[:index]
        if rule.probes and all(
            any(prior.predicate(name, dp_type) for prior in earlier)
            for name, dp_type in rule.probes
        ):
            shadowed.append(rule.name)
    return shadowed


_CAMEL_BOUNDARY = re.compile(r"([A-Z])")


def humanize_code(code: str) -> str:
    """Turn ``bright_value`` or ``brightValue`` into ``Bright Value``."""

    spaced = _CAMEL_BOUNDARY.sub(r" \1", code.replace("_", " ")).strip()
    return " ".join(word[:1].upper() + word[1:].lower() for word in spaced.split(" "))
