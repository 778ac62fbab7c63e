"""
Reference table: physiological daily reference values and scoring weights.

All tables are read-only views built once at import time.  Nothing in the
package rebinds them.

Reference anchors (EU daily intake)
-----------------------------------
Minerals are mg/day and are divided by ``LITERS_PER_DAY`` to get a per-liter
target.  pH and TDS are per-liter properties of the water itself and are
used as-is.

Weights
-------
``DEFAULT_WEIGHTS`` apply to every profile.  ``PROFILE_OVERLAYS`` overwrite a
subset per profile; unspecified metrics keep the default.  Overlays do not
stack: exactly one profile is active at a time.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from water_radar.taxonomy.water_taxonomy import MetricKey, Profile

LITERS_PER_DAY = 2

DAILY_REFERENCE: Mapping[MetricKey, float] = MappingProxyType({
    MetricKey.CA:  800.0,
    MetricKey.MG:  375.0,
    MetricKey.K:   2000.0,
    MetricKey.NA:  1500.0,
    MetricKey.CL:  800.0,
    MetricKey.PH:  7.5,
    MetricKey.TDS: 150.0,
})

# Metrics whose reference is already per liter (not divided by LITERS_PER_DAY).
PER_LITER_METRICS: frozenset[MetricKey] = frozenset({MetricKey.PH, MetricKey.TDS})

DEFAULT_WEIGHTS: Mapping[MetricKey, float] = MappingProxyType({
    MetricKey.CA:  1.0,
    MetricKey.MG:  1.0,
    MetricKey.K:   0.8,
    MetricKey.NA:  1.2,
    MetricKey.CL:  1.0,
    MetricKey.PH:  0.4,
    MetricKey.TDS: 0.6,
})

PROFILE_OVERLAYS: Mapping[Profile, Mapping[MetricKey, float]] = MappingProxyType({
    Profile.EVERYDAY:  MappingProxyType({}),
    Profile.PRESSURE:  MappingProxyType({MetricKey.NA: 1.8, MetricKey.CL: 1.4}),
    Profile.SPORT:     MappingProxyType({
        MetricKey.MG: 1.2, MetricKey.NA: 0.9, MetricKey.K: 1.0,
    }),
    Profile.KID:       MappingProxyType({MetricKey.NA: 2.0, MetricKey.TDS: 1.0}),
    Profile.SENSITIVE: MappingProxyType({MetricKey.PH: 0.6, MetricKey.TDS: 0.8}),
})

# Below this absolute distance from the TDS reference, TDS deviation is zero.
TDS_DEAD_ZONE_MG_L = 150.0

# Minimum-metrics set: all six must be known for ranking precedence.
MINIMUM_METRICS: tuple[MetricKey, ...] = (
    MetricKey.PH, MetricKey.TDS, MetricKey.CA,
    MetricKey.MG, MetricKey.NA, MetricKey.CL,
)


def per_liter_reference(key: MetricKey) -> float:
    """Reference value for one liter of water."""
    ref = DAILY_REFERENCE[key]
    if key in PER_LITER_METRICS:
        return ref
    return ref / LITERS_PER_DAY


def resolve_weights(profile: Profile) -> dict[MetricKey, float]:
    """Default weights with the profile's overlay applied."""
    weights = dict(DEFAULT_WEIGHTS)
    weights.update(PROFILE_OVERLAYS[Profile(profile)])
    return weights
