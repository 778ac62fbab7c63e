"""
Shared pytest fixtures for the water-radar test suite.

Provides:
  - ``make_water``: factory building a ``Water`` with sensible defaults.
  - Seed-like waters (Evian, Borjomi, Volvic, Baikal, partial Acqua Panna,
    San Pellegrino) built directly, independent of the seed JSON file.
"""

from __future__ import annotations

from typing import Callable

import pytest

from water_radar.models.water import Water
from water_radar.taxonomy.water_taxonomy import ConfidenceLevel, WaterGroup


def build_water(**overrides) -> Water:
    """Build a ``Water`` from keyword overrides (id/brand default to 'w1'/'W1')."""
    fields = {"id": "w1", "brand_name": "W1"}
    fields.update(overrides)
    return Water(**fields)


@pytest.fixture
def make_water() -> Callable[..., Water]:
    return build_water


@pytest.fixture
def evian() -> Water:
    return build_water(
        id="evian", brand_name="Evian", country_code="FR", group=WaterGroup.EUROPE,
        ph=7.2, tds_mg_l=345, ca_mg_l=80, mg_mg_l=26, na_mg_l=6.5, k_mg_l=1.0,
        cl_mg_l=10, sparkling=False, confidence_level=ConfidenceLevel.HIGH,
    )


@pytest.fixture
def san_pellegrino() -> Water:
    return build_water(
        id="sanpellegrino", brand_name="San Pellegrino", country_code="IT",
        ph=7.8, tds_mg_l=915, ca_mg_l=160, mg_mg_l=50, na_mg_l=33, k_mg_l=2.0,
        cl_mg_l=49, sparkling=True, confidence_level=ConfidenceLevel.HIGH,
    )


@pytest.fixture
def borjomi() -> Water:
    return build_water(
        id="borjomi", brand_name="Borjomi", country_code="GE",
        group=WaterGroup.THERAPEUTIC, ph=6.6, tds_mg_l=5500, ca_mg_l=120,
        mg_mg_l=50, na_mg_l=1200, k_mg_l=35, cl_mg_l=600, sparkling=True,
        confidence_level=ConfidenceLevel.HIGH,
    )


@pytest.fixture
def volvic() -> Water:
    return build_water(
        id="volvic", brand_name="Volvic", country_code="FR", ph=7.0,
        tds_mg_l=130, ca_mg_l=12, mg_mg_l=8, na_mg_l=12, k_mg_l=6, cl_mg_l=15,
        sparkling=False, confidence_level=ConfidenceLevel.MEDIUM,
    )


@pytest.fixture
def baikal() -> Water:
    return build_water(
        id="baikal", brand_name="Baikal", country_code="RU", group=WaterGroup.RUSSIA,
        ph=7.2, tds_mg_l=120, ca_mg_l=25, mg_mg_l=8, na_mg_l=4, k_mg_l=1,
        cl_mg_l=5, sparkling=False, confidence_level=ConfidenceLevel.LOW,
    )


@pytest.fixture
def partial() -> Water:
    """Only pH and TDS known — lacks the minimum metrics."""
    return build_water(
        id="acqua_panna_partial", brand_name="Acqua Panna (partial)",
        country_code="IT", ph=8.0, tds_mg_l=190, sparkling=False,
    )
