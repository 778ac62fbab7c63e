"""
Usage classifier.

Decision order (first match wins)
---------------------------------
    1. THERAPEUTIC : group == Therapeutic
    2. THERAPEUTIC : TDS >= 1500  OR  Na >= 200
    3. ROTATE      : TDS >= 500   OR  Na >= 50
    4. UNKNOWN     : TDS and Na both unknown
    5. DAILY       : everything else

An unknown value never triggers a threshold in steps 2–3.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from water_radar.taxonomy.water_taxonomy import Category, WaterGroup

if TYPE_CHECKING:
    from water_radar.models.water import Water

THERAPEUTIC_TDS_MG_L = 1500.0
THERAPEUTIC_NA_MG_L = 200.0
ROTATE_TDS_MG_L = 500.0
ROTATE_NA_MG_L = 50.0


def _at_least(value: Optional[float], threshold: float) -> bool:
    return value is not None and value >= threshold


def classify(water: "Water") -> Category:
    """Return the usage category for ``water``.  Total; never raises."""
    tds = water.tds_mg_l
    na = water.na_mg_l

    if water.group == WaterGroup.THERAPEUTIC:
        return Category.THERAPEUTIC
    if _at_least(tds, THERAPEUTIC_TDS_MG_L) or _at_least(na, THERAPEUTIC_NA_MG_L):
        return Category.THERAPEUTIC
    if _at_least(tds, ROTATE_TDS_MG_L) or _at_least(na, ROTATE_NA_MG_L):
        return Category.ROTATE
    if tds is None and na is None:
        return Category.UNKNOWN
    return Category.DAILY
