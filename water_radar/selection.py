"""
Catalog filtering and the compare selection.

The compare selection is an ordered tuple of water ids capped at
``DEFAULT_MAX_COMPARE``; it is resolved against the current dataset on every
read so that an import replacing a record is picked up immediately.
"""

from __future__ import annotations

import unicodedata
from typing import Iterable, Optional, Sequence

from water_radar.models.water import Water
from water_radar.taxonomy.water_taxonomy import ConfidenceLevel, WaterGroup

DEFAULT_MAX_COMPARE = 5
DEFAULT_TDS_MAX = 2000.0


def filter_catalog(
    waters: Iterable[Water],
    query: str = "",
    group: Optional[WaterGroup] = None,
    only_verified: bool = False,
    tds_max: float = DEFAULT_TDS_MAX,
) -> list[Water]:
    """Filter the catalog the way the picker does, sorted by brand name.

    Args:
        waters:        Full dataset.
        query:         Case-insensitive substring of ``brand_name``.
        group:         Keep only this group; ``None`` keeps all.
        only_verified: Keep only ``confidence_level == high``.
        tds_max:       Upper TDS bound; unknown TDS counts as 0.
    """
    q = query.strip().casefold()
    out = [
        w for w in waters
        if (group is None or w.group == group)
        and (not only_verified or w.confidence_level == ConfidenceLevel.HIGH)
        and (w.tds_mg_l or 0.0) <= tds_max
        and (not q or q in w.brand_name.casefold())
    ]
    return sorted(out, key=lambda w: (unicodedata.normalize("NFKC", w.brand_name).casefold(), w.brand_name))


def toggle_selection(
    selected_ids: Sequence[str],
    water_id: str,
    limit: int = DEFAULT_MAX_COMPARE,
) -> tuple[str, ...]:
    """Add ``water_id`` if absent (ignored once ``limit`` is reached), else remove it."""
    if water_id in selected_ids:
        return tuple(x for x in selected_ids if x != water_id)
    if len(selected_ids) >= limit:
        return tuple(selected_ids)
    return (*selected_ids, water_id)


def resolve_selection(waters: Iterable[Water], selected_ids: Sequence[str]) -> list[Water]:
    """Look up ``selected_ids`` in ``waters``; keeps selection order, drops unknown ids."""
    by_id = {w.id: w for w in waters}
    return [by_id[i] for i in selected_ids if i in by_id]
