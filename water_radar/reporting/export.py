"""
Export helpers: canonical CSV/JSON text for a dataset.

Exports are re-importable by ``ingestion.importer`` without loss of ``id``,
brand or metrics.  The derived ``category`` column is written for human
readers and ignored on import.

The text builders return ``str``; :func:`write_export` is the only function
that touches the filesystem.
"""

from __future__ import annotations

import csv
import io
import json
from pathlib import Path
from typing import Any, Iterable

from water_radar.models.water import Water

EXPORT_COLUMNS: list[str] = [
    "id", "brand_name", "country_code", "flag_emoji", "group", "category",
    "ph", "tds_mg_l", "ca_mg_l", "mg_mg_l", "na_mg_l", "k_mg_l", "cl_mg_l",
    "sparkling", "source_type", "confidence_level", "notes",
]


def water_to_dict(water: Water) -> dict[str, Any]:
    """Flat JSON-ready dict with enum values as strings."""
    row = water.model_dump(mode="json")
    row["category"] = water.category.value
    return {col: row.get(col) for col in EXPORT_COLUMNS}


def export_waters_json(waters: Iterable[Water]) -> str:
    """Pretty-printed ``{"waters": [...]}`` document."""
    payload = {"waters": [water_to_dict(w) for w in waters]}
    return json.dumps(payload, indent=2, ensure_ascii=False)


def export_waters_csv(waters: Iterable[Water]) -> str:
    """CSV document with a header row; unknown values are empty cells."""
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=EXPORT_COLUMNS, lineterminator="\n")
    writer.writeheader()
    for w in waters:
        writer.writerow({k: _csv_cell(v) for k, v in water_to_dict(w).items()})
    return buf.getvalue()


def _csv_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def write_export(text: str, path: Path) -> Path:
    """Write export text as UTF-8 (parent dirs created if missing)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path
