"""
Import parser for water tables in CSV or JSON form.

Both parsers are tolerant: a row/item that lacks ``id`` or ``brand_name`` is
dropped, and a value that cannot be coerced becomes unknown.  Only a
document-level structural failure raises :class:`ImportParseError`.

CSV
---
Comma delimited with a header row.  Quoted fields may contain commas, line
breaks and doubled quotes (``""``).  Header matching is case-insensitive and
the first matching column wins.  Blank lines are ignored.

JSON
----
Either a bare array, or an object wrapping the array under ``waters``,
``data`` or ``items``.  Other valid JSON yields no records.

Column / key synonyms (first present wins)
------------------------------------------
  id                → id, slug, code
  brand_name        → brand_name, name, brand, brandName
  country_code      → country_code, countryCode, country
  flag_emoji        → flag_emoji, flag
  group             → group, region
  source_type       → source_type, sourceType, source
  confidence_level  → confidence_level, confidenceLevel, confidence
  sparkling         → sparkling, gas
  <metric>_mg_l     → <metric>_mg_l, <metric>   (ph → ph)

For CSV metric columns the short synonym is also used when the long column
is present but empty or unparsable.
"""

from __future__ import annotations

import csv
import io
import json
import logging
from typing import Any, Callable, Iterable, Optional, Sequence

from water_radar.models.water import Water
from water_radar.normalize import normalize_water, parse_num_loose
from water_radar.taxonomy.water_taxonomy import MetricKey

logger = logging.getLogger(__name__)

# Largest single CSV cell accepted (the csv module default is 128 KiB).
CSV_FIELD_LIMIT = 2**31 - 1

_BOM = "\ufeff"

JSON_WRAPPER_KEYS: tuple[str, ...] = ("waters", "data", "items")

FIELD_SYNONYMS: dict[str, tuple[str, ...]] = {
    "id":               ("id", "slug", "code"),
    "brand_name":       ("brand_name", "name", "brand", "brandName"),
    "country_code":     ("country_code", "countryCode", "country"),
    "flag_emoji":       ("flag_emoji", "flag"),
    "group":            ("group", "region"),
    "source_type":      ("source_type", "sourceType", "source"),
    "confidence_level": ("confidence_level", "confidenceLevel", "confidence"),
    "notes":            ("notes",),
    "sparkling":        ("sparkling", "gas"),
}

METRIC_SYNONYMS: dict[str, tuple[str, ...]] = {
    key.field_name: (
        (key.field_name,) if key.field_name == key.value else (key.field_name, key.value)
    )
    for key in MetricKey
}


def _strip_bom(text: str) -> str:
    return text.removeprefix(_BOM)


class ImportParseError(ValueError):
    """Raised when a whole import document cannot be parsed."""


# ── CSV ───────────────────────────────────────────────────────────────────────

def parse_csv(text: str) -> list[Water]:
    """Parse CSV text into canonical waters.

    Args:
        text: Decoded CSV document, header row first.

    Returns:
        Normalized waters in row order.  Empty when the document has no
        data rows.

    Raises:
        ImportParseError: If the CSV framing itself cannot be read.
    """
    _raise_field_limit()
    try:
        rows = [
            row for row in csv.reader(io.StringIO(_strip_bom(text))) if _has_content(row)
        ]
    except csv.Error as exc:
        raise ImportParseError(f"CSV parse failed: {exc}") from exc

    if len(rows) < 2:
        logger.info("CSV import has no data rows")
        return []

    headers = [h.strip().lower() for h in rows[0]]

    def column(row: list[str], name: str) -> str:
        try:
            idx = headers.index(name.lower())
        except ValueError:
            return ""
        return row[idx].strip() if idx < len(row) else ""

    def first(row: list[str], names: Iterable[str]) -> str:
        for name in names:
            v = column(row, name)
            if v:
                return v
        return ""

    waters: list[Water] = []
    for line_no, row in enumerate(rows[1:], start=2):
        raw: dict[str, Any] = {
            field_name: first(row, names) for field_name, names in FIELD_SYNONYMS.items()
        }
        for field_name, names in METRIC_SYNONYMS.items():
            raw[field_name] = _first_number(column(row, n) for n in names)

        water = normalize_water(raw)
        if water is None:
            logger.debug("CSV row %d dropped: missing id or brand_name", line_no)
            continue
        waters.append(water)

    logger.info("Parsed %d water(s) from %d CSV row(s)", len(waters), len(rows) - 1)
    return waters


def _raise_field_limit() -> None:
    if csv.field_size_limit() < CSV_FIELD_LIMIT:
        csv.field_size_limit(CSV_FIELD_LIMIT)


def _has_content(row: list[str]) -> bool:
    return any(cell.strip() for cell in row)


def _first_number(values: Iterable[str]) -> Optional[float]:
    for v in values:
        n = parse_num_loose(v)
        if n is not None:
            return n
    return None


# ── JSON ──────────────────────────────────────────────────────────────────────

def parse_json(text: str) -> list[Water]:
    """Parse JSON text into canonical waters.

    Args:
        text: Decoded JSON document.

    Returns:
        Normalized waters in item order.

    Raises:
        ImportParseError: If ``text`` is not valid JSON or cannot be decoded
            (nesting too deep, oversized integer literal).
    """
    try:
        raw = json.loads(_strip_bom(text))
    except (ValueError, RecursionError) as exc:
        raise ImportParseError(f"JSON parse error: {exc}") from exc

    items = _unwrap_items(raw)

    waters: list[Water] = []
    for idx, item in enumerate(items):
        if not isinstance(item, dict):
            logger.debug("JSON item #%d dropped: not an object", idx)
            continue
        record: dict[str, Any] = {
            field_name: _first_present(item, names)
            for field_name, names in {**FIELD_SYNONYMS, **METRIC_SYNONYMS}.items()
        }
        water = normalize_water(record)
        if water is None:
            logger.debug("JSON item #%d dropped: missing id or brand_name", idx)
            continue
        waters.append(water)

    logger.info("Parsed %d water(s) from %d JSON item(s)", len(waters), len(items))
    return waters


def _unwrap_items(raw: Any) -> list:
    if isinstance(raw, list):
        return raw
    if isinstance(raw, dict):
        for key in JSON_WRAPPER_KEYS:
            if isinstance(raw.get(key), list):
                return raw[key]
    return []


def _first_present(item: dict[str, Any], names: Sequence[str]) -> Any:
    for name in names:
        if item.get(name) is not None:
            return item[name]
    return None


# ── Auto-detect ───────────────────────────────────────────────────────────────

def parse_import_text(text: str) -> list[Water]:
    """Parse pasted/uploaded text, choosing JSON or CSV by its first character.

    Raises:
        ImportParseError: If the text is blank, cannot be parsed, or yields
            no usable records.
    """
    s = _strip_bom(text).strip()
    if not s:
        raise ImportParseError("Import text is empty.")

    parser: Callable[[str], list[Water]] = (
        parse_json if s.startswith(("[", "{")) else parse_csv
    )
    waters = parser(s)
    if not waters:
        raise ImportParseError("No usable water records found (need id and brand_name).")
    return waters


# ── Merge ─────────────────────────────────────────────────────────────────────

def merge_by_id(base: Iterable[Water], incoming: Iterable[Water]) -> list[Water]:
    """Merge ``incoming`` into ``base`` by ``id``; the incoming record wins.

    Records are replaced whole, never field-merged.  Base order is kept,
    replaced records stay in their original position, new ids are appended.
    """
    merged: dict[str, Water] = {}
    for w in base:
        merged[w.id] = w
    replaced = 0
    for w in incoming:
        if w.id in merged:
            replaced += 1
        merged[w.id] = w
    logger.info("Merged dataset: %d water(s), %d replaced", len(merged), replaced)
    return list(merged.values())
