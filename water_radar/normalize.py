"""
Normalizer: loosely typed input → canonical :class:`Water`.

Input comes from spreadsheets, label scrapes and hand-written JSON, so every
field is tolerated in whatever shape it arrives:

Numbers (metrics)
  ``7.2``, ``"7.2"``, ``" 7,2 "`` → 7.2.  Empty, non-numeric or non-finite
  values become ``None`` (unknown), never 0 and never an error.

Booleans (sparkling)
  true/1/yes/y/да  → True
  false/0/no/n/нет → False
  anything else    → None

Enums (group, source_type, confidence_level)
  Case-insensitive, with aliases from ``taxonomy.water_taxonomy.ALIASES``.
  Unrecognized values fall back to the field default.

Identity
  ``id`` and ``brand_name`` are required.  A record lacking either is
  rejected: :func:`normalize_water` returns ``None``.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Mapping, Optional

from water_radar.models.water import Water
from water_radar.taxonomy.water_taxonomy import (
    ConfidenceLevel,
    MetricKey,
    SourceType,
    WaterGroup,
    lookup_enum,
)

logger = logging.getLogger(__name__)

GLOBE_FLAG = "\U0001F30D"

TRUTHY_TOKENS = frozenset({"1", "true", "yes", "y", "да"})
FALSY_TOKENS = frozenset({"0", "false", "no", "n", "нет"})

_COUNTRY_CODE_RE = re.compile(r"^[A-Z]{2}$")
_REGIONAL_INDICATOR_A = 0x1F1E6

METRIC_FIELDS: tuple[str, ...] = tuple(key.field_name for key in MetricKey)


def country_flag(code: Optional[str]) -> str:
    """Flag emoji for a 2-letter country code; globe for anything else."""
    cc = (code or "").strip().upper()
    if not _COUNTRY_CODE_RE.match(cc):
        return GLOBE_FLAG
    return "".join(chr(_REGIONAL_INDICATOR_A + ord(ch) - ord("A")) for ch in cc)


def parse_num_loose(value: Any) -> Optional[float]:
    """Parse a number from heterogeneous input; ``None`` when not a number."""
    if value is None or isinstance(value, bool):
        return None
    s = str(value).strip().replace(",", ".", 1)
    if not s or "_" in s:
        return None
    try:
        n = float(s)
    except ValueError:
        return None
    return n if math.isfinite(n) else None


def to_bool_loose(value: Any) -> Optional[bool]:
    """Parse a boolean-like token; ``None`` when not recognized."""
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    s = str(value).strip().lower()
    if s in TRUTHY_TOKENS:
        return True
    if s in FALSY_TOKENS:
        return False
    return None


def _text(value: Any) -> Optional[str]:
    """Stripped string, or ``None`` when absent/blank."""
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def normalize_water(raw: Mapping[str, Any]) -> Optional[Water]:
    """Build a canonical :class:`Water` from a partial record.

    Args:
        raw: Mapping keyed by canonical field names (``id``, ``brand_name``,
            ``tds_mg_l`` …).  Values may be strings, numbers, booleans or
            ``None``.  Unknown keys are ignored; ``category`` is never read.

    Returns:
        A ``Water``, or ``None`` if ``id`` or ``brand_name`` is missing.
    """
    water_id = _text(raw.get("id"))
    brand = _text(raw.get("brand_name"))
    if not water_id or not brand:
        logger.debug("Rejected record without id/brand_name: id=%r brand=%r", water_id, brand)
        return None

    country_code = _text(raw.get("country_code"))

    return Water(
        id=water_id,
        brand_name=brand,
        country_code=country_code,
        flag_emoji=_text(raw.get("flag_emoji")) or country_flag(country_code),
        group=lookup_enum(WaterGroup, raw.get("group")) or WaterGroup.EUROPE,
        sparkling=to_bool_loose(raw.get("sparkling")),
        source_type=lookup_enum(SourceType, raw.get("source_type")) or SourceType.SEED,
        confidence_level=(
            lookup_enum(ConfidenceLevel, raw.get("confidence_level")) or ConfidenceLevel.LOW
        ),
        notes=_text(raw.get("notes")),
        **{name: parse_num_loose(raw.get(name)) for name in METRIC_FIELDS},
    )
