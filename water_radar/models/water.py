"""
Canonical water record.

``Water`` is the one record type the engine works with.  It is frozen:
imports replace whole records by ``id``; nothing edits a record in place.

Metrics are three-valued: a float, or ``None`` for "unknown".  A missing
metric is never treated as zero by the scorer or the classifier.

``category`` is a property rather than a field.  It is a pure
function of ``group``, TDS and sodium and is recomputed by the classifier on
every read.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from water_radar.reference import MINIMUM_METRICS
from water_radar.taxonomy.water_taxonomy import (
    ConfidenceLevel,
    MetricKey,
    SourceType,
    WaterGroup,
)

if TYPE_CHECKING:
    from water_radar.taxonomy.water_taxonomy import Category


class Water(BaseModel):
    """A bottled-water product with its label mineral profile.

    Attributes:
        id: Stable identifier; the merge key.
        brand_name: Display name.
        country_code: ISO 3166 alpha-2 code as given, or ``None``.
        flag_emoji: Display flag; derived from ``country_code`` when absent.
        group: Provenance / region tag.
        ph: pH, or ``None``.
        tds_mg_l: Total dissolved solids, mg/L.
        ca_mg_l: Calcium, mg/L.
        mg_mg_l: Magnesium, mg/L.
        na_mg_l: Sodium, mg/L.
        k_mg_l: Potassium, mg/L.
        cl_mg_l: Chloride, mg/L.
        sparkling: ``True`` sparkling, ``False`` still, ``None`` unknown.
        source_type: Provenance quality of the figures.
        confidence_level: Trust in the figures (ranking tie-break only).
        notes: Free text.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    brand_name: str
    country_code: Optional[str] = None
    flag_emoji: Optional[str] = None
    group: WaterGroup = WaterGroup.EUROPE

    ph: Optional[float] = None
    tds_mg_l: Optional[float] = None
    ca_mg_l: Optional[float] = None
    mg_mg_l: Optional[float] = None
    na_mg_l: Optional[float] = None
    k_mg_l: Optional[float] = None
    cl_mg_l: Optional[float] = None

    sparkling: Optional[bool] = None

    source_type: SourceType = SourceType.SEED
    confidence_level: ConfidenceLevel = ConfidenceLevel.LOW
    notes: Optional[str] = None

    @field_validator("id", "brand_name")
    @classmethod
    def validate_identity(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("id and brand_name must be non-empty.")
        return v

    @property
    def category(self) -> "Category":
        """Usage category, recomputed on every access."""
        from water_radar.scoring.classifier import classify

        return classify(self)

    def metric(self, key: MetricKey) -> Optional[float]:
        """Value of one tracked metric, or ``None`` if unknown."""
        return getattr(self, MetricKey(key).field_name)


@dataclass(frozen=True)
class Coverage:
    """How many of the seven tracked metrics are known."""

    count: int
    total: int
    present: dict[MetricKey, bool]

    @property
    def missing(self) -> int:
        return self.total - self.count

    @property
    def ratio(self) -> float:
        return self.count / self.total


def data_coverage(water: Water) -> Coverage:
    """Count known metrics over all of ``MetricKey``."""
    present = {key: water.metric(key) is not None for key in MetricKey}
    return Coverage(
        count=sum(1 for known in present.values() if known),
        total=len(present),
        present=present,
    )


def has_minimum_metrics(water: Water) -> bool:
    """True when pH, TDS, Ca, Mg, Na and Cl are all known (K is optional)."""
    return all(water.metric(key) is not None for key in MINIMUM_METRICS)
