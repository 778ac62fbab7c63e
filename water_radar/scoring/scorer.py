"""
Suitability scoring: maps one water's mineral profile to a 0–100 score for
a given profile, plus the reasons behind it.

Score formula
-------------
For each known metric m (unknown metrics are skipped)::

    ref_m        = daily_ref_m / 2            # minerals, per liter
                 = daily_ref_m                # pH and TDS
    deviation_m  = clamp(|value_m − ref_m| / ref_m, 0, 3)
                   (TDS: 0 when |value − 150| < 150 mg/L)
    contrib_m    = deviation_m * weight_m[profile]

then::

    score  = 100 − Σ 20 * contrib_m
    score −= 10 * missing_count              # out of 7
    score −= 20 if not has_minimum
    score *= 0.55 + 0.45 * present_count / 7 # coverage dampener
    score −= 40 if category == Therapeutic
    score  = clamp(score, 0, 100)

The coverage dampener means a record with two excellent numbers cannot
outscore a complete record on narrow excellence alone.  Ranking enforces the
stronger guarantee separately (see ``ranker``).

Reason tokens
-------------
``MIN_MISSING``         one of the six minimum metrics is unknown
``COVERAGE_<n>_<7>``    some metric is unknown
``METRIC_<key>``        top three contributions, largest first
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from water_radar.models.water import Water, data_coverage, has_minimum_metrics
from water_radar.reference import (
    DAILY_REFERENCE,
    PER_LITER_METRICS,
    TDS_DEAD_ZONE_MG_L,
    per_liter_reference,
    resolve_weights,
)
from water_radar.scoring.classifier import classify
from water_radar.taxonomy.water_taxonomy import Category, MetricBand, MetricKey, Profile

MAX_DEVIATION = 3.0
CONTRIBUTION_SCALE = 20.0
MISSING_METRIC_PENALTY = 10.0
MIN_MISSING_PENALTY = 20.0
COVERAGE_FLOOR = 0.55
THERAPEUTIC_PENALTY = 40.0
TOP_REASON_COUNT = 3

REASON_MIN_MISSING = "MIN_MISSING"

_METRIC_LABELS: dict[MetricKey, str] = {
    MetricKey.CA:  "Calcium",
    MetricKey.MG:  "Magnesium",
    MetricKey.K:   "Potassium",
    MetricKey.NA:  "Sodium",
    MetricKey.CL:  "Chloride",
    MetricKey.PH:  "pH",
    MetricKey.TDS: "TDS",
}


@dataclass(frozen=True)
class ScoreResult:
    """Score for one (water, profile) pair.

    Attributes:
        score:          0–100, higher is better for daily drinking.
        category:       Classifier output at scoring time.
        coverage_count: Known metrics (0–7).
        coverage_total: Always 7.
        has_minimum:    All six minimum metrics known.
        top_reasons:    Reason tokens, see module docstring.
        contributions:  Weighted deviation per known metric.
    """

    score:          float
    category:       Category
    coverage_count: int
    coverage_total: int
    has_minimum:    bool
    top_reasons:    tuple[str, ...]
    contributions:  dict[MetricKey, float] = field(default_factory=dict, hash=False)


def metric_deviation(key: MetricKey, value: float) -> float:
    """Relative deviation from the per-liter reference, clamped to [0, 3]."""
    ref = per_liter_reference(key)
    if key is MetricKey.TDS and abs(value - ref) < TDS_DEAD_ZONE_MG_L:
        return 0.0
    return _clamp(abs(value - ref) / ref, 0.0, MAX_DEVIATION)


def score_water(water: Water, profile: Profile = Profile.EVERYDAY) -> ScoreResult:
    """Compute the suitability score of ``water`` under ``profile``.

    Args:
        water:   Canonical record.
        profile: Active weighting profile.

    Returns:
        ScoreResult with all fields populated.
    """
    weights = resolve_weights(profile)
    coverage = data_coverage(water)
    has_min = has_minimum_metrics(water)

    contributions: dict[MetricKey, float] = {}
    for key in MetricKey:
        value = water.metric(key)
        if value is None:
            continue
        contributions[key] = metric_deviation(key, value) * weights[key]

    score = 100.0
    for contribution in contributions.values():
        score -= contribution * CONTRIBUTION_SCALE

    # Completeness penalties
    score -= coverage.missing * MISSING_METRIC_PENALTY
    if not has_min:
        score -= MIN_MISSING_PENALTY

    score *= COVERAGE_FLOOR + (1.0 - COVERAGE_FLOOR) * coverage.ratio

    category = classify(water)
    if category == Category.THERAPEUTIC:
        score -= THERAPEUTIC_PENALTY

    reasons: list[str] = []
    if not has_min:
        reasons.append(REASON_MIN_MISSING)
    if coverage.missing > 0:
        reasons.append(f"COVERAGE_{coverage.count}_{coverage.total}")
    ranked = sorted(contributions.items(), key=lambda kv: -kv[1])
    reasons.extend(f"METRIC_{key.value}" for key, _ in ranked[:TOP_REASON_COUNT])

    return ScoreResult(
        score=_clamp(score, 0.0, 100.0),
        category=category,
        coverage_count=coverage.count,
        coverage_total=coverage.total,
        has_minimum=has_min,
        top_reasons=tuple(reasons),
        contributions=contributions,
    )


def metric_status(key: MetricKey, value: Optional[float]) -> MetricBand:
    """Band a single metric value for display.

    Compares against the *daily* reference (pH and TDS against their own
    reference), with the same TDS dead zone the scorer uses:
    ratio <= 0.25 → daily, <= 0.7 → rotate, otherwise therapeutic.
    """
    if value is None:
        return MetricBand.UNKNOWN
    ref = DAILY_REFERENCE[key]
    ratio = abs(value - ref) / (ref or 1.0)
    if key is MetricKey.TDS and abs(value - ref) < TDS_DEAD_ZONE_MG_L:
        ratio = 0.0

    if ratio <= 0.25:
        return MetricBand.DAILY
    if ratio <= 0.7:
        return MetricBand.ROTATE
    return MetricBand.THERAPEUTIC


def describe_reasons(result: ScoreResult) -> list[str]:
    """Turn reason tokens into short English sentences for reports."""
    lines: list[str] = []
    for token in result.top_reasons:
        if token == REASON_MIN_MISSING:
            lines.append("Minimum label data missing (pH, TDS, Ca, Mg, Na, Cl)")
        elif token.startswith("COVERAGE_"):
            _, count, total = token.split("_")
            lines.append(f"Only {count} of {total} metrics known")
        elif token.startswith("METRIC_"):
            key = MetricKey(token.removeprefix("METRIC_"))
            contribution = result.contributions.get(key, 0.0)
            if contribution == 0.0:
                lines.append(f"{_METRIC_LABELS[key]} on target")
            else:
                ref_note = "" if key in PER_LITER_METRICS else " per liter"
                lines.append(
                    f"{_METRIC_LABELS[key]} off reference{ref_note} "
                    f"(penalty {contribution * CONTRIBUTION_SCALE:.1f})"
                )
    return lines


# ── Helper ────────────────────────────────────────────────────────────────────

def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
