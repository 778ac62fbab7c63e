"""
ASCII terminal formatters for CLI commands.

All formatters accept already-computed domain objects (waters, ranked
waters, score results) and return plain multi-line strings suitable for
``typer.echo()``.  Nothing here scores or ranks.

No third-party dependencies (no ``rich``, no ``colorama``).

Unknown values
--------------
Unknown metrics print as ``-`` so they can never be mistaken for a zero.
"""

from __future__ import annotations

from typing import Optional, Sequence

from water_radar.achievements import AchievementRule
from water_radar.models.water import Water
from water_radar.scoring.ranker import RankedWater, RotationDay
from water_radar.scoring.scorer import ScoreResult, describe_reasons, metric_status
from water_radar.taxonomy.water_taxonomy import MetricKey, Profile

_METRIC_HEADERS: dict[MetricKey, str] = {
    MetricKey.PH:  "pH",
    MetricKey.TDS: "TDS",
    MetricKey.CA:  "Ca",
    MetricKey.MG:  "Mg",
    MetricKey.NA:  "Na",
    MetricKey.K:   "K",
    MetricKey.CL:  "Cl",
}

# Display order: pH and TDS first, as on bottle labels.
_DISPLAY_ORDER: tuple[MetricKey, ...] = tuple(_METRIC_HEADERS)


def fmt_value(value: Optional[float], digits: int = 0) -> str:
    """Format a metric value; unknown → ``-``."""
    if value is None:
        return "-"
    return f"{value:.{digits}f}"


def _digits(key: MetricKey) -> int:
    return 1 if key in (MetricKey.PH, MetricKey.NA, MetricKey.K) else 0


# ── Catalog ───────────────────────────────────────────────────────────────────


def format_catalog(waters: Sequence[Water]) -> str:
    """One line per water: id, brand, group, category, TDS, confidence."""
    lines: list[str] = []
    lines.append("")
    lines.append(f"=== Water Catalog ({len(waters)}) ===")
    if not waters:
        lines.append("  (no waters match the filters)")
        return "\n".join(lines)

    header = (
        f"  {'ID':<22}  {'Brand':<26}  {'Group':<11}  "
        f"{'Category':<11}  {'TDS':>6}  {'Conf.':<6}"
    )
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for w in waters:
        brand = f"{w.flag_emoji or ''} {w.brand_name}".strip()[:26]
        lines.append(
            f"  {w.id[:22]:<22}  {brand:<26}  {w.group.value:<11}  "
            f"{w.category.value:<11}  {fmt_value(w.tds_mg_l):>6}  "
            f"{w.confidence_level.value:<6}"
        )
    return "\n".join(lines)


# ── Ranking ───────────────────────────────────────────────────────────────────


def format_ranking_table(
    ranked: Sequence[RankedWater],
    profile: Profile,
    winner: Optional[Water] = None,
) -> str:
    """Ranked selection with score, coverage and category.

    Example::

        Rank  Brand                       Score  Data  Min  Category
        ------------------------------------------------------------
           1  Baikal                        2.2   7/7  yes  Daily
           2  Acqua Panna (partial)        20.0   2/7   no  Daily
    """
    lines: list[str] = []
    lines.append("")
    lines.append(f"=== Ranking (profile: {profile.value}) ===")
    if not ranked:
        lines.append("  (nothing selected)")
        return "\n".join(lines)

    header = (
        f"  {'Rank':>4}  {'Brand':<26}  {'Score':>6}  {'Data':>5}  "
        f"{'Min':>3}  {'Category':<11}"
    )
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for rw in ranked:
        r = rw.result
        lines.append(
            f"  {rw.rank:>4}  {rw.water.brand_name[:26]:<26}  {r.score:>6.1f}  "
            f"{r.coverage_count:>2}/{r.coverage_total:<2}  "
            f"{'yes' if r.has_minimum else 'no':>3}  {r.category.value:<11}"
        )

    lines.append("")
    lines.append(format_winner_banner(winner))
    return "\n".join(lines)


def format_winner_banner(winner: Optional[Water]) -> str:
    if winner is None:
        return "  [NO WINNER] nothing selected"
    return f"  [BEST DAILY] {winner.flag_emoji or ''} {winner.brand_name} ({winner.id})"


def format_metrics_table(waters: Sequence[Water]) -> str:
    """Metrics as rows, waters as columns, each value tagged with its band.

    Band letters: D daily, R rotate, T therapeutic, ? unknown.
    """
    lines: list[str] = []
    lines.append("")
    lines.append("=== Metrics (mg/L) ===")
    if not waters:
        lines.append("  (nothing selected)")
        return "\n".join(lines)

    col = 16
    header = f"  {'Metric':<6}" + "".join(f"  {w.brand_name[:col]:>{col}}" for w in waters)
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for key in _DISPLAY_ORDER:
        cells = []
        for w in waters:
            value = w.metric(key)
            band = metric_status(key, value).value[0].upper() if value is not None else "?"
            cells.append(f"  {fmt_value(value, _digits(key)) + ' ' + band:>{col}}")
        lines.append(f"  {_METRIC_HEADERS[key]:<6}" + "".join(cells))
    return "\n".join(lines)


# ── Score card ────────────────────────────────────────────────────────────────


def format_score_card(
    water: Water,
    result: ScoreResult,
    profile: Profile,
    achievements: Sequence[AchievementRule] = (),
) -> str:
    """Single-water report: headline score, metrics, reasons, tags."""
    lines: list[str] = []
    lines.append("")
    title = f"{water.flag_emoji or ''} {water.brand_name}".strip()
    lines.append(f"=== {title} ===")
    lines.append(f"  ID:          {water.id}")
    lines.append(f"  Group:       {water.group.value}")
    lines.append(f"  Category:    {result.category.value}")
    lines.append(f"  Profile:     {profile.value}")
    lines.append(f"  Score:       {result.score:.1f} / 100")
    lines.append(
        f"  Data:        {result.coverage_count}/{result.coverage_total} metrics"
        f"{'' if result.has_minimum else '  [MIN MISSING]'}"
    )
    lines.append(
        f"  Source:      {water.source_type.value} (confidence {water.confidence_level.value})"
    )

    lines.append("")
    lines.append("  Metrics:")
    for key in _DISPLAY_ORDER:
        value = water.metric(key)
        lines.append(
            f"    {_METRIC_HEADERS[key]:<4} {fmt_value(value, _digits(key)):>8}  "
            f"{metric_status(key, value).value}"
        )

    reasons = describe_reasons(result)
    if reasons:
        lines.append("")
        lines.append("  Why:")
        lines.extend(f"    - {r}" for r in reasons)

    if achievements:
        lines.append("")
        lines.append("  Tags:")
        lines.extend(f"    [{a.tag.value}] {a.reason}" for a in achievements)

    if water.notes:
        lines.append("")
        lines.append(f"  Notes: {water.notes}")
    return "\n".join(lines)


# ── Rotation ──────────────────────────────────────────────────────────────────


def format_rotation_plan(plan: Sequence[RotationDay], profile: Profile) -> str:
    lines: list[str] = []
    lines.append("")
    lines.append(f"=== Rotation Plan (profile: {profile.value}) ===")
    if not plan:
        lines.append("  (nothing selected)")
        return "\n".join(lines)

    lines.append(f"  {'Day':>3}  {'Water':<30}  {'Category':<11}")
    lines.append("  " + "-" * 48)
    for entry in plan:
        w = entry.water
        lines.append(
            f"  {entry.day:>3}  {w.brand_name[:30]:<30}  {w.category.value:<11}"
        )
    return "\n".join(lines)
