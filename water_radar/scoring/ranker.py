"""
Ranker: total ordering over waters for a profile, winner selection, and the
rotation plan.

Ordering (first difference wins)
--------------------------------
    1. has_minimum  True before False, regardless of score
    2. score        descending
    3. coverage     descending (more known metrics first)
    4. confidence   high > medium > low
    5. brand name   case-folded, then raw string (deterministic)

The ordering is expressed as a tuple sort key, so it is a strict weak
ordering by construction and safe for ``sorted()``.

Usage flow
----------
1. rank_waters(selection, profile)   -> list[RankedWater] (rank 1 = best)
2. pick_winner(selection, profile)   -> Water | None      ("best daily")
3. build_rotation_plan(selection, profile, days=7)
                                     -> list[RotationDay]
"""

from __future__ import annotations

import logging
import unicodedata
from dataclasses import dataclass
from typing import Sequence

from water_radar.models.water import Water
from water_radar.scoring.scorer import ScoreResult, score_water
from water_radar.taxonomy.water_taxonomy import Category, Profile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankedWater:
    """A water with its rank and score within one selection."""

    rank:   int
    water:  Water
    result: ScoreResult


@dataclass(frozen=True)
class RotationDay:
    day:   int
    water: Water


def _brand_key(name: str) -> tuple[str, str]:
    return unicodedata.normalize("NFKC", name).casefold(), name


def ranking_key(
    water: Water,
    profile: Profile,
    result: ScoreResult | None = None,
) -> tuple:
    """Sort key implementing the ranking order (ascending = better)."""
    if result is None:
        result = score_water(water, profile)
    return (
        0 if result.has_minimum else 1,
        -result.score,
        -result.coverage_count,
        -water.confidence_level.rank,
        _brand_key(water.brand_name),
    )


def compare_waters(a: Water, b: Water, profile: Profile = Profile.EVERYDAY) -> int:
    """Three-way comparison: -1 if ``a`` ranks above ``b``, 1 if below, else 0."""
    ka = ranking_key(a, profile)
    kb = ranking_key(b, profile)
    if ka < kb:
        return -1
    if ka > kb:
        return 1
    return 0


def rank_waters(
    selection: Sequence[Water],
    profile: Profile = Profile.EVERYDAY,
) -> list[RankedWater]:
    """Sort ``selection`` best-first and attach 1-based ranks."""
    scored = [(w, score_water(w, profile)) for w in selection]
    scored.sort(key=lambda pair: ranking_key(pair[0], profile, pair[1]))
    return [
        RankedWater(rank=i, water=w, result=r)
        for i, (w, r) in enumerate(scored, start=1)
    ]


def pick_winner(
    selection: Sequence[Water],
    profile: Profile = Profile.EVERYDAY,
) -> Water | None:
    """Best daily choice among ``selection``.

    Therapeutic waters are excluded unless every selected water is
    Therapeutic.  If any remaining candidate has the minimum metrics, only
    those stay eligible.  Returns ``None`` for an empty selection.
    """
    if not selection:
        return None

    scored = [(w, score_water(w, profile)) for w in selection]

    non_therapeutic = [p for p in scored if p[1].category != Category.THERAPEUTIC]
    pool = non_therapeutic or scored

    with_minimum = [p for p in pool if p[1].has_minimum]
    if with_minimum:
        pool = with_minimum

    winner, result = min(pool, key=lambda pair: ranking_key(pair[0], profile, pair[1]))
    logger.debug(
        "Winner for %s among %d: %s (score %.2f)",
        profile, len(selection), winner.id, result.score,
    )
    return winner


def build_rotation_plan(
    selection: Sequence[Water],
    profile: Profile = Profile.EVERYDAY,
    days: int = 7,
) -> list[RotationDay]:
    """Alternate the two best non-Therapeutic waters day by day.

    Falls back to the overall ranked order when fewer than two
    non-Therapeutic waters are selected; a single water fills every day.
    """
    if not selection or days <= 0:
        return []

    ranked = [rw.water for rw in rank_waters(selection, profile)]
    safe = [w for w in ranked if w.category != Category.THERAPEUTIC]

    first = safe[0] if safe else ranked[0]
    if len(safe) > 1:
        second = safe[1]
    elif len(ranked) > 1:
        second = ranked[1]
    else:
        second = ranked[0]

    return [
        RotationDay(day=d, water=first if d % 2 == 1 else second)
        for d in range(1, days + 1)
    ]
