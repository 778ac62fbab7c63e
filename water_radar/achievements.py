"""
Achievement tags: independent boolean predicates over a water.

Tags are presentation only and never feed into scoring or ranking.  Each
rule is evaluated on its own; adding a tag means adding an entry to
``ACHIEVEMENT_RULES`` and nothing else.

Rules
-----
daily        category == Daily
therapeutic  category == Therapeutic
sport        Na >= 20  OR  Mg >= 20  OR  K >= 2   (unknown counts as 0)
coffee       still, |pH − 7.5| <= 0.3, TDS < 100, and Ca <= 30, Mg <= 10,
             Na <= 20, K <= 2, Cl <= 30, all of them known
sparkling    sparkling is True
still        sparkling is False
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Mapping

from water_radar.models.water import Water
from water_radar.taxonomy.water_taxonomy import Achievement, Category

COFFEE_PH_TARGET = 7.5
COFFEE_PH_TOLERANCE = 0.3


@dataclass(frozen=True)
class AchievementRule:
    tag:       Achievement
    predicate: Callable[[Water], bool]
    reason:    str

    def applies(self, water: Water) -> bool:
        return self.predicate(water)


def _is_sport(w: Water) -> bool:
    na = w.na_mg_l or 0.0
    mg = w.mg_mg_l or 0.0
    k = w.k_mg_l or 0.0
    return na >= 20 or mg >= 20 or k >= 2


def _is_coffee(w: Water) -> bool:
    if w.sparkling is not False:
        return False
    if w.ph is None or w.tds_mg_l is None:
        return False
    minerals = (w.ca_mg_l, w.mg_mg_l, w.na_mg_l, w.k_mg_l, w.cl_mg_l)
    if any(v is None for v in minerals):
        return False

    ph_ok = abs(w.ph - COFFEE_PH_TARGET) <= COFFEE_PH_TOLERANCE
    tds_ok = w.tds_mg_l < 100
    minerals_ok = (
        w.ca_mg_l <= 30
        and w.mg_mg_l <= 10
        and w.na_mg_l <= 20
        and w.k_mg_l <= 2
        and w.cl_mg_l <= 30
    )
    return ph_ok and tds_ok and minerals_ok


ACHIEVEMENT_RULES: Mapping[Achievement, AchievementRule] = MappingProxyType({
    Achievement.DAILY: AchievementRule(
        tag=Achievement.DAILY,
        predicate=lambda w: w.category == Category.DAILY,
        reason="Water category = Daily.",
    ),
    Achievement.THERAPEUTIC: AchievementRule(
        tag=Achievement.THERAPEUTIC,
        predicate=lambda w: w.category == Category.THERAPEUTIC,
        reason="Water category = Therapeutic (high minerals/salts).",
    ),
    Achievement.SPORT: AchievementRule(
        tag=Achievement.SPORT,
        predicate=_is_sport,
        reason="Higher electrolytes: Na>=20 or Mg>=20 or K>=2 mg/L.",
    ),
    Achievement.COFFEE: AchievementRule(
        tag=Achievement.COFFEE,
        predicate=_is_coffee,
        reason="For coffee: TDS < 100, pH near 7.5, still water, and low key minerals.",
    ),
    Achievement.SPARKLING: AchievementRule(
        tag=Achievement.SPARKLING,
        predicate=lambda w: w.sparkling is True,
        reason="Marked as sparkling (sparkling = true).",
    ),
    Achievement.STILL: AchievementRule(
        tag=Achievement.STILL,
        predicate=lambda w: w.sparkling is False,
        reason="Marked as still (sparkling = false).",
    ),
})


def get_achievements(water: Water) -> list[AchievementRule]:
    """Rules that apply to ``water``, in declaration order."""
    return [rule for rule in ACHIEVEMENT_RULES.values() if rule.applies(water)]
