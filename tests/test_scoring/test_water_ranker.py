"""
Tests for scoring/ranker.py.

What we test
------------
compare_waters():
  - Hard rule: minimum-metrics waters rank above partial ones for every
    profile, even when the partial one scores higher.
  - Tie-breaks: coverage, then confidence, then brand name (case-folded).
  - Antisymmetric, reflexive 0, consistent with sorted(cmp_to_key(...)).

rank_waters():
  - Best-first order with 1-based ranks.

pick_winner():
  - Therapeutic excluded while any non-therapeutic is selected.
  - Minimum-metrics pool preferred.
  - Empty selection → None.

build_rotation_plan():
  - Alternates the two best non-therapeutic waters.
  - Single water fills every day; empty selection → empty plan.
"""

from __future__ import annotations

import itertools
from functools import cmp_to_key

import pytest

from water_radar.models.water import has_minimum_metrics
from water_radar.scoring.ranker import (
    build_rotation_plan,
    compare_waters,
    pick_winner,
    rank_waters,
)
from water_radar.scoring.scorer import score_water
from water_radar.taxonomy.water_taxonomy import Category, ConfidenceLevel, Profile, WaterGroup


@pytest.fixture
def pool(evian, san_pellegrino, borjomi, volvic, baikal, partial):
    return [evian, san_pellegrino, borjomi, volvic, baikal, partial]


# ── compare_waters ────────────────────────────────────────────────────────────

class TestCompareWaters:
    def test_partial_ranks_below_complete(self, partial, evian):
        assert score_water(partial).score > score_water(evian).score
        assert compare_waters(partial, evian, Profile.EVERYDAY) == 1
        assert compare_waters(evian, partial, Profile.EVERYDAY) == -1

    @pytest.mark.parametrize("profile", list(Profile))
    def test_hard_precedence_all_pairs(self, pool, profile):
        for a, b in itertools.permutations(pool, 2):
            if has_minimum_metrics(a) and not has_minimum_metrics(b):
                assert compare_waters(a, b, profile) < 0

    def test_reflexive(self, evian):
        assert compare_waters(evian, evian) == 0

    @pytest.mark.parametrize("profile", list(Profile))
    def test_antisymmetric(self, pool, profile):
        for a, b in itertools.combinations(pool, 2):
            assert compare_waters(a, b, profile) == -compare_waters(b, a, profile)

    @pytest.mark.parametrize("profile", list(Profile))
    def test_transitive(self, pool, profile):
        for a, b, c in itertools.permutations(pool, 3):
            if compare_waters(a, b, profile) < 0 and compare_waters(b, c, profile) < 0:
                assert compare_waters(a, c, profile) < 0

    def test_coverage_tie_break(self, evian):
        # Both clamp to score 0; dropping K keeps the minimum set.
        no_k = evian.model_copy(update={"id": "evian-nok", "k_mg_l": None})
        assert score_water(no_k).score == score_water(evian).score == 0.0
        assert compare_waters(evian, no_k) == -1

    def test_confidence_tie_break(self, volvic):
        high = volvic.model_copy(update={"id": "v-high", "confidence_level": ConfidenceLevel.HIGH})
        low = volvic.model_copy(update={"id": "v-low", "confidence_level": ConfidenceLevel.LOW})
        assert compare_waters(high, low) == -1
        assert compare_waters(volvic, low) == -1

    def test_brand_name_tie_break_is_case_insensitive(self, volvic):
        lower = volvic.model_copy(update={"id": "a", "brand_name": "alpha"})
        upper = volvic.model_copy(update={"id": "b", "brand_name": "Beta"})
        assert compare_waters(lower, upper) == -1

    def test_sort_with_comparator_matches_rank_waters(self, pool):
        by_cmp = sorted(pool, key=cmp_to_key(lambda a, b: compare_waters(a, b, Profile.SPORT)))
        by_rank = [rw.water for rw in rank_waters(pool, Profile.SPORT)]
        assert [w.id for w in by_cmp] == [w.id for w in by_rank]


# ── rank_waters ───────────────────────────────────────────────────────────────

class TestRankWaters:
    def test_everyday_order(self, borjomi, partial, evian, volvic, baikal):
        ranked = rank_waters([borjomi, partial, evian, volvic, baikal], Profile.EVERYDAY)
        assert [rw.water.id for rw in ranked] == [
            "baikal", "volvic", "borjomi", "evian", "acqua_panna_partial",
        ]
        assert [rw.rank for rw in ranked] == [1, 2, 3, 4, 5]

    def test_partial_last_regardless_of_score(self, partial, evian):
        ranked = rank_waters([partial, evian])
        assert ranked[-1].water.id == "acqua_panna_partial"
        assert ranked[-1].result.score > ranked[0].result.score

    def test_empty(self):
        assert rank_waters([]) == []


# ── pick_winner ───────────────────────────────────────────────────────────────

class TestPickWinner:
    def test_empty_selection(self):
        assert pick_winner([], Profile.EVERYDAY) is None

    def test_therapeutic_never_wins_daily(self, evian, borjomi):
        assert pick_winner([evian, borjomi]).id == "evian"

    def test_therapeutic_excluded_even_against_partial(self, partial, borjomi):
        assert pick_winner([borjomi, partial]).id == "acqua_panna_partial"

    def test_all_therapeutic_falls_back(self, borjomi):
        other = borjomi.model_copy(update={"id": "essentuki", "brand_name": "Essentuki"})
        assert pick_winner([other, borjomi]).id == "borjomi"

    def test_minimum_pool_preferred(self, partial, evian):
        assert pick_winner([partial, evian]).id == "evian"

    def test_only_partials(self, partial, make_water):
        other = make_water(id="p2", brand_name="P2", ph=7.5)
        winner = pick_winner([other, partial])
        assert winner.id == "acqua_panna_partial"

    def test_best_of_seed_like_pool(self, pool):
        assert pick_winner(pool, Profile.EVERYDAY).id == "baikal"

    @pytest.mark.parametrize("profile", list(Profile))
    def test_exclusion_property(self, pool, profile):
        for size in range(1, len(pool) + 1):
            for combo in itertools.combinations(pool, size):
                winner = pick_winner(list(combo), profile)
                if any(w.category != Category.THERAPEUTIC for w in combo):
                    assert winner.category != Category.THERAPEUTIC

    def test_group_tag_alone_excludes(self, make_water, volvic):
        tagged = volvic.model_copy(update={"id": "t", "group": WaterGroup.THERAPEUTIC})
        assert pick_winner([tagged, make_water(tds_mg_l=100.0)]).id == "w1"


# ── build_rotation_plan ───────────────────────────────────────────────────────

class TestRotationPlan:
    def test_alternates_top_two_safe(self, evian, volvic, baikal, borjomi):
        plan = build_rotation_plan([evian, volvic, baikal, borjomi], Profile.EVERYDAY)
        assert [d.day for d in plan] == list(range(1, 8))
        assert [d.water.id for d in plan] == [
            "baikal", "volvic", "baikal", "volvic", "baikal", "volvic", "baikal",
        ]

    def test_single_water(self, evian):
        plan = build_rotation_plan([evian], days=3)
        assert [d.water.id for d in plan] == ["evian"] * 3

    def test_never_uses_therapeutic_when_two_safe(self, evian, volvic, borjomi):
        plan = build_rotation_plan([borjomi, evian, volvic])
        assert all(d.water.category != Category.THERAPEUTIC for d in plan)

    def test_empty(self):
        assert build_rotation_plan([]) == []

    def test_custom_length(self, evian, volvic):
        assert len(build_rotation_plan([evian, volvic], days=10)) == 10
