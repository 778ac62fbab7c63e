"""
Tests for scoring/scorer.py.

What we test
------------
resolve_weights() / metric_deviation():
  - Profile overlays overwrite only their own metrics.
  - TDS dead zone (< 150 mg/L from reference → 0).
  - Deviation clamped to 3.

score_water():
  - Worked examples: all-unknown, pH+TDS only, on-reference therapeutic,
    the partial seed water, Volvic, Evian (clamped to 0).
  - Score always within [0, 100] for every profile.
  - Therapeutic scenario score <= 60.
  - Reasons: MIN_MISSING, COVERAGE_n_7, then top-3 metrics.

metric_status() / describe_reasons():
  - Band thresholds and unknown handling.
  - Human-readable reason lines.
"""

from __future__ import annotations

import pytest

from water_radar.reference import DEFAULT_WEIGHTS, resolve_weights
from water_radar.scoring.scorer import (
    describe_reasons,
    metric_deviation,
    metric_status,
    score_water,
)
from water_radar.taxonomy.water_taxonomy import (
    Category,
    MetricBand,
    MetricKey,
    Profile,
    WaterGroup,
)


# ── Weights ───────────────────────────────────────────────────────────────────

class TestResolveWeights:
    def test_everyday_is_default(self):
        assert resolve_weights(Profile.EVERYDAY) == dict(DEFAULT_WEIGHTS)

    def test_pressure_overlay(self):
        w = resolve_weights(Profile.PRESSURE)
        assert w[MetricKey.NA] == 1.8
        assert w[MetricKey.CL] == 1.4
        assert w[MetricKey.CA] == 1.0

    def test_sport_overlay(self):
        w = resolve_weights(Profile.SPORT)
        assert (w[MetricKey.MG], w[MetricKey.NA], w[MetricKey.K]) == (1.2, 0.9, 1.0)

    def test_kid_overlay(self):
        w = resolve_weights(Profile.KID)
        assert (w[MetricKey.NA], w[MetricKey.TDS]) == (2.0, 1.0)

    def test_sensitive_overlay(self):
        w = resolve_weights(Profile.SENSITIVE)
        assert (w[MetricKey.PH], w[MetricKey.TDS]) == (0.6, 0.8)
        assert w[MetricKey.NA] == 1.2

    def test_overlays_do_not_leak_between_calls(self):
        resolve_weights(Profile.KID)
        assert resolve_weights(Profile.EVERYDAY)[MetricKey.NA] == 1.2


class TestMetricDeviation:
    def test_tds_dead_zone(self):
        assert metric_deviation(MetricKey.TDS, 299.0) == 0.0
        assert metric_deviation(MetricKey.TDS, 1.0) == 0.0

    def test_tds_outside_dead_zone(self):
        assert metric_deviation(MetricKey.TDS, 300.0) == pytest.approx(1.0)

    def test_mineral_uses_per_liter_reference(self):
        # Ca daily 800 mg → 400 mg/L
        assert metric_deviation(MetricKey.CA, 400.0) == 0.0
        assert metric_deviation(MetricKey.CA, 200.0) == pytest.approx(0.5)

    def test_ph_uses_reference_directly(self):
        assert metric_deviation(MetricKey.PH, 7.5) == 0.0

    def test_clamped_to_three(self):
        assert metric_deviation(MetricKey.CA, 5000.0) == 3.0


# ── score_water ───────────────────────────────────────────────────────────────

class TestScoreWater:
    def test_all_unknown(self, make_water):
        r = score_water(make_water(), Profile.EVERYDAY)
        # (100 - 70 - 20) * 0.55
        assert r.score == pytest.approx(5.5)
        assert r.category is Category.UNKNOWN
        assert r.coverage_count == 0
        assert r.coverage_total == 7
        assert r.has_minimum is False
        assert r.top_reasons == ("MIN_MISSING", "COVERAGE_0_7")

    def test_ph_and_tds_on_reference(self, make_water):
        r = score_water(make_water(ph=7.5, tds_mg_l=150.0))
        # (100 - 50 - 20) * (0.55 + 0.45 * 2/7)
        assert r.score == pytest.approx(30 * (0.55 + 0.45 * 2 / 7))

    def test_on_reference_but_therapeutic(self, make_water):
        w = make_water(
            ca_mg_l=400.0, mg_mg_l=187.5, k_mg_l=1000.0, na_mg_l=750.0,
            cl_mg_l=400.0, ph=7.5, tds_mg_l=150.0,
        )
        r = score_water(w)
        assert r.category is Category.THERAPEUTIC
        assert r.score == pytest.approx(60.0)

    def test_partial_water(self, partial):
        r = score_water(partial)
        assert r.score == pytest.approx(19.995, abs=0.01)
        assert r.has_minimum is False
        assert r.coverage_count == 2
        assert r.top_reasons[:2] == ("MIN_MISSING", "COVERAGE_2_7")

    def test_volvic(self, volvic):
        assert score_water(volvic).score == pytest.approx(2.15, abs=0.01)

    def test_evian_clamped_to_zero(self, evian):
        r = score_water(evian)
        assert r.score == 0.0
        assert r.has_minimum is True

    def test_evian_top_reasons(self, evian):
        r = score_water(evian)
        assert r.top_reasons == ("METRIC_na", "METRIC_cl", "METRIC_mg")

    def test_profile_changes_contribution(self, evian):
        everyday = score_water(evian, Profile.EVERYDAY).contributions[MetricKey.NA]
        pressure = score_water(evian, Profile.PRESSURE).contributions[MetricKey.NA]
        assert pressure == pytest.approx(everyday * 1.8 / 1.2)

    def test_unknown_metrics_have_no_contribution(self, partial):
        r = score_water(partial)
        assert set(r.contributions) == {MetricKey.PH, MetricKey.TDS}

    def test_therapeutic_scenario(self, make_water):
        w = make_water(group=WaterGroup.THERAPEUTIC, ph=6.6, tds_mg_l=5500.0, na_mg_l=1200.0)
        r = score_water(w)
        assert r.category is Category.THERAPEUTIC
        assert r.score <= 60.0

    def test_therapeutic_penalty_applied(self, make_water):
        daily = score_water(make_water(ph=7.5, tds_mg_l=150.0)).score
        thera = score_water(make_water(ph=7.5, tds_mg_l=150.0, group=WaterGroup.THERAPEUTIC)).score
        assert thera == pytest.approx(max(0.0, daily - 40.0))

    @pytest.mark.parametrize("profile", list(Profile))
    def test_score_bounds(self, profile, evian, borjomi, volvic, baikal, partial, san_pellegrino, make_water):
        extremes = make_water(ca_mg_l=1e9, mg_mg_l=0.0, na_mg_l=0.0, ph=14.0, tds_mg_l=0.0)
        for w in (evian, borjomi, volvic, baikal, partial, san_pellegrino, extremes, make_water()):
            assert 0.0 <= score_water(w, profile).score <= 100.0

    def test_pure(self, evian):
        assert score_water(evian, Profile.KID) == score_water(evian, Profile.KID)


# ── metric_status ─────────────────────────────────────────────────────────────

class TestMetricStatus:
    def test_unknown(self):
        assert metric_status(MetricKey.CA, None) is MetricBand.UNKNOWN

    @pytest.mark.parametrize(
        "key, value, band",
        [
            (MetricKey.CA, 800.0, MetricBand.DAILY),
            (MetricKey.CA, 400.0, MetricBand.ROTATE),
            (MetricKey.CA, 80.0, MetricBand.THERAPEUTIC),
            (MetricKey.PH, 7.2, MetricBand.DAILY),
            (MetricKey.TDS, 250.0, MetricBand.DAILY),
            (MetricKey.TDS, 345.0, MetricBand.THERAPEUTIC),
        ],
    )
    def test_bands(self, key, value, band):
        assert metric_status(key, value) is band


class TestDescribeReasons:
    def test_missing_data_lines(self, make_water):
        lines = describe_reasons(score_water(make_water()))
        assert lines[0].startswith("Minimum label data missing")
        assert lines[1] == "Only 0 of 7 metrics known"

    def test_metric_lines(self, evian):
        lines = describe_reasons(score_water(evian))
        assert len(lines) == 3
        assert lines[0].startswith("Sodium off reference per liter")

    def test_on_target_metric(self, make_water):
        lines = describe_reasons(score_water(make_water(ph=7.5)))
        assert "pH on target" in lines


class TestScoreResultHashable:
    def test_hash_does_not_raise(self, evian):
        result = score_water(evian)
        assert isinstance(hash(result), int)

    def test_equal_results_hash_equal(self, volvic):
        a = score_water(volvic, Profile.SPORT)
        b = score_water(volvic, Profile.SPORT)
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1
