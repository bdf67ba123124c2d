"""Tests for verbal score bands and readiness thresholds."""

import pytest

from brief_engine.core.bands import (
    band_rank,
    map_score_to_band,
    next_milestone,
    overall_assessment,
    readiness_level,
)
from brief_engine.core.schemas_analysis import OverallAssessment, ReadinessLevel, VerbalBand


class TestMapScoreToBand:
    @pytest.mark.parametrize(
        "percentage,band",
        [
            (100, VerbalBand.EXCELLENT),
            (90, VerbalBand.EXCELLENT),
            (89.9, VerbalBand.VERY_GOOD),
            (80, VerbalBand.VERY_GOOD),
            (70, VerbalBand.GOOD),
            (60, VerbalBand.FAIR),
            (40, VerbalBand.IMPROVABLE),
            (20, VerbalBand.NEEDS_WORK),
            (19.9, VerbalBand.INCOMPLETE),
            (0, VerbalBand.INCOMPLETE),
        ],
    )
    def test_thresholds(self, percentage, band):
        assert map_score_to_band(percentage) is band

    def test_out_of_range_is_clamped(self):
        assert map_score_to_band(250) is VerbalBand.EXCELLENT
        assert map_score_to_band(-10) is VerbalBand.INCOMPLETE

    def test_monotonic(self):
        ranks = [band_rank(map_score_to_band(p / 2)) for p in range(0, 201)]
        assert ranks == sorted(ranks)

    def test_rank_order(self):
        assert band_rank(VerbalBand.INCOMPLETE) == 0
        assert band_rank(VerbalBand.EXCELLENT) == 6


class TestAggregateLevels:
    def test_overall_assessment(self):
        assert overall_assessment(85) is OverallAssessment.VERY_COMPLETE
        assert overall_assessment(70) is OverallAssessment.WELL_STRUCTURED
        assert overall_assessment(55) is OverallAssessment.FUNCTIONAL
        assert overall_assessment(35) is OverallAssessment.BASIC
        assert overall_assessment(34.9) is OverallAssessment.INCOMPLETE

    def test_readiness_level(self):
        assert readiness_level(85) is ReadinessLevel.READY_TO_PRESENT
        assert readiness_level(70) is ReadinessLevel.ALMOST_READY
        assert readiness_level(50) is ReadinessLevel.NEEDS_POLISH
        assert readiness_level(49) is ReadinessLevel.REQUIRES_DEVELOPMENT

    def test_next_milestone_changes_at_thresholds(self):
        texts = [next_milestone(p) for p in (0, 40, 60, 75, 90)]
        assert len(set(texts)) == 5
