"""
Tests for the Statistical Normalizer.

Statistics are population statistics over non-NA codes; scaling never
touches NA codes and degenerates to 0 instead of failing.
"""

import math
from datetime import datetime, timezone

import pytest
from survey_export.model import (
    ExportFormat,
    QuestionKind,
    QuestionSettings,
    QuestionSpec,
    ResponseRecord,
)
from survey_export.normalizer import (
    QuestionStats,
    compute_stats,
    compute_stats_map,
    scale,
    valid_codes,
)

CREATED = datetime(2024, 1, 1, tzinfo=timezone.utc)


def age_question():
    return QuestionSpec(id="age", title="Age", kind=QuestionKind.AGE_GROUP)


def responses_for(question_id, answers):
    return [
        ResponseRecord(id=f"r{i}", created_at=CREATED, answers={question_id: a} if a is not None else {})
        for i, a in enumerate(answers)
    ]


class TestComputeStats:
    """Test aggregate statistics."""

    def test_excludes_na_codes(self):
        responses = responses_for("age", ["20代", "30代", "", "unknown"])
        assert valid_codes(age_question(), responses) == [2, 3]

        stats = compute_stats(age_question(), responses)
        assert stats.count == 2
        assert stats.mean == pytest.approx(2.5)
        assert stats.std == pytest.approx(0.5)
        assert stats.minimum == 2
        assert stats.maximum == 3

    def test_population_standard_deviation(self):
        """ddof=0: codes 1, 2, 3 -> sqrt(2/3)."""
        responses = responses_for("age", ["10代以下", "20代", "30代"])
        stats = compute_stats(age_question(), responses)
        assert stats.std == pytest.approx(math.sqrt(2 / 3))

    def test_missing_answers_are_skipped(self):
        responses = responses_for("age", ["40代", None])
        stats = compute_stats(age_question(), responses)
        assert stats.count == 1
        assert stats.std == 0

    def test_empty_value_set(self):
        stats = compute_stats(age_question(), responses_for("age", ["", "unknown"]))
        assert stats.is_empty
        assert math.isnan(stats.mean)
        assert math.isnan(stats.std)
        assert math.isnan(stats.minimum)
        assert math.isnan(stats.maximum)

    def test_stats_map_keyed_by_question(self):
        ordinal = QuestionSpec(
            id="lvl", title="Level", kind=QuestionKind.RADIO,
            options=["lo", "hi"], settings=QuestionSettings(ordinal_structure=True),
        )
        responses = [
            ResponseRecord(id="r1", created_at=CREATED, answers={"age": "20代", "lvl": "hi"}),
            ResponseRecord(id="r2", created_at=CREATED, answers={"age": "60代", "lvl": "hi"}),
        ]
        stats = compute_stats_map([age_question(), ordinal], responses)
        assert set(stats) == {"age", "lvl"}
        assert stats["age"].maximum == 6
        assert stats["lvl"].std == 0


class TestScale:
    """Test scaling transforms."""

    STATS = QuestionStats(mean=2.5, std=0.5, minimum=2.0, maximum=3.0, count=2)

    def test_na_is_never_scaled(self):
        for fmt in ExportFormat:
            assert scale(0, self.STATS, fmt) == 0

    def test_normalized(self):
        assert scale(2, self.STATS, ExportFormat.NORMALIZED) == 0
        assert scale(3, self.STATS, ExportFormat.NORMALIZED) == 1

    def test_standardized(self):
        assert scale(2, self.STATS, ExportFormat.STANDARDIZED) == pytest.approx(-1.0)
        assert scale(3, self.STATS, ExportFormat.STANDARDIZED) == pytest.approx(1.0)

    def test_normalized_without_spread(self):
        stats = QuestionStats(mean=4.0, std=0.0, minimum=4.0, maximum=4.0, count=3)
        assert scale(4, stats, ExportFormat.NORMALIZED) == 0

    def test_standardized_without_variance(self):
        stats = QuestionStats(mean=4.0, std=0.0, minimum=4.0, maximum=4.0, count=3)
        assert scale(4, stats, ExportFormat.STANDARDIZED) == 0

    def test_empty_stats_pass_code_through(self):
        assert scale(5, QuestionStats.empty(), ExportFormat.NORMALIZED) == 5
        assert scale(5, QuestionStats.empty(), ExportFormat.STANDARDIZED) == 5

    @pytest.mark.parametrize("fmt", [ExportFormat.RAW, ExportFormat.ONEHOT])
    def test_unscaled_formats(self, fmt):
        assert scale(3, self.STATS, fmt) == 3
