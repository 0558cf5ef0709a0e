"""
Tests for the export model objects.

These tests verify:
    - Format parsing and its failure mode
    - Redaction decisions
    - Question lookup and ordering
    - Column plan header and width
"""

from datetime import datetime, timezone

import pytest
from survey_export.errors import UnsupportedFormatError
from survey_export.model import (
    ColumnKind,
    ColumnPlan,
    ColumnSpec,
    ExportFormat,
    PlannedQuestion,
    QuestionKind,
    QuestionSettings,
    QuestionSpec,
    RedactionPolicy,
    ResponseRecord,
    SurveySnapshot,
)


class TestExportFormat:
    """Test ExportFormat parsing."""

    @pytest.mark.parametrize("value, expected", [
        ("raw", ExportFormat.RAW),
        ("normalized", ExportFormat.NORMALIZED),
        ("Standardized", ExportFormat.STANDARDIZED),
        (" onehot ", ExportFormat.ONEHOT),
        (ExportFormat.RAW, ExportFormat.RAW),
    ])
    def test_parse(self, value, expected):
        assert ExportFormat.parse(value) is expected

    def test_parse_unknown_format(self):
        """Unknown formats are a caller-contract violation."""
        with pytest.raises(UnsupportedFormatError):
            ExportFormat.parse("xlsx")

    def test_is_scaled(self):
        assert ExportFormat.NORMALIZED.is_scaled
        assert ExportFormat.STANDARDIZED.is_scaled
        assert not ExportFormat.RAW.is_scaled
        assert not ExportFormat.ONEHOT.is_scaled


class TestQuestionSpec:
    """Test QuestionSpec objects."""

    def test_defaults(self):
        q = QuestionSpec(id="q1", title="Comment", kind=QuestionKind.TEXT)
        assert q.options is None
        assert q.settings.ordinal_structure is False
        assert q.order == 0

    def test_ordinal_settings(self):
        q = QuestionSpec(
            id="q1", title="Level", kind=QuestionKind.RADIO,
            settings=QuestionSettings(ordinal_structure=True),
        )
        assert q.settings.ordinal_structure

    @pytest.mark.parametrize("kind", [QuestionKind.NAME, QuestionKind.EMAIL, QuestionKind.PHONE])
    def test_personal_data_kinds(self, kind):
        assert QuestionSpec(id="q", title="t", kind=kind).is_personal_data

    def test_other_kinds_are_not_personal(self):
        assert not QuestionSpec(id="q", title="t", kind=QuestionKind.DATE).is_personal_data


class TestRedactionPolicy:
    """Test RedactionPolicy decisions."""

    def test_excludes_personal_data_by_default(self):
        q = QuestionSpec(id="q", title="Email", kind=QuestionKind.EMAIL)
        assert RedactionPolicy().excludes(q)

    def test_includes_when_requested(self):
        q = QuestionSpec(id="q", title="Email", kind=QuestionKind.EMAIL)
        assert not RedactionPolicy(include_personal_data=True).excludes(q)

    def test_never_excludes_regular_questions(self):
        q = QuestionSpec(id="q", title="Age", kind=QuestionKind.AGE_GROUP)
        assert not RedactionPolicy().excludes(q)


class TestSurveySnapshot:
    """Test SurveySnapshot retrieval methods."""

    def build(self):
        return SurveySnapshot(
            id="s1",
            title="Survey",
            questions=[
                QuestionSpec(id="b", title="B", kind=QuestionKind.TEXT, order=2),
                QuestionSpec(id="a", title="A", kind=QuestionKind.TEXT, order=1),
            ],
            responses=[ResponseRecord(id="r1", created_at=datetime(2024, 1, 1, tzinfo=timezone.utc))],
        )

    def test_get_question(self):
        survey = self.build()
        assert survey.get_question("a").title == "A"
        assert survey.get_question("missing") is None

    def test_ordered_questions(self):
        survey = self.build()
        assert [q.id for q in survey.ordered_questions()] == ["a", "b"]


class TestColumnPlan:
    """Test ColumnPlan header assembly."""

    def test_header_and_width(self):
        q1 = QuestionSpec(id="q1", title="Color", kind=QuestionKind.RADIO, options=["Red", "Blue"])
        q2 = QuestionSpec(id="q2", title="Note", kind=QuestionKind.TEXT)
        plan = ColumnPlan(
            format=ExportFormat.NORMALIZED,
            leading_labels=["id", "date"],
            entries=[
                PlannedQuestion(
                    question=q1,
                    kind=ColumnKind.ONE_HOT,
                    columns=[
                        ColumnSpec("Color_Red", ColumnKind.ONE_HOT, "Red"),
                        ColumnSpec("Color_Blue", ColumnKind.ONE_HOT, "Blue"),
                    ],
                    options=["Red", "Blue"],
                ),
                PlannedQuestion(question=q2, kind=ColumnKind.TEXT, columns=[ColumnSpec("Note", ColumnKind.TEXT)]),
            ],
        )
        assert plan.header == ["id", "date", "Color_Red", "Color_Blue", "Note"]
        assert plan.width == 5
