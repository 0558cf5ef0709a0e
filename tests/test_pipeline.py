"""
End-to-end tests of the export pipeline.

Covers the documented properties of an export: rectangular output, raw
fidelity, one-hot sums, idempotence, value ranges, redaction, and the
reference scenarios.
"""

from datetime import date, datetime, timezone

import pytest
from survey_export.csv_writer import BOM
from survey_export.errors import EmptySurveyError, UnsupportedFormatError
from survey_export.examples import build_example_survey
from survey_export.model import (
    ExportFormat,
    HeaderOptions,
    QuestionKind,
    QuestionSettings,
    QuestionSpec,
    RedactionPolicy,
    ResponseRecord,
    SurveySnapshot,
)
from survey_export.pipeline import export_survey, preview_survey
from survey_export.table import build_table

EXPORT_DATE = date(2024, 6, 1)
CREATED = datetime(2024, 1, 1, tzinfo=timezone.utc)


def single_question_survey(q, answers):
    return SurveySnapshot(
        id="s1",
        title="Scenario",
        questions=[q],
        responses=[
            ResponseRecord(id=f"r{i + 1}", created_at=CREATED, answers={q.id: a})
            for i, a in enumerate(answers)
        ],
    )


def body_lines(artifact):
    assert artifact.body.startswith(BOM)
    return artifact.body[len(BOM):].split("\n")


class TestArtifact:
    """Shape of the returned artifact."""

    def test_filename_and_content_type(self):
        artifact = export_survey(build_example_survey(), "normalized", on_date=EXPORT_DATE)
        assert artifact.filename == "顧客満足度調査_normalized_2024-06-01.csv"
        assert artifact.content_type == "text/csv; charset=utf-8"
        assert artifact.content_disposition.startswith("attachment; filename*=UTF-8''%E9%A1%A7")

    def test_size_bytes_counts_utf8(self):
        artifact = export_survey(build_example_survey(), ExportFormat.RAW, on_date=EXPORT_DATE)
        assert artifact.size_bytes == len(artifact.body.encode("utf-8"))
        assert artifact.size_bytes > len(artifact.body)

    def test_unsupported_format(self):
        with pytest.raises(UnsupportedFormatError):
            export_survey(build_example_survey(), "pdf")

    def test_no_questions(self):
        with pytest.raises(EmptySurveyError):
            export_survey(SurveySnapshot(id="s", title="t"), "raw")

    def test_escaped_text_answers(self):
        lines = body_lines(export_survey(build_example_survey(), "raw", on_date=EXPORT_DATE))
        assert any(line.endswith('"配送が遅い, 改善希望"') for line in lines)
        assert any(line.endswith('"He said ""great"""') for line in lines)


class TestProperties:
    """Properties that hold for every export."""

    @pytest.mark.parametrize("fmt", list(ExportFormat))
    @pytest.mark.parametrize("include", [True, False])
    def test_rectangular(self, fmt, include):
        table = build_table(build_example_survey(), fmt, RedactionPolicy(include))
        assert all(len(row) == len(table.header) for row in table.rows)

    def test_raw_has_no_na_or_scaled_values(self):
        survey = build_example_survey()
        table = build_table(survey, ExportFormat.RAW, RedactionPolicy(True))
        answers = {v for r in survey.responses for v in r.answers.values()}
        for row in table.rows:
            for cell in row[2:]:
                assert cell != "NA"
                assert cell == "" or cell in answers

    def test_single_choice_one_hot_sums(self):
        q = QuestionSpec(id="c", title="Channel", kind=QuestionKind.RADIO, options=["店舗", "通販", "その他"])
        survey = single_question_survey(q, ["店舗", "通販", "", "不明"])
        table = build_table(survey, ExportFormat.NORMALIZED, RedactionPolicy())
        sums = [sum(int(cell) for cell in row[2:]) for row in table.rows]
        assert sums == [1, 1, 0, 0]

    @pytest.mark.parametrize("fmt", list(ExportFormat))
    def test_idempotent(self, fmt):
        first = export_survey(build_example_survey(), fmt, True, on_date=EXPORT_DATE)
        second = export_survey(build_example_survey(), fmt, True, on_date=EXPORT_DATE)
        assert first.body.encode("utf-8") == second.body.encode("utf-8")
        assert first.filename == second.filename

    def test_normalized_range(self):
        table = build_table(build_example_survey(), ExportFormat.NORMALIZED, RedactionPolicy())
        numeric_columns = [i for i, label in enumerate(table.header) if label.endswith("_numeric")]
        assert numeric_columns
        for row in table.rows:
            for i in numeric_columns:
                if row[i] != "NA":
                    assert 0.0 <= float(row[i]) <= 1.0

    def test_standardized_mean_is_zero(self):
        table = build_table(build_example_survey(), ExportFormat.STANDARDIZED, RedactionPolicy())
        numeric_columns = [i for i, label in enumerate(table.header) if label.endswith("_numeric")]
        for i in numeric_columns:
            values = [float(row[i]) for row in table.rows if row[i] != "NA"]
            if len(set(values)) > 1:
                assert sum(values) / len(values) == pytest.approx(0.0, abs=1e-9)

    @pytest.mark.parametrize("fmt", list(ExportFormat))
    def test_redaction(self, fmt):
        artifact = export_survey(build_example_survey(), fmt, include_personal_data=False, on_date=EXPORT_DATE)
        header = body_lines(artifact)[0].split(",")
        assert not any(label.startswith(("名前", "メールアドレス")) for label in header)
        assert "example.com" not in artifact.body

    def test_personal_data_included_on_request(self):
        artifact = export_survey(build_example_survey(), "raw", include_personal_data=True, on_date=EXPORT_DATE)
        header = body_lines(artifact)[0].split(",")
        assert "名前" in header
        assert "メールアドレス" in header


class TestScenarios:
    """Reference scenarios."""

    def test_age_bracket_normalized(self):
        q = QuestionSpec(id="age", title="年代", kind=QuestionKind.AGE_GROUP)
        survey = single_question_survey(q, ["20代", "30代", "", "unknown"])
        lines = body_lines(export_survey(survey, "normalized", on_date=EXPORT_DATE))
        assert lines[0] == "回答ID,回答日時,年代_numeric"
        assert [line.split(",")[2] for line in lines[1:]] == ["0", "1", "NA", "NA"]

    def test_multi_choice_one_hot(self):
        q = QuestionSpec(id="m", title="M", kind=QuestionKind.CHECKBOX, options=["A", "B", "C"])
        lines = body_lines(export_survey(single_question_survey(q, ["A,C"]), "normalized", on_date=EXPORT_DATE))
        assert lines[0] == "回答ID,回答日時,M_A,M_B,M_C"
        assert lines[1] == "r1,2024-01-01 09:00,1,0,1"

    def test_multi_choice_ordinal_sum(self):
        q = QuestionSpec(
            id="m", title="M", kind=QuestionKind.CHECKBOX, options=["A", "B", "C"],
            settings=QuestionSettings(ordinal_structure=True),
        )
        # A second answer gives the column a spread: codes 4 and 2
        survey = single_question_survey(q, ["A,C", "B"])
        lines = body_lines(export_survey(survey, "standardized", on_date=EXPORT_DATE))
        assert lines[0] == "回答ID,回答日時,M_numeric"
        assert [line.split(",")[2] for line in lines[1:]] == ["1", "-1"]

    def test_example_survey_standardized_header(self):
        lines = body_lines(export_survey(build_example_survey(), "standardized", on_date=EXPORT_DATE))
        assert lines[0].split(",") == [
            "回答ID", "回答日時",
            "年齢_numeric",
            "都道府県_numeric",
            "満足度_numeric",
            "購入経路_店舗", "購入経路_通販", "購入経路_その他",
            "重視する点_価格", "重視する点_品質", "重視する点_デザイン",
            "意見",
        ]

    def test_english_headers(self):
        options = HeaderOptions(convert_to_english=True)
        artifact = export_survey(build_example_survey(), "onehot", header_options=options, on_date=EXPORT_DATE)
        header = body_lines(artifact)[0].split(",")
        assert header[:3] == ["response_id", "response_date", "age_numeric"]
        assert "prefecture_tokyo" in header
        assert "prefecture_okinawa" in header


class TestPreview:
    """Preview of the first rows."""

    def test_limit(self):
        preview = preview_survey(build_example_survey(), "raw", limit=2)
        assert preview.total_responses == 6
        assert preview.preview_count == 2
        assert not preview.preview.startswith(BOM)
        assert len(preview.preview.split("\n")) == 3

    def test_default_limit(self):
        preview = preview_survey(build_example_survey(response_count=8), "raw")
        assert preview.preview_count == 5

    def test_limit_larger_than_responses(self):
        preview = preview_survey(build_example_survey(response_count=3), "normalized", limit=10)
        assert preview.preview_count == 3
