"""
Export Analyzer: diagnostics for a survey snapshot before export.

This module reports data-quality issues that the export itself silently
tolerates:
    - Answers referencing questions missing from the schema
    - Answer labels missing from a question's option list
    - NA counts of numeric columns
    - Numeric columns without variance
    - Choice questions that expand to zero columns

IMPORTANT: Read-only. It never changes what the export produces.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Set

from survey_export.model import ColumnKind, ExportFormat, RedactionPolicy, SurveySnapshot
from survey_export.normalizer import compute_stats
from survey_export.numeric import NA_CODE, to_numeric, unknown_selections
from survey_export.table import build_column_plan


@dataclass
class ExportReport:
    """Diagnostics for one survey and export format."""

    survey_id: str
    format: ExportFormat
    total_questions: int = 0
    total_responses: int = 0
    total_columns: int = 0

    # Column layout
    columns_by_kind: Dict[str, int] = field(default_factory=dict)
    empty_one_hot_questions: List[str] = field(default_factory=list)

    # Data integrity
    stale_answer_references: Dict[str, Set[str]] = field(default_factory=dict)
    unknown_labels: Dict[str, Set[str]] = field(default_factory=dict)

    # Numeric columns
    na_counts: Dict[str, int] = field(default_factory=dict)
    zero_variance_questions: List[str] = field(default_factory=list)

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def analyze_export(
    survey: SurveySnapshot,
    fmt: ExportFormat | str = ExportFormat.NORMALIZED,
    include_personal_data: bool = True,
) -> ExportReport:
    """
    Inspect a snapshot against the column plan of an export format.

    Returns an ExportReport with counts and warnings.
    """
    fmt = ExportFormat.parse(fmt)
    report = ExportReport(survey_id=survey.id, format=fmt)
    report.total_questions = len(survey.questions)
    report.total_responses = len(survey.responses)

    plan = build_column_plan(
        survey.ordered_questions(), fmt, RedactionPolicy(include_personal_data=include_personal_data)
    )
    report.total_columns = plan.width

    # =========================================================================
    # 1. COLUMN LAYOUT
    # =========================================================================

    kind_counts: Dict[str, int] = defaultdict(int)
    for entry in plan.entries:
        kind_counts[entry.kind.value] += len(entry.columns)
        if entry.kind is ColumnKind.ONE_HOT and not entry.columns:
            report.empty_one_hot_questions.append(entry.question.id)
    report.columns_by_kind = dict(kind_counts)

    # =========================================================================
    # 2. DATA INTEGRITY
    # =========================================================================

    stale: Dict[str, Set[str]] = defaultdict(set)
    unknown: Dict[str, Set[str]] = defaultdict(set)

    for response in survey.responses:
        for question_id in response.answers:
            if survey.get_question(question_id) is None:
                stale[question_id].add(response.id)

    for entry in plan.entries:
        if entry.kind is ColumnKind.TEXT:
            continue
        for response in survey.responses:
            labels = unknown_selections(entry.question, response.answers.get(entry.question.id))
            unknown[entry.question.id].update(labels)

    report.stale_answer_references = dict(stale)
    report.unknown_labels = {qid: labels for qid, labels in unknown.items() if labels}

    # =========================================================================
    # 3. NUMERIC COLUMNS
    # =========================================================================

    for entry in plan.entries:
        if entry.kind is not ColumnKind.NUMERIC_ORDINAL:
            continue
        question = entry.question
        report.na_counts[question.id] = sum(
            1 for r in survey.responses
            if to_numeric(question, r.answers.get(question.id)) == NA_CODE
        )
        stats = compute_stats(question, survey.responses)
        if stats.count > 0 and stats.std == 0:
            report.zero_variance_questions.append(question.id)

    # =========================================================================
    # 4. WARNING FLAGS
    # =========================================================================

    if report.stale_answer_references:
        report.add_warning(
            f"Answers reference unknown questions: {', '.join(sorted(report.stale_answer_references))}"
        )

    for question_id in sorted(report.unknown_labels):
        labels = ", ".join(sorted(report.unknown_labels[question_id]))
        report.add_warning(f"Question {question_id} has answers outside its options: {labels}")

    if report.empty_one_hot_questions:
        report.add_warning(
            f"Questions without options export no columns: {', '.join(report.empty_one_hot_questions)}"
        )

    if report.zero_variance_questions:
        report.add_warning(
            f"Numeric columns without variance: {', '.join(report.zero_variance_questions)}"
        )

    if report.total_responses > 0:
        for question_id, count in report.na_counts.items():
            if count == report.total_responses:
                report.add_warning(f"Numeric column of {question_id} is entirely NA")

    return report
