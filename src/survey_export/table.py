"""
Table Builder

Assembles the export table: one ColumnPlan computed up front, statistics
computed once per numeric question, then one row per response.

ARCHITECTURAL RULE:
    The plan and the statistics are built before any row is emitted and
    are reused for every row, so every row has the same columns with the
    same meaning.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import numpy as np

from survey_export import config
from survey_export.encoding import question_options, resolve
from survey_export.errors import EmptySurveyError
from survey_export.model import (
    ColumnKind,
    ColumnPlan,
    ColumnSpec,
    ExportFormat,
    HeaderOptions,
    PlannedQuestion,
    QuestionKind,
    QuestionSpec,
    RedactionPolicy,
    ResponseRecord,
    SurveySnapshot,
    Table,
)
from survey_export.normalizer import QuestionStats, compute_stats_map, scale
from survey_export.numeric import NA_CODE, split_selections, to_numeric
from survey_export.reference import PREFECTURE_ENGLISH
from survey_export.translation import translate_variable_name

logger = logging.getLogger(__name__)

NUMERIC_SUFFIX = "numeric"


# =============================================================================
# COLUMN PLAN
# =============================================================================


def _leading_labels(options: HeaderOptions) -> List[str]:
    if options.convert_to_english:
        id_default = config.ENGLISH_RESPONSE_ID_LABEL
        date_default = config.ENGLISH_RESPONDED_AT_LABEL
    else:
        id_default = config.DEFAULT_RESPONSE_ID_LABEL
        date_default = config.DEFAULT_RESPONDED_AT_LABEL
    return [
        options.response_id_label or id_default,
        options.responded_at_label or date_default,
    ]


def column_label(question: QuestionSpec, suffix: str, options: HeaderOptions) -> str:
    """
    Label of one column of a question.

    Custom variable names win over everything else; English conversion
    turns prefecture one-hot columns into prefecture_<romaji> and passes
    other labels through translate_variable_name.
    """
    custom = options.variable_names.get(question.id)
    if custom:
        return f"{custom}_{suffix}" if suffix else custom

    label = f"{question.title}_{suffix}" if suffix else question.title
    if not options.convert_to_english:
        return label

    if question.kind is QuestionKind.PREFECTURE and suffix and suffix != NUMERIC_SUFFIX:
        english = PREFECTURE_ENGLISH.get(suffix)
        if english is None:
            english = suffix.lower()
            for marker in ("県", "府", "都"):
                english = english.replace(marker, "")
        return f"prefecture_{english}"

    return translate_variable_name(label)


def plan_question(
    question: QuestionSpec,
    fmt: ExportFormat,
    options: HeaderOptions,
) -> PlannedQuestion:
    """Resolve a question's ColumnKind and expand it into columns."""
    kind = resolve(question, fmt)
    labels = question_options(question)

    if kind is ColumnKind.ONE_HOT:
        columns = [
            ColumnSpec(label=column_label(question, option, options), kind=kind, option=option)
            for option in labels
        ]
    elif kind is ColumnKind.NUMERIC_ORDINAL:
        columns = [ColumnSpec(label=column_label(question, NUMERIC_SUFFIX, options), kind=kind)]
    else:
        columns = [ColumnSpec(label=column_label(question, "", options), kind=kind)]

    return PlannedQuestion(question=question, kind=kind, columns=columns, options=labels)


def build_column_plan(
    questions: List[QuestionSpec],
    fmt: ExportFormat,
    redaction: RedactionPolicy,
    header_options: Optional[HeaderOptions] = None,
) -> ColumnPlan:
    """
    Compute the ColumnPlan for one export.

    Questions are planned in the order given (see
    SurveySnapshot.ordered_questions); redacted questions are dropped before
    encoding is resolved.
    """
    header_options = header_options or HeaderOptions()
    plan = ColumnPlan(format=fmt, leading_labels=_leading_labels(header_options))

    for question in questions:
        if redaction.excludes(question):
            logger.debug("Redacting personal-data question %s (%s)", question.id, question.kind.value)
            continue
        plan.entries.append(plan_question(question, fmt, header_options))

    return plan


# =============================================================================
# CELL RENDERING
# =============================================================================


def format_responded_at(created_at: datetime) -> str:
    """Render a response instant at the configured UTC offset, minute precision."""
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    local = created_at.astimezone(timezone(timedelta(hours=config.EXPORT_UTC_OFFSET_HOURS)))
    return local.strftime(config.RESPONDED_AT_FORMAT)


def format_number(value: float) -> str:
    """Decimal string of a number; integral values carry no fractional part."""
    if float(value).is_integer():
        return str(int(value))
    return np.format_float_positional(float(value), trim="-")


def render_numeric(
    question: QuestionSpec,
    answer: str,
    stats: QuestionStats,
    fmt: ExportFormat,
) -> str:
    code = to_numeric(question, answer)
    if code == NA_CODE:
        return config.NA_LITERAL
    value = scale(code, stats, fmt)
    if math.isnan(value):
        return config.NA_LITERAL
    return format_number(value)


def render_one_hot(entry: PlannedQuestion, answer: str) -> List[str]:
    if entry.question.kind is QuestionKind.CHECKBOX:
        selected = set(split_selections(answer))
        return ["1" if option in selected else "0" for option in entry.options]
    return ["1" if answer == option else "0" for option in entry.options]


def render_entry(
    entry: PlannedQuestion,
    answer: str,
    stats: Optional[QuestionStats],
    fmt: ExportFormat,
) -> List[str]:
    """Cells of one question for one response."""
    if entry.kind is ColumnKind.ONE_HOT:
        return render_one_hot(entry, answer)
    if entry.kind is ColumnKind.NUMERIC_ORDINAL:
        return [render_numeric(entry.question, answer, stats or QuestionStats.empty(), fmt)]
    return [answer]


def known_answers(response: ResponseRecord, question_ids: set) -> Dict[str, str]:
    """Answers of a response whose question exists in the schema."""
    answers: Dict[str, str] = {}
    for question_id, value in response.answers.items():
        if question_id not in question_ids:
            logger.debug("Skipping answer of response %s for unknown question %s", response.id, question_id)
            continue
        answers[question_id] = value if value is not None else ""
    return answers


# =============================================================================
# TABLE
# =============================================================================


def build_table(
    survey: SurveySnapshot,
    fmt: ExportFormat,
    redaction: RedactionPolicy,
    header_options: Optional[HeaderOptions] = None,
    responses: Optional[List[ResponseRecord]] = None,
) -> Table:
    """
    Build the export table of a survey.

    Args:
        survey: Snapshot supplied by the loader
        fmt: ExportFormat
        redaction: RedactionPolicy
        header_options: Optional header customization
        responses: Responses to export; defaults to all of the survey's.
            Statistics are computed over this same set.

    Returns:
        Table with unescaped cell values

    Raises:
        EmptySurveyError: If the survey has no questions
    """
    if not survey.questions:
        raise EmptySurveyError(f"Survey {survey.id!r} has no questions to export")

    if responses is None:
        responses = survey.responses

    plan = build_column_plan(survey.ordered_questions(), fmt, redaction, header_options)

    numeric_questions = [e.question for e in plan.entries if e.kind is ColumnKind.NUMERIC_ORDINAL]
    stats_map = compute_stats_map(numeric_questions, responses)

    question_ids = {q.id for q in survey.questions}
    table = Table(header=plan.header)

    for response in responses:
        answers = known_answers(response, question_ids)
        row = [response.id, format_responded_at(response.created_at)]
        for entry in plan.entries:
            answer = answers.get(entry.question.id, "")
            row.extend(render_entry(entry, answer, stats_map.get(entry.question.id), fmt))
        table.rows.append(row)

    logger.debug(
        "Built %s table for survey %s: %d columns, %d rows",
        fmt.value, survey.id, plan.width, len(table.rows),
    )
    return table
