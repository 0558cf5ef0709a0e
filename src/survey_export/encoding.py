"""
Encoding Resolver

Decides, per question and export format, whether a question is rendered as
pass-through text, a single numeric column, or one-hot columns.

Pure functions only: the decision depends on the question definition and
the format, never on the collected answers.
"""

from typing import List

from survey_export.model import ColumnKind, ExportFormat, QuestionKind, QuestionSpec
from survey_export.reference import AGE_GROUPS, PREFECTURES


# Kinds whose options may carry an ordinal structure
_CHOICE_KINDS = frozenset({QuestionKind.RADIO, QuestionKind.SELECT})

# Kinds that are ordinal regardless of their settings
_IMPLICIT_ORDINAL_KINDS = frozenset({QuestionKind.PREFECTURE, QuestionKind.AGE_GROUP})

# Kinds expanded to one-hot columns by the onehot format
_ONEHOT_KINDS = frozenset({
    QuestionKind.RADIO,
    QuestionKind.SELECT,
    QuestionKind.CHECKBOX,
    QuestionKind.PREFECTURE,
})


def resolve(question: QuestionSpec, fmt: ExportFormat) -> ColumnKind:
    """
    Resolve the ColumnKind of a question for an export format.

    Rules:
        raw                      -> TEXT for every question
        normalized/standardized:
            RADIO, SELECT        -> NUMERIC_ORDINAL if ordinal_structure, else ONE_HOT
            PREFECTURE, AGE_GROUP-> NUMERIC_ORDINAL
            CHECKBOX             -> NUMERIC_ORDINAL (rank sum) if ordinal_structure,
                                    else ONE_HOT
            anything else        -> TEXT
        onehot:
            RADIO, SELECT, CHECKBOX, PREFECTURE -> ONE_HOT
            AGE_GROUP            -> NUMERIC_ORDINAL (unscaled)
            anything else        -> TEXT
    """
    if fmt is ExportFormat.RAW:
        return ColumnKind.TEXT

    kind = question.kind

    if fmt is ExportFormat.ONEHOT:
        if kind in _ONEHOT_KINDS:
            return ColumnKind.ONE_HOT
        if kind is QuestionKind.AGE_GROUP:
            return ColumnKind.NUMERIC_ORDINAL
        return ColumnKind.TEXT

    if kind in _IMPLICIT_ORDINAL_KINDS:
        return ColumnKind.NUMERIC_ORDINAL

    if kind in _CHOICE_KINDS or kind is QuestionKind.CHECKBOX:
        if question.settings.ordinal_structure:
            return ColumnKind.NUMERIC_ORDINAL
        return ColumnKind.ONE_HOT

    return ColumnKind.TEXT


def question_options(question: QuestionSpec) -> List[str]:
    """
    Return the option labels used to expand or rank a question.

    Questions without an option list fall back to the predefined labels of
    their kind (prefectures, age brackets); all others get an empty list.
    """
    if question.options is not None:
        return list(question.options)
    if question.kind is QuestionKind.PREFECTURE:
        return list(PREFECTURES)
    if question.kind is QuestionKind.AGE_GROUP:
        return list(AGE_GROUPS)
    return []
