"""
Numeric Conversion Engine

Maps a raw answer string to an integer code for ordinal / categorical
questions.

Code 0 is the NA sentinel (missing, unparseable or unmapped answer); every
legitimate code is >= 1 because option ranks are 1-based.
"""

from typing import List, Optional

from survey_export.encoding import question_options
from survey_export.model import QuestionKind, QuestionSpec
from survey_export.reference import AGE_GROUP_RANKS, PREFECTURE_REGIONS, REGION_RANKS


NA_CODE = 0

_MISSING_LITERALS = frozenset({"null", "undefined"})


def is_missing(answer: Optional[str]) -> bool:
    """True for None, blank, or the literal strings "null" / "undefined"."""
    if answer is None:
        return True
    if answer.strip() == "":
        return True
    return answer in _MISSING_LITERALS


def split_selections(answer: Optional[str]) -> List[str]:
    """Split a persisted multi-choice answer into its selected labels."""
    if not answer:
        return []
    return answer.split(",")


def option_rank(options: List[str], label: str) -> int:
    """1-based position of label in options, or 0 when absent."""
    try:
        return options.index(label) + 1
    except ValueError:
        return NA_CODE


def to_numeric(question: QuestionSpec, answer: Optional[str]) -> int:
    """
    Convert an answer into its numeric code.

    Args:
        question: Question the answer belongs to
        answer: Raw persisted answer text

    Returns:
        Integer code; 0 means NA
    """
    if is_missing(answer):
        return NA_CODE

    kind = question.kind

    if kind is QuestionKind.AGE_GROUP:
        return AGE_GROUP_RANKS.get(answer, NA_CODE)

    if kind is QuestionKind.PREFECTURE:
        region = PREFECTURE_REGIONS.get(answer)
        return REGION_RANKS.get(region, NA_CODE) if region else NA_CODE

    options = question_options(question)

    if kind is QuestionKind.CHECKBOX:
        selected = split_selections(answer)
        if not selected:
            return NA_CODE
        # Labels missing from the option list contribute nothing
        return sum(option_rank(options, label) for label in selected)

    return option_rank(options, answer)


def unknown_selections(question: QuestionSpec, answer: Optional[str]) -> List[str]:
    """
    Labels in an answer that do not appear in the question's options.

    Used for diagnostics only; conversion itself ignores such labels.
    """
    if is_missing(answer):
        return []
    options = question_options(question)
    if question.kind is QuestionKind.CHECKBOX:
        labels = split_selections(answer)
    else:
        labels = [answer]
    return [label for label in labels if label not in options]
