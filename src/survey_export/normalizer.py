"""
Statistical Normalizer

Computes per-question aggregate statistics over valid numeric codes and
applies the min-max or z-score transform requested by the export format.

NA codes (0) are excluded from the statistics and are never scaled.
Variance is the population variance: the transform is a descriptive
rescaling of the collected answers, not an estimate.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List

import numpy as np

from survey_export.model import ExportFormat, QuestionSpec, ResponseRecord
from survey_export.numeric import NA_CODE, to_numeric


@dataclass(frozen=True)
class QuestionStats:
    """Aggregate statistics of one question's valid codes."""

    mean: float
    std: float
    minimum: float
    maximum: float
    count: int = 0

    @classmethod
    def empty(cls) -> QuestionStats:
        nan = float("nan")
        return cls(mean=nan, std=nan, minimum=nan, maximum=nan, count=0)

    @property
    def is_empty(self) -> bool:
        return self.count == 0


def valid_codes(question: QuestionSpec, responses: Iterable[ResponseRecord]) -> List[int]:
    """Numeric codes of every response's answer to question, NA codes dropped."""
    codes: List[int] = []
    for response in responses:
        code = to_numeric(question, response.answers.get(question.id))
        if code != NA_CODE:
            codes.append(code)
    return codes


def compute_stats(question: QuestionSpec, responses: Iterable[ResponseRecord]) -> QuestionStats:
    """
    Compute mean, population standard deviation, min and max of a question.

    Returns:
        QuestionStats; all-NaN with count 0 when no response holds a valid code
    """
    codes = valid_codes(question, responses)
    if not codes:
        return QuestionStats.empty()

    values = np.asarray(codes, dtype=float)
    return QuestionStats(
        mean=float(values.mean()),
        std=float(values.std(ddof=0)),
        minimum=float(values.min()),
        maximum=float(values.max()),
        count=len(codes),
    )


def compute_stats_map(
    questions: Iterable[QuestionSpec],
    responses: List[ResponseRecord],
) -> Dict[str, QuestionStats]:
    """Statistics for each question, keyed by question id. Computed once per export."""
    return {question.id: compute_stats(question, responses) for question in questions}


def scale(code: int, stats: QuestionStats, fmt: ExportFormat) -> float:
    """
    Scale a numeric code for an export format.

    Rules:
        code == 0            -> 0 (NA, rendered downstream as "NA")
        no valid codes       -> code unchanged
        normalized           -> (code - min) / (max - min), 0 when max == min
        standardized         -> (code - mean) / std, 0 when std == 0
        unscaled formats     -> code unchanged
    """
    if code == NA_CODE:
        return NA_CODE
    if not fmt.is_scaled or stats.is_empty:
        return code

    if fmt is ExportFormat.NORMALIZED:
        spread = stats.maximum - stats.minimum
        if spread == 0 or math.isnan(spread):
            return 0
        return (code - stats.minimum) / spread

    if stats.std == 0 or math.isnan(stats.std):
        return 0
    return (code - stats.mean) / stats.std
