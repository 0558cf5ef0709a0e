"""
Export pipeline entry points.

export_survey() is the single function the HTTP layer calls: it takes a
survey snapshot and export options and returns the complete artifact
(filename, content type, body). preview_survey() renders the first few
rows for display before download.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional

from survey_export import config
from survey_export.csv_writer import build_filename, content_disposition, serialize_table
from survey_export.model import ExportFormat, HeaderOptions, RedactionPolicy, SurveySnapshot
from survey_export.table import build_table

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportArtifact:
    """A finished export, ready to be wrapped in a download response."""

    filename: str
    content_type: str
    body: str

    @property
    def content_disposition(self) -> str:
        return content_disposition(self.filename)

    @property
    def size_bytes(self) -> int:
        return len(self.body.encode("utf-8"))


@dataclass(frozen=True)
class ExportPreview:
    """CSV text of the first rows of an export."""

    preview: str
    total_responses: int
    preview_count: int


def export_survey(
    survey: SurveySnapshot,
    fmt: ExportFormat | str,
    include_personal_data: bool = False,
    header_options: Optional[HeaderOptions] = None,
    on_date: Optional[date] = None,
) -> ExportArtifact:
    """
    Produce the CSV export of a survey.

    Args:
        survey: Snapshot supplied by the loader (access already checked)
        fmt: ExportFormat or its string value
        include_personal_data: Keep NAME / EMAIL / PHONE questions
        header_options: Optional header customization
        on_date: Date used in the filename; defaults to today (UTC)

    Returns:
        ExportArtifact whose body starts with a byte-order mark

    Raises:
        UnsupportedFormatError: If fmt is not a known format
        EmptySurveyError: If the survey has no questions
    """
    fmt = ExportFormat.parse(fmt)
    table = build_table(
        survey,
        fmt,
        RedactionPolicy(include_personal_data=include_personal_data),
        header_options,
    )
    body = serialize_table(table, bom=True)

    if on_date is None:
        on_date = datetime.now(timezone.utc).date()
    filename = build_filename(survey.title, fmt, on_date)

    logger.info(
        "Exported survey %s as %s: %d responses, %d columns",
        survey.id, fmt.value, len(table.rows), len(table.header),
    )
    return ExportArtifact(filename=filename, content_type=config.CSV_CONTENT_TYPE, body=body)


def preview_survey(
    survey: SurveySnapshot,
    fmt: ExportFormat | str,
    include_personal_data: bool = False,
    limit: Optional[int] = None,
    header_options: Optional[HeaderOptions] = None,
) -> ExportPreview:
    """
    Render the first `limit` responses of an export.

    The preview is built from those responses alone, statistics included,
    and carries no byte-order mark.
    """
    fmt = ExportFormat.parse(fmt)
    if limit is None:
        limit = config.PREVIEW_ROW_LIMIT
    subset = survey.responses[:max(limit, 0)]

    table = build_table(
        survey,
        fmt,
        RedactionPolicy(include_personal_data=include_personal_data),
        header_options,
        responses=subset,
    )
    return ExportPreview(
        preview=serialize_table(table, bom=False),
        total_responses=len(survey.responses),
        preview_count=len(subset),
    )
