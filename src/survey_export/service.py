"""
Export service: the boundary between the request layer and the pipeline.

Authorization, entitlements, loading and usage accounting belong to other
subsystems. They are injected here as small protocols so the pipeline itself
never performs them.

Order of operations for one request:
    1. can_export          (capability check)
    2. check_export_format (plan / ticket gating)
    3. load_survey_for_export
    4. export_survey       (pure pipeline)
    5. record_data_usage   (byte length of the artifact)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Protocol

from survey_export.errors import EntitlementError, ExportPermissionError
from survey_export.model import ExportFormat, HeaderOptions, SurveySnapshot
from survey_export.pipeline import ExportArtifact, ExportPreview, export_survey, preview_survey

logger = logging.getLogger(__name__)


class SurveyLoader(Protocol):
    def load_survey_for_export(self, survey_id: str, user_id: str) -> SurveySnapshot:
        ...


class EntitlementChecker(Protocol):
    def check_export_format(self, user_id: str, fmt: ExportFormat) -> bool:
        ...


class UsageRecorder(Protocol):
    def record_data_usage(self, user_id: str, survey_id: str, size_bytes: int, description: str) -> None:
        ...


class ExportPermission(Protocol):
    def can_export(self, user_id: str, survey_id: str) -> bool:
        ...


class AllowAll:
    """Permission and entitlement stand-in that grants everything."""

    def can_export(self, user_id: str, survey_id: str) -> bool:
        return True

    def check_export_format(self, user_id: str, fmt: ExportFormat) -> bool:
        return True


@dataclass
class ExportRequest:
    survey_id: str
    user_id: str
    format: ExportFormat | str = ExportFormat.RAW
    include_personal_data: bool = False
    header_options: Optional[HeaderOptions] = None


@dataclass
class ExportService:
    """Runs one export request against injected collaborators."""

    loader: SurveyLoader
    entitlements: EntitlementChecker
    usage: Optional[UsageRecorder] = None
    permission: Optional[ExportPermission] = None

    def _authorize(self, request: ExportRequest) -> ExportFormat:
        fmt = ExportFormat.parse(request.format)
        if self.permission is not None and not self.permission.can_export(request.user_id, request.survey_id):
            logger.info("Export of survey %s denied for user %s", request.survey_id, request.user_id)
            raise ExportPermissionError(
                f"User {request.user_id!r} may not export survey {request.survey_id!r}"
            )
        if not self.entitlements.check_export_format(request.user_id, fmt):
            logger.info("Export format %s not entitled for user %s", fmt.value, request.user_id)
            raise EntitlementError(f"Export format {fmt.value!r} is not included in the user's plan")
        return fmt

    def export(self, request: ExportRequest, on_date: Optional[date] = None) -> ExportArtifact:
        """
        Export a survey for a user.

        Raises:
            ExportPermissionError: If the capability check fails
            EntitlementError: If the format is not allowed for the user
            UnsupportedFormatError / EmptySurveyError: From the pipeline
        """
        fmt = self._authorize(request)
        survey = self.loader.load_survey_for_export(request.survey_id, request.user_id)
        artifact = export_survey(
            survey,
            fmt,
            include_personal_data=request.include_personal_data,
            header_options=request.header_options,
            on_date=on_date,
        )
        if self.usage is not None:
            self.usage.record_data_usage(
                request.user_id,
                request.survey_id,
                artifact.size_bytes,
                f"CSV export ({fmt.value}): {artifact.filename}",
            )
        return artifact

    def preview(self, request: ExportRequest, limit: Optional[int] = None) -> ExportPreview:
        fmt = self._authorize(request)
        survey = self.loader.load_survey_for_export(request.survey_id, request.user_id)
        return preview_survey(
            survey,
            fmt,
            include_personal_data=request.include_personal_data,
            limit=limit,
            header_options=request.header_options,
        )
