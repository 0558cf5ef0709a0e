from __future__ import annotations

import os

# ---------------------------------------------------------------------------
# Timestamps
#
# Response dates are rendered in a fixed local offset (Japan Standard Time by
# default) with minute precision.
# ---------------------------------------------------------------------------

EXPORT_UTC_OFFSET_HOURS = int(os.getenv("SURVEY_EXPORT_UTC_OFFSET_HOURS", "9"))
RESPONDED_AT_FORMAT = "%Y-%m-%d %H:%M"

# ---------------------------------------------------------------------------
# Header labels
# ---------------------------------------------------------------------------

DEFAULT_RESPONSE_ID_LABEL = "回答ID"
DEFAULT_RESPONDED_AT_LABEL = "回答日時"
ENGLISH_RESPONSE_ID_LABEL = "response_id"
ENGLISH_RESPONDED_AT_LABEL = "response_date"

# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

CSV_CONTENT_TYPE = "text/csv; charset=utf-8"
NA_LITERAL = "NA"

# Number of responses included in an export preview
PREVIEW_ROW_LIMIT = int(os.getenv("SURVEY_EXPORT_PREVIEW_ROWS", "5"))

# ---------------------------------------------------------------------------
# Logging (used by the CLI; library code only creates loggers)
# ---------------------------------------------------------------------------

LOG_LEVEL = os.getenv("SURVEY_EXPORT_LOG_LEVEL", "WARNING").strip().upper()
