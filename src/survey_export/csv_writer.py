"""
CSV Serializer (final pipeline stage).

Renders a Table as delimited text and builds the download filename.

Output rules:
    - Fields containing a comma, quote or line break are quoted, with
      embedded quotes doubled; all others are written unchanged
    - Rows are joined with "\\n"
    - The document starts with a UTF-8 byte-order mark so spreadsheet
      tools detect the encoding
"""

from datetime import date
from typing import Iterable, List, Sequence
from urllib.parse import quote

from survey_export.model import ExportFormat, Table

BOM = "\ufeff"
DELIMITER = ","
QUOTE = '"'
LINE_SEPARATOR = "\n"

_NEEDS_QUOTING = (DELIMITER, QUOTE, "\n", "\r")

# Characters encodeURIComponent leaves untouched besides alphanumerics
_URI_COMPONENT_SAFE = "-_.!~*'()"


def escape_field(value: str) -> str:
    """Quote a field if it holds a delimiter, quote or line break."""
    if any(ch in value for ch in _NEEDS_QUOTING):
        return QUOTE + value.replace(QUOTE, QUOTE * 2) + QUOTE
    return value


def format_row(fields: Iterable[str]) -> str:
    return DELIMITER.join(escape_field(f) for f in fields)


def serialize(header: Sequence[str], rows: Iterable[Sequence[str]], bom: bool = True) -> str:
    """
    Render header and rows as CSV text.

    Args:
        header: Column labels
        rows: Rendered cell values, one sequence per response
        bom: Prefix the output with a byte-order mark

    Returns:
        CSV document as a string
    """
    lines: List[str] = [format_row(header)]
    lines.extend(format_row(row) for row in rows)
    body = LINE_SEPARATOR.join(lines)
    return BOM + body if bom else body


def serialize_table(table: Table, bom: bool = True) -> str:
    return serialize(table.header, table.rows, bom=bom)


def build_filename(survey_title: str, fmt: ExportFormat, on_date: date) -> str:
    """{surveyTitle}_{format}_{YYYY-MM-DD}.csv"""
    return f"{survey_title}_{fmt.value}_{on_date.isoformat()}.csv"


def encode_filename(filename: str) -> str:
    """Percent-encode a filename the way encodeURIComponent does."""
    return quote(filename, safe=_URI_COMPONENT_SAFE)


def content_disposition(filename: str) -> str:
    """Content-Disposition header value for a file download."""
    return f"attachment; filename*=UTF-8''{encode_filename(filename)}"
