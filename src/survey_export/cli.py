"""
Command-line export of a survey snapshot file.

    survey-export snapshot.yaml --format normalized -o out.csv
    survey-export snapshot.json --preview 5
    survey-export snapshot.yaml --report
"""

import argparse
import logging
import sys
from typing import List, Optional

from survey_export import config
from survey_export.analyzer import analyze_export
from survey_export.errors import ExportError
from survey_export.model import ExportFormat, HeaderOptions
from survey_export.pipeline import export_survey, preview_survey
from survey_export.serialization import load_snapshot_file

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="survey-export",
        description="Export survey responses as an analytical CSV",
    )
    parser.add_argument("snapshot", help="Survey snapshot file (.json, .yaml or .yml)")
    parser.add_argument(
        "--format",
        default=ExportFormat.RAW.value,
        choices=[f.value for f in ExportFormat],
        help="Export encoding (default: raw)",
    )
    parser.add_argument("--include-personal-data", action="store_true",
                        help="Keep name, email and phone questions")
    parser.add_argument("--english", action="store_true", help="Use English column labels")
    parser.add_argument("-o", "--output", help="Write the CSV here (default: filename from the survey)")
    parser.add_argument("--preview", type=int, metavar="N", help="Print the first N rows instead of exporting")
    parser.add_argument("--report", action="store_true", help="Print export diagnostics instead of exporting")
    return parser


def _print_report(snapshot, fmt: str, include_personal_data: bool) -> None:
    report = analyze_export(snapshot, fmt, include_personal_data=include_personal_data)
    print(f"Survey: {report.survey_id} ({report.format.value})")
    print(f"  Questions: {report.total_questions}")
    print(f"  Responses: {report.total_responses}")
    print(f"  Columns:   {report.total_columns}")
    for kind, count in sorted(report.columns_by_kind.items()):
        print(f"    {kind}: {count}")
    if report.warnings:
        print(f"\n  Warnings ({len(report.warnings)}):")
        for warning in report.warnings:
            print(f"    - {warning}")


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=config.LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")
    args = build_parser().parse_args(argv)

    try:
        snapshot = load_snapshot_file(args.snapshot)

        if args.report:
            _print_report(snapshot, args.format, args.include_personal_data)
            return 0

        header_options = HeaderOptions(convert_to_english=args.english)

        if args.preview is not None:
            preview = preview_survey(
                snapshot, args.format, args.include_personal_data,
                limit=args.preview, header_options=header_options,
            )
            print(preview.preview)
            print(f"\n({preview.preview_count} of {preview.total_responses} responses)")
            return 0

        artifact = export_survey(
            snapshot, args.format, args.include_personal_data, header_options=header_options,
        )
        path = args.output or artifact.filename
        with open(path, "w", encoding="utf-8", newline="") as fh:
            fh.write(artifact.body)
        print(f"Wrote {artifact.size_bytes} bytes to {path}")
        return 0
    except FileNotFoundError as exc:
        logger.error("Snapshot not found: %s", exc.filename)
        return 1
    except ExportError as exc:
        logger.error("Export failed: %s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
