#!/usr/bin/env python3
"""
Complete Export Demo: Snapshot → Diagnostics → CSV (all formats)

Shows the full workflow:
1. Build an example survey snapshot
2. Analyze it for data-quality issues
3. Preview the first rows
4. Export it in every format
"""

from survey_export.analyzer import analyze_export
from survey_export.examples import build_example_survey
from survey_export.model import ExportFormat
from survey_export.pipeline import export_survey, preview_survey


def main():
    print("=" * 80)
    print("EXPORT DEMO: Snapshot → Diagnostics → CSV")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Build snapshot
    # =========================================================================
    print("\n1. BUILDING SNAPSHOT...")
    survey = build_example_survey()
    print(f"   ✓ Survey: {survey.title}")
    print(f"   ✓ Questions: {len(survey.questions)}")
    print(f"   ✓ Responses: {len(survey.responses)}")

    # =========================================================================
    # STEP 2: Diagnostics
    # =========================================================================
    print("\n2. ANALYZING...")
    report = analyze_export(survey, ExportFormat.NORMALIZED)
    print(f"   ✓ Columns: {report.total_columns}")
    print(f"   ✓ NA counts: {report.na_counts}")
    if report.warnings:
        print(f"\n   Warnings ({len(report.warnings)}):")
        for warning in report.warnings:
            print(f"      - {warning}")

    # =========================================================================
    # STEP 3: Preview
    # =========================================================================
    print("\n3. PREVIEW (standardized):")
    print("-" * 80)
    preview = preview_survey(survey, ExportFormat.STANDARDIZED, limit=3)
    for line in preview.preview.split("\n"):
        print(f"   {line}")

    # =========================================================================
    # STEP 4: Export every format
    # =========================================================================
    print("\n4. EXPORTING...")
    for fmt in ExportFormat:
        artifact = export_survey(survey, fmt)
        with open(artifact.filename, "w", encoding="utf-8", newline="") as fh:
            fh.write(artifact.body)
        print(f"   ✓ Saved {artifact.filename} ({artifact.size_bytes} bytes)")

    print("\n" + "=" * 80)
    print("EXPORT COMPLETE!")
    print("=" * 80)


if __name__ == "__main__":
    main()
