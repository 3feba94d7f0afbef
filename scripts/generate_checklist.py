#!/usr/bin/env python3
"""
Generate document checklists from MISMO 3.4 XML files.

Runs the checklist processor over one or more files (or every .xml file in a
folder) and prints the result as JSON or as a plain-text checklist.

Usage:
    python scripts/generate_checklist.py loan.xml
    python scripts/generate_checklist.py loans/ --format text
    python scripts/generate_checklist.py loan.xml --reference-date 2026-02-01 --output out/
"""

import argparse
import json
import sys
from datetime import date
from pathlib import Path
from typing import List

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from mismo_checklist.constants import RequirementCategory
from mismo_checklist.exceptions import MISMOParseError
from mismo_checklist.models import ChecklistResult
from mismo_checklist.processor import MISMOChecklistProcessor
from mismo_checklist.utils import setup_logging

logger = setup_logging()

CATEGORY_TITLES = {
    RequirementCategory.INCOME: "Income Documentation",
    RequirementCategory.GENERAL: "General Documentation",
    RequirementCategory.ASSETS: "Asset Documentation",
    RequirementCategory.CREDIT: "Credit Documentation",
}


def collect_files(paths: List[str]) -> List[Path]:
    """Expand folders into their .xml files, keeping the given order."""
    files = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            files.extend(sorted(path.glob("*.xml")))
        else:
            files.append(path)
    return files


def render_text(result: ChecklistResult, source: str) -> str:
    summary = result.summary
    lines = [
        f"MISMO checklist: {source}",
        f"Borrowers: {', '.join(summary.borrower_names) or '-'}",
        f"Purpose: {summary.loan_purpose or '-'}   Type: {summary.mortgage_type or '-'}",
    ]
    if summary.base_loan_amount:
        lines.append(f"Loan amount: ${summary.base_loan_amount:,.2f}")
    for indicator in summary.indicators.values():
        lines.append(f"  [{indicator.state}] {indicator.label}")
    for flag in summary.complexity_flags:
        lines.append(f"  * {flag}")

    for category in RequirementCategory:
        items = result.items(category)
        lines.append("")
        lines.append(f"{CATEGORY_TITLES[category]} ({len(items)})")
        if not items:
            lines.append("  No documents required in this category")
        for item in items:
            lines.append(f"  [{item.status.value:<11}] {item.name}")
            lines.append(f"                {item.reason}")
    return "\n".join(lines)


def main():
    parser = argparse.ArgumentParser(
        description="Generate document checklists from MISMO 3.4 XML files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/generate_checklist.py loan.xml
  python scripts/generate_checklist.py loans/ --format text
  python scripts/generate_checklist.py loan.xml --reference-date 2026-02-01
        """,
    )
    parser.add_argument(
        "paths",
        nargs="+",
        help="MISMO XML files or folders containing them",
    )
    parser.add_argument(
        "--reference-date",
        type=date.fromisoformat,
        default=None,
        help="Date to evaluate against, YYYY-MM-DD (default: today)",
    )
    parser.add_argument(
        "--format",
        choices=["json", "text"],
        default="json",
        help="Output format (default: json)",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Folder to write one result file per input (default: stdout)",
    )

    args = parser.parse_args()
    reference_date = args.reference_date or date.today()

    files = collect_files(args.paths)
    if not files:
        logger.error("No MISMO files found in %s", ", ".join(args.paths))
        return 1

    output_dir = Path(args.output) if args.output else None
    if output_dir:
        output_dir.mkdir(parents=True, exist_ok=True)

    processor = MISMOChecklistProcessor()
    failures = 0
    for path in files:
        try:
            result = processor.process_file(path, reference_date)
        except (MISMOParseError, OSError) as e:
            logger.error("Failed to process %s: %s", path, e)
            failures += 1
            continue

        if args.format == "json":
            data = result.to_dict()
            data["source"] = path.name
            data["reference_date"] = reference_date.isoformat()
            rendered = json.dumps(data, indent=2)
            suffix = ".checklist.json"
        else:
            rendered = render_text(result, path.name)
            suffix = ".checklist.txt"

        if output_dir:
            target = output_dir / f"{path.stem}{suffix}"
            target.write_text(rendered, encoding="utf-8")
            logger.info("Wrote %s", target)
        else:
            print(rendered)

    logger.info("Processed %d file(s), %d failed", len(files), failures)
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
