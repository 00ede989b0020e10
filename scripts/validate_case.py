#!/usr/bin/env python3
"""Case content validation for broken graph edges and missing clue references.

Usage:
    # Validate every case under content/cases and content/side-cases
    python scripts/validate_case.py

    # Validate specific case directories
    python scripts/validate_case.py content/cases/the-whitechapel-cipher

    # Validate all cases under another content root
    python scripts/validate_case.py --content-root /path/to/content

    # Write the results as JSON
    python scripts/validate_case.py --output results.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from grimoire.content import discover_case_dirs, load_case, validate_content
from grimoire.content.validator import ValidationResult
from grimoire.errors import ContentLoadError
from grimoire.storage import get_content_path


def format_result(name: str, result: ValidationResult) -> str:
    """Format one case's validation result for display."""
    errors = result.errors
    if errors:
        lines = [f"FAIL {name} - {len(errors)} error(s):"]
        lines.extend(f"    {issue.message}" for issue in errors)
    else:
        lines = [f"OK   {name} - {result.scene_count} scenes, {result.clue_count} clues"]
    lines.extend(f"  WARNING {name}: {issue.message}" for issue in result.warnings)
    return "\n".join(lines)


def result_to_dict(name: str, result: ValidationResult) -> dict:
    return {
        "case": name,
        "case_id": result.case_id,
        "passed": result.is_valid,
        "issues": [
            {"severity": issue.severity.value, "message": issue.message, "scene_id": issue.scene_id}
            for issue in result.issues
        ],
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Validate Gaslight & Grimoire case content",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "case_dirs",
        nargs="*",
        help="Case directories to validate (default: all cases under the content root)",
    )
    parser.add_argument(
        "--content-root",
        type=str,
        default=None,
        help="Content root holding cases/ and side-cases/ (default: $GRIMOIRE_CONTENT_PATH)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default=None,
        help="Output JSON file for validation results",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.case_dirs:
        dirs = [Path(d) for d in args.case_dirs]
    else:
        dirs = discover_case_dirs(args.content_root or get_content_path())

    if not dirs:
        print("No case directories found", file=sys.stderr)
        return 1

    total_errors = 0
    results = []
    for case_dir in dirs:
        name = "/".join(case_dir.parts[-2:])
        try:
            result = validate_content(load_case(case_dir))
        except ContentLoadError as e:
            print(f"FAIL {name} - could not load: {e}", file=sys.stderr)
            total_errors += 1
            results.append({"case": name, "passed": False, "load_error": str(e)})
            continue

        print(format_result(name, result), file=sys.stdout if result.is_valid else sys.stderr)
        total_errors += len(result.errors)
        results.append(result_to_dict(name, result))

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("w") as f:
            json.dump(results, f, indent=2)

    if total_errors > 0:
        print(f"\n{total_errors} error(s) across {len(dirs)} case(s)", file=sys.stderr)
        return 1

    print(f"\nAll {len(dirs)} case(s) validated successfully.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
