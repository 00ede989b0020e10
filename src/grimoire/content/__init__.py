"""Case content for Gaslight & Grimoire.

This module loads case directories and validates them before play.

Usage:
    from grimoire.content import load_case, validate_content

    case = load_case("content/cases/the-whitechapel-cipher")
    result = validate_content(case)
    for issue in result.errors:
        print(issue.message)
"""

from .loader import discover_case_dirs, load_case, scene_files
from .validator import ValidationIssue, ValidationResult, ValidationSeverity, validate_content

__all__ = [
    # Loading
    "load_case",
    "discover_case_dirs",
    "scene_files",
    # Validation
    "ValidationSeverity",
    "ValidationIssue",
    "ValidationResult",
    "validate_content",
]
