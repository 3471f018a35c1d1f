"""
Structural checks for artifacts.

Code gets delimiter balance checks (errors) plus language heuristics
(warnings). Everything else only gets heuristic warnings: none of these
checks is authoritative.
"""

import json
import re
from dataclasses import dataclass, field

from ..models.artifact import ArtifactType, Completeness

MIN_NON_CODE_LENGTH = 100

_JS_FUNCTION = re.compile(r"function\s+\w+\s*\(")
_JS_CONST = re.compile(r"const\s+\w+\s*=")
_PY_DEF = re.compile(r"def\s+\w+\s*\(")
_LEADING_WS = re.compile(r"^\s*")

COMPLETENESS_PENALTY = {
    Completeness.COMPLETE: 0.0,
    Completeness.PARTIAL: 2.0,
    Completeness.SKELETON: 4.0,
}


@dataclass
class ValidationOutcome:
    syntax_valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    notes: str = ""


def _check_balance(content: str, errors: list[str]) -> None:
    for opening, closing, name in (("{", "}", "braces"), ("(", ")", "parentheses")):
        opened, closed = content.count(opening), content.count(closing)
        if opened != closed:
            errors.append(f"Mismatched {name}: {opened} opening, {closed} closing")


def _check_javascript(content: str, errors: list[str], warnings: list[str]) -> None:
    if _JS_FUNCTION.search(content) or _JS_CONST.search(content):
        return
    stripped = content.strip()
    if not stripped.startswith(("//", "/*")):
        warnings.append("No clear function or variable declarations found")


def _check_python(content: str, errors: list[str], warnings: list[str]) -> None:
    lines = [line for line in content.split("\n") if line.strip()]
    indents = [len(_LEADING_WS.match(line).group(0)) for line in lines]
    if any(abs(cur - prev) not in (0, 2, 4) for prev, cur in zip(indents, indents[1:])):
        warnings.append("Potentially inconsistent indentation")
    if not _PY_DEF.search(content):
        warnings.append("No function definitions found")


def _check_json(content: str, errors: list[str], warnings: list[str]) -> None:
    try:
        json.loads(content)
    except json.JSONDecodeError as e:
        errors.append(f"Invalid JSON: {e.msg}")


LANGUAGE_CHECKS = {
    "javascript": _check_javascript,
    "js": _check_javascript,
    "typescript": _check_javascript,
    "ts": _check_javascript,
    "python": _check_python,
    "py": _check_python,
    "json": _check_json,
}


def validate_code(content: str, language: str) -> ValidationOutcome:
    """Syntax and structure checks for a code artifact."""
    errors: list[str] = []
    warnings: list[str] = []

    _check_balance(content, errors)

    check = LANGUAGE_CHECKS.get((language or "unknown").lower())
    if check:
        check(content, errors, warnings)
    else:
        warnings.append(f"No syntax validator available for {language or 'unknown'}")

    if "TODO" in content or "FIXME" in content:
        warnings.append("Contains TODO or FIXME comments")
    if content.count("...") > 1:
        warnings.append("Contains placeholder ellipsis (...) - may be incomplete")

    syntax_valid = not errors
    if not syntax_valid:
        notes = f"{len(errors)} syntax errors found"
    elif warnings:
        notes = f"Syntax valid with {len(warnings)} warnings"
    else:
        notes = "Syntax valid"
    return ValidationOutcome(syntax_valid, errors, warnings, notes)


def validate_non_code(content: str, artifact_type: ArtifactType) -> ValidationOutcome:
    """Heuristic structure checks; these only ever warn."""
    warnings: list[str] = []

    if len(content) < MIN_NON_CODE_LENGTH:
        warnings.append("Very short artifact - may be incomplete")

    if artifact_type == ArtifactType.TABLE:
        if "|" not in content and "," not in content:
            warnings.append("No table delimiters found")
    elif artifact_type == ArtifactType.DIAGRAM:
        if not any(marker in content for marker in ("graph", "flowchart", "```")):
            warnings.append("No diagram syntax detected")
    elif artifact_type == ArtifactType.MARKDOWN:
        if not any(marker in content for marker in ("#", "*", "-")):
            warnings.append("No markdown formatting detected")

    notes = (
        f"Structure check passed with {len(warnings)} warnings"
        if warnings else "Structure check passed"
    )
    return ValidationOutcome(True, [], warnings, notes)


def calculate_quality_score(
    error_count: int, warning_count: int, completeness: Completeness
) -> float:
    """10, minus 2 per error, 0.5 per warning and a completeness penalty; within [0, 10]."""
    score = 10.0 - 2.0 * error_count - 0.5 * warning_count - COMPLETENESS_PENALTY[completeness]
    return max(0.0, min(10.0, score))
