"""
Artifact classification and metadata rules.

Every function here is a pure keyword match over the artifact's text and
type, so enriching the same artifact twice gives the same answer.
"""

import re
from typing import Optional

from ..models.artifact import ArtifactType, Completeness

_TYPE_VARIANTS: tuple[tuple[tuple[str, ...], ArtifactType], ...] = (
    (("code", "script"), ArtifactType.CODE),
    (("doc", "md"), ArtifactType.MARKDOWN),
    (("table", "matrix"), ArtifactType.TABLE),
    (("diagram", "chart"), ArtifactType.DIAGRAM),
    (("guide", "tutorial"), ArtifactType.GUIDE),
    (("framework", "model"), ArtifactType.FRAMEWORK),
    (("report",), ArtifactType.REPORT),
    (("slide", "presentation"), ArtifactType.PRESENTATION),
)

_PYTHON_HINT = re.compile(r"^\s*(def|class|import|from)\s+\w+", re.MULTILINE)
_JS_HINT = re.compile(r"\b(function\s+\w+\s*\(|const\s+\w+\s*=|let\s+\w+\s*=|=>)")
_TS_HINT = re.compile(r"\b(interface\s+\w+|type\s+\w+\s*=|:\s*(string|number|boolean)\b)")


def normalize_artifact_type(raw: Optional[str]) -> ArtifactType:
    """Exact type name, else the first matching variant word, else other."""
    normalized = (raw or "").strip().lower()
    try:
        return ArtifactType(normalized)
    except ValueError:
        pass
    for words, artifact_type in _TYPE_VARIANTS:
        if any(word in normalized for word in words):
            return artifact_type
    return ArtifactType.OTHER


def normalize_completeness(raw: Optional[str]) -> Completeness:
    normalized = (raw or "").strip().lower()
    # "incomplete" contains "complete", so the partial words go first
    if "partial" in normalized or "incomplete" in normalized:
        return Completeness.PARTIAL
    if "complete" in normalized or "full" in normalized:
        return Completeness.COMPLETE
    if any(word in normalized for word in ("skeleton", "stub", "outline")):
        return Completeness.SKELETON
    return Completeness.PARTIAL


def infer_language(content: str) -> Optional[str]:
    """Best guess at a code artifact's language when none was given."""
    stripped = content.strip()
    if stripped.startswith(("{", "[")) and stripped.endswith(("}", "]")):
        return "json"
    if _PYTHON_HINT.search(content) and ":" in content and "{" not in content:
        return "python"
    if _TS_HINT.search(content):
        return "typescript"
    if _JS_HINT.search(content):
        return "javascript"
    return None


def detect_format(content: str, artifact_type: ArtifactType, language: Optional[str] = None) -> str:
    if artifact_type == ArtifactType.CODE:
        if language == "python":
            return "python-module" if "import " in content else "python-script"
        if "import " in content or "export " in content:
            return "esm"
        if "require(" in content:
            return "commonjs"
        return "script"
    if artifact_type == ArtifactType.MARKDOWN:
        return "md"
    if artifact_type == ArtifactType.TABLE:
        if "|" in content:
            return "markdown-table"
        if "," in content:
            return "csv"
        return "table"
    if artifact_type == ArtifactType.DIAGRAM:
        if "mermaid" in content:
            return "mermaid"
        if "flowchart" in content:
            return "flowchart"
        return "diagram"
    return "text"


def infer_target_audience(content: str, artifact_type: ArtifactType) -> str:
    if artifact_type == ArtifactType.CODE:
        if "async" in content and "await" in content:
            return "Developers familiar with async programming"
        if "class " in content or "interface " in content:
            return "Object-oriented programmers"
        return "Developers"
    if artifact_type == ArtifactType.GUIDE:
        return "General audience following step-by-step instructions"
    if artifact_type == ArtifactType.FRAMEWORK:
        return "Strategic thinkers and decision makers"
    if artifact_type == ArtifactType.REPORT:
        return "Stakeholders and decision makers"
    return "General audience"


def generate_usage_instructions(content: str, artifact_type: ArtifactType) -> str:
    if artifact_type == ArtifactType.CODE:
        has_imports = "import " in content or "require(" in content
        has_exports = "export " in content or "module.exports" in content
        if has_imports and has_exports:
            return "This is a module. Import it into your project and use the exported functions/classes."
        if has_exports:
            return "This module exports functions/classes. Import them as needed in your code."
        return "Copy this code into your project and integrate as needed."
    if artifact_type == ArtifactType.GUIDE:
        return "Follow the steps in order for best results."
    if artifact_type == ArtifactType.FRAMEWORK:
        return "Use this framework to structure your thinking and decision-making."
    if artifact_type == ArtifactType.TABLE:
        return "Reference this table for data lookup and comparison."
    if artifact_type == ArtifactType.DIAGRAM:
        return "View this diagram to understand relationships and flows."
    return "Use as reference material."


_TAG_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("react", ("React", "useState")),
    ("vue", ("Vue", "ref(")),
    ("oop", ("class ",)),
    ("typescript", ("interface ", ": ")),
    ("python", ("def ",)),
    ("sql", ("SQL", "SELECT")),
    ("api", ("API", "endpoint")),
    ("testing", ("test", "expect")),
)


def extract_tags(content: str, artifact_type: ArtifactType) -> tuple[str, ...]:
    """Type tag first, then technology tags, without duplicates."""
    tags = [artifact_type.value]
    if "async" in content and "await" in content:
        tags.append("async")
    for tag, needles in _TAG_RULES:
        if any(needle in content for needle in needles):
            tags.append(tag)
    return tuple(dict.fromkeys(tags))
