"""Prompt for structured artifact extraction."""

ARTIFACT_TYPES_HELP = "code, markdown, table, diagram, guide, framework, report, presentation, or other"


def build_artifact_extraction_prompt(content: str) -> str:
    """Ask for every artifact in a stage's output as one strict JSON object."""
    return f"""You are an expert artifact extractor. Analyze the following content and identify ALL artifacts it contains.

<content>
{content}
</content>

<task>
An artifact is any tangible output: code snippets or programs, markdown documents
or reports, data tables or matrices, diagrams (mermaid, flowcharts), step-by-step
guides, mental models or frameworks, slide content, or any other structured output.

For each artifact provide:
1. type: {ARTIFACT_TYPES_HELP}
2. title: a descriptive title (5-10 words)
3. content: the complete artifact content, verbatim
4. language: programming language for code, or the format for other types
5. completeness: complete, partial, or skeleton
6. notes: syntax errors, missing pieces or other issues
</task>

<output_format>
Return ONLY a valid JSON object (no markdown, no code fences):
{{
  "artifacts": [
    {{
      "type": "code",
      "title": "Cache Invalidation Helper",
      "content": "...",
      "language": "python",
      "completeness": "complete",
      "notes": "Includes error handling"
    }}
  ]
}}
If there are no artifacts, return {{"artifacts": []}}.
</output_format>"""
