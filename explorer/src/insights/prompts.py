"""Prompt for structured insight extraction."""


def build_insight_extraction_prompt(content: str, stage_type: str) -> str:
    return f"""You are an expert insight extractor. Analyze this {stage_type} stage output and extract 5-10 key insights.

<stage_content>
{content}
</stage_content>

<task>
For each insight: identify the core finding, categorize it, assess its importance,
quote supporting evidence from the text and rate your confidence.

Categories: discovery, problem, solution, question, connection, recommendation, synthesis
Importance levels: critical, high, medium, low
Confidence levels: verified, high, medium, low, speculative
</task>

<output_format>
Return ONLY valid JSON in this exact format (no markdown, no explanation):
{{
  "insights": [
    {{
      "insight": "Brief 1-2 sentence insight",
      "category": "discovery",
      "importance": "high",
      "evidence": ["Supporting fact 1", "Supporting fact 2"],
      "confidence": "medium",
      "assumptions": ["Optional assumption"]
    }}
  ]
}}
</output_format>

<guidelines>
- Keep insights concise and specific
- Don't extract trivial or obvious points
- Return ONLY the JSON object
</guidelines>"""
