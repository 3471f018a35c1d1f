"""Evaluation prompt and per-stage quality criteria."""

STAGE_QUALITY_CRITERIA = {
    "discovering": """- Completeness: core concepts, history, current state, interdisciplinary links
- Depth: detailed explanations beyond the surface
- Specificity: concrete examples, sources, precise definitions
- Actionability: clear areas for further research
- Coherence: structured report with logical flow
- Novelty: non-obvious insights and surprising connections""",
    "chasing": """- Completeness: symptoms, root causes, hidden assumptions, systemic patterns
- Depth: problems traced through repeated why-analysis
- Specificity: clear cause-effect relationships with examples
- Actionability: leverage points for intervention
- Coherence: problem map with clear hierarchy
- Novelty: non-obvious root causes""",
    "solving": """- Completeness: 5-7 diverse solutions across categories
- Depth: implementation details, feasibility and risks per solution
- Specificity: first steps, success metrics, resources
- Actionability: each solution has a clear next action
- Coherence: solutions ranked and complementary ones identified
- Novelty: unconventional approaches beside the obvious fixes""",
    "challenging": """- Completeness: explicit, implicit and hidden assumptions; risks and blind spots
- Depth: genuine adversarial analysis
- Specificity: concrete counter-examples and failure modes
- Actionability: mitigation for each identified risk
- Coherence: fatal flaws separated from minor issues
- Novelty: unexpected failure modes""",
    "questioning": """- Completeness: 15-20 questions across clarifying, probing, hypothetical, challenge, meta, future
- Depth: probing questions that go several levels deep
- Specificity: specific, researchable questions
- Actionability: questions can actually be answered
- Coherence: questions prioritized and categorized
- Novelty: questions that reveal new angles""",
    "searching": """- Completeness: the priority questions are answered thoroughly
- Depth: several authoritative sources per question
- Specificity: concrete citations and evidence
- Actionability: clear answers with confidence levels and remaining gaps
- Coherence: organized findings with source quality assessment
- Novelty: surprising information that challenges assumptions""",
    "imagining": """- Completeness: at least 4 scenarios (best, worst, likely, wildcard) with timelines
- Depth: narratives with drivers, indicators and stakeholder impact
- Specificity: concrete timelines and decision points
- Actionability: early warning signals and robust strategies
- Coherence: realistic causal mechanisms
- Novelty: wildcard scenarios that challenge conventional thinking""",
    "building": """- Completeness: 1-3 fully developed artifacts, not sketches
- Depth: examples, usage instructions, metadata
- Specificity: professional formatting, no vague placeholders
- Actionability: artifacts usable immediately by someone else
- Coherence: well-structured documentation
- Novelty: artifacts add unique value""",
}


def build_quality_evaluation_prompt(stage_type: str, stage_output: str) -> str:
    criteria = STAGE_QUALITY_CRITERIA.get(stage_type, STAGE_QUALITY_CRITERIA["discovering"])
    return f"""You are a quality assessor evaluating the output of a {stage_type.upper()} stage in an exploration journey.

<stage_output>
{stage_output}
</stage_output>

<evaluation_criteria>
Score each of the 6 dimensions from 0 to 10:
{criteria}
</evaluation_criteria>

<instructions>
1. Score each dimension 0-10
2. Identify 2-3 specific strengths
3. Identify 2-3 specific weaknesses
4. Provide 2-3 concrete improvement suggestions
</instructions>

<output_format>
Return ONLY valid JSON (no markdown, no explanations):
{{
  "scores": {{"completeness": 7, "depth": 8, "specificity": 6, "actionability": 7, "coherence": 9, "novelty": 5}},
  "strengths": ["..."],
  "weaknesses": ["..."],
  "improvements": ["..."]
}}
</output_format>"""
