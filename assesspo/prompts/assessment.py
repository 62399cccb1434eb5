"""Assessment prompt builder — asks the model to grade a prompt as JSON."""

import json

from assesspo.types import Metric, OptimizationEntry, Prompt

ASSESSMENT_OUTPUT_HINT = (
    "A single raw JSON object with the fields metrics, strengths, weaknesses, "
    "suggestions, overallScore, overallGrade, efficiencyScore, alignmentWithGoal."
)


def _format_metrics_block(metrics: tuple[Metric, ...] | list[Metric]) -> str:
    """Format custom metrics as a bulleted block."""
    if not metrics:
        return "(none — use your own judgment of the relevant dimensions)"
    return "\n".join(
        f"- {m.name}: {m.description}" if m.description else f"- {m.name}"
        for m in metrics
    )


def format_history(history: tuple[OptimizationEntry, ...] | list[OptimizationEntry]) -> str:
    """Render recent rounds as JSON, oldest first."""
    if not history:
        return "(no previous rounds)"
    return json.dumps([entry.to_dict() for entry in history], indent=2)


def build_assessment_prompt(
    prompt: Prompt,
    task_description: str,
    history: tuple[OptimizationEntry, ...] | list[OptimizationEntry],
    custom_metrics: tuple[Metric, ...] | list[Metric],
    optimization_goal: str,
) -> str:
    """Returns the evaluation request for one prompt."""
    prompt_json = json.dumps(prompt.model_dump(mode="json", by_alias=True), indent=2)

    return f"""Assess the following prompt for this task: {task_description}

<Prompt>
{prompt_json}
</Prompt>

<Recent History>
{format_history(history)}
</Recent History>

<Custom Metrics>
{_format_metrics_block(custom_metrics)}
</Custom Metrics>

<Optimization Goal>
{optimization_goal}
</Optimization Goal>

Take the recent history into account: judge whether the prompt is trending better or worse.

<Output>
Respond with a JSON object with exactly this structure:
{{
  "metrics": [{{"name": string, "value": number, "reasoning": string}}, ...],
  "strengths": [{{"point": string, "example": string}}, ...],
  "weaknesses": [{{"point": string, "example": string}}, ...],
  "suggestions": [{{"description": string, "expectedImpact": number, "reasoning": string}}, ...],
  "overallScore": number,
  "overallGrade": string,
  "efficiencyScore": number,
  "alignmentWithGoal": number
}}
</Output>

<Rules>
- Return only the raw JSON object. No markdown, no code blocks, no backticks, no prose around it.
- Every numeric score uses a 0 to 20 scale, inclusive.
- overallGrade is either one of F, D, C, B, A, A+ or the same 0-20 value as overallScore.
- metrics, strengths, weaknesses and suggestions each contain at least one item.
- Give a concrete example or reason for every point.
- Rate how efficiently the prompt uses language and how well it aligns with the optimization goal.
- Order suggestions by expected impact, highest first (20 is the highest impact).
- Use clear, jargon-free language.
- Check that your response is valid JSON before returning it.
</Rules>"""
