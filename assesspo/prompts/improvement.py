"""Improvement prompt builder — asks for an incremental and a bold rewrite."""

import json

from assesspo.prompts.assessment import format_history
from assesspo.types import OptimizationEntry

IMPROVEMENT_OUTPUT_HINT = (
    "A single raw JSON object with the fields incrementalImprovement, "
    "boldRedesign, expectedImpact."
)


def build_improvement_prompt(
    previous: OptimizationEntry,
    task_description: str,
    history: tuple[OptimizationEntry, ...] | list[OptimizationEntry],
    optimization_goal: str,
) -> str:
    """Returns the rewrite request for the latest scored prompt."""
    previous_prompt = json.dumps(
        previous.prompt.model_dump(mode="json", by_alias=True), indent=2
    )
    assessment = json.dumps(
        previous.assessment.model_dump(mode="json", by_alias=True), indent=2
    )

    return f"""Using the assessment and recent history below, produce improved versions of the whole prompt structure.

<Previous Prompt>
{previous_prompt}
</Previous Prompt>

<Assessment>
{assessment}
</Assessment>

<Recent History>
{format_history(history)}
</Recent History>

<Task Description>
{task_description}
</Task Description>

<Optimization Goal>
{optimization_goal}
</Optimization Goal>

<Task>
Write two improved versions of the prompt:
1. An incremental improvement: targeted fixes to the weaknesses identified in the assessment.
2. A bold redesign: a structural reimagining of the prompt.

For each version:
- Address the weaknesses found in the assessment directly.
- Keep and build on the identified strengths.
- Stay aligned with the task description and the optimization goal.
- Use language efficiently, clearly and without jargon.
- Briefly justify the main changes.
- Rate the expected impact of each version on a 0 to 20 scale.
</Task>

<Output>
Return only the raw JSON object, with no markdown, code blocks or backticks, in exactly this structure:
{{
  "incrementalImprovement": {{
    "input": "improved prompt text",
    "directives": ["directive 1", "directive 2"],
    "examples": ["example 1", "example 2"],
    "reasoning": "what changed and how it answers the assessment"
  }},
  "boldRedesign": {{
    "input": "redesigned prompt text",
    "directives": ["directive 1", "directive 2"],
    "examples": ["example 1", "example 2"],
    "reasoning": "the new approach and why it may work better"
  }},
  "expectedImpact": {{
    "incremental": number,
    "bold": number
  }}
}}
Check that your response is valid JSON before returning it.
</Output>"""
