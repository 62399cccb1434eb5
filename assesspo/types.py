"""Core data types for the AssessPO optimization loop."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt, StrictStr
from pydantic.alias_generators import to_camel


class _Shape(BaseModel):
    """Frozen model with camelCase JSON names and snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Prompt(_Shape):
    """A prompt being optimized."""

    input: str
    directives: tuple[str, ...] = ()
    examples: tuple[str, ...] = ()
    output: str = ""

    def render(self) -> str:
        """Text sent to the model: input, then directives, output, examples."""
        parts = [self.input]
        if self.directives:
            bullets = "\n".join(f"- {d}" for d in self.directives)
            parts.append(f"Directives:\n{bullets}")
        if self.output:
            parts.append(f"Output:\n{self.output}")
        if self.examples:
            bullets = "\n".join(f"- {e}" for e in self.examples)
            parts.append(f"Examples:\n{bullets}")
        return "\n\n".join(parts)


class PromptVariant(Prompt):
    """One candidate rewrite from the improvement step."""

    reasoning: str = ""

    def to_prompt(self, output: str = "") -> Prompt:
        return Prompt(
            input=self.input,
            directives=self.directives,
            examples=self.examples,
            output=output,
        )


class Metric(_Shape):
    """A caller-supplied quality dimension, e.g. "Atmosphere"."""

    name: str
    description: str = ""


class MetricScore(_Shape):
    name: str
    value: StrictFloat
    reasoning: str


class Strength(_Shape):
    point: str
    example: str


class Weakness(_Shape):
    point: str
    example: str


class Suggestion(_Shape):
    description: str
    expected_impact: StrictFloat
    reasoning: str


class Assessment(_Shape):
    """Structured judgment of one prompt.

    ``overall_grade`` may arrive as a letter or as a 0-20 number; after
    normalization it is always a letter token. Scores are strict: booleans
    and numeric strings are rejected rather than coerced.
    """

    metrics: tuple[MetricScore, ...]
    strengths: tuple[Strength, ...]
    weaknesses: tuple[Weakness, ...]
    suggestions: tuple[Suggestion, ...]
    overall_score: StrictFloat
    overall_grade: StrictStr | StrictInt | StrictFloat
    efficiency_score: StrictFloat
    alignment_with_goal: StrictFloat


@dataclass(frozen=True)
class OptimizationEntry:
    """One scored round: the prompt and the assessment it received."""

    round: int
    prompt: Prompt
    assessment: Assessment

    def to_dict(self) -> dict:
        return {
            "round": self.round,
            "prompt": self.prompt.model_dump(mode="json", by_alias=True),
            "assessment": self.assessment.model_dump(mode="json", by_alias=True),
        }
