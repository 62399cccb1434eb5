"""Improvement engine — rewrites a prompt from its latest assessment."""

import logging
import math

from pydantic import BaseModel, ConfigDict, StrictFloat, ValidationError
from pydantic.alias_generators import to_camel

from assesspo.debug import DebugManager
from assesspo.errors import (
    MalformedResponseError,
    MissingVariantError,
    ResponseValidationError,
)
from assesspo.generate import generate_text
from assesspo.llm.client import GenerationOptions, TextGenerator
from assesspo.parsing import decode_json_object
from assesspo.prompts.improvement import IMPROVEMENT_OUTPUT_HINT, build_improvement_prompt
from assesspo.types import OptimizationEntry, Prompt, PromptVariant

logger = logging.getLogger(__name__)


class ExpectedImpact(BaseModel):
    model_config = ConfigDict(frozen=True)

    incremental: StrictFloat | None = None
    bold: StrictFloat | None = None


class ImprovementResponse(BaseModel):
    """Decoded improvement response. Presence is checked after decoding."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    incremental_improvement: PromptVariant | None = None
    bold_redesign: PromptVariant | None = None
    expected_impact: ExpectedImpact | None = None


def _check_impact(name: str, value: float | None) -> float:
    if value is None:
        raise MissingVariantError(f"expectedImpact.{name} is missing")
    if not math.isfinite(value) or not 0.0 <= value <= 20.0:
        raise ResponseValidationError(f"expectedImpact.{name}={value} is outside 0-20")
    return value


def select_variant(response: ImprovementResponse) -> tuple[str, PromptVariant]:
    """Pick the variant with the strictly higher expected impact.

    Equal impact keeps the incremental variant.

    Returns:
        ("incremental" | "bold", chosen variant)
    """
    incremental = response.incremental_improvement
    bold = response.bold_redesign
    if incremental is None or not incremental.input.strip():
        raise MissingVariantError("incrementalImprovement is missing or empty")
    if bold is None or not bold.input.strip():
        raise MissingVariantError("boldRedesign is missing or empty")
    if response.expected_impact is None:
        raise MissingVariantError("expectedImpact is missing")

    incremental_impact = _check_impact("incremental", response.expected_impact.incremental)
    bold_impact = _check_impact("bold", response.expected_impact.bold)

    if bold_impact > incremental_impact:
        return "bold", bold
    return "incremental", incremental


def parse_improvement(raw: str) -> ImprovementResponse:
    data = decode_json_object(raw)
    try:
        return ImprovementResponse.model_validate(data)
    except ValidationError as e:
        raise MalformedResponseError(
            f"improvement response has the wrong shape: {e}", raw=raw
        ) from e


async def improve_prompt(
    previous: OptimizationEntry,
    *,
    task_description: str,
    history: tuple[OptimizationEntry, ...] | list[OptimizationEntry],
    optimization_goal: str,
    generator: TextGenerator,
    options: GenerationOptions | None = None,
    debug: DebugManager | None = None,
    call_timeout: float | None = None,
) -> Prompt:
    """Generate an incremental and a bold rewrite and return the better one.

    The returned prompt keeps ``previous.prompt.output``. There is no
    fallback: any failure propagates.

    Raises:
        GenerationError: The generator failed.
        DeadlineExceededError: ``call_timeout`` expired.
        MalformedResponseError: The response is not valid JSON of the right shape.
        MissingVariantError: A variant or its expected impact is absent.
        ResponseValidationError: An expected impact is outside 0-20.
    """
    request_text = build_improvement_prompt(
        previous, task_description, history, optimization_goal
    )
    raw = await generate_text(
        generator,
        request_text,
        output_hint=IMPROVEMENT_OUTPUT_HINT,
        options=options,
        call_timeout=call_timeout,
        debug=debug,
    )
    try:
        response = parse_improvement(raw)
    except MalformedResponseError:
        logger.warning("Could not decode improvement | raw text: %.200s", raw)
        raise

    kind, variant = select_variant(response)
    logger.info("Selected %s variant: %s", kind, variant.reasoning or "(no reasoning given)")
    return variant.to_prompt(output=previous.prompt.output)
