"""Assessment engine — turns a prompt into a validated, normalized Assessment."""

import logging
import math
from typing import Literal

from pydantic import ValidationError

from assesspo.debug import DebugManager
from assesspo.errors import (
    GradeNormalizationError,
    MalformedResponseError,
    ResponseValidationError,
)
from assesspo.generate import generate_text
from assesspo.llm.client import GenerationOptions, TextGenerator
from assesspo.parsing import decode_json_object
from assesspo.prompts.assessment import ASSESSMENT_OUTPUT_HINT, build_assessment_prompt
from assesspo.types import Assessment, Metric, OptimizationEntry, Prompt

logger = logging.getLogger(__name__)

SCORE_MIN = 0.0
SCORE_MAX = 20.0

# Grade-point value of every accepted letter grade.
GRADE_VALUES: dict[str, float] = {
    "A+": 4.3, "A": 4.0, "A-": 3.7,
    "B+": 3.3, "B": 3.0, "B-": 2.7,
    "C+": 2.3, "C": 2.0, "C-": 1.7,
    "D+": 1.3, "D": 1.0, "D-": 0.7,
    "F": 0.0,
}

# Letter-mode success bar: A- or better.
LETTER_GOAL_VALUE = 3.7

# Numeric grades map onto the 6-letter scale by lower bound, highest first.
# Anything below the last bound is an F.
NUMERIC_GRADE_BANDS: tuple[tuple[float, str], ...] = (
    (19.0, "A+"),
    (17.0, "A"),
    (14.0, "B"),
    (11.0, "C"),
    (8.0, "D"),
)
NUMERIC_GRADE_LETTERS = ("F", "D", "C", "B", "A", "A+")


def numeric_to_letter(value: float) -> str:
    """Map a 0-20 numeric grade onto F, D, C, B, A, A+."""
    if not math.isfinite(value) or not SCORE_MIN <= value <= SCORE_MAX:
        raise GradeNormalizationError(f"numeric grade {value} is outside 0-20")
    for bound, letter in NUMERIC_GRADE_BANDS:
        if value >= bound:
            return letter
    return "F"


def normalize_grade(grade: str | float) -> str:
    """Return a letter grade from a letter or 0-20 numeric grade.

    Known letters are kept; numbers (including numeric strings) are mapped
    with NUMERIC_GRADE_BANDS.

    Raises:
        GradeNormalizationError: If the grade is neither form.
    """
    if isinstance(grade, bool):
        raise GradeNormalizationError(f"invalid grade: {grade!r}")
    if isinstance(grade, (int, float)):
        return numeric_to_letter(float(grade))

    token = grade.strip().upper()
    if token in GRADE_VALUES:
        return token
    try:
        value = float(token)
    except ValueError:
        raise GradeNormalizationError(f"invalid grade: {grade!r}") from None
    return numeric_to_letter(value)


def _check_score(field: str, value: float) -> None:
    if not math.isfinite(value) or not SCORE_MIN <= value <= SCORE_MAX:
        raise ResponseValidationError(f"{field}={value} is outside 0-20")


def validate_assessment(assessment: Assessment) -> None:
    """Semantic checks that decoding alone does not enforce.

    Raises:
        ResponseValidationError: On an empty required list or a score
            outside [0, 20].
    """
    for field in ("metrics", "strengths", "weaknesses", "suggestions"):
        if not getattr(assessment, field):
            raise ResponseValidationError(f"assessment has no {field}")

    for metric in assessment.metrics:
        _check_score(f"metrics[{metric.name}].value", metric.value)
    for i, suggestion in enumerate(assessment.suggestions):
        _check_score(f"suggestions[{i}].expectedImpact", suggestion.expected_impact)
    _check_score("overallScore", assessment.overall_score)
    _check_score("efficiencyScore", assessment.efficiency_score)
    _check_score("alignmentWithGoal", assessment.alignment_with_goal)


def parse_assessment(raw: str) -> Assessment:
    """Decode, validate and normalize a raw assessment response."""
    data = decode_json_object(raw)
    try:
        assessment = Assessment.model_validate(data)
    except ValidationError as e:
        raise MalformedResponseError(f"assessment has the wrong shape: {e}", raw=raw) from e

    validate_assessment(assessment)
    grade = normalize_grade(assessment.overall_grade)
    return assessment.model_copy(update={"overall_grade": grade})


def is_goal_met(
    assessment: Assessment,
    rating_system: Literal["numerical", "letter", ""],
    threshold: float,
) -> bool:
    """Whether an assessment satisfies the run's success criterion.

    numerical: overall score >= threshold * 20 (inclusive).
    letter: grade worth A- (3.7) or better.
    empty: never met; the run relies on the iteration cap.
    """
    if not rating_system:
        return False
    if rating_system == "numerical":
        return assessment.overall_score >= 20 * threshold
    if rating_system == "letter":
        grade = assessment.overall_grade
        if not isinstance(grade, str) or grade not in GRADE_VALUES:
            raise GradeNormalizationError(f"invalid grade: {grade!r}")
        return GRADE_VALUES[grade] >= LETTER_GOAL_VALUE
    raise ValueError(f"unknown rating system: {rating_system}")


async def assess_prompt(
    prompt: Prompt,
    *,
    task_description: str,
    history: tuple[OptimizationEntry, ...] | list[OptimizationEntry],
    custom_metrics: tuple[Metric, ...] | list[Metric],
    optimization_goal: str,
    generator: TextGenerator,
    options: GenerationOptions | None = None,
    debug: DebugManager | None = None,
    call_timeout: float | None = None,
) -> Assessment:
    """Ask the model to grade ``prompt`` and return the checked Assessment.

    Raises:
        GenerationError: The generator failed.
        DeadlineExceededError: ``call_timeout`` expired.
        MalformedResponseError: The response is not an Assessment-shaped object.
        ResponseValidationError: Empty list or out-of-range score.
        GradeNormalizationError: The overall grade cannot be read.
    """
    request_text = build_assessment_prompt(
        prompt, task_description, history, custom_metrics, optimization_goal
    )
    raw = await generate_text(
        generator,
        request_text,
        output_hint=ASSESSMENT_OUTPUT_HINT,
        options=options,
        call_timeout=call_timeout,
        debug=debug,
    )
    try:
        return parse_assessment(raw)
    except MalformedResponseError:
        logger.warning("Could not decode assessment | raw text: %.200s", raw)
        raise
