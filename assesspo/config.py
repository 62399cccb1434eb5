"""Pydantic configuration models for AssessPO."""

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from assesspo.types import Metric

DEFAULT_OPTIMIZATION_GOAL = "Improve the clarity and effectiveness of the prompt"


class ModelConfig(BaseModel):
    """Config for the model that both grades and rewrites prompts."""

    model_config = ConfigDict(frozen=True)

    name: str = "openai/gpt-4o"
    is_reasoning: bool = False
    reasoning_effort: Literal["low", "medium", "high"] = "medium"
    temperature: float = 0.7
    max_tokens: int | None = Field(default=None, gt=0)


class DebugConfig(BaseModel):
    """Which raw prompts/responses go to the debug log."""

    model_config = ConfigDict(frozen=True)

    log_prompts: bool = False
    log_responses: bool = False


class OptimizerConfig(BaseModel):
    """Run-wide settings for one optimization run. Immutable once built.

    Every knob has a documented default; callers override by keyword:

        OptimizerConfig(task_description="...", threshold=0.9, max_retries=5)
    """

    model_config = ConfigDict(frozen=True)

    task_description: str
    optimization_goal: str = DEFAULT_OPTIMIZATION_GOAL
    custom_metrics: tuple[Metric, ...] = ()
    rating_system: Literal["numerical", "letter", ""] = "numerical"
    threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    max_iterations: int = Field(default=5, ge=0)
    history_size: int = Field(default=2, ge=0)
    max_retries: int = Field(default=3, ge=0)
    retry_delay: float = Field(default=2.0, ge=0.0)
    call_timeout: float | None = Field(default=None, gt=0.0)
    run_timeout: float | None = Field(default=None, gt=0.0)
    model: ModelConfig = ModelConfig()
    debug: DebugConfig = DebugConfig()
    verbose: bool = False

    @field_validator("task_description")
    @classmethod
    def validate_task_description(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("task_description must not be empty")
        return v

    @property
    def max_rounds(self) -> int:
        """Scoring passes allowed; a zero iteration cap still scores once."""
        return max(1, self.max_iterations)

    @classmethod
    def from_yaml(
        cls,
        path: str | Path,
        *,
        defaults: dict[str, Any] | None = None,
        **overrides: Any,
    ) -> "OptimizerConfig":
        """Load a YAML config, layered as ``defaults`` < file < ``overrides``.

        ``None`` overrides are skipped. Mapping overrides (``model``,
        ``debug``) are merged key by key into the file's mapping.
        """
        with open(path) as f:
            loaded = yaml.safe_load(f) or {}
        data = {**(defaults or {}), **loaded}
        for key, value in overrides.items():
            if value is None:
                continue
            if isinstance(value, dict) and isinstance(data.get(key), dict):
                value = {**data[key], **value}
            data[key] = value
        return cls(**data)
