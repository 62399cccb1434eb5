"""Tests for assesspo.config — Pydantic config models."""

import tempfile

import pytest
from pydantic import ValidationError

from assesspo.config import (
    DEFAULT_OPTIMIZATION_GOAL,
    DebugConfig,
    ModelConfig,
    OptimizerConfig,
)
from assesspo.types import Metric


def test_model_config_defaults():
    mc = ModelConfig()
    assert mc.name == "openai/gpt-4o"
    assert mc.is_reasoning is False
    assert mc.reasoning_effort == "medium"
    assert mc.temperature == 0.7
    assert mc.max_tokens is None


def test_debug_config_defaults():
    dc = DebugConfig()
    assert dc.log_prompts is False
    assert dc.log_responses is False


def test_optimizer_config_defaults():
    cfg = OptimizerConfig(task_description="Summarize support tickets")
    assert cfg.optimization_goal == DEFAULT_OPTIMIZATION_GOAL
    assert cfg.custom_metrics == ()
    assert cfg.rating_system == "numerical"
    assert cfg.threshold == 0.8
    assert cfg.max_iterations == 5
    assert cfg.history_size == 2
    assert cfg.max_retries == 3
    assert cfg.retry_delay == 2.0
    assert cfg.call_timeout is None
    assert cfg.run_timeout is None
    assert cfg.verbose is False


def test_keyword_overrides():
    cfg = OptimizerConfig(
        task_description="t",
        custom_metrics=[{"name": "Atmosphere", "description": "setting"}],
        rating_system="letter",
        threshold=0.9,
        max_retries=5,
        model={"name": "anthropic/claude-sonnet-4-5-20250929", "temperature": 0.2},
    )
    assert cfg.custom_metrics == (Metric(name="Atmosphere", description="setting"),)
    assert cfg.rating_system == "letter"
    assert cfg.max_retries == 5
    assert cfg.model.name.startswith("anthropic/")
    assert cfg.model.temperature == 0.2


def test_config_is_immutable():
    cfg = OptimizerConfig(task_description="t")
    with pytest.raises(ValidationError):
        cfg.threshold = 0.1


def test_empty_rating_system_allowed():
    assert OptimizerConfig(task_description="t", rating_system="").rating_system == ""


@pytest.mark.parametrize(
    "overrides",
    [
        {"task_description": "   "},
        {"rating_system": "stars"},
        {"threshold": -0.1},
        {"threshold": 1.5},
        {"max_iterations": -1},
        {"history_size": -1},
        {"max_retries": -1},
        {"retry_delay": -1.0},
        {"call_timeout": 0},
        {"run_timeout": -5},
    ],
)
def test_invalid_values_rejected(overrides):
    data = {"task_description": "t"}
    data.update(overrides)
    with pytest.raises(ValidationError):
        OptimizerConfig(**data)


@pytest.mark.parametrize("iterations,rounds", [(0, 1), (1, 1), (3, 3)])
def test_max_rounds(iterations, rounds):
    assert OptimizerConfig(task_description="t", max_iterations=iterations).max_rounds == rounds


def test_from_yaml():
    yaml_content = """
task_description: "Write product descriptions"
optimization_goal: "Be concise"
custom_metrics:
  - name: "Clarity"
    description: "Easy to read"
rating_system: "letter"
max_iterations: 3
model:
  name: "openai/gpt-4o-mini"
  temperature: 0.0
"""
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        f.write(yaml_content)
        f.flush()
        cfg = OptimizerConfig.from_yaml(f.name)

    assert cfg.task_description == "Write product descriptions"
    assert cfg.custom_metrics[0].name == "Clarity"
    assert cfg.rating_system == "letter"
    assert cfg.max_iterations == 3
    assert cfg.model.name == "openai/gpt-4o-mini"


def test_from_yaml_overrides():
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        f.write('task_description: "t"\nmax_iterations: 3\n')
        f.flush()
        cfg = OptimizerConfig.from_yaml(f.name, max_iterations=7, threshold=None)

    assert cfg.max_iterations == 7
    assert cfg.threshold == 0.8


def test_from_yaml_defaults_and_nested_merge():
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        f.write('max_iterations: 2\nmodel:\n  name: "openai/gpt-4o-mini"\n  max_tokens: 256\n')
        f.flush()
        cfg = OptimizerConfig.from_yaml(
            f.name,
            defaults={"task_description": "fallback task", "max_iterations": 9},
            model={"temperature": 0.1},
        )

    assert cfg.task_description == "fallback task"
    assert cfg.max_iterations == 2
    assert cfg.model.name == "openai/gpt-4o-mini"
    assert cfg.model.max_tokens == 256
    assert cfg.model.temperature == 0.1
