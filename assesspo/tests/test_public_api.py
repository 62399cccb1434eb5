"""Tests for assesspo.__init__ — public API exports."""

import assesspo


def test_all_exports_importable():
    """Every name in __all__ is importable from assesspo."""
    for name in assesspo.__all__:
        obj = getattr(assesspo, name, None)
        assert obj is not None, f"{name} is in __all__ but not importable"


def test_all_exports_complete():
    """No public names missing from __all__."""
    expected = {
        "optimize",
        "optimize_async",
        "PromptOptimizer",
        "OptimizationResult",
        "OptimizerConfig",
        "ModelConfig",
        "DebugConfig",
        "Prompt",
        "Metric",
        "Assessment",
        "OptimizationEntry",
        "HistoryBuffer",
        "assess_prompt",
        "improve_prompt",
        "is_goal_met",
        "normalize_grade",
        "strip_code_fences",
        "TextGenerator",
        "LiteLLMGenerator",
        "GenerationRequest",
        "GenerationOptions",
        "DebugManager",
        "AssessPOError",
        "GenerationError",
        "MalformedResponseError",
        "ResponseValidationError",
        "GradeNormalizationError",
        "MissingVariantError",
        "OptimizationCancelled",
        "DeadlineExceededError",
        "OptimizationFailed",
        "RunState",
    }
    assert set(assesspo.__all__) == expected


def test_error_hierarchy():
    assert issubclass(assesspo.GradeNormalizationError, assesspo.ResponseValidationError)
    assert issubclass(assesspo.MissingVariantError, assesspo.ResponseValidationError)
    assert not issubclass(assesspo.OptimizationCancelled, assesspo.GenerationError)
    assert not issubclass(assesspo.DeadlineExceededError, assesspo.GenerationError)
    for name in ("GenerationError", "MalformedResponseError", "OptimizationFailed"):
        assert issubclass(getattr(assesspo, name), assesspo.AssessPOError)
