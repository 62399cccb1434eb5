"""AssessPO — Assessment-driven Prompt Optimization."""

from assesspo.assess import assess_prompt, is_goal_met, normalize_grade
from assesspo.config import DebugConfig, ModelConfig, OptimizerConfig
from assesspo.debug import DebugManager
from assesspo.errors import (
    AssessPOError,
    DeadlineExceededError,
    GenerationError,
    GradeNormalizationError,
    MalformedResponseError,
    MissingVariantError,
    OptimizationCancelled,
    OptimizationFailed,
    ResponseValidationError,
    RunState,
)
from assesspo.history import HistoryBuffer
from assesspo.improve import improve_prompt
from assesspo.llm.client import (
    GenerationOptions,
    GenerationRequest,
    LiteLLMGenerator,
    TextGenerator,
)
from assesspo.optimize import (
    OptimizationResult,
    PromptOptimizer,
    optimize,
    optimize_async,
)
from assesspo.parsing import strip_code_fences
from assesspo.types import Assessment, Metric, OptimizationEntry, Prompt

__all__ = [
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
]
