"""Creative-writing example — optimizes a mystery-novel opening prompt.

The loop works like this:

  1. The model grades the current prompt against the task description and
     the custom metrics (0-20 scale, with strengths, weaknesses, suggestions)
  2. If the overall score reaches threshold * 20, stop
  3. Otherwise the model writes an incremental and a bold rewrite, and the
     one with the higher predicted impact becomes the next prompt
  4. Repeat until the goal is met or the iteration cap is reached

Set OPENAI_API_KEY (or pick another litellm model below) before running.
"""

import logging

from assesspo import Metric, OptimizerConfig, optimize

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

config = OptimizerConfig(
    task_description="Create an engaging and atmospheric opening that hooks the reader",
    custom_metrics=[
        Metric(name="Atmosphere", description="How well the writing evokes the setting"),
        Metric(name="Intrigue", description="How effectively it sets up the mystery"),
        Metric(name="Character Introduction", description="How well it introduces key characters"),
    ],
    rating_system="numerical",
    threshold=0.9,          # stop once overallScore >= 18/20
    max_iterations=5,
    max_retries=3,
    retry_delay=2.0,
    model={"name": "openai/gpt-4o", "max_tokens": 1024},
    verbose=True,
)

result = optimize(
    config,
    "Write the opening paragraph of a mystery novel set in a small coastal town.",
)

print(f"\nGoal met: {result.goal_met} after {result.rounds} round(s)")
print(f"Score: {result.assessment.overall_score}/20 ({result.assessment.overall_grade})")
print(f"\nOptimized prompt:\n{result.prompt.render()}")
