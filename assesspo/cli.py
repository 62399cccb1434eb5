"""Minimal CLI for optimizing a single prompt."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from assesspo.config import DEFAULT_OPTIMIZATION_GOAL, OptimizerConfig
from assesspo.errors import AssessPOError
from assesspo.optimize import optimize_async
from assesspo.types import Metric


def _parse_metric(value: str) -> Metric:
    name, sep, description = value.partition("=")
    if not name.strip():
        raise argparse.ArgumentTypeError(f"invalid metric {value!r}, expected NAME=DESCRIPTION")
    return Metric(name=name.strip(), description=description.strip() if sep else "")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="assesspo",
        description="AssessPO — Assessment-driven Prompt Optimization",
    )
    parser.add_argument("prompt", nargs="+", help="Prompt to optimize")
    parser.add_argument("--task", type=str, default=None, help="Task description (defaults to the prompt)")
    parser.add_argument("--goal", type=str, default=None, help=f'Optimization goal (default: "{DEFAULT_OPTIMIZATION_GOAL}")')
    parser.add_argument("--config", type=Path, default=None, help="Path to YAML config file")
    parser.add_argument("--model", type=str, default=None, help='litellm model string, e.g. "openai/gpt-4o"')
    parser.add_argument("--temperature", type=float, default=None, help="Sampling temperature")
    parser.add_argument("--max-tokens", type=int, default=None, help="Max output tokens per call")
    parser.add_argument("--iterations", type=int, default=None, help="Maximum optimization rounds")
    parser.add_argument("--memory", type=int, default=None, help="Number of previous rounds to remember")
    parser.add_argument("--threshold", type=float, default=None, help="Numerical success threshold (0-1)")
    parser.add_argument("--rating-system", choices=["numerical", "letter"], default=None, help="Success criterion")
    parser.add_argument("--max-retries", type=int, default=None, help="Retries per generation call")
    parser.add_argument("--retry-delay", type=float, default=None, help="Seconds between retries")
    parser.add_argument("--timeout", type=float, default=None, help="Per-call deadline in seconds")
    parser.add_argument("--metric", type=_parse_metric, action="append", default=None, metavar="NAME=DESCRIPTION", help="Custom metric (repeatable)")
    parser.add_argument("--debug-prompts", action="store_true", help="Log raw prompts and responses")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    return parser


def build_config(args: argparse.Namespace, prompt_text: str) -> OptimizerConfig:
    """Layer the YAML config (if any) and command-line flags over the defaults.

    The task description falls back to the prompt text itself.
    """
    model_overrides = {
        "name": args.model,
        "temperature": args.temperature,
        "max_tokens": args.max_tokens,
    }
    overrides: dict[str, Any] = {
        "task_description": args.task or None,
        "optimization_goal": args.goal,
        "max_iterations": args.iterations,
        "history_size": args.memory,
        "threshold": args.threshold,
        "rating_system": args.rating_system,
        "max_retries": args.max_retries,
        "retry_delay": args.retry_delay,
        "call_timeout": args.timeout,
        "custom_metrics": args.metric,
        "model": {k: v for k, v in model_overrides.items() if v is not None} or None,
    }
    if args.debug_prompts:
        overrides["debug"] = {"log_prompts": True, "log_responses": True}
    if args.verbose:
        overrides["verbose"] = True
    overrides = {k: v for k, v in overrides.items() if v is not None}

    defaults = {"task_description": prompt_text}
    if args.config is not None:
        return OptimizerConfig.from_yaml(args.config, defaults=defaults, **overrides)
    return OptimizerConfig(**{**defaults, **overrides})


async def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    if args.debug_prompts:
        logging.getLogger("assesspo.debug").setLevel(logging.DEBUG)

    prompt_text = " ".join(args.prompt)
    try:
        config = build_config(args, prompt_text)
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(2)

    try:
        result = await optimize_async(config, prompt_text)
    except AssessPOError as e:
        print(f"Optimization error: {e}", file=sys.stderr)
        sys.exit(1)

    print(result.prompt.render())


def run() -> None:
    """Console-script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    asyncio.run(main())
