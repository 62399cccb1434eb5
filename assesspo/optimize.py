"""Core AssessPO optimization loop — score, decide, improve, repeat."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from assesspo.assess import assess_prompt, is_goal_met
from assesspo.config import OptimizerConfig
from assesspo.debug import DebugManager
from assesspo.errors import (
    AssessPOError,
    DeadlineExceededError,
    GenerationError,
    MalformedResponseError,
    OptimizationCancelled,
    OptimizationFailed,
    ResponseValidationError,
    RunState,
)
from assesspo.history import HistoryBuffer
from assesspo.improve import improve_prompt
from assesspo.llm.client import GenerationOptions, LiteLLMGenerator, TextGenerator
from assesspo.progress import ProgressDisplay
from assesspo.types import Assessment, OptimizationEntry, Prompt

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class OptimizationResult:
    prompt: Prompt
    entry: OptimizationEntry
    rounds: int
    goal_met: bool
    history: tuple[OptimizationEntry, ...]

    @property
    def assessment(self) -> Assessment:
        return self.entry.assessment


async def _wait_or_cancel(aw: Awaitable[T], cancel_event: asyncio.Event | None) -> T:
    """Await ``aw`` unless ``cancel_event`` fires first.

    Raises:
        OptimizationCancelled: The event was set before ``aw`` finished.
    """
    if cancel_event is None:
        return await aw
    if cancel_event.is_set():
        if asyncio.iscoroutine(aw):
            aw.close()
        raise OptimizationCancelled("optimization cancelled")

    work = asyncio.ensure_future(aw)
    stop = asyncio.ensure_future(cancel_event.wait())
    try:
        await asyncio.wait({work, stop}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        pending = [t for t in (work, stop) if not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    if work.done() and not work.cancelled():
        return work.result()
    raise OptimizationCancelled("optimization cancelled")


class PromptOptimizer:
    """Drives one optimization run. Single use: call optimize() once.

    The optimizer owns the history buffer and the current prompt; the
    engines only ever see read-only snapshots of both.
    """

    def __init__(
        self,
        config: OptimizerConfig,
        generator: TextGenerator,
        initial_prompt: Prompt,
        *,
        debug: DebugManager | None = None,
    ) -> None:
        self.config = config
        self.generator = generator
        self.history = HistoryBuffer(config.history_size)
        self.state = RunState.SCORING
        self._current = initial_prompt
        self._debug = debug or DebugManager(
            log_prompts=config.debug.log_prompts,
            log_responses=config.debug.log_responses,
        )
        self._options = GenerationOptions(
            temperature=config.model.temperature,
            max_tokens=config.model.max_tokens,
        )
        self._started = False

    @property
    def current_prompt(self) -> Prompt:
        return self._current

    async def optimize(self, cancel_event: asyncio.Event | None = None) -> OptimizationResult:
        """Run rounds until the goal is met or the iteration cap is reached.

        Raises:
            OptimizationFailed: Scoring or improving failed for good.
            OptimizationCancelled: ``cancel_event`` was set.
            DeadlineExceededError: A call or run deadline expired.
        """
        if self._started:
            raise RuntimeError("PromptOptimizer.optimize() can only be called once")
        self._started = True

        deadline = asyncio.timeout(self.config.run_timeout)
        try:
            async with deadline:
                return await self._run(cancel_event)
        except TimeoutError as e:
            self.state = RunState.FAILED
            if not deadline.expired():
                raise
            raise DeadlineExceededError(
                f"optimization run exceeded {self.config.run_timeout}s deadline"
            ) from e
        except AssessPOError:
            self.state = RunState.FAILED
            raise

    async def _run(self, cancel_event: asyncio.Event | None) -> OptimizationResult:
        config = self.config
        max_rounds = config.max_rounds
        progress = ProgressDisplay(max_rounds, verbose=config.verbose)
        progress.start()
        best: OptimizationEntry | None = None

        try:
            for round_index in range(max_rounds):
                _check_cancelled(cancel_event)
                logger.info("Round %d/%d", round_index + 1, max_rounds)

                # Scoring
                self.state = RunState.SCORING
                progress.set_status("assessing prompt...")
                prompt = self._current
                assessment = await self._with_retries(
                    RunState.SCORING,
                    lambda: assess_prompt(
                        prompt,
                        task_description=config.task_description,
                        history=self.history.recent(),
                        custom_metrics=config.custom_metrics,
                        optimization_goal=config.optimization_goal,
                        generator=self.generator,
                        options=self._options,
                        debug=self._debug,
                        call_timeout=config.call_timeout,
                    ),
                    cancel_event,
                )
                entry = OptimizationEntry(round=round_index, prompt=prompt, assessment=assessment)
                self.history.record(entry)
                if best is None or assessment.overall_score >= best.assessment.overall_score:
                    best = entry
                progress.complete_round(
                    round_index,
                    assessment.overall_score,
                    str(assessment.overall_grade),
                    best.assessment.overall_score,
                )
                logger.info(
                    "  Round %d: score=%.1f grade=%s",
                    round_index + 1, assessment.overall_score, assessment.overall_grade,
                )

                # Deciding
                self.state = RunState.DECIDING
                if is_goal_met(assessment, config.rating_system, config.threshold):
                    logger.info("Optimization goal met in round %d", round_index + 1)
                    return self._done(entry, round_index + 1, True, progress)
                if round_index + 1 >= max_rounds:
                    break

                # Improving
                _check_cancelled(cancel_event)
                self.state = RunState.IMPROVING
                progress.set_status("generating improvements...")
                self._current = await self._with_retries(
                    RunState.IMPROVING,
                    lambda: improve_prompt(
                        entry,
                        task_description=config.task_description,
                        history=self.history.recent(),
                        optimization_goal=config.optimization_goal,
                        generator=self.generator,
                        options=self._options,
                        debug=self._debug,
                        call_timeout=config.call_timeout,
                    ),
                    cancel_event,
                )

            assert best is not None
            logger.info(
                "Iteration cap of %d reached; best score %.1f from round %d",
                max_rounds, best.assessment.overall_score, best.round + 1,
            )
            return self._done(best, max_rounds, False, progress)
        finally:
            progress.stop()

    def _done(
        self,
        entry: OptimizationEntry,
        rounds: int,
        goal_met: bool,
        progress: ProgressDisplay,
    ) -> OptimizationResult:
        self.state = RunState.DONE
        progress.finish(
            entry.assessment.overall_score, str(entry.assessment.overall_grade), rounds, goal_met,
        )
        return OptimizationResult(
            prompt=entry.prompt,
            entry=entry,
            rounds=rounds,
            goal_met=goal_met,
            history=self.history.recent(),
        )

    async def _with_retries(
        self,
        state: RunState,
        make_call: Callable[[], Awaitable[T]],
        cancel_event: asyncio.Event | None,
    ) -> T:
        """Run one engine call, retrying transient generation failures.

        Up to ``1 + max_retries`` attempts with a cancellable ``retry_delay``
        wait between them. Malformed or invalid responses, and any error the
        generator raises outside the GenerationError contract, fail at once.
        """
        max_attempts = 1 + self.config.max_retries
        attempt = 0
        while True:
            attempt += 1
            try:
                return await _wait_or_cancel(make_call(), cancel_event)
            except GenerationError as e:
                if not e.transient or attempt >= max_attempts:
                    raise OptimizationFailed(state, attempt, e) from e
                logger.warning(
                    "%s attempt %d/%d failed: %s. Retrying in %.1fs...",
                    state.value, attempt, max_attempts, e, self.config.retry_delay,
                )
                await _wait_or_cancel(asyncio.sleep(self.config.retry_delay), cancel_event)
            except (MalformedResponseError, ResponseValidationError) as e:
                raise OptimizationFailed(state, attempt, e) from e
            except AssessPOError:
                raise
            except Exception as e:
                # Unclassified generator failure: terminal, never retried.
                logger.error("%s attempt %d failed unexpectedly: %r", state.value, attempt, e)
                raise OptimizationFailed(state, attempt, e) from e


def _check_cancelled(cancel_event: asyncio.Event | None) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise OptimizationCancelled("optimization cancelled")


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


async def optimize_async(
    config: OptimizerConfig,
    initial_prompt: Prompt | str,
    generator: TextGenerator | None = None,
    *,
    debug: DebugManager | None = None,
    cancel_event: asyncio.Event | None = None,
) -> OptimizationResult:
    """Optimize ``initial_prompt`` under ``config``.

    Uses a LiteLLMGenerator for ``config.model`` unless a generator is given.
    """
    if isinstance(initial_prompt, str):
        initial_prompt = Prompt(input=initial_prompt)
    if generator is None:
        generator = LiteLLMGenerator(config.model)
    optimizer = PromptOptimizer(config, generator, initial_prompt, debug=debug)
    return await optimizer.optimize(cancel_event)


def optimize(
    config: OptimizerConfig,
    initial_prompt: Prompt | str,
    generator: TextGenerator | None = None,
    *,
    debug: DebugManager | None = None,
) -> OptimizationResult:
    """Sync entry point — calls optimize_async() internally.

    For async contexts, use optimize_async() directly.
    """
    return asyncio.run(optimize_async(config, initial_prompt, generator, debug=debug))
