"""Evolution loop and run lifecycle of the shift optimizer.

Key Design Decisions:
- One run per start command; all run state (population, best, statistics) is
  owned by the engine and discarded when the run ends
- Commands are read from a queue at a cooperative checkpoint at the top of
  every generation; pause blocks there until resume or cancel
- Elitism keeps the best individual, so best fitness never increases
- Individuals are evaluated once; elites carry their cached fitness forward
- All randomness comes from one random.Random seeded from the run config

Termination (first condition wins):
- generations limit reached
- stagnation: no new best below best * improvement_threshold for
  stagnation_limit generations
- staged early termination at fixed numbers of remaining generations
"""

import logging
import math
import queue
import random
import time
import uuid
from collections import deque
from concurrent.futures import Executor, ProcessPoolExecutor
from enum import Enum
from itertools import repeat
from typing import Callable, Deque, List, Optional, Tuple

from ..errors import OptimizationCancelled
from ..logger import JSONLogger
from ..models.messages import (
    CancelCommand,
    CancelledNotification,
    CompleteNotification,
    ErrorNotification,
    PauseCommand,
    PausedNotification,
    ProgressNotification,
    ResumeCommand,
    ResumedNotification,
    StartCommand,
)
from ..models.optimization import (
    GenerationStatistics,
    OptimizationProgress,
    OptimizationResult,
)
from ..utils import format_computation_time, format_currency
from ..validator import ConfigValidator, ValidationReport
from .config import DEFAULT_WEIGHTS, GeneticConfig
from .decoder import count_violations, decode, summarize, work_day_indices
from .fitness import evaluate_fitness, log_breakdown
from .initialization import initialize_population
from .operators import breed_child, select_elites
from .precompute import PlanningContext, build_context, default_shift_types
from .types import Genome, Individual, Population, ScheduleSummary

logger = logging.getLogger(__name__)

NotificationSink = Callable[[object], None]


class EngineState(str, Enum):
    """Lifecycle state of an OptimizationEngine."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    ERROR = "error"


def score_genome(genome: Genome, context: PlanningContext) -> Tuple[float, ScheduleSummary]:
    """Decode and score one genome (module level so worker processes can run it)."""
    schedule = decode(genome, context)
    fitness = evaluate_fitness(schedule, context, context.weights)
    return fitness, summarize(schedule, context.config.minimum_balance)


class OptimizationEngine:
    """Genetic algorithm engine with a pause/resume/cancel control protocol.

    Notifications (progress, paused, resumed, complete, cancelled, error) are
    passed to the sink callable in the order they happen.
    """

    def __init__(
        self,
        sink: NotificationSink,
        ga_config: Optional[GeneticConfig] = None,
        validator: Optional[ConfigValidator] = None,
        history_logger: Optional[JSONLogger] = None,
    ):
        """
        Initialize optimization engine.

        Args:
            sink: Callable receiving every notification
            ga_config: GA hyperparameters (defaults when None)
            validator: Config validator (non-strict when None)
            history_logger: Optional JSON-lines log of generation statistics
        """
        self.sink = sink
        self.ga_config = ga_config or GeneticConfig()
        self.validator = validator or ConfigValidator()
        self.history_logger = history_logger
        self.commands: "queue.Queue" = queue.Queue()

        self.state = EngineState.IDLE
        self.runs_started = 0
        self.run_id: Optional[str] = None
        self.history: Deque[GenerationStatistics] = deque(maxlen=self.ga_config.history_limit)
        self.validation_report: Optional[ValidationReport] = None
        self.latest_progress: Optional[OptimizationProgress] = None
        self.result: Optional[OptimizationResult] = None
        self.error: Optional[str] = None

        logger.info(
            f"OptimizationEngine initialized: tournament={self.ga_config.tournament_size}, "
            f"crossover={self.ga_config.crossover_rate}, mutation={self.ga_config.mutation_rate}, "
            f"stagnation={self.ga_config.stagnation_limit}"
        )

    # Host controls (thread-safe: they only enqueue commands)

    def pause(self) -> None:
        self.commands.put(PauseCommand())

    def resume(self) -> None:
        self.commands.put(ResumeCommand())

    def cancel(self) -> None:
        self.commands.put(CancelCommand())

    # Run lifecycle

    def run(self, command: StartCommand) -> Optional[OptimizationResult]:
        """
        Run an optimization to completion, cancellation, or error.

        A start command received while running cancels the current run and
        starts the new one.

        Args:
            command: Start command with config and tables

        Returns:
            Result of the last run, or None if it was cancelled or failed
        """
        next_command: Optional[StartCommand] = command
        while next_command is not None:
            next_command = self._run_once(next_command)
        return self.result

    def _emit(self, notification) -> None:
        self.sink(notification)

    def _reset(self) -> None:
        self.run_id = uuid.uuid4().hex
        self.history.clear()
        self.validation_report = None
        self.latest_progress = None
        self.result = None
        self.error = None

    def _run_once(self, command: StartCommand) -> Optional[StartCommand]:
        """Execute one run; returns the start command that superseded it, if any."""
        self._reset()
        self.state = EngineState.RUNNING
        self.runs_started += 1
        try:
            self.result = self._optimize(command)
            self.state = EngineState.COMPLETED
            self._emit(CompleteNotification(data=self.result))
        except OptimizationCancelled as e:
            self.state = EngineState.CANCELLED
            logger.info(f"Run {self.run_id} cancelled")
            self._emit(CancelledNotification())
            return e.superseded_by
        except Exception as e:
            self.error = str(e) or e.__class__.__name__
            self.state = EngineState.ERROR
            logger.exception(f"Run {self.run_id} failed: {self.error}")
            self._emit(ErrorNotification(error=self.error))
        return None

    def _optimize(self, command: StartCommand) -> OptimizationResult:
        started = time.perf_counter()

        shift_types = command.shift_types if command.shift_types is not None else default_shift_types()
        config, self.validation_report = self.validator.validate(command.config, shift_types)
        weights = DEFAULT_WEIGHTS.with_overrides(config.fitness_weights)
        context = build_context(config, command.expenses, command.deposits, shift_types, weights)

        rng = random.Random(config.seed)
        ga = self.ga_config
        elite_count = ga.elite_size(config.population_size)

        logger.info(
            f"Run {self.run_id} started: pop={config.population_size}, gens={config.generations}, "
            f"elitism={elite_count}, start={format_currency(config.starting_balance)}, "
            f"target={format_currency(config.target_ending_balance)}, "
            f"minimum={format_currency(config.minimum_balance)}"
        )

        population = Population(
            config.population_size, initialize_population(context, ga, rng)
        )
        best: Optional[Individual] = None
        stagnation_reference = math.inf
        generations_no_improvement = 0
        termination_reason = "max_generations"
        generation = 0

        executor = self._make_executor()
        try:
            for generation in range(1, config.generations + 1):
                self._checkpoint()
                self._evaluate(population.individuals, context, executor)
                population.sort()

                current = population[0]
                improved = best is None or current.fitness < best.fitness
                if improved:
                    best = current.copy()

                # Stagnation counts generations without a significant improvement
                if current.fitness < stagnation_reference * ga.improvement_threshold:
                    stagnation_reference = current.fitness
                    generations_no_improvement = 0
                else:
                    generations_no_improvement += 1

                self._record_generation(generation, best)
                if improved or generation % ga.progress_interval == 0:
                    self._report_progress(generation, config.generations, best)
                    if config.debug_fitness:
                        log_breakdown(decode(best.genome, context), context, weights)

                reason = self._termination_reason(
                    generation, config.generations, best, generations_no_improvement,
                    config.target_ending_balance, weights.balance_tolerance,
                )
                if reason:
                    termination_reason = reason
                    break

                for elite in select_elites(population.individuals, elite_count):
                    population.stage(elite)
                while not population.is_full():
                    population.stage(breed_child(population.individuals, context, ga, rng))
                population.swap()
        finally:
            if executor is not None:
                executor.shutdown()

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"Run {self.run_id} finished after {generation} gens ({termination_reason}): "
            f"best={best.fitness:.2f}, balance={format_currency(best.summary.final_balance)}, "
            f"violations={best.summary.violations}, time={format_computation_time(elapsed_ms)}"
        )
        return self._build_result(best, context, generation, termination_reason, elapsed_ms)

    # Generation steps

    def _checkpoint(self) -> None:
        """Apply every queued command; blocks while paused."""
        while True:
            try:
                command = self.commands.get_nowait()
            except queue.Empty:
                return
            self._handle_command(command)

    def _handle_command(self, command) -> None:
        if isinstance(command, CancelCommand):
            raise OptimizationCancelled()
        if isinstance(command, StartCommand):
            logger.info(f"Run {self.run_id} superseded by a new start command")
            raise OptimizationCancelled(superseded_by=command)
        if isinstance(command, PauseCommand):
            self._pause()
            return
        logger.debug(f"Ignoring {type(command).__name__} while {self.state.value}")

    def _pause(self) -> None:
        self.state = EngineState.PAUSED
        logger.info(f"Run {self.run_id} paused")
        self._emit(PausedNotification())

        while self.state is EngineState.PAUSED:
            command = self.commands.get()
            if isinstance(command, ResumeCommand):
                self.state = EngineState.RUNNING
                logger.info(f"Run {self.run_id} resumed")
                self._emit(ResumedNotification())
            elif isinstance(command, PauseCommand):
                continue
            else:
                self._handle_command(command)

    def _make_executor(self) -> Optional[Executor]:
        if self.ga_config.evaluation_workers > 1:
            return ProcessPoolExecutor(max_workers=self.ga_config.evaluation_workers)
        return None

    def _evaluate(
        self,
        individuals: List[Individual],
        context: PlanningContext,
        executor: Optional[Executor],
    ) -> None:
        """Score every individual that has no cached fitness yet."""
        pending = [individual for individual in individuals if not individual.evaluated]
        if not pending:
            return

        genomes = [individual.genome for individual in pending]
        if executor is not None:
            workers = self.ga_config.evaluation_workers
            chunksize = max(1, len(genomes) // (workers * 4))
            scores = list(executor.map(score_genome, genomes, repeat(context), chunksize=chunksize))
        else:
            scores = [score_genome(genome, context) for genome in genomes]

        for individual, (fitness, summary) in zip(pending, scores):
            individual.fitness = fitness
            individual.summary = summary

    def _record_generation(self, generation: int, best: Individual) -> None:
        stats = GenerationStatistics(
            generation=generation,
            timestamp=time.time(),
            fitness=best.fitness,
            work_days=best.summary.work_days,
            violations=best.summary.violations,
            balance=best.summary.final_balance,
        )
        self.history.append(stats)
        if self.history_logger is not None:
            self.history_logger.log_generation(stats, run_id=self.run_id)

    def _report_progress(self, generation: int, generations: int, best: Individual) -> None:
        progress = OptimizationProgress(
            generation=generation,
            progress=round(generation / generations * 100, 2),
            best_fitness=best.fitness,
            work_days=best.summary.work_days,
            balance=best.summary.final_balance,
            violations=best.summary.violations,
            message=f"Generation {generation}/{generations}",
        )
        self.latest_progress = progress
        logger.debug(
            f"Gen {generation}: best={best.fitness:.2f}, work_days={progress.work_days}, "
            f"balance={format_currency(progress.balance)}, violations={progress.violations}"
        )
        self._emit(ProgressNotification(data=progress))

    def _termination_reason(
        self,
        generation: int,
        generations: int,
        best: Individual,
        generations_no_improvement: int,
        target: float,
        balance_tolerance: float,
    ) -> Optional[str]:
        """Name of the termination condition met after this generation, if any."""
        if generation >= generations:
            return "max_generations"
        if generations_no_improvement >= self.ga_config.stagnation_limit:
            return "stagnation"

        remaining = generations - generation
        checks = self.ga_config.early_termination_checks
        for index, (remaining_at, threshold) in enumerate(checks):
            if remaining != remaining_at:
                continue
            if best.summary.violations > 0 or best.fitness >= threshold:
                return None
            if index == len(checks) - 1:
                if abs(best.summary.final_balance - target) > balance_tolerance:
                    return None
            return "early_termination"
        return None

    def _build_result(
        self,
        best: Individual,
        context: PlanningContext,
        generations_run: int,
        termination_reason: str,
        elapsed_ms: float,
    ) -> OptimizationResult:
        schedule = decode(best.genome, context)
        summary = summarize(schedule, context.config.minimum_balance)
        if context.config.debug_fitness:
            log_breakdown(schedule, context, context.weights)

        return OptimizationResult(
            genome=[list(day) for day in best.genome],
            schedule=schedule,
            work_days=work_day_indices(schedule),
            total_earnings=summary.total_earnings,
            final_balance=summary.final_balance,
            min_balance=summary.min_balance,
            violations=count_violations(schedule, context.config.minimum_balance),
            fitness=best.fitness,
            computation_time_ms=elapsed_ms,
            computation_time=format_computation_time(elapsed_ms),
            generations_run=generations_run,
            termination_reason=termination_reason,
        )
