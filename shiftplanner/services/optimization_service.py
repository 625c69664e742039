"""Service for optimization run management."""

import logging
import threading
import time
from datetime import datetime, timezone
from typing import Dict, List, Optional

from ..config import Settings
from ..data_loader import load_deposits, load_expenses, load_shift_types
from ..logger import JSONLogger
from ..models.ledger import Deposit, Expense
from ..models.messages import (
    CancelledNotification,
    CompleteNotification,
    ErrorNotification,
    StartCommand,
)
from ..models.optimization import OptimizationConfig, OptimizationResult
from ..models.shift import ShiftType
from ..optimizer.channel import OptimizationWorker, QueueSink
from ..optimizer.config import GeneticConfig, get_preset
from ..optimizer.engine import EngineState, OptimizationEngine
from ..utils import format_computation_time, format_currency

logger = logging.getLogger(__name__)


class OptimizationService:
    """Service for managing background optimization runs and their results."""

    def __init__(self, settings: Optional[Settings] = None, ga_config: Optional[GeneticConfig] = None):
        """
        Initialize optimization service.

        Args:
            settings: Application settings (read from the environment when None)
            ga_config: GA hyperparameters shared by every run (the
                GA_PRESET setting when None)

        Raises:
            ValueError: If GA_PRESET names an unknown preset
        """
        self.settings = settings or Settings()
        self.ga_config = ga_config or get_preset(self.settings.GA_PRESET)
        self.history_logger: Optional[JSONLogger] = (
            JSONLogger(self.settings.HISTORY_FILE) if self.settings.HISTORY_FILE else None
        )
        self.worker: Optional[OptimizationWorker] = None
        self.last_result: Optional[OptimizationResult] = None
        self._starts_submitted = 0
        self._lock = threading.Lock()
        self._tables: Optional[Dict] = None

    # Default tables

    def _default_tables(self) -> Dict:
        """Tables from the configured CSV files (loaded once)."""
        if self._tables is None:
            settings = self.settings
            self._tables = {
                "expenses": load_expenses(settings.EXPENSES_CSV) if settings.EXPENSES_CSV else [],
                "deposits": load_deposits(settings.DEPOSITS_CSV) if settings.DEPOSITS_CSV else [],
                "shift_types": (
                    load_shift_types(settings.SHIFT_TYPES_CSV) or None
                    if settings.SHIFT_TYPES_CSV else None
                ),
            }
        return self._tables

    def build_start_command(
        self,
        config: OptimizationConfig,
        expenses: Optional[List[Expense]] = None,
        deposits: Optional[List[Deposit]] = None,
        shift_types: Optional[Dict[str, ShiftType]] = None,
    ) -> StartCommand:
        """
        Build a start command, filling omitted tables and GA sizing from settings.

        Args:
            config: Run configuration from the request
            expenses: Expenses (configured CSV table when None)
            deposits: Deposits (configured CSV table when None)
            shift_types: Shift table (configured CSV table, then built-in table, when None)

        Returns:
            StartCommand ready for the engine
        """
        sizing = {}
        if "population_size" not in config.model_fields_set:
            sizing["population_size"] = self.settings.DEFAULT_POPULATION_SIZE
        if "generations" not in config.model_fields_set:
            sizing["generations"] = self.settings.DEFAULT_GENERATIONS
        if sizing:
            config = config.model_copy(update=sizing)

        tables = self._default_tables()
        return StartCommand(
            config=config,
            expenses=expenses if expenses is not None else tables["expenses"],
            deposits=deposits if deposits is not None else tables["deposits"],
            shift_types=shift_types if shift_types is not None else tables["shift_types"],
        )

    # Background runs

    def _on_notification(self, notification) -> None:
        """Sink of the background worker (runs on the worker thread)."""
        if isinstance(notification, CompleteNotification):
            result = notification.data
            with self._lock:
                self.last_result = result
            logger.info(
                f"Optimization completed: balance {format_currency(result.final_balance)}, "
                f"{len(result.work_days)} work days, {result.violations} violations, "
                f"{result.computation_time}"
            )
        elif isinstance(notification, ErrorNotification):
            logger.error(f"Optimization failed: {notification.error}")
        elif isinstance(notification, CancelledNotification):
            logger.info("Optimization cancelled")

    def _ensure_worker(self) -> OptimizationWorker:
        if self.worker is None or not self.worker.is_alive():
            self.worker = OptimizationWorker(
                self._on_notification, self.ga_config, history_logger=self.history_logger
            )
            self.worker.start()
        return self.worker

    def _engine_state(self) -> EngineState:
        if self.worker is None:
            return EngineState.IDLE
        engine = self.worker.engine
        if self._starts_submitted > engine.runs_started:
            # Submitted but not yet picked up by the worker
            return EngineState.RUNNING
        return engine.state

    def start(self, command: StartCommand) -> None:
        """
        Start a run in the background (supersedes a run in progress).

        Args:
            command: Start command with config and tables
        """
        with self._lock:
            worker = self._ensure_worker()
            self._starts_submitted += 1
            worker.start_optimization(command)
        logger.info(
            f"Optimization queued: pop={command.config.population_size}, "
            f"gens={command.config.generations}"
        )

    def pause(self) -> None:
        if self._engine_state() is not EngineState.RUNNING:
            raise ValueError("No optimization running")
        self.worker.pause()

    def resume(self) -> None:
        if self._engine_state() is not EngineState.PAUSED:
            raise ValueError("Optimization is not paused")
        self.worker.resume()

    def cancel(self) -> None:
        if self._engine_state() not in (EngineState.RUNNING, EngineState.PAUSED):
            raise ValueError("No optimization running")
        self.worker.cancel()

    def get_status(self) -> Dict:
        """
        Get current optimization status.

        Returns:
            Status dictionary with the latest progress snapshot
        """
        state = self._engine_state()
        engine = self.worker.engine if self.worker is not None else None
        progress = engine.latest_progress if engine is not None else None
        warnings = (
            list(engine.validation_report.warnings)
            if engine is not None and engine.validation_report is not None
            else []
        )
        logger.debug(f"get_status: {state.value}")
        return {
            "status": state.value,
            "run_id": engine.run_id if engine is not None else None,
            "progress": progress,
            "warnings": warnings,
            "error": engine.error if state is EngineState.ERROR else None,
        }

    def get_result(self) -> Optional[OptimizationResult]:
        """Result of the most recent completed run, if any."""
        with self._lock:
            return self.last_result

    def get_history(self, limit: Optional[int] = 20) -> Dict:
        """
        Get per-generation statistics of the current or last run.

        Args:
            limit: Number of recent entries to return (None for all)

        Returns:
            History dictionary with generation statistics
        """
        if self.worker is None:
            return {"generations": [], "total_generations": 0}

        generations = list(self.worker.engine.history)  # Make a copy
        total = len(generations)
        if limit is not None and limit > 0:
            generations = generations[-limit:]
        return {"generations": generations, "total_generations": total}

    # Synchronous runs

    def optimize_now(self, command: StartCommand) -> Dict:
        """
        Run an optimization on the calling thread and wait for the result.

        Args:
            command: Start command with config and tables

        Returns:
            Dictionary with success, result, error and performance metrics
        """
        start_time = datetime.now(timezone.utc)
        started = time.perf_counter()

        sink = QueueSink()
        engine = OptimizationEngine(sink, self.ga_config, history_logger=self.history_logger)
        result = engine.run(command)

        end_time = datetime.now(timezone.utc)
        total_ms = (time.perf_counter() - started) * 1000
        logger.info(f"Synchronous optimization finished in {format_computation_time(total_ms)}")

        return {
            "success": engine.state is EngineState.COMPLETED,
            "result": result,
            "error": engine.error,
            "performance_metrics": {
                "start_time": start_time.isoformat(),
                "end_time": end_time.isoformat(),
                "total_time": total_ms,
            },
        }

    def shutdown(self) -> None:
        """Stop the background worker and close the history log."""
        if self.worker is not None:
            self.worker.stop(timeout=5.0)
            self.worker = None
        if self.history_logger is not None:
            self.history_logger.close()
            self.history_logger = None
