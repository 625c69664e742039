"""Configuration for the genetic algorithm.

Contains hyperparameters, random-generation distributions and fitness weights.

## TUNING NOTES:

Speed vs accuracy tradeoff:
- FAST: pop=60, gens=150 (~9k evals) - interactive previews
- BALANCED: pop=200, gens=500 (~100k evals) - default
- THOROUGH: pop=300, gens=1000 (~300k evals) - large deficits, many constraints

Key bottlenecks:
- Fitness evaluation (O(horizon)) - decoded once per individual, cached
- Selection/Crossover/Mutation - O(horizon) per child
"""

import logging
from dataclasses import dataclass, field, fields, replace
from typing import Dict, Mapping, Tuple

from ..config import (
    BALANCE_TOLERANCE,
    CLUSTERING_PENALTY,
    CLUSTERING_WINDOW,
    CONSECUTIVE_DAY_PENALTY,
    CRITICAL_DAY_BUFFER,
    FINAL_BALANCE_PENALTY,
    FIXED_BALANCE_PENALTY,
    GAP_VARIANCE_WEIGHT,
    MAX_CONSECUTIVE_DAYS,
    MAX_WORK_DAYS_IN_WINDOW,
    MIN_GAP_DAYS,
    NEAR_MINIMUM_PENALTY,
    OVERSHOOT_MULTIPLIER,
    SHORTFALL_PENALTY,
    SMALL_GAP_PENALTY,
    VIOLATION_PENALTY,
    WORK_DAY_DIFF_PENALTY,
)

logger = logging.getLogger(__name__)


# Single shift per day, normal mode (tier -> weight)
NORMAL_SHIFT_WEIGHTS: Dict[str, float] = {
    "large": 0.6,
    "medium": 0.2,
    "small": 0.2,
}

# Dense combinations used ahead of a critical day (tiers -> weight)
CRISIS_SHIFT_WEIGHTS: Dict[Tuple[str, ...], float] = {
    ("large", "large"): 0.4,
    ("medium", "large"): 0.4,
    ("medium", "medium"): 0.2,
}

# Per-day mutation of a worked day
MUTATION_WEIGHTS: Dict[str, float] = {
    "remove": 0.2,
    "to_small": 0.3,
    "to_medium": 0.2,
    "to_large": 0.15,
}


@dataclass
class GeneticConfig:
    """Configuration for the genetic algorithm.

    Defaults:
    - tournament_size: 7 (clamped to the population size)
    - crossover_rate: 0.7 (otherwise the first parent is copied)
    - mutation_rate: 0.15 per day, not per genome
    - elitism: max(min_elite_size, elite_percentage * population), at most half
    - stagnation_limit: 150 generations without a >1% improvement

    Population size and generation count come from the run's
    OptimizationConfig, not from here.
    """
    # Core GA parameters
    tournament_size: int = 7
    crossover_rate: float = 0.7
    mutation_rate: float = 0.15
    elite_percentage: float = 0.2
    min_elite_size: int = 2

    # Termination
    stagnation_limit: int = 150
    improvement_threshold: float = 0.99  # new best must beat best * threshold
    # (generations remaining, fitness threshold); the last stage also checks balance
    early_termination_checks: Tuple[Tuple[int, float], ...] = (
        (300, 1000.0),
        (100, 500.0),
        (50, 100.0),
    )

    # Reporting
    progress_interval: int = 50
    history_limit: int = 1000

    # Normal mode generation
    normal_shift_weights: Dict[str, float] = field(
        default_factory=lambda: dict(NORMAL_SHIFT_WEIGHTS)
    )
    work_probability_jitter: float = 0.5  # +-50% around ideal/horizon
    min_work_probability: float = 0.05
    max_work_probability: float = 0.9

    # Crisis mode generation
    crisis_shift_weights: Dict[Tuple[str, ...], float] = field(
        default_factory=lambda: dict(CRISIS_SHIFT_WEIGHTS)
    )
    crisis_mode_probability: float = 0.5
    min_days_before_critical: int = 2
    max_days_before_critical: int = 5
    crisis_day_usage: float = 0.9

    # Mutation
    mutation_weights: Dict[str, float] = field(
        default_factory=lambda: dict(MUTATION_WEIGHTS)
    )
    add_shift_probability: float = 0.5
    keep_well_spaced_probability: float = 0.8
    add_adjacent_probability: float = 0.2
    remove_work_day_probability: float = 0.3

    # Parallel fitness evaluation (0 or 1 = in-process)
    evaluation_workers: int = 0

    def elite_size(self, population_size: int) -> int:
        """Number of individuals copied unchanged into the next generation."""
        size = max(self.min_elite_size, int(self.elite_percentage * population_size))
        return max(1, min(size, population_size // 2))


# Alternative configs for different scenarios
FAST_CONFIG = GeneticConfig(
    stagnation_limit=60,
    progress_interval=25,
)

THOROUGH_CONFIG = GeneticConfig(
    tournament_size=5,
    mutation_rate=0.1,
    stagnation_limit=300,
)

PRESETS: Dict[str, GeneticConfig] = {
    "fast": FAST_CONFIG,
    "balanced": GeneticConfig(),
    "thorough": THOROUGH_CONFIG,
}


def get_preset(name: str) -> GeneticConfig:
    """GA config registered under a preset name (case-insensitive)."""
    try:
        return PRESETS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown GA preset '{name}', expected one of {sorted(PRESETS)}"
        ) from None


@dataclass(frozen=True)
class FitnessWeights:
    """Penalty coefficients of the fitness function (lower fitness is better)."""

    # Balance
    final_balance_penalty: float = FINAL_BALANCE_PENALTY
    overshoot_multiplier: float = OVERSHOOT_MULTIPLIER
    balance_tolerance: float = BALANCE_TOLERANCE
    violation_penalty: float = VIOLATION_PENALTY
    shortfall_penalty: float = SHORTFALL_PENALTY
    critical_day_buffer: float = CRITICAL_DAY_BUFFER
    near_minimum_penalty: float = NEAR_MINIMUM_PENALTY
    fixed_balance_penalty: float = FIXED_BALANCE_PENALTY

    # Work day distribution
    work_day_diff_penalty: float = WORK_DAY_DIFF_PENALTY
    consecutive_day_penalty: float = CONSECUTIVE_DAY_PENALTY
    max_consecutive_days: int = MAX_CONSECUTIVE_DAYS
    small_gap_penalty: float = SMALL_GAP_PENALTY
    min_gap_days: int = MIN_GAP_DAYS
    gap_variance_weight: float = GAP_VARIANCE_WEIGHT

    # Clustering
    clustering_window: int = CLUSTERING_WINDOW
    max_work_days_in_window: int = MAX_WORK_DAYS_IN_WINDOW
    clustering_penalty: float = CLUSTERING_PENALTY

    def with_overrides(self, overrides: Mapping[str, float]) -> "FitnessWeights":
        """Return a copy with the named coefficients replaced.

        Unknown names are logged and ignored.
        """
        known = {f.name: f.type for f in fields(self)}
        accepted = {}
        for name, value in overrides.items():
            if name not in known:
                logger.warning(f"Ignoring unknown fitness weight '{name}'")
                continue
            accepted[name] = int(value) if known[name] in (int, "int") else float(value)
        return replace(self, **accepted) if accepted else self


DEFAULT_WEIGHTS = FitnessWeights()
