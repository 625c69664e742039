"""Population initialization for the genetic algorithm.

Creates diverse genomes with two strategies:
- Normal: every free day is independently a rest day or gets one shift drawn
  from the weighted tier distribution (60% large, 20% medium, 20% small).
- Crisis: ahead of each projected balance shortfall, a short window of days is
  densely filled with double / high-value shifts, then the rest of the horizon
  is filled in normal mode.

Crisis mode is always used when the required earnings exceed one large shift
per free day, and otherwise picked per genome with crisis_mode_probability
when the no-shift projection has critical days. Manual shift constraints are
applied before any random assignment and never overwritten.
"""

import logging
import random
from typing import Dict, List, Tuple, TypeVar

from ..config import MAX_DAY, MIN_DAY
from .config import GeneticConfig
from .precompute import PlanningContext
from .types import REST_DAY, DayAssignment, Genome, Individual

logger = logging.getLogger(__name__)

K = TypeVar("K")


def weighted_choice(rng: random.Random, weights: Dict[K, float]) -> K:
    """Pick a key with probability proportional to its weight."""
    keys = list(weights)
    return rng.choices(keys, weights=[weights[key] for key in keys], k=1)[0]


def normal_assignment(context: PlanningContext, ga_config: GeneticConfig, rng: random.Random) -> DayAssignment:
    """A single shift drawn from the normal-mode tier distribution."""
    tier = weighted_choice(rng, ga_config.normal_shift_weights)
    return (context.catalog.resolve(tier),)


def crisis_assignment(context: PlanningContext, ga_config: GeneticConfig, rng: random.Random) -> DayAssignment:
    """A double/high-value combination drawn from the crisis distribution."""
    tiers: Tuple[str, ...] = weighted_choice(rng, ga_config.crisis_shift_weights)
    return tuple(context.catalog.resolve(tier) for tier in tiers)


def work_probability(context: PlanningContext, ga_config: GeneticConfig, rng: random.Random) -> float:
    """Per-genome chance that a free day is worked, jittered around the ideal."""
    free = len(context.free_days)
    if free == 0:
        return 0.0
    forced_worked = sum(1 for shifts in context.forced_shifts.values() if shifts)
    base = max(0, context.ideal_work_days - forced_worked) / free
    jitter = rng.uniform(1 - ga_config.work_probability_jitter, 1 + ga_config.work_probability_jitter)
    return min(ga_config.max_work_probability, max(ga_config.min_work_probability, base * jitter))


def use_crisis_mode(context: PlanningContext, ga_config: GeneticConfig, rng: random.Random) -> bool:
    if context.extreme_deficit:
        return True
    if not context.crisis_deadlines:
        return False
    return rng.random() < ga_config.crisis_mode_probability


def _fill_crisis_windows(
    days: Dict[int, DayAssignment],
    context: PlanningContext,
    ga_config: GeneticConfig,
    rng: random.Random,
) -> None:
    """Densely fill the days leading up to each critical day."""
    for deadline in context.crisis_deadlines:
        length = rng.randint(ga_config.min_days_before_critical, ga_config.max_days_before_critical)
        window = [
            day for day in range(max(MIN_DAY, deadline - length), deadline + 1)
            if day not in days
        ]
        if not window:
            continue
        count = max(1, int(len(window) * ga_config.crisis_day_usage))
        for day in rng.sample(window, count):
            days[day] = crisis_assignment(context, ga_config, rng)

    if context.extreme_deficit:
        # Not even a large shift every day covers the deficit: use most of the horizon
        remaining = [day for day in context.free_days if day not in days]
        count = int(len(remaining) * ga_config.crisis_day_usage)
        for day in rng.sample(remaining, count):
            days[day] = crisis_assignment(context, ga_config, rng)


def random_genome(context: PlanningContext, ga_config: GeneticConfig, rng: random.Random) -> Genome:
    """
    Build one random genome.

    Args:
        context: Precomputed run data
        ga_config: Generation distributions and crisis parameters
        rng: Seeded random generator (the only source of randomness)

    Returns:
        Genome with manual constraints applied
    """
    days: Dict[int, DayAssignment] = dict(context.forced_shifts)

    if use_crisis_mode(context, ga_config, rng):
        _fill_crisis_windows(days, context, ga_config, rng)

    probability = work_probability(context, ga_config, rng)
    for day in context.free_days:
        if day in days:
            continue
        if rng.random() < probability:
            days[day] = normal_assignment(context, ga_config, rng)
        else:
            days[day] = REST_DAY

    return tuple(days[day] for day in range(MIN_DAY, MAX_DAY + 1))


def initialize_population(
    context: PlanningContext,
    ga_config: GeneticConfig,
    rng: random.Random,
) -> List[Individual]:
    """Generate population_size independent random individuals (unevaluated)."""
    size = context.config.population_size
    population = [Individual(random_genome(context, ga_config, rng)) for _ in range(size)]
    logger.debug(f"Initial population generated: {size} individuals")
    return population
