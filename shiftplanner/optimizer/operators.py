"""Genetic operators: selection, crossover, mutation, elitism.

Operators never modify a genome in place; each returns a new tuple. All
randomness comes from the injected random.Random.
"""

import random
from typing import List, Sequence

from ..config import MIN_DAY
from .config import GeneticConfig
from .initialization import normal_assignment, weighted_choice
from .precompute import PlanningContext
from .types import REST_DAY, DayAssignment, Genome, Individual


def tournament_selection(
    population: Sequence[Individual],
    tournament_size: int,
    rng: random.Random,
) -> Individual:
    """Select an individual using tournament selection.

    Samples tournament_size distinct individuals and returns the one with the
    lowest fitness; ties go to the first sampled.
    """
    size = max(1, min(tournament_size, len(population)))
    tournament = rng.sample(list(population), size)
    return min(tournament, key=lambda ind: ind.fitness)


def uniform_crossover(
    parent1: Individual,
    parent2: Individual,
    crossover_rate: float,
    rng: random.Random,
) -> Genome:
    """Uniform crossover: each day comes from either parent with equal odds.

    Per-day mixing keeps the spatial structure (gaps, clusters) of both parents
    better than cut points. With probability 1 - crossover_rate the first
    parent's genome is returned unchanged.
    """
    if rng.random() >= crossover_rate:
        return parent1.genome
    return tuple(
        a if rng.random() < 0.5 else b
        for a, b in zip(parent1.genome, parent2.genome)
    )


def _mutate_worked_day(
    shifts: DayAssignment,
    context: PlanningContext,
    ga_config: GeneticConfig,
    rng: random.Random,
) -> DayAssignment:
    action = weighted_choice(rng, ga_config.mutation_weights)
    if action == "remove":
        if len(shifts) > 1:
            drop = rng.randrange(len(shifts))
            return shifts[:drop] + shifts[drop + 1:]
        return REST_DAY
    tier = action[len("to_"):]
    return (context.catalog.resolve(tier),)


def mutate(
    genome: Genome,
    context: PlanningContext,
    ga_config: GeneticConfig,
    rng: random.Random,
) -> Genome:
    """Per-day shift mutation.

    Each free day mutates with probability mutation_rate:
    - worked day: remove a shift, or replace with a small/medium/large shift
      (weights from mutation_weights)
    - rest day: gains a normal-mode shift with probability add_shift_probability
    """
    days = list(genome)
    for index, shifts in enumerate(days):
        day = index + MIN_DAY
        if day in context.forced_shifts:
            continue
        if rng.random() >= ga_config.mutation_rate:
            continue
        if shifts:
            days[index] = _mutate_worked_day(shifts, context, ga_config, rng)
        elif rng.random() < ga_config.add_shift_probability:
            days[index] = normal_assignment(context, ga_config, rng)
    return tuple(days)


def _is_well_spaced(days: List[DayAssignment], index: int) -> bool:
    left = index > 0 and bool(days[index - 1])
    right = index < len(days) - 1 and bool(days[index + 1])
    return not (left or right)


def spacing_mutation(
    genome: Genome,
    context: PlanningContext,
    ga_config: GeneticConfig,
    rng: random.Random,
) -> Genome:
    """Day-level mutation aimed at the spacing penalties.

    A worked day hit with probability mutation_rate is usually kept when it has
    no adjacent work days; otherwise it either spreads to an adjacent rest day
    (add_adjacent_probability) or is cleared (remove_work_day_probability).
    """
    days = list(genome)
    for index in range(len(days)):
        day = index + MIN_DAY
        if not days[index] or day in context.forced_shifts:
            continue
        if rng.random() >= ga_config.mutation_rate:
            continue
        if _is_well_spaced(days, index) and rng.random() < ga_config.keep_well_spaced_probability:
            continue

        roll = rng.random()
        if roll < ga_config.add_adjacent_probability:
            neighbours = [
                i for i in (index - 1, index + 1)
                if 0 <= i < len(days)
                and not days[i]
                and (i + MIN_DAY) not in context.forced_shifts
            ]
            if neighbours:
                days[rng.choice(neighbours)] = normal_assignment(context, ga_config, rng)
        elif roll < ga_config.add_adjacent_probability + ga_config.remove_work_day_probability:
            days[index] = REST_DAY
    return tuple(days)


def enforce_constraints(genome: Genome, context: PlanningContext) -> Genome:
    """Re-apply forced days (returns the same tuple when nothing changes)."""
    if not context.forced_shifts:
        return genome
    changed = False
    days = list(genome)
    for day, shifts in context.forced_shifts.items():
        if days[day - MIN_DAY] != shifts:
            days[day - MIN_DAY] = shifts
            changed = True
    return tuple(days) if changed else genome


def select_elites(ranked: Sequence[Individual], count: int) -> List[Individual]:
    """Copies (with cached fitness) of the first count individuals of a ranked population."""
    return [individual.copy() for individual in ranked[:count]]


def breed_child(
    population: Sequence[Individual],
    context: PlanningContext,
    ga_config: GeneticConfig,
    rng: random.Random,
) -> Individual:
    """Selection + crossover + mutation + constraint enforcement -> unevaluated child."""
    parent1 = tournament_selection(population, ga_config.tournament_size, rng)
    parent2 = tournament_selection(population, ga_config.tournament_size, rng)
    genome = uniform_crossover(parent1, parent2, ga_config.crossover_rate, rng)
    genome = mutate(genome, context, ga_config, rng)
    genome = spacing_mutation(genome, context, ga_config, rng)
    return Individual(enforce_constraints(genome, context))
