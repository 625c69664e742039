"""Genetic algorithm shift optimizer.

Modules:
- config: GA hyperparameters, generation distributions, fitness weights
- types: Genome, Individual, Population
- precompute: per-run PlanningContext
- decoder: genome -> day-by-day balance schedule
- fitness: schedule cost (lower is better)
- initialization: random genomes (normal and crisis modes)
- operators: selection, crossover, mutation, elitism
- engine: evolution loop and run lifecycle
- channel: background worker and notification sinks
"""

from .config import (
    DEFAULT_WEIGHTS,
    FAST_CONFIG,
    PRESETS,
    THOROUGH_CONFIG,
    get_preset,
    FitnessWeights,
    GeneticConfig,
)
from .types import Genome, Individual, Population, make_genome
from .precompute import PlanningContext, build_context, default_shift_types
from .decoder import decode, decode_schedule
from .fitness import evaluate_fitness, fitness_breakdown
from .initialization import initialize_population, random_genome
from .engine import EngineState, OptimizationEngine
from .channel import OptimizationWorker, QueueSink

__all__ = [
    "DEFAULT_WEIGHTS",
    "FAST_CONFIG",
    "THOROUGH_CONFIG",
    "PRESETS",
    "get_preset",
    "FitnessWeights",
    "GeneticConfig",
    "Genome",
    "Individual",
    "Population",
    "make_genome",
    "PlanningContext",
    "build_context",
    "default_shift_types",
    "decode",
    "decode_schedule",
    "evaluate_fitness",
    "fitness_breakdown",
    "initialize_population",
    "random_genome",
    "EngineState",
    "OptimizationEngine",
    "OptimizationWorker",
    "QueueSink",
]
