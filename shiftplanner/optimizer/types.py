"""Type definitions for the genetic algorithm.

A genome is a tuple with one entry per day of the horizon; each entry is a
tuple of shift names worked that day (empty tuple = rest day). Genomes are
never modified in place: operators always build new tuples.
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

DayAssignment = Tuple[str, ...]
Genome = Tuple[DayAssignment, ...]

REST_DAY: DayAssignment = ()


def make_genome(days: Sequence[Sequence[str]]) -> Genome:
    """Build a genome from any nested sequence of shift names."""
    return tuple(tuple(day) for day in days)


@dataclass(frozen=True)
class ScheduleSummary:
    """Figures of a decoded schedule that reporting needs without re-decoding."""

    final_balance: float
    min_balance: float
    total_earnings: float
    work_days: int
    violations: int


class Individual:
    """Represents a solution candidate (chromosome).

    Attributes:
        genome: Per-day shift assignment (immutable)
        fitness: Fitness score (lower is better), inf until evaluated
        summary: Decoded figures cached alongside the fitness
    """

    __slots__ = ("genome", "fitness", "summary")

    def __init__(self, genome: Genome):
        self.genome: Genome = genome
        self.fitness: float = float("inf")
        self.summary: Optional[ScheduleSummary] = None

    @property
    def evaluated(self) -> bool:
        return self.summary is not None

    def copy(self) -> "Individual":
        """Copy with cached fitness (the genome itself is shared, it is immutable)."""
        new_ind = Individual(self.genome)
        new_ind.fitness = self.fitness
        new_ind.summary = self.summary
        return new_ind

    def __repr__(self) -> str:
        work_days = sum(1 for day in self.genome if day)
        return f"Individual(work_days={work_days}, fit={self.fitness:.2f})"


class Population:
    """Fixed-capacity double buffer of individuals.

    The current generation is read-only while the next one is staged; swap()
    makes the staged generation current and recycles the old buffer.
    """

    def __init__(self, capacity: int, individuals: Optional[List[Individual]] = None):
        self.capacity = capacity
        self._current: List[Individual] = list(individuals or [])
        self._next: List[Individual] = []

    def __len__(self) -> int:
        return len(self._current)

    def __iter__(self) -> Iterator[Individual]:
        return iter(self._current)

    def __getitem__(self, index: int) -> Individual:
        return self._current[index]

    @property
    def individuals(self) -> List[Individual]:
        return self._current

    @property
    def staged_count(self) -> int:
        return len(self._next)

    def is_full(self) -> bool:
        return len(self._next) >= self.capacity

    def stage(self, individual: Individual) -> None:
        """Add an individual to the next generation."""
        if self.is_full():
            raise ValueError("Next generation is already full")
        self._next.append(individual)

    def swap(self) -> None:
        """Promote the staged generation."""
        if len(self._next) != self.capacity:
            raise ValueError(
                f"Next generation has {len(self._next)} individuals, expected {self.capacity}"
            )
        self._current, self._next = self._next, self._current
        self._next.clear()

    def sort(self) -> None:
        """Sort the current generation by fitness (lower is better, stable)."""
        self._current.sort(key=lambda ind: ind.fitness)

    def best(self) -> Individual:
        return min(self._current, key=lambda ind: ind.fitness)
