"""
evochase Genetic Algorithm Module

This module implements the GeneticAlgorithm class, which drives the two
co-evolving populations (runners and catchers) from one generation to the next.

The algorithm does not know how genomes are evaluated. Once per generation it
hands both populations to an evaluation bridge, which plays a round of the game
and reports a score for every genome through 'report_fitness'. Then the
algorithm computes fitness, sorts, selects, recombines, mutates and reshuffles
each population independently.

Classes:
    GeneticAlgorithm: Generational cycle of the runner and catcher populations
"""

import math
from typing import Callable, Optional, TYPE_CHECKING

import numpy as np
from loguru import logger

from evochase.genotype        import Genome
from evochase.pool.population import GenomeLoader, Population, Role

if TYPE_CHECKING:
    from evochase.run.config import Config

# Evaluation bridge: receives the runner and the catcher genomes of a generation
GenerationReadyCallback = Callable[[list[Genome], list[Genome]], None]

# Called with each population once its fitness has been calculated and it has been sorted
FitnessCalculatedCallback = Callable[[Population], None]

class GeneticAlgorithm:
    """
    The genetic algorithm for the two competing roles.

    Lifecycle of one generation:
        1. the evaluation bridge receives the genomes ('start' / 'run_generation')
        2. the bridge reports a score for every genome ('report_fitness')
        3. 'evaluation_finished' computes fitness and sorts both populations,
           hands them to the statistics hook, and spawns the next generation

    Public Attributes:
        runners:          The runner population
        catchers:         The catcher population
        generation_count: Serial number of the current generation (starts at 1)

    Public Methods:
        start(on_generation_ready):                  Hand the current genomes to the bridge
        report_fitness(genome, score):               Record the score of a genome
        evaluation_finished(on_fitness_calculated):  Spawn the next generation
        run_generation(on_generation_ready, ...):    Both of the above, for synchronous bridges
    """

    def __init__(self,
                 config      : 'Config',
                 weight_count: int,
                 rng         : np.random.Generator,
                 loader      : GenomeLoader | None = None):
        """
        Parameters:
            config:       stores the genetic parameters and population sizes
            weight_count: number of weights of every genome (see 'Network.required_weight_count')
            rng:          the random generator used for every random decision
            loader:       optional source of persisted genomes for the first generation
        """
        self.runners : Population = Population(Role.RUNNER , config.runners_population_size , config, rng)
        self.catchers: Population = Population(Role.CATCHER, config.catchers_population_size, config, rng)
        self.runners.initialize(weight_count, loader)
        self.catchers.initialize(weight_count, loader)

        self.generation_count: int = 1

        # ids of the genomes whose score has been reported in this generation
        self._reported: set[int] = set()

    @property
    def populations(self) -> tuple[Population, Population]:
        return self.runners, self.catchers

    def start(self, on_generation_ready: GenerationReadyCallback) -> None:
        """Hand the genomes of the current generation to the evaluation bridge."""
        self._reported = set()
        on_generation_ready(self.runners.genomes, self.catchers.genomes)

    def report_fitness(self, genome: Genome, score: float) -> None:
        """
        Record the score a genome achieved in the current round.

        Raises:
            ValueError: if the score is not finite, or the genome is not
                        part of the current generation
        """
        if not math.isfinite(score):
            raise ValueError(f"Score must be finite, got {score}")
        if not any(genome is g for population in self.populations for g in population.genomes):
            raise ValueError("Genome is not part of the current generation")

        genome.evaluation = float(score)
        self._reported.add(id(genome))

    def _missing_reports(self) -> int:
        return sum(1 for population in self.populations
                     for genome in population.genomes if id(genome) not in self._reported)

    def evaluation_finished(self,
                            on_fitness_calculated: Optional[FitnessCalculatedCallback] = None
                            ) -> tuple[list[Genome], list[Genome]]:
        """
        Spawn the next generation once every genome has been scored.

        Step 1: Fitness computation and sorting of both populations
        Step 2: 'on_fitness_calculated' receives each sorted population (statistics, saving)
        Step 3: Selection, recombination, mutation and reshuffle of both populations

        Returns:
            the runner and catcher genomes of the new generation

        Raises:
            RuntimeError: if some genomes have not been scored
        """
        missing = self._missing_reports()
        if missing:
            raise RuntimeError(f"{missing} genome(s) of generation {self.generation_count} were not scored")

        for population in self.populations:
            population.calculate_fitness()
            population.sort()
        mean_runners, mean_catchers = self.runners.mean_evaluation, self.catchers.mean_evaluation

        if on_fitness_calculated is not None:
            for population in self.populations:
                on_fitness_calculated(population)

        for population in self.populations:
            population.spawn_next_generation()

        logger.info("Generation {g} done: mean evaluation runners={r:.3f}, catchers={c:.3f}",
                    g=self.generation_count,
                    r=mean_runners, c=mean_catchers)

        self.generation_count += 1
        self._reported = set()
        return self.runners.genomes, self.catchers.genomes

    def run_generation(self,
                       on_generation_ready  : GenerationReadyCallback,
                       on_fitness_calculated: Optional[FitnessCalculatedCallback] = None
                       ) -> tuple[list[Genome], list[Genome]]:
        """
        Evaluate the current generation through a synchronous bridge, then spawn the next one.
        The bridge must have called 'report_fitness' for every genome when it returns.
        """
        self.start(on_generation_ready)
        return self.evaluation_finished(on_fitness_calculated)

    def __str__(self):
        return f"Generation {self.generation_count}\n{self.runners}\n{self.catchers}"
