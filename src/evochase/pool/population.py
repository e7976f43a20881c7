"""
evochase Population Module

This module implements the Population class, the genomes of one of the two
competing roles, together with the generational cycle that replaces them.

Classes:
    Role:       The two co-evolving roles (runners and catchers)
    Population: The genomes of one role and their evolution
"""

from enum   import Enum
from typing import Callable, Optional, TYPE_CHECKING

import numpy as np
from loguru import logger

from evochase.genotype import Genome
from evochase.pool     import operators

if TYPE_CHECKING:
    from evochase.run.config import Config

class Role(Enum):
    """The two competing roles. The value is the label used in file names and reports."""
    RUNNER  = 'Runner'
    CATCHER = 'Catcher'

# Optional source of persisted genomes: (role, slot index) -> Genome or None
GenomeLoader = Callable[[Role, int], Optional[Genome]]

class Population:
    """
    The genomes of one role.

    The population always holds 'size' genomes after initialization and after
    each call to 'spawn_next_generation' (as long as the previous generation
    held at least two genomes).

    Public Attributes:
        role:    The role of the players encoded by this population
        size:    The target number of genomes
        genomes: The genomes of the current generation

    Public Methods:
        initialize(weight_count, loader): Create the first generation
        calculate_fitness():              Normalize evaluations by the population mean
        sort():                           Order genomes by decreasing fitness
        spawn_next_generation():          Select, recombine, mutate and reshuffle
        best_genome:                      The genome with the highest fitness
        mean_evaluation:                  The mean evaluation of the generation
    """

    def __init__(self, role: Role, size: int, config: 'Config', rng: np.random.Generator):
        """
        Parameters:
            role:   the role of the players encoded by this population
            size:   the target number of genomes
            config: stores the genetic parameters
            rng:    the random generator shared by the run
        """
        if size < 0:
            raise ValueError(f"Population size must not be negative, got {size}")

        self.role   : Role                = role
        self.size   : int                 = size
        self.genomes: list[Genome]        = []
        self._config: 'Config'            = config
        self._rng   : np.random.Generator = rng

    def initialize(self, weight_count: int, loader: GenomeLoader | None = None) -> None:
        """
        Create the first generation. Slot 'i' is filled by 'loader(role, i)' when that
        returns a genome, and by a random genome otherwise.

        Parameters:
            weight_count: number of weights of every genome
            loader:       optional source of persisted genomes
        """
        self.genomes = []
        for index in range(self.size):
            genome = loader(self.role, index) if loader is not None else None
            if genome is None:
                genome = Genome.random(weight_count, self._config.init_range, self._rng)
            elif genome.weights_count != weight_count:
                logger.warning("{role} genome {i} has {n} weights instead of {w}, using a random one",
                               role=self.role.value, i=index, n=genome.weights_count, w=weight_count)
                genome = Genome.random(weight_count, self._config.init_range, self._rng)
            self.genomes.append(genome)

    def calculate_fitness(self) -> None:
        operators.calculate_fitness(self.genomes)

    def sort(self) -> None:
        operators.sort_population(self.genomes)

    @property
    def best_genome(self) -> Genome | None:
        """The genome with the highest fitness (the first one, once sorted)."""
        if not self.genomes:
            return None
        return max(self.genomes, key=lambda genome: genome.fitness)

    @property
    def mean_evaluation(self) -> float:
        if not self.genomes:
            return 0.0
        return sum(genome.evaluation for genome in self.genomes) / len(self.genomes)

    def spawn_next_generation(self) -> list[Genome]:
        """
        Replace the current generation, whose fitness has been calculated and
        which has been sorted, by the next one.

        Step 1: Selection     - elitist or fitness proportional
        Step 2: Recombination - elitist or random combination, refilling to 'size'
        Step 3: Mutation      - all genomes but the first two
        Step 4: Reshuffle     - random order, independent of fitness rank

        Returns:
            the genomes of the new generation
        """
        config = self._config

        if config.elitist:
            parents        = operators.elitist_selection(self.genomes)
            new_population = operators.elitist_combination(parents, self.size, config.cross_prob, self._rng)
        else:
            parents        = operators.fitness_proportional_selection(self.genomes, self.size, self._rng)
            new_population = operators.random_combination(parents, self.size, config.cross_prob, self._rng)
        logger.debug("{role}: {p} parents selected, {n} genomes combined",
                     role=self.role.value, p=len(parents), n=len(new_population))

        # Recombination may return the parent list itself; work on a copy
        new_population = list(new_population)
        operators.mutate_except_best_two(new_population,
                                         config.mutation_amount,
                                         config.mutation_prob,
                                         config.mutation_degree,
                                         self._rng)
        operators.shuffle_order(new_population, self._rng)

        self.genomes = new_population
        return self.genomes

    def __len__(self):
        return len(self.genomes)

    def __str__(self):
        return f"{self.role.value} population:\n" + '\n'.join(str(genome) for genome in self.genomes)
