"""
evochase Trial Module

This module defines the abstract base class for a training run: the runner and
catcher populations evolve through generations, each generation being evaluated
by a round of the game implemented by a subclass.

A subclass is the evaluation bridge: it receives the players of both roles as
'Individual' objects, plays a round, and makes every player 'die' with the score
it achieved. Each death reports the score to the genetic algorithm.
"""

from abc import ABC, abstractmethod

import numpy as np
from loguru import logger

from evochase.genotype    import Genome
from evochase.phenotype   import Individual, Network
from evochase.pool        import GeneticAlgorithm, Population, Role
from evochase.run.archive import GenomeArchive
from evochase.run.config  import Config

class Trial(ABC):
    """
    Abstract base class for implementing a training run.

    Subclasses must implement:
    - _play_round(runners, catchers): Play a round; every Individual must 'die' with its score
    - _report_progress(): Display progress after each generation
    - _final_report(): Display final results

    Subclasses can override:
    - _reset(): Reset trial-specific state (call super()._reset())
    - _terminate(): Custom termination logic (default: generation limit)

    Public Attributes:
        genetic_algorithm: The GeneticAlgorithm of the current run (None before 'run')
        champions:         Best genome of each role in the last evaluated generation
        safe_runners:      Runners that reached safety in the current round; set by
                           '_play_round' and written to the run statistics

    Public Methods:
        run(): Execute a complete training run
    """

    def __init__(self, config: Config, suppress_output: bool = False, rng: np.random.Generator | None = None):
        """
        Initialize the trial.

        Parameters:
            config:          Configuration parameters
            suppress_output: If True, suppress progress and final reports
            rng:             Random generator of the run; by default one is
                             created from the configured seed when the run starts
        """
        self._config         : Config                     = config
        self._suppress_output: bool                       = suppress_output
        self._given_rng      : np.random.Generator | None = rng
        self._rng            : np.random.Generator | None = None
        self._archive        : GenomeArchive | None       = None
        self.genetic_algorithm: GeneticAlgorithm | None   = None

        # best and mean evaluation of each role in the last evaluated generation
        self._last_results: dict[str, tuple[float, float]] = {}
        self.champions    : dict[Role, Genome]               = {}
        self.safe_runners : int                              = 0

    @property
    def generation_count(self) -> int:
        """Serial number of the generation currently being evaluated."""
        return self.genetic_algorithm.generation_count if self.genetic_algorithm else 0

    def run(self):
        """
        Run the trial.

        Resets the trial state, creates the initial populations (loading seed
        genomes when configured), then evaluates and evolves them until the
        terminate condition is met.
        """
        self._reset()

        weight_count = Network.required_weight_count(self._config.structure)
        self.genetic_algorithm = GeneticAlgorithm(self._config, weight_count, self._rng, loader=self._archive.load)

        if self._config.save:
            self._archive.start_statistics()

        # Evolution loop
        while not self._terminate():
            self.genetic_algorithm.run_generation(self._evaluate_generation, self._on_fitness_calculated)

            # Display progress after each generation
            if not self._suppress_output:
                self._report_progress()

        # Produce final report
        if not self._suppress_output:
            self._final_report()

    def _reset(self):
        """
        Reset the trial state before starting a new run.

        Subclasses overriding this should call super()._reset().
        """
        self._rng     = self._given_rng if self._given_rng is not None else np.random.default_rng(self._config.seed)
        self._archive = GenomeArchive(self._config)
        self.genetic_algorithm = None
        self._last_results = {}
        self.champions     = {}
        self.safe_runners  = 0

    def _evaluate_generation(self, runner_genomes: list[Genome], catcher_genomes: list[Genome]):
        """
        The evaluation bridge: wrap genomes into players, play a round, report every score.
        """
        def report(individual: Individual):
            self.genetic_algorithm.report_fitness(individual.genome, individual.genome.evaluation)

        structure = self._config.structure
        runners   = [Individual(genome, structure, on_death=report) for genome in runner_genomes]
        catchers  = [Individual(genome, structure, on_death=report) for genome in catcher_genomes]
        for individual in runners + catchers:
            individual.reset()
        self.safe_runners = 0

        self._play_round(runners, catchers)

        # Players still alive when the round ends die with their current score
        survivors = [individual for individual in runners + catchers if individual.is_alive]
        if survivors:
            logger.debug("{n} players still alive at the end of the round", n=len(survivors))
        for individual in survivors:
            individual.die(individual.genome.evaluation)

    def _on_fitness_calculated(self, population: Population):
        """
        Called with each sorted population of the generation just evaluated:
        record its results and write statistics and snapshots when configured.
        """
        best = population.genomes[0].evaluation if population.genomes else 0.0
        self._last_results[population.role.value] = (best, population.mean_evaluation)
        if population.genomes:
            champion = population.genomes[0].clone()
            champion.evaluation = population.genomes[0].evaluation
            champion.fitness    = population.genomes[0].fitness
            self.champions[population.role] = champion

        if self._config.save:
            generation = self.genetic_algorithm.generation_count
            self._archive.add_statistics(population, generation, self.safe_runners)
            if self._config.save_count > 0:
                self._archive.save_best(population, generation)

    @abstractmethod
    def _play_round(self, runners: list[Individual], catchers: list[Individual]):
        """
        Play one round of the game.

        Each Individual is alive when the round starts. When a player stops
        participating, call 'individual.die(score)'; the score becomes the
        evaluation of its genome. Higher scores mean better players.

        Parameters:
            runners:  players of the runner role, in starting-slot order
            catchers: players of the catcher role, in starting-slot order
        """
        pass

    @abstractmethod
    def _report_progress(self):
        """
        Report trial progress after each generation.

        This method is suppressed by setting 'self._suppress_output' to 'True'.
        """
        pass

    @abstractmethod
    def _final_report(self):
        """
        Produce final report at the end of the trial.

        This method is suppressed by setting 'self._suppress_output' to 'True'.
        """
        pass

    def _terminate(self) -> bool:
        """
        Determine whether the trial should terminate.

        This default implementation stops the trial once the configured number
        of generations has been evaluated (never, if that number is 0 or None).

        Returns:
            bool: True if the trial should stop, False otherwise
        """
        limit = self._config.max_number_generations
        if not limit:
            return False
        return self.genetic_algorithm.generation_count > limit
