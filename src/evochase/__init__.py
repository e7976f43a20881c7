"""
evochase - co-evolution of pursuit game players with a genetic algorithm.

This package trains two competing populations of players (runners and catchers)
of an asymmetric pursuit game. Each player is driven by a fixed-topology
feedforward neural network whose weights are encoded in a flat genome; a
generational genetic algorithm evolves the genomes of both roles against each
other.

Main components:
- genotype: Genetic encoding (weight vector genomes, persistence format)
- phenotype: Neural network expression (fixed-topology networks, players)
- pool: Genetic algorithm (selection, recombination, mutation)
- run: Configuration, disk storage and the training run framework
- activations: Activation function for neural networks

Example:
    >>> from evochase import Config, Trial
    >>> config = Config("config.ini")
    >>> class MyTrial(Trial):
    ...     def _play_round(self, runners, catchers):
    ...         # Play the game; every player must die with its score
    ...         pass
    >>> trial = MyTrial(config)
    >>> trial.run()
"""

__version__ = "0.1.0"

# Import main classes for convenient access
from evochase.run.config import Config
from evochase.run.trial import Trial
from evochase.run.archive import GenomeArchive
from evochase.genotype.genome import Genome
from evochase.phenotype.network import Network
from evochase.phenotype.individual import Individual
from evochase.pool.population import Population, Role
from evochase.pool.genetic_algorithm import GeneticAlgorithm
from evochase.errors import GenomeFormatError, ShapeMismatchError

__all__ = [
    "Config",
    "Trial",
    "GenomeArchive",
    "Genome",
    "Network",
    "Individual",
    "Population",
    "Role",
    "GeneticAlgorithm",
    "GenomeFormatError",
    "ShapeMismatchError",
]
