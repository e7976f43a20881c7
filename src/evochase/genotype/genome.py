"""
Genome Module

This module implements the Genome class, the genetic encoding of one player.
A genome is a fixed-length vector of real-valued weights (the flattened weights
of a fixed-topology network, see 'evochase.phenotype.network') plus the two
numbers the genetic algorithm keeps about it: the raw evaluation produced by a
simulation round and the fitness derived from it.

Classes:
    Genome: Weight vector with evaluation/fitness bookkeeping
"""

import math
import re
from pathlib import Path
from typing  import Iterable

import numpy as np

from evochase.errors import GenomeFormatError, ShapeMismatchError

class Genome:
    """
    The genetic encoding of a single player.

    The weight vector has a fixed length, equal to the number of trainable weights
    of the network topology in use, and can only be modified in place. The order
    of the weights is the order in which 'Network' consumes them.

    Public Attributes:
        weights:    Weight vector (numpy array of float64)
        evaluation: Raw score assigned by the simulation round (0 at the start of each life)
        fitness:    Evaluation normalized by the population mean

    Public Methods:
        random(weight_count, init_range, rng): Create a genome with uniform random weights
        load(path):                            Create a genome from a persisted record
        deserialize(record):                   Create a genome from a text record
        set_weight(index, value):              Replace one weight
        randomize(init_range, rng):            Assign uniform random values to all weights
        export_vector():                       Return a copy of the weight vector
        serialize():                           Encode the weights as a text record
        save(path):                            Write the text record to a file
        clone():                               Copy the weights into a new genome
        crossover(other, cross_prob, rng):     Uniform crossover producing two children
        mutate(mutation_prob, degree, rng):    Perturb weights by uniform random deltas
        reset():                               Zero the evaluation and fitness
    """

    # Separates the weights in a persisted record
    SPLITTER = ';'

    # A decimal number with an optional exponent, as written by 'repr'
    TOKEN_PATTERN = re.compile(r'\s*[-+]?(\d+(\.\d*)?|\.\d+)([eE][-+]?\d+)?\s*')

    def __init__(self, weights: Iterable[float]):
        """
        Parameters:
            weights: the initial weight values; the genome keeps its own copy
        """
        self.weights   : np.ndarray = np.array(weights, dtype=float).reshape(-1)
        self.evaluation: float      = 0.0
        self.fitness   : float      = 0.0

    @classmethod
    def random(cls, weight_count: int, init_range: float, rng: np.random.Generator) -> 'Genome':
        """
        Create a genome whose weights are drawn uniformly from [-init_range/2, +init_range/2].
        """
        genome = cls(np.zeros(weight_count))
        genome.randomize(init_range, rng)
        return genome

    @property
    def weights_count(self) -> int:
        """Number of weights in the genome."""
        return len(self.weights)

    def set_weight(self, index: int, value: float) -> None:
        """
        Replace the weight at position 'index'.

        Raises:
            IndexError: if index is outside [0, weights_count)
            ValueError: if value is not a finite number
        """
        if not 0 <= index < self.weights_count:
            raise IndexError(f"Weight index {index} out of range [0, {self.weights_count})")
        if not math.isfinite(value):
            raise ValueError(f"Weight value must be finite, got {value}")
        self.weights[index] = value

    def randomize(self, init_range: float, rng: np.random.Generator) -> None:
        """
        Assign every weight an independent uniform value in [-init_range/2, +init_range/2].

        Raises:
            ValueError: if init_range is not positive
        """
        if not init_range > 0:
            raise ValueError(f"Range should be positive, got {init_range}")
        self.weights[:] = rng.uniform(-init_range / 2, init_range / 2, self.weights_count)

    def export_vector(self) -> list[float]:
        """Return a copy of the weight vector; mutating it does not affect the genome."""
        return self.weights.tolist()

    def serialize(self) -> str:
        """
        Encode the weights as decimal tokens joined by ';' (no trailing delimiter).
        'repr' is locale independent and round-trips a float exactly.
        """
        return self.SPLITTER.join(repr(float(w)) for w in self.weights)

    @classmethod
    def deserialize(cls, record: str) -> 'Genome':
        """
        Create a genome from a record produced by 'serialize'.

        Raises:
            GenomeFormatError: if any token is not a finite decimal number
        """
        weights = []
        for position, token in enumerate(record.strip().split(cls.SPLITTER)):
            if not cls.TOKEN_PATTERN.fullmatch(token):
                raise GenomeFormatError(f"Token {position} is not a number: {token!r}")
            value = float(token)
            if not math.isfinite(value):
                raise GenomeFormatError(f"Token {position} is not finite: {token!r}")
            weights.append(value)
        return cls(weights)

    def save(self, path: str | Path) -> None:
        """Write the serialized genome to 'path'."""
        Path(path).write_text(self.serialize(), encoding='utf-8')

    @classmethod
    def load(cls, path: str | Path) -> 'Genome':
        """
        Read a genome written by 'save'.

        Raises:
            FileNotFoundError: if the file does not exist
            GenomeFormatError: if the file content is corrupt
        """
        try:
            record = Path(path).read_text(encoding='utf-8')
        except UnicodeDecodeError as e:
            raise GenomeFormatError(f"{path} is not a text record: {e.reason}") from None
        return cls.deserialize(record)

    def clone(self) -> 'Genome':
        """Create a new genome with the same weights and fresh bookkeeping."""
        return Genome(self.weights)

    def crossover(self,
                  other     : 'Genome',
                  cross_prob: float,
                  rng       : np.random.Generator) -> tuple['Genome', 'Genome']:
        """
        Uniform per-weight crossover.

        For each weight index, with probability 'cross_prob' the two children swap
        the parents' values; otherwise each child inherits its own parent's value.
        The first child descends from 'self', the second from 'other'.

        Raises:
            ShapeMismatchError: if the parents have different lengths
        """
        if other.weights_count != self.weights_count:
            raise ShapeMismatchError(f"Cannot cross genomes of length {self.weights_count} "
                                     f"and {other.weights_count}")

        swap   = rng.random(self.weights_count) < cross_prob
        child1 = Genome(np.where(swap, other.weights, self.weights))
        child2 = Genome(np.where(swap, self.weights, other.weights))
        return child1, child2

    def mutate(self, mutation_prob: float, mutation_degree: float, rng: np.random.Generator) -> None:
        """
        Each weight, independently with probability 'mutation_prob', is perturbed
        by a uniform random delta in [-mutation_degree, +mutation_degree].
        """
        mutated = rng.random(self.weights_count) < mutation_prob
        deltas  = rng.uniform(-mutation_degree, mutation_degree, self.weights_count)
        self.weights[mutated] += deltas[mutated]

    def reset(self) -> None:
        """Zero the evaluation and fitness, at the start of an individual's life."""
        self.evaluation = 0.0
        self.fitness    = 0.0

    def __len__(self):
        return self.weights_count

    def __repr__(self):
        return (f"Genome(weights_count={self.weights_count}, "
                f"evaluation={self.evaluation:+.4f}, fitness={self.fitness:.4f})")

    def __str__(self):
        return f"[eval={self.evaluation:+.2f},fit={self.fitness:.2f}] " + \
               " ".join(f"{w:+.2f}" for w in self.weights)
