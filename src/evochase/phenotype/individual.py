"""
evochase Individual Module

This module implements the Individual class, a player taking part in a
simulation round: the genome that encodes it, the network decoded from that
genome, and whether it is still participating in the round.

Classes:
    Individual: A genome, its decoded network and its round lifecycle
"""

from itertools import count
from typing    import Callable, Optional, Sequence

from evochase.genotype          import Genome
from evochase.phenotype.network import Network

class Individual:
    """
    A player powered by a decoded network.

    An individual lives for one round. 'reset' starts its life, 'die' ends it
    and records the score it achieved as the evaluation of its genome. The
    optional 'on_death' callback is invoked exactly once per life, when the
    individual dies; this is how the evaluation bridge reports scores back to
    the genetic algorithm.

    Public Attributes:
        ID: Globally unique identifier for this individual

    Public Properties:
        genome:   The genome encoding this individual
        network:  The network decoded from the genome
        is_alive: Whether the individual still participates in the round

    Public Methods:
        reset():       Start a new life (zero evaluation and fitness)
        die(score):    End the life with the given score
        act(inputs):   Run the network on sensory inputs
    """

    _id_generator = count(0)

    def __init__(self,
                 genome   : Genome,
                 structure: Sequence[int],
                 on_death : Optional[Callable[['Individual'], None]] = None):
        """
        Parameters:
            genome:    the genome encoding the individual
            structure: the network topology shared by all players of the run
            on_death:  called with the individual when it dies

        Raises:
            ShapeMismatchError: if the genome length does not match the topology
        """
        self.ID       : int      = next(Individual._id_generator)
        self._genome  : Genome   = genome
        self._network : Network  = Network.decode(structure, genome.weights)
        self._on_death           = on_death
        self._is_alive: bool     = False

    @property
    def genome(self) -> Genome:
        return self._genome

    @property
    def network(self) -> Network:
        return self._network

    @property
    def is_alive(self) -> bool:
        return self._is_alive

    def reset(self) -> None:
        """Start a new life."""
        self._genome.reset()
        self._is_alive = True

    def die(self, score: float) -> None:
        """
        End the life of this individual, storing 'score' as the genome's evaluation.
        Dying when already dead has no effect.
        """
        if not self._is_alive:
            return
        self._genome.evaluation = float(score)
        self._is_alive = False
        if self._on_death is not None:
            self._on_death(self)

    def act(self, inputs: Sequence[float]) -> list[float]:
        """Map sensory inputs to control outputs."""
        return self._network.forward_pass(inputs)

    def __str__(self):
        state = 'alive' if self._is_alive else 'dead'
        return f"ID={self.ID}, {state}, evaluation={self._genome.evaluation:.4f}"

    def __repr__(self):
        return f"Individual(genome={repr(self._genome)}, structure={list(self._network.structure)})"
