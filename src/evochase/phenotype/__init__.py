"""
evochase Phenotype Package

This package expresses genomes as executable neural networks. Every genome of a
run is decoded into a network of the same fixed topology; the decoded network
maps the sensory inputs of a player to its control outputs.

Modules:
    network:    Neuron and Network classes
    individual: A player joining a genome, its network and its round lifecycle

Exported Classes:
    Individual: A genome, its decoded network and whether it is still alive
    Network:    Fixed-topology feedforward network decoded from a weight vector
    Neuron:     A unit of the network
"""

from evochase.phenotype.individual import Individual
from evochase.phenotype.network    import Network, Neuron

__all__ = ['Individual',
           'Network',
           'Neuron']
