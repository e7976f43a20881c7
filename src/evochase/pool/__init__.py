"""
evochase Pool Package

This package implements the genetic algorithm: the genomes of the two competing
roles and the generational cycle (fitness, sorting, selection, recombination,
mutation, reshuffle) that produces each new generation from the scored one.

Modules:
    operators:         The steps of the generational cycle, as plain functions
    population:        Role enumeration and Population class
    genetic_algorithm: GeneticAlgorithm class

Exported Classes:
    GeneticAlgorithm: Drives the runner and catcher populations through generations
    Population:       The genomes of one role
    Role:             The two competing roles
"""

from evochase.pool.population        import GenomeLoader, Population, Role
from evochase.pool.genetic_algorithm import GeneticAlgorithm

__all__ = ['GeneticAlgorithm',
           'GenomeLoader',
           'Population',
           'Role']
