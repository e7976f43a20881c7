"""
evochase Genotype Package

This package implements the genetic encoding used by the genetic algorithm.
A genome is a flat, fixed-length vector of network weights; its layout is the
contract between the genotype and the fixed-topology network built from it.

Modules:
    genome: Genome class

Exported Classes:
    Genome: Weight vector plus evaluation/fitness bookkeeping
"""

from evochase.genotype.genome import Genome

__all__ = ['Genome']
