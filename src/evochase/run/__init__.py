"""
evochase Run Package

This package drives complete training runs: configuration, disk storage of
genomes and statistics, and the abstract Trial that connects the genetic
algorithm to a game through the evaluation bridge.

Modules:
    config:  Config class (INI configuration)
    archive: GenomeArchive class
    trial:   Trial abstract base class

Exported Classes:
    Config:        Configuration parameters of a run
    GenomeArchive: Loads seed genomes, saves best genomes and run statistics
    Trial:         Abstract training run
"""

from evochase.run.config  import Config
from evochase.run.archive import GenomeArchive
from evochase.run.trial   import Trial

__all__ = ['Config',
           'GenomeArchive',
           'Trial']
