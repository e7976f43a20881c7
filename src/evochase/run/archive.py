"""
evochase Archive Module

This module implements the GenomeArchive class, which keeps everything a run
reads from or writes to disk: genomes loaded to seed the first generation,
snapshots of the best genomes of each generation, and the statistics file.

One genome per file, named 'gene_<Role>_<index>.txt', holding the weights
separated by ';' (see 'Genome.serialize').

Classes:
    GenomeArchive: Loads seed genomes, saves best genomes and run statistics
"""

from datetime import datetime
from pathlib  import Path

from loguru import logger

from evochase.errors     import GenomeFormatError
from evochase.genotype   import Genome
from evochase.pool       import Population, Role
from evochase.run.config import Config

class GenomeArchive:
    """
    Disk storage of a run.

    Public Properties:
        statistics_name: Base name of the statistics file and snapshot folder
        statistics_file: Path of the statistics file

    Public Methods:
        gene_file_name(role, index):           File name of a persisted genome
        load(role, index):                     Load a seed genome (usable as a 'GenomeLoader')
        start_statistics(description):         Write the statistics header
        add_statistics(population, generation, safe_runners): Append the result of a population
        save_best(population, generation):     Save the best genomes of a population
    """

    def __init__(self, config: Config, timestamp: datetime | None = None):
        """
        Parameters:
            config:    stores the persistence parameters
            timestamp: time stamp in the statistics name (default: now)
        """
        self._config = config
        timestamp    = timestamp or datetime.now()
        self._statistics_name = f"Simulation_{config.run_name}_{timestamp:%Y_%m_%d_%H-%M-%S}"

    @property
    def statistics_name(self) -> str:
        return self._statistics_name

    @property
    def statistics_file(self) -> Path:
        return Path(self._config.output_folder) / f"{self._statistics_name}.txt"

    @staticmethod
    def gene_file_name(role: Role, index: int) -> str:
        return f"gene_{role.value}_{index}.txt"

    def load(self, role: Role, index: int) -> Genome | None:
        """
        Load the genome of slot 'index' of a population from the load folder.

        Returns None (the slot then gets a random genome) if the slot is beyond
        'load_count', if the file does not exist, or if its content is corrupt.
        """
        if index >= self._config.load_count:
            return None

        path = Path(self._config.load_folder) / self.gene_file_name(role, index)
        if not path.is_file():
            return None

        try:
            genome = Genome.load(path)
        except GenomeFormatError as e:
            logger.warning("Ignoring corrupt genome file {path}: {err}", path=str(path), err=str(e))
            return None

        logger.debug("Loaded {path} ({n} weights)", path=str(path), n=genome.weights_count)
        return genome

    def start_statistics(self, description: dict[str, object] | None = None) -> None:
        """
        Create the statistics file with a header describing the run.

        Parameters:
            description: extra 'name: value' lines to add to the header
        """
        config = self._config
        header = {
            "Runner population size" : config.runners_population_size,
            "Catcher population size": config.catchers_population_size,
            "Network structure"      : ', '.join(str(size) for size in config.structure),
            "Preloaded"              : config.load_count,
            "Selection elitist"      : config.elitist,
            "Round time"             : config.round_time,
            "Time based scoring"     : config.time_based_scoring,
            "Bonus for teamwork"     : config.bonus_for_teamwork,
        }
        header.update(description or {})

        self.statistics_file.parent.mkdir(parents=True, exist_ok=True)
        lines = [f"{name}: {value}" for name, value in header.items()]
        self.statistics_file.write_text('\n'.join(lines) + '\n\n', encoding='utf-8')
        logger.info("Writing statistics to {path}", path=str(self.statistics_file))

    def add_statistics(self, population: Population, generation: int, safe_runners: int | None = None) -> None:
        """
        Append 'generation<TAB>best evaluation<TAB>role' for a sorted population.
        For the runner population, 'safe_runners' (when given) adds the line
        'generation Safe runners: <TAB>count'.
        """
        if not population.genomes:
            return
        with self.statistics_file.open('a', encoding='utf-8') as f:
            f.write(f"{generation}\t{population.genomes[0].evaluation}\t{population.role.value}\n")
            if population.role is Role.RUNNER and safe_runners is not None:
                f.write(f"{generation} Safe runners: \t{safe_runners}\n")

    def save_best(self, population: Population, generation: int) -> list[Path]:
        """
        Save the first 'save_count' genomes of a sorted population into
        '<output_folder>/<statistics_name>/Generation_<generation>/'.

        Returns:
            the paths of the files written
        """
        folder = Path(self._config.output_folder) / self._statistics_name / f"Generation_{generation}"
        folder.mkdir(parents=True, exist_ok=True)

        paths = []
        for index, genome in enumerate(population.genomes[:self._config.save_count]):
            path = folder / self.gene_file_name(population.role, index)
            genome.save(path)
            paths.append(path)

        logger.debug("Saved {n} {role} genomes to {folder}",
                     n=len(paths), role=population.role.value, folder=str(folder))
        return paths
