import configparser
import os

class Config:

    @staticmethod
    def _parse_structure(raw_structure):
        """
        Parse the network structure from string to tuple of layer sizes.

        Parameters:
            raw_structure: Either a comma-separated list of integers, or already a sequence

        Returns:
            Tuple of positive layer sizes, input layer first
        """
        if isinstance(raw_structure, str):
            try:
                parsed = [int(size.strip()) for size in raw_structure.split(',')]
            except ValueError:
                raise ValueError(f"Invalid network structure '{raw_structure}'") from None
        else:
            parsed = [int(size) for size in raw_structure]

        if len(parsed) < 2:
            raise ValueError(f"Network structure needs at least 2 layers, got {parsed}")
        if any(size < 1 for size in parsed):
            raise ValueError(f"Layer sizes must be positive, got {parsed}")
        return tuple(parsed)

    @staticmethod
    def _check_probability(name, value):
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"'{name}' must lie in [0, 1], got {value}")

    def __init__(self, config_file: str | None = None):
        """
        Initialize Config by parsing an INI file, or create a default Config.

        Parameters:
            config_file: Path to the INI configuration file.
                         If None, creates a Config holding the default values.
        """

        # Default config for testing/manual setup
        if config_file is None:
            self.runners_population_size  = 30
            self.catchers_population_size = 30
            self.load_count               = 0
            self.load_folder              = 'Loader'

            self.structure = (4, 6, 2)

            self.init_range      = 1.0
            self.cross_prob      = 0.6
            self.mutation_prob   = 0.2
            self.mutation_degree = 1.5
            self.mutation_amount = 1.0
            self.elitist         = False

            self.max_number_generations = 50

            self.save          = False
            self.save_count    = 0
            self.output_folder = '.'
            self.run_name      = 'run'

            self.round_time         = 60.0
            self.time_based_scoring = False
            self.bonus_for_teamwork = True

            self.seed = None
            return

        if not os.path.exists(config_file):
            raise FileNotFoundError(f"Configuration file '{config_file}' not found")

        parser = configparser.ConfigParser()
        parser.read(config_file)

        # Sentinel for missing default values
        _NO_DEFAULT = object()

        # Helper function to safely parse values
        def get_value(section, key, value_type, default=_NO_DEFAULT):
            try:
                raw_value = parser.get(section, key)
                if raw_value.lower() == 'none':
                    return None
                if value_type == int:
                    return parser.getint(section, key)
                elif value_type == float:
                    return parser.getfloat(section, key)
                elif value_type == bool:
                    return parser.getboolean(section, key)
                elif value_type == str:
                    return raw_value
            except (configparser.NoSectionError, configparser.NoOptionError):
                if default is not _NO_DEFAULT:
                    return default
                raise

        # [POPULATION]

        # The number of genomes in the runner and in the catcher population.
        self.runners_population_size  = get_value('POPULATION', 'runners_population_size' , int)
        self.catchers_population_size = get_value('POPULATION', 'catchers_population_size', int)

        # How many genomes of each population are loaded from 'load_folder' when the
        # run starts (slot 'i' is loaded from 'gene_<Role>_<i>.txt', if it exists).
        self.load_count  = get_value('POPULATION', 'load_count' , int, default=0)
        self.load_folder = get_value('POPULATION', 'load_folder', str, default='Loader')

        # [NETWORK]

        # Layer sizes of the network shared by all players, input layer first.
        # Example: "12, 8, 2" (12 sensory inputs, 8 hidden neurons, 2 controls)
        self.structure = self._parse_structure(get_value('NETWORK', 'structure', str))

        # [GENETICS]

        # Initial weights are drawn uniformly from [-init_range/2, +init_range/2].
        self.init_range = get_value('GENETICS', 'init_range', float, default=1.0)

        # The probability that crossover swaps the parents' values of a weight.
        self.cross_prob = get_value('GENETICS', 'cross_prob', float, default=0.6)

        # The probability that mutation perturbs a weight.
        self.mutation_prob = get_value('GENETICS', 'mutation_prob', float, default=0.2)

        # Perturbations are drawn uniformly from [-mutation_degree, +mutation_degree].
        self.mutation_degree = get_value('GENETICS', 'mutation_degree', float, default=1.5)

        # The probability that a genome (other than the first two) is mutated at all.
        self.mutation_amount = get_value('GENETICS', 'mutation_amount', float, default=1.0)

        # Elitist selection & combination (only the best two genomes become parents),
        # as opposed to fitness proportional selection & random combination.
        self.elitist = get_value('GENETICS', 'elitist', bool, default=False)

        # [TERMINATION]

        # The number of generations after which to stop the run (0 = no limit).
        self.max_number_generations = get_value('TERMINATION', 'max_number_generations', int)

        # [PERSISTENCE]

        # Whether to write run statistics and snapshots of the best genomes.
        self.save = get_value('PERSISTENCE', 'save', bool, default=False)

        # How many of the best genomes of each population are saved per generation.
        self.save_count = get_value('PERSISTENCE', 'save_count', int, default=0)

        # Where statistics and snapshots are written, and the name prefix used for them.
        self.output_folder = get_value('PERSISTENCE', 'output_folder', str, default='.')
        self.run_name      = get_value('PERSISTENCE', 'run_name'     , str, default='run')

        # [RULES]

        # Duration of a round, in simulated seconds.
        self.round_time = get_value('RULES', 'round_time', float, default=60.0)

        # Whether runners are scored by the time they survive.
        self.time_based_scoring = get_value('RULES', 'time_based_scoring', bool, default=False)

        # Whether catchers near a catch share its score.
        self.bonus_for_teamwork = get_value('RULES', 'bonus_for_teamwork', bool, default=True)

        # [RANDOM]

        # Seed of the random generator shared by the run ("None" = unpredictable).
        self.seed = get_value('RANDOM', 'seed', int, default=None)

        self.validate()

    def validate(self):
        """
        Check the consistency of the configuration values.

        Raises:
            ValueError: if a value is out of its allowed range
        """
        for name in ('runners_population_size', 'catchers_population_size', 'load_count', 'save_count',
                     'init_range', 'cross_prob', 'mutation_prob', 'mutation_degree', 'mutation_amount',
                     'round_time'):
            if getattr(self, name) is None:
                raise ValueError(f"'{name}' must be a number, got None")
        if self.runners_population_size < 0 or self.catchers_population_size < 0:
            raise ValueError("Population sizes must not be negative")
        if self.load_count < 0 or self.save_count < 0:
            raise ValueError("'load_count' and 'save_count' must not be negative")
        if not self.init_range > 0:
            raise ValueError(f"'init_range' must be positive, got {self.init_range}")
        if self.mutation_degree < 0:
            raise ValueError(f"'mutation_degree' must not be negative, got {self.mutation_degree}")
        for name in ('cross_prob', 'mutation_prob', 'mutation_amount'):
            self._check_probability(name, getattr(self, name))
        if self.max_number_generations is not None and self.max_number_generations < 0:
            raise ValueError("'max_number_generations' must not be negative")

    def __setattr__(self, name, value):
        """
        Override 'setattr' to automatically parse the network structure when set.
        This allows users to write config.structure = "4, 6, 2".
        """
        if name == 'structure':
            value = self._parse_structure(value)
        super().__setattr__(name, value)
