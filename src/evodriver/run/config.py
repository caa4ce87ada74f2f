import configparser
import os

from evodriver.activations            import activations
from evodriver.phenotype              import DRIVER_TOPOLOGY, NeuralNetwork
from evodriver.pool.genetic_algorithm import (DEFAULT_CROSS_SWAP_PROBABILITY,
                                              DEFAULT_INITIAL_WEIGHT_MAX,
                                              DEFAULT_INITIAL_WEIGHT_MIN,
                                              DEFAULT_MUTATION_AMOUNT,
                                              DEFAULT_MUTATION_PERCENTAGE,
                                              DEFAULT_MUTATION_PROBABILITY,
                                              DEFAULT_SURVIVAL_GENOTYPES,
                                              ZERO_EVALUATION_POLICIES)

class Config:

    @staticmethod
    def _parse_topology(raw_topology):
        """
        Parse a topology from string to tuple of layer sizes.

        Parameters:
            raw_topology: Either a comma-separated list ("5, 4, 2") or already a sequence

        Returns:
            Tuple of layer sizes
        """
        if isinstance(raw_topology, str):
            try:
                raw_topology = [int(n.strip()) for n in raw_topology.split(',')]
            except ValueError:
                raise ValueError(f"Invalid topology '{raw_topology}'") from None
        topology = tuple(int(n) for n in raw_topology)
        if len(topology) < 2 or min(topology) < 1:
            raise ValueError(f"Invalid topology '{raw_topology}': need at least 2 positive layer sizes")
        return topology

    def __init__(self, config_file: str | None = None):
        """
        Initialize Config by parsing an INI file, or create a Config holding the defaults.

        Parameters:
            config_file: Path to the INI configuration file.
                         If None, creates a default Config for tests and manual setup.
        """

        # Default config for testing/manual setup
        if config_file is None:
            self.population_size    = 20
            self.initial_weight_min = DEFAULT_INITIAL_WEIGHT_MIN
            self.initial_weight_max = DEFAULT_INITIAL_WEIGHT_MAX

            self.topology   = DRIVER_TOPOLOGY
            self.activation = 'sigmoid'

            self.cross_swap_probability = DEFAULT_CROSS_SWAP_PROBABILITY
            self.survival_genotypes     = DEFAULT_SURVIVAL_GENOTYPES
            self.zero_evaluation_policy = 'uniform'

            self.mutation_probability = DEFAULT_MUTATION_PROBABILITY
            self.mutation_amount      = DEFAULT_MUTATION_AMOUNT
            self.mutation_percentage  = DEFAULT_MUTATION_PERCENTAGE

            self.max_number_generations = 500
            self.evaluation_threshold   = None

            self.results_directory = 'results'
            self.track_name        = 'default'

            self.distance_threshold = 20.0
            self.time_threshold     = 5.0
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

        # The number of genotypes (and of racing cars) in each generation.
        self.population_size = get_value('POPULATION', 'population_size', int)

        # The range of the uniform distribution used to
        # initialize the weights of the first generation.
        self.initial_weight_min = get_value('POPULATION', 'initial_weight_min', float, default=DEFAULT_INITIAL_WEIGHT_MIN)
        self.initial_weight_max = get_value('POPULATION', 'initial_weight_max', float, default=DEFAULT_INITIAL_WEIGHT_MAX)

        # [NETWORK]

        # The number of neurons of each layer, inputs first, as a comma-separated list.
        # The number of weights of each genotype follows from it.
        self.topology = get_value('NETWORK', 'topology', str, default=DRIVER_TOPOLOGY)

        # Activation function of every layer (see 'basic_activations.py').
        self.activation = get_value('NETWORK', 'activation', str, default='sigmoid')

        # [REPRODUCTION]

        # The probability that crossover swaps the weights
        # of the two parents at any given position.
        self.cross_swap_probability = get_value('REPRODUCTION', 'cross_swap_probability', float,
                                                default=DEFAULT_CROSS_SWAP_PROBABILITY)

        # The number of fittest genotypes carried unchanged into the next generation.
        self.survival_genotypes = get_value('REPRODUCTION', 'survival_genotypes', int,
                                            default=DEFAULT_SURVIVAL_GENOTYPES)

        # What to do when every genotype of a generation evaluated to zero.
        # Allowed values:
        #   "uniform" - every genotype gets fitness 1
        #   "error"   - evolution fails with ZeroEvaluationError
        self.zero_evaluation_policy = get_value('REPRODUCTION', 'zero_evaluation_policy', str, default='uniform')

        # [MUTATION]

        # The probability that mutation changes any given weight.
        self.mutation_probability = get_value('MUTATION', 'mutation_probability', float,
                                              default=DEFAULT_MUTATION_PROBABILITY)

        # Weights are changed by a value drawn uniformly from [-amount, +amount].
        self.mutation_amount = get_value('MUTATION', 'mutation_amount', float, default=DEFAULT_MUTATION_AMOUNT)

        # The fraction of (non-elite) genotypes in a new population that are mutated.
        self.mutation_percentage = get_value('MUTATION', 'mutation_percentage', float,
                                             default=DEFAULT_MUTATION_PERCENTAGE)

        # [TERMINATION]

        # The number of generations after which to stop the run.
        self.max_number_generations = get_value('TERMINATION', 'max_number_generations', int)

        # The best evaluation which when met or exceeded causes the run to end.
        # Use "None" to only stop after 'max_number_generations'.
        self.evaluation_threshold = get_value('TERMINATION', 'evaluation_threshold', float, default=None)

        # [RESULTS]

        # Root directory of the per-run summary files, and the name of the
        # track, which selects the sub-directory and the file name prefix.
        self.results_directory = get_value('RESULTS', 'results_directory', str, default='results')
        self.track_name        = get_value('RESULTS', 'track_name', str, default='default')

        # [RACE]

        # A car within this distance of its next checkpoint has reached it.
        self.distance_threshold = get_value('RACE', 'distance_threshold', float, default=20.0)

        # A car not reaching a new checkpoint for this many seconds is killed.
        self.time_threshold = get_value('RACE', 'time_threshold', float, default=5.0)

        self._validate()

    def _validate(self):
        if self.population_size is None or self.population_size < 2:
            raise ValueError("'population_size' must be at least 2")
        if self.initial_weight_min > self.initial_weight_max:
            raise ValueError("'initial_weight_min' cannot exceed 'initial_weight_max'")
        if self.activation not in activations:
            raise ValueError(f"Invalid activation function '{self.activation}'")
        if self.zero_evaluation_policy not in ZERO_EVALUATION_POLICIES:
            raise ValueError(f"Invalid zero_evaluation_policy '{self.zero_evaluation_policy}'")
        if not 0 <= self.survival_genotypes < self.population_size:
            raise ValueError("'survival_genotypes' must be in [0, population_size)")
        for name in ('cross_swap_probability', 'mutation_probability', 'mutation_percentage'):
            if not 0.0 <= getattr(self, name) <= 1.0:
                raise ValueError(f"'{name}' must be a probability")

    @property
    def weight_count(self) -> int:
        """The number of weights of a genotype encoding a network with this topology."""
        return NeuralNetwork.count_weights(self.topology)

    def __setattr__(self, name, value):
        """
        Override 'setattr' to automatically parse the topology when set.
        This allows users to write config.topology = "5, 3, 2" and have it
        automatically converted to a tuple of layer sizes.
        """
        if name == 'topology':
            value = self._parse_topology(value)
        super().__setattr__(name, value)
