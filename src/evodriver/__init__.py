"""
evodriver - Neuroevolution of car drivers with a genetic algorithm.

This package evolves the weights of small, fixed-topology feedforward neural
networks that drive simulated cars. The genetic algorithm works on fixed-length
real-valued weight vectors (genotypes); each genotype is decoded into the
network of a DriverAgent, raced, scored, and the population is then evolved
through fitness-proportional selection, complete crossover and mutation.

Main components:
- activations: Activation functions (saturating sigmoid by default)
- genotype:    Genetic encoding (weight vectors with evaluation and fitness)
- phenotype:   Neural layers, networks and the driver agent
- pool:        The genetic algorithm and its population
- run:         Configuration, race bookkeeping, controller, trials and results files

Example:
    >>> from evodriver import Config, Trial
    >>> config = Config("config.ini")
    >>> class MyTrial(Trial):
    ...     def _evaluate_agent(self, agent):
    ...         # Race the agent, return how far it got
    ...         pass
    >>> trial = MyTrial(config)
    >>> trial.run()
"""

__version__ = "0.1.0"

# Import main classes for convenient access
from evodriver.exceptions import (EvolutionError,
                                  InvalidRangeError,
                                  LengthMismatchError,
                                  InvalidTopologyError,
                                  InsufficientPopulationError,
                                  ZeroEvaluationError,
                                  AgentCountMismatchError)
from evodriver.genotype   import Genotype, GenotypeSnapshot
from evodriver.phenotype  import DRIVER_TOPOLOGY, DriverAgent, NeuralLayer, NeuralNetwork
from evodriver.pool       import EvolutionState, GeneticAlgorithm
from evodriver.run        import (AliveCounter, Config, Controller, Race,
                                  ResultsWriter, Track, Trial)

__all__ = [
    "AgentCountMismatchError",
    "AliveCounter",
    "Config",
    "Controller",
    "DRIVER_TOPOLOGY",
    "DriverAgent",
    "EvolutionError",
    "EvolutionState",
    "GeneticAlgorithm",
    "Genotype",
    "GenotypeSnapshot",
    "InsufficientPopulationError",
    "InvalidRangeError",
    "InvalidTopologyError",
    "LengthMismatchError",
    "NeuralLayer",
    "NeuralNetwork",
    "Race",
    "ResultsWriter",
    "Track",
    "Trial",
    "ZeroEvaluationError",
]
