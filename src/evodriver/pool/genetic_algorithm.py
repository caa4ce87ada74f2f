"""
Genetic Algorithm Module

This module implements the GeneticAlgorithm class, the owner of the population
of genotypes and the driver of the generational loop.

Classes:
    EvolutionState:   Whether the population can currently be read
    GeneticAlgorithm: Population of genotypes evolved generation after generation
"""

import math
import random
import threading
from enum   import Enum
from typing import Optional, TYPE_CHECKING

import numpy as np

from evodriver.exceptions import InsufficientPopulationError, ZeroEvaluationError
from evodriver.genotype   import Genotype, fitness_sort_key

if TYPE_CHECKING:
    from evodriver.run.config  import Config
    from evodriver.run.results import ResultsSink

# Range of the uniform distribution initializing the weights of the first generation
DEFAULT_INITIAL_WEIGHT_MIN = -1.0
DEFAULT_INITIAL_WEIGHT_MAX = 1.0

# Probability of a weight being swapped during crossover
DEFAULT_CROSS_SWAP_PROBABILITY = 0.6

# Probability of a weight being mutated, and the maximum change it undergoes
DEFAULT_MUTATION_PROBABILITY = 0.3
DEFAULT_MUTATION_AMOUNT      = 2.0

# Fraction of the genotypes of a new population that are mutated
DEFAULT_MUTATION_PERCENTAGE = 1.0

# Number of genotypes passing into the new generation without recombination
DEFAULT_SURVIVAL_GENOTYPES = 1

# How fitness is computed when the mean evaluation of a generation is zero
ZERO_EVALUATION_POLICIES = ('uniform', 'error')

class EvolutionState(Enum):
    IDLE     = 'idle'      # population readable
    EVOLVING = 'evolving'  # population being rebuilt, reads return an empty list

class GeneticAlgorithm:
    """
    A genetic algorithm evolving a fixed-size population of genotypes.

    Each generation goes through two phases. During the evaluation phase, which
    happens outside this class, every genotype of 'current_population' is decoded
    into an agent and its 'evaluation' is written by the simulation. During the
    evolution phase, 'evolution()' turns the evaluated population into a new one:

    Step 1: Fitness calculation
    - fitness = evaluation / mean evaluation of the population

    Step 2: Snapshot
    - a snapshot of the evaluated population is taken; it is handed to the
      results sink, if any, once the new population has been committed

    Step 3: Sorting
    - the population is sorted by descending fitness; the sort is stable, so
      genotypes with equal fitness keep their relative order

    Step 4: Selection (remainder stochastic sampling)
    - every genotype with fitness >= 1 is copied floor(fitness) times into an
      intermediate population
    - every genotype is then copied once more with probability equal to the
      fractional part of its fitness

    Step 5: Recombination
    - the fittest 'survival_genotypes' genotypes pass unchanged into the new population
    - pairs of distinct members of the intermediate population are crossed
      over until the new population is full

    Step 6: Mutation
    - every genotype of the new population but the survivors is mutated
      with probability 'mutation_percentage'

    The population is replaced only once all steps succeeded; if one of them
    fails, the genotypes get back the fitness they had before. While they run
    'current_population' returns an empty list.

    Public Properties:
        current_population: The genotypes of the current generation (empty while evolving)
        population_size:    Number of genotypes in every generation
        generation_count:   Number of the current generation, starting at 1
        state:              EvolutionState.IDLE or EvolutionState.EVOLVING

    Public Methods:
        initialize_population(): Randomize the weights of every genotype
        evolution():             Produce the next generation
    """

    def __init__(self,
                 weight_count   : int,
                 population_size: int,
                 config         : Optional['Config']      = None,
                 results_sink   : Optional['ResultsSink'] = None):
        """
        Create a population of 'population_size' genotypes, each of 'weight_count' zero weights.

        Call 'initialize_population()' to give the genotypes random weights.

        Parameters:
            weight_count:    The number of weights of each genotype
            population_size: The number of genotypes in each generation
            config:          Evolution parameters; the module defaults when None
            results_sink:    Receives a snapshot of every evaluated generation
        """
        if weight_count < 1:
            raise ValueError("'weight_count' must be at least 1")
        if population_size < 2:
            raise ValueError("'population_size' must be at least 2")

        self._weight_count     : int = weight_count
        self._population_size  : int = population_size
        self._generation_count : int = 1
        self._results_sink           = results_sink

        if config is None:
            self._initial_weight_min     = DEFAULT_INITIAL_WEIGHT_MIN
            self._initial_weight_max     = DEFAULT_INITIAL_WEIGHT_MAX
            self._cross_swap_probability = DEFAULT_CROSS_SWAP_PROBABILITY
            self._mutation_probability   = DEFAULT_MUTATION_PROBABILITY
            self._mutation_amount        = DEFAULT_MUTATION_AMOUNT
            self._mutation_percentage    = DEFAULT_MUTATION_PERCENTAGE
            self._survival_genotypes     = DEFAULT_SURVIVAL_GENOTYPES
            self._zero_evaluation_policy = 'uniform'
        else:
            self._initial_weight_min     = config.initial_weight_min
            self._initial_weight_max     = config.initial_weight_max
            self._cross_swap_probability = config.cross_swap_probability
            self._mutation_probability   = config.mutation_probability
            self._mutation_amount        = config.mutation_amount
            self._mutation_percentage    = config.mutation_percentage
            self._survival_genotypes     = config.survival_genotypes
            self._zero_evaluation_policy = config.zero_evaluation_policy

        if not 0 <= self._survival_genotypes < population_size:
            raise ValueError("'survival_genotypes' must be in [0, population_size)")
        if self._zero_evaluation_policy not in ZERO_EVALUATION_POLICIES:
            raise ValueError(f"Invalid zero_evaluation_policy '{self._zero_evaluation_policy}'")

        self._population: list[Genotype] = [Genotype(np.zeros(weight_count)) for _ in range(population_size)]

        # guards the state flag and the population swap
        self._lock : threading.RLock = threading.RLock()
        self._state: EvolutionState  = EvolutionState.IDLE

    @property
    def current_population(self) -> list[Genotype]:
        """
        The genotypes of the current generation.
        While the evolution is in progress, an empty list.
        """
        with self._lock:
            if self._state is EvolutionState.EVOLVING:
                return []
            return list(self._population)

    @property
    def population_size(self) -> int:
        return self._population_size

    @property
    def weight_count(self) -> int:
        return self._weight_count

    @property
    def generation_count(self) -> int:
        """The number of the current generation (the first one is 1)."""
        return self._generation_count

    @property
    def state(self) -> EvolutionState:
        return self._state

    def initialize_population(self) -> None:
        """
        Set every weight of every genotype to a random value in the initial weight range.
        """
        with self._lock:
            for genotype in self._population:
                genotype.set_random_weights(self._initial_weight_min, self._initial_weight_max)

    def evolution(self) -> None:
        """
        Evolve the current (evaluated) population into the next generation.

        Raises:
            RuntimeError:                if an evolution is already in progress
            ZeroEvaluationError:         if the mean evaluation is zero and the policy is "error"
            InsufficientPopulationError: if selection keeps fewer than two genotypes
        """
        with self._lock:
            if self._state is EvolutionState.EVOLVING:
                raise RuntimeError("Evolution already in progress")
            self._state = EvolutionState.EVOLVING
            population  = list(self._population)

        previous_fitness = [g.fitness for g in population]
        try:
            self.fitness_calculation(population)
            snapshots  = [g.snapshot() for g in population]
            generation = self._generation_count

            population.sort(key=fitness_sort_key)
            intermediate_population = self.selection(population)
            new_population = self.recombination(intermediate_population, population,
                                                self._population_size, self._survival_genotypes)
            self.mutate_all_but_best(new_population, self._survival_genotypes)
        except Exception:
            # the previous population stays in place, with its previous fitness
            for genotype, fitness in zip(self._population, previous_fitness):
                genotype.fitness = fitness
            with self._lock:
                self._state = EvolutionState.IDLE
            raise

        try:
            with self._lock:
                self._population        = new_population
                self._generation_count += 1

            # only committed generations are summarized
            if self._results_sink is not None:
                self._results_sink.write_generation_summary(generation, snapshots)
        finally:
            with self._lock:
                self._state = EvolutionState.IDLE

    def fitness_calculation(self, population: list[Genotype]) -> None:
        """
        Set the fitness of each genotype to: evaluation / mean evaluation.

        If the mean evaluation is zero (nobody scored), the 'zero_evaluation_policy'
        decides: "uniform" gives every genotype fitness 1, "error" raises.
        """
        average_evaluation = sum(g.evaluation for g in population) / len(population)

        if average_evaluation == 0:
            if self._zero_evaluation_policy == 'error':
                raise ZeroEvaluationError(self._generation_count)
            for genotype in population:
                genotype.fitness = 1.0
            return

        for genotype in population:
            genotype.fitness = genotype.evaluation / average_evaluation

    @staticmethod
    def selection(population: list[Genotype]) -> list[Genotype]:
        """
        Create the intermediate population by remainder stochastic sampling.

        1. Genotypes with fitness >= 1 are added floor(fitness) times.
        2. Every genotype is added once more with probability fitness - floor(fitness).

        The population MUST be sorted by descending fitness: the first pass stops
        at the first genotype whose fitness is below 1.

        Returns:
            The intermediate population (references to members of 'population')
        """
        intermediate_population = []
        for genotype in population:
            if genotype.fitness < 1:
                break
            intermediate_population.extend([genotype] * math.floor(genotype.fitness))

        for genotype in population:
            remainder = genotype.fitness - math.floor(genotype.fitness)
            if random.random() < remainder:
                intermediate_population.append(genotype)

        return intermediate_population

    def recombination(self,
                      intermediate_population: list[Genotype],
                      population             : list[Genotype],
                      new_population_size    : int,
                      survival_genotypes     : int) -> list[Genotype]:
        """
        Recombine the intermediate population into a new population of 'new_population_size' genotypes.

        The first 'survival_genotypes' genotypes of 'population' (which must be sorted by
        descending fitness) pass as they are into the new population. The rest of it is
        filled with the offspring of pairs of distinct members of the intermediate
        population; when only one slot is left, the second offspring is dropped.

        Raises:
            InsufficientPopulationError: if the intermediate population has fewer than 2 members
        """
        if len(intermediate_population) < 2:
            raise InsufficientPopulationError(len(intermediate_population))

        new_population = list(population[:survival_genotypes])

        while len(new_population) < new_population_size:
            index1, index2 = random.sample(range(len(intermediate_population)), 2)
            offspring1, offspring2 = intermediate_population[index1].crossover(
                intermediate_population[index2], self._cross_swap_probability)

            new_population.append(offspring1)
            if len(new_population) < new_population_size:
                new_population.append(offspring2)

        return new_population

    def mutate_all_but_best(self, population: list[Genotype], n: int) -> None:
        """
        Mutate, each with probability 'mutation_percentage', all genotypes but the first n.
        """
        for genotype in population[n:]:
            if random.random() < self._mutation_percentage:
                genotype.mutate(self._mutation_probability, self._mutation_amount)

    def __getstate__(self):
        with self._lock:
            state = self.__dict__.copy()
        del state['_lock']
        return state

    def __setstate__(self, state):
        self.__dict__.update(state)
        self._lock = threading.RLock()

    def __str__(self):
        return '\n'.join(str(genotype) for genotype in self.current_population)
