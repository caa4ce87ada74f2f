"""
Genotype Module

This module implements the Genotype class, the genetic encoding evolved by the
genetic algorithm: a fixed-length vector of real-valued weights together with
the two scores the algorithm assigns to it.

Classes:
    Genotype:         Weight vector plus evaluation and fitness scores
    GenotypeSnapshot: Immutable copy of a genotype, handed to results sinks

Functions:
    compare_fitness:  Three-way comparison ordering genotypes by descending fitness
    fitness_sort_key: Key function equivalent to 'compare_fitness'
"""

import functools
from typing import NamedTuple, Sequence

import numpy as np

from evodriver.exceptions import InvalidRangeError, LengthMismatchError

class GenotypeSnapshot(NamedTuple):
    """
    The state of a genotype at a given instant.

    The weights are a private copy, so later in-place changes
    to the genotype are not visible through the snapshot.
    """
    evaluation: float
    fitness   : float
    weights   : tuple[float, ...]

class Genotype:
    """
    A genotype: the weights of a neural network, as evolved by the genetic algorithm.

    The number of weights is fixed when the genotype is created and never changes
    afterwards; the weights themselves are rewritten in place by the genetic
    operators (random initialization, crossover, mutation).

    Besides the weights, a genotype carries two scores:
    - evaluation: the raw score of the last episode, written by the simulation
    - fitness:    the evaluation relative to the population's mean evaluation,
                  written by the genetic algorithm before selection

    Genotypes do not define an ordering of their own; sort them with
    'fitness_sort_key' (or 'compare_fitness') to put the fittest first.

    Public Attributes:
        evaluation: Raw score assigned by the simulation (0 until evaluated)
        fitness:    Normalized score assigned by the genetic algorithm (0 until calculated)

    Public Properties:
        weights:      Read-only view of the weight vector
        weight_count: Number of weights

    Public Methods:
        set_random_weights(min, max): Overwrite all weights with uniform draws
        get_weight_copy():            Return an independent copy of the weights
        crossover(other, p):          Produce two offspring by complete crossover
        mutate(p, amount):            Perturb weights in place
        clone():                      Create an independent copy of this genotype
        snapshot():                   Freeze the current state of this genotype

    Class Methods:
        generate_random(length, min, max): Create a genotype with random weights
    """

    def __init__(self, weights: Sequence[float]):
        """
        Create a genotype with the given weights; evaluation and fitness are 0.

        Parameters:
            weights: The weight vector (copied)
        """
        self._weights  : np.ndarray = np.array(weights, dtype=float).reshape(-1)
        self.evaluation: float      = 0.0
        self.fitness   : float      = 0.0

    @classmethod
    def generate_random(cls, length: int, min_value: float, max_value: float) -> 'Genotype':
        """
        Generate a new genotype with 'length' weights drawn uniformly from [min_value, max_value).
        """
        genotype = cls(np.zeros(length))
        genotype.set_random_weights(min_value, max_value)
        return genotype

    @property
    def weights(self) -> np.ndarray:
        """Read-only view of the weight vector."""
        view = self._weights.view()
        view.flags.writeable = False
        return view

    @property
    def weight_count(self) -> int:
        """The number of weights stored in this genotype."""
        return len(self._weights)

    def __len__(self) -> int:
        return len(self._weights)

    def _check_index(self, index: int) -> int:
        if not 0 <= index < len(self._weights):
            raise IndexError(f"Weight index {index} out of range [0, {len(self._weights)})")
        return index

    def __getitem__(self, index: int) -> float:
        return float(self._weights[self._check_index(index)])

    def __setitem__(self, index: int, value: float) -> None:
        self._weights[self._check_index(index)] = value

    def get_weight_copy(self) -> np.ndarray:
        """Return a copy of the weights, independent from this genotype."""
        return self._weights.copy()

    def set_random_weights(self, min_value: float, max_value: float) -> None:
        """
        Set every weight to an independent uniform draw from [min_value, max_value).

        Raises:
            InvalidRangeError: if min_value > max_value
        """
        if min_value > max_value:
            raise InvalidRangeError(min_value, max_value)
        span = max_value - min_value
        self._weights[:] = np.random.random(len(self._weights)) * span + min_value

    def crossover(self, other: 'Genotype', swap_probability: float) -> tuple['Genotype', 'Genotype']:
        """
        Complete (uniform) crossover between this genotype and another one.

        For each weight position independently, with probability 'swap_probability'
        the first offspring takes the weight of 'other' and the second offspring the
        weight of 'self'; otherwise each offspring keeps the weight of its own parent.
        Weights are always copied verbatim, never blended.

        Parameters:
            other:            The second parent
            swap_probability: Probability of swapping the weights at each position

        Returns:
            The two offspring, with evaluation and fitness reset to 0
        """
        if len(other) != len(self):
            raise LengthMismatchError("Crossover parents have different weight counts",
                                      len(self), len(other))

        swap = np.random.random(len(self._weights)) < swap_probability
        weights1 = np.where(swap, other._weights, self._weights)
        weights2 = np.where(swap, self._weights, other._weights)
        return Genotype(weights1), Genotype(weights2)

    def mutate(self, probability: float, amount: float) -> None:
        """
        Mutate this genotype in place.

        Each weight independently, with probability 'probability', is changed
        by a value drawn uniformly from [-amount, +amount).
        """
        mutated = np.random.random(len(self._weights)) < probability
        deltas  = np.random.random(len(self._weights)) * (2 * amount) - amount
        self._weights += np.where(mutated, deltas, 0.0)

    def clone(self) -> 'Genotype':
        """Create a genotype with a copy of the weights and the same scores."""
        twin = Genotype(self._weights)
        twin.evaluation = self.evaluation
        twin.fitness    = self.fitness
        return twin

    def snapshot(self) -> GenotypeSnapshot:
        return GenotypeSnapshot(float(self.evaluation),
                                float(self.fitness),
                                tuple(float(w) for w in self._weights))

    def __str__(self):
        return f"evaluation={self.evaluation:.4f}, fitness={self.fitness:.4f}, weights={self._weights}"

    def __repr__(self):
        return f"Genotype(weights={self._weights.tolist()!r})"

def compare_fitness(a: Genotype, b: Genotype) -> int:
    """
    Three-way comparison putting the genotype with the larger fitness first.

    Returns:
        a negative number if 'a' sorts before 'b', positive if after, 0 on ties
    """
    if a.fitness > b.fitness:
        return -1
    if a.fitness < b.fitness:
        return 1
    return 0

fitness_sort_key = functools.cmp_to_key(compare_fitness)
