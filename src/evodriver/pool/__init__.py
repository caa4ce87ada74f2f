"""
Pool Package

This package implements the population management layer: the genetic algorithm
owning the population of genotypes and producing each generation from the
evaluated previous one (fitness calculation, selection, recombination, mutation).

Modules:
    genetic_algorithm: GeneticAlgorithm class, EvolutionState enumeration and default parameters

Exported Classes:
    GeneticAlgorithm: Population of genotypes evolved generation after generation
    EvolutionState:   Whether the population can currently be read
"""

from evodriver.pool.genetic_algorithm import EvolutionState, GeneticAlgorithm

__all__ = ['EvolutionState',
           'GeneticAlgorithm']
