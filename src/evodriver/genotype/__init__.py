"""
Genotype Package

This package implements the genetic encoding evolved by the genetic algorithm.
A genotype is a fixed-length vector of real-valued weights, decoded by a
DriverAgent into the weights of a layered feedforward neural network.

Modules:
    genotype: Genotype and GenotypeSnapshot classes, fitness ordering helpers

Exported:
    Genotype:         Weight vector plus evaluation and fitness scores
    GenotypeSnapshot: Immutable copy of a genotype's scores and weights
    compare_fitness:  Three-way comparison, larger fitness first
    fitness_sort_key: Key function for sorting by descending fitness
"""

from evodriver.genotype.genotype import (Genotype,
                                         GenotypeSnapshot,
                                         compare_fitness,
                                         fitness_sort_key)

__all__ = ['Genotype',
           'GenotypeSnapshot',
           'compare_fitness',
           'fitness_sort_key']
