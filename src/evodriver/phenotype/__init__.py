"""
Phenotype Package

This package implements the phenotype: the executable decision function a
genotype is decoded into. A genotype's flat weight vector is loaded into a
layered, fully connected, biased feedforward neural network, which a
DriverAgent consults to turn sensor readings into car movements.

Modules:
    neural_layer:   One fully connected, biased layer
    neural_network: An ordered stack of layers
    driver_agent:   Agent binding a genotype to the network it encodes

Exported:
    NeuralLayer:     A fully connected, biased layer of neurons
    NeuralNetwork:   A layered feedforward neural network
    DriverAgent:     An agent driving a car with a neural network
    DRIVER_TOPOLOGY: The topology of the network powering a DriverAgent
"""

from evodriver.phenotype.neural_layer   import NeuralLayer
from evodriver.phenotype.neural_network import NeuralNetwork
from evodriver.phenotype.driver_agent   import DRIVER_TOPOLOGY, DriverAgent

__all__ = ['DRIVER_TOPOLOGY',
           'DriverAgent',
           'NeuralLayer',
           'NeuralNetwork']
