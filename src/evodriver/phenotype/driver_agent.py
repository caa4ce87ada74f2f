"""
Driver Agent Module

This module implements the DriverAgent class, the thin wrapper that turns a
genotype into something able to drive a car.

Classes:
    DriverAgent: Binds a genotype to the neural network it encodes
"""

import threading
from typing import Callable, Sequence, TYPE_CHECKING

import numpy as np

from evodriver.activations              import sigmoid_activation
from evodriver.exceptions               import LengthMismatchError
from evodriver.phenotype.neural_network import NeuralNetwork

if TYPE_CHECKING:
    from evodriver.genotype import Genotype

# Five proximity sensors in, [engine force, direction] out
DRIVER_TOPOLOGY = (5, 4, 4, 3, 2)

class DriverAgent:
    """
    An agent able to drive a car, controlled by a neural network.

    The agent owns its neural network and holds a reference to the genotype
    encoding the network's weights. The simulation reads the agent's decisions
    through 'think()' and writes the episode score directly on the genotype
    ('agent.genotype.evaluation'); the agent itself never changes the genotype.

    The network never shares storage with the genotype: 'update_knowledge()'
    loads a copy of the weights, so the genetic algorithm can rewrite the
    genotype in place without affecting an agent that is still driving.

    Public Properties:
        genotype: The genotype currently assigned to this agent
        network:  The neural network powering this agent

    Public Methods:
        think(sensor_values):       Compute [engine_force, direction] from the sensor readings
        update_knowledge(genotype): Assign a new genotype and reload the network weights
    """

    WEIGHT_COUNT = NeuralNetwork.count_weights(DRIVER_TOPOLOGY)

    def __init__(self,
                 genotype  : 'Genotype',
                 topology  : Sequence[int] = DRIVER_TOPOLOGY,
                 activation: Callable      = sigmoid_activation):
        """
        Create an agent and assign it a genotype.

        Parameters:
            genotype:   The genotype describing the agent's behaviour
            topology:   The topology of the agent's neural network
            activation: The activation function of every layer of the network
        """
        self._lock    : threading.Lock = threading.Lock()
        self._network : NeuralNetwork  = NeuralNetwork(topology, activation)
        self._genotype: 'Genotype'     = None
        self.update_knowledge(genotype)

    @property
    def genotype(self) -> 'Genotype':
        return self._genotype

    @property
    def network(self) -> NeuralNetwork:
        return self._network

    def think(self, sensor_values: Sequence[float]) -> np.ndarray:
        """
        Elaborate the sensor values and produce the next car movement.

        Parameters:
            sensor_values: One reading per sensor

        Returns:
            [engine_force, direction], both in [0, 1] with the default activation
        """
        with self._lock:
            return self._network.process_inputs(sensor_values)

    def update_knowledge(self, genotype: 'Genotype') -> None:
        """
        Change the agent's knowledge by assigning it a new genotype.

        The network is loaded with a copy of the genotype's weights. The swap is
        atomic with respect to 'think()'; if the weight count does not match the
        network, neither the network nor the genotype reference change.

        Raises:
            LengthMismatchError: if the genotype does not fit the network
        """
        if genotype.weight_count != self._network.weight_count:
            raise LengthMismatchError("Genotype weight count doesn't match the agent's network",
                                      self._network.weight_count, genotype.weight_count)

        weights = genotype.get_weight_copy()
        with self._lock:
            self._network.set_weights(weights)
            self._genotype = genotype

    def __getstate__(self):
        # locks cannot be pickled (joblib sends agents to worker processes)
        state = self.__dict__.copy()
        del state['_lock']
        return state

    def __setstate__(self, state):
        self.__dict__.update(state)
        self._lock = threading.Lock()

    def __repr__(self):
        return f"DriverAgent(topology={list(self._network.topology)!r})"
