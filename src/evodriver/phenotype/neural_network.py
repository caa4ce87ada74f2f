"""
Neural Network Module

This module implements the feedforward neural network that decodes a genotype
into a decision function.

Classes:
    NeuralNetwork: An ordered stack of fully connected, biased layers
"""

from typing import Callable, Sequence

import autograd.numpy as np  # type: ignore
import graphviz  # type: ignore

from evodriver.activations            import sigmoid_activation
from evodriver.exceptions             import InvalidTopologyError, LengthMismatchError
from evodriver.phenotype.neural_layer import NeuralLayer

class NeuralNetwork:
    """
    A layered, fully connected, biased feedforward neural network.

    The shape of the network is given by its topology, the sequence of the
    number of neurons in each layer (inputs first, outputs last). A topology
    with n entries produces n - 1 NeuralLayer objects, layer i connecting
    topology[i] neurons (plus the bias) to topology[i + 1] neurons.

    All the weights of the network can be loaded at once from a flat vector
    whose length is 'weight_count': the first layer consumes the first slice,
    the second layer the next one, and so on.

    Public Properties:
        topology:     The number of neurons of each layer
        layers:       The NeuralLayer objects, in order
        weight_count: Total number of weights, biases included

    Public Methods:
        set_weights(weights):   Load all the weights from a flat vector
        get_weights():          Return all the weights as a flat vector
        process_inputs(inputs): Perform a complete forward pass
        visualize(view):        Draw the network with Graphviz
    """

    def __init__(self, topology: Sequence[int], activation: Callable = sigmoid_activation):
        """
        Create a network with all weights set to zero.

        Parameters:
            topology:   The number of neurons of each layer, at least two entries
            activation: The activation function used by every layer

        Raises:
            InvalidTopologyError: if the topology describes no layer
        """
        topology = tuple(topology)
        if len(topology) < 2 or any(int(n) != n or n < 1 for n in topology):
            raise InvalidTopologyError(topology)

        self._topology: tuple[int, ...]   = tuple(int(n) for n in topology)
        self._layers  : list[NeuralLayer] = [NeuralLayer(n_in, n_out, activation)
                                             for n_in, n_out in zip(self._topology[:-1], self._topology[1:])]

    @property
    def topology(self) -> tuple[int, ...]:
        return self._topology

    @property
    def layers(self) -> list[NeuralLayer]:
        return self._layers

    @property
    def weight_count(self) -> int:
        """The total number of weights in the network, biases included."""
        return sum(layer.weight_count for layer in self._layers)

    @staticmethod
    def count_weights(topology: Sequence[int]) -> int:
        """The number of weights a network with the given topology requires."""
        return sum((n_in + 1) * n_out for n_in, n_out in zip(topology[:-1], topology[1:]))

    def set_weights(self, weights: Sequence[float]) -> None:
        """
        Set all the connection weights, starting from the first layer's first neuron.

        Parameters:
            weights: All the weights, biases included, in one flat vector

        Raises:
            LengthMismatchError: if the vector length differs from 'weight_count'
        """
        if len(weights) != self.weight_count:
            raise LengthMismatchError("Weights count doesn't match neural network weight count",
                                      self.weight_count, len(weights))

        weights = np.asarray(weights, dtype=float)
        start = 0
        for layer in self._layers:
            stop = start + layer.weight_count
            layer.set_weights(weights[start:stop])
            start = stop

    def get_weights(self) -> np.ndarray:
        """Return all the weights as a flat vector, in the order 'set_weights' expects."""
        return np.concatenate([layer.weights.reshape(-1) for layer in self._layers])

    def process_inputs(self, inputs: Sequence[float]) -> np.ndarray:
        """
        Feed the inputs through every layer, in order.

        Parameters:
            inputs: One value per input neuron

        Returns:
            One value per output neuron

        Raises:
            LengthMismatchError: if the number of inputs differs from the input layer size
        """
        if len(inputs) != self._topology[0]:
            raise LengthMismatchError("Given inputs do not match network input amount",
                                      self._topology[0], len(inputs))

        outputs = inputs
        for layer in self._layers:
            outputs = layer.process_inputs(outputs)
        return outputs

    def visualize(self, view: bool = True) -> graphviz.Digraph:
        """
        Visualize the network using Graphviz.

        Every neuron is drawn as a node, grouped by layer; each edge is labelled
        with its weight. The bias of each layer is drawn as an extra square node.

        Parameters:
            view: If True, automatically open the visualization after rendering

        Returns:
            graphviz.Digraph object representing the network
        """
        dot = graphviz.Digraph()
        dot.attr(rankdir='LR')  # Left to right layout

        neuron_attrs = {'style': 'filled', 'shape': 'circle', 'penwidth': '0.5',
                        'fontsize': '6', 'width': '0.4', 'height': '0.4', 'fixedsize': 'true'}
        fill_colors  = ['lightgrey'] + ['lightblue'] * (len(self._topology) - 2) + ['white']

        for depth, size in enumerate(self._topology):
            with dot.subgraph(name=f'cluster_{depth}') as cluster:
                cluster.attr(rank='same', style='invisible')
                for n in range(size):
                    cluster.node(f"{depth}_{n}", label=f"{depth}.{n}",
                                 fillcolor=fill_colors[depth], **neuron_attrs)
                if depth < len(self._layers):
                    cluster.node(f"{depth}_bias", label="1", shape='square', fontsize='6',
                                 width='0.3', height='0.3', fixedsize='true')

        for depth, layer in enumerate(self._layers):
            sources = [f"{depth}_{n}" for n in range(layer.neuron_count)] + [f"{depth}_bias"]
            for i, source in enumerate(sources):
                for j in range(layer.output_count):
                    dot.edge(source, f"{depth + 1}_{j}",
                             label=f"{layer.weights[i, j]:.2f}",
                             fontsize='5', penwidth='0.5', arrowsize='0.5')

        if view:
            dot.view(cleanup=True)

        return dot

    def __repr__(self):
        return f"NeuralNetwork(topology={list(self._topology)!r})"
