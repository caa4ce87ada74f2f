"""
Neural Layer Module

This module implements one fully connected, biased layer of a feedforward
neural network.

Classes:
    NeuralLayer: A layer of neurons fully connected to the neurons of the next layer
"""

from typing import Callable, Sequence

import autograd.numpy as np  # type: ignore

from evodriver.activations import sigmoid_activation
from evodriver.exceptions  import LengthMismatchError

class NeuralLayer:
    """
    A fully connected, biased layer of a feedforward neural network.

    The layer stores the weights of the connections between its own neurons and
    the neurons of the next layer in a matrix of shape (neuron_count + 1, output_count).
    Row i holds the outgoing weights of neuron i; the last row holds the weights of
    the bias, a synthetic input whose value is always 1.

    Processing an input computes, for each output unit j:
        activation(sum_i biased_inputs[i] * weights[i, j])

    Public Attributes:
        activation: Function applied to the weighted sums (saturating sigmoid by default)

    Public Properties:
        neuron_count: Number of neurons in this layer
        output_count: Number of neurons in the next layer
        weights:      The (neuron_count + 1, output_count) weight matrix
        weight_count: Total number of weights, bias included

    Public Methods:
        set_weights(weights):   Load the weights from a flat vector
        process_inputs(inputs): Compute the layer output
    """

    def __init__(self,
                 neuron_count: int,
                 output_count: int,
                 activation  : Callable = sigmoid_activation):
        """
        Create a layer with all weights set to zero.

        Parameters:
            neuron_count: The number of neurons of the layer
            output_count: The number of neurons of the next layer
            activation:   The activation function of the layer
        """
        self._neuron_count: int        = neuron_count
        self._output_count: int        = output_count
        self._weights     : np.ndarray = np.zeros((neuron_count + 1, output_count))
        self.activation   : Callable   = activation

    @property
    def neuron_count(self) -> int:
        """The number of neurons of the layer."""
        return self._neuron_count

    @property
    def output_count(self) -> int:
        """The number of neurons of the next layer."""
        return self._output_count

    @property
    def weights(self) -> np.ndarray:
        """The weight matrix; the last row holds the bias weights."""
        return self._weights

    @property
    def weight_count(self) -> int:
        """The number of weights of the layer, bias weights included."""
        return (self._neuron_count + 1) * self._output_count

    def set_weights(self, weights: Sequence[float]) -> None:
        """
        Set the connection weights from a flat vector.

        The vector is read row by row: first the outgoing weights of the
        first neuron, then those of the second, and so on, the bias last.

        Raises:
            LengthMismatchError: if the vector length differs from 'weight_count'
        """
        if len(weights) != self.weight_count:
            raise LengthMismatchError("Weights count doesn't match layer weight count",
                                      self.weight_count, len(weights))
        self._weights = np.array(weights, dtype=float).reshape(self._neuron_count + 1, self._output_count)

    def process_inputs(self, inputs: Sequence[float]) -> np.ndarray:
        """
        Process the given inputs.

        Parameters:
            inputs: One value per neuron of the layer

        Returns:
            One value per neuron of the next layer

        Raises:
            LengthMismatchError: if the number of inputs differs from 'neuron_count'
        """
        if len(inputs) != self._neuron_count:
            raise LengthMismatchError("Inputs count doesn't match layer neuron count",
                                      self._neuron_count, len(inputs))

        biased_inputs = np.concatenate((np.asarray(inputs, dtype=float), np.ones(1)))
        sums = np.dot(biased_inputs, self._weights)
        return self.activation(sums)

    def __repr__(self):
        return f"NeuralLayer(neuron_count={self._neuron_count}, output_count={self._output_count})"
