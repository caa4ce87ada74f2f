"""
Activations Package

This package provides the activation functions applied by the neural layers.
The default for every layer is the saturating sigmoid, which returns exactly
1.0 above +10 and exactly 0.0 below -10.

Exported:
    activations:         Dictionary mapping activation function names to functions
    get_activation:      Look up an activation function by name
    SIGMOID_SATURATION:  Magnitude beyond which the sigmoid saturates
    Individual activation functions: sigmoid_activation, tanh_activation,
                                     relu_activation, identity_activation
"""

from evodriver.activations.basic_activations import (
    SIGMOID_SATURATION,
    activations,
    get_activation,
    sigmoid_activation,
    tanh_activation,
    relu_activation,
    identity_activation
)

__all__ = [
    'SIGMOID_SATURATION',
    'activations',
    'get_activation',
    'sigmoid_activation',
    'tanh_activation',
    'relu_activation',
    'identity_activation'
]
