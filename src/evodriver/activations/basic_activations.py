import autograd.numpy as np  # type: ignore

# Beyond this magnitude the sigmoid is treated as fully saturated
SIGMOID_SATURATION = 10.0

def sigmoid_activation(z):
    # clipping only keeps exp() quiet on the branches 'where' discards
    z_safe = np.clip(z, -SIGMOID_SATURATION, SIGMOID_SATURATION)
    return np.where(z > SIGMOID_SATURATION, 1.0,
                    np.where(z < -SIGMOID_SATURATION, 0.0, 1.0 / (1.0 + np.exp(-z_safe))))

def tanh_activation(z):
    return np.tanh(z)

def relu_activation(z):
    return np.maximum(0.0, z)

def identity_activation(z):
    return z

activations = {
    "sigmoid" : sigmoid_activation,
    "tanh"    : tanh_activation,
    "relu"    : relu_activation,
    "identity": identity_activation
    }

def get_activation(name: str):
    """
    Look up an activation function by name.

    Raises:
        ValueError: if no activation is registered under 'name'
    """
    try:
        return activations[name]
    except KeyError:
        raise ValueError(f"Invalid activation function '{name}'") from None
