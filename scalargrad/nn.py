"""
Neural network building blocks for scalargrad.

This module composes scalar Values into neurons, layers and multi-layer perceptrons.
"""

import numpy as np
from scalargrad.engine import Value


class Module:
    """
    Base class for all neural network modules.

    Provides common functionality for managing parameters and gradients.
    """

    def zero_grad(self):
        """
        Reset all gradients to zero.

        Call this before each batch: backward() accumulates, so gradients from
        every backward pass since the last zero_grad() are summed.
        """
        for p in self.parameters():
            p.zero_grad()

    def parameters(self):
        """
        Return a list of all trainable parameters (weights and biases).

        Override this in subclasses to return actual parameters.
        """
        return []


class Neuron(Module):
    """
    A single neuron: activation(sum(w_i * x_i) + b)

    Weights are drawn uniformly from [-1, 1), the bias starts at 0.

    Args:
        nin: Number of inputs
        nonlin: If True, apply ReLU activation (default: True)
        rng: Optional source of randomness with a uniform(low, high) method,
             e.g. numpy.random.default_rng(0). Defaults to numpy's global state.

    Example:
        >>> n = Neuron(2, nonlin=False)
        >>> y = n([Value(1.0), Value(2.0)])
    """

    def __init__(self, nin, nonlin=True, rng=None):
        rng = rng if rng is not None else np.random
        self.w = [Value(rng.uniform(-1.0, 1.0)) for _ in range(nin)]
        self.b = Value(0.0)
        self.nonlin = nonlin

    def __call__(self, x):
        """
        Forward pass.

        Args:
            x: Sequence of nin input Values (plain numbers are promoted)

        Returns:
            A single output Value
        """
        if len(x) != len(self.w):
            raise ValueError(f"Neuron expects {len(self.w)} inputs, got {len(x)}")

        act = self.b
        for wi, xi in zip(self.w, x):
            act = act + wi * xi

        return act.relu() if self.nonlin else act

    def parameters(self):
        return self.w + [self.b]

    def __repr__(self):
        return f"{'ReLU' if self.nonlin else 'Linear'}Neuron({len(self.w)})"


class Layer(Module):
    """
    A fully-connected layer: nout neurons all reading the same nin inputs.

    Example:
        >>> layer = Layer(3, 5)  # 3 inputs, 5 outputs with ReLU
        >>> ys = layer([1.0, 2.0, 3.0])  # list of 5 Values
    """

    def __init__(self, nin, nout, nonlin=True, rng=None):
        self.neurons = [Neuron(nin, nonlin=nonlin, rng=rng) for _ in range(nout)]

    def __call__(self, x):
        """Forward pass: one output Value per neuron."""
        return [n(x) for n in self.neurons]

    def parameters(self):
        return [p for n in self.neurons for p in n.parameters()]

    def __repr__(self):
        return f"Layer of [{', '.join(str(n) for n in self.neurons)}]"


class MLP(Module):
    """
    Multi-Layer Perceptron: a sequence of fully-connected layers.

    The last layer has no activation (linear output), suitable for regression.

    Args:
        nin: Number of input features
        nouts: List of output sizes for each layer
               Example: [16, 16, 1] creates 3 layers: input→16→16→1
        rng: Optional source of randomness for weight initialization

    Example:
        >>> mlp = MLP(nin=2, nouts=[16, 16, 1])
        >>> y = mlp([Value(1.0), Value(0.0)])[0]  # Forward pass
        >>> loss = (y - 1.0) ** 2
        >>> mlp.zero_grad()  # Reset gradients
        >>> loss.backward()  # Compute gradients
        >>> # Update parameters (SGD)
        >>> for p in mlp.parameters():
        ...     p.update(learning_rate)
    """

    def __init__(self, nin, nouts, rng=None):
        # Build layer sizes: [input_size, hidden1, hidden2, ..., output_size]
        sz = [nin] + list(nouts)

        # All layers have ReLU except the last one
        self.layers = [
            Layer(sz[i], sz[i + 1], nonlin=(i != len(nouts) - 1), rng=rng)
            for i in range(len(nouts))
        ]

    def __call__(self, x):
        """
        Forward pass: pass input through all layers sequentially.

        Returns:
            List of output Values, one per neuron of the last layer
        """
        for layer in self.layers:
            x = layer(x)
        return x

    def parameters(self):
        """Return all trainable parameters from all layers."""
        return [p for layer in self.layers for p in layer.parameters()]

    def __repr__(self):
        layer_str = '\n  '.join(str(layer) for layer in self.layers)
        return f"MLP[\n  {layer_str}\n]"
