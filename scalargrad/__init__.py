"""
scalargrad: a minimal reverse-mode autograd engine over scalars.

This package provides automatic differentiation for building and training
small neural networks from scalar Values.
"""

from scalargrad.engine import (
    Value,
    add,
    backward,
    build_topo,
    create,
    gradient,
    multiply,
    power,
    relu,
    set_value,
    subtract,
    update,
    value,
    zero_gradient,
)
from scalargrad import nn
from scalargrad.config import TrainingConfig
from scalargrad.utils import draw_dot

__version__ = "0.1.0"
__all__ = [
    "Value",
    "add",
    "backward",
    "build_topo",
    "create",
    "gradient",
    "multiply",
    "power",
    "relu",
    "set_value",
    "subtract",
    "update",
    "value",
    "zero_gradient",
    "nn",
    "TrainingConfig",
    "draw_dot",
]
