"""
Differentiable primitives for scalargrad.

Every derived Value records an Operation describing how it was produced.
The set of operation kinds is closed: the backward pass looks up the local
gradient rule for each kind here, so adding a primitive means adding an
OpKind member and a branch in local_gradients().
"""

import numbers
from enum import Enum

import numpy as np


class OpKind(Enum):
    """The kinds of operations that can appear in a computational graph."""

    ADD = '+'
    MUL = '*'
    POW = '**'
    RELU = 'ReLU'


class Operation:
    """
    Tag stored on a derived Value: the operation kind plus its constant, if any.

    Power carries its exponent here rather than as a second operand node.

    Example:
        >>> Operation(OpKind.POW, 3)
        Operation(**3)
    """

    __slots__ = ('kind', 'exponent')

    def __init__(self, kind, exponent=None):
        if kind is OpKind.POW:
            assert isinstance(exponent, numbers.Real), "Only supporting int/float powers"
        self.kind = kind
        self.exponent = exponent

    @property
    def label(self):
        """Short label used in graph drawings, e.g. '+', '**2', 'ReLU'."""
        if self.kind is OpKind.POW:
            return f'**{self.exponent}'
        return self.kind.value

    def __repr__(self):
        return f"Operation({self.label})"


def local_gradients(op, out_grad, operands):
    """
    Apply the chain rule for a single operation.

    Args:
        op: The Operation that produced the node
        out_grad: Gradient already accumulated on the produced node
        operands: The operand Values, in the order they were combined

    Returns:
        list: One gradient contribution per operand, in operand order
    """
    kind = op.kind

    if kind is OpKind.ADD:
        # d(a+b)/da = 1, d(a+b)/db = 1
        return [out_grad, out_grad]

    if kind is OpKind.MUL:
        # d(a*b)/da = b, d(a*b)/db = a
        a, b = operands
        return [out_grad * b.data, out_grad * a.data]

    if kind is OpKind.POW:
        # d(x^n)/dx = n * x^(n-1)
        (a,) = operands
        e = op.exponent
        with np.errstate(invalid='ignore', divide='ignore'):
            local = float(np.power(a.data, e - 1))
        return [out_grad * e * local]

    if kind is OpKind.RELU:
        # Sub-gradient at exactly zero is 0
        (a,) = operands
        return [out_grad if a.data > 0 else 0.0]

    raise ValueError(f"No gradient rule for operation {op!r}")
