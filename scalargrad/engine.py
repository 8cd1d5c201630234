import numpy as np

from scalargrad.ops import Operation, OpKind, local_gradients


class Value:
    """
    Wraps a scalar and tracks the operations that produced it for automatic differentiation.

    The Value class is the core of the autograd engine. It stores data and its gradient,
    and builds a computational graph by recording, for every derived Value, the operation
    and the operand Values it was computed from.

    Example:
        >>> x = Value(2.0)
        >>> y = Value(3.0)
        >>> z = x * y + x
        >>> z.backward()  # Compute gradients
        >>> print(x.grad)  # dz/dx = y + 1 = 4.0
    """

    __slots__ = ('data', 'grad', 'name', '_op', '_prev')

    def __init__(self, data, _children=(), _op=None, name=""):
        """
        Initialize a Value object.

        Args:
            data: The numerical data (int or float)
            _children: Tuple of operand Values, in order (internal use for autograd)
            _op: Operation that created this Value, None for leaves (internal)
            name: Optional name for debugging and visualization
        """
        self.data = float(data)

        # Gradient always starts at zero
        self.grad = 0.0

        self.name = name

        # Operands are kept in order: x * x has two operand slots pointing at x
        self._prev = tuple(_children)
        self._op = _op

    def _combine(self, other, kind):
        other = other if isinstance(other, Value) else Value(other)

        if kind is OpKind.ADD:
            data = self.data + other.data
        else:
            data = self.data * other.data

        return Value(data, (self, other), Operation(kind))

    def __add__(self, other):
        """
        Addition: supports Value + Value and Value + number.

        Example:
            >>> a = Value(1.0)
            >>> c = a + 2  # c.data = 3.0
        """
        return self._combine(other, OpKind.ADD)

    def __mul__(self, other):
        """
        Multiplication: supports Value * Value and Value * number.

        Example:
            >>> a = Value(3.0)
            >>> b = Value(4.0)
            >>> c = a * b  # c.data = 12.0
        """
        return self._combine(other, OpKind.MUL)

    def __pow__(self, other):
        """
        Power operation: raises Value to a constant int/float power.

        A negative base with a non-integer exponent gives nan.

        Example:
            >>> x = Value(3.0)
            >>> y = x ** 2  # y.data = 9.0
        """
        op = Operation(OpKind.POW, other)
        with np.errstate(invalid='ignore', divide='ignore'):
            data = float(np.power(self.data, other))
        return Value(data, (self,), op)

    def relu(self):
        """
        ReLU (Rectified Linear Unit) activation: max(0, x)

        Example:
            >>> x = Value(-1.0)
            >>> y = x.relu()  # y.data = 0.0
        """
        return Value(max(0.0, self.data), (self,), Operation(OpKind.RELU))

    def backward(self):
        """
        Perform backpropagation: compute gradients for all Values in the graph.

        Walks the graph in reverse topological order, seeding this Value with 1 and
        adding each operation's local gradients onto its operands (+=, so a Value
        used by several operations receives the sum of their contributions).

        Gradients are accumulated, not overwritten: each call adds d(self)/d(v) to
        v.grad for every reachable v other than self, whose gradient is set to 1.
        Calling backward() twice without zero_grad() in between therefore doubles
        every gradient below the root. Training uses this to sum gradients over a batch.

        Example:
            >>> x = Value(2.0)
            >>> y = x * 3 + 1
            >>> y.backward()
            >>> print(x.grad)  # dy/dx = 3.0
        """
        topo = build_topo(self)

        # Partial derivatives for this pass only, keyed by node identity.
        # dL/dL = 1
        grads = {id(self): 1.0}

        for v in reversed(topo):
            if v._op is None:
                continue
            out_grad = grads.get(id(v), 0.0)
            for child, g in zip(v._prev, local_gradients(v._op, out_grad, v._prev)):
                grads[id(child)] = grads.get(id(child), 0.0) + g

        for v in topo:
            v.grad += grads.get(id(v), 0.0)
        self.grad = 1.0

    def set_data(self, data):
        """Overwrite the forward value in place. Gradient and provenance are untouched."""
        self.data = float(data)

    def zero_grad(self):
        self.grad = 0.0

    def update(self, learning_rate):
        """Gradient descent step: data <- data - learning_rate * grad."""
        self.data -= learning_rate * self.grad

    @property
    def is_leaf(self):
        return self._op is None

    # Reverse and derived operations (use the basic operations defined above)

    def __neg__(self):
        """Negation: -x = x * -1"""
        return self * -1

    def __radd__(self, other):
        """Right addition: other + self (when other is not a Value)"""
        return Value(other) + self

    def __sub__(self, other):
        """Subtraction: a - b = a + (b * -1)"""
        return self + (-other)

    def __rsub__(self, other):
        """Right subtraction: other - self"""
        return Value(other) + (-self)

    def __rmul__(self, other):
        """Right multiplication: other * self (when other is not a Value)"""
        return Value(other) * self

    def __repr__(self):
        """Return a readable string representation of the Value."""
        name_str = f"'{self.name}' " if self.name else ""
        op_str = f" from {self._op.label}" if self._op else ""
        return f"Value({name_str}data={self.data}, grad={self.grad}{op_str})"


def build_topo(root):
    """
    Topologically sort the graph reachable from root.

    Every operand appears before the Values computed from it, and each Value
    appears exactly once no matter how many times it is used. Values are
    deduplicated by identity, so two separately created Values holding the
    same number are distinct nodes.

    Returns:
        list: Values ordered from leaves to root
    """
    topo = []
    visited = set()

    # Iterative post-order DFS: a node is appended once all its operands are.
    stack = [(root, False)]
    while stack:
        v, expanded = stack.pop()
        if expanded:
            topo.append(v)
            continue
        if id(v) in visited:
            continue
        visited.add(id(v))
        stack.append((v, True))
        for child in reversed(v._prev):
            if id(child) not in visited:
                stack.append((child, False))

    return topo


# Explicit combinators: the same graph-building operations as the operators above

def create(data, name=""):
    """Create a leaf Value with zero gradient."""
    return Value(data, name=name)


def add(a, b):
    a = a if isinstance(a, Value) else Value(a)
    return a + b


def multiply(a, b):
    a = a if isinstance(a, Value) else Value(a)
    return a * b


def subtract(a, b):
    a = a if isinstance(a, Value) else Value(a)
    return a - b


def power(a, exponent):
    a = a if isinstance(a, Value) else Value(a)
    return a ** exponent


def relu(a):
    a = a if isinstance(a, Value) else Value(a)
    return a.relu()


def backward(root):
    root.backward()


def value(node):
    return node.data


def gradient(node):
    return node.grad


def set_value(node, data):
    node.set_data(data)


def zero_gradient(node):
    node.zero_grad()


def update(node, learning_rate):
    node.update(learning_rate)
