"""
scalargrad computation graphs: build small expressions, backpropagate, read gradients.

    python examples/computation_graph.py
"""

from scalargrad import Value


# -- Example 1: f(a, b) = a * b + a^3 ----------------------------------------

print("Example 1: f(a, b) = a * b + a^3")

a = Value(2.0, name='a')
b = Value(3.0, name='b')
f = a * b + a ** 3

f.backward()

print(f"  f = {f.data}")
print(f"  df/da = {a.grad} (expected: b + 3*a^2 = 15.0)")
print(f"  df/db = {b.grad} (expected: a = 2.0)\n")


# -- Example 2: f(x) = ReLU(2x - 1)^2 ----------------------------------------

print("Example 2: f(x) = ReLU(2x - 1)^2")

x = Value(1.5, name='x')
activated = (x * 2 - 1).relu()
f = activated ** 2

f.backward()

print(f"  ReLU(2x - 1) = {activated.data}")
print(f"  f = {f.data}")
print(f"  df/dx = {x.grad} (expected: 2 * ReLU(2x - 1) * 2 = 8.0)\n")


# -- Example 3: f(x) = x^2 + x + 1, x used on two paths ----------------------

print("Example 3: f(x) = x^2 + x + 1")

x = Value(3.0, name='x')
f = x * x + x + 1

f.backward()

print(f"  f = {f.data}")
print(f"  df/dx = {x.grad} (expected: 2x + 1 = 7.0)")
