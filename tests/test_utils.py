"""
Tests for graph tracing and Graphviz output.
"""

import pytest

from scalargrad.engine import Value
from scalargrad.utils import draw_dot, trace


def test_trace_nodes_and_edges():
    x = Value(2.0)
    y = Value(3.0)
    xy = x * y
    z = xy + x
    nodes, edges = trace(z)
    assert nodes == {x, y, xy, z}
    assert edges == {(x, xy), (y, xy), (xy, z), (x, z)}


def test_draw_dot_source():
    a = Value(2.0, name='a')
    b = Value(-3.0, name='b')
    c = (a * b).relu()
    c.backward()

    dot = draw_dot(c, rankdir='TB')
    src = dot.source

    assert 'rankdir=TB' in src
    assert 'data 2.0000' in src
    assert 'grad -3.0000' not in src  # relu gate closed: a.grad == 0
    assert 'ReLU' in src
    assert str(id(a)) in src


def test_draw_dot_rejects_bad_rankdir():
    with pytest.raises(AssertionError):
        draw_dot(Value(1.0), rankdir='RL')


def test_trace_deep_chain():
    x = Value(1.0)
    y = x
    for _ in range(5000):
        y = y * 1.0
    nodes, edges = trace(y)
    assert len(nodes) == 1 + 2 * 5000
    assert len(edges) == 2 * 5000
