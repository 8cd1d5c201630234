"""
Tests for the autograd engine: graph construction, topological order, backward.
"""

import math

import pytest

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
from scalargrad.nn import Neuron
from scalargrad.ops import OpKind


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def chain_rule_graph():
    """f(a, b) = a * b + a^3 with a = 2, b = 3."""
    a = Value(2.0, name='a')
    b = Value(3.0, name='b')
    f = a * b + a ** 3
    return a, b, f


@pytest.fixture
def fan_out_graph():
    """f(x) = x^2 + x + 1 with x = 3, x used on several paths."""
    x = Value(3.0, name='x')
    f = x * x + x + 1
    return x, f


# ============================================================================
# LEAVES AND ACCESSORS
# ============================================================================

class TestLeaf:
    def test_create_is_leaf_with_zero_grad(self):
        v = create(4.5)
        assert value(v) == 4.5
        assert gradient(v) == 0.0
        assert v.is_leaf
        assert v._op is None
        assert v._prev == ()

    def test_data_is_float(self):
        assert isinstance(Value(3).data, float)

    def test_set_value_keeps_grad_and_provenance(self):
        a = Value(1.0)
        b = a + 2
        b.grad = 5.0
        set_value(b, 10.0)
        assert b.data == 10.0
        assert b.grad == 5.0
        assert b._op.kind is OpKind.ADD
        assert b._prev[0] is a

    def test_zero_gradient(self):
        v = Value(1.0)
        v.grad = 3.0
        zero_gradient(v)
        assert v.grad == 0.0

    def test_update_steps_against_gradient(self):
        v = Value(1.0)
        v.grad = 2.0
        update(v, 0.1)
        assert v.data == pytest.approx(0.8)
        assert v.grad == 2.0

    def test_repr(self):
        a = Value(2.0, name='a')
        assert repr(a) == "Value('a' data=2.0, grad=0.0)"
        assert "from ReLU" in repr(a.relu())


# ============================================================================
# GRAPH CONSTRUCTION
# ============================================================================

class TestGraphBuilding:
    def test_add_records_operands_in_order(self):
        a, b = Value(1.0), Value(2.0)
        c = add(a, b)
        assert c.data == 3.0
        assert c._op.kind is OpKind.ADD
        assert c._prev == (a, b)

    def test_multiply(self):
        a, b = Value(3.0), Value(4.0)
        c = multiply(a, b)
        assert c.data == 12.0
        assert c._op.kind is OpKind.MUL

    def test_same_operand_twice_keeps_both_slots(self):
        x = Value(3.0)
        y = x * x
        assert len(y._prev) == 2
        assert y._prev[0] is x and y._prev[1] is x

    def test_power_exponent_is_baked_into_operation(self):
        a = Value(2.0)
        c = power(a, 3)
        assert c.data == 8.0
        assert c._op.kind is OpKind.POW
        assert c._op.exponent == 3
        assert c._prev == (a,)

    def test_power_rejects_value_exponent(self):
        with pytest.raises(AssertionError):
            Value(2.0) ** Value(3.0)

    def test_power_negative_base_fractional_exponent_is_nan(self):
        assert math.isnan((Value(-4.0) ** 0.5).data)

    def test_relu_forward(self):
        assert relu(Value(-2.0)).data == 0.0
        assert relu(Value(0.0)).data == 0.0
        assert relu(Value(2.5)).data == 2.5

    def test_literal_promotion(self):
        a = Value(2.0)
        for node in (a + 1, 1 + a, a * 3, 3 * a):
            assert isinstance(node, Value)
            leaves = [p for p in node._prev if p is not a]
            assert len(leaves) == 1 and leaves[0].is_leaf
        assert (a + 1).data == 3.0
        assert (1 + a).data == 3.0
        assert (a * 3).data == 6.0
        assert (3 * a).data == 6.0

    def test_combinators_promote_either_side(self):
        a = Value(2.0)
        assert add(1, a).data == 3.0
        assert multiply(a, 4).data == 8.0
        assert subtract(10, a).data == 8.0

    def test_subtraction_is_addition_of_negation(self):
        a, b = Value(5.0), Value(3.0)
        c = a - b
        assert c.data == 2.0
        assert c._op.kind is OpKind.ADD
        neg = c._prev[1]
        assert neg._op.kind is OpKind.MUL
        assert neg._prev[0] is b
        assert neg._prev[1].data == -1.0

    def test_reflected_subtraction_and_negation(self):
        a = Value(2.0)
        assert (10 - a).data == 8.0
        assert (a - 0.5).data == 1.5
        assert (-a).data == -2.0

    def test_forward_uses_current_operand_values(self):
        a = Value(2.0)
        set_value(a, 5.0)
        assert (a * 2).data == 10.0


# ============================================================================
# TOPOLOGICAL ORDER
# ============================================================================

class TestTopologicalOrder:
    def test_each_node_once_operands_first(self, chain_rule_graph):
        a, b, f = chain_rule_graph
        topo = build_topo(f)

        assert len(topo) == len({id(v) for v in topo})
        position = {id(v): i for i, v in enumerate(topo)}
        for v in topo:
            for child in v._prev:
                assert position[id(child)] < position[id(v)]
        assert topo[-1] is f

    def test_node_count(self, chain_rule_graph):
        a, b, f = chain_rule_graph
        # a, b, a*b, a**3, f
        assert len(build_topo(f)) == 5

    def test_fan_out_node_appears_once(self, fan_out_graph):
        x, f = fan_out_graph
        topo = build_topo(f)
        assert sum(1 for v in topo if v is x) == 1

    def test_equal_values_are_distinct_nodes(self):
        a, b = Value(1.0), Value(1.0)
        topo = build_topo(a + b)
        assert len(topo) == 3

    def test_diamond(self):
        x = Value(2.0)
        left = x * 3
        right = x + 1
        top = left * right
        topo = build_topo(top)
        assert len(topo) == 6  # x, 3, left, 1, right, top
        position = {id(v): i for i, v in enumerate(topo)}
        assert position[id(x)] < position[id(left)] < position[id(top)]
        assert position[id(x)] < position[id(right)] < position[id(top)]

    def test_leaf_root(self):
        x = Value(1.0)
        assert build_topo(x) == [x]


# ============================================================================
# BACKWARD
# ============================================================================

class TestBackward:
    def test_chain_rule(self, chain_rule_graph):
        a, b, f = chain_rule_graph
        assert f.data == 14.0
        backward(f)
        assert a.grad == pytest.approx(15.0)
        assert b.grad == pytest.approx(2.0)
        assert f.grad == 1.0

    def test_relu_gating_positive(self):
        x = Value(1.5)
        f = (x * 2 - 1).relu() ** 2
        assert f.data == pytest.approx(4.0)
        f.backward()
        assert x.grad == pytest.approx(8.0)

    @pytest.mark.parametrize("x0", [0.5, 0.2, -3.0])
    def test_relu_gating_non_positive(self, x0):
        # at 0.5 the pre-activation is exactly 0
        x = Value(x0)
        f = (x * 2 - 1).relu() ** 2
        f.backward()
        assert f.data == 0.0
        assert x.grad == 0.0

    def test_fan_out_accumulates(self, fan_out_graph):
        x, f = fan_out_graph
        assert f.data == 13.0
        f.backward()
        assert x.grad == pytest.approx(7.0)

    def test_square_via_self_multiplication(self):
        x = Value(-4.0)
        (x * x).backward()
        assert x.grad == pytest.approx(-8.0)

    def test_power_rule(self):
        x = Value(2.0)
        (x ** -1).backward()
        assert x.grad == pytest.approx(-0.25)

    def test_subtraction_gradients(self):
        a, b = Value(5.0), Value(3.0)
        (a - b).backward()
        assert a.grad == 1.0
        assert b.grad == -1.0

    def test_intermediate_gradients(self, chain_rule_graph):
        a, b, f = chain_rule_graph
        f.backward()
        for child in f._prev:
            assert child.grad == 1.0

    def test_leaf_root(self):
        x = Value(3.0)
        x.backward()
        assert x.grad == 1.0

    def test_unreachable_nodes_untouched(self):
        a, b = Value(1.0), Value(2.0)
        a * 2
        f = b * 3
        f.backward()
        assert a.grad == 0.0
        assert b.grad == 3.0

    def test_zeroing_reproduces_clean_run(self, chain_rule_graph):
        a, b, f = chain_rule_graph
        f.backward()
        for v in build_topo(f):
            zero_gradient(v)
        f.backward()

        a2, b2 = Value(2.0), Value(3.0)
        f2 = a2 * b2 + a2 ** 3
        f2.backward()

        for v, v2 in zip(build_topo(f), build_topo(f2)):
            assert v.grad == v2.grad

    def test_two_backward_calls_double_gradients(self, chain_rule_graph):
        a, b, f = chain_rule_graph
        f.backward()
        first = {id(v): v.grad for v in build_topo(f) if v is not f}
        f.backward()
        for v in build_topo(f):
            if v is not f:
                assert v.grad == 2 * first[id(v)]
        assert a.grad == 30.0
        assert b.grad == 4.0
        assert f.grad == 1.0

    def test_accumulation_across_separate_graphs(self):
        w = Value(2.0)
        (w * 3).backward()
        (w * 4).backward()
        assert w.grad == 7.0


# ============================================================================
# DEEP GRAPHS
# ============================================================================

class TestDeepGraphs:
    def test_long_chain(self):
        x = Value(1.0)
        y = x
        for _ in range(5000):
            y = y + x
        y.backward()
        assert y.data == 5001.0
        assert x.grad == 5001.0
        assert len(build_topo(y)) == 5001  # x and one add per step

    def test_wide_neuron(self):
        n = Neuron(2000, nonlin=False)
        x = [Value(1.0) for _ in range(2000)]
        n(x).backward()
        assert n.b.grad == 1.0
        assert all(xi.grad == wi.data for xi, wi in zip(x, n.w))
