from __future__ import annotations

import pytest

from slox.tree import Variable
from slox.types import NIL, Environment, LoxNumber, UndefinedVariable


def test_define_and_get() -> None:
    env = Environment()
    env.define("a", LoxNumber(1.0))

    assert env.get(Variable("a")) == LoxNumber(1.0)


def test_declared_without_value_reads_nil() -> None:
    env = Environment()
    env.define("a")

    assert env.get(Variable("a")) is NIL


def test_get_walks_enclosing_chain() -> None:
    outer = Environment()
    outer.define("a", LoxNumber(1.0))
    inner = Environment(enclosing=Environment(enclosing=outer))

    assert inner.get(Variable("a")) == LoxNumber(1.0)


def test_inner_definition_shadows() -> None:
    outer = Environment()
    outer.define("a", LoxNumber(1.0))
    inner = Environment(enclosing=outer)
    inner.define("a", LoxNumber(2.0))

    assert inner.get(Variable("a")) == LoxNumber(2.0)
    assert outer.get(Variable("a")) == LoxNumber(1.0)


def test_assign_updates_nearest_binding() -> None:
    outer = Environment()
    outer.define("a", LoxNumber(1.0))
    inner = Environment(enclosing=outer)

    inner.assign(Variable("a"), LoxNumber(5.0))

    assert outer.values["a"] == LoxNumber(5.0)
    assert "a" not in inner.values


def test_undefined_lookup_and_assignment() -> None:
    env = Environment(enclosing=Environment())

    with pytest.raises(UndefinedVariable, match="Undefined variable 'zip'."):
        env.get(Variable("zip", 4))
    with pytest.raises(UndefinedVariable) as exc_info:
        env.assign(Variable("zip", 4), NIL)

    assert exc_info.value.line == 4


def test_distance_access() -> None:
    root = Environment()
    root.define("a", LoxNumber(1.0))
    middle = Environment(enclosing=root)
    middle.define("a", LoxNumber(2.0))
    leaf = Environment(enclosing=middle)

    assert leaf.ancestor(2) is root
    assert leaf.get_at(1, Variable("a")) == LoxNumber(2.0)
    assert leaf.get_at(2, Variable("a")) == LoxNumber(1.0)

    leaf.assign_at(2, Variable("a"), LoxNumber(9.0))
    assert root.values["a"] == LoxNumber(9.0)
    assert middle.values["a"] == LoxNumber(2.0)


def test_distance_access_requires_binding_at_that_depth() -> None:
    root = Environment()
    root.define("a", LoxNumber(1.0))
    leaf = Environment(enclosing=root)

    with pytest.raises(UndefinedVariable):
        leaf.get_at(0, Variable("a"))


def test_mutation_visible_to_every_holder() -> None:
    shared = Environment()
    shared.define("n", LoxNumber(0.0))
    first = Environment(enclosing=shared)
    second = Environment(enclosing=shared)

    first.assign(Variable("n"), LoxNumber(3.0))

    assert second.get(Variable("n")) == LoxNumber(3.0)
