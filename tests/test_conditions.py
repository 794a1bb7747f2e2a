import pytest

from hypergres.errors import QueryError
from hypergres.query import And, Or, Parameters, Raw, Term, compile_condition


def test_term(test_source):
    params = Parameters()

    assert compile_condition(test_source, Term("id", 5), params) == "test.id = $1"
    assert params.values == [5]


def test_term_operator(test_source):
    params = Parameters()

    assert compile_condition(test_source, Term("age", 18, ">="), params) == "test.age >= $1"


def test_term_with_list_value(test_source):
    params = Parameters()

    sql = compile_condition(test_source, Term("id", [1, 2, 3], "IN"), params)

    assert sql == "test.id IN ($1, $2, $3)"
    assert params.values == [1, 2, 3]


def test_nested_groups(test_source):
    params = Parameters()
    condition = And([
        Term("a", 1),
        Or([Term("b", 2), And([Term("c", 3), Term("d", 4)])]),
    ])

    sql = compile_condition(test_source, condition, params)

    assert sql == "(test.a = $1) AND ((test.b = $2) OR ((test.c = $3) AND (test.d = $4)))"
    assert params.values == [1, 2, 3, 4]


def test_empty_groups(test_source):
    params = Parameters()

    assert compile_condition(test_source, And([]), params) == "TRUE"
    assert compile_condition(test_source, Or([]), params) == "FALSE"
    assert params.values == []


def test_raw(test_source):
    params = Parameters()
    params.add("already bound")

    sql = compile_condition(test_source, Raw("test.a BETWEEN ? AND ?", [1, 10]), params)

    assert sql == "test.a BETWEEN $2 AND $3"
    assert params.values == ["already bound", 1, 10]


def test_raw_single_value(test_source):
    params = Parameters()

    assert compile_condition(test_source, Raw("lower(test.name) = ?", "ada"), params) == "lower(test.name) = $1"
    assert params.values == ["ada"]


def test_raw_marker_mismatch(test_source):
    with pytest.raises(QueryError):
        compile_condition(test_source, Raw("test.a = ? OR test.b = ?", [1]), Parameters())


def test_unknown_condition(test_source):
    with pytest.raises(QueryError):
        compile_condition(test_source, {"field": "a"}, Parameters())


def test_raw_without_values_is_verbatim(test_source):
    params = Parameters()

    assert compile_condition(test_source, Raw("test.data ? 'key'"), params) == "test.data ? 'key'"
    assert compile_condition(test_source, Raw("test.data ?| array['a', 'b']"), params) == "test.data ?| array['a', 'b']"
    assert params.values == []


def test_term_with_empty_list(test_source):
    with pytest.raises(QueryError):
        compile_condition(test_source, Term("id", [], "IN"), Parameters())
