"""
Tests for independence queries and variable elimination.
"""

import pytest

from bnquery.m4 import (
    QueryResult,
    independence_query,
    naive_exact_inference,
    prune_independent,
    relevant_variables,
    round_half_up,
    variable_elimination,
)


class TestIndependenceQuery:
    def test_directly_connected(self, toy_bn):
        assert not independence_query(toy_bn, "X", "Y")
        assert not independence_query(toy_bn, "Y", "X")

    def test_collider(self, collider_bn):
        assert independence_query(collider_bn, "X", "Z", set())
        assert not independence_query(collider_bn, "X", "Z", {"Y"})

    def test_alarm(self, alarm_bn):
        assert independence_query(alarm_bn, "B", "E")
        assert not independence_query(alarm_bn, "B", "E", {"J"})
        assert not independence_query(alarm_bn, "J", "M")
        assert independence_query(alarm_bn, "J", "M", {"A"})
        assert independence_query(alarm_bn, "B", "J", {"A"})

    def test_unknown_variable(self, toy_bn):
        with pytest.raises(ValueError):
            independence_query(toy_bn, "X", "W")


class TestRelevance:
    def test_ancestral_closure(self, alarm_bn):
        assert relevant_variables(alarm_bn, "B", {"J": "T", "M": "T"}) == ["B", "J", "A", "E", "M"]

    def test_prune(self, alarm_bn):
        evidence = {"B": "T"}
        relevant = relevant_variables(alarm_bn, "J", evidence)
        assert relevant == ["J", "A", "B", "E"]
        # B is observed and a root, so nothing flows from it to J
        assert prune_independent(alarm_bn, relevant, "J", evidence) == ["J", "A", "E"]

    def test_nothing_to_prune(self, collider_bn):
        assert prune_independent(collider_bn, ["Y", "X", "Z"], "Y", {}) == ["Y", "X", "Z"]


class TestVariableElimination:
    def test_toy(self, toy_bn):
        result = variable_elimination(toy_bn, "Y", "T", {}, ["X"])
        assert result == QueryResult(0.31, 3, 4)

    def test_toy_with_evidence(self, toy_bn):
        result = variable_elimination(toy_bn, "X", "T", {"Y": "T"}, [])
        assert result.probability == pytest.approx(0.77419)
        assert result.additions == 1
        assert result.multiplications == 2

    def test_alarm(self, alarm_bn):
        evidence = {"J": "T", "M": "T"}
        assert variable_elimination(alarm_bn, "B", "T", evidence, ["A", "E"]) == QueryResult(0.28417, 7, 16)
        assert variable_elimination(alarm_bn, "B", "T", evidence, ["E", "A"]) == QueryResult(0.28417, 7, 16)

    def test_alarm_pruned_evidence(self, alarm_bn):
        result = variable_elimination(alarm_bn, "J", "T", {"B": "T"}, ["A", "E", "M"])
        assert result == QueryResult(0.84902, 7, 12)

    def test_three_valued(self, three_valued_bn):
        assert variable_elimination(three_valued_bn, "B", "T", {}, ["A"]) == QueryResult(0.455, 3, 6)
        assert variable_elimination(three_valued_bn, "A", "a2", {"B": "F"}, []) == QueryResult(0.55046, 2, 3)

    def test_irrelevant_rvs_are_skipped(self, collider_bn):
        assert variable_elimination(collider_bn, "X", "T", {}, ["Y", "Z"]) == QueryResult(0.4, 1, 0)

    def test_trace(self, alarm_bn):
        trace = []
        variable_elimination(alarm_bn, "B", "T", {"J": "T", "M": "T"}, ["A", "E"], trace=trace)
        assert [rv for rv, _ in trace] == ["A", "E"]
        assert set(trace[0][1]) == {"A", "B", "E"}
        assert set(trace[1][1]) == {"B", "E"}

    @pytest.mark.parametrize("query, evidence", [
        ("B", {"J": "T", "M": "T"}),
        ("E", {"J": "T"}),
        ("A", {"B": "F", "M": "T"}),
        ("M", {}),
        ("J", {"E": "T", "B": "F"}),
    ])
    def test_agrees_with_naive_inference(self, alarm_bn, query, evidence):
        order = [rv for rv in ["B", "E", "A", "J", "M"] if rv != query and rv not in evidence]
        expected = naive_exact_inference(alarm_bn, query, evidence)
        for outcome in ("T", "F"):
            result = variable_elimination(alarm_bn, query, outcome, evidence, order)
            assert result.probability == pytest.approx(expected.lookup(query, outcome), abs=1e-5)

    def test_unknown_outcome(self, toy_bn):
        with pytest.raises(ValueError):
            variable_elimination(toy_bn, "Y", "maybe", {}, ["X"])

    def test_unknown_evidence(self, toy_bn):
        with pytest.raises(ValueError):
            variable_elimination(toy_bn, "Y", "T", {"W": "T"}, ["X"])

    def test_query_variable_in_evidence(self, alarm_bn):
        with pytest.raises(ValueError):
            variable_elimination(alarm_bn, "B", "T", {"B": "T"}, ["A", "E"])
        with pytest.raises(ValueError):
            naive_exact_inference(alarm_bn, "B", {"B": "T"})

    def test_network_is_not_modified(self, alarm_bn):
        cpds = {rv: alarm_bn.cpd(rv).copy() for rv in alarm_bn.iternodes()}
        variable_elimination(alarm_bn, "B", "T", {"J": "T", "M": "T"}, ["A", "E"])
        for rv, cpd in cpds.items():
            assert alarm_bn.cpd(rv) == cpd


class TestNaiveExactInference:
    def test_toy(self, toy_bn):
        posterior = naive_exact_inference(toy_bn, "Y")
        assert posterior.scope == ("Y",)
        assert posterior.lookup("Y", "T") == pytest.approx(0.31)

    def test_with_evidence(self, toy_bn):
        posterior = naive_exact_inference(toy_bn, "X", {"Y": "T"})
        assert posterior.lookup("X", "T") == pytest.approx(0.24 / 0.31)


class TestRoundHalfUp:
    @pytest.mark.parametrize("p, expected", [
        (0.123455, 0.12346),
        (0.123454, 0.12345),
        (0.000005, 0.00001),
        (0.31, 0.31),
        (1.0, 1.0),
    ])
    def test_ties_go_up(self, p, expected):
        assert round_half_up(p) == expected

    def test_digits(self):
        assert round_half_up(0.125, 2) == 0.13
