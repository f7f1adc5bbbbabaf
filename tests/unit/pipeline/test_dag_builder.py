# tests/unit/pipeline/test_dag_builder.py — v2
"""Tests for pipeline/dag_builder.py — deterministic topological order."""

from __future__ import annotations

import pytest

from swarmcoder.core.errors import CyclicManifestError, ManifestValidationError
from swarmcoder.core.models import Manifest, parse_manifest
from swarmcoder.pipeline.dag_builder import ExecutionPlan, build_plan, dependency_graph


def _m(*roles: tuple[str, list[str]]) -> Manifest:
    return parse_manifest({
        "project_name": "T",
        "roles": [{"id": rid, "name": rid, "depends_on": deps} for rid, deps in roles],
    })


class TestBuildPlan:
    def test_diamond_order(self, diamond_manifest: Manifest):
        assert build_plan(diamond_manifest).order == ["A", "B", "C", "D"]

    def test_independent_roles_keep_declaration_order(self):
        plan = build_plan(_m(("z", []), ("a", []), ("m", [])))
        assert plan.order == ["z", "a", "m"]

    def test_dependencies_precede_dependents(self):
        m = _m(("qa", ["be", "fe"]), ("fe", ["be"]), ("be", []), ("ops", ["qa"]))
        plan = build_plan(m)
        assert plan.order == ["be", "fe", "qa", "ops"]
        for role in m.roles:
            for dep in role.depends_on:
                assert plan.position(dep) < plan.position(role.id)

    def test_ready_ties_follow_declaration_order(self):
        # c and b become ready together once a is done.
        plan = build_plan(_m(("a", []), ("c", ["a"]), ("b", ["a"])))
        assert plan.order == ["a", "c", "b"]

    def test_deterministic(self, diamond_manifest: Manifest):
        assert build_plan(diamond_manifest).order == build_plan(diamond_manifest).order

    def test_total_roles(self, diamond_manifest: Manifest):
        assert build_plan(diamond_manifest).total_roles == 4


class TestCycles:
    def test_two_node_cycle(self):
        with pytest.raises(CyclicManifestError) as exc_info:
            build_plan(_m(("a", ["b"]), ("b", ["a"])))
        assert exc_info.value.unscheduled == ["a", "b"]
        assert exc_info.value.cycle[0] == exc_info.value.cycle[-1]

    def test_cycle_behind_valid_prefix(self):
        with pytest.raises(CyclicManifestError) as exc_info:
            build_plan(_m(("root", []), ("x", ["root", "y"]), ("y", ["x"])))
        assert exc_info.value.unscheduled == ["x", "y"]

    def test_cycle_is_a_validation_error(self):
        with pytest.raises(ManifestValidationError):
            build_plan(_m(("a", ["a"])))


class TestDependencyGraph:
    def test_edges_point_to_dependents(self, diamond_manifest: Manifest):
        g = dependency_graph(diamond_manifest)
        assert set(g.successors("A")) == {"B", "C"}
        assert set(g.predecessors("D")) == {"B", "C"}

    def test_plan_dataclass(self):
        plan = ExecutionPlan(order=["x", "y"])
        assert plan.position("y") == 1
