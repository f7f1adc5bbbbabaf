# src/pipeline/dag_builder.py — v2
"""DAG builder — build the role execution order from manifest dependencies.

Produces a topologically sorted execution plan with Kahn's algorithm.
Ties between simultaneously ready roles are broken by manifest
declaration order, so the same manifest always yields the same order.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field

import networkx as nx

from swarmcoder.core.errors import CyclicManifestError
from swarmcoder.core.models import Manifest

logger = logging.getLogger(__name__)


@dataclass
class ExecutionPlan:
    """Ordered execution plan for the roles of one manifest."""

    order: list[str] = field(default_factory=list)

    @property
    def total_roles(self) -> int:
        return len(self.order)

    def position(self, role_id: str) -> int:
        return self.order.index(role_id)


def dependency_graph(manifest: Manifest) -> nx.DiGraph:
    """Return the role graph with an edge dependency -> dependent."""
    graph = nx.DiGraph()
    graph.add_nodes_from(manifest.role_ids)
    for role in manifest.roles:
        for dep in role.depends_on:
            graph.add_edge(dep, role.id)
    return graph


def build_plan(manifest: Manifest) -> ExecutionPlan:
    """Build the execution plan for a manifest.

    In-degree counts not-yet-done dependencies. The ready queue is
    seeded with in-degree-zero roles in declaration order; each role
    popped decrements its dependents (also in declaration order),
    enqueueing those that reach zero.

    Raises:
        CyclicManifestError: If some roles never reach in-degree zero.
    """
    in_degree: dict[str, int] = {r.id: len(r.depends_on) for r in manifest.roles}
    queue: deque[str] = deque(rid for rid in manifest.role_ids if in_degree[rid] == 0)
    order: list[str] = []

    while queue:
        role_id = queue.popleft()
        order.append(role_id)
        for dependent in manifest.dependents_of(role_id):
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                queue.append(dependent)

    if len(order) != len(manifest.roles):
        unscheduled = [rid for rid in manifest.role_ids if rid not in order]
        raise CyclicManifestError(unscheduled, _describe_cycle(manifest, unscheduled))

    plan = ExecutionPlan(order=order)
    logger.info("DAG built: %d roles → %s", plan.total_roles, " -> ".join(order))
    return plan


def _describe_cycle(manifest: Manifest, unscheduled: list[str]) -> list[str]:
    """Return one concrete cycle among the unscheduled roles, closed on itself."""
    subgraph = dependency_graph(manifest).subgraph(unscheduled)
    try:
        edges = nx.find_cycle(subgraph)
    except nx.NetworkXNoCycle:
        return []
    path = [u for u, _ in edges]
    path.append(edges[0][0])
    return path
