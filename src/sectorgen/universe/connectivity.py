"""
Strong connectivity analysis and repair.

One-way conversion can leave parts of the universe reachable but not
escapable. Strongly connected components are found with Kosaraju's
algorithm (iterative forward DFS for finish order, then BFS over the
reversed graph), and consecutive components are linked until the whole
universe is a single component.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass

from ..core.constants import REPAIR_REGION_WEIGHT
from ..core.logging import get_logger
from .errors import ConnectivityRepairError
from .graph import Adjacency, Sector, SectorEdge, add_lane, has_lane

logger = get_logger(__name__)


def finish_order(edges: Adjacency, sector_ids: Sequence[int]) -> list[int]:
    """
    Depth-first finish order over the forward graph.

    Uses an explicit stack of (sector, lane iterator) frames so that deep
    graphs never hit the interpreter recursion limit.
    """
    visited: set[int] = set()
    order: list[int] = []

    for root in sector_ids:
        if root in visited:
            continue
        visited.add(root)
        stack = [(root, iter(edges.get(root, ())))]

        while stack:
            node, lanes = stack[-1]
            for edge in lanes:
                if edge.to_id not in visited:
                    visited.add(edge.to_id)
                    stack.append((edge.to_id, iter(edges.get(edge.to_id, ()))))
                    break
            else:
                stack.pop()
                order.append(node)

    return order


def reverse_adjacency(edges: Adjacency, sector_ids: Sequence[int]) -> dict[int, list[int]]:
    """Invert every lane: result[to] lists every ``from`` with a lane into ``to``."""
    reverse: dict[int, list[int]] = {sector_id: [] for sector_id in sector_ids}
    for from_id in sector_ids:
        for edge in edges.get(from_id, ()):
            reverse.setdefault(edge.to_id, []).append(from_id)
    return reverse


def strongly_connected_components(
    edges: Adjacency,
    sector_ids: Sequence[int],
) -> list[list[int]]:
    """
    Compute all strongly connected components (Kosaraju).

    Components are returned in the order they are discovered while walking
    the reverse finish order, which is a topological order of the
    condensation: no lane leads from a later component into an earlier one.

    Args:
        edges: Forward adjacency
        sector_ids: Every sector id in the graph

    Returns:
        Components as lists of sector ids
    """
    order = finish_order(edges, sector_ids)
    reverse = reverse_adjacency(edges, sector_ids)

    assigned: set[int] = set()
    components: list[list[int]] = []

    for start in reversed(order):
        if start in assigned:
            continue
        assigned.add(start)
        component = [start]
        queue = deque([start])
        while queue:
            node = queue.popleft()
            for prev in reverse.get(node, ()):
                if prev not in assigned:
                    assigned.add(prev)
                    component.append(prev)
                    queue.append(prev)
        components.append(component)

    return components


@dataclass
class RepairReport:
    """What the repair pass changed."""

    components_before: int
    lanes_restored: int = 0
    lanes_added: int = 0

    @property
    def repaired(self) -> bool:
        return self.lanes_restored > 0 or self.lanes_added > 0


def _restore_one_way(
    edges: Adjacency,
    components: list[list[int]],
    component_of: dict[int, int],
    first: int,
    second: int,
    max_degree: int,
) -> bool:
    """
    Make an existing one-way lane between two components bidirectional.

    Looks for a one-way lane from ``second`` into ``first``, then from
    ``first`` into ``second``, whose target can still take another outgoing
    lane. The lane is flagged bidirectional and its mirror entry is added.
    """
    for source, target in ((second, first), (first, second)):
        for from_id in components[source]:
            for edge in edges[from_id]:
                if not edge.one_way or component_of[edge.to_id] != target:
                    continue
                if len(edges[edge.to_id]) >= max_degree:
                    continue
                edge.one_way = False
                edges[edge.to_id].append(SectorEdge(edge.to_id, from_id, False))
                return True
    return False


def _closest_pair(
    sectors: list[Sector],
    edges: Adjacency,
    first: list[int],
    second: list[int],
    max_degree: int,
) -> tuple[int, int]:
    """
    Pick one sector from each component to join with a new lane.

    Both endpoints must be below the lane cap. The pair minimizing
    ``|region_a - region_b| * 1000 + |id_a - id_b|`` wins; ties keep the
    first pair found in ascending id order.

    Raises:
        ConnectivityRepairError: If either component has no open sector
    """
    open_first = sorted(s for s in first if len(edges[s]) < max_degree)
    open_second = sorted(s for s in second if len(edges[s]) < max_degree)
    if not open_first or not open_second:
        raise ConnectivityRepairError(
            "Cannot link components: every sector of one component is at the "
            f"lane cap ({max_degree})"
        )

    best: tuple[int, int] | None = None
    best_cost = 0
    for a in open_first:
        region_a = sectors[a - 1].region_id
        for b in open_second:
            cost = abs(region_a - sectors[b - 1].region_id) * REPAIR_REGION_WEIGHT + abs(a - b)
            if best is None or cost < best_cost:
                best = (a, b)
                best_cost = cost
    if best is None:
        raise ConnectivityRepairError("Cannot link components: no candidate pair found")
    return best


def _link_components(
    sectors: list[Sector],
    edges: Adjacency,
    first: list[int],
    second: list[int],
    max_degree: int,
) -> bool:
    """
    Join two components with a fresh bidirectional lane.

    Returns:
        True if a lane entry was added, False if the chosen pair was
        already linked both ways
    """
    a, b = _closest_pair(sectors, edges, first, second, max_degree)
    if has_lane(edges, a, b) and has_lane(edges, b, a):
        return False
    if has_lane(edges, a, b):
        # Existing a -> b entry: complete it rather than duplicating it
        for edge in edges[a]:
            if edge.to_id == b:
                edge.one_way = False
        edges[b].append(SectorEdge(b, a, False))
        return True
    if has_lane(edges, b, a):
        for edge in edges[b]:
            if edge.to_id == a:
                edge.one_way = False
        edges[a].append(SectorEdge(a, b, False))
        return True
    return add_lane(edges, a, b)


def repair_strong_connectivity(
    sectors: list[Sector],
    edges: Adjacency,
    max_degree: int,
) -> RepairReport:
    """
    Make the universe a single strongly connected component.

    For each consecutive pair of components, an existing one-way lane
    between them is made bidirectional if possible; otherwise a fresh
    bidirectional lane joins the closest open pair of sectors. A final lane
    joins the last component to the first, closing the chain into a cycle.

    Args:
        sectors: Sectors ordered by id
        edges: Adjacency (mutated)
        max_degree: Lane cap every endpoint must respect

    Returns:
        RepairReport with the component count before repair
    """
    sector_ids = [s.id for s in sectors]
    components = strongly_connected_components(edges, sector_ids)
    report = RepairReport(components_before=len(components))

    if len(components) <= 1:
        return report

    component_of = {
        sector_id: idx for idx, members in enumerate(components) for sector_id in members
    }

    for i in range(1, len(components)):
        if _restore_one_way(edges, components, component_of, i - 1, i, max_degree):
            report.lanes_restored += 1
        elif _link_components(sectors, edges, components[i - 1], components[i], max_degree):
            report.lanes_added += 1

    if _link_components(sectors, edges, components[-1], components[0], max_degree):
        report.lanes_added += 1

    logger.debug(
        "Repaired %d components: %d lanes restored, %d lanes added",
        report.components_before,
        report.lanes_restored,
        report.lanes_added,
    )
    return report
