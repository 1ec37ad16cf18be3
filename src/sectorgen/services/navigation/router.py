"""
Navigation Service Router.

Shortest-path routing shared by the generator (harmony corridors) and by
every gameplay consumer (movement validation, trade-route pathing, caravan
simulation, scouting range). All functions here are stateless and safe to
call concurrently against the same immutable universe.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ...core.constants import DEFAULT_MAX_ROUTE_DEPTH
from .errors import RouteNotFoundError, SectorNotFoundError

if TYPE_CHECKING:
    from ...universe.graph import SectorEdge, UniverseGraph


def find_shortest_path(
    edges: Mapping[int, Iterable[SectorEdge]],
    start: int,
    end: int,
    max_depth: int = DEFAULT_MAX_ROUTE_DEPTH,
) -> list[int] | None:
    """
    Breadth-first shortest path over directed lanes.

    Args:
        edges: Outgoing lanes keyed by sector id
        start: Origin sector id
        end: Destination sector id
        max_depth: Paths holding more than this many sectors are not expanded

    Returns:
        Sector ids from ``start`` to ``end`` inclusive, ``[start]`` when
        ``start == end``, or None when no path exists within the bound.

    Note:
        The search stops as soon as ``end`` is seen as a neighbor, so a
        direct lane returns ``[start, end]``.
    """
    if start == end:
        return [start]

    parents: dict[int, int] = {start: start}
    queue: deque[tuple[int, int]] = deque([(start, 1)])

    while queue:
        node, length = queue.popleft()
        if length > max_depth:
            continue

        for edge in edges.get(node, ()):
            nxt = edge.to_id
            if nxt in parents:
                continue
            parents[nxt] = node
            if nxt == end:
                return _walk_back(parents, start, end)
            queue.append((nxt, length + 1))

    return None


def _walk_back(parents: dict[int, int], start: int, end: int) -> list[int]:
    path = [end]
    while path[-1] != start:
        path.append(parents[path[-1]])
    path.reverse()
    return path


def sectors_within(
    edges: Mapping[int, Iterable[SectorEdge]],
    start: int,
    max_jumps: int,
) -> dict[int, int]:
    """
    Sectors reachable from ``start`` in at most ``max_jumps`` jumps.

    Returns:
        Mapping of sector id -> jump count (``start`` maps to 0)
    """
    distances = {start: 0}
    queue = deque([start])
    while queue:
        node = queue.popleft()
        depth = distances[node]
        if depth >= max_jumps:
            continue
        for edge in edges.get(node, ()):
            if edge.to_id not in distances:
                distances[edge.to_id] = depth + 1
                queue.append(edge.to_id)
    return distances


@dataclass
class NavigationService:
    """
    Route calculations against one generated universe.

    Example:
        service = NavigationService(universe)
        path = service.calculate_route(12, 480)
    """

    universe: UniverseGraph
    max_depth: int = DEFAULT_MAX_ROUTE_DEPTH

    def _check_sector(self, sector_id: int) -> None:
        if not self.universe.has_sector(sector_id):
            raise SectorNotFoundError(sector_id)

    def calculate_route(
        self,
        origin: int,
        destination: int,
        max_depth: int | None = None,
    ) -> list[int] | None:
        """
        Calculate the shortest route between two sectors.

        Returns:
            Sector ids from origin to destination, or None if unreachable
            within the depth bound

        Raises:
            SectorNotFoundError: If either sector does not exist
        """
        self._check_sector(origin)
        self._check_sector(destination)
        depth = self.max_depth if max_depth is None else max_depth
        return find_shortest_path(self.universe.edges, origin, destination, depth)

    def require_route(
        self,
        origin: int,
        destination: int,
        max_depth: int | None = None,
    ) -> list[int]:
        """
        Like calculate_route, but raise when no route exists.

        Raises:
            RouteNotFoundError: If the destination is unreachable within the bound
        """
        path = self.calculate_route(origin, destination, max_depth)
        if path is None:
            depth = self.max_depth if max_depth is None else max_depth
            raise RouteNotFoundError(origin, destination, f"no path within {depth} sectors")
        return path

    def jump_distance(self, origin: int, destination: int) -> int | None:
        """Number of jumps on the shortest route, or None if unreachable."""
        path = self.calculate_route(origin, destination)
        return None if path is None else len(path) - 1

    def scan_range(self, origin: int, max_jumps: int) -> dict[int, int]:
        """
        Sectors within ``max_jumps`` of origin, with their jump counts.

        Raises:
            SectorNotFoundError: If origin does not exist
        """
        self._check_sector(origin)
        return sectors_within(self.universe.edges, origin, max_jumps)

    def is_adjacent(self, origin: int, destination: int) -> bool:
        """Whether a single jump leads from origin to destination."""
        self._check_sector(origin)
        return destination in self.universe.neighbors(origin)
