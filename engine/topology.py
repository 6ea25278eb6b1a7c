"""Board topologies: the 5x5 Bagh-Chal grid and the Aadu Puli graph.

A topology is an arena of positions addressed by integer index. Adjacency is
stored as index tuples and the jump relation as ``(tiger, goat, landing)``
triples, both fixed at construction. Boards share their topology with every
clone, so nothing here is ever mutated after ``__init__``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Sequence, Tuple

from engine import aadu_puli
from engine.pieces import TopologyKind

Coord = Tuple[float, float]
JumpTriple = Tuple[int, int, int]

GRID_SIZE = 5
GRID_REQUIRED_CAPTURES = 5
GRID_MAX_PLACEMENTS = 20

# (dx, dy) in the order neighbours are listed; diagonals last.
_CARDINAL_STEPS = ((-1, 0), (1, 0), (0, -1), (0, 1))
_DIAGONAL_STEPS = ((-1, -1), (-1, 1), (1, -1), (1, 1))


class Topology(ABC):
    """Fixed set of positions with adjacency and jump rules."""

    kind: TopologyKind

    def __init__(
        self,
        coords: Sequence[Coord],
        neighbors: Sequence[Sequence[int]],
        triples: Iterable[JumpTriple],
        tiger_starts: Sequence[int],
        required_captures: int,
        max_placements: int,
    ) -> None:
        if len(coords) != len(neighbors):
            raise ValueError("Every position needs a coordinate and a neighbour list.")
        self._coords: Tuple[Coord, ...] = tuple(coords)
        self._neighbors: Tuple[Tuple[int, ...], ...] = tuple(tuple(links) for links in neighbors)
        self._neighbor_sets: Tuple[FrozenSet[int], ...] = tuple(frozenset(links) for links in self._neighbors)
        self._check_adjacency()

        self._landing_by_pair: Dict[Tuple[int, int], int] = {}
        self._victim_by_pair: Dict[Tuple[int, int], int] = {}
        for origin, victim, landing in triples:
            self._check_index(origin, victim, landing)
            if victim not in self._neighbor_sets[origin] or landing not in self._neighbor_sets[victim]:
                raise ValueError(f"Jump ({origin}, {victim}, {landing}) does not follow board lines.")
            if landing == origin or landing in self._neighbor_sets[origin]:
                raise ValueError(f"Jump ({origin}, {victim}, {landing}) lands next to its origin.")
            self._landing_by_pair[(origin, victim)] = landing
            self._victim_by_pair[(origin, landing)] = victim

        self._check_index(*tiger_starts)
        if len(set(tiger_starts)) != len(tiger_starts):
            raise ValueError("Tiger start positions must be distinct.")
        self.tiger_starts: Tuple[int, ...] = tuple(tiger_starts)
        self.required_captures = required_captures
        self.max_placements = max_placements

        xs = [coord[0] for coord in self._coords]
        ys = [coord[1] for coord in self._coords]
        self._centroid: Coord = (sum(xs) / len(xs), sum(ys) / len(ys))

    @property
    def size(self) -> int:
        return len(self._coords)

    def positions(self) -> range:
        return range(self.size)

    def adjacent_of(self, index: int) -> Tuple[int, ...]:
        """Neighbours of ``index`` in their fixed construction order."""
        return self._neighbors[index]

    def are_adjacent(self, a: int, b: int) -> bool:
        return b in self._neighbor_sets[a]

    def coord_of(self, index: int) -> Coord:
        return self._coords[index]

    def landing_for(self, origin: int, victim: int) -> Optional[int]:
        """Landing position when jumping from ``origin`` over ``victim``."""
        return self._landing_by_pair.get((origin, victim))

    def victim_for(self, origin: int, landing: int) -> Optional[int]:
        """Position jumped over when moving from ``origin`` to ``landing``."""
        return self._victim_by_pair.get((origin, landing))

    def is_capture(self, origin: int, target: int) -> bool:
        if self.are_adjacent(origin, target):
            return False
        return (origin, target) in self._victim_by_pair

    def jump_triples(self) -> Iterator[JumpTriple]:
        for (origin, victim), landing in self._landing_by_pair.items():
            yield origin, victim, landing

    def degree(self, index: int) -> int:
        return len(self._neighbors[index])

    def center_distance(self, index: int) -> float:
        """Squared distance from ``index`` to the centroid of the board."""
        x, y = self._coords[index]
        cx, cy = self._centroid
        return (x - cx) ** 2 + (y - cy) ** 2

    def display_rows(self) -> List[List[int]]:
        """Positions grouped into rows by display coordinate, top to bottom."""
        rows: Dict[float, List[int]] = {}
        for index, (_, y) in enumerate(self._coords):
            rows.setdefault(y, []).append(index)
        return [sorted(rows[y], key=lambda idx: self._coords[idx][0]) for y in sorted(rows)]

    @abstractmethod
    def index_of(self, key: object) -> int:
        """Map a user-facing key (coordinates or node id) to an index."""

    @abstractmethod
    def is_boundary(self, index: int) -> bool:
        """Return whether the position lies on the outside of the board."""

    @abstractmethod
    def label(self, index: int) -> str:
        """Human-readable name of a position."""

    def _check_index(self, *indexes: int) -> None:
        for index in indexes:
            if not 0 <= index < self.size:
                raise ValueError(f"Position index out of range: {index}")

    def _check_adjacency(self) -> None:
        for index, links in enumerate(self._neighbors):
            self._check_index(*links)
            if index in self._neighbor_sets[index]:
                raise ValueError(f"Position {index} is listed as its own neighbour.")
            for other in links:
                if index not in self._neighbor_sets[other]:
                    raise ValueError(f"Adjacency is not symmetric between {index} and {other}.")


class GridTopology(Topology):
    """Square grid where diagonals exist only at marked intersections."""

    kind = TopologyKind.GRID

    def __init__(
        self,
        size: int = GRID_SIZE,
        diagonal_mask: Optional[Sequence[Sequence[bool]]] = None,
        tiger_starts: Optional[Sequence[Tuple[int, int]]] = None,
        required_captures: int = GRID_REQUIRED_CAPTURES,
        max_placements: int = GRID_MAX_PLACEMENTS,
    ) -> None:
        self.grid_size = size
        if diagonal_mask is None:
            # Traditional board: diagonals cross where x + y is even.
            diagonal_mask = [[(x + y) % 2 == 0 for y in range(size)] for x in range(size)]
        self._diagonal_mask = tuple(tuple(bool(cell) for cell in row) for row in diagonal_mask)

        coords: List[Coord] = [(x, y) for x in range(size) for y in range(size)]
        neighbors = [self._grid_neighbors(x, y) for x, y in coords]
        if tiger_starts is None:
            last = size - 1
            tiger_starts = [(0, 0), (0, last), (last, 0), (last, last)]
        starts = [x * size + y for x, y in tiger_starts]
        super().__init__(
            coords=coords,
            neighbors=neighbors,
            triples=self._mirror_jumps(neighbors),
            tiger_starts=starts,
            required_captures=required_captures,
            max_placements=max_placements,
        )

    def index_of(self, key: object) -> int:
        x, y = key  # type: ignore[misc]
        if not (0 <= x < self.grid_size and 0 <= y < self.grid_size):
            raise ValueError(f"Grid coordinate out of bounds: {key}")
        return x * self.grid_size + y

    def xy(self, index: int) -> Tuple[int, int]:
        return divmod(index, self.grid_size)

    def display_rows(self) -> List[List[int]]:
        return [[x * self.grid_size + y for y in range(self.grid_size)] for x in range(self.grid_size)]

    def is_boundary(self, index: int) -> bool:
        x, y = self.xy(index)
        last = self.grid_size - 1
        return x in (0, last) or y in (0, last)

    def label(self, index: int) -> str:
        x, y = self.xy(index)
        return f"({x},{y})"

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.grid_size and 0 <= y < self.grid_size

    def _grid_neighbors(self, x: int, y: int) -> List[int]:
        links: List[int] = []
        for dx, dy in _CARDINAL_STEPS:
            nx, ny = x + dx, y + dy
            if self._in_bounds(nx, ny):
                links.append(nx * self.grid_size + ny)
        if self._diagonal_mask[x][y]:
            for dx, dy in _DIAGONAL_STEPS:
                nx, ny = x + dx, y + dy
                if self._in_bounds(nx, ny) and self._diagonal_mask[nx][ny]:
                    links.append(nx * self.grid_size + ny)
        return links

    def _mirror_jumps(self, neighbors: Sequence[Sequence[int]]) -> List[JumpTriple]:
        """Jump over a neighbour onto the cell mirrored through it."""
        triples: List[JumpTriple] = []
        for origin, links in enumerate(neighbors):
            ox, oy = divmod(origin, self.grid_size)
            for victim in links:
                vx, vy = divmod(victim, self.grid_size)
                lx, ly = 2 * vx - ox, 2 * vy - oy
                if not self._in_bounds(lx, ly):
                    continue
                landing = lx * self.grid_size + ly
                if landing in neighbors[victim]:
                    triples.append((origin, victim, landing))
        return triples


@dataclass(frozen=True)
class GraphNode:
    """A graph position: stable id plus display coordinates."""

    node_id: int
    position: Coord


class GraphTopology(Topology):
    """Arbitrary graph whose edges and jumps come from board data."""

    kind = TopologyKind.GRAPH

    def __init__(
        self,
        nodes: Sequence[GraphNode],
        edges: Iterable[Tuple[int, int]],
        triples: Iterable[JumpTriple],
        tiger_starts: Sequence[int],
        required_captures: int = aadu_puli.REQUIRED_CAPTURES,
        max_placements: int = aadu_puli.MAX_PLACEMENTS,
    ) -> None:
        self.nodes: Tuple[GraphNode, ...] = tuple(nodes)
        self._index_by_id: Dict[int, int] = {node.node_id: idx for idx, node in enumerate(self.nodes)}
        if len(self._index_by_id) != len(self.nodes):
            raise ValueError("Graph node ids must be unique.")

        neighbors: List[List[int]] = [[] for _ in self.nodes]
        for a_id, b_id in edges:
            a, b = self.index_of(a_id), self.index_of(b_id)
            if b not in neighbors[a]:
                neighbors[a].append(b)
            if a not in neighbors[b]:
                neighbors[b].append(a)

        super().__init__(
            coords=[node.position for node in self.nodes],
            neighbors=neighbors,
            triples=[
                (self.index_of(t), self.index_of(g), self.index_of(l)) for t, g, l in triples
            ],
            tiger_starts=[self.index_of(node_id) for node_id in tiger_starts],
            required_captures=required_captures,
            max_placements=max_placements,
        )

    def index_of(self, key: object) -> int:
        try:
            return self._index_by_id[key]  # type: ignore[index]
        except KeyError as exc:
            raise ValueError(f"Unknown node id: {key}") from exc

    def node_id(self, index: int) -> int:
        return self.nodes[index].node_id

    def is_boundary(self, index: int) -> bool:
        # Wing and bottom-row points have at most three lines through them.
        return self.degree(index) <= 3

    def label(self, index: int) -> str:
        return str(self.nodes[index].node_id)


def aadu_puli_topology() -> GraphTopology:
    """Build the 23-point Aadu Puli board."""
    nodes = [GraphNode(node_id=node_id, position=pos) for node_id, pos in aadu_puli.NODE_POSITIONS.items()]
    return GraphTopology(
        nodes=nodes,
        edges=aadu_puli.edges(),
        triples=aadu_puli.jump_triples(),
        tiger_starts=aadu_puli.TIGER_STARTS,
    )


def build_topology(kind: TopologyKind | str) -> Topology:
    """Construct a fresh topology of the requested kind."""
    kind = TopologyKind(kind)
    if kind is TopologyKind.GRID:
        return GridTopology()
    return aadu_puli_topology()
