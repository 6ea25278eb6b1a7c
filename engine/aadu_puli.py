"""Board definition for Aadu Puli Aatam (lambs and tigers).

The board is a triangle cut by four rays from the apex and four horizontal
lines, with a rectangle of "wing" points on either side of the upper three
lines. Every node lists its neighbours together with the landing node when a
tiger jumps over that neighbour. ``None`` means there is no straight-line
landing beyond the neighbour.

Node ids::

                        0
        1 ---- 2 -- 3 -- 4 -- 5 ---- 6
        |                            |
        7 --- 8 --- 9 -- 10 -- 11 -- 12
        |                            |
        13 - 14 --- 15 -- 16 --- 17 - 18
             |                   |
             19 --- 20 -- 21 --- 22
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class Edge:
    """Directed neighbour relation with an optional jump landing."""

    neighbor: int
    landing: Optional[int]


# fmt: off
NODE_POSITIONS: Dict[int, Tuple[float, float]] = {
    0:  (3.0, 0.0),
    1:  (-0.5, 1.0), 2:  (2.25, 1.0), 3:  (2.75, 1.0), 4:  (3.25, 1.0), 5:  (3.75, 1.0), 6:  (6.5, 1.0),
    7:  (-0.5, 2.0), 8:  (1.5, 2.0),  9:  (2.5, 2.0),  10: (3.5, 2.0),  11: (4.5, 2.0),  12: (6.5, 2.0),
    13: (-0.5, 3.0), 14: (0.75, 3.0), 15: (2.25, 3.0), 16: (3.75, 3.0), 17: (5.25, 3.0), 18: (6.5, 3.0),
    19: (0.0, 4.0),  20: (2.0, 4.0),  21: (4.0, 4.0),  22: (6.0, 4.0),
}

RAW_ADJACENCY: Dict[int, List[Tuple[int, Optional[int]]]] = {
    0:  [(2, 8), (3, 9), (4, 10), (5, 11)],
    1:  [(2, 3), (7, 13)],
    2:  [(0, None), (8, 14), (1, None), (3, 4)],
    3:  [(0, None), (9, 15), (2, 1), (4, 5)],
    4:  [(0, None), (10, 16), (3, 2), (5, 6)],
    5:  [(0, None), (11, 17), (4, 3), (6, None)],
    6:  [(5, 4), (12, 18)],
    7:  [(1, None), (13, None), (8, 9)],
    8:  [(2, 0), (14, 19), (7, None), (9, 10)],
    9:  [(3, 0), (15, 20), (8, 7), (10, 11)],
    10: [(4, 0), (16, 21), (9, 8), (11, 12)],
    11: [(5, 0), (17, 22), (10, 9), (12, None)],
    12: [(6, None), (18, None), (11, 10)],
    13: [(7, 1), (14, 15)],
    14: [(8, 2), (19, None), (13, None), (15, 16)],
    15: [(9, 3), (20, None), (14, 13), (16, 17)],
    16: [(10, 4), (21, None), (15, 14), (17, 18)],
    17: [(11, 5), (22, None), (16, 15), (18, None)],
    18: [(12, 6), (17, 16)],
    19: [(14, 8), (20, 21)],
    20: [(15, 9), (19, None), (21, 22)],
    21: [(16, 10), (20, 19), (22, None)],
    22: [(17, 11), (21, 20)],
}
# fmt: on

TIGER_STARTS: Tuple[int, ...] = (0, 3, 4)
REQUIRED_CAPTURES = 6
MAX_PLACEMENTS = 15


def neighbors(node: int) -> List[Edge]:
    """Return all outgoing edges from ``node``."""

    try:
        return [Edge(neighbor=nb, landing=landing) for nb, landing in RAW_ADJACENCY[node]]
    except KeyError as exc:
        raise ValueError(f"Unknown node id: {node}") from exc


def edges() -> Iterator[Tuple[int, int]]:
    """Iterate over every directed ``(node, neighbor)`` pair."""

    for node, links in RAW_ADJACENCY.items():
        for nb, _ in links:
            yield node, nb


def jump_triples() -> Iterator[Tuple[int, int, int]]:
    """Iterate over every ``(tiger, goat, landing)`` jump on the board."""

    for node, links in RAW_ADJACENCY.items():
        for nb, landing in links:
            if landing is not None:
                yield node, nb, landing
