"""
Cuboidal Complexes
==================

Regular grids of unit squares (2D) or unit cubes (3D) with ALL their cell
bases, in the LAR ordering.

ORDERING:
    Vertices: lexicographic grid coordinates, LAST axis fastest.
        Unit cube: vertex k = (k>>2 & 1, k>>1 & 1, k & 1)

    p-cells: grouped by the set of axes they span, groups in reversed
    lexicographic order, cells of a group by their lowest vertex.
        Unit cube edges:  z-edges, y-edges, x-edges
        Unit cube faces:  x = const, y = const, z = const

    Every cell lists its vertices in increasing order, so every edge is
    oriented from its smaller to its larger vertex.

TOPOLOGY (unit cube):
    V = 8, E = 12, F = 6, C = 1
    χ = V - E + F - C = 1
"""

from itertools import combinations, product
from typing import List, Sequence, Tuple

import numpy as np

from ..spec.structures import Cells


def cuboid_grid(shape: Sequence[int]) -> Tuple[np.ndarray, List[Cells]]:
    """
    Build a grid of unit cells.

    Args:
        shape: number of cells along each axis, (nx, ny) or (nx, ny, nz)

    Returns:
        vertices: (n_vertices, d) array of integer coordinates
        bases: [VV, EV, FV] in 2D, [VV, EV, FV, CV] in 3D
    """
    shape = tuple(int(n) for n in shape)
    if len(shape) not in (2, 3):
        raise ValueError(f"cuboid_grid needs 2 or 3 axes, got {len(shape)}")
    if any(n < 1 for n in shape):
        raise ValueError(f"cuboid_grid needs at least one cell per axis, got {shape}")

    d = len(shape)
    counts = tuple(n + 1 for n in shape)
    vertices = np.array(list(product(*(range(c) for c in counts))), dtype=float)

    def index(position):
        return int(np.ravel_multi_index(tuple(position), counts))

    bases = []
    for p in range(d + 1):
        cells = []
        for axes in reversed(list(combinations(range(d), p))):
            spans = [range(shape[a]) if a in axes else range(counts[a]) for a in range(d)]
            for anchor in product(*spans):
                cell = []
                for offset in product((0, 1), repeat=p):
                    position = list(anchor)
                    for a, o in zip(axes, offset):
                        position[a] += o
                    cell.append(index(position))
                cells.append(sorted(cell))
        bases.append(cells)

    return vertices, bases


def cuboid(size: Sequence[float] = (1.0, 1.0, 1.0),
           min_corner: Sequence[float] = None) -> Tuple[np.ndarray, List[Cells]]:
    """
    A single cuboid (or rectangle) with all its cell bases.

    Args:
        size: edge lengths, 2 or 3 values
        min_corner: position of vertex 0 (default origin)

    Returns:
        vertices: (4, 2) or (8, 3) array
        bases: [VV, EV, FV(, CV)]

    Example:
        >>> V, (VV, EV, FV, CV) = cuboid((1, 1, 1))
        >>> EV[:4]
        [[0, 1], [2, 3], [4, 5], [6, 7]]
        >>> FV
        [[0, 1, 2, 3], [4, 5, 6, 7], [0, 1, 4, 5], [2, 3, 6, 7], [0, 2, 4, 6], [1, 3, 5, 7]]
    """
    size = np.asarray(size, dtype=float)
    vertices, bases = cuboid_grid((1,) * len(size))
    vertices = vertices * size
    if min_corner is not None:
        vertices = vertices + np.asarray(min_corner, dtype=float)

    n_expected = 2 ** len(size)
    if len(vertices) != n_expected:
        raise ValueError(f"Expected {n_expected} vertices, got {len(vertices)}")

    return vertices, bases
