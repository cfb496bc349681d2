"""
Reference Planar Complexes
==========================

Small 2D complexes with known answers, used by the tests and by
`python -m lar_math`.

    grid_2d:            (nx+1)×(ny+1) points, the edges of an nx×ny grid
    nonconvex_example:  17 vertices, 20 edges, 5 faces (exterior first),
                        two spurious incidences under the FV·EVᵀ product
"""

from typing import Tuple

import numpy as np

from ..spec.structures import Cells
from .cuboids import cuboid_grid


def grid_2d(nx: int = 3, ny: int = 3) -> Tuple[np.ndarray, Cells]:
    """
    Points and edges of a planar grid (faces are left to be discovered).

    Default: 16 points, 24 edges, 9 faces to discover.

    Returns:
        vertices: ((nx+1)(ny+1), 2) array
        edges: edge basis, vertical edges first
    """
    vertices, bases = cuboid_grid((nx, ny))
    return vertices, bases[1]


def nonconvex_example() -> Tuple[np.ndarray, Cells, Cells]:
    """
    Planar complex with non-convex faces and the exterior cell.

    LAYOUT:
        face 0: exterior cell (outer boundary, 8 vertices)
        face 1: non-convex, 14 vertices, wraps around faces 3 and 4
        face 2: non-convex, 10 vertices
        face 3: square hanging from the top side
        face 4: square touching face 2 along edge 12

    REDUNDANCIES:
        Edges 1 = [1, 2] and 12 = [8, 10] have both endpoints on face 1
        without lying on its boundary, so FV·EVᵀ reports 3 faces for
        columns 1 and 12 and face 1 has defect nfixs = 16 - 14 = 2.

    Returns:
        vertices: (17, 2) array
        faces: FV, exterior first
        edges: EV (20 edges)
    """
    vertices = np.array([
        [0, 16], [2, 16], [5, 16], [7, 16], [10, 16],
        [2, 13], [5, 13], [3, 11], [7, 11], [3, 8], [7, 8],
        [0, 5], [3, 5], [3, 2], [7, 2], [0, 0], [10, 0],
    ], dtype=float)

    faces = [
        [0, 1, 2, 3, 4, 16, 15, 11],
        [0, 1, 2, 3, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14],
        [3, 4, 8, 10, 11, 12, 13, 14, 15, 16],
        [1, 2, 5, 6],
        [7, 8, 9, 10],
    ]

    edges = [
        [0, 1], [1, 2], [2, 3], [3, 4], [0, 11], [1, 5], [2, 6], [3, 8], [4, 16], [5, 6],
        [7, 8], [7, 9], [8, 10], [9, 10], [10, 14], [11, 12], [11, 15], [12, 13], [13, 14],
        [15, 16],
    ]

    return vertices, faces, edges
