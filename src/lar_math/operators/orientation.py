"""
Signed Coboundary-1 by Cycle Tracing
====================================

Turns the unsigned face-edge incidence |δ₁| into the signed coboundary δ₁
by walking, for every face, its edge set as one oriented 1-cycle.

WALK (one face):
    chain = edges of the face, cycle = {}
    seed:  first edge of the face, sign +1
    loop while chain is not empty:
        ∂(cycle) = cycleᵀ δ₀ has exactly two non-zeros:
            right end r (coefficient +1), left end l (coefficient -1)
        r_edge = the unique chain edge at r, signed to LEAVE r
        l_edge = the unique chain edge at l, signed to ENTER l
        r_edge ≠ l_edge: add both (the path grows at both ends)
        r_edge = l_edge: add it once (closing edge, the walk ends)

    Sign of an edge [tail, head] (δ₀ convention: tail -1, head +1):
        leaving r:  +1 if tail == r else -1
        entering l: +1 if head == l else -1

PRECONDITION:
    The face's edges form ONE simple cycle. Anything else (no edge or more
    than one edge at an open end, closure with edges left over) is rejected
    with TopologyError rather than traced into a wrong orientation.

SEED POLICY:
    The seed is always +1, so each row is oriented by its first edge.
    Rows are only made mutually coherent by orient_exterior (2D).

EXACTNESS:
    Each traced cycle has zero boundary, hence δ₁ δ₀ = 0 row by row.

INDEPENDENCE:
    Rows never read each other; coboundary_1(workers=n) traces them on a
    thread pool and merges the per-row triplets.
"""

import logging
from collections import defaultdict, deque
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import scipy.sparse as sp

from ..spec.constants import CHAIN_DTYPE, DIM_PLANAR, EXTERIOR_ROW, FACES_PER_EDGE_CLOSED
from ..spec.errors import TopologyError
from ..spec.structures import ChainOp, as_chain_op, rows_to_cells, validate_edges
from .incidence import (
    characteristic_matrix,
    coboundary_0,
    incidence_lists,
    unsigned_coboundary_1_from_matrices,
)

logger = logging.getLogger(__name__)


def cycle_boundary(cycle: Dict[int, int], edges: Sequence[Sequence[int]]) -> Dict[int, int]:
    """
    Vertex boundary cycleᵀ δ₀ of a signed edge chain, non-zeros only.
    """
    boundary = defaultdict(int)
    for e, sign in cycle.items():
        tail, head = edges[e]
        boundary[tail] -= sign
        boundary[head] += sign
    return {v: c for v, c in boundary.items() if c != 0}


def _extension(vertex: int, chain: set, at_vertex: Dict[int, List[int]]) -> int:
    """The unique remaining face edge incident to an open end of the path."""
    candidates = [e for e in at_vertex[vertex] if e in chain]
    if not candidates:
        raise TopologyError(f"edge set is not closed: no edge continues the cycle at vertex {vertex}")
    if len(candidates) > 1:
        raise TopologyError(f"edge set branches at vertex {vertex} (edges {candidates})")
    return candidates[0]


def trace_face_cycle(face_edges: Sequence[int], edges: Sequence[Sequence[int]]) -> Dict[int, int]:
    """
    Orient the edge set of one face as a single 1-cycle.

    Args:
        face_edges: indices (into `edges`) of the edges of the face;
                    face_edges[0] is the seed
        edges: the full edge basis, edge e = [tail, head]

    Returns:
        {edge_index: ±1} for every edge of the face

    Raises:
        TopologyError if the edges do not form one simple cycle
    """
    face_edges = [int(e) for e in face_edges]
    if not face_edges:
        raise TopologyError("face has no edges")

    at_vertex = defaultdict(list)
    for e in face_edges:
        for v in edges[e]:
            at_vertex[v].append(e)

    seed = face_edges[0]
    cycle = {seed: +1}
    chain = set(face_edges) - {seed}

    while chain:
        boundary = cycle_boundary(cycle, edges)
        if not boundary:
            raise TopologyError(
                f"cycle closed with {len(chain)} edge(s) left over {sorted(chain)}: "
                f"edge set is not a single cycle"
            )
        right = [v for v, c in boundary.items() if c == +1]
        left = [v for v, c in boundary.items() if c == -1]
        if len(right) != 1 or len(left) != 1 or len(boundary) != 2:
            raise TopologyError(f"partial cycle is not a simple path, boundary = {boundary}")
        right, left = right[0], left[0]

        r_edge = _extension(right, chain, at_vertex)
        l_edge = _extension(left, chain, at_vertex)

        cycle[r_edge] = +1 if edges[r_edge][0] == right else -1
        if l_edge != r_edge:
            cycle[l_edge] = +1 if edges[l_edge][1] == left else -1

        chain.difference_update(cycle)

    residual = cycle_boundary(cycle, edges)
    if residual:
        raise TopologyError(f"edge set is an open path, boundary = {residual}")
    return cycle


def _trace_row(face: int, face_edges: Sequence[int], edges) -> Dict[int, int]:
    try:
        return trace_face_cycle(face_edges, edges)
    except TopologyError as exc:
        raise TopologyError(f"face {face}: {exc}") from exc


def trace_cycles(face_rows: Sequence[Sequence[int]],
                 edges: Sequence[Sequence[int]],
                 workers: Optional[int] = None) -> List[Dict[int, int]]:
    """
    Trace every face row. With workers > 1 rows are sharded on a thread pool.
    """
    if workers is not None and workers > 1 and len(face_rows) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [pool.submit(_trace_row, f, row, edges) for f, row in enumerate(face_rows)]
            return [fut.result() for fut in futures]
    return [_trace_row(f, row, edges) for f, row in enumerate(face_rows)]


def cycles_to_operator(cycles: Sequence[Dict[int, int]], n_edges: int) -> ChainOp:
    """Stack signed cycles (one per face) into an (F, E) operator."""
    rows, cols, data = [], [], []
    for f, cycle in enumerate(cycles):
        for e, sign in cycle.items():
            rows.append(f)
            cols.append(e)
            data.append(sign)
    return as_chain_op((np.array(data, dtype=CHAIN_DTYPE), (rows, cols)),
                       shape=(len(cycles), n_edges))


def coboundary_1(vertices,
                 faces: Sequence[Sequence[int]],
                 edges: Sequence[Sequence[int]],
                 convex: bool = True,
                 exterior: bool = False,
                 locator=None,
                 workers: Optional[int] = None) -> ChainOp:
    """
    Signed coboundary operator δ₁: C₁ → C₂.

    DEFINITION:
        δ₁[f, e] = ±1 if edge e is on the boundary of face f, with the sign
                   of e in the oriented boundary cycle of f
        δ₁[f, e] = 0 otherwise

    Args:
        vertices: (n_vertices, d) coordinates, d in (2, 3)
        faces: face basis (for convex=False or exterior=True it must
               contain the exterior cell)
        edges: edge basis, orientation tail → head
        convex: False to repair spurious incidences of non-convex cells
        exterior: 2D only - move the exterior cycle to row 0, negated, and
                  orient every other row coherently with it
        locator: exterior-cycle locator (vertices, cop_EV, cop_FE) -> row,
                 defaults to arrangement.planar.exterior_cycle
        workers: trace rows on this many threads

    Returns:
        (n_faces, n_edges) sparse signed matrix

    PROPERTY:
        δ₁ δ₀ = 0 for every output.
    """
    V = np.asarray(vertices, dtype=float)
    n_vertices = len(V)
    validate_edges(edges, n_vertices=n_vertices)
    edges = [(int(a), int(b)) for a, b in edges]

    cscFV = characteristic_matrix(faces, n_vertices)
    cscEV = characteristic_matrix(edges, n_vertices)
    cscFE = unsigned_coboundary_1_from_matrices(cscFV, cscEV, convex)

    cycles = trace_cycles(rows_to_cells(cscFE), edges, workers)
    copFE = cycles_to_operator(cycles, len(edges))
    logger.debug("coboundary_1: traced %d face cycle(s) over %d edge(s)", len(cycles), len(edges))

    if exterior:
        if V.ndim == 2 and V.shape[1] == DIM_PLANAR:
            copFE, _ = orient_exterior(V, coboundary_0(edges, n_vertices), copFE, locator)
        else:
            logger.warning("coboundary_1: exterior=True ignored for %d-dimensional vertices",
                           V.shape[1] if V.ndim == 2 else V.ndim)
    return copFE


def orient_exterior(vertices,
                    cop_ev: sp.spmatrix,
                    cop_fe: sp.spmatrix,
                    locator=None) -> Tuple[ChainOp, int]:
    """
    Put the exterior cycle first, negated, and orient all rows coherently.

    STEPS:
        1. outer = locator(vertices, cop_ev, cop_fe)
        2. rows reordered as [outer, 0, ..., outer-1, outer+1, ...]
           with row 0 negated
        3. breadth-first from row 0 over shared edges: a row reached through
           edge e takes the sign that makes its coefficient on e opposite
           to the neighbour's (row 0 itself is never flipped)
        4. every edge column with two entries must now hold +1 and -1

    Args:
        vertices: (n_vertices, 2) coordinates
        cop_ev: (E, V) signed coboundary_0
        cop_fe: (F, E) signed coboundary_1 including the exterior cycle
        locator: exterior-cycle locator, defaults to planar.exterior_cycle

    Returns:
        (reoriented operator, original row index of the exterior cycle)

    Raises:
        TopologyError if the locator fails or the rows cannot be made coherent
    """
    if locator is None:
        from ..arrangement.planar import exterior_cycle as locator

    cop_fe = as_chain_op(cop_fe)
    n_faces = cop_fe.shape[0]
    if n_faces == 0:
        raise TopologyError("cannot locate the exterior cycle of an empty operator")

    outer = int(locator(vertices, cop_ev, cop_fe))
    if not 0 <= outer < n_faces:
        raise TopologyError(f"exterior cycle not found (locator returned row {outer} of {n_faces})")

    order = [outer] + [r for r in range(n_faces) if r != outer]
    reordered = as_chain_op(cop_fe[order, :])

    by_row, by_col = incidence_lists(reordered)
    value = reordered.todok()

    sign = np.zeros(n_faces, dtype=int)
    for start in range(n_faces):
        if sign[start] != 0:
            continue
        sign[start] = -1 if start == EXTERIOR_ROW else +1
        queue = deque([start])
        while queue:
            r = queue.popleft()
            for e in by_row[r]:
                oriented = sign[r] * int(value[r, e])
                for s in by_col[e]:
                    if s != r and sign[s] == 0:
                        sign[s] = -oriented * int(value[s, e])
                        queue.append(s)

    result = as_chain_op(sp.diags(sign, dtype=CHAIN_DTYPE) @ reordered)

    csc = result.tocsc()
    for e in range(csc.shape[1]):
        column = csc.data[csc.indptr[e]:csc.indptr[e + 1]]
        if len(column) == FACES_PER_EDGE_CLOSED and column.sum() != 0:
            raise TopologyError(f"incoherent orientation at edge {e}: coefficients {column.tolist()}")

    logger.debug("orient_exterior: exterior cycle was row %d of %d", outer, n_faces)
    return result, outer
