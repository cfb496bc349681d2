"""
Planar Arrangement of Non-Crossing Edge Sets
============================================

Reference PlanarArrangement for planar graphs that are ALREADY arranged:
no crossings, no T-junctions, no overlapping edges. Such input only needs
its faces discovered, not its edges split. Anything else is rejected with
ArrangementError, since the splitting arrangement is a separate collaborator.

FACE TRACING (half-edge rule):
    Neighbours of every vertex are sorted counter-clockwise by angle.
    For half-edge (u → v) the next half-edge of the same face is (v → w),
    w = the neighbour of v immediately BEFORE u in CCW order.
    Bounded faces come out counter-clockwise (positive shoelace area);
    the exterior face of the component comes out clockwise and is dropped.

SIGNS:
    cop_FE[f, e] = +1 if face f traverses edge e from tail to head, else -1.
    With every face CCW, each interior edge gets +1 from one face and -1
    from the other.

RESTRICTIONS:
    One connected component (isolated vertices are ignored), no dangling
    edges, no bounded face on both sides of an edge.
"""

import logging
from collections import defaultdict, deque
from typing import Dict, List, Tuple

import numpy as np
import scipy.sparse as sp

from ..operators.incidence import edge_endpoints
from ..spec.constants import CHAIN_DTYPE, COLLINEAR_TOL, DEDUP_DECIMALS, DIM_PLANAR, EPS_ZERO
from ..spec.errors import ArrangementError, TopologyError
from ..spec.structures import ChainOp, as_chain_op
from .base import PlanarArrangement

logger = logging.getLogger(__name__)


def _orient(p, q, r) -> float:
    """Twice the signed area of triangle (p, q, r)."""
    return (q[0] - p[0]) * (r[1] - p[1]) - (q[1] - p[1]) * (r[0] - p[0])


def _on_segment(p, q, r) -> bool:
    """Collinear point r lies within the bounding box of segment pq."""
    return (min(p[0], q[0]) - COLLINEAR_TOL <= r[0] <= max(p[0], q[0]) + COLLINEAR_TOL and
            min(p[1], q[1]) - COLLINEAR_TOL <= r[1] <= max(p[1], q[1]) + COLLINEAR_TOL)


def segments_conflict(a, b, c, d) -> bool:
    """
    True if closed segments ab and cd (no shared endpoint) intersect:
    proper crossing, T-junction or collinear overlap.
    """
    d1, d2 = _orient(c, d, a), _orient(c, d, b)
    d3, d4 = _orient(a, b, c), _orient(a, b, d)
    if ((d1 > COLLINEAR_TOL and d2 < -COLLINEAR_TOL) or (d1 < -COLLINEAR_TOL and d2 > COLLINEAR_TOL)) and \
       ((d3 > COLLINEAR_TOL and d4 < -COLLINEAR_TOL) or (d3 < -COLLINEAR_TOL and d4 > COLLINEAR_TOL)):
        return True
    return ((abs(d1) <= COLLINEAR_TOL and _on_segment(c, d, a)) or
            (abs(d2) <= COLLINEAR_TOL and _on_segment(c, d, b)) or
            (abs(d3) <= COLLINEAR_TOL and _on_segment(a, b, c)) or
            (abs(d4) <= COLLINEAR_TOL and _on_segment(a, b, d)))


def check_non_crossing(V: np.ndarray, tails: np.ndarray, heads: np.ndarray) -> None:
    """
    Reject every pair of edges that meet anywhere but at a shared endpoint.

    O(E²) pair test - fine for the complexes this reference targets.
    """
    n_edges = len(tails)
    for i in range(n_edges):
        a, b = tails[i], heads[i]
        for j in range(i + 1, n_edges):
            c, d = tails[j], heads[j]
            shared = {a, b} & {c, d}
            if len(shared) == 2:
                raise ArrangementError(f"edges {i} and {j} join the same vertices {sorted(shared)}")
            if len(shared) == 1:
                s = shared.pop()
                p = b if a == s else a
                q = d if c == s else c
                if abs(_orient(V[s], V[p], V[q])) <= COLLINEAR_TOL and \
                        np.dot(V[p] - V[s], V[q] - V[s]) > 0:
                    raise ArrangementError(f"edges {i} and {j} overlap at vertex {s}")
                continue
            if segments_conflict(V[a], V[b], V[c], V[d]):
                raise ArrangementError(f"edges {i} and {j} intersect: the input needs edge splitting")


def _count_components(adjacency: Dict[int, List[int]]) -> int:
    """Connected components of the 1-skeleton (vertices with edges only)."""
    seen = set()
    components = 0
    for start in adjacency:
        if start in seen:
            continue
        queue = deque([start])
        seen.add(start)
        while queue:
            v = queue.popleft()
            for w in adjacency[v]:
                if w not in seen:
                    seen.add(w)
                    queue.append(w)
        components += 1
    return components


def trace_planar_faces(V: np.ndarray, tails: np.ndarray,
                       heads: np.ndarray) -> List[List[Tuple[int, int]]]:
    """
    All faces of a connected planar graph as lists of half-edges (u, v),
    exterior included, in order of discovery along the edge basis.
    """
    adjacency = defaultdict(list)
    for a, b in zip(tails.tolist(), heads.tolist()):
        adjacency[a].append(b)
        adjacency[b].append(a)
    for v, neighbours in adjacency.items():
        neighbours.sort(key=lambda w: np.arctan2(V[w][1] - V[v][1], V[w][0] - V[v][0]))

    visited = set()
    faces = []
    for a, b in zip(tails.tolist(), heads.tolist()):
        for start in ((a, b), (b, a)):
            if start in visited:
                continue
            face = []
            u, v = start
            while (u, v) not in visited:
                visited.add((u, v))
                face.append((u, v))
                neighbours = adjacency[v]
                w = neighbours[(neighbours.index(u) - 1) % len(neighbours)]
                u, v = v, w
            faces.append(face)
    return faces


def half_edge_area(V: np.ndarray, face: List[Tuple[int, int]]) -> float:
    """Shoelace signed area of a closed half-edge loop."""
    return 0.5 * sum(V[u][0] * V[v][1] - V[v][0] * V[u][1] for u, v in face)


class HalfEdgePlanarArrangement(PlanarArrangement):
    """
    Planar arrangement for already non-crossing, connected edge sets.

    Returns the input vertices and edges unchanged (as canonical operators)
    and the discovered bounded faces as a signed cop_FE.
    """

    def __init__(self, check_crossings: bool = True):
        self.check_crossings = check_crossings

    def __call__(self, vertices, cop_ev) -> Tuple[np.ndarray, ChainOp, ChainOp]:
        V = np.asarray(vertices, dtype=float)
        if V.ndim != 2 or V.shape[1] != DIM_PLANAR:
            raise ArrangementError(f"planar arrangement needs (n, 2) vertices, got shape {V.shape}")
        cop_ev = as_chain_op(cop_ev)
        if cop_ev.shape[1] != len(V):
            raise ArrangementError(f"cop_EV has {cop_ev.shape[1]} columns for {len(V)} vertices")
        try:
            tails, heads = edge_endpoints(cop_ev)
        except TopologyError as exc:
            raise ArrangementError(str(exc)) from exc

        rounded = np.round(V, DEDUP_DECIMALS)
        if len(np.unique(rounded, axis=0)) != len(V):
            raise ArrangementError("duplicate vertices: the input needs vertex identification")

        if self.check_crossings:
            check_non_crossing(V, tails, heads)

        adjacency = defaultdict(list)
        for a, b in zip(tails.tolist(), heads.tolist()):
            adjacency[a].append(b)
            adjacency[b].append(a)
        dangling = [v for v, nb in adjacency.items() if len(nb) < 2]
        if dangling:
            raise ArrangementError(f"dangling edge(s) at vertices {sorted(dangling)[:5]}")
        if _count_components(adjacency) > 1:
            raise ArrangementError("1-skeleton is not connected: nested or disjoint components "
                                   "need a full arrangement")

        faces = trace_planar_faces(V, tails, heads)
        areas = np.array([half_edge_area(V, face) for face in faces])
        if np.any(np.abs(areas) <= EPS_ZERO):
            raise ArrangementError("degenerate face with zero area")
        outer = np.flatnonzero(areas < 0)
        if len(outer) != 1:
            raise ArrangementError(f"expected one exterior face, found {len(outer)}")

        edge_of = {}
        for e, (a, b) in enumerate(zip(tails.tolist(), heads.tolist())):
            edge_of[(a, b)] = (e, +1)
            edge_of[(b, a)] = (e, -1)

        rows, cols, data = [], [], []
        bounded = [face for k, face in enumerate(faces) if k != outer[0]]
        for f, face in enumerate(bounded):
            used = set()
            for half_edge in face:
                e, sign = edge_of[half_edge]
                if e in used:
                    raise ArrangementError(f"edge {e} has the same face on both sides (bridge)")
                used.add(e)
                rows.append(f)
                cols.append(e)
                data.append(sign)

        cop_fe = as_chain_op((np.array(data, dtype=CHAIN_DTYPE), (rows, cols)),
                             shape=(len(bounded), cop_ev.shape[0]))
        logger.debug("planar arrangement: %d vertices, %d edges, %d bounded faces",
                     len(V), cop_ev.shape[0], len(bounded))
        return V, cop_ev, cop_fe


def exterior_cycle(vertices, cop_ev: sp.spmatrix, cop_fe: sp.spmatrix) -> int:
    """
    Exterior-cycle locator: the row of cop_FE enclosing the largest area.

    The enclosed area of an oriented cycle is the shoelace sum over its
    signed edges; the exterior cycle encloses every bounded face, so its
    absolute area is the largest.

    Returns:
        row index of the exterior cycle (first one on ties)
    """
    V = np.asarray(vertices, dtype=float)
    cop_fe = as_chain_op(cop_fe)
    if cop_fe.shape[0] == 0:
        raise TopologyError("exterior cycle not found: operator has no rows")
    tails, heads = edge_endpoints(cop_ev)
    cross = V[tails, 0] * V[heads, 1] - V[heads, 0] * V[tails, 1]
    areas = 0.5 * (cop_fe.astype(float) @ cross)
    return int(np.argmax(np.abs(areas)))
