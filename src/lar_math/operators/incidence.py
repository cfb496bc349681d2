"""
Characteristic Matrices and Unsigned Incidence
==============================================

Pure combinatorics - NO coordinates.

DEFINITIONS:
    M_p:  C × V   characteristic matrix of a p-cell basis (binary)
    ∂₁:   V × E   signed boundary of edges        (boundary_1)
    δ₀:   E × V   signed coboundary of vertices   (coboundary_0 = ∂₁ᵀ)
    |δ₁|: F × E   unsigned face-edge incidence    (unsigned_coboundary_1)
    |δ₂|: C × F   unsigned solid-face incidence   (unsigned_coboundary_2)

PRODUCT RULE:
    (M_F M_Eᵀ)[f, e] = number of endpoints of e that lie on f
    An entry equal to 2 means both endpoints of e are vertices of f.
    For CONVEX cells this is exactly "e lies on the boundary of f".

    (M_C M_Fᵀ)[c, f] = number of vertices of f that lie in c
    An entry equal to |f| means f is fully contained in c (convex only).

NON-CONVEX CELLS:
    The product over-reports: an edge of face A whose two endpoints are also
    vertices of face B is counted for B even though it is not on B's
    boundary. fix_redundancy removes these spurious incidences using the
    Euler characteristic of the 2-sphere (see its docstring).

All operators are scipy.sparse CSR matrices with int8 entries.
"""

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np
import scipy.sparse as sp

from ..spec.constants import CHAIN_DTYPE, EDGE_ARITY, FACES_PER_EDGE_CLOSED
from ..spec.errors import TopologyError
from ..spec.structures import (
    ChainOp,
    as_chain_op,
    implied_vertex_count,
    validate_cells,
    validate_edges,
)

logger = logging.getLogger(__name__)


def characteristic_matrix(cells: Sequence[Sequence[int]],
                          n_vertices: Optional[int] = None) -> ChainOp:
    """
    Binary matrix representing by rows the p-cells of a cellular complex.

    DEFINITION:
        M[c, v] = 1 if vertex v belongs to cell c
        M[c, v] = 0 otherwise

    Args:
        cells: cell basis, each cell a list of 0-based vertex indices
        n_vertices: number of columns (defaults to largest index + 1)

    Returns:
        M: (n_cells, n_vertices) sparse binary matrix

    FAIL-FAST:
        Raises CellBasisError for empty cells or out-of-range indices.

    Example (unit cuboid, see builders.cuboid):
        >>> V, (VV, EV, FV, CV) = cuboid((1, 1, 1))
        >>> characteristic_matrix(FV).toarray()
        array([[1, 1, 1, 1, 0, 0, 0, 0],
               [0, 0, 0, 0, 1, 1, 1, 1],
               [1, 1, 0, 0, 1, 1, 0, 0],
               [0, 0, 1, 1, 0, 0, 1, 1],
               [1, 0, 1, 0, 1, 0, 1, 0],
               [0, 1, 0, 1, 0, 1, 0, 1]], dtype=int8)
    """
    if n_vertices is None:
        n_vertices = implied_vertex_count(cells)
    validate_cells(cells, n_vertices=n_vertices)

    rows, cols = [], []
    for c, cell in enumerate(cells):
        for v in dict.fromkeys(int(k) for k in cell):
            rows.append(c)
            cols.append(v)

    data = np.ones(len(rows), dtype=CHAIN_DTYPE)
    return as_chain_op((data, (rows, cols)), shape=(len(cells), n_vertices))


def boundary_1(edges: Sequence[Sequence[int]],
               n_vertices: Optional[int] = None) -> ChainOp:
    """
    Signed boundary operator ∂₁: C₁ → C₀.

    DEFINITION:
        ∂₁[v, e] = -1 if v is the first vertex (tail) of edge e
        ∂₁[v, e] = +1 if v is the second vertex (head) of edge e
        ∂₁[v, e] = 0 otherwise

    Orientation follows input order: edge [a, b] runs a → b.

    Args:
        edges: edge basis, each cell exactly 2 distinct vertex indices
        n_vertices: number of rows (defaults to largest index + 1)

    Returns:
        (n_vertices, n_edges) sparse signed matrix

    PROPERTY:
        Each column has exactly one -1 and one +1 (column sum is zero).
    """
    if n_vertices is None:
        n_vertices = implied_vertex_count(edges)
    validate_edges(edges, n_vertices=n_vertices)

    rows, cols, data = [], [], []
    for e, (tail, head) in enumerate(edges):
        rows.extend((int(tail), int(head)))
        cols.extend((e, e))
        data.extend((-1, +1))

    return as_chain_op((np.array(data, dtype=CHAIN_DTYPE), (rows, cols)),
                       shape=(n_vertices, len(edges)))


def coboundary_0(edges: Sequence[Sequence[int]],
                 n_vertices: Optional[int] = None) -> ChainOp:
    """
    Signed coboundary operator δ₀: C₀ → C₁, the transpose of boundary_1.

    Returns:
        (n_edges, n_vertices) sparse signed matrix
    """
    return as_chain_op(boundary_1(edges, n_vertices).T)


def _keep_entries_equal(product: sp.spmatrix, targets: np.ndarray, by_column: bool) -> ChainOp:
    """Binary matrix of the product entries equal to the per-row/column target."""
    coo = sp.coo_matrix(product)
    wanted = targets[coo.col] if by_column else targets[coo.row]
    mask = coo.data == wanted
    data = np.ones(int(mask.sum()), dtype=CHAIN_DTYPE)
    return as_chain_op((data, (coo.row[mask], coo.col[mask])), shape=product.shape)


def unsigned_coboundary_1_from_matrices(cscFV: sp.spmatrix,
                                        cscEV: sp.spmatrix,
                                        convex: bool = True) -> ChainOp:
    """
    Unsigned coboundary_1 from the characteristic matrices of faces and edges.

    Args:
        cscFV: (F, V) face characteristic matrix
        cscEV: (E, V) edge characteristic matrix (same V)
        convex: if False, remove spurious incidences with fix_redundancy

    Returns:
        (F, E) sparse unsigned matrix
    """
    if cscFV.shape[1] != cscEV.shape[1]:
        raise ValueError(f"Vertex count mismatch: FV has {cscFV.shape[1]} columns, "
                         f"EV has {cscEV.shape[1]}")

    temp = sp.csr_matrix(cscFV, dtype=np.int32) @ sp.csr_matrix(cscEV, dtype=np.int32).T
    targets = np.full(temp.shape[1], EDGE_ARITY)
    cscFE = _keep_entries_equal(temp, targets, by_column=True)

    if not convex:
        cscFE = fix_redundancy(cscFE, cscFV, cscEV)
    return cscFE


def unsigned_coboundary_1(faces: Sequence[Sequence[int]],
                          edges: Sequence[Sequence[int]],
                          convex: bool = True,
                          n_vertices: Optional[int] = None) -> ChainOp:
    """
    Unsigned coboundary operator |δ₁|: C₁ → C₂.

    DEFINITION:
        |δ₁|[f, e] = 1 if both endpoints of e are vertices of f
                      (exact for convex cells)

    Args:
        faces: face basis (may include the exterior cell)
        edges: edge basis
        convex: False for complexes with non-convex cells; applies
                fix_redundancy, which needs the exterior cell in `faces`
        n_vertices: number of vertices (defaults to largest index + 1)

    Returns:
        (n_faces, n_edges) sparse unsigned matrix

    Example (unit cuboid):
        >>> unsigned_coboundary_1(FV, EV).toarray()
        array([[1, 1, 0, 0, 1, 1, 0, 0, 0, 0, 0, 0],
               [0, 0, 1, 1, 0, 0, 1, 1, 0, 0, 0, 0],
               [1, 0, 1, 0, 0, 0, 0, 0, 1, 1, 0, 0],
               [0, 1, 0, 1, 0, 0, 0, 0, 0, 0, 1, 1],
               [0, 0, 0, 0, 1, 0, 1, 0, 1, 0, 1, 0],
               [0, 0, 0, 0, 0, 1, 0, 1, 0, 1, 0, 1]], dtype=int8)
    """
    if n_vertices is None:
        n_vertices = implied_vertex_count(faces, edges)
    validate_edges(edges, n_vertices=n_vertices)
    cscFV = characteristic_matrix(faces, n_vertices)
    cscEV = characteristic_matrix(edges, n_vertices)
    return unsigned_coboundary_1_from_matrices(cscFV, cscEV, convex)


def face_defects(target: sp.spmatrix, cscFV: sp.spmatrix) -> np.ndarray:
    """
    Per-face defect nfixs = (#edges reported incident) - (#vertices of the face).

    A face bounded by a single simple cycle has as many edges as vertices
    (V = E on the cycle), so any non-zero defect flags a redundancy.
    """
    n_edges = np.diff(sp.csr_matrix(target).indptr)
    n_verts = np.diff(sp.csr_matrix(cscFV).indptr)
    return (n_edges - n_verts).astype(int)


def fix_redundancy(target: sp.spmatrix,
                   cscFV: sp.spmatrix,
                   cscEV: sp.spmatrix,
                   return_pairs: bool = False):
    """
    Fix the unsigned coboundary_1 generated by FV·EVᵀ for non-convex cells.

    Spurious incidences (redundancies) appear when an edge lies on the
    boundary of face A, but only its vertices lie on the boundary of face B.

    EULER ARGUMENT:
        Each face boundary is a 2-sphere split into an inner and an outer
        side: V - E + F = 2 with F = 2 forces V = E. The defect
        nfixs = E - V per face counts the redundant columns of that row.

        In a closed 2-complex (exterior cell INCLUDED) every edge is shared
        by exactly 2 faces, so the fixed matrix has exactly 2·E non-zeros.

    ALGORITHM:
        faces_to_fix = faces with non-zero defect
        edges_to_fix = edges with more than 2 incident faces
        for (f, e) in faces_to_fix × edges_to_fix with e ∈ f:
            weight(v) = |edges at v ∩ edges of f|
            if weight > 2 at BOTH endpoints of e: (f, e) is spurious
        remove all marked pairs at once (weights use the unfixed matrix)

    Args:
        target: (F, E) unsigned matrix from the characteristic product
        cscFV: (F, V) face characteristic matrix (must include the exterior)
        cscEV: (E, V) edge characteristic matrix
        return_pairs: also return the list of removed (face, edge) pairs

    Returns:
        fixed (F, E) matrix, or (matrix, pairs) when return_pairs is True

    FAIL-FAST:
        TopologyError if nnz != 2·E after fixing.
        NotImplementedError (fix_lack) if there are fewer than 2·E incidences.
    """
    target = as_chain_op(target)
    n_faces, n_edges = target.shape
    expected = FACES_PER_EDGE_CLOSED * n_edges

    if target.nnz < expected:
        return fix_lack(target, cscFV, cscEV)

    defects = face_defects(target, cscFV)
    faces_to_fix = np.flatnonzero(defects != 0)
    faces_per_edge = np.diff(target.tocsc().indptr)
    edges_to_fix = np.flatnonzero(faces_per_edge > FACES_PER_EDGE_CLOSED)

    cscEV = sp.csr_matrix(cscEV)
    vertex_edges = sp.csc_matrix(cscEV)

    def edges_at(v):
        return vertex_edges.indices[vertex_edges.indptr[v]:vertex_edges.indptr[v + 1]]

    pairs = []
    for fh in faces_to_fix:
        face_edges = set(target.indices[target.indptr[fh]:target.indptr[fh + 1]].tolist())
        for ek in edges_to_fix:
            if ek not in face_edges:
                continue
            v1, v2 = cscEV.indices[cscEV.indptr[ek]:cscEV.indptr[ek + 1]]
            weights = [len(face_edges.intersection(edges_at(v).tolist())) for v in (v1, v2)]
            if weights[0] > 2 and weights[1] > 2:
                pairs.append((int(fh), int(ek)))

    fixed = target.tolil()
    for fh, ek in pairs:
        fixed[fh, ek] = 0
    fixed = as_chain_op(fixed)

    logger.debug("fix_redundancy: total defect %d, removed %d pair(s) %s",
                 int(defects[defects > 0].sum()), len(pairs), pairs)

    if fixed.nnz != expected:
        raise TopologyError(
            f"fix_redundancy failed: {fixed.nnz} incidences after removing {len(pairs)} "
            f"pair(s), expected 2E = {expected}. Either the complex is not closed "
            f"(exterior cell missing?) or the redundancy pattern is not supported."
        )

    if return_pairs:
        return fixed, pairs
    return fixed


def fix_lack(target: sp.spmatrix, cscFV: sp.spmatrix, cscEV: sp.spmatrix):
    """
    Missing-incidence case (nnz < 2·E), symmetric to fix_redundancy.

    Not implemented: raises NotImplementedError.
    """
    raise NotImplementedError(
        f"fix_lack: {target.nnz} incidences for {target.shape[1]} edges "
        f"(expected {FACES_PER_EDGE_CLOSED * target.shape[1]}); "
        f"complexes with missing face-edge incidences are not supported"
    )


def unsigned_coboundary_2(solids: Sequence[Sequence[int]],
                          faces: Sequence[Sequence[int]],
                          convex: bool = True,
                          n_vertices: Optional[int] = None) -> ChainOp:
    """
    Unsigned coboundary operator |δ₂|: C₂ → C₃.

    DEFINITION:
        |δ₂|[c, f] = 1 if every vertex of face f is a vertex of solid c

    Only valid for complexes of CONVEX cells.

    Args:
        solids: solid basis
        faces: face basis
        convex: must be True
        n_vertices: number of vertices (defaults to largest index + 1)

    Returns:
        (n_solids, n_faces) sparse unsigned matrix

    USAGE (boundary of a 3-chain, mod 2):
        >>> d2 = unsigned_coboundary_2(CV, FV)
        >>> outer = (d2.T @ np.ones(d2.shape[0], dtype=int)) % 2
        >>> boundary_faces = [FV[f] for f in np.flatnonzero(outer)]
    """
    if not convex:
        raise NotImplementedError("unsigned_coboundary_2 is only implemented for convex cells")

    if n_vertices is None:
        n_vertices = implied_vertex_count(solids, faces)
    cscCV = characteristic_matrix(solids, n_vertices)
    cscFV = characteristic_matrix(faces, n_vertices)

    temp = sp.csr_matrix(cscCV, dtype=np.int32) @ sp.csr_matrix(cscFV, dtype=np.int32).T
    face_sizes = np.diff(cscFV.indptr)
    return _keep_entries_equal(temp, face_sizes, by_column=True)


def unsigned_boundary_2(edges: Sequence[Sequence[int]],
                        faces: Sequence[Sequence[int]],
                        convex: bool = True) -> ChainOp:
    """Unsigned boundary ∂₂: C₂ → C₁, shape (E, F)."""
    return as_chain_op(unsigned_coboundary_1(faces, edges, convex).T)


def unsigned_boundary_3(solids: Sequence[Sequence[int]],
                        faces: Sequence[Sequence[int]]) -> ChainOp:
    """Unsigned boundary ∂₃: C₃ → C₂, shape (F, C)."""
    return as_chain_op(unsigned_coboundary_2(solids, faces).T)


def edge_endpoints(cop_ev: sp.spmatrix) -> Tuple[np.ndarray, np.ndarray]:
    """
    Tail and head of every edge of a signed coboundary_0.

    Returns:
        (tails, heads): integer arrays of length E

    FAIL-FAST:
        TopologyError if a row is not exactly one -1 and one +1.
    """
    cop_ev = as_chain_op(cop_ev)
    n_edges = cop_ev.shape[0]
    tails = np.empty(n_edges, dtype=int)
    heads = np.empty(n_edges, dtype=int)
    for e in range(n_edges):
        lo, hi = cop_ev.indptr[e], cop_ev.indptr[e + 1]
        cols, vals = cop_ev.indices[lo:hi], cop_ev.data[lo:hi]
        if len(cols) != EDGE_ARITY or sorted(vals.tolist()) != [-1, 1]:
            raise TopologyError(f"edge {e}: coboundary_0 row {dict(zip(cols.tolist(), vals.tolist()))} "
                                f"is not one -1 and one +1")
        tails[e] = cols[vals < 0][0]
        heads[e] = cols[vals > 0][0]
    return tails, heads


def incidence_lists(op: sp.spmatrix) -> Tuple[List[List[int]], List[List[int]]]:
    """
    Row-wise and column-wise non-zero index lists of an operator.

    Returns:
        (cells_by_row, cells_by_col)
    """
    csr = sp.csr_matrix(op)
    csc = sp.csc_matrix(op)
    by_row = [csr.indices[csr.indptr[r]:csr.indptr[r + 1]].tolist() for r in range(csr.shape[0])]
    by_col = [csc.indices[csc.indptr[c]:csc.indptr[c + 1]].tolist() for c in range(csc.shape[1])]
    return by_row, by_col
