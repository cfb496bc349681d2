"""
Chain-Complex Assembly
======================

From minimal input to the whole chain complex: cell bases for every
dimension and the signed coboundary operators between them.

    chain_complex_2d(V, EV)       ->  V', (EV, FV),     (δ₀, δ₁)
    chain_complex_3d(V, FV, EV)   ->  V', (EV, FV, CV), (δ₀, δ₁, δ₂)

Faces (2D) and solids (3D) need not be known in advance: they are
discovered by the arrangement collaborator.

TAIL CONVENTION:
    After arrangement every edge is re-oriented so that its smaller vertex
    index is the tail (δ₀ = -1). When an edge flips, its δ₁ column is
    negated too, so δ₁ δ₀ = 0 survives the re-orientation.

BASES:
    Every cell is the sorted union of the vertices of its lower cells:
        EV[e] = non-zero columns of δ₀[e]
        FV[f] = ∪ EV[e] over non-zero columns of δ₁[f]
        CV[c] = ∪ FV[f] over non-zero columns of δ₂[c], c ≥ 1
    Row 0 of δ₂ is the exterior cell and is not listed in CV.
"""

import logging
from typing import Sequence, Tuple

import numpy as np
import scipy.sparse as sp

from ..arrangement.planar import HalfEdgePlanarArrangement
from ..arrangement.spatial import ShellSpatialArrangement
from ..operators.incidence import coboundary_0, edge_endpoints
from ..operators.orientation import coboundary_1
from ..spec.constants import CHAIN_DTYPE, DIM_PLANAR, DIM_SPATIAL, EXTERIOR_ROW
from ..spec.structures import (
    Cells,
    CellRole,
    ChainComplex,
    ChainOp,
    as_chain_op,
    rows_to_cells,
    sorted_cells,
)

logger = logging.getLogger(__name__)


def normalize_tails(cop_ev: sp.spmatrix, cop_fe: sp.spmatrix) -> Tuple[ChainOp, ChainOp]:
    """
    Re-orient every edge so its smaller vertex is the tail.

    Returns:
        (cop_EV, cop_FE) with flipped rows of cop_EV and the matching
        columns of cop_FE negated
    """
    tails, heads = edge_endpoints(cop_ev)
    flip = np.where(tails > heads, -1, 1)
    if np.all(flip == 1):
        return as_chain_op(cop_ev), as_chain_op(cop_fe)
    logger.debug("normalize_tails: %d edge(s) re-oriented", int(np.sum(flip < 0)))
    D = sp.diags(flip, dtype=CHAIN_DTYPE)
    return as_chain_op(D @ cop_ev), as_chain_op(cop_fe @ D)


def union_cells(op: sp.spmatrix, lower: Sequence[Sequence[int]], skip: int = 0) -> Cells:
    """Sorted vertex union of the lower cells of each row of `op` from row `skip` on."""
    rows = rows_to_cells(op)[skip:]
    return [sorted(set().union(*(lower[k] for k in row))) for row in rows]


def chain_complex_2d(vertices, edges: Sequence[Sequence[int]], arrangement=None) -> ChainComplex:
    """
    Chain 2-complex construction from a basis of 1-cells.

    Args:
        vertices: (n, 2) coordinates
        edges: edge basis
        arrangement: PlanarArrangement-compatible callable,
                     defaults to HalfEdgePlanarArrangement()

    Returns:
        ChainComplex(V, (EV, FV), (cop_EV, cop_FE)), all faces BOUNDED

    Example (4×4 points, 24 edges):
        >>> W, EW = grid_2d(3, 3)
        >>> V, (EV, FV), (cop_EV, cop_FE) = chain_complex_2d(W, EW)
        >>> len(FV), cop_FE.shape
        (9, (9, 24))
    """
    V = np.asarray(vertices, dtype=float)
    if V.ndim != 2 or V.shape[1] != DIM_PLANAR:
        raise ValueError(f"chain_complex_2d needs (n, 2) vertices, got shape {V.shape}")
    if arrangement is None:
        arrangement = HalfEdgePlanarArrangement()

    cop_ev = coboundary_0(edges, n_vertices=len(V))
    V, cop_ev, cop_fe = arrangement(V, cop_ev)
    cop_ev, cop_fe = normalize_tails(cop_ev, cop_fe)

    EV = sorted_cells(rows_to_cells(cop_ev))
    FV = union_cells(cop_fe, EV)

    logger.info("chain_complex_2d: V=%d, E=%d, F=%d", len(V), len(EV), len(FV))
    return ChainComplex(
        vertices=np.asarray(V),
        bases=(EV, FV),
        operators=(cop_ev, cop_fe),
        roles=([CellRole.BOUNDED] * len(EV), [CellRole.BOUNDED] * len(FV)),
    )


def chain_complex_3d(vertices, faces: Sequence[Sequence[int]],
                     edges: Sequence[Sequence[int]], arrangement=None) -> ChainComplex:
    """
    Chain 3-complex construction from bases of 2- and 1-cells.

    Args:
        vertices: (n, 3) coordinates
        faces: face basis (convex faces)
        edges: edge basis
        arrangement: SpatialArrangement-compatible callable,
                     defaults to ShellSpatialArrangement()

    Returns:
        ChainComplex(V, (EV, FV, CV), (cop_EV, cop_FE, cop_CF)) where row 0
        of cop_CF is the EXTERIOR cell and CV lists the bounded solids only

    Example (unit cuboid):
        >>> V, (VV, EV, FV, CV) = cuboid((1, 1, 1))
        >>> W, (EV, FV, CV), (cop_EV, cop_FE, cop_CF) = chain_complex_3d(V, FV, EV)
        >>> CV
        [[0, 1, 2, 3, 4, 5, 6, 7]]
    """
    V = np.asarray(vertices, dtype=float)
    if V.ndim != 2 or V.shape[1] != DIM_SPATIAL:
        raise ValueError(f"chain_complex_3d needs (n, 3) vertices, got shape {V.shape}")
    if arrangement is None:
        arrangement = ShellSpatialArrangement()

    cop_ev = coboundary_0(edges, n_vertices=len(V))
    cop_fe = coboundary_1(V, faces, edges)
    V, cop_ev, cop_fe, cop_cf = arrangement(V, cop_ev, cop_fe)
    cop_ev, cop_fe = normalize_tails(cop_ev, cop_fe)
    cop_cf = as_chain_op(cop_cf)

    EV = sorted_cells(rows_to_cells(cop_ev))
    FV = union_cells(cop_fe, EV)
    CV = union_cells(cop_cf, FV, skip=EXTERIOR_ROW + 1)

    solid_roles = [CellRole.BOUNDED] * cop_cf.shape[0]
    solid_roles[EXTERIOR_ROW] = CellRole.EXTERIOR

    logger.info("chain_complex_3d: V=%d, E=%d, F=%d, C=%d", len(V), len(EV), len(FV), len(CV))
    return ChainComplex(
        vertices=np.asarray(V),
        bases=(EV, FV, CV),
        operators=(cop_ev, cop_fe, cop_cf),
        roles=([CellRole.BOUNDED] * len(EV), [CellRole.BOUNDED] * len(FV), solid_roles),
    )


def collection2model(collection):
    """
    Collect several (V, FV, EV) models into a single model.

    Vertex arrays are stacked; cell indices of each model are shifted by
    the number of vertices before it. No vertex identification is done.

    Returns:
        (V, FV, EV)
    """
    if not collection:
        raise ValueError("collection2model needs at least one model")
    blocks, FW, EW = [], [], []
    shift = 0
    for V, FV, EV in collection:
        V = np.asarray(V, dtype=float)
        blocks.append(V)
        FW.extend([int(v) + shift for v in cell] for cell in FV)
        EW.extend([int(v) + shift for v in cell] for cell in EV)
        shift += len(V)
    return np.vstack(blocks), FW, EW
