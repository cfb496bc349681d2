"""
Spatial Arrangement of a Single Closed Shell
============================================

Reference SpatialArrangement for face sets that already bound ONE solid:
every edge is shared by exactly two faces and the faces form one connected,
orientable shell (a convex polytope, a cuboid, a prism...).

OUTPUT:
    Vertices, edges and faces unchanged; cop_CF with two rows:
        row 0: exterior cell   (-s)
        row 1: the solid       (+s)
    where s[f] = ±1 orients face f so that the shell is coherent
    (opposite coefficients on every shared edge) and OUTWARD
    (positive enclosed volume).

VOLUME (divergence theorem over oriented boundary cycles):
    A_f = ½ Σ_e δ₁[f,e] (p_tail × p_head)     vector area of face f
    vol = ⅓ Σ_f s[f] (c_f · A_f)              c_f = mean of f's vertices

EXACTNESS:
    cop_CF @ cop_FE = 0 because the two faces at every edge cancel.

Input with more than one solid (edges on 3+ faces) needs a full spatial
arrangement and raises ArrangementError.
"""

import logging
from collections import deque
from typing import Tuple

import numpy as np
import scipy.sparse as sp

from ..operators.incidence import edge_endpoints, incidence_lists
from ..spec.constants import CHAIN_DTYPE, DIM_SPATIAL, FACES_PER_EDGE_CLOSED, VOLUME_TOL
from ..spec.errors import ArrangementError, TopologyError
from ..spec.structures import ChainOp, as_chain_op
from .base import SpatialArrangement

logger = logging.getLogger(__name__)


def coherent_face_signs(cop_fe: sp.spmatrix) -> np.ndarray:
    """
    Signs s[f] such that s[f]·δ₁[f,e] = -s[g]·δ₁[g,e] for faces f, g at edge e.

    FAIL-FAST:
        ArrangementError if an edge is not on exactly two faces, the shell is
        disconnected, or no coherent choice exists (non-orientable).
    """
    cop_fe = as_chain_op(cop_fe)
    n_faces = cop_fe.shape[0]
    by_row, by_col = incidence_lists(cop_fe)

    bad = [e for e, faces in enumerate(by_col) if len(faces) != FACES_PER_EDGE_CLOSED]
    if bad:
        raise ArrangementError(
            f"{len(bad)} edge(s) not on exactly {FACES_PER_EDGE_CLOSED} faces "
            f"(first: edge {bad[0]} on {len(by_col[bad[0]])}): not a single closed shell"
        )

    value = cop_fe.todok()
    sign = np.zeros(n_faces, dtype=int)
    if n_faces == 0:
        return sign
    sign[0] = +1
    queue = deque([0])
    while queue:
        f = queue.popleft()
        for e in by_row[f]:
            oriented = sign[f] * int(value[f, e])
            for g in by_col[e]:
                if g == f:
                    continue
                wanted = -oriented * int(value[g, e])
                if sign[g] == 0:
                    sign[g] = wanted
                    queue.append(g)
                elif sign[g] != wanted:
                    raise ArrangementError(f"shell is not orientable (conflict at edge {e})")

    if np.any(sign == 0):
        raise ArrangementError("faces do not form one connected shell")
    return sign


def enclosed_volume(V: np.ndarray, cop_ev: sp.spmatrix,
                    cop_fe: sp.spmatrix, sign: np.ndarray) -> float:
    """Signed volume enclosed by the faces of cop_FE oriented by `sign`."""
    tails, heads = edge_endpoints(cop_ev)
    edge_cross = np.cross(V[tails], V[heads])
    cop_fe = as_chain_op(cop_fe)
    volume = 0.0
    for f in range(cop_fe.shape[0]):
        lo, hi = cop_fe.indptr[f], cop_fe.indptr[f + 1]
        edges, coeffs = cop_fe.indices[lo:hi], cop_fe.data[lo:hi].astype(float)
        area = 0.5 * coeffs @ edge_cross[edges]
        corners = np.unique(np.concatenate([tails[edges], heads[edges]]))
        volume += sign[f] * np.dot(V[corners].mean(axis=0), area)
    return volume / 3.0


class ShellSpatialArrangement(SpatialArrangement):
    """Spatial arrangement for a face set bounding exactly one solid."""

    def __call__(self, vertices, cop_ev, cop_fe) -> Tuple[np.ndarray, ChainOp, ChainOp, ChainOp]:
        V = np.asarray(vertices, dtype=float)
        if V.ndim != 2 or V.shape[1] != DIM_SPATIAL:
            raise ArrangementError(f"spatial arrangement needs (n, 3) vertices, got shape {V.shape}")
        cop_ev = as_chain_op(cop_ev)
        cop_fe = as_chain_op(cop_fe)
        if cop_fe.shape[1] != cop_ev.shape[0]:
            raise ArrangementError(f"cop_FE has {cop_fe.shape[1]} columns for {cop_ev.shape[0]} edges")

        sign = coherent_face_signs(cop_fe)
        try:
            volume = enclosed_volume(V, cop_ev, cop_fe, sign)
        except TopologyError as exc:
            raise ArrangementError(str(exc)) from exc
        if abs(volume) <= VOLUME_TOL:
            raise ArrangementError(f"degenerate shell: enclosed volume {volume:.3e}")
        if volume < 0:
            sign = -sign

        n_faces = cop_fe.shape[0]
        rows = np.repeat([0, 1], n_faces)
        cols = np.tile(np.arange(n_faces), 2)
        data = np.concatenate([-sign, sign]).astype(CHAIN_DTYPE)
        cop_cf = as_chain_op((data, (rows, cols)), shape=(2, n_faces))

        logger.debug("shell arrangement: %d faces, volume %.6g", n_faces, abs(volume))
        return V, cop_ev, cop_fe, cop_cf
