"""
Topology Verification Functions
===============================

Verify the structural invariants of assembled chain operators.

    1. δ_{p+1} δ_p = 0                 (boundary of boundary is zero)
    2. every edge on exactly k faces   (k = 2 for a closed 2-complex)
    3. the k coefficients of an edge sum to zero (opposite orientations)

These functions are in the analysis/ layer because they depend on operators.
"""

from typing import Any, Dict, List

import numpy as np
import scipy.sparse as sp

from ..spec.constants import FACES_PER_EDGE_CLOSED
from ..spec.errors import TopologyError
from ..spec.structures import ChainComplex, as_chain_op


def verify_faces_per_edge(cop_fe: sp.spmatrix, k: int = FACES_PER_EDGE_CLOSED) -> Dict[str, Any]:
    """
    Check that every edge has exactly k incident faces, with coefficients
    summing to zero.

    Args:
        cop_fe: (F, E) signed coboundary_1
        k: expected faces per edge

    Returns:
        dict with:
            'valid': bool - all edges have k faces and zero coefficient sum
            'min', 'max': faces per edge
            'expected': k
            'histogram': {count: n_edges_with_that_count}
            'unbalanced': edges whose coefficients do not sum to zero
    """
    csc = as_chain_op(cop_fe).tocsc()
    faces_per_edge = np.diff(csc.indptr)
    column_sums = np.asarray(csc.sum(axis=0)).ravel()

    if faces_per_edge.size == 0:
        return {'valid': True, 'min': 0, 'max': 0, 'expected': k,
                'histogram': {}, 'unbalanced': []}

    unique, counts = np.unique(faces_per_edge, return_counts=True)
    unbalanced = np.flatnonzero(column_sums != 0).tolist()

    return {
        'valid': bool(np.all(faces_per_edge == k)) and not unbalanced,
        'min': int(faces_per_edge.min()),
        'max': int(faces_per_edge.max()),
        'expected': k,
        'histogram': {int(u): int(c) for u, c in zip(unique, counts)},
        'unbalanced': unbalanced,
    }


def assert_faces_per_edge(cop_fe: sp.spmatrix, k: int = FACES_PER_EDGE_CLOSED,
                          context: str = "") -> None:
    """
    Fail-fast version of verify_faces_per_edge.

    Raises:
        TopologyError if the invariant is violated
    """
    result = verify_faces_per_edge(cop_fe, k)
    if not result['valid']:
        ctx = f" [{context}]" if context else ""
        raise TopologyError(
            f"faces_per_edge invariant violated{ctx}: "
            f"expected all edges to have {k} faces with opposite signs, "
            f"got min={result['min']}, max={result['max']}, "
            f"unbalanced edges={result['unbalanced'][:5]}. "
            f"Histogram: {result['histogram']}"
        )


def boundary_of_boundary(*operators: sp.spmatrix) -> List[sp.csr_matrix]:
    """
    Products δ_{p+1} δ_p of consecutive coboundary operators.

    Args:
        operators: δ₀, δ₁, ... in increasing dimension

    Returns:
        list of sparse products, all zero for a valid chain complex
    """
    ops = [sp.csr_matrix(op, dtype=np.int32) for op in operators]
    return [ops[p + 1] @ ops[p] for p in range(len(ops) - 1)]


def assert_exact(*operators: sp.spmatrix) -> None:
    """
    Raise TopologyError unless every consecutive product is exactly zero.
    """
    for p, product in enumerate(boundary_of_boundary(*operators)):
        product.eliminate_zeros()
        if product.nnz:
            raise TopologyError(
                f"Exactness failed: δ{p + 1}·δ{p} has {product.nnz} non-zero entries "
                f"(max |entry| = {int(abs(product).max())})"
            )


def euler_characteristic(cc: ChainComplex, include_exterior: bool = False) -> int:
    """
    χ = Σ_p (-1)^p n_p over the cells of an assembled complex.

    Exterior rows are excluded unless include_exterior is True.
    """
    counts = cc.cell_counts()
    if not include_exterior:
        for p in range(len(cc.operators)):
            counts[p + 1] -= len(cc.exterior_rows(p))
    return int(sum((-1) ** p * n for p, n in enumerate(counts)))
