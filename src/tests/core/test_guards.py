"""
Guard and Edge Case Tests for lar_math
======================================

Tests for invalid cell bases, non-simple face cycles, unsupported
complexes and rejected arrangement input.
Separated from test_all.py to keep main suite focused on invariants.

Run: python -m pytest tests/core/test_guards.py -v

NOTE: When this file reaches ~500 lines, split by category.
"""

import logging

import pytest
import numpy as np
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from lar_math.builders import cuboid, cuboid_grid, nonconvex_example
from lar_math.operators import (
    characteristic_matrix,
    boundary_1,
    coboundary_0,
    coboundary_1,
    unsigned_coboundary_1,
    unsigned_coboundary_2,
    fix_lack,
    trace_face_cycle,
    edge_endpoints,
    orient_exterior,
)
from lar_math.assembly import chain_complex_2d, chain_complex_3d
from lar_math.analysis import assert_faces_per_edge, assert_exact
from lar_math.spec import (
    CellBasisError,
    TopologyError,
    ArrangementError,
    LarError,
    validate_cells,
)


SQUARE = np.array([[0, 0], [1, 0], [1, 1], [0, 1]], dtype=float)
SQUARE_EDGES = [[0, 1], [1, 2], [2, 3], [0, 3]]


# =============================================================================
# P1: CRITICAL - Cell basis validation
# =============================================================================

def test_edge_with_repeated_vertex_raises():
    """P1.1: An edge needs two distinct vertices."""
    with pytest.raises(CellBasisError, match="distinct"):
        boundary_1([[0, 1], [2, 2]])


def test_edge_with_three_vertices_raises():
    """P1.2: Edges have arity exactly 2."""
    with pytest.raises(CellBasisError):
        coboundary_0([[0, 1, 2]])


def test_index_out_of_range_raises():
    """P1.3: Indices must address existing vertices."""
    with pytest.raises(CellBasisError, match="out of bounds"):
        characteristic_matrix([[0, 5]], n_vertices=3)


def test_negative_index_raises():
    with pytest.raises(CellBasisError, match="negative"):
        characteristic_matrix([[0, -1, 2]])


def test_empty_cell_raises():
    with pytest.raises(CellBasisError, match="empty"):
        characteristic_matrix([[0, 1], []])


def test_validate_cells_non_strict_collects_errors():
    """P1.4: strict=False reports every bad cell instead of raising."""
    ok, errors = validate_cells([[0, 1], [], [0, 9]], n_vertices=4, strict=False)
    assert not ok
    assert len(errors) == 2


def test_cell_basis_error_is_value_error():
    """Callers catching ValueError also catch basis errors."""
    assert issubclass(CellBasisError, ValueError)
    assert issubclass(TopologyError, LarError)
    assert issubclass(ArrangementError, LarError)


# =============================================================================
# P2: CRITICAL - Cycle tracing rejects non-simple edge sets
# =============================================================================

def test_trace_square_cycle():
    """P2.1: A square traced from edge 0 closes with zero boundary."""
    cycle = trace_face_cycle([0, 1, 2, 3], SQUARE_EDGES)
    assert cycle == {0: +1, 1: +1, 2: +1, 3: -1}


def test_trace_branching_raises():
    """P2.2: Two candidate edges at an open end."""
    edges = [[0, 1], [1, 2], [1, 3]]
    with pytest.raises(TopologyError, match="branches"):
        trace_face_cycle([0, 1, 2], edges)


def test_trace_disjoint_cycles_raises():
    """P2.3: Two disjoint triangles are not one cycle."""
    edges = [[0, 1], [1, 2], [2, 0], [3, 4], [4, 5], [5, 3]]
    with pytest.raises(TopologyError, match="left over"):
        trace_face_cycle(list(range(6)), edges)


def test_trace_open_path_raises():
    """P2.4: A path never closes."""
    with pytest.raises(TopologyError, match="not closed"):
        trace_face_cycle([0, 1], [[0, 1], [1, 2]])


def test_trace_error_names_the_face():
    """P2.5: coboundary_1 reports which face row failed."""
    V = np.array([[0, 0], [1, 0], [2, 0], [1, 1]], dtype=float)
    edges = [[0, 1], [1, 2], [1, 3]]
    with pytest.raises(TopologyError, match="face 0"):
        coboundary_1(V, [[0, 1, 2, 3]], edges)


def test_redundant_incidences_without_fix_are_rejected():
    """P2.6: convex=True on non-convex faces leaves a branching row."""
    V, FV, EV = nonconvex_example()
    with pytest.raises(TopologyError):
        coboundary_1(V, FV, EV, convex=True)


# =============================================================================
# P3: IMPORTANT - Unsupported complexes
# =============================================================================

def test_fix_lack_not_implemented():
    """P3.1: Missing exterior cell means fewer than 2E incidences."""
    V, FV, EV = nonconvex_example()
    with pytest.raises(NotImplementedError, match="fix_lack"):
        unsigned_coboundary_1(FV[1:], EV, convex=False)


def test_fix_lack_direct_call():
    U = unsigned_coboundary_1([[0, 1, 2, 3]], SQUARE_EDGES)
    with pytest.raises(NotImplementedError):
        fix_lack(U, characteristic_matrix([[0, 1, 2, 3]]), characteristic_matrix(SQUARE_EDGES))


def test_unsigned_coboundary_2_nonconvex_raises():
    """P3.2: Solid-face incidence is only defined for convex cells."""
    V, (VV, EV, FV, CV) = cuboid((1, 1, 1))
    with pytest.raises(NotImplementedError):
        unsigned_coboundary_2(CV, FV, convex=False)


def test_edge_endpoints_rejects_unsigned_rows():
    """P3.3: An unsigned row has no tail."""
    U = characteristic_matrix(SQUARE_EDGES)
    with pytest.raises(TopologyError, match="one -1 and one \\+1"):
        edge_endpoints(U)


def test_orient_exterior_bad_locator_raises():
    """P3.4: A locator returning an invalid row is an error."""
    V, FV, EV = nonconvex_example()
    d1 = coboundary_1(V, FV, EV, convex=False)
    with pytest.raises(TopologyError, match="exterior cycle not found"):
        orient_exterior(V, coboundary_0(EV), d1, locator=lambda *args: 7)


def test_orient_exterior_custom_locator():
    """P3.5: The locator decides which row goes first."""
    V, FV, EV = nonconvex_example()
    d1 = coboundary_1(V, FV, EV, convex=False)
    op, outer = orient_exterior(V, coboundary_0(EV), d1, locator=lambda *args: 0)
    assert outer == 0
    np.testing.assert_array_equal(op[0].toarray(), -d1[0].toarray())


def test_orient_exterior_moves_located_row():
    """P3.5b: A non-zero located row goes first; the others keep their order."""
    V, FV, EV = nonconvex_example()
    d1 = coboundary_1(V, FV, EV, convex=False)
    op, outer = orient_exterior(V, coboundary_0(EV), d1, locator=lambda *args: 2)

    assert outer == 2
    np.testing.assert_array_equal(op[0].toarray(), -d1[2].toarray())
    np.testing.assert_array_equal(abs(op[1:]).toarray(), abs(d1[[0, 1, 3, 4], :]).toarray())
    assert_exact(coboundary_0(EV), op)


def test_exterior_ignored_in_3d(caplog):
    """P3.6: exterior=True only applies to planar complexes."""
    V, (VV, EV, FV, CV) = cuboid((1, 1, 1))
    with caplog.at_level(logging.WARNING, logger="lar_math"):
        d1 = coboundary_1(V, FV, EV, exterior=True)
    assert d1.shape == (6, 12)
    assert any("exterior=True ignored" in r.getMessage() for r in caplog.records)


def test_assert_faces_per_edge_on_open_surface():
    """P3.7: A single square is not closed."""
    d1 = coboundary_1(SQUARE, [[0, 1, 2, 3]], SQUARE_EDGES)
    with pytest.raises(TopologyError, match="faces_per_edge"):
        assert_faces_per_edge(d1)


def test_assert_exact_detects_non_cycle():
    """P3.8: A row that is not a cycle breaks δ₁δ₀ = 0."""
    d0 = coboundary_0(SQUARE_EDGES)
    not_a_cycle = characteristic_matrix([[0, 1, 2, 3]], n_vertices=4)
    with pytest.raises(TopologyError, match="Exactness failed"):
        assert_exact(d0, not_a_cycle)


# =============================================================================
# P4: IMPORTANT - Arrangement input rejected
# =============================================================================

def test_crossing_edges_raise():
    """P4.1: Both diagonals of a square cross."""
    edges = SQUARE_EDGES + [[0, 2], [1, 3]]
    with pytest.raises(ArrangementError, match="intersect"):
        chain_complex_2d(SQUARE, edges)


def test_t_junction_raises():
    """P4.2: A vertex in the middle of another edge."""
    V = np.array([[0, 0], [2, 0], [1, 1], [1, 0]], dtype=float)
    edges = [[0, 1], [1, 2], [0, 2], [2, 3]]
    with pytest.raises(ArrangementError):
        chain_complex_2d(V, edges)


def test_dangling_edge_raises():
    """P4.3: An edge ending in a degree-1 vertex."""
    V = np.array([[0, 0], [1, 0], [0, 1], [2, 2]], dtype=float)
    edges = [[0, 1], [1, 2], [0, 2], [1, 3]]
    with pytest.raises(ArrangementError, match="dangling"):
        chain_complex_2d(V, edges)


def test_duplicate_vertices_raise():
    """P4.4: Two vertices at the same point."""
    V = np.array([[0, 0], [1, 0], [0, 1], [1, 0]], dtype=float)
    edges = [[0, 1], [1, 2], [0, 2], [2, 3]]
    with pytest.raises(ArrangementError, match="duplicate"):
        chain_complex_2d(V, edges)


def test_disconnected_components_raise():
    """P4.5: Two separate triangles need a full arrangement."""
    V = np.array([[0, 0], [1, 0], [0, 1], [5, 5], [6, 5], [5, 6]], dtype=float)
    edges = [[0, 1], [1, 2], [0, 2], [3, 4], [4, 5], [3, 5]]
    with pytest.raises(ArrangementError, match="not connected"):
        chain_complex_2d(V, edges)


def test_chain_complex_2d_needs_planar_vertices():
    V, (VV, EV, FV, CV) = cuboid((1, 1, 1))
    with pytest.raises(ValueError, match=r"\(n, 2\)"):
        chain_complex_2d(V, EV)


def test_chain_complex_3d_two_solids_raise():
    """P4.6: The shared square of two cubes sits on edges with 3 faces."""
    V, (VV, EV, FV, CV) = cuboid_grid((2, 1, 1))
    with pytest.raises(ArrangementError, match="single closed shell"):
        chain_complex_3d(V, FV, EV)


def test_chain_complex_3d_open_box_raises():
    """P4.7: A cube without its top face is not closed."""
    V, (VV, EV, FV, CV) = cuboid((1, 1, 1))
    with pytest.raises(ArrangementError):
        chain_complex_3d(V, FV[:-1], EV)


def test_chain_complex_3d_flat_shell_raises():
    """P4.8: Zero volume."""
    V, (VV, EV, FV, CV) = cuboid((1, 1, 1))
    flat = V.copy()
    flat[:, 2] = 0.0
    with pytest.raises(ArrangementError, match="degenerate shell"):
        chain_complex_3d(flat, FV, EV)
