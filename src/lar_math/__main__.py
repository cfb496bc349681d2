"""
Self-test: python -m lar_math

Assembles the reference complexes and prints their invariants.
"""

import logging

from .analysis import assert_exact, euler_characteristic, verify_faces_per_edge
from .assembly import chain_complex_2d, chain_complex_3d
from .builders import cuboid, grid_2d, nonconvex_example
from .logging_config import setup_logging
from .operators import (
    characteristic_matrix,
    coboundary_0,
    coboundary_1,
    fix_redundancy,
    unsigned_coboundary_1,
)


def main() -> int:
    setup_logging(logging.INFO)

    print("=" * 60)
    print("LAR CHAIN COMPLEXES - VERIFICATION")
    print("=" * 60)

    # Test 1: planar grid
    print("\n=== TEST 1: GRID 3×3 (2D) ===")
    W, EW = grid_2d(3, 3)
    cc = chain_complex_2d(W, EW)
    V, (EV, FV), (cop_EV, cop_FE) = cc
    assert_exact(cop_EV, cop_FE)
    print(f"V={len(V)}, E={len(EV)}, F={len(FV)}, χ={euler_characteristic(cc)}")

    # Test 2: non-convex faces with exterior
    print("\n=== TEST 2: NON-CONVEX FACES (2D) ===")
    W, FW, EW = nonconvex_example()
    raw = unsigned_coboundary_1(FW, EW)
    _, pairs = fix_redundancy(raw, characteristic_matrix(FW), characteristic_matrix(EW),
                              return_pairs=True)
    d1 = coboundary_1(W, FW, EW, convex=False, exterior=True)
    check = verify_faces_per_edge(d1)
    print(f"FV·EVᵀ incidences: {raw.nnz} (expected 2E = {2 * len(EW)})")
    print(f"Removed (face, edge) pairs: {pairs}")
    print(f"Faces per edge: {check['histogram']}, opposite signs: {not check['unbalanced']}")

    # Test 3: unit cuboid
    print("\n=== TEST 3: UNIT CUBOID (3D) ===")
    V, (VV, EV, FV, CV) = cuboid((1, 1, 1))
    cc = chain_complex_3d(V, FV, EV)
    W, (EW, FW, CW), (cop_EV, cop_FE, cop_CF) = cc
    assert_exact(coboundary_0(EW), cop_FE, cop_CF)
    print(f"V={len(W)}, E={len(EW)}, F={len(FW)}, C={len(CW)}, χ={euler_characteristic(cc)}")

    print("\n" + "=" * 60)
    print("Verification complete.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
