"""
Global constants for lar_math
=============================

All tolerances and magic numbers in ONE place.
"""

import numpy as np

# Numerical tolerances
EPS_ZERO = 1e-12       # For "is this zero?"
EPS_CLOSE = 1e-10      # For "are these equal?" (exact combinatorics, integer-derived)

# Geometry tolerances (reference arrangements only, the kernel never uses them)
COLLINEAR_TOL = 1e-9   # Orientation predicate: |cross| below this is collinear
VOLUME_TOL = 1e-9      # Shell orientation: |signed volume| below this is degenerate
DEDUP_DECIMALS = 9     # Vertices equal after rounding to this many decimals are duplicates

# Storage type of every chain operator (entries in {-1, 0, 1})
CHAIN_DTYPE = np.int8

# Dimensions of the embedding space
DIM_PLANAR = 2
DIM_SPATIAL = 3

# Cell arity
EDGE_ARITY = 2         # An edge is exactly 2 distinct vertices

# =============================================================================
# CHAIN OPERATOR CONVENTIONS
# =============================================================================
#
# CHARACTERISTIC MATRIX:
#   M[c, v] = 1 iff vertex v belongs to cell c        shape: (C, V)
#
# BOUNDARY / COBOUNDARY OPERATORS:
#   boundary_1:    C₁ → C₀   (vertices × edges)       shape: (V, E)
#   coboundary_0:  C₀ → C₁   (edges × vertices)       shape: (E, V)
#   coboundary_1:  C₁ → C₂   (faces × edges)          shape: (F, E)
#   coboundary_2:  C₂ → C₃   (solids × faces)         shape: (C, F)
#
# EDGE ORIENTATION:
#   Edge [a, b] runs tail a → head b:
#   coboundary_0[e, a] = -1,  coboundary_0[e, b] = +1
#   Signed coboundary_1 is expressed relative to this SAME orientation,
#   which is what makes coboundary_1 @ coboundary_0 = 0.
#
# CLOSED COMPLEX (exterior cell included):
#   every (d-1)-cell is shared by exactly FACES_PER_EDGE_CLOSED d-cells,
#   with opposite signs in the signed operator.
#
# EXTERIOR ROW:
#   When an operator carries the unbounded cell, it sits at row EXTERIOR_ROW,
#   and CellRole.EXTERIOR tags it in ChainComplex.roles.
#
FACES_PER_EDGE_CLOSED = 2
EXTERIOR_ROW = 0
