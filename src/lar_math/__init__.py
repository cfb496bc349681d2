"""
LAR_MATH - Chain complexes of cellular models
=============================================

Linear Algebraic Representation (LAR): cells as lists of vertex indices,
topology as sparse signed incidence operators.

NO rendering. NO file I/O. NO arrangement algorithms beyond the
reference collaborators.

Structure:
    spec/         - Constants, errors, cell-basis and chain-complex contract
    operators/    - Characteristic matrices, (co)boundaries, cycle orientation
    arrangement/  - Arrangement contracts and reference collaborators
    assembly/     - chain_complex_2d, chain_complex_3d
    builders/     - Cuboids, grids and reference planar complexes
    analysis/     - Invariant verification

Requirements:
    Python >= 3.9
    numpy >= 1.20
    scipy >= 1.11
"""

import sys

if sys.version_info < (3, 9):
    raise ImportError(f"lar_math requires Python >= 3.9, got {sys.version}")

import numpy as np
import scipy

_scipy_version = tuple(int(p) for p in scipy.__version__.split('.')[:2] if p.isdigit())
if _scipy_version < (1, 11):
    raise ImportError(f"lar_math requires scipy >= 1.11, got {scipy.__version__}")

_numpy_version = tuple(int(p) for p in np.__version__.split('.')[:2] if p.isdigit())
if _numpy_version < (1, 20):
    raise ImportError(f"lar_math requires numpy >= 1.20, got {np.__version__}")

__version__ = "0.1.0"

from . import spec
from . import operators
from . import arrangement
from . import assembly
from . import builders
from . import analysis

from .spec import (
    Cells,
    ChainOp,
    CellRole,
    ChainComplex,
    LarError,
    CellBasisError,
    TopologyError,
    ArrangementError,
)
from .operators import (
    characteristic_matrix,
    boundary_1,
    coboundary_0,
    unsigned_coboundary_1,
    fix_redundancy,
    fix_lack,
    coboundary_1,
    unsigned_coboundary_2,
    unsigned_boundary_2,
    unsigned_boundary_3,
)
from .assembly import chain_complex_2d, chain_complex_3d, collection2model
