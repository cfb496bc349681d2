"""
Arrangement Collaborators - the contract
========================================

The kernel never computes an arrangement itself. It calls objects honouring
these contracts and trusts their output:

    PlanarArrangement:
        (V, cop_EV) -> (V', cop_EV', cop_FE')
        No two output edges cross without a shared vertex; every output face
        is bounded by one simple cycle; the exterior face is NOT returned.

    SpatialArrangement:
        (V, cop_EV, cop_FE) -> (V', cop_EV', cop_FE', cop_CF')
        Mutually non-overlapping cells; row 0 of cop_CF' is the exterior.

    ExteriorCycleLocator:
        (V, cop_EV, cop_FE) -> row index of the unbounded face in cop_FE

Any callable with the right signature is accepted by the assemblers; the
ABCs below only document and type the contract.
"""

import abc
from typing import Callable, Tuple

import numpy as np
import scipy.sparse as sp

from ..spec.structures import ChainOp

ExteriorCycleLocator = Callable[[np.ndarray, sp.spmatrix, sp.spmatrix], int]


class PlanarArrangement(abc.ABC):
    """2D arrangement of an edge set into vertices, edges and bounded faces."""

    @abc.abstractmethod
    def __call__(self, vertices: np.ndarray,
                 cop_ev: sp.spmatrix) -> Tuple[np.ndarray, ChainOp, ChainOp]:
        """Return (vertices, cop_EV, cop_FE)."""


class SpatialArrangement(abc.ABC):
    """3D arrangement of a face set into vertices, edges, faces and solids."""

    @abc.abstractmethod
    def __call__(self, vertices: np.ndarray, cop_ev: sp.spmatrix,
                 cop_fe: sp.spmatrix) -> Tuple[np.ndarray, ChainOp, ChainOp, ChainOp]:
        """Return (vertices, cop_EV, cop_FE, cop_CF) with the exterior at row 0 of cop_CF."""
