"""
Arrangement collaborators - contract plus reference implementations.

The assemblers only rely on the contracts in base.py. The reference
collaborators cover already-arranged input (non-crossing planar graphs,
single closed shells) and are the defaults.
"""

from .base import PlanarArrangement, SpatialArrangement, ExteriorCycleLocator
from .planar import HalfEdgePlanarArrangement, exterior_cycle, check_non_crossing
from .spatial import ShellSpatialArrangement, coherent_face_signs, enclosed_volume
