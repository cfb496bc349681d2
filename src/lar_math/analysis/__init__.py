"""
Analysis functions - depend on operators layer.

Separated from builders to maintain clean layering:
    builders → spec
    operators → spec
    analysis → operators → spec
"""

from .verify_topology import (
    verify_faces_per_edge,
    assert_faces_per_edge,
    boundary_of_boundary,
    assert_exact,
    euler_characteristic,
)
