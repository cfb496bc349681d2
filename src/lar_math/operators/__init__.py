"""Chain operators - characteristic matrices, (co)boundaries, cycle orientation."""

from .incidence import (
    characteristic_matrix,
    boundary_1,
    coboundary_0,
    unsigned_coboundary_1,
    unsigned_coboundary_1_from_matrices,
    face_defects,
    fix_redundancy,
    fix_lack,
    unsigned_coboundary_2,
    unsigned_boundary_2,
    unsigned_boundary_3,
    edge_endpoints,
)

from .orientation import (
    cycle_boundary,
    trace_face_cycle,
    trace_cycles,
    coboundary_1,
    orient_exterior,
)
