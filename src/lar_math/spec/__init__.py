"""Constants, error taxonomy and the cell-basis / chain-complex contract."""

from .constants import (
    EPS_ZERO,
    EPS_CLOSE,
    COLLINEAR_TOL,
    VOLUME_TOL,
    DEDUP_DECIMALS,
    CHAIN_DTYPE,
    DIM_PLANAR,
    DIM_SPATIAL,
    EDGE_ARITY,
    FACES_PER_EDGE_CLOSED,
    EXTERIOR_ROW,
)
from .errors import LarError, CellBasisError, TopologyError, ArrangementError
from .structures import (
    Cells,
    ChainOp,
    CellRole,
    ChainComplex,
    validate_cells,
    validate_edges,
    implied_vertex_count,
    rows_to_cells,
    sorted_cells,
    as_chain_op,
)
