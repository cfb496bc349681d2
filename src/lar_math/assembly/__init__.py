"""Chain-complex assembly from minimal cell bases."""

from .chaincomplex import (
    chain_complex_2d,
    chain_complex_3d,
    collection2model,
    normalize_tails,
    union_cells,
)
