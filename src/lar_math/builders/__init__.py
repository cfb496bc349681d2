"""
Geometry builders - pure construction, no operators dependency.

EXPORTS:
- Cuboidal complexes: cuboid, cuboid_grid (return V, [VV, EV, FV(, CV)])
- Planar references: grid_2d (V, EV), nonconvex_example (V, FV, EV)
"""

from .cuboids import cuboid, cuboid_grid
from .examples import grid_2d, nonconvex_example
