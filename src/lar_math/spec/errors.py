"""
Error taxonomy
==============

Every error is terminal for the current call: nothing here is retried or
recovered from inside lar_math.

    LarError
    ├── CellBasisError    precondition: malformed cell (arity, index range)
    ├── TopologyError     internal consistency: fixer post-condition,
    │                     non-simple face cycle, missing exterior cycle
    └── ArrangementError  collaborator failure: crossings, duplicates,
                          degenerate geometry

Unsupported configurations (fix_lack, non-convex coboundary_2) raise the
builtin NotImplementedError.

CellBasisError and TopologyError are also ValueErrors, so callers that
catch ValueError around operator builders keep working.
"""


class LarError(Exception):
    """Base class for all lar_math errors."""


class CellBasisError(LarError, ValueError):
    """A cell basis violates its preconditions."""


class TopologyError(LarError, ValueError):
    """An operator violates a topological invariant."""


class ArrangementError(LarError):
    """An arrangement collaborator could not produce a consistent decomposition."""
