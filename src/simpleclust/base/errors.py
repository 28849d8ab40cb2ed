"""
Exception and warning types raised by the clustering engines.

Two families are kept apart:
- ContractViolation: the caller passed inputs that break a documented
  contract (shapes, feature counts, cluster counts). These are programmer
  errors and are never caught inside the package.
- DegenerateClusteringError: the data led an otherwise valid run into a
  numerically undefined state (coincident points, emptied clusters).
  Callers may retry with another random initialization.
"""


class ContractViolation(ValueError):
    """Inputs do not satisfy the documented shape or range contract."""


class DegenerateClusteringError(ArithmeticError):
    """A clustering run reached a numerically undefined state."""


class CoincidentPointError(DegenerateClusteringError):
    """An entity and a centroid are closer than the coincidence threshold.

    Inverse-distance weights would be unbounded for such a pair.
    """

    def __init__(self, message: str, centroid_index: int = -1, entity_index: int = -1):
        super().__init__(message)
        self.centroid_index = centroid_index
        self.entity_index = entity_index


class ConvergenceWarning(UserWarning):
    """An iterative engine stopped at its iteration cap."""


class ExperimentalWarning(UserWarning):
    """A feature relies on a placeholder and its output is not meaningful."""
