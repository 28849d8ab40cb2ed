"""
Adapter turning a plain function into a DistanceFunction.
"""

from typing import Callable, Optional, Union
from torch import Tensor

from ..base.interfaces import DistanceFunction
from .euclidean import SquaredEuclideanDistance


class CallableDistance(DistanceFunction):
    """Wraps a caller-supplied ``fn(a, b) -> scalar``.

    The function must be pure and return a non-negative value that is zero
    for identical vectors.
    """

    def __init__(self, fn: Callable[[Tensor, Tensor], Union[Tensor, float]]):
        if not callable(fn):
            raise TypeError(f"Expected a callable, got {type(fn)}")
        self.fn = fn

    def distance(self, a: Tensor, b: Tensor) -> Union[Tensor, float]:
        return self.fn(a, b)

    def __repr__(self) -> str:
        name = getattr(self.fn, '__name__', repr(self.fn))
        return f"CallableDistance({name})"


def as_distance(distance: Optional[Union[DistanceFunction, Callable]] = None) -> DistanceFunction:
    """Resolve a distance argument.

    Args:
        distance: None for the squared Euclidean default, a DistanceFunction,
            or any callable taking two vectors

    Returns:
        A DistanceFunction instance
    """
    if distance is None:
        return SquaredEuclideanDistance()
    if isinstance(distance, DistanceFunction):
        return distance
    if callable(distance):
        return CallableDistance(distance)
    raise TypeError(f"distance must be a DistanceFunction or callable, got {type(distance)}")
