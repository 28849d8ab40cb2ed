"""Weight calculators turning centroids into cluster weights."""

from .hard import HardWeightCalculator
from .fuzzy import FuzzyWeightCalculator

__all__ = [
    'HardWeightCalculator',
    'FuzzyWeightCalculator'
]
