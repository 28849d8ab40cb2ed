"""Base classes, interfaces and error types for simpleclust."""

from .interfaces import (
    DistanceFunction,
    WeightCalculator,
    InitializationStrategy,
    ConvergenceCriterion,
    QualityIndex
)

from .data_structures import (
    WeightMatrix,
    KMeansResult,
    FuzzyResult,
    CandidateScore,
    SearchResult
)

from .errors import (
    ContractViolation,
    DegenerateClusteringError,
    CoincidentPointError,
    ConvergenceWarning,
    ExperimentalWarning
)

__all__ = [
    # Interfaces
    'DistanceFunction',
    'WeightCalculator',
    'InitializationStrategy',
    'ConvergenceCriterion',
    'QualityIndex',

    # Data structures
    'WeightMatrix',
    'KMeansResult',
    'FuzzyResult',
    'CandidateScore',
    'SearchResult',

    # Errors
    'ContractViolation',
    'DegenerateClusteringError',
    'CoincidentPointError',
    'ConvergenceWarning',
    'ExperimentalWarning'
]
