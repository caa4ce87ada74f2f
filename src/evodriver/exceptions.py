"""
Evolution Exceptions

Defines the error types raised by the genetic algorithm, the genotype and the
neural network when a caller violates their contract.

Exception Hierarchy:
    EvolutionError (base)
    ├── InvalidRangeError            (also a ValueError)
    ├── LengthMismatchError          (also a ValueError)
    ├── InvalidTopologyError         (also a ValueError)
    ├── AgentCountMismatchError      (also a ValueError)
    ├── InsufficientPopulationError
    └── ZeroEvaluationError

None of these conditions is transient: they are raised as soon as they are
detected and are never retried internally.
"""

from typing import Any, Optional


class EvolutionError(Exception):
    """
    Base exception for all errors raised by the package.
    """

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            detail_str = ', '.join(f'{k}={v!r}' for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class InvalidRangeError(EvolutionError, ValueError):
    """Raised when a random range has its minimum above its maximum."""

    def __init__(self, min_value: float, max_value: float):
        super().__init__("Minimum value cannot exceed maximum value",
                         {'min': min_value, 'max': max_value})


class LengthMismatchError(EvolutionError, ValueError):
    """Raised when a vector does not have the length a layer, network or genotype requires."""

    def __init__(self, message: str, expected: int, actual: int):
        super().__init__(message, {'expected': expected, 'actual': actual})
        self.expected = expected
        self.actual   = actual


class InvalidTopologyError(EvolutionError, ValueError):
    """Raised when a network topology cannot describe at least one layer."""

    def __init__(self, topology):
        super().__init__("Invalid topology: need at least 2 positive layer sizes",
                         {'topology': tuple(topology)})


class AgentCountMismatchError(EvolutionError, ValueError):
    """Raised when the number of agents does not match the number of racing cars."""

    def __init__(self, expected: int, actual: int):
        super().__init__("The number of agents does not match the number of racing cars",
                         {'expected': expected, 'actual': actual})


class InsufficientPopulationError(EvolutionError):
    """Raised when selection leaves fewer than two genotypes to recombine."""

    def __init__(self, size: int):
        super().__init__("The intermediate population has to be at least of size 2",
                         {'size': size})
        self.size = size


class ZeroEvaluationError(EvolutionError):
    """Raised when fitness is requested for a generation whose mean evaluation is zero."""

    def __init__(self, generation: int):
        super().__init__("Cannot normalize fitness: mean evaluation is zero",
                         {'generation': generation})
