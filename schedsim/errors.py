from __future__ import annotations


class SimulationError(ValueError):
    """
    Base class for rejected simulation input.

    Subclasses ValueError so callers catching ValueError keep working.
    """

    kind = "SimulationError"


class EmptyInputError(SimulationError):
    kind = "EmptyInput"


class InvalidProcessError(SimulationError):
    kind = "InvalidProcess"


class InvalidQuantumError(SimulationError):
    kind = "InvalidQuantum"


class NoAlgorithmSelectedError(SimulationError):
    kind = "NoAlgorithmSelected"


class UnknownAlgorithmError(SimulationError):
    kind = "UnknownAlgorithm"
