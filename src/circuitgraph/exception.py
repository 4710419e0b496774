"""Exception classes for the circuitgraph engine."""


class ComputationError(Exception):
    """Base exception for computation-related errors."""

    pass


class NonExistentNodeError(ComputationError):
    """Exception raised when trying to access a non-existent node."""

    pass


class ForeignNodeError(ComputationError):
    """Exception raised when a node handle from another builder is used."""

    pass
