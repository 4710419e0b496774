"""Node identifiers for computation graphs."""

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class NodeId:
    """Opaque identifier of a node within one graph.

    Identifiers are allocated by :class:`circuitgraph.graph.Graph` in creation order and are never
    reused, so ordering by ``NodeId`` is ordering by creation.
    """

    index: int

    def __str__(self) -> str:
        """Return the display name, e.g. ``Node3``."""
        return f"Node{self.index}"

    def __repr__(self) -> str:
        return f"NodeId({self.index})"

    @property
    def label(self) -> str:
        """Display name used in logs and exports."""
        return str(self)
