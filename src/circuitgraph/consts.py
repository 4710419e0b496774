"""Constants and enumerations for the circuitgraph engine."""

from enum import Enum


class States(Enum):
    """Possible states for a graph node after (or before) evaluation."""

    UNRESOLVED = 0
    RESOLVED = 1


class OpKinds(Enum):
    """Kinds of operation a node can carry."""

    INPUT = "input"
    CONSTANT = "constant"
    ADD = "add"
    MUL = "mul"
    HINT = "hint"


class NodeAttributes:
    """Constants for node attribute names in the graph."""

    VALUE = "value"
    OP = "op"


class EdgeAttributes:
    """Constants for edge attribute names in the graph."""

    PARAMS = "params"
