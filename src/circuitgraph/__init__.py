"""circuitgraph: build and evaluate arithmetic computation graphs.

Graphs are made of input, constant, add, multiply and hint nodes. Values are fixed-width unsigned
integers that wrap on overflow. Hint nodes compute values with arbitrary functions, and equality
constraints declared between nodes check those values against native operations.
"""

import circuitgraph.visualization as viz
from circuitgraph.arithmetic import WrappingArithmetic
from circuitgraph.computeengine import Builder, ConstraintResult, FillResult, Node, NodeInfo, hint_node
from circuitgraph.consts import OpKinds, States
from circuitgraph.exception import (
    ComputationError,
    ForeignNodeError,
    NonExistentNodeError,
)
from circuitgraph.graph import Graph
from circuitgraph.nodeid import NodeId
from circuitgraph.operations import Add, Constant, Hint, Multiply, Operation
from circuitgraph.visualization import GraphView

__all__ = [
    "viz",
    "Builder",
    "ConstraintResult",
    "FillResult",
    "Node",
    "NodeInfo",
    "hint_node",
    "OpKinds",
    "States",
    "ComputationError",
    "ForeignNodeError",
    "NonExistentNodeError",
    "Graph",
    "NodeId",
    "Add",
    "Constant",
    "Hint",
    "Multiply",
    "Operation",
    "WrappingArithmetic",
    "GraphView",
]
