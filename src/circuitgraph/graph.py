"""Storage for computation graphs: nodes, operations, values and constraints."""

import logging
from collections.abc import Iterator

import networkx as nx

from .consts import EdgeAttributes, NodeAttributes
from .exception import NonExistentNodeError
from .nodeid import NodeId
from .operations import Operation

LOG = logging.getLogger("circuitgraph.graph")


class Graph:
    """Mapping from :class:`NodeId` to node data, plus the list of declared constraints.

    Nodes live in a ``networkx.DiGraph`` with one edge from each operand to every node that uses
    it, so ``dag.successors(n)`` is the set of nodes that depend on ``n``. Insertion order of the
    DiGraph is creation order.
    """

    def __init__(self):
        """Initialize an empty graph."""
        self.dag = nx.DiGraph()
        self.constraints: list[tuple[NodeId, NodeId]] = []
        self._next_index = 0

    def allocate_id(self) -> NodeId:
        """Return a fresh identifier, strictly greater than every previous one."""
        node_id = NodeId(self._next_index)
        self._next_index += 1
        return node_id

    def add_node(self, node_id: NodeId, op: Operation | None = None):
        """Insert a node, wiring an edge from each of its operands.

        Every operand must already be in the graph. An operand used more than once (``x * x``)
        gets a single edge listing each position it fills.
        """
        if op is not None:
            for operand in op.operands:
                if not self.dag.has_node(operand):
                    raise NonExistentNodeError(f"Node {operand} does not exist")
        self.dag.add_node(node_id, **{NodeAttributes.OP: op, NodeAttributes.VALUE: None})
        if op is None:
            return
        for position, operand in enumerate(op.operands):
            if self.dag.has_edge(operand, node_id):
                self.dag[operand][node_id][EdgeAttributes.PARAMS].append(position)
            else:
                self.dag.add_edge(operand, node_id, **{EdgeAttributes.PARAMS: [position]})

    def has_node(self, node_id: NodeId) -> bool:
        """Whether ``node_id`` names a node of this graph."""
        return self.dag.has_node(node_id)

    def _data(self, node_id: NodeId) -> dict:
        try:
            return self.dag.nodes[node_id]
        except KeyError:
            raise NonExistentNodeError(f"Node {node_id} does not exist") from None

    def op(self, node_id: NodeId) -> Operation | None:
        """Operation of a node, or None for an input node."""
        return self._data(node_id)[NodeAttributes.OP]

    def value(self, node_id: NodeId) -> int | None:
        """Current value of a node, or None if absent."""
        return self._data(node_id)[NodeAttributes.VALUE]

    def set_value(self, node_id: NodeId, value: int | None):
        """Store a value (or None, for absent) on a node."""
        self._data(node_id)[NodeAttributes.VALUE] = value

    def clear_values(self):
        """Reset every node value to absent, keeping structure and constraints."""
        LOG.debug("Clearing all node values")
        for node_id in self.dag.nodes:
            self.dag.nodes[node_id][NodeAttributes.VALUE] = None

    def dependents(self, node_id: NodeId) -> list[NodeId]:
        """Nodes whose operation lists ``node_id`` as an operand."""
        return list(self.dag.successors(node_id))

    def node_ids(self) -> list[NodeId]:
        """All node identifiers, in creation order."""
        return list(self.dag.nodes)

    def add_constraint(self, a: NodeId, b: NodeId):
        """Record that ``a`` and ``b`` must end up with equal values."""
        for node_id in (a, b):
            if not self.dag.has_node(node_id):
                raise NonExistentNodeError(f"Node {node_id} does not exist")
        self.constraints.append((a, b))

    def operand_edges(self) -> Iterator[tuple[NodeId, NodeId, int]]:
        """Yield ``(operand, node, position)`` once for every operand slot of every node.

        An operand used twice by the same node (``x * x``) is yielded twice.
        """
        for operand, node_id, params in self.dag.edges(data=EdgeAttributes.PARAMS):
            for position in params:
                yield operand, node_id, position

    def __len__(self):
        return self.dag.number_of_nodes()

    def __contains__(self, node_id):
        return self.dag.has_node(node_id)
