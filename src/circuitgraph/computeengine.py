"""Builder and evaluation engine for arithmetic computation graphs."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

import pandas as pd

from .arithmetic import WrappingArithmetic
from .consts import OpKinds, States
from .exception import ForeignNodeError, NonExistentNodeError
from .graph import Graph
from .nodeid import NodeId
from .operations import Add, Constant, Hint, HintFunction, Multiply, Operation
from .util import apply1, value_eq
from .visualization import GraphView

LOG = logging.getLogger("circuitgraph.computeengine")


@dataclass(frozen=True)
class NodeInfo:
    """Snapshot of one node for export and reporting."""

    id: NodeId
    kind: OpKinds
    operands: tuple[NodeId, ...]
    value: int | None
    label: str


@dataclass(frozen=True)
class ConstraintResult:
    """Outcome of checking one equality constraint."""

    a: NodeId
    value_a: int | None
    b: NodeId
    value_b: int | None
    ok: bool

    def __str__(self):
        op = "==" if self.ok else "!="
        return f"{self.a} = {self.value_a} {op} {self.b} = {self.value_b}"


@dataclass
class FillResult:
    """Summary of one propagation run."""

    resolved: set[NodeId] = field(default_factory=set)
    unresolved: set[NodeId] = field(default_factory=set)
    ignored: set[NodeId] = field(default_factory=set)
    steps: int = 0

    @property
    def complete(self) -> bool:
        """Whether every node ended the run with a value."""
        return len(self.unresolved) == 0


class Node:
    """Handle to a node created by a :class:`Builder`.

    Handles are the only way to refer to nodes when building, so operands always exist. ``a + b``
    and ``a * b`` are shorthand for :meth:`Builder.add` and :meth:`Builder.mul`; an ``int``
    operand becomes a new constant node.
    """

    __slots__ = ("id", "builder")

    def __init__(self, node_id: NodeId, builder: "Builder"):
        """Initialize a handle for ``node_id`` owned by ``builder``."""
        self.id = node_id
        self.builder = builder

    @property
    def value(self) -> int | None:
        """Current value of the node, or None if absent."""
        return self.builder.graph.value(self.id)

    @property
    def op(self) -> Operation | None:
        """Operation of the node, or None for an input."""
        return self.builder.graph.op(self.id)

    @property
    def kind(self) -> OpKinds:
        """Kind of the node's operation; inputs are OpKinds.INPUT."""
        op = self.op
        return OpKinds.INPUT if op is None else op.kind

    @property
    def label(self) -> str:
        """Summary of the node's operation, as shown in exports."""
        op = self.op
        return "Input" if op is None else op.label

    def _coerce(self, other):
        if isinstance(other, Node):
            return other
        if isinstance(other, int):
            return self.builder.constant(other)
        return NotImplemented

    def __add__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return self.builder.add(self, other)

    def __radd__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return self.builder.add(other, self)

    def __mul__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return self.builder.mul(self, other)

    def __rmul__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return self.builder.mul(other, self)

    def __eq__(self, other):
        if not isinstance(other, Node):
            return NotImplemented
        return self.builder is other.builder and self.id == other.id

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        return f"<Node {self.id} {self.kind.value} value={self.value}>"


def hint_node(builder: "Builder", *operands: Node):
    """Decorator to add a function as a hint node over ``operands``.

    The decorated name is bound to the new node handle::

        @hint_node(b, s)
        def root(values):
            return math.isqrt(values[0])
    """

    def inner(f):
        return builder.hint(operands, f)

    return inner


class Builder:
    """Owns one arithmetic computation graph and evaluates it.

    Build the graph with :meth:`new_input`, :meth:`constant`, :meth:`add`, :meth:`mul`,
    :meth:`hint` and :meth:`assert_equal`, then call :meth:`fill_nodes` with values for the inputs
    and :meth:`check_constraints` to validate the result.

    All arithmetic is unsigned and wraps modulo ``2**bit_width``.
    """

    def __init__(self, *, bit_width: int = 32, strict: bool = False):
        """Initialize a new Builder.

        :param bit_width: Width of node values in bits: 8, 16, 32 or 64.
        :type bit_width: int, default 32
        :param strict: If set, a constraint involving an unresolved node always fails. Otherwise
            two unresolved nodes compare equal.
        :type strict: bool, default False
        """
        self.arithmetic = WrappingArithmetic(bit_width)
        self.strict = strict
        self.graph = Graph()
        self._handles: dict[NodeId, Node] = {}

    @property
    def bit_width(self) -> int:
        """Width of node values in bits."""
        return self.arithmetic.bit_width

    def _node_id(self, x: Node | NodeId) -> NodeId:
        if isinstance(x, Node):
            if x.builder is not self:
                raise ForeignNodeError(f"Node {x.id} belongs to a different builder")
            return x.id
        if isinstance(x, NodeId):
            if not self.graph.has_node(x):
                raise NonExistentNodeError(f"Node {x} does not exist")
            return x
        raise TypeError(f"Expected a Node or NodeId, got {type(x).__name__}")

    def _new_node(self, op: Operation | None) -> Node:
        node_id = self.graph.allocate_id()
        self.graph.add_node(node_id, op)
        LOG.debug(f"Created {node_id} with op {op}")
        handle = Node(node_id, self)
        self._handles[node_id] = handle
        return handle

    def new_input(self) -> Node:
        """Add an input node. Its value must be supplied to :meth:`fill_nodes`."""
        return self._new_node(None)

    init = new_input

    def constant(self, value: int) -> Node:
        """Add a node that always evaluates to ``value``, reduced into the value domain."""
        return self._new_node(Constant(self.arithmetic.normalize(value)))

    def add(self, a: Node, b: Node) -> Node:
        """Add a node evaluating to ``a + b`` (wrapping)."""
        return self._new_node(Add(self._node_id(a), self._node_id(b)))

    def mul(self, a: Node, b: Node) -> Node:
        """Add a node evaluating to ``a * b`` (wrapping)."""
        return self._new_node(Multiply(self._node_id(a), self._node_id(b)))

    multiply = mul

    def hint(self, operands: Iterable[Node], func: HintFunction) -> Node:
        """Add a node whose value is ``func([values of operands])``.

        ``func`` is not called until evaluation, and only once every operand has a value. Its
        result is not checked; use :meth:`assert_equal` to tie it to native operations.
        """
        if not callable(func):
            raise TypeError(f"Hint function must be callable, got {type(func).__name__}")
        args = tuple(self._node_id(x) for x in operands)
        return self._new_node(Hint(args, func))

    def assert_equal(self, a: Node, b: Node):
        """Declare that ``a`` and ``b`` must have equal values once evaluated."""
        a_id, b_id = self._node_id(a), self._node_id(b)
        LOG.debug(f"Constraint {a_id} == {b_id}")
        self.graph.add_constraint(a_id, b_id)

    def node(self, node_id: NodeId) -> Node:
        """Look up the handle for an identifier."""
        return self._handles[self._node_id(node_id)]

    def nodes(self) -> list[NodeId]:
        """Identifiers of all nodes, in creation order."""
        return self.graph.node_ids()

    @property
    def constraints(self) -> list[tuple[NodeId, NodeId]]:
        """Declared constraint pairs, in declaration order."""
        return list(self.graph.constraints)

    def _prepare_inputs(self, inputs) -> tuple[list[tuple[NodeId, int]], set[NodeId]]:
        if inputs is None:
            return [], set()
        pairs = inputs.items() if isinstance(inputs, Mapping) else inputs
        assignments = []
        ignored = set()
        for key, value in pairs:
            if isinstance(key, NodeId) and not self.graph.has_node(key):
                LOG.warning(f"Ignoring input for {key}, which does not exist")
                ignored.add(key)
                continue
            assignments.append((self._node_id(key), self.arithmetic.normalize(value)))
        return assignments, ignored

    def fill_nodes(self, inputs: Mapping[Node | NodeId, int] | None = None) -> FillResult:
        """Assign input values and propagate them through the graph.

        Every node whose operands can all be resolved gets a value, computed once. Nodes that
        depend on an input missing from ``inputs`` are left without a value; this is not an error.

        A ``NodeId`` key that does not name a node of this graph is skipped with a warning and
        reported in ``FillResult.ignored``. A handle from another builder raises
        ``ForeignNodeError`` before any value is assigned. Exceptions raised by hint functions are
        passed back to the caller.

        :param inputs: Mapping (or iterable of pairs) from node handle or ``NodeId`` to value.
        :return: Which nodes were resolved, which were not, which inputs were ignored, and how many
            worklist steps it took.
        """
        assignments, ignored = self._prepare_inputs(inputs)
        for node_id, value in assignments:
            LOG.debug(f"Setting input {node_id} = {value}")
            self.graph.set_value(node_id, value)
        result = self._propagate(self.graph.node_ids())
        result.ignored = ignored
        return result

    def _try_compute(self, node_id: NodeId) -> int | None:
        op = self.graph.op(node_id)
        if op is None:
            return None
        values = []
        for operand in op.operands:
            value = self.graph.value(operand)
            if value is None:
                return None
            values.append(value)
        return op.apply(values, self.arithmetic)

    def _propagate(self, initial: Iterable[NodeId]) -> FillResult:
        worklist = list(initial)
        settled = set()
        steps = 0
        while worklist:
            node_id = worklist.pop()
            steps += 1
            if node_id in settled:
                continue
            if self.graph.value(node_id) is None:
                LOG.debug(f"Evaluating {node_id} with op {self.graph.op(node_id)}")
                value = self._try_compute(node_id)
                if value is None:
                    # revisited when one of its operands settles
                    continue
                self.graph.set_value(node_id, value)
                LOG.debug(f"Computed {node_id} = {value}")
            settled.add(node_id)
            # dependents tried before this node settled get another chance
            worklist.extend(self.graph.dependents(node_id))
        unresolved = {n for n in self.graph.node_ids() if self.graph.value(n) is None}
        resolved = {n for n in self.graph.node_ids() if n not in unresolved}
        return FillResult(resolved=resolved, unresolved=unresolved, steps=steps)

    def reset(self):
        """Clear every node value so the graph can be filled again with new inputs."""
        self.graph.clear_values()

    def constraint_results(self) -> list[ConstraintResult]:
        """Compare the values of every constrained pair, in declaration order."""
        results = []
        for a, b in self.graph.constraints:
            value_a, value_b = self.graph.value(a), self.graph.value(b)
            ok = value_eq(value_a, value_b, strict=self.strict)
            results.append(ConstraintResult(a, value_a, b, value_b, ok))
        return results

    def failed_constraints(self) -> list[ConstraintResult]:
        """Results of the constraints that do not hold."""
        return [r for r in self.constraint_results() if not r.ok]

    def check_constraints(self) -> bool:
        """Return True if every constraint holds, logging a warning for each one that does not."""
        all_ok = True
        for result in self.failed_constraints():
            LOG.warning(f"Constraint failed: {result}")
            all_ok = False
        return all_ok

    def _value_one(self, x: Node | NodeId) -> int | None:
        return self.graph.value(self._node_id(x))

    def value(self, x: Node | NodeId | list[Node | NodeId] | tuple[Node | NodeId, ...]):
        """Get the current value of a node, or a list of nodes. Absent values are None."""
        return apply1(self._value_one, x)

    def _state_one(self, x: Node | NodeId) -> States:
        return States.UNRESOLVED if self._value_one(x) is None else States.RESOLVED

    def state(self, x: Node | NodeId | list[Node | NodeId] | tuple[Node | NodeId, ...]):
        """Get whether a node, or each of a list of nodes, has a value."""
        return apply1(self._state_one, x)

    def node_info(self, x: Node | NodeId) -> NodeInfo:
        """Snapshot of one node: kind, operands, value and label."""
        node_id = self._node_id(x)
        op = self.graph.op(node_id)
        if op is None:
            return NodeInfo(node_id, OpKinds.INPUT, (), self.graph.value(node_id), "Input")
        return NodeInfo(node_id, op.kind, tuple(op.operands), self.graph.value(node_id), op.label)

    def node_infos(self) -> list[NodeInfo]:
        """Snapshots of every node, in creation order."""
        return [self.node_info(n) for n in self.graph.node_ids()]

    def to_dict(self) -> dict[NodeId, int | None]:
        """Get a dictionary of the values of all nodes."""
        return {n: self.graph.value(n) for n in self.graph.node_ids()}

    def to_df(self) -> pd.DataFrame:
        """Get a dataframe with the kind, operands and value of every node.

        ::

            >>> from circuitgraph import Builder
            >>> b = Builder()
            >>> x = b.new_input()
            >>> y = b.add(x, b.constant(1))
            >>> _ = b.fill_nodes({x: 2})
            >>> b.to_df()  # doctest: +NORMALIZE_WHITESPACE
                       kind        operands  value
            Node0     input                      2
            Node1  constant                      1
            Node2       add  Node0, Node1      3
        """
        infos = self.node_infos()
        return pd.DataFrame(
            {
                "kind": [info.kind.value for info in infos],
                "operands": [", ".join(str(o) for o in info.operands) for info in infos],
                "value": pd.array([info.value for info in infos], dtype=self.arithmetic.pandas_dtype),
            },
            index=pd.Index([str(info.id) for info in infos]),
        )

    def draw(self, *, graph_attr=None, node_attr=None, edge_attr=None, show_constraints=True) -> GraphView:
        """Create a view of the graph for rendering with GraphViz.

        :param graph_attr: Mapping of (attribute, value) pairs for the graph.
        :param node_attr: Mapping of (attribute, value) pairs set for all nodes.
        :param edge_attr: Mapping of (attribute, value) pairs set for all edges.
        :param show_constraints: Whether to draw an edge for each equality constraint.
        """
        return GraphView(
            self,
            graph_attr=graph_attr,
            node_attr=node_attr,
            edge_attr=edge_attr,
            show_constraints=show_constraints,
        )

    def to_dot(self, path=None) -> str:
        """Render the graph in DOT format, also writing it to ``path`` if given."""
        view = self.draw()
        if path is not None:
            view.write(path)
        return view.to_string()

    def _repr_svg_(self):
        return self.draw().svg()
