"""Visualization tools for computation graphs using Graphviz."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import networkx as nx
import pydotplus

from .consts import OpKinds, States

if TYPE_CHECKING:
    from .computeengine import Builder, NodeInfo


class NodeFormatter(ABC):
    """Abstract base class for node formatting in visualizations."""

    @abstractmethod
    def format(self, info: "NodeInfo") -> dict | None:
        """Format node appearance returning dict of graphviz attributes."""
        pass

    @staticmethod
    def create(state_colors: dict | None = None, shapes: str | None = "kind"):
        """Create a composite node formatter with specified color and shape options."""
        node_formatters = [StandardLabel(), ColorByState(state_colors)]

        if isinstance(shapes, str):
            shapes = shapes.lower()
        if shapes == "kind":
            node_formatters.append(ShapeByKind())
        elif shapes is None:
            pass
        else:
            raise ValueError(f"{shapes} is not a valid circuitgraph shapes parameter for visualization")

        return CompositeNodeFormatter(node_formatters)


class StandardLabel(NodeFormatter):
    """Node formatter that labels each node with its operation."""

    def format(self, info: "NodeInfo") -> dict | None:
        """Return label summarizing the node's operation."""
        return {"label": info.label, "tooltip": f"{info.id} = {info.value}"}


class ColorByState(NodeFormatter):
    """Node formatter that colors nodes by whether they hold a value."""

    DEFAULT_STATE_COLORS = {
        States.UNRESOLVED: "#0343df",  # xkcd blue
        States.RESOLVED: "#15b01a",  # xkcd green
    }

    def __init__(self, state_colors=None):
        """Initialize with custom state color mapping."""
        if state_colors is None:
            state_colors = self.DEFAULT_STATE_COLORS.copy()
        self.state_colors = state_colors

    def format(self, info: "NodeInfo") -> dict | None:
        """Format node color based on state."""
        state = States.UNRESOLVED if info.value is None else States.RESOLVED
        return {"style": "filled", "fillcolor": self.state_colors[state]}


class ShapeByKind(NodeFormatter):
    """Node formatter that sets node shapes based on their operation."""

    KIND_SHAPES = {
        OpKinds.INPUT: {"shape": "invhouse"},
        OpKinds.CONSTANT: {"shape": "box"},
        OpKinds.ADD: {"shape": "ellipse"},
        OpKinds.MUL: {"shape": "ellipse", "peripheries": 2},
        OpKinds.HINT: {"shape": "diamond"},
    }

    def format(self, info: "NodeInfo") -> dict | None:
        """Format a node with kind-based shape styling."""
        return self.KIND_SHAPES.get(info.kind)


@dataclass
class CompositeNodeFormatter(NodeFormatter):
    """A node formatter that combines multiple formatters together."""

    formatters: list[NodeFormatter] = field(default_factory=list)

    def format(self, info: "NodeInfo") -> dict | None:
        """Format a node by combining output from all contained formatters."""
        d = {}
        for formatter in self.formatters:
            format_attrs = formatter.format(info)
            if format_attrs is not None:
                d.update(format_attrs)
        return d


CONSTRAINT_OK_COLOR = "#15b01a"  # xkcd green
CONSTRAINT_FAILED_COLOR = "#e50000"  # xkcd red


@dataclass
class GraphView:
    """A view for visualizing computation graphs as graphical diagrams."""

    builder: "Builder"
    node_formatter: NodeFormatter | None = None
    show_constraints: bool = True

    graph_attr: dict | None = None
    node_attr: dict | None = None
    edge_attr: dict | None = None

    viz_dag: nx.MultiDiGraph | None = None
    viz_dot: pydotplus.Dot | None = None

    def __post_init__(self):
        """Initialize the graph view after dataclass construction."""
        self.refresh()

    def refresh(self):
        """Refresh the visualization from the builder's current state."""
        node_formatter = self.node_formatter
        if node_formatter is None:
            node_formatter = NodeFormatter.create()
        self.viz_dag = create_viz_dag(self.builder, node_formatter, self.show_constraints)
        self.viz_dot = to_pydot(self.viz_dag, self.graph_attr, self.node_attr, self.edge_attr)

    def to_string(self) -> str:
        """Return the DOT description of the graph."""
        return self.viz_dot.to_string()

    def write(self, path):
        """Write the DOT description of the graph to ``path``."""
        with open(path, "w") as f:
            f.write(self.to_string())

    def svg(self) -> str | None:
        """Generate SVG representation of the visualization. Requires the GraphViz binaries."""
        if self.viz_dot is None:
            return None
        return self.viz_dot.create_svg().decode("utf-8")

    def _repr_svg_(self):
        return self.svg()


def create_viz_dag(builder: "Builder", node_formatter: NodeFormatter, show_constraints: bool = True) -> nx.MultiDiGraph:
    """Create a visualization graph: one vertex per node, one edge per operand slot.

    Constraints, if shown, are extra dashed edges without arrowheads, colored by whether they hold.
    """
    viz_dag = nx.MultiDiGraph()
    for info in builder.node_infos():
        attr_dict = node_formatter.format(info) or {}
        attr_dict = {k: v for k, v in attr_dict.items() if v is not None}
        viz_dag.add_node(str(info.id), **attr_dict)

    for operand, node_id, _position in builder.graph.operand_edges():
        viz_dag.add_edge(str(operand), str(node_id))

    if show_constraints:
        for result in builder.constraint_results():
            color = CONSTRAINT_OK_COLOR if result.ok else CONSTRAINT_FAILED_COLOR
            viz_dag.add_edge(str(result.a), str(result.b), style="dashed", dir="none", color=color)

    return viz_dag


def to_pydot(viz_dag, graph_attr=None, node_attr=None, edge_attr=None) -> pydotplus.Dot:
    """Convert a visualization graph to a PyDot graph for rendering."""
    root_graph = create_root_graph(graph_attr, node_attr, edge_attr)
    for name, data in viz_dag.nodes(data=True):
        node = pydotplus.Node(name)
        for k, v in data.items():
            node.set(k, v)
        root_graph.add_node(node)
    for name1, name2, data in viz_dag.edges(data=True):
        edge = pydotplus.Edge(name1, name2)
        for k, v in data.items():
            edge.set(k, v)
        root_graph.add_edge(edge)
    return root_graph


def create_root_graph(graph_attr, node_attr, edge_attr):
    """Create root Graphviz graph with specified attributes.

    Notes:
        Graphviz attributes like size expect a quoted string when containing
        commas (e.g. "10,8"). Some pydotplus setters don't auto-quote, so
        string values containing commas or whitespace are quoted here.
    """

    def _normalize_attr_value(v):
        if isinstance(v, (int, float)):
            return v
        s = str(v)
        if len(s) >= 2 and ((s[0] == '"' and s[-1] == '"') or (s[0] == "'" and s[-1] == "'")):
            return s
        if any(c in s for c in [",", " ", "\t", "\n"]) or s == "":
            return f'"{s}"'
        return s

    root_graph = pydotplus.Dot(graph_name="ComputationalGraph", graph_type="digraph")
    if graph_attr is not None:
        for k, v in graph_attr.items():
            root_graph.set(k, _normalize_attr_value(v))
    if node_attr is not None:
        node_defaults = {k: _normalize_attr_value(v) for k, v in node_attr.items()}
        root_graph.set_node_defaults(**node_defaults)
    if edge_attr is not None:
        edge_defaults = {k: _normalize_attr_value(v) for k, v in edge_attr.items()}
        root_graph.set_edge_defaults(**edge_defaults)
    return root_graph
