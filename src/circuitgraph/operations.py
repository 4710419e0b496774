"""Operations that derived nodes carry."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from .arithmetic import WrappingArithmetic
from .consts import OpKinds
from .nodeid import NodeId

HintFunction = Callable[[Sequence[int]], int]


class Operation:
    """Base class for node operations.

    ``operands`` lists the nodes whose values the operation reads, in the order they are passed to
    :meth:`apply`.
    """

    kind: OpKinds
    operands: tuple[NodeId, ...] = ()

    @property
    def label(self) -> str:
        """Short summary used when rendering the graph."""
        raise NotImplementedError()

    def apply(self, values: Sequence[int], arithmetic: WrappingArithmetic) -> int:
        """Compute the node value from resolved operand values."""
        raise NotImplementedError()


@dataclass(frozen=True)
class Constant(Operation):
    """A fixed value, known at construction."""

    value: int
    kind = OpKinds.CONSTANT

    @property
    def operands(self) -> tuple[NodeId, ...]:
        return ()

    @property
    def label(self) -> str:
        return f"Const({self.value})"

    def apply(self, values: Sequence[int], arithmetic: WrappingArithmetic) -> int:
        return arithmetic.normalize(self.value)

    def __str__(self):
        return self.label


@dataclass(frozen=True)
class Add(Operation):
    """Sum of two nodes, wrapping at the value width."""

    left: NodeId
    right: NodeId
    kind = OpKinds.ADD

    @property
    def operands(self) -> tuple[NodeId, ...]:
        return (self.left, self.right)

    @property
    def label(self) -> str:
        return f"Add {self.left} + {self.right}"

    def apply(self, values: Sequence[int], arithmetic: WrappingArithmetic) -> int:
        a, b = values
        return arithmetic.add(a, b)

    def __str__(self):
        return f"Add({self.left}, {self.right})"


@dataclass(frozen=True)
class Multiply(Operation):
    """Product of two nodes, wrapping at the value width."""

    left: NodeId
    right: NodeId
    kind = OpKinds.MUL

    @property
    def operands(self) -> tuple[NodeId, ...]:
        return (self.left, self.right)

    @property
    def label(self) -> str:
        return f"Mul {self.left} * {self.right}"

    def apply(self, values: Sequence[int], arithmetic: WrappingArithmetic) -> int:
        a, b = values
        return arithmetic.mul(a, b)

    def __str__(self):
        return f"Mul({self.left}, {self.right})"


@dataclass(frozen=True)
class Hint(Operation):
    """A value produced by an unverified function of the operand values.

    The function receives the operand values as a list, in declared order, and must return one
    integer. Its result is reduced into the value domain but otherwise trusted; pair a hint with
    :meth:`circuitgraph.Builder.assert_equal` against native operations to check it.
    """

    args: tuple[NodeId, ...]
    func: HintFunction
    kind = OpKinds.HINT

    @property
    def operands(self) -> tuple[NodeId, ...]:
        return self.args

    @property
    def label(self) -> str:
        return "Hint"

    def apply(self, values: Sequence[int], arithmetic: WrappingArithmetic) -> int:
        return arithmetic.normalize(self.func(list(values)))

    def __str__(self):
        name = getattr(self.func, "__name__", "func")
        return f"Hint({', '.join(str(a) for a in self.args)}; {name})"
