"""Computation-graph nodes: constant tensors, inputs, numbers and operations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from numbers import Real
from typing import Sequence

from tensorgraph.tensor import Tensor, convol


def _fmt(value: float) -> str:
    return f"{value:g}"


class Node(ABC):
    """A vertex of the computation graph."""

    @abstractmethod
    def evaluate(self) -> Tensor:
        """Return the tensor this node stands for."""

    @abstractmethod
    def solved(self) -> bool:
        """Whether the value of this node is already known."""

    def is_operation(self) -> bool:
        return False

    def is_number(self) -> bool:
        return False

    def is_input(self) -> bool:
        return False

    @abstractmethod
    def dump(self) -> str:
        """Graphviz text describing this node."""

    @abstractmethod
    def dump_quotes(self) -> str:
        """Graphviz label text for this node without surrounding quotes."""


class Weight(Node):
    """A constant tensor in the graph."""

    def __init__(self, tensor: Tensor) -> None:
        if not isinstance(tensor, Tensor):
            raise TypeError("Weight requires a Tensor")
        self._tensor = tensor.copy()

    def evaluate(self) -> Tensor:
        return self._tensor

    def solved(self) -> bool:
        return True

    def dump(self) -> str:
        return f'"{self._tensor.dump()}"\n'

    def dump_quotes(self) -> str:
        return self._tensor.dump()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(shape={self._tensor.shape})"


class InputData(Weight):
    """The input tensor of a network."""

    def is_input(self) -> bool:
        return True

    def dump(self) -> str:
        return "INPUT"

    def dump_quotes(self) -> str:
        return "INPUT"


class Number(Node):
    """A scalar operand; it has no tensor value of its own."""

    def __init__(self, value: float) -> None:
        self._value = float(value)

    def val(self) -> float:
        return self._value

    def evaluate(self) -> Tensor:
        raise TypeError("a Number node cannot be evaluated to a tensor")

    def solved(self) -> bool:
        return True

    def is_number(self) -> bool:
        return True

    def dump(self) -> str:
        return f'"{_fmt(self._value)}"\n'

    def dump_quotes(self) -> str:
        return _fmt(self._value)

    def __repr__(self) -> str:
        return f"Number({self._value!r})"


def _as_node(value: Node | Tensor) -> Node:
    if isinstance(value, Node):
        return value
    if isinstance(value, Tensor):
        return Weight(value)
    raise TypeError(f"expected a Node or a Tensor, got {type(value).__name__}")


class Operation(Node):
    """A node whose value is computed from its arguments and then cached."""

    def __init__(self) -> None:
        self._result: Tensor | None = None

    @abstractmethod
    def set_args(self, args: Sequence[Node]) -> None:
        """Replace the arguments of this operation."""

    @abstractmethod
    def get_args(self) -> list[Node]:
        """Return the arguments of this operation in order."""

    @abstractmethod
    def str_type(self) -> str:
        """Name of the operation kind."""

    def solved(self) -> bool:
        return self._result is not None

    def is_operation(self) -> bool:
        return True

    def _edges(self, quote_leaves: bool) -> str:
        parts: list[str] = []
        counter = 0
        queue: deque[tuple[Operation, int]] = deque([(self, 0)])
        while queue:
            op, index = queue.popleft()
            for arg in op.get_args():
                if isinstance(arg, Operation):
                    counter += 1
                    queue.append((arg, counter))
                    parts.append(f'"{arg.str_type()}\n{counter}"')
                elif quote_leaves:
                    counter += 1
                    parts.append(f'"{arg.dump_quotes()}\n{counter}"')
                else:
                    parts.append(arg.dump_quotes())
                parts.append(f' -> "{op.str_type()}\n{index}"\n')
        parts.append(f'"{self.str_type()}\n0"')
        return "".join(parts)

    def dump(self) -> str:
        return self._edges(quote_leaves=True)

    def dump_quotes(self) -> str:
        return self._edges(quote_leaves=False)


class BinaryOperation(Operation):
    """An operation with a left and a right argument."""

    def __init__(self, lhs: Node | Tensor, rhs: Node | Tensor) -> None:
        super().__init__()
        self._lhs = _as_node(lhs)
        self._rhs = _as_node(rhs)

    def set_args(self, args: Sequence[Node]) -> None:
        if len(args) != 2:
            raise ValueError("a binary operation takes exactly 2 arguments")
        self._lhs, self._rhs = args[0], args[1]

    def get_args(self) -> list[Node]:
        return [self._lhs, self._rhs]


class ScalarAddOperation(BinaryOperation):
    def evaluate(self) -> Tensor:
        if self._result is None:
            self._result = self._lhs.evaluate() + self._rhs.evaluate()
        return self._result

    def str_type(self) -> str:
        return "ScalarAddOperation"


class ScalarSubOperation(BinaryOperation):
    def evaluate(self) -> Tensor:
        if self._result is None:
            self._result = self._lhs.evaluate() - self._rhs.evaluate()
        return self._result

    def str_type(self) -> str:
        return "ScalarSubOperation"


def _is_scalar(value: object) -> bool:
    return isinstance(value, Real) or (isinstance(value, Node) and value.is_number())


class ScalarMulOperation(BinaryOperation):
    """Multiplication of a tensor node by a number; the tensor is always the left argument."""

    def __init__(self, first: Node | float, second: Node | float) -> None:
        if _is_scalar(first) and not _is_scalar(second):
            tensor, number = second, first
        else:
            tensor, number = first, second
        if not isinstance(tensor, Node) or tensor.is_number():
            raise TypeError("ScalarMulOperation needs a tensor node")
        if isinstance(number, Real):
            number = Number(float(number))
        elif not (isinstance(number, Node) and number.is_number()):
            raise TypeError("ScalarMulOperation needs a number")
        super().__init__(tensor, number)
        self._number = number.val()

    def set_args(self, args: Sequence[Node]) -> None:
        if len(args) != 2:
            raise ValueError("a binary operation takes exactly 2 arguments")
        first, second = args
        if first.is_number() and not second.is_number():
            number, tensor = first, second
        elif second.is_number() and not first.is_number():
            tensor, number = first, second
        else:
            raise ValueError("ScalarMulOperation.set_args needs exactly one number")
        self._number = number.val()  # type: ignore[attr-defined]
        self._lhs, self._rhs = tensor, number

    def evaluate(self) -> Tensor:
        if self._result is None:
            self._result = self._lhs.evaluate() * self._number
        return self._result

    def str_type(self) -> str:
        return "ScalarMulOperation"


class MatMulOperation(BinaryOperation):
    def evaluate(self) -> Tensor:
        if self._result is None:
            self._result = self._lhs.evaluate() * self._rhs.evaluate()
        return self._result

    def str_type(self) -> str:
        return "MatMulOperation"


class ConvolOperation(BinaryOperation):
    def evaluate(self) -> Tensor:
        if self._result is None:
            self._result = convol(self._lhs.evaluate(), self._rhs.evaluate())
        return self._result

    def str_type(self) -> str:
        return "ConvolOperation"


class UnaryOperation(Operation):
    """An operation with a single argument."""

    def __init__(self, arg: Node | Tensor) -> None:
        super().__init__()
        self._arg = _as_node(arg)

    def set_args(self, args: Sequence[Node]) -> None:
        if len(args) != 1:
            raise ValueError("a unary operation takes exactly 1 argument")
        self._arg = args[0]

    def get_args(self) -> list[Node]:
        return [self._arg]


class ReLUOperation(UnaryOperation):
    def evaluate(self) -> Tensor:
        if self._result is None:
            self._result = self._arg.evaluate().relu()
        return self._result

    def str_type(self) -> str:
        return "ReLUOperation"


class SoftmaxOperation(UnaryOperation):
    def evaluate(self) -> Tensor:
        if self._result is None:
            self._result = self._arg.evaluate().softmax()
        return self._result

    def str_type(self) -> str:
        return "SoftmaxOperation"