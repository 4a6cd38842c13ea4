"""A neural network: a computation graph with a single output node."""

from __future__ import annotations

from tensorgraph.nodes import Node, Operation
from tensorgraph.tensor import Tensor


class NeuralNetwork:
    """Collects operations and tracks which one produces the network's output."""

    def __init__(self) -> None:
        self._infer: Node | None = None

    def add_op(self, op: Operation) -> Operation:
        """Register an operation and return it.

        The first operation becomes the output node.  A later operation
        replaces the output node when the current output is one of its
        arguments.
        """
        if not isinstance(op, Operation):
            raise TypeError(f"expected an Operation, got {type(op).__name__}")
        if self._infer is None:
            self._infer = op
        elif any(arg is self._infer for arg in op.get_args()):
            self._infer = op
        return op

    def _require_output(self) -> Node:
        if self._infer is None:
            raise RuntimeError("the network has no operations")
        return self._infer

    def infer(self) -> Tensor:
        """Evaluate the graph in post-order and return the output tensor."""
        root = self._require_output()
        if not root.solved() and root.is_operation():
            stack: list[tuple[Operation, bool]] = [(root, False)]  # type: ignore[list-item]
            while stack:
                op, visited = stack.pop()
                if visited:
                    op.evaluate()
                    continue
                stack.append((op, True))
                stack.extend(
                    (arg, False)  # type: ignore[misc]
                    for arg in op.get_args()
                    if arg.is_operation() and not arg.solved()
                )
        return root.evaluate()

    def dump_graph(self) -> str:
        """Graphviz description of the graph leading to the output."""
        root = self._require_output()
        return f"digraph G {{\n{root.dump()} -> OUTPUT\n}}"

    def infer_node(self) -> Node | None:
        """The node whose value is the network's output, or None if empty."""
        return self._infer