# tensorgraph

A small pure-Python library for 4-D tensors in (batch, channel, height, width)
layout. It also has a computation graph that chains tensor operations and
evaluates them for inference. It has no dependencies outside the standard
library.

## Modules

- `tensorgraph.tensor`
  - `Tensor(n, c, h, w)` creates a zero-filled tensor.
  - `Tensor.from_nested(...)` builds a tensor from a four-level nested
    sequence and raises `ValueError` when the nesting is ragged or empty.
  - Elements are read with `at(b, i, j, k)` or `t[b, i, j, k]` and written
    with `set_at(...)` or item assignment. Indexing out of range raises
    `IndexError`.
  - `shape` gives the dimensions and `set_size(...)` changes them.
  - `==` treats two tensors as equal when they have the same shape and every
    squared element difference is at most 1e-10.
  - `+` and `-` work element-wise on tensors of the same shape.
  - `*` with another tensor is a matrix product for each (batch, channel)
    pair. `*` with a number scales every element.
  - `transpose()` swaps height and width.
  - `relu()` and `relu_inplace()` apply ReLU.
  - `softmax()` and `softmax_inplace()` apply softmax across the channels.
  - `dump()` gives a readable listing and `dump_init()` gives a nested-brace
    listing.
  - `convol(lhs, rhs)` is a valid 2-D cross-correlation for each batch and
    channel. Shape mismatches raise `ValueError`.
- `tensorgraph.nodes`
  - Leaf nodes:
    - `Weight` holds a constant tensor.
    - `InputData` holds the input and is shown as `INPUT` in graphs.
    - `Number` holds a scalar operand; calling its `evaluate()` raises
      `TypeError`.
  - Operations: `ScalarAddOperation`, `ScalarSubOperation`,
    `ScalarMulOperation`, `MatMulOperation`, `ConvolOperation`,
    `ReLUOperation` and `SoftmaxOperation`.
  - Each operation caches its result after the first `evaluate()`. The
    arguments are read and replaced with `get_args()` and `set_args()`.
  - When an operand is a plain `Tensor`, it is wrapped in a `Weight`.
  - `ScalarMulOperation` takes its number in either position, as a plain
    number or as a `Number` node. The tensor node always becomes the left
    argument.
- `tensorgraph.network`
  - `NeuralNetwork.add_op(op)` registers an operation. The first operation
    becomes the output. A later operation becomes the output when the current
    output is one of its arguments.
  - `infer_node()` returns the current output node.
  - `infer()` evaluates the graph in post-order without recursion and returns
    the output tensor.
  - `dump_graph()` returns the graph as a Graphviz `digraph`.
- `tensorgraph.cli`
  - `build_demo_network()` returns the demonstration network.
  - `main()` runs it.

## Installation

```
pip install .
```

## Usage

```python
from tensorgraph.tensor import Tensor
from tensorgraph.nodes import InputData, ScalarAddOperation, ScalarMulOperation, MatMulOperation
from tensorgraph.network import NeuralNetwork

x = Tensor.from_nested([[[[0]]]])
y = Tensor.from_nested([[[[1]]]])

nn = NeuralNetwork()
inp = InputData(x)
nn.add_op(ScalarAddOperation(inp, y))
nn.add_op(ScalarMulOperation(nn.infer_node(), 2))
nn.add_op(MatMulOperation(nn.infer_node(), y))

print(nn.infer().dump_init())   # the result tensor in nested-brace form
print(nn.dump_graph())          # the graph as a Graphviz digraph
```

## Demo

```
tensorgraph-demo
```

The demo builds a small network:

1. It convolves a 2×2×2×2 input with a 2×2×2×2 weight.
2. It adds a 2×2×1×1 weight.
3. It scales the result by 12.

The result tensor goes to standard output in `dump_init()` form. The graph
goes to standard error in `dot` form. The command takes no options.

## Limits

The package performs inference only. It has no training or gradients. It
cannot load or save tensors or models. It does not render graphs: the `dot`
text has to be passed to Graphviz yourself.

## Tests

```
pip install .[test]
pytest
```