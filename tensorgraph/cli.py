"""Command that builds a small demonstration network and prints its result."""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from tensorgraph.network import NeuralNetwork
from tensorgraph.nodes import (
    ConvolOperation,
    InputData,
    ScalarAddOperation,
    ScalarMulOperation,
)
from tensorgraph.tensor import Tensor

_INPUT = [
    [[[1, 2], [3, 4]], [[5, 6], [7, 8]]],
    [[[9, 10], [11, 12]], [[13, 14], [15, 16]]],
]

_WEIGHT = [
    [[[-4, -3], [2, 1]], [[-8, -7], [6, 5]]],
    [[[-12, -11], [10, 9]], [[-16, -15], [14, 13]]],
]

_BIAS = [
    [[[1]], [[1]]],
    [[[1]], [[1]]],
]


def build_demo_network() -> NeuralNetwork:
    """Convolution of the input, plus a bias, scaled by twelve."""
    nn = NeuralNetwork()
    input_data = InputData(Tensor.from_nested(_INPUT))
    nn.add_op(ConvolOperation(input_data, Tensor.from_nested(_WEIGHT)))
    nn.add_op(ScalarAddOperation(nn.infer_node(), Tensor.from_nested(_BIAS)))
    nn.add_op(ScalarMulOperation(nn.infer_node(), 12))
    return nn


def main(argv: Sequence[str] | None = None) -> int:
    """Print the demo network's output to stdout and its graph to stderr."""
    parser = argparse.ArgumentParser(
        prog="tensorgraph",
        description="Evaluate a demonstration network and print its graph.",
    )
    parser.parse_args(argv)

    nn = build_demo_network()
    sys.stdout.write(nn.infer().dump_init())
    sys.stderr.write(nn.dump_graph())
    return 0


if __name__ == "__main__":
    sys.exit(main())