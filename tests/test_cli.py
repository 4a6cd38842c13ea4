import pytest

from tensorgraph.cli import build_demo_network, main
from tensorgraph.nodes import ScalarMulOperation
from tensorgraph.tensor import Tensor

EXPECTED_OUTPUT = (
    "{\n{\n{12}\n},\n{\n{12}\n}\n},\n"
    "{\n{\n{12}\n},\n{\n{12}\n}\n}\n"
)


def test_build_demo_network_result():
    nn = build_demo_network()
    assert type(nn.infer_node()) is ScalarMulOperation
    expected = Tensor.from_nested([[[[12]], [[12]]], [[[12]], [[12]]]])
    assert nn.infer() == expected


def test_main_prints_result_and_graph(capsys):
    assert main([]) == 0
    captured = capsys.readouterr()
    assert captured.out == EXPECTED_OUTPUT
    assert captured.err.startswith("digraph G {\n")
    assert captured.err.endswith('"ScalarMulOperation\n0" -> OUTPUT\n}')
    assert '"INPUT\n5" -> "ConvolOperation\n3"\n' in captured.err


def test_main_rejects_unknown_arguments(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--bogus"])
    assert excinfo.value.code == 2