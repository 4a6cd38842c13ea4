import pytest

from tensorgraph.tensor import Tensor, convol

X = [
    [[[1, 2], [3, 4]], [[5, 6], [7, 8]]],
    [[[9, 10], [11, 12]], [[13, 14], [15, 16]]],
]
Z = [
    [[[-4, -3], [2, 1]], [[-8, -7], [6, 5]]],
    [[[-12, -11], [10, 9]], [[-16, -15], [14, 13]]],
]


@pytest.fixture
def x():
    return Tensor.from_nested(X)


@pytest.fixture
def z():
    return Tensor.from_nested(Z)


def test_ctor_nested(x):
    assert x.data == [float(v) for v in range(1, 17)]
    assert x.shape == (2, 2, 2, 2)


def test_default_tensor_is_empty():
    t = Tensor()
    assert t.shape == (1, 0, 0, 0)
    assert t.data == []


def test_zero_filled_ctor():
    t = Tensor(1, 2, 3, 4)
    assert len(t.data) == 24
    assert all(v == 0 for v in t.data)


def test_from_nested_ragged_raises():
    with pytest.raises(ValueError):
        Tensor.from_nested([[[[1, 2], [3]]]])


def test_from_nested_empty_raises():
    with pytest.raises(ValueError):
        Tensor.from_nested([])


def test_operator_add(x, z):
    res = x + z
    assert res.data == [-3, -1, 5, 5, -3, -1, 13, 13, -3, -1, 21, 21, -3, -1, 29, 29]
    assert res.shape == (2, 2, 2, 2)
    assert x.data[0] == 1


def test_operator_sub(x):
    res = x - x
    assert res.data == [0.0] * 16
    assert res.shape == (2, 2, 2, 2)


def test_add_shape_mismatch(x):
    with pytest.raises(ValueError):
        x + Tensor(1, 1, 1, 1)


def test_sub_shape_mismatch(x):
    with pytest.raises(ValueError):
        x - Tensor(2, 2, 2, 1)


def test_operator_mul1(x):
    e = Tensor.from_nested([[[[0, 1], [1, 0]]] * 2] * 2)
    res = e * x * e
    assert res.data == [4, 3, 2, 1, 8, 7, 6, 5, 12, 11, 10, 9, 16, 15, 14, 13]
    assert res.shape == (2, 2, 2, 2)


def test_operator_mul2(x):
    row = Tensor.from_nested([[[[1, 1]], [[1, 1]]], [[[1, 1]], [[1, 1]]]])
    res = row * x
    assert res.data == [4, 6, 12, 14, 20, 22, 28, 30]
    assert len(res.data) == 8
    assert res.shape == (2, 2, 1, 2)


def test_mul_shape_mismatch(x):
    with pytest.raises(ValueError):
        x * Tensor(2, 2, 3, 2)


def test_imul_tensor_changes_shape(x):
    row = Tensor.from_nested([[[[1, 1]], [[1, 1]]], [[[1, 1]], [[1, 1]]]])
    row *= x
    assert row.shape == (2, 2, 1, 2)
    assert row.data == [4, 6, 12, 14, 20, 22, 28, 30]


def test_operator_mul_number(x):
    res = x * 5
    assert res.shape == x.shape
    for b in range(2):
        for c in range(2):
            for h in range(2):
                for w in range(2):
                    assert res[b, c, h, w] == x[b, c, h, w] * 5


def test_rmul_and_imul_number(x):
    assert (2 * x).data == [2.0 * v for v in range(1, 17)]
    x *= 3
    assert x.data == [3.0 * v for v in range(1, 17)]


def test_square_brackets_match_flat_layout(x):
    n, c, h, w = x.shape
    for i, value in enumerate(x.data):
        b = i // (c * h * w)
        ch = (i % (c * h * w)) // (h * w)
        row = (i % (h * w)) // w
        col = i % w
        assert x[b, ch, row, col] == value


def test_at_and_set_at(x):
    assert x.at(1, 0, 1, 0) == 11
    x.set_at(1, 0, 1, 0, 42)
    assert x[1, 0, 1, 0] == 42
    x[0, 0, 0, 0] = -1
    assert x.data[0] == -1


def test_at_out_of_range(x):
    with pytest.raises(IndexError):
        x.at(2, 0, 0, 0)
    with pytest.raises(IndexError):
        x[0, 0, 0, 2]


def test_bad_index_type(x):
    assert x[0, 1, 1, 1] == 8
    with pytest.raises(TypeError) as excinfo:
        x[0]
    assert excinfo.type is TypeError
    assert x.data == [float(v) for v in range(1, 17)]


def test_relu(z):
    res = z.relu()
    for before, after in zip(z.data, res.data):
        assert after == (before if before > 0 else 0)
    assert z.data[0] == -4


def test_relu_inplace(z):
    z.relu_inplace()
    assert min(z.data) == 0


def test_transpose():
    z = Tensor.from_nested([[[[-4, -3]], [[-8, -7]]], [[[-12, -11]], [[-16, -15]]]])
    res = z.transpose()
    assert res.shape == (2, 2, 2, 1)
    for b in range(2):
        for c in range(2):
            for w in range(2):
                assert res[b, c, w, 0] == z[b, c, 0, w]
    back = res.transpose()
    assert back.shape == z.shape
    assert back.data == z.data


def test_transpose_rectangular():
    t = Tensor.from_nested([[[[1, 2, 3], [4, 5, 6]]]])
    assert t.transpose().data == [1, 4, 2, 5, 3, 6]


def test_convol(x, z):
    res = convol(x, z)
    assert res.shape == (2, 2, 1, 1)
    assert len(res.data) == 4
    assert all(v == 0 for v in res.data)


def test_convol_sliding():
    image = Tensor.from_nested([[[[1, 2, 3], [4, 5, 6], [7, 8, 9]]]])
    kernel = Tensor.from_nested([[[[1, 0], [0, 1]]]])
    res = convol(image, kernel)
    assert res.shape == (1, 1, 2, 2)
    assert res.data == [6, 8, 12, 14]


def test_convol_mismatch(x):
    with pytest.raises(ValueError):
        convol(Tensor(2, 2, 1, 1), x)


def test_softmax(x):
    x.softmax_inplace()
    lo, hi = 0.01798620996209156, 0.9820137900379085
    expected = Tensor.from_nested(
        [
            [[[lo, lo], [lo, lo]], [[hi, hi], [hi, hi]]],
            [[[lo, lo], [lo, lo]], [[hi, hi], [hi, hi]]],
        ]
    )
    assert x == expected


def test_softmax_copy_leaves_original(x):
    res = x.softmax()
    assert x.data[0] == 1
    assert res != x


def test_equality_tolerance():
    a = Tensor.from_nested([[[[1.0]]]])
    b = Tensor.from_nested([[[[1.0 + 1e-6]]]])
    c = Tensor.from_nested([[[[1.1]]]])
    assert a == b
    assert a != c
    assert a != Tensor(1, 1, 1, 2)


def test_set_size():
    t = Tensor.from_nested([[[[1, 2], [3, 4]]]])
    t.set_size(1, 1, 1, 2)
    assert t.shape == (1, 1, 1, 2)
    assert t.data == [1, 2]
    t.set_size(1, 1, 2, 2)
    assert t.data == [1, 2, 0, 0]


def test_dump():
    t = Tensor.from_nested([[[[1, 2], [3, 4]]]])
    assert t.dump() == "batch = 0 {\nchannel = 0 {\n1 2 \n3 4 \n}\n}\n"


def test_dump_init_single():
    t = Tensor.from_nested([[[[1, 2], [3, 4]]]])
    assert t.dump_init() == "{\n{\n{1, 2},\n{3, 4}\n}\n}\n"


def test_dump_init_multi():
    t = Tensor.from_nested([[[[1]], [[2]]], [[[3]], [[4.5]]]])
    assert t.dump_init() == "{\n{\n{1}\n},\n{\n{2}\n}\n},\n{\n{\n{3}\n},\n{\n{4.5}\n}\n}\n"


def test_dump_init_brace_counts(x):
    text = x.dump_init().replace("\n", "")
    # two batches, four channels, eight rows
    assert text.count("{") == 14
    assert text.count("}") == 14