"""Four-dimensional tensors in NCHW layout and the arithmetic used by graph nodes."""

from __future__ import annotations

import math
from numbers import Real
from typing import Iterable, Sequence

_EPS = 1e-10


def _fmt(value: float) -> str:
    return f"{value:g}"


class Tensor:
    """A dense tensor of shape (batches, channels, height, width) stored row-major."""

    __slots__ = ("n", "c", "h", "w", "data")

    def __init__(self, n: int = 1, c: int = 0, h: int = 0, w: int = 0) -> None:
        for dim in (n, c, h, w):
            if dim < 0:
                raise ValueError("tensor dimensions must be non-negative")
        self.n = n
        self.c = c
        self.h = h
        self.w = w
        self.data: list[float] = [0.0] * (n * c * h * w)

    @classmethod
    def from_nested(cls, init: Sequence[Sequence[Sequence[Sequence[float]]]]) -> "Tensor":
        """Build a tensor from a four-level nested sequence of numbers."""
        try:
            n = len(init)
            c = len(init[0])
            h = len(init[0][0])
            w = len(init[0][0][0])
        except (IndexError, TypeError) as exc:
            raise ValueError("nested initializer must have four non-empty levels") from exc

        tensor = cls(n, c, h, w)
        values: list[float] = []
        for batch in init:
            if len(batch) != c:
                raise ValueError("ragged nested initializer: channel count differs")
            for channel in batch:
                if len(channel) != h:
                    raise ValueError("ragged nested initializer: row count differs")
                for row in channel:
                    if len(row) != w:
                        raise ValueError("ragged nested initializer: column count differs")
                    values.extend(float(x) for x in row)
        tensor.data = values
        return tensor

    # element access

    def _offset(self, b: int, i: int, j: int, k: int) -> int:
        if not (0 <= b < self.n and 0 <= i < self.c and 0 <= j < self.h and 0 <= k < self.w):
            raise IndexError(f"index {(b, i, j, k)} out of range for shape {self.shape}")
        return ((b * self.c + i) * self.h + j) * self.w + k

    def at(self, b: int, i: int, j: int, k: int) -> float:
        """Return the element at (batch, channel, row, column)."""
        return self.data[self._offset(b, i, j, k)]

    def set_at(self, b: int, i: int, j: int, k: int, value: float) -> None:
        """Store ``value`` at (batch, channel, row, column)."""
        self.data[self._offset(b, i, j, k)] = float(value)

    @staticmethod
    def _unpack(index: object) -> tuple[int, int, int, int]:
        if not isinstance(index, tuple) or len(index) != 4:
            raise TypeError("tensor index must be a tuple (batch, channel, row, column)")
        return index  # type: ignore[return-value]

    def __getitem__(self, index: tuple[int, int, int, int]) -> float:
        return self.at(*self._unpack(index))

    def __setitem__(self, index: tuple[int, int, int, int], value: float) -> None:
        self.set_at(*self._unpack(index), value)

    # size

    @property
    def shape(self) -> tuple[int, int, int, int]:
        return (self.n, self.c, self.h, self.w)

    def set_size(self, n: int, c: int, h: int, w: int) -> None:
        """Change the dimensions, truncating or zero-extending the flat data."""
        for dim in (n, c, h, w):
            if dim < 0:
                raise ValueError("tensor dimensions must be non-negative")
        size = n * c * h * w
        if size <= len(self.data):
            del self.data[size:]
        else:
            self.data.extend([0.0] * (size - len(self.data)))
        self.n, self.c, self.h, self.w = n, c, h, w

    def copy(self) -> "Tensor":
        result = Tensor(*self.shape)
        result.data = list(self.data)
        return result

    # comparison

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tensor):
            return NotImplemented
        if self.shape != other.shape:
            return False
        return all((a - b) * (a - b) <= _EPS for a, b in zip(self.data, other.data))

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None  # type: ignore[assignment]

    # element-wise arithmetic

    def _check_same_shape(self, other: "Tensor", op: str) -> None:
        if self.shape != other.shape:
            raise ValueError(f"shape mismatch in {op}: {self.shape} vs {other.shape}")

    def __iadd__(self, other: "Tensor") -> "Tensor":
        if not isinstance(other, Tensor):
            return NotImplemented
        self._check_same_shape(other, "addition")
        self.data = [a + b for a, b in zip(self.data, other.data)]
        return self

    def __add__(self, other: "Tensor") -> "Tensor":
        if not isinstance(other, Tensor):
            return NotImplemented
        result = self.copy()
        result += other
        return result

    def __isub__(self, other: "Tensor") -> "Tensor":
        if not isinstance(other, Tensor):
            return NotImplemented
        self._check_same_shape(other, "subtraction")
        self.data = [a - b for a, b in zip(self.data, other.data)]
        return self

    def __sub__(self, other: "Tensor") -> "Tensor":
        if not isinstance(other, Tensor):
            return NotImplemented
        result = self.copy()
        result -= other
        return result

    # multiplication: by a number scales, by a tensor is a batched matrix product

    def _matmul(self, other: "Tensor") -> "Tensor":
        if self.w != other.h or self.c != other.c or self.n != other.n:
            raise ValueError(f"cannot multiply tensors of shapes {self.shape} and {other.shape}")
        result = Tensor(self.n, self.c, self.h, other.w)
        rhs_t = other.transpose()
        lhs_block = self.h * self.w
        rhs_block = rhs_t.h * rhs_t.w
        out = []
        for block in range(self.n * self.c):
            lhs_rows = [
                self.data[block * lhs_block + r * self.w: block * lhs_block + (r + 1) * self.w]
                for r in range(self.h)
            ]
            rhs_cols = [
                rhs_t.data[block * rhs_block + r * rhs_t.w: block * rhs_block + (r + 1) * rhs_t.w]
                for r in range(rhs_t.h)
            ]
            for row in lhs_rows:
                out.extend(sum(a * b for a, b in zip(row, col)) for col in rhs_cols)
        result.data = out
        return result

    def __mul__(self, other: "Tensor | float") -> "Tensor":
        if isinstance(other, Tensor):
            return self._matmul(other)
        if isinstance(other, Real):
            result = self.copy()
            result *= other
            return result
        return NotImplemented

    def __rmul__(self, other: float) -> "Tensor":
        if isinstance(other, Real):
            return self * other
        return NotImplemented

    def __imul__(self, other: "Tensor | float") -> "Tensor":
        if isinstance(other, Tensor):
            product = self._matmul(other)
            self.n, self.c, self.h, self.w = product.shape
            self.data = product.data
            return self
        if isinstance(other, Real):
            factor = float(other)
            self.data = [x * factor for x in self.data]
            return self
        return NotImplemented

    # other math

    def transpose(self) -> "Tensor":
        """Swap the height and width axes of every (batch, channel) matrix."""
        result = Tensor(self.n, self.c, self.w, self.h)
        block = self.h * self.w
        out = []
        for start in range(0, self.n * self.c * block, block):
            matrix = self.data[start:start + block]
            for j in range(self.w):
                out.extend(matrix[j::self.w])
        result.data = out
        return result

    def relu_inplace(self) -> "Tensor":
        self.data = [x if x > 0 else 0.0 for x in self.data]
        return self

    def relu(self) -> "Tensor":
        return self.copy().relu_inplace()

    def softmax_inplace(self) -> "Tensor":
        """Apply softmax across channels for every (batch, row, column) position."""
        plane = self.h * self.w
        for b in range(self.n):
            base = b * self.c * plane
            for pos in range(plane):
                indices = [base + ch * plane + pos for ch in range(self.c)]
                exps = [math.exp(self.data[i]) for i in indices]
                total = sum(exps)
                for i, e in zip(indices, exps):
                    self.data[i] = e / total
        return self

    def softmax(self) -> "Tensor":
        return self.copy().softmax_inplace()

    # text output

    def _rows(self, b: int, ch: int) -> Iterable[list[float]]:
        for j in range(self.h):
            start = ((b * self.c + ch) * self.h + j) * self.w
            yield self.data[start:start + self.w]

    def dump(self) -> str:
        """Human-readable listing of every batch and channel."""
        parts = []
        for b in range(self.n):
            parts.append(f"batch = {b} {{\n")
            for ch in range(self.c):
                parts.append(f"channel = {ch} {{\n")
                for row in self._rows(b, ch):
                    parts.append("".join(_fmt(x) + " " for x in row) + "\n")
                parts.append("}\n")
            parts.append("}\n")
        return "".join(parts)

    def dump_init(self) -> str:
        """Brace-nested listing that mirrors the nested initializer form."""
        parts = []
        for b in range(self.n):
            parts.append("{\n")
            for ch in range(self.c):
                parts.append("{\n")
                rows = list(self._rows(b, ch))
                for j, row in enumerate(rows):
                    sep = ",\n" if j < len(rows) - 1 else "\n"
                    parts.append("{" + ", ".join(_fmt(x) for x in row) + "}" + sep)
                parts.append("},\n" if ch < self.c - 1 else "}\n")
            parts.append("},\n" if b < self.n - 1 else "}\n")
        return "".join(parts)

    def __repr__(self) -> str:
        return f"Tensor(shape={self.shape})"


def convol(lhs: Tensor, rhs: Tensor) -> Tensor:
    """Valid 2-D cross-correlation of each (batch, channel) matrix with its kernel."""
    n, c, hl, wl = lhs.shape
    hr, wr = rhs.h, rhs.w
    if c != rhs.c or n != rhs.n or hl < hr or wl < wr:
        raise ValueError(f"cannot convolve tensors of shapes {lhs.shape} and {rhs.shape}")
    out_h, out_w = hl - hr + 1, wl - wr + 1
    result = Tensor(n, c, out_h, out_w)
    out = []
    for b in range(n):
        for ch in range(c):
            image = list(lhs._rows(b, ch))
            kernel = list(rhs._rows(b, ch))
            for i in range(out_h):
                for j in range(out_w):
                    out.append(
                        sum(
                            sum(a * k for a, k in zip(image_row[j:j + wr], kernel_row))
                            for image_row, kernel_row in zip(image[i:i + hr], kernel)
                        )
                    )
    result.data = out
    return result