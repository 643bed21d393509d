################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Row-major 3x3 matrix for rotations and scales."""

from __future__ import annotations

import math
from typing import Any

import numpy as np
from numpy.typing import NDArray

from .validation import coerce_cells
from .vector import DEFAULT_ATOL
from .vector import DEFAULT_RTOL
from .vector import TVec3


class Matrix33:
    """3x3 linear transform.

    Data contract:
        - `data` holds 9 float32 cells in row-major order; row r, column c
          lives at index r * 3 + c.
        - Vectors are columns multiplied on the right, so `A * B * v` applies
          B first and then A.

    Determinism and edge cases:
        - No invariant is enforced on the contents; the matrix may be
          singular.
        - `multiply()` may write into one of its own operands.
    """

    SIZE: int = 3
    DTYPE: type[np.floating] = np.float32

    __slots__ = ("data",)

    def __init__(self, data: Any = None) -> None:
        """Create a matrix from 9 row-major cells, or all zeros."""
        cells: NDArray[np.float32]
        if data is None:
            cells = np.zeros(9, dtype=self.DTYPE)
        else:
            cells = coerce_cells(data, 9, self.DTYPE, "Matrix33")
        self.data: NDArray[np.float32] = cells

    @staticmethod
    def identity() -> Matrix33:
        return Matrix33.from_array(
            [
                [1.0, 0.0, 0.0],
                [0.0, 1.0, 0.0],
                [0.0, 0.0, 1.0],
            ]
        )

    @staticmethod
    def from_array(values: Any) -> Matrix33:
        """Create a matrix from 9 row-major scalars (or 3 rows of 3)."""
        return Matrix33(values)

    # Rotations are counter-clockwise when looking from the positive axis
    # toward the origin

    @staticmethod
    def rotate_x(rad: float) -> Matrix33:
        """Return a rotation matrix around the x axis."""
        c: float = math.cos(rad)
        s: float = math.sin(rad)
        return Matrix33.from_array(
            [
                [1.0, 0.0, 0.0],
                [0.0, c, -s],
                [0.0, s, c],
            ]
        )

    @staticmethod
    def rotate_y(rad: float) -> Matrix33:
        """Return a rotation matrix around the y axis."""
        c: float = math.cos(rad)
        s: float = math.sin(rad)
        return Matrix33.from_array(
            [
                [c, 0.0, s],
                [0.0, 1.0, 0.0],
                [-s, 0.0, c],
            ]
        )

    @staticmethod
    def rotate_z(rad: float) -> Matrix33:
        """Return a rotation matrix around the z axis."""
        c: float = math.cos(rad)
        s: float = math.sin(rad)
        return Matrix33.from_array(
            [
                [c, -s, 0.0],
                [s, c, 0.0],
                [0.0, 0.0, 1.0],
            ]
        )

    @staticmethod
    def scale(vec: TVec3) -> Matrix33:
        """Return a diagonal matrix with vec on the diagonal."""
        return Matrix33.from_array(
            [
                [vec.x, 0.0, 0.0],
                [0.0, vec.y, 0.0],
                [0.0, 0.0, vec.z],
            ]
        )

    @staticmethod
    def multiply(
        a: Matrix33,
        b: Matrix33 | TVec3,
        result: Matrix33 | TVec3,
    ) -> None:
        """Set result = a x b.

        `b` is either a matrix (result must be a matrix) or a column vector
        (result must be a vector). `result` may be the same object as `a`
        or `b`.
        """
        product: NDArray[np.floating]
        if isinstance(b, Matrix33):
            if not isinstance(result, Matrix33):
                raise TypeError("multiply expects a Matrix33 result")
            with np.errstate(all="ignore"):
                product = a._rows() @ b._rows()
            result.data[:] = product.reshape(9)
        elif isinstance(b, TVec3):
            if not isinstance(result, TVec3):
                raise TypeError("multiply expects a 3-vector result")
            with np.errstate(all="ignore"):
                product = a._rows() @ b.data
            result.data[:] = product
        else:
            raise TypeError("multiply expects a Matrix33 or 3-vector operand")

    def transposed(self) -> Matrix33:
        return Matrix33(self._rows().T)

    def as_rows(self) -> NDArray[np.float32]:
        """Return a 3x3 copy of the cells."""
        return self._rows().copy()

    def copy(self) -> Matrix33:
        return Matrix33(self.data)

    def is_close(
        self,
        other: Matrix33,
        atol: float = DEFAULT_ATOL,
        rtol: float = DEFAULT_RTOL,
    ) -> bool:
        """Return True when all cells agree within tolerance."""
        if not isinstance(other, Matrix33):
            raise TypeError("is_close expects a Matrix33")
        return bool(np.allclose(self.data, other.data, atol=atol, rtol=rtol))

    def __imul__(self, rhs: object) -> Matrix33:
        if not isinstance(rhs, Matrix33):
            return NotImplemented
        Matrix33.multiply(self, rhs, self)
        return self

    def __mul__(self, rhs: object) -> Any:
        if isinstance(rhs, Matrix33):
            result: Matrix33 = self.copy()
            result *= rhs
            return result
        if isinstance(rhs, TVec3):
            vec: TVec3 = rhs.copy()
            Matrix33.multiply(self, vec, vec)
            return vec
        return NotImplemented

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix33):
            return NotImplemented
        return bool(np.array_equal(self.data, other.data))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Matrix33({self._rows().tolist()!r})"

    def _rows(self) -> NDArray[np.float32]:
        return self.data.reshape(3, 3)
