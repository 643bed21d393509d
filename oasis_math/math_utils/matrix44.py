################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Row-major 4x4 matrix for affine and projective transforms."""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import NDArray

from .matrix33 import Matrix33
from .validation import coerce_cells
from .vector import DEFAULT_ATOL
from .vector import DEFAULT_RTOL
from .vector import DVec4
from .vector import TVec3
from .vector import TVec4
from .vector import Vec4


class Matrix44:
    """4x4 homogeneous transform.

    Responsibility:
        Build translation, shear and perspective transforms and compose them
        with the 3x3 rotations and scales of Matrix33.

    Data contract:
        - `data` holds 16 float32 cells in row-major order; row r, column c
          lives at index r * 4 + c.
        - Points are homogeneous column vectors (x, y, z, w) multiplied on
          the right.

    Determinism and edge cases:
        - Builders do not validate their inputs. Degenerate perspective
          parameters (z_near == z_far, fov_y of 0 or pi, zero aspect ratio)
          produce inf/NaN cells.
        - `multiply()` may write into one of its own operands.

    Equations:
        Perspective, with f = 1 / tan(fov_y / 2) and d = near - far:
            [f / aspect, 0,  0,                0             ]
            [0,          f,  0,                0             ]
            [0,          0,  (far + near) / d, 2 far near / d]
            [0,          0, -1,                0             ]
    """

    SIZE: int = 4
    DTYPE: type[np.floating] = np.float32

    __slots__ = ("data",)

    def __init__(self, data: Any = None) -> None:
        """Create a matrix from 16 row-major cells, or all zeros."""
        cells: NDArray[np.float32]
        if data is None:
            cells = np.zeros(16, dtype=self.DTYPE)
        else:
            cells = coerce_cells(data, 16, self.DTYPE, "Matrix44")
        self.data: NDArray[np.float32] = cells

    @staticmethod
    def identity() -> Matrix44:
        return Matrix44.from_array(
            [
                [1.0, 0.0, 0.0, 0.0],
                [0.0, 1.0, 0.0, 0.0],
                [0.0, 0.0, 1.0, 0.0],
                [0.0, 0.0, 0.0, 1.0],
            ]
        )

    @staticmethod
    def from_matrix33(m33: Matrix33) -> Matrix44:
        """Embed a 3x3 linear transform with no translation."""
        mtx: Matrix44 = Matrix44.identity()
        mtx._rows()[:3, :3] = m33.as_rows()
        return mtx

    @staticmethod
    def from_array(values: Any) -> Matrix44:
        """Create a matrix from 16 row-major scalars (or 4 rows of 4)."""
        return Matrix44(values)

    @staticmethod
    def translate(vec: TVec3) -> Matrix44:
        """Return a transform adding vec to points with w = 1."""
        mtx: Matrix44 = Matrix44.identity()
        mtx.data[3] = vec.x
        mtx.data[7] = vec.y
        mtx.data[11] = vec.z
        return mtx

    @staticmethod
    def shear(a: float, b: float = 0.0) -> Matrix44:
        """Return a shear of x by a * z and y by b * z.

        Used to offset the view horizontally for stereoscopic rendering.
        """
        mtx: Matrix44 = Matrix44.identity()
        mtx.data[2] = a
        mtx.data[6] = b
        return mtx

    @staticmethod
    def perspective(
        fov_y: float, aspect_ratio: float, z_near: float, z_far: float
    ) -> Matrix44:
        """Return a right-handed OpenGL-style projection.

        Args:
            fov_y: Vertical field of view in radians
            aspect_ratio: Viewport width divided by height
            z_near: Distance to the near clip plane
            z_far: Distance to the far clip plane
        """
        with np.errstate(all="ignore"):
            f: np.float64 = np.float64(1.0) / np.tan(np.float64(fov_y) / 2.0)
            depth: np.float64 = np.float64(z_near) - np.float64(z_far)
            z_scale: np.float64 = np.float64(z_far + z_near) / depth
            z_offset: np.float64 = np.float64(2.0 * z_far * z_near) / depth
            return Matrix44.from_array(
                [
                    [f / aspect_ratio, 0.0, 0.0, 0.0],
                    [0.0, f, 0.0, 0.0],
                    [0.0, 0.0, z_scale, z_offset],
                    [0.0, 0.0, -1.0, 0.0],
                ]
            )

    @staticmethod
    def multiply(
        a: Matrix44,
        b: Matrix44 | TVec4,
        result: Matrix44 | TVec4,
    ) -> None:
        """Set result = a x b.

        `b` is either a matrix (result must be a matrix) or a homogeneous
        column vector (result must be a 4-vector). `result` may be the same
        object as `a` or `b`.
        """
        product: NDArray[np.floating]
        if isinstance(b, Matrix44):
            if not isinstance(result, Matrix44):
                raise TypeError("multiply expects a Matrix44 result")
            with np.errstate(all="ignore"):
                product = a._rows() @ b._rows()
            result.data[:] = product.reshape(16)
        elif isinstance(b, TVec4):
            if not isinstance(result, TVec4):
                raise TypeError("multiply expects a 4-vector result")
            with np.errstate(all="ignore"):
                product = a._rows() @ b.data
            result.data[:] = product
        else:
            raise TypeError("multiply expects a Matrix44 or 4-vector operand")

    def transform(self, point: TVec3, w: float) -> TVec3:
        """Return the xyz of self x (point, w).

        The homogeneous point has the same scalar width as `point`, so a
        DVec3 keeps float64 precision through the product. No perspective
        division is performed; callers needing it must divide by the
        resulting w themselves.
        """
        vec4_type: type[TVec4] = DVec4 if point.DTYPE == np.float64 else Vec4
        result: TVec4 = vec4_type.from_vec3(point, w)
        Matrix44.multiply(self, result, result)
        return type(point)(result.x, result.y, result.z)

    def transposed(self) -> Matrix44:
        return Matrix44(self._rows().T)

    def as_rows(self) -> NDArray[np.float32]:
        """Return a 4x4 copy of the cells."""
        return self._rows().copy()

    def copy(self) -> Matrix44:
        return Matrix44(self.data)

    def is_close(
        self,
        other: Matrix44,
        atol: float = DEFAULT_ATOL,
        rtol: float = DEFAULT_RTOL,
    ) -> bool:
        """Return True when all cells agree within tolerance."""
        if not isinstance(other, Matrix44):
            raise TypeError("is_close expects a Matrix44")
        return bool(np.allclose(self.data, other.data, atol=atol, rtol=rtol))

    def __imul__(self, rhs: object) -> Matrix44:
        if not isinstance(rhs, Matrix44):
            return NotImplemented
        Matrix44.multiply(self, rhs, self)
        return self

    def __mul__(self, rhs: object) -> Any:
        if isinstance(rhs, Matrix44):
            result: Matrix44 = self.copy()
            result *= rhs
            return result
        if isinstance(rhs, TVec4):
            vec: TVec4 = rhs.copy()
            Matrix44.multiply(self, vec, vec)
            return vec
        return NotImplemented

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix44):
            return NotImplemented
        return bool(np.array_equal(self.data, other.data))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Matrix44({self._rows().tolist()!r})"

    def _rows(self) -> NDArray[np.float32]:
        return self.data.reshape(4, 4)
