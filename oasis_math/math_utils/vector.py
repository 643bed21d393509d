################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Fixed-size 2, 3 and 4 component vectors over a floating-point scalar.

Each vector owns a single 1-D numpy array `data`. The named components
(x, y, z, w) are properties that index into that array, so writing through
one view is always visible through the other.

The generic classes `TVec2`, `TVec3` and `TVec4` are parameterized over the
scalar width by subclassing: `Vec2`/`Vec3`/`Vec4` store float32 cells and
`DVec2`/`DVec3`/`DVec4` store float64 cells.

Arithmetic never validates the floating-point domain. Normalizing a zero
vector or dividing by zero produces inf/NaN components instead of raising.
"""

from __future__ import annotations

from typing import Any
from typing import ClassVar
from typing import Iterator
from typing import TypeVar

import numpy as np
from numpy.typing import NDArray

from .validation import coerce_cells
from .validation import is_scalar


# Default absolute tolerance for is_close()
DEFAULT_ATOL: float = 1e-5
# Default relative tolerance for is_close()
DEFAULT_RTOL: float = 1e-5

VecT = TypeVar("VecT", bound="TVecBase")


def _component(index: int, doc: str) -> property:
    """Return a read/write property aliasing one cell of `data`."""

    def getter(self: TVecBase) -> float:
        return float(self.data[index])

    def setter(self: TVecBase, value: float) -> None:
        self.data[index] = value

    return property(getter, setter, doc=doc)


class TVecBase:
    """Storage and arithmetic shared by all vector arities.

    Subclasses fix SIZE (the arity) and DTYPE (the scalar width).
    """

    SIZE: ClassVar[int] = 0
    DTYPE: ClassVar[type[np.floating]] = np.float64
    # Whether `*` and `/` accept a same-arity vector operand
    ELEMENTWISE_PRODUCT: ClassVar[bool] = True

    __slots__ = ("data",)

    # Make numpy scalars on the left defer to __rmul__
    __array_ufunc__ = None

    data: NDArray[np.floating]

    def _init_cells(self, components: Any) -> None:
        self.data = coerce_cells(components, self.SIZE, self.DTYPE, type(self).__name__)

    @classmethod
    def from_array(cls: type[VecT], values: Any) -> VecT:
        """Create a vector from a sequence of exactly SIZE scalars."""
        cells: NDArray[np.floating] = coerce_cells(
            values, cls.SIZE, cls.DTYPE, cls.__name__
        )
        return cls(*cells.tolist())

    @classmethod
    def filled(cls: type[VecT], value: float) -> VecT:
        """Create a vector with every component equal to `value`."""
        return cls(*([value] * cls.SIZE))

    def copy(self: VecT) -> VecT:
        """Return an independent copy of this vector."""
        return type(self).from_array(self.data)

    def dot(self, other: TVecBase) -> float:
        """Return the sum of the elementwise products."""
        self._require_same_arity(other, "dot")
        with np.errstate(all="ignore"):
            return float(np.dot(self.data, other.data))

    def length_squared(self) -> float:
        return self.dot(self)

    def length(self) -> float:
        with np.errstate(all="ignore"):
            return float(np.sqrt(self.length_squared()))

    def normalized(self: VecT) -> VecT:
        """Return this vector divided by its length.

        The caller must guard against the zero vector, which yields
        non-finite components.
        """
        return self / self.length()

    def is_close(
        self,
        other: TVecBase,
        atol: float = DEFAULT_ATOL,
        rtol: float = DEFAULT_RTOL,
    ) -> bool:
        """Return True when all components agree within tolerance."""
        self._require_same_arity(other, "is_close")
        return bool(np.allclose(self.data, other.data, atol=atol, rtol=rtol))

    def __iadd__(self: VecT, other: object) -> VecT:
        if not self._same_arity(other):
            return NotImplemented
        with np.errstate(all="ignore"):
            self.data += other.data  # type: ignore[attr-defined]
        return self

    def __isub__(self: VecT, other: object) -> VecT:
        if not self._same_arity(other):
            return NotImplemented
        with np.errstate(all="ignore"):
            self.data -= other.data  # type: ignore[attr-defined]
        return self

    def __imul__(self: VecT, other: object) -> VecT:
        if is_scalar(other):
            return self._imul_scalar(other)  # type: ignore[arg-type]
        if not self.ELEMENTWISE_PRODUCT or not self._same_arity(other):
            return NotImplemented
        with np.errstate(all="ignore"):
            self.data *= other.data  # type: ignore[attr-defined]
        return self

    def __itruediv__(self: VecT, other: object) -> VecT:
        if is_scalar(other):
            return self._itruediv_scalar(other)  # type: ignore[arg-type]
        if not self.ELEMENTWISE_PRODUCT or not self._same_arity(other):
            return NotImplemented
        with np.errstate(all="ignore"):
            self.data /= other.data  # type: ignore[attr-defined]
        return self

    def _imul_scalar(self: VecT, scalar: float) -> VecT:
        # Broadcast the scalar and reuse the elementwise product
        self *= type(self).filled(scalar)
        return self

    def _itruediv_scalar(self: VecT, scalar: float) -> VecT:
        self /= type(self).filled(scalar)
        return self

    def __add__(self: VecT, other: object) -> VecT:
        if not self._same_arity(other):
            return NotImplemented
        result: VecT = self.copy()
        result += other
        return result

    def __sub__(self: VecT, other: object) -> VecT:
        if not self._same_arity(other):
            return NotImplemented
        result: VecT = self.copy()
        result -= other
        return result

    def __mul__(self: VecT, other: object) -> VecT:
        if not is_scalar(other) and not (
            self.ELEMENTWISE_PRODUCT and self._same_arity(other)
        ):
            return NotImplemented
        result: VecT = self.copy()
        result *= other
        return result

    def __rmul__(self: VecT, other: object) -> VecT:
        if not is_scalar(other):
            return NotImplemented
        return self * other

    def __truediv__(self: VecT, other: object) -> VecT:
        if not is_scalar(other) and not (
            self.ELEMENTWISE_PRODUCT and self._same_arity(other)
        ):
            return NotImplemented
        result: VecT = self.copy()
        result /= other
        return result

    def __neg__(self: VecT) -> VecT:
        return type(self).from_array(-self.data)

    def __eq__(self, other: object) -> bool:
        if not self._same_arity(other):
            return NotImplemented
        return bool(np.array_equal(self.data, other.data))  # type: ignore[attr-defined]

    __hash__ = None  # type: ignore[assignment]

    def __len__(self) -> int:
        return self.SIZE

    def __getitem__(self, index: int) -> float:
        return float(self.data[index])

    def __setitem__(self, index: int, value: float) -> None:
        self.data[index] = value

    def __iter__(self) -> Iterator[float]:
        return iter(self.data.tolist())

    def __repr__(self) -> str:
        names: tuple[str, ...] = ("x", "y", "z", "w")[: self.SIZE]
        fields: str = ", ".join(
            f"{name}={value!r}" for name, value in zip(names, self.data.tolist())
        )
        return f"{type(self).__name__}({fields})"

    def _same_arity(self, other: object) -> bool:
        return isinstance(other, TVecBase) and other.SIZE == self.SIZE

    def _require_same_arity(self, other: object, name: str) -> None:
        if not self._same_arity(other):
            raise TypeError(f"{name} expects a length-{self.SIZE} vector")


class TVec2(TVecBase):
    """Two-component vector.

    Only scalar `*` and `/` are defined; there is no elementwise product.
    """

    SIZE: ClassVar[int] = 2
    ELEMENTWISE_PRODUCT: ClassVar[bool] = False

    __slots__ = ()

    def __init__(self, x: float = 0.0, y: float = 0.0) -> None:
        self._init_cells((x, y))

    x = _component(0, "First component")
    y = _component(1, "Second component")

    def cross(self, rhs: TVec2) -> float:
        """Return the z-magnitude of the 3-D cross product of xy vectors."""
        self._require_same_arity(rhs, "cross")
        with np.errstate(all="ignore"):
            return float(self.data[0] * rhs.data[1] - self.data[1] * rhs.data[0])

    def _imul_scalar(self, scalar: float) -> TVec2:
        with np.errstate(all="ignore"):
            self.data *= scalar
        return self

    def _itruediv_scalar(self, scalar: float) -> TVec2:
        with np.errstate(all="ignore"):
            self.data /= scalar
        return self


class TVec3(TVecBase):
    """Three-component vector."""

    SIZE: ClassVar[int] = 3

    __slots__ = ()

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0) -> None:
        self._init_cells((x, y, z))

    x = _component(0, "First component")
    y = _component(1, "Second component")
    z = _component(2, "Third component")

    def cross(self: VecT, other: TVecBase) -> VecT:
        """Return the right-handed 3-D cross product self x other."""
        self._require_same_arity(other, "cross")
        a: NDArray[np.floating] = self.data
        b: NDArray[np.floating] = other.data
        with np.errstate(all="ignore"):
            return type(self)(
                a[1] * b[2] - a[2] * b[1],
                a[2] * b[0] - a[0] * b[2],
                a[0] * b[1] - a[1] * b[0],
            )


class TVec4(TVecBase):
    """Four-component vector, typically a homogeneous point (x, y, z, w)."""

    SIZE: ClassVar[int] = 4

    __slots__ = ()

    def __init__(
        self, x: float = 0.0, y: float = 0.0, z: float = 0.0, w: float = 0.0
    ) -> None:
        self._init_cells((x, y, z, w))

    x = _component(0, "First component")
    y = _component(1, "Second component")
    z = _component(2, "Third component")
    w = _component(3, "Homogeneous component")

    @classmethod
    def from_vec3(cls: type[VecT], vec: TVec3, w: float) -> VecT:
        """Extend a 3-vector with a homogeneous w component."""
        return cls(vec.x, vec.y, vec.z, w)


class Vec2(TVec2):
    DTYPE: ClassVar[type[np.floating]] = np.float32
    __slots__ = ()


class DVec2(TVec2):
    DTYPE: ClassVar[type[np.floating]] = np.float64
    __slots__ = ()


class Vec3(TVec3):
    DTYPE: ClassVar[type[np.floating]] = np.float32
    __slots__ = ()


class DVec3(TVec3):
    DTYPE: ClassVar[type[np.floating]] = np.float64
    __slots__ = ()


class Vec4(TVec4):
    DTYPE: ClassVar[type[np.floating]] = np.float32
    __slots__ = ()


class DVec4(TVec4):
    DTYPE: ClassVar[type[np.floating]] = np.float64
    __slots__ = ()
