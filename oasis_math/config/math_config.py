################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""High-level configuration wrapper for the vector and matrix primitives."""

from __future__ import annotations

from dataclasses import dataclass

from oasis_math.math_utils.matrix33 import Matrix33
from oasis_math.math_utils.matrix44 import Matrix44
from oasis_math.math_utils.vector import DVec2
from oasis_math.math_utils.vector import DVec3
from oasis_math.math_utils.vector import DVec4
from oasis_math.math_utils.vector import TVec2
from oasis_math.math_utils.vector import TVec3
from oasis_math.math_utils.vector import TVec4
from oasis_math.math_utils.vector import TVecBase
from oasis_math.math_utils.vector import Vec2
from oasis_math.math_utils.vector import Vec3
from oasis_math.math_utils.vector import Vec4

from .math_params import MathParams
from .math_params import MathParamsError


class MathConfigError(Exception):
    """Raised when math configuration validation fails."""


@dataclass(frozen=True)
class MathConfig:
    """Convenience wrapper around math parameters."""

    params: MathParams

    def __init__(self, params: MathParams) -> None:
        """Initialize the configuration wrapper and validate."""
        object.__setattr__(self, "params", params)
        self.validate()

    def validate(self) -> None:
        """Validate parameter invariants."""
        try:
            self.params.validate()
        except MathParamsError as exc:
            raise MathConfigError(str(exc)) from exc

    def scalar_type(self) -> str:
        """Return the configured scalar width name."""
        return self.params.scalar.scalar_type

    def atol(self) -> float:
        return self.params.compare.atol

    def rtol(self) -> float:
        return self.params.compare.rtol

    def atomic_write(self) -> bool:
        return self.params.save.atomic_write

    def vec2_type(self) -> type[TVec2]:
        """Return the 2-vector class for the configured scalar width."""
        return DVec2 if self.scalar_type() == "float64" else Vec2

    def vec3_type(self) -> type[TVec3]:
        """Return the 3-vector class for the configured scalar width."""
        return DVec3 if self.scalar_type() == "float64" else Vec3

    def vec4_type(self) -> type[TVec4]:
        """Return the 4-vector class for the configured scalar width."""
        return DVec4 if self.scalar_type() == "float64" else Vec4

    def vectors_close(self, a: TVecBase, b: TVecBase) -> bool:
        """Compare two vectors with the configured tolerances."""
        return a.is_close(b, atol=self.atol(), rtol=self.rtol())

    def matrices_close(self, a: Matrix33 | Matrix44, b: Matrix33 | Matrix44) -> bool:
        """Compare two matrices of the same size with the configured tolerances."""
        if type(a) is not type(b):
            raise TypeError("matrices_close expects matrices of equal size")
        atol: float = self.atol()
        rtol: float = self.rtol()
        return a.is_close(b, atol=atol, rtol=rtol)  # type: ignore[arg-type]
