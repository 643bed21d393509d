################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Tests for the math configuration wrapper."""

from __future__ import annotations

import dataclasses

import pytest

from oasis_math.config.math_config import MathConfig
from oasis_math.config.math_config import MathConfigError
from oasis_math.config.math_params import MathParams
from oasis_math.math_utils.matrix33 import Matrix33
from oasis_math.math_utils.matrix44 import Matrix44
from oasis_math.math_utils.vector import DVec2
from oasis_math.math_utils.vector import DVec3
from oasis_math.math_utils.vector import DVec4
from oasis_math.math_utils.vector import Vec2
from oasis_math.math_utils.vector import Vec3
from oasis_math.math_utils.vector import Vec4


def test_defaults_construct() -> None:
    """Default parameters should construct a MathConfig."""
    MathConfig(MathParams.defaults())


def test_invalid_params_raise_config_error() -> None:
    """Parameter errors surface as MathConfigError."""
    params: MathParams = MathParams.defaults().replace(
        compare=dataclasses.replace(MathParams.defaults().compare, atol=-1.0)
    )
    with pytest.raises(MathConfigError):
        MathConfig(params)


def test_accessors() -> None:
    """Accessor methods should return expected values."""
    params: MathParams = MathParams.defaults()
    config: MathConfig = MathConfig(params)

    assert config.scalar_type() == params.scalar.scalar_type
    assert config.atol() == params.compare.atol
    assert config.rtol() == params.compare.rtol
    assert config.atomic_write() == params.save.atomic_write


def test_vector_types_follow_scalar_type() -> None:
    """Vector classes follow the configured scalar width."""
    config32: MathConfig = MathConfig(MathParams.defaults())
    assert config32.vec2_type() is Vec2
    assert config32.vec3_type() is Vec3
    assert config32.vec4_type() is Vec4

    config64: MathConfig = MathConfig(
        MathParams.from_dict({"scalar": {"scalar_type": "float64"}})
    )
    assert config64.vec2_type() is DVec2
    assert config64.vec3_type() is DVec3
    assert config64.vec4_type() is DVec4


def test_close_comparisons_use_tolerances() -> None:
    """Comparisons honor the configured tolerances."""
    loose: MathConfig = MathConfig(MathParams.from_dict({"compare": {"atol": 0.1}}))
    strict: MathConfig = MathConfig(
        MathParams.from_dict({"compare": {"atol": 0.0, "rtol": 0.0}})
    )
    a: DVec3 = DVec3(1.0, 2.0, 3.0)
    b: DVec3 = DVec3(1.0, 2.0, 3.05)
    assert loose.vectors_close(a, b)
    assert not strict.vectors_close(a, b)

    m: Matrix44 = Matrix44.translate(Vec3(0.0, 0.0, 0.05))
    assert loose.matrices_close(m, Matrix44.identity())
    assert not strict.matrices_close(m, Matrix44.identity())


def test_matrices_close_requires_equal_size() -> None:
    """Comparing a 3x3 with a 4x4 matrix is rejected."""
    config: MathConfig = MathConfig(MathParams.defaults())
    with pytest.raises(TypeError):
        config.matrices_close(Matrix33.identity(), Matrix44.identity())
