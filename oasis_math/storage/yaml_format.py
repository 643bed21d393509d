################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""YAML schema for named matrices and vectors.

Matrices are stored as flat row-major cell lists, matching the in-memory
layout of Matrix33 and Matrix44.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from dataclasses import field
from typing import Any
from typing import Union

import numpy as np
import yaml

from oasis_math.math_utils.matrix33 import Matrix33
from oasis_math.math_utils.matrix44 import Matrix44
from oasis_math.math_utils.vector import DVec2
from oasis_math.math_utils.vector import DVec3
from oasis_math.math_utils.vector import DVec4
from oasis_math.math_utils.vector import TVecBase
from oasis_math.math_utils.vector import Vec2
from oasis_math.math_utils.vector import Vec3
from oasis_math.math_utils.vector import Vec4


# Current on-disk format version
FORMAT_VERSION: int = 1

MatrixType = Union[Matrix33, Matrix44]

_MATRIX_TYPES: dict[int, type[MatrixType]] = {
    3: Matrix33,
    4: Matrix44,
}

_VECTOR_TYPES: dict[str, dict[int, type[TVecBase]]] = {
    "float32": {2: Vec2, 3: Vec3, 4: Vec4},
    "float64": {2: DVec2, 3: DVec3, 4: DVec4},
}


class MathYamlError(Exception):
    """Raised when the transform YAML schema is invalid."""


@dataclass(frozen=True)
class TransformSetYaml:
    """Named matrices and vectors as persisted to YAML.

    Attributes:
        format_version: Format version, must be 1
        scalar_type: Scalar width of every vector, float32 or float64
        matrices: Matrix33 or Matrix44 values by name
        vectors: 2, 3 or 4 component vectors by name
    """

    format_version: int = FORMAT_VERSION
    scalar_type: str = "float32"
    matrices: dict[str, MatrixType] = field(default_factory=dict)
    vectors: dict[str, TVecBase] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate version, scalar width and entry types."""
        object.__setattr__(
            self, "format_version", _require_int(self.format_version, "format_version")
        )
        if self.format_version != FORMAT_VERSION:
            raise MathYamlError(f"format_version must be {FORMAT_VERSION}")
        if self.scalar_type not in _VECTOR_TYPES:
            raise MathYamlError("scalar_type must be float32 or float64")
        for name, matrix in self.matrices.items():
            _require_str(name, "matrix name")
            if not isinstance(matrix, (Matrix33, Matrix44)):
                raise MathYamlError(f"matrices.{name} must be Matrix33 or Matrix44")
        for name, vec in self.vectors.items():
            _require_str(name, "vector name")
            if not isinstance(vec, TVecBase):
                raise MathYamlError(f"vectors.{name} must be a vector")
            if np.dtype(vec.DTYPE).name != self.scalar_type:
                raise MathYamlError(
                    f"vectors.{name} is {type(vec).__name__}, expected a "
                    f"{self.scalar_type} vector"
                )


def transforms_to_dict(transforms: TransformSetYaml) -> dict[str, object]:
    """Convert a transform set to a YAML-safe dictionary."""
    return {
        "format_version": transforms.format_version,
        "scalar_type": transforms.scalar_type,
        "matrices": {
            name: _matrix_to_dict(matrix)
            for name, matrix in transforms.matrices.items()
        },
        "vectors": {
            name: _vector_to_dict(vec) for name, vec in transforms.vectors.items()
        },
    }


def transforms_from_dict(data: dict[str, object]) -> TransformSetYaml:
    """Parse a YAML dictionary into a transform set."""
    if not isinstance(data, dict):
        raise MathYamlError("YAML root must be a mapping")
    _require_keys(
        "root", data, {"format_version", "scalar_type", "matrices", "vectors"}
    )

    format_version: int = _require_int(data["format_version"], "format_version")
    scalar_type: str = _require_str(data["scalar_type"], "scalar_type")
    if scalar_type not in _VECTOR_TYPES:
        raise MathYamlError("scalar_type must be float32 or float64")

    matrices_data: dict[str, object] = _require_mapping(data["matrices"], "matrices")
    matrices: dict[str, MatrixType] = {
        _require_str(name, "matrix name"): _matrix_from_dict(
            _require_mapping(value, f"matrices.{name}"), f"matrices.{name}"
        )
        for name, value in matrices_data.items()
    }

    vectors_data: dict[str, object] = _require_mapping(data["vectors"], "vectors")
    vectors: dict[str, TVecBase] = {
        _require_str(name, "vector name"): _vector_from_dict(
            _require_mapping(value, f"vectors.{name}"),
            f"vectors.{name}",
            scalar_type,
        )
        for name, value in vectors_data.items()
    }

    return TransformSetYaml(
        format_version=format_version,
        scalar_type=scalar_type,
        matrices=matrices,
        vectors=vectors,
    )


def dumps_yaml(transforms: TransformSetYaml) -> str:
    """Serialize a transform set to deterministic YAML."""
    data: dict[str, object] = transforms_to_dict(transforms)
    return yaml.safe_dump(
        data,
        sort_keys=False,
        indent=2,
        default_flow_style=False,
    )


def loads_yaml(text: str) -> TransformSetYaml:
    """Parse a transform set from YAML text."""
    try:
        loaded: Any = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise MathYamlError("Invalid YAML document") from exc
    if not isinstance(loaded, dict):
        raise MathYamlError("YAML root must be a mapping")
    return transforms_from_dict(loaded)


def _matrix_to_dict(matrix: MatrixType) -> dict[str, object]:
    """Convert a matrix to a YAML-safe dictionary."""
    return {
        "shape": [matrix.SIZE, matrix.SIZE],
        "row_major": matrix.data.tolist(),
    }


def _vector_to_dict(vec: TVecBase) -> dict[str, object]:
    """Convert a vector to a YAML-safe dictionary."""
    return {
        "size": vec.SIZE,
        "components": vec.data.tolist(),
    }


def _matrix_from_dict(data: dict[str, object], scope: str) -> MatrixType:
    """Parse a matrix from a dictionary."""
    _require_keys(scope, data, {"shape", "row_major"})
    shape: object = data["shape"]
    if not isinstance(shape, list) or len(shape) != 2 or shape[0] != shape[1]:
        raise MathYamlError(f"{scope}.shape must be [3, 3] or [4, 4]")
    size: int = _require_int(shape[0], f"{scope}.shape")
    if size not in _MATRIX_TYPES:
        raise MathYamlError(f"{scope}.shape must be [3, 3] or [4, 4]")
    cells: np.ndarray = _coerce_array(
        data["row_major"], f"{scope}.row_major", (size * size,)
    )
    return _MATRIX_TYPES[size].from_array(cells)


def _vector_from_dict(
    data: dict[str, object], scope: str, scalar_type: str
) -> TVecBase:
    """Parse a vector from a dictionary."""
    _require_keys(scope, data, {"size", "components"})
    size: int = _require_int(data["size"], f"{scope}.size")
    vec_types: dict[int, type[TVecBase]] = _VECTOR_TYPES[scalar_type]
    if size not in vec_types:
        raise MathYamlError(f"{scope}.size must be 2, 3 or 4")
    components: np.ndarray = _coerce_array(
        data["components"], f"{scope}.components", (size,)
    )
    return vec_types[size].from_array(components)


def _require_keys(scope: str, data: dict[str, object], required: set[str]) -> None:
    """Ensure a mapping has exactly the required keys."""
    unknown: set[str] = {key for key in data.keys() if key not in required}
    if unknown:
        raise MathYamlError(
            f"Unexpected keys in {scope}: {', '.join(sorted(map(str, unknown)))}"
        )
    missing: set[str] = {key for key in required if key not in data}
    if missing:
        raise MathYamlError(f"Missing keys in {scope}: {', '.join(sorted(missing))}")


def _require_mapping(value: object, name: str) -> dict[str, object]:
    """Ensure the value is a dictionary."""
    if not isinstance(value, dict):
        raise MathYamlError(f"{name} must be a mapping")
    return value


def _require_str(value: object, name: str) -> str:
    """Ensure the value is a string."""
    if not isinstance(value, str):
        raise MathYamlError(f"{name} must be a string")
    return value


def _require_int(value: object, name: str) -> int:
    """Ensure the value is an integer."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise MathYamlError(f"{name} must be an integer")
    return int(value)


def _coerce_array(value: object, name: str, shape: tuple[int, ...]) -> np.ndarray:
    """Convert an input to a numpy array with the required shape."""
    try:
        array: np.ndarray = np.asarray(value, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise MathYamlError(f"{name} must be numeric") from exc
    if array.shape != shape:
        raise MathYamlError(f"{name} must have shape {shape}")
    return array
