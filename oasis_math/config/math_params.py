################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Structured configuration schema for the vector and matrix primitives."""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import fields
from dataclasses import replace
from typing import Any
from typing import Mapping


# Scalar width of vectors built by the storage layer
SCALAR_TYPE: str = "float32"
# Supported scalar widths
SCALAR_TYPES: frozenset[str] = frozenset({"float32", "float64"})

# Absolute tolerance for approximate comparisons
COMPARE_ATOL: float = 1e-5
# Relative tolerance for approximate comparisons
COMPARE_RTOL: float = 1e-5

# Write files through a temporary file and rename
SAVE_ATOMIC_WRITE: bool = True


class MathParamsError(Exception):
    """Raised when math parameter validation fails."""


def _require_non_negative(value: float, name: str) -> None:
    """Require a non-negative value."""
    if value < 0.0:
        raise MathParamsError(f"{name} must be non-negative")


def _require_float(value: object, name: str) -> float:
    """Coerce an int or float to float, rejecting booleans."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MathParamsError(f"{name} must be a number")
    return float(value)


@dataclass(frozen=True)
class ScalarParams:
    scalar_type: str = SCALAR_TYPE


@dataclass(frozen=True)
class CompareParams:
    atol: float = COMPARE_ATOL
    rtol: float = COMPARE_RTOL


@dataclass(frozen=True)
class SaveParams:
    atomic_write: bool = SAVE_ATOMIC_WRITE


@dataclass(frozen=True)
class MathParams:
    """Top-level parameters grouped by namespace."""

    scalar: ScalarParams
    compare: CompareParams
    save: SaveParams

    @classmethod
    def defaults(cls) -> MathParams:
        """Return the default parameter set."""
        return cls(
            scalar=ScalarParams(),
            compare=CompareParams(),
            save=SaveParams(),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MathParams:
        """Build parameters from a nested mapping, filling in defaults."""
        unknown: set[str] = set(data) - {"scalar", "compare", "save"}
        if unknown:
            raise MathParamsError(f"Unknown namespaces: {sorted(unknown)}")

        defaults: MathParams = cls.defaults()
        scalar: Mapping[str, Any] = _namespace(data, "scalar")
        compare: Mapping[str, Any] = _namespace(data, "compare")
        save: Mapping[str, Any] = _namespace(data, "save")

        scalar_type: object = scalar.get("scalar_type", defaults.scalar.scalar_type)
        if not isinstance(scalar_type, str):
            raise MathParamsError("scalar.scalar_type must be a string")
        atomic_write: object = save.get("atomic_write", defaults.save.atomic_write)
        if not isinstance(atomic_write, bool):
            raise MathParamsError("save.atomic_write must be a bool")

        params: MathParams = cls(
            scalar=ScalarParams(scalar_type=scalar_type),
            compare=CompareParams(
                atol=_require_float(
                    compare.get("atol", defaults.compare.atol), "compare.atol"
                ),
                rtol=_require_float(
                    compare.get("rtol", defaults.compare.rtol), "compare.rtol"
                ),
            ),
            save=SaveParams(atomic_write=atomic_write),
        )
        params.validate()
        return params

    def validate(self) -> None:
        """Validate parameter invariants and constraints."""
        if self.scalar.scalar_type not in SCALAR_TYPES:
            raise MathParamsError("scalar.scalar_type must be float32 or float64")

        _require_non_negative(self.compare.atol, "compare.atol")
        _require_non_negative(self.compare.rtol, "compare.rtol")

    def replace(self, **namespace_overrides: Any) -> MathParams:
        """Return a modified copy of the parameters."""
        return replace(self, **namespace_overrides)

    def as_nested_dict(self) -> dict[str, Any]:
        """Return a nested dict representation for debugging."""
        return _dataclass_to_dict(self)


def _namespace(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    """Return the mapping for one namespace, or an empty mapping."""
    value: object = data.get(name, {})
    if not isinstance(value, Mapping):
        raise MathParamsError(f"{name} must be a mapping")
    return value


def _dataclass_to_dict(value: Any) -> Any:
    """Convert nested dataclasses into plain Python values."""
    if hasattr(value, "__dataclass_fields__"):
        return {
            field.name: _dataclass_to_dict(getattr(value, field.name))
            for field in fields(value)
        }
    return value
