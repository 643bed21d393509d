################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Validation helpers for fixed-size vector and matrix storage."""

from __future__ import annotations

import numbers
from typing import Any

import numpy as np
from numpy.typing import DTypeLike
from numpy.typing import NDArray


def coerce_cells(
    values: Any,
    size: int,
    dtype: DTypeLike,
    name: str,
) -> NDArray[np.floating]:
    """Return a flat copy of the values with exactly `size` cells.

    Nested inputs (e.g. a list of matrix rows) are flattened in row-major
    order. Non-finite values are accepted and stored unchanged, and values
    too large for `dtype` become inf without a warning.
    """
    array: NDArray[np.floating]
    with np.errstate(over="ignore", invalid="ignore"):
        array = np.array(values, dtype=dtype)
    if array.ndim != 1:
        array = array.reshape(-1)
    if array.size != size:
        raise ValueError(f"{name} must have {size} elements")

    return array


def is_scalar(value: object) -> bool:
    """Return True for real scalars, including numpy scalar types."""
    return isinstance(value, numbers.Real)
