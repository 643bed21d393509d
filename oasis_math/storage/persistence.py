################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Reading and writing transform sets as YAML files.

Both entry points accept an optional `MathConfig`:

- `save_yaml_transforms` honors `atomic_write()`. An atomic save writes a
  uniquely named temporary file in the destination directory and renames it
  over the target, so readers never see a partial file. The temporary file
  is removed if the write or the rename fails.
- `load_yaml_transforms` rebuilds every vector in the configured
  `scalar_type()`. Without a config, vectors keep the width recorded in the
  file.
"""

from __future__ import annotations

import dataclasses
import logging
import os
import tempfile
from pathlib import Path

from oasis_math.config.math_config import MathConfig
from oasis_math.config.math_params import MathParams
from oasis_math.math_utils.vector import TVecBase
from oasis_math.storage.yaml_format import MathYamlError
from oasis_math.storage.yaml_format import TransformSetYaml
from oasis_math.storage.yaml_format import dumps_yaml
from oasis_math.storage.yaml_format import loads_yaml


_LOG: logging.Logger = logging.getLogger(__name__)

# File suffixes accepted for transform files, compared case-insensitively
YAML_SUFFIXES: tuple[str, ...] = (".yaml", ".yml")


class MathPersistenceError(Exception):
    """Raised when loading or saving transform files fails."""


def is_yaml_path(path: str | os.PathLike[str]) -> bool:
    """Return True if the path names a .yaml or .yml file."""
    return os.fspath(path).lower().endswith(YAML_SUFFIXES)


def save_yaml_transforms(
    path: str | os.PathLike[str],
    transforms: TransformSetYaml,
    config: MathConfig | None = None,
) -> None:
    """Write a transform set to a YAML file.

    Args:
        path: Destination file, created along with any missing parent
            directories
        transforms: Matrices and vectors to write
        config: Selects atomic or in-place writes; the default parameters
            are used when omitted
    """
    target: Path = _checked_path(path)
    settings: MathConfig = config if config is not None else _default_config()
    text: str = dumps_yaml(transforms)

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        if settings.atomic_write():
            _write_atomically(target, text)
        else:
            target.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise MathPersistenceError(f"Cannot write transforms to {target}") from exc

    _LOG.info(
        "Saved %d matrices and %d vectors to %s",
        len(transforms.matrices),
        len(transforms.vectors),
        target,
    )


def load_yaml_transforms(
    path: str | os.PathLike[str],
    config: MathConfig | None = None,
) -> TransformSetYaml:
    """Read a transform set from a YAML file.

    Args:
        path: Source file
        config: When given, vectors are converted to its scalar width

    Raises:
        MathPersistenceError: The file cannot be read or fails validation
    """
    source: Path = _checked_path(path)

    try:
        text: str = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise MathPersistenceError(f"Cannot read transforms from {source}") from exc

    try:
        transforms: TransformSetYaml = loads_yaml(text)
    except MathYamlError as exc:
        raise MathPersistenceError(f"Invalid transform file {source}: {exc}") from exc

    if config is not None and config.scalar_type() != transforms.scalar_type:
        transforms = _convert_vectors(transforms, config)

    _LOG.info(
        "Loaded %d matrices and %d vectors from %s",
        len(transforms.matrices),
        len(transforms.vectors),
        source,
    )
    return transforms


def _checked_path(path: str | os.PathLike[str]) -> Path:
    if not is_yaml_path(path):
        raise MathPersistenceError(
            f"Transform files must end with {' or '.join(YAML_SUFFIXES)}: {path}"
        )
    return Path(path)


def _default_config() -> MathConfig:
    return MathConfig(MathParams.defaults())


def _write_atomically(target: Path, text: str) -> None:
    """Write text beside target, then rename it into place."""
    fd: int
    tmp_name: str
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
    )
    tmp_path: Path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        _LOG.debug("Renaming %s over %s", tmp_path, target)
        os.replace(tmp_path, target)
    except Exception:
        tmp_path.unlink(missing_ok=True)
        raise


def _convert_vectors(
    transforms: TransformSetYaml, config: MathConfig
) -> TransformSetYaml:
    """Rebuild every vector in the configured scalar width."""
    vec_types: dict[int, type[TVecBase]] = {
        2: config.vec2_type(),
        3: config.vec3_type(),
        4: config.vec4_type(),
    }
    _LOG.debug(
        "Converting %d vectors from %s to %s",
        len(transforms.vectors),
        transforms.scalar_type,
        config.scalar_type(),
    )
    return dataclasses.replace(
        transforms,
        scalar_type=config.scalar_type(),
        vectors={
            name: vec_types[vec.SIZE].from_array(vec.data)
            for name, vec in transforms.vectors.items()
        },
    )
