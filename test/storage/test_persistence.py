################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Tests for transform persistence helpers."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest

from oasis_math.config.math_config import MathConfig
from oasis_math.config.math_params import MathParams
from oasis_math.math_utils.matrix44 import Matrix44
from oasis_math.math_utils.vector import DVec3
from oasis_math.math_utils.vector import Vec3
from oasis_math.storage.persistence import MathPersistenceError
from oasis_math.storage.persistence import is_yaml_path
from oasis_math.storage.persistence import load_yaml_transforms
from oasis_math.storage.persistence import save_yaml_transforms
from oasis_math.storage.yaml_format import TransformSetYaml


def _transforms() -> TransformSetYaml:
    return TransformSetYaml(
        matrices={"model": Matrix44.translate(Vec3(1.0, 2.0, 3.0))},
        vectors={"target": Vec3(0.0, 0.0, -1.0)},
    )


def test_is_yaml_path() -> None:
    """Only .yaml and .yml suffixes are accepted."""
    assert is_yaml_path("transforms.yaml")
    assert is_yaml_path(Path("transforms.YML"))
    assert not is_yaml_path("transforms.json")


def _config(data: dict[str, object]) -> MathConfig:
    return MathConfig(MathParams.from_dict(data))


@pytest.mark.parametrize("atomic_write", [True, False])
def test_save_and_load(tmp_path: Path, atomic_write: bool) -> None:
    """Saved transforms load back unchanged."""
    path: Path = tmp_path / "nested" / "transforms.yaml"
    config: MathConfig = _config({"save": {"atomic_write": atomic_write}})
    save_yaml_transforms(path, _transforms(), config)

    loaded: TransformSetYaml = load_yaml_transforms(path)
    assert loaded.matrices["model"] == Matrix44.translate(Vec3(1.0, 2.0, 3.0))
    assert loaded.vectors["target"] == Vec3(0.0, 0.0, -1.0)
    assert [entry.name for entry in tmp_path.joinpath("nested").iterdir()] == [
        "transforms.yaml"
    ]


def test_save_defaults_to_atomic_write(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Without a config the save goes through a rename."""
    renames: list[tuple[str, str]] = []
    real_replace = os.replace

    def _record(src: str, dst: str) -> None:
        renames.append((os.fspath(src), os.fspath(dst)))
        real_replace(src, dst)

    monkeypatch.setattr("oasis_math.storage.persistence.os.replace", _record)
    path: Path = tmp_path / "transforms.yaml"
    save_yaml_transforms(path, _transforms())
    assert len(renames) == 1
    assert renames[0][1] == os.fspath(path)

    renames.clear()
    in_place: MathConfig = _config({"save": {"atomic_write": False}})
    save_yaml_transforms(path, _transforms(), in_place)
    assert renames == []
    assert load_yaml_transforms(path).vectors["target"] == Vec3(0.0, 0.0, -1.0)


def test_failed_rename_leaves_no_temporary_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """A failing rename keeps the old file and removes the temporary one."""
    path: Path = tmp_path / "transforms.yaml"
    save_yaml_transforms(path, _transforms())
    before: str = path.read_text(encoding="utf-8")

    def _fail(src: str, dst: str) -> None:
        raise OSError("rename failed")

    monkeypatch.setattr("oasis_math.storage.persistence.os.replace", _fail)
    with pytest.raises(MathPersistenceError) as info:
        save_yaml_transforms(path, TransformSetYaml())
    assert isinstance(info.value.__cause__, OSError)
    assert [entry.name for entry in tmp_path.iterdir()] == ["transforms.yaml"]
    assert path.read_text(encoding="utf-8") == before


def test_load_converts_to_configured_width(tmp_path: Path) -> None:
    """The configured scalar_type decides the loaded vector classes."""
    path: Path = tmp_path / "transforms.yaml"
    save_yaml_transforms(path, _transforms())

    loaded: TransformSetYaml = load_yaml_transforms(
        path, _config({"scalar": {"scalar_type": "float64"}})
    )
    assert loaded.scalar_type == "float64"
    assert isinstance(loaded.vectors["target"], DVec3)
    assert loaded.vectors["target"] == DVec3(0.0, 0.0, -1.0)
    assert loaded.matrices["model"] == Matrix44.translate(Vec3(1.0, 2.0, 3.0))

    same: TransformSetYaml = load_yaml_transforms(
        path, _config({"scalar": {"scalar_type": "float32"}})
    )
    assert isinstance(same.vectors["target"], Vec3)


def test_load_without_config_keeps_file_width(tmp_path: Path) -> None:
    """Without a config, vectors keep the width recorded in the file."""
    path: Path = tmp_path / "transforms.yaml"
    vec: DVec3 = DVec3(0.1, 1.0 / 3.0, 1e-300)
    save_yaml_transforms(
        path, TransformSetYaml(scalar_type="float64", vectors={"eye": vec})
    )
    assert load_yaml_transforms(path).vectors["eye"] == vec



def test_save_logs(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    """Saving logs the number of entries written."""
    with caplog.at_level(logging.INFO, logger="oasis_math.storage.persistence"):
        save_yaml_transforms(tmp_path / "t.yaml", _transforms())
    assert "Saved 1 matrices and 1 vectors" in caplog.text


def test_rejects_non_yaml_paths(tmp_path: Path) -> None:
    """Non-YAML paths are rejected for save and load."""
    with pytest.raises(MathPersistenceError):
        save_yaml_transforms(tmp_path / "t.json", _transforms())
    with pytest.raises(MathPersistenceError):
        load_yaml_transforms(tmp_path / "t.json")


def test_load_missing_file(tmp_path: Path) -> None:
    """Missing files raise MathPersistenceError."""
    with pytest.raises(MathPersistenceError):
        load_yaml_transforms(tmp_path / "missing.yaml")


def test_load_invalid_schema(tmp_path: Path) -> None:
    """Schema errors are wrapped in MathPersistenceError."""
    path: Path = tmp_path / "bad.yaml"
    path.write_text("format_version: 1\n", encoding="utf-8")
    with pytest.raises(MathPersistenceError):
        load_yaml_transforms(path)
