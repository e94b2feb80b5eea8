"""Load a directory tree from a YAML snapshot.

Format::

    files:
      - id: FileID_1
        path: /Drive::/report.pdf
      - id: FileID_2
        path: /Drive::/old.pdf
        deleted: true
    folders:
      - id: FolderID_1
        path: /Drive::/Reports/
"""

from __future__ import annotations

import time
from collections.abc import Callable
from pathlib import Path

import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError

from driveplane.core.errors import ConfigError
from driveplane.directory.tree import DirectoryTree

logger = structlog.get_logger()


class SnapshotRecord(BaseModel):
    id: str = Field(min_length=1)
    path: str
    deleted: bool = False


class Snapshot(BaseModel):
    files: list[SnapshotRecord] = Field(default_factory=list)
    folders: list[SnapshotRecord] = Field(default_factory=list)


def load_snapshot(path: Path, clock: Callable[[], float] = time.time) -> DirectoryTree:
    """Read a snapshot file into a fresh DirectoryTree.

    Raises:
        ConfigError: file missing, invalid YAML, or records that fail validation.
    """
    if not path.exists():
        raise ConfigError.file_not_found(str(path))
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e

    try:
        snapshot = Snapshot.model_validate(data)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e

    tree = DirectoryTree(clock=clock)
    for record in snapshot.files:
        tree.add_file(record.id, record.path, deleted=record.deleted)
    for record in snapshot.folders:
        tree.add_folder(record.id, record.path, deleted=record.deleted)

    logger.info(
        "snapshot_loaded",
        path=str(path),
        files=len(snapshot.files),
        folders=len(snapshot.folders),
    )
    return tree
