"""The storage areas and how virtual paths map onto backing files."""

from __future__ import annotations

import errno
from enum import Enum
from pathlib import Path

FUSE_DIR = "/fuse_dir"
SEVEN_SREF_PREFIX = f"{FUSE_DIR}/7sref/"
AREA_NAMES = ("starter", "metro", "dragon", "blackrose", "heaven", "skystreet", "youth")


class Area(Enum):
    """An area whose files are stored under a suffix and transformation."""

    STARTER = ("starter", ".mai")
    METRO = ("metro", ".ccc")
    DRAGON = ("dragon", ".rot")
    BLACKROSE = ("blackrose", ".bin")
    HEAVEN = ("heaven", ".enc")
    SKYSTREET = ("skystreet", ".gz")

    def __init__(self, directory: str, suffix: str):
        self.directory = directory
        self.suffix = suffix

    @property
    def prefix(self) -> str:
        """The virtual path prefix of files in this area."""
        return f"{FUSE_DIR}/{self.directory}/"


def area_for_path(path: str) -> tuple[Area, str] | None:
    """Return the area of a virtual file path and the file name inside it."""
    for area in Area:
        if path.startswith(area.prefix):
            return area, path[len(area.prefix):]
    return None


def backing_path(root, area: Area, name: str) -> Path:
    """The real file that stores ``name`` of ``area`` under ``root``."""
    return Path(root) / "chiho" / area.directory / f"{name}{area.suffix}"


def resolve_7sref(path: str) -> str | None:
    """Map ``/fuse_dir/7sref/<area>_<name>`` to ``/fuse_dir/<area>/<name>``.

    Returns None for paths outside 7sref and raises FileNotFoundError when
    the name has no area part.
    """
    if not path.startswith(SEVEN_SREF_PREFIX):
        return None
    area, sep, name = path[len(SEVEN_SREF_PREFIX):].partition("_")
    if not sep:
        raise FileNotFoundError(errno.ENOENT, "No such file or directory", path)
    return f"{FUSE_DIR}/{area}/{name}"