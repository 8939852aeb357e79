"""A filesystem of areas whose files are stored encoded on disk."""

from __future__ import annotations

import os
import stat
from pathlib import Path

from .areas import AREA_NAMES, FUSE_DIR, Area, area_for_path, resolve_7sref
from .handlers import AreaStorage
from .relics import Attributes

DEFAULT_ROOT = "/tmp/maimai_data"
CHIHO_DIR = "/chiho"
SEVEN_SREF_DIR = f"{FUSE_DIR}/7sref"

_DIRECTORY = Attributes(stat.S_IFDIR | 0o755, 2)


def _directory_paths() -> frozenset[str]:
    paths = {"/", CHIHO_DIR, FUSE_DIR, SEVEN_SREF_DIR}
    for name in AREA_NAMES:
        paths.add(f"{CHIHO_DIR}/{name}")
        paths.add(f"{FUSE_DIR}/{name}")
    return frozenset(paths)


_DIRECTORIES = _directory_paths()
_AREA_DIRS = {f"{FUSE_DIR}/{area.directory}": area for area in Area}


class MaimaiFS:
    """Routes virtual paths to area storage, 7sref aliases or plain files."""

    def __init__(self, root=DEFAULT_ROOT):
        self.root = Path(root)
        self.storage = AreaStorage(self.root)

    def init_layout(self) -> None:
        """Create the backing directory tree under the root."""
        directories = [self.root, self.root / "chiho"]
        directories += [self.root / "chiho" / name for name in AREA_NAMES]
        directories.append(self.root / "fuse_dir")
        directories += [self.root / "fuse_dir" / name for name in AREA_NAMES]
        directories.append(self.root / "fuse_dir" / "7sref")
        for directory in directories:
            try:
                directory.mkdir(mode=0o755, exist_ok=True)
            except OSError:
                pass

    def _real(self, path: str) -> Path:
        return Path(str(self.root) + path)

    def _locate(self, path: str) -> tuple[Area, str] | Path:
        found = area_for_path(path)
        if found is not None:
            return found
        target = resolve_7sref(path)
        if target is not None:
            return self._locate(target)
        return self._real(path)

    def getattr(self, path: str) -> Attributes:
        """Attributes of a virtual path; raises OSError when it is missing."""
        if path in _DIRECTORIES:
            return _DIRECTORY
        location = self._locate(path)
        if isinstance(location, Path):
            real = location
        else:
            real = self.storage._path(*location)
        info = os.lstat(real)
        return Attributes(info.st_mode, info.st_nlink, info.st_size)

    def readdir(self, path: str) -> list[str]:
        """Entries of a virtual directory, starting with '.' and '..'."""
        entries = [".", ".."]
        if path == "/":
            return entries + ["chiho", "fuse_dir"]
        if path == CHIHO_DIR:
            return entries + list(AREA_NAMES)
        if path == FUSE_DIR:
            return entries + list(AREA_NAMES) + ["7sref"]
        if path in _AREA_DIRS:
            return entries + self.storage.list_names(_AREA_DIRS[path])
        if path == SEVEN_SREF_DIR:
            for name in AREA_NAMES:
                try:
                    members = sorted(os.listdir(self.root / "fuse_dir" / name))
                except OSError:
                    continue
                entries += [f"{name}_{member}" for member in members]
            return entries
        return entries + sorted(os.listdir(self._real(path)))

    def read(self, path: str, size: int, offset: int) -> bytes:
        """Read up to ``size`` bytes of a file from ``offset``."""
        location = self._locate(path)
        if not isinstance(location, Path):
            return self.storage.read(*location, size, offset)
        with open(location, "rb") as handle:
            handle.seek(offset)
            return handle.read(size)

    def write(self, path: str, data: bytes, offset: int) -> int:
        """Write ``data`` at ``offset``; returns the number of bytes taken."""
        location = self._locate(path)
        if not isinstance(location, Path):
            return self.storage.write(*location, data, offset)
        fd = os.open(location, os.O_WRONLY)
        try:
            return os.pwrite(fd, bytes(data), offset)
        finally:
            os.close(fd)

    def create(self, path: str, mode: int = 0o644) -> None:
        """Create an empty file at a virtual path."""
        location = self._locate(path)
        if not isinstance(location, Path):
            self.storage.create(*location, mode)
            return
        os.close(os.open(location, os.O_CREAT | os.O_EXCL | os.O_WRONLY, mode))

    def unlink(self, path: str) -> None:
        """Remove the file behind a virtual path."""
        location = self._locate(path)
        if not isinstance(location, Path):
            self.storage.unlink(*location)
            return
        os.unlink(location)