"""A single virtual file stored as numbered fragments on disk."""

from __future__ import annotations

import errno
import stat
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable

PART_SIZE = 1024
PART_COUNT = 14
MAX_FILE_SIZE = 1024 * 1024 * 100
FILENAME = "Baymax.jpeg"
COPY_WINDOW_SECONDS = 2
MAX_FRAGMENTS = 1000

Clock = Callable[[], datetime]


@dataclass(frozen=True)
class Attributes:
    """The attributes reported for a path."""

    mode: int
    nlink: int
    size: int = 0


def _missing(path: str) -> FileNotFoundError:
    return FileNotFoundError(errno.ENOENT, "No such file or directory", path)


class ActivityLog:
    """Appends timestamped activity lines to a log file."""

    def __init__(self, path, clock: Clock | None = None):
        self.path = Path(path)
        self.clock = clock or datetime.now

    def record(self, action: str, filename: str, extra: str | None = None) -> None:
        moment = self.clock()
        line = f"[{moment:%Y-%m-%d %H:%M:%S}] {action}: {filename}{extra or ''}\n"
        try:
            with open(self.path, "a", encoding="utf-8") as log:
                log.write(line)
        except OSError:
            pass


class RelicFS:
    """Presents the fragments under ``<base_dir>/relics`` as one file."""

    def __init__(self, base_dir, clock: Clock | None = None):
        self.base_dir = Path(base_dir)
        self.clock = clock or datetime.now
        self.log = ActivityLog(self.base_dir / "activity.log", self.clock)
        self._buffer: bytearray | None = None
        self._last_read_file = ""
        self._last_read_time = 0

    def fragment_path(self, filename: str, index: int) -> Path:
        return self.base_dir / "relics" / f"{filename}.{index:03d}"

    def _fragments(self, filename: str, limit: int):
        for index in range(limit):
            try:
                yield self.fragment_path(filename, index).read_bytes()
            except OSError:
                return

    def getattr(self, path: str) -> Attributes:
        if path == "/":
            return Attributes(stat.S_IFDIR | 0o755, 2)
        if path[1:] == FILENAME:
            size = sum(len(part) for part in self._fragments(FILENAME, PART_COUNT))
            return Attributes(stat.S_IFREG | 0o644, 1, size)
        raise _missing(path)

    def readdir(self, path: str) -> list[str]:
        if path != "/":
            raise _missing(path)
        return [".", "..", FILENAME]

    def open(self, path: str) -> None:
        if path[1:] != FILENAME:
            raise _missing(path)

    def read(self, path: str, size: int, offset: int) -> bytes:
        if path[1:] != FILENAME:
            raise _missing(path)

        now = int(self.clock().timestamp())
        self.log.record("READ", FILENAME)
        if (
            self._last_read_file == FILENAME
            and now - self._last_read_time <= COPY_WINDOW_SECONDS
        ):
            self.log.record("COPY", FILENAME, " -> (possible copy detected)")
        self._last_read_file = FILENAME
        self._last_read_time = now

        pieces = []
        remaining = size
        position = 0
        for part in self._fragments(FILENAME, PART_COUNT):
            if remaining <= 0:
                break
            if offset < position + len(part):
                start = max(offset - position, 0)
                piece = part[start:start + remaining]
                pieces.append(piece)
                remaining -= len(piece)
            position += len(part)
        return b"".join(pieces)

    def create(self, path: str) -> None:
        self._buffer = bytearray()

    def write(self, path: str, data: bytes, offset: int) -> int:
        if self._buffer is None:
            raise OSError(errno.EIO, "No file is being written", path)
        end = offset + len(data)
        if end > MAX_FILE_SIZE:
            raise OSError(errno.EFBIG, "File too large", path)
        if end > len(self._buffer):
            self._buffer.extend(bytes(end - len(self._buffer)))
        self._buffer[offset:end] = data
        return len(data)

    def flush(self, path: str) -> list[str]:
        """Split the written data into fragments; returns the fragment names."""
        filename = path[1:]
        content = bytes(self._buffer or b"")
        chunks = [content[i:i + PART_SIZE] for i in range(0, len(content), PART_SIZE)]
        for index, chunk in enumerate(chunks):
            try:
                self.fragment_path(filename, index).write_bytes(chunk)
            except OSError as exc:
                raise OSError(errno.EIO, "Cannot write fragment", path) from exc

        names = [f"{filename}.{index:03d}" for index in range(len(chunks))]
        self.log.record("WRITE", filename, " -> " + ", ".join(names))
        self._buffer = None
        return names

    def unlink(self, path: str) -> list[str]:
        """Remove every consecutive fragment of a file; returns their names."""
        filename = path[1:]
        deleted = []
        for index in range(MAX_FRAGMENTS):
            fragment = self.fragment_path(filename, index)
            if not fragment.exists():
                break
            fragment.unlink()
            deleted.append(f"{filename}.{index:03d}")
        if deleted:
            self.log.record("DELETE", " - ".join(deleted), "")
        return deleted