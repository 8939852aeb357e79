"""Reading and writing files of each area with its transformation."""

from __future__ import annotations

import errno
import os
from pathlib import Path

from .areas import Area, backing_path
from .codecs import (
    CodecError,
    heaven_decrypt,
    heaven_encrypt,
    metro_decrypt,
    metro_encrypt,
    rot13,
    skystreet_compress,
    skystreet_decompress,
)

_PLAIN = (Area.STARTER, Area.BLACKROSE)
_STREAMED = {
    Area.METRO: (metro_encrypt, metro_decrypt),
    Area.DRAGON: (rot13, rot13),
}


def _io_error(path, exc: Exception) -> OSError:
    return OSError(errno.EIO, f"Input/output error: {exc}", str(path))


def _pread(path: Path, size: int, offset: int) -> bytes:
    with open(path, "rb") as handle:
        handle.seek(offset)
        return handle.read(size)


def _pwrite(path: Path, data: bytes, offset: int) -> int:
    fd = os.open(path, os.O_WRONLY)
    try:
        return os.pwrite(fd, data, offset)
    finally:
        os.close(fd)


class AreaStorage:
    """Stores area files under ``<root>/chiho`` in their encoded form."""

    def __init__(self, root):
        self.root = Path(root)

    def _path(self, area: Area, name: str) -> Path:
        return backing_path(self.root, area, name)

    def _decrypt_file(self, path: Path) -> bytes:
        try:
            return heaven_decrypt(path.read_bytes())
        except CodecError as exc:
            raise _io_error(path, exc) from exc

    def _decompress_file(self, path: Path) -> bytes:
        try:
            return skystreet_decompress(path.read_bytes())
        except CodecError as exc:
            raise _io_error(path, exc) from exc

    def read(self, area: Area, name: str, size: int, offset: int) -> bytes:
        """Read up to ``size`` decoded bytes starting at ``offset``."""
        path = self._path(area, name)
        if area in _PLAIN:
            return _pread(path, size, offset)
        if area in _STREAMED:
            _, decode = _STREAMED[area]
            return decode(_pread(path, size, offset))
        if area is Area.HEAVEN:
            content = self._decrypt_file(path)
        else:
            content = self._decompress_file(path)
        return content[offset:offset + size]

    def write(self, area: Area, name: str, data: bytes, offset: int) -> int:
        """Write ``data`` at ``offset``; returns the number of bytes taken."""
        path = self._path(area, name)
        data = bytes(data)
        if area in _PLAIN:
            return _pwrite(path, data, offset)
        if area in _STREAMED:
            encode, _ = _STREAMED[area]
            return _pwrite(path, encode(data), offset)
        if area is Area.HEAVEN:
            self._write_heaven(path, data, offset)
        else:
            self._write_skystreet(path, data, offset)
        return len(data)

    def _write_heaven(self, path: Path, data: bytes, offset: int) -> None:
        fd = os.open(path, os.O_RDWR | os.O_CREAT, 0o644)
        os.close(fd)
        total = offset + len(data)
        if offset > 0 and path.stat().st_size > 0:
            plaintext = bytearray(self._decrypt_file(path))
            if len(plaintext) < total:
                plaintext.extend(bytes(total - len(plaintext)))
        else:
            plaintext = bytearray(total)
        plaintext[offset:total] = data
        try:
            ciphertext = heaven_encrypt(bytes(plaintext[:total]))
        except CodecError as exc:
            raise _io_error(path, exc) from exc
        path.write_bytes(ciphertext)

    def _write_skystreet(self, path: Path, data: bytes, offset: int) -> None:
        try:
            content = bytearray(self._decompress_file(path))
        except FileNotFoundError:
            content = bytearray()
        end = offset + len(data)
        if len(content) < end:
            content.extend(bytes(end - len(content)))
        content[offset:end] = data
        try:
            compressed = skystreet_compress(bytes(content))
        except CodecError as exc:
            raise _io_error(path, exc) from exc
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o644)
        with os.fdopen(fd, "wb") as handle:
            handle.write(compressed)

    def create(self, area: Area, name: str, mode: int = 0o644) -> None:
        """Create an empty file of ``area``."""
        path = self._path(area, name)
        if area is Area.HEAVEN:
            os.close(os.open(path, os.O_CREAT | os.O_WRONLY, mode))
            return
        if area is Area.SKYSTREET:
            try:
                compressed = skystreet_compress(b"")
            except CodecError as exc:
                raise _io_error(path, exc) from exc
            fd = os.open(path, os.O_CREAT | os.O_WRONLY, mode)
            with os.fdopen(fd, "wb") as handle:
                handle.write(compressed)
            return
        os.close(os.open(path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, mode))

    def unlink(self, area: Area, name: str) -> None:
        """Remove the backing file of ``name``."""
        os.unlink(self._path(area, name))

    def list_names(self, area: Area) -> list[str]:
        """Names of the files stored in ``area``, without their suffix."""
        directory = self.root / "chiho" / area.directory
        names = []
        for entry in sorted(os.listdir(directory)):
            if entry.endswith(area.suffix):
                stem = entry[: -len(area.suffix)]
                if stem:
                    names.append(stem)
        return names