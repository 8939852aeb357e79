"""Content transformations used by the storage areas."""

from __future__ import annotations

import os
import zlib

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

AES_BLOCK_SIZE = 16
AES_KEY_SIZE = 32
HEAVEN_KEY = b"maimai_heaven_chiho_aes_key_256bit"[:AES_KEY_SIZE]

_ROT13 = bytes.maketrans(
    b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz",
    b"NOPQRSTUVWXYZABCDEFGHIJKLMnopqrstuvwxyzabcdefghijklm",
)


class CodecError(ValueError):
    """Raised when data cannot be encoded or decoded."""


def metro_encrypt(data: bytes) -> bytes:
    """Shift each byte up by its position modulo 256."""
    return bytes((byte + index) & 0xFF for index, byte in enumerate(data))


def metro_decrypt(data: bytes) -> bytes:
    """Undo :func:`metro_encrypt`."""
    return bytes((byte - index) & 0xFF for index, byte in enumerate(data))


def rot13(data: bytes) -> bytes:
    """Rotate ASCII letters by 13 places; other bytes are unchanged."""
    return bytes(data).translate(_ROT13)


def _cipher(iv: bytes) -> Cipher:
    return Cipher(algorithms.AES(HEAVEN_KEY), modes.CBC(iv))


def heaven_encrypt(plaintext: bytes, iv: bytes | None = None) -> bytes:
    """AES-256-CBC encrypt with PKCS#7 padding; the IV leads the result."""
    if iv is None:
        iv = os.urandom(AES_BLOCK_SIZE)
    if len(iv) != AES_BLOCK_SIZE:
        raise CodecError(f"IV must be {AES_BLOCK_SIZE} bytes")
    padder = padding.PKCS7(AES_BLOCK_SIZE * 8).padder()
    padded = padder.update(bytes(plaintext)) + padder.finalize()
    encryptor = _cipher(iv).encryptor()
    return iv + encryptor.update(padded) + encryptor.finalize()


def heaven_decrypt(data: bytes) -> bytes:
    """Decrypt data produced by :func:`heaven_encrypt`."""
    if len(data) <= AES_BLOCK_SIZE:
        raise CodecError("ciphertext is too short")
    iv, body = bytes(data[:AES_BLOCK_SIZE]), bytes(data[AES_BLOCK_SIZE:])
    try:
        decryptor = _cipher(iv).decryptor()
        padded = decryptor.update(body) + decryptor.finalize()
        unpadder = padding.PKCS7(AES_BLOCK_SIZE * 8).unpadder()
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError as exc:
        raise CodecError(f"cannot decrypt: {exc}") from exc


def _compress_limit(length: int) -> int:
    return length + length // 100 + 13


def skystreet_compress(data: bytes) -> bytes:
    """Gzip-compress ``data`` into an output no larger than the fixed bound."""
    compressor = zlib.compressobj(
        zlib.Z_DEFAULT_COMPRESSION, zlib.DEFLATED, 31, 8, zlib.Z_DEFAULT_STRATEGY
    )
    compressed = compressor.compress(bytes(data)) + compressor.flush()
    if len(compressed) > _compress_limit(len(data)):
        raise CodecError("compressed data does not fit the output bound")
    return compressed


def skystreet_decompress(data: bytes) -> bytes:
    """Decompress a complete gzip stream; trailing bytes are ignored."""
    decompressor = zlib.decompressobj(31)
    try:
        result = decompressor.decompress(bytes(data))
    except zlib.error as exc:
        raise CodecError(f"cannot decompress: {exc}") from exc
    if not decompressor.eof:
        raise CodecError("gzip stream is incomplete")
    return result