"""Convert text files of hexadecimal digits into image files."""

from __future__ import annotations

import argparse
import subprocess
import sys
import zipfile
from datetime import datetime
from pathlib import Path

IMAGE_DIR = "image"
TEXT_DIR = "texts"
LOG_FILE = "conversion.log"
ZIP_FILE = "anomali_texts.zip"


class ArchiveError(RuntimeError):
    """Raised when the text archive cannot be fetched or unpacked."""


def decode_hex_text(text: str) -> bytes:
    """Decode the first whitespace-delimited token of ``text`` as hex bytes."""
    tokens = text.split()
    token = tokens[0] if tokens else ""
    if len(token) % 2:
        raise ValueError(f"hex text has odd length {len(token)}")
    try:
        return bytes.fromhex(token)
    except ValueError as exc:
        raise ValueError(f"invalid hex text: {exc}") from None


def image_filename(base_name: str, when: datetime) -> str:
    """Name of the image produced from ``base_name`` at time ``when``."""
    return f"{base_name}_image_{when:%Y-%m-%d}_{when:%H:%M:%S}.png"


def convert_hex_file(path, image_dir, log_file, now: datetime | None = None) -> Path:
    """Write the bytes encoded in ``path`` as an image and log the conversion.

    Returns the path of the written image.
    """
    path = Path(path)
    when = now or datetime.now()
    data = decode_hex_text(path.read_text(errors="replace"))

    base_name = path.name[:-4]
    image_name = image_filename(base_name, when)
    image_path = Path(image_dir) / image_name
    image_path.write_bytes(data)

    try:
        with open(log_file, "a", encoding="utf-8") as log:
            log.write(
                f"[{when:%Y-%m-%d}][{when:%H:%M:%S}]: Successfully converted "
                f"hexadecimal text {path.name} to {image_name}\n"
            )
    except OSError as exc:
        print(f"Cannot open {log_file}: {exc}", file=sys.stderr)
    return image_path


def download_archive(url: str, destination) -> None:
    """Download ``url`` to ``destination`` with wget."""
    print("Downloading archive...")
    result = subprocess.run(["wget", "-O", str(destination), url])
    if result.returncode != 0:
        raise ArchiveError("failed to download the archive")


def extract_archive(archive, destination) -> list[str]:
    """Extract ``archive`` into ``destination`` and delete the archive.

    Returns the names of the extracted members.
    """
    archive = Path(archive)
    print(f"Extracting archive into '{destination}'...")
    try:
        with zipfile.ZipFile(archive) as bundle:
            names = bundle.namelist()
            bundle.extractall(destination)
    except (zipfile.BadZipFile, OSError) as exc:
        raise ArchiveError(f"failed to extract the archive: {exc}") from exc

    try:
        archive.unlink()
        print(f"Archive removed: {archive}")
    except OSError as exc:
        print(f"Cannot remove archive: {exc}", file=sys.stderr)
    return names


def process_directory(text_dir, image_dir, log_file) -> list[Path]:
    """Convert every file in ``text_dir`` whose name contains ``.txt``."""
    images = []
    for entry in sorted(Path(text_dir).iterdir()):
        if ".txt" not in entry.name:
            continue
        try:
            images.append(convert_hex_file(entry, image_dir, log_file))
        except (OSError, ValueError) as exc:
            print(f"Skipping {entry.name}: {exc}", file=sys.stderr)
    return images


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Turn hexadecimal texts into images.")
    parser.add_argument("url", help="address of the zip archive of texts")
    parser.add_argument("--archive", default=ZIP_FILE)
    parser.add_argument("--text-dir", default=TEXT_DIR)
    parser.add_argument("--image-dir", default=IMAGE_DIR)
    parser.add_argument("--log-file", default=LOG_FILE)
    args = parser.parse_args(argv)

    Path(args.image_dir).mkdir(mode=0o700, exist_ok=True)
    Path(args.text_dir).mkdir(mode=0o700, exist_ok=True)

    try:
        download_archive(args.url, args.archive)
        extract_archive(args.archive, args.text_dir)
        process_directory(args.text_dir, args.image_dir, args.log_file)
    except (ArchiveError, OSError) as exc:
        print(exc, file=sys.stderr)
        return 1

    print(f"All files processed. See '{args.image_dir}/' and '{args.log_file}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())