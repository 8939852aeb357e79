# chiho

Three small storage tools in one package:

- **`chiho.hexed`** turns text files that hold hexadecimal strings into
  image files and keeps a conversion log.
- **`chiho.relics`** is a file store that keeps one file as numbered 1 KiB
  fragments (`name.000`, `name.001`, ...). It records every read, write,
  possible copy and delete in an activity log.
- **`chiho.maimai`** is a file store split into areas. Each area stores its
  files in its own way:
  - `starter` and `blackrose` store files unchanged.
  - `metro` applies a position-based byte shift.
  - `dragon` applies ROT13.
  - `heaven` uses AES-256-CBC.
  - `skystreet` uses gzip.

  A `7sref` view reaches any area through names of the form `area_filename`.

## Installation

```
pip install .
```

To install the test tools as well:

```
pip install ".[test]"
```

## Converting hex text to images

```
chiho-hexed URL [--archive FILE] [--text-dir DIR] [--image-dir DIR] [--log-file FILE]
```

The command works in these steps:

1. It creates the image and text folders if they are missing. By default
   these are `image/` and `texts/`.
2. It downloads the zip archive at `URL` with `wget`. The default archive
   name is `anomali_texts.zip`.
3. It extracts the archive into the text folder and deletes the archive.
4. It decodes every file in the text folder whose name contains `.txt`.

Each result is written into the image folder as
`<name>_image_<YYYY-mm-dd>_<HH:MM:SS>.png`, where `<name>` is the file name
without its last four characters. Each conversion adds a line to the log
file, which is `conversion.log` by default:

```
[2025-01-01][12:00:00]: Successfully converted hexadecimal text 1.txt to 1_image_2025-01-01_12:00:00.png
```

Only the first whitespace-separated token of each file is decoded. A file is
skipped, with a message on standard error, in either of these cases:

- its hex string has an odd length;
- its hex string cannot be parsed.

If the download or the extraction fails, the command exits with status 1.

The steps are also available from Python. These functions are all in
`chiho.hexed`:

- `decode_hex_text`
- `image_filename`
- `convert_hex_file`
- `download_archive`
- `extract_archive`
- `process_directory`

`download_archive` and `extract_archive` raise `ArchiveError` when they fail.

```python
from chiho.hexed import decode_hex_text

decode_hex_text("89504e47")  # b"\x89PNG"
```

## Area codecs

```python
from chiho.codecs import (
    metro_encrypt, metro_decrypt, rot13,
    skystreet_compress, skystreet_decompress,
)

assert metro_decrypt(metro_encrypt(b"hello")) == b"hello"
assert rot13(b"Hello") == b"Uryyb"
assert skystreet_decompress(skystreet_compress(b"data")) == b"data"
```

`heaven_encrypt` uses AES-256-CBC with PKCS#7 padding. It writes a 16-byte
IV in front of the ciphertext. The IV is random unless one is passed in.
`heaven_decrypt` reads that IV back from the same position. The codecs raise
`CodecError` on data they cannot decode.

## The area file store

```python
from chiho.maimai import MaimaiFS

fs = MaimaiFS("/tmp/maimai_data")
fs.init_layout()

fs.create("/fuse_dir/heaven/note", 0o644)
fs.write("/fuse_dir/heaven/note", b"secret text", 0)
fs.read("/fuse_dir/heaven/note", 1024, 0)      # b"secret text"

fs.readdir("/fuse_dir")
fs.read("/fuse_dir/7sref/heaven_note", 1024, 0)
fs.unlink("/fuse_dir/heaven/note")
```

The default root is `/tmp/maimai_data`.

Inside the root, each visible file `/fuse_dir/<area>/<name>` is stored as
`chiho/<area>/<name>.<ext>`. The extension depends on the area:

| Area | Extension |
| --- | --- |
| `starter` | `.mai` |
| `metro` | `.ccc` |
| `dragon` | `.rot` |
| `blackrose` | `.bin` |
| `heaven` | `.enc` |
| `skystreet` | `.gz` |

Paths outside these areas map straight onto files under the root. Missing
files raise `OSError`, as the operating system reports it.

- `chiho.areas` maps visible paths to areas and to stored paths, through
  `Area`, `area_for_path`, `backing_path` and `resolve_7sref`.
- `chiho.handlers.AreaStorage` does the reading and writing for each area.

## Fragmented relics

```python
from chiho.relics import RelicFS

relics = RelicFS("/srv/relics-base")
relics.getattr("/Baymax.jpeg")
data = relics.read("/Baymax.jpeg", 4096, 0)
```

Fragments are stored in `<base>/relics/`, and that folder must already exist.

The store presents a single file, `Baymax.jpeg`, built from up to 14
fragments. A second read within two seconds is logged as a possible copy.

Writing takes three steps:

1. `create` starts a write buffer.
2. `write` fills the buffer, up to 100 MiB.
3. `flush` splits the buffer into 1 KiB fragments and returns the fragment
   names.

`unlink` removes the consecutive fragments of a file. The activity log is
kept in `<base>/activity.log`.

## What is not included

`RelicFS` and `MaimaiFS` are Python objects with file-system-style methods
(`getattr`, `readdir`, `read`, `write`, `create`, `unlink`, ...). The package
does not mount them as a file system and has no command that serves them.
Only `chiho-hexed` is installed as a command.