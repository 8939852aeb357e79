import stat

import pytest

from chiho.areas import AREA_NAMES
from chiho.codecs import metro_encrypt, rot13, skystreet_decompress
from chiho.maimai import MaimaiFS


@pytest.fixture
def fs(tmp_path):
    maimai = MaimaiFS(tmp_path / "data")
    maimai.init_layout()
    return maimai


def test_init_layout_creates_all_directories(fs):
    for name in AREA_NAMES:
        assert (fs.root / "chiho" / name).is_dir()
        assert (fs.root / "fuse_dir" / name).is_dir()
    assert (fs.root / "fuse_dir" / "7sref").is_dir()


def test_init_layout_is_repeatable(fs):
    fs.init_layout()
    assert (fs.root / "chiho" / "heaven").is_dir()


@pytest.mark.parametrize(
    "path",
    ["/", "/chiho", "/fuse_dir", "/chiho/youth", "/fuse_dir/metro", "/fuse_dir/7sref"],
)
def test_fixed_directories(fs, path):
    attrs = fs.getattr(path)
    assert attrs.mode == stat.S_IFDIR | 0o755
    assert attrs.nlink == 2


def test_readdir_root(fs):
    assert fs.readdir("/") == [".", "..", "chiho", "fuse_dir"]


def test_readdir_chiho_and_fuse_dir(fs):
    assert fs.readdir("/chiho") == [".", ".."] + list(AREA_NAMES)
    assert fs.readdir("/fuse_dir") == [".", ".."] + list(AREA_NAMES) + ["7sref"]


@pytest.mark.parametrize(
    "area", ["starter", "metro", "dragon", "blackrose", "heaven", "skystreet"]
)
def test_round_trip_in_each_area(fs, area):
    path = f"/fuse_dir/{area}/note"
    data = b"Hello, maimai world!"
    fs.create(path)
    assert fs.write(path, data, 0) == len(data)
    assert fs.read(path, 4096, 0) == data
    assert fs.read(path, 5, 0) == data[:5]
    assert fs.readdir(f"/fuse_dir/{area}") == [".", "..", "note"]


def test_starter_file_size(fs):
    fs.create("/fuse_dir/starter/song")
    fs.write("/fuse_dir/starter/song", b"abcdef", 0)
    attrs = fs.getattr("/fuse_dir/starter/song")
    assert attrs.size == 6
    assert stat.S_ISREG(attrs.mode)
    assert (fs.root / "chiho" / "starter" / "song.mai").read_bytes() == b"abcdef"


def test_metro_stored_encrypted(fs):
    data = b"metro line"
    fs.create("/fuse_dir/metro/map")
    fs.write("/fuse_dir/metro/map", data, 0)
    assert (fs.root / "chiho" / "metro" / "map.ccc").read_bytes() == metro_encrypt(data)


def test_dragon_stored_rotated(fs):
    fs.create("/fuse_dir/dragon/fire")
    fs.write("/fuse_dir/dragon/fire", b"Hello", 0)
    assert (fs.root / "chiho" / "dragon" / "fire.rot").read_bytes() == rot13(b"Hello")


def test_heaven_not_stored_in_clear(fs):
    data = b"secret message in heaven"
    fs.create("/fuse_dir/heaven/wing")
    fs.write("/fuse_dir/heaven/wing", data, 0)
    stored = (fs.root / "chiho" / "heaven" / "wing.enc").read_bytes()
    assert data not in stored
    assert len(stored) % 16 == 0


def test_heaven_write_at_offset_keeps_prefix(fs):
    fs.create("/fuse_dir/heaven/wing")
    fs.write("/fuse_dir/heaven/wing", b"abcdef", 0)
    fs.write("/fuse_dir/heaven/wing", b"XY", 2)
    assert fs.read("/fuse_dir/heaven/wing", 100, 0) == b"abXYef"


def test_skystreet_stored_as_gzip(fs):
    fs.create("/fuse_dir/skystreet/road")
    fs.write("/fuse_dir/skystreet/road", b"sky" * 50, 0)
    stored = (fs.root / "chiho" / "skystreet" / "road.gz").read_bytes()
    assert stored[:2] == b"\x1f\x8b"
    assert skystreet_decompress(stored) == b"sky" * 50


def test_7sref_alias_reads_area_file(fs):
    fs.create("/fuse_dir/metro/map")
    fs.write("/fuse_dir/metro/map", b"via alias", 0)
    assert fs.read("/fuse_dir/7sref/metro_map", 100, 0) == b"via alias"
    assert fs.getattr("/fuse_dir/7sref/metro_map").size == len(b"via alias")


def test_7sref_alias_writes_and_unlinks(fs):
    fs.create("/fuse_dir/7sref/dragon_tale")
    fs.write("/fuse_dir/7sref/dragon_tale", b"Once upon", 0)
    assert fs.read("/fuse_dir/dragon/tale", 100, 0) == b"Once upon"
    fs.unlink("/fuse_dir/7sref/dragon_tale")
    assert not (fs.root / "chiho" / "dragon" / "tale.rot").exists()


def test_7sref_without_area_is_missing(fs):
    with pytest.raises(FileNotFoundError):
        fs.getattr("/fuse_dir/7sref/noarea")
    with pytest.raises(FileNotFoundError):
        fs.read("/fuse_dir/7sref/noarea", 10, 0)


def test_7sref_listing_uses_fuse_dir_entries(fs):
    (fs.root / "fuse_dir" / "youth" / "diary.txt").write_bytes(b"x")
    (fs.root / "fuse_dir" / "metro" / "plan").write_bytes(b"y")
    assert fs.readdir("/fuse_dir/7sref") == [".", "..", "metro_plan", "youth_diary.txt"]


def test_youth_is_plain_storage(fs):
    fs.create("/fuse_dir/youth/memo")
    fs.write("/fuse_dir/youth/memo", b"plain", 0)
    assert (fs.root / "fuse_dir" / "youth" / "memo").read_bytes() == b"plain"
    assert fs.read("/fuse_dir/youth/memo", 10, 1) == b"lain"
    assert fs.readdir("/fuse_dir/youth") == [".", "..", "memo"]


def test_create_existing_plain_file_fails(fs):
    fs.create("/fuse_dir/starter/song")
    with pytest.raises(FileExistsError):
        fs.create("/fuse_dir/starter/song")


def test_missing_file_raises(fs):
    with pytest.raises(FileNotFoundError):
        fs.getattr("/fuse_dir/blackrose/ghost")
    with pytest.raises(FileNotFoundError):
        fs.read("/fuse_dir/blackrose/ghost", 10, 0)
    with pytest.raises(FileNotFoundError):
        fs.unlink("/fuse_dir/blackrose/ghost")


def test_unlink_removes_backing_file(fs):
    fs.create("/fuse_dir/blackrose/rose")
    fs.unlink("/fuse_dir/blackrose/rose")
    assert fs.readdir("/fuse_dir/blackrose") == [".", ".."]


def test_listing_ignores_other_suffixes(fs):
    (fs.root / "chiho" / "starter" / "stray.txt").write_bytes(b"")
    (fs.root / "chiho" / "starter" / "track.mai").write_bytes(b"")
    assert fs.readdir("/fuse_dir/starter") == [".", "..", "track"]