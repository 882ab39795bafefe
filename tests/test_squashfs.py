import pytest

from appimage_arm64.errors import CommandError, SquashfsError
from appimage_arm64.lib import squashfs
from appimage_arm64.lib.command import CmdResult
from appimage_arm64.lib.squashfs import extract_squashfs, find_squashfs_offset, scan_magic


def _image(tmp_path, offsets, size=256):
    data = bytearray(b"\x00" * size)
    for off in offsets:
        data[off : off + 4] = b"hsqs"
    p = tmp_path / "app.AppImage"
    p.write_bytes(bytes(data))
    return p


def test_scan_magic_finds_all_offsets(tmp_path):
    p = _image(tmp_path, [10, 100, 200])
    assert scan_magic(p) == [10, 100, 200]


def test_scan_magic_across_chunk_boundary(tmp_path):
    # Offsets 6 and 14 straddle the 8-byte chunk edges.
    p = _image(tmp_path, [6, 14, 40], size=64)
    assert scan_magic(p, chunk_size=8) == [6, 14, 40]


def test_scan_magic_empty_file(tmp_path):
    p = tmp_path / "empty"
    p.write_bytes(b"")
    assert scan_magic(p) == []


def _fake_unsquashfs(valid, calls):
    def fake(argv, check=True, **kwargs):
        calls.append(list(argv))
        off = int(argv[argv.index("-offset") + 1])
        return CmdResult(argv=list(argv), returncode=0 if off in valid else 1, stdout="", stderr="")

    return fake


def test_find_offset_first_valid_candidate_wins(tmp_path, monkeypatch):
    p = _image(tmp_path, [10, 100, 200])
    calls = []
    monkeypatch.setattr(squashfs, "run_cmd", _fake_unsquashfs({100, 200}, calls))
    assert find_squashfs_offset(p) == 100
    # Stops probing once a candidate validates.
    assert [c[3] for c in calls] == ["10", "100"]
    assert calls[0][:3] == ["unsquashfs", "-s", "-offset"]


def test_find_offset_without_marker(tmp_path):
    p = _image(tmp_path, [])
    with pytest.raises(SquashfsError, match="No SquashFS marker found"):
        find_squashfs_offset(p)


def test_find_offset_when_no_candidate_validates(tmp_path, monkeypatch):
    p = _image(tmp_path, [10, 100])
    monkeypatch.setattr(squashfs, "run_cmd", _fake_unsquashfs(set(), []))
    with pytest.raises(SquashfsError, match="No valid SquashFS offset found"):
        find_squashfs_offset(p)


def test_extract_squashfs_argv(tmp_path, monkeypatch):
    calls = []

    def fake(argv, check=True, **kwargs):
        calls.append(list(argv))
        return CmdResult(argv=list(argv), returncode=0, stdout="", stderr="")

    monkeypatch.setattr(squashfs, "run_cmd", fake)
    extract_squashfs("img", tmp_path / "out", offset=188392, no_xattrs=True)
    assert calls == [["unsquashfs", "-no-xattrs", "-d", str(tmp_path / "out"), "-offset", "188392", "img"]]


def test_extract_squashfs_failure_is_squashfs_error(tmp_path, monkeypatch):
    def fake(argv, check=True, **kwargs):
        raise CommandError(argv, 1, "bad superblock", "Command failed (1)")

    monkeypatch.setattr(squashfs, "run_cmd", fake)
    with pytest.raises(SquashfsError):
        extract_squashfs("img", tmp_path / "out", offset=0)
