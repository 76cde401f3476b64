import stat
import zipfile

import pytest

from lambda_archiver.errors import ArchiveIOFailure
from lambda_archiver.exporters.zip import UNIX_SYSTEM, ZipFileBackend
from lambda_archiver.files import FileEntry, collect_entries
from lambda_archiver.permissions import READ_EXECUTE_MODE, PermissionPolicy

from conftest import write_file


def stored_mode(zf, name):
    return zf.getinfo(name).external_attr >> 16


def test_zip_backend_writes_files_and_empty_dirs(app_tree, tmp_path):
    dest = tmp_path / "build" / "app.zip"

    ZipFileBackend().write(app_tree, dest, collect_entries(app_tree))

    with zipfile.ZipFile(dest) as zf:
        assert zf.namelist() == ["php", "public/emptydir/", "vendor/file1"]
        assert zf.getinfo("public/emptydir/").is_dir()
        assert all(info.create_system == UNIX_SYSTEM for info in zf.infolist())

        assert stored_mode(zf, "php") == READ_EXECUTE_MODE
        assert stored_mode(zf, "public/emptydir/") == READ_EXECUTE_MODE
        assert stored_mode(zf, "vendor/file1") == stat.S_IFREG | 0o644


def test_zip_backend_round_trip(app_tree, tmp_path):
    write_file(app_tree / "config" / "app.php", b"<?php return [];", 0o600)
    dest = tmp_path / "app.zip"
    out = tmp_path / "extracted"

    ZipFileBackend().write(app_tree, dest, collect_entries(app_tree))
    with zipfile.ZipFile(dest) as zf:
        zf.extractall(out)

    for source in app_tree.rglob("*"):
        extracted = out / source.relative_to(app_tree)
        assert extracted.exists()
        if source.is_file():
            assert extracted.read_bytes() == source.read_bytes()

    assert (out / "public" / "emptydir").is_dir()


def test_zip_backend_honours_entry_order(tmp_path):
    app = tmp_path / "app"
    b = write_file(app / "b.txt", b"b")
    a = write_file(app / "a.txt", b"a")
    entries = [
        FileEntry(real_path=b, relative_path="b.txt", size=1),
        FileEntry(real_path=a, relative_path="a.txt", size=1),
    ]
    dest = tmp_path / "app.zip"

    ZipFileBackend().write(app, dest, entries)

    with zipfile.ZipFile(dest) as zf:
        assert zf.namelist() == ["b.txt", "a.txt"]


def test_zip_backend_overwrites_existing_archive(app_tree, tmp_path):
    dest = tmp_path / "app.zip"
    dest.write_bytes(b"stale")

    ZipFileBackend().write(app_tree, dest, collect_entries(app_tree))

    with zipfile.ZipFile(dest) as zf:
        assert "php" in zf.namelist()


def test_zip_backend_deterministic_timestamps(app_tree, tmp_path):
    dest = tmp_path / "app.zip"

    ZipFileBackend(deterministic=True).write(app_tree, dest, collect_entries(app_tree))

    with zipfile.ZipFile(dest) as zf:
        assert {info.date_time for info in zf.infolist()} == {(1980, 1, 1, 0, 0, 0)}


def test_zip_backend_applies_permission_overrides(app_tree, tmp_path):
    write_file(app_tree / "artisan", b"#!/usr/bin/env php", 0o644)
    dest = tmp_path / "app.zip"

    ZipFileBackend(permissions=PermissionPolicy({"artisan": 0o100755})).write(
        app_tree, dest, collect_entries(app_tree)
    )

    with zipfile.ZipFile(dest) as zf:
        assert stored_mode(zf, "artisan") == 0o100755


def test_zip_backend_missing_file_is_fatal(tmp_path):
    app = tmp_path / "app"
    app.mkdir()
    entries = [FileEntry(real_path=app / "gone.php", relative_path="gone.php")]
    dest = tmp_path / "app.zip"

    with pytest.raises(ArchiveIOFailure):
        ZipFileBackend().write(app, dest, entries)

    assert not dest.exists()


def test_zip_backend_unwritable_destination_is_fatal(app_tree, tmp_path):
    blocker = tmp_path / "build"
    blocker.write_text("not a directory")

    with pytest.raises(ArchiveIOFailure):
        ZipFileBackend().write(app_tree, blocker / "app.zip", collect_entries(app_tree))
