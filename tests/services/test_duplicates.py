from __future__ import annotations

import hashlib

import pytest

from fileintel.models.duplicates import DuplicateGroup
from fileintel.models.enums import DetectionType
from fileintel.models.errors import FileErrorCode
from fileintel.services.duplicates import DuplicateService
from fileintel.services.hashing import Hasher
from tests.fs_mock import MemoryFileSystem


def _service(fs: MemoryFileSystem, workers: int = 4, max_file_size: int | None = None) -> DuplicateService:
    hasher = Hasher(fs=fs) if max_file_size is None else Hasher(max_file_size=max_file_size, fs=fs)
    return DuplicateService(hasher, fs=fs, hash_workers=workers)


# ── DuplicateGroup ──────────────────────────────────────────────────


def test_group_rejects_singletons() -> None:
    with pytest.raises(ValueError):
        DuplicateGroup(DetectionType.CONTENT, ["/a"], "k", 10)


def test_group_derived_fields() -> None:
    group = DuplicateGroup(DetectionType.SIZE, ["/a", "/b", "/c"], "3", 10)

    assert group.file_to_keep == "/a"
    assert group.files_to_delete == ["/b", "/c"]
    # per-file size is total // count
    assert group.space_wasted == (10 // 3) * 2


# ── content lens ────────────────────────────────────────────────────


def test_content_groups_identical_bytes() -> None:
    fs = (
        MemoryFileSystem()
        .add_file("/d/a.txt", "hello world")
        .add_file("/d/b.txt", "hello world")
        .add_file("/d/c.txt", "different")
    )

    groups = _service(fs).find_by_content(["/d/a.txt", "/d/b.txt", "/d/c.txt"])

    assert len(groups) == 1
    group = groups[0]
    assert group.detection_type is DetectionType.CONTENT
    assert group.files == ["/d/a.txt", "/d/b.txt"]
    assert group.group_key == hashlib.sha256(b"hello world").hexdigest()
    assert group.space_wasted == len("hello world")


def test_content_skips_failing_files() -> None:
    fs = (
        MemoryFileSystem()
        .add_file("/d/a.txt", "same")
        .add_file("/d/b.txt", "same")
        .add_file("/d/big.txt", "same but much longer")
        .add_file("/d/locked.txt", "same")
        .deny("/d/locked.txt")
    )
    paths = ["/d/a.txt", "/d/missing.txt", "/d/b.txt", "/d/big.txt", "/d/locked.txt"]

    groups = _service(fs, max_file_size=10).find_by_content(paths)

    assert [group.files for group in groups] == [["/d/a.txt", "/d/b.txt"]]


def test_hash_workers_cap_open_handles() -> None:
    fs = MemoryFileSystem()
    fs.read_delay = 0.005
    paths = []
    for idx in range(24):
        path = f"/d/f{idx}.bin"
        fs.add_file(path, b"x" * 64)
        paths.append(path)

    groups = DuplicateService(Hasher(chunk_size=16, fs=fs), fs=fs, hash_workers=3).find_by_content(paths)

    assert len(groups) == 1
    assert len(groups[0].files) == 24
    assert 1 <= fs.peak_open_handles <= 3
    assert fs.open_handles == 0


def test_hash_workers_floor_is_one() -> None:
    assert DuplicateService(hash_workers=0).hash_workers == 1


# ── name / size lenses ──────────────────────────────────────────────


def test_name_lens_is_case_insensitive_across_parent_dirs() -> None:
    fs = MemoryFileSystem().add_file("/a/Report.TXT", "quarterly").add_file("/b/report.txt", "draft")
    paths = ["/a/Report.TXT", "/b/report.txt"]
    service = _service(fs)

    by_name = service.find_by_name(paths)
    by_content = service.find_by_content(paths)

    assert len(by_name) == 1
    assert by_name[0].files == paths
    assert by_name[0].group_key == "report.txt"
    assert by_name[0].total_size == len("quarterly") + len("draft")
    assert by_content == []


def test_size_lens_groups_equal_sizes() -> None:
    fs = (
        MemoryFileSystem()
        .add_file("/d/one.bin", "abcde")
        .add_file("/d/two.bin", "vwxyz")
        .add_file("/d/three.bin", "longer")
    )

    groups = _service(fs).find_by_size(["/d/one.bin", "/d/two.bin", "/d/three.bin"])

    assert len(groups) == 1
    assert groups[0].group_key == "5"
    assert groups[0].files == ["/d/one.bin", "/d/two.bin"]
    assert groups[0].space_wasted == 5


def test_size_lens_skips_missing_and_directories() -> None:
    fs = MemoryFileSystem().add_file("/d/a", "xx").add_file("/d/b", "yy").add_dir("/d/sub")

    groups = _service(fs).find_by_size(["/d/a", "/d/gone", "/d/b", "/d/sub"])

    assert [group.files for group in groups] == [["/d/a", "/d/b"]]


# ── find_all ────────────────────────────────────────────────────────


def _mixed_fs() -> tuple[MemoryFileSystem, list[str]]:
    fs = (
        MemoryFileSystem()
        .add_file("/s/one/dup.txt", "abc")
        .add_file("/s/two/dup.txt", "abc")
        .add_file("/s/other.bin", "zz")
    )
    return fs, ["/s/one/dup.txt", "/s/two/dup.txt", "/s/other.bin"]


def test_find_all_runs_every_lens() -> None:
    fs, paths = _mixed_fs()

    results = _service(fs).find_all(paths)

    assert results.total_files == 3
    assert len(results.content_duplicates) == 1
    assert len(results.name_duplicates) == 1
    assert len(results.size_duplicates) == 1
    assert results.processing_time >= 0
    assert results.skipped == []


def test_statistics_use_union_of_grouped_files() -> None:
    fs, paths = _mixed_fs()

    stats = _service(fs).find_all(paths).statistics()

    assert stats.total_files == 3
    assert stats.duplicate_files == 2
    assert stats.unique_files == 1
    assert stats.space_wasted == 9
    assert stats.content_duplicate_groups == 1
    assert stats.duplicate_percentage == pytest.approx(200 / 3)


@pytest.mark.parametrize("count", [0, 1, 7])
def test_total_files_matches_input(count: int) -> None:
    fs = MemoryFileSystem()
    paths = [f"/d/same{idx}.txt" for idx in range(count)]
    for path in paths:
        fs.add_file(path, "identical")

    results = _service(fs).find_all(paths)

    assert results.total_files == count
    if count == 0:
        assert results.statistics().duplicate_percentage == 0


def test_find_all_reports_each_skipped_file_once() -> None:
    fs = MemoryFileSystem().add_file("/d/a", "1").add_file("/d/big", "too large")

    results = _service(fs, max_file_size=4).find_all(["/d/a", "/d/missing", "/d/big"])

    codes = {error.path: error.code for error in results.skipped}
    assert codes == {
        "/d/missing": FileErrorCode.NOT_FOUND,
        "/d/big": FileErrorCode.FILE_TOO_LARGE,
    }


def test_membership_is_deterministic() -> None:
    fs = MemoryFileSystem()
    paths = []
    for idx in range(12):
        path = f"/d/{idx % 3}/file{idx % 4}.txt"
        fs.add_file(path, f"content-{idx % 2}")
        paths.append(path)
    service = _service(fs)

    def membership() -> set[tuple[str, frozenset[str]]]:
        results = service.find_all(paths)
        return {(group.detection_type.value, frozenset(group.files)) for group in results.all_groups}

    assert membership() == membership()


# ── batched variant ─────────────────────────────────────────────────


def _ten_files_with_straddling_pair() -> tuple[MemoryFileSystem, list[str]]:
    fs = MemoryFileSystem()
    paths = [f"/d/file{idx}.dat" for idx in range(10)]
    for idx, path in enumerate(paths):
        fs.add_file(path, "x" * (idx + 1))
    # indices 4 and 5 sit on either side of a batch boundary of five
    fs.add_file(paths[4], "straddling pair")
    fs.add_file(paths[5], "straddling pair")
    return fs, paths


def test_batched_misses_pairs_split_across_batches() -> None:
    fs, paths = _ten_files_with_straddling_pair()
    service = _service(fs)

    batched = service.find_all_batched(paths, batch_size=5)
    whole = service.find_all(paths)

    assert batched.total_files == 10
    assert batched.content_duplicates == []
    assert [group.files for group in whole.content_duplicates] == [[paths[4], paths[5]]]


def test_batched_finds_pairs_inside_one_batch() -> None:
    fs, paths = _ten_files_with_straddling_pair()

    batched = _service(fs).find_all_batched(paths, batch_size=6)

    assert [group.files for group in batched.content_duplicates] == [[paths[4], paths[5]]]


def test_batched_rejects_invalid_batch_size() -> None:
    with pytest.raises(ValueError):
        _service(MemoryFileSystem()).find_all_batched(["/a"], batch_size=0)


# ── input hygiene ───────────────────────────────────────────────────


def test_special_files_do_not_stall_find_all() -> None:
    fs = (
        MemoryFileSystem()
        .add_file("/d/a.txt", "hello world")
        .add_file("/d/b.txt", "hello world")
        .add_special("/d/pipe")
    )

    results = _service(fs).find_all(["/d/a.txt", "/d/pipe", "/d/b.txt"])

    assert [group.files for group in results.content_duplicates] == [["/d/a.txt", "/d/b.txt"]]
    assert [group.files for group in results.size_duplicates] == [["/d/a.txt", "/d/b.txt"]]
    assert {error.path: error.code for error in results.skipped} == {"/d/pipe": FileErrorCode.NOT_A_FILE}
    assert fs.open_handles == 0


def test_repeated_path_is_never_its_own_duplicate() -> None:
    fs = MemoryFileSystem().add_file("/d/a.txt", "hello world")

    results = _service(fs).find_all(["/d/a.txt", "/d/a.txt", "/d/a.txt"])

    assert results.all_groups == []
    assert results.total_files == 1
    stats = results.statistics()
    assert stats.duplicate_files == 0
    assert stats.unique_files == 1
    assert stats.space_wasted == 0


def test_repeated_paths_collapse_in_every_lens() -> None:
    fs = MemoryFileSystem().add_file("/x/a.txt", "same").add_file("/y/a.txt", "same")
    paths = ["/x/a.txt", "/y/a.txt", "/x/a.txt"]
    service = _service(fs)

    for groups in (service.find_by_content(paths), service.find_by_name(paths), service.find_by_size(paths)):
        assert [group.files for group in groups] == [["/x/a.txt", "/y/a.txt"]]
    batched = service.find_all_batched(paths, batch_size=2)
    assert batched.total_files == 2
    assert [group.files for group in batched.content_duplicates] == [["/x/a.txt", "/y/a.txt"]]


def test_name_lens_handles_backslash_paths() -> None:
    paths = ["C:\\Users\\me\\Report.TXT", "D:\\backup\\report.txt"]

    groups = _service(MemoryFileSystem()).find_by_name(paths)

    assert len(groups) == 1
    assert groups[0].group_key == "report.txt"
    assert groups[0].files == paths
