import os
import pytest
from flashfs.errors import DirectoryOpenError
from flashfs.scanner import ScanResult, count_files
from flashfs.walker import DIRECTORY, FILE, DirectoryWalker


def test_count_example_tree(make_tree):
    root = make_tree({"a.txt": b"abc", "sub/b.txt": b""})
    # "a.txt\0" + "sub/b.txt\0"
    assert count_files(DirectoryWalker(), str(root)) == ScanResult(2, 16)


def test_count_nested_directories(make_tree):
    root = make_tree({
        "x": b"1",
        "d1/d2/d3/deep.bin": b"2",
        "d1/y": b"3",
        "empty": None,
    })
    result = count_files(DirectoryWalker(), str(root))
    assert result.file_count == 3
    assert result.filename_size == len(b"x\0d1/d2/d3/deep.bin\0d1/y\0")


def test_image_prefix_length_is_added_per_file(make_tree):
    root = make_tree({"f1": b"", "f2": b""})
    assert count_files(DirectoryWalker(), str(root), 4) == ScanResult(2, 2 * (4 + 2 + 1))


def test_scanning_twice_is_stable(make_tree):
    root = make_tree({f"dir{i}/file{j}": b"x" * j for i in range(3) for j in range(4)})
    walker = DirectoryWalker()
    assert count_files(walker, str(root)) == count_files(walker, str(root))


def test_non_ascii_names_are_counted_in_bytes(make_tree):
    root = make_tree({"café.txt": b""})
    assert count_files(DirectoryWalker(), str(root)).filename_size == \
        len(os.fsencode("café.txt")) + 1


def test_missing_directory(tmp_path):
    with pytest.raises(DirectoryOpenError) as e:
        count_files(DirectoryWalker(), str(tmp_path / "missing"))
    assert "missing" in e.value.message


def test_walker_lists_sorted_children(make_tree):
    root = make_tree({"b": b"", "a": b"", "C": b"", "sub/z": b""})
    assert DirectoryWalker().enumerate(str(root)) == [
        ("C", FILE), ("a", FILE), ("b", FILE), ("sub", DIRECTORY)]


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="requires mkfifo")
def test_walker_skips_special_files(make_tree, capsys):
    root = make_tree({"a": b""})
    os.mkfifo(root / "pipe")
    walker = DirectoryWalker()
    assert walker.enumerate(str(root)) == [("a", FILE)]
    assert walker.enumerate(str(root)) == [("a", FILE)]
    assert capsys.readouterr().err.count("pipe") == 1
