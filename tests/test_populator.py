import pytest
from flashfs.context import BuildContext
from flashfs.errors import AllocationError, ConsistencyError
from flashfs.populator import populate_entries
from flashfs.scanner import count_files
from flashfs.sorter import sort_entries
from flashfs.walker import DirectoryWalker


def populated(root):
    walker = DirectoryWalker()
    ctx = BuildContext(str(root), *count_files(walker, str(root)))
    populate_entries(ctx, walker)
    return ctx


def test_populate_example_tree(make_tree):
    ctx = populated(make_tree({"a.txt": b"abc", "sub/b.txt": b""}))
    assert ctx.filename_start == 12 + 2 * 12
    assert bytes(ctx.filename_buffer) == b"a.txt\0sub/b.txt\0"
    assert [e.filename_offset for e in ctx.entries] == [36, 42]
    assert all(e.binary_offset is None and e.binary_size == 0 for e in ctx.entries)
    assert ctx.files_left == 0
    assert ctx.filename_cursor == ctx.filename_size


def test_every_offset_addresses_a_name(make_tree):
    files = {"z": b"", "m/n/o": b"", "m/a": b"", "b": b""}
    ctx = populated(make_tree(files))
    names = {ctx.filename_at(e.filename_offset) for e in ctx.entries}
    assert names == {name.encode() for name in files}


def test_sort_is_bytewise_and_leaves_buffer_alone(make_tree):
    ctx = populated(make_tree({"sub/x": b"", "sub.txt": b"", "B": b"", "a": b""}))
    buffer_before = bytes(ctx.filename_buffer)
    # Population visits the "sub" directory before "sub.txt".
    assert buffer_before == b"B\0a\0sub/x\0sub.txt\0"

    sort_entries(ctx.entries, ctx.filename_buffer, ctx.filename_start)

    names = [ctx.filename_at(e.filename_offset) for e in ctx.entries]
    assert names == [b"B", b"a", b"sub.txt", b"sub/x"]
    assert names == sorted(names)
    assert bytes(ctx.filename_buffer) == buffer_before


def test_fewer_files_than_counted(make_tree):
    root = make_tree({"a": b"", "sub/b": b""})
    walker = DirectoryWalker()
    ctx = BuildContext(str(root), *count_files(walker, str(root)))
    (root / "sub" / "b").unlink()
    with pytest.raises(ConsistencyError) as e:
        populate_entries(ctx, walker)
    assert "fewer files" in e.value.message


def test_more_files_than_counted(make_tree):
    root = make_tree({"a": b""})
    walker = DirectoryWalker()
    ctx = BuildContext(str(root), *count_files(walker, str(root)))
    (root / "b").write_bytes(b"")
    with pytest.raises(ConsistencyError) as e:
        populate_entries(ctx, walker)
    assert "more files" in e.value.message


def test_renamed_file_overflowing_the_filename_buffer(make_tree):
    root = make_tree({"a": b""})
    walker = DirectoryWalker()
    ctx = BuildContext(str(root), *count_files(walker, str(root)))
    (root / "a").rename(root / "a-much-longer-name")
    with pytest.raises(ConsistencyError):
        populate_entries(ctx, walker)


def test_context_rejects_unaddressable_sizes():
    with pytest.raises(AllocationError):
        BuildContext("root", 1, 0xffffffff)


def test_context_close_releases_buffers(make_tree):
    with populated(make_tree({"a": b""})) as ctx:
        assert ctx.entries
    assert ctx.entries is None
    assert ctx.filename_buffer is None
