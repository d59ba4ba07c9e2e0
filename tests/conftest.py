import struct
import sys
import pytest
from flashfs import log
from flashfs.format import ENTRY_SIZE, HEADER_SIZE, SIGNATURE, BYTE_ORDERS


def pytest_sessionfinish(session, exitstatus):
    # pytest's temp-dir cleanup removes trees recursively; test_very_deep_tree
    # leaves one deeper than the default recursion limit.
    sys.setrecursionlimit(max(sys.getrecursionlimit(), 10000))


@pytest.fixture(autouse=True)
def reset_quiet():
    log.set_quiet(False)
    yield
    log.set_quiet(False)


@pytest.fixture
def make_tree(tmp_path):
    """Creates files under tmp_path/src from a {relative path: bytes} dict."""
    def make(files):
        root = tmp_path / "src"
        root.mkdir(exist_ok=True)
        for rel, data in files.items():
            path = root / rel
            if data is None:
                path.mkdir(parents=True, exist_ok=True)
                continue
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        return root
    return make


class ParsedImage:
    def __init__(self, data, byte_order="little"):
        prefix = BYTE_ORDERS[byte_order]
        self.data = data
        self.signature, self.file_count = struct.unpack_from(prefix + "8sI", data, 0)
        self.entries = [
            struct.unpack_from(prefix + "III", data, HEADER_SIZE + i * ENTRY_SIZE)
            for i in range(self.file_count)
        ]
        self.filename_start = HEADER_SIZE + self.file_count * ENTRY_SIZE

    def name_at(self, offset):
        return self.data[offset:self.data.index(b"\0", offset)]

    @property
    def names(self):
        return [self.name_at(filename_offset) for filename_offset, _, _ in self.entries]

    @property
    def files(self):
        return {
            self.name_at(filename_offset): self.data[offset:offset + size]
            for filename_offset, offset, size in self.entries
        }

    @property
    def filename_end(self):
        if not self.entries:
            return self.filename_start
        return min(offset for _, offset, _ in self.entries)


@pytest.fixture
def parse_image():
    def parse(data, byte_order="little"):
        image = ParsedImage(data, byte_order)
        assert image.signature == SIGNATURE
        return image
    return parse
