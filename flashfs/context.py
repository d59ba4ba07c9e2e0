from flashfs.errors import AllocationError
from flashfs.format import U32_MAX, filename_region_offset


class BuildContext:
    """Owns the entry table and filename buffer for a single build run."""

    def __init__(self, root, file_count, filename_size):
        self.root = root
        self.file_count = file_count
        self.filename_size = filename_size
        self.filename_start = filename_region_offset(file_count)

        if file_count > U32_MAX or self.filename_start + filename_size > U32_MAX:
            raise AllocationError(
                f"Failed to allocate {file_count} file entry descriptors and "
                f"{filename_size} bytes for filenames: the image would not be "
                "addressable with 32-bit offsets.")

        try:
            self.entries = [None] * file_count
            self.filename_buffer = bytearray(filename_size)
        except MemoryError:
            raise AllocationError(
                f"Failed to allocate {filename_size} bytes for filename buffer.") from None

        # State tracked while the entries and the filename buffer are filled in.
        self.files_left = file_count
        self.next_entry = 0
        self.filename_cursor = 0

    def filename_at(self, filename_offset):
        """Returns the NUL-terminated name stored at an image offset."""
        start = filename_offset - self.filename_start
        end = self.filename_buffer.index(b"\0", start)
        return bytes(self.filename_buffer[start:end])

    def close(self):
        self.entries = None
        self.filename_buffer = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False
