import os
from flashfs import log
from flashfs.errors import AllocationError, ImageIOError
from flashfs.format import ENTRY_SIZE, HEADER_SIZE, U32_MAX, Header, pack_entries


class ImageWriter:
    """Serializes a populated and sorted BuildContext into an image.

    write() emits the header, a provisional entry table, the filename buffer
    and the file contents, filling in each entry's final offset and size.
    patch() then rewrites the entry table in place with those values.
    """

    def __init__(self, ctx, walker, byte_order="little"):
        self.ctx = ctx
        self.walker = walker
        self.byte_order = byte_order
        self.entry_table_pos = None
        self.image_size = None
        # Reused for every file; grows to the largest file seen so far.
        self.read_buffer = bytearray()

    def write_bytes(self, out, data, what):
        try:
            out.write(data)
        except OSError as e:
            raise ImageIOError(f"Failed to write {what} to file system image ({e})") from e

    def tell(self, out):
        try:
            return out.tell()
        except OSError as e:
            raise ImageIOError(f"Failed to determine current file location ({e})") from e

    def write(self, out):
        ctx = self.ctx

        header = Header(ctx.file_count).pack(self.byte_order)
        log.info(f"    Adding header ({len(header)} bytes) to file system image.")
        self.write_bytes(out, header, "header")

        self.entry_table_pos = self.tell(out)
        if self.entry_table_pos != HEADER_SIZE:
            raise ImageIOError("Failed to write header to file system image.")
        log.info(f"    Adding file entry descriptors ({ctx.file_count * ENTRY_SIZE} bytes) "
                 "to file system image.")
        self.write_bytes(out, pack_entries(ctx.entries, self.byte_order), "file entries")

        if self.tell(out) != ctx.filename_start:
            raise ImageIOError("Failed to write file entries to file system image.")
        log.info(f"    Adding filenames ({ctx.filename_size} bytes) to file system image.")
        self.write_bytes(out, ctx.filename_buffer, "filename buffer")

        log.info(f"    Adding {ctx.file_count} entries to file system image.")
        for entry in ctx.entries:
            self.write_file(out, entry)

        self.image_size = self.tell(out)
        log.info(f"    Total Image Size: {self.image_size} bytes")

    def write_file(self, out, entry):
        name = self.ctx.filename_at(entry.filename_offset)
        src_path = f"{self.ctx.root}{os.sep}{os.fsdecode(name)}"

        start = self.tell(out)
        try:
            src = self.walker.open(src_path)
        except OSError as e:
            raise ImageIOError(f"Failed to open {src_path} for read ({e.strerror or e})") from e

        with src:
            try:
                size = self.walker.size(src_path)
            except OSError as e:
                raise ImageIOError(
                    f"Failed to determine file size of {src_path} ({e.strerror or e})") from e
            # U32_MAX itself is the unset sentinel and never a valid offset.
            if start >= U32_MAX or start + size > U32_MAX:
                raise AllocationError(
                    f"{src_path} ({size} bytes) does not fit in a 32-bit addressable image.")
            entry.binary_offset = start
            entry.binary_size = size
            log.file_added(src_path, os.fsdecode(name), size)

            # Nothing to copy for a zero length file.
            if size > 0:
                if size > len(self.read_buffer):
                    self.read_buffer.extend(bytes(size - len(self.read_buffer)))
                with memoryview(self.read_buffer)[:size] as data:
                    self.read_into(src, src_path, data)
                    self.write_bytes(out, data, f"{size} bytes")

    def read_into(self, src, src_path, data):
        filled = 0
        while filled < len(data):
            try:
                n = src.readinto(data[filled:])
            except OSError as e:
                raise ImageIOError(
                    f"Failed to read {len(data)} bytes from {src_path} ({e.strerror or e})") from e
            if not n:
                raise ImageIOError(
                    f"Failed to read {len(data)} bytes from {src_path} "
                    f"(got {filled} bytes; the file may have shrunk).")
            filled += n

    def patch(self, out):
        """Rewrites the entry table with the final offsets and sizes."""
        if self.entry_table_pos is None:
            raise RuntimeError("patch() called before write()")
        try:
            out.seek(self.entry_table_pos)
        except OSError as e:
            raise ImageIOError(f"Failed to rewind to file entry location ({e})") from e
        self.write_bytes(out, pack_entries(self.ctx.entries, self.byte_order), "file entries")
