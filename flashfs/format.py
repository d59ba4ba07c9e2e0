import struct

SIGNATURE = b"FFileSys"
UNSET_OFFSET = 0xffffffff
U32_MAX = 0xffffffff

BYTE_ORDERS = {
    "little": "<",
    "big": ">",
}

HEADER_FORMAT = "8sI"
ENTRY_FORMAT = "III"
HEADER_SIZE = struct.calcsize("<" + HEADER_FORMAT)
ENTRY_SIZE = struct.calcsize("<" + ENTRY_FORMAT)


def byte_order_prefix(byte_order):
    try:
        return BYTE_ORDERS[byte_order]
    except KeyError:
        raise ValueError(f"unknown byte order: {byte_order}") from None


def filename_region_offset(file_count):
    """Returns the image offset where the filename buffer starts."""
    return HEADER_SIZE + file_count * ENTRY_SIZE


class Header:
    def __init__(self, file_count):
        self.file_count = file_count

    def pack(self, byte_order="little"):
        return struct.pack(byte_order_prefix(byte_order) + HEADER_FORMAT,
                           SIGNATURE, self.file_count)

    @classmethod
    def unpack(cls, data, byte_order="little"):
        """Decodes an image header; part of the public API for tools that inspect images."""
        signature, file_count = struct.unpack_from(
            byte_order_prefix(byte_order) + HEADER_FORMAT, data)
        if signature != SIGNATURE:
            raise ValueError(f"bad signature: {signature!r}")
        return cls(file_count)


class Entry:
    """Locates one file's name and content within the image.

    `binary_offset` stays None until the writer has placed the file's content;
    it is serialized as UNSET_OFFSET only in the provisional entry table.
    """

    __slots__ = ("filename_offset", "binary_offset", "binary_size")

    def __init__(self, filename_offset, binary_offset=None, binary_size=0):
        self.filename_offset = filename_offset
        self.binary_offset = binary_offset
        self.binary_size = binary_size

    def pack(self, byte_order="little"):
        binary_offset = UNSET_OFFSET if self.binary_offset is None else self.binary_offset
        return struct.pack(byte_order_prefix(byte_order) + ENTRY_FORMAT,
                           self.filename_offset, binary_offset, self.binary_size)

    @classmethod
    def unpack(cls, data, offset=0, byte_order="little"):
        """Decodes one entry at `offset`; part of the public API for tools that
        inspect images. The unset sentinel decodes back to None.
        """
        filename_offset, binary_offset, binary_size = struct.unpack_from(
            byte_order_prefix(byte_order) + ENTRY_FORMAT, data, offset)
        if binary_offset == UNSET_OFFSET:
            binary_offset = None
        return cls(filename_offset, binary_offset, binary_size)

    def __eq__(self, other):
        # Value equality, so decoded entries can be compared with built ones.
        if not isinstance(other, Entry):
            return NotImplemented
        return (self.filename_offset, self.binary_offset, self.binary_size) == \
            (other.filename_offset, other.binary_offset, other.binary_size)

    def __repr__(self):
        return (f"Entry(filename_offset={self.filename_offset}, "
                f"binary_offset={self.binary_offset}, binary_size={self.binary_size})")


def pack_entries(entries, byte_order="little"):
    return b"".join(entry.pack(byte_order) for entry in entries)
