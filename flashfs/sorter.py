def filename_key(filename_buffer, filename_start):
    def key(entry):
        start = entry.filename_offset - filename_start
        return bytes(filename_buffer[start:filename_buffer.index(b"\0", start)])
    return key


def sort_entries(entries, filename_buffer, filename_start):
    """Sorts entries in place by their filenames (case sensitive, byte-wise)."""
    entries.sort(key=filename_key(filename_buffer, filename_start))
