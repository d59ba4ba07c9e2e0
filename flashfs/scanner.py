import os
from collections import namedtuple
from flashfs.errors import DirectoryOpenError, PathTooLongError
from flashfs.format import U32_MAX
from flashfs.walker import DIRECTORY

ScanResult = namedtuple("ScanResult", ["file_count", "filename_size"])


def list_directory(walker, directory):
    try:
        return walker.enumerate(directory)
    except OSError as e:
        raise DirectoryOpenError(
            f"Failed to open directory {directory} ({e.strerror or e})") from e


def check_image_path_length(directory, name, length):
    # Every in-image path must stay addressable by a u32 filename offset.
    if length > U32_MAX:
        raise PathTooLongError(f"{directory}{os.sep}{name} pathname is too long.")


def count_files(walker, directory, image_prefix_len=0):
    """Counts the files in a directory tree.

    `image_prefix_len` is the byte length of the directory's path inside the
    image ("" for the root, "sub/" for a subdirectory). Returns the number of
    regular files found and the number of bytes needed to store all of their
    NUL-terminated in-image paths.
    """
    file_count = 0
    filename_size = 0
    pending = [(directory, image_prefix_len)]
    while pending:
        directory, image_prefix_len = pending.pop()
        subdirs = []
        for name, kind in list_directory(walker, directory):
            name_len = len(os.fsencode(name))
            length = image_prefix_len + name_len + 1
            check_image_path_length(directory, name, length)
            if kind == DIRECTORY:
                subdirs.append((f"{directory}{os.sep}{name}", length))
            else:
                file_count += 1
                filename_size += length
        # Reversed so directories are listed in the same order as populate_entries().
        pending.extend(reversed(subdirs))

    return ScanResult(file_count, filename_size)
