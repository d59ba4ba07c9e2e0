import os
from flashfs.errors import ConsistencyError
from flashfs.format import Entry
from flashfs.scanner import check_image_path_length, list_directory
from flashfs.walker import DIRECTORY


def add_file(ctx, image_name):
    # Make sure that we didn't encounter more files during the second pass.
    if ctx.files_left == 0:
        raise ConsistencyError(ctx.root, "more files found than previously counted")
    ctx.files_left -= 1

    length = len(image_name) + 1
    cursor = ctx.filename_cursor
    if cursor + length > ctx.filename_size:
        raise ConsistencyError(ctx.root, "filenames no longer fit in the counted space")

    # The content location is unknown until the writer places the file.
    ctx.entries[ctx.next_entry] = Entry(ctx.filename_start + cursor)
    ctx.filename_buffer[cursor:cursor + length] = image_name + b"\0"
    ctx.filename_cursor += length
    ctx.next_entry += 1


def populate_tree(ctx, walker):
    # Children are pushed in reverse so files are visited depth-first in
    # sorted order, without using one Python frame per directory level.
    pending = [(ctx.root, b"", DIRECTORY)]
    while pending:
        path, image_name, kind = pending.pop()
        if kind != DIRECTORY:
            add_file(ctx, image_name)
            continue

        image_prefix = image_name + b"/" if image_name else b""
        children = []
        for name, kind in list_directory(walker, path):
            child_name = image_prefix + os.fsencode(name)
            check_image_path_length(path, name, len(child_name) + 1)
            children.append((f"{path}{os.sep}{name}", child_name, kind))
        pending.extend(reversed(children))


def populate_entries(ctx, walker):
    """Fills the pre-sized entry table and filename buffer in `ctx`.

    Walks the tree a second time in the same order as count_files() and
    raises ConsistencyError if the tree no longer matches the counts.
    """
    populate_tree(ctx, walker)

    # Make sure that we didn't encounter fewer files during the second pass.
    if ctx.files_left != 0:
        raise ConsistencyError(ctx.root, "fewer files found than previously counted")
