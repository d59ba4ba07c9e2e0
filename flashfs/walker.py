import os
from flashfs import log

FILE = "file"
DIRECTORY = "directory"


class DirectoryWalker:
    """Lists directories and opens files on the host file system.

    Children are returned sorted by their encoded names so that repeated
    enumerations of an unchanged directory always yield the same order.
    Symlinks to files are followed; symlinks to directories are not, so a
    link cycle cannot make the walk descend forever. Those links and anything
    else that is neither a regular file nor a directory (sockets, FIFOs,
    dangling symlinks) are skipped with a warning.
    """

    def __init__(self):
        self.skipped = set()

    def enumerate(self, path):
        children = []
        with os.scandir(path) as it:
            for dirent in it:
                if dirent.name in (".", ".."):
                    continue
                if dirent.is_dir(follow_symlinks=False):
                    children.append((dirent.name, DIRECTORY))
                elif dirent.is_file():
                    children.append((dirent.name, FILE))
                elif dirent.path not in self.skipped:
                    self.skipped.add(dirent.path)
                    log.warn(f"skipping {dirent.path}: not a regular file or directory")
        children.sort(key=lambda child: os.fsencode(child[0]))
        return children

    def open(self, path):
        return open(path, "rb")

    def size(self, path):
        return os.stat(path).st_size
