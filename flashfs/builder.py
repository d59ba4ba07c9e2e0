import enum
import os
from pathlib import Path
from flashfs import log
from flashfs.context import BuildContext
from flashfs.errors import ImageIOError, ImageTooLargeError
from flashfs.populator import populate_entries
from flashfs.scanner import count_files
from flashfs.sorter import sort_entries
from flashfs.walker import DirectoryWalker
from flashfs.writer import ImageWriter


class BuildState(enum.Enum):
    INIT = "init"
    SCANNED = "scanned"
    ALLOCATED = "allocated"
    POPULATED = "populated"
    SORTED = "sorted"
    WRITTEN = "written"
    PATCHED = "patched"
    DONE = "done"
    FAILED = "failed"


def temp_path_for(output):
    output = Path(output)
    return output.parent / ("." + output.name + ".tmp")


class ImageBuilder:
    """Builds a file system image from a directory tree.

    Each phase moves the builder to the next BuildState; phases must run in
    order and a failure in any of them is final. The image is written to a
    temporary file next to `output` and only moved into place once complete.
    """

    def __init__(self, root, output, walker=None, byte_order="little", max_size=None):
        self.root = str(root)
        self.output = str(output)
        self.walker = walker or DirectoryWalker()
        self.byte_order = byte_order
        self.max_size = max_size
        self.state = BuildState.INIT
        self.scan_result = None
        self.ctx = None
        self.writer = None
        self.temp_path = temp_path_for(self.output)
        self.out = None

    def require(self, expected, next_state):
        if self.state != expected:
            raise RuntimeError(
                f"cannot enter {next_state.value} state from {self.state.value} "
                f"(expected {expected.value})")

    def scan(self):
        self.require(BuildState.INIT, BuildState.SCANNED)
        log.progress(f"Enumerating the contents of the {self.root} directory to be placed "
                     "in the file system image...")
        self.scan_result = count_files(self.walker, self.root, 0)
        self.state = BuildState.SCANNED

    def allocate(self):
        self.require(BuildState.SCANNED, BuildState.ALLOCATED)
        self.ctx = BuildContext(self.root, *self.scan_result)
        self.state = BuildState.ALLOCATED

    def populate(self):
        self.require(BuildState.ALLOCATED, BuildState.POPULATED)
        populate_entries(self.ctx, self.walker)
        self.state = BuildState.POPULATED

    def sort(self):
        self.require(BuildState.POPULATED, BuildState.SORTED)
        sort_entries(self.ctx.entries, self.ctx.filename_buffer, self.ctx.filename_start)
        self.state = BuildState.SORTED

    def write(self):
        self.require(BuildState.SORTED, BuildState.WRITTEN)
        log.progress(f"Creating file system image in {self.output}...")
        try:
            self.out = open(self.temp_path, "wb")
        except OSError as e:
            raise ImageIOError(
                f"Failed to open {self.temp_path} for writing of the file system image "
                f"({e.strerror or e})") from e
        self.writer = ImageWriter(self.ctx, self.walker, self.byte_order)
        self.writer.write(self.out)
        self.state = BuildState.WRITTEN

    def patch(self):
        self.require(BuildState.WRITTEN, BuildState.PATCHED)
        self.writer.patch(self.out)
        self.close_output()
        self.state = BuildState.PATCHED

    def finish(self):
        self.require(BuildState.PATCHED, BuildState.DONE)
        image_size = self.writer.image_size
        if self.max_size is not None and image_size > self.max_size:
            raise ImageTooLargeError(
                f"{self.output} is too big ({image_size} bytes, "
                f"the limit is {self.max_size} bytes)")
        try:
            os.replace(self.temp_path, self.output)
        except OSError as e:
            raise ImageIOError(f"Failed to move the image into {self.output} ({e})") from e
        self.state = BuildState.DONE

    def close_output(self):
        if self.out is not None:
            try:
                self.out.close()
            except OSError as e:
                raise ImageIOError(f"Failed to write {self.temp_path} ({e})") from e
            finally:
                self.out = None

    def cleanup(self):
        try:
            self.close_output()
        finally:
            if self.ctx is not None:
                self.ctx.close()
                self.ctx = None
            if self.state != BuildState.DONE:
                try:
                    os.remove(self.temp_path)
                except FileNotFoundError:
                    pass
                except OSError as e:
                    log.warn(f"failed to remove {self.temp_path} ({e.strerror or e})")

    def run(self):
        """Runs every phase in order. Returns the size of the image."""
        try:
            self.scan()
            self.allocate()
            self.populate()
            self.sort()
            self.write()
            self.patch()
            self.finish()
            return self.writer.image_size
        except BaseException:
            self.state = BuildState.FAILED
            raise
        finally:
            self.cleanup()


def build_image(root, output, walker=None, byte_order="little", max_size=None):
    return ImageBuilder(root, output, walker=walker, byte_order=byte_order,
                        max_size=max_size).run()
