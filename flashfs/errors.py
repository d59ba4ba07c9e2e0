class FlashFsError(Exception):
    def __init__(self, message, hint=None):
        super().__init__(message)
        self.message = message
        self.hint = hint


class CommandLineError(FlashFsError):
    pass


class DirectoryOpenError(FlashFsError):
    pass


class PathTooLongError(FlashFsError):
    pass


class AllocationError(FlashFsError):
    pass


class ConsistencyError(FlashFsError):
    """The source tree changed between the counting and populating passes."""

    def __init__(self, root, detail):
        super().__init__(
            f"File contents of {root} appear to have changed while creating "
            f"file system image ({detail}).",
            hint="Make sure nothing modifies the source directory during the build.")
        self.root = root
        self.detail = detail


class ImageIOError(FlashFsError):
    pass


class ImageTooLargeError(FlashFsError):
    pass
