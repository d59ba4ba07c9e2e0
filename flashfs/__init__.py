from flashfs.builder import BuildState, ImageBuilder, build_image
from flashfs.errors import (AllocationError, CommandLineError, ConsistencyError,
    DirectoryOpenError, FlashFsError, ImageIOError, ImageTooLargeError, PathTooLongError)

__version__ = "1.0.0"
