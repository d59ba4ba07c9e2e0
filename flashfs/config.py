import os
import re
from flashfs.errors import CommandLineError
from flashfs.format import BYTE_ORDERS

DEFAULT_BYTE_ORDER = "little"
DEFAULT_SYMBOL = "flashfs_image"

SIZE_SUFFIXES = {
    "": 1,
    "K": 1024,
    "M": 1024 * 1024,
    "G": 1024 * 1024 * 1024,
}


def parse_size(text):
    """Parses a byte count such as `4096`, `64K` or `1M`."""
    m = re.fullmatch(r"\s*(0x[0-9a-fA-F]+|[0-9]+)\s*([KMG]?)(i?B)?\s*", text, re.IGNORECASE)
    if not m:
        raise CommandLineError(f"invalid size: '{text}'")
    return int(m.group(1), 0) * SIZE_SUFFIXES[m.group(2).upper()]


class BuildOptions:
    def __init__(self, root, output, byte_order=None, max_size=None,
                 c_source=None, symbol=None, quiet=False):
        if byte_order is None:
            byte_order = os.environ.get("FLASHFS_BYTE_ORDER", DEFAULT_BYTE_ORDER)
        if byte_order not in BYTE_ORDERS:
            raise CommandLineError(
                f"unknown byte order: '{byte_order}' (expected one of: {', '.join(BYTE_ORDERS)})")

        if max_size is None and os.environ.get("FLASHFS_MAX_SIZE"):
            max_size = os.environ["FLASHFS_MAX_SIZE"]
        if isinstance(max_size, str):
            max_size = parse_size(max_size)

        if symbol is None:
            symbol = DEFAULT_SYMBOL
        if not re.fullmatch(r"[a-zA-Z_][a-zA-Z0-9_]*", symbol):
            raise CommandLineError(f"invalid C symbol name: '{symbol}'")

        self.root = str(root)
        self.output = str(output)
        self.byte_order = byte_order
        self.max_size = max_size
        self.c_source = None if c_source is None else str(c_source)
        self.symbol = symbol
        self.quiet = quiet

    @classmethod
    def from_args(cls, args):
        return cls(args.root, args.output,
                   byte_order=args.byte_order,
                   max_size=args.max_size,
                   c_source=args.c_source,
                   symbol=args.symbol,
                   quiet=args.quiet)
