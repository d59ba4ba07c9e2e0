import argparse
import sys
import colorama
from flashfs import log
from flashfs.builder import build_image
from flashfs.config import BuildOptions
from flashfs.csource import write_c_source
from flashfs.errors import CommandLineError, FlashFsError
from flashfs.format import BYTE_ORDERS

USAGE_EPILOG = """\
The output image can be appended to the end of an existing FLASH image before
being deployed to the device, or embedded into a firmware build with
--c-source.
"""


def build_parser():
    parser = argparse.ArgumentParser(
        prog=log.PROGRAM_NAME,
        description="Builds a flat read-only file system image from a directory tree.",
        epilog=USAGE_EPILOG)
    parser.add_argument("root", metavar="RootSourceDirectory",
        help="The directory containing the files to be encoded in the image.")
    parser.add_argument("output", metavar="OutputBinaryFilename",
        help="The binary file to contain the resulting file system image.")
    parser.add_argument("--byte-order", choices=list(BYTE_ORDERS),
        help="The byte order of the integer fields (default: $FLASHFS_BYTE_ORDER or little).")
    parser.add_argument("--max-size", metavar="SIZE",
        help="Fail if the image is larger than SIZE bytes (K/M suffixes allowed; "
             "default: $FLASHFS_MAX_SIZE).")
    parser.add_argument("--c-source", metavar="FILE",
        help="Also write the image as a C array to FILE.")
    parser.add_argument("--symbol", metavar="NAME",
        help="The C symbol name used with --c-source (default: flashfs_image).")
    parser.add_argument("-q", "--quiet", action="store_true",
        help="Don't print progress messages.")
    return parser


def run(opts):
    image_size = build_image(opts.root, opts.output,
                             byte_order=opts.byte_order, max_size=opts.max_size)
    if opts.c_source:
        log.generated(opts.c_source)
        try:
            write_c_source(opts.output, opts.c_source, opts.symbol, opts.root)
        except OSError as e:
            raise FlashFsError(f"Failed to write {opts.c_source} ({e})") from e
    log.success(f"wrote {opts.output} ({image_size} bytes)")


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        opts = BuildOptions.from_args(args)
    except CommandLineError as e:
        parser.print_usage(sys.stderr)
        log.error(e.message)
        return 2

    log.set_quiet(opts.quiet)
    try:
        run(opts)
    except FlashFsError as e:
        log.error(e.message, e.hint)
        return 1
    return 0


def entry_point():
    colorama.init()
    sys.exit(main())
