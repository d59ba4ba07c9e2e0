import sys
from colorama import Fore, Style

PROGRAM_NAME = "mkflashfs"

quiet = False


def set_quiet(value):
    global quiet
    quiet = value


def progress(message):
    if not quiet:
        print(f"{Style.BRIGHT}{Fore.GREEN}==> {Style.RESET_ALL}{message}")


def info(message):
    if not quiet:
        print(message)


def file_added(src, name, size):
    if not quiet:
        print(f"  {Style.BRIGHT}{Fore.MAGENTA}ADD{Style.RESET_ALL}\t{src} -> {name} ({size} bytes)")


def warn(message):
    if not quiet:
        print(f"{Fore.YELLOW}{Style.BRIGHT}{PROGRAM_NAME}: warning: {message}{Style.RESET_ALL}",
              file=sys.stderr)


def error(message, hint=None):
    print(f"{Fore.RED}{Style.BRIGHT}{PROGRAM_NAME}: error: {message}{Style.RESET_ALL}",
          file=sys.stderr)
    if hint:
        print(f"{Fore.RED}{PROGRAM_NAME}: hint: {hint}{Style.RESET_ALL}", file=sys.stderr)


def success(message):
    if not quiet:
        print(f"{Fore.GREEN}{Style.BRIGHT}{PROGRAM_NAME}: {message}{Style.RESET_ALL}")


def generated(path):
    if not quiet:
        print(f"  {Style.BRIGHT}{Fore.MAGENTA}GEN{Style.RESET_ALL}\t{path}")
