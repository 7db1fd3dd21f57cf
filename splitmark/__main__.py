"""splitmark CLI entry point.

Allows running via `python -m splitmark` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import sys
from typing import Optional

from .errors import UsageError
from .version import get_version_string

USAGE = """\
usage: splitmark --file-path PATH

Split-pane markdown editor: type on the left, see it rendered on the right.

options:
  --file-path PATH  path to markdown file (required)
  -V, --version     show version and exit
  -h, --help        show this help and exit
"""


def parse_args(argv: list[str]) -> Optional[str]:
    """Return the --file-path value, or None if it was not given.

    Raises:
        UsageError: An unknown argument, or --file-path without a value.
    """
    file_path = None
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--file-path":
            if i + 1 >= len(argv):
                raise UsageError("--file-path needs a value")
            file_path = argv[i + 1]
            i += 2
            continue
        if arg.startswith("--file-path="):
            file_path = arg.split("=", 1)[1]
        else:
            raise UsageError(f"unknown argument {arg!r}")
        i += 1
    return file_path


def main(argv: Optional[list[str]] = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    if args and args[0] in ("--version", "-V"):
        print(get_version_string())
        return
    if args and args[0] in ("--help", "-h"):
        print(USAGE, end='')
        return

    try:
        file_path = parse_args(args)
    except UsageError as e:
        print(f"splitmark: {e}", file=sys.stderr)
        print(USAGE, end='', file=sys.stderr)
        sys.exit(1)
    if not file_path:
        print(USAGE, end='', file=sys.stderr)
        sys.exit(1)

    # Lazy import to avoid importing UI deps for --version
    from .editor import Editor
    from .logging_config import setup_logging
    from .settings import load_settings

    setup_logging()
    editor = Editor(file_path, settings=load_settings())
    editor.run()


if __name__ == "__main__":  # pragma: no cover
    main()
