"""Writing the buffer to disk with a front matter preamble.

A saved file looks like::

    ---
    user = "alice"
    time = "1m30s"
    ---
    <buffer content, verbatim>
"""

import errno
import logging
import os
import tempfile
from pathlib import Path
from typing import Mapping, Optional, Tuple

from .constants import EditorConstants
from .errors import FrontMatterError

logger = logging.getLogger(__name__)


def resolve_user(home: Optional[str] = None) -> str:
    """Name of the invoking user, taken from the last component of their home directory.

    Falls back to a placeholder when the home directory cannot be found;
    the name is only informational metadata.
    """
    if home is None:
        try:
            home = str(Path.home())
        except (RuntimeError, KeyError) as e:
            logger.warning(f"Could not determine home directory: {e}")
            return EditorConstants.UNKNOWN_USER
    name = Path(home).name
    if not name:
        logger.warning(f"Could not derive a user name from {home!r}")
        return EditorConstants.UNKNOWN_USER
    return name


def _quote(value: str) -> str:
    escaped = value.replace('\\', '\\\\').replace('"', '\\"').replace('\n', '\\n')
    return f'"{escaped}"'


def build_front_matter(fields: Mapping[str, str]) -> str:
    """Build a ``---`` delimited block with one ``key = "value"`` line per field.

    Fields are written in mapping order.

    Raises:
        FrontMatterError: A key is empty or not a bare word.
    """
    delimiter = EditorConstants.FRONT_MATTER_DELIMITER
    lines = [delimiter]
    for key, value in fields.items():
        if not isinstance(key, str) or not key or any(c.isspace() or c in '="' for c in key):
            raise FrontMatterError(f"invalid front matter key {key!r}")
        lines.append(f"{key} = {_quote(str(value))}")
    lines.append(delimiter)
    return "\n".join(lines) + "\n"


def compose_document(content: str, user: str, elapsed: str) -> str:
    """Front matter (user, then time) followed by the buffer content."""
    return build_front_matter({"user": user, "time": elapsed}) + content


def _describe_os_error(e: OSError) -> str:
    if isinstance(e, PermissionError):
        return "permission denied"
    if e.errno == errno.ENOSPC:
        return "no space left on device"
    if isinstance(e, IsADirectoryError):
        return "is a directory"
    if isinstance(e, FileNotFoundError):
        return "directory does not exist"
    return e.strerror or str(e)


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def write_atomic(filename: str, text: str) -> Tuple[bool, Optional[str]]:
    """Replace ``filename`` with ``text`` without ever leaving it half written.

    The text goes to a temporary file in the same directory, which is then
    renamed over the target.

    Returns:
        ``(True, None)`` on success, ``(False, reason)`` otherwise.
    """
    dir_name = os.path.dirname(filename) or '.'
    temp_filename = None
    try:
        with tempfile.NamedTemporaryFile(mode='w', encoding='utf-8', dir=dir_name,
                                         prefix=EditorConstants.ATOMIC_SAVE_PREFIX,
                                         suffix=EditorConstants.ATOMIC_SAVE_SUFFIX,
                                         delete=False) as temp_file:
            temp_filename = temp_file.name
            temp_file.write(text)
            temp_file.flush()
            os.fsync(temp_file.fileno())
        # mkstemp creates 0600 files; saved documents get the usual umask-derived mode
        os.chmod(temp_filename, EditorConstants.DEFAULT_FILE_MODE & ~_current_umask())
        os.replace(temp_filename, filename)
        return True, None
    except OSError as e:
        if temp_filename is not None and os.path.exists(temp_filename):
            try:
                os.remove(temp_filename)
            except OSError:
                pass
        return False, _describe_os_error(e)


def save_document(filename: str, content: str, user: str, elapsed: str) -> Tuple[bool, Optional[str]]:
    """Write ``content`` with its front matter to ``filename``.

    Returns:
        ``(True, None)`` on success, ``(False, reason)`` otherwise.
    """
    try:
        document = compose_document(content, user, elapsed)
    except FrontMatterError as e:
        return False, str(e)
    ok, error = write_atomic(filename, document)
    if ok:
        logger.info(f"Saved {len(document)} characters to {filename}")
    else:
        logger.error(f"Saving to {filename} failed: {error}")
    return ok, error
