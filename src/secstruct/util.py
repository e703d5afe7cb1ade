import gzip
import os
from typing import IO


def handle_input_file(path) -> IO[str]:
    """Open a text file for reading, decompressing it on the fly if it ends with .gz."""
    _, ext = os.path.splitext(path)

    if ext == ".gz":
        return gzip.open(path, "rt")
    return open(path)


def input_extension(path) -> str:
    """Return the lower-case extension of a path, ignoring a trailing .gz."""
    root, ext = os.path.splitext(path)
    if ext == ".gz":
        root, ext = os.path.splitext(root)
    return ext.lower()
