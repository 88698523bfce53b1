"""
Read-only filesystem access used by the resolver and the file info cache.
"""

import os
from pathlib import Path
from typing import List


class LocalFileSystem:
    """Reads source files and directory listings from the local disk."""

    def __init__(self, encoding: str = 'utf-8'):
        self.encoding = encoding

    def read_text(self, path: str) -> str:
        """Read a file's full text. Raises FileNotFoundError when missing."""
        return Path(path).read_text(encoding=self.encoding)

    def list_dir(self, path: str) -> List[str]:
        """List entry names of a directory, sorted. A missing directory lists as empty."""
        try:
            return sorted(os.listdir(path))
        except (FileNotFoundError, NotADirectoryError):
            return []

    def is_file(self, path: str) -> bool:
        return os.path.isfile(path)

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)


def normalize_path(path: str) -> str:
    """Absolute path with '.' and '..' segments collapsed."""
    return os.path.normpath(os.path.abspath(path))
