"""
Per-file identity cache.

For every absolute path requested, computes once and memoizes the module id
the documentation generator will use for the file and the typedef names it
declares. New entries are registered in the ModuleTypeDefIndex before they are
returned, so the index always covers every cached file.
"""

import os
import logging
from typing import Dict, Iterator, List, Optional

from .comment_scanner import find_module_tag, iter_doc_comments, iter_typedef_names
from .exceptions import SourceRootError
from .filesystem import LocalFileSystem, normalize_path
from .models import FileInfo
from .typedef_index import ModuleTypeDefIndex

logger = logging.getLogger(__name__)


class FileInfoCache:
    """Lazily computed, never invalidated FileInfo per normalized path."""

    def __init__(
        self,
        source_roots: List[str],
        index: ModuleTypeDefIndex,
        filesystem: Optional[LocalFileSystem] = None
    ):
        """
        Initialize the cache.

        Args:
            source_roots: Absolute source roots, in priority order
            index: Typedef index fed with every new entry
            filesystem: Filesystem used to read files not supplied by the caller
        """
        self.source_roots = [normalize_path(root) for root in source_roots]
        self.index = index
        self.filesystem = filesystem or LocalFileSystem()
        self._entries: Dict[str, FileInfo] = {}  # normalized path -> FileInfo

    def get_file_info(self, filename: str, source: Optional[str] = None) -> FileInfo:
        """
        Get the FileInfo for a file, computing it on first request.

        Args:
            filename: Path of the file
            source: Text of the file if already in hand; ignored on a cache hit

        Returns:
            The cached FileInfo

        Raises:
            SourceRootError: The file has an argument-less @module tag and is
                outside every source root
        """
        path = normalize_path(filename)
        cached = self._entries.get(path)
        if cached is not None:
            return cached

        text = source if source is not None else self._read_source(path)
        info = self._scan(path, text)

        self.index.record_typedefs(info.module_id, info.typedefs)
        self._entries[path] = info
        logger.debug(f"Resolved {path} -> module '{info.module_id}' ({len(info.typedefs)} typedefs)")
        return info

    def get(self, filename: str) -> Optional[FileInfo]:
        """Return the cached FileInfo for a file without computing it."""
        return self._entries.get(normalize_path(filename))

    def derive_module_id(self, path: str) -> str:
        """
        Derive an implicit module id from a path relative to its source root.

        <root>/x/y.js becomes 'x/y'. The first configured root containing the
        path wins.
        """
        stem = os.path.splitext(path)[0]
        for root in self.source_roots:
            prefix = root if root.endswith(os.sep) else root + os.sep
            if stem.startswith(prefix):
                return stem[len(prefix):].replace(os.sep, '/')
        raise SourceRootError(path, self.source_roots)

    def _read_source(self, path: str) -> str:
        if not self.filesystem.is_file(path):
            logger.debug(f"{path} does not exist, treating as empty")
            return ''
        try:
            return self.filesystem.read_text(path)
        except UnicodeDecodeError as e:
            logger.warning(f"Cannot decode {path} as {self.filesystem.encoding}, treating as empty: {e}")
            return ''

    def _scan(self, path: str, text: str) -> FileInfo:
        module_tag = None
        typedefs = []
        for comment in iter_doc_comments(text):
            if module_tag is None:
                module_tag = find_module_tag(comment.text)
            typedefs.extend(iter_typedef_names(comment.text))

        if module_tag is None:
            module_id = ''
        elif module_tag:
            module_id = module_tag
        else:
            module_id = self.derive_module_id(path)

        return FileInfo(
            filename=path,
            module_id=module_id,
            typedefs=tuple(typedefs),
            has_module_tag=module_tag is not None
        )

    def values(self) -> Iterator[FileInfo]:
        return iter(list(self._entries.values()))

    def clear(self):
        self._entries.clear()

    def __contains__(self, filename: str) -> bool:
        return normalize_path(filename) in self._entries

    def __len__(self) -> int:
        return len(self._entries)
