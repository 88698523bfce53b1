"""
Path resolver for import type references.

Handles:
- Relative specifiers: import('./model'), import('../a/model.js')
- Extension-less specifiers, disambiguated against the directory listing
- Directory specifiers with an index file: import('./lib')
- Bare specifiers: import('lodash'), passed through unchanged
"""

import os
import logging
from typing import Dict, List, Optional

from ..file_info_cache import FileInfoCache
from ..filesystem import LocalFileSystem, normalize_path

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = ['.js', '.mjs', '.cjs', '.jsx', '.ts', '.tsx']
INDEX_BASENAME = 'index'


def is_relative_specifier(specifier: str) -> bool:
    return specifier.startswith('.')


class PathResolver:
    """Resolves import specifiers written in doc comments to module ids."""

    def __init__(
        self,
        cache: FileInfoCache,
        filesystem: Optional[LocalFileSystem] = None,
        extensions: Optional[List[str]] = None
    ):
        """
        Initialize the resolver.

        Args:
            cache: FileInfo cache the resolved paths are handed to
            filesystem: Filesystem used for existence checks and listings
            extensions: Preferred extension order when several files share a stem
        """
        self.cache = cache
        self.filesystem = filesystem or cache.filesystem
        self.extensions = list(extensions or DEFAULT_EXTENSIONS)
        self.path_cache: Dict[str, str] = {}  # "importer::specifier" -> absolute path

    def resolve(self, filename: str, rel_import_path: str) -> str:
        """
        Resolve an import specifier to a module id.

        Args:
            filename: The file containing the import
            rel_import_path: The specifier (e.g., './model', '../a/model', 'lodash')

        Returns:
            The module id; '' when the target declares no module scope or
            does not exist. Bare specifiers are returned unchanged.
        """
        abs_path = self.resolve_path(filename, rel_import_path)
        if abs_path is None:
            return rel_import_path
        return self.cache.get_file_info(abs_path).module_id

    def resolve_path(self, filename: str, rel_import_path: str) -> Optional[str]:
        """
        Resolve a relative specifier to an absolute file path.

        Returns:
            The absolute path (possibly of a file that does not exist), or None
            for a bare specifier
        """
        if not is_relative_specifier(rel_import_path):
            return None

        importer = normalize_path(filename)
        cache_key = f"{importer}::{rel_import_path}"
        if cache_key in self.path_cache:
            return self.path_cache[cache_key]

        candidate = os.path.normpath(os.path.join(os.path.dirname(importer), rel_import_path))
        resolved = self._infer_extension(candidate, importer)

        self.path_cache[cache_key] = resolved
        logger.debug(f"Resolved '{rel_import_path}' from {importer} to {resolved}")
        return resolved

    def _infer_extension(self, candidate: str, importer: str) -> str:
        """Find the file a candidate path refers to, adding an extension if needed."""
        # Try exact path
        if self.filesystem.is_file(candidate):
            return candidate

        # Try a sibling sharing the base name
        directory, base = os.path.split(candidate)
        match = self._match_stem(directory, base, importer)
        if match is not None:
            return os.path.join(directory, match)

        # Try as directory with index file
        if self.filesystem.is_dir(candidate):
            index_file = self._match_stem(candidate, INDEX_BASENAME, importer)
            if index_file is not None:
                return os.path.join(candidate, index_file)

        logger.warning(f"Import target not found: {candidate} (imported from {importer})")
        return candidate

    def _match_stem(self, directory: str, stem: str, importer: str) -> Optional[str]:
        """Pick the source file of directory whose name without extension equals stem."""
        # The importer's own extension first, then the configured order
        preferred = [os.path.splitext(importer)[1]] + self.extensions

        matches = []
        for name in self.filesystem.list_dir(directory):
            entry_stem, ext = os.path.splitext(name)
            if entry_stem != stem or ext not in preferred:
                continue
            if self.filesystem.is_file(os.path.join(directory, name)):
                matches.append(name)
        if not matches:
            return None

        def rank(name):
            return (preferred.index(os.path.splitext(name)[1]), name)

        return min(matches, key=rank)
