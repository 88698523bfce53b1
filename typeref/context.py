"""
Run context owning every cache of one documentation-generation run.

A run has two phases. During INGEST each file's text goes through the
pre-parse pass, populating the caches. The first per-comment rewrite moves the
run to REWRITE, after which no more files may be ingested. reset() returns the
context to a fresh INGEST state for the next run in the same process.
"""

import logging
from typing import Optional

from .config_loader import RewriterConfig
from .exceptions import PhaseOrderError
from .file_info_cache import FileInfoCache
from .filesystem import LocalFileSystem
from .models import Phase, RunStats
from .resolvers import PathResolver
from .typedef_index import ModuleTypeDefIndex

logger = logging.getLogger(__name__)


class RunContext:
    """Caches and phase state for exactly one documentation-generation run."""

    def __init__(self, config: RewriterConfig, filesystem: Optional[LocalFileSystem] = None):
        self.config = config
        self.filesystem = filesystem or LocalFileSystem(config.encoding)
        self.index = ModuleTypeDefIndex()
        self.cache = FileInfoCache(config.source_roots, self.index, self.filesystem)
        self.resolver = PathResolver(self.cache, self.filesystem, config.extensions)
        self.phase = Phase.INGEST
        self.rewritten_references = 0
        self.qualified_identifiers = 0

    def ensure_ingest_phase(self, filename: str = None):
        if self.phase is not Phase.INGEST:
            raise PhaseOrderError(
                "Cannot pre-parse a file after comment rewriting has started",
                file_path=filename,
                phase=self.phase.value
            )

    def begin_rewrite_phase(self):
        if self.phase is Phase.INGEST:
            logger.info(
                f"Ingest complete: {len(self.cache)} files, {len(self.index)} modules"
            )
            self.phase = Phase.REWRITE

    def reset(self):
        """Forget everything learned in the current run."""
        self.cache.clear()
        self.index.clear()
        self.resolver.path_cache.clear()
        self.phase = Phase.INGEST
        self.rewritten_references = 0
        self.qualified_identifiers = 0

    def stats(self) -> RunStats:
        return RunStats(
            files=len(self.cache),
            modules=len(self.index),
            typedefs=sum(len(self.index.lookup(m)) for m in self.index.module_ids()),
            rewritten_references=self.rewritten_references,
            qualified_identifiers=self.qualified_identifiers
        )
