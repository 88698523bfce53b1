"""
Batch runner: a standalone host driving the two-phase rewrite over source roots.

Phase 1 pre-parses every discovered file (ingest + import substitution).
Phase 2 rewrites every doc comment of every file with the per-comment pass.
"""

import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .comment_scanner import iter_doc_comments, splice
from .config_loader import RewriterConfig
from .context import RunContext
from .filesystem import normalize_path
from .models import RunStats
from .rewriter import CommentRewriter

logger = logging.getLogger(__name__)


def discover_sources(config: RewriterConfig) -> List[str]:
    """
    Collect source files under every source root.

    Args:
        config: Run configuration (roots, extensions, excluded directory names)

    Returns:
        Sorted, de-duplicated absolute file paths
    """
    extensions = set(config.extensions)
    excluded = set(config.exclude)
    found = set()

    for root in config.source_roots:
        if os.path.isfile(root):
            found.add(normalize_path(root))
            continue
        if not os.path.isdir(root):
            logger.warning(f"Source root does not exist: {root}")
            continue
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if d not in excluded)
            for name in filenames:
                if os.path.splitext(name)[1] in extensions:
                    found.add(normalize_path(os.path.join(dirpath, name)))

    logger.info(f"Discovered {len(found)} source files")
    return sorted(found)


@dataclass
class RunResult:
    """Outcome of a batch run."""
    originals: Dict[str, str] = field(default_factory=dict)
    outputs: Dict[str, str] = field(default_factory=dict)
    modules: Dict[str, Dict[str, List[str]]] = field(default_factory=dict)
    stats: RunStats = field(default_factory=RunStats)

    @property
    def changed(self) -> List[str]:
        return [path for path, text in self.outputs.items() if text != self.originals.get(path)]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization (excluding file texts)."""
        return {
            'changed': self.changed,
            'modules': self.modules,
            'stats': self.stats.to_dict()
        }


class RewriteRunner:
    """Runs the two-phase rewrite over a set of files."""

    def __init__(self, config: RewriterConfig):
        self.config = config

    def run(self, files: Optional[List[str]] = None) -> RunResult:
        """
        Rewrite a set of files.

        Args:
            files: Files to process (default: everything under the source roots)

        Returns:
            RunResult with the rewritten text of every file
        """
        if files is None:
            files = discover_sources(self.config)
        files = [normalize_path(f) for f in files]

        context = RunContext(self.config)
        rewriter = CommentRewriter(context)
        result = RunResult()

        # Phase 1: ingest every file before any comment is rewritten
        staged: Dict[str, str] = {}
        for path in files:
            text = context.filesystem.read_text(path)
            result.originals[path] = text
            staged[path] = rewriter.pre_parse(path, text)

        # Phase 2: per-comment qualification
        for path in files:
            text = staged[path]
            replacements = []
            for comment in iter_doc_comments(text):
                rewritten = rewriter.per_comment(path, comment.text)
                if rewritten != comment.text:
                    replacements.append((comment.start, comment.end, rewritten))
            result.outputs[path] = splice(text, replacements)

        result.modules = self._module_map(context)
        result.stats = context.stats()
        logger.info(f"Rewrite complete: {result.stats.to_dict()}")
        return result

    def _module_map(self, context: RunContext) -> Dict[str, Dict[str, List[str]]]:
        """module id -> files resolving to it and its typedef names."""
        typedefs = context.index.to_dict()
        modules: Dict[str, Dict[str, List[str]]] = {}
        for info in context.cache.values():
            if not info.module_id:
                continue
            entry = modules.setdefault(info.module_id, {
                'files': [],
                'typedefs': typedefs.get(info.module_id, [])
            })
            entry['files'].append(info.filename)
        for entry in modules.values():
            entry['files'].sort()
        return dict(sorted(modules.items()))

    def relative_output_path(self, path: str) -> str:
        """Path of a file relative to the source root containing it."""
        for root in self.config.source_roots:
            prefix = root if root.endswith(os.sep) else root + os.sep
            if path.startswith(prefix):
                return path[len(prefix):]
        return os.path.basename(path)

    def write(self, result: RunResult, out_dir: Optional[str] = None) -> List[str]:
        """
        Write rewritten sources.

        Args:
            result: Result of run()
            out_dir: Directory mirroring the source roots; None rewrites changed files in place

        Returns:
            Paths written
        """
        written = []
        if out_dir is None:
            targets = {path: path for path in result.changed}
        else:
            targets = {
                path: os.path.join(out_dir, self.relative_output_path(path))
                for path in result.outputs
            }

        for path, target in sorted(targets.items()):
            target_path = Path(target)
            target_path.parent.mkdir(parents=True, exist_ok=True)
            target_path.write_text(result.outputs[path], encoding=self.config.encoding)
            written.append(str(target_path))

        logger.info(f"Wrote {len(written)} files")
        return written
