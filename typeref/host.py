"""
Host adapter exposing the rewriter as jsdoc-style event handlers.

The host fires:
- parseBegin({sourcefiles}) once per run
- beforeParse({filename, source}) once per file
- jsdocCommentFound({filename, comment, lineno, columnno}) once per comment

Handlers mutate the event in place. parseBegin starts a fresh run and ingests
every listed source file up front, so comment rewriting never depends on the
host's interleaving of beforeParse and jsdocCommentFound.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

from .config_loader import ConfigLoader, RewriterConfig
from .context import RunContext
from .filesystem import normalize_path
from .models import Phase
from .rewriter import CommentRewriter

logger = logging.getLogger(__name__)


@dataclass
class ParseBeginEvent:
    """Fired before any file is parsed."""
    sourcefiles: List[str] = field(default_factory=list)


@dataclass
class FileEvent:
    """Fired before a file is parsed; source may be replaced."""
    filename: str
    source: str


@dataclass
class DocCommentFoundEvent:
    """Fired for each doc comment; comment may be replaced."""
    filename: str
    comment: str
    lineno: int = 0
    columnno: int = 0


class TyperefPlugin:
    """jsdoc plugin shim around a RunContext and a CommentRewriter."""

    def __init__(self, config: RewriterConfig):
        self.config = config
        self.context = RunContext(config)
        self.rewriter = CommentRewriter(self.context)
        self._prepared: Dict[str, Tuple[str, str]] = {}  # path -> (original, rewritten)

    @property
    def handlers(self) -> Dict[str, Callable]:
        return {
            'parseBegin': self.parse_begin,
            'beforeParse': self.before_parse,
            'jsdocCommentFound': self.jsdoc_comment_found,
        }

    def parse_begin(self, event: ParseBeginEvent):
        """Start a new run and ingest every source file."""
        self.context.reset()
        self._prepared.clear()
        for filename in event.sourcefiles:
            path = normalize_path(filename)
            if not self.context.filesystem.is_file(path):
                logger.warning(f"Skipping missing source file: {path}")
                continue
            original = self.context.filesystem.read_text(path)
            self._prepared[path] = (original, self.rewriter.pre_parse(path, original))
        logger.info(f"Ingested {len(self._prepared)} source files")

    def before_parse(self, event: FileEvent):
        prepared = self._prepared.get(normalize_path(event.filename))
        if prepared is not None and prepared[0] == event.source:
            event.source = prepared[1]
        elif self.context.phase is Phase.INGEST:
            event.source = self.rewriter.pre_parse(event.filename, event.source)
        else:
            # Changed by another plugin after ingest; substitute only
            event.source = self.rewriter.rewrite_imports(event.filename, event.source)

    def jsdoc_comment_found(self, event: DocCommentFoundEvent):
        event.comment = self.rewriter.per_comment(event.filename, event.comment)


def create_plugin(
    config: Optional[RewriterConfig] = None,
    project_path: Optional[Union[str, Path]] = None
) -> TyperefPlugin:
    """Build a plugin, loading configuration from project_path (default: cwd) if none given."""
    if config is None:
        config = ConfigLoader.load(project_path or Path.cwd())
    return TyperefPlugin(config)
