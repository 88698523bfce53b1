"""
Data models for the typeref rewriter.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, Optional, Tuple


class Phase(Enum):
    """Phase of a documentation-generation run."""
    INGEST = "ingest"
    REWRITE = "rewrite"


@dataclass(frozen=True)
class FileInfo:
    """
    Resolved identity of one source file.

    Attributes:
        filename: Normalized absolute path (identity key)
        module_id: Declared or derived module id, '' when the file has no module scope
        typedefs: Typedef names declared in the file's doc comments, in scan order
        has_module_tag: Whether an @module tag was found
    """
    filename: str
    module_id: str = ""
    typedefs: Tuple[str, ...] = ()
    has_module_tag: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'filename': self.filename,
            'module_id': self.module_id,
            'typedefs': list(self.typedefs),
            'has_module_tag': self.has_module_tag
        }


@dataclass(frozen=True)
class ImportReference:
    """An `import('path').Symbol` type reference found in comment text."""
    start: int
    end: int
    marker: str  # '', '!' or '?'
    specifier: str  # trailing .js already stripped
    symbol: Optional[str]
    text: str


@dataclass(frozen=True)
class DocComment:
    """A `/** ... */` block and its offsets in the enclosing text."""
    start: int
    end: int
    text: str


@dataclass(frozen=True)
class TypeSlot:
    """Offsets of the text between a `{` and the next `}`."""
    start: int
    end: int


@dataclass
class RunStats:
    """Counters describing the state of a run's caches."""
    files: int = 0
    modules: int = 0
    typedefs: int = 0
    rewritten_references: int = 0
    qualified_identifiers: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'files': self.files,
            'modules': self.modules,
            'typedefs': self.typedefs,
            'rewritten_references': self.rewritten_references,
            'qualified_identifiers': self.qualified_identifiers
        }
