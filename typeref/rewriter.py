"""
Comment rewriter.

Two passes over JSDoc comments:
1. pre_parse: replaces import('path').Symbol references in every doc comment of
   a file with module:<id>~Symbol, ingesting the file into the run's caches.
2. per_comment: qualifies bare typedef names inside {type} slots of a single
   comment with the module id of the comment's own file.

Every file must go through pre_parse before any comment goes through
per_comment; the RunContext enforces the order.
"""

import logging
from typing import List, Optional, Tuple

from .comment_scanner import (
    iter_doc_comments, iter_import_references, iter_type_identifiers,
    iter_type_slots, splice
)
from .context import RunContext
from .exceptions import PhaseOrderError
from .models import ImportReference

logger = logging.getLogger(__name__)

MODULE_PREFIX = 'module:'
SYMBOL_SEPARATOR = '~'


def module_token(module_id: str, symbol: Optional[str] = None) -> str:
    """Build the documentation generator's reference token."""
    token = f"{MODULE_PREFIX}{module_id}"
    if symbol:
        token += f"{SYMBOL_SEPARATOR}{symbol}"
    return token


class CommentRewriter:
    """Rewrites import type references and bare typedef names in doc comments."""

    def __init__(self, context: RunContext):
        self.context = context

    def pre_parse(self, filename: str, text: str) -> str:
        """
        Ingest a file and rewrite the import references in its doc comments.

        Args:
            filename: Path of the file
            text: Full text of the file

        Returns:
            The text with every resolvable import reference substituted
        """
        self.context.ensure_ingest_phase(filename)
        self.context.cache.get_file_info(filename, text)
        return self.rewrite_imports(filename, text)

    def rewrite_imports(self, filename: str, text: str) -> str:
        """Substitute import references in the doc comments of text without ingesting it."""
        replacements: List[Tuple[int, int, str]] = []
        for comment in iter_doc_comments(text):
            for ref in iter_import_references(comment.text):
                substitution = self._substitute(filename, ref)
                if substitution is None:
                    continue
                replacements.append((comment.start + ref.start, comment.start + ref.end, substitution))

        if not replacements:
            return text
        self.context.rewritten_references += len(replacements)
        logger.debug(f"Rewrote {len(replacements)} import references in {filename}")
        return splice(text, replacements)

    def _substitute(self, filename: str, ref: ImportReference) -> Optional[str]:
        module_id = self.context.resolver.resolve(filename, ref.specifier)
        if module_id:
            return ref.marker + module_token(module_id, ref.symbol)
        if ref.symbol:
            # Best effort: the target has no module scope
            return ref.marker + ref.symbol
        return None

    def per_comment(self, filename: str, comment: str) -> str:
        """
        Qualify bare typedef names in the type slots of one comment.

        Args:
            filename: Path of the file the comment belongs to
            comment: Text of the comment

        Returns:
            The comment with known typedef names replaced by module tokens

        Raises:
            PhaseOrderError: The file never went through pre_parse
        """
        info = self.context.cache.get(filename)
        if info is None:
            raise PhaseOrderError(
                f"Comment found in {filename} before the file was pre-parsed",
                file_path=filename,
                phase=self.context.phase.value
            )
        self.context.begin_rewrite_phase()

        if not info.module_id:
            return comment
        names = self.context.index.lookup(info.module_id)
        if not names:
            return comment

        replacements: List[Tuple[int, int, str]] = []
        for slot in iter_type_slots(comment):
            body = comment[slot.start:slot.end]
            for start, end, token in iter_type_identifiers(body):
                if token in names:
                    replacements.append((
                        slot.start + start,
                        slot.start + end,
                        module_token(info.module_id, token)
                    ))

        if not replacements:
            return comment
        self.context.qualified_identifiers += len(replacements)
        return splice(comment, replacements)
