"""
Scanner for the JSDoc shapes typeref understands.

Recognizes:
- Doc comment blocks: /** ... */
- Module tags: @module, @module some/name
- Typedef tags: @typedef {type} Name
- Import type references: [!?]import('path[.js]')[.Symbol]
- Type slots: the text between a '{' and the next '}'

Each shape is matched by a forward-only cursor. Anything that does not match
exactly is reported as nothing, so callers leave it untouched.
"""

from typing import Iterator, List, Optional, Tuple

from .models import DocComment, ImportReference, TypeSlot

DOC_COMMENT_OPEN = '/**'
COMMENT_CLOSE = '*/'
IMPORT_OPEN = 'import('
NULLABILITY_MARKERS = '!?'
QUOTES = '\'"'
STRIPPED_SUFFIX = '.js'

# Characters allowed after `@module` as the explicit module name
MODULE_NAME_EXTRA = set('$/.-@')
# Characters allowed inside a quoted import specifier
SPECIFIER_EXTRA = set('$/.-@')
# Identifier tokens preceded by one of these are part of a larger reference
# (module:a/b~Name, #member, @tag, kebab-case) and are never qualified
QUALIFIED_PREFIXES = set(':~/.#@-')


def is_ident_char(ch: str) -> bool:
    return ch.isalnum() or ch == '_' or ch == '$'


def _scan_while(text: str, pos: int, extra=frozenset()) -> int:
    """Return the first index at or after pos that is not an identifier char or in extra."""
    n = len(text)
    while pos < n and (is_ident_char(text[pos]) or text[pos] in extra):
        pos += 1
    return pos


def _skip_blanks(text: str, pos: int) -> int:
    n = len(text)
    while pos < n and text[pos] in ' \t':
        pos += 1
    return pos


def _skip_whitespace(text: str, pos: int) -> int:
    n = len(text)
    while pos < n and text[pos].isspace():
        pos += 1
    return pos


def _scan_dotted_identifier(text: str, pos: int) -> int:
    """Return the end of a dot-separated identifier starting at pos (pos if none)."""
    end = _scan_while(text, pos)
    if end == pos:
        return pos
    while end + 1 < len(text) and text[end] == '.' and is_ident_char(text[end + 1]):
        end = _scan_while(text, end + 1)
    return end


def match_brace(text: str, open_pos: int) -> int:
    """Return the index of the '}' balancing the '{' at open_pos, or -1."""
    depth = 0
    for pos in range(open_pos, len(text)):
        ch = text[pos]
        if ch == '{':
            depth += 1
        elif ch == '}':
            depth -= 1
            if depth == 0:
                return pos
    return -1


def iter_tags(text: str, tag: str) -> Iterator[int]:
    """Yield the offset just past every standalone `@tag` in text."""
    needle = '@' + tag
    pos = 0
    while True:
        idx = text.find(needle, pos)
        if idx == -1:
            return
        pos = idx + len(needle)
        if idx > 0 and is_ident_char(text[idx - 1]):
            continue
        if pos < len(text) and is_ident_char(text[pos]):
            continue
        yield pos


def iter_doc_comments(text: str) -> Iterator[DocComment]:
    """
    Yield every /** ... */ block in text.

    `/**/` is an empty plain comment. An unterminated block ends the scan.
    """
    pos = 0
    while True:
        start = text.find(DOC_COMMENT_OPEN, pos)
        if start == -1:
            return
        if text.startswith('/**/', start):
            pos = start + 4
            continue
        close = text.find(COMMENT_CLOSE, start + len(DOC_COMMENT_OPEN))
        if close == -1:
            return
        end = close + len(COMMENT_CLOSE)
        yield DocComment(start=start, end=end, text=text[start:end])
        pos = end


def find_module_tag(comment: str) -> Optional[str]:
    """
    Find the first @module tag in a comment.

    Returns:
        None when there is no tag, '' for an argument-less tag, else the
        explicit module name verbatim.
    """
    for pos in iter_tags(comment, 'module'):
        pos = _skip_blanks(comment, pos)
        # @module {type} name
        if pos < len(comment) and comment[pos] == '{':
            close = match_brace(comment, pos)
            if close != -1:
                pos = _skip_blanks(comment, close + 1)
        end = _scan_while(comment, pos, MODULE_NAME_EXTRA)
        return comment[pos:end]
    return None


def iter_typedef_names(comment: str) -> Iterator[str]:
    """Yield the declared name of every `@typedef {type} Name` in a comment."""
    for pos in iter_tags(comment, 'typedef'):
        pos = _skip_whitespace(comment, pos)
        if pos >= len(comment) or comment[pos] != '{':
            continue
        close = match_brace(comment, pos)
        if close == -1:
            continue
        pos = _skip_whitespace(comment, close + 1)
        end = _scan_dotted_identifier(comment, pos)
        if end > pos:
            yield comment[pos:end]


def _strip_suffix(specifier: str) -> str:
    # Only relative paths; bare package names like highlight.js stay whole
    if not specifier.startswith('.'):
        return specifier
    if specifier.endswith(STRIPPED_SUFFIX) and len(specifier) > len(STRIPPED_SUFFIX):
        return specifier[:-len(STRIPPED_SUFFIX)]
    return specifier


def _parse_import_at(text: str, idx: int) -> Optional[ImportReference]:
    """Parse an import type reference whose `import(` starts at idx."""
    pos = idx + len(IMPORT_OPEN)
    if pos >= len(text) or text[pos] not in QUOTES:
        return None
    quote = text[pos]
    spec_start = pos + 1
    spec_end = _scan_while(text, spec_start, SPECIFIER_EXTRA)
    if spec_end == spec_start or spec_end >= len(text) or text[spec_end] != quote:
        return None
    end = spec_end + 1
    if end >= len(text) or text[end] != ')':
        return None
    end += 1

    symbol = None
    if end + 1 < len(text) and text[end] == '.' and is_ident_char(text[end + 1]):
        symbol_end = _scan_dotted_identifier(text, end + 1)
        symbol = text[end + 1:symbol_end]
        end = symbol_end

    start = idx
    marker = ''
    if idx > 0 and text[idx - 1] in NULLABILITY_MARKERS:
        start = idx - 1
        marker = text[start]

    return ImportReference(
        start=start,
        end=end,
        marker=marker,
        specifier=_strip_suffix(text[spec_start:spec_end]),
        symbol=symbol,
        text=text[start:end]
    )


def iter_import_references(text: str) -> Iterator[ImportReference]:
    """Yield every well-formed import type reference in text, in order."""
    pos = 0
    while True:
        idx = text.find(IMPORT_OPEN, pos)
        if idx == -1:
            return
        pos = idx + len(IMPORT_OPEN)
        if idx > 0 and is_ident_char(text[idx - 1]):
            continue
        ref = _parse_import_at(text, idx)
        if ref is not None:
            pos = ref.end
            yield ref


def iter_type_slots(comment: str) -> Iterator[TypeSlot]:
    """Yield the span between each '{' and the next '}'."""
    pos = 0
    while True:
        open_pos = comment.find('{', pos)
        if open_pos == -1:
            return
        close = comment.find('}', open_pos + 1)
        if close == -1:
            return
        yield TypeSlot(start=open_pos + 1, end=close)
        pos = close + 1


def iter_type_identifiers(slot: str) -> Iterator[Tuple[int, int, str]]:
    """
    Yield (start, end, token) for each bare identifier in a type expression.

    A token is a dot-separated word sequence. Tokens inside quoted strings,
    tokens preceded by a qualifying prefix (a `...` spread excepted) and
    tokens followed by ':' (object keys, `module:`) are skipped.
    """
    pos = 0
    n = len(slot)
    while pos < n:
        ch = slot[pos]
        if ch in QUOTES or ch == '`':
            close = slot.find(ch, pos + 1)
            pos = n if close == -1 else close + 1
            continue
        if not is_ident_char(ch):
            pos += 1
            continue

        start = pos
        end = _scan_dotted_identifier(slot, pos)
        pos = end
        if slot[start].isdigit():
            continue
        spread = start >= 3 and slot[start - 3:start] == '...'
        if start > 0 and slot[start - 1] in QUALIFIED_PREFIXES and not spread:
            continue
        if end < n and slot[end] == ':':
            continue
        yield start, end, slot[start:end]


def splice(text: str, replacements: List[Tuple[int, int, str]]) -> str:
    """Apply non-overlapping (start, end, new_text) replacements to text."""
    if not replacements:
        return text
    parts = []
    last = 0
    for start, end, new_text in sorted(replacements):
        parts.append(text[last:start])
        parts.append(new_text)
        last = end
    parts.append(text[last:])
    return ''.join(parts)
