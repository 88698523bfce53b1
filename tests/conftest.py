"""
Shared fixtures: build small JavaScript source trees under tmp_path.
"""

import logging

import pytest

from typeref import CommentRewriter, RewriterConfig, RunContext


@pytest.fixture
def write_tree(tmp_path):
    """Write {relative path: text} under tmp_path and return tmp_path."""
    def _write(files):
        for rel, text in files.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding='utf-8')
        return tmp_path
    return _write


@pytest.fixture
def src_config(tmp_path) -> RewriterConfig:
    return RewriterConfig(source_roots=[str(tmp_path / 'src')])


@pytest.fixture
def context(src_config) -> RunContext:
    return RunContext(src_config)


@pytest.fixture
def rewriter(context) -> CommentRewriter:
    return CommentRewriter(context)

@pytest.fixture(autouse=True)
def restore_root_logging():
    """The CLI reconfigures the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
