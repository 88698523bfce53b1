"""
Tests for the jsdoc-style host adapter.
"""

import pytest

from typeref import PhaseOrderError, RewriterConfig, create_plugin
from typeref.host import DocCommentFoundEvent, FileEvent, ParseBeginEvent, TyperefPlugin

MODEL = "/** @module call/me/ishmael */\n/** @typedef {object} MyType */\n"
VIEW = "/** @module views */\n/** @param {import('../a/model').MyType} x */\nfunction f(x) {}\n"


@pytest.fixture
def project(write_tree):
    return write_tree({
        "src/path/a/model.js": MODEL,
        "src/path/b/view.js": VIEW,
    })


@pytest.fixture
def plugin(project):
    return TyperefPlugin(RewriterConfig(source_roots=[str(project / "src")]))


def test_handlers_are_registered(plugin):
    assert set(plugin.handlers) == {'parseBegin', 'beforeParse', 'jsdocCommentFound'}


def test_full_event_sequence(project, plugin):
    model = str(project / "src/path/a/model.js")
    view = str(project / "src/path/b/view.js")
    plugin.handlers['parseBegin'](ParseBeginEvent(sourcefiles=[model, view]))

    event = FileEvent(filename=view, source=VIEW)
    plugin.handlers['beforeParse'](event)
    assert "{module:call/me/ishmael~MyType}" in event.source

    comment_event = DocCommentFoundEvent(filename=model, comment="/** @returns {MyType} */", lineno=3)
    plugin.handlers['jsdocCommentFound'](comment_event)
    assert comment_event.comment == "/** @returns {module:call/me/ishmael~MyType} */"


def test_interleaved_host_order_is_safe_after_parse_begin(project, plugin):
    model = str(project / "src/path/a/model.js")
    view = str(project / "src/path/b/view.js")
    plugin.parse_begin(ParseBeginEvent(sourcefiles=[model, view]))

    # Host parses model completely before view's beforeParse fires
    plugin.before_parse(FileEvent(filename=model, source=MODEL))
    plugin.jsdoc_comment_found(DocCommentFoundEvent(filename=model, comment="/** {MyType} */"))
    event = FileEvent(filename=view, source=VIEW)
    plugin.before_parse(event)
    assert "module:call/me/ishmael~MyType" in event.source


def test_source_changed_by_another_plugin_is_still_rewritten(project, plugin):
    model = str(project / "src/path/a/model.js")
    view = str(project / "src/path/b/view.js")
    plugin.parse_begin(ParseBeginEvent(sourcefiles=[model, view]))
    plugin.jsdoc_comment_found(DocCommentFoundEvent(filename=model, comment="/** */"))

    event = FileEvent(filename=view, source="// banner\n" + VIEW)
    plugin.before_parse(event)
    assert event.source.startswith("// banner\n")
    assert "{module:call/me/ishmael~MyType}" in event.source


def test_without_parse_begin_order_is_enforced(project, plugin):
    model = str(project / "src/path/a/model.js")
    view = str(project / "src/path/b/view.js")
    plugin.before_parse(FileEvent(filename=model, source=MODEL))
    plugin.jsdoc_comment_found(DocCommentFoundEvent(filename=model, comment="/** {MyType} */"))
    with pytest.raises(PhaseOrderError):
        plugin.jsdoc_comment_found(DocCommentFoundEvent(filename=str(project / "src/other.js"), comment="/** */"))
    # view was never ingested and ingest is closed; it is only substituted
    event = FileEvent(filename=view, source=VIEW)
    plugin.before_parse(event)
    assert "{module:call/me/ishmael~MyType}" in event.source


def test_parse_begin_resets_previous_run(project, plugin):
    model = str(project / "src/path/a/model.js")
    plugin.parse_begin(ParseBeginEvent(sourcefiles=[model]))
    plugin.jsdoc_comment_found(DocCommentFoundEvent(filename=model, comment="/** */"))

    (project / "src/path/a/model.js").write_text("/** @module renamed */", encoding="utf-8")
    plugin.parse_begin(ParseBeginEvent(sourcefiles=[model]))
    assert plugin.context.cache.get(model).module_id == "renamed"
    assert plugin.context.index.lookup("call/me/ishmael") is None


def test_parse_begin_skips_missing_files(project, plugin):
    plugin.parse_begin(ParseBeginEvent(sourcefiles=[str(project / "src/ghost.js")]))
    assert len(plugin.context.cache) == 0


def test_create_plugin_loads_project_config(project):
    (project / ".typeref.config.json").write_text('{"source_roots": ["src"]}', encoding="utf-8")
    plugin = create_plugin(project_path=project)
    assert plugin.config.source_roots == [str(project / "src")]
