"""
Tests for FileInfoCache: module id derivation, typedef collection, memoization.
"""

import pytest

from typeref import FileInfoCache, ModuleTypeDefIndex, SourceRootError


def make_cache(*roots):
    index = ModuleTypeDefIndex()
    return FileInfoCache([str(r) for r in roots], index), index


def test_explicit_module_id_is_verbatim(write_tree):
    root = write_tree({"src/path/a/model.js": "/** @module call/me/ishmael */\n"})
    cache, _ = make_cache(root / "src")
    info = cache.get_file_info(str(root / "src/path/a/model.js"))
    assert info.module_id == "call/me/ishmael"
    assert info.has_module_tag


def test_implicit_module_id_relative_to_root(write_tree):
    root = write_tree({"src/x/y.js": "/**\n * @module\n */\n"})
    cache, _ = make_cache(root / "src")
    assert cache.get_file_info(str(root / "src/x/y.js")).module_id == "x/y"


def test_first_matching_root_wins(write_tree):
    root = write_tree({"src/lib/x/y.js": "/** @module */"})
    cache, _ = make_cache(root / "src", root / "src/lib")
    assert cache.get_file_info(str(root / "src/lib/x/y.js")).module_id == "lib/x/y"


def test_root_prefix_must_end_at_separator(write_tree):
    root = write_tree({"srcx/y.js": "/** @module */"})
    cache, _ = make_cache(root / "src")
    with pytest.raises(SourceRootError) as exc_info:
        cache.get_file_info(str(root / "srcx/y.js"))
    assert exc_info.value.details['file'].endswith("y.js")


def test_no_module_tag_means_empty_module(write_tree):
    root = write_tree({"src/plain.js": "/** @typedef {object} Loose */\nconst a = 1;\n"})
    cache, index = make_cache(root / "src")
    info = cache.get_file_info(str(root / "src/plain.js"))
    assert info.module_id == ""
    assert not info.has_module_tag
    assert index.lookup("") == {"Loose"}


def test_first_module_tag_in_file_wins(write_tree):
    root = write_tree({"src/m.js": "/** @module one */\n/** @module two */\n"})
    cache, _ = make_cache(root / "src")
    assert cache.get_file_info(str(root / "src/m.js")).module_id == "one"


def test_typedefs_in_scan_order_with_duplicates(write_tree):
    root = write_tree({"src/m.js": (
        "/** @module */\n"
        "/** @typedef {object} B */\n"
        "/** @typedef {string} A\n * @typedef {number} B */\n"
    )})
    cache, index = make_cache(root / "src")
    info = cache.get_file_info(str(root / "src/m.js"))
    assert info.typedefs == ("B", "A", "B")
    assert index.lookup("m") == {"A", "B"}


def test_missing_file_is_empty(tmp_path):
    cache, index = make_cache(tmp_path)
    info = cache.get_file_info(str(tmp_path / "ghost.js"))
    assert info.module_id == ""
    assert info.typedefs == ()
    assert index.lookup("") == frozenset()


def test_directory_is_treated_as_empty(tmp_path):
    (tmp_path / "folder").mkdir()
    cache, _ = make_cache(tmp_path)
    assert cache.get_file_info(str(tmp_path / "folder")).module_id == ""


def test_source_argument_and_first_writer_wins(write_tree):
    root = write_tree({"src/m.js": "/** @module on/disk */"})
    cache, _ = make_cache(root / "src")
    path = str(root / "src/m.js")
    first = cache.get_file_info(path, "/** @module given */")
    second = cache.get_file_info(path, "/** @module ignored */")
    assert first is second
    assert second.module_id == "given"


def test_paths_are_normalized(write_tree):
    root = write_tree({"src/a/m.js": "/** @module m */"})
    cache, _ = make_cache(root / "src")
    info = cache.get_file_info(str(root / "src/a/../a/./m.js"))
    assert info.filename == str(root / "src" / "a" / "m.js")
    assert str(root / "src/a/m.js") in cache
    assert cache.get(str(root / "src/a/m.js")) is info


def test_files_sharing_module_id_merge_typedefs(write_tree):
    root = write_tree({
        "src/one.js": "/** @module shared */\n/** @typedef {object} First */",
        "src/two.js": "/** @module shared */\n/** @typedef {object} Second */",
    })
    cache, index = make_cache(root / "src")
    cache.get_file_info(str(root / "src/one.js"))
    cache.get_file_info(str(root / "src/two.js"))
    assert index.lookup("shared") == {"First", "Second"}


def test_clear_empties_cache(write_tree):
    root = write_tree({"src/m.js": "/** @module m */"})
    cache, _ = make_cache(root / "src")
    cache.get_file_info(str(root / "src/m.js"))
    cache.clear()
    assert len(cache) == 0
    assert cache.get(str(root / "src/m.js")) is None


def test_undecodable_file_is_empty(tmp_path):
    (tmp_path / "icon.png").write_bytes(b"\x89PNG\r\n\x1a\n\xff")
    cache, _ = make_cache(tmp_path)
    info = cache.get_file_info(str(tmp_path / "icon.png"))
    assert info.module_id == ""
    assert info.typedefs == ()
