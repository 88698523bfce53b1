"""
End-to-end tests for the batch runner and the command line.
"""

import json

from typeref import RewriteRunner, RewriterConfig, discover_sources
from typeref.cli import main

MODEL = """/** @module */

/**
 * @typedef {object} Address
 * @property {string} street
 */
"""

VIEW = """/** @module ui/view */

/** @typedef {import('./model.js').Address} Address */

/**
 * @typedef {object} Card
 * @property {Address} home
 */

/**
 * @param {Card} card
 * @returns {?import('./model').Address}
 */
export function render(card) {
  return card.home;
}
"""


def make_project(write_tree):
    return write_tree({
        "src/model.js": MODEL,
        "src/view.js": VIEW,
        "src/readme.md": "not a source file",
        "src/node_modules/dep/index.js": "/** @module dep */",
    })


def test_discover_sources_filters_extensions_and_excludes(write_tree):
    root = make_project(write_tree)
    files = discover_sources(RewriterConfig(source_roots=[str(root / "src")]))
    assert files == [str(root / "src" / "model.js"), str(root / "src" / "view.js")]


def test_run_rewrites_imports_and_bare_typedefs(write_tree):
    root = make_project(write_tree)
    result = RewriteRunner(RewriterConfig(source_roots=[str(root / "src")])).run()

    view = result.outputs[str(root / "src" / "view.js")]
    assert "/** @typedef {module:model~Address} Address */" in view
    assert "@property {Address} home" not in view
    assert "@property {module:ui/view~Address} home" in view
    assert "@param {module:ui/view~Card} card" in view
    assert "@returns {?module:model~Address}" in view
    assert "return card.home;" in view

    assert result.outputs[str(root / "src" / "model.js")] == MODEL
    assert result.changed == [str(root / "src" / "view.js")]
    assert result.modules["model"]["typedefs"] == ["Address"]
    assert result.modules["ui/view"]["typedefs"] == ["Address", "Card"]
    assert result.stats.rewritten_references == 2


def test_write_to_out_dir_and_in_place(write_tree, tmp_path):
    root = make_project(write_tree)
    runner = RewriteRunner(RewriterConfig(source_roots=[str(root / "src")]))
    result = runner.run()

    out_dir = tmp_path / "out"
    written = runner.write(result, str(out_dir))
    assert sorted(written) == [str(out_dir / "model.js"), str(out_dir / "view.js")]
    assert (out_dir / "view.js").read_text(encoding="utf-8") == result.outputs[str(root / "src" / "view.js")]

    written = runner.write(result)
    assert written == [str(root / "src" / "view.js")]
    assert "module:model~Address" in (root / "src" / "view.js").read_text(encoding="utf-8")


def test_cli_modules(write_tree, capsys):
    root = make_project(write_tree)
    code = main(["modules", str(root / "src"), "--project", str(root)])
    assert code == 0
    modules = json.loads(capsys.readouterr().out)
    assert modules["ui/view"]["files"] == [str(root / "src" / "view.js")]


def test_cli_rewrite_stdout(write_tree, capsys):
    root = make_project(write_tree)
    assert main(["rewrite", str(root / "src"), "--project", str(root), "--stdout"]) == 0
    out = capsys.readouterr().out
    assert f"==> {root / 'src' / 'view.js'} <==" in out
    assert "{module:model~Address}" in out


def test_cli_reports_source_root_errors(write_tree, capsys):
    root = write_tree({
        "src/view.js": "/** @param {import('../lib/model').X} x */",
        "lib/model.js": "/** @module */",
    })
    code = main(["rewrite", str(root / "src"), "--project", str(root)])
    assert code == 2
    error = json.loads(capsys.readouterr().err)
    assert error["error"]["type"] == "SourceRootError"
