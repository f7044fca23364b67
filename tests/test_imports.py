# tests/test_imports.py
"""
Tests for `import` resolution and splicing.
"""

import pytest

from ratpeg.errors import GrammarLoadError
from ratpeg.grammar.loader import load_grammar, load_grammar_file, resolve_import, ENV_SEARCH_PATH


@pytest.fixture
def elsewhere(tmp_path, monkeypatch):
    """Run from an empty directory so the CWD never satisfies an import."""
    d = tmp_path / "elsewhere"
    d.mkdir()
    monkeypatch.chdir(d)
    monkeypatch.delenv(ENV_SEARCH_PATH, raising=False)
    return d


def _item_value(g):
    return g.rules["item"][0][0].value


class TestResolution:

    def test_importing_file_directory(self, write, elsewhere):
        main = write("src/main.peg", "thing: item\n\nimport lib.peg\n")
        write("src/lib.peg", "item: 'a'\n")
        g = load_grammar_file(str(main))
        assert g.start == "thing"
        assert list(g.rules) == ["thing", "item"]
        assert g.imports == [str((main.parent / "lib.peg").resolve())]

    def test_cwd_wins_over_importing_directory(self, write, tmp_path, monkeypatch):
        main = write("src/main.peg", "thing: item\n\nimport lib.peg\n")
        write("src/lib.peg", "item: 'a'\n")
        write("cwd/lib.peg", "item: 'b'\n")
        monkeypatch.chdir(tmp_path / "cwd")
        assert _item_value(load_grammar_file(str(main))) == "b"

    def test_search_paths(self, write, tmp_path, elsewhere):
        main = write("src/main.peg", "thing: item\n\nimport lib.peg\n")
        write("inc/lib.peg", "item: 'c'\n")
        g = load_grammar_file(str(main), search_paths=[str(tmp_path / "inc")])
        assert _item_value(g) == "c"

    def test_importing_directory_before_search_paths(self, write, tmp_path, elsewhere):
        main = write("src/main.peg", "thing: item\n\nimport lib.peg\n")
        write("src/lib.peg", "item: 'a'\n")
        write("inc/lib.peg", "item: 'c'\n")
        g = load_grammar_file(str(main), search_paths=[str(tmp_path / "inc")])
        assert _item_value(g) == "a"

    def test_environment_search_path(self, write, tmp_path, elsewhere, monkeypatch):
        main = write("src/main.peg", "thing: item\n\nimport lib.peg\n")
        write("env/lib.peg", "item: 'd'\n")
        monkeypatch.setenv(ENV_SEARCH_PATH, str(tmp_path / "env"))
        assert _item_value(load_grammar_file(str(main))) == "d"

    def test_search_paths_before_environment(self, write, tmp_path, elsewhere, monkeypatch):
        main = write("src/main.peg", "thing: item\n\nimport lib.peg\n")
        write("inc/lib.peg", "item: 'c'\n")
        write("env/lib.peg", "item: 'd'\n")
        monkeypatch.setenv(ENV_SEARCH_PATH, str(tmp_path / "env"))
        g = load_grammar_file(str(main), search_paths=[str(tmp_path / "inc")])
        assert _item_value(g) == "c"

    def test_nested_import_uses_its_own_directory(self, write, elsewhere):
        main = write("src/main.peg", "import lib/outer.peg\nthing: outer\n")
        write("src/lib/outer.peg", "import inner.peg\nouter: inner\n")
        write("src/lib/inner.peg", "inner: 'i'\n")
        g = load_grammar_file(str(main))
        assert set(g.rules) == {"thing", "outer", "inner"}
        assert len(g.imports) == 2

    def test_resolve_import_returns_none(self, tmp_path, elsewhere):
        assert resolve_import("missing.peg", str(tmp_path)) is None

    def test_load_grammar_with_base_dir(self, write, tmp_path, elsewhere):
        write("lib.peg", "item: 'a'\n")
        g = load_grammar("thing: item\n\nimport lib.peg\n", base_dir=str(tmp_path))
        assert g.start == "thing"


class TestFailures:

    def test_missing_import(self, write, elsewhere):
        main = write("src/main.peg", "thing: 'a'\nimport nope.peg\n")
        with pytest.raises(GrammarLoadError, match="Cannot import 'nope.peg'") as ei:
            load_grammar_file(str(main))
        assert ei.value.line == 2

    def test_missing_grammar_file(self, elsewhere):
        with pytest.raises(GrammarLoadError, match="PEG file 'nope.peg' not found."):
            load_grammar_file("nope.peg")


class TestOnce:

    def test_cycle_is_read_once(self, write, elsewhere):
        a = write("a.peg", "import b.peg\nthing: item\n")
        b = write("b.peg", "import a.peg\nitem: 'a'\n")
        g = load_grammar_file(str(a))
        assert list(g.rules) == ["item", "thing"]
        assert g.imports == [str(b.resolve())]

    def test_diamond_is_read_once(self, write, elsewhere):
        main = write("main.peg", "import left.peg\nimport right.peg\nthing: left right\n")
        write("left.peg", "import base.peg\nleft: item\n")
        write("right.peg", "import base.peg\nright: item\n")
        write("base.peg", "item: 'a'\n")
        g = load_grammar_file(str(main))
        assert list(g.rules) == ["item", "left", "right", "thing"]
        assert len(g.imports) == 3


class TestStartRule:

    def test_leading_import_supplies_start_rule(self, write, elsewhere):
        main = write("main.peg", "import other.peg\nthing: x x\n")
        write("other.peg", "x: 'x'\n")
        g = load_grammar_file(str(main))
        assert list(g.rules) == ["x", "thing"]
        assert g.start == "x"

    def test_trailing_import_keeps_start_rule(self, write, elsewhere):
        main = write("main.peg", "date: year\n\nimport lib.peg\n")
        write("lib.peg", "year: <digit> <digit> <digit> <digit>\n")
        assert load_grammar_file(str(main)).start == "date"
