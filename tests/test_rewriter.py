"""Tests for stripping and applying ids to title literals."""

from pathlib import Path

from testid_manager.core.ids import parse_base_id
from testid_manager.core.rewriter import Rewriter, apply_id, strip_id
from testid_manager.source.parser import parse_source
from testid_manager.source.titles import extract_titles

PATTERN = parse_base_id("t-001")


def _rewrite(code: str, op: str, new_id: str | None = None) -> str:
    tree = parse_source(Path("a.spec.js"), code.encode())
    rewriter = Rewriter(PATTERN)
    for title in extract_titles(tree):
        if op == "strip":
            rewriter.strip(title)
        else:
            rewriter.apply(title, new_id)
    return tree.print().decode()


class TestTextHelpers:
    def test_strip(self):
        assert strip_id(PATTERN, "t-004:   does it  ") == "does it"

    def test_strip_without_id_only_trims(self):
        assert strip_id(PATTERN, "  plain ") == "plain"

    def test_apply_replaces_existing(self):
        assert apply_id(PATTERN, "t-004: does it", "t-010") == "t-010: does it"

    def test_apply_to_plain(self):
        assert apply_id(PATTERN, "does it", "t-001") == "t-001: does it"


class TestStrip:
    def test_strip_keeps_quote_style(self):
        code = "it('t-001: single', () => {});\nit(\"t-002: double\");\n"
        assert _rewrite(code, "strip") == "it('single', () => {});\nit(\"double\");\n"

    def test_strip_template_stays_template(self):
        assert _rewrite("it(`t-001: tpl`);\n", "strip") == "it(`tpl`);\n"

    def test_strip_ignores_titles_without_id(self):
        tree = parse_source(Path("a.js"), b"it('plain');\n")
        (title,) = extract_titles(tree)
        assert Rewriter(PATTERN).strip(title) is None
        assert not tree.changed

    def test_strip_reports_change(self):
        tree = parse_source(Path("a.js"), b"\nit('t-003: thing');\n")
        (title,) = extract_titles(tree)
        change = Rewriter(PATTERN).strip(title)
        assert change.old_title == "t-003: thing"
        assert change.new_title == "thing"
        assert change.line == 2


class TestApply:
    def test_apply_prepends(self):
        assert _rewrite("test('adds', () => {});\n", "apply", "t-001") == (
            "test('t-001: adds', () => {});\n"
        )

    def test_apply_keeps_escapes(self):
        code = "it('it\\'s \\u00e9');\n"
        assert _rewrite(code, "apply", "t-001") == "it('t-001: it\\'s \\u00e9');\n"

    def test_apply_to_template(self):
        assert _rewrite("it(`tpl`);\n", "apply", "t-002") == "it(`t-002: tpl`);\n"

    def test_apply_same_id_is_noop(self):
        tree = parse_source(Path("a.js"), b"it('t-001: done');\n")
        (title,) = extract_titles(tree)
        assert Rewriter(PATTERN).apply(title, "t-001") is None
        assert not tree.changed

    def test_apply_records_assigned_id(self):
        tree = parse_source(Path("a.js"), b"it('x');\n")
        (title,) = extract_titles(tree)
        change = Rewriter(PATTERN).apply(title, "t-005")
        assert change.assigned_id == "t-005"
        assert change.new_title == "t-005: x"

    def test_formatting_outside_literal_preserved(self):
        code = "/* keep */\nit(  'spaced'  ,\n  () => { /* body */ }\n);\n"
        assert _rewrite(code, "apply", "t-001") == (
            "/* keep */\nit(  't-001: spaced'  ,\n  () => { /* body */ }\n);\n"
        )

    def test_quote_in_prefix_is_escaped(self):
        pattern = parse_base_id("it's-1")
        tree = parse_source(Path("a.js"), b"it('x');\n")
        (title,) = extract_titles(tree)
        Rewriter(pattern).apply(title, "it's-1")
        assert tree.print() == b"it('it\\'s-1: x');\n"


class TestEscapedTitles:
    def test_trailing_escaped_whitespace_is_trimmed(self):
        tree = parse_source(Path("a.js"), b'it("foo\\t", () => {});\n')
        (title,) = extract_titles(tree)
        change = Rewriter(PATTERN).apply(title, "t-001")
        assert change.new_title == "t-001: foo"
        assert tree.print() == b'it("t-001: foo", () => {});\n'

    def test_leading_escaped_whitespace_is_trimmed_on_strip(self):
        assert _rewrite(r"it('t-001: \tspaced');" + "\n", "strip") == "it('spaced');\n"

    def test_id_written_with_escapes_is_replaced(self):
        code = r"it('t\x2d001: x');" + "\n"
        assert _rewrite(code, "apply", "t-002") == "it('t-002: x');\n"

    def test_id_written_with_escapes_is_stripped(self):
        code = r"it('t\x2d001: x');" + "\n"
        assert _rewrite(code, "strip") == "it('x');\n"

    def test_surrogate_pair_escape_kept(self):
        code = r'it("\uD83D\uDE00 smile");' + "\n"
        tree = parse_source(Path("a.js"), code.encode())
        (title,) = extract_titles(tree)
        change = Rewriter(PATTERN).apply(title, "t-001")
        assert change.new_title == "t-001: \U0001F600 smile"
        assert tree.print().decode() == r'it("t-001: \uD83D\uDE00 smile");' + "\n"

    def test_lone_surrogate_is_reescaped(self):
        code = r'it("\uD83D x\t");' + "\n"
        assert _rewrite(code, "apply", "t-001") == r'it("t-001: \ud83d x");' + "\n"
