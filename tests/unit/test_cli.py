#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the docalign command line interface."""

import io
import json
import logging

import pytest

from docalign.cli import _format_value, create_parser, main
from docalign.constants import EXIT_FILE_ERROR, EXIT_PARSING_ERROR, EXIT_SUCCESS
from docalign.diff.models import MISSING
from docalign.logging_utils import PACKAGE_LOGGER, remove_handlers


@pytest.fixture(autouse=True)
def restore_package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)
    level = logger.level
    yield
    remove_handlers(logger)
    logger.setLevel(level)


@pytest.fixture
def write(tmp_path):
    def _write(name, content):
        path = tmp_path / name
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return str(path)

    return _write


def _run_json(capsys, argv):
    code = main([*argv, "--format", "json"])
    out = capsys.readouterr().out
    return code, json.loads(out)


@pytest.mark.unit
@pytest.mark.cli
class TestCliModes:
    """Tests for each comparison mode."""

    def test_align(self, capsys, write, invoice_old, invoice_new):
        """Test fuzzy alignment of two text files."""
        old = write("old.txt", "\n".join(invoice_old))
        new = write("new.txt", "\n".join(invoice_new))
        code, data = _run_json(capsys, ["align", old, new])
        assert code == EXIT_SUCCESS
        assert data["stats"] == {"total": 4, "added": 1, "removed": 0, "modified": 1, "unchanged": 2}
        assert data["similarity_percentage"] == 50

    def test_crlf_and_bom(self, capsys, write):
        """Test Windows line endings and a byte order mark do not cause differences."""
        old = write("old.txt", b"\xef\xbb\xbfa\r\nb\r\n")
        new = write("new.txt", "a\nb\n")
        code, data = _run_json(capsys, ["align", old, new])
        assert code == EXIT_SUCCESS
        assert data["similarity_percentage"] == 100

    def test_pages(self, capsys, write):
        """Test form-feed separated pages are compared one by one."""
        old = write("old.txt", "Header\nBody\fPage two")
        new = write("new.txt", "Header\nBody\fPage 2")
        code, data = _run_json(capsys, ["pages", old, new])
        assert code == EXIT_SUCCESS
        assert [p["page_number"] for p in data["page_summaries"]] == [1, 2]
        assert data["page_summaries"][0]["similarity_percentage"] == 100

    def test_lines(self, capsys, write):
        """Test the exact line diff with paired modifications."""
        old = write("old.txt", "a\nb")
        new = write("new.txt", "a\nc")
        code, data = _run_json(capsys, ["lines", old, new, "--pair-modified"])
        assert code == EXIT_SUCCESS
        assert [r["status"] for r in data["records"]] == ["unchanged", "modified"]
        assert data["records"][1]["old_text"] == "b"

    def test_json(self, capsys, write):
        """Test structural JSON comparison."""
        old = write("old.json", '{"name": "x", "tags": ["a"]}')
        new = write("new.json", '{"name": "y", "tags": ["a"], "new": true}')
        code, data = _run_json(capsys, ["json", old, new])
        assert code == EXIT_SUCCESS
        assert [(c["type"], c["position"]) for c in data["changes"]] == [("modified", "name"), ("added", "new")]

    def test_xml(self, capsys, write, sample_xml_old, sample_xml_new):
        """Test structural XML comparison."""
        code, data = _run_json(capsys, ["xml", write("a.xml", sample_xml_old), write("b.xml", sample_xml_new)])
        assert code == EXIT_SUCCESS
        assert data["attribute_changes_count"] == 2
        assert data["added_count"] == 1

    def test_stdin(self, capsys, write, monkeypatch):
        """Test reading the old document from stdin."""
        monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(b"a\nb")))
        code, data = _run_json(capsys, ["lines", "-", write("new.txt", "a\nb")])
        assert code == EXIT_SUCCESS
        assert data["similarity_percentage"] == 100

    def test_options_reach_aligner(self, capsys, write):
        """Test matching options are applied."""
        old = write("old.txt", "HEADER")
        new = write("new.txt", "header")
        _, strict = _run_json(capsys, ["align", old, new])
        _, relaxed = _run_json(capsys, ["align", old, new, "--ignore-case"])
        assert strict["stats"]["unchanged"] == 0
        assert relaxed["stats"]["unchanged"] == 1

    def test_char_level(self, capsys, write):
        """Test --char-level attaches character comparisons to modified units."""
        old = write("old.txt", "Total $10")
        new = write("new.txt", "Total $15")
        _, plain = _run_json(capsys, ["align", old, new])
        _, detailed = _run_json(capsys, ["align", old, new, "--char-level"])
        assert "char_diff" not in plain["changes"][0]
        char_diff = detailed["changes"][0]["char_diff"]
        assert char_diff["has_changes"] is True
        assert char_diff["old"][-1] == {"char": "0", "type": "removed"}


@pytest.mark.unit
@pytest.mark.cli
class TestCliOutput:
    """Tests for output destinations and formats."""

    def test_summary_to_stdout(self, capsys, write):
        """Test the summary tables are printed."""
        code = main(["align", write("a.txt", "x\ny"), write("b.txt", "x\nz")])
        out = capsys.readouterr().out
        assert code == EXIT_SUCCESS
        assert "Similarity" in out
        assert "Changes" in out

    def test_summary_to_file(self, capsys, write, tmp_path):
        """Test the summary can be written to a file."""
        target = tmp_path / "report.txt"
        code = main(["lines", write("a.txt", "x"), write("b.txt", "y"), "-o", str(target)])
        assert code == EXIT_SUCCESS
        assert "Lines" in target.read_text(encoding="utf-8")
        assert "Summary written to" in capsys.readouterr().err

    def test_json_to_file(self, write, tmp_path):
        """Test JSON output written to a file."""
        target = tmp_path / "result.json"
        code = main(["json", write("a.json", "[1]"), write("b.json", "[2]"), "-f", "json", "-o", str(target)])
        assert code == EXIT_SUCCESS
        assert json.loads(target.read_text(encoding="utf-8"))["differences_found"] == 1

    def test_format_value(self):
        """Test display formatting of record values."""
        assert _format_value(MISSING) == ""
        assert _format_value({"a": 1}) == '{"a": 1}'
        assert _format_value("x" * 100) == "x" * 57 + "..."


@pytest.mark.unit
@pytest.mark.cli
class TestCliErrors:
    """Tests for exit codes on failure."""

    def test_missing_file(self, capsys, write):
        """Test a missing input file."""
        code = main(["align", "does-not-exist.txt", write("b.txt", "x")])
        assert code == EXIT_FILE_ERROR
        assert "Could not read input" in capsys.readouterr().err

    def test_invalid_json(self, capsys, write):
        """Test malformed JSON input."""
        code = main(["json", write("a.json", "{"), write("b.json", "{}")])
        assert code == EXIT_PARSING_ERROR

    def test_invalid_xml(self, write):
        """Test malformed XML input."""
        assert main(["xml", write("a.xml", "<a>"), write("b.xml", "<a/>")]) == EXIT_PARSING_ERROR

    def test_invalid_utf8_text(self, write):
        """Test undecodable text input."""
        assert main(["align", write("a.txt", b"\xff\xfe\xfa"), write("b.txt", "x")]) == EXIT_FILE_ERROR

    def test_both_stdin(self, capsys):
        """Test both documents cannot come from stdin."""
        assert main(["align", "-", "-"]) == EXIT_FILE_ERROR

    def test_bad_threshold(self, capsys, write):
        """Test argument validation errors exit with argparse's code."""
        assert main(["align", write("a.txt", "x"), write("b.txt", "x"), "--threshold", "1.5"]) == 2
        assert "between 0 and 1" in capsys.readouterr().err

    def test_help(self, capsys):
        """Test --help exits successfully."""
        assert main(["--help"]) == EXIT_SUCCESS
        assert "docalign" in capsys.readouterr().out

    def test_parser_defaults(self):
        """Test parser defaults."""
        parsed = create_parser().parse_args(["align", "a", "b"])
        assert parsed.threshold == 0.8
        assert parsed.look_ahead == 10
        assert parsed.use_content_bonus is True
        assert parsed.char_level is False
        assert parsed.format == "summary"
