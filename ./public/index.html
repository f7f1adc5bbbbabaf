<html></html>
=== END FILE ===

DECISIONS MADE:
- [Decision]: Used Express
- [Reason]: Minimal and well known
- [Decision]: Static frontend
- [Reason]: No build step
"""


class TestFileSegments:
    def test_extracts_segments_in_order(self):
        result = parse_output(SAMPLE, author="backend-dev", timestamp=TS)
        assert result.ok
        assert result.paths == ["server.js", "public/index.html"]

    def test_content_verbatim_without_trailing_newline(self):
        result = parse_output(SAMPLE, author="r", timestamp=TS)
        assert result.artifacts[0].content == "const x = 1;\n\nconsole.log(x);"

    def test_markers_with_extra_spaces(self):
        text = "===  FILE:  a.txt  ===\nhello\n=== END FILE ===\n"
        result = parse_output(text, author="r", timestamp=TS)
        assert result.paths == ["a.txt"]
        assert result.artifacts[0].content == "hello"

    def test_crlf_line_endings(self):
        text = "=== FILE: a.txt ===\r\nline\r\n=== END FILE ===\r\n"
        result = parse_output(text, author="r", timestamp=TS)
        assert result.artifacts[0].content == "line"

    def test_unterminated_segment_dropped(self):
        text = (
            "=== FILE: good.txt ===\nok\n=== END FILE ===\n"
            "=== FILE: cut.txt ===\npartial content"
        )
        result = parse_output(text, author="r", timestamp=TS)
        assert result.paths == ["good.txt"]
        assert any("cut.txt" in w for w in result.warnings)

    def test_marker_inside_open_segment_restarts(self):
        text = (
            "=== FILE: first.txt ===\nnever closed\n"
            "=== FILE: second.txt ===\nbody\n=== END FILE ===\n"
        )
        result = parse_output(text, author="r", timestamp=TS)
        assert result.paths == ["second.txt"]
        assert result.artifacts[0].content == "body"

    def test_duplicate_path_last_wins(self):
        text = format_file_block("a.txt", "one") + "\n" + format_file_block("a.txt", "two")
        result = parse_output(text, author="r", timestamp=TS)
        assert len(result.artifacts) == 1
        assert result.artifacts[0].content == "two"
        assert any("Duplicate" in w for w in result.warnings)

    def test_escaping_path_rejected(self):
        text = format_file_block("../evil.sh", "rm -rf /") + "\n" + format_file_block("ok.txt", "x")
        result = parse_output(text, author="r", timestamp=TS)
        assert result.paths == ["ok.txt"]
        assert any("Rejected" in w for w in result.warnings)

    def test_empty_file_allowed(self):
        result = parse_output("=== FILE: empty.txt ===\n=== END FILE ===\n", author="r", timestamp=TS)
        assert result.artifacts[0].content == ""


class TestFailures:
    def test_empty_output(self):
        result = parse_output("   \n", author="r", timestamp=TS)
        assert result.failure is ParseFailure.EMPTY_OUTPUT

    def test_zero_segments_with_decisions_still_fails(self):
        text = "I wrote nothing.\nDECISIONS MADE:\n- [Decision]: X\n- [Reason]: Y\n"
        result = parse_output(text, author="r", timestamp=TS)
        assert result.failure is ParseFailure.NO_FILE_SEGMENTS
        assert len(result.decisions) == 1
        with pytest.raises(NoArtifactsError):
            result.require_artifacts("r")

    def test_require_artifacts_success(self):
        result = parse_output(SAMPLE, author="r", timestamp=TS)
        assert len(result.require_artifacts("r")) == 2


class TestDecisions:
    def test_pairs_extracted(self):
        result = parse_output(SAMPLE, author="backend-dev", timestamp=TS)
        assert [(d.what, d.why) for d in result.decisions] == [
            ("Used Express", "Minimal and well known"),
            ("Static frontend", "No build step"),
        ]
        assert all(d.author == "backend-dev" and d.timestamp == TS for d in result.decisions)

    def test_unmatched_what_dropped(self):
        text = (
            format_file_block("a.txt", "x")
            + "\nDECISIONS MADE:\n- [Decision]: orphan\n- [Decision]: kept\n- [Reason]: because\n"
        )
        result = parse_output(text, author="r", timestamp=TS)
        assert [d.what for d in result.decisions] == ["kept"]

    def test_trailing_unmatched_what_dropped(self):
        text = format_file_block("a.txt", "x") + "\nDECISIONS MADE:\n- [Decision]: lonely\n"
        assert parse_output(text, author="r", timestamp=TS).decisions == []

    def test_reason_without_decision_ignored(self):
        text = format_file_block("a.txt", "x") + "\nDECISIONS MADE:\n- [Reason]: stray\n"
        assert parse_output(text, author="r", timestamp=TS).decisions == []

    def test_no_header_no_decisions(self):
        text = format_file_block("a.txt", "x") + "\n- [Decision]: X\n- [Reason]: Y\n"
        assert parse_output(text, author="r", timestamp=TS).decisions == []

    def test_decision_lines_inside_file_are_content(self):
        body = "DECISIONS MADE:\n- [Decision]: in file\n- [Reason]: in file"
        result = parse_output(format_file_block("notes.md", body), author="r", timestamp=TS)
        assert result.decisions == []
        assert result.artifacts[0].content == body


class TestIdempotence:
    def test_same_input_same_result(self):
        first = parse_output(SAMPLE, author="r", timestamp=TS)
        second = parse_output(SAMPLE, author="r", timestamp=TS)
        assert first == second
