"""Tests for codectrl/models.py: CodeSnippet, warnings and dict conversion."""

import dataclasses

import pytest

from codectrl.models import (
    CaptureWarning,
    CodeSnippet,
    Frame,
    LogRecord,
    record_from_dict,
    record_to_dict,
)


class TestCodeSnippet:
    def test_keys_sorted_ascending(self):
        snippet = CodeSnippet({7: "c", 5: "a", 6: "b"})
        assert list(snippet) == [5, 6, 7]
        assert list(snippet.values()) == ["a", "b", "c"]

    def test_empty_by_default(self):
        assert len(CodeSnippet()) == 0

    def test_equal_to_plain_mapping(self):
        assert CodeSnippet({1: "x"}) == {1: "x"}
        assert CodeSnippet({1: "x"}) == CodeSnippet({1: "x"})
        assert CodeSnippet({1: "x"}) != CodeSnippet({2: "x"})

    def test_read_only(self):
        snippet = CodeSnippet({1: "x"})
        with pytest.raises(TypeError):
            snippet[2] = "y"

    def test_source_mapping_not_aliased(self):
        lines = {1: "x"}
        snippet = CodeSnippet(lines)
        lines[2] = "y"
        assert list(snippet) == [1]


class TestCaptureWarning:
    def test_description(self):
        warning = CaptureWarning.COMPILED_WITHOUT_DEBUG_INFO
        assert "without debug info" in warning.description
        assert warning.description == warning.value


class TestFrame:
    def test_frozen(self):
        frame = Frame("app::run", "/srv/app.py", 3, 1, "run()")
        with pytest.raises(dataclasses.FrozenInstanceError):
            frame.line_number = 4


class TestLogRecordDefaults:
    def test_defaults(self):
        record = LogRecord()
        assert record.stack == []
        assert record.line_number == 0
        assert record.file_name == ""
        assert len(record.code_snippet) == 0
        assert record.warnings == []

    def test_mutable_defaults_not_shared(self):
        first, second = LogRecord(), LogRecord()
        first.warnings.append("w")
        assert second.warnings == []


class TestDictConversion:
    def _record(self) -> LogRecord:
        return LogRecord(
            stack=[
                Frame("app::outer", "/srv/app.py", 7, 5, "inner()"),
                Frame("app::inner", "/srv/app.py", 3, 5, "report(value)"),
            ],
            line_number=3,
            code_snippet=CodeSnippet({2: "    value = compute()", 3: "    report(value)"}),
            message="{'a': 1}",
            message_type="dict",
            file_name="/srv/app.py",
            address="10.0.0.7",
            warnings=["w"],
        )

    def test_to_dict_fields(self):
        data = record_to_dict(self._record())
        assert set(data) == {
            "stack", "line_number", "code_snippet", "message",
            "message_type", "file_name", "address", "warnings",
        }
        assert data["stack"][1]["name"] == "app::inner"
        assert data["code_snippet"] == {2: "    value = compute()", 3: "    report(value)"}

    def test_from_dict_restores_record(self):
        record = self._record()
        assert record_from_dict(record_to_dict(record)) == record

    def test_from_dict_coerces_numbers(self):
        data = record_to_dict(self._record())
        data["line_number"] = 3.0
        data["stack"][0]["line_number"] = 7.0
        data["code_snippet"] = {"2": "    value = compute()", "3": "    report(value)"}

        record = record_from_dict(data)

        assert record.line_number == 3 and isinstance(record.line_number, int)
        assert record.stack[0].line_number == 7
        assert list(record.code_snippet) == [2, 3]

    def test_from_dict_missing_fields(self):
        assert record_from_dict({}) == LogRecord()
