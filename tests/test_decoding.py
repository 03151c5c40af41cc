"""Tests for the structured XML and JSON log decoders."""

import json
from pathlib import Path

import pytest

from plogconverter.decoding import (
    DecodeErrorKind,
    LogDecodeError,
    LogFormat,
    PlogTable,
    decode,
    detect_format,
)
from plogconverter.decoding.json_log import decode_json_text, record_to_warning, warning_to_record
from plogconverter.decoding.xml_log import decode_xml_text, parse_cwe
from plogconverter.diagnostics import AnalyzerType, DiagnosticRecord, SourcePosition


class TestFormatDetection:
    def test_by_extension(self):
        assert detect_format("a.plog") is LogFormat.XML
        assert detect_format("A.PLOG") is LogFormat.XML
        assert detect_format("report.json") is LogFormat.JSON
        assert detect_format("build.log") is LogFormat.RAW
        assert detect_format("noext") is LogFormat.RAW


class TestXmlDecoding:
    def test_records(self, plog_file: Path):
        result = decode(plog_file)
        assert result.ok
        assert result.format is LogFormat.XML
        assert len(result.records) == 3

        first = result.records[0]
        assert first.error_code == "V501"
        assert first.line_number == 10
        assert first.level == 1
        assert first.analyzer_type is AnalyzerType.GENERAL
        assert first.cwe_id == 570
        assert first.project_names == ("demo",)
        assert first.positions == (
            SourcePosition("|?|/src/main.cpp", 10),
            SourcePosition("|?|/src/main.cpp", 12),
        )

    def test_analyzer_by_name(self, plog_file: Path):
        second = decode(plog_file).records[1]
        assert second.analyzer_type is AnalyzerType.GENERAL
        assert second.message == "Expression 'x > 0' is always true."
        assert second.project_names == ("demo", "tools")
        assert second.analyzed_source_files == ("util.cpp", "main.cpp")

    def test_false_alarm(self, plog_file: Path):
        third = decode(plog_file).records[2]
        assert third.false_alarm is True
        assert third.analyzer_type is AnalyzerType.VIVA64

    def test_metadata(self, plog_file: Path):
        metadata = decode(plog_file).metadata
        assert metadata.solution_path == "|?|/demo.sln"
        assert metadata.solution_version == "17.0"
        assert metadata.plog_version == "8"

    def test_malformed_document_is_recoverable(self):
        result = decode_xml_text("<NewDataSet><Messages>")
        assert not result.ok
        assert result.error_kind is DecodeErrorKind.MALFORMED
        assert result.records == []

    def test_bad_column_raises(self):
        text = (
            "<NewDataSet><Messages><ErrorCode>V501</ErrorCode>"
            "<Line>ten</Line></Messages></NewDataSet>"
        )
        with pytest.raises(LogDecodeError, match="Line"):
            decode_xml_text(text)

    def test_unknown_columns_ignored(self):
        text = (
            "<NewDataSet><Messages><ErrorCode>V501</ErrorCode>"
            "<Whatever>1</Whatever></Messages></NewDataSet>"
        )
        (record,) = decode_xml_text(text).records
        assert record.error_code == "V501"
        assert record.file_name == ""

    def test_legacy_misra_column(self):
        text = (
            "<NewDataSet><Messages><ErrorCode>V2501</ErrorCode>"
            "<MISRA>MISRA-C-3.1</MISRA></Messages></NewDataSet>"
        )
        (record,) = decode_xml_text(text).records
        assert record.sast_id == "MISRA-C-3.1"

    def test_parse_cwe(self):
        assert parse_cwe("CWE-570") == 570
        assert parse_cwe("") is None
        assert parse_cwe("570") is None


class TestPlogTable:
    def test_round_trip_through_xml(self):
        record = DiagnosticRecord(
            error_code="V501",
            message="a < b",
            file_name="|?|/src/main.cpp",
            line_number=3,
            analyzer_type=AnalyzerType.MISRA,
            level=2,
            cwe_id=570,
            sast_id="MISRA-C-1.1",
            positions=(SourcePosition("|?|/src/x.cpp", 4),),
            project_names=("a", "b"),
        )
        table = PlogTable()
        table.append(record)
        (decoded,) = decode_xml_text(table.to_xml(pretty=True)).records
        assert decoded == record
        assert decoded.analyzer_type is AnalyzerType.MISRA
        assert decoded.sast_id == "MISRA-C-1.1"
        assert decoded.positions == record.positions
        assert decoded.project_names == ("a", "b")

    def test_pretty_output_declares_utf8(self):
        assert PlogTable().to_xml(pretty=True).startswith('<?xml version="1.0" encoding="utf-8"?>')


class TestJsonDecoding:
    def test_records(self, json_file: Path):
        result = decode(json_file)
        assert result.ok
        assert result.format is LogFormat.JSON
        assert [r.error_code for r in result.records] == ["V501", "V1004"]
        assert result.records[1].analyzer_type is AnalyzerType.GENERAL
        assert result.records[1].cwe_id == 476
        assert result.records[1].project_names == ("demo",)

    def test_malformed_json(self):
        result = decode_json_text("{not json")
        assert result.error_kind is DecodeErrorKind.MALFORMED

    def test_missing_warnings_array(self):
        result = decode_json_text(json.dumps({"Version": 2}))
        assert result.error_kind is DecodeErrorKind.MALFORMED

    def test_bad_field_raises(self):
        text = json.dumps({"Warnings": [{"Code": "V501", "Line": [1]}]})
        with pytest.raises(LogDecodeError, match="Line"):
            decode_json_text(text)

    def test_warning_mapping_is_symmetric(self):
        record = DiagnosticRecord(
            error_code="V1004",
            message="m",
            file_name="f.cpp",
            line_number=5,
            analyzer_type=AnalyzerType.OWASP,
            level=3,
            false_alarm=True,
        )
        back = warning_to_record(record_to_warning(record))
        assert back == record
        assert back.analyzer_type is AnalyzerType.OWASP
        assert back.false_alarm is True
        assert back.cwe_id is None
