"""Tests for the report renderers."""

import json
from pathlib import Path

import pytest

from plogconverter.decoding import LogMetadata
from plogconverter.decoding.xml_log import decode_xml_text
from plogconverter.diagnostics import AnalyzerType, DiagnosticRecord, ErrorCodeMapping, SourcePosition
from plogconverter.paths import PathMode
from plogconverter.render import RenderOptions, RenderTarget
from plogconverter.render import csv_report, html, json_report, plog, sarif, text

ROOT = "/home/me/demo"


def _make_records():
    return [
        DiagnosticRecord(
            error_code="V501",
            message="Identical sub-expressions 'a < b'.",
            file_name="|?|/src/main.cpp",
            line_number=10,
            analyzer_type=AnalyzerType.GENERAL,
            level=1,
            cwe_id=570,
            positions=(SourcePosition("|?|/src/main.cpp", 12),),
            project_names=("demo",),
        ),
        DiagnosticRecord(
            error_code="V547",
            message="Expression is always true.",
            file_name="|?|/src/util.cpp",
            line_number=42,
            analyzer_type=AnalyzerType.GENERAL,
            level=2,
        ),
        DiagnosticRecord(
            error_code="V2501",
            message="Octal constants should not be used.",
            file_name="|?|/src/util.cpp",
            line_number=7,
            analyzer_type=AnalyzerType.MISRA,
            level=3,
            sast_id="MISRA-C-7.1",
        ),
    ]


def _make_options(tmp_path: Path, **overrides) -> RenderOptions:
    fields = dict(
        output_dir=tmp_path,
        log_paths=(Path("project.plog"),),
        src_root=ROOT,
    )
    fields.update(overrides)
    return RenderOptions(**fields)


class TestOutputNaming:
    def test_single_log(self, tmp_path: Path):
        options = _make_options(tmp_path)
        assert options.output_path(RenderTarget.TXT) == tmp_path / "project.plog.txt"
        assert options.output_path(RenderTarget.PLOG) == tmp_path / "project_filtered.plog"

    def test_template_wins(self, tmp_path: Path):
        options = _make_options(tmp_path, name_template="report")
        assert options.output_path(RenderTarget.HTML) == tmp_path / "report.html"

    def test_merged_report(self, tmp_path: Path):
        options = _make_options(tmp_path, log_paths=(Path("a.plog"), Path("b.json")))
        assert options.output_path(RenderTarget.CSV) == tmp_path / "MergedReport.csv"

    def test_parse_target(self):
        assert RenderTarget.parse("fullhtml") is RenderTarget.FULL_HTML
        with pytest.raises(ValueError, match="Cannot parse render type with a name Pdf"):
            RenderTarget.parse("Pdf")


class TestTxt:
    def test_grouped_lines(self, tmp_path: Path):
        output = text.render_txt(_make_records(), _make_options(tmp_path))
        lines = output.splitlines()
        assert lines[0] == "===============General Analysis==============="
        assert lines[1] == f"{ROOT}/src/main.cpp (10): error V501: Identical sub-expressions 'a < b'."
        assert "===============MISRA===============" in lines

    def test_security_prefix(self, tmp_path: Path):
        options = _make_options(
            tmp_path, mappings=frozenset({ErrorCodeMapping.CWE, ErrorCodeMapping.MISRA})
        )
        output = text.render_txt(_make_records(), options)
        assert "error V501: [CWE-570] Identical" in output
        assert "error V2501: [MISRA-C-7.1] Octal" in output

    def test_levelless_record_prints_message_only(self, tmp_path: Path):
        notice = DiagnosticRecord(error_code="Renew", message="License expires soon.", file_name="")
        assert "License expires soon.\n" in text.render_txt([notice], _make_options(tmp_path))

    def test_empty(self, tmp_path: Path):
        assert text.render_txt([], _make_options(tmp_path)) == "No Messages Generated\n"


class TestTasks:
    def test_lines(self, tmp_path: Path):
        lines = text.render_tasks(_make_records(), _make_options(tmp_path)).splitlines()
        assert lines[0] == f"{ROOT}/src/main.cpp\t10\terr\tV501 Identical sub-expressions 'a < b'."
        assert lines[1].split("\t")[2] == "warn"
        assert lines[2].split("\t")[2] == "note"

    def test_empty(self, tmp_path: Path):
        assert text.render_tasks([], _make_options(tmp_path)) == "-\t1\terr\tNo Messages Generated\n"


class TestTotals:
    def test_counts(self, tmp_path: Path):
        records = _make_records() + [
            DiagnosticRecord(
                error_code="V560",
                message="false alarm",
                file_name="x.cpp",
                analyzer_type=AnalyzerType.GENERAL,
                level=1,
                false_alarm=True,
            )
        ]
        lines = text.render_totals(records, _make_options(tmp_path)).splitlines()
        assert lines[0] == "PVS - Studio analysis results"
        assert "General Analysis L1:1 + L2:1 + L3:0 = 2" in lines
        assert "MISRA L1:0 + L2:0 + L3:1 = 1" in lines
        assert lines[-1] == "Total L1:1 + L2:1 + L3:1 = 3"
        assert len(lines) == 9


class TestTeamCity:
    def test_escape(self):
        assert text.escape_teamcity("a|b'c[d]\r\n") == "a||b|'c|[d|]|r|n"

    def test_inspection_type_once_per_code(self, tmp_path: Path):
        records = _make_records() + [
            DiagnosticRecord(
                error_code="V501",
                message="again",
                file_name="|?|/src/other.cpp",
                line_number=1,
                analyzer_type=AnalyzerType.GENERAL,
                level=1,
            )
        ]
        output = text.render_teamcity(records, _make_options(tmp_path))
        assert output.count("##teamcity[inspectionType id='V501'") == 1
        assert output.count("##teamcity[inspection typeId='V501'") == 2
        assert "message='Identical sub-expressions |'a < b|'.'" in output
        assert f"file='{ROOT}/src/main.cpp' line='10'" in output


class TestCsv:
    def test_header_and_rows(self, tmp_path: Path):
        lines = csv_report.render(_make_records(), _make_options(tmp_path)).splitlines()
        assert lines[0] == (
            "FavIcon;Default order;Level;Error code;Message;Project;Short file;"
            "Line;False alarm;File;Analyzer;Analyzed source file(s)"
        )
        fields = lines[1].split(";")
        assert fields[3] == "V501"
        assert fields[6] == "main.cpp"
        assert fields[9] == f"{ROOT}/src/main.cpp"
        assert fields[10] == "General"

    def test_security_columns(self, tmp_path: Path):
        options = _make_options(
            tmp_path, mappings=frozenset({ErrorCodeMapping.CWE, ErrorCodeMapping.MISRA})
        )
        lines = csv_report.render(_make_records(), options).splitlines()
        assert lines[0].startswith("FavIcon;Default order;Level;Error code;CWE;SAST;Message")
        assert lines[1].split(";")[4] == "CWE-570"
        assert lines[3].split(";")[5] == "MISRA-C-7.1"

    def test_short_name(self):
        assert csv_report.short_name("|?|\\src\\main.cpp") == "main.cpp"
        assert csv_report.short_name("/a/b/c.h") == "c.h"


class TestHtml:
    def test_grouped_and_escaped(self, tmp_path: Path):
        output = html.render_html(_make_records(), _make_options(tmp_path))
        assert "General Analysis" in output
        assert "MISRA" in output
        assert "&lt; b" in output
        assert "<a < b" not in output
        assert "https://pvs-studio.com/en/docs/warnings/v501/" in output

    def test_empty(self, tmp_path: Path):
        assert "No Messages Generated" in html.render_html([], _make_options(tmp_path))

    def test_full_html(self, tmp_path: Path):
        output = html.render_full_html(_make_records(), _make_options(tmp_path))
        assert "<title>project.plog</title>" in output
        assert f"{ROOT}/src/main.cpp:12" in output


class TestMisraCompliance:
    def test_summary(self):
        records = _make_records() + [
            DiagnosticRecord(
                error_code="V2502",
                message="deviation",
                file_name="a.c",
                analyzer_type=AnalyzerType.MISRA,
                level=2,
                sast_id="MISRA-C-8.1",
                false_alarm=True,
            )
        ]
        summary = html.misra_compliance(records)
        statuses = {g.name: g.status for g in summary.guidelines}
        assert statuses == {"MISRA-C-7.1": "Violations", "MISRA-C-8.1": "Deviations"}
        assert not summary.compliant

    def test_render(self, tmp_path: Path):
        output = html.render_misra_compliance(_make_records(), _make_options(tmp_path))
        assert "MISRA-C-7.1" in output
        assert "Not compliant" in output

    def test_no_misra_records(self, tmp_path: Path):
        output = html.render_misra_compliance(_make_records()[:2], _make_options(tmp_path))
        assert "No Messages Generated" in output


class TestPlog:
    def test_round_trip(self, tmp_path: Path):
        options = _make_options(
            tmp_path,
            metadata=(
                LogMetadata(solution_path="|?|/demo.sln", solution_version="16.0"),
                LogMetadata(solution_path="|?|/DEMO.sln", solution_version="17.0"),
            ),
        )
        result = decode_xml_text(plog.render(_make_records(), options))
        assert [r.error_code for r in result.records] == ["V501", "V547", "V2501"]
        assert result.records[0].file_name == f"{ROOT}/src/main.cpp"
        assert result.metadata.solution_path == f"{ROOT}/demo.sln"
        assert result.metadata.solution_version == "17.0"
        assert result.metadata.plog_version == "8"

    def test_different_solutions_dropped(self, tmp_path: Path):
        options = _make_options(
            tmp_path,
            metadata=(LogMetadata(solution_path="a.sln"), LogMetadata(solution_path="b.sln")),
        )
        metadata = plog.merge_metadata(options)
        assert metadata.solution_path == ""
        assert metadata.solution_version == "Independent"

    def test_relative_paths_keep_marker(self, tmp_path: Path):
        record = DiagnosticRecord(
            error_code="V501", message="m", file_name=f"{ROOT}/src/a.cpp", line_number=1, level=1
        )
        options = _make_options(tmp_path, path_mode=PathMode.RELATIVE)
        (decoded,) = decode_xml_text(plog.render([record], options)).records
        assert decoded.file_name == "|?|/src/a.cpp"

    def test_control_characters_stripped(self, tmp_path: Path):
        record = DiagnosticRecord(
            error_code="V501", message="bell \x07 here", file_name="src/a.cpp", line_number=1, level=1
        )
        result = decode_xml_text(plog.render([record], _make_options(tmp_path)))
        assert result.ok
        assert result.records[0].message == "bell  here"


class TestJson:
    def test_report(self, tmp_path: Path):
        data = json.loads(json_report.render(_make_records(), _make_options(tmp_path)))
        assert data["Version"] == 2
        assert len(data["Warnings"]) == 3
        first = data["Warnings"][0]
        assert first["Code"] == "V501"
        assert first["File"] == f"{ROOT}/src/main.cpp"
        assert first["Positions"] == [{"File": f"{ROOT}/src/main.cpp", "Line": 12}]
        assert first["CWE"] == 570


class TestSarif:
    def test_rules_and_levels(self, tmp_path: Path):
        report = sarif.to_dict(_make_records(), _make_options(tmp_path))
        assert report["version"] == "2.1.0"
        run = report["runs"][0]
        assert [r["id"] for r in run["tool"]["driver"]["rules"]] == ["V501", "V547", "V2501"]
        assert [r["level"] for r in run["results"]] == ["error", "warning", "note"]
        uri = run["results"][0]["locations"][0]["physicalLocation"]["artifactLocation"]["uri"]
        assert uri == f"{ROOT}/src/main.cpp"
        assert len(run["results"][0]["relatedLocations"]) == 1

    def test_false_alarm_suppressed(self, tmp_path: Path):
        record = DiagnosticRecord(
            error_code="V501", message="m", file_name="a.cpp", level=1, false_alarm=True
        )
        (result,) = sarif.to_dict([record], _make_options(tmp_path))["runs"][0]["results"]
        assert result["suppressions"] == [{"kind": "inSource"}]

    def test_relative_locations(self, tmp_path: Path):
        record = DiagnosticRecord(
            error_code="V501", message="m", file_name=f"{ROOT}/src/a.cpp", line_number=3, level=1
        )
        options = _make_options(tmp_path, path_mode=PathMode.RELATIVE)
        run = sarif.to_dict([record], options)["runs"][0]
        location = run["results"][0]["locations"][0]["physicalLocation"]["artifactLocation"]
        assert location == {"uri": "src/a.cpp", "uriBaseId": "SRCROOT"}
        assert run["originalUriBaseIds"]["SRCROOT"]["uri"] == "file:///home/me/demo/"

    def test_security_tags(self, tmp_path: Path):
        options = _make_options(tmp_path, mappings=frozenset({ErrorCodeMapping.CWE}))
        results = sarif.to_dict(_make_records(), options)["runs"][0]["results"]
        assert results[0]["properties"]["tags"] == ["CWE-570"]
        assert "properties" not in results[1]
