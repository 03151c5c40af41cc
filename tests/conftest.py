"""Shared test fixtures: sample plog, JSON and raw analyzer logs."""

from __future__ import annotations

import json
import textwrap
from pathlib import Path

import pytest


@pytest.fixture
def sample_plog() -> str:
    """A plog with three diagnostics, one of them a false alarm."""
    return textwrap.dedent("""\
        <?xml version="1.0" encoding="utf-8"?>
        <NewDataSet>
          <Solution_Path>
            <SolutionPath>|?|/demo.sln</SolutionPath>
            <SolutionVersion>17.0</SolutionVersion>
            <PlogVersion>8</PlogVersion>
            <ModificationDate>2024-01-01T00:00:00Z</ModificationDate>
          </Solution_Path>
          <Messages>
            <Project>demo</Project>
            <ErrorCode>V501</ErrorCode>
            <Message>Identical sub-expressions to the left and to the right of the '==' operator.</Message>
            <Line>10</Line>
            <File>|?|/src/main.cpp</File>
            <Positions>
              <Position lines="10">|?|/src/main.cpp</Position>
              <Position lines="12">|?|/src/main.cpp</Position>
            </Positions>
            <FalseAlarm>false</FalseAlarm>
            <Level>1</Level>
            <Analyzer>1</Analyzer>
            <CWECode>CWE-570</CWECode>
            <Retired>false</Retired>
            <Trial>false</Trial>
          </Messages>
          <Messages>
            <Project>demo%tools</Project>
            <ErrorCode>V547</ErrorCode>
            <Message>Expression 'x &gt; 0' is always true.</Message>
            <Line>42</Line>
            <File>|?|/src/util.cpp</File>
            <FalseAlarm>false</FalseAlarm>
            <Level>2</Level>
            <Analyzer>General</Analyzer>
            <AnalyzedSourceFiles>util.cpp|main.cpp</AnalyzedSourceFiles>
            <Trial>false</Trial>
          </Messages>
          <Messages>
            <ErrorCode>V112</ErrorCode>
            <Message>Dangerous magic number 4 used.</Message>
            <Line>7</Line>
            <File>|?|/src/util.cpp</File>
            <FalseAlarm>true</FalseAlarm>
            <Level>3</Level>
            <Analyzer>3</Analyzer>
            <Trial>false</Trial>
          </Messages>
        </NewDataSet>
    """)


@pytest.fixture
def sample_json_report() -> str:
    """A JSON report sharing V501 with sample_plog and adding V1004."""
    return json.dumps(
        {
            "Version": 2,
            "Warnings": [
                {
                    "Analyzer": "General",
                    "Code": "V501",
                    "Level": 1,
                    "Message": "Identical sub-expressions to the left and to the right of the '==' operator.",
                    "File": "|?|/src/main.cpp",
                    "Line": 10,
                    "Positions": [{"File": "|?|/src/main.cpp", "Line": 10}],
                    "FalseAlarm": False,
                    "CWE": 570,
                },
                {
                    "Analyzer": 1,
                    "Code": "V1004",
                    "Level": 2,
                    "Message": "The 'ptr' pointer was used unsafely after it was verified against nullptr.",
                    "File": "|?|/src/io.cpp",
                    "Line": 88,
                    "CWE": 476,
                    "SastId": "",
                    "Projects": ["demo"],
                },
            ],
        },
        indent=2,
    )


@pytest.fixture
def sample_raw_log() -> str:
    """Raw analyzer output in both supported line shapes."""
    return textwrap.dedent("""\
        # analyzer output
        src/a.cpp(10): error V501: Identical sub-expressions.
        src/b.cpp:20:5: warning: V547 Expression is always true.

        this line is not a diagnostic
    """)


@pytest.fixture
def plog_file(tmp_path: Path, sample_plog: str) -> Path:
    path = tmp_path / "project.plog"
    path.write_text(sample_plog, encoding="utf-8")
    return path


@pytest.fixture
def json_file(tmp_path: Path, sample_json_report: str) -> Path:
    path = tmp_path / "project.json"
    path.write_text(sample_json_report, encoding="utf-8")
    return path


@pytest.fixture
def raw_file(tmp_path: Path, sample_raw_log: str) -> Path:
    path = tmp_path / "project.log"
    path.write_text(sample_raw_log, encoding="utf-8")
    return path


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    path = tmp_path / "out"
    path.mkdir()
    return path
