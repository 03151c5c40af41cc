"""Tests for record filtering, ordering and the two-log difference."""

import random

import pytest

from plogconverter.config import ConfigError, parse_level_filters
from plogconverter.diagnostics import AnalyzerType, DiagnosticRecord
from plogconverter.policy import (
    ADDITIONAL_MARK,
    MISSING_MARK,
    apply_filters,
    diff,
    exclude_false_alarms,
    filter_by_levels,
    filter_disabled_codes,
    sort_records,
)


def _make_record(code="V501", level=1, analyzer=AnalyzerType.GENERAL, **overrides) -> DiagnosticRecord:
    fields = dict(
        error_code=code,
        message=f"message for {code}",
        file_name="|?|/src/main.cpp",
        line_number=10,
        analyzer_type=analyzer,
        level=level,
    )
    fields.update(overrides)
    return DiagnosticRecord(**fields)


class TestLevelFilter:
    def test_keeps_only_mapped_levels(self):
        records = [
            _make_record("V501", 1),
            _make_record("V547", 2),
            _make_record("V112", 1, AnalyzerType.VIVA64),
        ]
        kept = filter_by_levels(records, parse_level_filters(["GA:1"]))
        assert [r.error_code for r in kept] == ["V501"]

    def test_renew_notice_always_kept(self):
        renew = _make_record("Renew", 0, AnalyzerType.UNKNOWN, message="Your license expires soon.")
        fail = _make_record("V001", 0, AnalyzerType.UNKNOWN)
        kept = filter_by_levels([renew, fail], parse_level_filters(["GA:1"]))
        assert kept == [renew]

    def test_unknown_type_can_be_selected(self):
        fail = _make_record("V001", 0, AnalyzerType.UNKNOWN)
        assert filter_by_levels([fail], parse_level_filters(["Fail:0"])) == [fail]

    def test_empty_map_is_noop(self):
        records = [_make_record("V501", 1), _make_record("V547", 3)]
        assert apply_filters(records) == records
        assert apply_filters(records, {}, []) == records


class TestLevelFilterParsing:
    def test_union_of_repeated_analyzers(self):
        level_map = parse_level_filters(["GA:1", "GA:2;64:1"])
        assert level_map == {
            AnalyzerType.GENERAL: frozenset({1, 2}),
            AnalyzerType.VIVA64: frozenset({1}),
        }

    def test_short_names_case_insensitive(self):
        assert AnalyzerType.MISRA in parse_level_filters(["misra:1,2,3"])

    @pytest.mark.parametrize(
        "entry, message",
        [
            ("GA", "Level filter was not specified"),
            ("GA:x", "Incorrect level: 'x'"),
            ("GA: ,", "No levels were specified"),
            ("XX:1", "Unknown analyzer 'XX'. Available analyzers: Fail, GA"),
        ],
    )
    def test_errors(self, entry, message):
        with pytest.raises(ConfigError, match=message):
            parse_level_filters([entry])


class TestCodeFilters:
    def test_disabled_codes_case_insensitive(self):
        records = [_make_record("V501"), _make_record("V547")]
        kept = filter_disabled_codes(records, ["v501 "])
        assert [r.error_code for r in kept] == ["V547"]

    def test_apply_filters_runs_both(self):
        records = [
            _make_record("V501", 1),
            _make_record("V547", 1),
            _make_record("V1004", 2),
        ]
        kept = apply_filters(records, parse_level_filters(["GA:1"]), ["V547"])
        assert [r.error_code for r in kept] == ["V501"]

    def test_false_alarms(self):
        alarm = _make_record("V501", false_alarm=True)
        real = _make_record("V547")
        assert exclude_false_alarms([alarm, real]) == [real]
        assert exclude_false_alarms([alarm, real], keep_false_alarms=True) == [alarm, real]


class TestSorting:
    def test_order(self):
        records = [
            _make_record("V112", 1, AnalyzerType.VIVA64),
            _make_record("V547", 2, file_name="|?|/a.cpp"),
            _make_record("V501", 1, file_name="|?|/B.cpp"),
            _make_record("V502", 1, file_name="|?|/b.cpp", line_number=3),
            _make_record("V001", 0, AnalyzerType.UNKNOWN),
        ]
        ordered = [r.error_code for r in sort_records(records)]
        assert ordered == ["V001", "V502", "V501", "V547", "V112"]

    def test_deterministic_for_any_input_order(self):
        records = [
            _make_record(f"V{500 + i}", level=1 + i % 3, line_number=i % 4)
            for i in range(30)
        ]
        expected = sort_records(records)
        shuffled = list(records)
        random.Random(7).shuffle(shuffled)
        assert [r.identity for r in sort_records(shuffled)] == [r.identity for r in expected]


class TestDiff:
    def test_missing_and_additional(self):
        a, b, c = _make_record("V501"), _make_record("V547"), _make_record("V1004")
        result = diff(baseline={a, b}, current={b, c})
        assert [r.error_code for r in result.missing] == ["V501"]
        assert [r.error_code for r in result.additional] == ["V1004"]
        assert result.missing[0].message == "message for V501" + MISSING_MARK
        assert result.additional[0].message == "message for V1004" + ADDITIONAL_MARK

    def test_combined_lists_missing_first(self):
        a, c = _make_record("V501"), _make_record("V1004")
        combined = diff(baseline={a}, current={c}).combined()
        assert [r.error_code for r in combined] == ["V501", "V1004"]

    def test_self_diff_is_empty(self):
        records = {_make_record("V501"), _make_record("V547")}
        assert diff(baseline=records, current=set(records)).is_empty

    def test_case_only_differences_are_shared(self):
        lower = _make_record("V501", message="same text")
        upper = _make_record("v501", message="SAME TEXT")
        assert diff(baseline={lower}, current={upper}).is_empty

    def test_inputs_untouched(self):
        a, c = _make_record("V501"), _make_record("V1004")
        baseline, current = {a}, {c}
        diff(baseline=baseline, current=current)
        assert baseline == {a} and current == {c}
        assert a.message == "message for V501"
        assert c.message == "message for V1004"
