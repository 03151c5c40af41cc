"""Starter .plogconverter.toml template."""

DEFAULT_TOML = """\
# plogconverter configuration
version = "1.0"

[input]
# diff = "baseline.plog"      # report only what differs from this log
# settings = "Settings.xml"   # extra disabled codes (XML DisableDetectableErrors or YAML disabled_codes)

[output]
output_dir = "."
# name_template = "report"
# render_types = ["Html", "Txt", "Totals"]   # empty = every target
# src_root = "/home/me/project"
path_mode = "absolute"        # absolute | relative
indicate_warnings = false     # exit with code 2 when any report is non-empty

[filter]
# analyzers = ["GA:1,2", "64:1", "MISRA:1,2,3"]
# disabled_codes = ["V501", "V1042"]

[mapping]
# error_codes = ["CWE", "MISRA"]   # CWE | MISRA | OWASP | AUTOSAR
"""
