"""Configuration schema: dataclasses for every config section, and the frozen run options."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

from plogconverter.config.errors import ConfigError
from plogconverter.config.settings import load_disabled_codes
from plogconverter.decoding.models import LogMetadata
from plogconverter.diagnostics.models import AnalyzerType, ErrorCodeMapping
from plogconverter.paths import PathMode, normalize_root
from plogconverter.render.base import RenderOptions, RenderTarget

LevelMap = Dict[AnalyzerType, FrozenSet[int]]

# characters that cannot appear in an output file name on any supported platform
_INVALID_NAME_CHARS = frozenset('<>:"|?*\0')


# ---- section dataclasses ----


@dataclass
class InputConfig:
    diff: str = ""  # log compared against the inputs
    settings: str = ""  # YAML or XML settings file with extra disabled codes


@dataclass
class OutputConfig:
    output_dir: str = "."
    name_template: str = ""
    render_types: List[str] = field(default_factory=list)  # empty = all targets
    src_root: str = ""
    path_mode: str = "absolute"  # absolute | relative
    indicate_warnings: bool = False


@dataclass
class FilterConfig:
    analyzers: List[str] = field(default_factory=list)  # "GA:1,2", "64:1", ...
    disabled_codes: List[str] = field(default_factory=list)


@dataclass
class MappingConfig:
    error_codes: List[str] = field(default_factory=list)  # CWE, MISRA, OWASP, AUTOSAR


@dataclass(frozen=True)
class RunOptions:
    """Validated, immutable options for one conversion run."""

    render_targets: Tuple[RenderTarget, ...] = ()
    output_dir: Path = Path(".")
    name_template: str = ""
    src_root: str = ""
    path_mode: PathMode = PathMode.ABSOLUTE
    level_map: Mapping[AnalyzerType, FrozenSet[int]] = field(default_factory=dict)
    disabled_codes: FrozenSet[str] = frozenset()
    mappings: FrozenSet[ErrorCodeMapping] = frozenset()
    diff_log: Optional[Path] = None
    indicate_warnings: bool = False
    warnings: Tuple[str, ...] = ()

    def render_options(
        self, log_paths: Sequence[Path], metadata: Sequence[LogMetadata] = ()
    ) -> RenderOptions:
        return RenderOptions(
            output_dir=self.output_dir,
            name_template=self.name_template,
            log_paths=tuple(log_paths),
            src_root=self.src_root,
            path_mode=self.path_mode,
            mappings=self.mappings,
            metadata=tuple(metadata),
        )


@dataclass
class ConverterConfig:
    version: str = "1.0"
    input: InputConfig = field(default_factory=InputConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    filter: FilterConfig = field(default_factory=FilterConfig)
    mapping: MappingConfig = field(default_factory=MappingConfig)

    def freeze(self) -> RunOptions:
        """Validate every section and return the immutable run options.

        Raises ConfigError on the first invalid value.
        """
        path_mode = _parse_path_mode(self.output.path_mode)
        src_root = normalize_root(self.output.src_root)
        if path_mode is PathMode.RELATIVE and not src_root:
            raise ConfigError("Relative path mode requires a source root.")

        output_dir = Path(self.output.output_dir or ".")
        if not output_dir.is_dir():
            raise ConfigError(f"Output directory '{output_dir}' does not exist.")

        template = self.output.name_template.strip()
        if template and not is_valid_file_name(template):
            raise ConfigError(f'Template "{template}" is not a valid file name.')

        level_map = parse_level_filters(self.filter.analyzers)
        mappings = parse_mappings(self.mapping.error_codes)

        disabled = {c.strip() for c in self.filter.disabled_codes if c.strip()}
        if self.input.settings:
            disabled.update(load_disabled_codes(Path(self.input.settings)))

        diff_log: Optional[Path] = None
        if self.input.diff:
            diff_log = Path(self.input.diff)
            if not diff_log.is_file():
                raise ConfigError(f"File '{diff_log}' does not exist.")

        warnings: List[str] = []
        if (
            ErrorCodeMapping.MISRA in mappings
            and level_map
            and AnalyzerType.MISRA not in level_map
        ):
            warnings.append(
                "MISRA mapping is specified, but MISRA rules group is not enabled. "
                "Check the '-a' flag."
            )

        return RunOptions(
            render_targets=parse_render_types(self.output.render_types),
            output_dir=output_dir,
            name_template=template,
            src_root=src_root,
            path_mode=path_mode,
            level_map=level_map,
            disabled_codes=frozenset(disabled),
            mappings=mappings,
            diff_log=diff_log,
            indicate_warnings=self.output.indicate_warnings,
            warnings=tuple(warnings),
        )


# ---- value parsers ----


def _split_list(values: Iterable[str], separator: str) -> List[str]:
    items: List[str] = []
    for value in values:
        items.extend(part.strip() for part in value.split(separator) if part.strip())
    return items


def available_analyzers() -> str:
    names = ", ".join(t.short_name for t in AnalyzerType)
    return f"Available analyzers: {names}"


def parse_level_filters(entries: Iterable[str]) -> LevelMap:
    """Parse ``GA:1,2;64:1`` style filters; repeated analyzers are unioned."""
    levels: Dict[AnalyzerType, set] = {}
    for entry in _split_list(entries, ";"):
        parts = [p for p in entry.split(":") if p]
        if len(parts) != 2:
            raise ConfigError("Level filter was not specified")
        name, raw_levels = parts
        analyzer = AnalyzerType.from_short_name(name)
        if analyzer is None:
            raise ConfigError(f"Unknown analyzer '{name}'. {available_analyzers()}")
        if not raw_levels.strip():
            raise ConfigError("Levels are not set")
        parsed = set()
        for raw in (r.strip() for r in raw_levels.split(",") if r.strip()):
            if not raw.isdigit():
                raise ConfigError(
                    f"Incorrect level: '{raw}'. Level must be an integer value"
                )
            parsed.add(int(raw))
        if not parsed:
            raise ConfigError("No levels were specified")
        levels.setdefault(analyzer, set()).update(parsed)
    return {analyzer: frozenset(values) for analyzer, values in levels.items()}


def parse_render_types(values: Iterable[str]) -> Tuple[RenderTarget, ...]:
    targets: List[RenderTarget] = []
    for name in _split_list(values, ","):
        try:
            target = RenderTarget.parse(name)
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc
        if target not in targets:
            targets.append(target)
    return tuple(targets)


def parse_mappings(values: Iterable[str]) -> FrozenSet[ErrorCodeMapping]:
    mappings = set()
    for name in _split_list(values, ","):
        try:
            mappings.add(ErrorCodeMapping(name.upper()))
        except ValueError as exc:
            raise ConfigError(f"Cannot parse error code mapping with a name {name}") from exc
    return frozenset(mappings)


def _parse_path_mode(value: str) -> PathMode:
    try:
        return PathMode.parse(value or PathMode.ABSOLUTE.value)
    except ValueError as exc:
        raise ConfigError(
            f"Unknown path mode '{value}'. Expected 'absolute' or 'relative'"
        ) from exc


def is_valid_file_name(name: str) -> bool:
    return not any(ch in _INVALID_NAME_CHARS or ord(ch) < 32 for ch in name)
