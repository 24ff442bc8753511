"""Apply a preferences file to a preference sink.

The importer reads ``Name=TypeTagValue[#comment]`` lines, keeps the names it
recognizes, coerces their values and forwards them to the sink. Unknown names
are ignored so that a whole preferences dump can be imported. Malformed values
are reported as warnings and skipped; they never abort the run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Callable, Iterable, TypeVar

from .pref_codec import BadValueError, coerce_boolean, coerce_color, coerce_integer, parse_line
from .pref_names import DEFAULT_NAMES, PreferenceNames, PrefKind
from .sinks import PreferenceSink, TransientSinkError

T = TypeVar("T")

Trace = Callable[[str], None]
FileChooser = Callable[[], "str | Path | None"]

MAX_ATTEMPTS = 2


class ImportStatus(IntEnum):
    SUCCESS = 1
    CANCELLED = 0
    OPEN_FAILED = -1
    FAILED = -2


@dataclass
class ImportReport:
    status: ImportStatus = ImportStatus.SUCCESS
    file: str | None = None
    include_bools: bool = False
    applied: dict[str, int] = field(
        default_factory=lambda: {kind.value: 0 for kind in PrefKind}
    )
    ignored: int = 0
    warnings: list[str] = field(default_factory=list)
    attempts: int = 0
    error: str = ""

    def to_doc(self) -> dict[str, object]:
        return {
            "status": int(self.status),
            "file": self.file,
            "includeBools": self.include_bools,
            "applied": dict(self.applied),
            "ignored": self.ignored,
            "warnings": list(self.warnings),
            "attempts": self.attempts,
            "error": self.error,
        }


def _no_trace(msg: str) -> None:
    del msg


def apply_lines(
    lines: Iterable[str],
    sink: PreferenceSink,
    *,
    names: PreferenceNames = DEFAULT_NAMES,
    include_bools: bool = False,
    trace: Trace | None = None,
) -> ImportReport:
    """Forward every recognized entry in ``lines`` to ``sink``.

    Sink exceptions propagate unchanged.
    """

    trace = trace or _no_trace
    report = ImportReport(include_bools=include_bools)
    for lineno, line in enumerate(lines, start=1):
        entry = parse_line(line)
        if entry is None:
            trace(f"line {lineno}: comment or no match")
            continue

        kind = names.kind_of(entry.name, include_bools=include_bools)
        if kind is None:
            report.ignored += 1
            continue

        try:
            if kind is PrefKind.BOOLEAN:
                flag = coerce_boolean(entry.pref)
                sink.set_boolean(entry.name, flag)
                trace(f"line {lineno}: set boolean {entry.name} = {flag}")
            elif kind is PrefKind.INTEGER:
                num = coerce_integer(entry.pref)
                sink.set_integer(entry.name, num)
                trace(f"line {lineno}: set integer {entry.name} = {num}")
            else:
                rgb = coerce_color(entry.pref)
                sink.set_color(entry.name, rgb.red, rgb.green, rgb.blue)
                trace(
                    f"line {lineno}: set color {entry.name} = "
                    f"({rgb.red:3d}, {rgb.green:3d}, {rgb.blue:3d})"
                )
        except BadValueError as e:
            report.warnings.append(f"line {lineno}: bad {kind.value} for {entry.name}: {e}")
            continue
        report.applied[kind.value] += 1
    return report


def is_transient(exc: BaseException) -> bool:
    return isinstance(exc, TransientSinkError)


def retry_once(
    func: Callable[[], T],
    *,
    retry_if: Callable[[BaseException], bool] = is_transient,
    max_attempts: int = MAX_ATTEMPTS,
    on_retry: Callable[[BaseException, int], None] | None = None,
) -> T:
    """Call ``func``, retrying while ``retry_if`` accepts the raised error.

    Errors ``retry_if`` rejects propagate at once; the last accepted error
    propagates after ``max_attempts`` calls.
    """

    attempt = 1
    while True:
        try:
            return func()
        except Exception as e:
            if attempt >= max_attempts or not retry_if(e):
                raise
            if on_retry is not None:
                on_retry(e, attempt)
            attempt += 1


def import_file(
    path: str | Path,
    sink: PreferenceSink,
    *,
    names: PreferenceNames = DEFAULT_NAMES,
    include_bools: bool = False,
    trace: Trace | None = None,
) -> ImportReport:
    """Import one preferences file, retrying once on a transient sink error.

    A missing or unreadable file yields ``ImportStatus.OPEN_FAILED``. Any
    other exception from the sink propagates.
    """

    trace = trace or _no_trace
    file = str(path)
    attempts = 0

    def _attempt() -> ImportReport:
        nonlocal attempts
        attempts += 1
        try:
            fh = open(file, "r", encoding="utf-8", errors="replace")
        except OSError as e:
            return ImportReport(
                status=ImportStatus.OPEN_FAILED,
                include_bools=include_bools,
                error=f"failed to open {file}: {e.strerror or e}",
            )
        with fh:
            return apply_lines(fh, sink, names=names, include_bools=include_bools, trace=trace)

    def _on_retry(exc: BaseException, attempt: int) -> None:
        trace(f"attempt {attempt} hit a transient sink error ({exc}); retrying")

    report = retry_once(_attempt, on_retry=_on_retry)
    report.file = file
    report.attempts = attempts
    return report


def import_preferences(
    path: str | Path | None,
    sink: PreferenceSink,
    *,
    chooser: FileChooser | None = None,
    names: PreferenceNames = DEFAULT_NAMES,
    include_bools: bool = False,
    trace: Trace | None = None,
) -> ImportReport:
    """Import ``path``, asking ``chooser`` for a file when no path is given.

    A chooser that returns ``None`` or an empty string cancels the import with
    ``ImportStatus.CANCELLED``.
    """

    if path is None or not str(path).strip():
        picked = chooser() if chooser is not None else None
        if picked is None or not str(picked).strip():
            return ImportReport(status=ImportStatus.CANCELLED, include_bools=include_bools)
        path = str(picked).strip()
    return import_file(path, sink, names=names, include_bools=include_bools, trace=trace)
