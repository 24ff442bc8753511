from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

import click
import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from . import __version__
from .cli_shared import (
    PREFS_IMPORT_INCLUDE_BOOLS,
    PREFS_IMPORT_NAMES_KIND,
    PREFS_IMPORT_QUIET,
    PREFS_IMPORT_RESULT_KIND,
    PREFS_IMPORT_STORE,
    GlobalOpts,
    OpError,
    UsageError,
    _print_json,
    _resolve_store_path,
    _truthy,
)
from .importer import ImportReport, ImportStatus, import_preferences
from .pref_names import DEFAULT_NAMES
from .sinks import JsonStoreSink, RecordingSink, SinkError

_ERROR_CONSOLE = Console(stderr=True, soft_wrap=True)

_NAME_KINDS = ("boolean", "extra", "integer", "color")


def _rich_error(msg: str) -> None:
    _ERROR_CONSOLE.print(f"[bold red]error:[/bold red] {escape(msg)}")


def _rich_warning(msg: str) -> None:
    _ERROR_CONSOLE.print(f"[yellow]warning:[/yellow] {escape(msg)}")


def _trace(msg: str) -> None:
    _ERROR_CONSOLE.print(f"[dim]{escape(msg)}[/dim]")


def _bootstrap_env() -> None:
    # Discover and load .env without overriding exported values.
    load_dotenv()


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"prefs-import {__version__}")
        raise typer.Exit(code=0)


app = typer.Typer(
    name="prefs-import",
    help="Apply a key-value preferences file to an application's preference store.",
    no_args_is_help=True,
    add_completion=False,
)


@app.callback()
def app_callback(
    ctx: typer.Context,
    plain_json: bool = typer.Option(False, "--plain-json", help="Emit compact JSON output"),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        help=f"Suppress warnings and the summary line (env: {PREFS_IMPORT_QUIET})",
    ),
    version: bool = typer.Option(False, "--version", callback=_version_callback, is_eager=True),
) -> None:
    del version
    ctx.obj = {
        "g": GlobalOpts(
            pretty=not plain_json,
            quiet=quiet or _truthy(os.environ.get(PREFS_IMPORT_QUIET)),
        )
    }


def _ctx_global(ctx: typer.Context) -> GlobalOpts:
    if isinstance(ctx.obj, dict) and isinstance(ctx.obj.get("g"), GlobalOpts):
        return ctx.obj["g"]
    return GlobalOpts(pretty=True, quiet=_truthy(os.environ.get(PREFS_IMPORT_QUIET)))


def _prompt_for_file() -> str | None:
    # EOF or Ctrl-C at the prompt cancels like an empty answer.
    try:
        picked = typer.prompt(
            "Preferences file (empty to cancel)",
            default="",
            show_default=False,
            err=True,
        )
    except click.exceptions.Abort:
        return None
    return str(picked or "").strip() or None


def _report_outcome(report: ImportReport, g: GlobalOpts) -> None:
    if not g.quiet:
        for w in report.warnings:
            _rich_warning(w)
    if report.status is ImportStatus.SUCCESS:
        if not g.quiet:
            mode = "WITH" if report.include_bools else "WITHOUT"
            _ERROR_CONSOLE.print(
                f"Imported preferences {mode} boolean options from {escape(str(report.file))}"
            )
    elif report.status is ImportStatus.CANCELLED:
        if not g.quiet:
            _ERROR_CONSOLE.print("Import cancelled")
    else:
        _rich_error(report.error or "import failed")


@app.command("import", help="Apply a preferences file to the preference store.")
def import_cmd(
    ctx: typer.Context,
    file: str = typer.Argument("", help="Preferences file (prompted for when omitted)"),
    include_bools: bool | None = typer.Option(
        None,
        "--include-bools/--no-include-bools",
        help=f"Also import check-box preferences (env: {PREFS_IMPORT_INCLUDE_BOOLS})",
    ),
    store: str | None = typer.Option(
        None,
        "--store",
        help=f"Preference store JSON file (env: {PREFS_IMPORT_STORE})",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Record setter calls without writing the store",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Trace each line on stderr"),
) -> None:
    g = _ctx_global(ctx)
    if include_bools is None:
        include_bools = _truthy(os.environ.get(PREFS_IMPORT_INCLUDE_BOOLS))

    store_path: Path = _resolve_store_path(store)
    sink: RecordingSink | JsonStoreSink
    if dry_run:
        sink = RecordingSink()
    else:
        sink = JsonStoreSink(store_path)

    picked: list[str] = []

    def _choose() -> str | None:
        chosen = _prompt_for_file()
        if chosen:
            picked.append(chosen)
        return chosen

    try:
        report = import_preferences(
            file or None,
            sink,
            chooser=_choose,
            include_bools=bool(include_bools),
            trace=_trace if verbose and not g.quiet else None,
        )
        if report.status is ImportStatus.SUCCESS and isinstance(sink, JsonStoreSink):
            sink.flush()
    except (SinkError, OpError) as e:
        report = ImportReport(
            status=ImportStatus.FAILED,
            file=file or (picked[-1] if picked else None),
            include_bools=bool(include_bools),
            error=str(e),
        )

    payload: dict[str, Any] = {"kind": PREFS_IMPORT_RESULT_KIND}
    payload.update(report.to_doc())
    payload["store"] = str(store_path)
    payload["dryRun"] = dry_run
    if isinstance(sink, RecordingSink):
        payload["calls"] = sink.calls_json()
    _print_json(payload, pretty=g.pretty)
    _report_outcome(report, g)

    if report.status in (ImportStatus.OPEN_FAILED, ImportStatus.FAILED):
        raise typer.Exit(code=1)


@app.command("names", help="List the recognized preference names by kind.")
def names_cmd(
    ctx: typer.Context,
    kind: str | None = typer.Option(
        None,
        "--kind",
        help="Only one table: boolean, extra, integer or color",
    ),
) -> None:
    g = _ctx_global(ctx)
    tables = DEFAULT_NAMES.as_dict()
    if kind is not None:
        k = kind.strip().lower()
        if k not in _NAME_KINDS:
            raise UsageError(f"unknown --kind {kind!r} (expected one of {', '.join(_NAME_KINDS)})")
        tables = {k: tables[k]}
    _print_json({"kind": PREFS_IMPORT_NAMES_KIND, "names": tables}, pretty=g.pretty)


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    try:
        _bootstrap_env()
        result = app(args=argv, prog_name="prefs-import", standalone_mode=False)
        if result is None:
            return 0
        return int(result)
    except typer.Exit as e:
        return int(e.exit_code)
    except click.exceptions.Abort:
        _rich_error("aborted")
        return 1
    except click.ClickException as e:
        _rich_error(e.format_message())
        return int(e.exit_code)
    except UsageError as e:
        _rich_error(str(e))
        return 2
    except OpError as e:
        _rich_error(str(e))
        return 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
