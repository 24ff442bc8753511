from __future__ import annotations

import contextlib
import json
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any


class PrefsImportError(Exception):
    pass


class UsageError(PrefsImportError):
    pass


class OpError(PrefsImportError):
    pass


PREFS_IMPORT_STORE = "PREFS_IMPORT_STORE"
PREFS_IMPORT_INCLUDE_BOOLS = "PREFS_IMPORT_INCLUDE_BOOLS"
PREFS_IMPORT_QUIET = "PREFS_IMPORT_QUIET"
PREFS_IMPORT_RESULT_KIND = "prefs-import.result.v1"
PREFS_IMPORT_NAMES_KIND = "prefs-import.names.v1"


@dataclass(frozen=True)
class GlobalOpts:
    pretty: bool
    quiet: bool


def _env_or_none(*names: str) -> str | None:
    for n in names:
        v = (os.environ.get(n) or "").strip()
        if v:
            return v
    return None


def _truthy(raw: str | None) -> bool:
    return str(raw or "").strip().lower() in {"1", "true", "yes", "on"}


def _default_store_path() -> Path:
    return Path.home() / ".prefs_import" / "preferences.json"


def _resolve_store_path(store: str | None) -> Path:
    raw = (store or "").strip() or _env_or_none(PREFS_IMPORT_STORE)
    if not raw:
        return _default_store_path()
    return Path(raw).expanduser()


def _print_json(obj: Any, *, pretty: bool) -> None:
    if pretty:
        sys.stdout.write(json.dumps(obj, indent=2, sort_keys=True) + "\n")
    else:
        sys.stdout.write(json.dumps(obj, separators=(",", ":"), sort_keys=True) + "\n")


def _load_json_object(*, raw: str, label: str) -> dict[str, Any]:
    try:
        val = json.loads(raw)
    except Exception as e:
        raise OpError(f"invalid {label}: {e}") from e
    if not isinstance(val, dict):
        raise OpError(f"invalid {label}: expected JSON object")
    return val


def _write_json_atomic(*, path: Path, obj: dict[str, Any]) -> None:
    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_text(json.dumps(obj, indent=2, sort_keys=True) + "\n", encoding="utf-8")
        os.replace(tmp, path)
    except OSError as e:
        with contextlib.suppress(OSError):
            tmp.unlink(missing_ok=True)
        raise OpError(f"failed to write {path}: {e}") from e
