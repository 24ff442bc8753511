from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from .cli_shared import OpError, PrefsImportError, _load_json_object, _write_json_atomic
from .pref_codec import Rgb


class SinkError(PrefsImportError):
    """Raised when the preference sink rejects a write."""


class TransientSinkError(SinkError):
    """Known, harmless host failure that succeeds when the import is retried.

    Some hosts throw once the first time certain color preferences are set
    after startup. Raising this lets the importer retry the whole run once.
    """


class PreferenceSink(Protocol):
    def set_boolean(self, name: str, value: bool) -> None: ...

    def set_integer(self, name: str, value: int) -> None: ...

    def set_color(self, name: str, red: int, green: int, blue: int) -> None: ...


@dataclass
class RecordingSink:
    """In-memory sink that records every setter call in order."""

    calls: list[tuple[Any, ...]] = field(default_factory=list)
    values: dict[str, Any] = field(default_factory=dict)

    def set_boolean(self, name: str, value: bool) -> None:
        self.calls.append(("set_boolean", name, bool(value)))
        self.values[name] = bool(value)

    def set_integer(self, name: str, value: int) -> None:
        self.calls.append(("set_integer", name, int(value)))
        self.values[name] = int(value)

    def set_color(self, name: str, red: int, green: int, blue: int) -> None:
        self.calls.append(("set_color", name, red, green, blue))
        self.values[name] = (red, green, blue)

    def calls_json(self) -> list[dict[str, Any]]:
        out: list[dict[str, Any]] = []
        for call in self.calls:
            op, name, *args = call
            if op == "set_color":
                value: Any = Rgb(*args).hex()
            else:
                value = args[0]
            out.append({"op": op, "name": name, "value": value})
        return out


@dataclass
class JsonStoreSink:
    """Preference store kept as one JSON object on disk.

    Existing keys are preserved; each setter merges into the in-memory copy
    and ``flush`` writes the document atomically. Colors are stored as
    ``#rrggbb`` strings.
    """

    path: Path
    _data: dict[str, Any] | None = field(default=None, init=False, repr=False)
    _dirty: bool = field(default=False, init=False, repr=False)

    def load(self) -> dict[str, Any]:
        if self._data is None:
            if self.path.exists():
                try:
                    raw = self.path.read_text(encoding="utf-8")
                except OSError as e:
                    raise OpError(f"failed to read preference store {self.path}: {e}") from e
                self._data = _load_json_object(raw=raw, label=f"preference store {self.path}")
            else:
                self._data = {}
        return self._data

    def _put(self, name: str, value: Any) -> None:
        self.load()[name] = value
        self._dirty = True

    def set_boolean(self, name: str, value: bool) -> None:
        self._put(name, bool(value))

    def set_integer(self, name: str, value: int) -> None:
        self._put(name, int(value))

    def set_color(self, name: str, red: int, green: int, blue: int) -> None:
        self._put(name, Rgb(red, green, blue).hex())

    def flush(self) -> bool:
        if not self._dirty:
            return False
        _write_json_atomic(path=self.path, obj=self.load())
        self._dirty = False
        return True
