from __future__ import annotations

import re
from dataclasses import dataclass

# Name runs up to the first unescaped "=" and may not contain "#". The value
# stops at the first "#" (inline comment).
_ENTRY_RE = re.compile(r"^(?P<name>(?:\\.|[^=#\\])+)=(?P<pref>[^#]+)")
_ESCAPE_RE = re.compile(r"\\(.)")
_INT_RE = re.compile(r"^[+-]?[0-9]+$")

_RGB_MASK = 0xFFFFFF


class BadValueError(ValueError):
    """Raised when a preference value does not match its expected kind."""


@dataclass(frozen=True)
class PrefEntry:
    name: str
    pref: str


@dataclass(frozen=True)
class Rgb:
    red: int
    green: int
    blue: int

    def hex(self) -> str:
        return f"#{self.red:02x}{self.green:02x}{self.blue:02x}"


def is_comment(line: str) -> bool:
    return not line or line.startswith("#")


def parse_line(line: str) -> PrefEntry | None:
    """Split one preferences line into name and trimmed value.

    Returns ``None`` for blank lines, ``#`` comments, and lines with no
    ``name=value`` pair.
    """

    line = line.rstrip("\r\n")
    if is_comment(line):
        return None
    m = _ENTRY_RE.match(line)
    if m is None:
        return None
    name = _ESCAPE_RE.sub(r"\1", m.group("name"))
    return PrefEntry(name=name, pref=m.group("pref").strip())


def _split_tag(pref: str, tag: str, *, label: str) -> str:
    if not pref or pref[0].upper() != tag:
        raise BadValueError(f"expected {label} tagged {tag!r}, got {pref!r}")
    return pref[1:]


def coerce_boolean(pref: str) -> bool:
    v = pref.lower()
    if v == "btrue":
        return True
    if v == "bfalse":
        return False
    raise BadValueError(f"expected Btrue or Bfalse, got {pref!r}")


def coerce_integer(pref: str) -> int:
    body = _split_tag(pref, "I", label="integer").strip()
    if not _INT_RE.match(body):
        raise BadValueError(f"expected base-10 integer, got {pref!r}")
    return int(body, 10)


def decode_rgb(packed: int) -> Rgb:
    # Alpha sits above bit 24; exported values carry it and come out negative.
    v = packed & _RGB_MASK
    return Rgb(red=(v >> 16) & 0xFF, green=(v >> 8) & 0xFF, blue=v & 0xFF)


def coerce_color(pref: str) -> Rgb:
    body = _split_tag(pref, "C", label="color").strip()
    if not _INT_RE.match(body):
        raise BadValueError(f"expected packed RGB integer, got {pref!r}")
    return decode_rgb(int(body, 10))
