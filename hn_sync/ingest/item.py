from __future__ import annotations

from dataclasses import dataclass, field
import json
from typing import Any

from hn_sync.errors import DecodeError


# "null" is what the feed answers for IDs that do not exist.
MIN_ITEM_BODY_LEN = 10

COLUMNS = (
    "id",
    "deleted",
    "type",
    "who",
    "time",
    "dead",
    "kids",
    "title",
    "content",
    "score",
    "url",
    "parent",
)


@dataclass(frozen=True)
class Item:
    id: int
    type: str
    time: int
    deleted: bool = False
    author: str = ""
    dead: bool = False
    children: tuple[int, ...] = field(default_factory=tuple)
    title: str = ""
    text: str = ""
    score: int = 0
    url: str = ""
    parent: int = 0

    @classmethod
    def from_json(cls, raw: str) -> Item:
        """Decode one feed document.

        ``id``, ``type`` and ``time`` are required; every other field falls
        back to its default when missing or ``null``.
        """
        if raw is None or len(raw.strip()) < MIN_ITEM_BODY_LEN:
            raise DecodeError(f"item body too short: {raw!r}")
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise DecodeError(f"invalid item json: {exc}") from exc
        if not isinstance(payload, dict):
            raise DecodeError(f"item json is not an object: {type(payload).__name__}")
        return cls.from_dict(payload)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> Item:
        return cls(
            id=_required_int(payload, "id"),
            type=_required_str(payload, "type"),
            time=_required_int(payload, "time"),
            deleted=_bool(payload, "deleted"),
            author=_str(payload, "by"),
            dead=_bool(payload, "dead"),
            children=_int_list(payload, "kids"),
            title=_str(payload, "title"),
            text=_str(payload, "text"),
            score=_int(payload, "score"),
            url=_str(payload, "url"),
            parent=_int(payload, "parent"),
        )

    @property
    def kids_text(self) -> str:
        return "[" + ", ".join(str(kid) for kid in self.children) + "]"

    def to_row(self) -> tuple[object, ...]:
        """Column values in ``COLUMNS`` order, booleans as 0/1."""
        return (
            self.id,
            int(self.deleted),
            self.type,
            self.author,
            self.time,
            int(self.dead),
            self.kids_text,
            self.title,
            self.text,
            self.score,
            self.url,
            self.parent,
        )

    def to_sql_value(self) -> str:
        """Render the item as a single ``(...)`` SQL value tuple.

        String columns are wrapped in single quotes with embedded quotes
        doubled. Backslashes, ``\\n`` and ``\\r`` are backslash-escaped so the
        tuple always fits on one line, e.g.::

            (8863, 0, 'story', 'dhouston', 1175714200, 0, '[8952, 9224]',
             'My YC app', '', 111, 'http://www.getdropbox.com/u/2/screencast.html', 0)
        """
        parts = []
        for value in self.to_row():
            if isinstance(value, str):
                parts.append(quote_sql(value))
            else:
                parts.append(str(value))
        return "(" + ", ".join(parts) + ")"


LINE_ESCAPES = {"\\": "\\\\", "\n": "\\n", "\r": "\\r"}
LINE_UNESCAPES = {"\\": "\\", "n": "\n", "r": "\r"}


def quote_sql(value: str) -> str:
    escaped = "".join(LINE_ESCAPES.get(char, char) for char in value)
    return "'" + escaped.replace("'", "''") + "'"


def parse_sql_value(text: str) -> tuple[int | str, ...]:
    """Parse a tuple produced by ``Item.to_sql_value`` back into columns.

    Quoted fields come back as ``str`` with quotes undoubled and line
    escapes reversed, bare fields as ``int``.
    """
    text = text.strip()
    if not (text.startswith("(") and text.endswith(")")):
        raise DecodeError(f"not a value tuple: {text[:40]!r}")
    body = text[1:-1]
    values: list[int | str] = []
    i = 0
    length = len(body)
    while i <= length:
        while i < length and body[i] == " ":
            i += 1
        if i < length and body[i] == "'":
            i += 1
            chunk: list[str] = []
            while True:
                if i >= length:
                    raise DecodeError("unterminated quoted field")
                if body[i] == "'":
                    if i + 1 < length and body[i + 1] == "'":
                        chunk.append("'")
                        i += 2
                        continue
                    i += 1
                    break
                if body[i] == "\\":
                    if i + 1 >= length or body[i + 1] not in LINE_UNESCAPES:
                        raise DecodeError(f"bad escape at {i}")
                    chunk.append(LINE_UNESCAPES[body[i + 1]])
                    i += 2
                    continue
                chunk.append(body[i])
                i += 1
            values.append("".join(chunk))
        else:
            end = body.find(",", i)
            if end == -1:
                end = length
            token = body[i:end].strip()
            try:
                values.append(int(token))
            except ValueError as exc:
                raise DecodeError(f"bad numeric field: {token!r}") from exc
            i = end
        while i < length and body[i] == " ":
            i += 1
        if i < length and body[i] != ",":
            raise DecodeError(f"unexpected character {body[i]!r} at {i}")
        i += 1
    if len(values) != len(COLUMNS):
        raise DecodeError(f"expected {len(COLUMNS)} fields, got {len(values)}")
    return tuple(values)


def _required_int(payload: dict[str, Any], key: str) -> int:
    value = payload.get(key)
    if value is None:
        raise DecodeError(f"missing required field: {key}")
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"field {key} must be an integer, got {value!r}")
    return value


def _required_str(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None:
        raise DecodeError(f"missing required field: {key}")
    if not isinstance(value, str):
        raise DecodeError(f"field {key} must be a string, got {value!r}")
    return value


def _int(payload: dict[str, Any], key: str) -> int:
    if payload.get(key) is None:
        return 0
    return _required_int(payload, key)


def _str(payload: dict[str, Any], key: str) -> str:
    if payload.get(key) is None:
        return ""
    return _required_str(payload, key)


def _bool(payload: dict[str, Any], key: str) -> bool:
    value = payload.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise DecodeError(f"field {key} must be a boolean, got {value!r}")
    return value


def _int_list(payload: dict[str, Any], key: str) -> tuple[int, ...]:
    value = payload.get(key)
    if value is None:
        return ()
    if not isinstance(value, list):
        raise DecodeError(f"field {key} must be a list, got {value!r}")
    kids = []
    for kid in value:
        if isinstance(kid, bool) or not isinstance(kid, int):
            raise DecodeError(f"field {key} must hold integers, got {kid!r}")
        kids.append(kid)
    return tuple(kids)
