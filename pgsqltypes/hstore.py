"""The hstore key/value type."""

from __future__ import annotations

_WHITESPACE = frozenset(b" \t\n\r")
_BACKSLASH = ord("\\")
_QUOTE = ord('"')
_EQUALS = ord("=")
_ARROW = ord(">")
_COMMA = ord(",")


class HStore(dict):
    """A mapping of string keys to string or None values."""

    def value(self) -> bytes:
        """The value sent to the database."""
        parts = (f"{quote_hstore(key)}=>{quote_hstore(val)}" for key, val in self.items())
        return ",".join(parts).encode("utf-8")


def quote_hstore(s: str | None) -> str:
    """Quote and escape a key or value; None becomes NULL."""
    if s is None:
        return "NULL"
    if not isinstance(s, str):
        raise TypeError("not a string or None")
    escaped = s.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def scan_hstore(src: object) -> HStore | None:
    """Read an hstore from its text form; None stays None."""
    if src is None:
        return None
    if isinstance(src, str):
        data = src.encode("utf-8")
    elif isinstance(src, (bytes, bytearray, memoryview)):
        data = bytes(src)
    else:
        raise TypeError(f"cannot scan {type(src).__name__} into hstore")

    result = HStore()
    pair = [bytearray(), bytearray()]
    side = 0
    in_quote = did_quote = saw_slash = False

    def store() -> None:
        raw = pair[1]
        key = pair[0].decode("utf-8", errors="replace")
        if not did_quote and len(raw) == 4 and raw.lower() == b"null":
            result[key] = None
        else:
            result[key] = raw.decode("utf-8", errors="replace")

    for b in data:
        if saw_slash:
            pair[side].append(b)
            saw_slash = False
            continue
        if b == _BACKSLASH:
            saw_slash = True
            continue
        if b == _QUOTE:
            in_quote = not in_quote
            did_quote = True
            continue
        if not in_quote:
            if b in _WHITESPACE or b == _EQUALS:
                continue
            if b == _ARROW:
                side = 1
                did_quote = False
                continue
            if b == _COMMA:
                store()
                pair = [bytearray(), bytearray()]
                side = 0
                continue
        pair[side].append(b)

    if len(data) > 1:
        store()
    return result