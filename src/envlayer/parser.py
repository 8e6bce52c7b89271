"""Line parser for .env-style text.

Turns raw text into a flat ``str -> str`` mapping. The parser never fails on
malformed content: a line that does not look like an assignment is skipped
silently. The only error it raises is for input that is neither ``str`` nor
``bytes``.

Supported syntax:
    # full-line comment
    KEY=value                 -> "value"
    KEY=value # comment       -> "value"
    KEY=val#ue                -> "val#ue"   ('#' only starts a comment after whitespace)
    export KEY=value          -> "value"
    KEY: value                -> "value"
    KEY="a\\nb"               -> "a<newline>b"
    KEY='a\\nb'               -> "a\\nb"    (verbatim)
    KEY=`say "hi"`            -> 'say "hi"'
    KEY="first line
    second line"              -> "first line<newline>second line"
"""

import re
from typing import Dict, List, Mapping, Tuple, Union

from envlayer.exceptions import InvalidOptionError

_NEWLINES = re.compile(r"\r\n?")

# A ':' separator must be followed by whitespace, otherwise "a:b" lines are noise
_LINE = re.compile(r"^\s*(?:export\s+)?([\w.-]+)\s*(?:=|:(?=\s|$))(.*)$", re.ASCII)
_KEY = re.compile(r"[\w.-]+", re.ASCII)
_INLINE_COMMENT = re.compile(r"(?<=\s)#")
_ESCAPES = re.compile(r'\\([nr"\\])')
_ESCAPE_MAP = {"n": "\n", "r": "\r", '"': '"', "\\": "\\"}
_QUOTES = "\"'`"
# Everything up to the first unescaped '"'
_DOUBLE_CLOSE = re.compile(r'(?:\\.|[^"\\])*"', re.DOTALL)
_BOM = "\ufeff"


def parse(src: Union[str, bytes]) -> Dict[str, str]:
    """Parse .env-style text into a mapping.

    Args:
        src: Decoded text, or UTF-8 encoded bytes. A leading byte order mark
            is dropped.

    Returns:
        Mapping of key to fully resolved value. When a key is assigned more
        than once, the last assignment wins.

    Raises:
        InvalidOptionError: If ``src`` is neither str nor bytes
    """
    if isinstance(src, (bytes, bytearray)):
        src = bytes(src).decode("utf-8")
    if not isinstance(src, str):
        raise InvalidOptionError(
            "parse() expects str or bytes",
            details={"type": type(src).__name__},
        )
    if src.startswith(_BOM):
        src = src[len(_BOM):]

    lines = _NEWLINES.sub("\n", src).split("\n")
    closers: Dict[str, List[int]] = {}
    parsed: Dict[str, str] = {}

    i = 0
    while i < len(lines):
        line = lines[i]
        i += 1

        stripped = line.lstrip()
        if not stripped or stripped.startswith("#"):
            continue

        match = _LINE.match(line)
        if match is None:
            continue

        key, raw = match.group(1), match.group(2)
        value, consumed = _read_value(raw, lines, i, closers)
        i += consumed
        parsed[key] = value

    return parsed


def _read_value(
    raw: str, lines: List[str], next_index: int, closers: Dict[str, List[int]]
) -> Tuple[str, int]:
    """Resolve the value text of one assignment.

    Returns the value and the number of continuation lines it consumed.
    """
    body = raw.lstrip()
    if body and body[0] in _QUOTES:
        quote = body[0]
        first = body[1:]

        # Quote search always runs on the untouched text, escapes included
        close = _find_closing(first, quote)
        if close >= 0:
            if _is_trailer(first[close + 1:]):
                return _unquote(first[:close], quote), 0
            return _strip_unquoted(raw), 0

        # A trailing backslash escapes only the joining newline, so every
        # continuation line is scanned from a clean state
        if quote not in closers:
            closers[quote] = _next_closers(lines, quote)
        last = closers[quote][next_index]
        if last >= 0:
            end_line = lines[last]
            end = _find_closing(end_line, quote)
            if _is_trailer(end_line[end + 1:]):
                content = "\n".join([first, *lines[next_index:last], end_line[:end]])
                return _unquote(content, quote), last - next_index + 1

    return _strip_unquoted(raw), 0


def _next_closers(lines: List[str], quote: str) -> List[int]:
    """For each line index, the first line at or after it holding a closing ``quote``.

    -1 marks that no later line closes the quote. The table has one extra
    slot for the position past the last line.
    """
    table = [-1] * (len(lines) + 1)
    for k in range(len(lines) - 1, -1, -1):
        table[k] = k if _find_closing(lines[k], quote) >= 0 else table[k + 1]
    return table


def _find_closing(text: str, quote: str) -> int:
    """Index of the quote that closes ``text``, or -1."""
    if quote != '"':
        return text.find(quote)

    match = _DOUBLE_CLOSE.match(text)
    return match.end() - 1 if match else -1


def _is_trailer(text: str) -> bool:
    rest = text.lstrip()
    return not rest or rest.startswith("#")


def _unquote(content: str, quote: str) -> str:
    if quote == '"':
        return _ESCAPES.sub(lambda m: _ESCAPE_MAP[m.group(1)], content)
    return content


def _strip_unquoted(raw: str) -> str:
    comment = _INLINE_COMMENT.search(raw)
    if comment is not None:
        raw = raw[: comment.start()]
    return raw.strip()


def _escape(value: str) -> str:
    return (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )


def format_env(values: Mapping[str, str]) -> str:
    """Serialize a mapping as ``KEY="VALUE"`` lines.

    The output parses back to the same mapping.

    Raises:
        InvalidOptionError: If a key cannot be expressed in the file format
    """
    out = []
    for key, value in values.items():
        if not _KEY.fullmatch(key):
            raise InvalidOptionError(
                f"Key {key!r} cannot be written to an env file",
                details={"key": key},
            )
        out.append(f'{key}="{_escape(str(value))}"')
    return "".join(f"{line}\n" for line in out)
