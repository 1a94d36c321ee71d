"""Line-level grammar of ini-style option files.

Each physical line is one of: blank, comment (``;`` or ``#``), section
header (``[name]``), a bare option name, or ``name=value``. Values may be
quoted with ``'``, ``"`` or backticks, may contain backslash escapes, and may
be followed by an inline ``#`` comment.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .option import normalize_option_token
from .quoting import QUOTE_CHARS


class LineKind(Enum):
    """Classification of a physical option-file line."""

    BLANK = "blank"
    COMMENT = "comment"
    SECTION_HEADER = "section_header"
    KEY_ONLY = "key_only"
    KEY_VALUE = "key_value"


@dataclass(frozen=True, slots=True)
class ParsedLine:
    """Components of one option-file line."""

    kind: LineKind
    section_name: str = ""
    key: str = ""
    value: str = ""
    comment: str = ""
    is_loose: bool = False


class LineSyntaxError(ValueError):
    """A line violates the option-file grammar.

    Carries only the problem description; the file parser adds the path and
    line number.
    """


def _parse_section_header(line: str) -> ParsedLine:
    end = line.find("]")
    hash_at = line.find("#")
    if end == -1 or -1 < hash_at < end:
        raise LineSyntaxError("unterminated section name")
    after = line[end + 1 : hash_at] if hash_at > -1 else line[end + 1 :]
    if after.strip():
        raise LineSyntaxError("extra characters after section name")
    comment = line[hash_at + 1 :] if hash_at > -1 else ""
    return ParsedLine(LineKind.SECTION_HEADER, section_name=line[1:end], comment=comment)


def _split_inline_comment(line: str) -> tuple[str, str]:
    in_value = False
    escape_next = False
    in_quote = ""
    for position, char in enumerate(line):
        if escape_next:
            escape_next = False
            continue
        if char == "#" and not in_quote:
            return line[:position], line[position + 1 :]
        if not in_value:
            if char == "=":
                in_value = True
            elif char in QUOTE_CHARS or char == "\\":
                raise LineSyntaxError(f"Illegal character {char} in option name")
            continue
        if char in QUOTE_CHARS:
            if char == in_quote:
                in_quote = ""
            elif not in_quote:
                in_quote = char
        elif char == "\\":
            escape_next = True

    if in_quote:
        raise LineSyntaxError("Quoted value has no terminating quote")
    if escape_next:
        raise LineSyntaxError("Value ends in a single backslash")
    return line, ""


def parse_line(line: str) -> ParsedLine:
    """Parse one physical line of an option file.

    Raises:
        LineSyntaxError: The line is malformed.

    Example:
        >>> parse_line("  [production] # live").section_name
        'production'
        >>> parsed = parse_line("skip_verify # no checks")
        >>> parsed.kind.value, parsed.key, parsed.value
        ('key_value', 'verify', '0')
        >>> parse_line("password='a#b' # quoted hash").value
        "'a#b'"
    """
    line = line.lstrip()
    if not line:
        return ParsedLine(LineKind.BLANK)
    if line[0] in ";#":
        return ParsedLine(LineKind.COMMENT, comment=line[1:])
    if line[0] == "[":
        return _parse_section_header(line)

    body, comment = _split_inline_comment(line)
    key, value, has_value, loose = normalize_option_token(body)
    kind = LineKind.KEY_VALUE if has_value else LineKind.KEY_ONLY
    return ParsedLine(kind, key=key, value=value, comment=comment, is_loose=loose)


__all__ = [
    "LineKind",
    "LineSyntaxError",
    "ParsedLine",
    "parse_line",
]
