"""Quote handling for raw option values.

Option values may be wrapped in single quotes, double quotes or backticks.
The raw form is what sources store; getters call :func:`unquote` so that
``host='db'`` and ``host=db`` resolve the same way.
"""

from __future__ import annotations

QUOTE_CHARS = frozenset("'\"`")

#: Stored form of an explicitly empty string value (``--foo=`` or ``foo=``).
EMPTY_SENTINEL = "''"


def trim_quotes(value: str) -> tuple[str, str]:
    """Strip one fully-wrapping pair of quotes and unescape the contents.

    Surrounding whitespace is always trimmed. Nothing is unquoted or
    unescaped unless the *entire* value is wrapped in a single pair of
    matching quotes.

    Returns:
        Tuple of (unquoted value, quote character removed or ``""``).

    Example:
        >>> trim_quotes(" 'it\\\\'s' ")
        ("it's", "'")
        >>> trim_quotes("'a' 'b'")
        ("'a' 'b'", '')
        >>> trim_quotes('"')
        ('"', '')
    """
    value = value.strip()
    if len(value) < 2:
        return value, ""
    quote = value[0]
    if quote not in QUOTE_CHARS or value[-1] != quote:
        return value, ""

    chars: list[str] = []
    escape_next = False
    for char in value[1:-1]:
        if char == quote and not escape_next:
            # unescaped terminating quote midway: value is not fully wrapped
            return value, ""
        if char == "\\" and not escape_next:
            escape_next = True
            continue
        escape_next = False
        chars.append(char)
    return "".join(chars), quote


def unquote(value: str) -> str:
    """Return ``value`` trimmed, with any fully-wrapping quotes removed.

    Example:
        >>> unquote("''")
        ''
        >>> unquote('"db.example.com"')
        'db.example.com'
        >>> unquote("plain")
        'plain'
    """
    return trim_quotes(value)[0]


__all__ = [
    "EMPTY_SENTINEL",
    "QUOTE_CHARS",
    "trim_quotes",
    "unquote",
]
