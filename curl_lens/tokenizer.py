"""Shell-like tokenizer and command extraction for pasted curl commands.

Handles single quotes, double quotes, backslash escapes and line
continuations. Nothing is ever expanded or evaluated.
"""

from __future__ import annotations

import re

from curl_lens.models import Token

# Backslash, optional trailing blanks, newline, indentation of the next line
LINE_CONTINUATION_RE = re.compile(r"\\\s*\r?\n\s*")

WHITESPACE_RE = re.compile(r"\s+")

# "curl" as a whole word at the start of a line, optionally behind a prompt
CURL_LINE_RE = re.compile(r"^(?:[$%>]\s*)?(curl(?:\s|$).*)$")


def tokenize(text: str) -> list[Token]:
    """Split ``text`` into shell-like tokens.

    Bare words end at whitespace and keep any backslash-escaped character
    literally. Single quotes are fully literal. Inside double quotes only
    ``\\"`` and ``\\\\`` are unescaped; other escapes keep their backslash.
    An unterminated quote still yields its accumulated token.

    Args:
        text: A command string, ideally with line continuations removed.

    Returns:
        The non-empty tokens in input order.
    """
    tokens: list[Token] = []
    current = ""
    in_single = False
    in_double = False
    i = 0
    length = len(text)

    def flush_bare() -> None:
        nonlocal current
        value = current.strip()
        if value:
            tokens.append(Token(value, quoted=False))
        current = ""

    def flush_quoted(quote: str) -> None:
        nonlocal current
        if current:
            tokens.append(Token(current, quoted=True, quote_type=quote))
        current = ""

    while i < length:
        char = text[i]
        next_char = text[i + 1] if i + 1 < length else None

        if in_single:
            if char == "'":
                in_single = False
                flush_quoted("'")
            else:
                current += char
            i += 1
            continue

        if in_double:
            if char == "\\" and next_char is not None:
                if next_char in ('"', "\\"):
                    current += next_char
                else:
                    current += char + next_char
                i += 2
                continue
            if char == '"':
                in_double = False
                flush_quoted('"')
            else:
                current += char
            i += 1
            continue

        if char == "'":
            flush_bare()
            in_single = True
        elif char == '"':
            flush_bare()
            in_double = True
        elif char == "\\" and next_char is not None:
            current += next_char
            i += 2
            continue
        elif char.isspace():
            flush_bare()
        else:
            current += char
        i += 1

    if in_single:
        flush_quoted("'")
    elif in_double:
        flush_quoted('"')
    else:
        flush_bare()

    return [token for token in tokens if token.value]


def normalize_line_continuations(text: str) -> str:
    """Replace every backslash-newline continuation with a single space."""
    return LINE_CONTINUATION_RE.sub(" ", text)


def normalize_whitespace(text: str) -> str:
    """Remove line continuations and collapse all whitespace runs.

    Only meant for display: quoted whitespace is collapsed as well.
    """
    return WHITESPACE_RE.sub(" ", normalize_line_continuations(text)).strip()


def extract_curl_command(text: str) -> str | None:
    """Locate a curl command inside surrounding text.

    The command starts at the first line that begins with ``curl`` (a
    leading ``$``, ``%`` or ``>`` prompt is dropped) and runs to the end of
    the text. If no line qualifies but the first token of the text is
    ``curl`` (e.g. a quoted ``'curl'``), the text is returned from there.

    Returns:
        The command text, or None when no curl command can be found.
    """
    stripped = text.lstrip()
    lines = stripped.splitlines()

    for index, line in enumerate(lines):
        match = CURL_LINE_RE.match(line.strip())
        if match:
            return "\n".join([match.group(1)] + lines[index + 1 :])

    tokens = tokenize(stripped)
    if tokens and tokens[0].value == "curl":
        return stripped

    return None


def is_curl_command(text: str) -> bool:
    """Return True when the first non-empty line of ``text`` is a curl call.

    Used to decide whether pasted text should be routed to the parser.
    """
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        return line == "curl" or line.startswith("curl ")
    return False
