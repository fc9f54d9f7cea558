"""curl command parsing engine.

Converts a pasted curl command (possibly surrounded by other text) into a
structured ``CurlRequest`` plus a list of non-fatal warnings for anything
that cannot be represented faithfully.
"""

from __future__ import annotations

import base64
import json
from urllib.parse import parse_qsl, quote, unquote

from urllib3.exceptions import LocationParseError
from urllib3.util import make_headers, parse_url

from curl_lens.models import (
    HTTP_METHODS,
    INSECURE_TLS,
    SHELL_EXPANSION,
    UNSUPPORTED_CONFIG_FILE,
    UNSUPPORTED_COOKIE_FILE,
    UNSUPPORTED_DATA_FILE,
    BasicAuth,
    Body,
    CookieItem,
    Cookies,
    CurlParseResult,
    CurlRequest,
    CurlWarning,
    Header,
    MultipartField,
    MultipartFile,
    QueryParam,
    Token,
    UrlencodedItem,
)
from curl_lens.tokenizer import (
    extract_curl_command,
    normalize_line_continuations,
    tokenize,
)

# Header names whose values are credentials (compared lower-cased)
SENSITIVE_HEADERS = frozenset(
    {
        "authorization",
        "proxy-authorization",
        "cookie",
        "x-api-key",
        "x-auth-token",
        "api-key",
        "access-token",
        "bearer",
    }
)

SHELL_EXPANSION_MARKERS = ("$(", "$", "`")

COOKIE_FILE_MARKERS = (".txt", "/", "\\")


class CurlParseError(ValueError):
    """Raised when the input does not contain a curl command."""


# --- Small helpers ---------------------------------------------------------


def is_sensitive_header(name: str) -> bool:
    """Return True when header ``name`` carries credentials (case-insensitive)."""
    return name.lower() in SENSITIVE_HEADERS


def _percent_decode(value: str) -> str:
    try:
        return unquote(value, errors="strict")
    except UnicodeDecodeError:
        return value


def decode_url(url: str) -> str:
    """Percent-decode a URL for display, returning it unchanged if invalid."""
    return _percent_decode(url)


def decode_cookie(value: str) -> str:
    """Percent-decode a cookie value, returning it unchanged if invalid."""
    return _percent_decode(value)


def encode_url(url: str) -> str:
    """Percent-encode a whole URL as a single component, for export."""
    return quote(url, safe="!~*'()")


def parse_cookie_string(raw: str) -> list[tuple[str, str]]:
    """Split ``"a=b; c=d"`` into ``[("a", "b"), ("c", "d")]``.

    Parts without ``=`` become a key with an empty value.
    """
    items: list[tuple[str, str]] = []
    for part in raw.split(";"):
        part = part.strip()
        if not part:
            continue
        key, sep, value = part.partition("=")
        items.append((key.strip(), value.strip() if sep else ""))
    return items


def _split_pairs(text: str) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for pair in text.split("&"):
        if not pair:
            continue
        key, _, value = pair.partition("=")
        pairs.append((_percent_decode(key), _percent_decode(value)))
    return pairs


def extract_query_params(url: str) -> list[QueryParam]:
    """Extract decoded query parameters from ``url``.

    The URL is parsed with urllib3 first; when that fails (malformed URL)
    the query string is split by hand and each key and value is decoded
    on its own. A key without ``=`` yields an empty value.
    """
    try:
        parsed = parse_url(url)
    except LocationParseError:
        _, sep, query = url.partition("?")
        if not sep:
            return []
        query = query.split("#", 1)[0]
        return [QueryParam(key, value) for key, value in _split_pairs(query)]

    if not parsed.query:
        return []
    return [
        QueryParam(key, value)
        for key, value in parse_qsl(parsed.query, keep_blank_values=True)
    ]


def detect_body_type(content: str, headers: list[Header]) -> str:
    """Infer the body kind of ``content``.

    Ordered heuristics, first match wins:
      - Content-Type header (json, x-www-form-urlencoded, multipart)
      - bracket-delimited content that parses as JSON
      - single-line content containing ``=``  -> urlencoded
      - anything else                          -> text
    """
    for header in headers:
        if header.key.lower() != "content-type":
            continue
        content_type = header.value.lower()
        if "application/json" in content_type:
            return "json"
        if "application/x-www-form-urlencoded" in content_type:
            return "urlencoded"
        if "multipart/form-data" in content_type:
            return "multipart"
        break

    trimmed = content.strip()
    if (trimmed.startswith("{") and trimmed.endswith("}")) or (
        trimmed.startswith("[") and trimmed.endswith("]")
    ):
        try:
            json.loads(trimmed)
        except ValueError:
            pass
        else:
            return "json"

    if "=" in content and "\n" not in content:
        return "urlencoded"

    return "text"


def parse_urlencoded_body(content: str) -> list[UrlencodedItem]:
    """Split an ``a=1&b=2`` body into percent-decoded items."""
    return [UrlencodedItem(key, value) for key, value in _split_pairs(content)]


def basic_auth_header(user: str, password: str) -> str:
    """Return the ``Authorization`` value for HTTP basic auth."""
    credentials = f"{user}:{password}"
    try:
        return make_headers(basic_auth=credentials)["authorization"]
    except UnicodeEncodeError:
        # urllib3 only encodes latin-1 credentials
        encoded = base64.b64encode(credentials.encode("utf-8")).decode("ascii")
        return f"Basic {encoded}"


# --- Flag parsing ----------------------------------------------------------


class _ParseState:
    """Mutable draft threaded through a single ``parse_curl`` call."""

    __slots__ = (
        "request",
        "warnings",
        "has_body",
        "has_get_flag",
        "explicit_method",
        "data_parts",
        "body_kind",
        "multipart_items",
        "explicit_url",
        "positional",
    )

    def __init__(self) -> None:
        self.request = CurlRequest()
        self.warnings: list[CurlWarning] = []
        self.has_body = False
        self.has_get_flag = False
        self.explicit_method = False
        self.data_parts: list[str] = []
        self.body_kind: str | None = None
        self.multipart_items: list[MultipartField | MultipartFile] = []
        self.explicit_url: str | None = None
        self.positional: list[str] = []

    def warn(self, code: str, message: str) -> None:
        self.warnings.append(CurlWarning(code, message))

    def add_header(self, key: str, value: str) -> None:
        self.request.headers.append(
            Header(key, value, sensitive=is_sensitive_header(key))
        )


def _set_method(state: _ParseState, value: str) -> None:
    method = value.upper()
    if method in HTTP_METHODS:
        state.request.method = method
        state.explicit_method = True


def _set_get(state: _ParseState, _value: None) -> None:
    state.has_get_flag = True


def _set_head(state: _ParseState, _value: None) -> None:
    state.request.method = "HEAD"
    state.explicit_method = True


def _add_header(state: _ParseState, value: str) -> None:
    key, sep, header_value = value.partition(":")
    if not sep:
        return
    key = key.strip()
    header_value = header_value.strip()

    if key.lower() == "cookie" and state.request.cookies is None:
        state.request.cookies = Cookies(
            raw=header_value,
            items=[
                CookieItem(k, v, sensitive=is_sensitive_header("cookie"))
                for k, v in parse_cookie_string(header_value)
            ],
            source="cookie-header",
        )

    state.add_header(key, header_value)


def _header_setter(name: str):
    def handler(state: _ParseState, value: str) -> None:
        state.add_header(name, value)

    return handler


def _set_cookie(state: _ParseState, value: str) -> None:
    if any(marker in value for marker in COOKIE_FILE_MARKERS):
        state.warn(
            UNSUPPORTED_COOKIE_FILE,
            f"Cookie file not supported: {value}. "
            "Please paste the cookie string directly.",
        )
        return
    if state.request.cookies is None:
        state.request.cookies = Cookies(
            raw=value,
            items=[CookieItem(k, v) for k, v in parse_cookie_string(value)],
            source="cookie-flag",
        )


def _add_data(state: _ParseState, value: str) -> bool:
    if value.startswith("@"):
        state.warn(
            UNSUPPORTED_DATA_FILE,
            f"Data file not supported: {value}. Please paste the data directly.",
        )
        return False
    state.data_parts.append(value)
    state.has_body = True
    return True


def _set_data(state: _ParseState, value: str) -> None:
    _add_data(state, value)


def _set_data_urlencode(state: _ParseState, value: str) -> None:
    if _add_data(state, value):
        state.body_kind = "urlencoded"


def _set_json(state: _ParseState, value: str) -> None:
    if not _add_data(state, value):
        return
    state.body_kind = "json"
    for name in ("Content-Type", "Accept"):
        if state.request.get_header(name) is None:
            state.add_header(name, "application/json")


def _add_form(state: _ParseState, value: str) -> None:
    state.body_kind = "multipart"
    state.has_body = True

    key, sep, field_value = value.partition("=")
    if not sep:
        return
    if field_value.startswith("@"):
        # "@path;type=text/plain;filename=name" carries optional attributes
        path, *attributes = field_value[1:].split(";")
        filename = None
        for attribute in attributes:
            name, _, attr_value = attribute.partition("=")
            if name.strip().lower() == "filename":
                filename = attr_value.strip().strip('"')
        state.multipart_items.append(
            MultipartFile(key, path=path, filename=filename)
        )
    else:
        state.multipart_items.append(MultipartField(key, field_value))


def _set_follow_redirects(state: _ParseState, _value: None) -> None:
    state.request.options.follow_redirects = True


def _set_insecure(state: _ParseState, _value: None) -> None:
    state.request.options.insecure_tls = True
    state.warn(
        INSECURE_TLS,
        "Insecure TLS (-k) disables certificate verification and cannot be "
        "reproduced faithfully.",
    )


def _set_compressed(state: _ParseState, _value: None) -> None:
    state.request.options.compressed = True


def _set_user(state: _ParseState, value: str) -> None:
    user, _, password = value.partition(":")
    state.request.options.basic_auth = BasicAuth(user, password)
    state.request.headers.append(
        Header("Authorization", basic_auth_header(user, password), sensitive=True)
    )


def _set_config(state: _ParseState, value: str) -> None:
    state.warn(
        UNSUPPORTED_CONFIG_FILE,
        f"Config file not supported: {value}. Please paste the command directly.",
    )


def _set_url(state: _ParseState, value: str) -> None:
    state.explicit_url = value


def _ignore(state: _ParseState, value: str) -> None:
    pass


# flag -> (handler, takes_value)
FLAG_HANDLERS = {
    "-X": (_set_method, True),
    "--request": (_set_method, True),
    "-G": (_set_get, False),
    "--get": (_set_get, False),
    "-I": (_set_head, False),
    "--head": (_set_head, False),
    "-H": (_add_header, True),
    "--header": (_add_header, True),
    "-A": (_header_setter("User-Agent"), True),
    "--user-agent": (_header_setter("User-Agent"), True),
    "-e": (_header_setter("Referer"), True),
    "--referer": (_header_setter("Referer"), True),
    "-b": (_set_cookie, True),
    "--cookie": (_set_cookie, True),
    "-d": (_set_data, True),
    "--data": (_set_data, True),
    "--data-raw": (_set_data, True),
    "--data-binary": (_set_data, True),
    "--data-ascii": (_set_data, True),
    "--data-urlencode": (_set_data_urlencode, True),
    "--json": (_set_json, True),
    "-F": (_add_form, True),
    "--form": (_add_form, True),
    "-L": (_set_follow_redirects, False),
    "--location": (_set_follow_redirects, False),
    "-k": (_set_insecure, False),
    "--insecure": (_set_insecure, False),
    "--compressed": (_set_compressed, False),
    "-u": (_set_user, True),
    "--user": (_set_user, True),
    "-K": (_set_config, True),
    "--config": (_set_config, True),
    "--url": (_set_url, True),
    "-o": (_ignore, True),
    "--output": (_ignore, True),
    "-w": (_ignore, True),
    "--write-out": (_ignore, True),
    "-m": (_ignore, True),
    "--max-time": (_ignore, True),
    "--connect-timeout": (_ignore, True),
    "-x": (_ignore, True),
    "--proxy": (_ignore, True),
    "--retry": (_ignore, True),
    "-r": (_ignore, True),
    "--range": (_ignore, True),
    "-c": (_ignore, True),
    "--cookie-jar": (_ignore, True),
}


def _check_shell_expansion(state: _ParseState, value: str) -> None:
    if any(marker in value for marker in SHELL_EXPANSION_MARKERS):
        state.warn(
            SHELL_EXPANSION,
            f"Shell expansion detected: {value}. "
            "Variable substitution is not supported.",
        )


def _is_flag(value: str) -> bool:
    return value.startswith("-")


def _walk_tokens(state: _ParseState, tokens: list[Token]) -> None:
    i = 1
    while i < len(tokens):
        value = tokens[i].value
        entry = FLAG_HANDLERS.get(value)

        if entry is None:
            _check_shell_expansion(state, value)
            if not _is_flag(value):
                state.positional.append(value)
            i += 1
            continue

        handler, takes_value = entry
        if not takes_value:
            handler(state, None)
            i += 1
            continue

        if i + 1 < len(tokens):
            argument = tokens[i + 1].value
            _check_shell_expansion(state, argument)
            handler(state, argument)
            i += 2
        else:
            i += 1


def _resolve_url(state: _ParseState) -> None:
    request = state.request

    if state.explicit_url is not None:
        url = state.explicit_url
        request.url = url
        request.url_decoded = decode_url(url)
        request.query = extract_query_params(url)
        return

    for value in reversed(state.positional):
        if value.startswith(("http://", "https://")):
            request.url = value
            request.url_decoded = decode_url(value)
            request.query = extract_query_params(value)
            return

    # Relative URL or bare host
    if state.positional:
        value = state.positional[-1]
        request.url = value
        request.url_decoded = value
        request.query = extract_query_params(value)


def _build_body(state: _ParseState) -> Body | None:
    if not state.has_body:
        return None
    if not state.data_parts and not state.multipart_items:
        return None

    content = "&".join(state.data_parts)
    kind = state.body_kind or detect_body_type(content, state.request.headers)

    if kind == "urlencoded":
        return Body(kind, urlencoded_items=parse_urlencoded_body(content))
    if kind == "multipart":
        return Body(kind, multipart_items=list(state.multipart_items))
    return Body(kind, text=content)


def parse_curl(text: str) -> CurlParseResult:
    """Parse a curl command into a structured request.

    Handles:
      - Commands pasted with surrounding text, prompts or line continuations
      - Method flags and body-driven POST inference (suppressed by ``-G``)
      - Headers, cookies (first source wins), basic auth
      - Body kinds: json, urlencoded, multipart, text
      - Last positional URL wins; query parameters decoded from it

    Unsupported constructs (data/cookie/config files, shell expansion,
    insecure TLS) are reported as warnings and never stop the parse.

    Args:
        text: Arbitrary text expected to contain a curl command.

    Returns:
        A CurlParseResult with the request and any warnings.

    Raises:
        CurlParseError: If no command starting with ``curl`` is found.
    """
    original = text.strip()
    normalized = normalize_line_continuations(original)
    command = extract_curl_command(normalized) or normalized

    tokens = tokenize(command)
    if not tokens or tokens[0].value != "curl":
        raise CurlParseError('Invalid cURL command: must start with "curl"')

    state = _ParseState()
    _walk_tokens(state, tokens)
    _resolve_url(state)

    request = state.request
    if (
        state.has_body
        and request.method == "GET"
        and not state.has_get_flag
        and not state.explicit_method
    ):
        request.method = "POST"

    request.body = _build_body(state)

    return CurlParseResult(
        original=original,
        normalized=normalized,
        request=request,
        warnings=state.warnings,
    )


def load_command_file(filepath: str) -> str:
    """Read and return the contents of a file holding a curl command.

    Raises:
        FileNotFoundError: If the file does not exist.
        IOError: If the file cannot be read.
    """
    with open(filepath, "r", encoding="utf-8") as fh:
        return fh.read()
