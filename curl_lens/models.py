"""Data model for parsed curl commands.

Every container exposes ``to_dict()`` which returns the plain, JSON-safe
shape consumed by callers (camelCase keys, unset optional fields omitted).
"""

from __future__ import annotations

HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS")

BODY_KINDS = ("none", "text", "json", "urlencoded", "multipart")

COOKIE_SOURCES = ("cookie-flag", "cookie-header")

# Warning codes (closed set)
UNSUPPORTED_COOKIE_FILE = "UNSUPPORTED_COOKIE_FILE"
UNSUPPORTED_DATA_FILE = "UNSUPPORTED_DATA_FILE"
UNSUPPORTED_CONFIG_FILE = "UNSUPPORTED_CONFIG_FILE"
INSECURE_TLS = "INSECURE_TLS"
SHELL_EXPANSION = "SHELL_EXPANSION"

WARNING_CODES = (
    UNSUPPORTED_COOKIE_FILE,
    UNSUPPORTED_DATA_FILE,
    UNSUPPORTED_CONFIG_FILE,
    INSECURE_TLS,
    SHELL_EXPANSION,
)

UNSUPPORTED_FILE_PATH = "unsupported-file-path"


class Token:
    """A shell-like word produced by the tokenizer."""

    __slots__ = ("value", "quoted", "quote_type")

    def __init__(
        self, value: str, quoted: bool = False, quote_type: str | None = None
    ) -> None:
        self.value = value
        self.quoted = quoted
        self.quote_type = quote_type

    def __repr__(self) -> str:
        return (
            f"Token(value={self.value!r}, quoted={self.quoted!r}, "
            f"quote_type={self.quote_type!r})"
        )

    def to_dict(self) -> dict:
        data = {"value": self.value, "quoted": self.quoted}
        if self.quote_type is not None:
            data["quoteType"] = self.quote_type
        return data


class QueryParam:
    __slots__ = ("key", "value", "enabled")

    def __init__(self, key: str, value: str, enabled: bool = True) -> None:
        self.key = key
        self.value = value
        self.enabled = enabled

    def __repr__(self) -> str:
        return f"QueryParam({self.key!r}, {self.value!r})"

    def to_dict(self) -> dict:
        return {"key": self.key, "value": self.value, "enabled": self.enabled}


class Header:
    __slots__ = ("key", "value", "enabled", "sensitive")

    def __init__(
        self,
        key: str,
        value: str,
        enabled: bool = True,
        sensitive: bool = False,
    ) -> None:
        self.key = key
        self.value = value
        self.enabled = enabled
        self.sensitive = sensitive

    def __repr__(self) -> str:
        return (
            f"Header({self.key!r}, "
            f"{'<sensitive>' if self.sensitive else repr(self.value)})"
        )

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "value": self.value,
            "enabled": self.enabled,
            "sensitive": self.sensitive,
        }


class CookieItem:
    __slots__ = ("key", "value", "sensitive")

    def __init__(self, key: str, value: str, sensitive: bool = True) -> None:
        self.key = key
        self.value = value
        self.sensitive = sensitive

    def __repr__(self) -> str:
        return f"CookieItem({self.key!r})"

    def to_dict(self) -> dict:
        return {"key": self.key, "value": self.value, "sensitive": self.sensitive}


class Cookies:
    """The single cookie source kept for a request (``-b`` or a Cookie header)."""

    __slots__ = ("raw", "items", "source")

    def __init__(self, raw: str, items: list[CookieItem], source: str) -> None:
        if source not in COOKIE_SOURCES:
            raise ValueError(f"Unknown cookie source: {source!r}")
        self.raw = raw
        self.items = items
        self.source = source

    def __repr__(self) -> str:
        return f"Cookies(source={self.source!r}, items=<{len(self.items)} items>)"

    def to_dict(self) -> dict:
        return {
            "raw": self.raw,
            "items": [item.to_dict() for item in self.items],
            "source": self.source,
        }


class UrlencodedItem:
    __slots__ = ("key", "value")

    def __init__(self, key: str, value: str) -> None:
        self.key = key
        self.value = value

    def __repr__(self) -> str:
        return f"UrlencodedItem({self.key!r}, {self.value!r})"

    def to_dict(self) -> dict:
        return {"key": self.key, "value": self.value}


class MultipartField:
    """A ``-F key=value`` form field."""

    __slots__ = ("key", "value")

    kind = "field"

    def __init__(self, key: str, value: str) -> None:
        self.key = key
        self.value = value

    def __repr__(self) -> str:
        return f"MultipartField({self.key!r}, {self.value!r})"

    def to_dict(self) -> dict:
        return {"kind": self.kind, "key": self.key, "value": self.value}


class MultipartFile:
    """A ``-F key=@path`` upload. Only the path is kept, never the content."""

    __slots__ = ("key", "path", "filename")

    kind = "file"
    note = UNSUPPORTED_FILE_PATH

    def __init__(
        self, key: str, path: str | None = None, filename: str | None = None
    ) -> None:
        self.key = key
        self.path = path
        self.filename = filename

    def __repr__(self) -> str:
        return f"MultipartFile({self.key!r}, path={self.path!r})"

    def to_dict(self) -> dict:
        data = {"kind": self.kind, "key": self.key}
        if self.filename is not None:
            data["filename"] = self.filename
        if self.path is not None:
            data["path"] = self.path
        data["note"] = self.note
        return data


class Body:
    """Request body, tagged by ``kind``.

    Exactly one payload attribute is populated and it always matches the
    kind: ``text`` for ``text``/``json``, ``urlencoded_items`` for
    ``urlencoded``, ``multipart_items`` for ``multipart`` and none of them
    for ``none``.

    Raises:
        ValueError: If the kind is unknown or the payload does not match it.
    """

    __slots__ = ("kind", "text", "urlencoded_items", "multipart_items")

    def __init__(
        self,
        kind: str,
        text: str | None = None,
        urlencoded_items: list[UrlencodedItem] | None = None,
        multipart_items: list[MultipartField | MultipartFile] | None = None,
    ) -> None:
        if kind not in BODY_KINDS:
            raise ValueError(f"Unknown body kind: {kind!r}")

        populated = {
            name
            for name, value in (
                ("text", text),
                ("urlencoded_items", urlencoded_items),
                ("multipart_items", multipart_items),
            )
            if value is not None
        }
        expected = {
            "none": set(),
            "text": {"text"},
            "json": {"text"},
            "urlencoded": {"urlencoded_items"},
            "multipart": {"multipart_items"},
        }[kind]
        if populated != expected:
            raise ValueError(
                f"Body of kind {kind!r} must carry exactly "
                f"{sorted(expected) or 'no payload'}, got {sorted(populated)}"
            )

        self.kind = kind
        self.text = text
        self.urlencoded_items = urlencoded_items
        self.multipart_items = multipart_items

    def __repr__(self) -> str:
        return f"Body(kind={self.kind!r})"

    def to_dict(self) -> dict:
        data: dict = {"kind": self.kind}
        if self.text is not None:
            data["text"] = self.text
        if self.urlencoded_items is not None:
            data["urlencodedItems"] = [i.to_dict() for i in self.urlencoded_items]
        if self.multipart_items is not None:
            data["multipartItems"] = [i.to_dict() for i in self.multipart_items]
        return data


class BasicAuth:
    __slots__ = ("user", "password")

    def __init__(self, user: str, password: str) -> None:
        self.user = user
        self.password = password

    def __repr__(self) -> str:
        return f"BasicAuth(user={self.user!r}, password=<hidden>)"

    def to_dict(self) -> dict:
        return {"user": self.user, "password": self.password}


class Options:
    """Sparse record of recognised curl options; ``None`` means not given."""

    __slots__ = ("follow_redirects", "insecure_tls", "compressed", "basic_auth")

    def __init__(
        self,
        follow_redirects: bool | None = None,
        insecure_tls: bool | None = None,
        compressed: bool | None = None,
        basic_auth: BasicAuth | None = None,
    ) -> None:
        self.follow_redirects = follow_redirects
        self.insecure_tls = insecure_tls
        self.compressed = compressed
        self.basic_auth = basic_auth

    def __repr__(self) -> str:
        return f"Options({self.to_dict()!r})"

    def to_dict(self) -> dict:
        data: dict = {}
        if self.follow_redirects is not None:
            data["followRedirects"] = self.follow_redirects
        if self.insecure_tls is not None:
            data["insecureTLS"] = self.insecure_tls
        if self.compressed is not None:
            data["compressed"] = self.compressed
        if self.basic_auth is not None:
            data["basicAuth"] = self.basic_auth.to_dict()
        return data


class CurlRequest:
    """The HTTP request described by a curl command."""

    __slots__ = (
        "method",
        "url",
        "url_decoded",
        "query",
        "headers",
        "cookies",
        "body",
        "options",
    )

    def __init__(
        self,
        method: str = "GET",
        url: str = "",
        url_decoded: str | None = None,
        query: list[QueryParam] | None = None,
        headers: list[Header] | None = None,
        cookies: Cookies | None = None,
        body: Body | None = None,
        options: Options | None = None,
    ) -> None:
        self.method = method
        self.url = url
        self.url_decoded = url_decoded
        self.query = query if query is not None else []
        self.headers = headers if headers is not None else []
        self.cookies = cookies
        self.body = body
        self.options = options if options is not None else Options()

    def __repr__(self) -> str:
        return (
            f"CurlRequest(method={self.method!r}, url={self.url!r}, "
            f"headers=<{len(self.headers)} headers>, "
            f"body={'<' + self.body.kind + '>' if self.body else '<none>'})"
        )

    def get_header(self, name: str) -> Header | None:
        """Return the first header named ``name`` (case-insensitive)."""
        lowered = name.lower()
        for header in self.headers:
            if header.key.lower() == lowered:
                return header
        return None

    def to_dict(self) -> dict:
        data: dict = {"method": self.method, "url": self.url}
        if self.url_decoded is not None:
            data["urlDecoded"] = self.url_decoded
        data["query"] = [q.to_dict() for q in self.query]
        data["headers"] = [h.to_dict() for h in self.headers]
        if self.cookies is not None:
            data["cookies"] = self.cookies.to_dict()
        if self.body is not None:
            data["body"] = self.body.to_dict()
        data["options"] = self.options.to_dict()
        return data


class CurlWarning:
    __slots__ = ("code", "message")

    def __init__(self, code: str, message: str) -> None:
        if code not in WARNING_CODES:
            raise ValueError(f"Unknown warning code: {code!r}")
        self.code = code
        self.message = message

    def __repr__(self) -> str:
        return f"CurlWarning({self.code!r}, {self.message!r})"

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class CurlParseResult:
    """Outcome of a single ``parse_curl`` call."""

    __slots__ = ("original", "normalized", "request", "warnings")

    def __init__(
        self,
        original: str,
        normalized: str,
        request: CurlRequest,
        warnings: list[CurlWarning],
    ) -> None:
        self.original = original
        self.normalized = normalized
        self.request = request
        self.warnings = warnings

    def __repr__(self) -> str:
        return (
            f"CurlParseResult(request={self.request!r}, "
            f"warnings=<{len(self.warnings)} warnings>)"
        )

    def to_dict(self) -> dict:
        return {
            "original": self.original,
            "normalized": self.normalized,
            "request": self.request.to_dict(),
            "warnings": [w.to_dict() for w in self.warnings],
        }
