"""Rendering of parse results for the terminal.

Prints a banner-framed report of a parsed curl command, masking credential
values unless asked not to, or dumps the result as JSON.
"""

from __future__ import annotations

import json

from curl_lens.models import CurlParseResult, MultipartFile
from curl_lens.parser import decode_cookie, encode_url as percent_encode_url

MASK = "********"


def mask_value(value: str, hide: bool = True) -> str:
    """Return ``value`` or a fixed mask when ``hide`` is set."""
    if hide and value:
        return MASK
    return value


def to_json(
    result: CurlParseResult, indent: int | None = 2, encode_url: bool = False
) -> str:
    """Serialize a parse result to JSON.

    With ``encode_url`` the request URL is exported fully percent-encoded.
    """
    data = result.to_dict()
    if encode_url:
        data["request"]["url"] = percent_encode_url(result.request.url)
    return json.dumps(data, indent=indent, ensure_ascii=False)


def format_report(
    result: CurlParseResult,
    hide_sensitive: bool = True,
    decode_url: bool = True,
    decode_cookies: bool = True,
) -> str:
    """Build the human-readable report for ``result``.

    Args:
        result: The parse result to describe.
        hide_sensitive: Mask sensitive header and cookie values.
        decode_url: Show the percent-decoded URL instead of the raw one.
        decode_cookies: Percent-decode cookie values.

    Returns:
        The report text, without a trailing newline.
    """
    request = result.request
    banner = "=" * 60
    lines = [banner, "  CURL-LENS: Parsed Request", banner, ""]

    url = request.url_decoded if decode_url and request.url_decoded else request.url
    lines.append(f"  Method : {request.method}")
    lines.append(f"  URL    : {url or '<none>'}")

    if request.query:
        lines.append("\n  Query:")
        for param in request.query:
            lines.append(f"    {param.key} = {param.value}")

    if request.headers:
        lines.append("\n  Headers:")
        for header in request.headers:
            value = mask_value(header.value, hide_sensitive and header.sensitive)
            lines.append(f"    {header.key}: {value}")

    if request.cookies is not None:
        lines.append(f"\n  Cookies ({request.cookies.source}):")
        for item in request.cookies.items:
            value = decode_cookie(item.value) if decode_cookies else item.value
            value = mask_value(value, hide_sensitive and item.sensitive)
            lines.append(f"    {item.key} = {value}")

    body = request.body
    if body is not None:
        lines.append(f"\n  Body ({body.kind}):")
        if body.text is not None:
            for text_line in body.text.splitlines() or [""]:
                lines.append(f"    {text_line}")
        for item in body.urlencoded_items or ():
            lines.append(f"    {item.key} = {item.value}")
        for item in body.multipart_items or ():
            if isinstance(item, MultipartFile):
                lines.append(f"    {item.key} = @{item.path} [{item.note}]")
            else:
                lines.append(f"    {item.key} = {item.value}")

    options = request.options
    enabled = [
        name
        for name, flag in (
            ("follow-redirects", options.follow_redirects),
            ("insecure-tls", options.insecure_tls),
            ("compressed", options.compressed),
        )
        if flag
    ]
    if options.basic_auth is not None:
        enabled.append(f"basic-auth ({options.basic_auth.user})")
    if enabled:
        lines.append(f"\n  Options: {', '.join(enabled)}")

    if result.warnings:
        lines.append("\n  Warnings:")
        for warning in result.warnings:
            lines.append(f"    [{warning.code}] {warning.message}")

    lines.append(f"\n{banner}")
    return "\n".join(lines)


def print_report(
    result: CurlParseResult,
    hide_sensitive: bool = True,
    decode_url: bool = True,
    decode_cookies: bool = True,
) -> None:
    """Print a formatted report of ``result`` to stdout."""
    print()
    print(
        format_report(
            result,
            hide_sensitive=hide_sensitive,
            decode_url=decode_url,
            decode_cookies=decode_cookies,
        )
    )
    print()
