"""Tests for the data model containers."""

import json

import pytest

from curl_lens.models import (
    WARNING_CODES,
    BasicAuth,
    Body,
    Cookies,
    CurlRequest,
    CurlWarning,
    Header,
    MultipartFile,
    Options,
    Token,
    UrlencodedItem,
)
from curl_lens.parser import parse_curl


class TestBody:
    """Tests for the Body tagged union."""

    def test_none_kind_has_no_payload(self):
        body = Body("none")
        assert body.to_dict() == {"kind": "none"}

    def test_text_and_json(self):
        assert Body("text", text="x").to_dict() == {"kind": "text", "text": "x"}
        assert Body("json", text="{}").text == "{}"

    def test_urlencoded(self):
        body = Body("urlencoded", urlencoded_items=[UrlencodedItem("a", "1")])
        assert body.to_dict() == {
            "kind": "urlencoded",
            "urlencodedItems": [{"key": "a", "value": "1"}],
        }

    def test_empty_multipart_is_valid(self):
        assert Body("multipart", multipart_items=[]).to_dict() == {
            "kind": "multipart",
            "multipartItems": [],
        }

    def test_missing_payload_raises(self):
        with pytest.raises(ValueError, match="must carry"):
            Body("json")

    def test_mixed_payload_raises(self):
        with pytest.raises(ValueError):
            Body("text", text="x", urlencoded_items=[])

    def test_payload_on_none_raises(self):
        with pytest.raises(ValueError):
            Body("none", text="")

    def test_unknown_kind_raises(self):
        with pytest.raises(ValueError, match="Unknown body kind"):
            Body("xml", text="<a/>")


class TestSerialization:
    """Tests for to_dict shapes."""

    def test_token_omits_missing_quote_type(self):
        assert Token("curl").to_dict() == {"value": "curl", "quoted": False}
        assert Token("a b", True, "'").to_dict() == {
            "value": "a b",
            "quoted": True,
            "quoteType": "'",
        }

    def test_multipart_file(self):
        item = MultipartFile("doc", path="/tmp/x.pdf")
        assert item.to_dict() == {
            "kind": "file",
            "key": "doc",
            "path": "/tmp/x.pdf",
            "note": "unsupported-file-path",
        }

    def test_options_are_sparse(self):
        assert Options().to_dict() == {}
        options = Options(follow_redirects=True, basic_auth=BasicAuth("u", "p"))
        assert options.to_dict() == {
            "followRedirects": True,
            "basicAuth": {"user": "u", "password": "p"},
        }

    def test_request_defaults(self):
        assert CurlRequest().to_dict() == {
            "method": "GET",
            "url": "",
            "query": [],
            "headers": [],
            "options": {},
        }

    def test_result_is_json_safe(self):
        result = parse_curl(
            "curl -u a:b -b 's=1' -F f=@/x -L 'https://h/?q=1' -k"
        )
        data = json.loads(json.dumps(result.to_dict()))
        assert data["request"]["method"] == "POST"
        assert data["request"]["urlDecoded"] == "https://h/?q=1"
        assert data["request"]["cookies"]["source"] == "cookie-flag"
        assert data["request"]["body"]["multipartItems"][0]["kind"] == "file"
        assert data["request"]["options"]["insecureTLS"] is True
        assert data["warnings"] == [
            {"code": "INSECURE_TLS", "message": result.warnings[0].message}
        ]


class TestValidation:
    """Tests for closed enumerations."""

    def test_unknown_warning_code_raises(self):
        with pytest.raises(ValueError):
            CurlWarning("SOMETHING_ELSE", "nope")

    def test_known_warning_codes(self):
        for code in WARNING_CODES:
            assert CurlWarning(code, "m").code == code

    def test_unknown_cookie_source_raises(self):
        with pytest.raises(ValueError):
            Cookies("a=1", [], "cookie-jar")


class TestReprs:
    """Tests for __repr__ output."""

    def test_sensitive_header_repr_hides_value(self):
        r = repr(Header("Authorization", "Bearer abc", sensitive=True))
        assert "Bearer abc" not in r
        assert "<sensitive>" in r

    def test_basic_auth_repr_hides_password(self):
        assert "secret" not in repr(BasicAuth("bob", "secret"))

    def test_request_repr(self):
        r = repr(parse_curl("curl -d a=1 https://h/").request)
        assert "POST" in r
        assert "<urlencoded>" in r

    def test_get_header_case_insensitive(self):
        request = CurlRequest(headers=[Header("Content-Type", "text/plain")])
        assert request.get_header("content-type").value == "text/plain"
        assert request.get_header("Accept") is None
