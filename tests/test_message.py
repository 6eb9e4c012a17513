"""
Tests for the HTTP message values
"""

import pytest
import requests

from httpsig_sdk import Headers, HttpRequest, HttpResponse


class TestHeaders:
    """Test the header collection"""

    def test_case_insensitive_multi_value(self):
        headers = Headers([("Accept", "a"), ("accept", "b"), ("Host", "h")])
        assert headers.get_all("ACCEPT") == ["a", "b"]
        assert headers.get("accept") == "a"
        assert headers.get("missing", "x") == "x"
        assert headers.has("host")
        assert "HOST" in headers
        assert len(headers) == 3

    def test_mapping_with_list_values(self):
        headers = Headers({"X-A": ["1", "2"], "X-B": 3})
        assert headers.items() == [("X-A", "1"), ("X-A", "2"), ("X-B", "3")]

    def test_copy_on_write(self):
        """Mutation helpers return new collections"""
        headers = Headers({"A": "1"})
        added = headers.with_added("a", "2")
        assert headers.get_all("a") == ["1"]
        assert added.get_all("a") == ["1", "2"]
        assert added.without("A").items() == []

    def test_with_replaced_keeps_position(self):
        headers = Headers([("A", "1"), ("B", "2"), ("a", "3")])
        assert headers.with_replaced("a", "x").items() == [("a", "x"), ("B", "2")]
        assert headers.with_replaced("C", "y").items()[-1] == ("C", "y")


class TestHttpRequest:
    """Test the request value"""

    def test_normalization(self):
        request = HttpRequest(method="post", url="/a", headers={"A": "1"}, body="text")
        assert request.method == "POST"
        assert isinstance(request.headers, Headers)
        assert request.body == b"text"

    def test_validation(self):
        with pytest.raises(ValueError, match="method"):
            HttpRequest(method="", url="/")
        with pytest.raises(ValueError, match="URL"):
            HttpRequest(method="GET", url="")
        with pytest.raises(ValueError, match="Body"):
            HttpRequest(method="GET", url="/", body=123)

    def test_request_target(self):
        assert HttpRequest(method="GET", url="https://h/p/q?x=1&y=2").request_target == "/p/q?x=1&y=2"
        assert HttpRequest(method="GET", url="https://h?x=1").request_target == "/?x=1"
        assert HttpRequest(method="GET", url="/only/path").request_target == "/only/path"

    def test_header_helpers_do_not_mutate(self):
        request = HttpRequest(method="GET", url="/", headers={"A": "1"})
        changed = request.with_added_header("A", "2").with_header("B", "x")
        assert request.get_header("a") == ["1"]
        assert changed.get_header("a") == ["1", "2"]
        assert changed.get_header("b") == ["x"]
        assert not changed.without_header("b").has_header("b")
        assert request.with_body(b"x").body == b"x"

    def test_from_prepared_request(self):
        prepared = requests.Request(
            "PUT", "https://example.com/items/1?x=y", headers={"Date": "today"}, data=b"payload"
        ).prepare()
        request = HttpRequest.from_prepared_request(prepared)
        assert request.method == "PUT"
        assert request.request_target == "/items/1?x=y"
        assert request.get_header("date") == ["today"]
        assert request.body == b"payload"

    def test_from_prepared_request_str_body_as_sent(self):
        """String bodies are taken in the encoding http.client sends them in"""
        prepared = requests.Request("POST", "https://example.com/", data="café").prepare()
        assert HttpRequest.from_prepared_request(prepared).body == b"caf\xe9"

    def test_from_prepared_request_str_body_not_latin1(self):
        prepared = requests.Request("POST", "https://example.com/", data="€10").prepare()
        with pytest.raises(ValueError, match="ISO-8859-1"):
            HttpRequest.from_prepared_request(prepared)


class TestHttpResponse:
    """Test the response value"""

    def test_status_validation(self):
        with pytest.raises(ValueError, match="valid HTTP status"):
            HttpResponse(status_code=42)

    def test_from_requests_response(self):
        response = requests.Response()
        response.status_code = 201
        response.headers["Date"] = "today"
        response._content = b"created"
        message = HttpResponse.from_requests_response(response)
        assert message.status_code == 201
        assert message.get_header("Date") == ["today"]
        assert message.body == b"created"
