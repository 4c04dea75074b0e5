import pytest

from squall.errors import InvalidProtocolError, InvalidUrlError
from squall.models import ErrorKind, Scheme
from squall.url import decompose_url


def test_http_url():
    t = decompose_url("http://example.com/page")
    assert t.scheme is Scheme.HTTP
    assert (t.host, t.port, t.resource) == ("example.com", 80, "/page")
    assert not t.secure
    assert not t.scheme_defaulted


def test_https_url_selects_443():
    t = decompose_url("https://example.com/a/b?q=1")
    assert t.secure
    assert t.port == 443
    assert t.resource == "/a/b?q=1"


def test_scheme_is_case_insensitive_host_is_verbatim():
    t = decompose_url("HtTpS://Example.COM/Path")
    assert t.scheme is Scheme.HTTPS
    assert t.host == "Example.COM"
    assert t.resource == "/Path"


def test_missing_scheme_defaults_to_http(caplog):
    t = decompose_url("example.com/page")
    assert t.scheme is Scheme.HTTP
    assert t.port == 80
    assert t.scheme_defaulted
    assert "defaulting to http" in caplog.text


def test_empty_resource_becomes_slash():
    assert decompose_url("http://example.com").resource == "/"


def test_query_without_path_gets_leading_slash():
    assert decompose_url("http://example.com?x=1").resource == "/?x=1"


def test_host_allows_underscore_and_dash():
    assert decompose_url("http://my_host-1.internal/").host == "my_host-1.internal"


@pytest.mark.parametrize("raw", ["ftp://example.com", "FTP://example.com/x", "ws://h/"])
def test_unsupported_scheme(raw):
    with pytest.raises(InvalidProtocolError) as exc:
        decompose_url(raw)
    assert exc.value.kind is ErrorKind.INVALID_PROTOCOL


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "http://",
        "http:///path",
        "://example.com",
        "http://example.com:8080/",
        "http://exa mple.com/",
        " http://example.com/",
        "http://example.com/a b",
    ],
)
def test_invalid_urls(raw):
    with pytest.raises(InvalidUrlError):
        decompose_url(raw)
