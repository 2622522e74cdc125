"""
Unit tests - HTTP client: session configuration and error wrapping.
"""
import logging

import pytest
import requests

from comexstat.client import ComexstatClient
from comexstat.config import Settings
from comexstat.errors import MalformedResponseError, UpstreamError


def test_session_is_configured(fake_session):
    ComexstatClient(Settings(timeout_ms=1500, max_redirects=5), session=fake_session)
    assert fake_session.headers["Content-Type"] == "application/json"
    assert fake_session.headers["Accept"] == "application/json"
    assert fake_session.max_redirects == 5
    assert fake_session.verify is True


def test_request_builds_url_and_timeout(fake_session):
    client = ComexstatClient(Settings(base_url="https://api.test/", timeout_ms=1500), session=fake_session)
    fake_session.respond({"data": {"min": "1997", "max": "2025"}})

    payload = client.request("GET", "/general/dates/years")

    call = fake_session.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "https://api.test/general/dates/years"
    assert call["timeout"] == 1.5
    assert call["json"] is None
    assert payload["data"]["max"] == "2025"


def test_none_params_are_not_sent(client, fake_session):
    client.request("GET", "/auxiliary/countries", params={"search": None, "page": 1})
    assert fake_session.calls[0]["params"] == {"page": 1}


def test_post_sends_json_body(client, fake_session):
    client.request("POST", "/general", params={"language": "pt"}, body={"flow": "import"})
    call = fake_session.calls[0]
    assert call["method"] == "POST"
    assert call["json"] == {"flow": "import"}
    assert call["params"] == {"language": "pt"}


def test_http_error_uses_api_message(client, fake_session, caplog):
    fake_session.respond({"message": "Invalid parameters"}, status=400)

    with caplog.at_level(logging.ERROR, logger="comexstat.client"):
        with pytest.raises(UpstreamError) as excinfo:
            client.request("POST", "/general", body={})

    error = excinfo.value
    assert error.status == 400
    assert error.message == "Invalid parameters"
    assert error.endpoint == "/general"
    assert "API Error (400): Invalid parameters" in caplog.text


def test_http_error_without_message(client, fake_session):
    fake_session.respond({"detail": "nope"}, status=503)
    with pytest.raises(UpstreamError, match="Request failed with status code 503") as excinfo:
        client.request("GET", "/tables/uf")
    assert excinfo.value.status == 503


def test_timeout_is_wrapped(client, fake_session):
    fake_session.respond_raw(requests.Timeout("read timed out"))
    with pytest.raises(UpstreamError, match="read timed out") as excinfo:
        client.request("GET", "/tables/uf")
    assert excinfo.value.status is None
    assert isinstance(excinfo.value.__cause__, requests.Timeout)


def test_too_many_redirects_is_wrapped(client, fake_session):
    fake_session.respond_raw(requests.TooManyRedirects("Exceeded 5 redirects."))
    with pytest.raises(UpstreamError, match="Exceeded 5 redirects"):
        client.request("GET", "/tables/uf")


def test_unknown_exception_is_logged_and_reraised(client, fake_session, caplog):
    fake_session.respond_raw(RuntimeError("boom"))
    with caplog.at_level(logging.ERROR, logger="comexstat.client"):
        with pytest.raises(RuntimeError, match="boom"):
            client.request("GET", "/tables/uf")
    assert "Non-HTTP error" in caplog.text


def test_non_json_body(client, fake_session):
    response = requests.Response()
    response.status_code = 200
    response._content = b"<html>maintenance</html>"
    fake_session.respond_raw(response)
    with pytest.raises(MalformedResponseError) as excinfo:
        client.request("GET", "/tables/uf")
    error = excinfo.value
    assert str(error) == "Unexpected response from /tables/uf: response body is not JSON"
    assert error.endpoint == "/tables/uf"
    assert error.operation is None


def test_disabled_tls_is_passed_through_and_warned(fake_session, caplog):
    with caplog.at_level(logging.WARNING, logger="comexstat.client"):
        client = ComexstatClient(Settings(verify_tls=False), session=fake_session)
    client.request("GET", "/tables/uf")
    assert fake_session.verify is False
    assert fake_session.calls[0]["verify"] is False
    assert "TLS certificate verification is DISABLED" in caplog.text
