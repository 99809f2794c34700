"""Tests for the HTTP PDF extractor client."""

import pytest
import requests

from bankrecon.domain import pdf_extractor
from bankrecon.domain.errors import DecodeError
from bankrecon.domain.pdf_extractor import HttpPdfExtractor, create_pdf_extractor


class _Response:
    def __init__(self, status_code=200, payload=None, invalid=False):
        self.status_code = status_code
        self._payload = payload
        self._invalid = invalid

    def json(self):
        if self._invalid:
            raise ValueError("No JSON object could be decoded")
        return self._payload


def test_extract_posts_file_and_returns_payload(monkeypatch):
    calls = []
    payload = {"success": True, "transactions": []}

    def fake_post(url, files=None, headers=None, timeout=None):
        calls.append((url, files, headers, timeout))
        return _Response(payload=payload)

    monkeypatch.setattr(pdf_extractor.requests, "post", fake_post)

    extractor = HttpPdfExtractor("https://extract.example/pdf", token="secret", timeout=30)
    result = extractor.extract(b"%PDF", "feb.pdf")

    assert result == payload
    url, files, headers, timeout = calls[0]
    assert url == "https://extract.example/pdf"
    assert files["file"][0] == "feb.pdf"
    assert files["file"][1] == b"%PDF"
    assert headers["Authorization"] == "Bearer secret"
    assert timeout == 30


def test_no_token_no_authorization_header():
    extractor = HttpPdfExtractor("https://extract.example/pdf")
    assert "Authorization" not in extractor.headers


@pytest.mark.parametrize(
    "exception",
    [
        requests.exceptions.Timeout(),
        requests.exceptions.ConnectionError(),
        requests.exceptions.RequestException("boom"),
    ],
)
def test_transport_errors_become_decode_errors(monkeypatch, exception):
    def fake_post(*args, **kwargs):
        raise exception

    monkeypatch.setattr(pdf_extractor.requests, "post", fake_post)

    with pytest.raises(DecodeError):
        HttpPdfExtractor("https://extract.example/pdf").extract(b"%PDF")


def test_invalid_json_raises_decode_error(monkeypatch):
    monkeypatch.setattr(
        pdf_extractor.requests, "post", lambda *a, **kw: _Response(status_code=502, invalid=True)
    )

    with pytest.raises(DecodeError, match="502"):
        HttpPdfExtractor("https://extract.example/pdf").extract(b"%PDF")


def test_http_error_becomes_failure_payload(monkeypatch):
    monkeypatch.setattr(
        pdf_extractor.requests,
        "post",
        lambda *a, **kw: _Response(status_code=500, payload={"error": "Model unavailable"}),
    )

    result = HttpPdfExtractor("https://extract.example/pdf").extract(b"%PDF")

    assert result["success"] is False
    assert result["error"] == "Model unavailable"


def test_create_pdf_extractor_from_environment(monkeypatch):
    monkeypatch.delenv("BANKRECON_PDF_EXTRACTOR_URL", raising=False)
    assert create_pdf_extractor() is None

    monkeypatch.setenv("BANKRECON_PDF_EXTRACTOR_URL", "https://extract.example/pdf")
    monkeypatch.setenv("BANKRECON_PDF_EXTRACTOR_TOKEN", "tok")
    monkeypatch.setenv("BANKRECON_PDF_EXTRACTOR_TIMEOUT", "15")

    extractor = create_pdf_extractor()

    assert extractor.url == "https://extract.example/pdf"
    assert extractor.token == "tok"
    assert extractor.timeout == 15.0


def test_create_pdf_extractor_arguments_override_environment(monkeypatch):
    monkeypatch.setenv("BANKRECON_PDF_EXTRACTOR_URL", "https://env.example/pdf")

    extractor = create_pdf_extractor(url="https://arg.example/pdf", timeout=5)

    assert extractor.url == "https://arg.example/pdf"
    assert extractor.timeout == 5
