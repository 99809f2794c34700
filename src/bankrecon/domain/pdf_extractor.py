"""PDF statement extraction collaborator.

The extraction itself (OCR / language model) happens in an external service.
This module defines the contract the decoder relies on and an HTTP client
for services that accept the PDF as multipart form data and answer with:

    {"success": true,
     "transactions": [{"date": "2024-02-15", "description": "...",
                       "amount": 123.45, "type": "credit"}],
     "bankInfo": {"agencia": "...", "conta": "...", "cnpj": "..."}}
"""

import os
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import requests

from bankrecon.domain.errors import DecodeError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120.0


class PdfExtractor(ABC):
    """Turns a PDF bank statement into a transaction payload."""

    @abstractmethod
    def extract(self, file_bytes: bytes, file_name: str = "statement.pdf") -> dict[str, Any]:
        """Extract transactions from a PDF.

        Returns:
            Payload dict with "success", "transactions" and optionally
            "bankInfo" and "error".

        Raises:
            DecodeError: If the service cannot be reached or answers garbage
        """
        pass


class HttpPdfExtractor(PdfExtractor):
    """Client for an HTTP PDF extraction endpoint."""

    def __init__(self, url: str, token: Optional[str] = None, timeout: float = DEFAULT_TIMEOUT):
        """
        Args:
            url: Endpoint receiving the PDF as the "file" form field
            token: Optional bearer token
            timeout: Request timeout in seconds
        """
        self.url = url
        self.token = token
        self.timeout = timeout

    @property
    def headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def extract(self, file_bytes: bytes, file_name: str = "statement.pdf") -> dict[str, Any]:
        logger.info(f"Sending {file_name} ({len(file_bytes)} bytes) to PDF extractor")
        try:
            response = requests.post(
                self.url,
                files={"file": (file_name, file_bytes, "application/pdf")},
                headers=self.headers,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout:
            raise DecodeError("PDF extraction timed out")
        except requests.exceptions.ConnectionError:
            raise DecodeError("Could not connect to PDF extraction service")
        except requests.exceptions.RequestException as e:
            raise DecodeError(f"PDF extraction request failed: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            raise DecodeError(
                f"PDF extraction service returned an invalid response (HTTP {response.status_code})"
            )

        if not isinstance(payload, dict):
            raise DecodeError("PDF extraction service returned an unexpected payload")

        if response.status_code >= 400 and payload.get("success") is not False:
            payload = {
                "success": False,
                "transactions": [],
                "error": payload.get("error") or f"PDF extraction failed (HTTP {response.status_code})",
            }

        return payload


def create_pdf_extractor(
    url: Optional[str] = None,
    token: Optional[str] = None,
    timeout: Optional[float] = None,
) -> Optional[HttpPdfExtractor]:
    """Create the PDF extractor configured for this environment.

    Args:
        url: Endpoint URL. If None, checks BANKRECON_PDF_EXTRACTOR_URL
        token: Bearer token. If None, checks BANKRECON_PDF_EXTRACTOR_TOKEN
        timeout: Seconds. If None, checks BANKRECON_PDF_EXTRACTOR_TIMEOUT

    Returns:
        HttpPdfExtractor, or None when no endpoint is configured
    """
    if url is None:
        url = os.environ.get("BANKRECON_PDF_EXTRACTOR_URL")
    if not url:
        return None

    if token is None:
        token = os.environ.get("BANKRECON_PDF_EXTRACTOR_TOKEN")

    if timeout is None:
        raw_timeout = os.environ.get("BANKRECON_PDF_EXTRACTOR_TIMEOUT")
        timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT

    return HttpPdfExtractor(url=url, token=token, timeout=timeout)
