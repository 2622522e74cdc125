# =============================================================================
# comexstat/client.py - HTTP Client for the Comexstat API
# =============================================================================
#
# A thin wrapper around one requests.Session, configured once from Settings:
# base URL, JSON headers, timeout, redirect limit and TLS verification.
# The session is injectable so tests can hand in a fake transport.
#
#   client = ComexstatClient(Settings.from_env())
#   payload = client.request("GET", "/general/dates/years")
#
# Every failure leaves here as a ComexstatError:
#   status >= 400 or no response at all   -> UpstreamError
#   a body that is not JSON               -> MalformedResponseError
# =============================================================================

import logging
from typing import Any, Dict, Optional

import requests
import urllib3

from comexstat.config import Settings
from comexstat.errors import MalformedResponseError, UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class ComexstatClient:
    """Client for the Comexstat REST API."""

    def __init__(self, settings: Optional[Settings] = None, session: Any = None):
        """Initialize the client.

        Args:
            settings: Connection settings; defaults to ``Settings()``.
            session: Object with the ``requests.Session`` interface. A new
                session is created when omitted.
        """
        self.settings = settings or Settings()
        self.base_url = self.settings.base_url.rstrip("/")
        self._session = session if session is not None else requests.Session()
        self._session.headers.update(DEFAULT_HEADERS)
        self._session.max_redirects = self.settings.max_redirects
        self._session.verify = self.settings.verify_tls

        if not self.settings.verify_tls:
            logger.warning(
                "TLS certificate verification is DISABLED for %s", self.base_url
            )
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        body: Any = None,
    ) -> Any:
        """Send one request and return the decoded JSON body.

        Query parameters whose value is None are not sent.

        Raises:
            UpstreamError: Status >= 400, or the request never completed
                (timeout, connection failure, too many redirects).
            MalformedResponseError: The body is not JSON.
        """
        url = f"{self.base_url}{endpoint}"
        query = {k: v for k, v in (params or {}).items() if v is not None}
        logger.debug("%s %s params=%s body=%s", method, url, query, body)

        try:
            response = self._session.request(
                method,
                url,
                params=query or None,
                json=body,
                timeout=self.settings.timeout_seconds,
                verify=self.settings.verify_tls,
            )
        except requests.RequestException as exc:
            message = str(exc) or exc.__class__.__name__
            logger.error("API Error (%s): %s [%s]", None, message, endpoint)
            raise UpstreamError(message, status=None, endpoint=endpoint) from exc
        except Exception:
            logger.exception("Non-HTTP error calling %s %s", method, endpoint)
            raise

        if response.status_code >= 400:
            message = _error_message(response)
            logger.error("API Error (%s): %s [%s]", response.status_code, message, endpoint)
            raise UpstreamError(message, status=response.status_code, endpoint=endpoint)

        try:
            return response.json()
        except ValueError as exc:
            logger.error("Non-JSON response from %s (status %s)", endpoint, response.status_code)
            raise MalformedResponseError(
                None, "response body is not JSON", endpoint=endpoint
            ) from exc


def _error_message(response: requests.Response) -> str:
    """Prefer the API's own ``message`` field over a generic status line."""
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return f"Request failed with status code {response.status_code}"
