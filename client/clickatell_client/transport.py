"""
HTTP transport for gateway commands

A thin wrapper around a ``requests`` session that performs a single GET.
Connection, timeout and TLS errors from ``requests`` are left to propagate.
"""

import logging
from typing import Optional

import requests

logger = logging.getLogger(__name__)


class HTTPTransport:
    """Performs GET requests against the gateway"""

    def __init__(self, timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def get(self, host: str, port: Optional[int], path: str, secure: bool = False) -> requests.Response:
        """
        Issue a GET request.

        Args:
            host: Gateway host name
            port: Port, or None for the scheme default
            path: Path including the query string
            secure: Use HTTPS

        Returns:
            requests.Response: the gateway's response
        """
        scheme = "https" if secure else "http"
        default_port = 443 if secure else 80
        netloc = host if port in (None, default_port) else f"{host}:{port}"
        url = f"{scheme}://{netloc}{path}"

        logger.debug(f"GET {scheme}://{netloc}{path.split('?', 1)[0]}")
        response = self.session.get(url, timeout=self.timeout)
        logger.debug(f"Gateway responded with HTTP {response.status_code}")
        return response

    def close(self):
        if self._session is not None and self._owns_session:
            self._session.close()
            self._session = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
