"""
Command URL construction for the Clickatell HTTP API.
"""

import urllib.parse
from typing import Mapping, Optional, Union

DEFAULT_SERVICE_HOST = "api.clickatell.com"


class Command:
    """A named gateway command that can be turned into a request URL"""

    def __init__(self, name: str, transport: str = "http", secure: bool = False,
                 host: Optional[str] = None):
        self._name = name
        self._transport = transport
        self._secure = secure
        self._host = host

    @property
    def name(self) -> str:
        return self._name

    @property
    def transport(self) -> str:
        return self._transport

    @property
    def secure(self) -> bool:
        return self._secure

    @property
    def scheme(self) -> str:
        return "https" if self._secure else "http"

    @property
    def effective_host(self) -> str:
        """Override host when one is set, otherwise the default service host"""
        return self._host or DEFAULT_SERVICE_HOST

    def with_params(self, params: Optional[Mapping[str, Union[str, int, float]]] = None) -> str:
        """
        Build the full request URL for this command.

        Args:
            params: Query parameters, encoded in the order given

        Returns:
            str: URL such as ``http://api.clickatell.com/http/ping?session_id=abc``
        """
        query = urllib.parse.urlencode(list((params or {}).items()))
        path = f"/{self._transport}/{self._name}"
        return urllib.parse.urlunsplit((self.scheme, self.effective_host, path, query, ""))

    def __repr__(self) -> str:
        return f"Command({self._name!r}, {self._transport!r}, secure={self._secure})"
