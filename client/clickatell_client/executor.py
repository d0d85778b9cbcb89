"""
Command executor

Turns a command name and parameters into an HTTP round trip. In test mode
nothing is sent; each attempted call is recorded instead.
"""

import logging
import urllib.parse
from typing import Dict, List, Mapping, Optional

from .command import Command
from .config import AuthOptions
from .transport import HTTPTransport

logger = logging.getLogger(__name__)

SECRET_PARAMS = ("password",)
REDACTED = "xxxx"


class SmsRequest:
    """A command that would have been sent, recorded in test mode"""

    def __init__(self, name: str, transport: str, params: Dict, url: str):
        self.name = name
        self.transport = transport
        self.params = params
        self.url = url

    def __repr__(self) -> str:
        return f"SmsRequest({self.name!r}, {self.transport!r}, {self.params!r})"


class SyntheticResponse:
    """Stand-in for a gateway response when running in test mode"""

    status_code = 200
    text = "OK: session_id"


class CommandExecutor:
    """Builds, sends and (in test mode) records gateway commands"""

    def __init__(self, auth_options=None, secure: bool = False, debug: bool = False,
                 test: bool = False, service_host: Optional[str] = None,
                 transport: Optional[HTTPTransport] = None):
        self.auth_options = AuthOptions.coerce(auth_options)
        self.secure = secure
        self.debug = debug
        self.test = test
        self.service_host = service_host
        self.transport = transport
        self.sms_requests: List[SmsRequest] = []

    def execute(self, name: str, transport: str = "http", params: Optional[Mapping] = None):
        """
        Run a command against the gateway.

        Args:
            name: Command name, e.g. ``sendmsg``
            transport: Protocol path segment
            params: Command parameters; authentication fields are appended

        Returns:
            The transport's response, or a :class:`SyntheticResponse` in test mode
        """
        merged = dict(params or {})
        merged.update(self.auth_options.as_params())

        command = Command(name, transport, secure=self.secure, host=self.service_host)
        url = command.with_params(merged)

        if self.debug:
            redacted = {k: (REDACTED if k in SECRET_PARAMS else v) for k, v in merged.items()}
            logger.info(f"Sending request to {command.with_params(redacted)}")

        if self.test:
            self.sms_requests.append(SmsRequest(name, transport, merged, url))
            logger.debug(f"Test mode: recorded '{name}' command without sending")
            return SyntheticResponse()

        return self.get_response(url)

    def get_response(self, url: str):
        parts = urllib.parse.urlsplit(url)
        path = parts.path
        if parts.query:
            path = f"{path}?{parts.query}"

        if self.transport is None:
            self.transport = HTTPTransport()
        return self.transport.get(parts.hostname, parts.port, path, secure=self.secure)
