"""
Clickatell API client

This module provides the :class:`API` façade over the gateway's HTTP
commands: authentication, ping, sending messages and querying message
status and account balance.
"""

import logging
import math
from typing import Dict, Optional, Sequence, Union

from . import response as gateway_response
from .config import APIConfig, AuthOptions, SendOptions, default_config
from .executor import CommandExecutor
from .logging_config import log_sms_event
from .response import GatewayError, MalformedResponseError
from .transport import HTTPTransport

logger = logging.getLogger(__name__)

# Longest text that fits in one SMS, and the part size once it is split
SINGLE_MESSAGE_LENGTH = 160
CONCAT_PART_LENGTH = 153


def concat_parts(text: str) -> Optional[int]:
    """Number of parts needed for ``text``, or None when it fits in a single message"""
    if len(text) <= SINGLE_MESSAGE_LENGTH:
        return None
    return math.ceil(len(text) / CONCAT_PART_LENGTH)


def _required_field(parsed, field: str) -> str:
    entries = parsed.entries()
    if not entries or field not in entries[0]:
        raise MalformedResponseError(f"Response has no '{field}' field")
    return entries[0][field]


class API:
    """Client for the Clickatell HTTP API"""

    def __init__(self, auth_options=None, config: Optional[APIConfig] = None, transport=None):
        self.config = config if config is not None else default_config()
        if transport is None and self.config.timeout is not None:
            transport = HTTPTransport(timeout=self.config.timeout)
        self._transport = transport
        self._auth_options = AuthOptions.coerce(auth_options)
        self._executor = self._build_executor()

    @classmethod
    def login(cls, api_id: str, user: str, password: str,
              config: Optional[APIConfig] = None, transport=None) -> "API":
        """
        Authenticate and return an API instance that uses the new session.

        This is the class-level form of :meth:`authenticate`. It has its own
        name because a classmethod and an instance method cannot share one.

        Args:
            api_id: Gateway API id
            user: Account user name
            password: Account password

        Returns:
            API: client carrying the session id in its auth options
        """
        api = cls(config=config, transport=transport)
        session_id = api.authenticate(api_id, user, password)
        api.auth_options = {"session_id": session_id}
        return api

    def _build_executor(self, sms_requests=None) -> CommandExecutor:
        executor = CommandExecutor(
            self._auth_options,
            self.config.secure_mode,
            self.config.debug_mode,
            self.config.test_mode,
            service_host=self.config.service_host,
            transport=self._transport,
        )
        if sms_requests:
            executor.sms_requests.extend(sms_requests)
        return executor

    @property
    def auth_options(self) -> AuthOptions:
        return self._auth_options

    @auth_options.setter
    def auth_options(self, value):
        self._auth_options = AuthOptions.coerce(value)
        self._transport = self._executor.transport
        self._executor = self._build_executor(self._executor.sms_requests)

    @property
    def secure_mode(self) -> bool:
        return self.config.secure_mode

    @property
    def debug_mode(self) -> bool:
        return self.config.debug_mode

    @property
    def test_mode(self) -> bool:
        return self.config.test_mode

    def execute_command(self, name: str, transport: str = "http", params=None):
        return self._executor.execute(name, transport, params if params is not None else {})

    def authenticate(self, api_id: str, user: str, password: str) -> str:
        """Authenticate against the gateway and return the new session id"""
        response = self.execute_command("auth", "http", {
            "api_id": api_id,
            "user": user,
            "password": password,
        })
        parsed = gateway_response.parse(response)
        session_id = _required_field(parsed, "OK")
        logger.info(f"Authenticated as '{user}'")
        return session_id

    def ping(self, session_id: str):
        """Keep a session alive. Returns the raw response."""
        return self.execute_command("ping", "http", {"session_id": session_id})

    def send_message(self, recipients: Union[str, Sequence[str]], text: str,
                     options: Optional[Union[SendOptions, Dict]] = None) -> Dict[str, str]:
        """
        Send a message to one or more recipients.

        Args:
            recipients: A phone number, or a sequence of them
            text: Message text; texts over 160 characters are sent concatenated
            options: :class:`SendOptions`, or a mapping with any of ``from``,
                ``callback``, ``client_message_id`` and ``concat``. Other keys
                are ignored.

        Returns:
            Dict[str, str]: message id per recipient

        Raises:
            GatewayError: the gateway rejected the message, or one recipient
                of a bulk send. Successful recipients are still logged as sent.
        """
        if isinstance(recipients, str):
            recipients = [recipients]
        recipients = list(recipients)
        if not recipients:
            raise ValueError("At least one recipient is required")

        send_options = SendOptions.coerce(options)
        params = {"to": ",".join(recipients), "text": text}
        params.update(send_options.to_params())

        if send_options.concat is None:
            parts = concat_parts(text)
            if parts is not None:
                params["concat"] = parts

        try:
            parsed = gateway_response.parse(self.execute_command("sendmsg", "http", params))
        except GatewayError as e:
            log_sms_event("sms_failed", to_number=params["to"], command="sendmsg",
                          success=False, error=str(e))
            raise

        message_ids = {}
        failures = []
        for entry in parsed.entries():
            if "ERR" in entry:
                error = GatewayError.parse(f"ERR: {entry['ERR']}")
                error.recipient = entry.get("To")
                failures.append(error)
            elif "To" in entry:
                message_ids[entry["To"]] = entry.get("ID")
            elif not parsed.is_bulk and len(recipients) == 1:
                message_ids[recipients[0]] = entry.get("ID")
            else:
                logger.warning(f"Ignoring send result without recipient: {entry}")

        for recipient, message_id in message_ids.items():
            log_sms_event("sms_sent", message_id=message_id, to_number=recipient,
                          from_number=send_options.sender, command="sendmsg")
        for error in failures:
            log_sms_event("sms_failed", to_number=error.recipient, command="sendmsg",
                          success=False, error=str(error))
        if failures:
            raise failures[0]
        return message_ids

    def message_status(self, message_id: str) -> str:
        """Status code of a previously sent message"""
        parsed = gateway_response.parse(self.execute_command("querymsg", "http", {"apimsgid": message_id}))
        return _required_field(parsed, "Status")

    def account_balance(self) -> float:
        """Remaining credit on the account"""
        parsed = gateway_response.parse(self.execute_command("getbalance", "http", {}))
        credit = _required_field(parsed, "Credit")
        try:
            return float(credit)
        except ValueError:
            raise MalformedResponseError(f"Credit is not a number: {credit!r}")

    def close(self):
        """Release the HTTP session held by the transport"""
        transport = self._executor.transport
        if transport is not None and hasattr(transport, "close"):
            transport.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @property
    def sms_requests(self):
        """Commands recorded in test mode, oldest first"""
        return list(self._executor.sms_requests)
