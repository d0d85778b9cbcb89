"""
Clickatell Client

A Python client library for the Clickatell SMS gateway HTTP API.
"""

from .api import API
from .command import Command, DEFAULT_SERVICE_HOST
from .config import APIConfig, AuthOptions, SendOptions, configure, default_config
from .executor import CommandExecutor, SmsRequest
from .response import Bulk, ClickatellError, GatewayError, MalformedResponseError, Single, parse

__all__ = [
    'API',
    'APIConfig',
    'AuthOptions',
    'Bulk',
    'ClickatellError',
    'Command',
    'CommandExecutor',
    'DEFAULT_SERVICE_HOST',
    'GatewayError',
    'MalformedResponseError',
    'SendOptions',
    'Single',
    'SmsRequest',
    'configure',
    'default_config',
    'parse',
]

__version__ = "0.1.0"
