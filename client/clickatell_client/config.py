"""
Configuration for the Clickatell client

Holds the explicit configuration object handed to :class:`~clickatell_client.api.API`,
the authentication and send option types, and the process-wide default
configuration loaded once at startup.
"""

import os
import json
import logging
from typing import Dict, Mapping, Optional, Union

logger = logging.getLogger(__name__)

TRUE_VALUES = ("1", "true", "yes", "on")

ENV_OVERRIDES = {
    "CLICKATELL_SERVICE_HOST": "service_host",
    "CLICKATELL_SECURE_MODE": "secure_mode",
    "CLICKATELL_DEBUG_MODE": "debug_mode",
    "CLICKATELL_TEST_MODE": "test_mode",
}


def get_default_config_path() -> str:
    """Get the default config file path following XDG standards"""
    config_path = os.environ.get("CLICKATELL_CONFIG")
    if config_path:
        return config_path

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        return os.path.join(xdg_config_home, "clickatell", "config.json")

    home = os.environ.get("HOME")
    if home:
        return os.path.join(home, ".config", "clickatell", "config.json")

    return os.path.join(os.getcwd(), ".config", "clickatell", "config.json")


class AuthOptions:
    """Authentication fields merged into every outgoing command"""

    FIELDS = ("api_id", "user", "password", "session_id")

    def __init__(self, api_id: Optional[str] = None, user: Optional[str] = None,
                 password: Optional[str] = None, session_id: Optional[str] = None):
        self.api_id = api_id
        self.user = user
        self.password = password
        self.session_id = session_id

    @classmethod
    def coerce(cls, value) -> "AuthOptions":
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        unknown = set(value) - set(cls.FIELDS)
        if unknown:
            raise ValueError(f"Unknown authentication options: {', '.join(sorted(unknown))}")
        return cls(**value)

    def as_params(self) -> Dict[str, str]:
        """Only the fields that are set, in a fixed order"""
        return {
            field: getattr(self, field)
            for field in self.FIELDS
            if getattr(self, field) is not None
        }

    def __eq__(self, other) -> bool:
        if isinstance(other, AuthOptions):
            return self.as_params() == other.as_params()
        if isinstance(other, Mapping):
            return self.as_params() == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        shown = {k: ("***" if k == "password" else v) for k, v in self.as_params().items()}
        return f"AuthOptions({shown})"


class SendOptions:
    """
    Optional settings for ``send_message``.

    Each field maps to a fixed wire parameter:

    ==================  ==========
    field               wire key
    ==================  ==========
    sender              from
    callback            callback
    client_message_id   climsgid
    concat              concat
    ==================  ==========
    """

    # Keys accepted by from_mapping, and the attribute they set
    MAPPING_KEYS = {
        "from": "sender",
        "sender": "sender",
        "callback": "callback",
        "client_message_id": "client_message_id",
        "concat": "concat",
    }

    def __init__(self, sender: Optional[str] = None, callback: Optional[int] = None,
                 client_message_id: Optional[Union[str, int]] = None,
                 concat: Optional[int] = None):
        self.sender = sender
        self.callback = callback
        self.client_message_id = client_message_id
        self.concat = concat

    @classmethod
    def from_mapping(cls, options: Optional[Mapping] = None) -> "SendOptions":
        """Build options from a plain mapping, dropping keys the gateway does not take"""
        kwargs = {}
        for key, value in (options or {}).items():
            attribute = cls.MAPPING_KEYS.get(key)
            if attribute is None:
                logger.debug(f"Ignoring unsupported send option '{key}'")
                continue
            kwargs[attribute] = value
        return cls(**kwargs)

    @classmethod
    def coerce(cls, value) -> "SendOptions":
        if isinstance(value, cls):
            return value
        return cls.from_mapping(value)

    def to_params(self) -> Dict[str, Union[str, int]]:
        params = {}
        if self.sender is not None:
            params["from"] = self.sender
            params["req_feat"] = "48"
        if self.callback is not None:
            params["callback"] = self.callback
        if self.client_message_id is not None:
            params["climsgid"] = self.client_message_id
        if self.concat is not None:
            params["concat"] = self.concat
        return params


class APIConfig:
    """Configuration for the Clickatell API client"""

    FIELDS = (
        "service_host", "secure_mode", "debug_mode", "test_mode",
        "timeout", "api_id", "user", "password", "sender",
    )
    CREDENTIAL_FIELDS = ("api_id", "user", "password")

    def __init__(self, service_host: Optional[str] = None, secure_mode: bool = False,
                 debug_mode: bool = False, test_mode: bool = False,
                 timeout: Optional[float] = None, api_id: Optional[str] = None,
                 user: Optional[str] = None, password: Optional[str] = None,
                 sender: Optional[str] = None):
        self.service_host = service_host
        self.secure_mode = secure_mode
        self.debug_mode = debug_mode
        self.test_mode = test_mode
        self.timeout = timeout
        self.api_id = api_id
        self.user = user
        self.password = password
        self.sender = sender
        self.config_path: Optional[str] = None

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "APIConfig":
        """
        Load configuration from a JSON file and the environment.

        Args:
            config_path: Path to the config file. When omitted the default
                location is used, and a missing file just means defaults.

        Returns:
            APIConfig: the loaded configuration
        """
        explicit = config_path is not None
        if config_path is None:
            config_path = get_default_config_path()

        config = cls()
        config.config_path = config_path

        if os.path.exists(config_path):
            with open(config_path, 'r') as f:
                config_data = json.load(f)
            config._apply(config_data)
            logger.debug(f"Loaded configuration from {config_path}")
        elif explicit:
            raise FileNotFoundError(f"Config file not found: {config_path}")

        config._apply_environment()
        return config

    def _apply(self, config_data: Mapping):
        if not isinstance(config_data, Mapping):
            raise ValueError("Config file must contain a JSON object")

        data = dict(config_data)
        credentials = data.pop("credentials", {}) or {}
        for field in credentials:
            if field not in self.CREDENTIAL_FIELDS:
                raise ValueError(f"Unknown credentials field: {field}")
        data.update(credentials)

        for field, value in data.items():
            if field not in self.FIELDS:
                raise ValueError(f"Unknown config field: {field}")
            setattr(self, field, value)

    def _apply_environment(self):
        for variable, field in ENV_OVERRIDES.items():
            value = os.environ.get(variable)
            if value is None:
                continue
            if field == "service_host":
                setattr(self, field, value)
            else:
                setattr(self, field, value.strip().lower() in TRUE_VALUES)

    def auth_options(self) -> AuthOptions:
        return AuthOptions(api_id=self.api_id, user=self.user, password=self.password)

    def has_credentials(self) -> bool:
        return all(getattr(self, field) for field in self.CREDENTIAL_FIELDS)

    def to_dict(self) -> Dict:
        """Config file representation, without unset values"""
        data = {
            field: getattr(self, field)
            for field in ("service_host", "secure_mode", "debug_mode", "test_mode", "timeout", "sender")
        }
        credentials = {field: getattr(self, field) for field in self.CREDENTIAL_FIELDS}
        data["credentials"] = {k: v for k, v in credentials.items() if v is not None}
        return {k: v for k, v in data.items() if v is not None and v != {}}


_default_config: Optional[APIConfig] = None


def configure(config: APIConfig) -> APIConfig:
    """Set the process-wide default configuration. Call once at startup."""
    global _default_config
    _default_config = config
    return config


def default_config() -> APIConfig:
    """The process-wide default configuration, loaded on first use"""
    global _default_config
    if _default_config is None:
        _default_config = APIConfig.load()
    return _default_config


def reset_default_config():
    global _default_config
    _default_config = None
